"""
Domain layer - Pure business logic without external dependencies.
"""

from .evaluator import BookingWindowEvaluator, evaluate
from .models import (
    BookingPolicy,
    BookingWindowRequest,
    DateOverride,
    DaySpec,
    ResolvedDay,
    TimeRange,
    WeeklySchedule,
    WorkingHoursConfig,
)
from .violations import (
    BufferViolation,
    InvalidRange,
    MaxLengthExceeded,
    OutsideWorkingHours,
    ValidationVerdict,
)

__all__ = [
    "BookingPolicy",
    "BookingWindowEvaluator",
    "BookingWindowRequest",
    "BufferViolation",
    "DateOverride",
    "DaySpec",
    "InvalidRange",
    "MaxLengthExceeded",
    "OutsideWorkingHours",
    "ResolvedDay",
    "TimeRange",
    "ValidationVerdict",
    "WeeklySchedule",
    "WorkingHoursConfig",
    "evaluate",
]
