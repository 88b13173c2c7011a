"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .booking_window import BookingWindowService, OrganizationSettingsStore, suggest_end_date

__all__ = ["BookingWindowService", "OrganizationSettingsStore", "suggest_end_date"]
