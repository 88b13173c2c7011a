"""
Domain-specific exception hierarchy for the booking window application.
"""


class BookingWindowError(Exception):
    """Base class for all application-level errors."""


class ConfigurationError(BookingWindowError):
    """Raised when organization settings cannot be loaded or are inconsistent."""


class OrganizationNotFoundError(BookingWindowError):
    """Raised when no settings exist for the requested organization."""

    def __init__(self, organization_id: str):
        super().__init__(f"Unknown organization: '{organization_id}'")
        self.organization_id = organization_id
