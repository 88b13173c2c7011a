"""
Organization settings store backed by the YAML application config.
"""

import logging
from typing import Dict, List

from ..config import AppConfig, OrganizationSettings
from ..domain.models import BookingPolicy, WorkingHoursConfig

logger = logging.getLogger(__name__)


class ConfigSettingsStore:
    """
    Serves organization working hours and booking policy from ``AppConfig``.

    Settings are converted to domain objects once, when first requested,
    and the same immutable snapshot is handed out afterwards.
    """

    def __init__(self, config: AppConfig):
        self.config = config
        self._working_hours: Dict[str, WorkingHoursConfig] = {}
        self._policies: Dict[str, BookingPolicy] = {}

    def list_organizations(self) -> List[OrganizationSettings]:
        return list(self.config.organizations)

    def get_working_hours(self, organization_id: str) -> WorkingHoursConfig:
        """
        Return the working hours snapshot for an organization.

        Raises:
            OrganizationNotFoundError: If the organization is not configured
        """
        if organization_id not in self._working_hours:
            organization = self.config.find_organization(organization_id)
            logger.debug("Loading working hours for organization %s", organization_id)
            self._working_hours[organization_id] = organization.working_hours.to_domain()
        return self._working_hours[organization_id]

    def get_booking_policy(self, organization_id: str) -> BookingPolicy:
        """
        Return the booking policy for an organization.

        Raises:
            OrganizationNotFoundError: If the organization is not configured
        """
        if organization_id not in self._policies:
            organization = self.config.find_organization(organization_id)
            self._policies[organization_id] = organization.booking_policy.to_domain()
        return self._policies[organization_id]
