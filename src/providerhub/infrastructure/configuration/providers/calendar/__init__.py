"""Calendar providers."""

from providerhub.infrastructure.configuration.providers.calendar.google import (
    GoogleCalendarProvider,
)
from providerhub.infrastructure.configuration.providers.calendar.outlook import (
    OutlookCalendarProvider,
)

__all__ = ["GoogleCalendarProvider", "OutlookCalendarProvider"]
