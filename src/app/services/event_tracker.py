"""Event Tracker Interface

Sends analytics events about what happened to an organization's data.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

TRACK_EVENT_JOB = "track_event"


class EventTracker(ABC):
    """
    Abstract analytics event tracker

    Tracking is fire-and-forget and has no delivery guarantee.
    """

    @abstractmethod
    def track(
        self,
        event: str,
        properties: Dict[str, Any],
        membership_id: Optional[str] = None,
    ) -> None:
        """
        Track an analytics event

        Args:
            event: Event name (e.g. 'subscription_created')
            properties: Event properties
            membership_id: Member of the organization who performed the action
        """
        pass
