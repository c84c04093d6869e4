"""Queued Event Tracker

Turns analytics events into track_event jobs.
"""

import logging
from typing import Any, Dict, Optional
from src.app.services.event_tracker import EventTracker, TRACK_EVENT_JOB
from src.app.services.job_queue import JobQueue

logger = logging.getLogger(__name__)


class QueuedEventTracker(EventTracker):
    """
    Event tracker that enqueues a track_event job

    When disabled, events are only logged at debug level.
    """

    def __init__(self, job_queue: JobQueue, enabled: bool = True):
        self.job_queue = job_queue
        self.enabled = enabled

    def track(
        self,
        event: str,
        properties: Dict[str, Any],
        membership_id: Optional[str] = None,
    ) -> None:
        if not self.enabled:
            logger.debug(f"Tracking disabled, skipping {event}")
            return

        self.job_queue.enqueue(
            TRACK_EVENT_JOB,
            {
                "membership_id": membership_id,
                "event": event,
                "properties": properties,
            },
        )
