"""Job Queue Interface

One-way hand-off of background work. Callers never wait for a job to run.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict
from src.domain.base import utcnow


@dataclass(frozen=True)
class Job:
    """A unit of background work"""

    name: str
    payload: Dict[str, Any]
    enqueued_at: datetime = field(default_factory=utcnow)


class JobQueue(ABC):
    """
    Abstract job queue

    Implementations must not block the caller and must not raise when the
    job cannot be accepted; dropping is logged instead.
    """

    @abstractmethod
    def enqueue(self, job_name: str, payload: Dict[str, Any]) -> bool:
        """
        Hand a job to the queue

        Args:
            job_name: Name used to route the job to its handler
            payload: JSON-compatible job arguments

        Returns:
            True if the job was accepted, False if it was dropped
        """
        pass
