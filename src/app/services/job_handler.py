"""Job Handler Interface

Consumes jobs taken off the job queue.
"""

from abc import ABC, abstractmethod
from src.app.services.job_queue import Job


class JobHandler(ABC):
    """
    Abstract job handler

    Implementations can deliver jobs via:
    - Logging
    - Webhook (HTTP POST)
    - Several of the above
    """

    @abstractmethod
    async def handle(self, job: Job) -> bool:
        """
        Process a job

        Args:
            job: Job to process

        Returns:
            True if the job was delivered, False otherwise
        """
        pass
