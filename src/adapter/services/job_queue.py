"""In-process Job Queue

asyncio-backed queue shared by the use cases (producers) and the
SubscriptionJobWorker (consumer).
"""

import asyncio
import logging
from typing import Any, Dict
from src.app.services.job_queue import Job, JobQueue

logger = logging.getLogger(__name__)


class InMemoryJobQueue(JobQueue):
    """
    Job queue living in the current process

    enqueue() uses put_nowait so producers never wait. A full queue drops the
    job and logs it.
    """

    def __init__(self, max_size: int = 0):
        """
        Args:
            max_size: Maximum number of pending jobs (0 = unbounded)
        """
        self._queue: asyncio.Queue[Job] = asyncio.Queue(maxsize=max_size)

    def enqueue(self, job_name: str, payload: Dict[str, Any]) -> bool:
        job = Job(name=job_name, payload=payload)
        try:
            self._queue.put_nowait(job)
        except asyncio.QueueFull:
            logger.error(f"Job queue full, dropping {job_name} job: {payload}")
            return False

        logger.debug(f"Enqueued {job_name} job")
        return True

    async def get(self) -> Job:
        return await self._queue.get()

    def get_nowait(self) -> Job:
        return self._queue.get_nowait()

    def task_done(self) -> None:
        self._queue.task_done()

    def qsize(self) -> int:
        return self._queue.qsize()

    def empty(self) -> bool:
        return self._queue.empty()
