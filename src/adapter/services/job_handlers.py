"""Job Handler Implementations

Deliver background jobs (billing requests, analytics events) to their
destination.
"""

import logging
from typing import Optional
import httpx
from src.app.services.job_handler import JobHandler
from src.app.services.job_queue import Job

logger = logging.getLogger(__name__)


class LoggingJobHandler(JobHandler):
    """
    Job handler that logs jobs

    Useful for development and testing, or as a fallback.
    """

    async def handle(self, job: Job) -> bool:
        """
        Log job

        Args:
            job: Job to log

        Returns:
            Always True (logging never fails)
        """
        logger.info(f"[{job.name.upper()}] {job.payload}")
        return True


class WebhookJobHandler(JobHandler):
    """
    Job handler that posts jobs to an HTTP webhook

    Sends JSON payload to configured webhook URL.
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        """
        Initialize webhook job handler

        Args:
            webhook_url: URL to POST jobs to
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def handle(self, job: Job) -> bool:
        """
        Send job via webhook

        Args:
            job: Job to deliver

        Returns:
            True if webhook call succeeded, False otherwise
        """
        payload = {
            "type": job.name,
            "enqueued_at": job.enqueued_at.isoformat(),
            **job.payload,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(f"Delivered {job.name} job to {self.webhook_url}")
                return True
        except httpx.HTTPError as e:
            logger.error(f"Failed to deliver {job.name} job to {self.webhook_url}: {e}")
            return False
        except Exception as e:
            logger.error(f"Unexpected error delivering {job.name} job: {e}")
            return False


class CompositeJobHandler(JobHandler):
    """
    Job handler that delegates to multiple handlers

    Useful for delivering to multiple channels (e.g., log + webhook).
    """

    def __init__(self, handlers: list[JobHandler]):
        self.handlers = handlers

    async def handle(self, job: Job) -> bool:
        """
        Deliver job to all configured handlers

        Returns:
            True if at least one handler succeeded, False otherwise
        """
        success = False
        for handler in self.handlers:
            try:
                if await handler.handle(job):
                    success = True
            except Exception as e:
                logger.error(f"Job handler {type(handler).__name__} failed: {e}")
        return success


def create_job_handler(webhook_url: Optional[str] = None, timeout: float = 10.0) -> JobHandler:
    """
    Factory function to create appropriate job handler

    Args:
        webhook_url: Optional webhook URL. If provided, creates composite
                     handler with logging + webhook. Otherwise, just logging.
        timeout: Webhook request timeout in seconds

    Returns:
        Configured JobHandler
    """
    handlers: list[JobHandler] = [LoggingJobHandler()]

    if webhook_url:
        handlers.append(WebhookJobHandler(webhook_url, timeout=timeout))

    if len(handlers) == 1:
        return handlers[0]

    return CompositeJobHandler(handlers)
