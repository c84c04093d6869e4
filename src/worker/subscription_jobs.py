"""Subscription Background Jobs Worker

Delivers the jobs produced by subscription changes:
- bill_subscription: billing requests for the billing system
- track_event: analytics events

Can be run as a standalone script to create or change a subscription and
deliver its jobs before exiting.
"""

import asyncio
import logging
from typing import Dict, Optional
from sqlmodel import SQLModel

from config import ApplicationConfig
from libs.result import Result
from src.adapter.services.job_handlers import create_job_handler
from src.adapter.services.job_queue import InMemoryJobQueue
from src.app.services.billing_trigger import BILL_SUBSCRIPTION_JOB
from src.app.services.event_tracker import TRACK_EVENT_JOB
from src.app.services.job_handler import JobHandler
from src.app.services.job_queue import Job
from src.app.use_cases.subscriptions import (
    CreateSubscriptionFromApiCommandDTO,
    SubscriptionResponseDTO,
)
from src.depends import build_create_subscription, create_session_factory

logger = logging.getLogger(__name__)


class SubscriptionJobWorker:
    """
    Background worker delivering subscription jobs

    Features:
    - Routes each job to the handler registered for its name
    - A failing handler never stops the worker
    - Can drain the queue once or consume it continuously

    Usage:
        queue = InMemoryJobQueue()
        worker = create_job_worker(queue)

        # Deliver what is queued right now
        delivered = await worker.drain()

        # Consume continuously
        await worker.run_forever()
    """

    def __init__(self, job_queue: InMemoryJobQueue, handlers: Dict[str, JobHandler]):
        """
        Initialize the worker

        Args:
            job_queue: Queue to consume
            handlers: Job handlers keyed by job name
        """
        self.job_queue = job_queue
        self.handlers = handlers

        logger.info(f"SubscriptionJobWorker initialized for jobs: {sorted(handlers)}")

    async def process_job(self, job: Job) -> bool:
        """
        Deliver a single job

        Args:
            job: Job to deliver

        Returns:
            True if the job was delivered, False otherwise
        """
        handler = self.handlers.get(job.name)
        if handler is None:
            logger.warning(f"No handler registered for {job.name} job, dropping it")
            return False

        try:
            delivered = await handler.handle(job)
        except Exception as e:
            logger.error(f"Handler for {job.name} job failed: {e}")
            return False

        if not delivered:
            logger.warning(f"{job.name} job was not delivered: {job.payload}")
        return delivered

    async def drain(self) -> int:
        """
        Deliver every job currently queued

        Returns:
            Number of jobs delivered successfully
        """
        delivered = 0
        while not self.job_queue.empty():
            job = self.job_queue.get_nowait()
            try:
                if await self.process_job(job):
                    delivered += 1
            finally:
                self.job_queue.task_done()
        return delivered

    async def run_forever(self):
        """Consume the queue until cancelled"""
        logger.info("Starting continuous subscription job delivery")

        while True:
            job = await self.job_queue.get()
            try:
                await self.process_job(job)
            finally:
                self.job_queue.task_done()


def create_job_worker(job_queue: InMemoryJobQueue, config=ApplicationConfig) -> SubscriptionJobWorker:
    """
    Factory function wiring handlers from configuration

    Args:
        job_queue: Queue to consume
        config: Configuration providing webhook URLs and timeout

    Returns:
        Configured SubscriptionJobWorker
    """
    timeout = config.WEBHOOK_TIMEOUT_SECONDS
    return SubscriptionJobWorker(
        job_queue,
        {
            BILL_SUBSCRIPTION_JOB: create_job_handler(config.BILLING_WEBHOOK_URL, timeout=timeout),
            TRACK_EVENT_JOB: create_job_handler(config.ANALYTICS_WEBHOOK_URL, timeout=timeout),
        },
    )


async def change_subscription(
    organization_id: str,
    customer_id: str,
    plan_code: str,
    membership_id: Optional[str] = None,
    db_uri: Optional[str] = None,
    create_tables: bool = False,
) -> Result[SubscriptionResponseDTO]:
    """
    Create or change a subscription, then deliver its jobs

    Args:
        organization_id: Organization identifier
        customer_id: Customer identifier known to the organization
        plan_code: Code of the requested plan
        membership_id: Member performing the change
        db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
        create_tables: Create missing tables first

    Returns:
        Result of the subscription change
    """
    engine, session_factory = create_session_factory(db_uri)
    job_queue = InMemoryJobQueue(max_size=ApplicationConfig.JOB_QUEUE_MAX_SIZE)
    worker = create_job_worker(job_queue)

    try:
        if create_tables:
            async with engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)

        async with session_factory() as session:
            use_case = build_create_subscription(session, job_queue)
            result = await use_case.execute_from_api(
                CreateSubscriptionFromApiCommandDTO(
                    organization_id=organization_id,
                    customer_id=customer_id,
                    plan_code=plan_code,
                    membership_id=membership_id,
                )
            )

        delivered = await worker.drain()
        logger.info(f"Delivered {delivered} subscription jobs")
        return result
    finally:
        await engine.dispose()


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        python -m src.worker.subscription_jobs --organization-id org_1 \\
            --customer-id cus_42 --plan-code gold
    """
    import argparse

    logging.basicConfig(
        level=getattr(logging, str(ApplicationConfig.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Create or change a customer's subscription")
    parser.add_argument("--organization-id", required=True, help="Organization identifier")
    parser.add_argument("--customer-id", required=True, help="External customer identifier")
    parser.add_argument("--plan-code", required=True, help="Requested plan code")
    parser.add_argument("--membership-id", help="Member performing the change")
    parser.add_argument("--db-uri", help="Database URI")
    parser.add_argument(
        "--create-tables", action="store_true", help="Create missing tables first"
    )
    args = parser.parse_args()

    result = await change_subscription(
        organization_id=args.organization_id,
        customer_id=args.customer_id,
        plan_code=args.plan_code,
        membership_id=args.membership_id,
        db_uri=args.db_uri,
        create_tables=args.create_tables,
    )

    if result.is_err():
        print(f"Subscription change failed: {result.error.code} - {result.error.message}")
        if result.error.details:
            print(f"  Details: {result.error.details}")
        raise SystemExit(1)

    subscription = result.value
    print("Subscription of record:")
    print(f"  Subscription ID: {subscription.subscription_id}")
    print(f"  Plan: {subscription.plan_code}")
    print(f"  Status: {subscription.status}")
    print(f"  Subscription date: {subscription.subscription_date}")


if __name__ == "__main__":
    asyncio.run(main())
