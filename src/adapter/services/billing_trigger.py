"""Queued Billing Trigger

Turns billing requests into bill_subscription jobs.
"""

import logging
from src.app.services.billing_trigger import BillingTrigger, BILL_SUBSCRIPTION_JOB
from src.app.services.job_queue import JobQueue
from src.domain.subscription import Subscription

logger = logging.getLogger(__name__)


class QueuedBillingTrigger(BillingTrigger):
    """Billing trigger that enqueues a bill_subscription job"""

    def __init__(self, job_queue: JobQueue):
        self.job_queue = job_queue

    def schedule(self, subscription: Subscription, timestamp: int) -> None:
        accepted = self.job_queue.enqueue(
            BILL_SUBSCRIPTION_JOB,
            {
                "subscription_id": subscription.id,
                "customer_id": subscription.customer_id,
                "plan_id": subscription.plan_id,
                "timestamp": timestamp,
            },
        )
        if accepted:
            logger.info(f"Scheduled billing of subscription {subscription.id} at {timestamp}")
