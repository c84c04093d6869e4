"""Billing Trigger Interface

Requests that a subscription be billed as of a point in time.
"""

from abc import ABC, abstractmethod
from src.domain.subscription import Subscription

BILL_SUBSCRIPTION_JOB = "bill_subscription"


class BillingTrigger(ABC):
    """
    Abstract billing trigger

    Scheduling is fire-and-forget: the invoice is produced later by whoever
    consumes the request, and the result is never reported back.
    """

    @abstractmethod
    def schedule(self, subscription: Subscription, timestamp: int) -> None:
        """
        Schedule billing of a subscription

        Args:
            subscription: Subscription to bill
            timestamp: Unix timestamp the billing applies to
        """
        pass
