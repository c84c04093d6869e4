from .customer_repository import CustomerRepository
from .plan_repository import PlanRepository
from .subscription_repository import SubscriptionRepository

__all__ = [
    "CustomerRepository",
    "PlanRepository",
    "SubscriptionRepository",
]
