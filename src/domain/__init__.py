from .base import BaseModel
from .customer import Customer
from .plan import Plan
from .subscription import Subscription, SubscriptionStatus, InvalidStatusTransition
from .subscription_transition import SubscriptionTransition, classify_transition

__all__ = [
    "BaseModel",
    "Customer",
    "Plan",
    "Subscription",
    "SubscriptionStatus",
    "InvalidStatusTransition",
    "SubscriptionTransition",
    "classify_transition",
]
