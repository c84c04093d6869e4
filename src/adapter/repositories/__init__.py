from .customer_repository import SqlAlchemyCustomerRepository
from .plan_repository import SqlAlchemyPlanRepository
from .subscription_repository import SqlAlchemySubscriptionRepository

__all__ = [
    "SqlAlchemyCustomerRepository",
    "SqlAlchemyPlanRepository",
    "SqlAlchemySubscriptionRepository",
]
