"""SQLAlchemy Subscription Repository Implementation

Implements subscription persistence using SQLAlchemy async session.
"""

from typing import Optional, List
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.subscription import Subscription, SubscriptionStatus


class SqlAlchemySubscriptionRepository(SubscriptionRepository):
    """
    SQLAlchemy implementation of SubscriptionRepository

    Features:
    - Pessimistic locking of the active subscription via SELECT FOR UPDATE
    - Writes are flushed, never committed; the unit of work owns the commit
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_active_by_customer(
        self, customer_id: int, for_update: bool = False
    ) -> Optional[Subscription]:
        """
        Retrieve the active subscription of a customer

        Args:
            customer_id: Internal customer ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Active Subscription if any, None otherwise
        """
        statement = select(Subscription).where(
            Subscription.customer_id == customer_id,
            Subscription.status == SubscriptionStatus.ACTIVE.value,
        )

        if for_update:
            statement = statement.with_for_update()

        result = await self.session.execute(statement)
        return result.scalars().first()

    async def get_next_subscription(self, subscription_id: int) -> Optional[Subscription]:
        statement = (
            select(Subscription)
            .where(Subscription.previous_subscription_id == subscription_id)
            .order_by(Subscription.id.desc())
        )
        result = await self.session.execute(statement)
        return result.scalars().first()

    async def list_by_customer(self, customer_id: int) -> List[Subscription]:
        statement = (
            select(Subscription)
            .where(Subscription.customer_id == customer_id)
            .order_by(Subscription.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def create(self, subscription: Subscription) -> Subscription:
        """
        Create a new subscription

        Args:
            subscription: Subscription entity to persist

        Returns:
            Created Subscription with generated ID

        Raises:
            IntegrityError: If the customer already has an active subscription,
                or the previous subscription already has a pending successor
        """
        self.session.add(subscription)
        await self.session.flush()
        await self.session.refresh(subscription)
        return subscription

    async def update(self, subscription: Subscription) -> Subscription:
        self.session.add(subscription)
        await self.session.flush()
        await self.session.refresh(subscription)
        return subscription

    async def get_by_id(self, subscription_id: int) -> Optional[Subscription]:
        statement = select(Subscription).where(Subscription.id == subscription_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()
