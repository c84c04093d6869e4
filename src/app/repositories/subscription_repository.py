"""Subscription Repository Interface

Defines the contract for subscription persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional, List
from src.domain.subscription import Subscription


class SubscriptionRepository(ABC):
    """
    Repository interface for Subscription persistence

    Provides typed lookups for the active subscription of a customer and for
    the subscriptions chained after it.
    """

    @abstractmethod
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
        pass

    @abstractmethod
    async def get_next_subscription(self, subscription_id: int) -> Optional[Subscription]:
        """
        Retrieve the most recent subscription chained after the given one

        Args:
            subscription_id: ID of the previous subscription

        Returns:
            Latest Subscription whose previous_subscription_id matches, None otherwise
        """
        pass

    @abstractmethod
    async def list_by_customer(self, customer_id: int) -> List[Subscription]:
        """
        Retrieve every subscription of a customer, oldest first

        Args:
            customer_id: Internal customer ID

        Returns:
            List of subscriptions
        """
        pass

    @abstractmethod
    async def create(self, subscription: Subscription) -> Subscription:
        """
        Create a new subscription

        Args:
            subscription: Subscription entity to persist

        Returns:
            Created Subscription with generated ID

        Raises:
            IntegrityError: If a uniqueness constraint is violated
        """
        pass

    @abstractmethod
    async def update(self, subscription: Subscription) -> Subscription:
        """
        Update an existing subscription

        Args:
            subscription: Subscription entity with updated values

        Returns:
            Updated Subscription
        """
        pass

    @abstractmethod
    async def get_by_id(self, subscription_id: int) -> Optional[Subscription]:
        """
        Retrieve subscription by ID

        Args:
            subscription_id: Subscription ID

        Returns:
            Subscription if found, None otherwise
        """
        pass
