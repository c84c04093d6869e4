"""Customer Repository Interface

Defines the contract for customer lookups.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.customer import Customer


class CustomerRepository(ABC):
    """
    Repository interface for Customer persistence
    """

    @abstractmethod
    async def get_by_id(self, customer_id: int, organization_id: str) -> Optional[Customer]:
        """
        Retrieve customer by internal ID within an organization

        Args:
            customer_id: Internal customer ID
            organization_id: Organization the customer must belong to

        Returns:
            Customer if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_external_id(self, organization_id: str, external_id: str) -> Optional[Customer]:
        """
        Retrieve customer by the organization's own customer identifier

        Args:
            organization_id: Organization identifier
            external_id: Customer identifier known to the organization

        Returns:
            Customer if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_or_create(self, organization_id: str, external_id: str) -> Customer:
        """
        Retrieve customer by external identifier, creating it if missing

        Args:
            organization_id: Organization identifier
            external_id: Customer identifier known to the organization

        Returns:
            Existing or newly created Customer
        """
        pass
