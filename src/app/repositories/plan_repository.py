"""Plan Repository Interface

Defines the contract for plan lookups.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.plan import Plan


class PlanRepository(ABC):
    """
    Repository interface for Plan persistence

    Plans are read-only for the subscription lifecycle.
    """

    @abstractmethod
    async def get_by_id(self, plan_id: int, organization_id: Optional[str] = None) -> Optional[Plan]:
        """
        Retrieve plan by ID

        Args:
            plan_id: Plan ID
            organization_id: Optional organization the plan must belong to

        Returns:
            Plan if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_code(self, organization_id: str, code: str) -> Optional[Plan]:
        """
        Retrieve plan by code within an organization

        Args:
            organization_id: Organization identifier
            code: Plan code

        Returns:
            Plan if found, None otherwise
        """
        pass
