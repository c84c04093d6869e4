"""SQLAlchemy Customer Repository Implementation"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.customer_repository import CustomerRepository
from src.domain.customer import Customer


class SqlAlchemyCustomerRepository(CustomerRepository):
    """
    SQLAlchemy implementation of CustomerRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, customer_id: int, organization_id: str) -> Optional[Customer]:
        statement = select(Customer).where(
            Customer.id == customer_id,
            Customer.organization_id == organization_id,
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_external_id(self, organization_id: str, external_id: str) -> Optional[Customer]:
        statement = select(Customer).where(
            Customer.organization_id == organization_id,
            Customer.customer_id == external_id,
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_or_create(self, organization_id: str, external_id: str) -> Customer:
        """
        Retrieve customer by external identifier, creating it if missing

        The new row is flushed but not committed; it is committed together
        with the rest of the caller's unit of work.
        """
        customer = await self.get_by_external_id(organization_id, external_id)
        if customer:
            return customer

        customer = Customer(organization_id=organization_id, customer_id=external_id)
        self.session.add(customer)
        await self.session.flush()
        await self.session.refresh(customer)
        return customer
