"""SQLAlchemy Plan Repository Implementation"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.plan_repository import PlanRepository
from src.domain.plan import Plan


class SqlAlchemyPlanRepository(PlanRepository):
    """SQLAlchemy implementation of PlanRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, plan_id: int, organization_id: Optional[str] = None) -> Optional[Plan]:
        statement = select(Plan).where(Plan.id == plan_id)

        if organization_id:
            statement = statement.where(Plan.organization_id == organization_id)

        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_code(self, organization_id: str, code: str) -> Optional[Plan]:
        statement = select(Plan).where(
            Plan.organization_id == organization_id,
            Plan.code == code,
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()
