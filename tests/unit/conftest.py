import pytest
from unittest.mock import AsyncMock
from src.app.services.unit_of_work import UnitOfWork


class FakeUnitOfWork(UnitOfWork):
    """Unit of work whose commit/rollback are replaced by mocks in the fixture"""

    async def commit(self):
        pass

    async def rollback(self):
        pass


@pytest.fixture
def mock_uow():
    """Mock unit of work keeping the real transaction() scope"""
    uow = FakeUnitOfWork()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow
