"""Unit of Work Interface

Owns the transaction boundary of a use case.
"""

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator


class UnitOfWork(ABC):
    """
    Abstract unit of work

    Repositories only flush; the unit of work decides whether the changes are
    committed or rolled back.
    """

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["UnitOfWork"]:
        """
        Scoped transaction

        Commits when the block exits normally. Rolls back and re-raises when
        the block or the commit fails, including on cancellation.
        """
        try:
            yield self
            await self.commit()
        except BaseException:
            await self.rollback()
            raise

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
