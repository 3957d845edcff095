"""SQLAlchemy Unit of Work implementation."""

from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.repositories.sqlalchemy_customer_repo import SQLAlchemyCustomerRepository
from infrastructure.database.repositories.sqlalchemy_order_repo import SQLAlchemyOrderRepository
from infrastructure.database.repositories.sqlalchemy_tag_repo import SQLAlchemyTagDefinitionRepository


class SQLAlchemyUnitOfWork:
    """Unit of Work implementation using SQLAlchemy.

    Every repository handed out by one unit of work shares its session, so tag
    list writes and catalog counter adjustments commit together.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None

    def _require_session(self) -> AsyncSession:
        if not self._session:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return self._session

    @property
    def tag_definitions(self) -> SQLAlchemyTagDefinitionRepository:
        """Get tag catalog repository."""
        return SQLAlchemyTagDefinitionRepository(self._require_session())

    @property
    def customers(self) -> SQLAlchemyCustomerRepository:
        """Get customer repository."""
        return SQLAlchemyCustomerRepository(self._require_session())

    @property
    def orders(self) -> SQLAlchemyOrderRepository:
        """Get order repository."""
        return SQLAlchemyOrderRepository(self._require_session())

    async def commit(self) -> None:
        """Commit the current transaction."""
        if self._session:
            await self._session.commit()

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        if self._session:
            await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        """Enter the context manager and create session."""
        self._session = self._session_factory()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[Exception],
        exc_tb: Any,
    ) -> None:
        """Exit the context manager and cleanup."""
        if self._session:
            if exc_type:
                await self.rollback()
            await self._session.close()
            self._session = None
