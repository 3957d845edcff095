"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.customer_repository import ICustomerRepository
from domain.repositories.order_repository import IOrderRepository
from domain.repositories.tag_repository import ITagDefinitionRepository


class IUnitOfWork(Protocol):
    """Unit of Work interface for managing transactions."""

    tag_definitions: ITagDefinitionRepository
    customers: ICustomerRepository
    orders: IOrderRepository

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        """Enter the context manager."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Exit the context manager."""
        ...
