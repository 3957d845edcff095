"""Customer repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.customer import Customer


class ICustomerRepository(Protocol):
    """Repository interface for Customer aggregates (with embedded addresses)."""

    async def get(self, id: UUID) -> Customer | None:
        """Get a customer with its addresses."""
        ...

    async def create(self, customer: Customer) -> Customer:
        """Create a customer and its addresses."""
        ...

    async def update(self, customer: Customer) -> Customer:
        """Persist customer fields, tags and addresses (including overrides)."""
        ...

    async def list_with_tag(self, full_tag: str) -> list[Customer]:
        """Customers carrying ``full_tag`` at customer level or on any address."""
        ...

    async def count_tag_usage(self) -> dict[str, int]:
        """Number of customers carrying each full tag at customer level."""
        ...
