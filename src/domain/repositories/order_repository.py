"""Order/cart repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.order import Order


class IOrderRepository(Protocol):
    """Repository interface for Order entities."""

    async def get(self, id: UUID) -> Order | None:
        """Get an order by ID."""
        ...

    async def get_current_cart(
        self, customer_id: UUID, shipping_address_id: UUID
    ) -> Order | None:
        """Get the current draft cart for a customer + address pair."""
        ...

    async def next_cart_number(self, year: int) -> int:
        """Next sequential cart number for the given year."""
        ...

    async def create(self, order: Order) -> Order:
        """Create a new order."""
        ...

    async def update(self, order: Order) -> Order:
        """Update status and current flag. ``effective_tags`` is never rewritten."""
        ...
