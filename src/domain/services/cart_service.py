"""Cart service: current-cart lookup and effective tag snapshot."""

from datetime import datetime
from typing import Callable
from uuid import UUID

import structlog

from core.config import settings
from core.exceptions import (
    AddressNotFoundError,
    CartNotDraftError,
    CartNotFoundError,
    CustomerNotFoundError,
)
from domain.entities.order import CartResult, Order, OrderStatus
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.tag_resolution import resolve_effective_tags

logger = structlog.get_logger()


class CartService:
    """Service layer for carts (orders in draft)."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_or_create_active_cart(
        self,
        customer_id: UUID,
        address_id: UUID,
        pricelist_type: str | None = None,
        pricelist_code: str | None = None,
    ) -> CartResult:
        """Return the current cart for the pair, or create one.

        A new cart snapshots the effective tags resolved at this instant. An
        existing cart is returned untouched, so its snapshot never changes.
        """
        async with self._uow_factory() as uow:
            existing = await uow.orders.get_current_cart(customer_id, address_id)
            if existing:
                return CartResult(cart=existing, is_new=False)

            customer = await uow.customers.get(customer_id)
            if not customer:
                raise CustomerNotFoundError(str(customer_id))
            address = customer.get_address(address_id)
            if not address:
                raise AddressNotFoundError(str(address_id))

            effective_tags = resolve_effective_tags(customer.tags, address.tag_overrides)

            year = datetime.utcnow().year
            cart = Order(
                customer_id=customer.id,
                shipping_address_id=address.id,
                cart_number=await uow.orders.next_cart_number(year),
                year=year,
                effective_tags=tuple(effective_tags),
                price_list_id=settings.default_price_list_id,
                currency=settings.default_currency,
                pricelist_type=pricelist_type,
                pricelist_code=pricelist_code,
            )
            created = await uow.orders.create(cart)
            await uow.commit()

        logger.info(
            "cart_created",
            order_id=str(created.id),
            customer_id=str(customer_id),
            address_id=str(address_id),
            effective_tags=list(created.effective_tags),
        )
        return CartResult(cart=created, is_new=True)

    async def get_cart(self, order_id: UUID) -> Order:
        """Get a cart/order by id."""
        async with self._uow_factory() as uow:
            order = await uow.orders.get(order_id)
            if not order:
                raise CartNotFoundError(str(order_id))
            return order

    async def submit_cart(self, order_id: UUID) -> Order:
        """Move a draft cart to pending; the pair's next cart is created fresh."""
        async with self._uow_factory() as uow:
            order = await uow.orders.get(order_id)
            if not order:
                raise CartNotFoundError(str(order_id))
            if not order.is_cart:
                raise CartNotDraftError(str(order_id), order.status.value)

            order.status = OrderStatus.PENDING
            order.is_current = False
            order.updated_at = datetime.utcnow()
            updated = await uow.orders.update(order)
            await uow.commit()

        logger.info("cart_submitted", order_id=str(order_id))
        return updated
