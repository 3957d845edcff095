"""Order/cart domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4


class OrderStatus(StrEnum):
    """Order lifecycle stage. A cart is an order in ``draft``."""

    DRAFT = "draft"
    PENDING = "pending"


@dataclass
class Order:
    """Domain entity for an order (a cart while in draft).

    ``effective_tags`` is captured once at creation and never recomputed;
    later tag changes on the customer or address apply to new carts only.
    """

    customer_id: UUID
    shipping_address_id: UUID
    cart_number: int
    year: int
    id: UUID = field(default_factory=uuid4)
    status: OrderStatus = OrderStatus.DRAFT
    is_current: bool = True
    effective_tags: tuple[str, ...] = ()
    price_list_id: str = "default"
    currency: str = "EUR"
    pricelist_type: str | None = None
    pricelist_code: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_cart(self) -> bool:
        return self.status == OrderStatus.DRAFT


@dataclass(frozen=True, slots=True)
class CartResult:
    """Read-only value object: a cart and whether this call created it."""

    cart: Order
    is_new: bool
