"""Packaging pricing and promotion value objects filtered by customer tags."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Promotion:
    """A promotion; an empty ``tag_filter`` means it applies to everyone."""

    promo_code: str
    promo_label: str | None = None
    promo_row: int | None = None
    discount_percent: Decimal | None = None
    promo_price: Decimal | None = None
    tag_filter: tuple[str, ...] = ()


@dataclass(frozen=True)
class PackagingPricing:
    """Price block of a packaging option, optionally restricted by tags."""

    list_price: Decimal
    sell_price: Decimal
    sell_discount_pct: Decimal | None = None
    sell_discount_amt: Decimal | None = None
    tag_filter: tuple[str, ...] = ()


@dataclass(frozen=True)
class PackagingOption:
    """A sellable packaging of a product with its pricing and promotions."""

    packaging_code: str
    packaging_label: str | None = None
    packaging_type: str | None = None
    pack_size: int = 1
    min_order_quantity: int = 1
    pricing: PackagingPricing | None = None
    promotions: tuple[Promotion, ...] | None = None
