"""Pydantic schemas for Cart API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.order import Order, OrderStatus


class ActiveCartRequest(BaseModel):
    """Schema for getting or creating the current cart."""

    customer_id: UUID
    address_id: UUID
    pricelist_type: str | None = Field(None, max_length=50)
    pricelist_code: str | None = Field(None, max_length=50)


class CartResponse(BaseModel):
    """Schema for a cart (order)."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "789e4567-e89b-12d3-a456-426614174000",
                "cart_number": 17,
                "year": 2026,
                "status": "draft",
                "is_current": True,
                "customer_id": "123e4567-e89b-12d3-a456-426614174000",
                "shipping_address_id": "456e4567-e89b-12d3-a456-426614174000",
                "effective_tags": [
                    "categoria-clienti:idraulico",
                    "categoria-di-sconto:sconto-50",
                ],
                "price_list_id": "default",
                "currency": "EUR",
                "created_at": "2026-01-28T10:00:00",
                "updated_at": "2026-01-28T10:00:00",
            }
        },
    )

    id: UUID
    cart_number: int
    year: int
    status: OrderStatus
    is_current: bool
    customer_id: UUID
    shipping_address_id: UUID
    effective_tags: list[str]
    price_list_id: str
    currency: str
    pricelist_type: str | None = None
    pricelist_code: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, order: Order) -> "CartResponse":
        return cls(
            id=order.id,
            cart_number=order.cart_number,
            year=order.year,
            status=order.status,
            is_current=order.is_current,
            customer_id=order.customer_id,
            shipping_address_id=order.shipping_address_id,
            effective_tags=list(order.effective_tags),
            price_list_id=order.price_list_id,
            currency=order.currency,
            pricelist_type=order.pricelist_type,
            pricelist_code=order.pricelist_code,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class CartDetailResponse(BaseModel):
    """Schema for single cart."""

    data: CartResponse


class ActiveCartResponse(BaseModel):
    """Schema for the current cart and whether this request created it."""

    data: CartResponse
    is_new: bool
