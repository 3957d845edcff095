"""Cart API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response, status

from api.v1.dependencies import get_cart_service
from api.v1.schemas.cart import (
    ActiveCartRequest,
    ActiveCartResponse,
    CartDetailResponse,
    CartResponse,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.cart_service import CartService

router = APIRouter(prefix="/carts", tags=["carts"])


@router.post(
    "/active",
    response_model=ActiveCartResponse,
    summary="Get or create the current cart",
    responses={
        200: {"description": "Existing current cart"},
        201: {"description": "New cart created with an effective tag snapshot"},
        404: {"description": "Customer or address not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def get_active_cart(
    request: Request,
    response: Response,
    body: ActiveCartRequest,
    service: CartService = Depends(get_cart_service),
) -> ActiveCartResponse:
    """Return the current cart for a customer + address, creating it if needed.

    A new cart snapshots the effective tags at creation time; later tag
    changes only affect carts created afterwards.
    """
    result = await service.get_or_create_active_cart(
        customer_id=body.customer_id,
        address_id=body.address_id,
        pricelist_type=body.pricelist_type,
        pricelist_code=body.pricelist_code,
    )
    if result.is_new:
        response.status_code = status.HTTP_201_CREATED
    return ActiveCartResponse(data=CartResponse.from_entity(result.cart), is_new=result.is_new)


@router.get(
    "/{order_id}",
    response_model=CartDetailResponse,
    summary="Get a cart",
    responses={404: {"description": "Cart not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_cart(
    request: Request,
    order_id: UUID,
    service: CartService = Depends(get_cart_service),
) -> CartDetailResponse:
    """Get a cart with its effective tag snapshot."""
    cart = await service.get_cart(order_id)
    return CartDetailResponse(data=CartResponse.from_entity(cart))


@router.post(
    "/{order_id}/submit",
    response_model=CartDetailResponse,
    summary="Submit a cart",
    responses={
        400: {"description": "Order is not a draft cart"},
        404: {"description": "Cart not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def submit_cart(
    request: Request,
    order_id: UUID,
    service: CartService = Depends(get_cart_service),
) -> CartDetailResponse:
    """Submit a draft cart. The next cart for the pair takes a fresh snapshot."""
    cart = await service.submit_cart(order_id)
    return CartDetailResponse(data=CartResponse.from_entity(cart))
