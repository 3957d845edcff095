"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.carts import router as carts_router
from api.v1.routes.customer_tags import router as customer_tags_router
from api.v1.routes.customers import router as customers_router
from api.v1.schemas.common import ErrorResponse

# Every error body follows the shape built by the exception handlers
ERROR_RESPONSES: dict[int | str, dict] = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
}

router = APIRouter(responses=ERROR_RESPONSES)
router.include_router(customer_tags_router)
router.include_router(customers_router)
router.include_router(carts_router)
