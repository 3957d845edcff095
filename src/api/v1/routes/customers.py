"""Customer, address and tag assignment API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.v1.dependencies import (
    get_customer_service,
    get_pricing_service,
    get_tag_assignment_service,
)
from api.v1.schemas.customer import (
    AddressCreate,
    AddressTagsResponse,
    CustomerCreate,
    CustomerDetailResponse,
    CustomerResponse,
    TagAssign,
    TagBatchUpsert,
    TagReferenceListResponse,
    TagUpsertResponse,
)
from api.v1.schemas.pricing import (
    PackagingOptionSchema,
    PricingResolveRequest,
    PricingResolveResponse,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.customer_service import CustomerService
from domain.services.pricing_service import PricingService
from domain.services.tag_assignment_service import TagAssignmentService

router = APIRouter(prefix="/customers", tags=["customers"])


@router.post(
    "",
    response_model=CustomerDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a customer",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_customer(
    request: Request,
    body: CustomerCreate,
    service: CustomerService = Depends(get_customer_service),
) -> CustomerDetailResponse:
    """Create a customer with its delivery addresses."""
    customer = await service.create(body.to_entity())
    return CustomerDetailResponse(data=CustomerResponse.from_entity(customer))


@router.get(
    "/{customer_id}",
    response_model=CustomerDetailResponse,
    summary="Get a customer",
    responses={404: {"description": "Customer not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_customer(
    request: Request,
    customer_id: UUID,
    service: CustomerService = Depends(get_customer_service),
) -> CustomerDetailResponse:
    """Get a customer with tags and addresses."""
    customer = await service.get(customer_id)
    return CustomerDetailResponse(data=CustomerResponse.from_entity(customer))


@router.post(
    "/{customer_id}/addresses",
    response_model=CustomerDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a delivery address",
    responses={404: {"description": "Customer not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def add_address(
    request: Request,
    customer_id: UUID,
    body: AddressCreate,
    service: CustomerService = Depends(get_customer_service),
) -> CustomerDetailResponse:
    """Add a delivery address to a customer."""
    customer = await service.add_address(customer_id, body.to_entity())
    return CustomerDetailResponse(data=CustomerResponse.from_entity(customer))


# --- Customer tags ---


@router.get(
    "/{customer_id}/tags",
    response_model=TagReferenceListResponse,
    summary="Get customer tags",
    responses={404: {"description": "Customer not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_customer_tags(
    request: Request,
    customer_id: UUID,
    service: TagAssignmentService = Depends(get_tag_assignment_service),
) -> TagReferenceListResponse:
    """Get the customer's default tags."""
    tags = await service.get_customer_tags(customer_id)
    return TagReferenceListResponse.from_entities(tags)


@router.put(
    "/{customer_id}/tags",
    response_model=TagReferenceListResponse,
    summary="Assign a customer tag",
    responses={404: {"description": "Customer not found, or tag unknown/inactive"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def assign_customer_tag(
    request: Request,
    customer_id: UUID,
    body: TagAssign,
    service: TagAssignmentService = Depends(get_tag_assignment_service),
) -> TagReferenceListResponse:
    """Assign a tag, replacing the customer's tag with the same prefix."""
    tags = await service.assign_customer_tag(customer_id, body.full_tag)
    return TagReferenceListResponse.from_entities(tags)


@router.post(
    "/{customer_id}/tags/batch",
    response_model=TagUpsertResponse,
    summary="Assign several customer tags",
    responses={404: {"description": "Customer not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def upsert_customer_tags(
    request: Request,
    customer_id: UUID,
    body: TagBatchUpsert,
    service: TagAssignmentService = Depends(get_tag_assignment_service),
) -> TagUpsertResponse:
    """Apply known active tags; unknown or inactive ones are reported as skipped."""
    result = await service.upsert_customer_tags_batch(customer_id, body.full_tags)
    return TagUpsertResponse.from_result(result)


@router.delete(
    "/{customer_id}/tags/{full_tag}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a customer tag",
    responses={
        204: {"description": "Tag removed, or was not assigned"},
        404: {"description": "Customer not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def remove_customer_tag(
    request: Request,
    customer_id: UUID,
    full_tag: str,
    service: TagAssignmentService = Depends(get_tag_assignment_service),
) -> None:
    """Remove a tag by exact full tag. Idempotent."""
    await service.remove_customer_tag(customer_id, full_tag)
    return None


# --- Address overrides ---


@router.get(
    "/{customer_id}/addresses/{address_id}/tags",
    response_model=AddressTagsResponse,
    summary="Get tags in effect at an address",
    responses={404: {"description": "Customer or address not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_address_tags(
    request: Request,
    customer_id: UUID,
    address_id: UUID,
    service: TagAssignmentService = Depends(get_tag_assignment_service),
) -> AddressTagsResponse:
    """Customer tags, address overrides and the resolved effective tags."""
    result = await service.get_address_tags(customer_id, address_id)
    return AddressTagsResponse.from_result(result)


@router.put(
    "/{customer_id}/addresses/{address_id}/tags",
    response_model=TagReferenceListResponse,
    summary="Assign an address tag override",
    responses={
        404: {"description": "Customer or address not found, or tag unknown/inactive"}
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def assign_address_tag(
    request: Request,
    customer_id: UUID,
    address_id: UUID,
    body: TagAssign,
    service: TagAssignmentService = Depends(get_tag_assignment_service),
) -> TagReferenceListResponse:
    """Override one prefix for carts shipped to this address."""
    tags = await service.assign_address_tag_override(customer_id, address_id, body.full_tag)
    return TagReferenceListResponse.from_entities(tags)


@router.post(
    "/{customer_id}/addresses/{address_id}/tags/batch",
    response_model=TagUpsertResponse,
    summary="Assign several address tag overrides",
    responses={404: {"description": "Customer or address not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def upsert_address_tags(
    request: Request,
    customer_id: UUID,
    address_id: UUID,
    body: TagBatchUpsert,
    service: TagAssignmentService = Depends(get_tag_assignment_service),
) -> TagUpsertResponse:
    """Apply known active overrides; unknown or inactive ones are skipped."""
    result = await service.upsert_address_tag_overrides_batch(
        customer_id, address_id, body.full_tags
    )
    return TagUpsertResponse.from_result(result)


@router.delete(
    "/{customer_id}/addresses/{address_id}/tags/{full_tag}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove an address tag override",
    responses={
        204: {"description": "Override removed, or was not assigned"},
        404: {"description": "Customer or address not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def remove_address_tag(
    request: Request,
    customer_id: UUID,
    address_id: UUID,
    full_tag: str,
    service: TagAssignmentService = Depends(get_tag_assignment_service),
) -> None:
    """Remove an override by exact full tag. Idempotent."""
    await service.remove_address_tag_override(customer_id, address_id, full_tag)
    return None


@router.post(
    "/{customer_id}/addresses/{address_id}/pricing/resolve",
    response_model=PricingResolveResponse,
    summary="Resolve tag-based pricing for an address",
    responses={404: {"description": "Customer or address not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def resolve_address_pricing(
    request: Request,
    customer_id: UUID,
    address_id: UUID,
    body: PricingResolveRequest,
    service: PricingService = Depends(get_pricing_service),
) -> PricingResolveResponse:
    """Drop tagged pricing and promotions that the address's effective tags don't match."""
    effective_tags, options = await service.resolve_for_address(
        customer_id,
        address_id,
        [option.to_entity() for option in body.packaging_options],
    )
    return PricingResolveResponse(
        effective_tags=effective_tags,
        packaging_options=[PackagingOptionSchema.from_entity(o) for o in options],
    )
