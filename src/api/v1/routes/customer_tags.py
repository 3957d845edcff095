"""Customer tag catalog API routes."""

from fastapi import APIRouter, Depends, Query, Request, status

from api.v1.dependencies import get_tag_catalog_service
from api.v1.schemas.customer_tag import (
    CustomerTagCreate,
    CustomerTagDetailResponse,
    CustomerTagListResponse,
    CustomerTagResponse,
    CustomerTagUpdate,
    TagCountCorrection,
    TagHolderAddress,
    TagHolderCustomer,
    TagHoldersResponse,
    TagPrefixListResponse,
    TagPrefixResponse,
    TagRecountResponse,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.tag import TAG_PREFIX_DESCRIPTIONS, TAG_PREFIX_LABELS, TAG_PREFIXES
from domain.services.tag_catalog_service import TagCatalogService

router = APIRouter(prefix="/customer-tags", tags=["customer-tags"])


@router.get(
    "",
    response_model=CustomerTagListResponse,
    summary="List active tags",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_customer_tags(
    request: Request,
    prefix: str | None = Query(None, description="Only tags with this prefix"),
    service: TagCatalogService = Depends(get_tag_catalog_service),
) -> CustomerTagListResponse:
    """List active catalog tags sorted by prefix, then code."""
    tags = await service.list_active(prefix)
    return CustomerTagListResponse(data=[CustomerTagResponse.from_entity(t) for t in tags])


@router.post(
    "",
    response_model=CustomerTagDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a tag",
    responses={
        201: {"description": "Tag created successfully"},
        400: {"description": "Prefix or code is not lowercase kebab-case"},
        409: {"description": "Tag already exists"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_customer_tag(
    request: Request,
    body: CustomerTagCreate,
    service: TagCatalogService = Depends(get_tag_catalog_service),
) -> CustomerTagDetailResponse:
    """Create a catalog tag. The full tag ``prefix:code`` must be unique."""
    tag = await service.create(
        prefix=body.prefix,
        code=body.code,
        description=body.description,
        color=body.color,
    )
    return CustomerTagDetailResponse(data=CustomerTagResponse.from_entity(tag))


@router.get(
    "/prefixes",
    response_model=TagPrefixListResponse,
    summary="List well-known prefixes",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_tag_prefixes(request: Request) -> TagPrefixListResponse:
    """Well-known prefixes with labels, for building tag pickers."""
    return TagPrefixListResponse(
        data=[
            TagPrefixResponse(
                prefix=prefix,
                label=TAG_PREFIX_LABELS[prefix],
                description=TAG_PREFIX_DESCRIPTIONS[prefix],
            )
            for prefix in TAG_PREFIXES
        ]
    )


@router.post(
    "/recount",
    response_model=TagRecountResponse,
    summary="Recompute usage counters",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def recount_customer_tags(
    request: Request,
    service: TagCatalogService = Depends(get_tag_catalog_service),
) -> TagRecountResponse:
    """Rebuild every ``customer_count`` from the customer tag lists."""
    corrected = await service.recount_customer_counts()
    return TagRecountResponse(
        corrected=[
            TagCountCorrection(full_tag=full_tag, customer_count=count)
            for full_tag, count in sorted(corrected.items())
        ]
    )


@router.get(
    "/{tag_id}",
    response_model=CustomerTagDetailResponse,
    summary="Get a tag",
    responses={404: {"description": "Tag not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_customer_tag(
    request: Request,
    tag_id: str,
    service: TagCatalogService = Depends(get_tag_catalog_service),
) -> CustomerTagDetailResponse:
    """Get a catalog tag by id, active or not."""
    tag = await service.get(tag_id)
    return CustomerTagDetailResponse(data=CustomerTagResponse.from_entity(tag))


@router.patch(
    "/{tag_id}",
    response_model=CustomerTagDetailResponse,
    summary="Update a tag",
    responses={404: {"description": "Tag not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_customer_tag(
    request: Request,
    tag_id: str,
    body: CustomerTagUpdate,
    service: TagCatalogService = Depends(get_tag_catalog_service),
) -> CustomerTagDetailResponse:
    """Update description or color. Prefix and code are immutable."""
    tag = await service.update_display(
        tag_id=tag_id,
        description=body.description,
        color=body.color,
    )
    return CustomerTagDetailResponse(data=CustomerTagResponse.from_entity(tag))


@router.delete(
    "/{tag_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Deactivate a tag",
    responses={
        204: {"description": "Tag deactivated"},
        404: {"description": "Tag not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def deactivate_customer_tag(
    request: Request,
    tag_id: str,
    service: TagCatalogService = Depends(get_tag_catalog_service),
) -> None:
    """Deactivate a tag. Existing assignments keep resolving; new ones are refused."""
    await service.deactivate(tag_id)
    return None


@router.get(
    "/{tag_id}/customers",
    response_model=TagHoldersResponse,
    summary="Customers and addresses carrying a tag",
    responses={404: {"description": "Tag not found"}},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_tag_holders(
    request: Request,
    tag_id: str,
    service: TagCatalogService = Depends(get_tag_catalog_service),
) -> TagHoldersResponse:
    """Customers with the tag at customer level, and addresses overriding with it."""
    holders = await service.list_holders(tag_id)
    return TagHoldersResponse(
        tag=CustomerTagResponse.from_entity(holders.tag),
        customers=[
            TagHolderCustomer(
                customer_id=c.id, email=c.email, company_name=c.company_name
            )
            for c in holders.customers
        ],
        addresses=[
            TagHolderAddress(customer_id=c.id, address_id=a.id, label=a.label)
            for c, a in holders.addresses
        ],
    )
