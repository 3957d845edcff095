"""Pydantic schemas for the customer tag catalog API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.entities.tag import TagDefinition, TagReference


class TagReferenceSchema(BaseModel):
    """Embedded tag pointer as stored on customers and addresses."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "tag_id": "ctag_4f1c2a9b8e7d",
                "full_tag": "categoria-di-sconto:sconto-45",
                "prefix": "categoria-di-sconto",
                "code": "sconto-45",
            }
        },
    )

    tag_id: str
    full_tag: str
    prefix: str
    code: str

    @classmethod
    def from_entity(cls, ref: TagReference) -> "TagReferenceSchema":
        return cls(
            tag_id=ref.tag_id, full_tag=ref.full_tag, prefix=ref.prefix, code=ref.code
        )


class CustomerTagCreate(BaseModel):
    """Schema for creating a catalog tag.

    Prefix and code format (lowercase kebab-case) is checked by the domain
    and reported as ``INVALID_TAG_FORMAT``.
    """

    prefix: str = Field(..., min_length=1, max_length=100)
    code: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    color: str | None = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str | None) -> str | None:
        return v.upper() if v else v


class CustomerTagUpdate(BaseModel):
    """Schema for updating display metadata of a catalog tag."""

    description: str | None = Field(None, max_length=500)
    color: str | None = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")


class CustomerTagResponse(BaseModel):
    """Schema for a catalog tag."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "tag_id": "ctag_4f1c2a9b8e7d",
                "prefix": "categoria-di-sconto",
                "code": "sconto-45",
                "full_tag": "categoria-di-sconto:sconto-45",
                "description": "45% discount tier",
                "color": "#3B82F6",
                "is_active": True,
                "customer_count": 12,
                "created_at": "2026-01-28T10:00:00",
                "updated_at": "2026-01-28T10:00:00",
            }
        },
    )

    tag_id: str
    prefix: str
    code: str
    full_tag: str
    description: str | None = None
    color: str | None = None
    is_active: bool
    customer_count: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, tag: TagDefinition) -> "CustomerTagResponse":
        return cls(
            tag_id=tag.tag_id,
            prefix=tag.prefix,
            code=tag.code,
            full_tag=tag.full_tag,
            description=tag.description,
            color=tag.color,
            is_active=tag.is_active,
            customer_count=tag.customer_count,
            created_at=tag.created_at,
            updated_at=tag.updated_at,
        )


class CustomerTagListResponse(BaseModel):
    """Schema for list of catalog tags."""

    data: list[CustomerTagResponse]


class CustomerTagDetailResponse(BaseModel):
    """Schema for single catalog tag."""

    data: CustomerTagResponse


class TagPrefixResponse(BaseModel):
    """A well-known tag prefix."""

    prefix: str
    label: str
    description: str


class TagPrefixListResponse(BaseModel):
    """Schema for the well-known prefixes."""

    data: list[TagPrefixResponse]


class TagCountCorrection(BaseModel):
    """A counter the recount changed."""

    full_tag: str
    customer_count: int


class TagRecountResponse(BaseModel):
    """Result of recomputing usage counters."""

    corrected: list[TagCountCorrection]


class TagHolderAddress(BaseModel):
    """An address carrying the tag as an override."""

    customer_id: UUID
    address_id: UUID
    label: str | None = None


class TagHolderCustomer(BaseModel):
    """A customer carrying the tag at customer level."""

    customer_id: UUID
    email: str
    company_name: str | None = None


class TagHoldersResponse(BaseModel):
    """Customers and addresses carrying a tag."""

    tag: CustomerTagResponse
    customers: list[TagHolderCustomer]
    addresses: list[TagHolderAddress]
