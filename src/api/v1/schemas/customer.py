"""Pydantic schemas for Customer, Address and tag assignment API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from api.v1.schemas.customer_tag import TagReferenceSchema
from domain.entities.customer import Address, Customer, CustomerType
from domain.services.tag_assignment_service import AddressTags, TagUpsertResult
from domain.services.tag_resolution import TagSource


class AddressCreate(BaseModel):
    """Schema for creating a delivery address."""

    external_code: str | None = Field(None, max_length=100)
    label: str | None = Field(None, max_length=255)
    street: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)
    country: str = Field("IT", min_length=2, max_length=2)
    is_default: bool = False

    def to_entity(self) -> Address:
        return Address(
            external_code=self.external_code,
            label=self.label,
            street=self.street,
            city=self.city,
            postal_code=self.postal_code,
            country=self.country.upper(),
            is_default=self.is_default,
        )


class CustomerCreate(BaseModel):
    """Schema for creating a Customer."""

    email: str = Field(..., min_length=3, max_length=255)
    customer_type: CustomerType = CustomerType.BUSINESS
    customer_code: str | None = Field(None, max_length=100)
    company_name: str | None = Field(None, max_length=255)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    addresses: list[AddressCreate] = Field(default_factory=list)

    def to_entity(self) -> Customer:
        return Customer(
            email=self.email,
            customer_type=self.customer_type,
            customer_code=self.customer_code,
            company_name=self.company_name,
            first_name=self.first_name,
            last_name=self.last_name,
            addresses=[address.to_entity() for address in self.addresses],
        )


class AddressResponse(BaseModel):
    """Schema for an Address."""

    id: UUID
    external_code: str | None = None
    label: str | None = None
    street: str | None = None
    city: str | None = None
    postal_code: str | None = None
    country: str
    is_default: bool
    tag_overrides: list[TagReferenceSchema]

    @classmethod
    def from_entity(cls, address: Address) -> "AddressResponse":
        return cls(
            id=address.id,
            external_code=address.external_code,
            label=address.label,
            street=address.street,
            city=address.city,
            postal_code=address.postal_code,
            country=address.country,
            is_default=address.is_default,
            tag_overrides=[TagReferenceSchema.from_entity(r) for r in address.tag_overrides],
        )


class CustomerResponse(BaseModel):
    """Schema for a Customer."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "email": "acquisti@idraulica-rossi.it",
                "customer_type": "business",
                "customer_code": "C00042",
                "company_name": "Idraulica Rossi",
                "tags": [
                    {
                        "tag_id": "ctag_4f1c2a9b8e7d",
                        "full_tag": "categoria-di-sconto:sconto-45",
                        "prefix": "categoria-di-sconto",
                        "code": "sconto-45",
                    }
                ],
                "addresses": [],
                "created_at": "2026-01-28T10:00:00",
                "updated_at": "2026-01-28T10:00:00",
            }
        },
    )

    id: UUID
    email: str
    customer_type: CustomerType
    customer_code: str | None = None
    company_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    tags: list[TagReferenceSchema]
    addresses: list[AddressResponse]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, customer: Customer) -> "CustomerResponse":
        return cls(
            id=customer.id,
            email=customer.email,
            customer_type=customer.customer_type,
            customer_code=customer.customer_code,
            company_name=customer.company_name,
            first_name=customer.first_name,
            last_name=customer.last_name,
            tags=[TagReferenceSchema.from_entity(r) for r in customer.tags],
            addresses=[AddressResponse.from_entity(a) for a in customer.addresses],
            created_at=customer.created_at,
            updated_at=customer.updated_at,
        )


class CustomerDetailResponse(BaseModel):
    """Schema for single Customer."""

    data: CustomerResponse


# --- Tag assignment ---


class TagAssign(BaseModel):
    """Schema for assigning a tag by full tag."""

    full_tag: str = Field(..., min_length=3, max_length=201)


class TagBatchUpsert(BaseModel):
    """Schema for assigning several tags at once (import flows)."""

    full_tags: list[str] = Field(..., max_length=50)


class TagReferenceListResponse(BaseModel):
    """Schema for a tag list (customer tags or address overrides)."""

    data: list[TagReferenceSchema]

    @classmethod
    def from_entities(cls, refs: list) -> "TagReferenceListResponse":
        return cls(data=[TagReferenceSchema.from_entity(r) for r in refs])


class TagUpsertResponse(BaseModel):
    """Result of a batch upsert."""

    applied: list[str]
    skipped: list[str]
    tags: list[TagReferenceSchema]

    @classmethod
    def from_result(cls, result: TagUpsertResult) -> "TagUpsertResponse":
        return cls(
            applied=result.applied,
            skipped=result.skipped,
            tags=[TagReferenceSchema.from_entity(r) for r in result.tags],
        )


class EffectiveTagDetail(BaseModel):
    """One resolved tag and where it came from."""

    prefix: str
    tag: TagReferenceSchema
    source: TagSource


class AddressTagsResponse(BaseModel):
    """Tags in effect at a delivery address."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "customer_tags": [],
                "address_overrides": [],
                "effective_tags": [
                    "categoria-clienti:idraulico",
                    "categoria-di-sconto:sconto-50",
                ],
                "effective_tags_detailed": [],
            }
        },
    )

    customer_tags: list[TagReferenceSchema]
    address_overrides: list[TagReferenceSchema]
    effective_tags: list[str]
    effective_tags_detailed: list[EffectiveTagDetail]

    @classmethod
    def from_result(cls, result: AddressTags) -> "AddressTagsResponse":
        return cls(
            customer_tags=[TagReferenceSchema.from_entity(r) for r in result.customer_tags],
            address_overrides=[
                TagReferenceSchema.from_entity(r) for r in result.address_overrides
            ],
            effective_tags=result.effective_tags,
            effective_tags_detailed=[
                EffectiveTagDetail(
                    prefix=entry.prefix,
                    tag=TagReferenceSchema.from_entity(entry.tag),
                    source=entry.source,
                )
                for entry in result.effective_tags_detailed
            ],
        )
