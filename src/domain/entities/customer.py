"""Customer and address domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4

from domain.entities.tag import TagReference


class CustomerType(StrEnum):
    """Kind of customer account."""

    BUSINESS = "business"
    PRIVATE = "private"


@dataclass
class Address:
    """Delivery address embedded in a Customer.

    ``tag_overrides`` replace the customer's tags of the same prefix for
    carts shipped to this address only.
    """

    id: UUID = field(default_factory=uuid4)
    external_code: str | None = None
    label: str | None = None
    street: str | None = None
    city: str | None = None
    postal_code: str | None = None
    country: str = "IT"
    is_default: bool = False
    tag_overrides: list[TagReference] = field(default_factory=list)


@dataclass
class Customer:
    """Domain entity for a Customer."""

    email: str
    id: UUID = field(default_factory=uuid4)
    customer_type: CustomerType = CustomerType.BUSINESS
    customer_code: str | None = None
    company_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    tags: list[TagReference] = field(default_factory=list)
    addresses: list[Address] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def get_address(self, address_id: UUID) -> Address | None:
        """Find an embedded address by id."""
        return next((a for a in self.addresses if a.id == address_id), None)
