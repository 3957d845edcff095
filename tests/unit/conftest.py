"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from domain.entities.customer import Address, Customer
from domain.entities.tag import TagDefinition, TagReference


class FakeUnitOfWork:
    """Fake Unit of Work with the three repository mocks for unit testing."""

    def __init__(self) -> None:
        self.tag_definitions = AsyncMock()
        self.customers = AsyncMock()
        self.orders = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


def ref(full_tag: str) -> TagReference:
    """Build a reference the way the catalog would."""
    prefix, code = full_tag.split(":", 1)
    return TagReference(tag_id=f"ctag_{code}", full_tag=full_tag, prefix=prefix, code=code)


def definition(full_tag: str, is_active: bool = True) -> TagDefinition:
    """Build a catalog definition for ``prefix:code``."""
    prefix, code = full_tag.split(":", 1)
    return TagDefinition(prefix=prefix, code=code, tag_id=f"ctag_{code}", is_active=is_active)


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def customer_id() -> UUID:
    """A random customer ID."""
    return uuid4()


@pytest.fixture
def address() -> Address:
    """A delivery address with no overrides."""
    return Address(label="Magazzino Milano", city="Milano", is_default=True)


@pytest.fixture
def customer(customer_id: UUID, address: Address) -> Customer:
    """A business customer with one address and no tags."""
    return Customer(
        id=customer_id,
        email="acquisti@idraulica-rossi.it",
        company_name="Idraulica Rossi",
        addresses=[address],
    )
