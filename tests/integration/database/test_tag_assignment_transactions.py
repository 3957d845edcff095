"""Tag assignment against a real session: list and counter change together."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from domain.entities.customer import Address, Customer
from domain.entities.tag import TagDefinition
from domain.services.tag_assignment_service import TagAssignmentService
from infrastructure.database.repositories.sqlalchemy_customer_repo import (
    SQLAlchemyCustomerRepository,
)
from infrastructure.database.repositories.sqlalchemy_tag_repo import (
    SQLAlchemyTagDefinitionRepository,
)
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

SCONTO_45 = "categoria-di-sconto:sconto-45"
SCONTO_50 = "categoria-di-sconto:sconto-50"


@pytest.fixture
def service(session_factory: async_sessionmaker[AsyncSession]) -> TagAssignmentService:
    return TagAssignmentService(lambda: SQLAlchemyUnitOfWork(session_factory))


@pytest.fixture
async def stored_customer(session_factory: async_sessionmaker[AsyncSession]) -> Customer:
    """A customer plus two catalog tags sharing a prefix."""
    async with SQLAlchemyUnitOfWork(session_factory) as uow:
        for code in ("sconto-45", "sconto-50"):
            await uow.tag_definitions.create(TagDefinition(prefix="categoria-di-sconto", code=code))
        customer = await uow.customers.create(
            Customer(email="ufficio@termoidraulica.it", addresses=[Address(label="Sede")])
        )
        await uow.commit()
    return customer


async def _state(
    session_factory: async_sessionmaker[AsyncSession], customer: Customer
) -> tuple[list[str], dict[str, int]]:
    async with SQLAlchemyUnitOfWork(session_factory) as uow:
        stored = await uow.customers.get(customer.id)
        counts = {
            tag.full_tag: tag.customer_count for tag in await uow.tag_definitions.list_all()
        }
    assert stored is not None
    return [r.full_tag for r in stored.tags], counts


class TestAssignmentTransactions:
    @pytest.mark.asyncio
    async def test_successful_assignment_commits_list_and_counter(
        self,
        service: TagAssignmentService,
        session_factory: async_sessionmaker[AsyncSession],
        stored_customer: Customer,
    ):
        await service.assign_customer_tag(stored_customer.id, SCONTO_45)
        await service.assign_customer_tag(stored_customer.id, SCONTO_50)

        tags, counts = await _state(session_factory, stored_customer)

        assert tags == [SCONTO_50]
        assert counts == {SCONTO_45: 0, SCONTO_50: 1}

    @pytest.mark.asyncio
    async def test_counter_failure_leaves_list_unchanged(
        self,
        service: TagAssignmentService,
        session_factory: async_sessionmaker[AsyncSession],
        stored_customer: Customer,
        monkeypatch: pytest.MonkeyPatch,
    ):
        async def failing_adjust(self, full_tag: str, delta: int) -> None:
            raise RuntimeError("counter unavailable")

        monkeypatch.setattr(
            SQLAlchemyTagDefinitionRepository, "adjust_customer_count", failing_adjust
        )

        with pytest.raises(RuntimeError):
            await service.assign_customer_tag(stored_customer.id, SCONTO_45)

        tags, counts = await _state(session_factory, stored_customer)
        assert tags == []
        assert counts[SCONTO_45] == 0

    @pytest.mark.asyncio
    async def test_list_failure_rolls_back_counter(
        self,
        service: TagAssignmentService,
        session_factory: async_sessionmaker[AsyncSession],
        stored_customer: Customer,
        monkeypatch: pytest.MonkeyPatch,
    ):
        await service.assign_customer_tag(stored_customer.id, SCONTO_45)

        async def failing_update(self, customer: Customer) -> Customer:
            raise RuntimeError("write failed")

        monkeypatch.setattr(SQLAlchemyCustomerRepository, "update", failing_update)

        with pytest.raises(RuntimeError):
            await service.assign_customer_tag(stored_customer.id, SCONTO_50)

        monkeypatch.undo()
        tags, counts = await _state(session_factory, stored_customer)
        assert tags == [SCONTO_45]
        assert counts == {SCONTO_45: 1, SCONTO_50: 0}
