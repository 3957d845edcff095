"""Unit tests for TagAssignmentService."""

from copy import deepcopy
from unittest.mock import call
from uuid import UUID, uuid4

import pytest

from core.exceptions import (
    AddressNotFoundError,
    AppException,
    CustomerNotFoundError,
    TagNotFoundError,
)
from domain.entities.customer import Address, Customer
from domain.services.tag_assignment_service import TagAssignmentService
from domain.services.tag_resolution import TagSource
from tests.unit.conftest import FakeUnitOfWork, definition, ref

SCONTO_45 = "categoria-di-sconto:sconto-45"
SCONTO_50 = "categoria-di-sconto:sconto-50"
IDRAULICO = "categoria-clienti:idraulico"


@pytest.fixture
def service(uow: FakeUnitOfWork) -> TagAssignmentService:
    return TagAssignmentService(lambda: uow)


def _catalog(uow: FakeUnitOfWork, *full_tags: str, inactive: tuple[str, ...] = ()) -> None:
    """Serve definitions for the given tags from the mocked catalog."""
    known = {ft: definition(ft) for ft in full_tags}
    known.update({ft: definition(ft, is_active=False) for ft in inactive})

    async def get_by_full_tag(full_tag: str):
        return known.get(full_tag)

    async def get_active_by_full_tags(requested: list[str]):
        return [known[ft] for ft in requested if ft in known and known[ft].is_active]

    uow.tag_definitions.get_by_full_tag.side_effect = get_by_full_tag
    uow.tag_definitions.get_active_by_full_tags.side_effect = get_active_by_full_tags


# --- assign_customer_tag ---


class TestAssignCustomerTag:
    @pytest.mark.asyncio
    async def test_assigns_and_counts(
        self, service: TagAssignmentService, uow: FakeUnitOfWork, customer: Customer
    ):
        _catalog(uow, SCONTO_45)
        uow.customers.get.return_value = customer

        result = await service.assign_customer_tag(customer.id, SCONTO_45)

        assert [r.full_tag for r in result] == [SCONTO_45]
        assert result[0].tag_id == "ctag_sconto-45"
        uow.customers.update.assert_called_once_with(customer)
        uow.tag_definitions.adjust_customer_count.assert_called_once_with(SCONTO_45, 1)
        assert uow.committed

    @pytest.mark.asyncio
    async def test_same_prefix_replaces_previous(
        self, service: TagAssignmentService, uow: FakeUnitOfWork, customer: Customer
    ):
        _catalog(uow, SCONTO_45, SCONTO_50)
        uow.customers.get.return_value = customer

        await service.assign_customer_tag(customer.id, SCONTO_45)
        result = await service.assign_customer_tag(customer.id, SCONTO_50)

        assert [r.full_tag for r in result] == [SCONTO_50]
        assert uow.tag_definitions.adjust_customer_count.call_args_list == [
            call(SCONTO_45, 1),
            call(SCONTO_50, 1),
            call(SCONTO_45, -1),
        ]

    @pytest.mark.asyncio
    async def test_other_prefixes_are_kept(
        self, service: TagAssignmentService, uow: FakeUnitOfWork, customer: Customer
    ):
        customer.tags = [ref(SCONTO_45), ref(IDRAULICO)]
        _catalog(uow, SCONTO_50)
        uow.customers.get.return_value = customer

        result = await service.assign_customer_tag(customer.id, SCONTO_50)

        assert [r.full_tag for r in result] == [IDRAULICO, SCONTO_50]

    @pytest.mark.asyncio
    async def test_reassigning_same_tag_leaves_counter(
        self, service: TagAssignmentService, uow: FakeUnitOfWork, customer: Customer
    ):
        customer.tags = [ref(SCONTO_45)]
        _catalog(uow, SCONTO_45)
        uow.customers.get.return_value = customer

        result = await service.assign_customer_tag(customer.id, SCONTO_45)

        assert [r.full_tag for r in result] == [SCONTO_45]
        uow.tag_definitions.adjust_customer_count.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_tag_raises_not_found(
        self, service: TagAssignmentService, uow: FakeUnitOfWork, customer: Customer
    ):
        customer.tags = [ref(IDRAULICO)]
        _catalog(uow)
        uow.customers.get.return_value = customer

        with pytest.raises(TagNotFoundError) as exc_info:
            await service.assign_customer_tag(customer.id, "foo:bar")

        assert exc_info.value.status_code == 404
        assert [r.full_tag for r in customer.tags] == [IDRAULICO]
        uow.customers.update.assert_not_called()
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_inactive_tag_raises_not_found(
        self, service: TagAssignmentService, uow: FakeUnitOfWork, customer: Customer
    ):
        _catalog(uow, inactive=(SCONTO_45,))
        uow.customers.get.return_value = customer

        with pytest.raises(TagNotFoundError):
            await service.assign_customer_tag(customer.id, SCONTO_45)

    @pytest.mark.asyncio
    async def test_missing_customer_raises(
        self, service: TagAssignmentService, uow: FakeUnitOfWork
    ):
        _catalog(uow, SCONTO_45)
        uow.customers.get.return_value = None

        with pytest.raises(CustomerNotFoundError):
            await service.assign_customer_tag(uuid4(), SCONTO_45)

    @pytest.mark.asyncio
    async def test_counter_failure_commits_nothing(
        self, service: TagAssignmentService, uow: FakeUnitOfWork, customer: Customer
    ):
        _catalog(uow, SCONTO_45)
        uow.customers.get.return_value = customer
        uow.tag_definitions.adjust_customer_count.side_effect = RuntimeError("counter down")

        with pytest.raises(RuntimeError):
            await service.assign_customer_tag(customer.id, SCONTO_45)

        uow.customers.update.assert_not_called()
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_list_write_failure_commits_nothing(
        self, service: TagAssignmentService, uow: FakeUnitOfWork, customer: Customer
    ):
        _catalog(uow, SCONTO_45)
        uow.customers.get.return_value = customer
        uow.customers.update.side_effect = RuntimeError("write failed")

        with pytest.raises(RuntimeError):
            await service.assign_customer_tag(customer.id, SCONTO_45)

        uow.tag_definitions.adjust_customer_count.assert_awaited_once_with(SCONTO_45, 1)
        assert not uow.committed


# --- remove_customer_tag ---


class TestRemoveCustomerTag:
    @pytest.mark.asyncio
    async def test_removes_and_decrements(
        self, service: TagAssignmentService, uow: FakeUnitOfWork, customer: Customer
    ):
        customer.tags = [ref(SCONTO_45), ref(IDRAULICO)]
        uow.customers.get.return_value = customer

        result = await service.remove_customer_tag(customer.id, SCONTO_45)

        assert [r.full_tag for r in result] == [IDRAULICO]
        uow.tag_definitions.adjust_customer_count.assert_called_once_with(SCONTO_45, -1)
        assert uow.committed

    @pytest.mark.asyncio
    async def test_absent_tag_is_idempotent(
        self, service: TagAssignmentService, uow: FakeUnitOfWork, customer: Customer
    ):
        customer.tags = [ref(IDRAULICO)]
        uow.customers.get.return_value = customer

        result = await service.remove_customer_tag(customer.id, SCONTO_45)

        assert [r.full_tag for r in result] == [IDRAULICO]
        uow.customers.update.assert_not_called()
        uow.tag_definitions.adjust_customer_count.assert_not_called()
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_removal_does_not_require_active_tag(
        self, service: TagAssignmentService, uow: FakeUnitOfWork, customer: Customer
    ):
        customer.tags = [ref(SCONTO_45)]
        uow.customers.get.return_value = customer

        result = await service.remove_customer_tag(customer.id, SCONTO_45)

        assert result == []
        uow.tag_definitions.get_by_full_tag.assert_not_called()


# --- batch ---


class TestUpsertCustomerTagsBatch:
    @pytest.mark.asyncio
    async def test_applies_known_and_skips_unknown(
        self, service: TagAssignmentService, uow: FakeUnitOfWork, customer: Customer
    ):
        _catalog(uow, SCONTO_45, IDRAULICO, inactive=("categoria-clienti:vecchio",))
        uow.customers.get.return_value = customer

        result = await service.upsert_customer_tags_batch(
            customer.id, [SCONTO_45, "foo:bar", IDRAULICO, "categoria-clienti:vecchio"]
        )

        assert result.applied == [SCONTO_45, IDRAULICO]
        assert result.skipped == ["foo:bar", "categoria-clienti:vecchio"]
        assert [r.full_tag for r in result.tags] == [SCONTO_45, IDRAULICO]
        uow.tag_definitions.get_active_by_full_tags.assert_called_once()
        assert uow.committed

    @pytest.mark.asyncio
    async def test_later_tag_wins_within_prefix(
        self, service: TagAssignmentService, uow: FakeUnitOfWork, customer: Customer
    ):
        _catalog(uow, SCONTO_45, SCONTO_50)
        uow.customers.get.return_value = customer

        result = await service.upsert_customer_tags_batch(customer.id, [SCONTO_45, SCONTO_50])

        assert [r.full_tag for r in result.tags] == [SCONTO_50]

    @pytest.mark.asyncio
    async def test_all_skipped_does_not_write(
        self, service: TagAssignmentService, uow: FakeUnitOfWork, customer: Customer
    ):
        _catalog(uow)
        uow.customers.get.return_value = customer

        result = await service.upsert_customer_tags_batch(customer.id, ["foo:bar"])

        assert result.applied == []
        assert result.skipped == ["foo:bar"]
        uow.customers.update.assert_not_called()
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_empty_input_returns_current_tags(
        self, service: TagAssignmentService, uow: FakeUnitOfWork, customer: Customer
    ):
        customer.tags = [ref(IDRAULICO)]
        uow.customers.get.return_value = customer

        result = await service.upsert_customer_tags_batch(customer.id, [])

        assert (result.applied, result.skipped) == ([], [])
        assert [r.full_tag for r in result.tags] == [IDRAULICO]
        uow.tag_definitions.get_active_by_full_tags.assert_not_called()
        uow.customers.update.assert_not_called()
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_empty_input_still_checks_customer(
        self, service: TagAssignmentService, uow: FakeUnitOfWork
    ):
        uow.customers.get.return_value = None

        with pytest.raises(CustomerNotFoundError):
            await service.upsert_customer_tags_batch(uuid4(), [])

    @pytest.mark.asyncio
    async def test_missing_customer_raises(
        self, service: TagAssignmentService, uow: FakeUnitOfWork
    ):
        uow.customers.get.return_value = None

        with pytest.raises(CustomerNotFoundError):
            await service.upsert_customer_tags_batch(uuid4(), [SCONTO_45])


# --- address overrides ---


class TestAddressOverrides:
    @pytest.mark.asyncio
    async def test_assign_override_does_not_count(
        self,
        service: TagAssignmentService,
        uow: FakeUnitOfWork,
        customer: Customer,
        address: Address,
    ):
        _catalog(uow, SCONTO_50)
        uow.customers.get.return_value = customer

        result = await service.assign_address_tag_override(customer.id, address.id, SCONTO_50)

        assert [r.full_tag for r in result] == [SCONTO_50]
        assert customer.tags == []
        uow.tag_definitions.adjust_customer_count.assert_not_called()
        uow.customers.update.assert_called_once_with(customer)
        assert uow.committed

    @pytest.mark.asyncio
    async def test_override_replaces_same_prefix(
        self,
        service: TagAssignmentService,
        uow: FakeUnitOfWork,
        customer: Customer,
        address: Address,
    ):
        address.tag_overrides = [ref(SCONTO_45)]
        _catalog(uow, SCONTO_50)
        uow.customers.get.return_value = customer

        result = await service.assign_address_tag_override(customer.id, address.id, SCONTO_50)

        assert [r.full_tag for r in result] == [SCONTO_50]

    @pytest.mark.asyncio
    async def test_unknown_address_raises(
        self, service: TagAssignmentService, uow: FakeUnitOfWork, customer: Customer
    ):
        _catalog(uow, SCONTO_50)
        uow.customers.get.return_value = customer

        with pytest.raises(AddressNotFoundError):
            await service.assign_address_tag_override(customer.id, uuid4(), SCONTO_50)

    @pytest.mark.asyncio
    async def test_remove_override_is_idempotent(
        self,
        service: TagAssignmentService,
        uow: FakeUnitOfWork,
        customer: Customer,
        address: Address,
    ):
        address.tag_overrides = [ref(SCONTO_50)]
        uow.customers.get.return_value = customer

        first = await service.remove_address_tag_override(customer.id, address.id, SCONTO_50)
        second = await service.remove_address_tag_override(customer.id, address.id, SCONTO_50)

        assert first == []
        assert second == []
        uow.customers.update.assert_called_once()
        uow.tag_definitions.adjust_customer_count.assert_not_called()

    @pytest.mark.asyncio
    async def test_batch_overrides(
        self,
        service: TagAssignmentService,
        uow: FakeUnitOfWork,
        customer: Customer,
        address: Address,
    ):
        _catalog(uow, SCONTO_50)
        uow.customers.get.return_value = customer

        result = await service.upsert_address_tag_overrides_batch(
            customer.id, address.id, [SCONTO_50, "foo:bar"]
        )

        assert result.applied == [SCONTO_50]
        assert result.skipped == ["foo:bar"]
        assert [r.full_tag for r in address.tag_overrides] == [SCONTO_50]
        uow.tag_definitions.adjust_customer_count.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_override_batch_returns_current_overrides(
        self,
        service: TagAssignmentService,
        uow: FakeUnitOfWork,
        customer: Customer,
        address: Address,
    ):
        address.tag_overrides = [ref(SCONTO_50)]
        uow.customers.get.return_value = customer

        result = await service.upsert_address_tag_overrides_batch(customer.id, address.id, [])
        with pytest.raises(AddressNotFoundError):
            await service.upsert_address_tag_overrides_batch(customer.id, uuid4(), [])

        assert [r.full_tag for r in result.tags] == [SCONTO_50]
        uow.customers.update.assert_not_called()


# --- reads ---


class TestGetAddressTags:
    @pytest.mark.asyncio
    async def test_resolves_effective_tags(
        self,
        service: TagAssignmentService,
        uow: FakeUnitOfWork,
        customer: Customer,
        address: Address,
    ):
        customer.tags = [ref(SCONTO_45), ref(IDRAULICO)]
        address.tag_overrides = [ref(SCONTO_50)]
        uow.customers.get.return_value = customer

        result = await service.get_address_tags(customer.id, address.id)

        assert result.effective_tags == [IDRAULICO, SCONTO_50]
        assert [e.source for e in result.effective_tags_detailed] == [
            TagSource.CUSTOMER,
            TagSource.ADDRESS_OVERRIDE,
        ]
        assert [r.full_tag for r in result.customer_tags] == [SCONTO_45, IDRAULICO]

    @pytest.mark.asyncio
    async def test_missing_customer_is_app_exception(
        self, service: TagAssignmentService, uow: FakeUnitOfWork
    ):
        uow.customers.get.return_value = None

        with pytest.raises(AppException) as exc_info:
            await service.get_address_tags(uuid4(), uuid4())

        assert exc_info.value.status_code == 404


# --- counter drift ---


class TestCounterDrift:
    @pytest.mark.asyncio
    async def test_stale_reads_over_count_until_recount(self, customer_id: UUID):
        """Two writers reading the same snapshot both increment the counter."""
        from domain.services.tag_catalog_service import TagCatalogService

        snapshot = Customer(id=customer_id, email="a@b.it")
        first_uow, second_uow = FakeUnitOfWork(), FakeUnitOfWork()
        for writer in (first_uow, second_uow):
            _catalog(writer, SCONTO_45)
            writer.customers.get.return_value = deepcopy(snapshot)

        await TagAssignmentService(lambda: first_uow).assign_customer_tag(customer_id, SCONTO_45)
        await TagAssignmentService(lambda: second_uow).assign_customer_tag(customer_id, SCONTO_45)

        first_uow.tag_definitions.adjust_customer_count.assert_called_once_with(SCONTO_45, 1)
        second_uow.tag_definitions.adjust_customer_count.assert_called_once_with(SCONTO_45, 1)

        recount_uow = FakeUnitOfWork()
        drifted = definition(SCONTO_45)
        drifted.customer_count = 2
        recount_uow.tag_definitions.list_all.return_value = [drifted]
        recount_uow.customers.count_tag_usage.return_value = {SCONTO_45: 1}

        corrected = await TagCatalogService(lambda: recount_uow).recount_customer_counts()

        assert corrected == {SCONTO_45: 1}
        recount_uow.tag_definitions.set_customer_count.assert_called_once_with(SCONTO_45, 1)
