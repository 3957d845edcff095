"""Tag assignment on customers and address overrides."""

from dataclasses import dataclass
from typing import Callable
from uuid import UUID

import structlog

from core.exceptions import AddressNotFoundError, CustomerNotFoundError, TagNotFoundError
from domain.entities.customer import Address, Customer
from domain.entities.tag import TagDefinition, TagReference
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.tag_resolution import (
    EffectiveTag,
    find_by_prefix,
    remove_by_full_tag,
    replace_by_prefix,
    resolve_effective_tags,
    resolve_effective_tags_detailed,
)

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class TagUpsertResult:
    """Outcome of a batch upsert: which tags applied, which were skipped."""

    applied: list[str]
    skipped: list[str]
    tags: list[TagReference]


@dataclass(frozen=True, slots=True)
class AddressTags:
    """Read-only view of the tags in effect at one delivery address."""

    customer_tags: list[TagReference]
    address_overrides: list[TagReference]
    effective_tags: list[str]
    effective_tags_detailed: list[EffectiveTag]


class TagAssignmentService:
    """Service layer for assigning and removing customer/address tags.

    Only customer-level assignments move the catalog ``customer_count``;
    address overrides are never counted. Each call commits the tag list
    and the counter adjustment together.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    # --- Reads ---

    async def get_customer_tags(self, customer_id: UUID) -> list[TagReference]:
        """Get the customer's default tags."""
        async with self._uow_factory() as uow:
            customer = await self._get_customer(uow, customer_id)
            return list(customer.tags)

    async def get_address_tags(self, customer_id: UUID, address_id: UUID) -> AddressTags:
        """Get customer defaults, address overrides and the resolved effective set."""
        async with self._uow_factory() as uow:
            customer = await self._get_customer(uow, customer_id)
            address = self._get_address(customer, address_id)

        return AddressTags(
            customer_tags=list(customer.tags),
            address_overrides=list(address.tag_overrides),
            effective_tags=resolve_effective_tags(customer.tags, address.tag_overrides),
            effective_tags_detailed=resolve_effective_tags_detailed(
                customer.tags, address.tag_overrides
            ),
        )

    # --- Customer level ---

    async def assign_customer_tag(self, customer_id: UUID, full_tag: str) -> list[TagReference]:
        """Assign a tag, replacing any customer tag with the same prefix."""
        async with self._uow_factory() as uow:
            definition = await self._find_active(uow, full_tag)
            customer = await self._get_customer(uow, customer_id)

            customer.tags = await self._apply(uow, customer.tags, definition, track_usage=True)
            await uow.customers.update(customer)
            await uow.commit()

        logger.info("customer_tag_assigned", customer_id=str(customer_id), full_tag=full_tag)
        return list(customer.tags)

    async def remove_customer_tag(self, customer_id: UUID, full_tag: str) -> list[TagReference]:
        """Remove a tag by exact full tag. Absent tags are a no-op."""
        async with self._uow_factory() as uow:
            customer = await self._get_customer(uow, customer_id)

            remaining = remove_by_full_tag(customer.tags, full_tag)
            if len(remaining) == len(customer.tags):
                return list(customer.tags)

            customer.tags = remaining
            await uow.customers.update(customer)
            await uow.tag_definitions.adjust_customer_count(full_tag, -1)
            await uow.commit()

        logger.info("customer_tag_removed", customer_id=str(customer_id), full_tag=full_tag)
        return list(customer.tags)

    async def upsert_customer_tags_batch(
        self, customer_id: UUID, full_tags: list[str]
    ) -> TagUpsertResult:
        """Apply every known active tag, skipping unknown or inactive ones.

        Tags are applied in input order, so of two tags sharing a prefix the
        later one wins. An empty batch returns the current tags unchanged.
        """
        async with self._uow_factory() as uow:
            customer = await self._get_customer(uow, customer_id)
            applied, skipped, definitions = await self._partition(uow, full_tags)

            for definition in definitions:
                customer.tags = await self._apply(
                    uow, customer.tags, definition, track_usage=True
                )
            if definitions:
                await uow.customers.update(customer)
                await uow.commit()

        self._log_batch("customer_tags_upserted", customer_id, None, applied, skipped)
        return TagUpsertResult(applied=applied, skipped=skipped, tags=list(customer.tags))

    # --- Address level ---

    async def assign_address_tag_override(
        self, customer_id: UUID, address_id: UUID, full_tag: str
    ) -> list[TagReference]:
        """Assign an override on one address, replacing any with the same prefix."""
        async with self._uow_factory() as uow:
            definition = await self._find_active(uow, full_tag)
            customer = await self._get_customer(uow, customer_id)
            address = self._get_address(customer, address_id)

            address.tag_overrides = await self._apply(
                uow, address.tag_overrides, definition, track_usage=False
            )
            await uow.customers.update(customer)
            await uow.commit()

        logger.info(
            "address_tag_override_assigned",
            customer_id=str(customer_id),
            address_id=str(address_id),
            full_tag=full_tag,
        )
        return list(address.tag_overrides)

    async def remove_address_tag_override(
        self, customer_id: UUID, address_id: UUID, full_tag: str
    ) -> list[TagReference]:
        """Remove an override by exact full tag. Absent tags are a no-op."""
        async with self._uow_factory() as uow:
            customer = await self._get_customer(uow, customer_id)
            address = self._get_address(customer, address_id)

            remaining = remove_by_full_tag(address.tag_overrides, full_tag)
            if len(remaining) == len(address.tag_overrides):
                return list(address.tag_overrides)

            address.tag_overrides = remaining
            await uow.customers.update(customer)
            await uow.commit()

        logger.info(
            "address_tag_override_removed",
            customer_id=str(customer_id),
            address_id=str(address_id),
            full_tag=full_tag,
        )
        return list(address.tag_overrides)

    async def upsert_address_tag_overrides_batch(
        self, customer_id: UUID, address_id: UUID, full_tags: list[str]
    ) -> TagUpsertResult:
        """Batch variant of ``assign_address_tag_override`` with skip semantics."""
        async with self._uow_factory() as uow:
            customer = await self._get_customer(uow, customer_id)
            address = self._get_address(customer, address_id)
            applied, skipped, definitions = await self._partition(uow, full_tags)

            for definition in definitions:
                address.tag_overrides = await self._apply(
                    uow, address.tag_overrides, definition, track_usage=False
                )
            if definitions:
                await uow.customers.update(customer)
                await uow.commit()

        self._log_batch("address_tag_overrides_upserted", customer_id, address_id, applied, skipped)
        return TagUpsertResult(
            applied=applied, skipped=skipped, tags=list(address.tag_overrides)
        )

    # --- Helpers ---

    async def _apply(
        self,
        uow: IUnitOfWork,
        refs: list[TagReference],
        definition: TagDefinition,
        track_usage: bool,
    ) -> list[TagReference]:
        """Replace-by-prefix, adjusting usage counters when tracked."""
        new_ref = definition.to_reference()
        previous = find_by_prefix(refs, new_ref.prefix)
        updated = replace_by_prefix(refs, new_ref)

        if track_usage and (previous is None or previous.full_tag != new_ref.full_tag):
            await uow.tag_definitions.adjust_customer_count(new_ref.full_tag, 1)
            if previous is not None:
                await uow.tag_definitions.adjust_customer_count(previous.full_tag, -1)
        return updated

    async def _partition(
        self, uow: IUnitOfWork, full_tags: list[str]
    ) -> tuple[list[str], list[str], list[TagDefinition]]:
        """Split requested tags into known-active (with definitions) and skipped."""
        unique = list(dict.fromkeys(full_tags))
        if not unique:
            return [], [], []
        found = await uow.tag_definitions.get_active_by_full_tags(unique)
        by_full_tag = {tag.full_tag: tag for tag in found}

        applied = [ft for ft in unique if ft in by_full_tag]
        skipped = [ft for ft in unique if ft not in by_full_tag]
        return applied, skipped, [by_full_tag[ft] for ft in applied]

    async def _find_active(self, uow: IUnitOfWork, full_tag: str) -> TagDefinition:
        definition = await uow.tag_definitions.get_by_full_tag(full_tag)
        if not definition or not definition.is_active:
            raise TagNotFoundError(full_tag)
        return definition

    async def _get_customer(self, uow: IUnitOfWork, customer_id: UUID) -> Customer:
        customer = await uow.customers.get(customer_id)
        if not customer:
            raise CustomerNotFoundError(str(customer_id))
        return customer

    @staticmethod
    def _get_address(customer: Customer, address_id: UUID) -> Address:
        address = customer.get_address(address_id)
        if not address:
            raise AddressNotFoundError(str(address_id))
        return address

    @staticmethod
    def _log_batch(
        event: str,
        customer_id: UUID,
        address_id: UUID | None,
        applied: list[str],
        skipped: list[str],
    ) -> None:
        if skipped:
            logger.info(
                "tag_upsert_skipped",
                customer_id=str(customer_id),
                address_id=str(address_id) if address_id else None,
                skipped=skipped,
            )
        logger.info(
            event,
            customer_id=str(customer_id),
            address_id=str(address_id) if address_id else None,
            applied=applied,
        )
