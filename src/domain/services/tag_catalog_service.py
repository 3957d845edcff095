"""Tag catalog service: definitions, lookup and usage counters."""

from dataclasses import dataclass
from typing import Callable

import structlog

from core.exceptions import DuplicateTagError, TagNotFoundError
from domain.entities.customer import Address, Customer
from domain.entities.tag import TagDefinition
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class TagHolders:
    """Read-only value object: who carries a tag, by scope."""

    tag: TagDefinition
    customers: list[Customer]
    addresses: list[tuple[Customer, Address]]


class TagCatalogService:
    """Service layer for the tag catalog."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def list_active(self, prefix: str | None = None) -> list[TagDefinition]:
        """List active definitions, optionally for one prefix, by prefix then code."""
        async with self._uow_factory() as uow:
            return await uow.tag_definitions.list_active(prefix)

    async def get(self, tag_id: str) -> TagDefinition:
        """Get a definition by id, active or not."""
        async with self._uow_factory() as uow:
            tag = await uow.tag_definitions.get(tag_id)
            if not tag:
                raise TagNotFoundError(tag_id)
            return tag

    async def find_active(self, full_tag: str) -> TagDefinition:
        """Look up the active definition for a full tag."""
        async with self._uow_factory() as uow:
            tag = await uow.tag_definitions.get_by_full_tag(full_tag)
            if not tag or not tag.is_active:
                raise TagNotFoundError(full_tag)
            return tag

    async def create(
        self,
        prefix: str,
        code: str,
        description: str | None = None,
        color: str | None = None,
    ) -> TagDefinition:
        """Create a catalog entry.

        Raises:
            InvalidTagFormatError: prefix or code is not lowercase kebab-case
            DuplicateTagError: the full tag already exists (even if inactive)
        """
        tag = TagDefinition(prefix=prefix, code=code, description=description, color=color)

        async with self._uow_factory() as uow:
            existing = await uow.tag_definitions.get_by_full_tag(tag.full_tag)
            if existing:
                raise DuplicateTagError(tag.full_tag)

            created = await uow.tag_definitions.create(tag)
            await uow.commit()

        logger.info("customer_tag_created", tag_id=created.tag_id, full_tag=created.full_tag)
        return created

    async def update_display(
        self,
        tag_id: str,
        description: str | None = None,
        color: str | None = None,
    ) -> TagDefinition:
        """Update display metadata. Prefix, code and full tag never change."""
        async with self._uow_factory() as uow:
            tag = await uow.tag_definitions.get(tag_id)
            if not tag:
                raise TagNotFoundError(tag_id)

            if description is not None:
                tag.description = description
            if color is not None:
                tag.color = color.upper()

            updated = await uow.tag_definitions.update(tag)
            await uow.commit()
            return updated

    async def deactivate(self, tag_id: str) -> TagDefinition:
        """Deactivate a definition. Existing assignments keep resolving."""
        async with self._uow_factory() as uow:
            tag = await uow.tag_definitions.get(tag_id)
            if not tag:
                raise TagNotFoundError(tag_id)

            if tag.is_active:
                tag.is_active = False
                tag = await uow.tag_definitions.update(tag)
                await uow.commit()
                logger.info("customer_tag_deactivated", tag_id=tag_id, full_tag=tag.full_tag)
            return tag

    async def list_holders(self, tag_id: str) -> TagHolders:
        """Customers carrying an active tag, and addresses overriding with it."""
        async with self._uow_factory() as uow:
            tag = await uow.tag_definitions.get(tag_id)
            if not tag or not tag.is_active:
                raise TagNotFoundError(tag_id)

            candidates = await uow.customers.list_with_tag(tag.full_tag)

        customers = [
            c for c in candidates if any(ref.full_tag == tag.full_tag for ref in c.tags)
        ]
        addresses = [
            (c, a)
            for c in candidates
            for a in c.addresses
            if any(ref.full_tag == tag.full_tag for ref in a.tag_overrides)
        ]
        return TagHolders(tag=tag, customers=customers, addresses=addresses)

    async def recount_customer_counts(self) -> dict[str, int]:
        """Recompute every ``customer_count`` from the customer tag lists.

        The counters are adjusted without locking on assignment and may drift;
        this rebuilds them from the authoritative data. Returns the full tags
        whose stored count changed, mapped to the corrected value.
        """
        async with self._uow_factory() as uow:
            definitions = await uow.tag_definitions.list_all()
            usage = await uow.customers.count_tag_usage()

            corrected: dict[str, int] = {}
            for tag in definitions:
                actual = usage.get(tag.full_tag, 0)
                if tag.customer_count != actual:
                    await uow.tag_definitions.set_customer_count(tag.full_tag, actual)
                    corrected[tag.full_tag] = actual

            await uow.commit()

        if corrected:
            logger.warning("customer_tag_counts_corrected", corrected=corrected)
        return corrected
