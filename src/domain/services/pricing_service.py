"""Tag-based pricing for a customer + delivery address."""

from typing import Callable
from uuid import UUID

from core.exceptions import AddressNotFoundError, CustomerNotFoundError
from domain.entities.pricing import PackagingOption
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.tag_pricing import resolve_packaging_by_tags
from domain.services.tag_resolution import resolve_effective_tags


class PricingService:
    """Resolve packaging pricing and promotions against effective tags."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def resolve_for_address(
        self,
        customer_id: UUID,
        address_id: UUID,
        packaging_options: list[PackagingOption],
    ) -> tuple[list[str], list[PackagingOption]]:
        """Return the effective tags and the options resolved against them."""
        async with self._uow_factory() as uow:
            customer = await uow.customers.get(customer_id)
            if not customer:
                raise CustomerNotFoundError(str(customer_id))
            address = customer.get_address(address_id)
            if not address:
                raise AddressNotFoundError(str(address_id))

        effective_tags = resolve_effective_tags(customer.tags, address.tag_overrides)
        return effective_tags, resolve_packaging_by_tags(packaging_options, effective_tags)
