"""Customer service layer."""

from datetime import datetime
from typing import Callable
from uuid import UUID

from core.exceptions import CustomerNotFoundError
from domain.entities.customer import Address, Customer
from domain.repositories.unit_of_work import IUnitOfWork


class CustomerService:
    """Service layer for customers and their addresses."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get(self, customer_id: UUID) -> Customer:
        """Get a customer with its addresses."""
        async with self._uow_factory() as uow:
            customer = await uow.customers.get(customer_id)
            if not customer:
                raise CustomerNotFoundError(str(customer_id))
            return customer

    async def create(self, customer: Customer) -> Customer:
        """Create a customer. Tags are assigned separately through the catalog."""
        if customer.addresses and not any(a.is_default for a in customer.addresses):
            customer.addresses[0].is_default = True

        async with self._uow_factory() as uow:
            created = await uow.customers.create(customer)
            await uow.commit()
            return created

    async def add_address(self, customer_id: UUID, address: Address) -> Customer:
        """Add a delivery address; the first one becomes the default."""
        async with self._uow_factory() as uow:
            customer = await uow.customers.get(customer_id)
            if not customer:
                raise CustomerNotFoundError(str(customer_id))

            if address.is_default:
                for existing in customer.addresses:
                    existing.is_default = False
            elif not customer.addresses:
                address.is_default = True

            customer.addresses.append(address)
            customer.updated_at = datetime.utcnow()
            updated = await uow.customers.update(customer)
            await uow.commit()
            return updated
