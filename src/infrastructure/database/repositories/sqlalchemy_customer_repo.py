"""SQLAlchemy implementation of Customer repository."""

from collections import Counter
from uuid import UUID

from sqlalchemy import String, cast, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.customer import Address, Customer, CustomerType
from domain.entities.tag import TagReference, load_tag_references
from infrastructure.database.models import AddressModel, CustomerModel


def _dump_refs(refs: list[TagReference]) -> list[dict[str, str]]:
    return [ref.to_dict() for ref in refs]


class SQLAlchemyCustomerRepository:
    """SQLAlchemy implementation of ICustomerRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Customer | None:
        """Get a customer with its addresses."""
        model = await self._get_model(id)
        return self._to_entity(model) if model else None

    async def create(self, customer: Customer) -> Customer:
        """Create a customer and its addresses."""
        model = self._to_model(customer)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def update(self, customer: Customer) -> Customer:
        """Persist customer fields, tags and addresses."""
        model = await self._get_model(customer.id)
        if not model:
            raise ValueError(f"Customer {customer.id} not found")

        model.customer_code = customer.customer_code
        model.customer_type = customer.customer_type.value
        model.email = customer.email
        model.company_name = customer.company_name
        model.first_name = customer.first_name
        model.last_name = customer.last_name
        # Reassign (never mutate) JSON columns so the change is tracked
        model.tags = _dump_refs(customer.tags)

        existing = {address.id: address for address in model.addresses}
        synced: list[AddressModel] = []
        for position, address in enumerate(customer.addresses):
            address_model = existing.get(address.id) or AddressModel(
                id=address.id, customer_id=model.id
            )
            self._apply_address(address_model, address, position)
            synced.append(address_model)
        model.addresses = synced

        await self._session.flush()
        return self._to_entity(model)

    async def list_with_tag(self, full_tag: str) -> list[Customer]:
        """Customers whose tags or address overrides mention ``full_tag``.

        Matches the quoted full tag inside the serialized JSON, which works on
        both PostgreSQL and SQLite; callers re-check exact membership.
        """
        needle = f'%"{full_tag}"%'
        with_override = select(AddressModel.customer_id).where(
            cast(AddressModel.tag_overrides, String).like(needle)
        )
        stmt = (
            select(CustomerModel)
            .where(
                or_(
                    cast(CustomerModel.tags, String).like(needle),
                    CustomerModel.id.in_(with_override),
                )
            )
            .order_by(CustomerModel.company_name, CustomerModel.email)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def count_tag_usage(self) -> dict[str, int]:
        """Number of customers carrying each full tag at customer level."""
        result = await self._session.execute(select(CustomerModel.tags))
        usage: Counter[str] = Counter()
        for (tags,) in result:
            usage.update({ref.full_tag for ref in load_tag_references(tags)})
        return dict(usage)

    async def _get_model(self, id: UUID) -> CustomerModel | None:
        stmt = select(CustomerModel).where(CustomerModel.id == id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _apply_address(model: AddressModel, entity: Address, position: int) -> None:
        model.position = position
        model.external_code = entity.external_code
        model.label = entity.label
        model.street = entity.street
        model.city = entity.city
        model.postal_code = entity.postal_code
        model.country = entity.country
        model.is_default = entity.is_default
        model.tag_overrides = _dump_refs(entity.tag_overrides)

    def _to_entity(self, model: CustomerModel) -> Customer:
        """Convert ORM model to domain entity."""
        return Customer(
            id=model.id,
            email=model.email,
            customer_type=CustomerType(model.customer_type),
            customer_code=model.customer_code,
            company_name=model.company_name,
            first_name=model.first_name,
            last_name=model.last_name,
            tags=load_tag_references(model.tags, owner=f"customer:{model.id}"),
            addresses=[
                Address(
                    id=address.id,
                    external_code=address.external_code,
                    label=address.label,
                    street=address.street,
                    city=address.city,
                    postal_code=address.postal_code,
                    country=address.country,
                    is_default=address.is_default,
                    tag_overrides=load_tag_references(
                        address.tag_overrides, owner=f"address:{address.id}"
                    ),
                )
                for address in model.addresses
            ],
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Customer) -> CustomerModel:
        """Convert domain entity to ORM model."""
        model = CustomerModel(
            id=entity.id,
            customer_code=entity.customer_code,
            customer_type=entity.customer_type.value,
            email=entity.email,
            company_name=entity.company_name,
            first_name=entity.first_name,
            last_name=entity.last_name,
            tags=_dump_refs(entity.tags),
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
        addresses = []
        for position, address in enumerate(entity.addresses):
            address_model = AddressModel(id=address.id)
            self._apply_address(address_model, address, position)
            addresses.append(address_model)
        model.addresses = addresses
        return model
