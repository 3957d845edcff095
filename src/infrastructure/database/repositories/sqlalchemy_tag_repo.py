"""SQLAlchemy implementation of the tag catalog repository."""

from sqlalchemy import case, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.tag import TagDefinition
from infrastructure.database.models import CustomerTagModel


class SQLAlchemyTagDefinitionRepository:
    """SQLAlchemy implementation of ITagDefinitionRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, tag_id: str) -> TagDefinition | None:
        """Get a tag definition by ID."""
        stmt = select(CustomerTagModel).where(CustomerTagModel.tag_id == tag_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_full_tag(self, full_tag: str) -> TagDefinition | None:
        """Get a tag definition by full tag."""
        stmt = select(CustomerTagModel).where(CustomerTagModel.full_tag == full_tag)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_active_by_full_tags(self, full_tags: list[str]) -> list[TagDefinition]:
        """Get the active definitions among the given full tags."""
        if not full_tags:
            return []
        stmt = select(CustomerTagModel).where(
            CustomerTagModel.full_tag.in_(full_tags),
            CustomerTagModel.is_active.is_(True),
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def list_active(self, prefix: str | None = None) -> list[TagDefinition]:
        """List active definitions sorted by prefix then code."""
        stmt = select(CustomerTagModel).where(CustomerTagModel.is_active.is_(True))
        if prefix:
            stmt = stmt.where(CustomerTagModel.prefix == prefix)
        stmt = stmt.order_by(CustomerTagModel.prefix, CustomerTagModel.code)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def list_all(self) -> list[TagDefinition]:
        """List every definition, including inactive ones."""
        stmt = select(CustomerTagModel).order_by(CustomerTagModel.prefix, CustomerTagModel.code)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, tag: TagDefinition) -> TagDefinition:
        """Create a new tag definition."""
        model = self._to_model(tag)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, tag: TagDefinition) -> TagDefinition:
        """Update display metadata and active flag."""
        stmt = select(CustomerTagModel).where(CustomerTagModel.tag_id == tag.tag_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Tag {tag.tag_id} not found")

        model.description = tag.description
        model.color = tag.color
        model.is_active = tag.is_active

        await self._session.flush()
        return self._to_entity(model)

    async def adjust_customer_count(self, full_tag: str, delta: int) -> None:
        """Add ``delta`` to the usage counter, never going below zero."""
        adjusted = CustomerTagModel.customer_count + delta
        stmt = (
            update(CustomerTagModel)
            .where(CustomerTagModel.full_tag == full_tag)
            .values(customer_count=case((adjusted < 0, 0), else_=adjusted))
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    async def set_customer_count(self, full_tag: str, count: int) -> None:
        """Overwrite the usage counter."""
        stmt = (
            update(CustomerTagModel)
            .where(CustomerTagModel.full_tag == full_tag)
            .values(customer_count=max(count, 0))
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    def _to_entity(self, model: CustomerTagModel) -> TagDefinition:
        """Convert ORM model to domain entity."""
        return TagDefinition(
            tag_id=model.tag_id,
            prefix=model.prefix,
            code=model.code,
            description=model.description,
            color=model.color,
            is_active=model.is_active,
            customer_count=model.customer_count,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: TagDefinition) -> CustomerTagModel:
        """Convert domain entity to ORM model."""
        return CustomerTagModel(
            tag_id=entity.tag_id,
            prefix=entity.prefix,
            code=entity.code,
            full_tag=entity.full_tag,
            description=entity.description,
            color=entity.color,
            is_active=entity.is_active,
            customer_count=entity.customer_count,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
