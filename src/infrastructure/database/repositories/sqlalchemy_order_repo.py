"""SQLAlchemy implementation of Order repository."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.order import Order, OrderStatus
from infrastructure.database.models import OrderModel


class SQLAlchemyOrderRepository:
    """SQLAlchemy implementation of IOrderRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Order | None:
        """Get an order by ID."""
        model = await self._session.get(OrderModel, id)
        return self._to_entity(model) if model else None

    async def get_current_cart(
        self, customer_id: UUID, shipping_address_id: UUID
    ) -> Order | None:
        """Get the current draft cart for a customer + address pair."""
        stmt = (
            select(OrderModel)
            .where(
                OrderModel.customer_id == customer_id,
                OrderModel.shipping_address_id == shipping_address_id,
                OrderModel.is_current.is_(True),
                OrderModel.status == OrderStatus.DRAFT.value,
            )
            .order_by(OrderModel.created_at.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalars().first()
        return self._to_entity(model) if model else None

    async def next_cart_number(self, year: int) -> int:
        """Next sequential cart number for the given year."""
        stmt = select(func.max(OrderModel.cart_number)).where(OrderModel.year == year)
        result = await self._session.execute(stmt)
        return (result.scalar() or 0) + 1

    async def create(self, order: Order) -> Order:
        """Create a new order."""
        model = self._to_model(order)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, order: Order) -> Order:
        """Update status and current flag. ``effective_tags`` is never rewritten."""
        model = await self._session.get(OrderModel, order.id)
        if not model:
            raise ValueError(f"Order {order.id} not found")

        model.status = order.status.value
        model.is_current = order.is_current
        model.updated_at = order.updated_at

        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    def _to_entity(self, model: OrderModel) -> Order:
        """Convert ORM model to domain entity."""
        return Order(
            id=model.id,
            customer_id=model.customer_id,
            shipping_address_id=model.shipping_address_id,
            cart_number=model.cart_number,
            year=model.year,
            status=OrderStatus(model.status),
            is_current=model.is_current,
            effective_tags=tuple(model.effective_tags or ()),
            price_list_id=model.price_list_id,
            currency=model.currency,
            pricelist_type=model.pricelist_type,
            pricelist_code=model.pricelist_code,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Order) -> OrderModel:
        """Convert domain entity to ORM model."""
        return OrderModel(
            id=entity.id,
            customer_id=entity.customer_id,
            shipping_address_id=entity.shipping_address_id,
            cart_number=entity.cart_number,
            year=entity.year,
            status=entity.status.value,
            is_current=entity.is_current,
            effective_tags=list(entity.effective_tags),
            price_list_id=entity.price_list_id,
            currency=entity.currency,
            pricelist_type=entity.pricelist_type,
            pricelist_code=entity.pricelist_code,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
