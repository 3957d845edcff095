"""SQLAlchemy ORM models."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class CustomerTagModel(Base):
    """Tag catalog entry."""

    __tablename__ = "customer_tags"
    __table_args__ = (UniqueConstraint("prefix", "code", name="uq_customer_tags_prefix_code"),)

    tag_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    prefix: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    code: Mapped[str] = mapped_column(String(100), nullable=False)
    full_tag: Mapped[str] = mapped_column(String(201), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text)
    color: Mapped[str | None] = mapped_column(String(7))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    customer_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )


class CustomerModel(Base):
    """Customer model. ``tags`` holds TagReference dicts."""

    __tablename__ = "customers"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    customer_code: Mapped[str | None] = mapped_column(String(100), index=True)
    customer_type: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint("customer_type IN ('business', 'private')"),
        nullable=False,
        default="business",
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    company_name: Mapped[str | None] = mapped_column(String(255))
    first_name: Mapped[str | None] = mapped_column(String(100))
    last_name: Mapped[str | None] = mapped_column(String(100))
    tags: Mapped[list[dict[str, Any]]] = mapped_column(JSONB, default=list, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    addresses: Mapped[list["AddressModel"]] = relationship(
        "AddressModel",
        back_populates="customer",
        cascade="all, delete-orphan",
        order_by="AddressModel.position",
        lazy="selectin",
    )


class AddressModel(Base):
    """Customer delivery address. ``tag_overrides`` holds TagReference dicts."""

    __tablename__ = "customer_addresses"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    customer_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    external_code: Mapped[str | None] = mapped_column(String(100))
    label: Mapped[str | None] = mapped_column(String(255))
    street: Mapped[str | None] = mapped_column(String(255))
    city: Mapped[str | None] = mapped_column(String(100))
    postal_code: Mapped[str | None] = mapped_column(String(20))
    country: Mapped[str] = mapped_column(String(2), default="IT", nullable=False)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    tag_overrides: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONB, default=list, nullable=False
    )

    # Relationships
    customer: Mapped["CustomerModel"] = relationship(
        "CustomerModel",
        back_populates="addresses",
    )


class OrderModel(Base):
    """Order model; a cart is an order in ``draft``."""

    __tablename__ = "orders"
    __table_args__ = (
        Index(
            "ix_orders_current_cart",
            "customer_id",
            "shipping_address_id",
            "is_current",
        ),
        UniqueConstraint("year", "cart_number", name="uq_orders_year_cart_number"),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    cart_number: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint("status IN ('draft', 'pending')"),
        nullable=False,
        default="draft",
    )
    is_current: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    customer_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False,
    )
    shipping_address_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("customer_addresses.id", ondelete="CASCADE"),
        nullable=False,
    )
    effective_tags: Mapped[list[str]] = mapped_column(JSONB, default=list, nullable=False)
    price_list_id: Mapped[str] = mapped_column(String(100), default="default", nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default="EUR", nullable=False)
    pricelist_type: Mapped[str | None] = mapped_column(String(50))
    pricelist_code: Mapped[str | None] = mapped_column(String(50))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )
