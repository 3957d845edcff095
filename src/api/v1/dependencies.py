"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from domain.services.cart_service import CartService
from domain.services.customer_service import CustomerService
from domain.services.pricing_service import PricingService
from domain.services.tag_assignment_service import TagAssignmentService
from domain.services.tag_catalog_service import TagCatalogService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_tag_catalog_service() -> TagCatalogService:
    """Get tag catalog service instance."""
    return TagCatalogService(get_uow_factory())


@lru_cache
def get_tag_assignment_service() -> TagAssignmentService:
    """Get tag assignment service instance."""
    return TagAssignmentService(get_uow_factory())


@lru_cache
def get_customer_service() -> CustomerService:
    """Get Customer service instance."""
    return CustomerService(get_uow_factory())


@lru_cache
def get_cart_service() -> CartService:
    """Get Cart service instance."""
    return CartService(get_uow_factory())


@lru_cache
def get_pricing_service() -> PricingService:
    """Get Pricing service instance."""
    return PricingService(get_uow_factory())
