"""Request-scoped service wiring."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_service.catalog.service import CategoryService, ProductService, ToppingService
from catalog_service.infrastructure.broker import MessageProducer
from catalog_service.infrastructure.database import get_session
from catalog_service.infrastructure.storage import FileStorage


def get_storage(request: Request) -> FileStorage:
    """Get the image storage created at startup."""
    return request.app.state.storage


def get_message_producer(request: Request) -> MessageProducer:
    """Get the broker producer created at startup."""
    return request.app.state.producer


def get_category_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CategoryService:
    """Get category service for the request session."""
    return CategoryService(session)


def get_product_service(
    session: Annotated[AsyncSession, Depends(get_session)],
    storage: Annotated[FileStorage, Depends(get_storage)],
    producer: Annotated[MessageProducer, Depends(get_message_producer)],
) -> ProductService:
    """Get product service for the request session."""
    return ProductService(session, storage, producer)


def get_topping_service(
    session: Annotated[AsyncSession, Depends(get_session)],
    storage: Annotated[FileStorage, Depends(get_storage)],
    producer: Annotated[MessageProducer, Depends(get_message_producer)],
) -> ToppingService:
    """Get topping service for the request session."""
    return ToppingService(session, storage, producer)
