"""SQLAlchemy models for the catalog.

Defines Category, Product and Topping tables. Price configuration and
attributes are stored as JSON documents (JSONB on PostgreSQL).
"""

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, Boolean, DateTime, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from catalog_service.infrastructure.database import Base

JSONDocument = JSON().with_variant(JSONB(), "postgresql")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


class Category(Base):
    """Category of products.

    A category declares the pricing dimensions and the selectable
    attributes its products may carry.

    Attributes:
        id: Unique category identifier (UUID).
        name: Display name.
        price_configuration: Mapping of configuration key to
            ``{"priceType", "availableOptions": [labels]}``.
        attributes: List of
            ``{"name", "widgetType", "defaultValue", "availableOptions"}``.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    price_configuration: Mapped[dict[str, Any]] = mapped_column(JSONDocument, nullable=False)
    attributes: Mapped[list[dict[str, Any]]] = mapped_column(JSONDocument, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Category(id={self.id}, name={self.name})>"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary.

        Returns:
            Dictionary representation.
        """
        return {
            "id": self.id,
            "name": self.name,
            "priceConfiguration": self.price_configuration,
            "attributes": self.attributes,
            "createdAt": _isoformat(self.created_at),
            "updatedAt": _isoformat(self.updated_at),
        }


class Product(Base):
    """Product sold by a tenant.

    ``category_id`` carries no foreign key: deleting a category leaves
    its products in place and listings drop them.

    Attributes:
        id: Unique product identifier (UUID).
        tenant_id: Tenant that owns the product.
        category_id: Category the product belongs to.
        name: Product name.
        description: Product description.
        image: Object-store key of the product image.
        price_configuration: Mapping of configuration key to
            ``{"priceType", "availableOptions": {label: price}}``.
        attributes: List of ``{"name", "value"}``.
        is_publish: Whether the product is visible to customers.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    tenant_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    category_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[str] = mapped_column(String(1000), nullable=False)
    price_configuration: Mapped[dict[str, Any]] = mapped_column(JSONDocument, nullable=False)
    attributes: Mapped[list[dict[str, Any]]] = mapped_column(JSONDocument, nullable=False)
    is_publish: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, tenant_id={self.tenant_id}, name={self.name[:30]})>"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary.

        Returns:
            Dictionary representation.
        """
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "image": self.image,
            "priceConfiguration": self.price_configuration,
            "attributes": self.attributes,
            "tenantId": self.tenant_id,
            "categoryId": self.category_id,
            "isPublish": self.is_publish,
            "createdAt": _isoformat(self.created_at),
            "updatedAt": _isoformat(self.updated_at),
        }


class Topping(Base):
    """Priced add-on sold by a tenant.

    Attributes:
        id: Unique topping identifier (UUID).
        tenant_id: Tenant that owns the topping.
        name: Topping name.
        price: Price as a decimal string.
        image: Object-store key of the topping image.
        is_publish: Whether the topping is visible to customers.
    """

    __tablename__ = "toppings"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    tenant_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    price: Mapped[str] = mapped_column(String(32), nullable=False)
    image: Mapped[str] = mapped_column(String(1000), nullable=False)
    is_publish: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Topping(id={self.id}, name={self.name})>"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary.

        Returns:
            Dictionary representation.
        """
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "image": self.image,
            "tenantId": self.tenant_id,
            "isPublish": self.is_publish,
            "createdAt": _isoformat(self.created_at),
            "updatedAt": _isoformat(self.updated_at),
        }
