"""Domain events for the catalog.

Published after every product and topping mutation so that downstream
services (the order service in particular) can keep current prices
without querying the catalog.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar

from catalog_service.domain.base import DomainEvent
from catalog_service.infrastructure.config import settings


# ============================================================================
# Product Events
# ============================================================================


@dataclass(frozen=True)
class ProductEvent(DomainEvent):
    """Base for product change events."""

    topic: ClassVar[str] = settings.product_topic

    product_id: str = ""
    tenant_id: str = ""
    price_configuration: dict[str, Any] = field(default_factory=dict)

    def _payload(self) -> dict[str, Any]:
        """Get event-specific payload."""
        return {
            "id": self.product_id,
            "priceConfiguration": self.price_configuration,
            "tenantId": self.tenant_id,
        }


@dataclass(frozen=True)
class ProductCreated(ProductEvent):
    """Event raised when a product is created."""

    event_type: ClassVar[str] = "product-create"


@dataclass(frozen=True)
class ProductUpdated(ProductEvent):
    """Event raised when a product is updated."""

    event_type: ClassVar[str] = "product-update"


@dataclass(frozen=True)
class ProductDeleted(ProductEvent):
    """Event raised when a product is deleted."""

    event_type: ClassVar[str] = "product-delete"


# ============================================================================
# Topping Events
# ============================================================================


@dataclass(frozen=True)
class ToppingEvent(DomainEvent):
    """Base for topping change events."""

    topic: ClassVar[str] = settings.topping_topic

    topping_id: str = ""
    tenant_id: str = ""
    price: str = ""

    def _payload(self) -> dict[str, Any]:
        """Get event-specific payload."""
        return {
            "id": self.topping_id,
            "price": self.price,
            "tenantId": self.tenant_id,
        }


@dataclass(frozen=True)
class ToppingCreated(ToppingEvent):
    """Event raised when a topping is created."""

    event_type: ClassVar[str] = "topping-create"


@dataclass(frozen=True)
class ToppingUpdated(ToppingEvent):
    """Event raised when a topping is updated."""

    event_type: ClassVar[str] = "topping-update"


@dataclass(frozen=True)
class ToppingDeleted(ToppingEvent):
    """Event raised when a topping is deleted."""

    event_type: ClassVar[str] = "topping-delete"
