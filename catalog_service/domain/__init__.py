"""Domain layer - value objects, validation rules, access rules, domain events.

This module exports the core catalog building blocks:

- **Pricing**: Typed price configuration and attribute value objects and
  the validator that checks product payloads against their category
- **Access**: Role and tenant rules for mutations
- **Domain Events**: Change notifications published to the broker
- **Exceptions**: Domain-specific errors and invariant violations

Example usage:
    from catalog_service.domain import validate_category, validate_product

    schema = validate_category(
        {"size": {"priceType": "base", "availableOptions": ["S", "M", "L"]}},
        [],
    )
    price_configuration, attributes = validate_product(
        schema,
        {"size": {"priceType": "base", "availableOptions": {"S": 100, "M": 150}}},
        [],
    )
"""

# Base classes
from catalog_service.domain.base import DomainEvent, ValueObject

# Access rules
from catalog_service.domain.access import (
    AuthenticatedUser,
    Role,
    ensure_can_mutate,
    ensure_role,
)

# Domain Events
from catalog_service.domain.events import (
    ProductCreated,
    ProductDeleted,
    ProductEvent,
    ProductUpdated,
    ToppingCreated,
    ToppingDeleted,
    ToppingEvent,
    ToppingUpdated,
)

# Exceptions
from catalog_service.domain.exceptions import (
    ConfigurationError,
    DomainError,
    Forbidden,
    InvalidDefault,
    InvalidEnum,
    InvalidOptions,
    NotFound,
    ShapeMismatch,
    Unauthorized,
    UpstreamFailure,
    ValidationFailure,
)

# Pricing
from catalog_service.domain.pricing import (
    CategoryAttribute,
    CategoryPriceOption,
    CategorySchema,
    PriceType,
    ProductAttribute,
    ProductPriceOption,
    WidgetType,
    dump_attributes,
    dump_price_configuration,
    parse_topping_price,
    validate_category,
    validate_product,
)

__all__ = [
    # Base
    "DomainEvent",
    "ValueObject",
    # Access
    "AuthenticatedUser",
    "Role",
    "ensure_can_mutate",
    "ensure_role",
    # Events
    "ProductCreated",
    "ProductDeleted",
    "ProductEvent",
    "ProductUpdated",
    "ToppingCreated",
    "ToppingDeleted",
    "ToppingEvent",
    "ToppingUpdated",
    # Exceptions
    "ConfigurationError",
    "DomainError",
    "Forbidden",
    "InvalidDefault",
    "InvalidEnum",
    "InvalidOptions",
    "NotFound",
    "ShapeMismatch",
    "Unauthorized",
    "UpstreamFailure",
    "ValidationFailure",
    # Pricing
    "CategoryAttribute",
    "CategoryPriceOption",
    "CategorySchema",
    "PriceType",
    "ProductAttribute",
    "ProductPriceOption",
    "WidgetType",
    "dump_attributes",
    "dump_price_configuration",
    "parse_topping_price",
    "validate_category",
    "validate_product",
]
