"""Price configuration and attribute validation.

A category declares which pricing dimensions (e.g. "size") and which
selectable attributes (e.g. "spiciness") its products may carry. This
module turns raw request payloads into typed value objects and checks
product payloads against the category that owns them.

All functions are pure: they either return value objects or raise a
subclass of ``ValidationFailure``. Nothing here touches storage.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from catalog_service.domain.base import ValueObject
from catalog_service.domain.exceptions import (
    InvalidDefault,
    InvalidEnum,
    InvalidOptions,
    ShapeMismatch,
    ValidationFailure,
)

Price = Decimal
AttributeValue = str | bool


class PriceType(str, Enum):
    """How an option contributes to the final price."""

    BASE = "base"
    ADDITIONAL = "additional"


class WidgetType(str, Enum):
    """How an attribute is rendered to the customer."""

    SWITCH = "switch"
    RADIO = "radio"


# ============================================================================
# Value Objects
# ============================================================================


@dataclass(frozen=True)
class CategoryPriceOption(ValueObject):
    """A pricing dimension declared by a category.

    Attributes:
        price_type: Base or additional price.
        available_options: Ordered, unique option labels (e.g. S, M, L).
    """

    price_type: PriceType
    available_options: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        """Convert to document form."""
        return {
            "priceType": self.price_type.value,
            "availableOptions": list(self.available_options),
        }


@dataclass(frozen=True)
class CategoryAttribute(ValueObject):
    """A selectable attribute declared by a category."""

    name: str
    widget_type: WidgetType
    default_value: AttributeValue
    available_options: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        """Convert to document form."""
        return {
            "name": self.name,
            "widgetType": self.widget_type.value,
            "defaultValue": self.default_value,
            "availableOptions": list(self.available_options),
        }


@dataclass(frozen=True)
class ProductPriceOption(ValueObject):
    """A priced pricing dimension on a product.

    Attributes:
        price_type: Base or additional price.
        available_options: Ordered (label, Decimal price) pairs.
    """

    price_type: PriceType
    available_options: tuple[tuple[str, Price], ...]

    @property
    def labels(self) -> list[str]:
        """Option labels in declaration order."""
        return [label for label, _ in self.available_options]

    @property
    def prices(self) -> dict[str, Price]:
        """Mapping from option label to price."""
        return dict(self.available_options)

    def to_dict(self) -> dict[str, Any]:
        """Convert to document form, prices as JSON numbers."""
        return {
            "priceType": self.price_type.value,
            "availableOptions": {
                label: _price_to_number(price) for label, price in self.available_options
            },
        }


@dataclass(frozen=True)
class ProductAttribute(ValueObject):
    """A chosen attribute value on a product."""

    name: str
    value: AttributeValue

    def to_dict(self) -> dict[str, Any]:
        """Convert to document form."""
        return {"name": self.name, "value": self.value}


@dataclass(frozen=True)
class CategorySchema:
    """Everything a category constrains about its products."""

    price_configuration: dict[str, CategoryPriceOption]
    attributes: tuple[CategoryAttribute, ...]

    @classmethod
    def from_document(
        cls,
        price_configuration: Any,
        attributes: Any,
    ) -> "CategorySchema":
        """Rebuild a schema from a stored category document.

        Args:
            price_configuration: Stored priceConfiguration mapping.
            attributes: Stored attributes list.

        Returns:
            Parsed schema.
        """
        return validate_category(price_configuration, attributes)

    def attribute(self, name: str) -> CategoryAttribute | None:
        """Look up a declared attribute by name."""
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None


# ============================================================================
# Field Parsers
# ============================================================================


def _parse_enum(enum_cls: type[Enum], value: Any, field: str) -> Any:
    if value is None:
        raise ValidationFailure(
            f"{field} is required",
            details={"field": field},
        )
    try:
        return enum_cls(value)
    except (ValueError, TypeError):
        raise InvalidEnum(field, value, [member.value for member in enum_cls]) from None


def _parse_labels(raw: Any, field: str) -> tuple[str, ...]:
    """Parse a non-empty list of unique, non-empty string labels."""
    if isinstance(raw, str) or not isinstance(raw, Sequence) or not raw:
        raise InvalidOptions(
            f"{field} must be a non-empty list of option labels",
            details={"field": field},
        )
    labels: list[str] = []
    for label in raw:
        if not isinstance(label, str) or not label.strip():
            raise InvalidOptions(
                f"{field} contains an invalid option label: {label!r}",
                details={"field": field, "label": label},
            )
        if label in labels:
            raise InvalidOptions(
                f"{field} contains duplicate option '{label}'",
                details={"field": field, "label": label},
            )
        labels.append(label)
    return tuple(labels)


def _parse_price(value: Any, field: str, label: str) -> Price:
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise InvalidOptions(
            f"Price of option '{label}' in {field} must be a number",
            details={"field": field, "label": label, "value": value},
        )
    # floats go through repr so 20.5 stays 20.5
    price = Decimal(repr(value)) if isinstance(value, float) else Decimal(value)
    if not price.is_finite() or price < 0:
        raise InvalidOptions(
            f"Price of option '{label}' in {field} must be a non-negative number",
            details={"field": field, "label": label},
        )
    return price


def _price_to_number(price: Price) -> int | float:
    if price == price.to_integral_value():
        return int(price)
    return float(price)


def _require_mapping(raw: Any, field: str) -> Mapping[str, Any]:
    if raw is None:
        raise ValidationFailure(f"{field} is required", details={"field": field})
    if not isinstance(raw, Mapping) or not raw:
        raise ShapeMismatch(
            f"{field} must be a non-empty object",
            details={"field": field},
        )
    for key in raw:
        if not isinstance(key, str) or not key.strip():
            raise ShapeMismatch(
                f"{field} keys must be non-empty strings",
                details={"field": field, "key": key},
            )
    return raw


def _require_list(raw: Any, field: str) -> Sequence[Any]:
    if raw is None:
        raise ValidationFailure(f"{field} is required", details={"field": field})
    if isinstance(raw, (str, bytes, Mapping)) or not isinstance(raw, Sequence):
        raise ShapeMismatch(f"{field} must be a list", details={"field": field})
    return raw


def _require_entry(entry: Any, field: str) -> Mapping[str, Any]:
    if not isinstance(entry, Mapping):
        raise ShapeMismatch(f"{field} must be an object", details={"field": field})
    return entry


def _require_name(entry: Mapping[str, Any], field: str) -> str:
    name = entry.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ShapeMismatch(
            f"{field}.name must be a non-empty string",
            details={"field": f"{field}.name"},
        )
    return name


# ============================================================================
# Category Validation
# ============================================================================


def parse_category_price_configuration(raw: Any) -> dict[str, CategoryPriceOption]:
    """Parse a category's priceConfiguration payload.

    Args:
        raw: Mapping of configuration key to
            ``{"priceType": ..., "availableOptions": [...]}``.

    Returns:
        Mapping of configuration key to CategoryPriceOption.

    Raises:
        ShapeMismatch: If the payload is not a mapping of objects or
            declares no base price.
        InvalidEnum: If a priceType is not recognized.
        InvalidOptions: If availableOptions is not a non-empty list of
            unique labels.
    """
    mapping = _require_mapping(raw, "priceConfiguration")
    parsed: dict[str, CategoryPriceOption] = {}

    for key, entry in mapping.items():
        field = f"priceConfiguration.{key}"
        entry = _require_entry(entry, field)
        parsed[key] = CategoryPriceOption(
            price_type=_parse_enum(PriceType, entry.get("priceType"), "priceType"),
            available_options=_parse_labels(
                entry.get("availableOptions"), f"{field}.availableOptions"
            ),
        )

    if not any(option.price_type is PriceType.BASE for option in parsed.values()):
        raise ShapeMismatch(
            "priceConfiguration must declare at least one base price",
            details={"field": "priceConfiguration"},
        )
    return parsed


def parse_category_attributes(raw: Any) -> tuple[CategoryAttribute, ...]:
    """Parse a category's attributes payload.

    Raises:
        ValidationFailure: If attributes are missing.
        ShapeMismatch: If an attribute is malformed or its name repeats.
        InvalidEnum: If a widgetType is not recognized.
        InvalidOptions: If availableOptions is malformed.
        InvalidDefault: If defaultValue is not one of availableOptions.
    """
    items = _require_list(raw, "attributes")
    parsed: list[CategoryAttribute] = []
    seen: set[str] = set()

    for index, entry in enumerate(items):
        field = f"attributes[{index}]"
        entry = _require_entry(entry, field)
        name = _require_name(entry, field)
        if name in seen:
            raise ShapeMismatch(
                f"Attribute '{name}' is declared more than once",
                details={"field": field, "name": name},
            )
        seen.add(name)

        widget_type = _parse_enum(WidgetType, entry.get("widgetType"), "widgetType")
        options = _parse_labels(entry.get("availableOptions"), f"{field}.availableOptions")
        default = entry.get("defaultValue")
        if default not in options:
            raise InvalidDefault(name, default, list(options))

        parsed.append(
            CategoryAttribute(
                name=name,
                widget_type=widget_type,
                default_value=default,
                available_options=options,
            )
        )
    return tuple(parsed)


def validate_category(raw_price_configuration: Any, raw_attributes: Any) -> CategorySchema:
    """Validate a full category payload.

    Args:
        raw_price_configuration: priceConfiguration as received.
        raw_attributes: attributes as received.

    Returns:
        The category's schema.
    """
    return CategorySchema(
        price_configuration=parse_category_price_configuration(raw_price_configuration),
        attributes=parse_category_attributes(raw_attributes),
    )


# ============================================================================
# Product Validation
# ============================================================================


def parse_product_price_configuration(raw: Any) -> dict[str, ProductPriceOption]:
    """Parse a product's priceConfiguration payload.

    Args:
        raw: Mapping of configuration key to
            ``{"priceType": ..., "availableOptions": {label: price}}``.

    Returns:
        Mapping of configuration key to ProductPriceOption.
    """
    mapping = _require_mapping(raw, "priceConfiguration")
    parsed: dict[str, ProductPriceOption] = {}

    for key, entry in mapping.items():
        field = f"priceConfiguration.{key}"
        entry = _require_entry(entry, field)
        price_type = _parse_enum(PriceType, entry.get("priceType"), "priceType")

        options_field = f"{field}.availableOptions"
        options = entry.get("availableOptions")
        if not isinstance(options, Mapping) or not options:
            raise InvalidOptions(
                f"{options_field} must be a non-empty mapping of option to price",
                details={"field": options_field},
            )
        priced: list[tuple[str, Price]] = []
        for label, price in options.items():
            if not isinstance(label, str) or not label.strip():
                raise InvalidOptions(
                    f"{options_field} contains an invalid option label: {label!r}",
                    details={"field": options_field, "label": label},
                )
            priced.append((label, _parse_price(price, options_field, label)))

        parsed[key] = ProductPriceOption(price_type=price_type, available_options=tuple(priced))
    return parsed


def parse_product_attributes(raw: Any) -> tuple[ProductAttribute, ...]:
    """Parse a product's attributes payload (``[{name, value}]``)."""
    items = _require_list(raw, "attributes")
    parsed: list[ProductAttribute] = []
    seen: set[str] = set()

    for index, entry in enumerate(items):
        field = f"attributes[{index}]"
        entry = _require_entry(entry, field)
        name = _require_name(entry, field)
        if name in seen:
            raise ShapeMismatch(
                f"Attribute '{name}' is given more than once",
                details={"field": field, "name": name},
            )
        seen.add(name)

        value = entry.get("value")
        if not isinstance(value, (str, bool)):
            raise ShapeMismatch(
                f"{field}.value must be a string or a boolean",
                details={"field": f"{field}.value", "value": value},
            )
        parsed.append(ProductAttribute(name=name, value=value))
    return tuple(parsed)


def validate_product(
    schema: CategorySchema,
    raw_price_configuration: Any,
    raw_attributes: Any,
) -> tuple[dict[str, ProductPriceOption], tuple[ProductAttribute, ...]]:
    """Validate a product payload against its category.

    Args:
        schema: Schema of the category the product references.
        raw_price_configuration: priceConfiguration as received.
        raw_attributes: attributes as received.

    Returns:
        Parsed price configuration and attributes.

    Raises:
        ShapeMismatch: If a key or attribute is not declared by the
            category, or a priceType disagrees with the category.
        InvalidOptions: If an option is not declared by the category.
    """
    unknown = [
        key
        for key in _require_mapping(raw_price_configuration, "priceConfiguration")
        if key not in schema.price_configuration
    ]
    if unknown:
        raise ShapeMismatch(
            f"Price configuration keys {unknown} are not declared by the category",
            details={
                "unknown_keys": unknown,
                "allowed_keys": list(schema.price_configuration),
            },
        )

    price_configuration = parse_product_price_configuration(raw_price_configuration)
    for key, option in price_configuration.items():
        declared = schema.price_configuration[key]
        if option.price_type is not declared.price_type:
            raise ShapeMismatch(
                f"priceType of '{key}' must be '{declared.price_type.value}'",
                details={
                    "key": key,
                    "expected": declared.price_type.value,
                    "actual": option.price_type.value,
                },
            )
        undeclared = [label for label in option.labels if label not in declared.available_options]
        if undeclared:
            raise InvalidOptions(
                f"Options {undeclared} of '{key}' are not offered by the category",
                details={
                    "key": key,
                    "unknown_options": undeclared,
                    "allowed_options": list(declared.available_options),
                },
            )

    attributes = parse_product_attributes(raw_attributes)
    for attribute in attributes:
        declared_attribute = schema.attribute(attribute.name)
        if declared_attribute is None:
            raise ShapeMismatch(
                f"Attribute '{attribute.name}' is not declared by the category",
                details={"name": attribute.name},
            )
        allowed = declared_attribute.available_options
        if declared_attribute.widget_type is WidgetType.SWITCH and isinstance(attribute.value, bool):
            continue
        if attribute.value not in allowed:
            raise InvalidOptions(
                f"Value {attribute.value!r} of attribute '{attribute.name}' "
                f"is not one of {list(allowed)}",
                details={"name": attribute.name, "allowed_options": list(allowed)},
            )

    return price_configuration, attributes


# ============================================================================
# Document Helpers
# ============================================================================


def dump_price_configuration(
    configuration: Mapping[str, CategoryPriceOption | ProductPriceOption],
) -> dict[str, Any]:
    """Convert parsed price configuration to its stored document form."""
    return {key: option.to_dict() for key, option in configuration.items()}


def dump_attributes(
    attributes: Sequence[CategoryAttribute | ProductAttribute],
) -> list[dict[str, Any]]:
    """Convert parsed attributes to their stored document form."""
    return [attribute.to_dict() for attribute in attributes]


# ============================================================================
# Topping Price
# ============================================================================


def parse_topping_price(raw: Any) -> str:
    """Validate a topping price and return its stored string form.

    Args:
        raw: Price as received (number or numeric string).

    Returns:
        The price as a decimal string.

    Raises:
        ValidationFailure: If the price is missing, not numeric or negative.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise ValidationFailure("Price is required", details={"field": "price"})
    if isinstance(raw, bool):
        raise ValidationFailure("Price must be a Number", details={"field": "price"})
    try:
        price = Decimal(str(raw).strip())
    except InvalidOperation:
        raise ValidationFailure("Price must be a Number", details={"field": "price"}) from None
    if not price.is_finite() or price < 0:
        raise ValidationFailure(
            "Price must be a non-negative number",
            details={"field": "price", "value": str(raw)},
        )
    return str(price)
