"""Tests for price configuration and attribute validation."""

from decimal import Decimal
from typing import Any

import pytest

from catalog_service.domain import (
    CategorySchema,
    InvalidDefault,
    InvalidEnum,
    InvalidOptions,
    PriceType,
    ShapeMismatch,
    ValidationFailure,
    WidgetType,
    dump_attributes,
    dump_price_configuration,
    parse_topping_price,
    validate_category,
    validate_product,
)


def category_price_configuration() -> dict[str, Any]:
    return {
        "size": {"priceType": "base", "availableOptions": ["S", "M", "L"]},
        "crust": {"priceType": "additional", "availableOptions": ["thin", "thick"]},
    }


def category_attributes() -> list[dict[str, Any]]:
    return [
        {
            "name": "isHit",
            "widgetType": "switch",
            "defaultValue": "No",
            "availableOptions": ["Yes", "No"],
        },
        {
            "name": "spiciness",
            "widgetType": "radio",
            "defaultValue": "Medium",
            "availableOptions": ["Less", "Medium", "Hot"],
        },
    ]


@pytest.fixture
def schema() -> CategorySchema:
    """Create the Pizza category schema."""
    return validate_category(category_price_configuration(), category_attributes())


class TestValidateCategory:
    """Tests for category validation."""

    def test_valid_category(self, schema: CategorySchema) -> None:
        """A valid payload produces typed options and attributes."""
        size = schema.price_configuration["size"]
        assert size.price_type is PriceType.BASE
        assert size.available_options == ("S", "M", "L")
        assert schema.attribute("spiciness").widget_type is WidgetType.RADIO
        assert schema.attribute("missing") is None

    def test_dump_round_trips_document(self, schema: CategorySchema) -> None:
        """Stored documents keep the request's shape."""
        assert dump_price_configuration(schema.price_configuration) == (
            category_price_configuration()
        )
        assert dump_attributes(schema.attributes) == category_attributes()

    def test_from_document(self) -> None:
        """Schemas can be rebuilt from stored documents."""
        schema = CategorySchema.from_document(category_price_configuration(), [])
        assert list(schema.price_configuration) == ["size", "crust"]
        assert schema.attributes == ()

    def test_unknown_price_type(self) -> None:
        """priceType must be base or additional."""
        configuration = category_price_configuration()
        configuration["size"]["priceType"] = "premium"
        with pytest.raises(InvalidEnum) as exc_info:
            validate_category(configuration, [])
        assert exc_info.value.message == "premium is invalid attribute for priceType"
        assert exc_info.value.details["allowed"] == ["base", "additional"]

    def test_missing_price_type(self) -> None:
        """priceType is required."""
        configuration = {"size": {"availableOptions": ["S"]}}
        with pytest.raises(ValidationFailure, match="priceType is required"):
            validate_category(configuration, [])

    def test_requires_base_price(self) -> None:
        """At least one dimension must be a base price."""
        configuration = {"crust": {"priceType": "additional", "availableOptions": ["thin"]}}
        with pytest.raises(ShapeMismatch):
            validate_category(configuration, [])

    @pytest.mark.parametrize(
        "configuration",
        [
            [],
            {},
            "size",
            {"size": "base"},
        ],
    )
    def test_malformed_price_configuration(self, configuration: Any) -> None:
        """priceConfiguration must be a non-empty mapping of objects."""
        with pytest.raises(ShapeMismatch):
            validate_category(configuration, [])

    @pytest.mark.parametrize(
        "options",
        [
            [],
            "S,M,L",
            ["S", "S"],
            ["S", ""],
            ["S", 1],
            None,
        ],
    )
    def test_invalid_category_options(self, options: Any) -> None:
        """availableOptions must be a non-empty list of unique labels."""
        configuration = {"size": {"priceType": "base", "availableOptions": options}}
        with pytest.raises(InvalidOptions):
            validate_category(configuration, [])

    def test_missing_attributes(self) -> None:
        """attributes is required, even if empty."""
        with pytest.raises(ValidationFailure, match="attributes is required"):
            validate_category(category_price_configuration(), None)

    def test_unknown_widget_type(self) -> None:
        """widgetType must be switch or radio."""
        attributes = category_attributes()
        attributes[0]["widgetType"] = "slider"
        with pytest.raises(InvalidEnum):
            validate_category(category_price_configuration(), attributes)

    def test_default_outside_options(self) -> None:
        """defaultValue must be one of the attribute's options."""
        attributes = category_attributes()
        attributes[1]["defaultValue"] = "Nuclear"
        with pytest.raises(InvalidDefault) as exc_info:
            validate_category(category_price_configuration(), attributes)
        assert exc_info.value.details["attribute"] == "spiciness"

    def test_duplicate_attribute_names(self) -> None:
        """Attribute names are unique within a category."""
        attributes = category_attributes()
        attributes[1]["name"] = "isHit"
        with pytest.raises(ShapeMismatch):
            validate_category(category_price_configuration(), attributes)

    def test_attribute_without_name(self) -> None:
        """Attributes need a name."""
        attributes = category_attributes()
        del attributes[0]["name"]
        with pytest.raises(ShapeMismatch):
            validate_category(category_price_configuration(), attributes)


class TestValidateProduct:
    """Tests for product validation against a category."""

    def test_valid_product(self, schema: CategorySchema) -> None:
        """A product may price a subset of the category's options."""
        price_configuration, attributes = validate_product(
            schema,
            {
                "size": {"priceType": "base", "availableOptions": {"S": 100, "M": 150, "L": 200}},
                "crust": {"priceType": "additional", "availableOptions": {"thick": 20.5}},
            },
            [{"name": "isHit", "value": "Yes"}, {"name": "spiciness", "value": "Hot"}],
        )
        assert price_configuration["size"].prices == {"S": 100, "M": 150, "L": 200}
        assert price_configuration["crust"].labels == ["thick"]
        assert [a.value for a in attributes] == ["Yes", "Hot"]

    def test_switch_accepts_boolean(self, schema: CategorySchema) -> None:
        """Switch attributes accept a boolean value."""
        _, attributes = validate_product(
            schema,
            {"size": {"priceType": "base", "availableOptions": {"S": 100}}},
            [{"name": "isHit", "value": True}],
        )
        assert attributes[0].value is True

    def test_radio_rejects_boolean(self, schema: CategorySchema) -> None:
        """Radio attributes need one of their options."""
        with pytest.raises(InvalidOptions):
            validate_product(
                schema,
                {"size": {"priceType": "base", "availableOptions": {"S": 100}}},
                [{"name": "spiciness", "value": True}],
            )

    def test_undeclared_key(self, schema: CategorySchema) -> None:
        """Keys must be declared by the category."""
        with pytest.raises(ShapeMismatch) as exc_info:
            validate_product(
                schema,
                {"weight": {"priceType": "base", "availableOptions": {"1kg": 100}}},
                [],
            )
        assert exc_info.value.details == {
            "unknown_keys": ["weight"],
            "allowed_keys": ["size", "crust"],
        }

    def test_price_type_mismatch(self, schema: CategorySchema) -> None:
        """priceType must agree with the category."""
        with pytest.raises(ShapeMismatch):
            validate_product(
                schema,
                {"size": {"priceType": "additional", "availableOptions": {"S": 100}}},
                [],
            )

    def test_undeclared_option(self, schema: CategorySchema) -> None:
        """Options must be offered by the category."""
        with pytest.raises(InvalidOptions) as exc_info:
            validate_product(
                schema,
                {"size": {"priceType": "base", "availableOptions": {"XXL": 300}}},
                [],
            )
        assert exc_info.value.details["unknown_options"] == ["XXL"]

    @pytest.mark.parametrize("price", [-1, "100", True, None, float("inf")])
    def test_invalid_price(self, schema: CategorySchema, price: Any) -> None:
        """Prices are non-negative finite numbers."""
        with pytest.raises(InvalidOptions):
            validate_product(
                schema,
                {"size": {"priceType": "base", "availableOptions": {"S": price}}},
                [],
            )

    def test_prices_are_decimals(self, schema: CategorySchema) -> None:
        """Prices are held as Decimal and stored as plain JSON numbers."""
        price_configuration, _ = validate_product(
            schema,
            {"crust": {"priceType": "additional", "availableOptions": {"thin": 0, "thick": 20.5}}},
            [],
        )
        assert price_configuration["crust"].prices == {
            "thin": Decimal("0"),
            "thick": Decimal("20.5"),
        }
        assert dump_price_configuration(price_configuration) == {
            "crust": {"priceType": "additional", "availableOptions": {"thin": 0, "thick": 20.5}},
        }

    def test_very_large_integer_price(self, schema: CategorySchema) -> None:
        """Integers beyond float range are still exact prices."""
        price_configuration, _ = validate_product(
            schema,
            {"size": {"priceType": "base", "availableOptions": {"S": 10**400}}},
            [],
        )
        assert price_configuration["size"].prices["S"] == Decimal(10**400)
        assert dump_price_configuration(price_configuration)["size"]["availableOptions"] == {
            "S": 10**400
        }

    def test_undeclared_key_checked_before_entries(self, schema: CategorySchema) -> None:
        """An undeclared key is reported even when its entry is malformed."""
        with pytest.raises(ShapeMismatch) as exc_info:
            validate_product(
                schema,
                {
                    "size": {"priceType": "base", "availableOptions": {"S": 100}},
                    "weight": {"priceType": "bogus", "availableOptions": {"1kg": 100}},
                },
                [],
            )
        assert exc_info.value.details["unknown_keys"] == ["weight"]

    def test_options_as_list_rejected(self, schema: CategorySchema) -> None:
        """Product options map labels to prices."""
        with pytest.raises(InvalidOptions):
            validate_product(
                schema,
                {"size": {"priceType": "base", "availableOptions": ["S"]}},
                [],
            )

    def test_undeclared_attribute(self, schema: CategorySchema) -> None:
        """Attributes must be declared by the category."""
        with pytest.raises(ShapeMismatch):
            validate_product(
                schema,
                {"size": {"priceType": "base", "availableOptions": {"S": 100}}},
                [{"name": "vegan", "value": "Yes"}],
            )

    def test_attribute_value_type(self, schema: CategorySchema) -> None:
        """Attribute values are strings or booleans."""
        with pytest.raises(ShapeMismatch):
            validate_product(
                schema,
                {"size": {"priceType": "base", "availableOptions": {"S": 100}}},
                [{"name": "isHit", "value": 1}],
            )

    def test_duplicate_attribute(self, schema: CategorySchema) -> None:
        """Each attribute is given once."""
        with pytest.raises(ShapeMismatch):
            validate_product(
                schema,
                {"size": {"priceType": "base", "availableOptions": {"S": 100}}},
                [{"name": "isHit", "value": "Yes"}, {"name": "isHit", "value": "No"}],
            )

    def test_missing_price_configuration(self, schema: CategorySchema) -> None:
        """priceConfiguration is required."""
        with pytest.raises(ValidationFailure, match="priceConfiguration is required"):
            validate_product(schema, None, [])


class TestParseToppingPrice:
    """Tests for topping price parsing."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("50", "50"), ("12.50", "12.50"), (7, "7"), (0, "0"), (" 3.5 ", "3.5")],
    )
    def test_valid_prices(self, raw: Any, expected: str) -> None:
        """Numeric input is stored as its decimal string."""
        assert parse_topping_price(raw) == expected

    def test_missing_price(self) -> None:
        """Price is required."""
        with pytest.raises(ValidationFailure, match="Price is required"):
            parse_topping_price("")

    @pytest.mark.parametrize("raw", ["cheap", True, "1e"])
    def test_non_numeric_price(self, raw: Any) -> None:
        """Price must be a number."""
        with pytest.raises(ValidationFailure, match="Price must be a Number"):
            parse_topping_price(raw)

    @pytest.mark.parametrize("raw", ["-1", "NaN", "Infinity"])
    def test_out_of_range_price(self, raw: str) -> None:
        """Price must be a non-negative finite number."""
        with pytest.raises(ValidationFailure, match="non-negative"):
            parse_topping_price(raw)
