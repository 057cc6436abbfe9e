"""API schemas for the catalog service.

Pydantic models for request/response validation and serialization.
Field names on the wire are camelCase.
"""

from typing import Any

from pydantic import BaseModel, Field


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] | list[Any] = Field(
        default_factory=dict, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


class CreatedResponse(BaseModel):
    """Identifier of a created or updated entity."""

    id: str = Field(..., description="Entity identifier")


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


# ============================================================================
# Category Schemas
# ============================================================================


class CategoryRequest(BaseModel):
    """Request to create or replace a category.

    ``priceConfiguration`` and ``attributes`` are checked by the pricing
    validator, which reports the precise rule a payload breaks.
    """

    name: str = Field(..., min_length=1, max_length=200, description="Category name")
    price_configuration: Any = Field(
        default=None,
        alias="priceConfiguration",
        description="Mapping of key to {priceType, availableOptions: [labels]}",
    )
    attributes: Any = Field(
        default=None,
        description="List of {name, widgetType, defaultValue, availableOptions}",
    )

    model_config = {"populate_by_name": True}


class CategoryResponse(BaseModel):
    """Category representation."""

    id: str
    name: str
    price_configuration: dict[str, Any] = Field(..., alias="priceConfiguration")
    attributes: list[dict[str, Any]]
    created_at: str | None = Field(default=None, alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")

    model_config = {"populate_by_name": True}


class CategoryUpdatedResponse(BaseModel):
    """Response of a category update."""

    message: str
    category: CategoryResponse


# ============================================================================
# Product Schemas
# ============================================================================


class ProductCategorySchema(BaseModel):
    """Category inlined into a product listing."""

    id: str
    name: str
    price_configuration: dict[str, Any] = Field(..., alias="priceConfiguration")
    attributes: list[dict[str, Any]]

    model_config = {"populate_by_name": True}


class ProductResponse(BaseModel):
    """Product representation with its image resolved to a URL."""

    id: str
    name: str
    description: str
    image: str = Field(..., description="Public image URL")
    price_configuration: dict[str, Any] = Field(..., alias="priceConfiguration")
    attributes: list[dict[str, Any]]
    tenant_id: str = Field(..., alias="tenantId")
    category_id: str = Field(..., alias="categoryId")
    is_publish: bool = Field(..., alias="isPublish")
    created_at: str | None = Field(default=None, alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")
    category: ProductCategorySchema | None = None

    model_config = {"populate_by_name": True}


class ProductsPageResponse(BaseModel):
    """One page of products."""

    data: list[ProductResponse]
    total: int = Field(..., description="Matching products across all pages")
    page_size: int = Field(..., alias="pageSize")
    current_page: int = Field(..., alias="currentPage")

    model_config = {"populate_by_name": True}


# ============================================================================
# Topping Schemas
# ============================================================================


class ToppingResponse(BaseModel):
    """Topping representation with its image resolved to a URL."""

    id: str
    name: str
    price: str
    image: str = Field(..., description="Public image URL")
    tenant_id: str = Field(..., alias="tenantId")
    is_publish: bool = Field(..., alias="isPublish")
    created_at: str | None = Field(default=None, alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")

    model_config = {"populate_by_name": True}


class ToppingsListResponse(BaseModel):
    """List of toppings."""

    data: list[ToppingResponse]
