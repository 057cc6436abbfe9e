"""Category API endpoints.

Categories are readable by anyone and managed by admins.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from catalog_service.api.auth import require_roles
from catalog_service.api.dependencies import get_category_service
from catalog_service.api.schemas import (
    CategoryRequest,
    CategoryResponse,
    CategoryUpdatedResponse,
    CreatedResponse,
    ErrorResponse,
    MessageResponse,
)
from catalog_service.catalog.models import Category
from catalog_service.catalog.service import CategoryData, CategoryService
from catalog_service.domain.access import AuthenticatedUser, Role

router = APIRouter(prefix="/categories", tags=["Categories"])

AdminUser = Annotated[AuthenticatedUser, Depends(require_roles(Role.ADMIN))]
Service = Annotated[CategoryService, Depends(get_category_service)]


def category_to_response(category: Category) -> CategoryResponse:
    """Convert Category model to response schema."""
    return CategoryResponse(**category.to_dict())


def request_to_data(payload: CategoryRequest) -> CategoryData:
    """Convert request schema to service payload."""
    return CategoryData(
        name=payload.name,
        price_configuration=payload.price_configuration,
        attributes=payload.attributes,
    )


@router.post(
    "",
    response_model=CreatedResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
    },
    summary="Create category",
)
async def create_category(
    payload: CategoryRequest,
    user: AdminUser,
    service: Service,
) -> CreatedResponse:
    """Create a category after validating its pricing schema."""
    category = await service.create(request_to_data(payload))
    return CreatedResponse(id=category.id)


@router.get(
    "",
    response_model=list[CategoryResponse],
    summary="List categories",
)
async def list_categories(service: Service) -> list[CategoryResponse]:
    """List all categories."""
    categories = await service.list()
    return [category_to_response(category) for category in categories]


@router.get(
    "/{category_id}",
    response_model=CategoryResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get category",
)
async def get_category(category_id: str, service: Service) -> CategoryResponse:
    """Get a category by ID."""
    category = await service.get(category_id)
    return category_to_response(category)


@router.put(
    "/{category_id}",
    response_model=CategoryUpdatedResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Update category",
)
async def update_category(
    category_id: str,
    payload: CategoryRequest,
    user: AdminUser,
    service: Service,
) -> CategoryUpdatedResponse:
    """Replace a category's name, pricing schema and attributes."""
    category = await service.update(category_id, request_to_data(payload))
    return CategoryUpdatedResponse(
        message="Category updated successfully",
        category=category_to_response(category),
    )


@router.delete(
    "/{category_id}",
    response_model=MessageResponse,
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Delete category",
)
async def delete_category(
    category_id: str,
    user: AdminUser,
    service: Service,
) -> MessageResponse:
    """Delete a category. Products referencing it are kept."""
    await service.delete(category_id)
    return MessageResponse(message="Category deleted successfully")
