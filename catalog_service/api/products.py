"""Product API endpoints.

Products are created from multipart forms carrying the image file and
JSON-encoded ``priceConfiguration`` and ``attributes`` fields.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from catalog_service.api.auth import require_roles
from catalog_service.api.dependencies import get_product_service, get_storage
from catalog_service.api.schemas import (
    CreatedResponse,
    ErrorResponse,
    MessageResponse,
    ProductResponse,
    ProductsPageResponse,
)
from catalog_service.api.uploads import parse_json_field, read_image
from catalog_service.catalog.models import Product
from catalog_service.catalog.query import (
    DEFAULT_PAGE_SIZE,
    PaginationParams,
    ProductFilter,
    ProductView,
)
from catalog_service.catalog.service import ProductData, ProductService
from catalog_service.domain.access import AuthenticatedUser, Role
from catalog_service.infrastructure.storage import FileStorage

router = APIRouter(prefix="/products", tags=["Products"])

Service = Annotated[ProductService, Depends(get_product_service)]
Storage = Annotated[FileStorage, Depends(get_storage)]
StaffUser = Annotated[AuthenticatedUser, Depends(require_roles(Role.ADMIN, Role.MANAGER))]


# ============================================================================
# Converters
# ============================================================================


def product_to_response(product: Product | ProductView, storage: FileStorage) -> ProductResponse:
    """Convert a product (optionally with its category) to response schema.

    The stored image key is replaced with its public URL.
    """
    data = product.to_dict()
    data["image"] = storage.resolve(data["image"])
    return ProductResponse(**data)


def form_to_data(
    name: str,
    description: str,
    price_configuration: str,
    attributes: str,
    tenant_id: str,
    category_id: str,
    is_publish: bool,
) -> ProductData:
    """Convert form fields to service payload."""
    return ProductData(
        name=name,
        description=description,
        tenant_id=tenant_id,
        category_id=category_id,
        price_configuration=parse_json_field(price_configuration, "priceConfiguration"),
        attributes=parse_json_field(attributes, "attributes"),
        is_publish=is_publish,
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.post(
    "",
    response_model=CreatedResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Create product",
)
async def create_product(
    user: StaffUser,
    service: Service,
    name: Annotated[str, Form(min_length=1)],
    description: Annotated[str, Form()],
    price_configuration: Annotated[str, Form(alias="priceConfiguration")],
    attributes: Annotated[str, Form()],
    tenant_id: Annotated[str, Form(alias="tenantId", min_length=1)],
    category_id: Annotated[str, Form(alias="categoryId")],
    is_publish: Annotated[bool, Form(alias="isPublish")] = False,
    image: Annotated[UploadFile | None, File()] = None,
) -> CreatedResponse:
    """Create a product for a tenant.

    The payload is checked against the referenced category before the
    image is uploaded.
    """
    upload = await read_image(image, required=True)
    data = form_to_data(
        name, description, price_configuration, attributes, tenant_id, category_id, is_publish
    )
    product = await service.create(data, upload, user)
    return CreatedResponse(id=product.id)


@router.put(
    "/{product_id}",
    response_model=CreatedResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Update product",
)
async def update_product(
    product_id: str,
    user: StaffUser,
    service: Service,
    name: Annotated[str, Form(min_length=1)],
    description: Annotated[str, Form()],
    price_configuration: Annotated[str, Form(alias="priceConfiguration")],
    attributes: Annotated[str, Form()],
    tenant_id: Annotated[str, Form(alias="tenantId", min_length=1)],
    category_id: Annotated[str, Form(alias="categoryId")],
    is_publish: Annotated[bool, Form(alias="isPublish")] = False,
    image: Annotated[UploadFile | None, File()] = None,
) -> CreatedResponse:
    """Update a product. A new image replaces the stored one."""
    upload = await read_image(image, required=False)
    data = form_to_data(
        name, description, price_configuration, attributes, tenant_id, category_id, is_publish
    )
    product = await service.update(product_id, data, upload, user)
    return CreatedResponse(id=product.id)


@router.get(
    "",
    response_model=ProductsPageResponse,
    responses={500: {"model": ErrorResponse}},
    summary="List products",
)
async def list_products(
    service: Service,
    storage: Storage,
    q: Annotated[str | None, Query(description="Case-insensitive name search")] = None,
    tenant_id: Annotated[str | None, Query(alias="tenantId")] = None,
    category_id: Annotated[str | None, Query(alias="categoryId")] = None,
    is_publish: Annotated[str | None, Query(alias="isPublish")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = DEFAULT_PAGE_SIZE,
) -> ProductsPageResponse:
    """List products joined with their categories, one page at a time."""
    result = await service.list(
        q,
        ProductFilter.from_query(tenant_id, category_id, is_publish),
        PaginationParams(page=page, page_size=limit),
    )
    return ProductsPageResponse(
        data=[product_to_response(view, storage) for view in result.items],
        total=result.total,
        page_size=result.page_size,
        current_page=result.page,
    )


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get product",
)
async def get_product(product_id: str, service: Service, storage: Storage) -> ProductResponse:
    """Get a product by ID."""
    product = await service.get(product_id)
    return product_to_response(product, storage)


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Delete product",
)
async def delete_product(
    product_id: str,
    user: StaffUser,
    service: Service,
) -> MessageResponse:
    """Delete a product and its image."""
    await service.delete(product_id, user)
    return MessageResponse(message="Product deleted successfully")
