"""Topping API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from catalog_service.api.auth import require_roles
from catalog_service.api.dependencies import get_storage, get_topping_service
from catalog_service.api.schemas import (
    CreatedResponse,
    ErrorResponse,
    MessageResponse,
    ToppingResponse,
    ToppingsListResponse,
)
from catalog_service.api.uploads import read_image
from catalog_service.catalog.models import Topping
from catalog_service.catalog.service import ToppingData, ToppingService
from catalog_service.domain.access import AuthenticatedUser, Role
from catalog_service.infrastructure.storage import FileStorage

router = APIRouter(prefix="/toppings", tags=["Toppings"])

Service = Annotated[ToppingService, Depends(get_topping_service)]
Storage = Annotated[FileStorage, Depends(get_storage)]
StaffUser = Annotated[AuthenticatedUser, Depends(require_roles(Role.ADMIN, Role.MANAGER))]


def topping_to_response(topping: Topping, storage: FileStorage) -> ToppingResponse:
    """Convert Topping model to response schema with a resolved image URL."""
    data = topping.to_dict()
    data["image"] = storage.resolve(data["image"])
    return ToppingResponse(**data)


@router.post(
    "",
    response_model=CreatedResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
    },
    summary="Create topping",
)
async def create_topping(
    user: StaffUser,
    service: Service,
    name: Annotated[str, Form(min_length=1)],
    price: Annotated[str, Form()],
    tenant_id: Annotated[str, Form(alias="tenantId", min_length=1)],
    is_publish: Annotated[bool, Form(alias="isPublish")] = True,
    image: Annotated[UploadFile | None, File()] = None,
) -> CreatedResponse:
    """Create a topping for a tenant."""
    upload = await read_image(image, required=True)
    topping = await service.create(
        ToppingData(name=name, price=price, tenant_id=tenant_id, is_publish=is_publish),
        upload,
        user,
    )
    return CreatedResponse(id=topping.id)


@router.put(
    "/{topping_id}",
    response_model=CreatedResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Update topping",
)
async def update_topping(
    topping_id: str,
    user: StaffUser,
    service: Service,
    name: Annotated[str, Form(min_length=1)],
    price: Annotated[str, Form()],
    tenant_id: Annotated[str, Form(alias="tenantId", min_length=1)],
    is_publish: Annotated[bool, Form(alias="isPublish")] = True,
    image: Annotated[UploadFile | None, File()] = None,
) -> CreatedResponse:
    """Update a topping. A new image replaces the stored one."""
    upload = await read_image(image, required=False)
    topping = await service.update(
        topping_id,
        ToppingData(name=name, price=price, tenant_id=tenant_id, is_publish=is_publish),
        upload,
        user,
    )
    return CreatedResponse(id=topping.id)


@router.get(
    "",
    response_model=ToppingsListResponse,
    summary="List toppings",
)
async def list_toppings(
    service: Service,
    storage: Storage,
    tenant_id: Annotated[str | None, Query(alias="tenantId")] = None,
) -> ToppingsListResponse:
    """List toppings, optionally for one tenant."""
    toppings = await service.list(tenant_id)
    return ToppingsListResponse(data=[topping_to_response(t, storage) for t in toppings])


@router.get(
    "/{topping_id}",
    response_model=ToppingResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get topping",
)
async def get_topping(topping_id: str, service: Service, storage: Storage) -> ToppingResponse:
    """Get a topping by ID."""
    topping = await service.get(topping_id)
    return topping_to_response(topping, storage)


@router.delete(
    "/{topping_id}",
    response_model=MessageResponse,
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Delete topping",
)
async def delete_topping(
    topping_id: str,
    user: StaffUser,
    service: Service,
) -> MessageResponse:
    """Delete a topping and its image."""
    await service.delete(topping_id, user)
    return MessageResponse(message="Topping deleted successfully")
