"""Catalog services.

High-level services that combine repository operations with the
validation, image storage and notification side effects of each
catalog mutation.

Every mutation runs the same sequence:

    validate -> upload image -> persist -> commit -> publish -> release old image

A failing step stops the sequence. If persisting fails after an upload,
the uploaded image is removed again.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any
from uuid import uuid4

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_service.catalog.models import Category, Product, Topping
from catalog_service.catalog.query import (
    CatalogQuery,
    PaginatedResult,
    PaginationParams,
    ProductFilter,
    ProductView,
    normalize_identifier,
)
from catalog_service.catalog.repository import (
    CategoryRepository,
    ProductRepository,
    ToppingRepository,
)
from catalog_service.domain.access import AuthenticatedUser, ensure_can_mutate
from catalog_service.domain.events import (
    ProductCreated,
    ProductDeleted,
    ProductUpdated,
    ToppingCreated,
    ToppingDeleted,
    ToppingUpdated,
)
from catalog_service.domain.exceptions import NotFound, UpstreamFailure, ValidationFailure
from catalog_service.domain.pricing import (
    CategorySchema,
    dump_attributes,
    dump_price_configuration,
    parse_topping_price,
    validate_category,
    validate_product,
)
from catalog_service.infrastructure.broker import MessageProducer
from catalog_service.infrastructure.storage import FileStorage

logger = structlog.get_logger()


# ============================================================================
# Data Transfer Objects
# ============================================================================


@dataclass
class ImageUpload:
    """An image received with a request."""

    data: bytes
    content_type: str | None = None
    filename: str | None = None


@dataclass
class CategoryData:
    """Category payload."""

    name: str
    price_configuration: Any
    attributes: Any


@dataclass
class ProductData:
    """Product payload.

    ``price_configuration`` and ``attributes`` are raw, unvalidated
    structures; they are checked against the category before use.
    """

    name: str
    description: str
    tenant_id: str
    category_id: str
    price_configuration: Any
    attributes: Any
    is_publish: bool = False


@dataclass
class ToppingData:
    """Topping payload."""

    name: str
    price: Any
    tenant_id: str
    is_publish: bool = True


def new_image_key() -> str:
    """Generate an opaque object-store key."""
    return str(uuid4())


class _ImageLifecycle:
    """Shared upload/compensation helpers."""

    session: AsyncSession
    storage: FileStorage

    async def _upload(self, image: ImageUpload) -> str:
        key = new_image_key()
        await self.storage.upload(key, image.data, image.content_type)
        return key

    async def _commit(self, entity_type: str, uploaded_key: str | None = None) -> None:
        """Commit the session, removing ``uploaded_key`` if the commit fails."""
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Persisting failed", entity_type=entity_type, error=str(e))
            if uploaded_key is not None:
                await self._discard_image(uploaded_key)
            raise UpstreamFailure(f"Failed to save {entity_type.lower()}: {e}") from e

    async def _discard_image(self, key: str) -> None:
        try:
            await self.storage.delete(key)
        except UpstreamFailure as e:
            logger.warning("Orphaned image left in storage", key=key, error=e.message)


# ============================================================================
# Category Service
# ============================================================================


class CategoryService:
    """Service for category operations.

    Example usage:
        async with async_session_factory() as session:
            service = CategoryService(session)
            category = await service.create(
                CategoryData(
                    name="Pizza",
                    price_configuration={
                        "size": {"priceType": "base", "availableOptions": ["S", "M", "L"]},
                    },
                    attributes=[],
                )
            )
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session
        self.repository = CategoryRepository(session)

    async def create(self, data: CategoryData) -> Category:
        """Validate and create a category.

        Args:
            data: Category payload.

        Returns:
            Created category.
        """
        schema = validate_category(data.price_configuration, data.attributes)
        category = Category(
            name=data.name,
            price_configuration=dump_price_configuration(schema.price_configuration),
            attributes=dump_attributes(schema.attributes),
        )
        await self.repository.save(category)
        await self.session.commit()

        logger.info("Category created", category_id=category.id)
        return category

    async def list(self) -> Sequence[Category]:
        """List all categories."""
        categories = await self.repository.find_all()
        logger.info("Categories fetched", count=len(categories))
        return categories

    async def get(self, category_id: str) -> Category:
        """Get category by ID.

        Raises:
            NotFound: If the category does not exist.
        """
        category = await self.repository.get_by_id(category_id)
        if category is None:
            raise NotFound("Category", category_id)
        return category

    async def update(self, category_id: str, data: CategoryData) -> Category:
        """Validate and replace a category.

        Existing products are not revalidated against the new schema.

        Raises:
            NotFound: If the category does not exist.
        """
        schema = validate_category(data.price_configuration, data.attributes)
        category = await self.get(category_id)

        category.name = data.name
        category.price_configuration = dump_price_configuration(schema.price_configuration)
        category.attributes = dump_attributes(schema.attributes)
        await self.session.flush()
        await self.session.commit()

        logger.info("Category updated", category_id=category_id)
        return category

    async def delete(self, category_id: str) -> None:
        """Delete a category. Its products are kept.

        Raises:
            NotFound: If the category does not exist.
        """
        category = await self.get(category_id)
        await self.repository.delete(category)
        await self.session.commit()

        logger.info("Category deleted", category_id=category_id)


# ============================================================================
# Product Service
# ============================================================================


class ProductService(_ImageLifecycle):
    """Service for product operations."""

    def __init__(
        self,
        session: AsyncSession,
        storage: FileStorage,
        producer: MessageProducer,
    ) -> None:
        """Initialize service.

        Args:
            session: Async SQLAlchemy session.
            storage: Image storage.
            producer: Broker producer for change notifications.
        """
        self.session = session
        self.storage = storage
        self.producer = producer
        self.repository = ProductRepository(session)
        self.categories = CategoryRepository(session)
        self.query = CatalogQuery(session)

    async def _validated_payload(
        self, data: ProductData
    ) -> tuple[str, dict[str, Any], list[dict[str, Any]]]:
        """Check a payload against its category.

        Returns:
            Canonical category id, price configuration and attributes
            in document form.
        """
        category_id = normalize_identifier(data.category_id)
        if category_id is None:
            raise ValidationFailure(
                "Category Id is invalid",
                details={"field": "categoryId", "value": data.category_id},
            )
        category = await self.categories.get_by_id(category_id)
        if category is None:
            raise NotFound("Category", category_id)

        schema = CategorySchema.from_document(category.price_configuration, category.attributes)
        price_configuration, attributes = validate_product(
            schema, data.price_configuration, data.attributes
        )
        return (
            category_id,
            dump_price_configuration(price_configuration),
            dump_attributes(attributes),
        )

    async def create(
        self,
        data: ProductData,
        image: ImageUpload,
        user: AuthenticatedUser,
    ) -> Product:
        """Create a product.

        Args:
            data: Product payload.
            image: Product image.
            user: Authenticated caller.

        Returns:
            Created product.

        Raises:
            Forbidden: If a non-admin creates for another tenant.
            ValidationFailure: If the payload does not fit its category.
            NotFound: If the category does not exist.
        """
        ensure_can_mutate(user, data.tenant_id, "product")
        category_id, price_configuration, attributes = await self._validated_payload(data)

        image_key = await self._upload(image)
        product = Product(
            name=data.name,
            description=data.description,
            tenant_id=data.tenant_id,
            category_id=category_id,
            price_configuration=price_configuration,
            attributes=attributes,
            is_publish=data.is_publish,
            image=image_key,
        )
        self.session.add(product)
        await self._commit("Product", uploaded_key=image_key)

        await self.producer.publish(
            ProductCreated(
                product_id=product.id,
                tenant_id=product.tenant_id,
                price_configuration=product.price_configuration,
            )
        )
        logger.info("New product added", product_id=product.id, tenant_id=product.tenant_id)
        return product

    async def update(
        self,
        product_id: str,
        data: ProductData,
        image: ImageUpload | None,
        user: AuthenticatedUser,
    ) -> Product:
        """Update a product, optionally replacing its image.

        Raises:
            NotFound: If the product or its new category does not exist.
            Forbidden: If the caller is neither admin nor the owning tenant.
            ValidationFailure: If the payload does not fit its category.
        """
        product = await self.get(product_id)
        ensure_can_mutate(user, product.tenant_id, "product")
        if data.tenant_id != product.tenant_id:
            ensure_can_mutate(user, data.tenant_id, "product")

        category_id, price_configuration, attributes = await self._validated_payload(data)

        old_image = product.image
        new_image = await self._upload(image) if image is not None else None

        product.name = data.name
        product.description = data.description
        product.tenant_id = data.tenant_id
        product.category_id = category_id
        product.price_configuration = price_configuration
        product.attributes = attributes
        product.is_publish = data.is_publish
        product.image = new_image or old_image
        await self._commit("Product", uploaded_key=new_image)

        await self.producer.publish(
            ProductUpdated(
                product_id=product.id,
                tenant_id=product.tenant_id,
                price_configuration=product.price_configuration,
            )
        )
        if new_image is not None:
            await self._discard_image(old_image)

        logger.info("Product updated", product_id=product_id)
        return product

    async def get(self, product_id: str) -> Product:
        """Get product by ID.

        Raises:
            NotFound: If the product does not exist.
        """
        product = await self.repository.get_by_id(product_id)
        if product is None:
            raise NotFound("Product", product_id)
        return product

    async def list(
        self,
        search_text: str | None,
        filters: ProductFilter,
        pagination: PaginationParams,
    ) -> PaginatedResult[ProductView]:
        """List products with their category inlined."""
        result = await self.query.list_products(search_text, filters, pagination)
        logger.info("All products fetched", total=result.total, page=result.page)
        return result

    async def delete(self, product_id: str, user: AuthenticatedUser) -> None:
        """Delete a product and its image.

        Raises:
            NotFound: If the product does not exist.
            Forbidden: If the caller is neither admin nor the owning tenant.
        """
        product = await self.get(product_id)
        ensure_can_mutate(user, product.tenant_id, "product")

        image = product.image
        await self.repository.delete(product)
        await self._commit("Product")

        await self.producer.publish(
            ProductDeleted(
                product_id=product.id,
                tenant_id=product.tenant_id,
                price_configuration=product.price_configuration,
            )
        )
        await self._discard_image(image)
        logger.info("Product deleted", product_id=product_id)


# ============================================================================
# Topping Service
# ============================================================================


class ToppingService(_ImageLifecycle):
    """Service for topping operations."""

    def __init__(
        self,
        session: AsyncSession,
        storage: FileStorage,
        producer: MessageProducer,
    ) -> None:
        """Initialize service.

        Args:
            session: Async SQLAlchemy session.
            storage: Image storage.
            producer: Broker producer for change notifications.
        """
        self.session = session
        self.storage = storage
        self.producer = producer
        self.repository = ToppingRepository(session)

    async def create(
        self,
        data: ToppingData,
        image: ImageUpload,
        user: AuthenticatedUser,
    ) -> Topping:
        """Create a topping.

        Raises:
            Forbidden: If a non-admin creates for another tenant.
            ValidationFailure: If the price is not a non-negative number.
        """
        ensure_can_mutate(user, data.tenant_id, "topping")
        price = parse_topping_price(data.price)

        image_key = await self._upload(image)
        topping = Topping(
            name=data.name,
            price=price,
            tenant_id=data.tenant_id,
            is_publish=data.is_publish,
            image=image_key,
        )
        self.session.add(topping)
        await self._commit("Topping", uploaded_key=image_key)

        await self.producer.publish(
            ToppingCreated(
                topping_id=topping.id,
                tenant_id=topping.tenant_id,
                price=topping.price,
            )
        )
        logger.info("Topping is created", topping_id=topping.id, tenant_id=topping.tenant_id)
        return topping

    async def update(
        self,
        topping_id: str,
        data: ToppingData,
        image: ImageUpload | None,
        user: AuthenticatedUser,
    ) -> Topping:
        """Update a topping, optionally replacing its image.

        Raises:
            NotFound: If the topping does not exist.
            Forbidden: If the caller is neither admin nor the owning tenant.
        """
        topping = await self.get(topping_id)
        ensure_can_mutate(user, topping.tenant_id, "topping")
        if data.tenant_id != topping.tenant_id:
            ensure_can_mutate(user, data.tenant_id, "topping")

        price = parse_topping_price(data.price)

        old_image = topping.image
        new_image = await self._upload(image) if image is not None else None

        topping.name = data.name
        topping.price = price
        topping.tenant_id = data.tenant_id
        topping.is_publish = data.is_publish
        topping.image = new_image or old_image
        await self._commit("Topping", uploaded_key=new_image)

        await self.producer.publish(
            ToppingUpdated(
                topping_id=topping.id,
                tenant_id=topping.tenant_id,
                price=topping.price,
            )
        )
        if new_image is not None:
            await self._discard_image(old_image)

        logger.info("Topping is updated", topping_id=topping_id)
        return topping

    async def get(self, topping_id: str) -> Topping:
        """Get topping by ID.

        Raises:
            NotFound: If the topping does not exist.
        """
        topping = await self.repository.get_by_id(topping_id)
        if topping is None:
            raise NotFound("Topping", topping_id)
        return topping

    async def list(self, tenant_id: str | None = None) -> Sequence[Topping]:
        """List toppings, optionally for one tenant."""
        toppings = await self.repository.find_all(tenant_id)
        logger.info("All toppings fetched", count=len(toppings), tenant_id=tenant_id)
        return toppings

    async def delete(self, topping_id: str, user: AuthenticatedUser) -> None:
        """Delete a topping and its image.

        Raises:
            NotFound: If the topping does not exist.
            Forbidden: If the caller is neither admin nor the owning tenant.
        """
        topping = await self.get(topping_id)
        ensure_can_mutate(user, topping.tenant_id, "topping")

        image = topping.image
        await self.repository.delete(topping)
        await self._commit("Topping")

        await self.producer.publish(
            ToppingDeleted(
                topping_id=topping.id,
                tenant_id=topping.tenant_id,
                price=topping.price,
            )
        )
        await self._discard_image(image)
        logger.info("Topping deleted", topping_id=topping_id)
