"""Catalog query engine.

Builds filtered, paginated views of products joined with the category
each product references.
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar
from uuid import UUID

import structlog
from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_service.catalog.models import Category, Product

logger = structlog.get_logger()

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10


def normalize_identifier(value: str | None) -> str | None:
    """Return the canonical form of a reference identifier.

    Args:
        value: Candidate identifier.

    Returns:
        Canonical UUID string, or None if the value is not a UUID.
    """
    if not value:
        return None
    try:
        return str(UUID(value))
    except (ValueError, TypeError, AttributeError):
        return None


@dataclass
class ProductFilter:
    """Filter parameters for product listing.

    Attributes:
        tenant_id: Exact tenant match.
        category_id: Exact category match.
        is_publish: Only published products when True.
    """

    tenant_id: str | None = None
    category_id: str | None = None
    is_publish: bool | None = None

    @classmethod
    def from_query(
        cls,
        tenant_id: str | None = None,
        category_id: str | None = None,
        is_publish: str | None = None,
    ) -> "ProductFilter":
        """Build a filter from raw query-string values.

        A category id that is not a valid identifier is ignored, and the
        publish filter only applies for the literal ``"true"``.

        Args:
            tenant_id: ``tenantId`` query value.
            category_id: ``categoryId`` query value.
            is_publish: ``isPublish`` query value.

        Returns:
            ProductFilter instance.
        """
        return cls(
            tenant_id=tenant_id or None,
            category_id=normalize_identifier(category_id),
            is_publish=True if is_publish == "true" else None,
        )


@dataclass
class PaginationParams:
    """Pagination parameters.

    Attributes:
        page: Page number (1-indexed).
        page_size: Items per page.
    """

    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        """Calculate offset from page number."""
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        """Get limit (alias for page_size)."""
        return self.page_size


@dataclass
class PaginatedResult(Generic[T]):
    """Paginated result container.

    Attributes:
        items: List of items.
        total: Total count across all pages.
        page: Current page.
        page_size: Items per page.
    """

    items: list[T]
    total: int
    page: int
    page_size: int


@dataclass
class ProductView:
    """A product with its category inlined."""

    product: Product
    category: Category

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary.

        Returns:
            Product dictionary with a ``category`` entry.
        """
        data = self.product.to_dict()
        data["category"] = {
            "id": self.category.id,
            "name": self.category.name,
            "priceConfiguration": self.category.price_configuration,
            "attributes": self.category.attributes,
        }
        return data


class CatalogQuery:
    """Read-side queries over the catalog.

    Example usage:
        async with async_session_factory() as session:
            query = CatalogQuery(session)
            page = await query.list_products(
                "pizza",
                ProductFilter.from_query(tenant_id="7", is_publish="true"),
                PaginationParams(page=2, page_size=5),
            )
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize query engine with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def list_products(
        self,
        search_text: str | None,
        filters: ProductFilter,
        pagination: PaginationParams,
    ) -> PaginatedResult[ProductView]:
        """List products joined with their category.

        Products whose category no longer exists are dropped and are
        not counted in ``total``.

        Args:
            search_text: Case-insensitive substring of the product name.
            filters: Filter parameters.
            pagination: Pagination parameters.

        Returns:
            Paginated product views.
        """
        conditions = self._build_conditions(search_text, filters)
        join_condition = Category.id == Product.category_id

        count_query = select(func.count(Product.id)).select_from(Product).join(
            Category, join_condition
        )
        query = select(Product, Category).join(Category, join_condition)

        if conditions:
            count_query = count_query.where(and_(*conditions))
            query = query.where(and_(*conditions))

        total = (await self.session.execute(count_query)).scalar_one()

        # created_at alone can tie; id keeps pages stable
        query = (
            query.order_by(Product.created_at.asc(), Product.id.asc())
            .limit(pagination.limit)
            .offset(pagination.offset)
        )
        result = await self.session.execute(query)
        items = [ProductView(product=product, category=category) for product, category in result.all()]

        logger.debug(
            "Products listed",
            search=search_text,
            tenant_id=filters.tenant_id,
            category_id=filters.category_id,
            is_publish=filters.is_publish,
            total=total,
            page=pagination.page,
        )

        return PaginatedResult(
            items=items,
            total=total,
            page=pagination.page,
            page_size=pagination.page_size,
        )

    def _build_conditions(
        self,
        search_text: str | None,
        filters: ProductFilter,
    ) -> list[Any]:
        conditions = []

        if search_text:
            conditions.append(Product.name.icontains(search_text, autoescape=True))

        if filters.tenant_id is not None:
            conditions.append(Product.tenant_id == filters.tenant_id)

        if filters.category_id is not None:
            conditions.append(Product.category_id == filters.category_id)

        if filters.is_publish is not None:
            conditions.append(Product.is_publish == filters.is_publish)

        return conditions
