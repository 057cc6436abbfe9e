"""Repositories for catalog database operations.

Provides CRUD operations for categories, products and toppings.
Listing with filters and joins lives in ``catalog_service.catalog.query``.
"""

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_service.catalog.models import Category, Product, Topping


class CategoryRepository:
    """Repository for Category database operations.

    Example usage:
        async with async_session_factory() as session:
            repo = CategoryRepository(session)
            category = await repo.get_by_id(category_id)
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def save(self, category: Category) -> Category:
        """Save a category to database.

        Args:
            category: Category to save.

        Returns:
            Saved category.
        """
        self.session.add(category)
        await self.session.flush()
        return category

    async def get_by_id(self, category_id: str) -> Category | None:
        """Get category by ID.

        Args:
            category_id: Category ID.

        Returns:
            Category if found, None otherwise.
        """
        return await self.session.get(Category, category_id)

    async def find_all(self) -> Sequence[Category]:
        """List all categories in creation order."""
        query = select(Category).order_by(Category.created_at.asc(), Category.id.asc())
        result = await self.session.execute(query)
        return result.scalars().all()

    async def delete(self, category: Category) -> None:
        """Delete a category.

        Products referencing it are left untouched.
        """
        await self.session.delete(category)
        await self.session.flush()


class ProductRepository:
    """Repository for Product database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def save(self, product: Product) -> Product:
        """Save a product to database.

        Args:
            product: Product to save.

        Returns:
            Saved product.
        """
        self.session.add(product)
        await self.session.flush()
        return product

    async def save_all(self, products: list[Product]) -> list[Product]:
        """Save multiple products to database.

        Args:
            products: Products to save.

        Returns:
            Saved products.
        """
        self.session.add_all(products)
        await self.session.flush()
        return products

    async def get_by_id(self, product_id: str) -> Product | None:
        """Get product by ID.

        Args:
            product_id: Product ID.

        Returns:
            Product if found, None otherwise.
        """
        return await self.session.get(Product, product_id)

    async def delete(self, product: Product) -> None:
        """Delete a product."""
        await self.session.delete(product)
        await self.session.flush()


class ToppingRepository:
    """Repository for Topping database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def save(self, topping: Topping) -> Topping:
        """Save a topping to database.

        Args:
            topping: Topping to save.

        Returns:
            Saved topping.
        """
        self.session.add(topping)
        await self.session.flush()
        return topping

    async def get_by_id(self, topping_id: str) -> Topping | None:
        """Get topping by ID.

        Args:
            topping_id: Topping ID.

        Returns:
            Topping if found, None otherwise.
        """
        return await self.session.get(Topping, topping_id)

    async def find_all(self, tenant_id: str | None = None) -> Sequence[Topping]:
        """List toppings, optionally for a single tenant.

        Args:
            tenant_id: Exact tenant filter.

        Returns:
            Toppings in creation order.
        """
        query = select(Topping)
        if tenant_id is not None:
            query = query.where(Topping.tenant_id == tenant_id)
        query = query.order_by(Topping.created_at.asc(), Topping.id.asc())

        result = await self.session.execute(query)
        return result.scalars().all()

    async def delete(self, topping: Topping) -> None:
        """Delete a topping."""
        await self.session.delete(topping)
        await self.session.flush()
