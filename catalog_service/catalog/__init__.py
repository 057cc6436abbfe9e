"""Product Catalog Service.

Provides category, product and topping persistence, the product
listing query, and the services orchestrating catalog mutations.
"""

from catalog_service.catalog.models import Category, Product, Topping
from catalog_service.catalog.query import (
    CatalogQuery,
    PaginatedResult,
    PaginationParams,
    ProductFilter,
    ProductView,
)
from catalog_service.catalog.repository import (
    CategoryRepository,
    ProductRepository,
    ToppingRepository,
)
from catalog_service.catalog.service import (
    CategoryData,
    CategoryService,
    ImageUpload,
    ProductData,
    ProductService,
    ToppingData,
    ToppingService,
)

__all__ = [
    # Models
    "Category",
    "Product",
    "Topping",
    # Repository
    "CategoryRepository",
    "ProductRepository",
    "ToppingRepository",
    # Query
    "CatalogQuery",
    "PaginatedResult",
    "PaginationParams",
    "ProductFilter",
    "ProductView",
    # Service
    "CategoryData",
    "CategoryService",
    "ImageUpload",
    "ProductData",
    "ProductService",
    "ToppingData",
    "ToppingService",
]
