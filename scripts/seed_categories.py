#!/usr/bin/env python3
"""Seed default categories script.

Creates the catalog tables and a starter set of categories so a fresh
environment has something to attach products to.

Usage:
    python scripts/seed_categories.py
    python scripts/seed_categories.py --only Pizza
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from catalog_service.catalog.service import CategoryData, CategoryService
from catalog_service.infrastructure.database import async_session_factory, engine, Base

DEFAULT_CATEGORIES = [
    CategoryData(
        name="Pizza",
        price_configuration={
            "Size": {"priceType": "base", "availableOptions": ["Small", "Medium", "Large"]},
            "Crust": {"priceType": "additional", "availableOptions": ["Thin", "Thick"]},
        },
        attributes=[
            {
                "name": "isHit",
                "widgetType": "switch",
                "defaultValue": "No",
                "availableOptions": ["Yes", "No"],
            },
            {
                "name": "Spiciness",
                "widgetType": "radio",
                "defaultValue": "Medium",
                "availableOptions": ["Less", "Medium", "Hot"],
            },
        ],
    ),
    CategoryData(
        name="Beverages",
        price_configuration={
            "Size": {"priceType": "base", "availableOptions": ["330ml", "500ml"]},
        },
        attributes=[
            {
                "name": "Chilled",
                "widgetType": "switch",
                "defaultValue": "Yes",
                "availableOptions": ["Yes", "No"],
            },
        ],
    ),
]


async def create_tables() -> None:
    """Create database tables if they don't exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_categories(names: list[str] | None = None) -> list[str]:
    """Create the default categories that don't exist yet.

    Args:
        names: Restrict seeding to these category names.

    Returns:
        Names of the created categories.
    """
    created: list[str] = []
    async with async_session_factory() as session:
        service = CategoryService(session)
        existing = {category.name for category in await service.list()}
        for data in DEFAULT_CATEGORIES:
            if names and data.name not in names:
                continue
            if data.name in existing:
                continue
            await service.create(data)
            created.append(data.name)
    return created


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed default catalog categories",
    )
    parser.add_argument(
        "--only",
        action="append",
        help="Seed only the named category (repeatable)",
    )

    args = parser.parse_args()

    print("=" * 60)
    print("Catalog Category Seeder")
    print("=" * 60)

    print("Creating database tables...")
    await create_tables()
    print("Tables ready.")
    print()

    created = await seed_categories(args.only)
    for name in created:
        print(f"  ✓ Created: {name}")
    if not created:
        print("  Nothing to seed.")

    print("=" * 60)
    print("Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
