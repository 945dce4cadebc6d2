"""Seed script for store test data.

Creates a small jewelry catalog so you can exercise browsing, carts and
checkout end-to-end.

Usage:
    python -m services.store_service.seed_store_data
"""

import asyncio
from decimal import Decimal

from sqlalchemy import func, select

from libs.db.config import AsyncSessionLocal
from services.store_service.models import Material, Product, ProductCategory

PRODUCTS = [
    {
        "name": "Classic Gold Chain Necklace",
        "description": "18k yellow gold rope chain, 45cm, lobster clasp.",
        "category": ProductCategory.NECKLACE,
        "material": Material.GOLD,
        "weight": Decimal("12.40"),
        "dimensions": {"length": 45.0},
        "price": Decimal("899.00"),
        "images": ["/images/products/gold-chain-1.jpg", "/images/products/gold-chain-2.jpg"],
        "tags": ["gold", "chain", "classic"],
        "featured": True,
        "count_in_stock": 8,
    },
    {
        "name": "Rose Gold Tennis Bracelet",
        "description": "Rose gold bracelet set with a line of cubic zirconia.",
        "category": ProductCategory.BRACELET,
        "material": Material.GOLD,
        "price": Decimal("420.00"),
        "discount": 15,
        "images": ["/images/products/tennis-bracelet.jpg"],
        "tags": ["rose gold", "sparkle"],
        "is_new": True,
        "count_in_stock": 12,
    },
    {
        "name": "Sterling Silver Hoop Earrings",
        "description": "Polished 925 silver hoops, 30mm.",
        "category": ProductCategory.EARRING,
        "material": Material.SILVER,
        "dimensions": {"diameter": 3.0},
        "price": Decimal("45.50"),
        "discount": 10,
        "images": ["/images/products/silver-hoops.jpg"],
        "tags": ["silver", "everyday"],
        "count_in_stock": 40,
    },
    {
        "name": "Solitaire Diamond Ring",
        "description": "0.5ct round brilliant diamond on a platinum band.",
        "category": ProductCategory.RING,
        "material": Material.DIAMOND,
        "weight": Decimal("3.10"),
        "price": Decimal("2450.00"),
        "images": ["/images/products/solitaire-ring.jpg"],
        "tags": ["diamond", "engagement"],
        "featured": True,
        "count_in_stock": 3,
    },
    {
        "name": "Platinum Heart Pendant",
        "description": "Platinum heart pendant with a brushed finish. Chain sold separately.",
        "category": ProductCategory.PENDANT,
        "material": Material.PLATINUM,
        "price": Decimal("310.00"),
        "images": ["/images/products/heart-pendant.jpg"],
        "tags": ["platinum", "gift"],
        "count_in_stock": 6,
    },
    {
        "name": "Silver Mesh Watch",
        "description": "Minimal quartz watch with a stainless silver mesh strap.",
        "category": ProductCategory.WATCH,
        "material": Material.SILVER,
        "dimensions": {"diameter": 3.8, "height": 0.8},
        "price": Decimal("180.00"),
        "images": ["/images/products/mesh-watch.jpg"],
        "tags": ["watch", "minimal"],
        "is_new": True,
        "count_in_stock": 15,
    },
]


async def seed_store_data():
    async with AsyncSessionLocal() as db:
        print("Seeding store data...")

        count = await db.scalar(select(func.count()).select_from(Product))
        if count:
            print(f"Store data already exists ({count} products). Skipping seed.")
            return

        for data in PRODUCTS:
            db.add(Product(**data))
        await db.commit()

        print(f"Created {len(PRODUCTS)} products.")


if __name__ == "__main__":
    asyncio.run(seed_store_data())
