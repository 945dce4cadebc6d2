"""Product catalog reads and admin writes."""

import math
import uuid

from libs.common.errors import NotFoundError
from libs.common.logging import get_logger
from services.store_service.models import Product
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

PAGE_SIZE = 12
TOP_RATED_LIMIT = 5
TOP_SELLING_LIMIT = 8

# Product fields an update may explicitly clear
NULLABLE_FIELDS = frozenset({"material", "weight", "dimensions"})


async def get_product(db: AsyncSession, product_id: uuid.UUID) -> Product:
    product = await db.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return product


async def list_products(
    db: AsyncSession, *, page: int = 1, page_size: int = PAGE_SIZE
) -> tuple[list[Product], int, int]:
    """Newest products first. Returns (products, total, pages)."""
    total = await db.scalar(select(func.count()).select_from(Product))
    result = await db.execute(
        select(Product)
        .order_by(Product.created_at.desc(), Product.id)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    pages = math.ceil(total / page_size) if total else 0
    return list(result.scalars().all()), total, pages


async def top_rated_products(
    db: AsyncSession, limit: int = TOP_RATED_LIMIT
) -> list[Product]:
    result = await db.execute(
        select(Product)
        .order_by(Product.rating.desc(), Product.num_reviews.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def top_selling_products(
    db: AsyncSession, limit: int = TOP_SELLING_LIMIT
) -> list[Product]:
    result = await db.execute(
        select(Product).order_by(Product.sold.desc()).limit(limit)
    )
    return list(result.scalars().all())


async def create_product(db: AsyncSession, data: dict) -> Product:
    product = Product(**data)
    db.add(product)
    await db.commit()
    await db.refresh(product)
    logger.info("Created product %s (%s)", product.id, product.name)
    return product


async def update_product(
    db: AsyncSession, product_id: uuid.UUID, changes: dict
) -> Product:
    """Apply only the fields present in `changes`; zero stock and zero discount are valid."""
    product = await get_product(db, product_id)
    for field, value in changes.items():
        if value is None and field not in NULLABLE_FIELDS:
            continue
        setattr(product, field, value)
    await db.commit()
    await db.refresh(product)
    logger.info("Updated product %s fields=%s", product.id, sorted(changes))
    return product


async def delete_product(db: AsyncSession, product_id: uuid.UUID) -> None:
    result = await db.execute(
        select(Product)
        .where(Product.id == product_id)
        .options(selectinload(Product.reviews))
    )
    product = result.scalar_one_or_none()
    if product is None:
        raise NotFoundError("Product not found")
    await db.delete(product)
    await db.commit()
    logger.info("Deleted product %s", product_id)
