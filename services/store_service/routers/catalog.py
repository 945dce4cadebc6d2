"""Store catalog router: public product browsing and reviews."""

import uuid

from fastapi import APIRouter, Depends, Query, status
from libs.auth.dependencies import require_verified
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.schemas import (
    ProductListResponse,
    ProductResponse,
    ReviewCreate,
    ReviewResponse,
    ReviewUpdate,
)
from services.store_service.services import catalog_ops, review_ops
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["catalog"])


# ============================================================================
# PRODUCTS
# ============================================================================


@router.get("/products", response_model=ProductListResponse)
async def list_products(
    page: int = Query(1, ge=1),
    db: AsyncSession = Depends(get_async_db),
):
    """List products, newest first, 12 per page."""
    products, total, pages = await catalog_ops.list_products(db, page=page)
    return ProductListResponse(
        products=[ProductResponse.model_validate(p) for p in products],
        page=page,
        pages=pages,
        total=total,
    )


@router.get("/products/top", response_model=list[ProductResponse])
async def top_rated_products(db: AsyncSession = Depends(get_async_db)):
    return await catalog_ops.top_rated_products(db)


@router.get("/products/top-selling", response_model=list[ProductResponse])
async def top_selling_products(db: AsyncSession = Depends(get_async_db)):
    return await catalog_ops.top_selling_products(db)


@router.get("/products/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
):
    return await catalog_ops.get_product(db, product_id)


# ============================================================================
# REVIEWS
# ============================================================================


@router.get("/products/{product_id}/reviews", response_model=list[ReviewResponse])
async def list_reviews(
    product_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
):
    return await review_ops.list_reviews(db, product_id)


@router.post(
    "/products/{product_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_review(
    product_id: uuid.UUID,
    review_in: ReviewCreate,
    current_user: AuthUser = Depends(require_verified),
    db: AsyncSession = Depends(get_async_db),
):
    """Review a product; one review per customer and product."""
    return await review_ops.create_review(
        db,
        current_user,
        product_id,
        rating=review_in.rating,
        comment=review_in.comment,
    )


@router.put("/reviews/{review_id}", response_model=ReviewResponse)
async def update_review(
    review_id: uuid.UUID,
    review_in: ReviewUpdate,
    current_user: AuthUser = Depends(require_verified),
    db: AsyncSession = Depends(get_async_db),
):
    return await review_ops.update_review(
        db,
        current_user,
        review_id,
        rating=review_in.rating,
        comment=review_in.comment,
    )


@router.delete("/reviews/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(
    review_id: uuid.UUID,
    current_user: AuthUser = Depends(require_verified),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete a review (author or admin)."""
    await review_ops.delete_review(db, current_user, review_id)
    return None
