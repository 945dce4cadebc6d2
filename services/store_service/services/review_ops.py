"""Product reviews. Every change recomputes the product's rating aggregate."""

import uuid
from typing import Optional

from libs.auth.models import AuthUser
from libs.common.errors import (
    AlreadyExistsError,
    ForbiddenError,
    NotFoundError,
    ValidationFailed,
)
from libs.common.logging import get_logger
from services.store_service.models import Product, Review
from services.store_service.services.catalog_ops import get_product
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def _validate(rating: Optional[int], comment: Optional[str]) -> None:
    if rating is not None and not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationFailed(
            f"Rating must be between {MIN_RATING} and {MAX_RATING}"
        )
    if comment is not None and not comment.strip():
        raise ValidationFailed("Comment is required")


async def _product_with_reviews(db: AsyncSession, product_id: uuid.UUID) -> Product:
    result = await db.execute(
        select(Product)
        .where(Product.id == product_id)
        .options(selectinload(Product.reviews))
    )
    product = result.scalar_one_or_none()
    if product is None:
        raise NotFoundError("Product not found")
    return product


async def _get_review(db: AsyncSession, review_id: uuid.UUID) -> Review:
    review = await db.get(Review, review_id)
    if review is None:
        raise NotFoundError("Review not found")
    return review


async def list_reviews(db: AsyncSession, product_id: uuid.UUID) -> list[Review]:
    await get_product(db, product_id)
    result = await db.execute(
        select(Review)
        .where(Review.product_id == product_id)
        .order_by(Review.created_at.desc())
    )
    return list(result.scalars().all())


async def create_review(
    db: AsyncSession,
    user: AuthUser,
    product_id: uuid.UUID,
    *,
    rating: int,
    comment: str,
) -> Review:
    _validate(rating, comment)
    product = await _product_with_reviews(db, product_id)
    if any(review.user_id == user.user_id for review in product.reviews):
        raise AlreadyExistsError("Product already reviewed")

    review = Review(
        user_id=user.user_id,
        name=user.name,
        rating=rating,
        comment=comment.strip(),
    )
    product.reviews.append(review)
    product.recalculate_rating()
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise AlreadyExistsError("Product already reviewed") from e

    logger.info("User %s reviewed product %s", user.user_id, product_id)
    return review


async def update_review(
    db: AsyncSession,
    user: AuthUser,
    review_id: uuid.UUID,
    *,
    rating: Optional[int] = None,
    comment: Optional[str] = None,
) -> Review:
    """Owner-only edit of rating and/or comment."""
    review = await _get_review(db, review_id)
    if review.user_id != user.user_id:
        raise ForbiddenError("Not authorized to update this review")
    _validate(rating, comment)

    product = await _product_with_reviews(db, review.product_id)
    if rating is not None:
        review.rating = rating
    if comment is not None:
        review.comment = comment.strip()
    product.recalculate_rating()
    await db.commit()
    return review


async def delete_review(
    db: AsyncSession, user: AuthUser, review_id: uuid.UUID
) -> None:
    """Delete a review; allowed for its author and for admins."""
    review = await _get_review(db, review_id)
    if review.user_id != user.user_id and not user.is_admin:
        raise ForbiddenError("Not authorized to delete this review")

    product = await _product_with_reviews(db, review.product_id)
    product.reviews.remove(review)
    product.recalculate_rating()
    await db.commit()
    logger.info("Deleted review %s of product %s", review_id, product.id)
