"""Unit tests for reviews and the product rating aggregate."""

import uuid

import pytest
from libs.common.errors import (
    AlreadyExistsError,
    ForbiddenError,
    NotFoundError,
    ValidationFailed,
)
from services.store_service.services import review_ops
from tests.conftest import as_auth_user, create_product, create_user


async def _review(db, product, rating, **user_overrides):
    user = await create_user(db, **user_overrides)
    review = await review_ops.create_review(
        db, as_auth_user(user), product.id, rating=rating, comment="Lovely piece"
    )
    return user, review


@pytest.mark.asyncio
@pytest.mark.unit
async def test_rating_tracks_every_review_change(db_session):
    product = await create_product(db_session)

    first_user, first = await _review(db_session, product, 5)
    assert (product.rating, product.num_reviews) == (5.0, 1)

    await _review(db_session, product, 4)
    await _review(db_session, product, 4)
    assert (product.rating, product.num_reviews) == (4.3, 3)

    await review_ops.update_review(
        db_session, as_auth_user(first_user), first.id, rating=1
    )
    assert (product.rating, product.num_reviews) == (3.0, 3)

    await review_ops.delete_review(db_session, as_auth_user(first_user), first.id)
    assert (product.rating, product.num_reviews) == (4.0, 2)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_rating_rounds_half_up(db_session):
    product = await create_product(db_session)
    for rating in (5, 4, 4, 4):  # mean 4.25
        await _review(db_session, product, rating)

    assert product.rating == 4.3


@pytest.mark.asyncio
@pytest.mark.unit
async def test_deleting_last_review_resets_rating(db_session):
    product = await create_product(db_session)
    user, review = await _review(db_session, product, 3)

    await review_ops.delete_review(db_session, as_auth_user(user), review.id)

    assert (product.rating, product.num_reviews) == (0.0, 0)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_one_review_per_customer(db_session):
    product = await create_product(db_session)
    user, _ = await _review(db_session, product, 5)

    with pytest.raises(AlreadyExistsError):
        await review_ops.create_review(
            db_session, as_auth_user(user), product.id, rating=3, comment="Again"
        )


@pytest.mark.asyncio
@pytest.mark.unit
@pytest.mark.parametrize(("rating", "comment"), [(0, "ok"), (6, "ok"), (3, "   ")])
async def test_invalid_review_is_rejected(db_session, rating, comment):
    product = await create_product(db_session)
    user = await create_user(db_session)

    with pytest.raises(ValidationFailed):
        await review_ops.create_review(
            db_session, as_auth_user(user), product.id, rating=rating, comment=comment
        )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_review_of_unknown_product_is_not_found(db_session):
    user = await create_user(db_session)

    with pytest.raises(NotFoundError):
        await review_ops.create_review(
            db_session, as_auth_user(user), uuid.uuid4(), rating=4, comment="Nice"
        )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_only_author_updates_but_admin_may_delete(db_session):
    product = await create_product(db_session)
    _, review = await _review(db_session, product, 4)
    stranger = await create_user(db_session)
    admin = await create_user(db_session, is_admin=True)

    with pytest.raises(ForbiddenError):
        await review_ops.update_review(
            db_session, as_auth_user(stranger), review.id, comment="Edited"
        )
    with pytest.raises(ForbiddenError):
        await review_ops.update_review(
            db_session, as_auth_user(admin), review.id, comment="Edited"
        )
    with pytest.raises(ForbiddenError):
        await review_ops.delete_review(db_session, as_auth_user(stranger), review.id)

    await review_ops.delete_review(db_session, as_auth_user(admin), review.id)
    assert await review_ops.list_reviews(db_session, product.id) == []
