"""Wishlist operations shared by member and guest wishlists."""

import uuid
from typing import Optional

from libs.common.errors import AlreadyExistsError
from libs.common.logging import get_logger
from services.store_service.models import Wishlist, WishlistItem
from services.store_service.services.catalog_ops import get_product
from services.store_service.services.owners import CartOwner
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def find_wishlist(db: AsyncSession, owner: CartOwner) -> Optional[Wishlist]:
    result = await db.execute(select(Wishlist).where(owner.filter_for(Wishlist)))
    return result.scalar_one_or_none()


async def get_or_create_wishlist(db: AsyncSession, owner: CartOwner) -> Wishlist:
    """Same contract as `cart_ops.get_or_create_cart`: call before loading other rows."""
    wishlist = await find_wishlist(db, owner)
    if wishlist:
        return wishlist

    wishlist = Wishlist(user_id=owner.user_id, session_id=owner.session_id, items=[])
    db.add(wishlist)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        wishlist = await find_wishlist(db, owner)
        if wishlist is None:
            raise
    return wishlist


async def add_item(
    db: AsyncSession, owner: CartOwner, product_id: uuid.UUID
) -> Wishlist:
    """Save a product. A product can only be saved once per wishlist."""
    wishlist = await get_or_create_wishlist(db, owner)
    product = await get_product(db, product_id)
    if wishlist.contains(product.id):
        raise AlreadyExistsError("Product already in wishlist")

    wishlist.items.append(WishlistItem(product=product))
    try:
        await db.commit()
    except IntegrityError as e:
        # Lost a race against a concurrent add of the same product
        await db.rollback()
        raise AlreadyExistsError("Product already in wishlist") from e
    return wishlist


async def remove_item(
    db: AsyncSession, owner: CartOwner, product_id: uuid.UUID
) -> Wishlist:
    wishlist = await get_or_create_wishlist(db, owner)
    item = next((i for i in wishlist.items if i.product_id == product_id), None)
    if item is None:
        return wishlist

    wishlist.items.remove(item)
    await db.commit()
    return wishlist


async def clear_wishlist(db: AsyncSession, owner: CartOwner) -> Wishlist:
    wishlist = await get_or_create_wishlist(db, owner)
    wishlist.items.clear()
    await db.commit()
    return wishlist


async def merge_guest_wishlist(
    db: AsyncSession, user_id: uuid.UUID, session_id: str
) -> None:
    """Union a guest wishlist into the member's, then delete the guest wishlist."""
    guest_owner = CartOwner(session_id=session_id)
    query = select(Wishlist.id).where(guest_owner.filter_for(Wishlist))
    if await db.scalar(query) is None:
        return

    member = await get_or_create_wishlist(db, CartOwner(user_id=user_id))
    guest = await find_wishlist(db, guest_owner)
    if guest is None:
        return

    merged = 0
    for guest_item in guest.items:
        if member.contains(guest_item.product_id):
            continue
        member.items.append(WishlistItem(product=guest_item.product))
        merged += 1

    await db.delete(guest)
    await db.commit()
    logger.info("Merged %d guest wishlist items for user %s", merged, user_id)
