"""Cart operations shared by member and guest carts.

Every mutation touches the cart row, so two concurrent writers of the same
cart cannot both win: the loser's flush raises StaleDataError (409).
"""

import uuid
from typing import Optional

from libs.common.errors import (
    InvalidQuantityError,
    NotFoundError,
    OutOfStockError,
)
from libs.common.logging import get_logger
from services.store_service.models import Cart, CartItem
from services.store_service.services.catalog_ops import get_product
from services.store_service.services.owners import CartOwner
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


# ============================================================================
# CART HELPERS
# ============================================================================


async def find_cart(db: AsyncSession, owner: CartOwner) -> Optional[Cart]:
    result = await db.execute(select(Cart).where(owner.filter_for(Cart)))
    return result.scalar_one_or_none()


async def get_or_create_cart(db: AsyncSession, owner: CartOwner) -> Cart:
    """Return the owner's cart, creating an empty one on first access.

    Losing the create race rolls the session back and expires everything it
    has loaded, so call this before loading other rows.
    """
    cart = await find_cart(db, owner)
    if cart:
        return cart

    cart = Cart(user_id=owner.user_id, session_id=owner.session_id, items=[])
    db.add(cart)
    try:
        await db.commit()
    except IntegrityError:
        # A concurrent request created it first
        await db.rollback()
        cart = await find_cart(db, owner)
        if cart is None:
            raise
    return cart


def _check_quantity(quantity: int) -> None:
    if quantity <= 0:
        raise InvalidQuantityError("Quantity must be greater than 0")


def _check_stock(quantity: int, available: int) -> None:
    if quantity > available:
        raise OutOfStockError(
            f"Not enough stock. Only {available} available",
            available=available,
        )


# ============================================================================
# CART OPERATIONS
# ============================================================================


async def add_item(
    db: AsyncSession, owner: CartOwner, product_id: uuid.UUID, quantity: int
) -> Cart:
    """Add `quantity` of a product; an existing line grows, capped at stock."""
    _check_quantity(quantity)
    cart = await get_or_create_cart(db, owner)
    product = await get_product(db, product_id)
    _check_stock(quantity, product.count_in_stock)

    line = cart.line_for(product.id)
    if line:
        line.quantity = min(line.quantity + quantity, product.count_in_stock)
    else:
        cart.items.append(CartItem(product=product, quantity=quantity))
    cart.touch()

    await db.commit()
    return cart


async def update_item(
    db: AsyncSession, owner: CartOwner, product_id: uuid.UUID, quantity: int
) -> Cart:
    """Replace the quantity of an existing line."""
    _check_quantity(quantity)
    cart = await get_or_create_cart(db, owner)
    line = cart.line_for(product_id)
    if line is None:
        raise NotFoundError("Item not found in cart")
    _check_stock(quantity, line.product.count_in_stock)

    line.quantity = quantity
    cart.touch()

    await db.commit()
    return cart


async def remove_item(
    db: AsyncSession, owner: CartOwner, product_id: uuid.UUID
) -> Cart:
    """Drop a line. Removing a product that is not in the cart changes nothing."""
    cart = await get_or_create_cart(db, owner)
    line = cart.line_for(product_id)
    if line is None:
        return cart

    cart.items.remove(line)
    cart.touch()
    await db.commit()
    return cart


async def clear_cart(db: AsyncSession, owner: CartOwner) -> Cart:
    cart = await get_or_create_cart(db, owner)
    cart.items.clear()
    cart.touch()
    await db.commit()
    return cart


async def merge_guest_cart(
    db: AsyncSession, user_id: uuid.UUID, session_id: str
) -> None:
    """Fold a guest cart into the member's cart, then delete the guest cart.

    Lines already in the member cart keep the member's quantity. Guest-only
    lines are clamped to current stock; sold-out products are dropped.
    """
    guest_owner = CartOwner(session_id=session_id)
    query = select(Cart.id).where(guest_owner.filter_for(Cart))
    if await db.scalar(query) is None:
        return

    member = await get_or_create_cart(db, CartOwner(user_id=user_id))
    guest = await find_cart(db, guest_owner)
    if guest is None:
        return

    merged = 0
    for guest_line in guest.items:
        if member.line_for(guest_line.product_id):
            continue
        available = guest_line.product.count_in_stock
        if available <= 0:
            continue
        member.items.append(
            CartItem(
                product=guest_line.product,
                quantity=min(guest_line.quantity, available),
            )
        )
        merged += 1

    if merged:
        member.touch()
    await db.delete(guest)
    await db.commit()
    logger.info("Merged %d guest cart lines into cart of user %s", merged, user_id)


async def clear_cart_lines(db: AsyncSession, user_id: uuid.UUID) -> None:
    """Empty a member's cart inside the caller's transaction (no commit)."""
    cart = await find_cart(db, CartOwner(user_id=user_id))
    if cart and cart.items:
        cart.items.clear()
        cart.touch()
