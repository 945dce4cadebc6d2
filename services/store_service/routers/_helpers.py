"""Shared dependencies for store routers."""

from typing import Optional

from fastapi import Depends, Query
from libs.auth.dependencies import get_optional_verified_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.services import cart_ops, wishlist_ops
from services.store_service.services.owners import CartOwner
from sqlalchemy.ext.asyncio import AsyncSession

SessionIdQuery = Query(
    None,
    max_length=100,
    description="Client-held guest session id. Merged into the member's data once signed in.",
)


async def get_cart_owner(
    session_id: Optional[str] = SessionIdQuery,
    current_user: Optional[AuthUser] = Depends(get_optional_verified_user),
    db: AsyncSession = Depends(get_async_db),
) -> CartOwner:
    """Resolve the cart owner, folding any guest cart into a signed-in member's cart.

    The session id is a client-held secret: whoever presents it while signed
    in takes over that guest's cart.
    """
    if current_user is not None and session_id:
        await cart_ops.merge_guest_cart(db, current_user.user_id, session_id)
    return CartOwner.resolve(current_user, session_id)


async def get_wishlist_owner(
    session_id: Optional[str] = SessionIdQuery,
    current_user: Optional[AuthUser] = Depends(get_optional_verified_user),
    db: AsyncSession = Depends(get_async_db),
) -> CartOwner:
    """Wishlist counterpart of `get_cart_owner`, with the same session id trust."""
    if current_user is not None and session_id:
        await wishlist_ops.merge_guest_wishlist(db, current_user.user_id, session_id)
    return CartOwner.resolve(current_user, session_id)
