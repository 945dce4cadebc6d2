"""Store wishlist router."""

import uuid

from fastapi import APIRouter, Depends
from libs.db.session import get_async_db
from services.store_service.models import Wishlist
from services.store_service.routers._helpers import get_wishlist_owner
from services.store_service.schemas import (
    ProductSummary,
    WishlistItemCreate,
    WishlistResponse,
)
from services.store_service.services import wishlist_ops
from services.store_service.services.owners import CartOwner
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/wishlist", tags=["wishlist"])


def build_wishlist_response(wishlist: Wishlist) -> WishlistResponse:
    return WishlistResponse(
        id=wishlist.id,
        items=[
            ProductSummary.model_validate(item.product)
            for item in wishlist.items
            if item.product is not None
        ],
    )


@router.get("", response_model=WishlistResponse)
async def get_wishlist(
    owner: CartOwner = Depends(get_wishlist_owner),
    db: AsyncSession = Depends(get_async_db),
):
    wishlist = await wishlist_ops.get_or_create_wishlist(db, owner)
    return build_wishlist_response(wishlist)


@router.post("", response_model=WishlistResponse)
async def add_to_wishlist(
    item_in: WishlistItemCreate,
    owner: CartOwner = Depends(get_wishlist_owner),
    db: AsyncSession = Depends(get_async_db),
):
    """Save a product; saving the same product twice is a conflict."""
    wishlist = await wishlist_ops.add_item(db, owner, item_in.product_id)
    return build_wishlist_response(wishlist)


@router.delete("", response_model=WishlistResponse)
async def clear_wishlist(
    owner: CartOwner = Depends(get_wishlist_owner),
    db: AsyncSession = Depends(get_async_db),
):
    wishlist = await wishlist_ops.clear_wishlist(db, owner)
    return build_wishlist_response(wishlist)


@router.delete("/{product_id}", response_model=WishlistResponse)
async def remove_from_wishlist(
    product_id: uuid.UUID,
    owner: CartOwner = Depends(get_wishlist_owner),
    db: AsyncSession = Depends(get_async_db),
):
    wishlist = await wishlist_ops.remove_item(db, owner, product_id)
    return build_wishlist_response(wishlist)
