"""Store cart router. Works for verified members and for guests with a session id."""

import uuid

from fastapi import APIRouter, Depends
from libs.db.session import get_async_db
from services.store_service.models import Cart
from services.store_service.pricing import quantize_money
from services.store_service.routers._helpers import get_cart_owner
from services.store_service.schemas import (
    CartItemCreate,
    CartItemResponse,
    CartItemUpdate,
    CartResponse,
)
from services.store_service.services import cart_ops
from services.store_service.services.owners import CartOwner
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/cart", tags=["cart"])


def build_cart_response(cart: Cart) -> CartResponse:
    """Join cart lines with live product data and compute totals."""
    items = []
    for line in cart.items:
        product = line.product
        if product is None:
            continue
        unit_price = product.effective_price
        items.append(
            CartItemResponse(
                product_id=product.id,
                name=product.name,
                image=product.primary_image,
                price=product.price,
                discount=product.discount,
                effective_price=unit_price,
                count_in_stock=product.count_in_stock,
                quantity=line.quantity,
                line_total=quantize_money(unit_price * line.quantity),
            )
        )

    return CartResponse(
        id=cart.id,
        items=items,
        total_quantity=sum(item.quantity for item in items),
        items_price=quantize_money(sum(item.line_total for item in items)),
        updated_at=cart.updated_at,
    )


@router.get("", response_model=CartResponse)
async def get_cart(
    owner: CartOwner = Depends(get_cart_owner),
    db: AsyncSession = Depends(get_async_db),
):
    """Get current cart, creating an empty one on first access."""
    cart = await cart_ops.get_or_create_cart(db, owner)
    return build_cart_response(cart)


@router.post("", response_model=CartResponse)
async def add_to_cart(
    item_in: CartItemCreate,
    owner: CartOwner = Depends(get_cart_owner),
    db: AsyncSession = Depends(get_async_db),
):
    """Add item to cart."""
    cart = await cart_ops.add_item(db, owner, item_in.product_id, item_in.quantity)
    return build_cart_response(cart)


@router.delete("", response_model=CartResponse)
async def clear_cart(
    owner: CartOwner = Depends(get_cart_owner),
    db: AsyncSession = Depends(get_async_db),
):
    cart = await cart_ops.clear_cart(db, owner)
    return build_cart_response(cart)


@router.put("/{product_id}", response_model=CartResponse)
async def update_cart_item(
    product_id: uuid.UUID,
    item_in: CartItemUpdate,
    owner: CartOwner = Depends(get_cart_owner),
    db: AsyncSession = Depends(get_async_db),
):
    """Update cart item quantity."""
    cart = await cart_ops.update_item(db, owner, product_id, item_in.quantity)
    return build_cart_response(cart)


@router.delete("/{product_id}", response_model=CartResponse)
async def remove_cart_item(
    product_id: uuid.UUID,
    owner: CartOwner = Depends(get_cart_owner),
    db: AsyncSession = Depends(get_async_db),
):
    """Remove item from cart."""
    cart = await cart_ops.remove_item(db, owner, product_id)
    return build_cart_response(cart)
