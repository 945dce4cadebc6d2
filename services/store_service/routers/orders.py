"""Store orders router: checkout, order history and fulfilment state."""

import uuid
from typing import Optional

from fastapi import APIRouter, Body, Depends, status
from libs.auth.dependencies import require_admin, require_verified
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.schemas import OrderCreate, OrderResponse, PaymentResult
from services.store_service.services import order_ops
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/orders", tags=["orders"])


# ============================================================================
# CHECKOUT & HISTORY
# ============================================================================


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    order_in: OrderCreate,
    current_user: AuthUser = Depends(require_verified),
    db: AsyncSession = Depends(get_async_db),
):
    """Place an order; stock is checked and reserved in the same transaction."""
    return await order_ops.create_order(
        db,
        current_user,
        lines=[(line.product_id, line.quantity) for line in order_in.items],
        shipping_address=order_in.shipping_address.model_dump(),
        payment_method=order_in.payment_method,
        clear_cart=order_in.clear_cart,
    )


@router.get("", response_model=list[OrderResponse])
async def list_my_orders(
    current_user: AuthUser = Depends(require_verified),
    db: AsyncSession = Depends(get_async_db),
):
    return await order_ops.list_orders(db, current_user.user_id)


@router.get("/all", response_model=list[OrderResponse])
async def list_all_orders(
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """List every order (admin)."""
    return await order_ops.list_orders(db)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: uuid.UUID,
    current_user: AuthUser = Depends(require_verified),
    db: AsyncSession = Depends(get_async_db),
):
    return await order_ops.get_order_for(db, current_user, order_id)


# ============================================================================
# STATE TRANSITIONS
# ============================================================================


@router.put("/{order_id}/pay", response_model=OrderResponse)
async def pay_order(
    order_id: uuid.UUID,
    payment_result: Optional[PaymentResult] = Body(None),
    current_user: AuthUser = Depends(require_verified),
    db: AsyncSession = Depends(get_async_db),
):
    """Record the payment result reported by the client's payment gateway."""
    return await order_ops.mark_paid(
        db,
        current_user,
        order_id,
        payment_result.model_dump() if payment_result else None,
    )


@router.put("/{order_id}/deliver", response_model=OrderResponse)
async def deliver_order(
    order_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await order_ops.mark_delivered(db, order_id)


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(
    order_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await order_ops.delete_order(db, order_id)
    return None
