"""Order placement and the paid/delivered state machine.

Placement validates every line against live stock and decrements it in the
same transaction that inserts the order. Product rows are locked where the
dialect supports it, and the product version stamp turns any remaining
concurrent stock change into a StaleDataError (409) instead of an oversell.
"""

import uuid
from typing import Iterable, Optional

from libs.auth.models import AuthUser
from libs.common.datetime_utils import utc_now
from libs.common.errors import (
    ConflictError,
    ForbiddenError,
    InvalidQuantityError,
    NotFoundError,
    OutOfStockError,
    ValidationFailed,
)
from libs.common.logging import get_logger
from services.store_service.models import Order, OrderItem, Product
from services.store_service.pricing import calculate_totals
from services.store_service.services.cart_ops import clear_cart_lines
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


def merge_lines(lines: Iterable[tuple[uuid.UUID, int]]) -> dict[uuid.UUID, int]:
    """Collapse repeated products into one quantity each, keeping first-seen order."""
    quantities: dict[uuid.UUID, int] = {}
    for product_id, quantity in lines:
        if quantity <= 0:
            raise InvalidQuantityError("Quantity must be greater than 0")
        quantities[product_id] = quantities.get(product_id, 0) + quantity
    if not quantities:
        raise ValidationFailed("No order items")
    return quantities


async def create_order(
    db: AsyncSession,
    user: AuthUser,
    *,
    lines: Iterable[tuple[uuid.UUID, int]],
    shipping_address: dict,
    payment_method: str,
    clear_cart: bool = True,
) -> Order:
    """Place an unpaid order for `user` from (product_id, quantity) lines."""
    quantities = merge_lines(lines)

    result = await db.execute(
        select(Product)
        .where(Product.id.in_(list(quantities)))
        .with_for_update()
    )
    products = {product.id: product for product in result.scalars()}

    order = Order(
        user_id=user.user_id,
        customer_name=user.name,
        customer_email=user.email,
        shipping_address=shipping_address,
        payment_method=payment_method,
        items=[],
    )
    items_price = 0
    for product_id, quantity in quantities.items():
        product = products.get(product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} not found")
        if quantity > product.count_in_stock:
            raise OutOfStockError(
                f"Not enough stock for {product.name}. "
                f"Only {product.count_in_stock} available",
                product_id=str(product.id),
                available=product.count_in_stock,
            )

        unit_price = product.effective_price
        order.items.append(
            OrderItem(
                product_id=product.id,
                name=product.name,
                quantity=quantity,
                price=unit_price,
                image=product.primary_image,
            )
        )
        items_price += unit_price * quantity
        product.count_in_stock -= quantity
        product.sold += quantity

    totals = calculate_totals(items_price)
    order.items_price = totals.items_price
    order.tax_price = totals.tax_price
    order.shipping_price = totals.shipping_price
    order.total_price = totals.total_price
    db.add(order)

    if clear_cart:
        await clear_cart_lines(db, user.user_id)

    await db.commit()
    logger.info(
        "Order %s placed by user %s: %d lines, total %s",
        order.id,
        user.user_id,
        len(order.items),
        order.total_price,
    )
    return order


async def get_order(db: AsyncSession, order_id: uuid.UUID) -> Order:
    order = await db.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order not found")
    return order


async def get_order_for(
    db: AsyncSession, user: AuthUser, order_id: uuid.UUID
) -> Order:
    """Load an order visible to `user`: their own, or any order for admins."""
    order = await get_order(db, order_id)
    if order.user_id != user.user_id and not user.is_admin:
        raise ForbiddenError("Not authorized to access this order")
    return order


async def list_orders(
    db: AsyncSession, user_id: Optional[uuid.UUID] = None
) -> list[Order]:
    """Newest first; all orders when `user_id` is None."""
    query = select(Order).order_by(Order.created_at.desc())
    if user_id is not None:
        query = query.where(Order.user_id == user_id)
    result = await db.execute(query)
    return list(result.scalars().all())


async def mark_paid(
    db: AsyncSession,
    user: AuthUser,
    order_id: uuid.UUID,
    payment_result: Optional[dict] = None,
) -> Order:
    """Record payment. Paying an already paid order keeps the first payment."""
    order = await get_order_for(db, user, order_id)
    if order.is_paid:
        return order

    order.is_paid = True
    order.paid_at = utc_now()
    order.payment_result = payment_result
    await db.commit()
    logger.info("Order %s marked paid", order.id)
    return order


async def mark_delivered(db: AsyncSession, order_id: uuid.UUID) -> Order:
    """Record delivery of a paid order. Re-delivering keeps the first timestamp."""
    order = await get_order(db, order_id)
    if not order.is_paid:
        raise ConflictError("Order has not been paid")
    if order.is_delivered:
        return order

    order.is_delivered = True
    order.delivered_at = utc_now()
    await db.commit()
    logger.info("Order %s marked delivered", order.id)
    return order


async def delete_order(db: AsyncSession, order_id: uuid.UUID) -> None:
    order = await get_order(db, order_id)
    await db.delete(order)
    await db.commit()
    logger.info("Deleted order %s", order_id)
