"""Unit tests for order placement and the paid/delivered state machine."""

import uuid
from decimal import Decimal

import pytest
from libs.common.errors import (
    ConflictError,
    ForbiddenError,
    InvalidQuantityError,
    NotFoundError,
    OutOfStockError,
    ValidationFailed,
)
from services.store_service.services import cart_ops, order_ops
from services.store_service.services.owners import CartOwner
from tests.conftest import as_auth_user, create_product, create_user
from tests.factories import shipping_address


async def _place(db, user, lines, **kwargs):
    return await order_ops.create_order(
        db,
        as_auth_user(user),
        lines=lines,
        shipping_address=shipping_address(),
        payment_method="PayPal",
        **kwargs,
    )


# ---------------------------------------------------------------------------
# create_order
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_order_snapshots_lines_and_prices(db_session):
    user = await create_user(db_session, name="Ada", email="ada@example.com")
    ring = await create_product(
        db_session,
        name="Gold Ring",
        price=Decimal("200.00"),
        discount=25,
        images=["/img/ring-front.jpg", "/img/ring-side.jpg"],
    )
    chain = await create_product(db_session, name="Silver Chain", price=Decimal("19.99"))

    order = await _place(db_session, user, [(ring.id, 2), (chain.id, 1)])

    lines = {item.product_id: item for item in order.items}
    assert lines[ring.id].name == "Gold Ring"
    assert lines[ring.id].price == Decimal("150.00")
    assert lines[ring.id].image == "/img/ring-front.jpg"
    assert lines[chain.id].quantity == 1
    assert order.items_price == Decimal("319.99")
    assert order.tax_price == Decimal("32.00")
    assert order.shipping_price == Decimal("0.00")
    assert order.total_price == Decimal("351.99")
    assert order.customer_name == "Ada"
    assert order.customer_email == "ada@example.com"
    assert order.is_paid is False
    assert order.is_delivered is False


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_order_decrements_stock_and_counts_sales(db_session):
    user = await create_user(db_session)
    product = await create_product(db_session, count_in_stock=5)

    await _place(db_session, user, [(product.id, 3)])
    await db_session.refresh(product)

    assert product.count_in_stock == 2
    assert product.sold == 3


@pytest.mark.asyncio
@pytest.mark.unit
async def test_duplicate_lines_are_merged(db_session):
    user = await create_user(db_session)
    product = await create_product(db_session, count_in_stock=5)

    order = await _place(db_session, user, [(product.id, 1), (product.id, 2)])

    assert len(order.items) == 1
    assert order.items[0].quantity == 3


@pytest.mark.asyncio
@pytest.mark.unit
async def test_oversell_is_rejected_and_stock_untouched(db_session):
    user = await create_user(db_session)
    plenty = await create_product(db_session, count_in_stock=10)
    scarce = await create_product(db_session, count_in_stock=1)

    with pytest.raises(OutOfStockError):
        await _place(db_session, user, [(plenty.id, 4), (scarce.id, 2)])
    await db_session.rollback()

    await db_session.refresh(plenty)
    await db_session.refresh(scarce)
    assert plenty.count_in_stock == 10
    assert scarce.count_in_stock == 1
    assert await order_ops.list_orders(db_session) == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_order_validation(db_session):
    user = await create_user(db_session)
    product = await create_product(db_session)

    with pytest.raises(ValidationFailed):
        await _place(db_session, user, [])
    with pytest.raises(InvalidQuantityError):
        await _place(db_session, user, [(product.id, 0)])
    with pytest.raises(NotFoundError):
        await _place(db_session, user, [(uuid.uuid4(), 1)])


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_order_clears_cart_unless_asked_not_to(db_session):
    user = await create_user(db_session)
    product = await create_product(db_session, count_in_stock=10)
    owner = CartOwner(user_id=user.id)

    await cart_ops.add_item(db_session, owner, product.id, 2)
    await _place(db_session, user, [(product.id, 1)], clear_cart=False)
    cart = await cart_ops.get_or_create_cart(db_session, owner)
    assert len(cart.items) == 1

    await _place(db_session, user, [(product.id, 1)])
    cart = await cart_ops.get_or_create_cart(db_session, owner)
    assert cart.items == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_order_is_immune_to_later_product_edits(db_session):
    user = await create_user(db_session)
    product = await create_product(db_session, name="Pearl Studs", price=Decimal("80.00"))
    order = await _place(db_session, user, [(product.id, 1)])

    product.name = "Renamed Studs"
    product.price = Decimal("999.00")
    await db_session.commit()

    reloaded = await order_ops.get_order(db_session, order.id)
    assert reloaded.items[0].name == "Pearl Studs"
    assert reloaded.items[0].price == Decimal("80.00")
    assert reloaded.total_price == Decimal("88.00")


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_pay_then_deliver(db_session):
    user = await create_user(db_session)
    product = await create_product(db_session)
    order = await _place(db_session, user, [(product.id, 1)])
    payment = {"id": "PAY-1", "status": "COMPLETED", "update_time": "now"}

    order = await order_ops.mark_paid(db_session, as_auth_user(user), order.id, payment)
    order = await order_ops.mark_delivered(db_session, order.id)

    assert order.is_paid and order.is_delivered
    assert order.payment_result["id"] == "PAY-1"
    assert order.delivered_at >= order.paid_at


@pytest.mark.asyncio
@pytest.mark.unit
async def test_paying_twice_keeps_first_payment(db_session):
    user = await create_user(db_session)
    product = await create_product(db_session)
    order = await _place(db_session, user, [(product.id, 1)])
    auth_user = as_auth_user(user)

    first = await order_ops.mark_paid(db_session, auth_user, order.id, {"id": "A"})
    paid_at = first.paid_at
    second = await order_ops.mark_paid(db_session, auth_user, order.id, {"id": "B"})

    assert second.is_paid is True
    assert second.paid_at == paid_at
    assert second.payment_result == {"id": "A"}


@pytest.mark.asyncio
@pytest.mark.unit
async def test_delivering_unpaid_order_conflicts(db_session):
    user = await create_user(db_session)
    product = await create_product(db_session)
    order = await _place(db_session, user, [(product.id, 1)])

    with pytest.raises(ConflictError):
        await order_ops.mark_delivered(db_session, order.id)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_orders_are_private_to_owner_and_admins(db_session):
    owner = await create_user(db_session)
    stranger = await create_user(db_session)
    admin = await create_user(db_session, is_admin=True)
    product = await create_product(db_session)
    order = await _place(db_session, owner, [(product.id, 1)])

    with pytest.raises(ForbiddenError):
        await order_ops.get_order_for(db_session, as_auth_user(stranger), order.id)
    with pytest.raises(ForbiddenError):
        await order_ops.mark_paid(db_session, as_auth_user(stranger), order.id)

    seen = await order_ops.get_order_for(db_session, as_auth_user(admin), order.id)
    assert seen.id == order.id


@pytest.mark.asyncio
@pytest.mark.unit
async def test_list_and_delete_orders(db_session):
    first_user = await create_user(db_session)
    second_user = await create_user(db_session)
    product = await create_product(db_session, count_in_stock=10)
    first = await _place(db_session, first_user, [(product.id, 1)])
    second = await _place(db_session, second_user, [(product.id, 1)])

    mine = await order_ops.list_orders(db_session, first_user.id)
    everything = await order_ops.list_orders(db_session)
    assert [o.id for o in mine] == [first.id]
    assert {o.id for o in everything} == {first.id, second.id}

    await order_ops.delete_order(db_session, first.id)
    with pytest.raises(NotFoundError):
        await order_ops.get_order(db_session, first.id)
