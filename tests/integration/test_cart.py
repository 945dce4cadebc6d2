"""Integration tests for member and guest carts."""

import asyncio
import uuid
from decimal import Decimal

import pytest
from tests.conftest import create_product


# ---------------------------------------------------------------------------
# Member cart
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_empty_cart_on_first_access(client, customer_headers):
    response = await client.get("/api/cart", headers=customer_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["items"] == []
    assert data["total_quantity"] == 0
    assert Decimal(data["items_price"]) == Decimal("0")


@pytest.mark.asyncio
@pytest.mark.integration
async def test_re_adding_product_grows_single_line_up_to_stock(
    client, customer_headers, product
):
    """Adding 3 then 4 of a 5-in-stock product leaves one line of 5."""
    for quantity in (3, 4):
        response = await client.post(
            "/api/cart",
            json={"product_id": str(product.id), "quantity": quantity},
            headers=customer_headers,
        )
        assert response.status_code == 200, response.text

    items = response.json()["items"]
    assert len(items) == 1
    assert items[0]["quantity"] == 5


@pytest.mark.asyncio
@pytest.mark.integration
async def test_cart_lines_carry_live_product_data(client, db_session, customer_headers):
    product = await create_product(
        db_session, price=Decimal("80.00"), discount=25, count_in_stock=4
    )

    response = await client.post(
        "/api/cart",
        json={"product_id": str(product.id), "quantity": 2},
        headers=customer_headers,
    )

    data = response.json()
    line = data["items"][0]
    assert line["name"] == product.name
    assert line["image"] == product.images[0]
    assert Decimal(line["effective_price"]) == Decimal("60.00")
    assert Decimal(line["line_total"]) == Decimal("120.00")
    assert line["count_in_stock"] == 4
    assert Decimal(data["items_price"]) == Decimal("120.00")


@pytest.mark.asyncio
@pytest.mark.integration
async def test_add_errors(client, customer_headers, product):
    response = await client.post(
        "/api/cart",
        json={"product_id": str(product.id), "quantity": 0},
        headers=customer_headers,
    )
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_QUANTITY"

    response = await client.post(
        "/api/cart",
        json={"product_id": str(product.id), "quantity": 6},
        headers=customer_headers,
    )
    assert response.status_code == 400
    assert response.json()["code"] == "OUT_OF_STOCK"

    response = await client.post(
        "/api/cart",
        json={"product_id": str(uuid.uuid4()), "quantity": 1},
        headers=customer_headers,
    )
    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_remove_and_clear(client, customer_headers, product):
    await client.post(
        "/api/cart",
        json={"product_id": str(product.id), "quantity": 1},
        headers=customer_headers,
    )

    response = await client.put(
        f"/api/cart/{product.id}", json={"quantity": 4}, headers=customer_headers
    )
    assert response.json()["items"][0]["quantity"] == 4

    response = await client.put(
        f"/api/cart/{product.id}", json={"quantity": 9}, headers=customer_headers
    )
    assert response.status_code == 400

    response = await client.delete(f"/api/cart/{product.id}", headers=customer_headers)
    assert response.status_code == 200
    assert response.json()["items"] == []

    # Removing again is a no-op
    response = await client.delete(f"/api/cart/{product.id}", headers=customer_headers)
    assert response.status_code == 200
    assert response.json()["items"] == []

    response = await client.put(
        f"/api/cart/{product.id}", json={"quantity": 1}, headers=customer_headers
    )
    assert response.status_code == 404

    await client.post(
        "/api/cart",
        json={"product_id": str(product.id), "quantity": 2},
        headers=customer_headers,
    )
    response = await client.delete("/api/cart", headers=customer_headers)
    assert response.json()["items"] == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_concurrent_adds_to_same_cart_conflict(client, customer_headers, product):
    """The losing writer of a cart gets 409 instead of a lost update."""
    await client.get("/api/cart", headers=customer_headers)

    responses = await asyncio.gather(*(
        client.post(
            "/api/cart",
            json={"product_id": str(product.id), "quantity": 1},
            headers=customer_headers,
        )
        for _ in range(2)
    ))

    assert sorted(r.status_code for r in responses) == [200, 409]
    conflict = next(r for r in responses if r.status_code == 409)
    assert conflict.json()["code"] == "CONFLICT"
    response = await client.get("/api/cart", headers=customer_headers)
    assert [item["quantity"] for item in response.json()["items"]] == [1]


# ---------------------------------------------------------------------------
# Guest cart
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_guest_cart_uses_session_id(client, product):
    params = {"session_id": "guest-abc"}

    response = await client.post(
        "/api/cart",
        params=params,
        json={"product_id": str(product.id), "quantity": 2},
    )
    assert response.status_code == 200, response.text

    response = await client.get("/api/cart", params=params)
    assert response.json()["items"][0]["quantity"] == 2

    response = await client.get("/api/cart", params={"session_id": "someone-else"})
    assert response.json()["items"] == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_guest_without_session_id_is_rejected(client):
    response = await client.get("/api/cart")
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_guest_cart_merges_on_first_signed_in_request(
    client, db_session, customer_headers
):
    shared = await create_product(db_session, count_in_stock=10)
    guest_only = await create_product(db_session, count_in_stock=10)
    params = {"session_id": "guest-merge"}

    await client.post(
        "/api/cart",
        json={"product_id": str(shared.id), "quantity": 1},
        headers=customer_headers,
    )
    await client.post(
        "/api/cart", params=params, json={"product_id": str(shared.id), "quantity": 5}
    )
    await client.post(
        "/api/cart", params=params, json={"product_id": str(guest_only.id), "quantity": 2}
    )

    response = await client.get("/api/cart", params=params, headers=customer_headers)

    lines = {item["product_id"]: item["quantity"] for item in response.json()["items"]}
    assert lines == {str(shared.id): 1, str(guest_only.id): 2}

    # The guest cart is gone
    response = await client.get("/api/cart", params=params)
    assert response.json()["items"] == []
