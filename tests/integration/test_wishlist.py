"""Integration tests for member and guest wishlists."""

import asyncio
import uuid

import pytest
from tests.conftest import create_product


async def _add(client, product, **kwargs):
    return await client.post(
        "/api/wishlist", json={"product_id": str(product.id)}, **kwargs
    )


@pytest.mark.asyncio
@pytest.mark.integration
async def test_add_and_list(client, customer_headers, product):
    response = await _add(client, product, headers=customer_headers)

    assert response.status_code == 200, response.text
    items = response.json()["items"]
    assert [item["id"] for item in items] == [str(product.id)]
    assert items[0]["name"] == product.name

    response = await client.get("/api/wishlist", headers=customer_headers)
    assert len(response.json()["items"]) == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_duplicate_add_conflicts(client, customer_headers, product):
    await _add(client, product, headers=customer_headers)

    response = await _add(client, product, headers=customer_headers)

    assert response.status_code == 409
    assert response.json()["code"] == "ALREADY_EXISTS"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_unknown_product_is_not_found(client, customer_headers):
    response = await client.post(
        "/api/wishlist",
        json={"product_id": str(uuid.uuid4())},
        headers=customer_headers,
    )
    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_concurrent_adds_leave_one_entry(client, customer_headers, product):
    """Two simultaneous adds of the same product store it once."""
    await client.get("/api/wishlist", headers=customer_headers)

    responses = await asyncio.gather(
        _add(client, product, headers=customer_headers),
        _add(client, product, headers=customer_headers),
    )

    assert sorted(r.status_code for r in responses) == [200, 409]
    response = await client.get("/api/wishlist", headers=customer_headers)
    assert len(response.json()["items"]) == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_remove_is_idempotent_and_clear(client, db_session, customer_headers):
    first = await create_product(db_session)
    second = await create_product(db_session)
    await _add(client, first, headers=customer_headers)
    await _add(client, second, headers=customer_headers)

    for _ in range(2):
        response = await client.delete(
            f"/api/wishlist/{first.id}", headers=customer_headers
        )
        assert response.status_code == 200
        assert [i["id"] for i in response.json()["items"]] == [str(second.id)]

    response = await client.delete("/api/wishlist", headers=customer_headers)
    assert response.json()["items"] == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_guest_wishlist_merges_on_sign_in(client, db_session, customer_headers):
    saved = await create_product(db_session)
    guest_saved = await create_product(db_session)
    params = {"session_id": "guest-wish"}

    await _add(client, saved, headers=customer_headers)
    await _add(client, saved, params=params)
    await _add(client, guest_saved, params=params)

    response = await client.get("/api/wishlist", params=params, headers=customer_headers)

    ids = {item["id"] for item in response.json()["items"]}
    assert ids == {str(saved.id), str(guest_saved.id)}
