"""Integration tests for registration, OTP verification and login."""

from datetime import timedelta

import pytest
from libs.common.datetime_utils import utc_now
from services.identity_service.models import User
from sqlalchemy import select
from tests.conftest import create_user, find_user_email

REGISTER = {"name": "Ada Obi", "email": "Ada@Example.com", "password": "secret123"}


async def _load_user(db, email) -> User:
    db.expire_all()
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one()


# ---------------------------------------------------------------------------
# Registration & verification
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_register_verify_login_then_shop(client, email_outbox, product):
    """Register, verify with the emailed OTP, log in and fill the cart."""
    response = await client.post("/api/auth/register", json=REGISTER)
    assert response.status_code == 201, response.text
    data = response.json()
    assert data["email"] == "ada@example.com"
    assert data["is_verified"] is False
    assert data["token"]

    otp = email_outbox.last_otp("ada@example.com")
    response = await client.post(
        "/api/auth/verify-otp", json={"email": "ada@example.com", "otp": otp}
    )
    assert response.status_code == 200, response.text
    assert response.json()["is_verified"] is True

    response = await client.post(
        "/api/auth/login", json={"email": "ada@example.com", "password": "secret123"}
    )
    assert response.status_code == 200, response.text
    headers = {"Authorization": f"Bearer {response.json()['token']}"}

    response = await client.post(
        "/api/cart",
        json={"product_id": str(product.id), "quantity": 3},
        headers=headers,
    )
    assert response.status_code == 200, response.text

    response = await client.get("/api/cart", headers=headers)
    items = response.json()["items"]
    assert len(items) == 1
    assert items[0]["product_id"] == str(product.id)
    assert items[0]["quantity"] == 3


@pytest.mark.asyncio
@pytest.mark.integration
async def test_register_sends_verification_email(client, email_outbox):
    await client.post("/api/auth/register", json=REGISTER)

    message = find_user_email(email_outbox, "ada@example.com")
    assert message["subject"] == "Email Verification"
    assert "10 minutes" in message["body"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_register_duplicate_email_conflicts(client):
    await client.post("/api/auth/register", json=REGISTER)

    response = await client.post(
        "/api/auth/register", json={**REGISTER, "email": "ada@example.com"}
    )

    assert response.status_code == 409
    assert response.json()["code"] == "ALREADY_EXISTS"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_register_short_password_is_rejected(client):
    response = await client.post(
        "/api/auth/register", json={**REGISTER, "password": "123"}
    )
    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.integration
async def test_email_failure_rolls_back_otp(client, email_outbox, db_session):
    email_outbox.fail = True

    response = await client.post("/api/auth/register", json=REGISTER)

    assert response.status_code == 502
    assert response.json()["code"] == "UPSTREAM_ERROR"
    user = await _load_user(db_session, "ada@example.com")
    assert user.otp_code is None
    assert user.otp_expires_at is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_wrong_otp_is_rejected(client, email_outbox):
    await client.post("/api/auth/register", json=REGISTER)
    otp = email_outbox.last_otp("ada@example.com")
    wrong = "000000" if otp != "000000" else "111111"

    response = await client.post(
        "/api/auth/verify-otp", json={"email": "ada@example.com", "otp": wrong}
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid OTP"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_expired_otp_is_cleared(client, email_outbox, db_session):
    await client.post("/api/auth/register", json=REGISTER)
    otp = email_outbox.last_otp("ada@example.com")
    user = await _load_user(db_session, "ada@example.com")
    user.otp_expires_at = utc_now() - timedelta(minutes=1)
    await db_session.commit()

    response = await client.post(
        "/api/auth/verify-otp", json={"email": "ada@example.com", "otp": otp}
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "OTP has expired"

    user = await _load_user(db_session, "ada@example.com")
    assert user.otp_code is None
    assert user.is_verified is False


@pytest.mark.asyncio
@pytest.mark.integration
async def test_resend_otp(client, email_outbox):
    await client.post("/api/auth/register", json=REGISTER)

    response = await client.post("/api/auth/resend-otp", json={"email": "ada@example.com"})
    assert response.status_code == 200
    assert len(email_outbox.sent) == 2

    otp = email_outbox.last_otp("ada@example.com")
    response = await client.post(
        "/api/auth/verify-otp", json={"email": "ada@example.com", "otp": otp}
    )
    assert response.status_code == 200

    response = await client.post("/api/auth/resend-otp", json={"email": "ada@example.com"})
    assert response.status_code == 400
    assert response.json()["detail"] == "User is already verified"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_resend_otp_unknown_email(client):
    response = await client.post("/api/auth/resend-otp", json={"email": "nobody@example.com"})
    assert response.status_code == 404


# ---------------------------------------------------------------------------
# Login & access boundary
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_login_with_bad_credentials(client, customer):
    response = await client.post(
        "/api/auth/login", json={"email": customer.email, "password": "wrong-password"}
    )
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_unverified_user_is_asked_to_verify(client, email_outbox):
    response = await client.post("/api/auth/register", json=REGISTER)
    headers = {"Authorization": f"Bearer {response.json()['token']}"}

    response = await client.get("/api/cart", headers=headers)

    assert response.status_code == 403
    assert response.json()["requires_verification"] is True


@pytest.mark.asyncio
@pytest.mark.integration
async def test_invalid_token_is_unauthorized(client):
    response = await client.get(
        "/api/users/profile", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401


@pytest.mark.asyncio
@pytest.mark.integration
async def test_missing_token_is_unauthorized(client):
    response = await client.get("/api/orders")
    assert response.status_code == 401


# ---------------------------------------------------------------------------
# Password reset
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_forgot_and_reset_password(client, email_outbox, db_session):
    user = await create_user(db_session, email="reset@example.com")

    response = await client.post(
        "/api/auth/forgot-password", json={"email": "reset@example.com"}
    )
    assert response.status_code == 200
    assert find_user_email(email_outbox, "reset@example.com")["subject"] == "Password Reset"

    otp = email_outbox.last_otp("reset@example.com")
    response = await client.post(
        "/api/auth/reset-password",
        json={"email": "reset@example.com", "otp": otp, "password": "new-secret"},
    )
    assert response.status_code == 200

    response = await client.post(
        "/api/auth/login", json={"email": user.email, "password": "new-secret"}
    )
    assert response.status_code == 200

    # The OTP is single use
    response = await client.post(
        "/api/auth/reset-password",
        json={"email": "reset@example.com", "otp": otp, "password": "other-secret"},
    )
    assert response.status_code == 400
