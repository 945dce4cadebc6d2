import re
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from libs.auth.models import AuthUser
from libs.auth.security import create_access_token
from libs.common.emails.client import EmailDeliveryError, get_email_client
from libs.db.base import Base
from libs.db.session import get_async_db
from services.gateway_service.app.main import app

# Import all models so metadata includes every table
from services.identity_service import models as _identity_models  # noqa: F401
from services.store_service import models as _store_models  # noqa: F401
from tests.factories import ProductFactory, UserFactory

OTP_PATTERN = re.compile(r"\b(\d{6})\b")


# ---------------------------------------------------------------------------
# Email
# ---------------------------------------------------------------------------


class FakeEmailClient:
    """Records outgoing mail instead of calling the gateway."""

    def __init__(self):
        self.sent: list[dict] = []
        self.fail = False

    async def send(self, to_email, subject, body, html_body=None):
        if self.fail:
            raise EmailDeliveryError("Email gateway returned 503")
        self.sent.append(
            {"to_email": to_email, "subject": subject, "body": body, "html": html_body}
        )

    def last_otp(self, to_email: str) -> str:
        messages = [m for m in self.sent if m["to_email"] == to_email]
        assert messages, f"no email sent to {to_email}"
        match = OTP_PATTERN.search(messages[-1]["body"])
        assert match, "no OTP in email body"
        return match.group(1)


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine(tmp_path):
    """
    A fresh SQLite database file per test.

    A file (not :memory:) lets concurrent requests use separate connections.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}")

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging and inspecting data; commit before calling the API."""
    async with session_factory() as session:
        yield session


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------


@pytest.fixture
def email_outbox() -> FakeEmailClient:
    return FakeEmailClient()


@pytest_asyncio.fixture
async def client(session_factory, email_outbox) -> AsyncGenerator[AsyncClient, None]:
    """
    Yield an AsyncClient for the gateway app.

    Each request gets its own session, as in production.
    """

    async def _get_test_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_async_db] = _get_test_db
    app.dependency_overrides[get_email_client] = lambda: email_outbox

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Users & auth helpers
# ---------------------------------------------------------------------------


def auth_headers(user) -> dict:
    """Bearer header for a persisted User."""
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


def as_auth_user(user) -> AuthUser:
    """The AuthUser the auth dependencies would resolve for `user`."""
    return AuthUser(
        user_id=user.id,
        email=user.email,
        name=user.name,
        is_admin=user.is_admin,
        is_verified=user.is_verified,
    )


async def create_user(db: AsyncSession, **overrides):
    user = UserFactory.create(**overrides)
    db.add(user)
    await db.commit()
    return user


async def create_product(db: AsyncSession, **overrides):
    product = ProductFactory.create(**overrides)
    db.add(product)
    await db.commit()
    return product


@pytest_asyncio.fixture
async def customer(db_session):
    return await create_user(db_session, name="Ada Customer")


@pytest_asyncio.fixture
async def admin_user(db_session):
    return await create_user(db_session, name="Store Admin", is_admin=True)


@pytest.fixture
def customer_headers(customer) -> dict:
    return auth_headers(customer)


@pytest.fixture
def admin_headers(admin_user) -> dict:
    return auth_headers(admin_user)


@pytest_asyncio.fixture
async def product(db_session):
    """A product with 5 units in stock."""
    return await create_product(db_session, count_in_stock=5)


def find_user_email(outbox: FakeEmailClient, to_email: str) -> Optional[dict]:
    return next((m for m in reversed(outbox.sent) if m["to_email"] == to_email), None)
