from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import Boolean, String, Uuid, column, select, table
from sqlalchemy.ext.asyncio import AsyncSession

from libs.auth.models import AuthUser
from libs.auth.security import decode_access_token
from libs.common.errors import ForbiddenError, UnauthorizedError
from libs.db.session import get_async_db

security = HTTPBearer(auto_error=False)

# Lightweight reference to the identity service's users table, so every
# service can resolve callers without importing identity models.
users_ref = table(
    "users",
    column("id", Uuid),
    column("email", String),
    column("name", String),
    column("is_admin", Boolean),
    column("is_verified", Boolean),
)


async def _resolve_user(db: AsyncSession, token: str) -> AuthUser:
    user_id = decode_access_token(token)
    if user_id is None:
        raise UnauthorizedError("Not authorized, token failed")

    result = await db.execute(select(users_ref).where(users_ref.c.id == user_id))
    row = result.mappings().first()
    if row is None:
        raise UnauthorizedError("Not authorized, user not found")

    return AuthUser(
        user_id=row["id"],
        email=row["email"],
        name=row["name"],
        is_admin=bool(row["is_admin"]),
        is_verified=bool(row["is_verified"]),
    )


async def get_current_user(
    token: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    db: AsyncSession = Depends(get_async_db),
) -> AuthUser:
    """
    Validate the bearer token and return the user it belongs to.
    """
    if token is None:
        raise UnauthorizedError("Not authorized, no token")
    return await _resolve_user(db, token.credentials)


async def get_optional_user(
    token: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    db: AsyncSession = Depends(get_async_db),
) -> Optional[AuthUser]:
    """
    Like `get_current_user`, but anonymous callers resolve to None.

    A token that is present but invalid is still rejected.
    """
    if token is None:
        return None
    return await _resolve_user(db, token.credentials)


def _ensure_verified(user: AuthUser) -> AuthUser:
    if not user.is_verified:
        raise ForbiddenError(
            "Account not verified. Please verify your email to access this resource.",
            requires_verification=True,
        )
    return user


async def require_verified(
    current_user: Annotated[AuthUser, Depends(get_current_user)]
) -> AuthUser:
    """Authenticated caller whose email has been verified."""
    return _ensure_verified(current_user)


async def get_optional_verified_user(
    current_user: Annotated[Optional[AuthUser], Depends(get_optional_user)]
) -> Optional[AuthUser]:
    """Guest (None) or a verified caller; unverified accounts are refused."""
    if current_user is None:
        return None
    return _ensure_verified(current_user)


async def require_admin(
    current_user: Annotated[AuthUser, Depends(require_verified)]
) -> AuthUser:
    """Verified caller carrying the admin flag."""
    if not current_user.is_admin:
        raise ForbiddenError("Not authorized as an admin")
    return current_user
