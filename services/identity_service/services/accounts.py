"""Account lifecycle: registration, OTP verification, login, password reset."""

import uuid
from datetime import timedelta
from typing import Awaitable, Callable, Optional

from libs.auth.security import hash_password, verify_password
from libs.common.config import get_settings
from libs.common.emails.client import EmailClient, EmailDeliveryError
from libs.common.errors import (
    AlreadyExistsError,
    NotFoundError,
    UnauthorizedError,
    UpstreamError,
    ValidationFailed,
)
from libs.common.logging import get_logger
from services.identity_service.models import User
from services.identity_service.templates import (
    send_password_reset_email,
    send_verification_email,
)
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

OtpSender = Callable[[EmailClient, str, str, str, int], Awaitable[None]]


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(
        select(User).where(func.lower(User.email) == normalize_email(email))
    )
    return result.scalar_one_or_none()


async def get_user(db: AsyncSession, user_id: uuid.UUID) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def _require_user_by_email(db: AsyncSession, email: str) -> User:
    user = await get_user_by_email(db, email)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def _issue_and_send_otp(
    db: AsyncSession, user: User, email_client: EmailClient, sender: OtpSender
) -> None:
    """Persist a fresh OTP, then email it.

    If delivery fails the OTP is cleared again so the user can simply retry.
    """
    ttl_minutes = get_settings().OTP_EXPIRE_MINUTES
    otp = user.issue_otp(timedelta(minutes=ttl_minutes))
    await db.commit()

    try:
        await sender(email_client, user.email, user.name, otp, ttl_minutes)
    except EmailDeliveryError as e:
        logger.warning("OTP email to %s failed, rolling back OTP: %s", user.email, e)
        user.clear_otp()
        await db.commit()
        raise UpstreamError("Email could not be sent") from e


async def _consume_otp(db: AsyncSession, user: User, otp: str) -> None:
    """Validate and clear the user's OTP, or raise ValidationFailed."""
    if not user.has_pending_otp:
        raise ValidationFailed("OTP is not valid or has expired")

    if user.otp_expired():
        user.clear_otp()
        await db.commit()
        raise ValidationFailed("OTP has expired")

    if not user.otp_matches(otp.strip()):
        raise ValidationFailed("Invalid OTP")

    user.clear_otp()


async def register_user(
    db: AsyncSession,
    *,
    name: str,
    email: str,
    password: str,
    email_client: EmailClient,
) -> User:
    """Create an unverified account and send its verification OTP."""
    email = normalize_email(email)
    if await get_user_by_email(db, email):
        raise AlreadyExistsError("User already exists")

    user = User(
        name=name.strip(),
        email=email,
        password_hash=hash_password(password),
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        raise AlreadyExistsError("User already exists") from e

    await _issue_and_send_otp(db, user, email_client, send_verification_email)
    logger.info("Registered user %s", user.id)
    return user


async def verify_otp(db: AsyncSession, *, email: str, otp: str) -> User:
    user = await _require_user_by_email(db, email)
    await _consume_otp(db, user, otp)
    user.is_verified = True
    await db.commit()
    logger.info("Verified user %s", user.id)
    return user


async def resend_otp(db: AsyncSession, *, email: str, email_client: EmailClient) -> None:
    user = await _require_user_by_email(db, email)
    if user.is_verified:
        raise ValidationFailed("User is already verified")
    await _issue_and_send_otp(db, user, email_client, send_verification_email)


async def authenticate(db: AsyncSession, *, email: str, password: str) -> User:
    user = await get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        raise UnauthorizedError("Invalid credentials")
    return user


async def request_password_reset(
    db: AsyncSession, *, email: str, email_client: EmailClient
) -> None:
    user = await _require_user_by_email(db, email)
    await _issue_and_send_otp(db, user, email_client, send_password_reset_email)


async def reset_password(db: AsyncSession, *, email: str, otp: str, password: str) -> None:
    user = await _require_user_by_email(db, email)
    await _consume_otp(db, user, otp)
    user.password_hash = hash_password(password)
    await db.commit()
    logger.info("Password reset for user %s", user.id)


async def update_account(
    db: AsyncSession,
    user: User,
    *,
    name: Optional[str] = None,
    email: Optional[str] = None,
    phone: Optional[str] = None,
    password: Optional[str] = None,
    is_admin: Optional[bool] = None,
) -> User:
    """Apply a partial update; a changed email must stay unique."""
    if email is not None:
        email = normalize_email(email)
        if email != user.email:
            existing = await get_user_by_email(db, email)
            if existing is not None and existing.id != user.id:
                raise AlreadyExistsError("Email is already in use")
            user.email = email
    if name is not None:
        user.name = name.strip()
    if phone is not None:
        user.phone = phone
    if password is not None:
        user.password_hash = hash_password(password)
    if is_admin is not None:
        user.is_admin = is_admin

    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise AlreadyExistsError("Email is already in use") from e
    return user


async def list_users(db: AsyncSession) -> list[User]:
    result = await db.execute(select(User).order_by(User.created_at.desc()))
    return list(result.scalars().all())


async def delete_user(db: AsyncSession, user_id: uuid.UUID) -> None:
    user = await get_user(db, user_id)
    await db.delete(user)
    await db.commit()
    logger.info("Deleted user %s", user_id)
