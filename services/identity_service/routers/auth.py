"""Identity auth router: registration, OTP verification, login, password reset."""

from fastapi import APIRouter, Depends, status
from libs.auth.security import create_access_token
from libs.common.emails.client import EmailClient, get_email_client
from libs.db.session import get_async_db
from services.identity_service.models import User
from services.identity_service.schemas import (
    AuthResponse,
    EmailRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    VerifyOTPRequest,
)
from services.identity_service.services import accounts
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(user: User, message: str | None = None) -> AuthResponse:
    return AuthResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        phone=user.phone,
        is_admin=user.is_admin,
        is_verified=user.is_verified,
        token=create_access_token(user.id),
        message=message,
    )


@router.post(
    "/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED
)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_async_db),
    email_client: EmailClient = Depends(get_email_client),
):
    """Create an unverified account and email a verification OTP."""
    user = await accounts.register_user(
        db,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        email_client=email_client,
    )
    return _auth_response(
        user,
        "Registration successful. Please check your email for verification OTP.",
    )


@router.post("/verify-otp", response_model=AuthResponse)
async def verify_otp(
    payload: VerifyOTPRequest,
    db: AsyncSession = Depends(get_async_db),
):
    """Consume the OTP and mark the account verified."""
    user = await accounts.verify_otp(db, email=payload.email, otp=payload.otp)
    return _auth_response(user, "Account verified successfully")


@router.post("/resend-otp", response_model=MessageResponse)
async def resend_otp(
    payload: EmailRequest,
    db: AsyncSession = Depends(get_async_db),
    email_client: EmailClient = Depends(get_email_client),
):
    await accounts.resend_otp(db, email=payload.email, email_client=email_client)
    return MessageResponse(message="OTP sent successfully")


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_async_db),
):
    user = await accounts.authenticate(db, email=payload.email, password=payload.password)
    return _auth_response(user)


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    payload: EmailRequest,
    db: AsyncSession = Depends(get_async_db),
    email_client: EmailClient = Depends(get_email_client),
):
    """Email a password reset OTP."""
    await accounts.request_password_reset(
        db, email=payload.email, email_client=email_client
    )
    return MessageResponse(message="OTP sent successfully")


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    payload: ResetPasswordRequest,
    db: AsyncSession = Depends(get_async_db),
):
    await accounts.reset_password(
        db, email=payload.email, otp=payload.otp, password=payload.password
    )
    return MessageResponse(message="Password reset successful")
