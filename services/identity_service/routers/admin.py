"""Admin users router."""

import uuid

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.identity_service.schemas import (
    AdminUserUpdate,
    ProfileResponse,
    UserSummary,
)
from services.identity_service.services import accounts
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/users", tags=["admin-users"])
logger = get_logger(__name__)


@router.get("", response_model=list[UserSummary])
async def list_users(
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await accounts.list_users(db)


@router.get("/{user_id}", response_model=ProfileResponse)
async def get_user(
    user_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await accounts.get_user(db, user_id)


@router.put("/{user_id}", response_model=UserSummary)
async def update_user(
    user_id: uuid.UUID,
    payload: AdminUserUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    user = await accounts.get_user(db, user_id)
    updated = await accounts.update_account(
        db, user, **payload.model_dump(exclude_unset=True)
    )
    logger.info("Admin %s updated user %s", current_user.user_id, user_id)
    return updated


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await accounts.delete_user(db, user_id)
    return None
