"""Identity users router: own profile and address book."""

import uuid

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import require_verified
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.identity_service.models import User
from services.identity_service.schemas import (
    AddressCreate,
    AddressResponse,
    AddressUpdate,
    ProfileResponse,
    ProfileUpdate,
)
from services.identity_service.services import accounts, addresses
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/users", tags=["users"])


async def get_current_account(
    current_user: AuthUser = Depends(require_verified),
    db: AsyncSession = Depends(get_async_db),
) -> User:
    """The verified caller's full account record."""
    return await accounts.get_user(db, current_user.user_id)


# ============================================================================
# PROFILE
# ============================================================================


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(account: User = Depends(get_current_account)):
    return account


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    payload: ProfileUpdate,
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_async_db),
):
    return await accounts.update_account(
        db, account, **payload.model_dump(exclude_unset=True)
    )


# ============================================================================
# ADDRESS BOOK
# ============================================================================


@router.post(
    "/address",
    response_model=list[AddressResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_address(
    payload: AddressCreate,
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_async_db),
):
    """Add an address; the first address always becomes the default."""
    return await addresses.add_address(db, account, **payload.model_dump())


@router.put("/address/{address_id}", response_model=list[AddressResponse])
async def update_address(
    address_id: uuid.UUID,
    payload: AddressUpdate,
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_async_db),
):
    return await addresses.update_address(
        db, account, address_id, payload.model_dump(exclude_unset=True)
    )


@router.delete("/address/{address_id}", response_model=list[AddressResponse])
async def delete_address(
    address_id: uuid.UUID,
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete an address; removing the default promotes the first remaining one."""
    return await addresses.delete_address(db, account, address_id)


@router.put("/address/{address_id}/default", response_model=list[AddressResponse])
async def set_default_address(
    address_id: uuid.UUID,
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_async_db),
):
    return await addresses.set_default_address(db, account, address_id)
