"""Address book operations.

All mutations return the full, ordered address book. The single-default
invariant is re-established by the before-flush normalization hook in
`services.identity_service.models.core`; the explicit demotions here make
the caller's intent win over the hook's "first default wins" rule.
"""

import uuid

from libs.common.errors import NotFoundError
from services.identity_service.models import Address, User
from sqlalchemy.ext.asyncio import AsyncSession


def _find_address(user: User, address_id: uuid.UUID) -> Address:
    address = next((a for a in user.addresses if a.id == address_id), None)
    if address is None:
        raise NotFoundError("Address not found")
    return address


def _make_default(user: User, address: Address) -> None:
    for other in user.addresses:
        other.is_default = other is address


async def add_address(
    db: AsyncSession,
    user: User,
    *,
    street: str,
    city: str,
    state: str,
    postal_code: str,
    country: str,
    is_default: bool = False,
) -> list[Address]:
    address = Address(
        street=street,
        city=city,
        state=state,
        postal_code=postal_code,
        country=country,
        is_default=False,
    )
    user.addresses.append(address)
    if is_default:
        _make_default(user, address)

    await db.commit()
    return list(user.addresses)


async def update_address(
    db: AsyncSession, user: User, address_id: uuid.UUID, changes: dict
) -> list[Address]:
    address = _find_address(user, address_id)
    make_default = changes.pop("is_default", None)
    for field, value in changes.items():
        if value is not None:
            setattr(address, field, value)
    if make_default:
        _make_default(user, address)

    await db.commit()
    return list(user.addresses)


async def delete_address(
    db: AsyncSession, user: User, address_id: uuid.UUID
) -> list[Address]:
    address = _find_address(user, address_id)
    user.addresses.remove(address)

    await db.commit()
    return list(user.addresses)


async def set_default_address(
    db: AsyncSession, user: User, address_id: uuid.UUID
) -> list[Address]:
    address = _find_address(user, address_id)
    _make_default(user, address)

    await db.commit()
    return list(user.addresses)
