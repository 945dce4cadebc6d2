"""Identity Service models package."""

from services.identity_service.models.core import (
    Address,
    User,
    normalize_default_address,
)

__all__ = [
    "Address",
    "User",
    "normalize_default_address",
]
