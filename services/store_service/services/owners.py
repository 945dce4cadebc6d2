"""Who a cart or wishlist belongs to: a user, or a guest's session id."""

import uuid
from dataclasses import dataclass
from typing import Optional

from libs.auth.models import AuthUser
from libs.common.errors import ValidationFailed


@dataclass(frozen=True)
class CartOwner:
    user_id: Optional[uuid.UUID] = None
    session_id: Optional[str] = None

    @classmethod
    def resolve(
        cls, user: Optional[AuthUser], session_id: Optional[str]
    ) -> "CartOwner":
        """Authenticated callers own their user-keyed collections; guests need a session id."""
        if user is not None:
            return cls(user_id=user.user_id)
        if session_id:
            return cls(session_id=session_id)
        raise ValidationFailed("Session ID required for guest cart")

    @property
    def is_guest(self) -> bool:
        return self.user_id is None

    def filter_for(self, model):
        """WHERE clause selecting `model` rows (Cart or Wishlist) of this owner."""
        if self.user_id is not None:
            return model.user_id == self.user_id
        return model.session_id == self.session_id

    def __str__(self) -> str:
        return f"user:{self.user_id}" if self.user_id else f"guest:{self.session_id}"
