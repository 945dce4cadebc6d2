"""Identity models: user accounts and their address book."""

import hmac
import secrets
import uuid
from datetime import datetime, timedelta
from itertools import chain
from typing import Optional

from libs.common.datetime_utils import ensure_utc, utc_now
from libs.db.base import Base
from libs.db.types import UTCDateTime
from sqlalchemy import Boolean, ForeignKey, Integer, String, Uuid, event, false
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

OTP_LENGTH = 6


class User(Base):
    """Customer and admin accounts."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    is_admin: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false()
    )
    is_verified: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false()
    )

    # One-time password for email verification and password reset
    otp_code: Mapped[Optional[str]] = mapped_column(String(OTP_LENGTH), nullable=True)
    otp_expires_at: Mapped[Optional[datetime]] = mapped_column(
        UTCDateTime, nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utc_now, onupdate=utc_now
    )

    addresses: Mapped[list["Address"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="Address.position",
        collection_class=ordering_list("position"),
        lazy="selectin",
    )

    def issue_otp(self, ttl: timedelta) -> str:
        """Generate a fresh numeric OTP, replacing any previous one."""
        code = str(secrets.randbelow(9 * 10 ** (OTP_LENGTH - 1)) + 10 ** (OTP_LENGTH - 1))
        self.otp_code = code
        self.otp_expires_at = utc_now() + ttl
        return code

    def clear_otp(self) -> None:
        self.otp_code = None
        self.otp_expires_at = None

    @property
    def has_pending_otp(self) -> bool:
        return bool(self.otp_code and self.otp_expires_at)

    def otp_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or utc_now()
        return ensure_utc(self.otp_expires_at) < now

    def otp_matches(self, code: str) -> bool:
        return hmac.compare_digest(self.otp_code or "", code)

    @property
    def default_address(self) -> Optional["Address"]:
        return next((a for a in self.addresses if a.is_default), None)


class Address(Base):
    """Entries in a user's address book."""

    __tablename__ = "user_addresses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    street: Mapped[str] = mapped_column(String(255))
    city: Mapped[str] = mapped_column(String(100))
    state: Mapped[str] = mapped_column(String(100))
    postal_code: Mapped[str] = mapped_column(String(20))
    country: Mapped[str] = mapped_column(String(100))
    is_default: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false()
    )
    position: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)

    user: Mapped[User] = relationship(back_populates="addresses")


def normalize_default_address(addresses: list[Address]) -> None:
    """Keep exactly one default in a non-empty address book.

    The first address flagged default wins and every other one is demoted;
    when none is flagged, the first address is promoted.
    """
    if not addresses:
        return
    keep = next((a for a in addresses if a.is_default), addresses[0])
    for address in addresses:
        address.is_default = address is keep


@event.listens_for(Session, "before_flush")
def _normalize_address_books(session, flush_context, instances) -> None:
    owners: dict[int, User] = {}
    for obj in chain(session.new, session.dirty):
        if isinstance(obj, User):
            owners[id(obj)] = obj
        elif isinstance(obj, Address) and obj.user is not None:
            owners[id(obj.user)] = obj.user
    for user in owners.values():
        normalize_default_address(user.addresses)
