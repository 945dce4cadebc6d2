"""Store commerce models: carts, wishlists, orders."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from libs.db.types import UTCDateTime
from services.store_service.models.catalog import Product
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    Uuid,
    false,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

# A cart or wishlist belongs either to a user or to a guest session, never both.
SINGLE_OWNER_SQL = "(user_id IS NULL) <> (session_id IS NULL)"

# ============================================================================
# CART MODELS
# ============================================================================


class Cart(Base):
    """Shopping cart of a user or of a guest session."""

    __tablename__ = "carts"
    __table_args__ = (CheckConstraint(SINGLE_OWNER_SQL, name="single_owner"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, unique=True, nullable=True
    )  # users.id
    session_id: Mapped[Optional[str]] = mapped_column(
        String(100), unique=True, nullable=True
    )  # Guest carts

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utc_now, onupdate=utc_now
    )

    items: Mapped[list["CartItem"]] = relationship(
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItem.created_at",
        lazy="selectin",
    )

    __mapper_args__ = {"version_id_col": version}

    def line_for(self, product_id: uuid.UUID) -> Optional["CartItem"]:
        return next((i for i in self.items if i.product_id == product_id), None)

    def touch(self) -> None:
        """Mark the cart row modified so its version advances on flush."""
        self.updated_at = utc_now()

    def __repr__(self):
        return f"<Cart {self.id}>"


class CartItem(Base):
    """A (product, quantity) line in a cart."""

    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", name="uq_cart_items_cart_product"),
        CheckConstraint("quantity > 0", name="quantity_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    cart_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("carts.id", ondelete="CASCADE"), index=True
    )
    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("products.id", ondelete="CASCADE"), index=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)

    cart: Mapped[Cart] = relationship(back_populates="items")
    product: Mapped[Product] = relationship(lazy="selectin")


# ============================================================================
# WISHLIST MODELS
# ============================================================================


class Wishlist(Base):
    """Saved products of a user or of a guest session."""

    __tablename__ = "wishlists"
    __table_args__ = (CheckConstraint(SINGLE_OWNER_SQL, name="single_owner"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, unique=True, nullable=True
    )
    session_id: Mapped[Optional[str]] = mapped_column(
        String(100), unique=True, nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utc_now, onupdate=utc_now
    )

    items: Mapped[list["WishlistItem"]] = relationship(
        back_populates="wishlist",
        cascade="all, delete-orphan",
        order_by="WishlistItem.created_at",
        lazy="selectin",
    )

    def contains(self, product_id: uuid.UUID) -> bool:
        return any(item.product_id == product_id for item in self.items)

    def __repr__(self):
        return f"<Wishlist {self.id}>"


class WishlistItem(Base):
    __tablename__ = "wishlist_items"
    __table_args__ = (
        UniqueConstraint(
            "wishlist_id", "product_id", name="uq_wishlist_items_wishlist_product"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    wishlist_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("wishlists.id", ondelete="CASCADE"), index=True
    )
    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("products.id", ondelete="CASCADE"), index=True
    )

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)

    wishlist: Mapped[Wishlist] = relationship(back_populates="items")
    product: Mapped[Product] = relationship(lazy="selectin")


# ============================================================================
# ORDER MODELS
# ============================================================================


class Order(Base):
    """A placed order. Lines, address and prices never change after creation."""

    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, index=True)  # users.id

    # Customer snapshot
    customer_name: Mapped[str] = mapped_column(String(100), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(255), nullable=False)

    shipping_address: Mapped[dict] = mapped_column(JSON, nullable=False)
    payment_method: Mapped[str] = mapped_column(String(50), nullable=False)
    payment_result: Mapped[Optional[dict]] = mapped_column(
        JSON, nullable=True
    )  # {"id", "status", "update_time", "email_address"} as reported by the client

    # Pricing
    items_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    tax_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    shipping_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    # State
    is_paid: Mapped[bool] = mapped_column(Boolean, default=False, server_default=false())
    paid_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    is_delivered: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false()
    )
    delivered_at: Mapped[Optional[datetime]] = mapped_column(
        UTCDateTime, nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utc_now, onupdate=utc_now
    )

    items: Mapped[list["OrderItem"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Order {self.id}>"


class OrderItem(Base):
    """Snapshot of a purchased product at order time."""

    __tablename__ = "order_items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("orders.id", ondelete="CASCADE"), index=True
    )
    product_id: Mapped[uuid.UUID] = mapped_column(Uuid)  # no FK, survives deletion
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    image: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    order: Mapped[Order] = relationship(back_populates="items")
