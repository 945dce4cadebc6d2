"""Store catalog models: products and their reviews."""

import uuid
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from libs.db.types import UTCDateTime
from services.store_service.models.enums import Material, ProductCategory, enum_values
from services.store_service.pricing import effective_unit_price
from sqlalchemy import JSON, Boolean, CheckConstraint
from sqlalchemy import Enum as SAEnum
from sqlalchemy import (
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    false,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

# ============================================================================
# CATALOG MODELS
# ============================================================================


class Product(Base):
    """Sellable items (e.g., 'Rose Gold Tennis Bracelet')."""

    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price >= 0", name="price_non_negative"),
        CheckConstraint("discount >= 0 AND discount <= 100", name="discount_range"),
        CheckConstraint("count_in_stock >= 0", name="stock_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Basic info
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[ProductCategory] = mapped_column(
        SAEnum(
            ProductCategory,
            values_callable=enum_values,
            name="product_category_enum",
        ),
        nullable=False,
    )
    material: Mapped[Optional[Material]] = mapped_column(
        SAEnum(Material, values_callable=enum_values, name="product_material_enum"),
        nullable=True,
    )
    weight: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    dimensions: Mapped[Optional[dict]] = mapped_column(
        JSON, nullable=True
    )  # {"length": .., "width": .., "height": ..}

    # Pricing
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    discount: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    # Media and merchandising
    images: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    featured: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false()
    )
    is_new: Mapped[bool] = mapped_column(Boolean, default=False, server_default=false())

    # Inventory
    count_in_stock: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0"
    )
    sold: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    # Review aggregate, always derived from `reviews`
    rating: Mapped[float] = mapped_column(Float, default=0.0, server_default="0")
    num_reviews: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utc_now, onupdate=utc_now
    )

    reviews: Mapped[list["Review"]] = relationship(
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="Review.created_at",
    )

    __mapper_args__ = {"version_id_col": version}

    @property
    def effective_price(self) -> Decimal:
        return effective_unit_price(self.price, self.discount)

    @property
    def primary_image(self) -> Optional[str]:
        return self.images[0] if self.images else None

    def recalculate_rating(self) -> None:
        """Recompute `rating` and `num_reviews` from the loaded reviews."""
        ratings = [review.rating for review in self.reviews]
        self.num_reviews = len(ratings)
        if not ratings:
            self.rating = 0.0
            return
        mean = Decimal(sum(ratings)) / Decimal(len(ratings))
        self.rating = float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))

    def __repr__(self):
        return f"<Product {self.name}>"


class Review(Base):
    """One customer's rating and comment on a product."""

    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("product_id", "user_id", name="uq_reviews_product_user"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="rating_range"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("products.id", ondelete="CASCADE"), index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, index=True)  # users.id
    name: Mapped[str] = mapped_column(String(100), nullable=False)  # reviewer snapshot
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=utc_now, onupdate=utc_now
    )

    product: Mapped[Product] = relationship(back_populates="reviews")

    def __repr__(self):
        return f"<Review {self.rating} on {self.product_id}>"
