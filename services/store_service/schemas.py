"""Pydantic schemas for store service."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from services.store_service.models import Material, ProductCategory

# ============================================================================
# PRODUCT SCHEMAS
# ============================================================================


class Dimensions(BaseModel):
    length: Optional[float] = Field(None, ge=0)
    width: Optional[float] = Field(None, ge=0)
    height: Optional[float] = Field(None, ge=0)


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    discount: int = Field(0, ge=0, le=100)
    category: ProductCategory
    material: Optional[Material] = None
    weight: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    dimensions: Optional[Dimensions] = None
    images: list[str] = Field(..., min_length=1)
    tags: list[str] = []
    featured: bool = False
    is_new: bool = False
    count_in_stock: int = Field(0, ge=0)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    """Partial update; only fields present in the request are applied."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    discount: Optional[int] = Field(None, ge=0, le=100)
    category: Optional[ProductCategory] = None
    material: Optional[Material] = None
    weight: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    dimensions: Optional[Dimensions] = None
    images: Optional[list[str]] = Field(None, min_length=1)
    tags: Optional[list[str]] = None
    featured: Optional[bool] = None
    is_new: Optional[bool] = None
    count_in_stock: Optional[int] = Field(None, ge=0)


class ProductResponse(ProductBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    effective_price: Decimal
    rating: float
    num_reviews: int
    sold: int
    created_at: datetime
    updated_at: datetime


class ProductListResponse(BaseModel):
    products: list[ProductResponse]
    page: int
    pages: int
    total: int


class ProductSummary(BaseModel):
    """Live product data shown next to cart and wishlist entries."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    image: Optional[str] = Field(None, validation_alias="primary_image")
    price: Decimal
    discount: int
    effective_price: Decimal
    count_in_stock: int
    rating: float
    num_reviews: int


# ============================================================================
# REVIEW SCHEMAS
# ============================================================================


class ReviewCreate(BaseModel):
    rating: int
    comment: str


class ReviewUpdate(BaseModel):
    rating: Optional[int] = None
    comment: Optional[str] = None


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    product_id: uuid.UUID
    user_id: uuid.UUID
    name: str
    rating: int
    comment: str
    created_at: datetime
    updated_at: datetime


# ============================================================================
# CART SCHEMAS
# ============================================================================


class CartItemCreate(BaseModel):
    product_id: uuid.UUID
    quantity: int = 1


class CartItemUpdate(BaseModel):
    quantity: int


class CartItemResponse(BaseModel):
    product_id: uuid.UUID
    name: str
    image: Optional[str] = None
    price: Decimal
    discount: int
    effective_price: Decimal
    count_in_stock: int
    quantity: int
    line_total: Decimal


class CartResponse(BaseModel):
    id: uuid.UUID
    items: list[CartItemResponse] = []
    total_quantity: int
    items_price: Decimal
    updated_at: datetime


# ============================================================================
# WISHLIST SCHEMAS
# ============================================================================


class WishlistItemCreate(BaseModel):
    product_id: uuid.UUID


class WishlistResponse(BaseModel):
    id: uuid.UUID
    items: list[ProductSummary] = []


# ============================================================================
# ORDER SCHEMAS
# ============================================================================


class OrderLineCreate(BaseModel):
    product_id: uuid.UUID
    quantity: int


class ShippingAddress(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    street: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    postal_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=50)


class OrderCreate(BaseModel):
    items: list[OrderLineCreate]
    shipping_address: ShippingAddress
    payment_method: str = Field(..., min_length=1, max_length=50)
    clear_cart: bool = True


class PaymentResult(BaseModel):
    """Payment confirmation as reported by the client-side gateway."""

    id: Optional[str] = None
    status: Optional[str] = None
    update_time: Optional[str] = None
    email_address: Optional[str] = None


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: uuid.UUID
    name: str
    quantity: int
    price: Decimal
    image: Optional[str] = None


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    customer_name: str
    customer_email: str
    items: list[OrderItemResponse]
    shipping_address: ShippingAddress
    payment_method: str
    payment_result: Optional[PaymentResult] = None
    items_price: Decimal
    tax_price: Decimal
    shipping_price: Decimal
    total_price: Decimal
    is_paid: bool
    paid_at: Optional[datetime] = None
    is_delivered: bool
    delivered_at: Optional[datetime] = None
    created_at: datetime
