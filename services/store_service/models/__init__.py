"""Store Service models package."""

from services.store_service.models.catalog import Product, Review
from services.store_service.models.commerce import (
    Cart,
    CartItem,
    Order,
    OrderItem,
    Wishlist,
    WishlistItem,
)
from services.store_service.models.enums import Material, ProductCategory

__all__ = [
    "Cart",
    "CartItem",
    "Material",
    "Order",
    "OrderItem",
    "Product",
    "ProductCategory",
    "Review",
    "Wishlist",
    "WishlistItem",
]
