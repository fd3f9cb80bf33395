# Import all models for easy access
from .user import User
from .category import Category
from .product import Product, ProductRead
from .review import Review

__all__ = [
    "User",
    "Category",
    "Product", "ProductRead",
    "Review",
]
