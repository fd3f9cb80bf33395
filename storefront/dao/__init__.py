# Export all DAO classes
from .base_dao import BaseDAO
from .product_dao import ProductDAO, product_dao
from .review_dao import ReviewDAO, review_dao

__all__ = [
    "BaseDAO",
    "ProductDAO",
    "product_dao",
    "ReviewDAO",
    "review_dao",
]
