from typing import List
from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession
from storefront.dao.base_dao import BaseDAO
from storefront.models.product import Product
from storefront.models.review import Review
from storefront.models.user import User
import structlog

logger = structlog.get_logger()


class ReviewDAO(BaseDAO[Review]):
    def __init__(self):
        super().__init__(Review)

    async def get_for_product(self, db: AsyncSession, product_id: int) -> List[dict]:
        """Reviews of a product with the reviewer's username"""
        try:
            result = await db.execute(
                select(
                    Product.id.label("productid"),
                    User.id.label("userid"),
                    User.username.label("username"),
                    Review.rating.label("rating"),
                    Review.review.label("review"),
                    Review.created_at.label("created_at"),
                )
                .join(Review, Product.id == Review.productid)
                .join(User, User.id == Review.userid)
                .where(Product.id == product_id)
            )
            return [dict(row) for row in result.mappings().all()]
        except Exception as e:
            logger.error("Error getting reviews for product", product_id=product_id, error=str(e))
            raise


review_dao = ReviewDAO()
