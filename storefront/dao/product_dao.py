from typing import List, Optional
from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession
from storefront.dao.base_dao import BaseDAO
from storefront.models.product import Product
from storefront.models.category import Category
import structlog

logger = structlog.get_logger()


class ProductDAO(BaseDAO[Product]):
    def __init__(self):
        super().__init__(Product)

    async def search_by_brand_and_name(self, db: AsyncSession, brand_pattern: str, name_pattern: str) -> List[Product]:
        try:
            result = await db.execute(
                select(Product)
                .where(Product.brand.like(brand_pattern))
                .where(Product.name.like(name_pattern))
            )
            return result.scalars().all()
        except Exception as e:
            logger.error("Error searching products by brand and name",
                         brand=brand_pattern, name=name_pattern, error=str(e))
            raise

    async def search_by_brand(self, db: AsyncSession, brand_pattern: str) -> List[Product]:
        try:
            result = await db.execute(
                select(Product).where(Product.brand.like(brand_pattern))
            )
            return result.scalars().all()
        except Exception as e:
            logger.error("Error searching products by brand", brand=brand_pattern, error=str(e))
            raise

    async def search_by_name(self, db: AsyncSession, name_pattern: str) -> List[Product]:
        try:
            result = await db.execute(
                select(Product).where(Product.name.like(name_pattern))
            )
            return result.scalars().all()
        except Exception as e:
            logger.error("Error searching products by name", name=name_pattern, error=str(e))
            raise

    async def get_with_category(self, db: AsyncSession, product_id: int) -> Optional[dict]:
        """Product columns joined with its category name, or None."""
        try:
            result = await db.execute(
                select(
                    Product.name.label("name"),
                    Product.description.label("description"),
                    Product.categoryid,
                    Category.name.label("categoryname"),
                    Product.brand,
                    Product.price,
                )
                .join(Category, Product.categoryid == Category.id)
                .where(Product.id == product_id)
            )
            row = result.mappings().first()
            return dict(row) if row is not None else None
        except Exception as e:
            logger.error("Error getting product with category", product_id=product_id, error=str(e))
            raise


product_dao = ProductDAO()
