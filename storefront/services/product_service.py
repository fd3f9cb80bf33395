from decimal import Decimal, InvalidOperation
from typing import List, Optional

from fastapi import Depends, UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from storefront.core.database import get_async_session
from storefront.core.exceptions import FieldError, RequestValidationFailed, StoreError
from storefront.dao.product_dao import ProductDAO, product_dao
from storefront.dao.review_dao import ReviewDAO, review_dao
from storefront.models.product import Product
from storefront.schemas.product_schemas import ProductForm, ProductSearchRequest
from storefront.schemas.review_schemas import ReviewCreateRequest
from storefront.services.image_store import ImageStore, get_image_store
from storefront.services.validation import (
    SearchFilter,
    parse_int,
    validate_product_form,
    validate_review,
)

logger = structlog.get_logger()


class ProductService:
    """Product and review operations bound to one store session."""

    def __init__(
        self,
        db: AsyncSession,
        image_store: ImageStore,
        products: ProductDAO = product_dao,
        reviews: ReviewDAO = review_dao,
    ):
        self.db = db
        self.image_store = image_store
        self.product_dao = products
        self.review_dao = reviews

    async def create_product(self, form: ProductForm, image: Optional[UploadFile] = None) -> int:
        # The upload is handled before the form is validated
        img_name = await self.image_store.save(image) if image is not None else None

        errors = validate_product_form(form)
        if errors:
            if img_name:
                await self.image_store.discard(img_name)
            raise RequestValidationFailed(errors)

        product_data = {
            "name": form.name,
            "description": form.description,
            "categoryid": parse_int(form.categoryid),
            "brand": form.brand,
            "img_name": img_name,
            "img_src": form.img_src or None,
        }
        try:
            product_data["price"] = Decimal(form.price)
            product = await self.product_dao.create(self.db, obj_in=product_data)
        except (SQLAlchemyError, InvalidOperation) as e:
            logger.error("Error creating product", name=form.name, error=str(e))
            if img_name:
                await self.image_store.discard(img_name)
            raise StoreError("Product creation failed") from e

        logger.info("Product created successfully", product_id=product.id, img_name=img_name)
        return product.id

    async def search_products(self, search: ProductSearchRequest) -> List[Product]:
        search_filter = SearchFilter.from_raw(search.brand, search.keyword)
        if search_filter.is_empty:
            return []

        try:
            if search_filter.brand_filter is not None and search_filter.keyword_filter is not None:
                products = await self.product_dao.search_by_brand_and_name(
                    self.db, search_filter.brand_pattern, search_filter.keyword_pattern
                )
            elif search_filter.brand_filter is not None:
                products = await self.product_dao.search_by_brand(self.db, search_filter.brand_pattern)
            else:
                products = await self.product_dao.search_by_name(self.db, search_filter.keyword_pattern)
        except SQLAlchemyError as e:
            logger.error("Error searching products", brand=search.brand, keyword=search.keyword, error=str(e))
            raise StoreError("Product search failed") from e

        logger.info("Searched products", brand=search.brand, keyword=search.keyword, count=len(products))
        return products

    async def get_product(self, product_id) -> Optional[dict]:
        product_key = parse_int(product_id)
        if product_key is None:
            logger.info("Product not found", product_id=product_id)
            return None

        try:
            product = await self.product_dao.get_with_category(self.db, product_key)
        except SQLAlchemyError as e:
            logger.error("Error getting product", product_id=product_id, error=str(e))
            raise StoreError("Could not retrieve product") from e

        if product is None:
            logger.info("Product not found", product_id=product_id)
        return product

    async def get_products(self) -> List[Product]:
        try:
            products = await self.product_dao.get_all(self.db)
        except SQLAlchemyError as e:
            logger.error("Error getting products", error=str(e))
            raise StoreError("Could not retrieve products") from e

        logger.info("Retrieved products", count=len(products))
        return products

    async def delete_product(self, product_id) -> None:
        product_key = parse_int(product_id)
        if product_key is None:
            logger.info("Product delete processed", product_id=product_id, deleted=0)
            return

        try:
            deleted = await self.product_dao.delete_by_id(self.db, id=product_key)
        except SQLAlchemyError as e:
            logger.error("Error deleting product", product_id=product_id, error=str(e))
            raise StoreError("Product deletion failed") from e

        # Reviews of the product are left in place
        logger.info("Product delete processed", product_id=product_id, deleted=deleted)

    async def create_review(self, product_id, user_id, review_in: ReviewCreateRequest) -> int:
        errors = validate_review(review_in.rating, review_in.review)
        product_key = parse_int(product_id)
        if product_key is None:
            errors.append(FieldError(param="id", msg="Please provide a valid product id", value=product_id, location="params"))
        if errors:
            raise RequestValidationFailed(errors)

        review_data = {
            "userid": user_id,
            "productid": product_key,
            "rating": parse_int(review_in.rating),
            "review": str(review_in.review),
        }
        try:
            review = await self.review_dao.create(self.db, obj_in=review_data)
        except SQLAlchemyError as e:
            logger.error("Error creating review", product_id=product_id, user_id=str(user_id), error=str(e))
            raise StoreError("Review creation failed") from e

        logger.info("Review created successfully", review_id=review.id, product_id=product_id, user_id=str(user_id))
        return review.id

    async def get_reviews(self, product_id) -> List[dict]:
        product_key = parse_int(product_id)
        if product_key is None:
            return []

        try:
            reviews = await self.review_dao.get_for_product(self.db, product_key)
        except SQLAlchemyError as e:
            logger.error("Error getting reviews", product_id=product_id, error=str(e))
            raise StoreError("Could not retrieve reviews") from e

        logger.info("Retrieved reviews", product_id=product_id, count=len(reviews))
        return reviews


def get_product_service(
    db: AsyncSession = Depends(get_async_session),
    image_store: ImageStore = Depends(get_image_store),
) -> ProductService:
    """FastAPI dependency building a service around the request's session"""
    return ProductService(db, image_store)
