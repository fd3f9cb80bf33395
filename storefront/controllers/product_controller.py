from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status
import structlog

from storefront.core.config import settings
from storefront.core.security import (
    validate_admin_request,
    validate_delete_request,
    validate_request,
)
from storefront.models.product import ProductRead
from storefront.schemas.error_schemas import ValidationErrorResponse
from storefront.schemas.product_schemas import (
    ProductCreatedResponse,
    ProductDetailResponse,
    ProductForm,
    ProductSearchRequest,
)
from storefront.schemas.review_schemas import (
    ProductReviewResponse,
    ReviewCreateRequest,
    ReviewCreatedResponse,
)
from storefront.services.product_service import ProductService, get_product_service

logger = structlog.get_logger()

router = APIRouter(
    prefix="/products",
    tags=["Products"],
    responses={400: {"model": ValidationErrorResponse}},
)


@router.post("/", response_model=ProductCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    categoryid: Optional[str] = Form(None),
    brand: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    img_src: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None, alias=settings.upload_field_name),
    admin=Depends(validate_admin_request),
    service: ProductService = Depends(get_product_service),
):
    """Create a product, optionally with an uploaded image"""
    form = ProductForm(
        name=name,
        description=description,
        categoryid=categoryid,
        brand=brand,
        price=price,
        img_src=img_src,
    )
    product_id = await service.create_product(form, image)
    logger.info("Product created by admin", product_id=product_id, admin_id=str(admin.get("user_id")))
    return ProductCreatedResponse(productid=product_id)


@router.post("/search", response_model=List[ProductRead])
async def search_products(
    search: ProductSearchRequest,
    service: ProductService = Depends(get_product_service),
):
    """Partial match on brand and/or product name"""
    return await service.search_products(search)


@router.get("/{product_id}", response_model=Optional[ProductDetailResponse])
async def get_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
):
    """Get a product with its category name; null when it does not exist"""
    return await service.get_product(product_id)


@router.get("/", response_model=List[ProductRead])
async def get_products(service: ProductService = Depends(get_product_service)):
    return await service.get_products()


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=[Depends(validate_delete_request)],
)
async def delete_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
):
    await service.delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{product_id}/review",
    response_model=ReviewCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_review(
    product_id: str,
    review: ReviewCreateRequest,
    current_user=Depends(validate_request),
    service: ProductService = Depends(get_product_service),
):
    """Review a product as the authenticated user"""
    review_id = await service.create_review(product_id, current_user.get("user_id"), review)
    return ReviewCreatedResponse(reviewid=review_id)


@router.get("/{product_id}/review", response_model=List[ProductReviewResponse])
async def get_reviews(
    product_id: str,
    service: ProductService = Depends(get_product_service),
):
    return await service.get_reviews(product_id)
