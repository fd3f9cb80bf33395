from pydantic import BaseModel
from typing import Optional
from decimal import Decimal


class ProductForm(BaseModel):
    """Raw text fields of the multipart product creation form."""
    name: Optional[str] = None
    description: Optional[str] = None
    categoryid: Optional[str] = None
    brand: Optional[str] = None
    price: Optional[str] = None
    img_src: Optional[str] = None


class ProductCreatedResponse(BaseModel):
    productid: int


class ProductSearchRequest(BaseModel):
    brand: str
    keyword: str


class ProductDetailResponse(BaseModel):
    name: str
    description: str
    categoryid: int
    categoryname: str
    brand: str
    price: Decimal
