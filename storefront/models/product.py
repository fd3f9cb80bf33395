from sqlmodel import SQLModel, Field
from typing import Optional
from decimal import Decimal


class ProductBase(SQLModel):
    name: str = Field(index=True)
    description: str
    categoryid: int = Field(foreign_key="Categories.id")
    brand: str = Field(index=True)
    price: Decimal = Field(max_digits=10, decimal_places=2)
    img_name: Optional[str] = None
    img_src: Optional[str] = None


class Product(ProductBase, table=True):
    __tablename__ = "Products"

    id: Optional[int] = Field(default=None, primary_key=True)


class ProductRead(ProductBase):
    id: int
