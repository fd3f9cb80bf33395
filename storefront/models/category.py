from sqlmodel import SQLModel, Field
from typing import Optional


class Category(SQLModel, table=True):
    __tablename__ = "Categories"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(nullable=False)
