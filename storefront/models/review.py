from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime, timezone


class ReviewBase(SQLModel):
    userid: int = Field(foreign_key="Users.id", index=True)
    productid: int = Field(foreign_key="Products.id", index=True)
    rating: int
    review: str


class Review(ReviewBase, table=True):
    __tablename__ = "Reviews"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), nullable=False)
