from pydantic import BaseModel
from typing import Any, Optional
from datetime import datetime


class ReviewCreateRequest(BaseModel):
    # Left loose so every violation is reported by the review validator
    rating: Optional[Any] = None
    review: Optional[Any] = None


class ReviewCreatedResponse(BaseModel):
    reviewid: int


class ProductReviewResponse(BaseModel):
    productid: int
    userid: int
    username: str
    rating: int
    review: str
    created_at: datetime
