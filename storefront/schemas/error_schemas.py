from pydantic import BaseModel
from typing import List
from storefront.core.exceptions import FieldError


class ValidationErrorResponse(BaseModel):
    errors: List[FieldError]
