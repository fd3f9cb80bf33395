"""Request validation for the product resource.

Every check here is a pure function over already-parsed input that returns
the list of violations, empty when the input is acceptable. Handlers run the
check and raise ``RequestValidationFailed`` themselves.
"""
import re
from dataclasses import dataclass
from typing import Any, List, Optional

from storefront.core.exceptions import FieldError
from storefront.schemas.product_schemas import ProductForm

_INT_RE = re.compile(r"^[-+]?[0-9]+$")

RATING_MIN = 0
RATING_MAX = 5


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    return str(value) == ""


def parse_int(value: Any) -> Optional[int]:
    """Integer value of ``value`` if it is an int, a whole float or an integer string."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    # JSON numbers like 5.0 carry an integer value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and _INT_RE.match(value):
        return int(value)
    return None


def validate_product_form(form: ProductForm) -> List[FieldError]:
    errors = []
    if _is_empty(form.name):
        errors.append(FieldError(param="name", msg="Please provide a valid name.", value=form.name))
    if _is_empty(form.description):
        errors.append(FieldError(param="description", msg="Please provide a valid description", value=form.description))
    if parse_int(form.categoryid) is None:
        errors.append(FieldError(param="categoryid", msg="Please provide a valid categoryid", value=form.categoryid))
    if _is_empty(form.brand):
        errors.append(FieldError(param="brand", msg="Please provide a valid brand", value=form.brand))
    # Presence only, the store decides whether the value is numeric
    if _is_empty(form.price):
        errors.append(FieldError(param="price", msg="Please provide a valid price", value=form.price))
    return errors


def validate_review(rating: Any, review: Any) -> List[FieldError]:
    errors = []
    parsed = parse_int(rating)
    if parsed is None or not RATING_MIN <= parsed <= RATING_MAX:
        errors.append(FieldError(param="rating", msg="Please provide a valid rating", value=rating))
    if _is_empty(review):
        errors.append(FieldError(param="review", msg="Please provide a valid review", value=review))
    return errors


def like_pattern(term: str) -> str:
    # Only the first literal "%20" is turned into a space; this is not URL decoding
    return "%" + term.replace("%20", " ", 1) + "%"


@dataclass(frozen=True)
class SearchFilter:
    """Search terms with empty input normalized to None."""
    brand_filter: Optional[str] = None
    keyword_filter: Optional[str] = None

    @classmethod
    def from_raw(cls, brand: str, keyword: str) -> "SearchFilter":
        return cls(
            brand_filter=brand if brand != "" else None,
            keyword_filter=keyword if keyword != "" else None,
        )

    @property
    def is_empty(self) -> bool:
        return self.brand_filter is None and self.keyword_filter is None

    @property
    def brand_pattern(self) -> Optional[str]:
        return like_pattern(self.brand_filter) if self.brand_filter is not None else None

    @property
    def keyword_pattern(self) -> Optional[str]:
        return like_pattern(self.keyword_filter) if self.keyword_filter is not None else None
