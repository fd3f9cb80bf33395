from typing import Any, List, Optional
from pydantic import BaseModel


class FieldError(BaseModel):
    """A single field-level violation as returned in a 400 body."""
    param: str
    msg: str
    value: Optional[Any] = None
    location: str = "body"


class RequestValidationFailed(Exception):
    def __init__(self, errors: List[FieldError]):
        self.errors = errors
        super().__init__(", ".join(f"{e.param}: {e.msg}" for e in errors))


class UploadRejectedError(RequestValidationFailed):
    def __init__(self, field: str, msg: str, filename: Optional[str] = None):
        self.field = field
        self.msg = msg
        super().__init__([FieldError(param=field, msg=msg, value=filename)])


class StoreError(Exception):
    """Raised when the persistence layer fails; details never reach the client."""
