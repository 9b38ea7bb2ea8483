# file: LISTINGS/core/errors.py
from typing import List, Optional

from pydantic import BaseModel


class FieldError(BaseModel):
    field: str
    message: str
    value: Optional[str] = None

    class Config:
        extra = "forbid"


class ListingValidationError(Exception):
    """Raised when submitted listing fields fail one or more rules."""

    def __init__(self, errors: List[FieldError]):
        self.errors = list(errors)
        super().__init__(", ".join(f"{e.field}: {e.message}" for e in self.errors))


class StoreError(Exception):
    """A store operation failed."""

    def __init__(self, category: str, operation: str, message: str = ""):
        self.category = category
        self.operation = operation
        super().__init__(message or f"{operation} failed for {category}")


class StoreUnavailable(StoreError):
    """The store could not be reached or timed out."""
