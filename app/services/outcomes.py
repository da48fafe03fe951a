# app/services/outcomes.py
"""
Expected, non-exceptional outcomes returned by ProductService.

Services return one of these instead of raising HTTPException so the
router can map each kind to a status code in one place. Unexpected
failures (database, storage) still propagate as exceptions.
"""
from dataclasses import dataclass, field

from app.services.validation import ValidationErrors, first_error

PRODUCT_NOT_FOUND = "The product doesn't exist"


@dataclass(frozen=True)
class ValidationFailed:
    errors: ValidationErrors = field(default_factory=dict)

    @property
    def message(self) -> str:
        return first_error(self.errors)


@dataclass(frozen=True)
class NotFound:
    message: str = PRODUCT_NOT_FOUND
