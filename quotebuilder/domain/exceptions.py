"""
Domain Exceptions for the Quote Builder.

Custom exceptions enforcing business rules:
- Category tree integrity
- Closed enums (surcharge mode, line item type)
- Field-level input validation
"""
from typing import List, Optional


INTERNAL_ERROR_CODE = "INTERNAL"
INTERNAL_ERROR_MESSAGE = "An unexpected error occurred"


class DomainError(Exception):
    """Base exception for all domain errors."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


# =============================================================================
# Category Exceptions
# =============================================================================

class CategoryNotFoundError(DomainError):
    """Raised when a category cannot be found in the job's tree."""

    def __init__(self, category_id: str):
        message = f"Category with id '{category_id}' not found"
        super().__init__(message, code="CATEGORY_NOT_FOUND")
        self.category_id = category_id


class CategoryCycleError(DomainError):
    """Raised when walking the category tree revisits a category."""

    def __init__(self, category_id: str, path: Optional[List[str]] = None):
        self.path = list(path or [])
        trail = " -> ".join(self.path + [category_id]) if self.path else category_id
        message = f"Category tree contains a cycle at '{category_id}' ({trail})"
        super().__init__(message, code="CATEGORY_CYCLE")
        self.category_id = category_id


class CategoryDepthExceededError(DomainError):
    """Raised when a category would be nested deeper than allowed."""

    def __init__(self, parent_id: str, max_depth: int):
        message = (
            f"Cannot add a subcategory under '{parent_id}': "
            f"maximum category nesting depth is {max_depth} levels"
        )
        super().__init__(message, code="CATEGORY_DEPTH_EXCEEDED")
        self.parent_id = parent_id
        self.max_depth = max_depth


# =============================================================================
# Enum Exceptions
# =============================================================================

class InvalidSurchargeModeError(DomainError):
    """Raised when a surcharge mode is not 'stacking' or 'override'."""

    def __init__(self, value):
        message = f"Surcharge mode must be 'stacking' or 'override', got {value!r}"
        super().__init__(message, code="INVALID_SURCHARGE_MODE")
        self.value = value


class InvalidLineItemTypeError(DomainError):
    """Raised when a line item type is not material, labor or equipment."""

    def __init__(self, value):
        message = (
            f"Line item type must be 'material', 'labor' or 'equipment', got {value!r}"
        )
        super().__init__(message, code="INVALID_LINE_ITEM_TYPE")
        self.value = value


# =============================================================================
# Validation Exceptions
# =============================================================================

class ValidationError(DomainError):
    """
    Raised when input validation fails.

    Carries every field error found so callers can surface them all at once.
    """

    def __init__(self, errors: list):
        self.errors = list(errors)
        summary = "; ".join(f"{e.field}: {e.message}" for e in self.errors)
        super().__init__(f"Validation failed: {summary}", code="VALIDATION_ERROR")

    @property
    def fields(self) -> List[str]:
        return [e.field for e in self.errors]


class QuoteDocumentError(DomainError):
    """Raised when a quote document cannot be read or parsed."""

    def __init__(self, source: str, reason: str):
        message = f"Cannot load quote document '{source}': {reason}"
        super().__init__(message, code="INVALID_QUOTE_DOCUMENT")
        self.source = source
        self.reason = reason


# =============================================================================
# Helpers
# =============================================================================

def error_code(exc: Optional[BaseException]) -> str:
    """Return the machine code for an exception ('' for None)."""
    if exc is None:
        return ""
    if isinstance(exc, DomainError):
        return exc.code
    return INTERNAL_ERROR_CODE


def error_message(exc: Optional[BaseException]) -> str:
    """Return a user-facing message; non-domain errors are not leaked."""
    if exc is None:
        return ""
    if isinstance(exc, DomainError):
        return exc.message
    return INTERNAL_ERROR_MESSAGE
