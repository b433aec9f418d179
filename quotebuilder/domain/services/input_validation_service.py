"""
Input Validation Service - Field-level checks run before data reaches the engine.

Each input's validate() returns every problem found as a list of
FieldError(field, message) instead of stopping at the first, so a form
submission can report all of them in one round trip. The totals engine
trusts anything that has cleared this gate.
"""
from dataclasses import dataclass
from typing import List, Optional
import math

from quotebuilder.config import get_config
from ..entities.category import Category
from ..entities.job import Job, SurchargeMode
from ..entities.line_item import LineItem, LineItemType
from ..entities.settings import Settings
from ..exceptions import ValidationError
from .category_tree import CategoryTree

_SURCHARGE_MODES = {m.value for m in SurchargeMode}
_LINE_ITEM_TYPES = {t.value for t in LineItemType}


@dataclass(frozen=True)
class FieldError:
    """A single field validation failure."""
    field: str
    message: str

    def to_dict(self) -> dict:
        return {'field': self.field, 'message': self.message}


def _name_max_length(override: Optional[int]) -> int:
    return override if override is not None else get_config().name_max_length


def _max_depth(override: Optional[int]) -> int:
    return override if override is not None else get_config().max_category_depth


def _validate_name(name: Optional[str], max_length: int) -> List[FieldError]:
    if not name or not name.strip():
        return [FieldError("name", "Name is required")]
    if len(name) > max_length:
        return [FieldError("name", f"Name must be less than {max_length} characters")]
    return []


def _is_finite(value) -> bool:
    return value is not None and math.isfinite(value)


def _validate_surcharge(field: str, value: Optional[float]) -> List[FieldError]:
    if value is None:
        return []
    if not math.isfinite(value):
        return [FieldError(field, "Surcharge must be a finite number")]
    if value < 0:
        return [FieldError(field, "Surcharge cannot be negative")]
    return []


def _normalize(value) -> Optional[str]:
    # Same normalization as the enums' parse()
    if value is None:
        return None
    return str(value).strip().lower()


def _mode_value(mode) -> Optional[str]:
    if isinstance(mode, SurchargeMode):
        return mode.value
    return _normalize(mode)


def _type_value(item_type) -> Optional[str]:
    if isinstance(item_type, LineItemType):
        return item_type.value
    return _normalize(item_type)


def raise_for_errors(errors: List[FieldError]) -> None:
    """
    Raise a ValidationError carrying every error, if there are any.

    Raises:
        ValidationError: If errors is non-empty
    """
    if errors:
        raise ValidationError(errors)


# =============================================================================
# Job
# =============================================================================

@dataclass
class JobInput:
    """Input for creating or updating a job."""
    name: str = ""
    customer_name: Optional[str] = None
    surcharge_percent: float = 0.0
    surcharge_mode: Optional[str] = None  # None = keep settings default

    def validate(self, name_max_length: Optional[int] = None) -> List[FieldError]:
        """Check the job input and return all field errors."""
        errors = _validate_name(self.name, _name_max_length(name_max_length))

        mode = _mode_value(self.surcharge_mode)
        if mode and mode not in _SURCHARGE_MODES:
            errors.append(FieldError(
                "surcharge_mode", "Surcharge mode must be 'stacking' or 'override'"
            ))

        errors.extend(_validate_surcharge("surcharge_percent", self.surcharge_percent))
        return errors

    def to_job(self, job_id: str, settings: Optional[Settings] = None) -> Job:
        """Build a Job; a missing mode falls back to the settings default."""
        settings = settings or Settings()
        return Job(
            id=job_id,
            name=self.name.strip(),
            customer_name=self.customer_name,
            surcharge_percent=self.surcharge_percent,
            surcharge_mode=_mode_value(self.surcharge_mode) or settings.default_surcharge_mode,
        )


# =============================================================================
# Category
# =============================================================================

@dataclass
class CategoryInput:
    """Input for creating or updating a category."""
    job_id: str = ""
    name: str = ""
    parent_id: Optional[str] = None
    surcharge_percent: Optional[float] = None
    sort_order: int = 0

    def validate(self, name_max_length: Optional[int] = None) -> List[FieldError]:
        """Check the category input and return all field errors."""
        errors = _validate_name(self.name, _name_max_length(name_max_length))
        errors.extend(_validate_surcharge("surcharge_percent", self.surcharge_percent))
        return errors

    def to_category(self, category_id: str) -> Category:
        return Category(
            id=category_id,
            job_id=self.job_id,
            parent_id=self.parent_id,
            name=self.name.strip(),
            surcharge_percent=self.surcharge_percent,
            sort_order=self.sort_order,
        )


def validate_category_depth(
    parent_depth: int,
    max_depth: Optional[int] = None,
) -> Optional[FieldError]:
    """
    Check whether a child of a category at parent_depth is allowed.

    Args:
        parent_depth: Depth of the intended parent (1 = top level)
        max_depth: Nesting limit (defaults to configuration, 3)

    Returns:
        FieldError on parent_id if the child would be too deep, else None
    """
    limit = _max_depth(max_depth)
    if parent_depth >= limit:
        return FieldError(
            "parent_id", f"Maximum category nesting depth is {limit} levels"
        )
    return None


def validate_category_parent(
    parent_id: Optional[str],
    job_id: str,
    tree: CategoryTree,
    max_depth: Optional[int] = None,
) -> List[FieldError]:
    """
    Check that a parent exists, belongs to the same job and has room below it.

    Top-level placement (parent_id None) is always allowed.
    """
    if parent_id is None:
        return []
    if parent_id not in tree:
        return [FieldError("parent_id", "Parent category not found")]
    if tree.get(parent_id).job_id != job_id:
        return [FieldError("parent_id", "Parent category belongs to a different job")]

    error = validate_category_depth(tree.depth(parent_id), max_depth)
    return [error] if error else []


# =============================================================================
# Line Item
# =============================================================================

@dataclass
class LineItemInput:
    """Input for creating or updating a line item."""
    category_id: str = ""
    type: Optional[str] = None
    name: str = ""
    description: Optional[str] = None
    quantity: float = 0.0
    unit: str = ""
    unit_price: float = 0.0
    surcharge_percent: Optional[float] = None
    sort_order: int = 0

    def validate(self, name_max_length: Optional[int] = None) -> List[FieldError]:
        """Check the line item input and return all field errors."""
        errors = _validate_name(self.name, _name_max_length(name_max_length))

        if _type_value(self.type) not in _LINE_ITEM_TYPES:
            errors.append(FieldError(
                "type", "Type must be 'material', 'labor' or 'equipment'"
            ))

        if not (_is_finite(self.quantity) and self.quantity > 0):
            errors.append(FieldError("quantity", "Quantity must be greater than 0"))

        if not self.unit or not self.unit.strip():
            errors.append(FieldError("unit", "Unit is required"))

        if not _is_finite(self.unit_price):
            errors.append(FieldError("unit_price", "Unit price must be a finite number"))
        elif self.unit_price < 0:
            errors.append(FieldError("unit_price", "Unit price cannot be negative"))

        errors.extend(_validate_surcharge("surcharge_percent", self.surcharge_percent))
        return errors

    def to_line_item(self, item_id: str) -> LineItem:
        return LineItem(
            id=item_id,
            category_id=self.category_id,
            type=_type_value(self.type),
            name=self.name.strip(),
            description=self.description,
            quantity=self.quantity,
            unit=self.unit.strip(),
            unit_price=self.unit_price,
            surcharge_percent=self.surcharge_percent,
            sort_order=self.sort_order,
        )


# =============================================================================
# Settings
# =============================================================================

@dataclass
class SettingsInput:
    """Input for updating application settings."""
    default_surcharge_mode: Optional[str] = None
    default_surcharge_percent: float = 0.0

    def validate(self) -> List[FieldError]:
        """Check the settings input and return all field errors."""
        errors: List[FieldError] = []
        if _mode_value(self.default_surcharge_mode) not in _SURCHARGE_MODES:
            errors.append(FieldError(
                "default_surcharge_mode",
                "Surcharge mode must be 'stacking' or 'override'",
            ))
        errors.extend(
            _validate_surcharge("default_surcharge_percent", self.default_surcharge_percent)
        )
        return errors

    def to_settings(self) -> Settings:
        return Settings(
            default_surcharge_mode=_mode_value(self.default_surcharge_mode),
            default_surcharge_percent=self.default_surcharge_percent,
        )
