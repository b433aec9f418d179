"""
Domain Services - Surcharge resolution, tree indexing, totals and input validation.
"""

from .surcharge_resolver import effective_surcharge, final_price, price_line_item
from .category_tree import CategoryTree
from .totals_aggregation_service import (
    calculate_job_total,
    calculate_category_total,
    calculate_subcategory_totals,
    price_line_items,
)
from .input_validation_service import (
    FieldError,
    JobInput,
    CategoryInput,
    LineItemInput,
    SettingsInput,
    validate_category_depth,
    validate_category_parent,
    raise_for_errors,
)

__all__ = [
    'effective_surcharge',
    'final_price',
    'price_line_item',
    'CategoryTree',
    'calculate_job_total',
    'calculate_category_total',
    'calculate_subcategory_totals',
    'price_line_items',
    # Validation
    'FieldError',
    'JobInput',
    'CategoryInput',
    'LineItemInput',
    'SettingsInput',
    'validate_category_depth',
    'validate_category_parent',
    'raise_for_errors',
]
