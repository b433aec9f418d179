"""
Domain Layer - Core business entities and services for quote totals.

This module contains:
- entities/: Job, Category, LineItem, Settings and computed totals
- services/: Surcharge resolution, category tree index, totals aggregation,
  input validation
"""

from .entities import (
    Settings, load_settings,
    Job, JobStatus, SurchargeMode, new_job,
    Category,
    LineItem, LineItemType,
    CategoryTotal, JobTotal, LineItemPrice,
)
from .services import (
    effective_surcharge,
    final_price,
    CategoryTree,
    calculate_job_total,
    calculate_category_total,
)

__all__ = [
    'Settings', 'load_settings',
    'Job', 'JobStatus', 'SurchargeMode', 'new_job',
    'Category',
    'LineItem', 'LineItemType',
    'CategoryTotal', 'JobTotal', 'LineItemPrice',
    'effective_surcharge', 'final_price',
    'CategoryTree',
    'calculate_job_total', 'calculate_category_total',
]
