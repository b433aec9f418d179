"""
Domain Entities - Core business objects and computed totals.
"""

from .settings import Settings, load_settings
from .job import Job, JobStatus, SurchargeMode, new_job
from .category import Category
from .line_item import LineItem, LineItemType
from .totals import CategoryTotal, JobTotal, LineItemPrice

__all__ = [
    'Settings', 'load_settings',
    'Job', 'JobStatus', 'SurchargeMode', 'new_job',
    'Category',
    'LineItem', 'LineItemType',
    'CategoryTotal', 'JobTotal', 'LineItemPrice',
]
