"""
Totals Aggregation Service - Rolls line item prices up the category tree.

Implements the aggregation rules:
- JobTotal.subtotal = Σ(LineItem.base_price)
- JobTotal.grand_total = Σ(final_price(LineItem, effective_surcharge))
- JobTotal.surcharge_total = grand_total - subtotal
- CategoryTotal covers the category and every descendant category

Stateless: indices are built per call, nothing is cached between calls.
"""
from typing import Dict, Iterable, List, Optional, Sequence
import logging

from ..entities.category import Category
from ..entities.job import Job
from ..entities.line_item import LineItem, LineItemType
from ..entities.totals import CategoryTotal, JobTotal, LineItemPrice
from .category_tree import CategoryTree
from .surcharge_resolver import price_line_item

logger = logging.getLogger(__name__)


def calculate_job_total(
    job: Job,
    categories: Sequence[Category],
    line_items: Iterable[LineItem],
) -> JobTotal:
    """
    Compute all totals for a job.

    Args:
        job: Job supplying surcharge mode and job-level percentage
        categories: Every category of the job
        line_items: Every line item of the job

    Returns:
        JobTotal with overall and per-type figures
    """
    tree = CategoryTree(categories)

    subtotal = 0.0
    grand_total = 0.0
    by_type: Dict[LineItemType, float] = {t: 0.0 for t in LineItemType}
    count = 0

    for item in line_items:
        price = price_line_item(item, job, tree.chain(item.category_id))
        subtotal += price.base_price
        grand_total += price.final_price
        by_type[item.type] += price.final_price
        count += 1

    logger.debug(
        "Job %s: %d line items, subtotal=%s grand_total=%s",
        job.id, count, subtotal, grand_total,
    )

    return JobTotal(
        subtotal=subtotal,
        surcharge_total=grand_total - subtotal,
        grand_total=grand_total,
        material_subtotal=by_type[LineItemType.MATERIAL],
        labor_subtotal=by_type[LineItemType.LABOR],
        equipment_subtotal=by_type[LineItemType.EQUIPMENT],
    )


def calculate_category_total(
    category_id: str,
    job: Job,
    categories: Sequence[Category],
    line_items: Iterable[LineItem],
) -> CategoryTotal:
    """
    Compute totals for a category including all nested subcategories.

    Args:
        category_id: Target category
        job: Owning job
        categories: Every category of the job
        line_items: Every line item of the job (filtered here)

    Returns:
        CategoryTotal for the target's subtree
    """
    tree = CategoryTree(categories)
    return _category_total(category_id, job, tree, list(line_items))


def calculate_subcategory_totals(
    category_id: Optional[str],
    job: Job,
    categories: Sequence[Category],
    line_items: Iterable[LineItem],
) -> List[CategoryTotal]:
    """
    Compute a CategoryTotal for each direct child of a category.

    Pass None to get the totals of the job's top-level categories.
    Results follow the children's sort_order.
    """
    tree = CategoryTree(categories)
    items = list(line_items)
    return [
        _category_total(child.id, job, tree, items)
        for child in tree.children(category_id)
    ]


def price_line_items(
    job: Job,
    categories: Sequence[Category],
    line_items: Iterable[LineItem],
) -> Dict[str, LineItemPrice]:
    """Price every line item, keyed by line item id, for per-row display."""
    tree = CategoryTree(categories)
    return {
        item.id: price_line_item(item, job, tree.chain(item.category_id))
        for item in line_items
    }


def _category_total(
    category_id: str,
    job: Job,
    tree: CategoryTree,
    line_items: List[LineItem],
) -> CategoryTotal:
    """Sum the items whose category lies in the target's subtree."""
    scope = tree.descendant_ids(category_id)

    subtotal = 0.0
    total = 0.0
    for item in line_items:
        if item.category_id not in scope:
            continue
        price = price_line_item(item, job, tree.chain(item.category_id))
        subtotal += price.base_price
        total += price.final_price

    return CategoryTotal(
        category_id=category_id,
        subtotal=subtotal,
        surcharge_total=total - subtotal,
        total=total,
    )
