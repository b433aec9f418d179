"""
Surcharge Resolver - Effective markup for a single line item.

Two combination policies, selected by the job's surcharge mode:
- Stacking: Job% + every present Category% + LineItem% (if present)
- Override: LineItem% > deepest Category% > ... > shallowest Category% > Job%

Absent (None) values never participate; an explicit 0 does.
"""
from typing import Sequence

from ..entities.category import Category
from ..entities.job import Job, SurchargeMode
from ..entities.line_item import LineItem
from ..entities.totals import LineItemPrice


def effective_surcharge(
    item: LineItem,
    job: Job,
    category_chain: Sequence[Category],
) -> float:
    """
    Calculate the surcharge percentage that applies to a line item.

    Args:
        item: Line item being priced
        job: Owning job (supplies mode and fallback percentage)
        category_chain: Ancestors of the item's category, root first,
            ending with the item's own category

    Returns:
        Effective surcharge percentage
    """
    if job.surcharge_mode == SurchargeMode.OVERRIDE:
        return _effective_surcharge_override(item, job, category_chain)
    return _effective_surcharge_stacking(item, job, category_chain)


def _effective_surcharge_override(
    item: LineItem,
    job: Job,
    category_chain: Sequence[Category],
) -> float:
    """Most specific present value wins; the job value is the fallback."""
    if item.surcharge_percent is not None:
        return item.surcharge_percent

    for category in reversed(category_chain):
        if category.surcharge_percent is not None:
            return category.surcharge_percent

    return job.surcharge_percent


def _effective_surcharge_stacking(
    item: LineItem,
    job: Job,
    category_chain: Sequence[Category],
) -> float:
    """Sum of every present value in the hierarchy."""
    total = job.surcharge_percent

    for category in category_chain:
        if category.surcharge_percent is not None:
            total += category.surcharge_percent

    if item.surcharge_percent is not None:
        total += item.surcharge_percent

    return total


def final_price(item: LineItem, surcharge: float) -> float:
    """
    Apply a surcharge percentage to the item's base price.

    final = base_price * (1 + surcharge / 100). No rounding is applied.
    """
    return item.base_price * (1 + surcharge / 100)


def price_line_item(
    item: LineItem,
    job: Job,
    category_chain: Sequence[Category],
) -> LineItemPrice:
    """Resolve the surcharge and price a line item in one step."""
    surcharge = effective_surcharge(item, job, category_chain)
    return LineItemPrice(
        line_item_id=item.id,
        base_price=item.base_price,
        effective_surcharge=surcharge,
        final_price=final_price(item, surcharge),
    )
