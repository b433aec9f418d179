"""
Totals Value Objects - Computed, never persisted.

Every total is recomputed from the job's categories and line items
on each request; these objects are the result of one such pass.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class LineItemPrice:
    """Price breakdown for a single line item."""

    line_item_id: str
    base_price: float
    effective_surcharge: float
    final_price: float

    @property
    def surcharge_amount(self) -> float:
        return self.final_price - self.base_price

    def to_dict(self) -> dict:
        return {
            'line_item_id': self.line_item_id,
            'base_price': self.base_price,
            'effective_surcharge': self.effective_surcharge,
            'surcharge_amount': self.surcharge_amount,
            'final_price': self.final_price,
        }


@dataclass(frozen=True)
class CategoryTotal:
    """
    Totals for a category including all of its descendants.

    Attributes:
        category_id: Target category
        subtotal: Sum of base prices
        surcharge_total: total - subtotal
        total: Sum of final prices
    """

    category_id: str
    subtotal: float = 0.0
    surcharge_total: float = 0.0
    total: float = 0.0

    def to_dict(self) -> dict:
        return {
            'category_id': self.category_id,
            'subtotal': self.subtotal,
            'surcharge_total': self.surcharge_total,
            'total': self.total,
        }


@dataclass(frozen=True)
class JobTotal:
    """
    Totals for a whole job.

    The per-type subtotals include each item's resolved surcharge, so
    material + labor + equipment == grand_total.

    Attributes:
        subtotal: Sum of all base prices
        surcharge_total: grand_total - subtotal
        grand_total: Sum of all final prices
        material_subtotal: Final prices of material items
        labor_subtotal: Final prices of labor items
        equipment_subtotal: Final prices of equipment items
    """

    subtotal: float = 0.0
    surcharge_total: float = 0.0
    grand_total: float = 0.0
    material_subtotal: float = 0.0
    labor_subtotal: float = 0.0
    equipment_subtotal: float = 0.0

    def to_dict(self) -> dict:
        return {
            'subtotal': self.subtotal,
            'surcharge_total': self.surcharge_total,
            'grand_total': self.grand_total,
            'material_subtotal': self.material_subtotal,
            'labor_subtotal': self.labor_subtotal,
            'equipment_subtotal': self.equipment_subtotal,
        }
