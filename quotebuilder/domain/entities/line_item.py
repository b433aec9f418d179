"""
Line Item Entity - Atomic priced entry of a quote.

Implements:
- Line item taxonomy (material, labor, equipment)
- Derived base price (quantity x unit price)
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..exceptions import InvalidLineItemTypeError


class LineItemType(Enum):
    """Classification of a line item by type."""
    MATERIAL = "material"
    LABOR = "labor"
    EQUIPMENT = "equipment"

    @classmethod
    def parse(cls, value) -> "LineItemType":
        """Coerce a string or LineItemType into a LineItemType."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidLineItemTypeError(value)


@dataclass(frozen=True)
class LineItem:
    """
    A single material, labor or equipment entry in a category.

    Quantity and unit price are validated upstream (quantity > 0,
    unit price >= 0); the entity does not re-check them.

    Attributes:
        id: Unique identifier
        category_id: Owning category
        type: Material, labor or equipment
        quantity: Number of units
        unit: Free-text unit label (ea, hr, sqft, ...)
        unit_price: Price per unit before surcharge
        surcharge_percent: Own surcharge (None = inherit)
        name: Display name
        description: Optional free text
        sort_order: Position within the category
    """

    id: str
    category_id: str
    type: LineItemType = LineItemType.MATERIAL
    quantity: float = 0.0
    unit: str = ""
    unit_price: float = 0.0
    surcharge_percent: Optional[float] = None
    name: str = ""
    description: Optional[str] = None
    sort_order: int = 0

    def __post_init__(self):
        object.__setattr__(self, 'type', LineItemType.parse(self.type))

    @property
    def base_price(self) -> float:
        """Quantity times unit price, before any surcharge."""
        return self.quantity * self.unit_price

    @property
    def has_surcharge(self) -> bool:
        return self.surcharge_percent is not None

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'category_id': self.category_id,
            'type': self.type.value,
            'name': self.name,
            'description': self.description,
            'quantity': self.quantity,
            'unit': self.unit,
            'unit_price': self.unit_price,
            'surcharge_percent': self.surcharge_percent,
            'sort_order': self.sort_order,
            'base_price': self.base_price,
        }
