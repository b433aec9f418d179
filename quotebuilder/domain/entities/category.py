"""
Category Entity - Organizational grouping within a job.

Categories form a tree per job through optional parent identifiers.
The tree itself is never stored; see services.category_tree.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Category:
    """
    A node in a job's category tree.

    Attributes:
        id: Unique identifier
        job_id: Owning job
        parent_id: Parent category (None = top level)
        name: Display name
        surcharge_percent: Own surcharge (None = inherit, contributes nothing)
        sort_order: Position among siblings
    """

    id: str
    job_id: str = ""
    parent_id: Optional[str] = None
    name: str = ""
    surcharge_percent: Optional[float] = None
    sort_order: int = 0

    @property
    def is_top_level(self) -> bool:
        return self.parent_id is None

    @property
    def has_surcharge(self) -> bool:
        # An explicit 0% is still a value
        return self.surcharge_percent is not None

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'job_id': self.job_id,
            'parent_id': self.parent_id,
            'name': self.name,
            'surcharge_percent': self.surcharge_percent,
            'sort_order': self.sort_order,
        }
