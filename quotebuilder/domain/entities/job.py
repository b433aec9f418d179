"""
Job Entity - Top-level container for a quote.

Implements:
- Surcharge mode taxonomy (stacking, override)
- Quote lifecycle status
- Creation from application-wide Settings defaults
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from ..exceptions import InvalidSurchargeModeError
from .settings import Settings

DEFAULT_JOB_NAME = "New Quote"


class SurchargeMode(Enum):
    """How surcharges from the job, categories and line item combine."""
    STACKING = "stacking"  # Sum every level that has a value
    OVERRIDE = "override"  # Most specific level with a value wins

    @classmethod
    def parse(cls, value) -> "SurchargeMode":
        """Coerce a string or SurchargeMode into a SurchargeMode."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidSurchargeModeError(value)


class JobStatus(Enum):
    """Quote lifecycle status."""
    DRAFT = "draft"
    SENT = "sent"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"


@dataclass
class Job:
    """
    A quote for a single customer project.

    The totals engine only reads id, surcharge_percent and surcharge_mode;
    the remaining fields are carried for callers.

    Attributes:
        id: Unique identifier
        name: Display name
        surcharge_percent: Job-level surcharge (always present, default 0)
        surcharge_mode: How surcharges combine for this job's line items
        customer_name: Optional customer
        status: Lifecycle status
        expires_at: Optional date the quote lapses
        created_at: Creation timestamp
    """

    id: str = field(default_factory=lambda: str(uuid4()))
    name: str = ""
    surcharge_percent: float = 0.0
    surcharge_mode: SurchargeMode = SurchargeMode.STACKING
    customer_name: Optional[str] = None
    status: JobStatus = JobStatus.DRAFT
    expires_at: Optional[date] = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self):
        self.surcharge_mode = SurchargeMode.parse(self.surcharge_mode)
        if not isinstance(self.status, JobStatus):
            self.status = JobStatus(self.status)
        self.surcharge_percent = float(self.surcharge_percent)

    def is_expired(self, today: Optional[date] = None) -> bool:
        """Whether the quote has passed its expiry date."""
        if self.status == JobStatus.EXPIRED:
            return True
        if self.expires_at is None:
            return False
        return (today or date.today()) > self.expires_at

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'id': self.id,
            'name': self.name,
            'customer_name': self.customer_name,
            'surcharge_percent': self.surcharge_percent,
            'surcharge_mode': self.surcharge_mode.value,
            'status': self.status.value,
            'expires_at': self.expires_at.isoformat() if self.expires_at else None,
            'created_at': self.created_at.isoformat(),
        }


def new_job(
    name: str,
    settings: Settings,
    customer_name: Optional[str] = None,
    job_id: Optional[str] = None,
) -> Job:
    """
    Create a job with surcharge defaults copied from settings.

    Blank names fall back to "New Quote". Later changes to settings do
    not affect jobs already created.
    """
    return Job(
        id=job_id or str(uuid4()),
        name=name.strip() if name and name.strip() else DEFAULT_JOB_NAME,
        customer_name=customer_name,
        surcharge_percent=settings.default_surcharge_percent,
        surcharge_mode=SurchargeMode.parse(settings.default_surcharge_mode),
    )
