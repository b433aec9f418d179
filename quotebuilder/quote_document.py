"""
Quote Document - YAML/JSON snapshot of a job, its categories and line items.

The document stands in for the persistence layer: it is parsed with
Pydantic for structure, checked with the domain input validators for
business rules, then mapped onto domain entities for the totals engine.
"""
from pathlib import Path
from typing import List, Optional, Tuple
from uuid import uuid4
import logging

import pydantic
import yaml
from pydantic import BaseModel, ConfigDict, Field

from quotebuilder.domain.entities import (
    Category,
    Job,
    JobStatus,
    LineItem,
    Settings,
    load_settings,
)
from quotebuilder.domain.exceptions import CategoryCycleError, QuoteDocumentError
from quotebuilder.domain.services import (
    CategoryInput,
    CategoryTree,
    FieldError,
    JobInput,
    LineItemInput,
    validate_category_parent,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Pydantic Models
# =============================================================================

class JobRecord(BaseModel):
    """Job section of a quote document."""
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    id: str = Field(default_factory=lambda: str(uuid4()), description="Job identifier")
    name: str = Field("", description="Job name")
    customer_name: Optional[str] = Field(None, description="Customer name")
    surcharge_percent: Optional[float] = Field(
        None, description="Job surcharge; settings default when omitted"
    )
    surcharge_mode: Optional[str] = Field(
        None, description="'stacking' or 'override'; settings default when omitted"
    )
    status: str = Field(
        JobStatus.DRAFT.value,
        pattern="^(draft|sent|accepted|rejected|expired)$",
        description="Quote status",
    )


class CategoryRecord(BaseModel):
    """One category of a quote document."""
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    id: str = Field(..., min_length=1, description="Category identifier")
    parent_id: Optional[str] = Field(None, description="Parent category (omit for top level)")
    name: str = Field("", description="Category name")
    surcharge_percent: Optional[float] = Field(None, description="Omit to inherit")
    sort_order: int = Field(0, description="Position among siblings")


class LineItemRecord(BaseModel):
    """One line item of a quote document."""
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    id: str = Field(..., min_length=1, description="Line item identifier")
    category_id: str = Field(..., min_length=1, description="Owning category")
    type: str = Field(..., description="'material', 'labor' or 'equipment'")
    name: str = Field("", description="Line item name")
    description: Optional[str] = Field(None, description="Free text")
    quantity: float = Field(..., description="Number of units")
    unit: str = Field("", description="Unit label")
    unit_price: float = Field(..., description="Price per unit")
    surcharge_percent: Optional[float] = Field(None, description="Omit to inherit")
    sort_order: int = Field(0, description="Position within the category")


class QuoteDocument(BaseModel):
    """A complete quote: job, flat category list and flat line item list."""
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    job: JobRecord = Field(default_factory=JobRecord)
    categories: List[CategoryRecord] = Field(default_factory=list)
    line_items: List[LineItemRecord] = Field(default_factory=list)

    # =========================================================================
    # Validation
    # =========================================================================

    def _job_input(self, settings: Settings) -> JobInput:
        percent = self.job.surcharge_percent
        return JobInput(
            name=self.job.name,
            customer_name=self.job.customer_name,
            surcharge_percent=settings.default_surcharge_percent if percent is None else percent,
            surcharge_mode=self.job.surcharge_mode,
        )

    def _category_input(self, record: CategoryRecord) -> CategoryInput:
        return CategoryInput(
            job_id=self.job.id,
            name=record.name,
            parent_id=record.parent_id,
            surcharge_percent=record.surcharge_percent,
            sort_order=record.sort_order,
        )

    @staticmethod
    def _line_item_input(record: LineItemRecord) -> LineItemInput:
        return LineItemInput(
            category_id=record.category_id,
            type=record.type,
            name=record.name,
            description=record.description,
            quantity=record.quantity,
            unit=record.unit,
            unit_price=record.unit_price,
            surcharge_percent=record.surcharge_percent,
            sort_order=record.sort_order,
        )

    def validate_inputs(
        self,
        settings: Optional[Settings] = None,
    ) -> List[Tuple[str, FieldError]]:
        """
        Run every business rule over the document.

        Returns:
            List of (record path, FieldError); empty when the document is valid.
            Record paths look like 'job', 'categories[kitchen]' or
            'line_items[item-1]'.
        """
        settings = settings or load_settings()
        problems: List[Tuple[str, FieldError]] = []

        for error in self._job_input(settings).validate():
            problems.append(("job", error))

        categories = self._categories()
        tree = CategoryTree(categories)
        seen_categories = set()

        for record in self.categories:
            path = f"categories[{record.id}]"
            if record.id in seen_categories:
                problems.append((path, FieldError("id", "Duplicate category id")))
            seen_categories.add(record.id)

            for error in self._category_input(record).validate():
                problems.append((path, error))

            try:
                tree.chain(record.id)
            except CategoryCycleError as e:
                problems.append((path, FieldError("parent_id", e.message)))
                continue

            # Depth is checked against the parent, as when the category was added
            for error in validate_category_parent(record.parent_id, self.job.id, tree):
                problems.append((path, error))

        seen_items = set()
        for record in self.line_items:
            path = f"line_items[{record.id}]"
            if record.id in seen_items:
                problems.append((path, FieldError("id", "Duplicate line item id")))
            seen_items.add(record.id)

            for error in self._line_item_input(record).validate():
                problems.append((path, error))

            if record.category_id not in tree:
                problems.append((path, FieldError("category_id", "Category not found")))

        return problems

    # =========================================================================
    # Entity Mapping
    # =========================================================================

    def _categories(self) -> List[Category]:
        return [
            self._category_input(record).to_category(record.id)
            for record in self.categories
        ]

    def to_entities(
        self,
        settings: Optional[Settings] = None,
    ) -> Tuple[Job, List[Category], List[LineItem]]:
        """
        Map the document onto domain entities.

        Call validate_inputs() first; unvalidated enum values raise
        InvalidSurchargeModeError / InvalidLineItemTypeError here.
        """
        settings = settings or load_settings()
        job = self._job_input(settings).to_job(self.job.id, settings)
        job.status = JobStatus(self.job.status)

        line_items = [
            self._line_item_input(record).to_line_item(record.id)
            for record in self.line_items
        ]
        return job, self._categories(), line_items


def load_quote_document(path) -> QuoteDocument:
    """
    Read a quote document from a YAML or JSON file.

    Raises:
        QuoteDocumentError: If the file is unreadable, not YAML/JSON, or
            does not match the document structure
    """
    source = Path(path)
    try:
        with open(source, 'r') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise QuoteDocumentError(str(source), e.strerror or str(e))
    except yaml.YAMLError as e:
        raise QuoteDocumentError(str(source), f"invalid YAML/JSON: {e}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise QuoteDocumentError(str(source), "document must be a mapping")

    try:
        document = QuoteDocument.model_validate(data)
    except pydantic.ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise QuoteDocumentError(str(source), details)

    logger.debug(
        "Loaded quote document %s: %d categories, %d line items",
        source, len(document.categories), len(document.line_items),
    )
    return document
