"""
Tests for domain entities and error helpers.
"""
from datetime import date

import pytest

from quotebuilder.domain.entities import (
    Category,
    Job,
    JobStatus,
    LineItem,
    LineItemType,
    Settings,
    SurchargeMode,
    load_settings,
    new_job,
)
from quotebuilder.domain.exceptions import (
    CategoryNotFoundError,
    DomainError,
    InvalidLineItemTypeError,
    InvalidSurchargeModeError,
    error_code,
    error_message,
)


class TestSurchargeMode:
    """Closed surcharge mode enum."""

    @pytest.mark.parametrize("value,expected", [
        ("stacking", SurchargeMode.STACKING),
        ("override", SurchargeMode.OVERRIDE),
        (" Override ", SurchargeMode.OVERRIDE),
        (SurchargeMode.STACKING, SurchargeMode.STACKING),
    ])
    def test_parse(self, value, expected):
        assert SurchargeMode.parse(value) == expected

    @pytest.mark.parametrize("value", ["", "additive", None])
    def test_parse_rejects_unknown(self, value):
        with pytest.raises(InvalidSurchargeModeError) as exc_info:
            SurchargeMode.parse(value)
        assert exc_info.value.code == "INVALID_SURCHARGE_MODE"

    def test_job_rejects_unknown_mode(self):
        with pytest.raises(InvalidSurchargeModeError):
            Job(id="job-1", surcharge_mode="additive")


class TestJob:
    """Job construction and lifecycle helpers."""

    def test_coerces_fields(self):
        job = Job(id="job-1", surcharge_percent=10, surcharge_mode="override", status="sent")
        assert job.surcharge_mode == SurchargeMode.OVERRIDE
        assert job.status == JobStatus.SENT
        assert isinstance(job.surcharge_percent, float)

    def test_defaults(self):
        job = Job()
        assert job.id
        assert job.surcharge_percent == 0
        assert job.surcharge_mode == SurchargeMode.STACKING
        assert job.status == JobStatus.DRAFT

    @pytest.mark.parametrize("status,expires_at,expected", [
        (JobStatus.DRAFT, None, False),
        (JobStatus.SENT, date(2024, 6, 30), False),
        (JobStatus.SENT, date(2024, 5, 31), True),
        (JobStatus.EXPIRED, None, True),
    ])
    def test_is_expired(self, status, expires_at, expected):
        job = Job(id="job-1", status=status, expires_at=expires_at)
        assert job.is_expired(today=date(2024, 6, 1)) is expected

    def test_to_dict(self):
        job = Job(id="job-1", name="Deck", surcharge_percent=5, expires_at=date(2024, 6, 1))
        data = job.to_dict()
        assert data['surcharge_mode'] == "stacking"
        assert data['status'] == "draft"
        assert data['expires_at'] == "2024-06-01"


class TestNewJob:
    """Job creation from settings defaults."""

    def test_copies_settings(self):
        settings = Settings(default_surcharge_mode="override", default_surcharge_percent=12.5)
        job = new_job("Smith Kitchen Remodel", settings, customer_name="Smith", job_id="job-7")

        assert job.id == "job-7"
        assert job.name == "Smith Kitchen Remodel"
        assert job.customer_name == "Smith"
        assert job.surcharge_mode == SurchargeMode.OVERRIDE
        assert job.surcharge_percent == 12.5

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name_gets_default(self, name):
        assert new_job(name, Settings()).name == "New Quote"

    def test_later_settings_do_not_affect_job(self):
        job = new_job("Deck", Settings(default_surcharge_percent=5))
        new_job("Other", Settings(default_surcharge_percent=20))
        assert job.surcharge_percent == 5

    def test_generates_id(self):
        assert new_job("a", Settings()).id != new_job("b", Settings()).id

    def test_load_settings_from_packaged_config(self):
        settings = load_settings()
        assert settings == Settings(default_surcharge_mode="stacking", default_surcharge_percent=0)


class TestCategory:
    """Category flags."""

    def test_absent_and_zero_surcharge_differ(self):
        assert not Category(id="a").has_surcharge
        assert Category(id="a", surcharge_percent=0).has_surcharge

    def test_top_level(self):
        assert Category(id="a").is_top_level
        assert not Category(id="b", parent_id="a").is_top_level


class TestLineItem:
    """Line item type and base price."""

    def test_base_price(self):
        item = LineItem(id="i", category_id="c", quantity=2.5, unit_price=40)
        assert item.base_price == 100

    def test_type_parsed_from_string(self):
        item = LineItem(id="i", category_id="c", type="Equipment")
        assert item.type == LineItemType.EQUIPMENT

    def test_unknown_type_rejected(self):
        with pytest.raises(InvalidLineItemTypeError) as exc_info:
            LineItem(id="i", category_id="c", type="subcontract")
        assert exc_info.value.code == "INVALID_LINE_ITEM_TYPE"

    def test_to_dict_includes_base_price(self):
        item = LineItem(id="i", category_id="c", type="labor", quantity=5, unit="hr", unit_price=50)
        data = item.to_dict()
        assert data['type'] == "labor"
        assert data['base_price'] == 250
        assert data['surcharge_percent'] is None


class TestErrorHelpers:
    """Machine codes and user-facing messages."""

    def test_none(self):
        assert error_code(None) == ""
        assert error_message(None) == ""

    def test_domain_error(self):
        exc = CategoryNotFoundError("cat-1")
        assert error_code(exc) == "CATEGORY_NOT_FOUND"
        assert error_message(exc) == "Category with id 'cat-1' not found"

    def test_other_errors_are_internal(self):
        exc = KeyError("secret detail")
        assert error_code(exc) == "INTERNAL"
        assert error_message(exc) == "An unexpected error occurred"

    def test_default_domain_code(self):
        assert DomainError("boom").code == "DOMAIN_ERROR"
