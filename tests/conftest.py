"""
Shared fixtures for Quote Builder tests.
"""
import pytest

from quotebuilder.config import set_config_path
from quotebuilder.domain.entities import Category, Job, LineItem, SurchargeMode


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    """Every test starts from the packaged configuration."""
    monkeypatch.delenv("QUOTE_CONFIG_PATH", raising=False)
    set_config_path(None)
    yield
    monkeypatch.delenv("QUOTE_CONFIG_PATH", raising=False)
    set_config_path(None)


@pytest.fixture
def stacking_job():
    """Job with a 10% surcharge in stacking mode."""
    return Job(id="job-1", name="Smith Kitchen Remodel",
               surcharge_percent=10, surcharge_mode=SurchargeMode.STACKING)


@pytest.fixture
def override_job():
    """Job with a 15% surcharge in override mode."""
    return Job(id="job-1", name="Smith Kitchen Remodel",
               surcharge_percent=15, surcharge_mode=SurchargeMode.OVERRIDE)


@pytest.fixture
def nested_categories():
    """
    Three-level tree plus a sibling branch.

        kitchen (5%)
          cabinets (3%)
            hardware (2%)
          plumbing (inherit)
        bath (inherit)
    """
    return [
        Category(id="kitchen", job_id="job-1", name="Kitchen", surcharge_percent=5, sort_order=0),
        Category(id="cabinets", job_id="job-1", parent_id="kitchen", name="Cabinets",
                 surcharge_percent=3, sort_order=1),
        Category(id="hardware", job_id="job-1", parent_id="cabinets", name="Hardware",
                 surcharge_percent=2),
        Category(id="plumbing", job_id="job-1", parent_id="kitchen", name="Plumbing",
                 sort_order=0),
        Category(id="bath", job_id="job-1", name="Bath", sort_order=1),
    ]


@pytest.fixture
def nested_line_items():
    """One item per category, 100 base each unless noted."""
    return [
        LineItem(id="i-kitchen", category_id="kitchen", type="material",
                 quantity=1, unit="ea", unit_price=100),
        LineItem(id="i-cabinets", category_id="cabinets", type="material",
                 quantity=2, unit="ea", unit_price=50),
        LineItem(id="i-hardware", category_id="hardware", type="equipment",
                 quantity=4, unit="ea", unit_price=25),
        LineItem(id="i-plumbing", category_id="plumbing", type="labor",
                 quantity=2, unit="hr", unit_price=50, surcharge_percent=0),
        LineItem(id="i-bath", category_id="bath", type="labor",
                 quantity=1, unit="job", unit_price=100),
    ]
