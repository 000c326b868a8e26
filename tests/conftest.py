"""Shared pytest fixtures."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from central_reports.catalog import ValueCatalog  # noqa: E402
from central_reports.config import get_settings  # noqa: E402
from central_reports.estimator import RecordCountEstimator  # noqa: E402
from central_reports.models import DataView, DataViewType  # noqa: E402
from central_reports.selection_store import SelectionStore  # noqa: E402
from central_reports.service import ReportBuilderService  # noqa: E402

SETTINGS_ENV = (
    "BASE_RECORD_COUNT",
    "MIN_RECORD_COUNT",
    "DECAY_LOW",
    "DECAY_HIGH",
    "ESTIMATOR_SEED",
    "CATALOG_PATH",
    "COUNT_API_URL",
    "COUNT_API_TOKEN",
    "TELEMETRY_ENABLED",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Run each test without ambient environment or ``.env`` settings."""
    for name in SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(scope="session")
def catalog() -> ValueCatalog:
    """Return the packaged value catalog."""
    return ValueCatalog.load()


@pytest.fixture
def store() -> SelectionStore:
    return SelectionStore()


@pytest.fixture
def estimator() -> RecordCountEstimator:
    """Return the deterministic mock estimator."""
    return RecordCountEstimator()


@pytest.fixture
def service(catalog: ValueCatalog, estimator: RecordCountEstimator) -> ReportBuilderService:
    """Return a report builder wired to the deterministic estimator."""
    return ReportBuilderService(catalog=catalog, counter=estimator)


@pytest.fixture
def sample_catalog_payload() -> dict:
    """Return a small catalog document."""
    return {
        "sections": {
            "Starting Data": ["Combos", "Current Members", "New Members"],
            "Demographics": ["Occupation", "Degree"],
        },
        "sample_values": {
            "Current Members": ["All Current Members"],
            "Occupation": ["Researcher", "Practitioner"],
        },
        "category_fields": {"Occupation": ["Job Title", "Industry"]},
        "default_fields": ["Record ID", "Status"],
        "combos": [
            {
                "name": "Researchers",
                "fields": ["Member ID", "Occupation"],
                "filters": [{"category": "Occupation", "value": "Researcher"}],
            }
        ],
        "query_templates": [
            {
                "name": "Current researchers",
                "filters": [
                    {"category": "Current Members", "value": "All Current Members"},
                    {"category": "Occupation", "value": "Researcher"},
                ],
            }
        ],
    }


@pytest.fixture
def sample_views() -> List[DataView]:
    """Return chart, table and metric data views."""
    return [
        DataView(
            id="view-revenue-trend",
            name="Revenue Trend",
            description="Monthly revenue by region",
            type=DataViewType.CHART,
            module="Finance",
            fields=["month", "region", "revenue"],
        ),
        DataView(
            id="view-sales-pipeline",
            name="Sales Pipeline",
            description="All open deals with close dates",
            type=DataViewType.TABLE,
            module="CRM",
            fields=["deal_name", "amount", "close_date"],
        ),
        DataView(
            id="metric-customer-count",
            name="Total Customers",
            description="Count of active customers",
            type=DataViewType.METRIC,
            module="CRM",
            formula="COUNT(customers.id)",
        ),
    ]
