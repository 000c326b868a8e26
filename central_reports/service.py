"""High-level orchestration for the report builder."""

from __future__ import annotations

import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple

from .autosave import AutoSaver, SaveCallback
from .catalog import ValueCatalog
from .config import Settings
from .count_client import RecordCountClient
from .estimator import RecordCounter, RecordCountEstimator
from .exceptions import ReportGenerationError, SelectionError
from .models import (
    ReportSettings,
    ReportSnapshot,
    SavedQuery,
    Selection,
    SelectionType,
)
from .ordering import CardOrderBook
from .panels import BuilderPanels
from .report_renderer import ReportRenderer
from .saved_queries import SavedQueryBook
from .selection_store import SelectionStore
from .suggestions import suggest
from .summarizer import Summarizer
from .telemetry import track_error, track_event, track_timing

LOGGER = logging.getLogger(__name__)

DEFAULT_TITLE = "New Report"
DEFAULT_VIEW = "All"
DEFAULT_DEBOUNCE_SECONDS = 2.0


def build_counter(settings: Settings) -> RecordCounter:
    """Return the count API client when configured, else the mock estimator."""
    if settings.count_api_url:
        return RecordCountClient(
            base_url=settings.count_api_url,
            access_token=settings.get_count_api_token(),
            timeout_seconds=settings.request_timeout_seconds,
            max_retries=settings.max_retry_attempts,
            initial_backoff_seconds=settings.initial_backoff_seconds,
        )
    return RecordCountEstimator(
        base_count=settings.base_record_count,
        min_count=settings.min_record_count,
        decay_low=settings.decay_low,
        decay_high=settings.decay_high,
        seed=settings.estimator_seed,
    )


class ReportBuilderService:
    """Coordinate selections, counts, summaries and report output."""

    def __init__(
        self,
        catalog: ValueCatalog,
        counter: RecordCounter,
        summarizer: Optional[Summarizer] = None,
        renderer: Optional[ReportRenderer] = None,
        store: Optional[SelectionStore] = None,
        title: str = DEFAULT_TITLE,
        autosave_debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """Create a new report builder service."""
        self.catalog = catalog
        self.counter = counter
        self.summarizer = summarizer or Summarizer()
        self.renderer = renderer or ReportRenderer(catalog)
        self.store = store or SelectionStore()
        self.title = title
        self.autosave_debounce_seconds = autosave_debounce_seconds
        self.report_settings = ReportSettings()
        self.card_order = CardOrderBook()
        self.saved_queries = SavedQueryBook()
        self.panels = BuilderPanels(catalog, self.store, on_change=self._changed)
        self.autosaver: Optional[AutoSaver] = None
        self.logger = logger or LOGGER

    @classmethod
    def from_settings(cls, settings: Settings, title: str = DEFAULT_TITLE) -> "ReportBuilderService":
        catalog = ValueCatalog.load(settings.catalog_path)
        return cls(
            catalog=catalog,
            counter=build_counter(settings),
            title=title,
            autosave_debounce_seconds=settings.autosave_debounce_seconds,
        )

    def enable_autosave(
        self, save: SaveCallback, debounce_seconds: Optional[float] = None
    ) -> AutoSaver:
        """Save a snapshot through ``save`` after each burst of changes."""
        if debounce_seconds is None:
            debounce_seconds = self.autosave_debounce_seconds
        self.autosaver = AutoSaver(save, debounce_seconds, name=self.title)
        return self.autosaver

    @property
    def selections(self) -> List[Selection]:
        return self.store.selections

    def add_filter(self, category: str, value: str) -> Selection:
        selection = self.store.add(category, value, SelectionType.FILTER)
        self.logger.info("Filter added: %s", value)
        return self._changed(selection)

    def add_field(self, category: str, value: Optional[str] = None) -> Selection:
        selection = self.store.add(category, value, SelectionType.FIELD)
        self.logger.info("Field added: %s", category)
        return self._changed(selection)

    def remove(self, selection_id: int) -> None:
        self.store.remove(selection_id)
        self._changed()

    def update(self, selection_id: int, **patch: Any) -> Optional[Selection]:
        return self._changed(self.store.update(selection_id, **patch))

    def clear(self, type: Optional[SelectionType] = None) -> int:
        removed = self.store.clear(type)
        self._changed()
        return removed

    def apply_combo(self, name: str) -> List[Selection]:
        combo = self.catalog.combo(name)
        if combo is None:
            raise SelectionError(f"Unknown combo: {name}")
        added = self.store.apply_combo(combo)
        self._changed()
        return added

    def apply_template(self, name: str) -> List[Selection]:
        """Add every filter of a query template."""
        template = self.catalog.template(name)
        if template is None:
            raise SelectionError(f"Unknown query template: {name}")
        added = self.store.add_many(
            ((item.category, item.value) for item in template.filters),
            SelectionType.FILTER,
        )
        self.logger.info("Applied template: %s", name)
        self._changed()
        return added

    def browse(
        self,
        search: str = "",
        sections: Optional[Iterable[str]] = None,
        view: str = DEFAULT_VIEW,
    ) -> List[str]:
        """Return visible category cards in the view's saved order."""
        categories = [entry.category for entry in self.catalog.browse(search, sections)]
        return self.card_order.sort(categories, view)

    def estimated_count(self) -> int:
        return self.counter.estimate(self.store.selections)

    def waterfall(self) -> List[int]:
        if isinstance(self.counter, RecordCountEstimator):
            return self.counter.waterfall(self.store.selections)
        return []

    def snapshot(self) -> ReportSnapshot:
        selections = self.store.snapshot()
        if isinstance(self.counter, RecordCountEstimator):
            waterfall = self.counter.waterfall(selections)
            estimated = waterfall[-1]
        else:
            waterfall = []
            estimated = self.counter.estimate(selections)
        return ReportSnapshot(
            title=self.title,
            summary=self.summarizer.summarize(selections),
            description=self.summarizer.describe(selections),
            estimated_count=estimated,
            waterfall=waterfall,
            suggestions=suggest(selections),
            selections=selections,
            settings=self.report_settings.model_copy(deep=True),
        )

    def save_query(self, name: str, description: str = "") -> SavedQuery:
        return self.saved_queries.save(name, self.store.selections, description)

    def load_query(self, query_id: int) -> Optional[SavedQuery]:
        query = self.saved_queries.load(query_id, self.store)
        if query is not None:
            self.title = query.name
            self._changed()
        return query

    def generate_report(self, output_path: Optional[Path] = None) -> Tuple[str, Path]:
        """Render the markdown report and write it to disk.

        Args:
            output_path: Optional path where the markdown report should be written.
                        If not provided, saves to the reports/ directory.

        Returns:
            Tuple of (markdown document, path where the report was saved).
        """
        started = time.perf_counter()
        try:
            report = self.renderer.build_report(self.snapshot())
        except ReportGenerationError as exc:
            self.logger.error("Report generation failed for %s: %s", self.title, exc)
            track_error("report_generation", exc, title=self.title)
            raise
        track_timing("report_render", (time.perf_counter() - started) * 1000)

        if output_path is None:
            output_path = self._generate_report_path(self.title)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(report, encoding="utf-8")
        self.logger.info("Report written to %s", output_path)
        track_event("report_exported", title=self.title, path=str(output_path))
        return report, output_path

    def _generate_report_path(self, title: str) -> Path:
        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        safe_title = "".join(c if c.isalnum() or c in ("-", "_") else "_" for c in title)
        return Path("reports") / f"{safe_title}_{timestamp}.md"

    def _changed(self, result: Any = None) -> Any:
        if self.autosaver is not None:
            self.autosaver.trigger(self.store.snapshot())
        return result
