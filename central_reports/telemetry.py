"""Telemetry stub: events are written to the ``central_reports.telemetry`` logger."""

from __future__ import annotations

import logging
from typing import Any, Optional

from .logging_config import TELEMETRY_LOGGER

LOGGER = logging.getLogger(TELEMETRY_LOGGER)

FEATURE = "report-builder"


def track_event(event_name: str, **properties: Any) -> None:
    """Record a telemetry event.

    A real analytics sink would receive ``properties`` plus the feature name;
    for now the event is logged at DEBUG.
    """
    LOGGER.debug("[Telemetry] %s %s", event_name, {"feature": FEATURE, **properties})


def track_page_view(page_name: str, **properties: Any) -> None:
    track_event("page_viewed", page_name=page_name, **properties)


def track_error(error_type: str, error: Any, **context: Any) -> None:
    message = str(error)
    track_event("error_occurred", error_type=error_type, error_message=message, **context)


def track_timing(metric_name: str, duration_ms: float, unit: Optional[str] = "ms", **properties: Any) -> None:
    track_event(
        "timing_measured",
        metric_name=metric_name,
        duration=duration_ms,
        unit=unit,
        **properties,
    )
