"""Logging configuration helpers."""

import logging
import sys
from typing import Iterable, Optional

PACKAGE_LOGGER = "central_reports"
TELEMETRY_LOGGER = f"{PACKAGE_LOGGER}.telemetry"
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s - %(message)s"
NOISY_LOGGERS = ("urllib3",)


def configure_logging(
    level: int = logging.INFO,
    telemetry: bool = False,
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> None:
    """Configure application-wide logging.

    Args:
        level: Minimum logging level for the root logger.
        telemetry: Emit telemetry events (logged at DEBUG) regardless of ``level``.
        quiet: Third-party loggers capped at WARNING.
    """
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, "%Y-%m-%d %H:%M:%S"))

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if telemetry else level)
    root_logger.handlers = [handler]

    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
    logging.getLogger(TELEMETRY_LOGGER).setLevel(
        logging.DEBUG if telemetry else logging.WARNING
    )
    for name in quiet:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger below the package namespace."""
    if not name:
        return logging.getLogger(PACKAGE_LOGGER)
    if name.startswith(PACKAGE_LOGGER):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
