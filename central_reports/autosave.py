"""Debounced auto-save."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional

from .models import utcnow
from .telemetry import track_event

LOGGER = logging.getLogger(__name__)

SaveCallback = Callable[[Any], Any]


class SaveState(str, Enum):
    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


class AutoSaver:
    """Run ``save(state)`` once changes have been quiet for ``debounce_seconds``.

    Every ``trigger`` cancels the pending timer and schedules a new one. Saves
    never overlap: a save that fires while another is running waits for it.
    """

    def __init__(
        self,
        save: SaveCallback,
        debounce_seconds: float = 2.0,
        name: str = "report",
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.save = save
        self.debounce_seconds = debounce_seconds
        self.name = name
        self.logger = logger or LOGGER
        self.status = SaveState.IDLE
        self.last_saved: Optional[datetime] = None
        self.last_error: Optional[Exception] = None
        self._timer: Optional[threading.Timer] = None
        self._pending: Any = None
        self._timer_lock = threading.Lock()
        self._save_lock = threading.Lock()

    @property
    def pending(self) -> bool:
        with self._timer_lock:
            return self._timer is not None

    def trigger(self, state: Any) -> None:
        """Schedule a save of ``state``, replacing any pending one."""
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = state
            self._timer = threading.Timer(self.debounce_seconds, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._pending = None

    def flush(self) -> bool:
        """Save the pending state now. Returns ``False`` when nothing was pending."""
        with self._timer_lock:
            if self._timer is None:
                return False
            self._timer.cancel()
            self._timer = None
            state, self._pending = self._pending, None
        return self._perform(state)

    def _fire(self) -> None:
        with self._timer_lock:
            if self._timer is None or self._timer is not threading.current_thread():
                return
            self._timer = None
            state, self._pending = self._pending, None
        self._perform(state)

    def _perform(self, state: Any) -> bool:
        with self._save_lock:
            self.status = SaveState.SAVING
            track_event("autosave_triggered", target=self.name)
            try:
                self.save(state)
            except Exception as exc:  # noqa: BLE001
                self.status = SaveState.ERROR
                self.last_error = exc
                self.logger.error("Auto-save of %s failed: %s", self.name, exc)
                track_event("autosave_failed", target=self.name, error=str(exc))
                return False
            self.status = SaveState.SAVED
            self.last_saved = utcnow()
            self.last_error = None
            track_event("autosave_completed", target=self.name)
            return True
