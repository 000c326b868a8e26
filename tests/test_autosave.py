"""Tests for debounced auto-save."""

from __future__ import annotations

import threading
from typing import Any, List

from central_reports.autosave import AutoSaver, SaveState


def test_flush_saves_latest_state() -> None:
    saved: List[Any] = []
    saver = AutoSaver(saved.append, debounce_seconds=60)

    saver.trigger("first")
    saver.trigger("second")

    assert saver.pending
    assert saver.flush() is True
    assert saved == ["second"]
    assert saver.status is SaveState.SAVED
    assert saver.last_saved is not None
    assert not saver.pending


def test_flush_without_pending_change() -> None:
    saver = AutoSaver(lambda state: None)

    assert saver.flush() is False
    assert saver.status is SaveState.IDLE


def test_cancel_drops_pending_change() -> None:
    saved: List[Any] = []
    saver = AutoSaver(saved.append, debounce_seconds=60)
    saver.trigger("draft")

    saver.cancel()

    assert saver.flush() is False
    assert saved == []


def test_failed_save_sets_error_state() -> None:
    def explode(state: Any) -> None:
        raise RuntimeError("disk full")

    saver = AutoSaver(explode, debounce_seconds=60)
    saver.trigger("draft")

    assert saver.flush() is False
    assert saver.status is SaveState.ERROR
    assert str(saver.last_error) == "disk full"


def test_timer_fires_after_quiet_period() -> None:
    done = threading.Event()
    saved: List[Any] = []

    def save(state: Any) -> None:
        saved.append(state)
        done.set()

    saver = AutoSaver(save, debounce_seconds=0.05)
    saver.trigger("one")
    saver.trigger("two")

    assert done.wait(timeout=5)
    assert saved == ["two"]
