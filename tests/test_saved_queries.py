"""Tests for saved queries."""

from __future__ import annotations

import pytest

from central_reports.exceptions import SelectionError
from central_reports.saved_queries import SavedQueryBook
from central_reports.selection_store import SelectionStore


def test_save_and_load_round_trip(store: SelectionStore) -> None:
    book = SavedQueryBook()
    store.add("Current Members", "All Current Members")
    store.add("Degree", "Masters")
    query = book.save("  Masters ", store.selections, "Members with a masters")

    store.clear()
    store.add("Tenure", "Past year")
    loaded = book.load(query.id, store)

    assert loaded is query
    assert query.name == "Masters"
    assert [(s.category, s.value) for s in store] == [
        ("Current Members", "All Current Members"),
        ("Degree", "Masters"),
    ]


def test_saved_selections_are_copies(store: SelectionStore) -> None:
    book = SavedQueryBook()
    store.add("Degree", "Masters")
    query = book.save("Masters", store.selections)

    store.update(store.selections[0].id, value="Doctorate")

    assert query.selections[0].value == "Masters"


def test_blank_name_rejected(store: SelectionStore) -> None:
    with pytest.raises(SelectionError):
        SavedQueryBook().save("   ", store.selections)


def test_list_get_and_delete(store: SelectionStore) -> None:
    book = SavedQueryBook()
    first = book.save("First", [])
    second = book.save("Second", [])

    book.delete(first.id)

    assert [q.name for q in book.list()] == ["Second"]
    assert book.get(second.id) is second
    assert book.get(first.id) is None
    assert len(book) == 1


def test_load_unknown_query_keeps_store(store: SelectionStore) -> None:
    store.add("Degree", "Masters")

    assert SavedQueryBook().load(5, store) is None
    assert len(store) == 1
