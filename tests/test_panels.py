"""Tests for builder panel state."""

from __future__ import annotations

import pytest

from central_reports.catalog import ValueCatalog
from central_reports.exceptions import SelectionError
from central_reports.models import ALL_VALUES, CatalogEntry, SelectionType
from central_reports.ordering import CardOrderBook
from central_reports.panels import (
    CLOSED,
    BuilderPanels,
    CategoryPanel,
    SidePanel,
    ValuePanel,
    proximity_value,
)
from central_reports.selection_store import SelectionStore


@pytest.fixture
def panels(catalog: ValueCatalog, store: SelectionStore) -> BuilderPanels:
    return BuilderPanels(catalog, store)


def test_category_value_apply_flow(panels: BuilderPanels, store: SelectionStore) -> None:
    assert panels.select_category("Occupation") is None
    assert panels.panel == CategoryPanel("Occupation")

    panels.select_value("Researcher")
    assert panels.panel == ValuePanel("Occupation", "Researcher")

    selection = panels.apply()

    assert panels.panel is CLOSED
    assert (selection.category, selection.value, selection.type) == (
        "Occupation",
        "Researcher",
        SelectionType.FILTER,
    )
    assert len(store) == 1


def test_apply_as_field(panels: BuilderPanels) -> None:
    panels.select_category("Degree")
    panels.select_value("Masters")

    assert panels.apply(as_field=True).is_field


def test_single_value_starting_category_is_added_as_field(
    panels: BuilderPanels,
) -> None:
    selection = panels.select_category("Current Members")

    assert selection is not None
    assert selection.is_field
    assert selection.value == "All Current Members"
    assert panels.panel is CLOSED


def test_single_value_category_is_added_as_filter(store: SelectionStore) -> None:
    catalog = ValueCatalog(
        [CatalogEntry(category="Code of Ethics", section="Membership", values=["Accepted"])]
    )
    panels = BuilderPanels(catalog, store)

    selection = panels.select_category("Code of Ethics")

    assert selection is not None
    assert selection.is_filter


def test_select_value_requires_category(panels: BuilderPanels) -> None:
    with pytest.raises(SelectionError):
        panels.select_value("Researcher")


def test_apply_without_value(panels: BuilderPanels) -> None:
    panels.select_category("Occupation")

    with pytest.raises(SelectionError):
        panels.apply()


def test_edit_existing_selection(panels: BuilderPanels, store: SelectionStore) -> None:
    store.add("Current Members", "All Current Members")
    target = store.add("Occupation", "Researcher")

    panels.edit_selection(target.id)
    assert panels.panel == CategoryPanel("Occupation", editing_id=target.id)
    panels.select_value("Consultant")
    updated = panels.apply()

    assert updated.id == target.id
    assert [s.value for s in store] == ["All Current Members", "Consultant"]


def test_edit_unknown_selection_leaves_panel(panels: BuilderPanels) -> None:
    panels.edit_selection(404)

    assert panels.panel is CLOSED


def test_date_range_and_proximity(panels: BuilderPanels, store: SelectionStore) -> None:
    panels.apply_date_range("last30")
    panels.apply_proximity("  Ottawa ", radius=10)

    assert [(s.category, s.value) for s in store] == [
        ("Joined/Renewed", "Last 30 days"),
        ("Proximity", "Within 10 miles of Ottawa"),
    ]


def test_committed_edits_notify_on_change(catalog: ValueCatalog, store: SelectionStore) -> None:
    calls = []
    panels = BuilderPanels(catalog, store, on_change=lambda: calls.append(len(store)))

    panels.select_category("Occupation")
    panels.select_value("Researcher")
    assert calls == []

    panels.apply()
    panels.apply_date_range("last30")
    panels.apply_proximity("Ottawa")
    panels.apply_proximity("   ")

    assert calls == [1, 2, 3]


def test_unknown_date_range(panels: BuilderPanels) -> None:
    with pytest.raises(SelectionError):
        panels.apply_date_range("last7")


def test_blank_proximity_is_ignored(panels: BuilderPanels, store: SelectionStore) -> None:
    assert panels.apply_proximity("   ") is None
    assert proximity_value("") is None
    assert not store


def test_toggle_side_panel(panels: BuilderPanels) -> None:
    assert panels.toggle_side_panel("sort") is SidePanel.SORT
    assert panels.toggle_side_panel(SidePanel.FIELDS) is SidePanel.FIELDS
    assert panels.toggle_side_panel("fields") is None


def test_bulk_select_blocks_dragging(panels: BuilderPanels) -> None:
    panels.start_bulk_select()

    assert panels.start_drag("Occupation") is False
    assert panels.dragging is None


def test_apply_bulk_as_filters(panels: BuilderPanels, store: SelectionStore) -> None:
    panels.start_bulk_select()
    panels.bulk.toggle("Occupation")
    panels.bulk.toggle("Degree")
    panels.bulk.toggle("Tenure")
    panels.bulk.toggle("Tenure")

    added = panels.apply_bulk("filter")

    assert [(s.category, s.value) for s in added] == [
        ("Occupation", "Researcher"),
        ("Degree", "Bachelors"),
    ]
    assert not panels.bulk.active
    assert panels.bulk.categories == []
    assert len(store) == 2


def test_apply_bulk_as_fields(panels: BuilderPanels) -> None:
    panels.start_bulk_select()
    panels.bulk.toggle("Occupation")

    added = panels.apply_bulk("field")

    assert added[0].is_field
    assert added[0].value == ALL_VALUES


def test_drag_and_drop_updates_view_order(panels: BuilderPanels) -> None:
    book = CardOrderBook()
    visible = ["Occupation", "Tenure", "Degree"]

    assert panels.start_drag("Degree")
    order = panels.finish_drag("Occupation", visible, "All", book)

    assert order == {"Degree": 0, "Occupation": 1, "Tenure": 2}
    assert panels.dragging is None


def test_drop_on_itself_changes_nothing(panels: BuilderPanels) -> None:
    book = CardOrderBook()
    panels.start_drag("Degree")

    assert panels.finish_drag("Degree", ["Occupation", "Degree"], "All", book) == {}
