"""Builder panel state.

Which category/value panel is open is a single tagged union instead of a set
of independent flags, so "a value panel without a category" cannot be
expressed. Side panels, the dragged card and bulk-select mode are tracked
alongside it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from .catalog import ValueCatalog
from .exceptions import SelectionError
from .models import ALL_VALUES, Selection, SelectionType
from .ordering import CardOrderBook
from .selection_store import SelectionStore

LOGGER = logging.getLogger(__name__)

PROXIMITY_CATEGORY = "Proximity"
JOINED_RENEWED_CATEGORY = "Joined/Renewed"
MANUAL_ENTRY_CATEGORIES = frozenset({PROXIMITY_CATEGORY, JOINED_RENEWED_CATEGORY})
DEFAULT_PROXIMITY_RADIUS = 25

DATE_RANGE_LABELS: Dict[str, str] = {
    "last30": "Last 30 days",
    "last60": "Last 60 days",
    "last90": "Last 90 days",
    "first30": "First 30 days of membership",
    "first60": "First 60 days of membership",
    "first90": "First 90 days of membership",
}


@dataclass(frozen=True)
class Closed:
    pass


@dataclass(frozen=True)
class CategoryPanel:
    category: str
    editing_id: Optional[int] = None


@dataclass(frozen=True)
class ValuePanel:
    category: str
    value: str
    editing_id: Optional[int] = None


Panel = Union[Closed, CategoryPanel, ValuePanel]
CLOSED = Closed()


class SidePanel(str, Enum):
    FIELDS = "fields"
    FILTERS = "filters"
    SORT = "sort"
    GROUPING = "grouping"
    LIMITS = "limits"
    SETTINGS = "settings"


class BulkAction(str, Enum):
    FIELD = "field"
    FILTER = "filter"


@dataclass
class BulkSelection:
    """Categories ticked while bulk-select mode is on."""

    active: bool = False
    categories: List[str] = field(default_factory=list)

    def toggle(self, category: str) -> None:
        if category in self.categories:
            self.categories.remove(category)
        else:
            self.categories.append(category)

    def reset(self) -> None:
        self.active = False
        self.categories = []


def proximity_value(location: str, radius: int = DEFAULT_PROXIMITY_RADIUS) -> Optional[str]:
    """Return the proximity filter text, or ``None`` for a blank location."""
    location = location.strip()
    if not location:
        return None
    return f"Within {radius} miles of {location}"


class BuilderPanels:
    """Drive the ``closed -> category -> value -> closed`` panel flow."""

    def __init__(
        self,
        catalog: ValueCatalog,
        store: SelectionStore,
        on_change: Optional[Callable[[], Any]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.catalog = catalog
        self.store = store
        self.panel: Panel = CLOSED
        self.side_panel: Optional[SidePanel] = None
        self.dragging: Optional[str] = None
        self.bulk = BulkSelection()
        self.on_change = on_change
        self.logger = logger or LOGGER

    def select_category(self, category: str) -> Optional[Selection]:
        """Open the category panel, or add the category's only value directly.

        Returns:
            The selection added when the category has a single sample value.
        """
        values = self.catalog.values_for(category)
        if len(values) == 1 and category not in MANUAL_ENTRY_CATEGORIES:
            selection_type = (
                SelectionType.FIELD
                if self.catalog.is_starting_data(category)
                else SelectionType.FILTER
            )
            self.panel = CLOSED
            return self._committed(self.store.add(category, values[0], selection_type))

        self.panel = CategoryPanel(category)
        return None

    def edit_selection(self, selection_id: int) -> None:
        selection = self.store.get(selection_id)
        if selection is None:
            self.logger.debug("Cannot edit unknown selection %s", selection_id)
            return
        self.panel = CategoryPanel(selection.category, editing_id=selection.id)

    def select_value(self, value: str) -> ValuePanel:
        if isinstance(self.panel, Closed):
            raise SelectionError("Select a category before choosing a value.")
        self.panel = ValuePanel(self.panel.category, value, self.panel.editing_id)
        return self.panel

    def apply(self, as_field: bool = False) -> Selection:
        """Commit the open value panel and close it.

        An edit keeps the edited selection's type and position.
        """
        panel = self.panel
        if not isinstance(panel, ValuePanel):
            raise SelectionError("No value is selected.")

        selection: Optional[Selection] = None
        if panel.editing_id is not None:
            selection = self.store.update(
                panel.editing_id, category=panel.category, value=panel.value
            )
        if selection is None:
            selection_type = SelectionType.FIELD if as_field else SelectionType.FILTER
            selection = self.store.add(panel.category, panel.value, selection_type)

        self.panel = CLOSED
        return self._committed(selection)

    def close(self) -> None:
        self.panel = CLOSED

    def apply_date_range(self, key: str) -> Selection:
        label = DATE_RANGE_LABELS.get(key)
        if label is None:
            raise SelectionError(f"Unknown date range: {key}")
        self.panel = CLOSED
        return self._committed(self.store.add(JOINED_RENEWED_CATEGORY, label))

    def apply_proximity(
        self, location: str, radius: int = DEFAULT_PROXIMITY_RADIUS
    ) -> Optional[Selection]:
        value = proximity_value(location, radius)
        if value is None:
            return None
        self.panel = CLOSED
        return self._committed(self.store.add(PROXIMITY_CATEGORY, value))

    def toggle_side_panel(self, kind: Union[SidePanel, str]) -> Optional[SidePanel]:
        kind = SidePanel(kind)
        self.side_panel = None if self.side_panel is kind else kind
        return self.side_panel

    def start_bulk_select(self) -> None:
        self.bulk.active = True
        self.dragging = None

    def apply_bulk(self, action: Union[BulkAction, str]) -> List[Selection]:
        """Add every ticked category as a field, or as a filter on its first value."""
        action = BulkAction(action)
        added: List[Selection] = []
        for category in self.bulk.categories:
            if action is BulkAction.FIELD:
                added.append(self.store.add(category, ALL_VALUES, SelectionType.FIELD))
                continue
            values = self.catalog.values_for(category)
            if values:
                added.append(self.store.add(category, values[0]))
        self.logger.info(
            "Bulk added %s %ss for %s categories",
            len(added),
            action.value,
            len(self.bulk.categories),
        )
        self.bulk.reset()
        return self._committed(added)

    def start_drag(self, category: str) -> bool:
        if self.bulk.active:
            return False
        self.dragging = category
        return True

    def finish_drag(
        self,
        over: Optional[str],
        visible: Sequence[str],
        view: str,
        book: CardOrderBook,
    ) -> Dict[str, int]:
        """Drop the dragged card onto ``over`` and save the view's order."""
        dragged, self.dragging = self.dragging, None
        if dragged is None or over is None or over == dragged:
            return book.order_for(view)
        ordered = book.sort(visible, view)
        if over not in ordered:
            return book.order_for(view)
        return book.reorder(view, dragged, ordered.index(over), visible)

    def _committed(self, result: Any) -> Any:
        if self.on_change is not None:
            self.on_change()
        return result
