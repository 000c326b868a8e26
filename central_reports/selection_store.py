"""Ordered, in-memory store of the user's fields and filters."""

from __future__ import annotations

import itertools
import logging
from typing import Any, Callable, Iterable, Iterator, List, Optional, Tuple, Union

from .exceptions import SelectionError
from .models import ALL_VALUES, Combo, Connector, Selection, SelectionType

LOGGER = logging.getLogger(__name__)

PATCHABLE_KEYS = frozenset({"category", "value", "type", "connector"})

SelectionPredicate = Callable[[Selection], bool]


class SelectionStore:
    """Keep selections in list order and keep connectors consistent.

    Reads hand out copies; edits go through ``add``, ``update`` and ``remove``.

    The head selection never carries a connector; every other selection
    always does. Ids come from a monotonic counter and are never reused.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._selections: List[Selection] = []
        self._ids = itertools.count(1)
        self.logger = logger or LOGGER

    def __len__(self) -> int:
        return len(self._selections)

    def __iter__(self) -> Iterator[Selection]:
        return iter(self.selections)

    def __bool__(self) -> bool:
        return bool(self._selections)

    @property
    def selections(self) -> List[Selection]:
        return [selection.model_copy() for selection in self._selections]

    def snapshot(self) -> List[Selection]:
        """Return deep copies of the selections in order."""
        return [selection.model_copy(deep=True) for selection in self._selections]

    def get(self, selection_id: int) -> Optional[Selection]:
        found = next((s for s in self._selections if s.id == selection_id), None)
        return found.model_copy() if found is not None else None

    def filters(self) -> List[Selection]:
        return [s.model_copy() for s in self._selections if s.is_filter]

    def fields(self) -> List[Selection]:
        return [s.model_copy() for s in self._selections if s.is_field]

    def add(
        self,
        category: str,
        value: Optional[str] = None,
        type: Union[SelectionType, str] = SelectionType.FILTER,
    ) -> Selection:
        """Append a selection; it joins the previous one with ``AND``."""
        selection_type = SelectionType(type)
        if value is None:
            if selection_type is not SelectionType.FIELD:
                raise SelectionError(f"A filter on {category!r} needs a value.")
            value = ALL_VALUES
        selection = Selection(
            id=next(self._ids),
            category=category,
            value=value,
            type=selection_type,
            connector=Connector.AND if self._selections else None,
        )
        self._selections.append(selection)
        self.logger.debug(
            "Added %s %s=%s (id %s)",
            selection_type.value,
            category,
            value,
            selection.id,
        )
        return selection.model_copy()

    def add_many(
        self,
        pairs: Iterable[Tuple[str, str]],
        type: Union[SelectionType, str] = SelectionType.FILTER,
    ) -> List[Selection]:
        return [self.add(category, value, type) for category, value in pairs]

    def apply_combo(self, combo: Combo) -> List[Selection]:
        """Add a combo's filters, then its fields with ``All Values``."""
        added = [self.add(item.category, item.value) for item in combo.filters]
        added.extend(
            self.add(field, ALL_VALUES, SelectionType.FIELD) for field in combo.fields
        )
        self.logger.info(
            "Applied combo %s: %s filters, %s fields",
            combo.name,
            len(combo.filters),
            len(combo.fields),
        )
        return added

    def remove(self, selection_id: int) -> None:
        """Delete a selection; unknown ids are ignored."""
        remaining = [s for s in self._selections if s.id != selection_id]
        if len(remaining) == len(self._selections):
            self.logger.debug("Ignoring removal of unknown selection %s", selection_id)
            return
        self._selections = remaining
        self._normalize_connectors()

    def update(self, selection_id: int, **patch: Any) -> Optional[Selection]:
        """Shallow-merge ``patch`` into a selection.

        Returns:
            The updated selection, or ``None`` when the id is unknown.

        Raises:
            SelectionError: When the patch names unknown keys or invalid values.
        """
        unknown = set(patch) - PATCHABLE_KEYS
        if unknown:
            raise SelectionError(
                f"Cannot patch selection fields: {', '.join(sorted(unknown))}"
            )

        index = next(
            (i for i, s in enumerate(self._selections) if s.id == selection_id), None
        )
        if index is None:
            return None

        current = self._selections[index]
        try:
            updated = Selection.model_validate({**current.model_dump(), **patch})
        except ValueError as exc:
            raise SelectionError(f"Invalid selection patch: {exc}") from exc

        self._selections[index] = updated
        self._normalize_connectors()
        return self._selections[index].model_copy()

    def clear(
        self,
        type: Union[SelectionType, str, None] = None,
        predicate: Optional[SelectionPredicate] = None,
    ) -> int:
        """Remove every selection, or those matching ``type``/``predicate``.

        Returns:
            Number of selections removed.
        """
        if type is None and predicate is None:
            removed = len(self._selections)
            self._selections = []
            return removed

        selection_type = SelectionType(type) if type is not None else None

        def matches(selection: Selection) -> bool:
            if selection_type is not None and selection.type is not selection_type:
                return False
            return predicate(selection) if predicate else True

        before = len(self._selections)
        self._selections = [s for s in self._selections if not matches(s)]
        self._normalize_connectors()
        return before - len(self._selections)

    def clear_fields(self) -> int:
        return self.clear(SelectionType.FIELD)

    def clear_filters(self) -> int:
        return self.clear(SelectionType.FILTER)

    def replace(self, selections: Iterable[Selection]) -> List[Selection]:
        """Replace the contents with copies of ``selections`` under fresh ids."""
        self._selections = [
            selection.model_copy(update={"id": next(self._ids)})
            for selection in selections
        ]
        self._normalize_connectors()
        return self.selections

    def _normalize_connectors(self) -> None:
        for position, selection in enumerate(self._selections):
            if position == 0:
                if selection.connector is not None:
                    selection.connector = None
            elif selection.connector is None:
                selection.connector = Connector.AND
