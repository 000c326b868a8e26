"""Named snapshots of the selection list."""

from __future__ import annotations

import itertools
import logging
from typing import List, Optional, Sequence

from .exceptions import SelectionError
from .models import SavedQuery, Selection
from .selection_store import SelectionStore

LOGGER = logging.getLogger(__name__)


class SavedQueryBook:
    """In-memory list of saved queries."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._queries: List[SavedQuery] = []
        self._ids = itertools.count(1)
        self.logger = logger or LOGGER

    def __len__(self) -> int:
        return len(self._queries)

    def save(
        self, name: str, selections: Sequence[Selection], description: str = ""
    ) -> SavedQuery:
        """Save a copy of ``selections`` under ``name``.

        Raises:
            SelectionError: When the name is blank.
        """
        name = name.strip()
        if not name:
            raise SelectionError("A saved query needs a name.")
        query = SavedQuery(
            id=next(self._ids),
            name=name,
            description=description.strip(),
            selections=[selection.model_copy(deep=True) for selection in selections],
        )
        self._queries.append(query)
        self.logger.info("Query saved: %s (%s selections)", name, len(selections))
        return query

    def list(self) -> List[SavedQuery]:
        return list(self._queries)

    def get(self, query_id: int) -> Optional[SavedQuery]:
        return next((q for q in self._queries if q.id == query_id), None)

    def delete(self, query_id: int) -> None:
        self._queries = [q for q in self._queries if q.id != query_id]

    def load(self, query_id: int, store: SelectionStore) -> Optional[SavedQuery]:
        """Replace the store's contents with the saved selections."""
        query = self.get(query_id)
        if query is None:
            self.logger.debug("Saved query %s not found", query_id)
            return None
        store.replace(query.selections)
        self.logger.info("Loaded: %s", query.name)
        return query
