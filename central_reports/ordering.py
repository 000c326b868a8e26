"""Per-view card ordering for the category browser."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, TypeVar

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

UNORDERED = 999999


def array_move(items: Sequence[T], old_index: int, new_index: int) -> List[T]:
    """Return a copy of ``items`` with one element moved, like a sortable list drop."""
    moved = list(items)
    if not moved:
        return moved
    size = len(moved)
    old_index = old_index % size if old_index < 0 else old_index
    new_index = new_index % size if new_index < 0 else min(new_index, size - 1)
    if not 0 <= old_index < size:
        raise IndexError(f"Index {old_index} out of range for {size} items.")
    moved.insert(new_index, moved.pop(old_index))
    return moved


class CardOrderBook:
    """Remember a ``{category: index}`` map for each saved view."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._orders: Dict[str, Dict[str, int]] = {}
        self.logger = logger or LOGGER

    def order_for(self, view: str) -> Dict[str, int]:
        return dict(self._orders.get(view, {}))

    def has_custom_order(self, view: str) -> bool:
        return bool(self._orders.get(view))

    def sort(self, categories: Sequence[str], view: str) -> List[str]:
        """Return ``categories`` in the view's saved order.

        Categories without a saved position keep their relative order at the end.
        """
        order = self._orders.get(view)
        if not order:
            return list(categories)
        return sorted(categories, key=lambda category: order.get(category, UNORDERED))

    def reorder(
        self, view: str, category: str, new_index: int, visible: Sequence[str]
    ) -> Dict[str, int]:
        """Move ``category`` to ``new_index`` among ``visible`` cards and save the order.

        Returns:
            The view's updated order map. Unchanged when ``category`` is not visible.
        """
        current = self.sort(visible, view)
        if category not in current:
            self.logger.debug("Card %s is not visible in view %s", category, view)
            return self.order_for(view)

        rearranged = array_move(current, current.index(category), new_index)
        self._orders[view] = {name: index for index, name in enumerate(rearranged)}
        self.logger.debug("Saved card order for view %s", view)
        return self.order_for(view)

    def reset(self, view: str) -> None:
        self._orders.pop(view, None)
