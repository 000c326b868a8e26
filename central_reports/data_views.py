"""Catalog of data views that slide widgets can bind to."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Union

from .exceptions import DataViewNotFoundError
from .models import DataView, DataViewType

LOGGER = logging.getLogger(__name__)


class DataViewCatalog:
    """Look up data views by id, type, module or free text."""

    def __init__(self, views: Iterable[DataView] = ()) -> None:
        self._views: List[DataView] = list(views)

    def register(self, view: DataView) -> None:
        self._views = [v for v in self._views if v.id != view.id] + [view]

    def list_views(
        self,
        type: Union[DataViewType, str, None] = None,
        module: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[DataView]:
        views = list(self._views)
        if type:
            wanted = DataViewType(type)
            views = [view for view in views if view.type is wanted]
        if module:
            views = [view for view in views if view.module == module]
        if search:
            term = search.lower()
            views = [
                view
                for view in views
                if term in view.name.lower() or term in view.description.lower()
            ]
        return [view.model_copy() for view in views]

    def get_view(self, view_id: str) -> DataView:
        for view in self._views:
            if view.id == view_id:
                return view.model_copy()
        raise DataViewNotFoundError(f"Data view not found: {view_id}")
