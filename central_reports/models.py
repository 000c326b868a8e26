"""Pydantic models shared across the report builder."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

ALL_VALUES = "All Values"


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class SelectionType(str, Enum):
    """Whether a selection narrows the result set or marks data to display."""

    FILTER = "filter"
    FIELD = "field"


class Connector(str, Enum):
    """How a selection joins the one before it."""

    AND = "AND"
    OR = "OR"
    BETWEEN = "BETWEEN"


class Selection(BaseModel):
    """One user-added filter or field."""

    model_config = ConfigDict(validate_assignment=True)

    id: int
    category: str
    value: str
    type: SelectionType = SelectionType.FILTER
    connector: Optional[Connector] = None

    @property
    def is_filter(self) -> bool:
        return self.type is SelectionType.FILTER

    @property
    def is_field(self) -> bool:
        return self.type is SelectionType.FIELD


class CategoryValue(BaseModel):
    """A category/value pair used by combos and query templates."""

    category: str
    value: str


class CatalogEntry(BaseModel):
    """Static description of one browsable category."""

    model_config = ConfigDict(frozen=True)

    category: str
    section: str
    values: List[str] = Field(default_factory=list)
    fields: List[str] = Field(default_factory=list)


class Combo(BaseModel):
    """A named bundle of filters and fields added in one step."""

    name: str
    description: str = ""
    fields: List[str] = Field(default_factory=list)
    filters: List[CategoryValue] = Field(default_factory=list)


class QueryTemplate(BaseModel):
    """A common query offered on the browse screen."""

    name: str
    filters: List[CategoryValue] = Field(default_factory=list)


class SavedQuery(BaseModel):
    """A named snapshot of selections."""

    id: int
    name: str
    description: str = ""
    selections: List[Selection] = Field(default_factory=list)
    saved_at: datetime = Field(default_factory=utcnow)


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class Aggregation(str, Enum):
    COUNT = "count"
    SUM = "sum"
    AVERAGE = "average"


class SortLevel(BaseModel):
    field: str
    direction: SortDirection = SortDirection.ASC


class GroupLevel(BaseModel):
    field: str
    aggregation: Aggregation = Aggregation.COUNT


class LimitConfig(BaseModel):
    enabled: bool = False
    value: int = Field(default=100, ge=1, le=10000)


class ReportSettings(BaseModel):
    """Sort, grouping and limit configuration for a report."""

    sort: List[SortLevel] = Field(default_factory=list)
    group: List[GroupLevel] = Field(default_factory=list)
    limit: LimitConfig = Field(default_factory=LimitConfig)


class Suggestion(BaseModel):
    category: str
    section: str
    reason: str
    icon: str = ""


class SuggestionSet(BaseModel):
    title: str
    suggestions: List[Suggestion] = Field(default_factory=list)


class ReportSnapshot(BaseModel):
    """Derived view of the builder state at one point in time."""

    title: str
    summary: str
    description: str
    estimated_count: int
    waterfall: List[int] = Field(default_factory=list)
    suggestions: SuggestionSet
    selections: List[Selection] = Field(default_factory=list)
    settings: ReportSettings = Field(default_factory=ReportSettings)


class PermissionRole(str, Enum):
    OWNER = "owner"
    EDITOR = "editor"
    VIEWER = "viewer"


class Permission(BaseModel):
    id: str
    email: str
    role: PermissionRole = PermissionRole.VIEWER
    added_at: datetime = Field(default_factory=utcnow)


class Slide(BaseModel):
    id: str
    deck_id: str
    position: int = 0
    content_blocks: List[Dict[str, Any]] = Field(default_factory=list)
    layout: Dict[str, Any] = Field(default_factory=lambda: {"mode": "auto"})


class Deck(BaseModel):
    """A slide deck with its slides and share permissions."""

    id: str
    name: str = "Untitled Deck"
    description: str = ""
    tags: List[str] = Field(default_factory=list)
    folder_id: Optional[str] = None
    created_by: str = "user-1"
    created_at: datetime = Field(default_factory=utcnow)
    modified_at: datetime = Field(default_factory=utcnow)
    slides: List[Slide] = Field(default_factory=list)
    thumbnail_url: Optional[str] = None
    permissions: List[Permission] = Field(default_factory=list)

    @property
    def slide_count(self) -> int:
        return len(self.slides)


class DeckSummary(BaseModel):
    """Listing view of a deck without slides."""

    id: str
    name: str
    description: str
    tags: List[str]
    slide_count: int
    thumbnail_url: Optional[str]
    updated_at: datetime
    created_by: str


class DataViewType(str, Enum):
    CHART = "chart"
    TABLE = "table"
    METRIC = "metric"


class DataView(BaseModel):
    """A data view that slide widgets can bind to."""

    id: str
    name: str
    description: str = ""
    type: DataViewType
    module: str
    last_updated: datetime = Field(default_factory=utcnow)
    fields: List[str] = Field(default_factory=list)
    formula: Optional[str] = None
