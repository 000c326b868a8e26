"""Natural-language rendering of the current selections."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .models import Connector, Selection

LOGGER = logging.getLogger(__name__)

MEMBER_YEAR_CATEGORY = "Member Year"
YEAR_COHORTS = (
    "2024 Members",
    "2023 Members",
    "2022 Members",
    "2021 Members",
    "2020 Members",
    "2019 Members",
)
STARTING_DATA_CATEGORIES = (
    "Current Members",
    "New Members",
    "Lapsed Members",
    "Contacts",
) + YEAR_COHORTS

ValueFormatter = Callable[[str], str]


def _unchanged(value: str) -> str:
    return value


def _lowercase(value: str) -> str:
    return value.lower()


def membership_code(value: str) -> str:
    """Return ``ECY1`` for ``ECY1 - Member Early Career Year 1``."""
    if " - " in value:
        return value.split(" - ", 1)[0]
    return value


@dataclass(frozen=True)
class PhraseTemplate:
    """Clause template; ``{value}`` receives the formatted, combined values."""

    pattern: str
    formatter: ValueFormatter = _unchanged

    def render(self, values: Sequence[str], joiner: str) -> str:
        formatted = f" {joiner} ".join(self.formatter(value) for value in values)
        return self.pattern.format(value=formatted)


DEFAULT_TEMPLATES: Dict[str, PhraseTemplate] = {
    "Renewal Month": PhraseTemplate("who renewed in {value}"),
    "Renewal Year": PhraseTemplate("who renewed in {value}"),
    "Membership Type": PhraseTemplate("that are member type {value}", membership_code),
    "Tenure": PhraseTemplate("that have been members for the {value}", _lowercase),
    "Occupation": PhraseTemplate("and occupation is {value}", _lowercase),
    "Degree": PhraseTemplate("with a Degree: {value}"),
    "Province/State": PhraseTemplate("from province/state {value}"),
}


class Summarizer:
    """Stitch selections into a phrase such as
    ``current members that are member type ECY1 from province/state BC``.
    """

    def __init__(
        self,
        templates: Optional[Mapping[str, PhraseTemplate]] = None,
        starting_categories: Sequence[str] = STARTING_DATA_CATEGORIES,
    ) -> None:
        self.templates: Dict[str, PhraseTemplate] = dict(DEFAULT_TEMPLATES)
        if templates:
            self.templates.update(templates)
        self.starting_categories = frozenset(starting_categories)

    def register(
        self, category: str, pattern: str, formatter: ValueFormatter = _unchanged
    ) -> None:
        """Add or replace the clause template for ``category``."""
        self.templates[category] = PhraseTemplate(pattern, formatter)

    def is_starting_data(self, category: str) -> bool:
        return category == MEMBER_YEAR_CATEGORY or category in self.starting_categories

    def summarize(self, selections: Sequence[Selection]) -> str:
        """Return the natural-language query, or ``""`` with no selections."""
        if not selections:
            return ""

        parts: List[str] = []
        starting = self._starting_phrase(selections)
        if starting:
            parts.append(starting)

        remaining = [
            selection
            for selection in selections
            if selection.is_filter and not self.is_starting_data(selection.category)
        ]
        for category, values, joiner in self._group_clauses(remaining):
            parts.append(self.render_clause(category, values, joiner))

        return " ".join(parts).strip()

    def render_clause(
        self, category: str, values: Sequence[str], joiner: str = "or"
    ) -> str:
        template = self.templates.get(category)
        if template is None:
            escaped = category.lower().replace("{", "{{").replace("}", "}}")
            template = PhraseTemplate(f"with {escaped} {{value}}")
        return template.render(values, joiner)

    def describe(self, selections: Sequence[Selection]) -> str:
        """Return the short report description shown under the title."""
        filters = [s for s in selections if s.is_filter]
        fields = [s for s in selections if s.is_field]
        if not filters and not fields:
            return ""

        if filters:
            words = []
            for index, selection in enumerate(filters):
                if index == 0:
                    words.append(selection.value)
                elif selection.connector is Connector.OR:
                    words.append(f"or {selection.value}")
                else:
                    words.append(f"that are {selection.value}")
            description = " ".join(words)
        else:
            description = "All records"

        if fields:
            description += ", showing " + ", ".join(s.category for s in fields)
        return description

    def _starting_phrase(self, selections: Sequence[Selection]) -> str:
        member_year = next(
            (s for s in selections if s.category == MEMBER_YEAR_CATEGORY), None
        )
        if member_year is not None:
            return f"{member_year.value} members"

        starting = next(
            (s for s in selections if s.category in self.starting_categories), None
        )
        if starting is None:
            return ""
        return starting.category.lower()

    @staticmethod
    def _group_clauses(
        filters: Sequence[Selection],
    ) -> List[Tuple[str, List[str], str]]:
        # A BETWEEN pairs exactly two values; OR runs absorb every following
        # same-category OR selection.
        clauses: List[Tuple[str, List[str], str]] = []
        index = 0
        while index < len(filters):
            current = filters[index]
            following = filters[index + 1] if index + 1 < len(filters) else None
            if (
                following is not None
                and following.connector is Connector.BETWEEN
                and following.category == current.category
            ):
                clauses.append((current.category, [current.value, following.value], "and"))
                index += 2
                continue

            values = [current.value]
            cursor = index + 1
            while (
                cursor < len(filters)
                and filters[cursor].connector is Connector.OR
                and filters[cursor].category == current.category
            ):
                values.append(filters[cursor].value)
                cursor += 1
            clauses.append((current.category, values, "or"))
            index = cursor
        return clauses
