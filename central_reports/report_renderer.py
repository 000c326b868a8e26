"""Markdown rendering of a report definition."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .catalog import ValueCatalog
from .exceptions import ReportGenerationError
from .models import ReportSettings, ReportSnapshot, Selection, SuggestionSet

LOGGER = logging.getLogger(__name__)


class ReportRenderer:
    """Build a human-readable markdown summary of the builder state."""

    def __init__(
        self,
        catalog: Optional[ValueCatalog] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """Create a report renderer."""
        self.catalog = catalog
        self.logger = logger or LOGGER

    def build_report(self, snapshot: ReportSnapshot) -> str:
        """Create a markdown report from a builder snapshot."""
        try:
            filters = [s for s in snapshot.selections if s.is_filter]
            fields = [s for s in snapshot.selections if s.is_field]

            lines: List[str] = [f"# Report: {snapshot.title}", ""]
            lines.extend(self._format_quick_reference(snapshot, filters, fields))
            lines.extend(["", "---", ""])

            lines.extend(self._format_filters(filters))
            lines.append("")
            lines.extend(self._format_fields(fields))

            if filters:
                lines.extend(["", "---", ""])
                lines.extend(self._format_waterfall(filters, snapshot.waterfall))

            settings_lines = self._format_settings(snapshot.settings)
            if settings_lines:
                lines.extend(["", "---", ""])
                lines.extend(settings_lines)

            lines.extend(["", "---", ""])
            lines.extend(self._format_suggestions(snapshot.suggestions))

            return "\n".join(lines).strip()
        except Exception as exc:  # noqa: BLE001
            raise ReportGenerationError("Failed to build markdown report.") from exc

    def _format_quick_reference(
        self,
        snapshot: ReportSnapshot,
        filters: Sequence[Selection],
        fields: Sequence[Selection],
    ) -> List[str]:
        lines = ["## Quick Reference", ""]
        if snapshot.summary:
            lines.append(f"- **Query:** \"{snapshot.summary}\"")
        if snapshot.description:
            lines.append(f"- **Description:** {snapshot.description}")
        lines.append(f"- **Estimated records:** {snapshot.estimated_count:,}")
        lines.append(
            f"- **Selections:** {len(filters)} filters · {len(fields)} fields"
        )
        if not snapshot.selections:
            lines.append("")
            lines.append("_No fields or filters selected yet._")
        return lines

    def _format_filters(self, filters: Sequence[Selection]) -> List[str]:
        lines = ["## Filters", ""]
        if not filters:
            lines.append("_No filters applied; all records are included._")
            return lines
        for index, selection in enumerate(filters, start=1):
            connector = ""
            if index > 1 and selection.connector is not None:
                connector = f"**{selection.connector.value}** "
            lines.append(f"{index}. {connector}{selection.category} = {selection.value}")
        return lines

    def _format_fields(self, fields: Sequence[Selection]) -> List[str]:
        lines = ["## Fields", ""]
        if not fields:
            lines.append("_No fields selected._")
            return lines
        for selection in fields:
            lines.append(f"- [ ] {selection.category} ({selection.value})")
            available = self._available_fields(selection.category)
            if available:
                lines.append(f"  - Available columns: {', '.join(available)}")
        return lines

    def _format_waterfall(
        self, filters: Sequence[Selection], totals: Sequence[int]
    ) -> List[str]:
        lines = ["## Filter Waterfall", ""]
        if len(totals) != len(filters) + 1:
            lines.append("_Waterfall unavailable for this count source._")
            return lines
        lines.append("| Step | Filter | Records | Change |")
        lines.append("| --- | --- | ---: | ---: |")
        lines.append(f"| 0 | All records | {totals[0]:,} | |")
        for step, selection in enumerate(filters, start=1):
            previous, current = totals[step - 1], totals[step]
            change = self._format_change(previous, current)
            lines.append(
                f"| {step} | {selection.category}: {selection.value} | {current:,} | {change} |"
            )
        return lines

    def _format_settings(self, settings: ReportSettings) -> List[str]:
        lines: List[str] = []
        if settings.sort:
            lines.append("**Sort**")
            for level, sort in enumerate(settings.sort, start=1):
                lines.append(f"{level}. {sort.field} ({sort.direction.value})")
        if settings.group:
            if lines:
                lines.append("")
            lines.append("**Grouping**")
            for group in settings.group:
                lines.append(f"- {group.field} ({group.aggregation.value})")
        if settings.limit.enabled:
            if lines:
                lines.append("")
            lines.append(f"**Limit:** first {settings.limit.value:,} records")
        if lines:
            lines.insert(0, "## Report Settings")
            lines.insert(1, "")
        return lines

    def _format_suggestions(self, suggestions: SuggestionSet) -> List[str]:
        lines = ["## Suggested Next Steps", "", f"**{suggestions.title}**"]
        lines.extend(
            f"- {item.category} ({item.section}): {item.reason}"
            for item in suggestions.suggestions
        )
        return lines

    def _available_fields(self, category: str) -> List[str]:
        if self.catalog is None or category not in self.catalog:
            return []
        return self.catalog.fields_for(category)

    @staticmethod
    def _format_change(previous: int, current: int) -> str:
        if not previous:
            return "0.0%"
        delta = (current - previous) / previous * 100
        return f"{delta:+.1f}%"
