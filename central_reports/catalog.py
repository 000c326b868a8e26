"""Static value catalog: categories, sample values, fields, combos and templates."""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from pydantic import ValidationError

from .exceptions import CatalogError
from .models import CatalogEntry, Combo, QueryTemplate

LOGGER = logging.getLogger(__name__)

STARTING_DATA_SECTION = "Starting Data"
COMBOS_CATEGORY = "Combos"
PLACEHOLDER_VALUES = tuple(f"Option {index}" for index in range(1, 7))


class ValueCatalog:
    """Read-only lookup of category -> section, sample values and fields."""

    def __init__(
        self,
        entries: Sequence[CatalogEntry],
        combos: Sequence[Combo] = (),
        templates: Sequence[QueryTemplate] = (),
        default_fields: Sequence[str] = (),
    ) -> None:
        self._entries: Dict[str, CatalogEntry] = {}
        for entry in entries:
            if entry.category in self._entries:
                raise CatalogError(f"Duplicate catalog category: {entry.category}")
            self._entries[entry.category] = entry
        self._combos = {combo.name: combo for combo in combos}
        self._templates = {template.name: template for template in templates}
        self.default_fields = list(default_fields)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "ValueCatalog":
        """Load the catalog from ``path`` or from the packaged document.

        Raises:
            CatalogError: When the document is missing or malformed.
        """
        try:
            if path is None:
                raw = (
                    resources.files("central_reports")
                    .joinpath("data/catalog.json")
                    .read_text(encoding="utf-8")
                )
            else:
                raw = Path(path).read_text(encoding="utf-8")
            payload = json.loads(raw)
        except (OSError, ValueError) as exc:
            raise CatalogError(f"Failed to read value catalog: {exc}") from exc

        catalog = cls.from_mapping(payload)
        LOGGER.debug(
            "Loaded value catalog with %s categories from %s",
            len(catalog),
            path or "package data",
        )
        return catalog

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "ValueCatalog":
        """Build a catalog from the JSON document layout."""
        sections = payload.get("sections")
        if not isinstance(sections, Mapping):
            raise CatalogError("Catalog document must contain a 'sections' mapping.")
        sample_values = payload.get("sample_values") or {}
        category_fields = payload.get("category_fields") or {}

        try:
            entries = [
                CatalogEntry(
                    category=category,
                    section=section,
                    values=list(sample_values.get(category) or PLACEHOLDER_VALUES),
                    fields=list(category_fields.get(category, [])),
                )
                for section, categories in sections.items()
                for category in categories
                if category != COMBOS_CATEGORY
            ]
            combos = [Combo.model_validate(item) for item in payload.get("combos", [])]
            templates = [
                QueryTemplate.model_validate(item)
                for item in payload.get("query_templates", [])
            ]
        except ValidationError as exc:
            raise CatalogError(f"Invalid catalog document: {exc}") from exc

        return cls(
            entries=entries,
            combos=combos,
            templates=templates,
            default_fields=payload.get("default_fields", []),
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, category: object) -> bool:
        return category in self._entries

    def entry(self, category: str) -> Optional[CatalogEntry]:
        return self._entries.get(category)

    def sections(self) -> List[str]:
        """Return section names in catalog order."""
        seen: Dict[str, None] = {}
        for entry in self._entries.values():
            seen.setdefault(entry.section, None)
        return list(seen)

    def categories(self, section: Optional[str] = None) -> List[str]:
        return [
            entry.category
            for entry in self._entries.values()
            if section is None or entry.section == section
        ]

    def section_of(self, category: str) -> Optional[str]:
        entry = self._entries.get(category)
        return entry.section if entry else None

    def values_for(self, category: str) -> List[str]:
        entry = self._entries.get(category)
        return list(entry.values) if entry else []

    def fields_for(self, category: str) -> List[str]:
        """Return the exposable fields of a category, or the default fields."""
        entry = self._entries.get(category)
        if entry and entry.fields:
            return list(entry.fields)
        return list(self.default_fields)

    def is_starting_data(self, category: str) -> bool:
        return self.section_of(category) == STARTING_DATA_SECTION

    def browse(
        self, search: str = "", sections: Optional[Iterable[str]] = None
    ) -> List[CatalogEntry]:
        """Return entries matching the section filter and search term.

        The search matches the category or section name, case-insensitively.
        """
        wanted = set(sections or ())
        term = search.strip().lower()
        results = list(self._entries.values())
        if wanted:
            results = [entry for entry in results if entry.section in wanted]
        if term:
            results = [
                entry
                for entry in results
                if term in entry.category.lower() or term in entry.section.lower()
            ]
        return results

    def combos(self) -> List[Combo]:
        return list(self._combos.values())

    def combo(self, name: str) -> Optional[Combo]:
        return self._combos.get(name)

    def templates(self) -> List[QueryTemplate]:
        return list(self._templates.values())

    def template(self, name: str) -> Optional[QueryTemplate]:
        return self._templates.get(name)
