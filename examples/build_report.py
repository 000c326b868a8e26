"""Build a sample member report from a query template."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List

from central_reports.config import get_settings
from central_reports.logging_config import configure_logging
from central_reports.models import Selection
from central_reports.service import ReportBuilderService


def save_draft(selections: List[Selection]) -> None:
    path = Path("reports") / "draft.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = [selection.model_dump(mode="json") for selection in selections]
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def main() -> None:
    """Apply a template, add a field and write the markdown report."""
    settings = get_settings()
    configure_logging(logging.INFO, telemetry=settings.telemetry_enabled)

    service = ReportBuilderService.from_settings(settings, title="ECY1 members in BC")
    autosaver = service.enable_autosave(save_draft, settings.autosave_debounce_seconds)

    service.apply_template("ECY1 members in BC")
    service.add_field("Membership Type")
    service.add_field("Member ID")
    autosaver.flush()

    output_path = Path("reports") / "ecy1_members_in_bc.md"
    report, saved_path = service.generate_report(output_path=output_path)
    print(report)
    print(f"\nReport saved to: {saved_path}")


if __name__ == "__main__":
    main()
