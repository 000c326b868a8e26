"""Command-line interface for the Central report builder."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, NoReturn, Optional, Tuple

import typer

from . import get_version
from .catalog import ValueCatalog
from .config import Settings, get_settings
from .exceptions import CentralReportsError
from .logging_config import configure_logging
from .models import Connector, SelectionType
from .selection_store import SelectionStore
from .service import ReportBuilderService
from .suggestions import suggest
from .summarizer import Summarizer
from .telemetry import track_page_view

app = typer.Typer(help="Build Central member reports from fields and filters.")

FILTER_HELP = "Filter as [AND:|OR:|BETWEEN:]Category=Value. Repeatable."
FIELD_HELP = "Field as Category[=Value]. Repeatable."


def parse_selection(raw: str) -> Tuple[Optional[Connector], str, Optional[str]]:
    """Split ``OR:Occupation=Researcher`` into connector, category and value."""
    connector: Optional[Connector] = None
    prefix, sep, rest = raw.partition(":")
    if sep and prefix.upper() in Connector.__members__:
        connector = Connector[prefix.upper()]
        raw = rest
    category, sep, value = raw.partition("=")
    category = category.strip()
    if not category:
        raise typer.BadParameter(f"Missing category in {raw!r}.")
    return connector, category, value.strip() if sep else None


def build_store(filters: List[str], fields: List[str]) -> SelectionStore:
    """Fill a store with filters first, then fields, in argument order."""
    store = SelectionStore()
    for raw in filters:
        connector, category, value = parse_selection(raw)
        if not value:
            raise typer.BadParameter(f"Filter {raw!r} needs a value.")
        selection = store.add(category, value, SelectionType.FILTER)
        if connector is not None:
            store.update(selection.id, connector=connector)
    for raw in fields:
        _, category, value = parse_selection(raw)
        store.add(category, value or None, SelectionType.FIELD)
    return store


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"central-reports {get_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    settings = get_settings()
    configure_logging(
        logging.DEBUG if verbose else logging.WARNING,
        telemetry=settings.telemetry_enabled,
    )


@app.command()
def summarize(
    filters: Optional[List[str]] = typer.Option(None, "--filter", "-f", help=FILTER_HELP),
    fields: Optional[List[str]] = typer.Option(None, "--field", "-F", help=FIELD_HELP),
) -> None:
    """Print the natural-language form of a query."""
    store = build_store(filters or [], fields or [])
    summary = Summarizer().summarize(store.selections)
    typer.echo(summary or "(no selections)")


@app.command()
def estimate(
    filters: Optional[List[str]] = typer.Option(None, "--filter", "-f", help=FILTER_HELP),
    fields: Optional[List[str]] = typer.Option(None, "--field", "-F", help=FIELD_HELP),
    seed: Optional[int] = typer.Option(None, "--seed", help="Randomize decay with this seed."),
) -> None:
    """Print the estimated record count and filter waterfall."""
    settings = _resolve_settings(seed=seed)
    store = build_store(filters or [], fields or [])
    try:
        service = ReportBuilderService.from_settings(settings)
        service.store.replace(store.selections)
        snapshot = service.snapshot()
    except CentralReportsError as exc:
        _exit_with_error(exc)
    typer.echo(f"Estimated records: {snapshot.estimated_count:,}")
    if len(snapshot.waterfall) > 1:
        typer.echo("Waterfall: " + " -> ".join(f"{total:,}" for total in snapshot.waterfall))


@app.command("suggest")
def suggest_command(
    filters: Optional[List[str]] = typer.Option(None, "--filter", "-f", help=FILTER_HELP),
    fields: Optional[List[str]] = typer.Option(None, "--field", "-F", help=FIELD_HELP),
) -> None:
    """Print suggested next categories."""
    store = build_store(filters or [], fields or [])
    result = suggest(store.selections)
    typer.echo(result.title)
    for item in result.suggestions:
        typer.echo(f"  - {item.category} ({item.section}): {item.reason}")


@app.command()
def catalog(
    section: Optional[List[str]] = typer.Option(None, "--section", "-s", help="Limit to sections."),
    search: str = typer.Option("", "--search", "-q", help="Match category or section names."),
    show_values: bool = typer.Option(False, "--values", help="List sample values."),
) -> None:
    """List browsable categories, combos and query templates."""
    settings = get_settings()
    try:
        value_catalog = ValueCatalog.load(settings.catalog_path)
    except CentralReportsError as exc:
        _exit_with_error(exc)
    track_page_view("report_browse", search=search, sections=section or [])
    for entry in value_catalog.browse(search, section):
        typer.echo(f"{entry.section} / {entry.category}")
        if show_values:
            for value in entry.values:
                typer.echo(f"    {value}")
    if not section and not search:
        typer.echo("")
        typer.echo("Combos: " + ", ".join(c.name for c in value_catalog.combos()))
        typer.echo("Templates: " + ", ".join(t.name for t in value_catalog.templates()))


@app.command()
def report(
    filters: Optional[List[str]] = typer.Option(None, "--filter", "-f", help=FILTER_HELP),
    fields: Optional[List[str]] = typer.Option(None, "--field", "-F", help=FIELD_HELP),
    template: Optional[str] = typer.Option(None, "--template", "-t", help="Apply a query template."),
    combo: Optional[str] = typer.Option(None, "--combo", "-c", help="Apply a combo."),
    title: str = typer.Option("New Report", "--title", help="Report title."),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Optional path where the markdown report should be written."
    ),
) -> None:
    """Render the markdown report and save it."""
    try:
        service = ReportBuilderService.from_settings(get_settings(), title=title)
        if template:
            service.apply_template(template)
        if combo:
            service.apply_combo(combo)
        extra = build_store(filters or [], fields or []).selections
        service.store.replace(service.store.selections + extra)
        markdown, saved_path = service.generate_report(output_path=output)
    except CentralReportsError as exc:
        _exit_with_error(exc)

    typer.echo(markdown)
    typer.echo(f"\n{'=' * 60}")
    typer.echo(f"Report saved to: {saved_path}")
    typer.echo(f"{'=' * 60}")


def _exit_with_error(exc: CentralReportsError) -> NoReturn:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1) from exc


def _resolve_settings(seed: Optional[int]) -> Settings:  # pragma: no cover - simple helper
    settings = get_settings()
    if seed is not None:
        return settings.model_copy(update={"estimator_seed": seed})
    return settings


def main() -> None:  # pragma: no cover - CLI entrypoint
    app()


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    main()
