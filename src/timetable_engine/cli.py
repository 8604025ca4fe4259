"""CLI entry point for the timetable engine."""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .exceptions import TimetableError
from .exporters import ScheduleLookup, get_exporter
from .matching import Matcher
from .models import MatchSummary
from .scheduler import ConfigLoader, ConstraintsConfig, EventExpander, RunStatus, ScheduleRunner
from .storage import InMemoryStore
from .validators import (
    validate_offering_rows,
    validate_room_row,
    validate_rows,
    validate_timeslot_row,
)

app = typer.Typer(
    name="timetable-engine",
    help="Match course offerings and generate university timetables",
    add_completion=False,
)
console = Console()


class OutputFormat(str, Enum):
    """Output format options."""

    json = "json"
    csv = "csv"
    excel = "excel"


ReferenceDir = Annotated[
    Path,
    typer.Argument(help="Reference directory with the session's CSV/JSON files"),
]
Verbose = Annotated[
    bool,
    typer.Option("-v", "--verbose", help="Show detailed output"),
]


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load(reference_dir: Path) -> tuple[ConfigLoader, InMemoryStore]:
    if not reference_dir.is_dir():
        console.print(f"[bold red]Error:[/bold red] Directory not found: {reference_dir}")
        raise typer.Exit(1)

    loader = ConfigLoader(reference_dir)
    try:
        with console.status("[bold green]Loading reference data..."):
            store = loader.load_store()
    except TimetableError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1) from e
    return loader, store


def _session_config(store: InMemoryStore, session_id: str) -> ConstraintsConfig:
    return store.get_constraints(session_id) or ConstraintsConfig.default()


def _show_match_summary(summary: MatchSummary) -> None:
    table = Table(title="Matching", show_header=False)
    table.add_column("Outcome", style="cyan")
    table.add_column("Count", style="green")
    table.add_row("Auto-matched", str(summary.auto_matched))
    table.add_row("Needs review", str(summary.needs_review))
    table.add_row("Unresolved", str(summary.unresolved))
    console.print(table)


@app.command()
def match(
    reference_dir: ReferenceDir,
    output: Annotated[
        Optional[Path],
        typer.Option("-o", "--output", help="Write matched offerings and suggestions to JSON"),
    ] = None,
    verbose: Verbose = False,
) -> None:
    """Match course offerings against the canonical catalog."""
    _setup_logging(verbose)
    loader, store = _load(reference_dir)

    matcher = Matcher(store)
    with console.status("[bold green]Matching offerings..."):
        summary = matcher.run_matching(loader.session_id)

    _show_match_summary(summary)

    review_items = matcher.list_review_items(loader.session_id)
    if review_items:
        review_table = Table(title="Needs Review")
        review_table.add_column("Code", style="cyan")
        review_table.add_column("Title", style="blue", max_width=40)
        review_table.add_column("Best Match", style="magenta")
        review_table.add_column("Score", style="green")

        for offering, suggestions in review_items[:20]:
            best = suggestions[0] if suggestions else None
            course = store.get_canonical(best.canonical_course_id) if best else None
            review_table.add_row(
                offering.course_code,
                offering.original_title[:40],
                course.title if course else "-",
                f"{best.score:.3f}" if best else "-",
            )

        if len(review_items) > 20:
            review_table.add_row("...", "...", "...", "...")

        console.print(review_table)

    if output:
        output_path = output if output.suffix == ".json" else output.with_suffix(".json")
        output_path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "summary": summary.to_dict(),
            "offerings": [o.to_dict() for o in store.list_offerings(loader.session_id)],
            "aliases": [a.to_dict() for a in store.aliases],
            "suggestions": {
                offering.id: [s.to_dict() for s in suggestions]
                for offering, suggestions in review_items
            },
        }
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        console.print(f"\n[bold green]✓[/bold green] Matching exported to: {output_path}")


@app.command()
def expand(
    reference_dir: ReferenceDir,
    output: Annotated[
        Optional[Path],
        typer.Option("-o", "--output", help="Events JSON file (default: DIR/events.json)"),
    ] = None,
    verbose: Verbose = False,
) -> None:
    """Match offerings and expand the matched ones into schedulable events."""
    _setup_logging(verbose)
    loader, store = _load(reference_dir)

    with console.status("[bold green]Matching and expanding offerings..."):
        summary = Matcher(store).run_matching(loader.session_id)
        expander = EventExpander(_session_config(store, loader.session_id))
        expansion = expander.expand_session(loader.session_id, store)

    _show_match_summary(summary)
    console.print(f"\n[bold]Events generated:[/bold] {len(expansion.events)}")

    if expansion.stale_lock_ids:
        console.print(
            f"\n[bold yellow]Stale locks ({len(expansion.stale_lock_ids)}):[/bold yellow]"
        )
        for event_id in expansion.stale_lock_ids:
            console.print(f"  [yellow]• {event_id}[/yellow]")

    output_path = output or reference_dir / "events.json"
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump([e.to_dict() for e in expansion.events], f, indent=2, ensure_ascii=False)
    console.print(f"\n[bold green]✓[/bold green] Events exported to: {output_path}")


@app.command()
def schedule(
    reference_dir: ReferenceDir,
    seed: Annotated[
        Optional[int],
        typer.Option("--seed", help="Seed recorded with the run"),
    ] = None,
    candidate_limit: Annotated[
        Optional[int],
        typer.Option("--candidate-limit", min=1, help="Top-K candidates tried per event"),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("-o", "--output", help="Output file or directory path"),
    ] = None,
    format: Annotated[
        OutputFormat,
        typer.Option("-f", "--format", help="Output format"),
    ] = OutputFormat.json,
    verbose: Verbose = False,
) -> None:
    """Generate a timetable for the session in a reference directory.

    Uses DIR/events.json when present; otherwise offerings are matched and
    expanded first.
    """
    _setup_logging(verbose)
    loader, store = _load(reference_dir)
    session_id = loader.session_id

    if store.list_events(session_id):
        console.print(
            f"[bold yellow]Note:[/bold yellow] using pre-expanded events from "
            f"{reference_dir / 'events.json'}; delete it to re-match and re-expand"
        )
    else:
        with console.status("[bold green]Matching and expanding offerings..."):
            Matcher(store).run_matching(session_id)
            EventExpander(_session_config(store, session_id)).expand_session(session_id, store)

    events = store.list_events(session_id)
    if not events:
        console.print("[bold yellow]Warning:[/bold yellow] No events to schedule")
        raise typer.Exit(1)

    console.print(f"\n[bold]Schedule Generation for:[/bold] {reference_dir}")
    console.print(f"  Events: {len(events)}")

    with console.status("[bold green]Creating schedule..."):
        run = ScheduleRunner(store).generate(
            session_id, seed=seed, candidate_limit=candidate_limit
        )

    if run.status == RunStatus.FAILED or run.result is None:
        console.print(f"[bold red]Error:[/bold red] Run failed: {run.error_message}")
        raise typer.Exit(1)

    result = run.result
    console.print("\n[bold]Schedule Results:[/bold]")
    console.print(f"  Scheduled: {result.scheduled_count}")
    console.print(f"  Unscheduled: {result.unscheduled_count}")
    console.print(f"  Soft score: {result.soft_score}")

    if result.statistics.by_day:
        console.print("\n[bold]Distribution by day:[/bold]")
        for day, count in result.statistics.by_day.items():
            console.print(f"  {day}: {count}")

    if verbose and result.unscheduled:
        console.print(
            f"\n[bold yellow]Unscheduled events ({result.unscheduled_count}):[/bold yellow]"
        )
        for item in result.unscheduled[:10]:
            console.print(f"  [yellow]- {item.event_id}: {item.details}[/yellow]")
        if result.unscheduled_count > 10:
            console.print(f"  [yellow]... and {result.unscheduled_count - 10} more[/yellow]")

    if output:
        lookup = ScheduleLookup(
            timeslots=store.list_timeslots(session_id),
            rooms=store.list_rooms(session_id),
            events=events,
            offerings=store.list_offerings(session_id),
        )
        exporter = get_exporter(format.value, lookup)

        if format == OutputFormat.csv:
            # CSV exports to directory
            output_path = output if output.is_dir() else output.parent / output.stem
        else:
            suffix = ".xlsx" if format == OutputFormat.excel else ".json"
            output_path = output if output.suffix else output.with_suffix(suffix)

        with console.status(f"[bold green]Exporting to {format.value}..."):
            exporter.export(result, output_path)

        console.print(f"\n[bold green]✓[/bold green] Schedule exported to: {output_path}")


@app.command()
def validate(reference_dir: ReferenceDir) -> None:
    """Validate the rows of a reference directory without scheduling."""
    if not reference_dir.is_dir():
        console.print(f"[bold red]Error:[/bold red] Directory not found: {reference_dir}")
        raise typer.Exit(1)

    loader = ConfigLoader(reference_dir)
    console.print(f"\n[bold]Validation Results for:[/bold] {reference_dir}")

    missing = loader.missing_files()
    if missing:
        console.print(f"\n  [yellow]Files missing: {len(missing)}[/yellow]")
        console.print(f"    {', '.join(missing)}")

    results = {
        "offerings.csv": validate_offering_rows(loader.read_csv("offerings.csv")),
        "timeslots.csv": validate_rows(loader.read_csv("timeslots.csv"), validate_timeslot_row),
        "rooms.csv": validate_rows(loader.read_csv("rooms.csv"), validate_room_row),
    }

    valid = not missing
    for filename, result in results.items():
        if result.valid:
            continue
        valid = False
        console.print(f"\n[bold red]{filename} ({len(result.errors)} errors):[/bold red]")
        for issue in result.errors:
            console.print(f"  [red]• {issue}[/red]")

    if valid:
        console.print("[bold green]✓ Reference data is valid[/bold green]")
    else:
        console.print("[bold red]✗ Reference data has issues[/bold red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
