"""
Spaced Review: operator CLI for the review scheduler.

A Rich terminal interface over the SM-2 review schedule.

Commands:
- spaced-review schedule   - Schedule a module from a completion score
- spaced-review review     - Record a self-rated review (0-5)
- spaced-review due        - List modules due now
- spaced-review upcoming   - List reviews due in the next N days
- spaced-review stats      - Show review statistics
- spaced-review reset      - Remove a module's schedule
- spaced-review scale      - Show the six-point rating scale
"""
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from config import get_settings
from src.logging_setup import configure_logging
from src.scheduling import (
    RATING_SCALE,
    PersistenceError,
    ReviewRecord,
    ReviewResult,
    ReviewScheduler,
    SM2Config,
    quality_label,
)
from src.storage import get_review_store

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="spaced-review",
    help="Spaced Review: SM-2 review scheduling for self-study modules",
    no_args_is_help=True,
)
console = Console()

STYLES = {
    "success": "bold green",
    "error": "bold red",
    "info": "bold cyan",
    "warning": "bold yellow",
    "dim": "dim",
}


def _scheduler(ctx: typer.Context) -> ReviewScheduler:
    settings = get_settings()
    store = get_review_store(settings, path=ctx.obj.get("store_path") if ctx.obj else None)
    return ReviewScheduler(
        store,
        config=SM2Config.from_settings(settings),
        week_days=settings.week_days,
    )


def _format_when(record: ReviewRecord) -> str:
    return record.next_review.astimezone().strftime("%Y-%m-%d %H:%M")


def _records_table(title: str, records: list[ReviewRecord]) -> Table:
    table = Table(title=title)
    table.add_column("Module")
    table.add_column("Next review")
    table.add_column("Interval", justify="right")
    table.add_column("Ease", justify="right")
    table.add_column("Reps", justify="right")

    for record in records:
        table.add_row(
            record.module_id,
            _format_when(record),
            f"{record.interval_days}d",
            f"{record.ease_factor:.2f}",
            str(record.repetition),
        )
    return table


def _print_scheduled(record: ReviewRecord) -> None:
    console.print(
        f"[{STYLES['success']}]Scheduled {record.module_id}[/{STYLES['success']}]: "
        f"next review {_format_when(record)} "
        f"(interval {record.interval_days}d, ease {record.ease_factor:.2f}, "
        f"repetition {record.repetition})"
    )


def _fail(message: str) -> None:
    console.print(f"[{STYLES['error']}]{message}[/{STYLES['error']}]")
    raise typer.Exit(1)


# =============================================================================
# Commands
# =============================================================================


@app.callback()
def main_options(
    ctx: typer.Context,
    store: Optional[Path] = typer.Option(
        None,
        "--store", "-s",
        help="Review store file (overrides SPACED_REVIEW_REVIEW_STORE_PATH)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Spaced Review: SM-2 review scheduling for self-study modules."""
    settings = get_settings()
    configure_logging("DEBUG" if verbose else settings.log_level, settings.log_file)
    ctx.obj = {"store_path": store}


@app.command()
def schedule(
    ctx: typer.Context,
    module_id: str = typer.Argument(..., help="Completed module"),
    score: float = typer.Argument(..., min=0.0, max=1.0, help="Completion score (0-1)"),
) -> None:
    """Schedule a module's next review from its completion score."""
    scheduler = _scheduler(ctx)
    try:
        record = asyncio.run(scheduler.schedule_module_review(module_id, score))
    except PersistenceError as e:
        _fail(f"Could not schedule {module_id}: {e}")
    _print_scheduled(record)


@app.command()
def review(
    ctx: typer.Context,
    module_id: str = typer.Argument(..., help="Reviewed module"),
    quality: int = typer.Argument(..., min=0, max=5, help="Recall quality (0-5)"),
) -> None:
    """Record a self-rated review."""
    scheduler = _scheduler(ctx)
    try:
        record = asyncio.run(scheduler.record_review(ReviewResult(module_id=module_id, quality=quality)))
    except PersistenceError as e:
        _fail(f"Could not record review for {module_id}: {e}")
    console.print(f"Rated [bold]{quality_label(quality)}[/bold] ({quality})")
    _print_scheduled(record)


@app.command()
def due(ctx: typer.Context) -> None:
    """List modules due for review now."""
    records = asyncio.run(_scheduler(ctx).get_due_reviews())
    if not records:
        console.print(f"[{STYLES['success']}]Nothing due for review.[/{STYLES['success']}]")
        return
    records.sort(key=lambda r: r.next_review)
    console.print(_records_table(f"Due now ({len(records)})", records))


@app.command()
def upcoming(
    ctx: typer.Context,
    days: Optional[int] = typer.Option(None, "--days", "-d", min=0, help="Look-ahead in days"),
) -> None:
    """List reviews due within the next N days."""
    window = days if days is not None else get_settings().upcoming_window_days
    records = asyncio.run(_scheduler(ctx).get_upcoming_reviews(window))
    if not records:
        console.print(f"[{STYLES['dim']}]No reviews in the next {window} days.[/{STYLES['dim']}]")
        return
    console.print(_records_table(f"Upcoming ({window} days)", records))


@app.command()
def stats(ctx: typer.Context) -> None:
    """Show review statistics."""
    review_stats = asyncio.run(_scheduler(ctx).get_review_stats())

    console.print("\n[bold cyan]Review Statistics[/bold cyan]")
    console.print("=" * 40)

    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="dim")
    table.add_column("Value", style="bold")

    table.add_row("Modules scheduled", str(review_stats.total_reviews))
    table.add_row("Due now", str(review_stats.due_today))
    table.add_row("Due this week", str(review_stats.due_this_week))
    table.add_row("Average ease", f"{review_stats.average_ease_factor:.2f}")
    table.add_row("Retention rate", f"{review_stats.retention_rate * 100:.0f}%")

    console.print(table)


@app.command()
def reset(
    ctx: typer.Context,
    module_id: str = typer.Argument(..., help="Module to unschedule"),
    confirm: bool = typer.Option(
        False,
        "--yes", "-y",
        help="Skip confirmation",
    ),
) -> None:
    """Remove a module's review schedule."""
    if not confirm and not Confirm.ask(f"Reset review schedule for {module_id}?", default=False):
        raise typer.Exit(0)

    try:
        removed = asyncio.run(_scheduler(ctx).reset_module_review(module_id))
    except PersistenceError as e:
        _fail(f"Could not reset {module_id}: {e}")

    if removed:
        console.print(f"[{STYLES['success']}]Reset review schedule for {module_id}[/{STYLES['success']}]")
    else:
        console.print(f"[{STYLES['dim']}]{module_id} was not scheduled[/{STYLES['dim']}]")


@app.command()
def scale() -> None:
    """Show the six-point recall rating scale."""
    table = Table(title="Recall Quality")
    table.add_column("Grade", justify="center")
    table.add_column("Label")
    table.add_column("Meaning", style="dim")

    for rating in RATING_SCALE:
        table.add_row(str(int(rating.quality)), rating.label, rating.description)

    console.print(table)


# =============================================================================
# Entry Point
# =============================================================================

def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
