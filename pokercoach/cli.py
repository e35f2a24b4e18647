"""
PokerCoach CLI - Adaptive drill scheduler from the terminal.

Usage:
    pokercoach init-db                       # Create tables
    pokercoach build-queue USER              # Build a drill batch
    pokercoach due USER                      # Show due drills
    pokercoach submit USER ITEM ACTION -s scenario.json
    pokercoach focus USER                    # Show weekly focus
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from pokercoach.config import get_settings
from pokercoach.core.errors import InputValidationError, PokerCoachError
from pokercoach.db.database import init_db
from pokercoach.service import TrainingService

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="pokercoach",
    help="♠ PokerCoach - Adaptive practice scheduler for poker drills",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()


def _fail(error: PokerCoachError) -> None:
    console.print(f"[red]{error}[/]")
    if isinstance(error, InputValidationError):
        for message in error.errors:
            console.print(f"  [dim]- {message}[/]")
    raise typer.Exit(code=1)


# =============================================================================
# Commands
# =============================================================================


@app.command("init-db")
def init_db_command() -> None:
    """Create the drill practice tables."""
    init_db()
    console.print("[green]✓ Database initialized[/]")


@app.command("build-queue")
def build_queue(
    user_id: Annotated[str, typer.Argument(help="User identifier")],
) -> None:
    """Build a drill batch if the user has no pending drills."""
    batch = TrainingService().build_queue(user_id)

    if batch.is_empty:
        console.print("[yellow]Pending drills already queued, nothing created[/]")
        return

    summary = batch.summary()
    mix = batch.focus_mix
    console.print(
        Panel(
            f"Focus: [bold]{batch.focus.primary.label}[/] x{batch.focus_count}\n"
            f"Secondary: {batch.focus.secondary.label} x{batch.other_count}\n"
            f"Mix: {mix.mode.value} ({mix.sizing_count} sizing / {mix.decision_count} decision)",
            title=f"Created {summary['created_count']} drills",
        )
    )


@app.command()
def due(
    user_id: Annotated[str, typer.Argument(help="User identifier")],
    limit: Annotated[
        int | None, typer.Option("--limit", "-n", help="Maximum drills to show")
    ] = None,
) -> None:
    """Show drills due now, earliest first."""
    items = TrainingService().due_drills(user_id, limit=limit)
    if not items:
        console.print("[green]No drills due. Come back later.[/]")
        return

    table = Table(title=f"Due drills for {user_id}")
    table.add_column("ID", style="dim")
    table.add_column("Leak")
    table.add_column("Drill")
    table.add_column("Difficulty")
    table.add_column("Rep", justify="right")
    table.add_column("Due at")
    for item in items:
        table.add_row(
            str(item.id),
            item.leak_tag.label,
            item.drill_type.value,
            item.difficulty.value,
            str(item.repetition),
            item.due_at.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


@app.command()
def submit(
    user_id: Annotated[str, typer.Argument(help="User identifier")],
    item_id: Annotated[str, typer.Argument(help="Drill queue item id")],
    action: Annotated[str, typer.Argument(help="Answer (fold/call/raise or 2.5x/3x/overbet)")],
    scenario_file: Annotated[
        Path, typer.Option("--scenario", "-s", help="Scenario JSON file")
    ],
    reason: Annotated[
        str | None, typer.Option("--reason", "-r", help="Mistake reason if known")
    ] = None,
) -> None:
    """Submit an answer for a drill."""
    if not scenario_file.exists():
        console.print(f"[red]File not found: {scenario_file}[/]")
        raise typer.Exit(code=1)

    try:
        scenario = json.loads(scenario_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid scenario JSON: {e}[/]")
        raise typer.Exit(code=1) from e

    payload = {
        "drill_queue_id": item_id,
        "scenario": scenario,
        "user_action": action,
        "mistake_reason": reason,
    }
    try:
        result = TrainingService().submit_answer(user_id, payload)
    except PokerCoachError as e:
        _fail(e)
        return

    if result.correct:
        console.print(f"[green]✓ Correct![/] Next review {result.next_due_at:%Y-%m-%d %H:%M}")
    else:
        console.print(
            f"[red]✗ Incorrect.[/] Correct answer: [bold]{result.correct_answer}[/]. "
            f"Retry at {result.next_due_at:%H:%M}"
        )
    if result.explanation:
        console.print(f"[dim]{result.explanation}[/]")


@app.command()
def focus(
    user_id: Annotated[str, typer.Argument(help="User identifier")],
) -> None:
    """Show this week's focus tags."""
    service = TrainingService()
    weekly = service.weekly_focus(user_id)

    table = Table(title="Weekly focus")
    table.add_column("Role")
    table.add_column("Leak")
    table.add_column("Difficulty")
    for role, tag in (("Primary", weekly.primary), ("Secondary", weekly.secondary)):
        table.add_row(role, tag.label, service.difficulty_for(user_id, tag).value)
    console.print(table)


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """CLI entry point."""
    settings = get_settings()

    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<level>{message}</level>",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="10 MB")

    app()


if __name__ == "__main__":
    main()
