"""
CLI view formatters using Rich for pretty console output.

Renders the view models from core.projection; no state logic lives here.
"""

import json
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.autotune import Suggestion
from ..core.models import Settings
from ..core.projection import TodayView

console = Console()
err_console = Console(stderr=True)

_STATUS_LABELS = {
    "REST": "[cyan]Rest day[/cyan]",
    "TRAINING_PENDING": "[yellow]Training day[/yellow]",
    "TRAINING_COMPLETED": "[green]Training day (done)[/green]",
}

_REVIEW_STYLES = {"easy": "green", "right": "white", "hard": "red"}


def format_today_table(view: TodayView) -> Table:
    """
    Format today's exercises as a Rich table.

    Args:
        view: Today's view model

    Returns:
        Rich Table
    """
    table = Table(title=f"Day {view.training_day_index} of {view.cycle_length}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", style="cyan")
    table.add_column("Exercise")
    table.add_column("Reps", justify="right", style="bold")
    table.add_column("Sets left", justify="right")

    for i, row in enumerate(view.rows, 1):
        left = "[green]done[/green]" if row.complete else f"{row.remaining_sets}/{row.sets}"
        table.add_row(str(i), escape(row.exercise_id), escape(row.name), str(row.target_reps), left)
    return table


def print_today(view: TodayView, collapsed: bool = False) -> None:
    """
    Print today's status, streak, and (unless resting or collapsed) the set table.

    Args:
        view: Today's view model
        collapsed: Hide the exercise table
    """
    console.print()
    console.print(f"[bold]{view.date}[/bold]  {_STATUS_LABELS[view.status]}")
    if view.held:
        console.print("[dim]Scheduled rest held: yesterday's session is still open.[/dim]")
    console.print(f"Cycle {view.cycle_index + 1}  |  {view.streak_text}")

    if view.status == "REST":
        console.print("[cyan]Recover today. Your streak carries over.[/cyan]")
    elif not view.rows:
        print_warning("No exercises in the program. Add one with 'add-exercise'.")
    elif not collapsed:
        console.print(format_today_table(view))

    if view.auto_tune_pending:
        print_info("Cycle finished! Review difficulty with 'tune'.")
    console.print()


def print_program(rows: list[dict[str, Any]], settings: Settings) -> None:
    """Print settings and the program table."""
    rest = (
        f"every {settings.rest_every_n_days} days"
        if settings.rest_every_n_days > 0
        else "off"
    )
    console.print()
    console.print(f"Start date: [bold]{settings.start_date}[/bold]")
    console.print(f"Rest days:  [bold]{rest}[/bold]")
    console.print(f"Theme: {settings.theme}  |  Collapsed: {'yes' if settings.collapsed else 'no'}")

    if not rows:
        console.print("[yellow]No exercises in the program.[/yellow]")
        return

    table = Table(title="Program")
    table.add_column("ID", style="cyan")
    table.add_column("Exercise")
    table.add_column("Sets", justify="right")
    table.add_column("Start", justify="right")
    table.add_column("+/day", justify="right")
    table.add_column("Max", justify="right")
    table.add_column("Days", justify="right", style="dim")
    for r in rows:
        table.add_row(
            escape(r["id"]),
            escape(r["name"]),
            str(r["sets"]),
            str(r["start_reps"]),
            str(r["rep_increment"]),
            str(r["max_reps"]),
            str(r["days_to_max"]),
        )
    console.print(table)


def print_auto_tune(items: list[Suggestion], completed_cycle_index: int | None) -> None:
    """Print the end-of-cycle review with proposed changes."""
    if not items:
        console.print("[yellow]No review pending.[/yellow]")
        return

    cycle = (completed_cycle_index or 0) + 1
    table = Table(title=f"Cycle {cycle} review")
    table.add_column("ID", style="cyan")
    table.add_column("Exercise")
    table.add_column("Review")
    table.add_column("Start", justify="right")
    table.add_column("Max", justify="right")
    for s in items:
        style = _REVIEW_STYLES.get(s.review, "white")
        start = f"{s.current_start} → {s.start_reps}" if s.changed else str(s.start_reps)
        maximum = f"{s.current_max} → {s.max_reps}" if s.changed else str(s.max_reps)
        table.add_row(escape(s.exercise_id), escape(s.name), f"[{style}]{s.review}[/{style}]", start, maximum)
    console.print(table)
    console.print("[dim]Rate with 'review ID easy|right|hard', then 'apply-tune' or 'dismiss-tune'.[/dim]")


def print_json(data: Any) -> None:
    """Print raw JSON (no Rich markup) for machine consumers."""
    print(json.dumps(data, indent=2))


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} \\[y/N]: ")
    return response.lower() in ("y", "yes")
