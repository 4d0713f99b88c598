"""
CLI entry point using Typer.

Provides commands for daily training and program management:
- today: Show today's status, rep targets and sets left
- done-set: Tick off sets of one exercise
- complete: Mark today's training day as done
- settings: Show or change settings and the program
- add-exercise / edit-exercise / remove-exercise: Edit the program
- tune / review / apply-tune / dismiss-tune: End-of-cycle review
- reset: Restart at cycle 1
"""

from typing import Annotated

import typer
from rich.markup import escape

from . import views
from .app import app, configure_logging
from .commands.program import add_exercise, edit_exercise, remove_exercise, settings
from .commands.sessions import complete, done_set, reset, today
from .commands.tuning import apply_tune, dismiss_tune, review, tune


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """
    Rep-progression workout tracker. Run without a command for interactive mode.
    """
    configure_logging(verbose)

    if ctx.invoked_subcommand is not None:
        return

    # ── Interactive main menu ───────────────────────────────────────────────
    views.console.print()
    views.console.print("[bold cyan]rep-cycle[/bold cyan]: daily rep progression")
    views.console.print()

    menu = {
        "1": ("today",           "Show today"),
        "2": ("done-set",        "Tick off a set"),
        "3": ("complete",        "Mark today done"),
        "4": ("settings",        "Settings & program"),
        "5": ("tune",            "End-of-cycle review"),
        "6": ("review",          "Rate an exercise"),
        "7": ("add-exercise",    "Add an exercise"),
        "8": ("edit-exercise",   "Edit an exercise"),
        "9": ("remove-exercise", "Remove an exercise"),
        "a": ("apply-tune",      "Apply review"),
        "d": ("dismiss-tune",    "Dismiss review"),
        "r": ("reset",           "Reset to cycle 1"),
        "0": ("quit",            "Quit"),
    }

    for key, (_, desc) in menu.items():
        views.console.print(f"  \\[{key}] {desc}")

    views.console.print()
    choice = views.console.input("Choose [1]: ").strip() or "1"

    if choice == "0":
        raise typer.Exit(0)

    chosen = {k: v[0] for k, v in menu.items()}.get(choice)

    if chosen is None:
        views.print_error(f"Unknown choice: {escape(choice)}")
        raise typer.Exit(1)

    if chosen == "today":
        ctx.invoke(today)
    elif chosen == "done-set":
        ctx.invoke(today)
        ref = views.console.input("Exercise # or ID: ").strip()
        if ref:
            ctx.invoke(done_set, exercise=ref)
    elif chosen == "complete":
        ctx.invoke(complete)
    elif chosen == "settings":
        ctx.invoke(settings)
    elif chosen == "tune":
        ctx.invoke(tune)
    elif chosen == "review":
        _menu_review(ctx)
    elif chosen == "add-exercise":
        _menu_add_exercise(ctx)
    elif chosen == "edit-exercise":
        _menu_edit_exercise(ctx)
    elif chosen == "remove-exercise":
        ctx.invoke(settings)
        ref = views.console.input("Exercise # or ID (Enter to cancel): ").strip()
        if ref:
            ctx.invoke(remove_exercise, exercise=ref)
    elif chosen == "apply-tune":
        ctx.invoke(apply_tune)
    elif chosen == "dismiss-tune":
        ctx.invoke(dismiss_tune)
    elif chosen == "reset":
        ctx.invoke(reset)


def _menu_review(ctx: typer.Context) -> None:
    """Interactive review helper called from the main menu."""
    ctx.invoke(tune)
    ref = views.console.input("Exercise ID (Enter to cancel): ").strip()
    if not ref:
        views.print_info("Cancelled.")
        return
    rating = views.console.input("Rating easy/right/hard \\[right]: ").strip() or "right"
    ctx.invoke(review, exercise=ref, rating=rating)


def _ask(label: str, current: object = None) -> str | None:
    """Prompt for one field; Enter answers None, which keeps *current*."""
    hint = f" \\[{current}]" if current is not None else ""
    answer = views.console.input(f"{label}{hint}: ").strip()
    return answer or None


def _menu_add_exercise(ctx: typer.Context) -> None:
    """Interactive add-exercise helper called from the main menu."""
    name = views.console.input("Name (Enter to cancel): ").strip()
    if not name:
        views.print_info("Cancelled.")
        return
    ctx.invoke(
        add_exercise,
        name=name,
        sets=_ask("Sets", 3),
        start=_ask("Start reps", 10),
        step=_ask("Reps added per day", 1),
        maximum=_ask("Max reps", 30),
    )


def _menu_edit_exercise(ctx: typer.Context) -> None:
    """Interactive edit-exercise helper; Enter keeps a field unchanged."""
    ctx.invoke(settings)
    ref = views.console.input("Exercise # or ID (Enter to cancel): ").strip()
    if not ref:
        views.print_info("Cancelled.")
        return
    ctx.invoke(
        edit_exercise,
        exercise=ref,
        name=_ask("Name"),
        sets=_ask("Sets"),
        start=_ask("Start reps"),
        step=_ask("Reps added per day"),
        maximum=_ask("Max reps"),
    )


if __name__ == "__main__":
    app()
