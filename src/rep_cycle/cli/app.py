"""Shared Typer app object, shared option types, and controller utility."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.logging import RichHandler

from ..controller import TrackerController
from ..io.state_store import get_default_store
from . import views

# Shared --data-dir option type used across all commands
DataDirOption = Annotated[
    Optional[Path],
    typer.Option(
        "--data-dir",
        "-D",
        help="Directory holding the saved state (default: $REP_CYCLE_HOME or ~/.rep-cycle)",
    ),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="rep-cycle",
    help="Rep-progression workout tracker with rest days, streaks and end-of-cycle tuning.",
    no_args_is_help=False,
    invoke_without_command=True,
)


def configure_logging(verbose: bool = False) -> None:
    """Route log records through Rich; DEBUG when verbose, else WARNING."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=views.err_console, show_path=False)],
        force=True,
    )


def get_controller(data_dir: Path | None) -> TrackerController:
    """Get a controller over the state in *data_dir* (or the default location)."""
    return TrackerController(get_default_store(data_dir))


def resolve_exercise_id(controller: TrackerController, ref: str) -> str | None:
    """
    Map a user reference to an exercise id.

    Accepts the id itself or the 1-based row number shown by 'today'.
    """
    ids = controller.state.exercise_ids()
    if ref in ids:
        return ref
    if ref.isdigit() and 1 <= int(ref) <= len(ids):
        return ids[int(ref) - 1]
    return None
