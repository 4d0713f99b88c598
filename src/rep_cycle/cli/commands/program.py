"""Program commands: settings, add-exercise, edit-exercise, remove-exercise.

Numeric options are taken as text and coerced by the core, so a typo like
``--sets abc`` falls back to a safe value instead of aborting.
"""

from typing import Annotated, Optional

import typer
from rich.markup import escape

from ...core.calendar import is_valid_date
from ...core.models import THEMES
from ...core.projection import settings_rows
from ...io.serializers import settings_to_dict
from .. import views
from ..app import DataDirOption, JsonOption, app, get_controller, resolve_exercise_id

SetsOption = Annotated[Optional[str], typer.Option("--sets", "-s", help="Sets per training day")]
StartOption = Annotated[Optional[str], typer.Option("--start", help="Reps on training day 1")]
StepOption = Annotated[
    Optional[str],
    typer.Option("--step", help="Reps added per training day (0 = flat)"),
]
MaxOption = Annotated[Optional[str], typer.Option("--max", help="Rep ceiling")]


@app.command()
def settings(
    start_date: Annotated[
        Optional[str],
        typer.Option("--start-date", help="Day 1 of the rest cadence (YYYY-MM-DD)"),
    ] = None,
    rest_every: Annotated[
        Optional[str],
        typer.Option("--rest-every", "-r", help="Rest every N days (0 = never)"),
    ] = None,
    theme: Annotated[
        Optional[str],
        typer.Option("--theme", help="Display theme: dark | light"),
    ] = None,
    collapse: Annotated[
        Optional[bool],
        typer.Option("--collapse/--expand", help="Hide or show the exercise table"),
    ] = None,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show settings and the program, or change settings.

    Saving any setting restarts today's set counts.
    """
    controller = get_controller(data_dir)

    if start_date is not None and not is_valid_date(start_date):
        views.print_error(f"Invalid date: {start_date}. Expected YYYY-MM-DD")
        raise typer.Exit(1)
    if theme is not None and theme not in THEMES:
        views.print_error(f"Theme must be one of: {', '.join(THEMES)}")
        raise typer.Exit(1)

    if any(v is not None for v in (start_date, rest_every, theme, collapse)):
        controller.update_settings(
            start_date=start_date,
            rest_every_n_days=rest_every,
            theme=theme,
            collapsed=collapse,
        )
        views.print_success("Settings saved.")

    state = controller.state
    if json_out:
        views.print_json(
            {"settings": settings_to_dict(state.settings), "exercises": settings_rows(state)}
        )
        return
    views.print_program(settings_rows(state), state.settings)


@app.command("add-exercise")
def add_exercise(
    name: Annotated[str, typer.Argument(help="Exercise name")],
    sets: SetsOption = None,
    start: StartOption = None,
    step: StepOption = None,
    maximum: MaxOption = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Add an exercise to the program.

      rep-cycle add-exercise "Pull-ups" --sets 3 --start 3 --step 1 --max 12
    """
    controller = get_controller(data_dir)
    exercise = controller.add_exercise(
        name,
        sets=3 if sets is None else sets,
        start_reps=10 if start is None else start,
        rep_increment=1 if step is None else step,
        max_reps=30 if maximum is None else maximum,
    )
    views.print_success(
        f"Added {escape(exercise.name)} \\[{escape(exercise.id)}]: {exercise.sets} sets, "
        f"{exercise.start_reps} → {exercise.max_reps} reps (+{exercise.rep_increment}/day)"
    )


@app.command("edit-exercise")
def edit_exercise(
    exercise: Annotated[str, typer.Argument(help="Exercise ID or row number")],
    name: Annotated[Optional[str], typer.Option("--name", "-n", help="New name")] = None,
    sets: SetsOption = None,
    start: StartOption = None,
    step: StepOption = None,
    maximum: MaxOption = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Change an exercise.  Options left out keep their current value.
    """
    controller = get_controller(data_dir)
    exercise_id = resolve_exercise_id(controller, exercise)
    if exercise_id is None:
        views.print_error(f"No exercise '{escape(exercise)}' in the program")
        raise typer.Exit(1)

    controller.update_exercise(
        exercise_id,
        name=name,
        sets=sets,
        start_reps=start,
        rep_increment=step,
        max_reps=maximum,
    )
    ex = controller.state.exercise_by_id(exercise_id)
    views.print_success(
        f"Updated {escape(ex.name)} \\[{escape(ex.id)}]: {ex.sets} sets, "
        f"{ex.start_reps} → {ex.max_reps} reps (+{ex.rep_increment}/day)"
    )


@app.command("remove-exercise")
def remove_exercise(
    exercise: Annotated[str, typer.Argument(help="Exercise ID or row number")],
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Remove an exercise from the program.
    """
    controller = get_controller(data_dir)
    exercise_id = resolve_exercise_id(controller, exercise)
    if exercise_id is None:
        views.print_error(f"No exercise '{escape(exercise)}' in the program")
        raise typer.Exit(1)

    name = controller.state.exercise_by_id(exercise_id).name
    if not force and not views.confirm_action(f"Remove {escape(name)}?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    controller.remove_exercise(exercise_id)
    views.print_success(f"Removed {escape(name)}.")
