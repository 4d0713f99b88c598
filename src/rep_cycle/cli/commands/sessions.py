"""Session commands: today, done-set, complete, reset."""

from typing import Annotated

import typer
from rich.markup import escape

from .. import views
from ..app import DataDirOption, JsonOption, app, get_controller, resolve_exercise_id


@app.command()
def today(
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show today's status: rest or training, rep targets, sets left, streak.
    """
    controller = get_controller(data_dir)
    view = controller.view()

    if json_out:
        views.print_json(view.to_dict())
        return

    views.print_today(view, collapsed=controller.state.settings.collapsed)


@app.command("done-set")
def done_set(
    exercise: Annotated[
        str,
        typer.Argument(help="Exercise ID or row number from 'today'"),
    ],
    count: Annotated[
        int,
        typer.Option("--count", "-c", min=1, help="Number of sets to tick off"),
    ] = 1,
    data_dir: DataDirOption = None,
) -> None:
    """
    Tick off finished sets of one exercise.

    Finishing the last set of the last exercise completes the day.
    """
    controller = get_controller(data_dir)
    exercise_id = resolve_exercise_id(controller, exercise)
    if exercise_id is None:
        views.print_info(f"No exercise '{escape(exercise)}' in the program; nothing recorded.")
        return

    was_done = controller.state.last_completed_date == controller.clock()
    counted = 0
    for _ in range(count):
        if not controller.complete_set(exercise_id):
            break
        counted += 1

    view = controller.view()
    row = next(r for r in view.rows if r.exercise_id == exercise_id)
    if counted == 0:
        views.print_info(f"{escape(row.name)}: all sets already done.")
    else:
        views.print_success(f"{escape(row.name)}: {row.remaining_sets} of {row.sets} sets left.")

    if not was_done and view.status == "TRAINING_COMPLETED":
        views.print_success(f"Day complete! {view.streak_text}")
        if view.auto_tune_pending:
            views.print_info("Cycle finished! Review difficulty with 'tune'.")


@app.command()
def complete(
    data_dir: DataDirOption = None,
) -> None:
    """
    Mark today's training day as completed.
    """
    controller = get_controller(data_dir)
    view = controller.view()

    if not view.rows:
        views.print_error("No exercises in the program; nothing to complete.")
        raise typer.Exit(1)
    if view.status == "REST":
        views.print_info("Today is a rest day.")
        return
    if view.status == "TRAINING_COMPLETED":
        views.print_info("Today is already completed.")
        return

    controller.complete_day()
    view = controller.view()
    views.print_success(f"Day complete! {view.streak_text}")
    if view.auto_tune_pending:
        views.print_info("Cycle finished! Review difficulty with 'tune'.")


@app.command()
def reset(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Restart the program at cycle 1 from today.

    Exercises, display settings and your best streak are kept.
    """
    controller = get_controller(data_dir)
    if not force and not views.confirm_action("Reset progress to cycle 1 starting today?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    controller.reset()
    views.print_success(f"Progress reset. Start date is now {controller.state.settings.start_date}.")
