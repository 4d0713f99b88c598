"""Auto-tune commands: tune, review, apply-tune, dismiss-tune."""

from dataclasses import asdict
from typing import Annotated

import typer
from rich.markup import escape

from ...core.models import REVIEWS
from ...core.projection import auto_tune_view
from .. import views
from ..app import DataDirOption, JsonOption, app, get_controller, resolve_exercise_id


@app.command()
def tune(
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the end-of-cycle review and the changes it would make.
    """
    controller = get_controller(data_dir)
    state = controller.state
    items = auto_tune_view(state)

    if json_out:
        views.print_json(
            {
                "pending": state.auto_tune.pending,
                "completed_cycle_index": state.auto_tune.completed_cycle_index,
                "suggestions": [asdict(s) for s in items],
            }
        )
        return

    views.print_auto_tune(items, state.auto_tune.completed_cycle_index)


@app.command()
def review(
    exercise: Annotated[str, typer.Argument(help="Exercise ID or row number")],
    rating: Annotated[str, typer.Argument(help="easy | right | hard")],
    data_dir: DataDirOption = None,
) -> None:
    """
    Rate how the last cycle felt for one exercise.
    """
    rating = rating.lower()
    if rating not in REVIEWS:
        views.print_error(f"Rating must be one of: {', '.join(REVIEWS)}")
        raise typer.Exit(1)

    controller = get_controller(data_dir)
    if not controller.state.auto_tune.pending:
        views.print_info("No review pending.")
        return

    exercise_id = resolve_exercise_id(controller, exercise) or exercise
    if controller.set_review(exercise_id, rating):
        views.print_success(f"{escape(exercise_id)}: {rating}")
    else:
        views.print_info(f"No exercise '{escape(exercise)}' to review; ignored.")


@app.command("apply-tune")
def apply_tune(
    data_dir: DataDirOption = None,
) -> None:
    """
    Apply the reviewed changes to the program.
    """
    controller = get_controller(data_dir)
    items = auto_tune_view(controller.state)
    if not controller.apply_auto_tune():
        views.print_info("No review pending.")
        return

    changed = [s for s in items if s.changed]
    for s in changed:
        views.console.print(
            f"  {escape(s.name)}: start {s.current_start} → {s.start_reps}, max {s.current_max} → {s.max_reps}"
        )
    views.print_success(f"Applied review ({len(changed)} exercise(s) changed).")


@app.command("dismiss-tune")
def dismiss_tune(
    data_dir: DataDirOption = None,
) -> None:
    """
    Close the review without changing the program.
    """
    controller = get_controller(data_dir)
    if controller.dismiss_auto_tune():
        views.print_success("Review dismissed.")
    else:
        views.print_info("No review pending.")
