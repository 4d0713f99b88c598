"""
End-of-cycle auto-tune advisor.

When a cycle completes, the current program is snapshotted and the user can
rate each exercise easy / right / hard.  Applying the review moves each
exercise's start and max reps by one progression step (two for the max);
dismissing it leaves the program untouched.
"""

import copy
import logging
from dataclasses import dataclass

from .config import DEFAULT_REVIEW, MAX_STEP_MULTIPLIER
from .models import REVIEWS, AutoTuneState, Exercise, ProgressState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Suggestion:
    """Proposed start/max reps for one exercise, next to its live values."""

    exercise_id: str
    name: str
    review: str
    current_start: int
    current_max: int
    start_reps: int
    max_reps: int

    @property
    def changed(self) -> bool:
        return (self.start_reps, self.max_reps) != (self.current_start, self.current_max)


def compute_suggestion(exercise: Exercise, review: str | None) -> tuple[int, int]:
    """
    New (start_reps, max_reps) for an exercise given its review.

    step = rep_increment, or 1 for flat exercises.
      easy  -> start + step, max + 2*step
      hard  -> max(1, start - step), max(new_start, max - 2*step)
      right -> unchanged (also for no review)

    Args:
        exercise: Exercise definition the suggestion is based on
        review: "easy", "right", "hard" or None

    Returns:
        (start_reps, max_reps)
    """
    step = exercise.rep_increment if exercise.rep_increment > 0 else 1
    if review == "easy":
        return exercise.start_reps + step, exercise.max_reps + MAX_STEP_MULTIPLIER * step
    if review == "hard":
        new_start = max(1, exercise.start_reps - step)
        return new_start, max(new_start, exercise.max_reps - MAX_STEP_MULTIPLIER * step)
    return exercise.start_reps, exercise.max_reps


def start_auto_tune(state: ProgressState, completed_cycle_index: int) -> None:
    """Open a pending review over a snapshot of the current program."""
    state.auto_tune = AutoTuneState(
        pending=True,
        completed_cycle_index=completed_cycle_index,
        snapshot_exercises=copy.deepcopy(state.exercises),
        reviews={},
    )
    logger.debug(
        "Auto-tune review opened for cycle %s (%d exercises)",
        completed_cycle_index,
        len(state.exercises),
    )


def set_review(state: ProgressState, exercise_id: str, review: str) -> bool:
    """
    Record the user's difficulty review for one exercise.

    Ignored when no review is pending or the id is neither in the snapshot
    nor in the live program.  Never touches exercise definitions.

    Raises:
        ValueError: If *review* is not easy/right/hard
    """
    if review not in REVIEWS:
        raise ValueError(f"Invalid review: {review!r}. Must be one of {REVIEWS}")
    tune = state.auto_tune
    if not tune.pending:
        return False
    if tune.snapshot_for(exercise_id) is None and state.exercise_by_id(exercise_id) is None:
        logger.debug("Ignoring review for unknown exercise %r", exercise_id)
        return False
    tune.reviews[exercise_id] = review
    return True


def _base_definition(state: ProgressState, exercise: Exercise) -> Exercise:
    return state.auto_tune.snapshot_for(exercise.id) or exercise


def suggestions(state: ProgressState) -> list[Suggestion]:
    """Per-exercise suggestions for the live program, in program order."""
    result: list[Suggestion] = []
    for ex in state.exercises:
        base = _base_definition(state, ex)
        review = state.auto_tune.reviews.get(ex.id, DEFAULT_REVIEW)
        start, maximum = compute_suggestion(base, review)
        result.append(
            Suggestion(
                exercise_id=ex.id,
                name=ex.name,
                review=review,
                current_start=ex.start_reps,
                current_max=ex.max_reps,
                start_reps=start,
                max_reps=maximum,
            )
        )
    return result


def apply_auto_tune(state: ProgressState) -> bool:
    """
    Apply the pending review to the live program.

    Every exercise gets its suggestion, so one rated "right" (or not rated)
    returns to its snapshot values.  Clears today's set progress so the next
    session starts fresh.
    """
    if not state.auto_tune.pending:
        return False
    for suggestion in suggestions(state):
        ex = state.exercise_by_id(suggestion.exercise_id)
        if ex is None:
            continue
        ex.start_reps = suggestion.start_reps
        ex.max_reps = suggestion.max_reps
        logger.debug(
            "Auto-tune %s (%s): start=%d max=%d",
            ex.id,
            suggestion.review,
            ex.start_reps,
            ex.max_reps,
        )
    state.per_day_progress = None
    _close(state.auto_tune)
    return True


def dismiss_auto_tune(state: ProgressState) -> bool:
    """Close the pending review without changing any exercise."""
    if not state.auto_tune.pending:
        return False
    _close(state.auto_tune)
    return True


def _close(tune: AutoTuneState) -> None:
    tune.pending = False
    tune.snapshot_exercises = []
    tune.reviews = {}
