"""
Read-only view models derived from ProgressState.

Nothing here mutates state: the front end asks for a view, renders it and
throws it away.  Per-day set counts are reconciled on a copy so a stale
snapshot still shows today's numbers.
"""

from dataclasses import asdict, dataclass, field
from typing import Any

from .autotune import Suggestion, suggestions
from .models import DayStatus, ProgressState
from .progression import cycle_length, reps_for_training_day, training_days_to_max
from .schedule import current_training_day_index, day_status, is_rest_day
from .session import fresh_day_progress, is_stale_for_today


@dataclass
class ExerciseRow:
    """One exercise as shown for today."""

    exercise_id: str
    name: str
    sets: int
    remaining_sets: int
    target_reps: int
    max_reps: int

    @property
    def complete(self) -> bool:
        return self.remaining_sets == 0


@dataclass
class TodayView:
    """Everything the front end shows for one day."""

    date: str
    status: DayStatus
    held: bool  # scheduled rest day overridden by the hold rule
    training_day_index: int
    cycle_index: int
    cycle_length: int
    rows: list[ExerciseRow] = field(default_factory=list)
    streak_count: int = 0
    best_streak: int = 0
    streak_text: str = ""
    can_complete: bool = False
    auto_tune_pending: bool = False

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        for row, row_data in zip(self.rows, data["rows"]):
            row_data["complete"] = row.complete
        return data


def streak_text(state: ProgressState) -> str:
    """Short human-readable streak summary."""
    count = state.streak_count
    if count <= 0:
        return "No streak yet"
    unit = "day" if count == 1 else "days"
    return f"{count} {unit} streak (best {state.best_streak})"


def build_today_view(state: ProgressState, today: str) -> TodayView:
    """
    Project the state onto today's view.

    Args:
        state: Progress state (not modified)
        today: Local date (YYYY-MM-DD)

    Returns:
        TodayView
    """
    status = day_status(state, today)
    index = current_training_day_index(state)

    progress = state.per_day_progress
    if progress is None or is_stale_for_today(progress, today):
        progress = fresh_day_progress(state.exercises, today)

    rows = [
        ExerciseRow(
            exercise_id=ex.id,
            name=ex.name,
            sets=ex.sets,
            remaining_sets=max(0, progress.remaining_sets.get(ex.id, ex.sets)),
            target_reps=reps_for_training_day(ex, index),
            max_reps=ex.max_reps,
        )
        for ex in state.exercises
    ]

    return TodayView(
        date=today,
        status=status,
        held=status != "REST" and is_rest_day(state.settings, today),
        training_day_index=index,
        cycle_index=state.cycle_index,
        cycle_length=cycle_length(state.exercises),
        rows=rows,
        streak_count=state.streak_count,
        best_streak=state.best_streak,
        streak_text=streak_text(state),
        can_complete=bool(state.exercises) and status == "TRAINING_PENDING",
        auto_tune_pending=state.auto_tune.pending,
    )


def settings_rows(state: ProgressState) -> list[dict[str, Any]]:
    """Program table contents: one dict per exercise, in program order."""
    return [
        {
            "id": ex.id,
            "name": ex.name,
            "sets": ex.sets,
            "start_reps": ex.start_reps,
            "rep_increment": ex.rep_increment,
            "max_reps": ex.max_reps,
            "days_to_max": training_days_to_max(ex),
        }
        for ex in state.exercises
    ]


def auto_tune_view(state: ProgressState) -> list[Suggestion]:
    """Suggestions for the pending review; empty when none is pending."""
    if not state.auto_tune.pending:
        return []
    return suggestions(state)
