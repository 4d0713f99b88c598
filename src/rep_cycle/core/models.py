"""
Data models for rep-cycle.

All core dataclasses representing the training program and the progress
aggregate.  Dates are ISO ``YYYY-MM-DD`` strings in the device's local
calendar.
"""

import copy
import math
from dataclasses import dataclass, field
from typing import Literal

Review = Literal["easy", "right", "hard"]
DayStatus = Literal["REST", "TRAINING_PENDING", "TRAINING_COMPLETED"]
Theme = Literal["dark", "light"]

REVIEWS: tuple[str, ...] = ("easy", "right", "hard")
THEMES: tuple[str, ...] = ("dark", "light")


@dataclass
class Exercise:
    """
    One exercise of the program and its rep progression.

    Reps start at ``start_reps`` on training day 1, grow by ``rep_increment``
    each training day and saturate at ``max_reps``.  An increment of 0 keeps
    the exercise flat.
    """

    id: str
    name: str
    sets: int
    start_reps: int
    rep_increment: int
    max_reps: int

    def __post_init__(self) -> None:
        """Validate exercise data."""
        if not self.id:
            raise ValueError("id must be non-empty")
        if self.sets <= 0:
            raise ValueError("sets must be positive")
        if self.start_reps <= 0:
            raise ValueError("start_reps must be positive")
        if self.rep_increment < 0:
            raise ValueError("rep_increment must be non-negative")
        if self.max_reps < self.start_reps:
            raise ValueError("max_reps must be >= start_reps")


@dataclass
class Settings:
    """
    User settings.

    ``start_date`` anchors day 1 of the rest cadence; ``rest_every_n_days``
    of 0 disables rest days.  ``theme`` and ``collapsed`` are display
    preferences carried for the front end.
    """

    start_date: str
    rest_every_n_days: int = 0
    theme: str = "dark"
    collapsed: bool = False


@dataclass
class DayProgress:
    """Sets still to do today, keyed by exercise id."""

    date: str
    remaining_sets: dict[str, int] = field(default_factory=dict)

    def all_done(self) -> bool:
        """True when every tracked exercise is at 0; vacuously False when empty."""
        if not self.remaining_sets:
            return False
        return all(n == 0 for n in self.remaining_sets.values())


@dataclass
class AutoTuneState:
    """
    End-of-cycle review.

    ``snapshot_exercises`` holds the exercise definitions as they were when
    the cycle completed; suggestions are computed from it even if the live
    program is edited while the review is pending.
    """

    pending: bool = False
    completed_cycle_index: int | None = None
    snapshot_exercises: list[Exercise] = field(default_factory=list)
    reviews: dict[str, str] = field(default_factory=dict)

    def snapshot_for(self, exercise_id: str) -> Exercise | None:
        """Return the snapshot definition for *exercise_id*, if captured."""
        for ex in self.snapshot_exercises:
            if ex.id == exercise_id:
                return ex
        return None


@dataclass
class ProgressState:
    """
    The whole progress aggregate.

    Mutated in place by the transition functions in ``core.session`` and
    ``core.autotune``; persisted by ``io.state_store``.
    """

    settings: Settings
    exercises: list[Exercise] = field(default_factory=list)
    training_days_completed_in_cycle: int = 0
    cycle_index: int = 0
    last_completed_date: str | None = None
    last_streak_date: str | None = None
    streak_count: int = 0
    best_streak: int = 0
    per_day_progress: DayProgress | None = None
    auto_tune: AutoTuneState = field(default_factory=AutoTuneState)

    def exercise_by_id(self, exercise_id: str) -> Exercise | None:
        """Return the live exercise with the given id, or None."""
        for ex in self.exercises:
            if ex.id == exercise_id:
                return ex
        return None

    def exercise_ids(self) -> list[str]:
        return [ex.id for ex in self.exercises]

    def copy(self) -> "ProgressState":
        """Deep copy of the state."""
        return copy.deepcopy(self)


def coerce_int(value: object, default: int, minimum: int | None = None) -> int:
    """
    Best-effort integer conversion for user-entered or persisted numbers.

    Non-numeric input yields *default*; results below *minimum* are raised
    to it.  Never raises.

    Args:
        value: Raw value (int, float, numeric string, anything else)
        default: Fallback for unparseable input
        minimum: Optional lower bound

    Returns:
        Coerced integer
    """
    if isinstance(value, bool):
        result = default
    elif isinstance(value, int):
        result = value
    elif isinstance(value, float):
        result = int(value) if math.isfinite(value) else default
    elif isinstance(value, str):
        try:
            result = int(float(value.strip()))
        except (ValueError, OverflowError):
            result = default
    else:
        result = default
    if minimum is not None and result < minimum:
        result = minimum
    return result


def build_exercise(
    exercise_id: str,
    name: object,
    sets: object,
    start_reps: object,
    rep_increment: object,
    max_reps: object,
) -> Exercise:
    """
    Construct an Exercise from loosely-typed input.

    Sets and reps fall back to 1, the increment to 0, and ``max_reps`` is
    raised to ``start_reps`` when lower, so construction never fails.
    """
    start = coerce_int(start_reps, 1, minimum=1)
    return Exercise(
        id=exercise_id,
        name=str(name).strip() if name is not None and str(name).strip() else exercise_id,
        sets=coerce_int(sets, 1, minimum=1),
        start_reps=start,
        rep_increment=coerce_int(rep_increment, 0, minimum=0),
        max_reps=coerce_int(max_reps, start, minimum=start),
    )
