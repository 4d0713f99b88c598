"""
JSON serialization for progress models.

Handles conversion between dataclasses and JSON-compatible dicts.  Reading
is lenient: missing fields fall back to the supplied defaults and numbers
are coerced, so snapshots written by older versions still load.  Only a
snapshot that is not a JSON object at all is rejected.
"""

import copy
import json
from typing import Any

from ..core.calendar import is_valid_date
from ..core.models import (
    REVIEWS,
    THEMES,
    AutoTuneState,
    DayProgress,
    Exercise,
    ProgressState,
    Settings,
    build_exercise,
    coerce_int,
)
from ..core.progression import cycle_length


class ValidationError(Exception):
    """Raised when a snapshot cannot be interpreted at all."""

    pass


def _optional_date(value: Any) -> str | None:
    return value if is_valid_date(value) else None


def exercise_to_dict(exercise: Exercise) -> dict[str, Any]:
    """
    Convert Exercise to JSON-compatible dict.

    Args:
        exercise: Exercise to convert

    Returns:
        Dict representation
    """
    return {
        "id": exercise.id,
        "name": exercise.name,
        "sets": exercise.sets,
        "start_reps": exercise.start_reps,
        "rep_increment": exercise.rep_increment,
        "max_reps": exercise.max_reps,
    }


def dict_to_exercise(data: Any) -> Exercise | None:
    """
    Convert dict to Exercise.

    Returns None for entries without a usable id; numeric fields are coerced
    (sets/reps to at least 1, increment to at least 0, max to at least start).
    """
    if not isinstance(data, dict) or not data.get("id"):
        return None
    return build_exercise(
        str(data["id"]),
        data.get("name"),
        data.get("sets"),
        data.get("start_reps"),
        data.get("rep_increment"),
        data.get("max_reps"),
    )


def _exercise_list(raw: Any) -> list[Exercise] | None:
    if not isinstance(raw, list):
        return None
    result: list[Exercise] = []
    seen: set[str] = set()
    for item in raw:
        ex = dict_to_exercise(item)
        if ex is None or ex.id in seen:
            continue
        seen.add(ex.id)
        result.append(ex)
    return result


def settings_to_dict(settings: Settings) -> dict[str, Any]:
    """Convert Settings to JSON-compatible dict."""
    return {
        "start_date": settings.start_date,
        "rest_every_n_days": settings.rest_every_n_days,
        "theme": settings.theme,
        "collapsed": settings.collapsed,
    }


def dict_to_settings(data: Any, defaults: Settings) -> Settings:
    """Convert dict to Settings, filling gaps from *defaults*."""
    if not isinstance(data, dict):
        return Settings(**settings_to_dict(defaults))
    start = data.get("start_date")
    theme = data.get("theme", defaults.theme)
    collapsed = data.get("collapsed", defaults.collapsed)
    return Settings(
        start_date=start if is_valid_date(start) else defaults.start_date,
        rest_every_n_days=coerce_int(
            data.get("rest_every_n_days", defaults.rest_every_n_days), 0, minimum=0
        ),
        theme=theme if theme in THEMES else defaults.theme,
        collapsed=collapsed if isinstance(collapsed, bool) else defaults.collapsed,
    )


def day_progress_to_dict(progress: DayProgress | None) -> dict[str, Any] | None:
    """Convert DayProgress to JSON-compatible dict (None stays None)."""
    if progress is None:
        return None
    return {"date": progress.date, "remaining_sets": dict(progress.remaining_sets)}


def dict_to_day_progress(data: Any) -> DayProgress | None:
    """Convert dict to DayProgress; anything unusable becomes None (rebuilt later)."""
    if not isinstance(data, dict) or not is_valid_date(data.get("date")):
        return None
    raw = data.get("remaining_sets")
    remaining: dict[str, int] = {}
    if isinstance(raw, dict):
        for key, value in raw.items():
            remaining[str(key)] = coerce_int(value, 0, minimum=0)
    return DayProgress(date=data["date"], remaining_sets=remaining)


def auto_tune_to_dict(tune: AutoTuneState) -> dict[str, Any]:
    """Convert AutoTuneState to JSON-compatible dict."""
    return {
        "pending": tune.pending,
        "completed_cycle_index": tune.completed_cycle_index,
        "snapshot_exercises": [exercise_to_dict(ex) for ex in tune.snapshot_exercises],
        "reviews": dict(tune.reviews),
    }


def dict_to_auto_tune(data: Any) -> AutoTuneState:
    """Convert dict to AutoTuneState; unknown review values are dropped."""
    if not isinstance(data, dict):
        return AutoTuneState()
    completed = data.get("completed_cycle_index")
    reviews = data.get("reviews")
    return AutoTuneState(
        pending=data.get("pending") is True,
        completed_cycle_index=(
            coerce_int(completed, 0, minimum=0) if completed is not None else None
        ),
        snapshot_exercises=_exercise_list(data.get("snapshot_exercises")) or [],
        reviews=(
            {str(k): v for k, v in reviews.items() if v in REVIEWS}
            if isinstance(reviews, dict)
            else {}
        ),
    )


def progress_state_to_dict(state: ProgressState) -> dict[str, Any]:
    """
    Convert ProgressState to JSON-compatible dict.

    Args:
        state: State to convert

    Returns:
        Dict representation covering every modeled field
    """
    return {
        "settings": settings_to_dict(state.settings),
        "exercises": [exercise_to_dict(ex) for ex in state.exercises],
        "training_days_completed_in_cycle": state.training_days_completed_in_cycle,
        "cycle_index": state.cycle_index,
        "last_completed_date": state.last_completed_date,
        "last_streak_date": state.last_streak_date,
        "streak_count": state.streak_count,
        "best_streak": state.best_streak,
        "per_day_progress": day_progress_to_dict(state.per_day_progress),
        "auto_tune": auto_tune_to_dict(state.auto_tune),
    }


def dict_to_progress_state(data: Any, defaults: ProgressState) -> ProgressState:
    """
    Convert dict to ProgressState, merging over *defaults*.

    Missing or unusable fields come from *defaults*.  Snapshots from before
    the streak date existed inherit it from ``last_completed_date``.  The
    in-cycle counter is clamped below the program's cycle length.

    Args:
        data: Decoded JSON
        defaults: State supplying fallback values

    Returns:
        ProgressState

    Raises:
        ValidationError: If *data* is not a JSON object
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Snapshot must be a JSON object, got {type(data).__name__}")

    exercises = _exercise_list(data.get("exercises"))
    if exercises is None:
        exercises = copy.deepcopy(defaults.exercises)

    last_completed = _optional_date(data.get("last_completed_date"))
    if "last_streak_date" in data:
        last_streak = _optional_date(data.get("last_streak_date"))
    else:
        last_streak = last_completed

    streak = coerce_int(data.get("streak_count", defaults.streak_count), 0, minimum=0)
    best = coerce_int(data.get("best_streak", defaults.best_streak), 0, minimum=0)
    completed_in_cycle = min(
        coerce_int(data.get("training_days_completed_in_cycle", 0), 0, minimum=0),
        cycle_length(exercises) - 1,
    )

    return ProgressState(
        settings=dict_to_settings(data.get("settings"), defaults.settings),
        exercises=exercises,
        training_days_completed_in_cycle=completed_in_cycle,
        cycle_index=coerce_int(data.get("cycle_index", 0), 0, minimum=0),
        last_completed_date=last_completed,
        last_streak_date=last_streak,
        streak_count=streak,
        best_streak=max(best, streak),
        per_day_progress=dict_to_day_progress(data.get("per_day_progress")),
        auto_tune=dict_to_auto_tune(data.get("auto_tune")),
    )


def state_to_json(state: ProgressState) -> str:
    """Serialize state to a JSON string."""
    return json.dumps(progress_state_to_dict(state), indent=2)


def state_from_json(raw: str, defaults: ProgressState) -> ProgressState:
    """
    Parse a JSON snapshot.

    Raises:
        ValidationError: If *raw* is not valid JSON or not an object
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Snapshot is not valid JSON: {e}") from e
    return dict_to_progress_state(data, defaults)
