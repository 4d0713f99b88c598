"""
Per-day session state machine.

Transitions over ProgressState: set completion, day completion with cycle
rollover, streak bookkeeping, and settings/program edits.  Every function
takes "today" explicitly and mutates the state in place; the ones a user
action maps to return True when they changed anything.
"""

import logging

from .autotune import start_auto_tune
from .calendar import add_days, days_between, is_valid_date
from .config import MIN_REST_EVERY_N_DAYS
from .models import THEMES, AutoTuneState, DayProgress, Exercise, ProgressState, coerce_int
from .progression import cycle_length
from .schedule import is_rest_day_adjusted, is_scheduled_training_day

logger = logging.getLogger(__name__)


# =============================================================================
# PER-DAY PROGRESS
# =============================================================================


def is_stale_for_today(per_day_progress: DayProgress | None, today: str) -> bool:
    """True when the stored set progress does not belong to *today*."""
    return per_day_progress is None or per_day_progress.date != today


def fresh_day_progress(exercises: list[Exercise], today: str) -> DayProgress:
    """Full set counts for every exercise."""
    return DayProgress(date=today, remaining_sets={ex.id: ex.sets for ex in exercises})


def reconcile_day_progress(state: ProgressState, today: str) -> DayProgress:
    """
    Make ``per_day_progress`` valid for *today* and the current program.

    A stale entry is rebuilt from scratch.  A current entry keeps the counts
    of exercises still present, drops removed ids and adds new ids at their
    full set count.

    Returns:
        The reconciled DayProgress (also stored on the state)
    """
    progress = state.per_day_progress
    if progress is None or is_stale_for_today(progress, today):
        state.per_day_progress = fresh_day_progress(state.exercises, today)
        return state.per_day_progress

    progress.remaining_sets = {
        ex.id: max(0, progress.remaining_sets.get(ex.id, ex.sets))
        for ex in state.exercises
    }
    return progress


def reset_day_progress(state: ProgressState, today: str) -> None:
    """Rebuild today's set counts from each exercise's full ``sets``."""
    state.per_day_progress = fresh_day_progress(state.exercises, today)


# =============================================================================
# STREAK
# =============================================================================


def update_streak(state: ProgressState, today: str) -> None:
    """
    Advance the streak for *today*.

    Consecutive day -> +1, same day -> unchanged, gap or first ever -> 1.
    ``best_streak`` is raised to match.
    """
    if state.last_streak_date is None:
        state.streak_count = 1
    else:
        gap = days_between(state.last_streak_date, today)
        if gap == 1:
            state.streak_count += 1
        elif gap != 0:
            state.streak_count = 1
    state.last_streak_date = today
    state.best_streak = max(state.best_streak, state.streak_count)


def extend_streak_for_rest_day(state: ProgressState, today: str) -> bool:
    """
    Let a rest day carry the streak forward.

    Only applies on a rest day (after the hold rule), only when the streak
    was counted yesterday, and only if yesterday was not a missed training
    day.
    """
    if not is_rest_day_adjusted(state, today):
        return False
    if state.last_streak_date is None or days_between(state.last_streak_date, today) != 1:
        return False
    yesterday = add_days(today, -1)
    if (
        is_scheduled_training_day(state.settings, yesterday)
        and state.last_completed_date != yesterday
    ):
        return False
    update_streak(state, today)
    logger.debug("Rest day %s extended streak to %d", today, state.streak_count)
    return True


def extend_streak_through_rest_days(state: ProgressState, through: str) -> int:
    """
    Credit every qualifying rest day after ``last_streak_date`` up to *through*.

    Rest days count whether or not the app was opened on them.  The walk
    stops at the first day that is not a caught-up rest day.

    Returns:
        Number of rest days credited
    """
    credited = 0
    while state.last_streak_date is not None:
        day = add_days(state.last_streak_date, 1)
        if days_between(day, through) < 0 or not extend_streak_for_rest_day(state, day):
            break
        credited += 1
    return credited


# =============================================================================
# COMPLETION
# =============================================================================


def mark_day_completed(state: ProgressState, today: str) -> bool:
    """
    Finish today's training day.

    No-op on a rest day or when today was already completed.  Otherwise the
    streak advances, the cycle counter increments, and reaching the cycle
    length rolls over to the next cycle and opens an auto-tune review.

    Args:
        state: Progress state (mutated)
        today: Local date (YYYY-MM-DD)

    Returns:
        True if the day was marked completed
    """
    if is_rest_day_adjusted(state, today) or state.last_completed_date == today:
        return False

    extend_streak_through_rest_days(state, add_days(today, -1))
    update_streak(state, today)
    state.training_days_completed_in_cycle += 1
    state.last_completed_date = today
    logger.debug(
        "Completed training day %d of cycle %d on %s",
        state.training_days_completed_in_cycle,
        state.cycle_index,
        today,
    )

    if state.training_days_completed_in_cycle >= cycle_length(state.exercises):
        completed = state.cycle_index
        state.training_days_completed_in_cycle = 0
        state.cycle_index += 1
        start_auto_tune(state, completed)
        logger.info("Cycle %d complete; starting cycle %d", completed, state.cycle_index)
    return True


def complete_set_for_exercise(state: ProgressState, exercise_id: str, today: str) -> bool:
    """
    Tick off one set of an exercise.

    Unknown ids and exercises already at 0 are ignored.  When every exercise
    reaches 0 the day is completed automatically.

    Returns:
        True if a set was counted
    """
    progress = reconcile_day_progress(state, today)
    remaining = progress.remaining_sets.get(exercise_id)
    if remaining is None or remaining <= 0:
        return False
    progress.remaining_sets[exercise_id] = remaining - 1
    if progress.all_done():
        mark_day_completed(state, today)
    return True


# =============================================================================
# PROGRAM AND SETTINGS EDITS
# =============================================================================


def _clamp_cycle_counter(state: ProgressState) -> None:
    limit = cycle_length(state.exercises) - 1
    if state.training_days_completed_in_cycle > limit:
        state.training_days_completed_in_cycle = limit


def replace_exercises(state: ProgressState, exercises: list[Exercise], today: str) -> None:
    """Swap in a new program and restart today's set counts."""
    state.exercises = list(exercises)
    _clamp_cycle_counter(state)
    reset_day_progress(state, today)


def update_settings(
    state: ProgressState,
    today: str,
    *,
    start_date: str | None = None,
    rest_every_n_days: object = None,
    theme: str | None = None,
    collapsed: bool | None = None,
) -> None:
    """
    Save settings.  ``None`` keeps a field as is.

    A non-numeric rest cadence becomes 0 (rest days off); an invalid start
    date or theme is ignored.  Today's set counts restart.
    """
    settings = state.settings
    if start_date is not None:
        if is_valid_date(start_date):
            settings.start_date = start_date
        else:
            logger.warning("Ignoring invalid start date %r", start_date)
    if rest_every_n_days is not None:
        settings.rest_every_n_days = coerce_int(
            rest_every_n_days, MIN_REST_EVERY_N_DAYS, minimum=MIN_REST_EVERY_N_DAYS
        )
    if theme is not None:
        if theme in THEMES:
            settings.theme = theme
        else:
            logger.warning("Ignoring unknown theme %r", theme)
    if collapsed is not None:
        settings.collapsed = bool(collapsed)
    reset_day_progress(state, today)


def reset_progress(state: ProgressState, today: str) -> None:
    """
    Restart the program at cycle zero from *today*.

    Exercise definitions, display settings and ``best_streak`` survive.
    """
    state.settings.start_date = today
    state.training_days_completed_in_cycle = 0
    state.cycle_index = 0
    state.last_completed_date = None
    state.last_streak_date = None
    state.streak_count = 0
    state.auto_tune = AutoTuneState()
    reset_day_progress(state, today)
    logger.info("Progress reset; new start date %s", today)


def refresh_for_today(state: ProgressState, today: str) -> None:
    """Bring derived bookkeeping up to date when the app is opened."""
    reconcile_day_progress(state, today)
    extend_streak_through_rest_days(state, today)
