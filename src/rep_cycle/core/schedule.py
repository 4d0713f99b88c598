"""
Rest-day schedule and training-day indexing.

Rest days recur on a fixed cadence anchored at the settings' start date and
do not depend on completion history.  The hold rule then turns a scheduled
rest day back into a training day while the previous session is still
outstanding.
"""

from .calendar import add_days, days_between
from .models import DayStatus, ProgressState, Settings


def day_number(settings: Settings, date: str) -> int:
    """1-based day number of *date* relative to the start date (<= 0 before it)."""
    return days_between(settings.start_date, date) + 1


def is_rest_day(settings: Settings, date: str) -> bool:
    """
    Whether the cadence schedules *date* as a rest day.

    With ``rest_every_n_days = 4`` and a start date of 2024-01-01, rest days
    fall on 01-04, 01-08, 01-12 and so on.

    Args:
        settings: User settings
        date: Calendar date (YYYY-MM-DD)

    Returns:
        True if the cadence marks this date as rest
    """
    n = settings.rest_every_n_days
    if n <= 0:
        return False
    day = day_number(settings, date)
    return day > 0 and day % n == 0


def is_scheduled_training_day(settings: Settings, date: str) -> bool:
    """True for dates on or after the start date that the cadence does not rest."""
    return day_number(settings, date) > 0 and not is_rest_day(settings, date)


def is_rest_day_adjusted(state: ProgressState, date: str) -> bool:
    """
    Rest determination after applying the hold rule.

    A scheduled rest day stays a training day when the day before it was a
    training day that was never completed.

    Args:
        state: Progress state
        date: Calendar date (YYYY-MM-DD)

    Returns:
        True if *date* is a rest day the user is caught up for
    """
    if not is_rest_day(state.settings, date):
        return False
    previous = add_days(date, -1)
    if is_scheduled_training_day(state.settings, previous):
        return state.last_completed_date == previous
    return True


def current_training_day_index(state: ProgressState) -> int:
    """1-based index of the next uncompleted training day in the cycle."""
    return state.training_days_completed_in_cycle + 1


def day_status(state: ProgressState, date: str) -> DayStatus:
    """Derived status of *date*: REST, TRAINING_PENDING or TRAINING_COMPLETED."""
    if is_rest_day_adjusted(state, date):
        return "REST"
    if state.last_completed_date == date:
        return "TRAINING_COMPLETED"
    return "TRAINING_PENDING"
