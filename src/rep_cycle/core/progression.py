"""
Per-exercise rep curves.

Each exercise climbs linearly from ``start_reps`` by ``rep_increment`` per
training day until it saturates at ``max_reps``.  The slowest exercise
defines the cycle length.
"""

import math

from .models import Exercise


def training_days_to_max(exercise: Exercise) -> int:
    """
    Number of training days needed to reach ``max_reps``.

    Day 1 is done at ``start_reps``, so the count is
    ceil((max - start) / increment) + 1.  Flat exercises take one day.

    Args:
        exercise: Exercise definition

    Returns:
        Days to max (>= 1)
    """
    if exercise.rep_increment <= 0:
        return 1
    span = max(exercise.max_reps - exercise.start_reps, 0)
    return math.ceil(span / exercise.rep_increment) + 1


def reps_for_training_day(exercise: Exercise, training_day_index: int) -> int:
    """
    Rep target for a 1-based training day of the cycle.

    Non-decreasing in the index and saturating at ``max_reps``.

    Args:
        exercise: Exercise definition
        training_day_index: 1-based training day within the cycle

    Returns:
        Target reps per set
    """
    day = min(training_day_index, training_days_to_max(exercise))
    reps = exercise.start_reps + exercise.rep_increment * max(day - 1, 0)
    return min(reps, exercise.max_reps)


def cycle_length(exercises: list[Exercise]) -> int:
    """Longest ``training_days_to_max`` across the program; 1 for no exercises."""
    if not exercises:
        return 1
    return max(training_days_to_max(ex) for ex in exercises)
