"""
Application controller: the single owner of the progress state.

Every user action goes through one method here, which brings the day up to
date, applies exactly one transition and writes the state back to storage
before returning.  Front ends never mutate ProgressState directly.
"""

import logging
import re
from typing import Callable
from uuid import uuid4

from .core import autotune, session
from .core.calendar import today as local_today
from .core.models import Exercise, ProgressState, build_exercise
from .core.projection import TodayView, build_today_view
from .io.state_store import StateStore

logger = logging.getLogger(__name__)


def new_exercise_id(name: str, taken: set[str]) -> str:
    """Readable, unique id derived from an exercise name."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-") or "exercise"
    candidate = slug
    while candidate in taken:
        candidate = f"{slug}-{uuid4().hex[:6]}"
    return candidate


class TrackerController:
    """Loads the state once and persists it after every action."""

    def __init__(self, store: StateStore, clock: Callable[[], str] = local_today):
        self.store = store
        self.clock = clock
        self.state: ProgressState = store.load()

    def _begin(self) -> str:
        today = self.clock()
        session.refresh_for_today(self.state, today)
        return today

    def _commit(self) -> None:
        self.store.save(self.state)

    # -- queries -------------------------------------------------------------

    def view(self) -> TodayView:
        """Today's view model (refreshes and persists day bookkeeping)."""
        today = self._begin()
        self._commit()
        return build_today_view(self.state, today)

    # -- session -------------------------------------------------------------

    def complete_set(self, exercise_id: str) -> bool:
        today = self._begin()
        changed = session.complete_set_for_exercise(self.state, exercise_id, today)
        self._commit()
        return changed

    def complete_day(self) -> bool:
        """Mark today done.  Refused when the program has no exercises."""
        today = self._begin()
        changed = bool(self.state.exercises) and session.mark_day_completed(self.state, today)
        self._commit()
        return changed

    def reset(self) -> None:
        today = self._begin()
        session.reset_progress(self.state, today)
        self._commit()

    # -- settings ------------------------------------------------------------

    def update_settings(
        self,
        start_date: str | None = None,
        rest_every_n_days: object = None,
        theme: str | None = None,
        collapsed: bool | None = None,
    ) -> None:
        today = self._begin()
        session.update_settings(
            self.state,
            today,
            start_date=start_date,
            rest_every_n_days=rest_every_n_days,
            theme=theme,
            collapsed=collapsed,
        )
        self._commit()

    def add_exercise(
        self,
        name: str,
        sets: object = 3,
        start_reps: object = 10,
        rep_increment: object = 1,
        max_reps: object = 30,
    ) -> Exercise:
        """Append an exercise to the program; numbers are coerced."""
        today = self._begin()
        ex_id = new_exercise_id(name, set(self.state.exercise_ids()))
        exercise = build_exercise(ex_id, name, sets, start_reps, rep_increment, max_reps)
        session.replace_exercises(self.state, [*self.state.exercises, exercise], today)
        self._commit()
        logger.debug("Added exercise %s", ex_id)
        return exercise

    def update_exercise(
        self,
        exercise_id: str,
        name: str | None = None,
        sets: object = None,
        start_reps: object = None,
        rep_increment: object = None,
        max_reps: object = None,
    ) -> bool:
        """Edit fields of one exercise; ``None`` keeps the current value."""
        today = self._begin()
        current = self.state.exercise_by_id(exercise_id)
        if current is None:
            self._commit()
            return False
        edited = build_exercise(
            exercise_id,
            current.name if name is None else name,
            current.sets if sets is None else sets,
            current.start_reps if start_reps is None else start_reps,
            current.rep_increment if rep_increment is None else rep_increment,
            current.max_reps if max_reps is None else max_reps,
        )
        program = [edited if ex.id == exercise_id else ex for ex in self.state.exercises]
        session.replace_exercises(self.state, program, today)
        self._commit()
        return True

    def remove_exercise(self, exercise_id: str) -> bool:
        today = self._begin()
        if self.state.exercise_by_id(exercise_id) is None:
            self._commit()
            return False
        program = [ex for ex in self.state.exercises if ex.id != exercise_id]
        session.replace_exercises(self.state, program, today)
        self._commit()
        return True

    # -- auto-tune -----------------------------------------------------------

    def set_review(self, exercise_id: str, review: str) -> bool:
        self._begin()
        changed = autotune.set_review(self.state, exercise_id, review)
        self._commit()
        return changed

    def apply_auto_tune(self) -> bool:
        self._begin()
        changed = autotune.apply_auto_tune(self.state)
        self._commit()
        return changed

    def dismiss_auto_tune(self) -> bool:
        self._begin()
        changed = autotune.dismiss_auto_tune(self.state)
        self._commit()
        return changed
