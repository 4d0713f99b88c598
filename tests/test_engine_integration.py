"""
Integration tests for the controller, persistence adapter and projections.

Each test drives the full pipeline: TrackerController → transitions →
StateStore → view model, with a hand-advanced clock.

Program used by most scenarios (rest every 4th day from 2024-01-01):
  a: 2 sets, 10 → 20 reps, +5/day   (3 days to max)
  b: 1 set, flat 5 reps             (1 day to max)
  cycle length = 3
"""

import json
import logging

import pytest

from rep_cycle.controller import TrackerController, new_exercise_id
from rep_cycle.core.config import STATE_KEY
from rep_cycle.core.engine.config_loader import (
    default_progress_state,
    load_user_config,
    program_from_config,
)
from rep_cycle.core.models import Exercise, ProgressState, Settings
from rep_cycle.core.projection import auto_tune_view, build_today_view, settings_rows
from rep_cycle.io.serializers import (
    ValidationError,
    dict_to_progress_state,
    progress_state_to_dict,
)
from rep_cycle.io.state_store import FileKeyValueStore, MemoryKeyValueStore, StateStore


# ===========================================================================
# Helpers
# ===========================================================================


class Clock:
    """Settable stand-in for calendar.today()."""

    def __init__(self, value: str = "2024-01-01"):
        self.value = value

    def __call__(self) -> str:
        return self.value


def _program() -> list[Exercise]:
    return [
        Exercise(id="a", name="Alpha", sets=2, start_reps=10, rep_increment=5, max_reps=20),
        Exercise(id="b", name="Bravo", sets=1, start_reps=5, rep_increment=0, max_reps=5),
    ]


def _factory(today: str) -> ProgressState:
    return ProgressState(
        settings=Settings(start_date=today, rest_every_n_days=4),
        exercises=_program(),
    )


def _make(kv=None, clock: Clock | None = None) -> tuple[TrackerController, MemoryKeyValueStore, Clock]:
    kv = kv if kv is not None else MemoryKeyValueStore()
    clock = clock or Clock()
    store = StateStore(kv, default_factory=_factory, clock=clock)
    return TrackerController(store, clock=clock), kv, clock


def _finish_day(controller: TrackerController) -> None:
    for ex in controller.state.exercises:
        for _ in range(ex.sets):
            controller.complete_set(ex.id)


# ===========================================================================
# Full cycle scenario
# ===========================================================================


class TestFullCycle:
    def test_rep_targets_climb_each_training_day(self):
        controller, _, clock = _make()
        targets = []
        for day in ("2024-01-01", "2024-01-02", "2024-01-03"):
            clock.value = day
            view = controller.view()
            targets.append(view.rows[0].target_reps)
            _finish_day(controller)
        assert targets == [10, 15, 20]

    def test_cycle_rest_and_tune(self):
        controller, _, clock = _make()
        for day in ("2024-01-01", "2024-01-02", "2024-01-03"):
            clock.value = day
            _finish_day(controller)

        state = controller.state
        assert state.cycle_index == 1
        assert state.training_days_completed_in_cycle == 0
        assert state.auto_tune.pending
        assert state.streak_count == 3

        clock.value = "2024-01-04"
        view = controller.view()
        assert view.status == "REST"
        assert view.streak_count == 4
        assert not view.can_complete

        assert controller.set_review("a", "easy")
        assert controller.apply_auto_tune()
        a = controller.state.exercise_by_id("a")
        assert (a.start_reps, a.max_reps) == (15, 30)

        clock.value = "2024-01-05"
        view = controller.view()
        assert view.status == "TRAINING_PENDING"
        assert view.training_day_index == 1
        assert view.rows[0].target_reps == 15
        assert view.rows[0].remaining_sets == 2

    def test_rest_day_counts_without_opening_app(self):
        controller, _, clock = _make()
        for day in ("2024-01-01", "2024-01-02", "2024-01-03"):
            clock.value = day
            _finish_day(controller)

        clock.value = "2024-01-05"  # nothing run on rest day 01-04
        _finish_day(controller)
        assert controller.state.streak_count == 5
        assert controller.state.last_streak_date == "2024-01-05"

    def test_missed_day_holds_rest(self):
        controller, _, clock = _make()
        for day in ("2024-01-01", "2024-01-02"):
            clock.value = day
            _finish_day(controller)

        clock.value = "2024-01-04"  # 01-03 skipped
        view = controller.view()
        assert view.status == "TRAINING_PENDING"
        assert view.held
        assert view.training_day_index == 3

        _finish_day(controller)
        assert controller.state.last_completed_date == "2024-01-04"
        assert controller.state.streak_count == 1
        assert controller.state.best_streak == 2

    def test_set_progress_resets_next_day(self):
        controller, _, clock = _make()
        controller.complete_set("a")
        assert controller.view().rows[0].remaining_sets == 1

        clock.value = "2024-01-02"
        view = controller.view()
        assert view.rows[0].remaining_sets == 2
        assert controller.state.training_days_completed_in_cycle == 0

    def test_complete_day_idempotent(self):
        controller, _, _ = _make()
        assert controller.complete_day()
        assert not controller.complete_day()
        assert controller.state.training_days_completed_in_cycle == 1

    def test_empty_program_cannot_complete(self):
        controller, _, _ = _make()
        controller.remove_exercise("a")
        controller.remove_exercise("b")
        view = controller.view()
        assert view.rows == []
        assert not view.can_complete
        assert not controller.complete_day()
        assert view.cycle_length == 1


# ===========================================================================
# Program edits through the controller
# ===========================================================================


class TestProgramEdits:
    def test_add_exercise_coerces_and_resets_today(self):
        controller, _, _ = _make()
        controller.complete_set("a")
        ex = controller.add_exercise("Pull ups", sets="abc", start_reps="3", rep_increment="1", max_reps="1")
        assert ex.id == "pull-ups"
        assert (ex.sets, ex.start_reps, ex.rep_increment, ex.max_reps) == (1, 3, 1, 3)
        assert controller.state.per_day_progress.remaining_sets == {"a": 2, "b": 1, "pull-ups": 1}

    def test_update_exercise_keeps_unspecified_fields(self):
        controller, _, _ = _make()
        assert controller.update_exercise("a", max_reps=25)
        a = controller.state.exercise_by_id("a")
        assert (a.sets, a.start_reps, a.rep_increment, a.max_reps) == (2, 10, 5, 25)

    def test_unknown_exercise_edits_ignored(self):
        controller, _, _ = _make()
        assert not controller.update_exercise("zzz", sets=4)
        assert not controller.remove_exercise("zzz")
        assert not controller.complete_set("zzz")
        assert controller.state.exercise_ids() == ["a", "b"]

    def test_new_exercise_id_unique(self):
        assert new_exercise_id("Push Ups!", set()) == "push-ups"
        other = new_exercise_id("Push Ups", {"push-ups"})
        assert other.startswith("push-ups-") and other != "push-ups"
        assert new_exercise_id("***", set()) == "exercise"

    def test_settings_rows(self):
        controller, _, _ = _make()
        rows = settings_rows(controller.state)
        assert [r["id"] for r in rows] == ["a", "b"]
        assert rows[0]["days_to_max"] == 3

    def test_reset(self):
        controller, _, clock = _make()
        for day in ("2024-01-01", "2024-01-02"):
            clock.value = day
            _finish_day(controller)
        clock.value = "2024-01-20"
        controller.reset()
        state = controller.state
        assert state.settings.start_date == "2024-01-20"
        assert state.streak_count == 0
        assert state.best_streak == 2
        assert state.exercise_ids() == ["a", "b"]


# ===========================================================================
# Persistence
# ===========================================================================


class TestPersistence:
    def test_write_through(self):
        controller, kv, clock = _make()
        controller.complete_set("a")
        saved = json.loads(kv.get(STATE_KEY))
        assert saved["per_day_progress"]["remaining_sets"]["a"] == 1

        reloaded, _, _ = _make(kv=kv, clock=clock)
        assert reloaded.state.per_day_progress.remaining_sets == {"a": 1, "b": 1}

    def test_round_trip_lossless(self):
        controller, kv, clock = _make()
        for day in ("2024-01-01", "2024-01-02", "2024-01-03"):
            clock.value = day
            _finish_day(controller)
        controller.set_review("b", "hard")
        first = kv.get(STATE_KEY)

        store = controller.store
        store.save(store.load())
        assert kv.get(STATE_KEY) == first

    def test_legacy_key_adopted(self):
        legacy = {
            "exercises": [{"id": "x", "name": "X", "sets": 2, "start_reps": 4,
                           "rep_increment": 1, "max_reps": 8}],
            "last_completed_date": "2023-12-31",
            "streak_count": 6,
            "best_streak": 9,
        }
        kv = MemoryKeyValueStore({"progress-state-v1": json.dumps(legacy)})
        store = StateStore(kv, default_factory=_factory, clock=Clock())
        state = store.load()
        assert state.exercise_ids() == ["x"]
        assert state.last_streak_date == "2023-12-31"
        assert state.streak_count == 6
        assert state.best_streak == 9
        assert state.settings.rest_every_n_days == 4  # from defaults

    def test_primary_key_wins_over_legacy(self):
        kv = MemoryKeyValueStore({
            STATE_KEY: json.dumps({"streak_count": 1}),
            "progress-state-v2": json.dumps({"streak_count": 7}),
        })
        state = StateStore(kv, default_factory=_factory, clock=Clock()).load()
        assert state.streak_count == 1

    def test_malformed_snapshot_falls_back(self, caplog):
        kv = MemoryKeyValueStore({STATE_KEY: "{not json"})
        store = StateStore(kv, default_factory=_factory, clock=Clock())
        with caplog.at_level(logging.WARNING):
            state = store.load()
        assert state.exercise_ids() == ["a", "b"]
        assert state.streak_count == 0
        assert "unreadable snapshot" in caplog.text

    def test_non_object_snapshot_falls_back(self):
        kv = MemoryKeyValueStore({STATE_KEY: "[1, 2, 3]"})
        state = StateStore(kv, default_factory=_factory, clock=Clock()).load()
        assert state.exercise_ids() == ["a", "b"]

    def test_bad_fields_coerced(self):
        data = {
            "settings": {"start_date": "soon", "rest_every_n_days": "x", "theme": "neon"},
            "exercises": [{"id": "a", "sets": "3"}, {"name": "no id"}, {"id": "a"}],
            "streak_count": 5,
            "best_streak": 2,
            "per_day_progress": {"date": "2024-01-01", "remaining_sets": {"a": -4}},
            "auto_tune": {"pending": "yes", "reviews": {"a": "meh", "b": "easy"}},
        }
        state = dict_to_progress_state(data, _factory("2024-01-01"))
        assert state.settings.start_date == "2024-01-01"
        assert state.settings.rest_every_n_days == 0
        assert state.settings.theme == "dark"
        assert state.exercise_ids() == ["a"]
        assert state.exercises[0].sets == 3
        assert state.best_streak == 5
        assert state.per_day_progress.remaining_sets == {"a": 0}
        assert not state.auto_tune.pending
        assert state.auto_tune.reviews == {"b": "easy"}

    def test_cycle_counter_clamped_on_load(self):
        data = {"training_days_completed_in_cycle": 99, "cycle_index": 2}
        state = dict_to_progress_state(data, _factory("2024-01-01"))
        # default program cycle length is 3
        assert state.training_days_completed_in_cycle == 2
        assert state.cycle_index == 2

    def test_dict_to_state_rejects_non_mapping(self):
        with pytest.raises(ValidationError):
            dict_to_progress_state("nope", _factory("2024-01-01"))

    def test_file_store(self, tmp_path):
        kv = FileKeyValueStore(tmp_path / "data")
        assert kv.get(STATE_KEY) is None
        kv.set(STATE_KEY, "{}")
        assert (tmp_path / "data" / f"{STATE_KEY}.json").read_text() == "{}"
        assert kv.get(STATE_KEY) == "{}"
        with pytest.raises(ValueError):
            kv.get("../escape")

    def test_to_dict_covers_every_field(self):
        state = _factory("2024-01-01")
        keys = set(progress_state_to_dict(state))
        assert keys == {
            "settings", "exercises", "training_days_completed_in_cycle", "cycle_index",
            "last_completed_date", "last_streak_date", "streak_count", "best_streak",
            "per_day_progress", "auto_tune",
        }


# ===========================================================================
# Defaults and user config
# ===========================================================================


class TestDefaults:
    def test_builtin_program(self):
        state = default_progress_state("2024-01-01")
        assert state.settings.start_date == "2024-01-01"
        assert state.settings.rest_every_n_days == 4
        assert "pushups" in state.exercise_ids()

    def test_user_config_overrides_program(self, tmp_path):
        (tmp_path / "config.yaml").write_text(
            "rest_every_n_days: 3\n"
            "theme: light\n"
            "program:\n"
            "  - id: dips\n"
            "    name: Dips\n"
            "    sets: 4\n"
            "    start_reps: 6\n"
            "    rep_increment: 1\n"
            "    max_reps: 15\n"
        )
        cfg = load_user_config(tmp_path)
        state = default_progress_state("2024-01-01", cfg)
        assert state.settings.rest_every_n_days == 3
        assert state.settings.theme == "light"
        assert state.exercise_ids() == ["dips"]
        assert state.exercises[0].sets == 4

    def test_broken_user_config_ignored(self, tmp_path):
        (tmp_path / "config.yaml").write_text("program: [unclosed\n")
        with pytest.warns(UserWarning):
            cfg = load_user_config(tmp_path)
        assert cfg["rest_every_n_days"] == 4

    def test_program_entries_without_id_skipped(self):
        with pytest.warns(UserWarning):
            program = program_from_config({"program": [{"name": "no id"}, {"id": "ok"}]})
        assert [ex.id for ex in program] == ["ok"]


# ===========================================================================
# Projections
# ===========================================================================


class TestProjection:
    def test_view_does_not_mutate_state(self):
        state = _factory("2024-01-01")
        before = progress_state_to_dict(state)
        view = build_today_view(state, "2024-01-01")
        assert progress_state_to_dict(state) == before
        assert [r.remaining_sets for r in view.rows] == [2, 1]

    def test_streak_text_and_dict(self):
        controller, _, _ = _make()
        _finish_day(controller)
        view = controller.view()
        assert view.status == "TRAINING_COMPLETED"
        assert view.streak_text == "1 day streak (best 1)"
        data = view.to_dict()
        assert data["rows"][0]["complete"] is True
        assert data["status"] == "TRAINING_COMPLETED"

    def test_auto_tune_view_empty_without_review(self):
        assert auto_tune_view(_factory("2024-01-01")) == []
