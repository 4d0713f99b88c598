"""
YAML → defaults loader.

Built-in defaults live in config.py.  A user file at
``<data dir>/config.yaml`` may override them, e.g.::

    rest_every_n_days: 3
    theme: light
    program:
      - id: pushups
        name: Push-ups
        sets: 4
        start_reps: 8
        rep_increment: 1
        max_reps: 30

The file is only consulted when a fresh state is created (first run or a
corrupt snapshot).  If it cannot be parsed, a warning is printed and the
built-in defaults are used.

Usage:
    from rep_cycle.core.engine.config_loader import load_user_config
    cfg = load_user_config()
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from ..config import (
    DATA_DIR_ENV,
    DEFAULT_COLLAPSED,
    DEFAULT_DATA_DIR_NAME,
    DEFAULT_PROGRAM,
    DEFAULT_REST_EVERY_N_DAYS,
    DEFAULT_THEME,
    USER_CONFIG_FILENAME,
)
from ..models import THEMES, Exercise, ProgressState, Settings, build_exercise, coerce_int

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; warn and return {} when it is unusable."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"rep-cycle: ignoring {path} ({exc})", stacklevel=2)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        warnings.warn(f"rep-cycle: ignoring {path} (top level must be a mapping)", stacklevel=2)
        return {}
    return data


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _builtin_config() -> dict[str, Any]:
    return {
        "rest_every_n_days": DEFAULT_REST_EVERY_N_DAYS,
        "theme": DEFAULT_THEME,
        "collapsed": DEFAULT_COLLAPSED,
        "program": [
            {
                "id": ex_id,
                "name": name,
                "sets": sets,
                "start_reps": start,
                "rep_increment": inc,
                "max_reps": maximum,
            }
            for ex_id, name, sets, start, inc, maximum in DEFAULT_PROGRAM
        ],
    }


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_data_dir() -> Path:
    """Return ``$REP_CYCLE_HOME`` or ``~/.rep-cycle``."""
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / DEFAULT_DATA_DIR_NAME


def get_user_config_path(data_dir: Path | None = None) -> Path | None:
    """Return ``<data dir>/config.yaml`` if it exists, else None."""
    p = (data_dir or get_data_dir()) / USER_CONFIG_FILENAME
    return p if p.exists() else None


def load_user_config(data_dir: Path | None = None) -> dict[str, Any]:
    """
    Built-in defaults merged with the optional user config file.

    Returns:
        Dict with keys rest_every_n_days, theme, collapsed, program
    """
    config = _builtin_config()
    user = get_user_config_path(data_dir)
    if user is not None:
        user_cfg = _load_yaml_file(user)
        if user_cfg:
            config = _deep_merge(config, user_cfg)
    return config


def program_from_config(config: dict[str, Any]) -> list[Exercise]:
    """
    Build the exercise list from a config mapping.

    Entries that are not mappings or lack an id are skipped with a warning;
    numeric fields are coerced.  Duplicate ids keep the first entry.
    """
    raw_program = config.get("program")
    if not isinstance(raw_program, list):
        return []
    exercises: list[Exercise] = []
    seen: set[str] = set()
    for entry in raw_program:
        if not isinstance(entry, dict) or not entry.get("id"):
            warnings.warn(f"rep-cycle: skipping program entry {entry!r}", stacklevel=2)
            continue
        ex_id = str(entry["id"])
        if ex_id in seen:
            continue
        seen.add(ex_id)
        exercises.append(
            build_exercise(
                ex_id,
                entry.get("name"),
                entry.get("sets"),
                entry.get("start_reps"),
                entry.get("rep_increment"),
                entry.get("max_reps"),
            )
        )
    return exercises


def default_progress_state(today: str, config: dict[str, Any] | None = None) -> ProgressState:
    """
    Fresh state for a first run: program and settings from *config*
    (built-in defaults when None), start date *today*.
    """
    cfg = config if config is not None else _builtin_config()
    theme = cfg.get("theme", DEFAULT_THEME)
    settings = Settings(
        start_date=today,
        rest_every_n_days=coerce_int(cfg.get("rest_every_n_days"), 0, minimum=0),
        theme=theme if theme in THEMES else DEFAULT_THEME,
        collapsed=bool(cfg.get("collapsed", DEFAULT_COLLAPSED)),
    )
    return ProgressState(settings=settings, exercises=program_from_config(cfg))
