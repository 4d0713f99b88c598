"""
Configuration constants for rep-cycle.

All defaults are centralized here.  User overrides for the default program
and settings are read from ``config.yaml`` by ``core.engine.config_loader``.
"""

from typing import Final

# =============================================================================
# STORAGE
# =============================================================================

DATA_DIR_ENV: Final[str] = "REP_CYCLE_HOME"  # Overrides the data directory
DEFAULT_DATA_DIR_NAME: Final[str] = ".rep-cycle"  # Under the user's home
USER_CONFIG_FILENAME: Final[str] = "config.yaml"

STATE_KEY: Final[str] = "progress-state-v3"

# Older snapshot keys, probed in order when STATE_KEY holds no data
LEGACY_STATE_KEYS: Final[tuple[str, ...]] = (
    "progress-state-v2",
    "progress-state-v1",
    "progress-state",
)

# =============================================================================
# SETTINGS DEFAULTS
# =============================================================================

DEFAULT_REST_EVERY_N_DAYS: Final[int] = 4  # Every 4th day is a rest day
DEFAULT_THEME: Final[str] = "dark"
DEFAULT_COLLAPSED: Final[bool] = False

# =============================================================================
# INPUT COERCION
# =============================================================================

MIN_SETS: Final[int] = 1
MIN_REPS: Final[int] = 1
MIN_REP_INCREMENT: Final[int] = 0
MIN_REST_EVERY_N_DAYS: Final[int] = 0

# =============================================================================
# AUTO-TUNE
# =============================================================================

DEFAULT_REVIEW: Final[str] = "right"
MAX_STEP_MULTIPLIER: Final[int] = 2  # max_reps moves by 2 steps per review

# =============================================================================
# DEFAULT PROGRAM
# =============================================================================

# (id, name, sets, start_reps, rep_increment, max_reps)
DEFAULT_PROGRAM: Final[tuple[tuple[str, str, int, int, int, int], ...]] = (
    ("pushups", "Push-ups", 3, 10, 1, 40),
    ("squats", "Squats", 3, 15, 1, 50),
    ("situps", "Sit-ups", 3, 10, 1, 35),
    ("plank", "Plank (breaths)", 2, 10, 2, 30),
)
