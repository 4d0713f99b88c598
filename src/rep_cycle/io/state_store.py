"""
Key-value snapshot storage for the progress state.

The state is kept as one JSON blob under a single string key.  The backing
store only needs ``get``/``set``; the default one writes one file per key
inside the data directory.
"""

import logging
import re
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Callable, Protocol

from ..core.calendar import today as local_today
from ..core.config import LEGACY_STATE_KEYS, STATE_KEY
from ..core.engine.config_loader import default_progress_state, get_data_dir, load_user_config
from ..core.models import ProgressState
from .serializers import ValidationError, state_from_json, state_to_json

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"^[A-Za-z0-9._-]+$")


class KeyValueStore(Protocol):
    """Minimal string key-value persistence."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryKeyValueStore:
    """In-process store; contents vanish with the object."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class FileKeyValueStore:
    """
    One ``<key>.json`` file per key under a directory.

    Writes go to a temporary file that replaces the target, so a crash
    mid-write leaves the previous snapshot intact.
    """

    def __init__(self, root: str | Path):
        """
        Initialize the store.

        Args:
            root: Directory holding the key files (created on first write)
        """
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.root / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8", errors="replace")

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile("w", dir=path.parent, delete=False, encoding="utf-8") as tmp:
            tmp.write(value)
            temp_path = Path(tmp.name)
        temp_path.replace(path)


class StateStore:
    """
    Loads and saves ProgressState snapshots.

    ``load`` never fails: a missing snapshot yields the default program and
    a corrupt one is logged and replaced by defaults.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        key: str = STATE_KEY,
        legacy_keys: tuple[str, ...] = LEGACY_STATE_KEYS,
        default_factory: Callable[[str], ProgressState] | None = None,
        clock: Callable[[], str] = local_today,
    ):
        """
        Initialize the state store.

        Args:
            kv: Backing key-value store
            key: Primary snapshot key
            legacy_keys: Older keys probed in order when *key* is empty
            default_factory: Builds a fresh state for a given date
            clock: Returns today's local date
        """
        self.kv = kv
        self.key = key
        self.legacy_keys = legacy_keys
        self.default_factory = default_factory or default_progress_state
        self.clock = clock

    def defaults(self) -> ProgressState:
        """Fresh default state anchored at today."""
        return self.default_factory(self.clock())

    def _read_raw(self) -> str | None:
        raw = self.kv.get(self.key)
        if raw and raw.strip():
            return raw
        for legacy in self.legacy_keys:
            raw = self.kv.get(legacy)
            if raw and raw.strip():
                logger.info("Adopting snapshot from legacy key %r", legacy)
                return raw
        return None

    def load(self) -> ProgressState:
        """
        Load the stored state merged over defaults.

        Returns:
            ProgressState (defaults when nothing usable is stored)
        """
        defaults = self.defaults()
        raw = self._read_raw()
        if raw is None:
            return defaults
        try:
            return state_from_json(raw, defaults)
        except ValidationError as e:
            logger.warning("Discarding unreadable snapshot: %s", e)
            return defaults

    def save(self, state: ProgressState) -> None:
        """Write the state under the primary key."""
        self.kv.set(self.key, state_to_json(state))


def get_default_store(data_dir: Path | None = None) -> StateStore:
    """
    StateStore backed by files in *data_dir* (default ``~/.rep-cycle``).

    Fresh states use the program from ``<data dir>/config.yaml`` when present.
    """
    root = data_dir or get_data_dir()

    def factory(today: str) -> ProgressState:
        return default_progress_state(today, load_user_config(root))

    return StateStore(FileKeyValueStore(root), default_factory=factory)
