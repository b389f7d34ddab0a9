# ---------------------------------------------------------------------------
# Settings and file locations
# ---------------------------------------------------------------------------

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path

from ideadice.exceptions import StorageError
from ideadice.storage import JsonStateStore

logger = logging.getLogger(__name__)

# Everything the app writes goes below this directory. Set
# ``IDEADICE_DATA_DIR`` to keep the history somewhere else.
DATA_DIR = Path(os.environ.get("IDEADICE_DATA_DIR", "data"))

# Single JSON file holding the history, settings and first-launch marker.
STATE_FILE = DATA_DIR / "ideadice_state.json"

LOG_DIR = DATA_DIR / "logs"

SETTINGS_KEY = "settings"
LAUNCHED_KEY = "has_launched_before"


@dataclass
class AppSettings:
    """User preferences."""

    sound_enabled: bool = False
    no_backspace_mode: bool = False
    autosave_delay: float = 2.0  # seconds of quiet before autosave fires
    feedback_duration: float = 0.3  # how long the delete-attempt cue stays up

    @classmethod
    def load(cls, store: JsonStateStore) -> "AppSettings":
        """Read settings from ``store``, falling back to defaults."""
        try:
            data = store.get(SETTINGS_KEY, {})
        except StorageError as exc:
            logger.warning("Could not load settings: %s", exc)
            return cls()
        if not isinstance(data, dict):
            return cls()
        known = {f.name: f for f in fields(cls)}
        values = {}
        defaults = cls()
        for name, value in data.items():
            if name not in known:
                continue
            expected = type(getattr(defaults, name))
            if expected is float and isinstance(value, int) and not isinstance(value, bool):
                value = float(value)
            if isinstance(value, expected):
                values[name] = value
        return cls(**values)

    def save(self, store: JsonStateStore) -> None:
        try:
            store.set(SETTINGS_KEY, asdict(self))
        except StorageError as exc:
            logger.warning("Could not save settings: %s", exc)


def is_first_launch(store: JsonStateStore) -> bool:
    try:
        return not store.get(LAUNCHED_KEY, False)
    except StorageError:
        return True


def mark_launched(store: JsonStateStore) -> None:
    try:
        store.set(LAUNCHED_KEY, True)
    except StorageError as exc:
        logger.warning("Could not record first launch: %s", exc)
