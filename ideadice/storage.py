# ---------------------------------------------------------------------------
# Persistence for IdeaDice
# ---------------------------------------------------------------------------
#
# All state lives in one JSON file made of named keys, much like a tiny
# preferences database.  ``JsonStateStore`` reads and writes individual keys
# while keeping the others intact.  ``JsonEntryStore`` builds on it to keep the
# writing history under a single key.
#
# Every failure is reported as ``StorageError`` so callers only need to catch
# one exception type.

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, Protocol

from ideadice.exceptions import StorageError

if TYPE_CHECKING:
    from ideadice.history import Entry


logger = logging.getLogger(__name__)

# Key under which the list of entries is stored.
ENTRIES_KEY = "history_entries"


class JsonStateStore:
    """Key-value store backed by a single JSON object on disk."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise StorageError(f"Cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError(f"{self.path} does not contain a JSON object")
        return data

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key`` or ``default``."""
        return self._read_all().get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key`` leaving the other keys untouched."""
        try:
            data = self._read_all()
        except StorageError:
            # A corrupt file is replaced rather than blocking every save.
            logger.warning("Discarding unreadable state file %s", self.path)
            data = {}
        data[key] = value
        try:
            text = json.dumps(data, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise StorageError(f"Cannot serialize {key!r}: {exc}") from exc
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as f:
                f.write(text)
        except OSError as exc:
            raise StorageError(f"Cannot write {self.path}: {exc}") from exc


class EntryStore(Protocol):
    """Load/save primitive for the entry list."""

    def load(self) -> list[Entry]: ...

    def save(self, entries: Iterable[Entry]) -> None: ...


class JsonEntryStore:
    """Keep the entry list under ``ENTRIES_KEY`` of a ``JsonStateStore``."""

    def __init__(self, state: JsonStateStore, key: str = ENTRIES_KEY) -> None:
        self.state = state
        self.key = key

    def load(self) -> list[Entry]:
        from ideadice.history import Entry

        records = self.state.get(self.key, [])
        if not isinstance(records, list):
            raise StorageError(f"{self.key!r} is not a list")
        entries = []
        for record in records:
            try:
                entries.append(Entry.from_dict(record))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed entry record: %s", exc)
        return entries

    def save(self, entries: Iterable[Entry]) -> None:
        self.state.set(self.key, [entry.to_dict() for entry in entries])
