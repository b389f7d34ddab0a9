# ---------------------------------------------------------------------------
# Writing history and the entry lifecycle
# ---------------------------------------------------------------------------
#
# Every writing session ends up as an ``Entry``.  ``EntryLifecycleManager``
# owns the list of entries and decides, each time the autosave fires, whether
# the text updates the entry being edited, merges with an entry already in the
# history, becomes a brand new entry, or is ignored because the entry on screen
# is locked.
#
# What is on screen is described by one of three small classes: ``Unattached``
# (nothing saved yet), ``Editing`` (autosave writes into that entry) and
# ``ViewingLocked`` (a read-only entry).  Exactly one of them is current.

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Optional, Union

from ideadice.exceptions import StorageError

if TYPE_CHECKING:
    from ideadice.storage import EntryStore


logger = logging.getLogger(__name__)

# Titles shown in the history list are cut to this many characters.
TITLE_LENGTH = 30


def make_title(content: str) -> str:
    """Return the first line of ``content`` cut to ``TITLE_LENGTH``."""
    first_line = content.split("\n", 1)[0]
    return first_line[:TITLE_LENGTH]


def count_words(content: str) -> int:
    # Split on whitespace to count words; ignore extra spaces
    return len(content.split())


@dataclass
class Entry:
    """A single saved writing session.

    ``title`` and ``word_count`` are computed from ``content`` every time they
    are read, so they always describe the current text.
    """

    content: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=datetime.now)
    last_modified_at: Optional[datetime] = None
    is_locked: bool = False

    def __post_init__(self) -> None:
        if self.last_modified_at is None:
            self.last_modified_at = self.created_at

    @property
    def title(self) -> str:
        return make_title(self.content)

    @property
    def word_count(self) -> int:
        return count_words(self.content)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat(),
            "last_modified_at": self.last_modified_at.isoformat(),
            "content": self.content,
            "is_locked": self.is_locked,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Entry":
        content = data["content"]
        if not isinstance(content, str):
            raise TypeError(f"content must be a string, not {type(content).__name__}")
        created = datetime.fromisoformat(data["created_at"])
        modified = data.get("last_modified_at")
        return cls(
            content=content,
            id=str(data["id"]),
            created_at=created,
            last_modified_at=datetime.fromisoformat(modified) if modified else created,
            is_locked=bool(data.get("is_locked", False)),
        )


@dataclass(frozen=True)
class Unattached:
    """Fresh session, nothing saved yet."""


@dataclass(frozen=True)
class Editing:
    """Autosave writes into ``entry_id``."""

    entry_id: str


@dataclass(frozen=True)
class ViewingLocked:
    """A locked entry is on screen and cannot change."""

    entry_id: str


SessionView = Union[Unattached, Editing, ViewingLocked]


class EntryLifecycleManager:
    """Owns the entry list and the session view.

    Every public operation mutates the in-memory list first and then tries to
    persist it.  A failed save is logged and ignored; the list in memory stays
    authoritative and the next successful save catches up.
    """

    def __init__(
        self,
        store: EntryStore,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self._now = now
        self.view: SessionView = Unattached()
        try:
            self._entries: list[Entry] = list(store.load())
        except StorageError as exc:
            logger.warning("Could not load history, starting empty: %s", exc)
            self._entries = []
        logger.debug("Loaded %d entries", len(self._entries))

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @property
    def entries(self) -> tuple[Entry, ...]:
        """Entries, most recent first."""
        return tuple(self._entries)

    @property
    def active_entry_id(self) -> Optional[str]:
        return self.view.entry_id if isinstance(self.view, Editing) else None

    @property
    def viewed_locked_entry_id(self) -> Optional[str]:
        return self.view.entry_id if isinstance(self.view, ViewingLocked) else None

    def get(self, entry_id: str) -> Optional[Entry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def current_entry(self) -> Optional[Entry]:
        """Return the entry on screen, if any."""
        if isinstance(self.view, Unattached):
            return None
        return self.get(self.view.entry_id)

    def is_current_content_locked(self) -> bool:
        entry = self.current_entry()
        return entry is not None and entry.is_locked

    # ------------------------------------------------------------------
    # Autosave
    # ------------------------------------------------------------------

    def autosave(self, text: str) -> Optional[Entry]:
        """Fold ``text`` into the history.

        Returns the entry that received the text, or ``None`` when nothing
        changed (empty text or a locked entry on screen).
        """
        if not text:
            return None

        if isinstance(self.view, ViewingLocked):
            return None

        if isinstance(self.view, Editing):
            entry = self.get(self.view.entry_id)
            if entry is None:
                # The entry vanished underneath us; start over.
                logger.debug("Active entry %s is gone", self.view.entry_id)
                self.view = Unattached()
            elif entry.is_locked:
                return None
            else:
                entry.content = text
                entry.last_modified_at = self._now()
                self._persist()
                return entry

        entry = self._find_duplicate(text)
        if entry is not None:
            logger.debug("Merging autosave into existing entry %s", entry.id)
            entry.last_modified_at = self._now()
            self._entries.remove(entry)
        else:
            now = self._now()
            entry = Entry(content=text, created_at=now, last_modified_at=now)
            logger.debug("Created entry %s", entry.id)
        self._entries.insert(0, entry)
        self.view = Editing(entry.id)
        self._persist()
        return entry

    def _find_duplicate(self, text: str) -> Optional[Entry]:
        # Exact text, or the same title and length. The second test can merge
        # two different short entries; it is kept for compatibility with
        # existing histories.
        title = make_title(text)
        words = count_words(text)
        for entry in self._entries:
            if entry.is_locked:
                continue
            if entry.content == text or (
                entry.title == title and entry.word_count == words
            ):
                return entry
        return None

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def set_active_entry(self, entry: Entry) -> None:
        """Make ``entry`` the target of autosave."""
        current = self.get(entry.id)
        if current is None:
            logger.debug("set_active_entry: unknown entry %s", entry.id)
            return
        if current.is_locked:
            self.view_locked_entry(current)
            return
        self.view = Editing(current.id)

    def view_locked_entry(self, entry: Entry) -> None:
        if self.get(entry.id) is None:
            logger.debug("view_locked_entry: unknown entry %s", entry.id)
            return
        self.view = ViewingLocked(entry.id)

    def start_new_session(self) -> None:
        """Detach from any entry so the next autosave starts a new one."""
        self.view = Unattached()

    # ------------------------------------------------------------------
    # Locking and deletion
    # ------------------------------------------------------------------

    def toggle_lock(self) -> bool:
        """Lock or unlock the entry on screen.

        Returns ``True`` when the entry is locked afterwards.
        """
        entry = self.current_entry()
        if entry is None:
            return False

        if isinstance(self.view, ViewingLocked):
            entry.is_locked = False
        else:
            entry.is_locked = not entry.is_locked

        if entry.is_locked:
            self.view = ViewingLocked(entry.id)
        else:
            self.view = Editing(entry.id)
        logger.debug("Entry %s locked=%s", entry.id, entry.is_locked)
        self._persist()
        return entry.is_locked

    def lock_entry(self, entry_id: str) -> None:
        """Lock ``entry_id`` from outside the editor (e.g. the history list)."""
        entry = self.get(entry_id)
        if entry is None:
            logger.debug("lock_entry: unknown entry %s", entry_id)
            return
        entry.is_locked = True
        if self.active_entry_id == entry_id:
            self.view = Unattached()
        self._persist()

    def delete_entry(self, entry_id: str) -> None:
        entry = self.get(entry_id)
        if entry is None:
            logger.debug("delete_entry: unknown entry %s", entry_id)
            return
        self._entries.remove(entry)
        if not isinstance(self.view, Unattached) and self.view.entry_id == entry_id:
            self.view = Unattached()
        logger.debug("Deleted entry %s", entry_id)
        self._persist()

    def _persist(self) -> None:
        try:
            self.store.save(self._entries)
        except StorageError as exc:
            logger.warning("Could not save history: %s", exc)
