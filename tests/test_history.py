"""Tests for the entry lifecycle state machine."""

import pytest

from ideadice.history import (
    Editing,
    Entry,
    EntryLifecycleManager,
    Unattached,
    ViewingLocked,
    count_words,
    make_title,
)
from conftest import BrokenEntryStore, MemoryEntryStore


# ---- Derived fields ----

class TestDerivedFields:
    def test_title_is_first_line(self):
        assert make_title("First line\nsecond line") == "First line"

    def test_title_truncated_to_thirty(self):
        assert make_title("x" * 50) == "x" * 30

    def test_word_count_ignores_extra_whitespace(self):
        assert count_words("  one\ttwo \n three  ") == 3

    def test_empty_content(self):
        assert make_title("") == ""
        assert count_words("") == 0

    def test_derived_fields_follow_content(self):
        entry = Entry(content="Hello world")
        entry.content = "Goodbye cruel world\nmore"
        assert entry.title == "Goodbye cruel world"
        assert entry.word_count == 4

    def test_round_trip_recomputes_derived_fields(self):
        entry = Entry(content="Some words here", is_locked=True)
        data = entry.to_dict()
        assert "title" not in data and "word_count" not in data
        loaded = Entry.from_dict(data)
        assert loaded == entry
        assert loaded.word_count == 3

    def test_from_dict_without_modified_uses_created(self):
        loaded = Entry.from_dict(
            {"id": "a", "created_at": "2025-04-13T09:00:00", "content": "hi"}
        )
        assert loaded.last_modified_at == loaded.created_at
        assert loaded.is_locked is False

    def test_from_dict_rejects_null_content(self):
        with pytest.raises(TypeError):
            Entry.from_dict(
                {"id": "a", "created_at": "2025-04-13T09:00:00", "content": None}
            )


# ---- Autosave ----

class TestAutosave:
    def test_empty_text_is_ignored(self, manager, store):
        assert manager.autosave("") is None
        assert manager.entries == ()
        assert store.saves == 0

    def test_creates_entry_and_activates_it(self, manager, store):
        entry = manager.autosave("Hello world")
        assert manager.entries == (entry,)
        assert entry.content == "Hello world"
        assert entry.title == "Hello world"
        assert entry.word_count == 2
        assert manager.view == Editing(entry.id)
        assert manager.active_entry_id == entry.id
        assert store.saves == 1
        assert store.entries == [entry]

    def test_updates_active_entry_in_place(self, manager):
        first = manager.autosave("Hello world")
        created = first.last_modified_at
        updated = manager.autosave("Hello world again")
        assert updated is first
        assert len(manager.entries) == 1
        assert first.content == "Hello world again"
        assert first.word_count == 3
        assert first.last_modified_at > created

    def test_update_keeps_id_and_position(self, manager):
        older = manager.autosave("An older entry")
        manager.start_new_session()
        newer = manager.autosave("A newer one")
        manager.set_active_entry(older)
        for text in ["An older entry.", "An older entry, edited", "Changed entirely"]:
            manager.autosave(text)
        assert [e.id for e in manager.entries] == [newer.id, older.id]
        assert older.content == "Changed entirely"

    def test_identical_text_twice_makes_one_entry(self, manager):
        manager.autosave("Same text")
        manager.start_new_session()
        manager.autosave("Same text")
        assert len(manager.entries) == 1

    def test_duplicate_moves_to_front_and_activates(self, manager):
        first = manager.autosave("First entry")
        before = first.last_modified_at
        manager.start_new_session()
        manager.autosave("Second entry text")
        manager.start_new_session()
        merged = manager.autosave("First entry")
        assert merged is first
        assert manager.entries[0] is first
        assert manager.view == Editing(first.id)
        assert first.last_modified_at > before

    def test_title_and_word_count_coincidence_merges(self, manager):
        first = manager.autosave("Dear diary\ntoday was fine")
        manager.start_new_session()
        merged = manager.autosave("Dear diary\ntoday was bad")
        assert merged is first
        assert len(manager.entries) == 1
        # The matched entry keeps its own text until the next autosave.
        assert first.content == "Dear diary\ntoday was fine"

    def test_locked_entries_are_not_merge_targets(self, manager):
        first = manager.autosave("Locked text")
        manager.lock_entry(first.id)
        fresh = manager.autosave("Locked text")
        assert fresh is not first
        assert len(manager.entries) == 2
        assert first.is_locked and not fresh.is_locked

    def test_viewing_locked_entry_ignores_autosave(self, manager, store):
        entry = manager.autosave("Frozen")
        manager.toggle_lock()
        saves = store.saves
        assert manager.autosave("Frozen, but edited") is None
        assert entry.content == "Frozen"
        assert store.saves == saves

    def test_locked_entry_never_changes(self, manager):
        entry = manager.autosave("Original words")
        manager.lock_entry(entry.id)
        manager.view = Editing(entry.id)
        assert manager.autosave("Tampered words") is None
        assert entry.content == "Original words"

    def test_vanished_active_entry_starts_fresh(self, manager):
        entry = manager.autosave("Going away")
        manager._entries.clear()
        fresh = manager.autosave("Going away")
        assert fresh.id != entry.id
        assert manager.view == Editing(fresh.id)

    def test_new_entries_go_first(self, manager):
        a = manager.autosave("alpha")
        manager.start_new_session()
        b = manager.autosave("beta gamma")
        assert manager.entries == (b, a)


# ---- Selection ----

class TestSelection:
    def test_set_active_entry_does_not_duplicate(self, manager):
        entry = manager.autosave("Pick me")
        manager.start_new_session()
        manager.set_active_entry(entry)
        manager.autosave("Pick me please")
        assert len(manager.entries) == 1
        assert entry.content == "Pick me please"

    def test_set_active_entry_routes_locked_to_viewing(self, manager):
        entry = manager.autosave("Locked")
        manager.lock_entry(entry.id)
        manager.set_active_entry(entry)
        assert manager.view == ViewingLocked(entry.id)

    def test_unknown_entry_is_ignored(self, manager):
        manager.set_active_entry(Entry(content="stranger"))
        manager.view_locked_entry(Entry(content="stranger"))
        assert manager.view == Unattached()

    def test_view_locked_clears_editing(self, manager):
        entry = manager.autosave("Something")
        manager.lock_entry(entry.id)
        other = manager.autosave("Other")
        manager.view_locked_entry(entry)
        assert manager.active_entry_id is None
        assert manager.viewed_locked_entry_id == entry.id
        assert other.content == "Other"


# ---- Locking ----

class TestToggleLock:
    def test_nothing_on_screen(self, manager, store):
        assert manager.toggle_lock() is False
        assert store.saves == 0

    def test_lock_moves_to_viewing(self, manager):
        entry = manager.autosave("Lock me")
        assert manager.toggle_lock() is True
        assert entry.is_locked
        assert manager.view == ViewingLocked(entry.id)
        assert manager.active_entry_id is None
        assert manager.is_current_content_locked()

    def test_toggle_twice_is_identity(self, manager):
        entry = manager.autosave("Round trip")
        manager.toggle_lock()
        assert manager.toggle_lock() is False
        assert manager.view == Editing(entry.id)
        assert not entry.is_locked
        assert entry.content == "Round trip"
        assert not manager.is_current_content_locked()

    def test_unlock_from_history_view(self, manager):
        entry = manager.autosave("Historic")
        manager.lock_entry(entry.id)
        manager.view_locked_entry(entry)
        assert manager.toggle_lock() is False
        assert manager.view == Editing(entry.id)
        manager.autosave("Historic, continued")
        assert entry.content == "Historic, continued"

    def test_toggle_persists(self, manager, store):
        manager.autosave("Persist")
        saves = store.saves
        manager.toggle_lock()
        assert store.saves == saves + 1
        assert store.entries[0].is_locked


class TestLockEntry:
    def test_lock_active_entry_detaches(self, manager):
        entry = manager.autosave("Context menu")
        manager.lock_entry(entry.id)
        assert entry.is_locked
        assert manager.view == Unattached()
        assert manager.viewed_locked_entry_id is None

    def test_lock_other_entry_keeps_view(self, manager):
        other = manager.autosave("Other")
        manager.start_new_session()
        current = manager.autosave("Current text")
        manager.lock_entry(other.id)
        assert manager.view == Editing(current.id)

    def test_autosave_after_lock_leaves_content_alone(self, manager):
        entry = manager.autosave("Keep this")
        manager.lock_entry(entry.id)
        manager.autosave("Keep this and more")
        assert entry.content == "Keep this"

    def test_unknown_id(self, manager, store):
        manager.lock_entry("missing")
        assert store.saves == 0


class TestDeleteEntry:
    def test_delete_active_clears_view(self, manager):
        entry = manager.autosave("Doomed")
        manager.delete_entry(entry.id)
        assert manager.entries == ()
        assert manager.active_entry_id is None
        fresh = manager.autosave("Doomed")
        assert fresh.id != entry.id
        assert len(manager.entries) == 1

    def test_delete_viewed_locked_clears_view(self, manager):
        entry = manager.autosave("Locked and doomed")
        manager.toggle_lock()
        manager.delete_entry(entry.id)
        assert manager.view == Unattached()
        assert not manager.is_current_content_locked()

    def test_delete_other_keeps_view(self, manager):
        other = manager.autosave("Other")
        manager.start_new_session()
        current = manager.autosave("Current text")
        manager.delete_entry(other.id)
        assert manager.view == Editing(current.id)
        assert manager.entries == (current,)

    def test_unknown_id(self, manager, store):
        manager.delete_entry("missing")
        assert store.saves == 0


# ---- Persistence ----

class TestPersistence:
    def test_loads_existing_entries(self, wall_clock):
        saved = [Entry(content="one"), Entry(content="two")]
        manager = EntryLifecycleManager(MemoryEntryStore(saved), now=wall_clock)
        assert [e.content for e in manager.entries] == ["one", "two"]
        assert manager.view == Unattached()

    def test_load_failure_starts_empty(self, wall_clock):
        manager = EntryLifecycleManager(BrokenEntryStore(), now=wall_clock)
        assert manager.entries == ()

    def test_save_failure_is_swallowed(self, wall_clock):
        store = BrokenEntryStore()
        manager = EntryLifecycleManager(store, now=wall_clock)
        entry = manager.autosave("Still here")
        manager.toggle_lock()
        manager.delete_entry(entry.id)
        assert store.save_attempts == 3
        assert manager.entries == ()

    def test_restart_with_same_text_merges(self, wall_clock):
        store = MemoryEntryStore()
        first = EntryLifecycleManager(store, now=wall_clock)
        original = first.autosave("Written before the restart")
        second = EntryLifecycleManager(store, now=wall_clock)
        merged = second.autosave("Written before the restart")
        assert merged.id == original.id
        assert len(second.entries) == 1


@pytest.mark.parametrize(
    "text, title, words",
    [
        ("Hello world", "Hello world", 2),
        ("A much longer first line that goes on and on\nand on", "A much longer first line that ", 12),
        ("\nStarts with a newline", "", 4),
    ],
)
def test_new_entry_fields(manager, text, title, words):
    entry = manager.autosave(text)
    assert entry.content == text
    assert entry.title == title
    assert entry.word_count == words
