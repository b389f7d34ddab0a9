"""
conftest.py
-----------
Shared pytest fixtures for IdeaDice tests.

Provides:
- A controllable clock for the writing timer and entry timestamps
- A fake scheduler standing in for Textual's ``set_timer``
- In-memory and failing entry stores
"""
from datetime import datetime, timedelta

import pytest

from ideadice.exceptions import StorageError
from ideadice.history import EntryLifecycleManager
from ideadice.settings import AppSettings
from ideadice.session import SessionController
from ideadice.writing_timer import WritingTimer


class FakeClock:
    """Monotonic seconds that only move when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeWallClock:
    """``datetime.now`` replacement stepping one second per call."""

    def __init__(self) -> None:
        self.current = datetime(2025, 4, 13, 9, 0, 0)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


class FakeHandle:
    def __init__(self, scheduler, due, callback):
        self.scheduler = scheduler
        self.due = due
        self.callback = callback
        self.stopped = False

    def stop(self) -> None:
        self.stopped = True


class FakeScheduler:
    """Collects scheduled callbacks and runs them when time is advanced."""

    def __init__(self) -> None:
        self.now = 0.0
        self.handles = []

    def __call__(self, delay, callback):
        handle = FakeHandle(self, self.now + delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self):
        return [h for h in self.handles if not h.stopped]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [h for h in self.pending if h.due <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.due)
            self.now = handle.due
            handle.stopped = True
            handle.callback()
        self.now = target


class MemoryEntryStore:
    def __init__(self, entries=None) -> None:
        self.entries = list(entries or [])
        self.saves = 0

    def load(self):
        return list(self.entries)

    def save(self, entries) -> None:
        self.saves += 1
        self.entries = list(entries)


class BrokenEntryStore:
    """Store whose every operation fails."""

    def __init__(self) -> None:
        self.save_attempts = 0

    def load(self):
        raise StorageError("disk on fire")

    def save(self, entries) -> None:
        self.save_attempts += 1
        raise StorageError("disk on fire")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def wall_clock():
    return FakeWallClock()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def store():
    return MemoryEntryStore()


@pytest.fixture
def manager(store, wall_clock):
    return EntryLifecycleManager(store, now=wall_clock)


@pytest.fixture
def timer(clock):
    return WritingTimer(clock)


@pytest.fixture
def settings():
    return AppSettings()


@pytest.fixture
def controller(manager, timer, scheduler, settings):
    return SessionController(manager, timer, scheduler, settings)
