# ---------------------------------------------------------------------------
# Stopwatch for the time spent writing
# ---------------------------------------------------------------------------
#
# The timer runs while the user writes, is paused while the entry is locked
# and resumes where it left off when it is unlocked.  Time is read from an
# injectable clock so the behaviour can be tested without waiting.

from __future__ import annotations

import enum
import time
from typing import Callable, Optional

Clock = Callable[[], float]


class TimerState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


def format_elapsed(seconds: float) -> str:
    """Render ``seconds`` as ``MM:SS``; minutes keep counting past 59."""
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


class WritingTimer:
    """Pausable stopwatch.

    While running, ``elapsed() == accumulated + (now - started_at)``.  While
    paused ``started_at`` is ``None`` and the elapsed time is frozen at
    ``accumulated``.
    """

    def __init__(self, clock: Clock = time.monotonic) -> None:
        self._clock = clock
        self.started_at: Optional[float] = None
        self.accumulated = 0.0

    @property
    def is_running(self) -> bool:
        return self.started_at is not None

    @property
    def state(self) -> TimerState:
        if self.is_running:
            return TimerState.RUNNING
        if self.accumulated > 0:
            return TimerState.PAUSED
        return TimerState.IDLE

    def start(self) -> None:
        if self.is_running:
            return
        self.started_at = self._clock()
        self.accumulated = 0.0

    def pause(self) -> None:
        if not self.is_running:
            return
        self.accumulated += self._clock() - self.started_at
        self.started_at = None

    def resume(self) -> None:
        if self.is_running:
            return
        if self.accumulated == 0:
            self.start()
            return
        self.started_at = self._clock()

    def reset(self) -> None:
        self.started_at = None
        self.accumulated = 0.0

    def elapsed(self) -> float:
        if self.started_at is None:
            return self.accumulated
        return self.accumulated + (self._clock() - self.started_at)
