# ---------------------------------------------------------------------------
# Keystroke policy for the writing editor
# ---------------------------------------------------------------------------
#
# ``InputInterceptor`` decides whether the delete key reaches the editor.
# It is swallowed when the entry on screen is locked, or when no-backspace
# mode is on and the editor has focus.  Every other key passes.
#
# ``AttemptFeedback`` is the small visual cue shown when no-backspace mode
# eats a delete: a signal that is raised and clears itself shortly after.

from __future__ import annotations

import enum
from typing import Any, Callable, Optional

# Textual's name for the key labelled delete on Mac keyboards and backspace
# elsewhere.
DELETE_KEY = "backspace"

# ``schedule(delay, callback)`` returns a handle with ``stop()``.
# ``textual.app.App.set_timer`` fits this signature.
Schedule = Callable[[float, Callable[[], None]], Any]


class Verdict(enum.Enum):
    PASS = "pass"
    BLOCKED_LOCKED = "blocked_locked"
    BLOCKED_NO_BACKSPACE = "blocked_no_backspace"


class InputInterceptor:
    """Stateless delete-key gate."""

    @staticmethod
    def decide(
        key: str,
        locked: bool,
        no_backspace_mode: bool,
        editor_focused: bool,
    ) -> Verdict:
        if key != DELETE_KEY:
            return Verdict.PASS
        # The lock wins over no-backspace mode.
        if locked:
            return Verdict.BLOCKED_LOCKED
        if no_backspace_mode and editor_focused:
            return Verdict.BLOCKED_NO_BACKSPACE
        return Verdict.PASS

    @classmethod
    def should_suppress(
        cls,
        key: str,
        locked: bool,
        no_backspace_mode: bool,
        editor_focused: bool,
    ) -> bool:
        verdict = cls.decide(key, locked, no_backspace_mode, editor_focused)
        return verdict is not Verdict.PASS


class AttemptFeedback:
    """Short-lived "you tried to delete" signal.

    ``pulse()`` raises the signal and clears it after ``duration`` seconds.
    Pulsing again while the signal is still up drops it at once and raises it
    again after ``repulse_delay`` so repeated attempts read as a double blink.
    ``on_change`` receives the new state on every edge.
    """

    def __init__(
        self,
        schedule: Schedule,
        on_change: Callable[[bool], None],
        duration: float = 0.3,
        repulse_delay: float = 0.1,
    ) -> None:
        self._schedule = schedule
        self._on_change = on_change
        self.duration = duration
        self.repulse_delay = repulse_delay
        self.active = False
        self.attempts = 0
        self._pending: Optional[Any] = None

    def pulse(self) -> None:
        self.attempts += 1
        self._stop_pending()
        if self.active:
            self._set(False)
            self._pending = self._schedule(self.repulse_delay, self._raise)
        else:
            self._raise()

    def cancel(self) -> None:
        self._stop_pending()
        if self.active:
            self._set(False)

    def _raise(self) -> None:
        self._set(True)
        self._pending = self._schedule(self.duration, self._clear)

    def _clear(self) -> None:
        self._pending = None
        self._set(False)

    def _set(self, active: bool) -> None:
        self.active = active
        self._on_change(active)

    def _stop_pending(self) -> None:
        if self._pending is not None:
            self._pending.stop()
            self._pending = None
