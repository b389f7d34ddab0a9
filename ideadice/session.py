# ---------------------------------------------------------------------------
# Session controller
# ---------------------------------------------------------------------------
#
# Glue between the user interface and the core objects.  Keystrokes arm a
# debounced autosave, the lock button toggles both the entry and the writing
# timer, and choosing an entry from the history swaps what is being edited.
# Scheduling is injected (``schedule(delay, callback)``) so the controller
# runs the same under Textual and in tests.

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ideadice.history import Entry, EntryLifecycleManager
from ideadice.input_policy import AttemptFeedback, InputInterceptor, Schedule, Verdict
from ideadice.settings import AppSettings
from ideadice.writing_timer import WritingTimer, format_elapsed

logger = logging.getLogger(__name__)


class Debouncer:
    """Call ``callback`` once things have been quiet for ``delay`` seconds.

    Each ``trigger`` stops the previously scheduled call; the last arguments
    win.
    """

    def __init__(self, schedule: Schedule, delay: float, callback: Callable[..., Any]) -> None:
        self._schedule = schedule
        self.delay = delay
        self._callback = callback
        self._handle: Optional[Any] = None
        self._args: tuple = ()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self, *args: Any) -> None:
        self.cancel()
        self._args = args
        self._handle = self._schedule(self.delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.stop()
        self._handle = None
        self._args = ()

    def flush(self) -> None:
        """Run the pending call now, if there is one."""
        if self._handle is None:
            return
        self._handle.stop()
        self._fire()

    def _fire(self) -> None:
        args = self._args
        self._handle = None
        self._args = ()
        self._callback(*args)


class SessionController:
    def __init__(
        self,
        manager: EntryLifecycleManager,
        timer: WritingTimer,
        schedule: Schedule,
        settings: AppSettings,
        feedback: Optional[AttemptFeedback] = None,
    ) -> None:
        self.manager = manager
        self.timer = timer
        self.settings = settings
        self.feedback = feedback
        self.autosave = Debouncer(schedule, settings.autosave_delay, manager.autosave)

    # ------------------------------------------------------------------
    # Typing
    # ------------------------------------------------------------------

    def text_changed(self, text: str) -> None:
        """Called by the editor after every change."""
        if self.manager.is_current_content_locked():
            return
        self.autosave.delay = self.settings.autosave_delay
        self.autosave.trigger(text)
        if text:
            self.timer.start()

    def flush(self) -> None:
        self.autosave.flush()

    def key_pressed(self, key: str, editor_focused: bool) -> bool:
        """Return ``True`` when ``key`` must not reach the editor."""
        verdict = InputInterceptor.decide(
            key,
            locked=self.manager.is_current_content_locked(),
            no_backspace_mode=self.settings.no_backspace_mode,
            editor_focused=editor_focused,
        )
        if verdict is Verdict.BLOCKED_NO_BACKSPACE and self.feedback is not None:
            self.feedback.pulse()
        return verdict is not Verdict.PASS

    def locked_content(self) -> Optional[str]:
        """Text the editor should show while the current entry is locked."""
        entry = self.manager.current_entry()
        if entry is not None and entry.is_locked:
            return entry.content
        return None

    # ------------------------------------------------------------------
    # Lock
    # ------------------------------------------------------------------

    def toggle_lock(self) -> bool:
        # Make sure the latest text is in the entry before freezing it.
        self.flush()
        locked = self.manager.toggle_lock()
        if locked:
            self.timer.pause()
        elif self.manager.active_entry_id is not None:
            self.timer.resume()
        return locked

    def lock_entry(self, entry_id: str) -> None:
        if entry_id == self.manager.active_entry_id:
            self.flush()
        self.manager.lock_entry(entry_id)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def select_entry(self, entry_id: str) -> Optional[Entry]:
        """Open ``entry_id`` from the history list."""
        entry = self.manager.get(entry_id)
        if entry is None:
            return None
        # Pending text belongs to the entry being left behind.
        self.flush()
        self.timer.reset()
        if entry.is_locked:
            self.manager.view_locked_entry(entry)
        else:
            self.manager.set_active_entry(entry)
            self.timer.start()
        logger.debug("Selected entry %s (locked=%s)", entry.id, entry.is_locked)
        return entry

    def new_session(self) -> None:
        self.flush()
        self.manager.start_new_session()
        self.timer.reset()

    def delete_entry(self, entry_id: str) -> bool:
        """Delete ``entry_id``; returns ``True`` if it was the one on screen."""
        current = self.manager.current_entry()
        on_screen = current is not None and current.id == entry_id
        if on_screen:
            self.autosave.cancel()
        self.manager.delete_entry(entry_id)
        if on_screen:
            self.timer.reset()
        return on_screen

    # ------------------------------------------------------------------
    # Misc
    # ------------------------------------------------------------------

    def elapsed_display(self) -> str:
        return format_elapsed(self.timer.elapsed())

    def shutdown(self, text: str = "") -> None:
        """Save whatever is left before the app exits.

        ``text`` is what the editor shows.  A merge with an earlier entry
        keeps that entry's old text until the next autosave, so the visible
        text is written once more here.
        """
        self.flush()
        if text and not self.manager.is_current_content_locked():
            self.manager.autosave(text)
        if self.feedback is not None:
            self.feedback.cancel()
