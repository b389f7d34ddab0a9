# ---------------------------------------------------------------------------
# IdeaDice: writing prompts with a history of past sessions
# ---------------------------------------------------------------------------
#
# Three word cards (a noun, a verb and an emotion) sit above a free-text
# editor.  Whatever is written is autosaved into a history after two seconds
# of quiet typing.  ``Ctrl+B`` opens the history so an earlier session can be
# continued, locked or deleted.  ``Ctrl+L`` locks the text on screen, which
# freezes it and pauses the writing timer.  ``Ctrl+G`` toggles no-backspace
# mode, where the delete key does nothing and only forward writing is
# possible.
#
# The decisions about entries, keys and time live in ``history``,
# ``input_policy``, ``writing_timer`` and ``session``.  This file only wires
# them to Textual widgets.  Styling lives in ``style.css``.

from __future__ import annotations

import logging
from typing import Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.reactive import reactive
from textual.widgets import OptionList, Static
from textual.widgets.option_list import Option

from ideadice.app_logging import configure_logging
from ideadice.history import Entry, EntryLifecycleManager
from ideadice.input_policy import AttemptFeedback
from ideadice.prompt_editor import WritingEditor
from ideadice.session import SessionController
from ideadice.settings import (
    LOG_DIR,
    STATE_FILE,
    AppSettings,
    is_first_launch,
    mark_launched,
)
from ideadice.storage import JsonEntryStore, JsonStateStore
from ideadice.words import Prompt, roll_dice
from ideadice.writing_timer import WritingTimer, format_elapsed

logger = logging.getLogger(__name__)

APP_TITLE = "IdeaDice"

PLACEHOLDER = "Begin typing based on the words above..."


class WordCard(Static):
    # One prompt word with its part of speech underneath.

    def __init__(self, label: str, **kwargs: object) -> None:
        super().__init__(**kwargs)
        self.part_of_speech = label

    def show_word(self, word: str) -> None:
        self.update(Text.assemble((word, "bold"), "\n", (self.part_of_speech, "dim")))


class TimerDisplay(Static):
    # Widget that shows the elapsed writing time in ``mm:ss`` format.

    def update_time(self, seconds: float) -> None:
        self.update(f"⏱ {format_elapsed(seconds)}")


class NotificationBar(Static):
    """One-line status message for lock changes, mode switches and welcomes.

    A new message replaces the current one and restarts its fade, so an
    older message never hides a newer one early.  ``tone`` is either
    ``"info"`` or ``"warning"`` and maps to a CSS class.
    """

    TONES = ("info", "warning")

    def __init__(self, **kwargs: object) -> None:
        super().__init__(**kwargs)
        self.last_message = ""
        self._fade = None

    def on_mount(self) -> None:
        self.display = False

    def show(self, message: str, duration: float = 2.0, tone: str = "info") -> None:
        self.last_message = message
        for name in self.TONES:
            self.set_class(name == tone, name)
        self.update(message)
        # Replaces a fade that may still be running.
        self.styles.animate("opacity", 1.0, duration=0.1)
        self.display = True
        if self._fade is not None:
            self._fade.stop()
        self._fade = self.set_timer(duration, self._fade_out)

    def _fade_out(self) -> None:
        self._fade = None
        self.styles.animate("opacity", 0.0, duration=0.3, on_complete=self._hide)

    def _hide(self) -> None:
        # A newer message may have arrived while fading.
        if self._fade is None:
            self.display = False


class HistorySidebar(Vertical):
    """Overlay listing earlier writing sessions, newest first."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("ctrl+k", "lock_entry", "Lock entry"),
        ("delete", "delete_entry", "Delete entry"),
    ]

    class OpenEntry(Message):
        """Sent when an entry is chosen from the list."""

        def __init__(self, entry_id: str) -> None:
            super().__init__()
            self.entry_id = entry_id

    class LockEntry(Message):
        def __init__(self, entry_id: str) -> None:
            super().__init__()
            self.entry_id = entry_id

    class DeleteEntry(Message):
        def __init__(self, entry_id: str) -> None:
            super().__init__()
            self.entry_id = entry_id

    def compose(self) -> ComposeResult:
        yield Static("Writing History", id="history_header")
        self.entry_list = OptionList(id="history_entries")
        yield self.entry_list

    def refresh_entries(self, entries: tuple[Entry, ...]) -> None:
        """Rebuild the list from ``entries``."""
        self.entry_list.clear_options()
        for entry in entries:
            self.entry_list.add_option(Option(self._describe(entry), id=entry.id))

    @staticmethod
    def _describe(entry: Entry) -> Text:
        title = entry.title or "Untitled"
        when = entry.last_modified_at.strftime("%d %b %Y %H:%M")
        lock = "🔒 " if entry.is_locked else ""
        return Text.assemble(
            (title, "bold"),
            "\n",
            (f"{when}  {lock}{entry.word_count} words", "dim"),
        )

    def _highlighted_id(self) -> Optional[str]:
        index = self.entry_list.highlighted
        if index is None:
            return None
        return self.entry_list.get_option_at_index(index).id

    def action_close(self) -> None:
        self.app.action_toggle_history()

    def action_lock_entry(self) -> None:
        entry_id = self._highlighted_id()
        if entry_id:
            self.post_message(self.LockEntry(entry_id))

    def action_delete_entry(self) -> None:
        entry_id = self._highlighted_id()
        if entry_id:
            self.post_message(self.DeleteEntry(entry_id))

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.post_message(self.OpenEntry(event.option.id))


class IdeaDiceApp(App[None]):
    # Main application class.

    CSS_PATH = "style.css"

    BINDINGS = [
        ("ctrl+l", "toggle_lock", "Lock/unlock"),
        ("ctrl+r", "roll_words", "New words"),
        ("ctrl+n", "new_writing", "New writing"),
        ("ctrl+b", "toggle_history", "History"),
        ("ctrl+g", "toggle_no_backspace", "No-backspace mode"),
        ("ctrl+e", "clear_text", "Clear"),
        Binding("ctrl+q", "quit", "Quit", priority=True),
    ]

    locked = reactive(False)
    history_visible = reactive(False)
    attempt = reactive(False)

    def __init__(
        self,
        state: Optional[JsonStateStore] = None,
        settings: Optional[AppSettings] = None,
    ) -> None:
        super().__init__()
        self.state_store = state or JsonStateStore(STATE_FILE)
        self.settings = settings or AppSettings.load(self.state_store)
        self.manager = EntryLifecycleManager(JsonEntryStore(self.state_store))
        self.feedback = AttemptFeedback(
            self.set_timer,
            self.show_attempt,
            duration=self.settings.feedback_duration,
        )
        self.controller = SessionController(
            self.manager,
            WritingTimer(),
            self.set_timer,
            self.settings,
            feedback=self.feedback,
        )
        self.prompt: Prompt = roll_dice()

    def compose(self) -> ComposeResult:
        with Horizontal(id="word_cards"):
            self.noun_card = WordCard("NOUN", classes="card")
            yield self.noun_card
            self.verb_card = WordCard("VERB", classes="card")
            yield self.verb_card
            self.emotion_card = WordCard("EMOTION", classes="card")
            yield self.emotion_card
        self.timer_display = TimerDisplay(id="timer_display")
        yield self.timer_display
        self.editor = WritingEditor(key_filter=self.controller.key_pressed, id="editor")
        self.editor.placeholder = PLACEHOLDER
        yield self.editor
        self.history = HistorySidebar(id="history")
        self.history.visible = False
        yield self.history
        self.status = Static(id="status_display")
        yield self.status
        self.notification = NotificationBar(id="notification_bar")
        yield self.notification

    def on_mount(self) -> None:
        self.title = APP_TITLE
        self.history.display = False
        self.show_prompt()
        self.timer_display.update_time(0)
        self.set_interval(1, self.tick)
        self.update_status()
        self.call_later(self.editor.focus)
        if is_first_launch(self.state_store):
            self.notification.show(
                "Welcome! Write about the three words. Ctrl+B opens your history.",
                duration=5.0,
            )
            mark_launched(self.state_store)

    def on_unmount(self) -> None:
        self.controller.shutdown(self.editor.get_text())

    # ------------------------------------------------------------------
    # Watchers
    # ------------------------------------------------------------------

    def watch_locked(self, locked: bool) -> None:
        # The editor refuses every edit while the entry is locked.
        self.editor.read_only = locked
        self.editor.set_class(locked, "locked")
        self.update_status()

    def watch_history_visible(self, visible: bool) -> None:
        self.history.visible = visible
        self.history.display = visible
        if visible:
            self.history.refresh_entries(self.manager.entries)
            self.history.entry_list.focus()
        else:
            self.editor.focus()

    def watch_attempt(self, attempt: bool) -> None:
        self.editor.set_class(attempt, "attempt")

    def show_attempt(self, active: bool) -> None:
        self.attempt = active

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def show_prompt(self) -> None:
        self.noun_card.show_word(self.prompt.noun)
        self.verb_card.show_word(self.prompt.verb)
        self.emotion_card.show_word(self.prompt.emotion)

    def update_status(self) -> None:
        words = len(self.editor.get_text().split())
        parts = [f"{words} words"]
        if self.locked:
            parts.append("🔒 locked")
        if self.settings.no_backspace_mode:
            parts.append("no-backspace")
        self.status.update("  ·  ".join(parts))

    def tick(self) -> None:
        # Called every second to refresh the writing time.
        self.timer_display.update_time(self.controller.timer.elapsed())

    def load_entry(self, entry: Entry) -> None:
        self.editor.set_text(entry.content)
        self.locked = entry.is_locked
        self.tick()
        self.update_status()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def action_toggle_lock(self) -> None:
        # Text typed in the last two seconds may not be saved yet.
        self.controller.flush()
        if self.manager.current_entry() is None:
            self.notification.show("Nothing to lock yet", tone="warning")
            return
        self.locked = self.controller.toggle_lock()
        self.notification.show("Writing locked" if self.locked else "Writing unlocked")
        if self.history_visible:
            self.history.refresh_entries(self.manager.entries)

    def action_roll_words(self) -> None:
        self.prompt = roll_dice()
        self.show_prompt()
        if self.settings.sound_enabled:
            self.bell()

    def action_new_writing(self) -> None:
        self.controller.new_session()
        self.editor.set_text("")
        self.locked = False
        self.action_roll_words()
        self.tick()
        self.update_status()
        if self.history_visible:
            self.history_visible = False

    def action_toggle_history(self) -> None:
        self.history_visible = not self.history_visible

    def action_toggle_no_backspace(self) -> None:
        self.settings.no_backspace_mode = not self.settings.no_backspace_mode
        self.settings.save(self.state_store)
        state = "ON" if self.settings.no_backspace_mode else "OFF"
        self.notification.show(f"No-backspace mode {state}")
        self.update_status()

    def action_clear_text(self) -> None:
        if self.locked:
            self.bell()
            return
        self.editor.set_text("")
        self.controller.text_changed("")
        self.update_status()

    async def action_quit(self) -> None:
        self.controller.shutdown(self.editor.get_text())
        self.exit()

    # ------------------------------------------------------------------
    # Message handlers
    # ------------------------------------------------------------------

    def on_writing_editor_changed(self, message: WritingEditor.Changed) -> None:
        reverted = self.controller.locked_content()
        if reverted is not None:
            # Locked text never changes; put it back.
            self.editor.set_text(reverted)
            return
        self.controller.text_changed(message.text)
        self.update_status()

    def on_history_sidebar_open_entry(self, message: HistorySidebar.OpenEntry) -> None:
        entry = self.controller.select_entry(message.entry_id)
        if entry is None:
            self.notification.show("Entry not found", tone="warning")
            return
        self.load_entry(entry)
        self.history_visible = False

    def on_history_sidebar_lock_entry(self, message: HistorySidebar.LockEntry) -> None:
        was_active = message.entry_id == self.manager.active_entry_id
        self.controller.lock_entry(message.entry_id)
        if was_active:
            # The entry is no longer being edited; start from a blank page.
            self.controller.timer.reset()
            self.editor.set_text("")
            self.tick()
            self.update_status()
        self.history.refresh_entries(self.manager.entries)
        self.notification.show("Entry locked")

    def on_history_sidebar_delete_entry(self, message: HistorySidebar.DeleteEntry) -> None:
        if self.controller.delete_entry(message.entry_id):
            self.editor.set_text("")
            self.locked = False
            self.tick()
            self.update_status()
        self.history.refresh_entries(self.manager.entries)
        self.notification.show("Entry deleted")


def main() -> None:
    configure_logging(LOG_DIR)
    logger.info("Starting %s", APP_TITLE)
    IdeaDiceApp().run()


if __name__ == "__main__":
    main()
