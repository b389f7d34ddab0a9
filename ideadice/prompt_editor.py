from __future__ import annotations

"""Writing editor built on prompt_toolkit buffers."""

from typing import Callable, Optional

from prompt_toolkit.buffer import Buffer
from prompt_toolkit.document import Document
from prompt_toolkit.clipboard import InMemoryClipboard

from textual.widget import Widget
from textual import events
from textual.message import Message
from rich.text import Text

# Keys that move the cursor or copy text without changing it.
NAVIGATION_KEYS = {"left", "right", "up", "down", "home", "end", "ctrl+c"}


class WritingEditor(Widget):
    """A minimal multi-line text editor using *prompt_toolkit* buffers.

    ``key_filter`` is asked about every key before it is applied; returning
    ``True`` drops the key.  With ``read_only`` set only navigation keys are
    handled.
    """

    DEFAULT_CSS = "WritingEditor {border: none;}"

    # Allow the editor to take keyboard focus so it receives key events.
    can_focus = True

    class Changed(Message):
        """Posted when the text content changes."""
        def __init__(self, sender: "WritingEditor", text: str) -> None:
            self.sender = sender
            self.text = text
            super().__init__()

    def __init__(
        self,
        text: str = "",
        key_filter: Optional[Callable[[str, bool], bool]] = None,
        **kwargs: object,
    ) -> None:
        super().__init__(**kwargs)
        self._clipboard = InMemoryClipboard()
        self._buffer = Buffer(document=Document(text, len(text)), multiline=True)
        self.key_filter = key_filter
        self.read_only = False
        self.placeholder = ""

    def _copy(self) -> None:
        if data := self._buffer.copy_selection():
            self._clipboard.set_data(data)

    def _paste(self) -> None:
        if data := self._clipboard.get_data():
            self._buffer.paste_clipboard_data(data)

    def _cut(self) -> None:
        if data := self._buffer.cut_selection():
            self._clipboard.set_data(data)

    async def _on_key(self, event: events.Key) -> None:
        """Translate key presses to buffer operations."""
        key = event.key.lower()

        if self.key_filter is not None and self.key_filter(key, self.has_focus):
            event.stop()
            event.prevent_default()
            return
        if self.read_only and key not in NAVIGATION_KEYS:
            # Locked text: swallow everything that could edit it.
            if event.character or key in {"backspace", "delete", "enter", "tab"}:
                event.stop()
            return

        before = self._buffer.text
        handled = True

        if key == "left":
            self._buffer.cursor_left()
        elif key == "right":
            self._buffer.cursor_right()
        elif key == "up":
            self._buffer.cursor_up()
        elif key == "down":
            self._buffer.cursor_down()
        elif key == "backspace":
            self._buffer.delete_before_cursor(1)
        elif key == "delete":
            self._buffer.delete()
        elif key == "ctrl+c":
            self._copy()
        elif key == "ctrl+v":
            self._paste()
        elif key == "ctrl+x":
            self._cut()
        elif key == "ctrl+z":
            self._buffer.undo()
        elif key == "ctrl+y":
            self._buffer.redo()
        elif key in {"enter", "return"}:
            self._buffer.insert_text("\n")
        elif event.character and event.is_printable:
            self._buffer.insert_text(event.character)
        else:
            handled = False

        if handled:
            event.stop()
            if self._buffer.text != before:
                self.post_message(self.Changed(self, self._buffer.text))
            self.refresh()

    def get_text(self) -> str:
        """Return the current text in the editor."""
        return self._buffer.text

    def set_text(self, value: str) -> None:
        """Replace the current text with ``value`` without posting ``Changed``."""
        self._buffer.document = Document(value, len(value))
        self.refresh()

    @property
    def text(self) -> str:  # pragma: no cover - simple getter
        return self.get_text()

    @text.setter
    def text(self, value: str) -> None:  # pragma: no cover - simple setter
        self.set_text(value)

    def render(self) -> Text:
        """Render the buffer with a visible cursor and soft wrapping."""
        width = self.size.width or 80
        doc = self._buffer.document
        text = doc.text
        cursor = doc.cursor_position

        if not text and self.placeholder and not self.has_focus:
            return Text(self.placeholder, style="dim italic")

        lines: list[str] = []
        current = ""
        col = 0

        for i, ch in enumerate(text):
            if i == cursor and not self.read_only:
                current += "▍"
            if ch == "\n":
                lines.append(current)
                current = ""
                col = 0
                continue
            current += ch
            col += 1
            if col >= width:
                lines.append(current)
                current = ""
                col = 0

        if cursor == len(text) and not self.read_only:
            current += "▍"
        lines.append(current)

        return Text("\n".join(lines))
