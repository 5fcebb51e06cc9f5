"""Row of guitar strings showing which one is the tuning target."""
from typing import Optional

from rich.text import Text
from textual.widgets import Static

from tuning.notes import STANDARD_TUNING


class StringSelector(Static):
    """Highlights the target string; in auto mode the highlight follows detection."""

    DEFAULT_CSS = """
    StringSelector {
        width: 100%;
        height: 3;
        content-align: center middle;
        text-align: center;
    }
    """

    def __init__(self, **kwargs):
        super().__init__("", **kwargs)
        self.selected_note: Optional[str] = None
        self.auto_mode = False

    def on_mount(self):
        self.update(self._build())

    def set_selection(self, selected_note: Optional[str], auto_mode: bool):
        self.selected_note = selected_note
        self.auto_mode = auto_mode
        self.update(self._build())

    def _build(self) -> Text:
        text = Text(justify="center")
        for number, note in enumerate(STANDARD_TUNING, start=1):
            if note == self.selected_note:
                text.append(f" [{number}] {note} ", style="bold #000000 on #ffd700")
            else:
                text.append(f" [{number}] {note} ", style="#aaaaaa")
            text.append(" ")
        text.append("\n")
        mode = "AUTO  (string follows what you play)" if self.auto_mode else "MANUAL"
        text.append(f"Mode: {mode}", style="italic #00d7ff" if self.auto_mode else "italic #888888")
        return text
