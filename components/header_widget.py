"""Tuner header: bordered title with a one-line listening status inside."""
from rich.text import Text
from textual.widgets import Static


class HeaderWidget(Static):
    """Title in the border, status text in the body."""

    DEFAULT_CSS = """
    HeaderWidget {
        width: 44;
        height: 3;
        border: double $accent;
        border-title-align: center;
        border-title-color: $accent;
        content-align: center middle;
        text-align: center;
        margin-bottom: 1;
    }
    """

    STATUS_COLORS = {
        "idle": "#666666",
        "listening": "#00d7ff",
        "error": "#ff5f5f",
    }

    def __init__(self, title: str, status: str = "", **kwargs):
        super().__init__("", **kwargs)
        self.border_title = title
        self.status_text = status
        self.status_kind = "idle"

    def on_mount(self):
        self.update(self._status_line())

    def _status_line(self) -> Text:
        return Text(self.status_text, style=f"italic {self.STATUS_COLORS.get(self.status_kind, '#666666')}")

    def update_status(self, text: str, kind: str = "idle"):
        """Update the status line; kind is one of idle, listening, error."""
        self.status_text = text
        self.status_kind = kind
        self.update(self._status_line())
