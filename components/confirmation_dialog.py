"""Centered yes/no dialog used before quitting the tuner."""
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Label


class ConfirmationDialog(ModalScreen[bool]):
    """Modal yes/no prompt; dismisses with True on confirm."""

    BINDINGS = [
        Binding("y", "answer(True)", "Yes", show=False),
        Binding("n", "answer(False)", "No", show=False),
        Binding("escape", "answer(False)", "Cancel", show=False),
    ]

    CSS = """
    ConfirmationDialog {
        align: center middle;
    }

    #confirm-box {
        width: 54;
        height: auto;
        border: thick #00d7ff;
        background: #1a1a1a;
        padding: 1 2;
    }

    #confirm-box Label {
        width: 100%;
        content-align: center middle;
    }

    #confirm-message {
        color: #00d7ff;
        text-style: bold;
    }

    #confirm-detail {
        color: #888888;
    }

    #confirm-buttons {
        width: 100%;
        height: auto;
        align: center middle;
        margin-top: 1;
    }

    #confirm-buttons Button {
        margin: 0 2;
    }
    """

    def __init__(self, message: str = "Quit tuner?", detail: str = ""):
        super().__init__()
        self.message = message
        self.detail = detail

    def compose(self):
        with Vertical(id="confirm-box"):
            yield Label(self.message, id="confirm-message")
            if self.detail:
                yield Label(self.detail, id="confirm-detail")
            with Horizontal(id="confirm-buttons"):
                yield Button("Yes (Y)", variant="error", id="confirm-yes")
                yield Button("No (N)", variant="primary", id="confirm-no")

    def on_mount(self):
        self.query_one("#confirm-no", Button).focus()

    def on_button_pressed(self, event: Button.Pressed):
        self.dismiss(event.button.id == "confirm-yes")

    def action_answer(self, confirmed: bool):
        self.dismiss(confirmed)
