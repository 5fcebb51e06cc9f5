"""ABOUTME: Tuner mode - live gauge, cents graph and string selector for a TuningSession.
ABOUTME: Status arrives from audio threads as messages; the graph is polled on a UI timer."""
import logging
from typing import Optional, TYPE_CHECKING

from textual.binding import Binding
from textual.containers import Vertical
from textual.message import Message
from textual.widgets import Label

from audio.sample_source import SampleSourceError
from components.frequency_graph import FrequencyGraph
from components.header_widget import HeaderWidget
from components.string_selector import StringSelector
from components.tuner_gauge import TunerGauge
from tuning.events import TuningStatus
from tuning.notes import STANDARD_TUNING

if TYPE_CHECKING:
    from config_manager import ConfigManager
    from music.reference_tone import ReferenceTone
    from tuning.session import TuningSession

logger = logging.getLogger(__name__)


class TunerMode(Vertical):
    """Interactive front-end for one tuning session."""

    DEFAULT_CSS = """
    TunerMode:focus {
        border: heavy $accent;
    }
    TunerMode {
        align: center top;
        padding: 1;
    }
    #shortcuts-label {
        width: 100%;
        text-align: center;
        color: $text-muted;
        margin-top: 1;
    }
    """

    BINDINGS = [
        Binding("space", "toggle_listening", "Start/Stop", show=False),
        Binding("a", "toggle_auto", "Auto", show=False),
        Binding("p", "play_reference", "Reference", show=False),
        Binding("left", "previous_string", "String -", show=False),
        Binding("right", "next_string", "String +", show=False),
        Binding("1", "select_string(1)", "E2", show=False),
        Binding("2", "select_string(2)", "A2", show=False),
        Binding("3", "select_string(3)", "D3", show=False),
        Binding("4", "select_string(4)", "G3", show=False),
        Binding("5", "select_string(5)", "B3", show=False),
        Binding("6", "select_string(6)", "E4", show=False),
    ]

    can_focus = True

    class StatusChanged(Message):
        """A new TuningStatus was published by the session."""

        def __init__(self, status: TuningStatus):
            super().__init__()
            self.status = status

    def __init__(self, session: 'TuningSession', reference_tone: Optional['ReferenceTone'] = None,
                 config_manager: Optional['ConfigManager'] = None):
        super().__init__()
        self.session = session
        self.reference_tone = reference_tone
        self.config_manager = config_manager
        self._subscription = None
        self._graph_timer = None

    def compose(self):
        yield HeaderWidget("G U I T A R   T U N E R", status="idle", id="tuner-header")
        yield StringSelector(id="string-selector")
        yield TunerGauge(id="tuner-gauge")
        yield FrequencyGraph(self.session.max_graph_points, id="frequency-graph")
        yield Label(
            "SPACE: Start/Stop | 1-6 / ←→: String | A: Auto | P: Reference tone",
            id="shortcuts-label"
        )

    def on_mount(self):
        # post_message is thread-safe, so audio-thread publishes land on the UI loop
        self._subscription = self.session.events.subscribe(
            lambda status: self.post_message(self.StatusChanged(status))
        )
        self._graph_timer = self.set_interval(self.session.graph_interval, self._refresh_graph)
        self._show_status(self.session.status())
        self._refresh_graph()

    def on_unmount(self):
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
        if self._graph_timer is not None:
            self._graph_timer.stop()
            self._graph_timer = None

    def on_tuner_mode_status_changed(self, message: StatusChanged):
        self._show_status(message.status)

    # ── Rendering ───────────────────────────────────────────────

    def _show_status(self, status: TuningStatus):
        self.query_one("#tuner-gauge", TunerGauge).status = status
        self.query_one("#string-selector", StringSelector).set_selection(
            status.target_note_name, status.auto_mode
        )
        header = self.query_one("#tuner-header", HeaderWidget)
        if status.is_active:
            header.update_status("● listening", "listening")
        else:
            header.update_status("idle", "idle")

    def _refresh_graph(self):
        self.query_one("#frequency-graph", FrequencyGraph).update_points(
            self.session.graph_points(), self.session.is_active
        )

    # ── Actions ─────────────────────────────────────────────────

    def action_toggle_listening(self):
        if self.session.is_active:
            self.session.stop()
            return
        try:
            self.session.start()
        except SampleSourceError as e:
            logger.error("Could not start tuning: %s", e)
            self.query_one("#tuner-header", HeaderWidget).update_status(str(e), "error")
            self.app.notify(str(e), severity="error")

    def action_toggle_auto(self):
        enabled = not self.session.auto_mode
        self.session.set_auto_mode(enabled)
        if self.config_manager:
            self.config_manager.set_auto_mode(enabled)

    def action_select_string(self, number: int):
        if not 1 <= number <= len(STANDARD_TUNING):
            return
        note_name = STANDARD_TUNING[number - 1]
        if self.session.auto_mode:
            self.session.set_auto_mode(False)
            if self.config_manager:
                self.config_manager.set_auto_mode(False)
        self.session.set_target(note_name)
        if self.config_manager:
            self.config_manager.set_default_target(note_name)

    def action_previous_string(self):
        self.action_select_string(self._current_string_number() - 1)

    def action_next_string(self):
        self.action_select_string(self._current_string_number() + 1)

    def _current_string_number(self) -> int:
        target = self.session.target
        if target is not None and target.note_name in STANDARD_TUNING:
            return STANDARD_TUNING.index(target.note_name) + 1
        return len(STANDARD_TUNING)

    def action_play_reference(self):
        target = self.session.target
        if target is None:
            self.app.notify("No target yet - pluck a string first")
            return
        if self.reference_tone is None or not self.reference_tone.play(target.frequency_hz):
            self.app.notify("Reference tone unavailable", severity="warning")
