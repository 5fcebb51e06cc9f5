#!/usr/bin/env python3
"""Guitar Tuner TUI Application - Main Entry Point."""
import logging
import os
from pathlib import Path

# Suppress the Pygame "hello" message
os.environ['PYGAME_HIDE_SUPPORT_PROMPT'] = "1"

from textual.app import App
from textual.binding import Binding
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Footer, Header

from audio.device_manager import AudioDeviceManager
from audio.sample_source import MicrophoneSource
from components.confirmation_dialog import ConfirmationDialog
from config_manager import ConfigManager
from midi.device_manager import MIDIDeviceManager
from midi.status_transport import MIDIOutputError, MIDIStatusTransport
from modes.config_mode import ConfigMode
from modes.tuner_mode import TunerMode
from music.reference_tone import ReferenceTone
from tuning.session import TuningSession

LOG_FILE = Path(__file__).parent / "strum_tuner.log"

logger = logging.getLogger(__name__)


class MainScreen(Screen):
    """Hosts the tuner mode and the app-wide bindings."""

    CSS = """
    MainScreen {
        layout: vertical;
    }

    #content-area {
        height: 1fr;
        width: 100%;
        align: center middle;
    }
    """

    BINDINGS = [
        Binding("c", "show_config", "Config", show=True),
        Binding("escape", "quit_app", "Quit", show=True),
    ]

    def __init__(self, app_context):
        super().__init__()
        self.app_context = app_context

    def compose(self):
        yield Header()
        with Container(id="content-area"):
            yield self.app_context["create_tuner"]()
        yield Footer()

    def on_mount(self):
        self.query_one(TunerMode).focus()

    def action_show_config(self):
        session = self.app_context["session"]
        was_active = session.is_active
        # The stream is bound to a device when opened; stop so a new choice takes effect
        session.stop()

        def on_closed(result):
            self.app.apply_device_selection()
            self.app.update_sub_title()
            if was_active:
                self.query_one(TunerMode).action_toggle_listening()

        config = ConfigMode(self.app_context["audio_devices"], self.app_context["midi_devices"])
        self.app.push_screen(config, on_closed)

    def action_quit_app(self):
        """Quit with confirmation."""
        def check_quit(result):
            if result:
                self.app.exit()

        detail = "Tuning is in progress." if self.app_context["session"].is_active else ""
        self.app.push_screen(ConfirmationDialog("Quit tuner?", detail), check_quit)


class TunerApp(App):
    """Guitar Tuner TUI Application."""

    VERSION = "1.0.0"

    def __init__(self, config_manager: ConfigManager = None):
        super().__init__()
        self.title = f"Strum Tuner v{self.VERSION}"
        self.config_manager = config_manager or ConfigManager()
        self.audio_devices = AudioDeviceManager(self.config_manager)
        self.midi_devices = MIDIDeviceManager(self.config_manager)

        self.source = MicrophoneSource(
            sample_rate=self.config_manager.get_sample_rate(),
            frames_per_buffer=self.config_manager.get_window_size(),
            device_index=self.audio_devices.get_selected_index(),
        )
        self.transport = MIDIStatusTransport()
        self.session = TuningSession(
            self.source,
            transport=self.transport,
            window_size=self.config_manager.get_window_size(),
            history_size=self.config_manager.get_history_size(),
            max_graph_points=self.config_manager.get_max_graph_points(),
            graph_interval=self.config_manager.get_graph_interval(),
            initial_target=self.config_manager.get_default_target(),
            auto_mode=self.config_manager.get_auto_mode(),
        )
        self.reference_tone = ReferenceTone(self.config_manager.get_reference_volume())

        self._open_transport()

        self.app_context = {
            "config_manager": self.config_manager,
            "audio_devices": self.audio_devices,
            "midi_devices": self.midi_devices,
            "session": self.session,
            "create_tuner": self._create_tuner_mode,
        }

    def on_mount(self):
        self.push_screen(MainScreen(self.app_context))
        self.update_sub_title()

    def update_sub_title(self):
        """Update sub title with device info."""
        mic = self.audio_devices.get_selected_device() or "default input"
        if self.transport.is_connected:
            self.sub_title = f"🎤 {mic} → 🎹 {self.transport.port_name}"
        else:
            self.sub_title = f"🎤 {mic} (press C to configure)"

    def apply_device_selection(self):
        """Point the microphone and MIDI transport at the configured devices."""
        self.source.device_index = self.audio_devices.get_selected_index()
        if self.midi_devices.get_selected_device() != self.transport.port_name:
            self._open_transport()

    def _open_transport(self):
        port_name = self.midi_devices.get_selected_device()
        if port_name is None:
            self.transport.close_port()
            return
        try:
            self.transport.open_port(port_name)
        except MIDIOutputError as e:
            logger.warning("%s", e)

    def _create_tuner_mode(self):
        return TunerMode(self.session, self.reference_tone, self.config_manager)

    def on_unmount(self):
        """Clean up on exit."""
        self.session.stop()
        self.transport.close_port()
        self.reference_tone.stop()


def main():
    """Main entry point."""
    logging.basicConfig(
        filename=LOG_FILE,
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = TunerApp()
    app.run()


if __name__ == "__main__":
    main()
