"""Device configuration screen: microphone input and MIDI status output."""
from typing import List, Optional, TYPE_CHECKING

from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import Footer, Header, Label, ListItem, ListView

if TYPE_CHECKING:
    from audio.device_manager import AudioDeviceManager
    from midi.device_manager import MIDIDeviceManager

SYSTEM_DEFAULT = "System default"
OUTPUT_OFF = "Off (don't forward)"


class ConfigMode(Screen):
    """Pick the audio input to tune from and the MIDI port to forward readings to."""

    BINDINGS = [
        Binding("escape", "dismiss", "Close", show=True),
        Binding("r", "refresh_devices", "Refresh", show=True),
        Binding("tab", "switch_list", "Input/Output", show=True),
        Binding("space", "select_device", "Select", show=True),
    ]

    CSS = """
    ConfigMode {
        align: center middle;
    }

    #config-container {
        width: 70;
        height: auto;
        border: thick #00d7ff;
        background: #1a1a1a;
        padding: 1 2;
    }

    .section-title {
        width: 100%;
        content-align: center middle;
        text-style: bold;
        color: #00d7ff;
    }

    ListView {
        width: 100%;
        height: 8;
        border: solid #444444;
        margin: 0 0 1 0;
    }

    ListView:focus {
        border: solid #00d7ff;
    }

    #selected-devices {
        width: 100%;
        content-align: center middle;
        color: #00ff00;
    }

    #instructions {
        width: 100%;
        content-align: center middle;
        color: #888888;
        text-style: italic;
        margin-top: 1;
    }
    """

    def __init__(self, audio_devices: 'AudioDeviceManager', midi_devices: 'MIDIDeviceManager'):
        super().__init__()
        self.audio_devices = audio_devices
        self.midi_devices = midi_devices
        self.input_choices: List[Optional[str]] = []
        self.output_choices: List[Optional[str]] = []

    def compose(self):
        yield Header()
        with Vertical(id="config-container"):
            yield Label("🎤 Audio Input", classes="section-title")
            yield ListView(id="input-list")
            yield Label("🎹 MIDI Status Output", classes="section-title")
            yield ListView(id="output-list")
            yield Label("", id="selected-devices")
            yield Label(
                "↑↓: Navigate | Tab: Switch list | Space: Select | R: Refresh | Esc: Close",
                id="instructions"
            )
        yield Footer()

    def on_mount(self):
        self.refresh_device_lists()
        self.query_one("#input-list", ListView).focus()

    def refresh_device_lists(self):
        self.input_choices = [None] + self.audio_devices.get_device_names()
        self.output_choices = [None] + self.midi_devices.get_output_devices()

        self._fill(
            self.query_one("#input-list", ListView), self.input_choices,
            self.audio_devices.get_selected_device(), SYSTEM_DEFAULT, self.audio_devices.last_error
        )
        self._fill(
            self.query_one("#output-list", ListView), self.output_choices,
            self.midi_devices.get_selected_device(), OUTPUT_OFF, self.midi_devices.last_error
        )
        self.update_selected_display()

    def _fill(self, list_view: ListView, choices, selected, none_label: str, error: Optional[str]):
        list_view.clear()
        for choice in choices:
            mark = "☑" if choice == selected else "☐"
            list_view.append(ListItem(Label(f"{mark} {choice or none_label}")))
        if error:
            list_view.append(ListItem(Label("❌ " + error)))
        list_view.index = choices.index(selected) if selected in choices else 0

    def update_selected_display(self):
        mic = self.audio_devices.get_selected_device() or SYSTEM_DEFAULT
        port = self.midi_devices.get_selected_device() or OUTPUT_OFF
        self.query_one("#selected-devices", Label).update(f"Input: {mic} | Output: {port}")

    def action_refresh_devices(self):
        self.refresh_device_lists()
        self.app.notify("Device lists refreshed")

    def action_switch_list(self):
        input_list = self.query_one("#input-list", ListView)
        if input_list.has_focus:
            self.query_one("#output-list", ListView).focus()
        else:
            input_list.focus()

    def action_select_device(self):
        input_list = self.query_one("#input-list", ListView)
        output_list = self.query_one("#output-list", ListView)

        if input_list.has_focus:
            list_view, choices, manager = input_list, self.input_choices, self.audio_devices
        elif output_list.has_focus:
            list_view, choices, manager = output_list, self.output_choices, self.midi_devices
        else:
            return

        index = list_view.index
        if index is None or not 0 <= index < len(choices):
            return
        choice = choices[index]
        if manager.select_device(choice):
            self.app.notify(f"✓ Selected: {choice or 'default'}")
            self.refresh_device_lists()
        else:
            self.app.notify(f"✗ Failed to select: {choice}", severity="error")
