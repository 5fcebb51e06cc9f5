#!/usr/bin/env python3
"""ABOUTME: Tests for the MIDI SysEx status transport and the output port manager."""
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import pytest

from midi import device_manager
from midi.device_manager import MIDIDeviceManager
from midi.status_transport import (
    SYSEX_MANUFACTURER_ID, MIDIOutputError, MIDIStatusTransport,
    command_to_sysex, format_status_command,
)
from tuning.events import TuningStatus

STABLE = TuningStatus(
    detected_frequency=82.0, detected_note_name="E2", cents_deviation=-8.6,
    target_note_name="E2", target_frequency=82.41, is_active=True,
)


class FakePort:
    def __init__(self):
        self.messages = []
        self.closed = False

    def send(self, message):
        self.messages.append(message)

    def close(self):
        self.closed = True


class FakeConfig:
    def __init__(self, midi_output=None):
        self.midi_output = midi_output

    def get_midi_output(self):
        return self.midi_output

    def set_midi_output(self, name):
        self.midi_output = name


def test_format_status_command():
    assert format_status_command(STABLE) == "FREQ:82.0,TARGET:82.4,NOTE:E2"


def test_format_status_command_without_reading_or_target():
    assert format_status_command(STABLE._replace(detected_frequency=None)) is None
    assert format_status_command(STABLE._replace(target_frequency=None)) is None


def test_sysex_payload():
    message = command_to_sysex("FREQ:1")
    assert message.type == "sysex"
    assert message.data[0] == SYSEX_MANUFACTURER_ID
    assert bytes(message.data[1:]).decode("ascii") == "FREQ:1"


def test_send_status_writes_to_port():
    port = FakePort()
    transport = MIDIStatusTransport(port_opener=lambda name: port)
    transport.open_port("Tuner Display")

    assert transport.is_connected
    assert transport.send_status(STABLE)
    assert transport.sent_count == 1
    assert len(port.messages) == 1


def test_send_status_skips_incomplete_status():
    port = FakePort()
    transport = MIDIStatusTransport(port_opener=lambda name: port)
    transport.open_port("Tuner Display")
    assert not transport.send_status(STABLE._replace(target_frequency=None))
    assert port.messages == []


def test_send_without_port_returns_false():
    transport = MIDIStatusTransport(port_opener=lambda name: FakePort())
    assert not transport.is_connected
    assert not transport.send_status(STABLE)


def test_open_failure_raises_midi_output_error():
    def refuse(name):
        raise OSError("port busy")

    transport = MIDIStatusTransport(port_opener=refuse)
    with pytest.raises(MIDIOutputError):
        transport.open_port("Busy")
    assert not transport.is_connected


def test_close_port_is_idempotent():
    port = FakePort()
    transport = MIDIStatusTransport(port_opener=lambda name: port)
    transport.open_port("Tuner Display")
    transport.close_port()
    transport.close_port()
    assert port.closed
    assert transport.port_name is None


def test_device_manager_restores_saved_port(monkeypatch):
    monkeypatch.setattr(device_manager.mido, "get_output_names", lambda: ["Tuner Display", "Synth"])
    manager = MIDIDeviceManager(FakeConfig("Tuner Display"))
    assert manager.get_selected_device() == "Tuner Display"


def test_device_manager_ignores_missing_saved_port(monkeypatch):
    monkeypatch.setattr(device_manager.mido, "get_output_names", lambda: ["Synth"])
    manager = MIDIDeviceManager(FakeConfig("Gone"))
    assert manager.get_selected_device() is None


def test_device_manager_selection(monkeypatch):
    monkeypatch.setattr(device_manager.mido, "get_output_names", lambda: ["Synth"])
    config = FakeConfig()
    manager = MIDIDeviceManager(config)

    assert not manager.select_device("Missing")
    assert manager.select_device("Synth")
    assert config.midi_output == "Synth"
    assert manager.select_device(None)
    assert manager.get_selected_device() is None
