#!/usr/bin/env python3
"""ABOUTME: Tests for microphone source and input device handling when no audio backend is present."""
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import numpy as np
import pytest

from audio import device_manager, sample_source
from audio.device_manager import AudioDeviceManager
from audio.sample_source import MicrophoneSource, SampleSource, SampleSourceError


class FakeConfig:
    def __init__(self):
        self.input_device = "Old Mic"

    def get_input_device(self):
        return self.input_device

    def set_input_device(self, name):
        self.input_device = name


def test_microphone_without_backend_raises(monkeypatch):
    monkeypatch.setattr(sample_source, "AUDIO_AVAILABLE", False)
    source = MicrophoneSource()
    with pytest.raises(SampleSourceError):
        source.open()
    assert not source.is_open
    source.close()


def test_device_manager_without_backend(monkeypatch):
    monkeypatch.setattr(device_manager, "AUDIO_AVAILABLE", False)
    config = FakeConfig()
    manager = AudioDeviceManager(config)

    assert manager.get_input_devices() == []
    assert manager.last_error
    # saved device is no longer present
    assert manager.get_selected_device() is None
    assert manager.get_selected_index() is None

    assert not manager.select_device("USB Mic")
    assert manager.select_device(None)
    assert config.input_device is None


def test_delivered_buffers_are_read_only():
    received = []
    source = SampleSource(44100)
    source.on_samples(received.append)
    source._deliver(np.zeros(4, dtype=np.float32))

    assert len(received) == 1
    assert not received[0].flags.writeable

    source.on_samples(None)
    source._deliver(np.zeros(4, dtype=np.float32))
    assert len(received) == 1
