"""Audio input device detection and management."""
import os
import sys
from contextlib import contextmanager
from typing import List, NamedTuple, Optional, TYPE_CHECKING

from audio.sample_source import AUDIO_AVAILABLE, pyaudio

if TYPE_CHECKING:
    from config_manager import ConfigManager


@contextmanager
def quiet_stderr():
    """Silence Python-level stderr while a backend probes its devices."""
    stderr_backup = sys.stderr
    with open(os.devnull, 'w') as devnull:
        sys.stderr = devnull
        try:
            yield
        finally:
            sys.stderr = stderr_backup


class InputDevice(NamedTuple):
    index: int
    name: str
    default_sample_rate: float


class AudioDeviceManager:
    """Manages microphone enumeration and selection."""

    def __init__(self, config_manager: 'ConfigManager' = None):
        self.config_manager = config_manager
        self.selected_device: Optional[str] = None
        self.last_error: Optional[str] = None

        # Load saved device from config
        if self.config_manager:
            saved_device = self.config_manager.get_input_device()
            if saved_device and saved_device in self.get_device_names():
                self.selected_device = saved_device

    def get_input_devices(self) -> List[InputDevice]:
        """List devices that have at least one input channel.

        Returns:
            Input devices, or an empty list with last_error set on failure.
        """
        if not AUDIO_AVAILABLE:
            self.last_error = "PyAudio not installed. Run: pip install pyaudio"
            return []

        audio = None
        try:
            # PortAudio prints ALSA/JACK probing noise to stderr
            with quiet_stderr():
                audio = pyaudio.PyAudio()

            devices = []
            for i in range(audio.get_device_count()):
                info = audio.get_device_info_by_index(i)
                if info.get('maxInputChannels', 0) > 0:
                    devices.append(InputDevice(i, info['name'], info.get('defaultSampleRate', 0.0)))
            self.last_error = None
            return devices
        except Exception as e:
            self.last_error = f"Error: {e}"
            return []
        finally:
            if audio is not None:
                audio.terminate()

    def get_device_names(self) -> List[str]:
        return [device.name for device in self.get_input_devices()]

    def select_device(self, device_name: Optional[str]) -> bool:
        """Select an input device by name; None means the system default.

        Returns:
            True if the device exists (or None was given) and was saved.
        """
        if device_name is not None and device_name not in self.get_device_names():
            return False
        self.selected_device = device_name
        if self.config_manager:
            self.config_manager.set_input_device(device_name)
        return True

    def get_selected_device(self) -> Optional[str]:
        return self.selected_device

    def get_selected_index(self) -> Optional[int]:
        """PyAudio index of the selected device, None for the system default."""
        if self.selected_device is None:
            return None
        for device in self.get_input_devices():
            if device.name == self.selected_device:
                return device.index
        return None
