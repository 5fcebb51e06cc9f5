"""MIDI output ports that tuning status can be forwarded to."""
from typing import List, Optional, TYPE_CHECKING

import mido

from audio.device_manager import quiet_stderr

if TYPE_CHECKING:
    from config_manager import ConfigManager

ALSA_SEQ_HINT = "ALSA sequencer not available. Run: sudo modprobe snd-seq"


class MIDIDeviceManager:
    """Lists output ports and remembers which one (if any) receives status."""

    def __init__(self, config_manager: 'ConfigManager' = None):
        self.config_manager = config_manager
        self.last_error: Optional[str] = None
        self.selected_device: Optional[str] = None

        saved = config_manager.get_midi_output() if config_manager else None
        # A port from a previous run may have been unplugged since
        if saved and saved in self.get_output_devices():
            self.selected_device = saved

    def get_output_devices(self) -> List[str]:
        """Names of the available output ports; empty with last_error set on failure."""
        try:
            with quiet_stderr():
                names = list(mido.get_output_names())
        except Exception as e:
            message = str(e).lower()
            alsa_missing = "snd/seq" in message and "no such file" in message
            self.last_error = ALSA_SEQ_HINT if alsa_missing else f"Error: {e}"
            return []
        self.last_error = None
        return names

    def select_device(self, device_name: Optional[str]) -> bool:
        """Choose the port to forward to; None turns forwarding off.

        Returns:
            False if the named port does not exist.
        """
        if device_name is not None and device_name not in self.get_output_devices():
            return False
        self.selected_device = device_name
        if self.config_manager:
            self.config_manager.set_midi_output(device_name)
        return True

    def get_selected_device(self) -> Optional[str]:
        return self.selected_device
