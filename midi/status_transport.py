"""Forwards tuning status to a paired device as MIDI SysEx."""
import logging
from threading import Lock
from typing import Callable, Optional, TYPE_CHECKING

import mido

if TYPE_CHECKING:
    from tuning.events import TuningStatus

logger = logging.getLogger(__name__)

# Manufacturer ID reserved for non-commercial use.
SYSEX_MANUFACTURER_ID = 0x7D


class MIDIOutputError(Exception):
    """A MIDI output port could not be opened."""


def format_status_command(status: 'TuningStatus') -> Optional[str]:
    """Human-readable command the paired tuner display understands.

    Returns:
        "FREQ:<hz>,TARGET:<hz>,NOTE:<name>", or None if there is no stable
        reading or no target to report.
    """
    if status.detected_frequency is None or status.target_frequency is None:
        return None
    return (f"FREQ:{status.detected_frequency:.1f},"
            f"TARGET:{status.target_frequency:.1f},"
            f"NOTE:{status.target_note_name}")


def command_to_sysex(command: str) -> mido.Message:
    """Wrap an ASCII command in a SysEx message (data bytes must be 7-bit)."""
    payload = command.encode('ascii', errors='replace')
    return mido.Message('sysex', data=[SYSEX_MANUFACTURER_ID] + [b & 0x7F for b in payload])


class MIDIStatusTransport:
    """Sends each stable tuning reading to one MIDI output port."""

    def __init__(self, port_opener: Callable[[str], object] = mido.open_output):
        self._port_opener = port_opener
        self.port = None
        self.port_name: Optional[str] = None
        self._lock = Lock()
        self.sent_count = 0

    @property
    def is_connected(self) -> bool:
        return self.port is not None

    def open_port(self, port_name: str):
        """Open a MIDI output port, closing any previous one.

        Raises:
            MIDIOutputError: the port could not be opened.
        """
        self.close_port()
        try:
            port = self._port_opener(port_name)
        except Exception as e:
            raise MIDIOutputError(f"Could not open MIDI output {port_name!r}: {e}") from e

        with self._lock:
            self.port = port
            self.port_name = port_name
        logger.info("Status transport connected to %s", port_name)

    def close_port(self):
        """Close the current port, if any."""
        with self._lock:
            port, self.port = self.port, None
            name, self.port_name = self.port_name, None

        if port is not None:
            try:
                port.close()
            except Exception:
                logger.exception("Error closing MIDI output %s", name)
            logger.info("Status transport disconnected from %s", name)

    def send_status(self, status: 'TuningStatus') -> bool:
        """Send one status update.

        Returns:
            True if a message was written to the port.
        """
        command = format_status_command(status)
        if command is None:
            return False

        with self._lock:
            if self.port is None:
                return False
            self.port.send(command_to_sysex(command))
            self.sent_count += 1
        return True
