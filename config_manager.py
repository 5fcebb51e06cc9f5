"""Configuration file management."""
import json
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages tuner configuration stored as JSON."""

    def __init__(self, config_file: Optional[Path] = None):
        self.config_file = Path(config_file) if config_file else Path(__file__).parent / "config.json"
        self.config = self._load_config()

    def _load_config(self) -> dict:
        """Load configuration from file, filling in missing keys with defaults."""
        config = self._default_config()
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r') as f:
                    stored = json.load(f)
                if isinstance(stored, dict):
                    config.update(stored)
            except (OSError, ValueError) as e:
                logger.warning("Ignoring unreadable config %s: %s", self.config_file, e)
        return config

    def _default_config(self) -> dict:
        """Return default configuration."""
        return {
            "sample_rate": 44100,
            "window_size": 2048,
            "history_size": 5,
            "graph_interval_ms": 200,
            "max_graph_points": 20,
            "default_target": "E4",
            "auto_mode": False,
            "input_device": None,
            "midi_output": None,
            "reference_volume": 0.4,
        }

    def save_config(self):
        """Save configuration to file."""
        try:
            with open(self.config_file, 'w') as f:
                json.dump(self.config, f, indent=2)
        except OSError as e:
            logger.error("Error saving config: %s", e)

    # ── Audio analysis ───────────────────────────────────────────

    def get_sample_rate(self) -> int:
        return int(self.config.get("sample_rate", 44100))

    def get_window_size(self) -> int:
        """Analysis window in samples, clamped to [256, 16384]."""
        return int(max(256, min(16384, self.config.get("window_size", 2048))))

    def get_history_size(self) -> int:
        return int(max(1, min(50, self.config.get("history_size", 5))))

    # ── Graph ────────────────────────────────────────────────────

    def get_graph_interval(self) -> float:
        """Graph sampling cadence in seconds (config stores milliseconds)."""
        ms = max(20, min(2000, int(self.config.get("graph_interval_ms", 200))))
        return ms / 1000.0

    def get_max_graph_points(self) -> int:
        return int(max(2, min(500, self.config.get("max_graph_points", 20))))

    # ── Tuning target ────────────────────────────────────────────

    def get_default_target(self) -> str:
        return str(self.config.get("default_target") or "E4")

    def set_default_target(self, note_name: str):
        self.config["default_target"] = note_name
        self.save_config()

    def get_auto_mode(self) -> bool:
        return bool(self.config.get("auto_mode", False))

    def set_auto_mode(self, enabled: bool):
        self.config["auto_mode"] = bool(enabled)
        self.save_config()

    # ── Devices ──────────────────────────────────────────────────

    def get_input_device(self) -> Optional[str]:
        """Get the saved microphone name (None = system default)."""
        return self.config.get("input_device")

    def set_input_device(self, device_name: Optional[str]):
        self.config["input_device"] = device_name
        self.save_config()

    def get_midi_output(self) -> Optional[str]:
        """Get the saved MIDI output port for status forwarding."""
        return self.config.get("midi_output")

    def set_midi_output(self, port_name: Optional[str]):
        self.config["midi_output"] = port_name
        self.save_config()

    # ── Reference tone ───────────────────────────────────────────

    def get_reference_volume(self) -> float:
        return float(max(0.0, min(1.0, self.config.get("reference_volume", 0.4))))

    def set_reference_volume(self, volume: float):
        """Persist the reference tone volume. Clamped to [0, 1]."""
        self.config["reference_volume"] = float(max(0.0, min(1.0, volume)))
        self.save_config()
