"""Plays the target note as a sine tone so strings can be tuned by ear."""
import logging
import threading
from typing import Dict, Optional

import numpy as np

logger = logging.getLogger(__name__)

MIXER_SAMPLE_RATE = 22050
TONE_SECONDS = 1.5
FADE_SECONDS = 0.02


def render_tone(frequency: float, sample_rate: int = MIXER_SAMPLE_RATE,
                duration: float = TONE_SECONDS, volume: float = 0.4) -> np.ndarray:
    """Stereo int16 sine with short fades at both ends to avoid clicks.

    Returns:
        Array of shape (samples, 2).
    """
    num_samples = int(sample_rate * duration)
    t = np.arange(num_samples) / sample_rate
    wave = np.sin(2 * np.pi * frequency * t)

    fade = min(int(sample_rate * FADE_SECONDS), num_samples // 2)
    if fade > 0:
        ramp = np.linspace(0.0, 1.0, fade)
        wave[:fade] *= ramp
        wave[-fade:] *= ramp[::-1]

    mono = (wave * max(0.0, min(1.0, volume)) * 32767).astype(np.int16)
    return np.column_stack((mono, mono))


class ReferenceTone:
    """Lazily initialised pygame mixer that caches one Sound per frequency."""

    def __init__(self, volume: float = 0.4):
        self.volume = volume
        self._pygame = None
        self._ready = False
        self._cache: Dict[float, object] = {}
        self._lock = threading.Lock()

    def _init_mixer(self) -> bool:
        if self._ready:
            return True
        try:
            import pygame
            pygame.mixer.init(frequency=MIXER_SAMPLE_RATE, size=-16, channels=2, buffer=512)
            self._pygame = pygame
            self._ready = True
        except Exception as e:
            logger.warning("Reference tone unavailable: %s", e)
            self._ready = False
        return self._ready

    def is_available(self) -> bool:
        return self._init_mixer()

    def play(self, frequency: Optional[float]) -> bool:
        """Play a tone at `frequency`, stopping any tone already sounding.

        Returns:
            False if there is nothing to play or no audio output.
        """
        if not frequency or frequency <= 0:
            return False
        with self._lock:
            if not self._init_mixer():
                return False
            key = round(frequency, 2)
            sound = self._cache.get(key)
            if sound is None:
                sample_rate = self._pygame.mixer.get_init()[0]
                pcm = render_tone(frequency, sample_rate, volume=self.volume)
                sound = self._pygame.sndarray.make_sound(pcm)
                self._cache[key] = sound
            self._pygame.mixer.stop()
            sound.play()
        return True

    def set_volume(self, volume: float):
        with self._lock:
            self.volume = max(0.0, min(1.0, volume))
            self._cache.clear()

    def stop(self):
        if self._ready:
            self._pygame.mixer.stop()
