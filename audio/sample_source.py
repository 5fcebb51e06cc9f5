"""Microphone capture delivering mono float32 sample buffers."""
import logging
from threading import Lock
from typing import Callable, Optional

import numpy as np

# Check for PyAudio availability
try:
    import pyaudio
    AUDIO_AVAILABLE = True
except ImportError:
    AUDIO_AVAILABLE = False
    pyaudio = None

logger = logging.getLogger(__name__)

SampleCallback = Callable[[np.ndarray], None]


class SampleSourceError(Exception):
    """The audio input could not be acquired (no backend, device or permission)."""


class SampleSource:
    """Contract for anything that pushes mono PCM buffers to the tuner.

    Subclasses call `_deliver()` with float samples in [-1.0, 1.0], on
    whatever thread their backend uses.
    """

    def __init__(self, sample_rate: int):
        self.sample_rate = sample_rate
        self._callback: Optional[SampleCallback] = None

    def on_samples(self, callback: Optional[SampleCallback]):
        """Register the single consumer (None detaches it)."""
        self._callback = callback

    def open(self):
        """Start delivering audio. Raises SampleSourceError on failure."""
        raise NotImplementedError

    def close(self):
        """Stop delivering audio. Safe to call when not open."""
        raise NotImplementedError

    @property
    def is_open(self) -> bool:
        raise NotImplementedError

    def _deliver(self, samples: np.ndarray):
        callback = self._callback
        if callback is None:
            return
        samples.setflags(write=False)
        callback(samples)


class MicrophoneSource(SampleSource):
    """PyAudio input stream in callback mode."""

    def __init__(self, sample_rate: int = 44100, frames_per_buffer: int = 2048,
                 device_index: Optional[int] = None):
        super().__init__(sample_rate)
        self.frames_per_buffer = frames_per_buffer
        self.device_index = device_index
        self.audio = None
        self.stream = None
        self._lock = Lock()

    @property
    def is_open(self) -> bool:
        return self.stream is not None

    def open(self):
        if not AUDIO_AVAILABLE:
            raise SampleSourceError("Audio input not available (install pyaudio)")

        with self._lock:
            if self.stream is not None:
                return
            audio = None
            try:
                audio = pyaudio.PyAudio()
                device_index = self.device_index
                if device_index is None:
                    device_index = audio.get_default_input_device_info()['index']
                stream = audio.open(
                    format=pyaudio.paFloat32, channels=1, rate=self.sample_rate,
                    input=True, input_device_index=device_index,
                    frames_per_buffer=self.frames_per_buffer,
                    stream_callback=self._audio_callback, start=False
                )
                stream.start_stream()
            except Exception as e:
                if audio is not None:
                    audio.terminate()
                raise SampleSourceError(f"Could not open audio input: {e}") from e

            self.audio = audio
            self.stream = stream
            logger.info("Microphone open (device=%s, %d Hz, %d frames)",
                        device_index, self.sample_rate, self.frames_per_buffer)

    def close(self):
        with self._lock:
            stream, audio = self.stream, self.audio
            self.stream = None
            self.audio = None

        if stream is not None:
            try:
                stream.stop_stream()
                stream.close()
            except Exception:
                logger.exception("Error closing audio stream")
        if audio is not None:
            audio.terminate()
            logger.info("Microphone closed")

    def _audio_callback(self, in_data, frame_count, time_info, status):
        if status:
            logger.debug("Input stream status flags: %s", status)
        samples = np.frombuffer(in_data, dtype=np.float32).copy()
        try:
            self._deliver(samples)
        except Exception:
            # Never let an analysis error kill the PortAudio thread
            logger.exception("Sample consumer failed")
        return (None, pyaudio.paContinue)
