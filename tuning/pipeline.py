"""ABOUTME: Per-buffer analysis path: retain, window, condition, estimate.
ABOUTME: Stateless apart from the bounded history of recent buffers."""
from collections import deque
from threading import Lock
from typing import List

import numpy as np

from tuning.conditioner import condition
from tuning.pitch_estimator import PitchCandidate, PitchEstimator

DEFAULT_WINDOW_SIZE = 2048
DEFAULT_HISTORY_SIZE = 5


class RecentBufferHistory:
    """Bounded FIFO of the most recent sample buffers, oldest evicted first."""

    def __init__(self, capacity: int = DEFAULT_HISTORY_SIZE):
        if capacity < 1:
            raise ValueError("history capacity must be at least 1")
        self.capacity = capacity
        self._buffers = deque(maxlen=capacity)
        self._lock = Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffers)

    def append(self, samples: np.ndarray):
        """Retain a buffer. The stored array is read-only."""
        buffer = np.array(samples, dtype=np.float32).reshape(-1)
        buffer.setflags(write=False)
        with self._lock:
            self._buffers.append(buffer)

    def buffers(self) -> List[np.ndarray]:
        """Retained buffers, oldest first."""
        with self._lock:
            return list(self._buffers)

    def latest_window(self, size: int) -> np.ndarray:
        """The last `size` samples across retained buffers.

        Shorter than `size` when the history does not hold enough audio yet.
        """
        with self._lock:
            buffers = list(self._buffers)
        if not buffers:
            return np.zeros(0, dtype=np.float32)

        collected = []
        total = 0
        for buffer in reversed(buffers):
            collected.append(buffer)
            total += len(buffer)
            if total >= size:
                break
        window = np.concatenate(list(reversed(collected)))
        return window[-size:]

    def clear(self):
        with self._lock:
            self._buffers.clear()


class PitchPipeline:
    """Turns incoming audio chunks into pitch candidates.

    Chunks of any length are accepted; the estimator always sees the most
    recent `window_size` samples from the retained history.
    """

    def __init__(self, sample_rate: int = 44100, window_size: int = DEFAULT_WINDOW_SIZE,
                 history_size: int = DEFAULT_HISTORY_SIZE):
        self.sample_rate = sample_rate
        self.window_size = window_size
        self.history = RecentBufferHistory(history_size)
        self.estimator = PitchEstimator(sample_rate)

    def analyze(self, samples: np.ndarray) -> PitchCandidate:
        """Retain a chunk and estimate the pitch of the current window."""
        self.history.append(samples)
        window = self.history.latest_window(self.window_size)
        return self.estimator.estimate(condition(window))

    def reset(self):
        """Forget retained audio, e.g. when a session stops."""
        self.history.clear()
