"""Autocorrelation pitch estimator for a single monophonic analysis window."""
from typing import NamedTuple

import numpy as np

MIN_ANALYSIS_SAMPLES = 256

# Guitar fundamental range searched by the estimator (Hz).
MIN_FREQUENCY = 80.0
MAX_FREQUENCY = 1000.0

CORRELATION_THRESHOLD = 0.4

# Roughly this many lags are evaluated per window, whatever the sample rate.
LAG_STEPS = 100


class PitchCandidate(NamedTuple):
    """Raw estimator output. frequency_hz is 0.0 when valid is False."""
    frequency_hz: float
    valid: bool


NO_PITCH = PitchCandidate(0.0, False)


class PitchEstimator:
    """Finds the strongest period of a window by normalized autocorrelation.

    The lag range is sampled at a fixed stride instead of exhaustively, so the
    returned frequency is quantized to that stride. The downstream 5% stability
    tolerance absorbs the error.
    """

    def __init__(self, sample_rate: int = 44100):
        self.sample_rate = sample_rate
        self.min_period = max(1, round(sample_rate / MAX_FREQUENCY))
        self.max_period = round(sample_rate / MIN_FREQUENCY)
        self.lag_stride = max(1, (self.max_period - self.min_period) // LAG_STEPS)

    def estimate(self, samples: np.ndarray) -> PitchCandidate:
        """Estimate the fundamental of one window.

        Args:
            samples: Conditioned mono samples.

        Returns:
            PitchCandidate; invalid for short windows, weak periodicity or a
            result outside the guitar range.
        """
        x = np.asarray(samples, dtype=np.float64)
        n = len(x)
        if n < MIN_ANALYSIS_SAMPLES:
            return NO_PITCH

        upper = min(self.max_period, n // 3)
        best_lag = 0
        max_correlation = 0.0

        for lag in range(self.min_period, upper, self.lag_stride):
            count = min(n - lag, n // 2)
            head = x[:count]
            energy = float(np.dot(head, head))
            if energy <= 0:
                continue
            correlation = float(np.dot(head, x[lag:lag + count])) / energy
            if correlation > max_correlation:
                max_correlation = correlation
                best_lag = lag

        if best_lag == 0 or max_correlation <= CORRELATION_THRESHOLD:
            return NO_PITCH

        frequency = self.sample_rate / best_lag
        if frequency < MIN_FREQUENCY or frequency > MAX_FREQUENCY:
            return NO_PITCH
        return PitchCandidate(frequency, True)
