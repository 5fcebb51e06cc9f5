"""Frequency debouncing: a reading is reported only after it repeats."""
from typing import NamedTuple, Optional, Tuple

from tuning.pitch_estimator import PitchCandidate

STABILITY_THRESHOLD = 3

# Relative distance from the anchored frequency still counted as "the same" reading.
STABILITY_TOLERANCE = 0.05


class StabilityState(NamedTuple):
    """Anchor frequency and how many consecutive readings agreed with it."""
    last_frequency: Optional[float]
    consecutive_stable_count: int


INITIAL_STATE = StabilityState(None, 0)


class StabilityFilter:
    """Pure debouncer. State is passed in and returned, never held.

    A reading outside the tolerance re-anchors on the new frequency and starts
    counting from one again. A slow drift that keeps leaving the tolerance
    therefore never settles; this is intended behaviour, not smoothing.
    """

    def __init__(self, threshold: int = STABILITY_THRESHOLD, tolerance: float = STABILITY_TOLERANCE):
        self.threshold = threshold
        self.tolerance = tolerance

    def filter(self, candidate: PitchCandidate,
               state: StabilityState) -> Tuple[Optional[float], StabilityState]:
        """Feed one candidate.

        Returns:
            (stable frequency or None, new state).
        """
        if not candidate.valid:
            return None, INITIAL_STATE

        frequency = candidate.frequency_hz
        if state.last_frequency is None:
            new_state = StabilityState(frequency, 1)
        elif abs(frequency - state.last_frequency) <= state.last_frequency * self.tolerance:
            new_state = StabilityState(state.last_frequency, state.consecutive_stable_count + 1)
        else:
            new_state = StabilityState(frequency, 1)

        if new_state.consecutive_stable_count >= self.threshold:
            return frequency, new_state
        return None, new_state
