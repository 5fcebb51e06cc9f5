#!/usr/bin/env python3
"""ABOUTME: Tests for the frequency debouncer: threshold, tolerance and re-anchoring."""
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from tuning.pitch_estimator import NO_PITCH, PitchCandidate
from tuning.stability import INITIAL_STATE, StabilityFilter, StabilityState


def run(frequencies, stability_filter=None):
    stability_filter = stability_filter or StabilityFilter()
    state = INITIAL_STATE
    outputs = []
    for frequency in frequencies:
        candidate = NO_PITCH if frequency is None else PitchCandidate(frequency, True)
        stable, state = stability_filter.filter(candidate, state)
        outputs.append(stable)
    return outputs, state


def test_reports_after_three_agreeing_readings():
    outputs, state = run([440.0, 441.0, 440.5])
    assert outputs == [None, None, 440.5]
    assert state == StabilityState(440.0, 3)


def test_keeps_reporting_while_stable():
    outputs, _ = run([440.0, 440.0, 440.0, 441.0])
    assert outputs == [None, None, 440.0, 441.0]


def test_change_inside_tolerance_counts_as_same_reading():
    # 460 is within 5% of the 440 anchor (22 Hz), so it does not restart the count
    outputs, state = run([440.0, 460.0, 460.0, 460.0])
    assert outputs == [None, None, 460.0, 460.0]
    assert state.last_frequency == 440.0


def test_jump_outside_tolerance_reanchors():
    outputs, state = run([440.0, 440.0, 440.0, 330.0])
    assert outputs == [None, None, 440.0, None]
    assert state == StabilityState(330.0, 1)


def test_invalid_candidate_resets():
    outputs, state = run([440.0, 440.0, None, 440.0, 440.0])
    assert outputs == [None, None, None, None, None]
    assert state == StabilityState(440.0, 2)


def test_slow_drift_never_settles():
    # each step moves more than 5% from the previous anchor
    outputs, _ = run([100.0, 106.0, 112.4, 119.2, 126.4])
    assert outputs == [None] * 5


def test_custom_threshold():
    outputs, _ = run([200.0, 200.0], StabilityFilter(threshold=2))
    assert outputs == [None, 200.0]


def test_filter_does_not_mutate_state():
    state = StabilityState(440.0, 1)
    StabilityFilter().filter(PitchCandidate(440.0, True), state)
    assert state == StabilityState(440.0, 1)
