#!/usr/bin/env python3
"""ABOUTME: Tests for the autocorrelation pitch estimator on synthetic windows."""
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import numpy as np
import pytest

from tuning.conditioner import condition
from tuning.pitch_estimator import NO_PITCH, PitchEstimator

SAMPLE_RATE = 44100


def sine(frequency, n=2048, amplitude=0.5):
    t = np.arange(n) / SAMPLE_RATE
    return (amplitude * np.sin(2 * np.pi * frequency * t)).astype(np.float32)


def test_lag_range_for_44100():
    estimator = PitchEstimator(SAMPLE_RATE)
    assert estimator.min_period == 44
    assert estimator.max_period == 551
    assert estimator.lag_stride == 5


@pytest.mark.parametrize("frequency", [110.0, 220.0])
def test_detects_sine_within_five_percent(frequency):
    candidate = PitchEstimator(SAMPLE_RATE).estimate(condition(sine(frequency)))
    assert candidate.valid
    assert candidate.frequency_hz == pytest.approx(frequency, rel=0.05)


def test_short_window_is_invalid():
    assert PitchEstimator(SAMPLE_RATE).estimate(sine(220.0, n=100)) == NO_PITCH


def test_silence_is_invalid():
    assert PitchEstimator(SAMPLE_RATE).estimate(np.zeros(2048, dtype=np.float32)) == NO_PITCH


def test_white_noise_is_invalid():
    rng = np.random.default_rng(7)
    noise = rng.uniform(-0.5, 0.5, 2048).astype(np.float32)
    assert not PitchEstimator(SAMPLE_RATE).estimate(condition(noise)).valid


def test_invalid_candidate_has_zero_frequency():
    assert NO_PITCH.frequency_hz == 0.0
    assert NO_PITCH.valid is False
