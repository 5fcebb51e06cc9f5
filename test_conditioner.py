#!/usr/bin/env python3
"""ABOUTME: Tests for the high-pass filter and RMS noise gate applied before pitch estimation."""
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import numpy as np

from tuning.conditioner import condition, high_pass, noise_gate


def test_high_pass_keeps_length_and_starts_at_zero():
    x = np.sin(np.linspace(0, 20, 500)).astype(np.float32) + 0.5
    y = high_pass(x)
    assert len(y) == len(x)
    assert y[0] == 0.0
    assert y.dtype == np.float32


def test_high_pass_removes_dc():
    y = high_pass(np.full(1000, 0.7, dtype=np.float32))
    assert np.all(y == 0.0)


def test_high_pass_matches_recurrence():
    x = np.array([0.0, 1.0, 1.0, 0.0], dtype=np.float32)
    y = high_pass(x, alpha=0.5)
    # y1 = .5*(0+1-0) = .5, y2 = .5*(.5+0) = .25, y3 = .5*(.25-1) = -.375
    np.testing.assert_allclose(y, [0.0, 0.5, 0.25, -0.375], rtol=1e-6)


def test_high_pass_short_inputs():
    assert len(high_pass(np.zeros(0))) == 0
    assert list(high_pass(np.array([0.3]))) == [0.0]


def test_noise_gate_zeroes_quiet_samples():
    x = np.array([1.0, 0.01, -1.0, 0.0], dtype=np.float32)
    np.testing.assert_array_equal(noise_gate(x), [1.0, 0.0, -1.0, 0.0])


def test_noise_gate_on_silence_stays_silent():
    gated = noise_gate(np.zeros(256, dtype=np.float32))
    assert len(gated) == 256
    assert not np.any(gated)


def test_condition_does_not_modify_input():
    x = np.sin(np.arange(2048) * 0.05).astype(np.float32)
    original = x.copy()
    out = condition(x)
    np.testing.assert_array_equal(x, original)
    assert len(out) == len(x)


def test_condition_empty():
    assert len(condition(np.zeros(0, dtype=np.float32))) == 0
