#!/usr/bin/env python3
"""ABOUTME: Tests for graph point colouring and the capped graph buffer."""
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import pytest

from tuning.graph import ColorTier, GraphBuffer, make_point, tier_for_cents


@pytest.mark.parametrize("cents,tier", [
    (0.0, ColorTier.IN_TUNE),
    (4.9, ColorTier.IN_TUNE),
    (-4.9, ColorTier.IN_TUNE),
    (5.0, ColorTier.SLIGHT),
    (-14.9, ColorTier.SLIGHT),
    (15.0, ColorTier.FAR),
    (-80.0, ColorTier.FAR),
])
def test_tier_for_cents(cents, tier):
    assert tier_for_cents(cents) is tier


def test_make_point_without_reading_is_empty():
    point = make_point(None, 12.5)
    assert point.tier is ColorTier.EMPTY
    assert point.cents_deviation is None
    assert point.timestamp == 12.5
    assert not point.has_data


def test_make_point_with_reading():
    point = make_point(-7.0, 1.0)
    assert point.tier is ColorTier.SLIGHT
    assert point.has_data


def test_buffer_keeps_most_recent_points():
    buffer = GraphBuffer(max_points=3)
    for i in range(5):
        buffer.append(make_point(float(i), float(i)))

    assert len(buffer) == 3
    assert [p.timestamp for p in buffer.snapshot()] == [2.0, 3.0, 4.0]

    buffer.clear()
    assert buffer.snapshot() == ()


def test_buffer_rejects_zero_size():
    with pytest.raises(ValueError):
        GraphBuffer(0)
