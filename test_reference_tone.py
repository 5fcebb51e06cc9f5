#!/usr/bin/env python3
"""ABOUTME: Tests for reference tone synthesis (no audio device needed)."""
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import numpy as np

from music.reference_tone import ReferenceTone, render_tone


def test_render_tone_shape_and_type():
    pcm = render_tone(110.0, sample_rate=22050, duration=0.5)
    assert pcm.shape == (11025, 2)
    assert pcm.dtype == np.int16
    np.testing.assert_array_equal(pcm[:, 0], pcm[:, 1])


def test_render_tone_fades_in_and_out():
    pcm = render_tone(440.0, sample_rate=22050, duration=0.5, volume=1.0)
    assert pcm[0, 0] == 0
    assert pcm[-1, 0] == 0
    assert np.abs(pcm[:, 0]).max() > 30000


def test_render_tone_respects_volume():
    assert not np.any(render_tone(440.0, volume=0.0))
    quiet = np.abs(render_tone(440.0, volume=0.1)).max()
    assert quiet <= int(0.1 * 32767) + 1


def test_play_without_frequency_does_nothing():
    tone = ReferenceTone()
    assert not tone.play(None)
    assert not tone.play(0.0)
