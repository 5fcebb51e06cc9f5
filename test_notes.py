#!/usr/bin/env python3
"""ABOUTME: Tests for the note table, nearest-note lookup, cents arithmetic and name parsing.
ABOUTME: Run with pytest from the project root."""
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import pytest

from tuning.notes import (
    DEFAULT_TARGET, NOTE_TABLE, STANDARD_TUNING, cents_deviation, closest_note,
    frequency_for_note, normalize_note_name,
)


def test_table_spans_c0_to_b8_in_ascending_order():
    assert NOTE_TABLE[0].name == "C0"
    assert NOTE_TABLE[-1].name == "B8"
    frequencies = [entry.frequency_hz for entry in NOTE_TABLE]
    assert frequencies == sorted(frequencies)


def test_reference_pitches():
    assert frequency_for_note("A4") == 440.0
    assert frequency_for_note("E2") == 82.41
    assert frequency_for_note("E4") == 329.6
    assert frequency_for_note("Z9") is None


def test_standard_tuning_is_in_table():
    assert STANDARD_TUNING == ("E2", "A2", "D3", "G3", "B3", "E4")
    for name in STANDARD_TUNING:
        assert frequency_for_note(name) is not None
    assert DEFAULT_TARGET == "E4"


@pytest.mark.parametrize("frequency,expected", [
    (440.0, "A4"),
    (443.0, "A4"),
    (82.0, "E2"),
    (111.5, "A2"),
    (16.0, "C0"),
    (9000.0, "B8"),
])
def test_closest_note(frequency, expected):
    assert closest_note(frequency).name == expected


def test_closest_note_rejects_non_positive():
    assert closest_note(0.0) is None
    assert closest_note(-12.0) is None


def test_cents_deviation():
    assert cents_deviation(440.0, 440.0) == 0.0
    assert cents_deviation(880.0, 440.0) == pytest.approx(1200.0)
    assert cents_deviation(220.0, 440.0) == pytest.approx(-1200.0)
    # sharp is positive, flat negative
    assert cents_deviation(445.0, 440.0) > 0
    assert cents_deviation(435.0, 440.0) < 0


def test_cents_deviation_with_missing_input_is_zero():
    assert cents_deviation(0.0, 440.0) == 0.0
    assert cents_deviation(440.0, 0.0) == 0.0
    assert cents_deviation(-1.0, 440.0) == 0.0


@pytest.mark.parametrize("text,expected", [
    ("A4", "A4"),
    ("a4", "A4"),
    (" e2 ", "E2"),
    ("Eb2", "D#2"),
    ("Bb3", "A#3"),
    ("F#3", "F#3"),
    ("Cb4", "B3"),
    ("B#3", "C4"),
])
def test_normalize_note_name(text, expected):
    assert normalize_note_name(text) == expected


@pytest.mark.parametrize("text", ["", "H2", "A", "440", "A#", "E 2"])
def test_normalize_note_name_rejects_garbage(text):
    assert normalize_note_name(text) is None
