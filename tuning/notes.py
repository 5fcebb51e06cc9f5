"""Equal-tempered note table, nearest-note lookup and cents arithmetic."""
import math
import re
from typing import NamedTuple, Optional, Tuple

import mingus.core.notes as notes


class NoteEntry(NamedTuple):
    """One row of the note table."""
    name: str
    frequency_hz: float


# C0..B8 at A4 = 440 Hz. Values are the rounded standard pitches, not computed,
# so lookups are stable across platforms.
NOTE_TABLE: Tuple[NoteEntry, ...] = tuple(NoteEntry(name, freq) for name, freq in (
    ('C0', 16.35), ('C#0', 17.32), ('D0', 18.35), ('D#0', 19.45), ('E0', 20.60), ('F0', 21.83),
    ('F#0', 23.12), ('G0', 24.50), ('G#0', 25.96), ('A0', 27.50), ('A#0', 29.14), ('B0', 30.87),
    ('C1', 32.70), ('C#1', 34.65), ('D1', 36.71), ('D#1', 38.89), ('E1', 41.20), ('F1', 43.65),
    ('F#1', 46.25), ('G1', 49.00), ('G#1', 51.91), ('A1', 55.00), ('A#1', 58.27), ('B1', 61.74),
    ('C2', 65.41), ('C#2', 69.30), ('D2', 73.42), ('D#2', 77.78), ('E2', 82.41), ('F2', 87.31),
    ('F#2', 92.50), ('G2', 98.00), ('G#2', 103.8), ('A2', 110.0), ('A#2', 116.5), ('B2', 123.5),
    ('C3', 130.8), ('C#3', 138.6), ('D3', 146.8), ('D#3', 155.6), ('E3', 164.8), ('F3', 174.6),
    ('F#3', 185.0), ('G3', 196.0), ('G#3', 207.7), ('A3', 220.0), ('A#3', 233.1), ('B3', 246.9),
    ('C4', 261.6), ('C#4', 277.2), ('D4', 293.7), ('D#4', 311.1), ('E4', 329.6), ('F4', 349.2),
    ('F#4', 370.0), ('G4', 392.0), ('G#4', 415.3), ('A4', 440.0), ('A#4', 466.2), ('B4', 493.9),
    ('C5', 523.3), ('C#5', 554.4), ('D5', 587.3), ('D#5', 622.3), ('E5', 659.3), ('F5', 698.5),
    ('F#5', 740.0), ('G5', 784.0), ('G#5', 830.6), ('A5', 880.0), ('A#5', 932.3), ('B5', 987.8),
    ('C6', 1047.0), ('C#6', 1109.0), ('D6', 1175.0), ('D#6', 1245.0), ('E6', 1319.0), ('F6', 1397.0),
    ('F#6', 1480.0), ('G6', 1568.0), ('G#6', 1661.0), ('A6', 1760.0), ('A#6', 1865.0), ('B6', 1976.0),
    ('C7', 2093.0), ('C#7', 2217.0), ('D7', 2349.0), ('D#7', 2489.0), ('E7', 2637.0), ('F7', 2794.0),
    ('F#7', 2960.0), ('G7', 3136.0), ('G#7', 3322.0), ('A7', 3520.0), ('A#7', 3729.0), ('B7', 3951.0),
    ('C8', 4186.0), ('C#8', 4435.0), ('D8', 4699.0), ('D#8', 4978.0), ('E8', 5274.0), ('F8', 5588.0),
    ('F#8', 5920.0), ('G8', 6272.0), ('G#8', 6645.0), ('A8', 7040.0), ('A#8', 7459.0), ('B8', 7902.0),
))

_FREQUENCY_BY_NAME = {entry.name: entry.frequency_hz for entry in NOTE_TABLE}

# Open strings of a guitar in standard tuning, low to high.
# Auto mode only ever adopts one of these as its target.
STANDARD_TUNING: Tuple[str, ...] = ('E2', 'A2', 'D3', 'G3', 'B3', 'E4')

DEFAULT_TARGET = 'E4'

_NOTE_PATTERN = re.compile(r'^\s*([A-Ga-g])([#b]*)(-?\d)\s*$')


def closest_note(frequency_hz: float) -> Optional[NoteEntry]:
    """Find the table entry nearest to a frequency.

    Ties go to the first entry scanned (the lower note).

    Args:
        frequency_hz: Frequency in Hz.

    Returns:
        Nearest NoteEntry, or None if frequency_hz is zero or negative.
    """
    if frequency_hz <= 0:
        return None

    closest = None
    min_difference = math.inf
    for entry in NOTE_TABLE:
        difference = abs(frequency_hz - entry.frequency_hz)
        if difference < min_difference:
            min_difference = difference
            closest = entry
    return closest


def cents_deviation(detected_hz: float, target_hz: float) -> float:
    """Signed distance from target to detected in cents.

    Positive is sharp, negative is flat. Returns 0.0 when either input is
    zero or negative, which callers must not read as "in tune".
    """
    if detected_hz <= 0 or target_hz <= 0:
        return 0.0
    return 1200.0 * math.log2(detected_hz / target_hz)


def frequency_for_note(note_name: str) -> Optional[float]:
    """Look up the table frequency for an exact note name like "A4"."""
    return _FREQUENCY_BY_NAME.get(note_name)


def normalize_note_name(note_name: str) -> Optional[str]:
    """Convert a user-typed note name to the sharp spelling used by the table.

    Accepts lower case and flats ("eb2" -> "D#2"). Accidentals that cross an
    octave boundary move the octave ("Cb4" -> "B3", "B#3" -> "C4").

    Returns:
        Canonical name, or None if the text is not a note name.
    """
    if not note_name:
        return None
    match = _NOTE_PATTERN.match(note_name)
    if not match:
        return None

    letter, accidentals, octave = match.groups()
    spelled = letter.upper() + accidentals
    if not notes.is_valid_note(spelled):
        return None

    # mingus folds into 0..11, so recover the octave carry ourselves
    raw = notes.note_to_int(letter.upper()) + accidentals.count('#') - accidentals.count('b')
    pitch_class = notes.note_to_int(spelled)
    return f"{notes.int_to_note(pitch_class)}{int(octave) + raw // 12}"
