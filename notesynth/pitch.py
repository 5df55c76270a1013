from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Literal, TypeAlias

import numpy as np

NoteLetter: TypeAlias = Literal["C", "D", "E", "F", "G", "A", "B"]
Modifier: TypeAlias = Literal["#", "b"]

A4_FREQUENCY = 440.0
REFERENCE_OCTAVE = 4
OCTAVE_RATIO = 2.0
SEMITONE_RATIO = OCTAVE_RATIO ** (1 / 12)

# Semitone distance of each natural note from A4 (octave 4)
NOTE_OFFSETS: Mapping[NoteLetter, int] = MappingProxyType(
    {
        "C": -9,
        "D": -7,
        "E": -5,
        "F": -4,
        "G": -2,
        "A": 0,
        "B": 2,
    }
)

# Natural note frequencies at octave 4 - mapping proxy for immutability
NOTE_FREQUENCIES: Mapping[NoteLetter, float] = MappingProxyType(
    {letter: A4_FREQUENCY * OCTAVE_RATIO ** (offset / 12) for letter, offset in NOTE_OFFSETS.items()}
)

_MODIFIER_RATIOS: Mapping[str, float] = MappingProxyType(
    {
        "#": SEMITONE_RATIO,
        "b": 1 / SEMITONE_RATIO,
    }
)


def base_frequency(letter: str) -> float:
    """Frequency of a natural note letter at octave 4 (case-insensitive)."""
    key = letter.upper()
    if key not in NOTE_FREQUENCIES:
        raise ValueError(f"Unknown note letter: {letter!r}. Valid: {list(NOTE_FREQUENCIES)}")
    return NOTE_FREQUENCIES[key]  # type: ignore[index]


def note_frequency(
    letter: str,
    modifier: str | None = None,
    octave: float = REFERENCE_OCTAVE,
) -> float:
    """Equal-tempered frequency for a letter, optional sharp/flat and octave.

    ``octave`` may be fractional; a global pitch shift of ``n`` semitones is
    expressed as ``octave + n / 12``.
    """
    frequency = base_frequency(letter)
    frequency *= _MODIFIER_RATIOS.get(modifier or "", 1.0)
    # Huge octaves saturate to inf instead of raising OverflowError.
    with np.errstate(over="ignore"):
        octave_factor = np.power(OCTAVE_RATIO, octave - REFERENCE_OCTAVE, dtype=np.float64)
    return float(frequency * octave_factor)
