"""
Note string tokenizer and resolver.

A note string is a run of tokens, each shaped like::

    letter [#|b] [octave digits] separators* (('~'|'-') separators*)*

``letter`` is A-G (either case), ``X`` for a noise hit, or ``_``/``.`` for a
rest. Separators (whitespace and ``|``) only aid readability. Every trailing
sustain marker extends the token by one duration unit. Any other character
is dropped and counted in ``skipped``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .pitch import REFERENCE_OCTAVE, note_frequency

_LOGGER = logging.getLogger("notesynth.notation")

REST_LETTERS = frozenset("_.")
NOISE_LETTER = "X"
NOTE_LETTERS = frozenset("ABCDEFGabcdefg")
TOKEN_LETTERS = NOTE_LETTERS | REST_LETTERS | {NOISE_LETTER}
MODIFIERS = frozenset("#b")
SUSTAIN_MARKERS = frozenset("~-")
BAR_LINE = "|"
_DIGITS = frozenset("0123456789")

SILENCE_HZ = 0.0
# Any non-zero frequency works: the noise generator only checks for phase 0.
NOISE_TRIGGER_HZ = 1.0


@dataclass(frozen=True, slots=True)
class NoteToken:
    """One lexical token of a note string."""

    letter: str
    modifier: str | None = None
    octave: float | None = None
    sustain: int = 0
    position: int = 0


@dataclass(frozen=True, slots=True)
class TokenStream:
    tokens: tuple[NoteToken, ...] = ()
    skipped: int = 0


@dataclass(frozen=True, slots=True)
class NoteEvent:
    """A resolved step: frequency in Hz and length in duration units."""

    frequency: float
    duration: float

    @property
    def is_rest(self) -> bool:
        return self.frequency == SILENCE_HZ


@dataclass(frozen=True, slots=True)
class ParsedNotes:
    events: tuple[NoteEvent, ...] = ()
    skipped: int = 0

    @property
    def total_units(self) -> float:
        return sum(event.duration for event in self.events)


def _is_separator(char: str) -> bool:
    return char == BAR_LINE or char.isspace()


def _skip_separators(text: str, index: int) -> int:
    while index < len(text) and _is_separator(text[index]):
        index += 1
    return index


def tokenize(notes: str) -> TokenStream:
    """Split a note string into tokens, left to right and greedy."""
    tokens: list[NoteToken] = []
    skipped = 0
    index = 0
    end = len(notes)

    while index < end:
        char = notes[index]
        if char not in TOKEN_LETTERS:
            if not _is_separator(char):
                skipped += 1
            index += 1
            continue

        start = index
        index += 1

        modifier: str | None = None
        if index < end and notes[index] in MODIFIERS:
            modifier = notes[index]
            index += 1

        digits_start = index
        while index < end and notes[index] in _DIGITS:
            index += 1
        octave = float(notes[digits_start:index]) if index > digits_start else None

        index = _skip_separators(notes, index)
        sustain = 0
        while index < end and notes[index] in SUSTAIN_MARKERS:
            sustain += 1
            index = _skip_separators(notes, index + 1)

        tokens.append(
            NoteToken(
                letter=char,
                modifier=modifier,
                octave=octave,
                sustain=sustain,
                position=start,
            )
        )

    return TokenStream(tokens=tuple(tokens), skipped=skipped)


def resolve_token(token: NoteToken, *, speed: float = 1.0, pitch_shift: float = 0.0) -> NoteEvent:
    """Map a token to its frequency and duration.

    ``pitch_shift`` is in semitones and is applied as a fractional octave.
    """
    duration = (token.sustain + 1) / speed

    if token.letter in REST_LETTERS:
        return NoteEvent(frequency=SILENCE_HZ, duration=duration)
    if token.letter == NOISE_LETTER:
        return NoteEvent(frequency=NOISE_TRIGGER_HZ, duration=duration)

    octave = (REFERENCE_OCTAVE if token.octave is None else token.octave) + pitch_shift / 12
    frequency = note_frequency(token.letter, token.modifier, octave)
    return NoteEvent(frequency=frequency, duration=duration)


def parse_notes(notes: str, *, speed: float = 1.0, pitch_shift: float = 0.0) -> ParsedNotes:
    stream = tokenize(notes)
    if stream.skipped:
        _LOGGER.debug("Dropped %d unrecognised character(s) from note string", stream.skipped)
    events = tuple(
        resolve_token(token, speed=speed, pitch_shift=pitch_shift) for token in stream.tokens
    )
    return ParsedNotes(events=events, skipped=stream.skipped)
