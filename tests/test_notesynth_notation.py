import logging
import math

import numpy as np
import pytest

from notesynth.notation import (
    NOISE_TRIGGER_HZ,
    SILENCE_HZ,
    NoteToken,
    parse_notes,
    resolve_token,
    tokenize,
)
from notesynth.pitch import SEMITONE_RATIO
from notesynth.synth import get_audio_data


def _single(notes: str, **kwargs: float):
    parsed = parse_notes(notes, **kwargs)
    assert len(parsed.events) == 1
    return parsed.events[0]


def test_sustain_markers_extend_duration() -> None:
    event = _single("A4~~")
    assert event.frequency == 440.0
    assert event.duration == 3


def test_plain_token_lasts_one_unit() -> None:
    assert _single("A4").duration == 1


def test_doubling_speed_halves_every_duration() -> None:
    normal = parse_notes("C4 D4~ E4~~")
    fast = parse_notes("C4 D4~ E4~~", speed=2.0)
    assert [e.duration / 2 for e in normal.events] == [e.duration for e in fast.events]


def test_sustain_markers_may_be_separated_by_bars_and_spaces() -> None:
    stream = tokenize("G3 ~  F#3~ | - ~ G3")
    assert [t.sustain for t in stream.tokens] == [1, 3, 0]
    assert stream.tokens[1].modifier == "#"
    assert stream.tokens[1].octave == 3


def test_missing_octave_defaults_to_four() -> None:
    assert _single("E").frequency == pytest.approx(440 * 2 ** (-5 / 12))


def test_multi_digit_octave() -> None:
    assert _single("A10").frequency == pytest.approx(440 * 2**6)


def test_lowercase_letters_are_notes() -> None:
    assert _single("a4").frequency == 440.0


def test_flat_modifier_after_letter() -> None:
    assert _single("Ab4").frequency == pytest.approx(440 / SEMITONE_RATIO)
    assert _single("bb3").frequency == pytest.approx(440 * 2 ** (2 / 12) / SEMITONE_RATIO / 2)


@pytest.mark.parametrize("notes", ["_", ".", "_#5", ".b2~"])
def test_rests_are_silent_regardless_of_modifiers(notes: str) -> None:
    event = _single(notes)
    assert event.frequency == SILENCE_HZ
    assert event.is_rest


def test_x_triggers_noise_sentinel() -> None:
    event = _single("X~")
    assert event.frequency == NOISE_TRIGGER_HZ
    assert event.duration == 2


def test_pitch_shift_is_a_fractional_octave() -> None:
    assert _single("A4", pitch_shift=12).frequency == pytest.approx(880.0)
    assert _single("A4", pitch_shift=-1).frequency == pytest.approx(440 / SEMITONE_RATIO)
    assert _single("_", pitch_shift=7).frequency == SILENCE_HZ


def test_unrecognised_characters_are_dropped_and_counted() -> None:
    parsed = parse_notes("H C4 x!")
    assert len(parsed.events) == 1
    assert parsed.skipped == 3


def test_leading_sustain_without_note_is_dropped() -> None:
    parsed = parse_notes("~ ~ C4")
    assert len(parsed.events) == 1
    assert parsed.events[0].duration == 1
    assert parsed.skipped == 2


def test_separators_are_not_counted_as_skipped() -> None:
    stream = tokenize("\n\t| C4 |\n  D4 |")
    assert [t.letter for t in stream.tokens] == ["C", "D"]
    assert stream.skipped == 0


def test_token_positions_point_at_letters() -> None:
    stream = tokenize("C4  E4~ G4")
    assert [t.position for t in stream.tokens] == [0, 4, 8]


def test_resolve_token_uses_speed() -> None:
    event = resolve_token(NoteToken(letter="A", octave=4, sustain=1), speed=0.5)
    assert event.duration == 4


def test_total_units_sums_durations() -> None:
    assert parse_notes("C~ D E~~").total_units == 6


def test_dropped_characters_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="notesynth.notation")
    parse_notes("C4 ?? D4")
    assert any("Dropped 2" in record.getMessage() for record in caplog.records)


def test_empty_string_has_no_events() -> None:
    parsed = parse_notes("")
    assert parsed.events == ()
    assert parsed.skipped == 0


def test_huge_octave_saturates_to_infinity() -> None:
    assert _single("A1100").frequency == math.inf


def test_octave_digits_beyond_int_conversion_limit() -> None:
    event = _single("A" + "1" * 5000 + "~")
    assert event.frequency == math.inf
    assert event.duration == 2


def test_huge_pitch_shift_does_not_raise() -> None:
    assert _single("A4", pitch_shift=20_000).frequency == math.inf
    assert _single("A4", pitch_shift=-20_000).frequency == 0.0


def test_huge_pitch_shift_still_renders_full_length() -> None:
    audio = get_audio_data({"sample_rate": 1000, "pitch_shift": 20_000, "parts": {"m": "A4"}})
    assert audio.size == 12_100
    assert np.all(audio[:12_000] == 0.0)
