"""
Architecture:

1. Notes: each part's note string is parsed into (frequency, duration) events
2. Render: every event becomes a buffer shaped by waveform, volume and fade
3. Assemble: parts are concatenated behind a silent lead-in, then mixed
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from .audio import FloatArray, as_buffer, concat, mix, silence
from .config import PartSpec, RequestInput, SynthesisRequest, coerce_request
from .notation import NoteEvent, ParsedNotes, parse_notes
from .waveforms import WaveformFn, WaveformName, build_waveforms

if TYPE_CHECKING:
    from .playback import PlaybackHandle

_LOGGER = logging.getLogger("notesynth.synth")

# One duration unit before speed scaling
DURATION_UNIT_SECONDS = 0.1
# Fixed silent padding in front of every part, independent of sample rate
LEAD_IN_SAMPLES = 12_000


class RenderedAudio(BaseModel):
    samples: FloatArray
    sample_rate: int
    skipped: dict[str, int] = Field(default_factory=dict)

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    @property
    def duration(self) -> float:
        return len(self.samples) / self.sample_rate

    def to_numpy(self) -> FloatArray:
        return self.samples

    def play(self) -> PlaybackHandle:
        from .playback import play_audio_data

        return play_audio_data(self.samples, self.sample_rate)


def render_note(
    frequency: float,
    seconds: float,
    waveform: WaveformFn,
    *,
    sample_rate: int,
    volume: float = 1.0,
    fade: float = 0.0,
) -> FloatArray:
    """Render one note.

    The buffer holds ``floor(sample_rate * seconds)`` samples. ``fade`` scales
    a linear ramp from 1 at the first sample toward ``1 - fade`` at the end;
    values outside [0, 1] are applied as given.
    """
    length = math.floor(sample_rate * seconds)
    if length <= 0:
        return silence(0)

    index = np.arange(length, dtype=np.float64)
    # Non-finite frequencies (huge octaves) render as NaN rather than raising.
    with np.errstate(over="ignore", invalid="ignore"):
        phase = index * (frequency / sample_rate)
        envelope = 1 - (index / length) * fade
        return as_buffer(waveform(phase) * volume * envelope)


def render_events(
    events: Sequence[NoteEvent],
    waveform: WaveformFn,
    *,
    sample_rate: int,
    volume: float = 1.0,
    fade: float = 0.0,
) -> FloatArray:
    """Render resolved events back to back behind the silent lead-in."""
    notes = [
        render_note(
            event.frequency,
            event.duration * DURATION_UNIT_SECONDS,
            waveform,
            sample_rate=sample_rate,
            volume=volume,
            fade=fade,
        )
        for event in events
    ]
    return concat([silence(LEAD_IN_SAMPLES), *notes])


def _render_parsed(
    part: PartSpec,
    *,
    sample_rate: int,
    waveforms: Mapping[WaveformName, WaveformFn],
    speed: float,
    volume: float,
    pitch_shift: float,
) -> tuple[FloatArray, ParsedNotes]:
    parsed = parse_notes(part.notes, speed=speed, pitch_shift=pitch_shift)
    buffer = render_events(
        parsed.events,
        waveforms[part.waveform],
        sample_rate=sample_rate,
        volume=part.volume * volume,
        fade=part.fade,
    )
    return buffer, parsed


def render_part(
    part: PartSpec,
    *,
    sample_rate: int,
    waveforms: Mapping[WaveformName, WaveformFn],
    speed: float = 1.0,
    volume: float = 1.0,
    pitch_shift: float = 0.0,
) -> FloatArray:
    """Render a part as lead-in silence followed by each of its notes."""
    buffer, _ = _render_parsed(
        part,
        sample_rate=sample_rate,
        waveforms=waveforms,
        speed=speed,
        volume=volume,
        pitch_shift=pitch_shift,
    )
    return buffer


def render(request: RequestInput, *, rng: np.random.Generator | None = None) -> RenderedAudio:
    """
    Render every part of a request and mix them into one mono buffer.

    Args:
        request: SynthesisRequest or a mapping accepted by ``parse_request``
        rng: Optional RNG for deterministic white noise.
    """
    config: SynthesisRequest = coerce_request(request)
    waveforms = build_waveforms(rng)

    buffers: list[FloatArray] = []
    skipped: dict[str, int] = {}
    for name, part in config.parts.items():
        buffer, parsed = _render_parsed(
            part,
            sample_rate=config.sample_rate,
            waveforms=waveforms,
            speed=config.speed,
            volume=config.volume,
            pitch_shift=config.pitch_shift,
        )
        buffers.append(buffer)
        skipped[name] = parsed.skipped

    samples = mix(buffers)
    dropped = {name: count for name, count in skipped.items() if count}
    if dropped:
        _LOGGER.debug("Unrecognised note characters dropped: %s", dropped)
    _LOGGER.debug(
        "Rendered %d part(s) into %d samples at %d Hz",
        len(buffers),
        samples.size,
        config.sample_rate,
    )
    return RenderedAudio(
        samples=samples,
        sample_rate=config.sample_rate,
        skipped=skipped,
    )


def get_audio_data(request: RequestInput, *, rng: np.random.Generator | None = None) -> FloatArray:
    """Render a request and return only the mixed samples."""
    return render(request, rng=rng).samples
