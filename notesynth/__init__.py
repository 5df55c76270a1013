from __future__ import annotations

from .audio import DEFAULT_SAMPLE_RATE, concat, mix
from .config import PartSpec, SynthesisRequest, parse_request
from .errors import ConfigurationError, NoteSynthError, PlaybackError
from .logging_utils import configure_logging as _configure_logging
from .notation import NoteEvent, ParsedNotes, parse_notes, tokenize
from .pitch import NOTE_FREQUENCIES, base_frequency, note_frequency
from .playback import PlaybackHandle, get_default_backend, play_audio_data
from .synth import RenderedAudio, get_audio_data, render, render_note, render_part
from .waveforms import WAVEFORM_NAMES, WaveformName, build_waveforms

__all__ = [
    "DEFAULT_SAMPLE_RATE",
    "NOTE_FREQUENCIES",
    "WAVEFORM_NAMES",
    "ConfigurationError",
    "NoteEvent",
    "NoteSynthError",
    "ParsedNotes",
    "PartSpec",
    "PlaybackError",
    "PlaybackHandle",
    "RenderedAudio",
    "SynthesisRequest",
    "WaveformName",
    "base_frequency",
    "build_waveforms",
    "concat",
    "get_audio_data",
    "get_default_backend",
    "mix",
    "note_frequency",
    "parse_notes",
    "parse_request",
    "play_audio_data",
    "render",
    "render_note",
    "render_part",
    "tokenize",
]

__version__ = "0.1.0"

_configure_logging()
del _configure_logging
