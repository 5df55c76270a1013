from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError
from .waveforms import WaveformName

_LOGGER = logging.getLogger("notesynth.config")

# Alternate spellings accepted on input.
_WAVEFORM_ALIASES: Mapping[str, WaveformName] = MappingProxyType(
    {
        "whiteNoise": "white_noise",
        "white-noise": "white_noise",
    }
)


class PartSpec(BaseModel):
    """One voice: a note string plus how to sound it."""

    notes: str
    waveform: WaveformName = Field(default="sine", alias="waveForm")
    volume: float = 1.0
    fade: float = 0.0

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    @field_validator("waveform", mode="before")
    @classmethod
    def _normalize_waveform(cls, value: object) -> object:
        if isinstance(value, str):
            return _WAVEFORM_ALIASES.get(value, value)
        return value


class SynthesisRequest(BaseModel):
    """Everything needed to render one mono buffer.

    ``speed``, ``volume`` and ``pitch_shift`` apply to every part.
    ``pitch_shift`` is in semitones.
    """

    sample_rate: int = Field(gt=0, alias="sampleRate")
    parts: dict[str, PartSpec] = Field(default_factory=dict)
    speed: float = Field(default=1.0, gt=0)
    volume: float = 1.0
    pitch_shift: float = Field(default=0.0, alias="pitchShift")

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    @field_validator("parts", mode="before")
    @classmethod
    def _coerce_note_strings(cls, value: object) -> object:
        # Allow the shorthand {"melody": "C4 D4 E4"} for a default sine part.
        if not isinstance(value, Mapping):
            return value
        return {
            name: {"notes": part} if isinstance(part, str) else part
            for name, part in value.items()
        }


RequestInput = Union[SynthesisRequest, Mapping[str, Any]]


def parse_request(payload: Mapping[str, Any]) -> SynthesisRequest:
    """Parse a request payload, raising ConfigurationError on failure."""

    try:
        return SynthesisRequest.model_validate(payload)
    except ValidationError as exc:
        _LOGGER.warning("Failed to parse synthesis request: %s", exc, exc_info=True)
        raise ConfigurationError(str(exc)) from exc


def coerce_request(request: RequestInput) -> SynthesisRequest:
    match request:
        case SynthesisRequest():
            return request
        case Mapping():
            return parse_request(request)
        case _:
            raise ConfigurationError(f"Unsupported request type: {type(request).__name__}")
