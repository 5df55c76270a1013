from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

import numpy as np
from numpy.typing import NDArray

FloatArray = NDArray[np.float32]
AudioNumbers = NDArray[np.floating[Any]] | Sequence[float] | FloatArray

DEFAULT_SAMPLE_RATE = 44_100


def as_buffer(audio: AudioNumbers) -> FloatArray:
    """Flatten to a mono float32 buffer without touching the values."""
    return np.asarray(audio, dtype=np.float32).reshape(-1)


def silence(length: int) -> FloatArray:
    return np.zeros(max(length, 0), dtype=np.float32)


def concat(buffers: Iterable[AudioNumbers]) -> FloatArray:
    """Join buffers end to end, in order."""
    chunks = [as_buffer(buffer) for buffer in buffers]
    if not chunks:
        return silence(0)
    return np.concatenate(chunks)


def mix(buffers: Sequence[AudioNumbers]) -> FloatArray:
    """Sum buffers sample by sample.

    The result is as long as the longest input; shorter inputs count as
    silence past their end. Nothing is clipped or normalized.
    """
    arrays = [as_buffer(buffer) for buffer in buffers]
    length = max((array.size for array in arrays), default=0)
    out = silence(length)
    for array in arrays:
        out[: array.size] += array
    return out


def ensure_audio_contract(audio: AudioNumbers) -> FloatArray:
    """Clip to [-1, 1] for output devices."""

    mono = as_buffer(audio)
    if mono.size == 0:
        return mono
    return np.clip(mono, -1.0, 1.0)
