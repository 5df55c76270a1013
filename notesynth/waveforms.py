"""
Periodic waveform generators.

Each generator maps a phase (cycles elapsed, not radians) to an amplitude in
[-1, 1]. Generators are vectorised over numpy arrays so a whole note renders
in one call. Every generator returns exactly 0 at phase 0, which is how a
zero-frequency note renders as true silence.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Callable, Literal, TypeAlias

import numpy as np
from numpy.typing import ArrayLike, NDArray

WaveformName: TypeAlias = Literal["sine", "square", "sawtooth", "triangle", "white_noise"]
PhaseArray: TypeAlias = NDArray[np.float64]
WaveformFn: TypeAlias = Callable[[ArrayLike], PhaseArray]

WAVEFORM_NAMES: tuple[WaveformName, ...] = ("sine", "square", "sawtooth", "triangle", "white_noise")


def _as_phase(phase: ArrayLike) -> PhaseArray:
    return np.asarray(phase, dtype=np.float64)


def sine(phase: ArrayLike) -> PhaseArray:
    return np.sin(2 * np.pi * _as_phase(phase))


def square(phase: ArrayLike) -> PhaseArray:
    """Sign of the sine; 0 wherever the sine is exactly 0."""
    return np.sign(np.sin(2 * np.pi * _as_phase(phase)))


def sawtooth(phase: ArrayLike) -> PhaseArray:
    """Ramp from -1 to 1 with period 1, discontinuous at half-integers."""
    x = _as_phase(phase)
    return (x - np.floor(x + 0.5)) * 2


def triangle(phase: ArrayLike) -> PhaseArray:
    return 1 - np.abs(sawtooth(_as_phase(phase) - 0.25)) * 2


def make_white_noise(rng: np.random.Generator | None = None) -> WaveformFn:
    """Build a noise generator drawing from ``rng``.

    The phase is ignored except that phase 0 yields 0, so silent steps stay
    silent.
    """
    local_rng = rng or np.random.default_rng()

    def white_noise(phase: ArrayLike) -> PhaseArray:
        x = _as_phase(phase)
        noise = local_rng.uniform(-1.0, 1.0, size=x.shape)
        return np.where(x == 0, 0.0, noise)

    return white_noise


def build_waveforms(rng: np.random.Generator | None = None) -> Mapping[WaveformName, WaveformFn]:
    return MappingProxyType(
        {
            "sine": sine,
            "square": square,
            "sawtooth": sawtooth,
            "triangle": triangle,
            "white_noise": make_white_noise(rng),
        }
    )
