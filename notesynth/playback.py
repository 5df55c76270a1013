from __future__ import annotations

import functools
import logging
import threading
from typing import Any, Callable

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict

from .audio import DEFAULT_SAMPLE_RATE, AudioNumbers, FloatArray, ensure_audio_contract
from .errors import PlaybackError

_LOGGER = logging.getLogger("notesynth.playback")


class ActiveSound(BaseModel):
    """Backend-level handle for one buffer that is currently playing."""

    wait: Callable[[], None]
    stop: Callable[[], None]

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )


class PlaybackBackend(BaseModel):
    name: str
    default_sample_rate: int = DEFAULT_SAMPLE_RATE
    start: Callable[[FloatArray, int], ActiveSound]

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )


class PlaybackHandle:
    """Playback in progress.

    ``finished`` is set once when the buffer plays to the end. It is never set
    after ``stop()``.
    """

    def __init__(self, sound: ActiveSound, *, sample_rate: int, duration: float) -> None:
        self._sound = sound
        self.sample_rate = sample_rate
        self.duration = duration
        self.finished = threading.Event()
        self._stopped = threading.Event()
        self._error: BaseException | None = None
        self._thread = threading.Thread(target=self._watch, daemon=True)
        self._thread.start()

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    def _watch(self) -> None:
        try:
            self._sound.wait()
        except Exception as exc:
            _LOGGER.warning("Playback failed: %s", exc, exc_info=True)
            self._error = exc
            return
        if not self._stopped.is_set():
            self.finished.set()

    def stop(self) -> None:
        if self._stopped.is_set():
            return
        self._stopped.set()
        self._sound.stop()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until playback ends or is stopped; True if it finished naturally."""
        self._thread.join(timeout)
        if self._error is not None:
            raise PlaybackError(f"Playback failed: {self._error}") from self._error
        return self.finished.is_set()


def _load_backend() -> PlaybackBackend | None:
    return _load_sounddevice() or _load_simpleaudio()


@functools.lru_cache(maxsize=1)
def get_default_backend() -> PlaybackBackend:
    """Resolve the module-wide playback backend once and reuse it."""
    backend = _load_backend()
    if backend is None:
        raise PlaybackError(
            "Playback requires sounddevice or simpleaudio. "
            "Install one of them (pip install 'notesynth[playback]')."
        )
    _LOGGER.debug("Using %s playback backend", backend.name)
    return backend


def play_audio_data(
    samples: AudioNumbers,
    sample_rate: int | None = None,
    *,
    backend: PlaybackBackend | None = None,
) -> PlaybackHandle:
    """Start playing a mono buffer and return immediately."""
    active_backend = backend or get_default_backend()
    rate = sample_rate or active_backend.default_sample_rate
    if rate <= 0:
        raise PlaybackError(f"Sample rate must be positive, got {rate}")
    normalized = ensure_audio_contract(samples)
    sound = active_backend.start(normalized, rate)
    return PlaybackHandle(sound, sample_rate=rate, duration=normalized.size / rate)


def _load_sounddevice() -> PlaybackBackend | None:
    try:
        import sounddevice as sd_module  # type: ignore[import]
    except (ImportError, OSError) as exc:
        # OSError: the module imports but PortAudio itself is missing.
        _LOGGER.info("sounddevice not available: %s", exc, exc_info=True)
        return None
    sd: Any = sd_module

    try:
        device = sd.query_devices(kind="output")
        default_rate = int(device["default_samplerate"])
    except Exception as exc:
        _LOGGER.info("No sounddevice output device: %s", exc, exc_info=True)
        return None

    def _start(samples: FloatArray, sample_rate: int) -> ActiveSound:
        sd.play(samples, sample_rate)
        return ActiveSound(wait=sd.wait, stop=sd.stop)

    return PlaybackBackend(
        name="sounddevice",
        default_sample_rate=default_rate,
        start=_start,
    )


def _load_simpleaudio() -> PlaybackBackend | None:
    try:
        import simpleaudio as sa_module  # type: ignore[import]
    except ImportError as exc:
        _LOGGER.info("simpleaudio not available: %s", exc, exc_info=True)
        return None
    sa: Any = sa_module

    def _to_int16(samples: FloatArray) -> NDArray[np.int16]:
        return (samples * 32_767).astype(np.int16)

    def _start(samples: FloatArray, sample_rate: int) -> ActiveSound:
        play = sa.play_buffer(_to_int16(samples), 1, 2, sample_rate)
        return ActiveSound(wait=play.wait_done, stop=play.stop)

    return PlaybackBackend(
        name="simpleaudio",
        default_sample_rate=DEFAULT_SAMPLE_RATE,
        start=_start,
    )
