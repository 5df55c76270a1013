from __future__ import annotations

import threading
from pathlib import Path

import pytest

import notesynth.cli as cli
import notesynth.playback as playback
from notesynth.logging_utils import LOG_DIR_ENV
from notesynth.playback import ActiveSound, PlaybackBackend


def _instant_backend(started: list[int]) -> PlaybackBackend:
    done = threading.Event()
    done.set()

    def _start(samples: object, sample_rate: int) -> ActiveSound:
        started.append(sample_rate)
        return ActiveSound(wait=done.wait, stop=lambda: None)

    return PlaybackBackend(name="instant", default_sample_rate=8000, start=_start)


@pytest.fixture(autouse=True)
def _isolated_logs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path))


def test_parser_requires_command() -> None:
    parser = cli.build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args([])


def test_inspect_prints_events(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["inspect", "A4~ _ C4 ?"]) == 0
    out = capsys.readouterr().out
    assert "440.00" in out
    assert "rest" in out
    assert "3 event(s), 1 character(s) skipped" in out


def test_play_renders_and_plays(monkeypatch: pytest.MonkeyPatch) -> None:
    started: list[int] = []
    backend = _instant_backend(started)
    monkeypatch.setattr(cli, "get_default_backend", lambda: backend)
    monkeypatch.setattr(playback, "get_default_backend", lambda: backend)
    assert cli.main(["play", "C4 E4 G4~~", "--waveform", "square"]) == 0
    assert started == [8000]


def test_demo_uses_requested_sample_rate(monkeypatch: pytest.MonkeyPatch) -> None:
    started: list[int] = []
    backend = _instant_backend(started)
    monkeypatch.setattr(playback, "get_default_backend", lambda: backend)
    assert cli.main(["demo", "--sample-rate", "4000"]) == 0
    assert started == [4000]


def test_invalid_request_reports_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    assert cli.main(["play", "C4", "--sample-rate=-5"]) == 1
    err = capsys.readouterr().err
    assert "notesynth CLI failed: ConfigurationError" in err
    assert (tmp_path / "notesynth.log").exists()
