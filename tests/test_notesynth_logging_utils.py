import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from notesynth import logging_utils
from notesynth.logging_utils import (
    FILE_HANDLER_NAME,
    LOG_DIR_ENV,
    configure_logging,
    get_log_dir,
    get_log_path,
    log_exception,
)
from notesynth.synth import render


@pytest.fixture
def notesynth_logger(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[logging.Logger]:
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path))
    logger = logging.getLogger("notesynth")
    saved = list(logger.handlers)
    for handler in saved:
        logger.removeHandler(handler)
    try:
        yield logger
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        for handler in saved:
            logger.addHandler(handler)


def _file_handlers(logger: logging.Logger) -> list[logging.FileHandler]:
    return [h for h in logger.handlers if isinstance(h, logging.FileHandler)]


def test_log_dir_uses_env_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path))
    assert get_log_dir() == tmp_path
    assert get_log_path() == tmp_path / "notesynth.log"


def test_log_exception_appends_traceback(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path))
    try:
        raise RuntimeError("boom")
    except RuntimeError as exc:
        path = log_exception("render", exc)
    assert path == tmp_path / "notesynth.log"
    text = path.read_text(encoding="utf-8")
    assert "render failed: RuntimeError: boom" in text
    assert "Traceback" in text


def test_configure_logging_is_idempotent(notesynth_logger: logging.Logger, tmp_path: Path) -> None:
    configure_logging()
    configure_logging()
    handlers = _file_handlers(notesynth_logger)
    assert [Path(h.baseFilename) for h in handlers] == [tmp_path / "notesynth.log"]
    assert handlers[0].get_name() == FILE_HANDLER_NAME


def test_force_replaces_only_own_handlers(notesynth_logger: logging.Logger) -> None:
    foreign = logging.NullHandler()
    notesynth_logger.addHandler(foreign)
    configure_logging()
    configure_logging(force=True)
    assert foreign in notesynth_logger.handlers
    assert len(_file_handlers(notesynth_logger)) == 1


def test_render_diagnostics_reach_log_file(
    notesynth_logger: logging.Logger, tmp_path: Path
) -> None:
    configure_logging(force=True)
    render({"sample_rate": 1000, "parts": {"m": "C4 ?? D4"}})
    for handler in notesynth_logger.handlers:
        handler.flush()
    text = (tmp_path / "notesynth.log").read_text(encoding="utf-8")
    assert "notesynth.synth: Rendered 1 part(s)" in text
    assert "{'m': 2}" in text


def test_console_formatter_drops_package_prefix() -> None:
    formatter = logging_utils._ConsoleFormatter()
    record = logging.LogRecord("notesynth.synth", logging.WARNING, __file__, 1, "careful", None, None)
    assert formatter.format(record) == "WARNING synth: careful"
