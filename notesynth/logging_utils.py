"""
Logging setup for the ``notesynth`` logger tree.

The console shows INFO and above (DEBUG with ``NOTESYNTH_DEBUG`` set). The
log file always records DEBUG, which is where per-render summaries and
dropped-character counts from the parser end up.
"""

from __future__ import annotations

import logging
import os
import sys
import traceback
from datetime import datetime
from pathlib import Path

_LOGGER = logging.getLogger("notesynth.logging")
ROOT_LOGGER_NAME = "notesynth"
LOG_DIR_ENV = "NOTESYNTH_LOG_DIR"
DEBUG_ENV = "NOTESYNTH_DEBUG"
LOG_FILE_NAME = "notesynth.log"

CONSOLE_HANDLER_NAME = "notesynth.console"
FILE_HANDLER_NAME = "notesynth.file"
_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class _ConsoleFormatter(logging.Formatter):
    """``synth: message`` lines; the package prefix is noise on a terminal."""

    def __init__(self) -> None:
        super().__init__("%(levelname)s %(component)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        name = record.name
        if name.startswith(ROOT_LOGGER_NAME + "."):
            name = name[len(ROOT_LOGGER_NAME) + 1 :]
        record.component = name
        return super().format(record)


def debug_enabled() -> bool:
    return bool(os.environ.get(DEBUG_ENV))


def get_log_dir() -> Path:
    configured = os.environ.get(LOG_DIR_ENV)
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".cache" / "notesynth" / "logs"


def get_log_path() -> Path:
    return get_log_dir() / LOG_FILE_NAME


def _own_handlers(logger: logging.Logger) -> list[logging.Handler]:
    names = {CONSOLE_HANDLER_NAME, FILE_HANDLER_NAME}
    return [handler for handler in logger.handlers if handler.get_name() in names]


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(stream=sys.__stderr__)
    handler.set_name(CONSOLE_HANDLER_NAME)
    handler.setLevel(logging.DEBUG if debug_enabled() else logging.INFO)
    handler.setFormatter(_ConsoleFormatter())
    return handler


def _file_handler(path: Path) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.set_name(FILE_HANDLER_NAME)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATE_FORMAT))
    return handler


def configure_logging(*, force: bool = False) -> None:
    """Attach notesynth's console and file handlers once.

    ``force`` swaps out previously attached notesynth handlers, e.g. after
    ``NOTESYNTH_LOG_DIR`` changed. Handlers added by applications are kept.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    existing = _own_handlers(logger)
    if existing and not force:
        return
    for handler in existing:
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(logging.DEBUG)
    # An application that configured the root logger owns the console.
    if force or not logging.getLogger().handlers:
        logger.addHandler(_console_handler())

    try:
        logger.addHandler(_file_handler(get_log_path()))
    except OSError as exc:
        _LOGGER.warning("Failed to configure file logging: %s", exc, exc_info=True)


def log_exception(context: str, exc: BaseException) -> Path | None:
    """Append ``exc`` with its traceback to the log file; return the file path."""
    path = get_log_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as handle:
            handle.write(
                f"[{datetime.now().isoformat()}] {context} failed: {type(exc).__name__}: {exc}\n"
            )
            traceback.print_exception(type(exc), exc, exc.__traceback__, file=handle)
            handle.write("\n")
    except OSError as log_exc:
        _LOGGER.warning("Failed to write log file: %s", log_exc, exc_info=True)
        return None
    return path
