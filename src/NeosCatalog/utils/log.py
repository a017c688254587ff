"""Logging setup for NeosCatalog.

All modules log through the shared ``NeosCatalog`` logger. Records carry the
CLI action that produced them, so a mirrored log file can be read on its own.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Final

LOGGER_NAME: Final = "NeosCatalog"
LOG_FORMAT: Final = "%(asctime)s [%(levelabbr)s] %(action)s: %(message)s"
DATE_FORMAT: Final = "%m-%d %H:%M:%S"

_LEVEL_ABBREV: Final[dict[int, str]] = {
    logging.DEBUG: "DEBG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERRO",
    logging.CRITICAL: "CRIT",
}


class _CatalogFormatter(logging.Formatter):
    """Formatter adding ``levelabbr`` and a default ``action`` to every record."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 - stdlib method name
        record.levelabbr = _LEVEL_ABBREV.get(record.levelno, record.levelname[:4])
        if not hasattr(record, "action"):
            record.action = "-"
        return super().format(record)


class _ActionFilter(logging.Filter):
    def __init__(self, action: str) -> None:
        super().__init__()
        self.action = action

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003 - stdlib method name
        record.action = self.action
        return True


log = logging.getLogger(LOGGER_NAME)


def configure_logging(
    *,
    level: str = "INFO",
    action: str | None = None,
    log_to_file: bool = False,
    log_dir: str = "log",
) -> Path | None:
    """Configure the NeosCatalog logger for one CLI action.

    Console output goes to stderr; stdout is reserved for the JSON the CLI
    prints. Calling this again replaces the previous handlers.

    Args:
        level: Console logging level name (DEBUG, INFO, ...).
        action: CLI action name, shown in every line and used for the log file.
        log_to_file: Mirror DEBUG and above into ``<log_dir>/<action>/``.
        log_dir: Base directory for mirrored log files.

    Returns:
        Path of the mirrored log file, or None when no file is written.
    """
    console_level = logging.getLevelName((level or "INFO").upper())
    if not isinstance(console_level, int):
        console_level = logging.INFO

    formatter = _CatalogFormatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(formatter)
    handlers: list[logging.Handler] = [console]

    log_path = None
    if log_to_file and action:
        log_path = _log_file_path(Path(log_dir or "log"), action)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    for old in list(log.handlers):
        log.removeHandler(old)
        old.close()
    for old_filter in list(log.filters):
        log.removeFilter(old_filter)

    for handler in handlers:
        log.addHandler(handler)
    if action:
        log.addFilter(_ActionFilter(action))
    log.setLevel(logging.DEBUG if log_to_file else console_level)
    log.propagate = False
    return log_path


def _log_file_path(log_dir: Path, action: str) -> Path:
    action_dir = log_dir / action
    action_dir.mkdir(parents=True, exist_ok=True)
    return action_dir / f"{action}_{datetime.now():%Y%m%d-%H%M%S}.log"
