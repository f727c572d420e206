"""Logging setup for the ghostline CLI and embedding hosts."""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

__all__ = ["LOG_FORMAT", "get_log_path", "resolve_level", "setup_logging"]

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_LOG_FILENAME = "ghostline.log"
_DEFAULT_LOG_DIR = Path.home() / ".ghostline" / "logs"
# Third-party loggers that stay at WARNING even when ghostline runs at DEBUG.
_QUIET_LOGGERS: tuple[str, ...] = ("tiktoken", "urllib3", "requests")
_LOG_PATH: Path | None = None
_CONFIGURED = False


def resolve_level(level: int | str | None = None) -> int:
    """Turn ``level`` (or ``GHOSTLINE_LOG_LEVEL``) into a numeric logging level.

    Names are case-insensitive. Unknown names fall back to ``INFO``.
    """

    candidate = level if level is not None else os.environ.get("GHOSTLINE_LOG_LEVEL")
    if candidate is None or candidate == "":
        return logging.INFO
    if isinstance(candidate, int):
        return candidate
    text = str(candidate).strip()
    if text.isdigit():
        return int(text)
    named = logging.getLevelName(text.upper())
    return named if isinstance(named, int) else logging.INFO


def setup_logging(
    level: int | str | None = None,
    *,
    log_dir: Path | str | None = None,
    console: bool = True,
    log_file: bool = True,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
    force: bool = False,
) -> Path | None:
    """Install ghostline's root handlers and return the log file path.

    Repeated calls are no-ops unless ``force`` is set. With ``log_file=False``
    only the console handler is installed and ``None`` is returned.
    """

    global _CONFIGURED, _LOG_PATH
    if _CONFIGURED and not force:
        return _LOG_PATH

    numeric_level = resolve_level(level)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=_DATE_FORMAT)
    handlers: list[logging.Handler] = []
    log_path: Path | None = None
    if log_file:
        log_path = _resolve_log_dir(log_dir) / _LOG_FILENAME
        handlers.append(_file_handler(log_path, max_bytes=max_bytes, backup_count=backup_count))
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=numeric_level, handlers=handlers, force=True)
    _quiet_third_party(numeric_level)

    _CONFIGURED = True
    _LOG_PATH = log_path
    return log_path


def get_log_path() -> Path | None:
    """Return the active log file, if file logging was configured."""

    return _LOG_PATH


def _file_handler(path: Path, *, max_bytes: int, backup_count: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.handlers.RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")


def _resolve_log_dir(log_dir: Path | str | None) -> Path:
    chosen = log_dir or os.environ.get("GHOSTLINE_LOG_DIR") or _DEFAULT_LOG_DIR
    return Path(chosen).expanduser()


def _quiet_third_party(root_level: int) -> None:
    floor = max(root_level, logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(floor)
