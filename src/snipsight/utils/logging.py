"""Logging setup for the SnipSight desktop app.

Records go to a size-rotated ``snipsight.log`` (``~/.snipsight/logs`` unless
``SNIPSIGHT_LOG_DIR`` or an explicit directory says otherwise) and, by
default, to stderr.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

__all__ = ["SNIPPET_LOGGER", "get_log_path", "get_logger", "setup_logging"]

SNIPPET_LOGGER = "snipsight.snippets"
_LOG_FILE_NAME = "snipsight.log"
_DEFAULT_LOG_DIR = Path.home() / ".snipsight" / "logs"
_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
# Qt chatter is routed through this logger by ``app._install_qt_message_handler``.
_QT_LOGGER = "PySide6"

_log_path: Path | None = None


def setup_logging(
    level: int = logging.INFO,
    *,
    log_dir: Path | str | None = None,
    console: bool = True,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
    trace_snippets: bool = False,
    force: bool = False,
) -> Path:
    """Install the rotating file handler (plus stderr) on the root logger.

    Repeated calls are no-ops returning the active log file unless ``force``
    is set. ``trace_snippets`` keeps preview-session transitions at DEBUG even
    when the root level is higher.
    """

    global _log_path
    if _log_path is not None and not force:
        return _log_path

    log_path = _resolve_log_dir(log_dir) / _LOG_FILE_NAME
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handlers = _build_handlers(log_path, console=console, max_bytes=max_bytes, backup_count=backup_count)
    effective = min(level, logging.DEBUG) if trace_snippets else level
    for handler in handlers:
        handler.setLevel(effective)
    logging.basicConfig(level=level, handlers=handlers, force=True)
    logging.captureWarnings(True)

    logging.getLogger(SNIPPET_LOGGER).setLevel(logging.DEBUG if trace_snippets else logging.NOTSET)
    # Qt debug/info output drowns the file unless the whole app runs at DEBUG.
    logging.getLogger(_QT_LOGGER).setLevel(level if level <= logging.DEBUG else logging.WARNING)

    _log_path = log_path
    return log_path


def get_logger(name: str) -> logging.Logger:
    """Return a module-specific logger."""

    return logging.getLogger(name)


def get_log_path() -> Path | None:
    """Return the active log file, or ``None`` before :func:`setup_logging`."""

    return _log_path


def _resolve_log_dir(log_dir: Path | str | None) -> Path:
    if log_dir is not None:
        return Path(log_dir).expanduser()
    override = os.environ.get("SNIPSIGHT_LOG_DIR")
    return Path(override).expanduser() if override else _DEFAULT_LOG_DIR


def _build_handlers(
    log_path: Path,
    *,
    console: bool,
    max_bytes: int,
    backup_count: int,
) -> list[logging.Handler]:
    formatter = logging.Formatter(fmt=_LOG_FORMAT, datefmt=_DATE_FORMAT)
    handlers: list[logging.Handler] = [
        logging.handlers.RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers
