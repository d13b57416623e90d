"""Command-line entry point for the SnipSight editor."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, TextIO, get_args, get_origin, get_type_hints

from .services.settings import Settings, SettingsStore
from .utils import logging as logging_utils

_LOGGER = logging.getLogger(__name__)
_BOOL_WORDS = {
    **dict.fromkeys(("1", "true", "yes", "on", "debug"), True),
    **dict.fromkeys(("0", "false", "no", "off", "disabled"), False),
}
_QT_LEVELS = {
    "QtDebugMsg": logging.DEBUG,
    "QtInfoMsg": logging.INFO,
    "QtWarningMsg": logging.WARNING,
    "QtCriticalMsg": logging.ERROR,
    "QtFatalMsg": logging.CRITICAL,
}


def configure_logging(debug: bool = False, *, force: bool = False, trace_snippets: bool = False) -> None:
    """Set up file/console logging and forward Qt messages into it."""

    level = logging.DEBUG if debug else logging.INFO
    log_path = logging_utils.setup_logging(level, force=force, trace_snippets=trace_snippets)
    _LOGGER.debug("Logging to %s (level=%s)", log_path, logging.getLevelName(level))
    _install_qt_message_handler()


def load_settings(
    path: Optional[Path] = None,
    *,
    store: SettingsStore | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """Return the persisted settings, or defaults when the store cannot be read."""

    store = store or SettingsStore(path)
    try:
        return store.load(overrides=overrides)
    except (OSError, ValueError) as exc:
        _LOGGER.warning("Failed to load settings from %s: %s", store.path, exc)
        return Settings()


def create_qapp(settings: Settings) -> Any:
    """Return the running ``QApplication``, creating and styling it on first use."""

    from PySide6.QtWidgets import QApplication

    existing = QApplication.instance()
    app = existing if existing is not None else QApplication(sys.argv)
    app.setApplicationName("SnipSight")
    app.setApplicationDisplayName("SnipSight")
    if settings.theme == "dark":
        app.setStyle("Fusion")
    return app


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point of the ``snipsight`` console script."""

    args, qt_args = _parse_cli_args(argv)
    # Whatever argparse did not consume belongs to Qt (``-platform`` etc.).
    sys.argv = [sys.argv[0] if sys.argv else "snipsight", *qt_args]

    debug = _BOOL_WORDS.get(os.environ.get("SNIPSIGHT_DEBUG", "").strip().lower(), False)
    configure_logging(debug)

    raw_path = args.settings_path or os.environ.get("SNIPSIGHT_SETTINGS_PATH")
    store = SettingsStore(Path(raw_path).expanduser() if raw_path else None)
    try:
        overrides = _coerce_cli_overrides(args.overrides)
    except ValueError as exc:
        print(f"Invalid --set override: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc
    settings = load_settings(store=store, overrides=overrides or None)

    if args.dump_settings:
        _dump_settings(settings, store, overrides=overrides)
        return
    if settings.debug_logging and not debug:
        configure_logging(debug, force=True, trace_snippets=True)

    from .snippets.samples import build_sample_engine
    from .ui.main_window import MainWindow, WindowContext

    app = create_qapp(settings)
    window = MainWindow(WindowContext(settings=settings, engine=build_sample_engine(), settings_store=store))
    window.resize(900, 600)
    window.show()
    try:
        app.exec()
    except KeyboardInterrupt:  # pragma: no cover - manual shutdown path
        _LOGGER.info("Interrupted, shutting down.")


def _parse_cli_args(argv: Sequence[str] | None) -> tuple[argparse.Namespace, list[str]]:
    parser = argparse.ArgumentParser(
        prog="snipsight",
        description="Plain-text editor with live snippet previews.",
    )
    parser.add_argument("--dump-settings", action="store_true", help="Print the effective settings as JSON and exit.")
    parser.add_argument("--settings-path", metavar="PATH", help="Use PATH instead of ~/.snipsight/settings.json.")
    parser.add_argument(
        "--set",
        dest="overrides",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Override one setting for this run (repeatable).",
    )
    return parser.parse_known_args(argv)


def _install_qt_message_handler() -> None:
    from PySide6.QtCore import qInstallMessageHandler

    qt_logger = logging.getLogger("PySide6")

    def _forward(kind, _context, message):  # type: ignore[no-untyped-def]
        qt_logger.log(_QT_LEVELS.get(getattr(kind, "name", str(kind)), logging.INFO), message)

    qInstallMessageHandler(_forward)


def _coerce_cli_overrides(items: Sequence[str]) -> Dict[str, Any]:
    """Turn ``KEY=VALUE`` strings into typed :class:`Settings` overrides."""

    hints = get_type_hints(Settings)
    known = {entry.name for entry in fields(Settings)}
    overrides: Dict[str, Any] = {}
    for item in items:
        key, sep, raw = item.partition("=")
        key = key.strip()
        if not sep:
            raise ValueError(f"Override '{item}' must use KEY=VALUE syntax.")
        if not key:
            raise ValueError("Override is missing a field name.")
        if key not in known:
            raise ValueError(f"Unknown setting '{key}'.")
        overrides[key] = _coerce_value(hints[key], raw.strip())
    return overrides


def _coerce_value(annotation: Any, raw: str) -> Any:
    target = get_origin(annotation) or annotation
    if target not in (bool, int, float, dict):
        # ``X | None`` style hints coerce to the first concrete member.
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        target = members[0] if members else str
    if target is bool:
        if raw.lower() not in _BOOL_WORDS:
            raise ValueError(f"Cannot coerce '{raw}' to a boolean.")
        return _BOOL_WORDS[raw.lower()]
    if target is int:
        return int(raw, 10)
    if target is float:
        return float(raw)
    if target is dict:
        try:
            return json.loads(raw or "{}")
        except json.JSONDecodeError as exc:
            raise ValueError("Dict overrides must be valid JSON objects") from exc
    return raw


def _dump_settings(
    settings: Settings,
    store: SettingsStore,
    *,
    overrides: Mapping[str, Any],
    stream: TextIO | None = None,
) -> None:
    out = stream or sys.stdout
    meta = {
        "path": str(store.path),
        "cli_overrides": sorted(overrides),
        "environment_variables": sorted(name for name in os.environ if name.startswith("SNIPSIGHT_")),
    }
    json.dump({"settings": asdict(settings), "meta": meta}, out, indent=2)
    out.write("\n")
