"""Tests covering the application bootstrap helpers."""

from __future__ import annotations

import io
import json
import logging
from pathlib import Path
from typing import Any

import pytest

from snipsight import app
from snipsight.services.settings import Settings, SettingsStore


def test_coerce_cli_overrides_uses_field_types() -> None:
    overrides = app._coerce_cli_overrides(
        [
            "use_thing_at_point=on",
            "font_size=16",
            "default_mode= python ",
            'metadata={"a": 1}',
        ]
    )

    assert overrides == {
        "use_thing_at_point": True,
        "font_size": 16,
        "default_mode": "python",
        "metadata": {"a": 1},
    }


@pytest.mark.parametrize(
    ("entry", "message"),
    [
        ("font_size", "KEY=VALUE"),
        ("=3", "missing a field name"),
        ("colour=red", "Unknown setting"),
        ("debug_logging=maybe", "boolean"),
        ("metadata=[", "JSON"),
    ],
)
def test_coerce_cli_overrides_rejects_bad_entries(entry: str, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        app._coerce_cli_overrides([entry])


def test_load_settings_falls_back_on_store_errors(caplog: pytest.LogCaptureFixture) -> None:
    class _BrokenStore(SettingsStore):
        def load(self, *, overrides: Any = None) -> Settings:
            raise OSError("disk gone")

    with caplog.at_level(logging.WARNING):
        settings = app.load_settings(store=_BrokenStore(Path("unused.json")))

    assert settings == Settings()
    assert "disk gone" in caplog.text


def test_dump_settings_reports_sources(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SNIPSIGHT_THEME", "dark")
    store = SettingsStore(tmp_path / "settings.json")
    settings = store.load(overrides={"font_size": 18})
    stream = io.StringIO()

    app._dump_settings(settings, store, overrides={"font_size": 18}, stream=stream)

    payload = json.loads(stream.getvalue())
    assert payload["settings"]["theme"] == "dark"
    assert payload["settings"]["font_size"] == 18
    assert payload["meta"]["path"] == str(tmp_path / "settings.json")
    assert payload["meta"]["cli_overrides"] == ["font_size"]
    assert "SNIPSIGHT_THEME" in payload["meta"]["environment_variables"]


def test_main_dump_settings_exits_before_ui(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(app, "configure_logging", lambda *args, **kwargs: None)
    monkeypatch.setattr(app.sys, "argv", ["snipsight"])

    app.main(
        [
            "--dump-settings",
            "--settings-path",
            str(tmp_path / "settings.json"),
            "--set",
            "use_thing_at_point=true",
        ]
    )

    payload = json.loads(capsys.readouterr().out)
    assert payload["settings"]["use_thing_at_point"] is True


def test_main_rejects_invalid_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(app, "configure_logging", lambda *args, **kwargs: None)
    monkeypatch.setattr(app.sys, "argv", ["snipsight"])

    with pytest.raises(SystemExit) as excinfo:
        app.main(["--set", "nonsense"])

    assert excinfo.value.code == 2
