"""Shared pytest fixtures."""

from __future__ import annotations

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from snipsight.snippets.engine import SnippetEngine

from tests.helpers import RecordingPrompter, build_engine


@pytest.fixture
def engine() -> SnippetEngine:
    return build_engine()


@pytest.fixture
def prompter() -> RecordingPrompter:
    return RecordingPrompter()


@pytest.fixture(autouse=True)
def _isolated_home(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep settings and logs out of the real home directory."""

    monkeypatch.setenv("SNIPSIGHT_LOG_DIR", str(tmp_path / "logs"))
    for name in list(os.environ):
        if name.startswith("SNIPSIGHT_") and name != "SNIPSIGHT_LOG_DIR":
            monkeypatch.delenv(name, raising=False)
