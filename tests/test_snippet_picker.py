"""Snippet picker dialog tests."""

from __future__ import annotations

from typing import Any

import pytest
from PySide6.QtCore import Qt
from PySide6.QtWidgets import QDialog

from snipsight.snippets.candidates import build_candidates
from snipsight.snippets.controller import SelectionRequest
from snipsight.snippets.engine import SnippetEngine
from snipsight.snippets.models import SelectionAction
from snipsight.ui.snippet_picker import SnippetPickerDialog, filter_rows, row_matches

pytestmark = pytest.mark.usefixtures("qtbot")


def _request(engine: SnippetEngine, mode: str = "text", **kwargs: Any) -> tuple[SelectionRequest, list[tuple]]:
    events: list[tuple] = []
    candidates = build_candidates(engine, mode)
    request = SelectionRequest(
        rows=candidates.rows,
        lookup=candidates.lookup,
        annotate=candidates.annotate,
        group_by=candidates.group_by,
        on_candidate_changed=lambda action, template: events.append(
            (action, template.name if template is not None else None)
        ),
        **kwargs,
    )
    return request, events


def test_row_matches_every_token_against_label_group_and_annotation(engine: SnippetEngine) -> None:
    rows = {row.label: row for row in build_candidates(engine, "text").rows}

    assert row_matches(rows["foo"], "") is True
    assert row_matches(rows["foo"], "FOO text") is True
    assert row_matches(rows["foo"], "expands", annotation="Expands foo") is True
    assert row_matches(rows["foo"], "foo missing") is False


def test_filter_rows_keeps_order(engine: SnippetEngine) -> None:
    request, _events = _request(engine)

    assert [row.label for row in filter_rows(request, "")] == ["abc", "xyz", "foo", "choice", "ask"]
    assert [row.label for row in filter_rows(request, "expands")] == ["foo"]


def test_open_reports_setup_and_first_highlight(qtbot, engine: SnippetEngine) -> None:
    request, events = _request(engine)
    picker = SnippetPickerDialog()

    dialog = picker.open(request)
    qtbot.addWidget(dialog)

    assert dialog.windowTitle() == "Snippet"
    assert events == [(SelectionAction.SETUP, None), (SelectionAction.PREVIEW, "abc")]
    assert picker.highlighted_label == "abc"
    assert picker.visible_labels == ["abc", "xyz", "foo", "choice", "ask"]


def test_group_headers_are_not_selectable(qtbot, engine: SnippetEngine) -> None:
    request, _events = _request(engine, mode="python")
    picker = SnippetPickerDialog()
    qtbot.addWidget(picker.open(request))

    list_widget = picker.list_widget
    assert list_widget is not None
    texts = [list_widget.item(index).text() for index in range(list_widget.count())]
    assert texts == ["python", "def", "prog", "todo"]
    assert list_widget.item(0).flags() == Qt.ItemFlag.NoItemFlags
    assert list_widget.currentRow() == 1


def test_typing_filters_and_previews_new_first_match(qtbot, engine: SnippetEngine) -> None:
    request, events = _request(engine)
    picker = SnippetPickerDialog()
    qtbot.addWidget(picker.open(request))
    events.clear()

    assert picker.search_input is not None
    picker.search_input.setText("xyz")

    assert picker.visible_labels == ["xyz"]
    assert events == [(SelectionAction.PREVIEW, "xyz")]

    picker.search_input.setText("nothing-matches")
    assert picker.visible_labels == []
    assert picker.highlighted_label is None
    assert events[-1] == (SelectionAction.PREVIEW, None)


def test_initial_query_is_applied(qtbot, engine: SnippetEngine) -> None:
    request, events = _request(engine, initial_query="foo")
    picker = SnippetPickerDialog()
    qtbot.addWidget(picker.open(request))

    assert picker.search_input is not None
    assert picker.search_input.text() == "foo"
    assert picker.visible_labels == ["foo"]
    assert events.count((SelectionAction.PREVIEW, "foo")) == 1


def test_moving_the_highlight_previews_each_row(qtbot, engine: SnippetEngine) -> None:
    request, events = _request(engine)
    picker = SnippetPickerDialog()
    qtbot.addWidget(picker.open(request))
    events.clear()

    assert picker.list_widget is not None
    picker.list_widget.setCurrentRow(2)
    picker.list_widget.setCurrentRow(3)

    assert events == [(SelectionAction.PREVIEW, "xyz"), (SelectionAction.PREVIEW, "foo")]


def test_finish_reports_return_or_exit(qtbot, engine: SnippetEngine) -> None:
    request, events = _request(engine)
    picker = SnippetPickerDialog()
    qtbot.addWidget(picker.open(request))

    assert picker.finish(True) == "abc"
    assert events[-1] == (SelectionAction.RETURN, "abc")

    request, events = _request(engine)
    qtbot.addWidget(picker.open(request))
    assert picker.finish(False) is None
    assert events[-1] == (SelectionAction.EXIT, None)


def test_select_runs_the_dialog(qtbot, engine: SnippetEngine, monkeypatch: pytest.MonkeyPatch) -> None:
    request, events = _request(engine)
    picker = SnippetPickerDialog()
    build_dialog = SnippetPickerDialog._build_dialog

    def _build(self: SnippetPickerDialog, request: SelectionRequest) -> QDialog:
        dialog = build_dialog(self, request)
        qtbot.addWidget(dialog)

        def _exec() -> int:
            self.list_widget.setCurrentRow(2)  # type: ignore[union-attr]
            return int(QDialog.DialogCode.Accepted)

        dialog.exec = _exec  # type: ignore[method-assign]
        return dialog

    monkeypatch.setattr(SnippetPickerDialog, "_build_dialog", _build)

    assert picker.select(request) == "xyz"
    assert events[-1] == (SelectionAction.RETURN, "xyz")
