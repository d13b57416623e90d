"""Searchable snippet picker that reports highlight changes for live preview."""

from __future__ import annotations

from typing import Any, Sequence

from PySide6.QtCore import QEvent, QObject, Qt
from PySide6.QtWidgets import (
    QDialog,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QVBoxLayout,
)

from ..snippets.controller import SelectionRequest
from ..snippets.models import CandidateRow, SelectionAction

_LABEL_ROLE = Qt.ItemDataRole.UserRole


def row_matches(row: CandidateRow, query: str, *, annotation: str = "") -> bool:
    """Return ``True`` when every whitespace-separated token of ``query`` matches."""

    if not query:
        return True
    haystack = " ".join(part for part in (row.label, row.group_label, annotation) if part).casefold()
    return all(token in haystack for token in query.casefold().split())


def filter_rows(request: SelectionRequest, query: str) -> list[CandidateRow]:
    """Return the rows of ``request`` matching ``query`` in their original order."""

    return [row for row in request.rows if row_matches(row, query, annotation=request.annotate(row))]


class _NavigationFilter(QObject):
    """Forwards Up/Down/PageUp/PageDown from the search box to the list."""

    def __init__(self, target: QListWidget) -> None:
        super().__init__(target)
        self._target = target

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:  # noqa: N802 - Qt override
        if event.type() == QEvent.Type.KeyPress and event.key() in (  # type: ignore[attr-defined]
            Qt.Key.Key_Up,
            Qt.Key.Key_Down,
            Qt.Key.Key_PageUp,
            Qt.Key.Key_PageDown,
        ):
            self._target.keyPressEvent(event)  # type: ignore[arg-type]
            return True
        return super().eventFilter(watched, event)


class SnippetPickerDialog:
    """Modal incremental-filter list implementing ``CandidateSelector``."""

    def __init__(self, *, parent: Any | None = None) -> None:
        self._parent = parent
        self._dialog: QDialog | None = None
        self._search_input: QLineEdit | None = None
        self._list_widget: QListWidget | None = None
        self._request: SelectionRequest | None = None
        self._filtered: list[CandidateRow] = []
        self._highlighted: str | None = None

    # ------------------------------------------------------------------
    # CandidateSelector protocol
    # ------------------------------------------------------------------
    def select(self, request: SelectionRequest) -> str | None:
        dialog = self.open(request)
        accepted = dialog.exec() == int(QDialog.DialogCode.Accepted)
        return self.finish(accepted)

    def open(self, request: SelectionRequest) -> QDialog:
        """Build the dialog for ``request`` and apply the initial query."""

        self._request = request
        self._highlighted = None
        dialog = self._build_dialog(request)
        self._notify(SelectionAction.SETUP, None)
        self._filter_rows(request.initial_query)
        return dialog

    def finish(self, accepted: bool) -> str | None:
        """Report the final event and return the chosen label."""

        request = self._request
        label = self._highlighted if accepted else None
        template = request.lookup(label) if request is not None else None
        if template is None:
            label = None
            self._notify(SelectionAction.EXIT, None)
        else:
            self._notify(SelectionAction.RETURN, template)
        self._request = None
        return label

    # ------------------------------------------------------------------
    # Accessors used by tests and the demo window
    # ------------------------------------------------------------------
    @property
    def dialog(self) -> QDialog | None:
        return self._dialog

    @property
    def search_input(self) -> QLineEdit | None:
        return self._search_input

    @property
    def list_widget(self) -> QListWidget | None:
        return self._list_widget

    @property
    def visible_labels(self) -> list[str]:
        return [row.label for row in self._filtered]

    @property
    def highlighted_label(self) -> str | None:
        return self._highlighted

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _build_dialog(self, request: SelectionRequest) -> QDialog:
        dialog = QDialog(self._parent)
        dialog.setWindowTitle(request.prompt)
        dialog.setObjectName("snipsight-snippet-picker")
        dialog.setModal(True)
        layout = QVBoxLayout(dialog)
        search_input = QLineEdit()
        search_input.setPlaceholderText("Filter snippets…")
        search_input.setText(request.initial_query)
        search_input.textChanged.connect(self._filter_rows)
        search_input.returnPressed.connect(dialog.accept)
        layout.addWidget(search_input)
        list_widget = QListWidget()
        list_widget.currentItemChanged.connect(self._handle_current_changed)
        list_widget.itemActivated.connect(lambda _item: dialog.accept())
        layout.addWidget(list_widget)
        hint = QLabel("Enter inserts, Esc cancels")
        hint.setObjectName("snipsight-picker-hint")
        layout.addWidget(hint)
        search_input.installEventFilter(_NavigationFilter(list_widget))
        self._dialog = dialog
        self._search_input = search_input
        self._list_widget = list_widget
        return dialog

    def _filter_rows(self, query: str) -> None:
        request = self._request
        if request is None:
            return
        self._filtered = filter_rows(request, query.strip())
        self._render_rows(request, self._filtered)

    def _render_rows(self, request: SelectionRequest, rows: Sequence[CandidateRow]) -> None:
        list_widget = self._list_widget
        if list_widget is None:
            return
        list_widget.blockSignals(True)
        try:
            list_widget.clear()
            current_group: str | None = None
            first_row: int | None = None
            for row in rows:
                group = request.group_by(row)
                if group != current_group:
                    header = QListWidgetItem(group)
                    header.setFlags(Qt.ItemFlag.NoItemFlags)
                    list_widget.addItem(header)
                    current_group = group
                item = QListWidgetItem(row.label)
                annotation = request.annotate(row)
                if annotation:
                    item.setToolTip(annotation)
                item.setData(_LABEL_ROLE, row.label)
                list_widget.addItem(item)
                if first_row is None:
                    first_row = list_widget.count() - 1
        finally:
            list_widget.blockSignals(False)
        if first_row is None:
            self._highlight(None)
        else:
            list_widget.setCurrentRow(first_row)
            self._highlight(self._item_label(list_widget.currentItem()))

    def _handle_current_changed(self, current: QListWidgetItem | None, _previous: Any) -> None:
        self._highlight(self._item_label(current))

    def _highlight(self, label: str | None) -> None:
        if label == self._highlighted and label is not None:
            return
        self._highlighted = label
        request = self._request
        template = request.lookup(label) if request is not None else None
        self._notify(SelectionAction.PREVIEW, template)

    def _notify(self, action: SelectionAction, template: Any) -> None:
        request = self._request
        if request is None or request.on_candidate_changed is None:
            return
        request.on_candidate_changed(action, template)

    @staticmethod
    def _item_label(item: QListWidgetItem | None) -> str | None:
        if item is None:
            return None
        label = item.data(_LABEL_ROLE)
        return label if isinstance(label, str) else None


__all__ = ["SnippetPickerDialog", "filter_rows", "row_matches"]
