"""Qt dialogs answering snippet prompts during a real expansion."""

from __future__ import annotations

from typing import Any, Sequence

from PySide6.QtWidgets import (
    QAbstractItemView,
    QDialog,
    QDialogButtonBox,
    QInputDialog,
    QLabel,
    QLineEdit,
    QListWidget,
    QMessageBox,
    QVBoxLayout,
)

from ..snippets.errors import PromptCancelledError

_TITLE = "Snippet"
_INT_LIMIT = 2_147_483_647


class QtPrompter:
    """``Prompter`` implementation backed by modal Qt input dialogs.

    Dismissing any dialog raises :class:`PromptCancelledError` so the
    expansion aborts before touching the document.
    """

    def __init__(self, parent: Any | None = None) -> None:
        self._parent = parent

    def choose(self, prompt: str, options: Sequence[str], *, default: str | None, initial: str | None) -> str:
        items = list(options)
        if not items:
            return self.read_string(prompt, initial=default or initial)
        current = items.index(default) if default in items else 0
        text, ok = QInputDialog.getItem(self._parent, _TITLE, prompt, items, current, True)
        if not ok:
            raise PromptCancelledError()
        return text

    def choose_many(
        self, prompt: str, options: Sequence[str], *, default: Sequence[str], initial: str | None
    ) -> list[str]:
        dialog = QDialog(self._parent)
        dialog.setWindowTitle(_TITLE)
        layout = QVBoxLayout(dialog)
        layout.addWidget(QLabel(prompt))
        list_widget = QListWidget()
        list_widget.setSelectionMode(QAbstractItemView.SelectionMode.MultiSelection)
        list_widget.addItems(list(options))
        preselected = set(default)
        for row in range(list_widget.count()):
            item = list_widget.item(row)
            item.setSelected(item.text() in preselected)
        layout.addWidget(list_widget)
        buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel)
        buttons.accepted.connect(dialog.accept)
        buttons.rejected.connect(dialog.reject)
        layout.addWidget(buttons)
        if dialog.exec() != int(QDialog.DialogCode.Accepted):
            raise PromptCancelledError()
        return [item.text() for item in list_widget.selectedItems()]

    def read_number(self, prompt: str, *, default: float | int | None) -> float | int:
        if isinstance(default, float):
            value, ok = QInputDialog.getDouble(self._parent, _TITLE, prompt, default, -1e12, 1e12, 4)
        else:
            value, ok = QInputDialog.getInt(
                self._parent, _TITLE, prompt, int(default or 0), -_INT_LIMIT, _INT_LIMIT, 1
            )
        if not ok:
            raise PromptCancelledError()
        return value

    def read_string(self, prompt: str, *, initial: str | None) -> str:
        text, ok = QInputDialog.getText(self._parent, _TITLE, prompt, QLineEdit.EchoMode.Normal, initial or "")
        if not ok:
            raise PromptCancelledError()
        return text

    def confirm(self, prompt: str) -> bool:
        answer = QMessageBox.question(self._parent, _TITLE, prompt)
        return answer == QMessageBox.StandardButton.Yes


__all__ = ["QtPrompter"]
