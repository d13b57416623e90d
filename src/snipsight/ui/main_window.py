"""Minimal editor window exposing the insert-snippet command."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any

from PySide6.QtCore import QUrl
from PySide6.QtGui import QDesktopServices, QFont, QKeySequence, QShortcut
from PySide6.QtWidgets import QComboBox, QLabel, QMainWindow, QMessageBox

from ..editor.document_model import DocumentMetadata, DocumentState, SelectionRange
from ..editor.editor_widget import EditorWidget
from ..services.settings import Settings, SettingsStore
from ..snippets.controller import SnippetController
from ..snippets.engine import TemplateEngine
from .qt_prompts import QtPrompter
from .snippet_picker import SnippetPickerDialog

LOGGER = logging.getLogger(__name__)

INSERT_SNIPPET_SHORTCUT = "Ctrl+Alt+Space"
VISIT_SNIPPET_SHORTCUT = "Ctrl+Alt+Shift+Space"
_STATUS_TIMEOUT_MS = 5_000


@dataclass(slots=True)
class WindowContext:
    """Dependencies handed to :class:`MainWindow`."""

    settings: Settings
    engine: TemplateEngine
    settings_store: SettingsStore | None = None


class MainWindow(QMainWindow):
    """Plain-text editor with a mode picker and snippet shortcuts."""

    def __init__(self, context: WindowContext) -> None:
        super().__init__()
        self._context = context
        settings = context.settings
        self.setWindowTitle("SnipSight[*]")

        document = DocumentState(metadata=DocumentMetadata(mode=settings.default_mode))
        self._editor = EditorWidget(document, parent=self)
        editor_widget = self._editor.widget
        editor_widget.setFont(QFont(settings.font_family, settings.font_size))
        self.setCentralWidget(editor_widget)

        self._mode_picker = QComboBox(self)
        self._mode_picker.setEditable(True)
        self._mode_picker.addItems(["text", "prog", "python", "markdown"])
        self._mode_picker.setCurrentText(settings.default_mode)
        self._mode_picker.currentTextChanged.connect(self._handle_mode_changed)
        self._position_label = QLabel("Ln 1, Col 1", self)
        self.statusBar().addPermanentWidget(self._position_label)
        self.statusBar().addPermanentWidget(self._mode_picker)
        self._editor.add_selection_listener(self._show_position)
        self._editor.add_text_listener(lambda _text, state: self.setWindowModified(state.dirty))

        self._controller = SnippetController(
            self._editor,
            context.engine,
            SnippetPickerDialog(parent=self),
            QtPrompter(parent=self),
            settings=settings,
            notifier=self._notify,
            opener=self._open_file,
        )
        self._install_shortcuts()

    @property
    def editor(self) -> EditorWidget:
        return self._editor

    @property
    def controller(self) -> SnippetController:
        return self._controller

    def insert_snippet(self) -> None:
        self._controller.insert_snippet()
        self._editor.widget.setFocus()

    def visit_snippet_file(self) -> None:
        self._controller.visit_template_file()

    def _install_shortcuts(self) -> None:
        bindings: list[tuple[str, Any]] = [
            (INSERT_SNIPPET_SHORTCUT, self.insert_snippet),
            (VISIT_SNIPPET_SHORTCUT, self.visit_snippet_file),
            (QKeySequence.StandardKey.Undo, self._editor.undo),
            (QKeySequence.StandardKey.Redo, self._editor.redo),
        ]
        for sequence, callback in bindings:
            shortcut = QShortcut(QKeySequence(sequence), self)
            shortcut.activated.connect(callback)

    def _handle_mode_changed(self, mode: str) -> None:
        resolved = mode.strip().lower() or "text"
        self._editor.to_document().metadata.mode = resolved
        store = self._context.settings_store
        if store is None:
            return
        try:
            settings = store.update(self._controller.settings, default_mode=resolved)
        except OSError as exc:
            LOGGER.warning("Failed to persist default mode: %s", exc)
            return
        self._controller.update_settings(settings)

    def _show_position(self, selection: SelectionRange, line: int, column: int) -> None:
        label = f"Ln {line}, Col {column}"
        if selection.is_active:
            label += f" ({selection.end - selection.start} selected)"
        self._position_label.setText(label)

    def _notify(self, severity: str, message: str) -> None:
        LOGGER.info("[%s] %s", severity, message)
        if severity == "error":
            QMessageBox.warning(self, "Snippet", message)
            return
        self.statusBar().showMessage(message, _STATUS_TIMEOUT_MS)

    def _open_file(self, path: Path) -> None:
        QDesktopServices.openUrl(QUrl.fromLocalFile(str(path)))


__all__ = ["INSERT_SNIPPET_SHORTCUT", "MainWindow", "WindowContext"]
