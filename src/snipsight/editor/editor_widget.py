"""Text buffer the snippet layer edits, optionally mirrored by a Qt widget.

Text, selection and history live in plain Python so previews and commits
work without a display. Once a ``QApplication`` exists a ``QPlainTextEdit``
shows the buffer and feeds user keystrokes back into it.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
import logging
from typing import Any, Callable, Iterator, Mapping, Sequence

from PySide6.QtGui import QTextCursor
from PySide6.QtWidgets import QApplication, QPlainTextEdit

from ..core.ranges import Span
from .document_model import DocumentState, SelectionRange

LOGGER = logging.getLogger(__name__)

# ``(text, document)`` after every buffer change.
TextChangeListener = Callable[[str, DocumentState], None]
# ``(selection, line, column)`` with 1-based line/column of the caret.
SelectionListener = Callable[[SelectionRange, int, int], None]


@dataclass(slots=True, frozen=True)
class _Snapshot:
    text: str
    caret: int


class EditorWidget:
    """Implements :class:`~snipsight.editor.text_buffer.TextBuffer`.

    The read-only flag only reaches the Qt mirror; calls made through this
    object always edit the buffer.
    """

    MAX_HISTORY = 100

    def __init__(self, document: DocumentState | None = None, *, parent: Any | None = None) -> None:
        self._state = document or DocumentState()
        self._text = self._state.text
        self._selection = SelectionRange()
        self._history: list[_Snapshot] = []
        self._future: list[_Snapshot] = []
        self._suspend_depth = 0
        self._readonly = False
        self._mirroring = False
        self._on_text: list[TextChangeListener] = []
        self._on_selection: list[SelectionListener] = []
        self._view: QPlainTextEdit | None = None
        if QApplication.instance() is not None:
            self._view = self._create_view(parent)

    def _create_view(self, parent: Any | None) -> QPlainTextEdit:
        view = QPlainTextEdit(parent)
        # Qt's own history would record previews; ours honours undo_suspended().
        view.setUndoRedoEnabled(False)
        view.setPlainText(self._text)
        view.textChanged.connect(self._on_view_text_changed)
        view.cursorPositionChanged.connect(self._on_view_cursor_moved)
        return view

    @property
    def widget(self) -> QPlainTextEdit | None:
        """The Qt mirror, or ``None`` without a ``QApplication``."""

        return self._view

    # Document -----------------------------------------------------------

    def load_document(self, document: DocumentState) -> None:
        """Show ``document`` and forget the previous history."""

        self._state = document
        self._text = document.text
        self._history.clear()
        self._future.clear()
        self._push_text_to_view()
        self._notify_text()
        self.set_selection(document.selection.to_span())

    def to_document(self) -> DocumentState:
        self._state.text = self._text
        self._state.selection = self.selection_range()
        return self._state

    @property
    def text(self) -> str:
        return self._text

    @property
    def length(self) -> int:
        return len(self._text)

    @property
    def mode(self) -> str:
        return self._state.metadata.mode

    @property
    def line_count(self) -> int:
        return self._text.count("\n") + 1 if self._text else 0

    def substring(self, span: Span) -> str:
        start, end = self._bounds(span.start, span.end)
        return self._text[start:end]

    # Edits --------------------------------------------------------------

    def set_text(self, text: str, *, mark_dirty: bool = True) -> None:
        if text == self._text:
            return
        self._record(self._text)
        self._text = text
        if mark_dirty:
            self._state.update_text(text)
        else:
            self._state.text = text
        self._push_text_to_view()
        self._notify_text()

    def insert_text(self, text: str, position: int | None = None) -> None:
        """Insert ``text`` at ``position`` (default: the caret); the caret lands after it."""

        at = self.cursor if position is None else position
        at, _ = self._bounds(at, at)
        self._splice(at, at, text)

    def delete_range(self, start: int, end: int) -> None:
        begin, finish = self._bounds(start, end)
        self._splice(begin, finish, "")

    def replace_range(self, start: int, end: int, replacement: str) -> None:
        begin, finish = self._bounds(start, end)
        self._splice(begin, finish, replacement)

    def _splice(self, begin: int, finish: int, replacement: str) -> None:
        if begin != finish or replacement:
            self.set_text(self._text[:begin] + replacement + self._text[finish:])
        self.set_cursor(begin + len(replacement))

    def set_readonly(self, readonly: bool) -> None:
        self._readonly = bool(readonly)
        if self._view is not None:
            self._view.setReadOnly(self._readonly)

    def is_readonly(self) -> bool:
        return self._readonly

    # History ------------------------------------------------------------

    @contextmanager
    def undo_suspended(self) -> Iterator[None]:
        """Edits inside the block leave no undo entries. Blocks may nest."""

        self._suspend_depth += 1
        try:
            yield
        finally:
            self._suspend_depth -= 1

    @property
    def undo_recording(self) -> bool:
        return not self._suspend_depth

    @property
    def undo_depth(self) -> int:
        return len(self._history)

    def undo(self) -> None:
        self._travel(self._history, self._future)

    def redo(self) -> None:
        self._travel(self._future, self._history)

    def _travel(self, source: list[_Snapshot], target: list[_Snapshot]) -> None:
        if not source:
            return
        snapshot = source.pop()
        target.append(_Snapshot(self._text, self.cursor))
        self._text = snapshot.text
        self._state.update_text(snapshot.text)
        self._push_text_to_view()
        self._notify_text()
        self.set_cursor(snapshot.caret)

    def _record(self, previous: str) -> None:
        if self._suspend_depth:
            return
        self._history.append(_Snapshot(previous, self.cursor))
        del self._history[: -self.MAX_HISTORY]
        self._future.clear()

    # Selection ----------------------------------------------------------

    @property
    def cursor(self) -> int:
        return self._selection.end

    def set_cursor(self, position: int) -> None:
        caret, _ = self._bounds(position, position)
        self._select(caret, caret)

    def selection_range(self) -> SelectionRange:
        """Detached copy of the selection; mutating it does not move anything."""

        return SelectionRange(self._selection.start, self._selection.end)

    def has_selection(self) -> bool:
        return self._selection.is_active

    def set_selection(self, selection: Span | SelectionRange | Mapping[str, Any] | Sequence[int]) -> None:
        """Select ``selection`` with the caret on its end bound."""

        wanted = SelectionRange.from_value(selection)
        self._select(*self._bounds(wanted.start, wanted.end))

    def clear_selection(self) -> None:
        self.set_cursor(self.cursor)

    def redisplay(self) -> None:
        """Repaint now so a preview is visible before the picker blocks again."""

        if self._view is not None:
            self._view.viewport().repaint()

    def _select(self, start: int, end: int) -> None:
        self._selection = SelectionRange(start, end)
        if self._view is not None:
            cursor = self._view.textCursor()
            cursor.setPosition(start)
            cursor.setPosition(end, QTextCursor.MoveMode.KeepAnchor)
            with self._mirror():
                self._view.setTextCursor(cursor)
        self._notify_selection()

    # Listeners ----------------------------------------------------------

    def add_text_listener(self, listener: TextChangeListener) -> None:
        self._on_text.append(listener)

    def add_selection_listener(self, listener: SelectionListener) -> None:
        self._on_selection.append(listener)

    def _notify_text(self) -> None:
        for listener in tuple(self._on_text):
            listener(self._text, self._state)

    def _notify_selection(self) -> None:
        if not self._on_selection:
            return
        caret = self.cursor
        line = self._text.count("\n", 0, caret) + 1
        column = caret - self._text.rfind("\n", 0, caret)
        selection = self.selection_range()
        for listener in tuple(self._on_selection):
            listener(selection, line, column)

    # Qt mirror ----------------------------------------------------------

    @contextmanager
    def _mirror(self) -> Iterator[None]:
        self._mirroring = True
        try:
            yield
        finally:
            self._mirroring = False

    def _push_text_to_view(self) -> None:
        if self._view is None:
            return
        self._view.blockSignals(True)
        try:
            with self._mirror():
                self._view.setPlainText(self._text)
        finally:
            self._view.blockSignals(False)

    def _on_view_text_changed(self) -> None:
        if self._view is None or self._mirroring:
            return
        typed = self._view.toPlainText()
        if typed == self._text:
            return
        LOGGER.debug("User edit (%d -> %d chars)", len(self._text), len(typed))
        self._record(self._text)
        self._text = typed
        self._state.update_text(typed)
        self._notify_text()

    def _on_view_cursor_moved(self) -> None:
        if self._view is None or self._mirroring:
            return
        cursor = self._view.textCursor()
        # The caret is always ``end``, also for selections made backwards.
        low, high = sorted((cursor.anchor(), cursor.position()))
        self._selection = SelectionRange(low, high)
        self._notify_selection()

    def _bounds(self, start: int, end: int) -> tuple[int, int]:
        """Clamp both offsets into the text and order them."""

        size = len(self._text)
        low, high = sorted(max(0, min(int(value), size)) for value in (start, end))
        return low, high


__all__ = ["EditorWidget", "SelectionListener", "TextChangeListener"]
