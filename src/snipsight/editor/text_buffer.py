"""Protocol describing the editor primitives consumed by the snippet layer."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Protocol

from ..core.ranges import Span
from .document_model import SelectionRange


class TextBuffer(Protocol):
    """Editing surface the preview/commit machinery operates on.

    Offsets are absolute character positions. Programmatic edits must be
    accepted even while :meth:`is_readonly` reports ``True``; the flag only
    blocks user input.
    """

    @property
    def text(self) -> str:
        ...

    @property
    def length(self) -> int:
        ...

    @property
    def mode(self) -> str:
        ...

    def substring(self, span: Span) -> str:
        ...

    def insert_text(self, text: str, position: int | None = None) -> None:
        ...

    def delete_range(self, start: int, end: int) -> None:
        ...

    def replace_range(self, start: int, end: int, replacement: str) -> None:
        ...

    @property
    def cursor(self) -> int:
        ...

    def set_cursor(self, position: int) -> None:
        ...

    def selection_range(self) -> SelectionRange:
        ...

    def has_selection(self) -> bool:
        ...

    def set_selection(self, span: Span) -> None:
        ...

    def clear_selection(self) -> None:
        ...

    def is_readonly(self) -> bool:
        ...

    def set_readonly(self, readonly: bool) -> None:
        ...

    def undo_suspended(self) -> AbstractContextManager[None]:
        ...

    def redisplay(self) -> None:
        ...


__all__ = ["TextBuffer"]
