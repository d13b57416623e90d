"""Resolve which span of the document a snippet should replace."""

from __future__ import annotations

import re

from ..core.ranges import Span
from ..editor.text_buffer import TextBuffer
from .models import Template

_SYMBOL_CHAR_RE = re.compile(r"[\w\-]")


def symbol_at_cursor(buffer: TextBuffer) -> tuple[Span | None, str]:
    """Return the bounds and text of the symbol touching the caret.

    The caret may sit anywhere inside the symbol or directly against either
    edge. ``(None, "")`` is returned when no symbol touches it.
    """

    text = buffer.text
    caret = max(0, min(buffer.cursor, len(text)))
    start = caret
    while start > 0 and _SYMBOL_CHAR_RE.match(text[start - 1]):
        start -= 1
    end = caret
    while end < len(text) and _SYMBOL_CHAR_RE.match(text[end]):
        end += 1
    if start == end:
        return None, ""
    return Span(start, end), text[start:end]


def resolve_region(
    buffer: TextBuffer,
    template: Template | None,
    *,
    use_thing_at_point: bool,
    always_overwrite: bool = False,
) -> Span:
    """Return the span treated as the editable target for ``template``."""

    caret = Span.caret(buffer.cursor)
    if not use_thing_at_point:
        return caret
    bounds, thing = symbol_at_cursor(buffer)
    # A keyed template still answers to its own name.
    matches_template = (
        template is not None and bool(thing) and thing in (template.name, template.identifier)
    )
    if always_overwrite or matches_template:
        return bounds or caret
    return caret


__all__ = ["resolve_region", "symbol_at_cursor"]
