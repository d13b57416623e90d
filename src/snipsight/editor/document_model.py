"""Plain data describing the document held by the editor widget."""

from __future__ import annotations

import hashlib
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..core.ranges import Span


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class DocumentMetadata:
    """Where the document lives and which editing mode selects its snippets."""

    path: Path | None = None
    mode: str = "text"
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)


@dataclass(slots=True)
class SelectionRange:
    """Selection bounds; ``end`` is the caret and ``start == end`` means no selection."""

    start: int = 0
    end: int = 0

    @property
    def is_active(self) -> bool:
        return self.start != self.end

    def as_tuple(self) -> tuple[int, int]:
        return (self.start, self.end)

    def to_span(self) -> Span:
        return Span(self.start, self.end)

    @classmethod
    def from_value(cls, value: Any) -> SelectionRange:
        """Accept another selection or anything :meth:`Span.from_value` understands."""

        if isinstance(value, SelectionRange):
            return cls(value.start, value.end)
        span = Span.from_value(value)
        return cls(span.start, span.end)


@dataclass(slots=True)
class DocumentState:
    """Text plus the bookkeeping the window shows (dirty flag, version)."""

    text: str = ""
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)
    selection: SelectionRange = field(default_factory=SelectionRange)
    dirty: bool = False
    document_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    version_id: int = 1
    content_hash: str = ""

    def __post_init__(self) -> None:
        self.content_hash = self.content_hash or _digest(self.text)

    def update_text(self, new_text: str) -> None:
        """Record an edit: bump the version and mark the document dirty."""

        self.text = new_text
        self.dirty = True
        self.version_id += 1
        self.content_hash = _digest(new_text)
        self.metadata.updated_at = _now()

    def snapshot(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "document_id": self.document_id,
            "version_id": self.version_id,
            "mode": self.metadata.mode,
            "text": self.text,
            "selection": self.selection.as_tuple(),
            "dirty": self.dirty,
            "content_hash": self.content_hash,
        }
        if self.metadata.path is not None:
            payload["path"] = str(self.metadata.path)
        return payload


def _digest(text: str) -> str:
    return hashlib.sha1(text.encode("utf-8")).hexdigest()


__all__ = ["DocumentMetadata", "DocumentState", "SelectionRange"]
