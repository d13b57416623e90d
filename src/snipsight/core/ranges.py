"""Offset spans into a single document."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Iterator


@dataclass(slots=True, frozen=True)
class Span(Sequence[int]):
    """Half-open ``[start, end)`` range of absolute character offsets.

    Construction never fails on ordering: negative offsets clamp to ``0`` and
    reversed bounds are swapped, so ``start <= end`` always holds. Offsets
    go stale after any edit; re-validate them with :meth:`clamp` against the
    current document length before use.
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        start, end = (_offset(self.start, "start"), _offset(self.end, "end"))
        object.__setattr__(self, "start", min(start, end))
        object.__setattr__(self, "end", max(start, end))

    # Sequence protocol so a span unpacks like ``start, end = span``.
    def __len__(self) -> int:
        return 2

    def __getitem__(self, index: int | slice) -> Any:
        return self.to_tuple()[index]

    def __iter__(self) -> Iterator[int]:
        return iter(self.to_tuple())

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        """``True`` for a zero-width span (a bare caret position)."""

        return self.start == self.end

    def to_tuple(self) -> tuple[int, int]:
        return (self.start, self.end)

    def to_dict(self) -> dict[str, int]:
        return {"start": self.start, "end": self.end}

    def clamp(self, *, lower: int = 0, upper: int | None = None) -> Span:
        """Return the span squeezed into ``[lower, upper]``."""

        def bound(value: int) -> int:
            value = max(lower, value)
            return value if upper is None else min(value, upper)

        return Span(bound(self.start), bound(self.end))

    def with_end(self, end: int) -> Span:
        """Return a span with the same start ending at ``end`` (never before start)."""

        return Span(self.start, max(self.start, int(end)))

    @classmethod
    def caret(cls, offset: int) -> Span:
        return cls(offset, offset)

    @classmethod
    def from_value(cls, value: Any, *, fallback: tuple[int, int] | None = None) -> Span:
        """Coerce a span, ``(start, end)`` pair, mapping or range-like object.

        ``fallback`` fills in a missing value or missing mapping keys.
        """

        if isinstance(value, Span):
            return value
        if value is None:
            if fallback is None:
                raise ValueError("Span value is required")
            return cls(*fallback)
        if isinstance(value, Mapping):
            missing = [key for key in ("start", "end") if value.get(key) is None]
            if missing and fallback is None:
                raise ValueError(f"Span mapping is missing {', '.join(missing)}")
            defaults = dict(zip(("start", "end"), fallback or (0, 0)))
            return cls(
                value["start"] if "start" not in missing else defaults["start"],
                value["end"] if "end" not in missing else defaults["end"],
            )
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            if len(value) != 2:
                raise ValueError("Span sequences must have exactly two entries")
            return cls(value[0], value[1])
        if hasattr(value, "start") and hasattr(value, "end"):
            return cls(value.start, value.end)
        raise TypeError(f"Cannot build a Span from {type(value).__name__}")


def _offset(value: Any, label: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Span {label} must be an integer, got {value!r}") from exc
    return max(0, number)


__all__ = ["Span"]
