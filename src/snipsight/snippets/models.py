"""Value types shared by the snippet engine, candidate list and preview session."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Union

if TYPE_CHECKING:
    from .prompts import PromptPolicy

TemplateBody = Union[str, Callable[["PromptPolicy"], str]]


@dataclass(slots=True, frozen=True, eq=False)
class Template:
    """A named snippet owned by a template engine.

    ``body`` is opaque to everything except the engine: either literal text or
    a callable that renders text and may ask questions through the supplied
    prompt policy. Templates compare by identity so two snippets sharing a
    name in different groups stay distinct.
    """

    name: str
    body: TemplateBody
    key: str | None = None
    group: str = "fundamental"
    description: str = ""
    file: Path | None = None

    @property
    def identifier(self) -> str:
        """The trigger: ``key`` when set, else ``name``."""

        return self.key or self.name


@dataclass(slots=True)
class TemplateGroup:
    """Templates attached to one editing mode."""

    name: str
    templates: list[Template] = field(default_factory=list)
    parents: tuple[str, ...] = ()

    def __contains__(self, template: object) -> bool:
        return any(entry is template for entry in self.templates)


@dataclass(slots=True, frozen=True)
class CandidateRow:
    """Display projection of a template inside the selection UI."""

    label: str
    group_label: str
    template: Template = field(compare=False)


class SelectionAction(str, Enum):
    """Events the selection UI reports to the preview session."""

    SETUP = "setup"
    PREVIEW = "preview"
    RETURN = "return"
    EXIT = "exit"


class SessionState(str, Enum):
    IDLE = "idle"
    PREVIEWING = "previewing"
    COMMITTED = "committed"
    CANCELLED = "cancelled"


__all__ = [
    "CandidateRow",
    "SelectionAction",
    "SessionState",
    "Template",
    "TemplateBody",
    "TemplateGroup",
]
