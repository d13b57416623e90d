"""Template engine interface and the in-memory reference engine."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Protocol

from ..core.ranges import Span
from ..editor.text_buffer import TextBuffer
from .models import Template, TemplateBody, TemplateGroup
from .prompts import PromptPolicy

LOGGER = logging.getLogger(__name__)

FALLBACK_MODE = "fundamental"
_INDENT_RE = re.compile(r"[ \t]*")


class TemplateEngine(Protocol):
    """Owner of template storage and of the actual expansion procedure."""

    def templates_for(self, mode: str) -> list[Template]:
        """Return every template applicable to ``mode``, in display order."""
        ...

    def groups_for(self, mode: str) -> list[TemplateGroup]:
        ...

    def group_of(self, template: Template) -> str | None:
        """Return the label of the first group that owns ``template``."""
        ...

    def expand(
        self,
        template: Template,
        buffer: TextBuffer,
        *,
        span: Span | None = None,
        prompts: PromptPolicy,
    ) -> Span:
        """Expand ``template`` into ``buffer`` and return the inserted span."""
        ...

    def abort_active_expansion(self, buffer: TextBuffer) -> None:
        """Drop any in-flight expansion sub-state attached to ``buffer``."""
        ...


class SnippetEngine:
    """Groups templates per mode and expands literal or callable bodies.

    Modes inherit the templates of their parents, and every mode falls back to
    the ``fundamental`` group when one is registered.
    """

    def __init__(self, groups: Iterable[TemplateGroup] = (), *, auto_indent: bool = True) -> None:
        self._groups: dict[str, TemplateGroup] = {}
        self._auto_indent = auto_indent
        for group in groups:
            self.add_group(group)

    def add_group(self, group: TemplateGroup) -> TemplateGroup:
        existing = self._groups.get(group.name)
        if existing is None:
            self._groups[group.name] = group
            return group
        existing.templates.extend(group.templates)
        existing.parents = tuple(dict.fromkeys(existing.parents + group.parents))
        return existing

    def define(
        self,
        name: str,
        body: TemplateBody,
        *,
        mode: str = FALLBACK_MODE,
        key: str | None = None,
        description: str = "",
        file: Path | None = None,
    ) -> Template:
        """Create a template and register it under ``mode``."""

        template = Template(name=name, body=body, key=key, group=mode, description=description, file=file)
        group = self._groups.setdefault(mode, TemplateGroup(name=mode))
        group.templates.append(template)
        return template

    def set_parents(self, mode: str, *parents: str) -> None:
        group = self._groups.setdefault(mode, TemplateGroup(name=mode))
        group.parents = tuple(parents)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def groups_for(self, mode: str) -> list[TemplateGroup]:
        ordered: list[TemplateGroup] = []
        seen: set[str] = set()
        pending = [mode]
        while pending:
            name = pending.pop(0)
            if name in seen:
                continue
            seen.add(name)
            group = self._groups.get(name)
            if group is None:
                continue
            ordered.append(group)
            pending.extend(group.parents)
        fallback = self._groups.get(FALLBACK_MODE)
        if fallback is not None and FALLBACK_MODE not in seen:
            ordered.append(fallback)
        return ordered

    def templates_for(self, mode: str) -> list[Template]:
        templates: list[Template] = []
        for group in self.groups_for(mode):
            templates.extend(group.templates)
        return templates

    def group_of(self, template: Template) -> str | None:
        for group in self._groups.values():
            if template in group:
                return group.name
        return None

    # ------------------------------------------------------------------
    # Expansion
    # ------------------------------------------------------------------
    def render(self, template: Template, prompts: PromptPolicy) -> str:
        """Produce the text of ``template`` without touching any buffer."""

        body = template.body
        if callable(body):
            return str(body(prompts))
        return str(body)

    def expand(
        self,
        template: Template,
        buffer: TextBuffer,
        *,
        span: Span | None = None,
        prompts: PromptPolicy,
    ) -> Span:
        if span is None:
            span = buffer.selection_range().to_span()
        target = span.clamp(upper=buffer.length)
        # Render before editing so a failing body leaves the buffer untouched.
        text = self.render(template, prompts)
        if self._auto_indent and "\n" in text:
            text = self._indent(text, self._line_indent(buffer.text, target.start))
        LOGGER.debug(
            "Expanding %r at %s with %s prompts (%d chars)",
            template.name,
            target.to_tuple(),
            prompts.name,
            len(text),
        )
        buffer.replace_range(target.start, target.end, text)
        return Span(target.start, target.start + len(text))

    def abort_active_expansion(self, buffer: TextBuffer) -> None:
        # Expansions here complete synchronously; nothing stays in flight.
        return None

    @staticmethod
    def _line_indent(text: str, offset: int) -> str:
        line_start = text.rfind("\n", 0, offset) + 1
        match = _INDENT_RE.match(text, line_start, offset)
        return match.group(0) if match else ""

    @staticmethod
    def _indent(text: str, indent: str) -> str:
        if not indent:
            return text
        lines = text.split("\n")
        return "\n".join([lines[0]] + [f"{indent}{line}" if line else line for line in lines[1:]])


__all__ = ["FALLBACK_MODE", "SnippetEngine", "TemplateEngine"]
