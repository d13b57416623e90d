"""Run template expansion with every prompt answered from defaults."""

from __future__ import annotations

import logging

from ..core.ranges import Span
from ..editor.text_buffer import TextBuffer
from .engine import TemplateEngine
from .models import Template
from .prompts import PromptPolicy, UnattendedPrompts

LOGGER = logging.getLogger(__name__)


class UnattendedExpansionDriver:
    """Expands templates for previews without ever waiting on the user.

    Prompts the engine issues are routed to :class:`UnattendedPrompts`; a
    question that has no default raises
    :class:`~snipsight.snippets.errors.UnattendedPromptError` right away.
    """

    def __init__(self, engine: TemplateEngine, *, prompts: PromptPolicy | None = None) -> None:
        self._engine = engine
        self._prompts = prompts or UnattendedPrompts()

    def expand(self, buffer: TextBuffer, template: Template, span: Span) -> Span:
        target = span.clamp(upper=buffer.length)
        if not target.is_empty:
            # The engine overwrites an active selection instead of inserting
            # beside it.
            buffer.set_selection(target)
        LOGGER.debug("Unattended expansion of %r at %s", template.name, target.to_tuple())
        return self._engine.expand(template, buffer, span=target, prompts=self._prompts)


__all__ = ["UnattendedExpansionDriver"]
