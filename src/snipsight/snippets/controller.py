"""Top-level snippet commands wiring candidates, preview session and commit."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Callable, Protocol, Sequence

from ..editor.text_buffer import TextBuffer
from ..services.settings import Settings
from .candidates import CandidateList, build_candidates
from .engine import TemplateEngine
from .errors import (
    DocumentNotWritableError,
    NoApplicableTemplatesError,
    PreviewError,
    SnippetError,
    TemplateFileMissingError,
)
from .models import CandidateRow, SelectionAction, Template
from .preview import PreviewSession
from .prompts import InteractivePrompts, Prompter
from .region import resolve_region, symbol_at_cursor

LOGGER = logging.getLogger(__name__)

Notifier = Callable[[str, str], None]
"""Callback receiving ``(severity, message)`` for user-facing feedback."""


@dataclass(slots=True)
class SelectionRequest:
    """Everything the selection UI needs to present and report candidates."""

    rows: Sequence[CandidateRow]
    lookup: Callable[[str | None], Template | None]
    annotate: Callable[[CandidateRow], str]
    group_by: Callable[[CandidateRow], str]
    on_candidate_changed: Callable[[SelectionAction, Template | None], None] | None = None
    initial_query: str = ""
    prompt: str = "Snippet"


class CandidateSelector(Protocol):
    """Incremental-filter selection UI.

    ``select`` blocks until the user confirms or cancels and returns the
    chosen row label (``None`` on cancel). While open it calls
    ``request.on_candidate_changed`` on every highlight change and once with
    ``RETURN``/``EXIT`` at the end.
    """

    def select(self, request: SelectionRequest) -> str | None:
        ...


def _log_notification(severity: str, message: str) -> None:
    level = logging.getLevelName(severity.upper())
    LOGGER.log(level if isinstance(level, int) else logging.INFO, message)


class SnippetController:
    """Commands for browsing snippets with live preview and inserting one."""

    def __init__(
        self,
        buffer: TextBuffer,
        engine: TemplateEngine,
        selector: CandidateSelector,
        prompter: Prompter,
        *,
        settings: Settings | None = None,
        notifier: Notifier | None = None,
        opener: Callable[[Path], None] | None = None,
    ) -> None:
        self._buffer = buffer
        self._engine = engine
        self._selector = selector
        self._prompter = prompter
        self._settings = settings or Settings()
        self._notifier = notifier or _log_notification
        self._opener = opener

    @property
    def settings(self) -> Settings:
        return self._settings

    def update_settings(self, settings: Settings) -> None:
        self._settings = settings

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def insert_snippet(self, mode: str | None = None) -> Template | None:
        """Browse snippets with live preview and expand the confirmed one.

        Returns the committed template, or ``None`` when the user cancelled or
        the command could not run.
        """

        buffer = self._buffer
        if buffer.is_readonly():
            self._report(DocumentNotWritableError())
            return None
        candidates = self._candidates(mode)
        if candidates is None:
            return None

        settings = self._settings
        session = PreviewSession(
            buffer,
            self._engine,
            use_thing_at_point=settings.use_thing_at_point,
            always_overwrite=settings.always_overwrite_thing_at_point,
        )

        def on_candidate_changed(action: SelectionAction, template: Template | None) -> None:
            try:
                session.on_candidate_changed(action, template)
            except PreviewError as exc:
                self._report(exc)

        template: Template | None = None
        try:
            with session:
                label = self._selector.select(
                    self._request(candidates, on_candidate_changed, preview=True)
                )
                template = candidates.lookup(label)
                if not session.finished:
                    action = SelectionAction.RETURN if template is not None else SelectionAction.EXIT
                    on_candidate_changed(action, template)
        except DocumentNotWritableError as exc:
            self._report(exc)
            return None

        if template is None:
            LOGGER.debug("Snippet selection cancelled")
            return None
        return self._commit(template)

    def visit_template_file(self, mode: str | None = None) -> Path | None:
        """Pick a snippet (no preview) and open the file that defines it."""

        candidates = self._candidates(mode)
        if candidates is None:
            return None
        label = self._selector.select(self._request(candidates, None, preview=False))
        template = candidates.lookup(label)
        if template is None:
            return None
        if template.file is None:
            self._report(
                TemplateFileMissingError(
                    message=f"Snippet '{template.name}' is not backed by a file",
                    template_name=template.name,
                )
            )
            return None
        if self._opener is not None:
            self._opener(template.file)
        return template.file

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _candidates(self, mode: str | None) -> CandidateList | None:
        resolved_mode = mode or self._buffer.mode or self._settings.default_mode
        try:
            return build_candidates(self._engine, resolved_mode)
        except NoApplicableTemplatesError as exc:
            self._report(exc)
            return None

    def _request(
        self,
        candidates: CandidateList,
        on_candidate_changed: Callable[[SelectionAction, Template | None], None] | None,
        *,
        preview: bool,
    ) -> SelectionRequest:
        initial_query = ""
        if self._settings.use_thing_at_point:
            _bounds, initial_query = symbol_at_cursor(self._buffer)
        return SelectionRequest(
            rows=list(candidates.rows),
            lookup=candidates.lookup,
            annotate=candidates.annotate,
            group_by=candidates.group_by,
            on_candidate_changed=on_candidate_changed,
            initial_query=initial_query,
            prompt="Insert snippet" if preview else "Visit snippet file",
        )

    def _commit(self, template: Template) -> Template | None:
        buffer = self._buffer
        if buffer.has_selection():
            span = buffer.selection_range().to_span()
        else:
            span = resolve_region(
                buffer,
                template,
                use_thing_at_point=self._settings.use_thing_at_point,
                always_overwrite=self._settings.always_overwrite_thing_at_point,
            )
            if not span.is_empty:
                buffer.set_selection(span)
        try:
            inserted = self._engine.expand(
                template, buffer, span=span, prompts=InteractivePrompts(self._prompter)
            )
        except SnippetError as exc:
            self._report(exc)
            return None
        LOGGER.info("Inserted snippet %r at %s", template.name, inserted.to_tuple())
        buffer.redisplay()
        return template

    def _report(self, error: SnippetError) -> None:
        self._notifier(error.severity, error.message)


__all__ = ["CandidateSelector", "Notifier", "SelectionRequest", "SnippetController"]
