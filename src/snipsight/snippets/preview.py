"""Preview/commit state machine bound to one snippet selection session.

Every highlight change is a full revert followed by a fresh unattended
expansion; the document never accumulates partial previews. While the
session is open the buffer rejects user input and records no undo history,
so the only edits are the session's own previews and reverts.
"""

from __future__ import annotations

from contextlib import ExitStack
import logging
import weakref
from typing import Any

from ..core.ranges import Span
from ..editor.text_buffer import TextBuffer
from .engine import TemplateEngine
from .errors import DocumentNotWritableError, PreviewError, SnippetError
from .expansion import UnattendedExpansionDriver
from .models import SelectionAction, SessionState, Template
from .region import resolve_region

LOGGER = logging.getLogger(__name__)

_OPEN_BUFFERS: "weakref.WeakSet[Any]" = weakref.WeakSet()


class PreviewSession:
    """Stateful controller driven by the selection UI's highlight callbacks."""

    def __init__(
        self,
        buffer: TextBuffer,
        engine: TemplateEngine,
        *,
        use_thing_at_point: bool = False,
        always_overwrite: bool = False,
        driver: UnattendedExpansionDriver | None = None,
    ) -> None:
        self.buffer = buffer
        self._engine = engine
        self._driver = driver or UnattendedExpansionDriver(engine)
        self._use_thing_at_point = use_thing_at_point
        self._always_overwrite = always_overwrite

        self.selection_was_active = False
        self.initial_region = Span.caret(buffer.cursor)
        self.initial_region_text = ""
        self.current_region = self.initial_region
        self.active = False
        self.state = SessionState.IDLE

        self._initial_caret = buffer.cursor
        self._resources: ExitStack | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @property
    def started(self) -> bool:
        return self._resources is not None

    @property
    def finished(self) -> bool:
        return self.state in (SessionState.COMMITTED, SessionState.CANCELLED)

    def start(self) -> None:
        """Capture the pristine region and lock the buffer for the session."""

        if self.started:
            return
        buffer = self.buffer
        if buffer.is_readonly():
            raise DocumentNotWritableError()
        if buffer in _OPEN_BUFFERS:
            raise RuntimeError("A snippet preview session is already open for this document")

        self.selection_was_active = buffer.has_selection()
        self._initial_caret = buffer.cursor
        if self.selection_was_active:
            region = buffer.selection_range().to_span()
        else:
            region = self._resolve(None)
        self._bind_region(region)

        with ExitStack() as resources:
            resources.enter_context(buffer.undo_suspended())
            resources.callback(buffer.set_readonly, False)
            buffer.set_readonly(True)
            resources.callback(_OPEN_BUFFERS.discard, buffer)
            _OPEN_BUFFERS.add(buffer)
            self._resources = resources.pop_all()
        LOGGER.debug(
            "Preview session started (region=%s, selection_active=%s)",
            self.initial_region.to_tuple(),
            self.selection_was_active,
        )

    def close(self) -> None:
        """Tear the session down, reverting any preview still on screen."""

        resources = self._resources
        if resources is None:
            return
        try:
            if self.active:
                try:
                    self._revert()
                except Exception:  # pragma: no cover - best-effort cleanup
                    LOGGER.exception("Failed to revert snippet preview during teardown")
        finally:
            self._resources = None
            resources.close()
            if not self.finished:
                self.state = SessionState.CANCELLED
        LOGGER.debug("Preview session closed (%s)", self.state.value)

    def __enter__(self) -> PreviewSession:
        self.start()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def on_candidate_changed(self, action: SelectionAction, template: Template | None) -> None:
        """Apply the transition for a highlight, confirm or cancel event."""

        if action is SelectionAction.SETUP:
            self.start()
            return
        if not self.started:
            self.start()
        if self.finished:
            LOGGER.debug("Ignoring %s after session end", action.value)
            return

        self._revert()
        if not self.selection_was_active:
            self._bind_region(self._resolve(template))

        if action is SelectionAction.RETURN:
            self.state = SessionState.COMMITTED
            if self.selection_was_active:
                self.buffer.set_selection(self.current_region)
            return
        if action is SelectionAction.EXIT:
            self.state = SessionState.CANCELLED
            self.buffer.redisplay()
            return
        if template is None:
            self.buffer.redisplay()
            return
        self._preview(template)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _resolve(self, template: Template | None) -> Span:
        return resolve_region(
            self.buffer,
            template,
            use_thing_at_point=self._use_thing_at_point,
            always_overwrite=self._always_overwrite,
        )

    def _bind_region(self, region: Span) -> None:
        region = region.clamp(upper=self.buffer.length)
        self.initial_region = region
        self.current_region = region
        self.initial_region_text = self.buffer.substring(region)

    def _revert(self) -> None:
        buffer = self.buffer
        self._engine.abort_active_expansion(buffer)
        region = self.current_region.clamp(upper=buffer.length)
        if region != self.initial_region or buffer.substring(region) != self.initial_region_text:
            buffer.replace_range(region.start, region.end, self.initial_region_text)
        self.current_region = self.initial_region
        self.active = False
        if not self.finished:
            self.state = SessionState.IDLE
        if buffer.cursor != self._initial_caret or buffer.has_selection():
            buffer.set_cursor(self._initial_caret)

    def _preview(self, template: Template) -> None:
        buffer = self.buffer
        before = buffer.length
        try:
            self._driver.expand(buffer, template, self.current_region)
        except Exception as exc:
            self.current_region = self.current_region.with_end(
                self.current_region.end + buffer.length - before
            )
            self._revert()
            buffer.redisplay()
            LOGGER.warning("Preview of snippet %r failed: %s", template.name, exc)
            details = exc.to_dict() if isinstance(exc, SnippetError) else {"cause": repr(exc)}
            raise PreviewError(
                message=f"Preview of snippet '{template.name}' failed: {exc}",
                details=details,
                template_name=template.name,
            ) from exc

        self.current_region = self.current_region.with_end(self.current_region.end + buffer.length - before)
        self.active = True
        self.state = SessionState.PREVIEWING
        buffer.clear_selection()
        buffer.redisplay()
        LOGGER.debug("Previewing %r in %s", template.name, self.current_region.to_tuple())


__all__ = ["PreviewSession"]
