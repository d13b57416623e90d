"""Shared test helpers and stub collaborators.

Import from here instead of duplicating these classes in individual test
files.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Sequence

from snipsight.editor.document_model import DocumentMetadata, DocumentState
from snipsight.editor.editor_widget import EditorWidget
from snipsight.snippets.controller import SelectionRequest
from snipsight.snippets.engine import SnippetEngine
from snipsight.snippets.errors import PromptCancelledError
from snipsight.snippets.models import SelectionAction
from snipsight.snippets.prompts import PromptPolicy


def make_buffer(marked: str, *, mode: str = "text") -> EditorWidget:
    """Build a buffer from text where ``|`` marks the caret.

    ``[`` and ``]`` mark an active selection instead (caret at ``]``).
    """

    if "[" in marked:
        start = marked.index("[")
        end = marked.index("]") - 1
        text = marked.replace("[", "").replace("]", "")
    else:
        start = end = marked.index("|") if "|" in marked else len(marked)
        text = marked.replace("|", "")
    buffer = EditorWidget(DocumentState(text=text, metadata=DocumentMetadata(mode=mode)))
    buffer.set_selection((start, end))
    return buffer


def render(buffer: EditorWidget) -> str:
    """Return the buffer text with the caret (or selection) marked."""

    selection = buffer.selection_range()
    text = buffer.text
    if selection.is_active:
        return f"{text[:selection.start]}[{text[selection.start:selection.end]}]{text[selection.end:]}"
    return f"{text[:selection.end]}|{text[selection.end:]}"


def _choice_body(prompts: PromptPolicy) -> str:
    return prompts.choose("Pick", ["X", "Y"], default="X")


def _asking_body(prompts: PromptPolicy) -> str:
    return "name=" + prompts.read_string("Name")


def build_engine() -> SnippetEngine:
    """Engine with a couple of plain and prompting snippets across modes."""

    engine = SnippetEngine()
    engine.set_parents("python", "prog")
    engine.define("abc", "<ABC>", mode="text")
    engine.define("xyz", "<XYZ-LONGER>", mode="text")
    engine.define("foo", "FOO()", mode="text", description="Expands foo")
    engine.define("choice", _choice_body, mode="text")
    engine.define("ask", _asking_body, mode="text")
    engine.define("todo", "TODO: ", mode="prog")
    engine.define("def", "def f():\n    pass", mode="python")
    return engine


@dataclass
class ScriptedSelector:
    """Selection UI stand-in replaying highlight changes then confirming.

    ``highlights`` are row labels previewed in order; ``confirm`` is the label
    returned at the end (``None`` cancels). ``observe`` runs after every
    preview with the label just highlighted.
    """

    highlights: Sequence[str | None] = ()
    confirm: str | None = None
    send_final: bool = True
    observe: Callable[[str | None], None] | None = None
    requests: list[SelectionRequest] = field(default_factory=list)

    def select(self, request: SelectionRequest) -> str | None:
        self.requests.append(request)
        notify = request.on_candidate_changed or (lambda _action, _template: None)
        notify(SelectionAction.SETUP, None)
        for label in self.highlights:
            notify(SelectionAction.PREVIEW, request.lookup(label))
            if self.observe is not None:
                self.observe(label)
        if self.send_final:
            template = request.lookup(self.confirm)
            action = SelectionAction.RETURN if template is not None else SelectionAction.EXIT
            notify(action, template)
        return self.confirm


@dataclass
class RecordingPrompter:
    """Prompter answering from canned values and recording every question."""

    answers: dict[str, object] = field(default_factory=dict)
    asked: list[tuple[str, str]] = field(default_factory=list)
    cancel: bool = False

    def _answer(self, kind: str, prompt: str, fallback: object) -> object:
        self.asked.append((kind, prompt))
        if self.cancel:
            raise PromptCancelledError()
        return self.answers.get(prompt, fallback)

    def choose(self, prompt, options, *, default, initial):  # type: ignore[no-untyped-def]
        return self._answer("choose", prompt, options[-1] if options else "")

    def choose_many(self, prompt, options, *, default, initial):  # type: ignore[no-untyped-def]
        return self._answer("choose_many", prompt, list(options))

    def read_number(self, prompt, *, default):  # type: ignore[no-untyped-def]
        return self._answer("read_number", prompt, 42)

    def read_string(self, prompt, *, initial):  # type: ignore[no-untyped-def]
        return self._answer("read_string", prompt, "typed")

    def confirm(self, prompt):  # type: ignore[no-untyped-def]
        return self._answer("confirm", prompt, True)
