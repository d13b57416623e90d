"""Snippet engine lookup and expansion tests."""

from __future__ import annotations

import pytest

from snipsight.core.ranges import Span
from snipsight.snippets.engine import FALLBACK_MODE, SnippetEngine
from snipsight.snippets.models import Template, TemplateGroup
from snipsight.snippets.prompts import UnattendedPrompts
from snipsight.snippets.samples import build_sample_engine

from tests.helpers import make_buffer


def test_groups_follow_parents_breadth_first_then_fallback() -> None:
    engine = SnippetEngine()
    engine.set_parents("python", "prog", "text")
    engine.set_parents("prog", "text")
    engine.define("a", "A", mode="python")
    engine.define("b", "B", mode="prog")
    engine.define("c", "C", mode="text")
    engine.define("d", "D", mode=FALLBACK_MODE)

    assert [group.name for group in engine.groups_for("python")] == ["python", "prog", "text", FALLBACK_MODE]
    assert [template.name for template in engine.templates_for("python")] == ["a", "b", "c", "d"]
    assert [template.name for template in engine.templates_for("unknown")] == ["d"]


def test_parent_cycles_terminate() -> None:
    engine = SnippetEngine()
    engine.set_parents("a", "b")
    engine.set_parents("b", "a")
    engine.define("x", "X", mode="a")

    assert [group.name for group in engine.groups_for("b")] == ["b", "a"]


def test_add_group_merges_existing_groups() -> None:
    first = Template(name="one", body="1")
    second = Template(name="two", body="2")
    engine = SnippetEngine([TemplateGroup(name="text", templates=[first])])

    merged = engine.add_group(TemplateGroup(name="text", templates=[second], parents=("base",)))

    assert merged.templates == [first, second]
    assert merged.parents == ("base",)


def test_group_of_uses_identity() -> None:
    engine = SnippetEngine()
    one = engine.define("same", "1", mode="text")
    other = engine.define("same", "2", mode="prog")

    assert engine.group_of(one) == "text"
    assert engine.group_of(other) == "prog"
    assert engine.group_of(Template(name="same", body="1")) is None


def test_expand_replaces_selection_when_no_span_given() -> None:
    engine = SnippetEngine()
    template = engine.define("x", "<X>")
    buffer = make_buffer("a [bc] d")

    inserted = engine.expand(template, buffer, prompts=UnattendedPrompts())

    assert buffer.text == "a <X> d"
    assert inserted == Span(2, 5)
    assert buffer.cursor == 5


def test_expand_indents_continuation_lines() -> None:
    engine = SnippetEngine()
    template = engine.define("def", "def f():\n    pass\n")
    buffer = make_buffer("class A:\n    |")

    engine.expand(template, buffer, span=Span.caret(buffer.cursor), prompts=UnattendedPrompts())

    assert buffer.text == "class A:\n    def f():\n        pass\n"


def test_auto_indent_can_be_disabled() -> None:
    engine = SnippetEngine(auto_indent=False)
    template = engine.define("two", "a\nb")
    buffer = make_buffer("  |")

    engine.expand(template, buffer, span=Span.caret(2), prompts=UnattendedPrompts())

    assert buffer.text == "  a\nb"


def test_failing_body_leaves_buffer_untouched() -> None:
    def _explode(_prompts):  # type: ignore[no-untyped-def]
        raise RuntimeError("boom")

    engine = SnippetEngine()
    template = engine.define("bad", _explode)
    buffer = make_buffer("keep|")

    with pytest.raises(RuntimeError, match="boom"):
        engine.expand(template, buffer, span=Span.caret(4), prompts=UnattendedPrompts())
    assert buffer.text == "keep"
    assert buffer.undo_depth == 0


def test_sample_engine_renders_unattended() -> None:
    engine = build_sample_engine()
    names = [template.name for template in engine.templates_for("python")]
    assert names[:3] == ["class", "main", "def"]
    assert {"todo", "fixme", "date", "lorem"} <= set(names)

    by_name = {template.name: template for template in engine.templates_for("markdown")}
    prompts = UnattendedPrompts()
    assert engine.render(by_name["heading"], prompts) == "## Title"
    assert engine.render(by_name["table"], prompts) == "| Name | Description |\n|---|---|\n"

    python = {template.name: template for template in engine.templates_for("python")}
    assert engine.render(python["class"], prompts) == "class Name(object):\n    pass\n"
    assert python["class"].identifier == "cls"
