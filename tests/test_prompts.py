"""Prompt policy tests."""

from __future__ import annotations

import pytest

from snipsight.snippets.errors import ErrorCode, UnattendedPromptError
from snipsight.snippets.prompts import InteractivePrompts, UnattendedPrompts

from tests.helpers import RecordingPrompter


def test_unattended_choose_prefers_default_then_initial() -> None:
    prompts = UnattendedPrompts()
    assert prompts.choose("Pick", ["A", "B"], default="B", initial="A") == "B"
    assert prompts.choose("Pick", ["A", "B"], initial="A") == "A"
    assert prompts.choose("Pick", ["A", "B"]) == ""


def test_unattended_choose_many_returns_lists() -> None:
    prompts = UnattendedPrompts()
    assert prompts.choose_many("Cols", ["a", "b"], default=["a", "b"]) == ["a", "b"]
    assert prompts.choose_many("Cols", ["a", "b"], default="a") == ["a"]
    assert prompts.choose_many("Cols", ["a", "b"], initial="b") == ["b"]
    assert prompts.choose_many("Cols", ["a", "b"]) == []


def test_unattended_read_number_uses_default_or_zero() -> None:
    prompts = UnattendedPrompts()
    assert prompts.read_number("Level", default=3) == 3
    assert prompts.read_number("Level") == 0


@pytest.mark.parametrize("kind", ["read_string", "confirm"])
def test_unattended_refuses_questions_without_defaults(kind: str) -> None:
    prompts = UnattendedPrompts()
    with pytest.raises(UnattendedPromptError) as excinfo:
        getattr(prompts, kind)("Question?")

    error = excinfo.value
    assert error.prompt_kind == kind
    assert error.to_dict() == {
        "error": ErrorCode.UNATTENDED_PROMPT,
        "message": "Snippet prompt cannot be answered without user input",
        "prompt_kind": kind,
        "prompt": "Question?",
    }


def test_interactive_prompts_forward_to_prompter() -> None:
    prompter = RecordingPrompter(answers={"Name": "Ada"})
    prompts = InteractivePrompts(prompter)

    assert prompts.choose("Pick", ("A", "B"), default="A") == "B"
    assert prompts.choose_many("Cols", ["a", "b"], default="a") == ["a", "b"]
    assert prompts.read_number("Level") == 42
    assert prompts.read_string("Name") == "Ada"
    assert prompts.confirm("Sure?") is True
    assert prompter.asked == [
        ("choose", "Pick"),
        ("choose_many", "Cols"),
        ("read_number", "Level"),
        ("read_string", "Name"),
        ("confirm", "Sure?"),
    ]
    assert prompts.name == "interactive"
    assert UnattendedPrompts().name == "unattended"
