"""Prompt policies injected into template expansion.

Expansion bodies never talk to the UI directly. They receive a
:class:`PromptPolicy` and ask it questions; the caller decides whether those
questions reach the user (:class:`InteractivePrompts`) or are answered from
defaults without blocking (:class:`UnattendedPrompts`).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from typing import Protocol, Sequence

from .errors import UnattendedPromptError

LOGGER = logging.getLogger(__name__)


class PromptPolicy(ABC):
    """Questions an expansion body may ask while rendering."""

    name: str = "unknown"

    @abstractmethod
    def choose(
        self,
        prompt: str,
        options: Sequence[str],
        *,
        default: str | None = None,
        initial: str | None = None,
    ) -> str:
        """Return one of ``options`` (or free text when the UI allows it)."""

    @abstractmethod
    def choose_many(
        self,
        prompt: str,
        options: Sequence[str],
        *,
        default: Sequence[str] | str | None = None,
        initial: str | None = None,
    ) -> list[str]:
        """Return a subset of ``options``."""

    @abstractmethod
    def read_number(self, prompt: str, *, default: float | int | None = None) -> float | int:
        """Return a number typed by the user."""

    @abstractmethod
    def read_string(self, prompt: str, *, initial: str | None = None) -> str:
        """Return free-form text typed by the user."""

    @abstractmethod
    def confirm(self, prompt: str) -> bool:
        """Return the user's yes/no answer."""


class UnattendedPrompts(PromptPolicy):
    """Answers every question from defaults and never waits for input.

    Questions without a meaningful default (free text, yes/no) raise
    :class:`UnattendedPromptError` instead of blocking.
    """

    name = "unattended"

    def choose(
        self,
        prompt: str,
        options: Sequence[str],
        *,
        default: str | None = None,
        initial: str | None = None,
    ) -> str:
        answer = default or initial or ""
        LOGGER.debug("Unattended choose %r -> %r", prompt, answer)
        return answer

    def choose_many(
        self,
        prompt: str,
        options: Sequence[str],
        *,
        default: Sequence[str] | str | None = None,
        initial: str | None = None,
    ) -> list[str]:
        if default:
            answer = [default] if isinstance(default, str) else list(default)
        elif initial:
            answer = [initial]
        else:
            answer = []
        LOGGER.debug("Unattended choose_many %r -> %r", prompt, answer)
        return answer

    def read_number(self, prompt: str, *, default: float | int | None = None) -> float | int:
        return default if default is not None else 0

    def read_string(self, prompt: str, *, initial: str | None = None) -> str:
        raise UnattendedPromptError(prompt_kind="read_string", prompt=prompt)

    def confirm(self, prompt: str) -> bool:
        raise UnattendedPromptError(prompt_kind="confirm", prompt=prompt)


class Prompter(Protocol):
    """UI surface capable of asking the user questions."""

    def choose(self, prompt: str, options: Sequence[str], *, default: str | None, initial: str | None) -> str:
        ...

    def choose_many(
        self, prompt: str, options: Sequence[str], *, default: Sequence[str], initial: str | None
    ) -> list[str]:
        ...

    def read_number(self, prompt: str, *, default: float | int | None) -> float | int:
        ...

    def read_string(self, prompt: str, *, initial: str | None) -> str:
        ...

    def confirm(self, prompt: str) -> bool:
        ...


class InteractivePrompts(PromptPolicy):
    """Forwards every question to a real :class:`Prompter`."""

    name = "interactive"

    def __init__(self, prompter: Prompter) -> None:
        self._prompter = prompter

    def choose(
        self,
        prompt: str,
        options: Sequence[str],
        *,
        default: str | None = None,
        initial: str | None = None,
    ) -> str:
        return self._prompter.choose(prompt, list(options), default=default, initial=initial)

    def choose_many(
        self,
        prompt: str,
        options: Sequence[str],
        *,
        default: Sequence[str] | str | None = None,
        initial: str | None = None,
    ) -> list[str]:
        if default is None:
            preselected: list[str] = []
        elif isinstance(default, str):
            preselected = [default]
        else:
            preselected = list(default)
        return list(self._prompter.choose_many(prompt, list(options), default=preselected, initial=initial))

    def read_number(self, prompt: str, *, default: float | int | None = None) -> float | int:
        return self._prompter.read_number(prompt, default=default)

    def read_string(self, prompt: str, *, initial: str | None = None) -> str:
        return self._prompter.read_string(prompt, initial=initial)

    def confirm(self, prompt: str) -> bool:
        return bool(self._prompter.confirm(prompt))


__all__ = ["InteractivePrompts", "PromptPolicy", "Prompter", "UnattendedPrompts"]
