"""Error types raised by the snippet preview/commit machinery.

Every error carries a machine-readable ``error_code`` plus a user-facing
``message`` so controllers can surface them without inspecting the class.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar


class ErrorCode:
    """Constants for snippet error codes."""

    NO_APPLICABLE_TEMPLATES = "no_applicable_templates"
    DOCUMENT_NOT_WRITABLE = "document_not_writable"
    UNATTENDED_PROMPT = "unattended_prompt"
    PROMPT_CANCELLED = "prompt_cancelled"
    PREVIEW_FAILED = "preview_failed"
    TEMPLATE_FILE_MISSING = "template_file_missing"


@dataclass
class SnippetError(Exception):
    """Base exception for snippet errors.

    Attributes:
        error_code: Machine-readable error identifier.
        message: Human-readable error description.
        details: Additional structured error information.
    """

    error_code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    severity: ClassVar[str] = "error"

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = dict(self.details)
        return result

    def __str__(self) -> str:
        return self.message


@dataclass
class NoApplicableTemplatesError(SnippetError):
    """No template applies in the current editing context."""

    error_code: str = field(default=ErrorCode.NO_APPLICABLE_TEMPLATES)
    message: str = field(default="No snippets available in this context")
    details: dict[str, Any] = field(default_factory=dict)

    mode: str | None = field(default=None)

    severity: ClassVar[str] = "warning"

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.mode is not None:
            result["mode"] = self.mode
        return result


@dataclass
class DocumentNotWritableError(SnippetError):
    """The target document refuses edits."""

    error_code: str = field(default=ErrorCode.DOCUMENT_NOT_WRITABLE)
    message: str = field(default="Document is read-only")
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class UnattendedPromptError(SnippetError):
    """An expansion asked for input that has no unattended answer."""

    error_code: str = field(default=ErrorCode.UNATTENDED_PROMPT)
    message: str = field(default="Snippet prompt cannot be answered without user input")
    details: dict[str, Any] = field(default_factory=dict)

    prompt_kind: str = field(default="unknown")
    prompt: str = field(default="")

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["prompt_kind"] = self.prompt_kind
        if self.prompt:
            result["prompt"] = self.prompt
        return result


@dataclass
class PromptCancelledError(SnippetError):
    """The user dismissed a prompt during a real expansion."""

    error_code: str = field(default=ErrorCode.PROMPT_CANCELLED)
    message: str = field(default="Snippet expansion cancelled")
    details: dict[str, Any] = field(default_factory=dict)

    severity: ClassVar[str] = "info"


@dataclass
class PreviewError(SnippetError):
    """Rendering a preview failed; the document has already been reverted."""

    error_code: str = field(default=ErrorCode.PREVIEW_FAILED)
    message: str = field(default="Snippet preview failed")
    details: dict[str, Any] = field(default_factory=dict)

    # Reported from inside a highlight change, so it must not open a modal box.
    severity: ClassVar[str] = "warning"

    template_name: str | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.template_name is not None:
            result["template"] = self.template_name
        return result


@dataclass
class TemplateFileMissingError(SnippetError):
    """The selected template is not backed by a file on disk."""

    error_code: str = field(default=ErrorCode.TEMPLATE_FILE_MISSING)
    message: str = field(default="Snippet has no backing file")
    details: dict[str, Any] = field(default_factory=dict)

    template_name: str | None = field(default=None)


__all__ = [
    "DocumentNotWritableError",
    "ErrorCode",
    "NoApplicableTemplatesError",
    "PreviewError",
    "PromptCancelledError",
    "SnippetError",
    "TemplateFileMissingError",
    "UnattendedPromptError",
]
