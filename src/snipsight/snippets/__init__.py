"""Snippet browsing with live, revertible previews."""

from .candidates import CandidateList, build_candidates
from .controller import CandidateSelector, SelectionRequest, SnippetController
from .engine import SnippetEngine, TemplateEngine
from .errors import (
    DocumentNotWritableError,
    NoApplicableTemplatesError,
    PreviewError,
    PromptCancelledError,
    SnippetError,
    TemplateFileMissingError,
    UnattendedPromptError,
)
from .expansion import UnattendedExpansionDriver
from .models import CandidateRow, SelectionAction, SessionState, Template, TemplateGroup
from .preview import PreviewSession
from .prompts import InteractivePrompts, PromptPolicy, Prompter, UnattendedPrompts
from .region import resolve_region, symbol_at_cursor

__all__ = [
    "CandidateList",
    "CandidateRow",
    "CandidateSelector",
    "DocumentNotWritableError",
    "InteractivePrompts",
    "NoApplicableTemplatesError",
    "PreviewError",
    "PreviewSession",
    "PromptCancelledError",
    "PromptPolicy",
    "Prompter",
    "SelectionAction",
    "SelectionRequest",
    "SessionState",
    "SnippetController",
    "SnippetEngine",
    "SnippetError",
    "Template",
    "TemplateEngine",
    "TemplateFileMissingError",
    "TemplateGroup",
    "UnattendedExpansionDriver",
    "UnattendedPrompts",
    "build_candidates",
    "resolve_region",
    "symbol_at_cursor",
]
