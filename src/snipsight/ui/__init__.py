"""Qt presentation layer: snippet picker, prompt dialogs and the demo window."""

from .qt_prompts import QtPrompter
from .snippet_picker import SnippetPickerDialog, filter_rows, row_matches

__all__ = ["QtPrompter", "SnippetPickerDialog", "filter_rows", "row_matches"]
