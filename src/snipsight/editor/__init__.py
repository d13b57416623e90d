"""Editor package containing document models and the text buffer widget."""

from .document_model import DocumentMetadata, DocumentState, SelectionRange
from .editor_widget import EditorWidget
from .text_buffer import TextBuffer

__all__ = ["DocumentMetadata", "DocumentState", "EditorWidget", "SelectionRange", "TextBuffer"]
