"""Core value types shared by the editor and snippet layers."""

from .ranges import Span

__all__ = ["Span"]
