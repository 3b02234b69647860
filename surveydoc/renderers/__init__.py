"""
Document rendering interfaces and implementations.
"""

from .base import DocumentRenderer
from .docx_renderer import DocxDocumentRenderer

__all__ = [
    "DocumentRenderer",
    "DocxDocumentRenderer",
]
