"""Text helpers shared by the classifier and the report formatter.

Public API:

    extract_shape_text(shape) -> Optional[str]
    normalize_text(text) -> str
"""
from __future__ import annotations

from .normalize import normalize_text
from .shape_text import PARAGRAPH_SEP, extract_shape_text

__all__ = [
    "PARAGRAPH_SEP",
    "extract_shape_text",
    "normalize_text",
]
