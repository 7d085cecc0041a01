"""Read-only document model handed from a provider to the text pipeline.

Providers (see `ppt2txt.core.extract`) decode a concrete file into these
objects; nothing downstream touches python-pptx or olefile directly.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple


class PlaceholderKind(Enum):
    TITLE = "title"
    CENTER_TITLE = "center_title"
    SUBTITLE = "subtitle"
    BODY = "body"
    OBJECT = "object"
    OTHER = "other"


TITLE_KINDS = frozenset({PlaceholderKind.TITLE, PlaceholderKind.CENTER_TITLE})


@dataclass(frozen=True)
class Shape:
    has_text_frame: bool
    text: Optional[str] = None
    is_placeholder: bool = False
    # Only meaningful when is_placeholder is True.
    placeholder_kind: Optional[PlaceholderKind] = None


@dataclass(frozen=True)
class Slide:
    ordinal: int
    shapes: Tuple[Shape, ...] = ()
    notes_shapes: Tuple[Shape, ...] = ()


@dataclass(frozen=True)
class Presentation:
    source_path: Path
    source_type: str
    slides: Tuple[Slide, ...] = ()

    @property
    def slide_count(self) -> int:
        return len(self.slides)
