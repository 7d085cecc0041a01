from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ppt2txt.core.model import TITLE_KINDS, PlaceholderKind, Slide
from ppt2txt.core.text import PARAGRAPH_SEP, extract_shape_text


@dataclass
class SlideBuckets:
    """Text collected for one slide, kept as fragments in shape order.

    Fragments are joined once, when a bucket is read.
    """

    title_parts: List[str] = field(default_factory=list)
    subtitle_parts: List[str] = field(default_factory=list)
    body_parts: List[str] = field(default_factory=list)
    notes_parts: List[str] = field(default_factory=list)

    @property
    def title(self) -> str:
        return PARAGRAPH_SEP.join(self.title_parts)

    @property
    def subtitle(self) -> str:
        return PARAGRAPH_SEP.join(self.subtitle_parts)

    @property
    def body(self) -> str:
        return PARAGRAPH_SEP.join(self.body_parts)

    @property
    def notes(self) -> str:
        return PARAGRAPH_SEP.join(self.notes_parts)

    def is_empty(self) -> bool:
        return not (self.title_parts or self.subtitle_parts or self.body_parts or self.notes_parts)


def classify_slide(slide: Slide) -> SlideBuckets:
    """Route each shape's text into the title, subtitle or body bucket.

    Title and center-title placeholders feed the title, subtitle
    placeholders the subtitle; every other placeholder and every
    non-placeholder shape feeds the body. Shapes without usable text are
    skipped.
    """
    buckets = SlideBuckets()

    for shp in slide.shapes:
        s = extract_shape_text(shp)
        if s is None:
            continue

        if shp.is_placeholder and shp.placeholder_kind in TITLE_KINDS:
            buckets.title_parts.append(s)
        elif shp.is_placeholder and shp.placeholder_kind is PlaceholderKind.SUBTITLE:
            buckets.subtitle_parts.append(s)
        else:
            buckets.body_parts.append(s)

    return buckets


def extract_notes(slide: Slide) -> str:
    """Return the slide's speaker notes.

    Notes pages usually carry a slide-number placeholder; text that is
    exactly the slide's own ordinal is that placeholder and is dropped.
    """
    slide_no = str(slide.ordinal)
    parts: List[str] = []

    for shp in slide.notes_shapes:
        s = extract_shape_text(shp)
        if s is None or s == slide_no:
            continue
        parts.append(s)

    return PARAGRAPH_SEP.join(parts)


def collect_slide(slide: Slide) -> SlideBuckets:
    """classify_slide() plus the slide's notes."""
    buckets = classify_slide(slide)
    notes = extract_notes(slide)
    if notes:
        buckets.notes_parts.append(notes)
    return buckets
