from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Tuple

from pptx import Presentation as open_pptx
from pptx.enum.shapes import PP_PLACEHOLDER

from ppt2txt.core.errors import DocumentOpenError
from ppt2txt.core.model import PlaceholderKind, Presentation, Shape, Slide
from ppt2txt.core.utils.logging import get_logger

logger = get_logger(__name__)

_KIND_BY_PP_PLACEHOLDER = {
    PP_PLACEHOLDER.TITLE: PlaceholderKind.TITLE,
    PP_PLACEHOLDER.CENTER_TITLE: PlaceholderKind.CENTER_TITLE,
    PP_PLACEHOLDER.SUBTITLE: PlaceholderKind.SUBTITLE,
    PP_PLACEHOLDER.BODY: PlaceholderKind.BODY,
    PP_PLACEHOLDER.OBJECT: PlaceholderKind.OBJECT,
}


def _placeholder_kind(shp: Any) -> Optional[PlaceholderKind]:
    if not getattr(shp, "is_placeholder", False):
        return None
    try:
        pt = shp.placeholder_format.type
    except Exception:
        # Placeholder without a readable type (e.g. broken <p:ph> element).
        return PlaceholderKind.OTHER
    return _KIND_BY_PP_PLACEHOLDER.get(pt, PlaceholderKind.OTHER)


def _shape(shp: Any) -> Shape:
    has_tf = bool(getattr(shp, "has_text_frame", False))
    # python-pptx joins paragraphs with "\n" and renders <a:br/> as "\v".
    text = shp.text_frame.text if has_tf else None
    kind = _placeholder_kind(shp)
    return Shape(
        has_text_frame=has_tf,
        text=text,
        is_placeholder=kind is not None,
        placeholder_kind=kind,
    )


def _notes_shapes(slide: Any) -> Tuple[Shape, ...]:
    # slide.notes_slide would create an empty notes page; only read it when present.
    if not slide.has_notes_slide:
        return ()
    return tuple(_shape(shp) for shp in slide.notes_slide.shapes)


def read_pptx(path: str | Path) -> Presentation:
    """Decode an OOXML presentation into the document model.

    Only top-level shapes are read; group members, tables and charts do not
    carry a text frame of their own and contribute nothing.
    """
    p = Path(path)
    slides = []
    try:
        prs = open_pptx(str(p))
        for slide_idx, slide in enumerate(prs.slides, start=1):
            slides.append(
                Slide(
                    ordinal=slide_idx,
                    shapes=tuple(_shape(shp) for shp in slide.shapes),
                    notes_shapes=_notes_shapes(slide),
                )
            )
    except Exception as e:
        # Missing parts and malformed XML surface lazily, while slides are read.
        raise DocumentOpenError(p, str(e) or type(e).__name__) from e

    logger.debug("pptx: %s: %d slides", p, len(slides))
    return Presentation(source_path=p, source_type="pptx", slides=tuple(slides))
