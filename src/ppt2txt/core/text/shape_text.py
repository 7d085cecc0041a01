from __future__ import annotations

import re
from typing import Optional

from ppt2txt.core.model import Shape

# Paragraph separator used while text is being collected. Platform line
# endings are applied by the output sink.
PARAGRAPH_SEP = "\n"

_PARAGRAPH_BREAK_RE = re.compile(r"[\r\n]+")


def extract_shape_text(shape: Shape) -> Optional[str]:
    """Return the trimmed, paragraph-joined text of one shape.

    Returns None (never "") when the shape has no text frame or nothing
    survives trimming, so callers can skip the shape altogether.
    """
    if not shape.has_text_frame or not shape.text:
        return None

    paragraphs = (p.strip() for p in _PARAGRAPH_BREAK_RE.split(shape.text.strip()))
    s = PARAGRAPH_SEP.join(p for p in paragraphs if p).strip()
    return s or None
