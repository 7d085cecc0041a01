"""Document providers: decode a presentation file into `ppt2txt.core.model`.

Public API:

    open_presentation(path) -> Presentation      # raises DocumentOpenError
    read_pptx(path) -> Presentation              # OOXML, python-pptx
    read_ppt(path) -> Presentation               # legacy binary, olefile
"""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from ppt2txt.core.errors import DocumentOpenError
from ppt2txt.core.model import Presentation
from ppt2txt.core.utils.logging import get_logger

from .ppt_provider import read_ppt
from .pptx_provider import read_pptx

logger = get_logger(__name__)

ZIP_MAGIC = b"PK\x03\x04"
OLE_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"

PRESENTATION_SUFFIXES = (".ppt", ".pptx")

_READER_BY_SUFFIX: dict[str, Callable[[Path], Presentation]] = {
    ".pptx": read_pptx,
    ".pptm": read_pptx,
    ".ppsx": read_pptx,
    ".ppt": read_ppt,
    ".pps": read_ppt,
}


def _sniff(p: Path) -> Optional[Callable[[Path], Presentation]]:
    try:
        with p.open("rb") as f:
            head = f.read(len(OLE_MAGIC))
    except OSError as e:
        raise DocumentOpenError(p, e.strerror or str(e)) from e

    if head.startswith(ZIP_MAGIC):
        return read_pptx
    if head == OLE_MAGIC:
        return read_ppt
    return None


def open_presentation(path: str | Path) -> Presentation:
    """Open a .pptx or .ppt file, choosing the decoder by file signature.

    Falls back to the file suffix when the signature is not recognized.
    """
    p = Path(path)
    reader = _sniff(p) or _READER_BY_SUFFIX.get(p.suffix.lower())
    if reader is None:
        raise DocumentOpenError(p, "not a PowerPoint presentation")

    logger.debug("opening %s with %s", p, reader.__name__)
    return reader(p)


__all__ = [
    "PRESENTATION_SUFFIXES",
    "open_presentation",
    "read_ppt",
    "read_pptx",
]
