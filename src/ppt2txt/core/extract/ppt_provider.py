"""
ppt_provider.py: Legacy PowerPoint 97-2003 (.ppt) decoder.

A .ppt file is an OLE2 compound file. Slide text lives in the
"PowerPoint Document" stream as a tree of records, each with an 8-byte
header:

    bytes 0-1  recVer (low 4 bits) | recInstance (high 12 bits)
    bytes 2-3  recType
    bytes 4-7  recLen (body length, header excluded)

recVer == 0xF marks a container whose body is a sequence of child records.

Text comes from two places:

- SlideListWithText (instance 0) repeats the placeholder text of every
  slide in presentation order. A SlidePersistAtom opens the next slide, a
  TextHeaderAtom gives the role of the text that follows, and
  TextCharsAtom/TextBytesAtom hold the text itself (paragraphs separated by
  CR, soft line breaks as VT).
- SlideContainer and NotesContainer drawings hold the rest: text boxes of a
  slide, and the speaker notes. Their text sits in OfficeArtClientTextbox
  records.

A slide's SlideContainer is found through the persist directory
(SlidePersistAtom.persistIdRef -> stream offset). Its notes are found via
SlideAtom.notesIdRef and the notes list (instance 2), or via
NotesAtom.slideIdRef. Streams without a persist directory or NotesAtoms fall
back to stream order.
"""
from __future__ import annotations

import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

import olefile

from ppt2txt.core.errors import DocumentOpenError
from ppt2txt.core.model import PlaceholderKind, Presentation, Shape, Slide
from ppt2txt.core.utils.logging import get_logger

logger = get_logger(__name__)

DOCUMENT_STREAM = "PowerPoint Document"

RT_SLIDE_CONTAINER = 0x03EE
RT_SLIDE_ATOM = 0x03EF
RT_NOTES_CONTAINER = 0x03F0
RT_NOTES_ATOM = 0x03F1
RT_SLIDE_PERSIST_ATOM = 0x03F3
RT_TEXT_HEADER_ATOM = 0x0F9F
RT_TEXT_CHARS_ATOM = 0x0FA0
RT_TEXT_BYTES_ATOM = 0x0FA8
RT_SLIDE_LIST_WITH_TEXT = 0x0FF0
RT_PERSIST_DIRECTORY_ATOM = 0x1772
RT_CLIENT_TEXTBOX = 0xF00D

SLWT_SLIDES = 0
SLWT_NOTES = 2

_HEADER = struct.Struct("<HHI")
_U32 = struct.Struct("<I")

# TextHeaderAtom.textType
_KIND_BY_TEXT_TYPE = {
    0: PlaceholderKind.TITLE,
    1: PlaceholderKind.BODY,
    2: PlaceholderKind.BODY,  # notes
    4: PlaceholderKind.OTHER,
    5: PlaceholderKind.SUBTITLE,  # center body
    6: PlaceholderKind.CENTER_TITLE,
    7: PlaceholderKind.BODY,  # half body
    8: PlaceholderKind.BODY,  # quarter body
}

TextBlock = Tuple[Optional[int], str]


@dataclass
class SlideEntry:
    """One SlidePersistAtom of a SlideListWithText and the text that follows it."""

    persist_id: int = 0
    # slideId for slides, notesId for notes.
    slide_id: int = 0
    blocks: List[TextBlock] = field(default_factory=list)


@dataclass
class DrawingText:
    """Text boxes of one SlideContainer or NotesContainer."""

    offset: int
    # SlideAtom.notesIdRef or NotesAtom.slideIdRef; None without the atom.
    ref: Optional[int] = None
    blocks: List[TextBlock] = field(default_factory=list)


@dataclass
class SlideText:
    placeholders: List[TextBlock] = field(default_factory=list)
    textboxes: List[TextBlock] = field(default_factory=list)
    notes: List[TextBlock] = field(default_factory=list)


@dataclass
class _StreamIndex:
    slide_lists: Dict[int, List[Tuple[int, int]]] = field(default_factory=dict)
    slides: List[DrawingText] = field(default_factory=list)
    notes: List[DrawingText] = field(default_factory=list)
    # persist id -> stream offset of the record header
    persist: Dict[int, int] = field(default_factory=dict)


def _iter_records(data: bytes, start: int, end: int) -> Iterator[Tuple[int, int, bool, int, int]]:
    """Yield (instance, type, is_container, body_offset, body_len) for sibling records."""
    offset = start
    while offset + _HEADER.size <= end:
        ver_inst, rec_type, rec_len = _HEADER.unpack_from(data, offset)
        body = offset + _HEADER.size
        if body + rec_len > end:
            # Truncated record; nothing after it can be trusted.
            logger.debug("ppt: truncated record 0x%04X at offset %d", rec_type, offset)
            return
        yield ver_inst >> 4, rec_type, (ver_inst & 0x0F) == 0x0F, body, rec_len
        offset = body + rec_len


def _u32(data: bytes, body: int, rec_len: int, at: int) -> int:
    if rec_len < at + 4:
        return 0
    return _U32.unpack_from(data, body + at)[0]


def _decode_text(rec_type: int, raw: bytes) -> str:
    if rec_type == RT_TEXT_CHARS_ATOM:
        return raw.decode("utf-16-le", errors="replace")
    return raw.decode("latin-1")


def _text_atoms(data: bytes, start: int, end: int) -> Iterator[TextBlock]:
    text_type: Optional[int] = None
    for _, rec_type, _, body, rec_len in _iter_records(data, start, end):
        if rec_type == RT_TEXT_HEADER_ATOM and rec_len >= 4:
            text_type = _u32(data, body, rec_len, 0)
        elif rec_type in (RT_TEXT_CHARS_ATOM, RT_TEXT_BYTES_ATOM):
            yield text_type, _decode_text(rec_type, data[body : body + rec_len])


def _textbox_blocks(data: bytes, start: int, end: int, out: List[TextBlock]) -> None:
    for _, rec_type, is_container, body, rec_len in _iter_records(data, start, end):
        if rec_type == RT_CLIENT_TEXTBOX:
            out.extend(_text_atoms(data, body, body + rec_len))
        elif is_container:
            _textbox_blocks(data, body, body + rec_len, out)


def _read_drawing(data: bytes, offset: int, body: int, rec_len: int, atom_type: int, ref_at: int) -> DrawingText:
    drawing = DrawingText(offset=offset)
    for _, rec_type, _, child, child_len in _iter_records(data, body, body + rec_len):
        if rec_type == atom_type:
            drawing.ref = _u32(data, child, child_len, ref_at)
            break
    _textbox_blocks(data, body, body + rec_len, drawing.blocks)
    return drawing


def _read_persist_directory(data: bytes, body: int, rec_len: int, out: Dict[int, int]) -> None:
    pos, end = body, body + rec_len
    while pos + 4 <= end:
        entry = _U32.unpack_from(data, pos)[0]
        first, count = entry & 0xFFFFF, entry >> 20
        pos += 4
        for i in range(count):
            if pos + 4 > end:
                return
            out[first + i] = _U32.unpack_from(data, pos)[0]
            pos += 4


def _scan(data: bytes, start: int, end: int, idx: _StreamIndex) -> None:
    for inst, rec_type, is_container, body, rec_len in _iter_records(data, start, end):
        offset = body - _HEADER.size
        if rec_type == RT_SLIDE_LIST_WITH_TEXT:
            idx.slide_lists.setdefault(inst, []).append((body, body + rec_len))
        elif rec_type == RT_SLIDE_CONTAINER:
            # SlideAtom: geom, rgPlaceholderTypes[8], masterIdRef, notesIdRef
            idx.slides.append(_read_drawing(data, offset, body, rec_len, RT_SLIDE_ATOM, 16))
        elif rec_type == RT_NOTES_CONTAINER:
            idx.notes.append(_read_drawing(data, offset, body, rec_len, RT_NOTES_ATOM, 0))
        elif rec_type == RT_PERSIST_DIRECTORY_ATOM:
            # Incremental saves append newer directories; later entries win.
            _read_persist_directory(data, body, rec_len, idx.persist)
        elif is_container:
            _scan(data, body, body + rec_len, idx)


def parse_slide_list(data: bytes, start: int = 0, end: Optional[int] = None) -> List[SlideEntry]:
    """Split one SlideListWithText body into per-slide entries."""
    end = len(data) if end is None else end
    entries: List[SlideEntry] = []
    text_type: Optional[int] = None

    for _, rec_type, _, body, rec_len in _iter_records(data, start, end):
        if rec_type == RT_SLIDE_PERSIST_ATOM:
            # persistIdRef, flags, cTexts, slideId
            entries.append(SlideEntry(persist_id=_u32(data, body, rec_len, 0), slide_id=_u32(data, body, rec_len, 12)))
            text_type = None
        elif rec_type == RT_TEXT_HEADER_ATOM and rec_len >= 4:
            text_type = _u32(data, body, rec_len, 0)
        elif rec_type in (RT_TEXT_CHARS_ATOM, RT_TEXT_BYTES_ATOM) and entries:
            entries[-1].blocks.append((text_type, _decode_text(rec_type, data[body : body + rec_len])))

    return entries


def parse_document_stream(data: bytes) -> List[SlideText]:
    """Return the text of every slide, in presentation order."""
    idx = _StreamIndex()
    _scan(data, 0, len(data), idx)

    def _entries(instance: int) -> List[SlideEntry]:
        out: List[SlideEntry] = []
        for s, e in idx.slide_lists.get(instance, []):
            out.extend(parse_slide_list(data, s, e))
        return out

    slide_entries = _entries(SLWT_SLIDES)
    notes_persist = {n.slide_id: n.persist_id for n in _entries(SLWT_NOTES)}

    slides_at = {d.offset: d for d in idx.slides}
    notes_at = {d.offset: d for d in idx.notes}
    # slideIdRef 0 is the notes master.
    notes_by_slide = {d.ref: d for d in idx.notes if d.ref}
    notes_in_order = not idx.persist and all(d.ref is None for d in idx.notes)
    if notes_in_order and idx.notes:
        logger.debug("ppt: no persist directory or NotesAtom, notes matched by order")

    out: List[SlideText] = []
    for i, entry in enumerate(slide_entries):
        if idx.persist:
            drawing = slides_at.get(idx.persist.get(entry.persist_id, -1))
        else:
            drawing = idx.slides[i] if i < len(idx.slides) else None

        notes = None
        if drawing is not None and drawing.ref and idx.persist:
            notes_persist_id = notes_persist.get(drawing.ref)
            if notes_persist_id is not None:
                notes = notes_at.get(idx.persist.get(notes_persist_id, -1))
        if notes is None and entry.slide_id:
            notes = notes_by_slide.get(entry.slide_id)
        if notes is None and notes_in_order and i < len(idx.notes):
            notes = idx.notes[i]

        out.append(
            SlideText(
                placeholders=entry.blocks,
                textboxes=drawing.blocks if drawing is not None else [],
                notes=notes.blocks if notes is not None else [],
            )
        )
    return out


def _placeholder_shapes(blocks: List[TextBlock]) -> Tuple[Shape, ...]:
    return tuple(
        Shape(
            has_text_frame=True,
            text=text,
            is_placeholder=True,
            placeholder_kind=_KIND_BY_TEXT_TYPE.get(text_type, PlaceholderKind.OTHER),
        )
        for text_type, text in blocks
    )


def _textbox_shapes(blocks: List[TextBlock]) -> Tuple[Shape, ...]:
    return tuple(Shape(has_text_frame=True, text=text) for _, text in blocks)


def build_presentation(path: Path, data: bytes) -> Presentation:
    slides = []
    for ordinal, st in enumerate(parse_document_stream(data), start=1):
        slides.append(
            Slide(
                ordinal=ordinal,
                shapes=_placeholder_shapes(st.placeholders) + _textbox_shapes(st.textboxes),
                notes_shapes=_textbox_shapes(st.notes),
            )
        )

    return Presentation(source_path=path, source_type="ppt", slides=tuple(slides))


def _read_document_stream(p: Path) -> bytes:
    try:
        if not olefile.isOleFile(str(p)):
            raise DocumentOpenError(p, "not an OLE2 compound file")
        with olefile.OleFileIO(str(p)) as ole:
            if not ole.exists(DOCUMENT_STREAM):
                raise DocumentOpenError(p, f"no '{DOCUMENT_STREAM}' stream")
            return ole.openstream(DOCUMENT_STREAM).read()
    except DocumentOpenError:
        raise
    except Exception as e:
        raise DocumentOpenError(p, str(e) or type(e).__name__) from e


def read_ppt(path: str | Path) -> Presentation:
    """Decode a legacy binary presentation into the document model."""
    p = Path(path)
    data = _read_document_stream(p)
    prs = build_presentation(p, data)
    logger.debug("ppt: %s: %d slides", p, prs.slide_count)
    return prs
