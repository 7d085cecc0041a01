from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, TextIO, Tuple

from ppt2txt.core.classify import SlideBuckets, collect_slide
from ppt2txt.core.errors import ReportValidationError
from ppt2txt.core.model import Presentation
from ppt2txt.core.text import normalize_text
from ppt2txt.core.utils.logging import get_logger
from ppt2txt.core.validate.schema_validate import load_json, validate_instance

logger = get_logger(__name__)

TITLE_PREFIX = "Title: "
SECTION_SEP = "\n\n"
REPORT_SCHEMA_VERSION = "0.1"


def _schema_path() -> Path:
    # .../ppt2txt/core/report.py -> .../ppt2txt/core/schemas
    return Path(__file__).resolve().parent / "schemas" / "report.schema.json"


def format_slide(ordinal: int, buckets: SlideBuckets, title_prefix: bool = True) -> Optional[str]:
    """Build the normalized text block for one slide.

    Returns None when the slide has no text at all. The header is the title
    (optionally prefixed with "Title: ") or "Slide <n>" when there is no
    title; subtitle, body and notes follow in that order, each after a blank
    line, and only when non-empty.
    """
    if buckets.is_empty():
        return None

    title = buckets.title
    if title:
        header = (TITLE_PREFIX if title_prefix else "") + title
    else:
        header = f"Slide {ordinal}"

    sections = [header]
    for s in (buckets.subtitle, buckets.body, buckets.notes):
        if s:
            sections.append(s)

    return normalize_text(SECTION_SEP.join(sections))


def iter_slide_blocks(prs: Presentation, title_prefix: bool = True) -> Iterator[Tuple[int, str]]:
    """Yield (ordinal, block) in slide order, skipping slides without text."""
    for slide in prs.slides:
        block = format_slide(slide.ordinal, collect_slide(slide), title_prefix)
        if block is None:
            logger.debug("slide %d: no text, skipped", slide.ordinal)
            continue
        yield slide.ordinal, block


def write_text_report(prs: Presentation, sink: TextIO, *, title_prefix: bool = True) -> int:
    """Write one record per emitted slide to `sink`; return the record count.

    Records are separated by a blank line. `sink` is expected to be a text
    stream, which turns "\\n" into the platform line ending.
    """
    n = 0
    for _, block in iter_slide_blocks(prs, title_prefix):
        if n:
            sink.write("\n")
        sink.write(block)
        sink.write("\n")
        n += 1
    return n


def build_json_report(prs: Presentation, *, title_prefix: bool = True) -> Dict[str, Any]:
    """Structured variant of the text report, one entry per emitted slide."""
    slides: List[Dict[str, Any]] = []

    for slide in prs.slides:
        buckets = collect_slide(slide)
        block = format_slide(slide.ordinal, buckets, title_prefix)
        if block is None:
            continue
        slides.append(
            {
                "slide_no": slide.ordinal,
                "title": normalize_text(buckets.title),
                "subtitle": normalize_text(buckets.subtitle),
                "body": normalize_text(buckets.body),
                "notes": normalize_text(buckets.notes),
                "text": block,
            }
        )

    return {
        "schema_version": REPORT_SCHEMA_VERSION,
        "document": {
            "source_path": str(prs.source_path),
            "source_type": prs.source_type,
            "slide_count": prs.slide_count,
        },
        "slides": slides,
    }


def ensure_valid_report(report: Dict[str, Any]) -> None:
    """Raise ReportValidationError unless `report` conforms to the bundled schema."""
    errors = validate_instance(load_json(_schema_path()), report)
    if errors:
        raise ReportValidationError(errors)


def write_json_report(report: Dict[str, Any], sink: TextIO) -> int:
    sink.write(json.dumps(report, ensure_ascii=False, indent=2))
    sink.write("\n")
    return len(report["slides"])
