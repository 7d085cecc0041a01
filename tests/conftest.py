"""
Pytest fixtures: test logging and on-the-fly .pptx decks.
"""
import logging
from pathlib import Path
from typing import Callable, Optional

import pytest
from pptx import Presentation
from pptx.enum.shapes import PP_PLACEHOLDER
from pptx.util import Inches

# Default template layouts.
LAYOUT_TITLE = 0
LAYOUT_TITLE_AND_CONTENT = 1
LAYOUT_BLANK = 6


@pytest.fixture(scope="session", autouse=True)
def setup_test_logging():
    """Only errors from the package while tests run."""
    logger = logging.getLogger("ppt2txt")
    logger.handlers.clear()
    handler = logging.StreamHandler()
    handler.setLevel(logging.ERROR)
    handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s - %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.ERROR)
    yield


def _set_notes(slide, notes: str, slide_number: Optional[str]) -> None:
    ns = slide.notes_slide
    ns.notes_text_frame.text = notes
    if slide_number is None:
        return
    for ph in ns.placeholders:
        if ph.placeholder_format.type == PP_PLACEHOLDER.SLIDE_NUMBER:
            ph.text_frame.text = slide_number


@pytest.fixture
def sample_deck(tmp_path: Path) -> Path:
    """Four slides: title slide with notes, title+content, loose text box, empty."""
    prs = Presentation()

    s1 = prs.slides.add_slide(prs.slide_layouts[LAYOUT_TITLE])
    s1.shapes.title.text = "Intro"
    s1.placeholders[1].text = "Welcome aboard"
    _set_notes(s1, "Speaker\nnotes", slide_number="1")

    s2 = prs.slides.add_slide(prs.slide_layouts[LAYOUT_TITLE_AND_CONTENT])
    s2.shapes.title.text = "Agenda"
    s2.placeholders[1].text = "One\nTwo\vTwo and a half"

    s3 = prs.slides.add_slide(prs.slide_layouts[LAYOUT_BLANK])
    tb = s3.shapes.add_textbox(Inches(1), Inches(1), Inches(4), Inches(1))
    tb.text_frame.text = "Loose text"

    prs.slides.add_slide(prs.slide_layouts[LAYOUT_BLANK])

    path = tmp_path / "deck.pptx"
    prs.save(str(path))
    return path


@pytest.fixture
def write_bytes(tmp_path: Path) -> Callable[[str, bytes], Path]:
    def _write(name: str, data: bytes) -> Path:
        p = tmp_path / name
        p.write_bytes(data)
        return p

    return _write
