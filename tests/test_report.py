import io
from pathlib import Path

import pytest

from ppt2txt.core.classify import SlideBuckets, collect_slide
from ppt2txt.core.errors import ReportValidationError
from ppt2txt.core.model import PlaceholderKind, Presentation, Shape, Slide
from ppt2txt.core.report import (
    build_json_report,
    ensure_valid_report,
    format_slide,
    iter_slide_blocks,
    write_json_report,
    write_text_report,
)


def ph(kind, text):
    return Shape(has_text_frame=True, text=text, is_placeholder=True, placeholder_kind=kind)


def box(text):
    return Shape(has_text_frame=True, text=text)


def deck(*slides):
    return Presentation(source_path=Path("deck.pptx"), source_type="pptx", slides=tuple(slides))


def test_title_prefix_toggle():
    b = SlideBuckets(title_parts=["Intro"])
    assert format_slide(1, b, title_prefix=True) == "Title: Intro"
    assert format_slide(1, b, title_prefix=False) == "Intro"


def test_slide_number_header_without_title():
    b = SlideBuckets(body_parts=["text"])
    assert format_slide(5, b) == "Slide 5\n\ntext"
    assert format_slide(5, b, title_prefix=False) == "Slide 5\n\ntext"


def test_section_order_and_blank_lines():
    b = SlideBuckets(title_parts=["T"], subtitle_parts=["S"], body_parts=["B1", "B2"], notes_parts=["N"])
    assert format_slide(1, b) == "Title: T\n\nS\n\nB1\nB2\n\nN"


def test_missing_sections_are_left_out():
    b = SlideBuckets(title_parts=["T"], notes_parts=["N"])
    assert format_slide(1, b) == "Title: T\n\nN"


def test_empty_slide_has_no_block():
    assert format_slide(1, SlideBuckets()) is None


def test_block_is_normalized():
    b = SlideBuckets(title_parts=["\u201cQ4\u201d \u2013 results\u2026"], body_parts=["line1\x0bline2"])
    assert format_slide(1, b) == 'Title: "Q4" - results...\n\nline1\nline2'


def test_end_to_end_slide():
    slide = Slide(
        ordinal=1,
        shapes=(ph(PlaceholderKind.TITLE, "Overview\n"), box(" Point A \r\nPoint B")),
        notes_shapes=(box("1"), box("See appendix")),
    )
    b = collect_slide(slide)
    assert (b.title, b.subtitle, b.body, b.notes) == ("Overview", "", "Point A\nPoint B", "See appendix")
    assert format_slide(1, b) == "Title: Overview\n\nPoint A\nPoint B\n\nSee appendix"


def test_empty_slides_are_absent_from_output():
    prs = deck(
        Slide(ordinal=1, shapes=(ph(PlaceholderKind.TITLE, "A"),)),
        Slide(ordinal=2, shapes=(Shape(has_text_frame=False),), notes_shapes=(box("2"),)),
        Slide(ordinal=3, shapes=(box("c"),)),
    )
    blocks = list(iter_slide_blocks(prs))
    assert [n for n, _ in blocks] == [1, 3]
    assert len(blocks) < prs.slide_count


def test_write_text_report_records():
    prs = deck(
        Slide(ordinal=1, shapes=(ph(PlaceholderKind.TITLE, "A"),)),
        Slide(ordinal=2),
        Slide(ordinal=3, shapes=(box("body"),)),
    )
    out = io.StringIO()
    assert write_text_report(prs, out) == 2
    assert out.getvalue() == "Title: A\n\nSlide 3\n\nbody\n"


def test_write_text_report_empty_deck():
    out = io.StringIO()
    assert write_text_report(deck(), out) == 0
    assert out.getvalue() == ""


class TestJsonReport:
    def _prs(self):
        return deck(
            Slide(
                ordinal=1,
                shapes=(ph(PlaceholderKind.CENTER_TITLE, "It\u2019s here"), ph(PlaceholderKind.SUBTITLE, "sub")),
                notes_shapes=(box("1"), box("say hi")),
            ),
            Slide(ordinal=2),
        )

    def test_build(self):
        report = build_json_report(self._prs(), title_prefix=False)
        assert report["schema_version"] == "0.1"
        assert report["document"] == {"source_path": "deck.pptx", "source_type": "pptx", "slide_count": 2}
        assert report["slides"] == [
            {
                "slide_no": 1,
                "title": "It's here",
                "subtitle": "sub",
                "body": "",
                "notes": "say hi",
                "text": "It's here\n\nsub\n\nsay hi",
            }
        ]

    def test_conforms_to_schema(self):
        ensure_valid_report(build_json_report(self._prs()))

    def test_schema_violation_raises(self):
        report = build_json_report(self._prs())
        report["slides"][0]["slide_no"] = 0
        del report["document"]["source_type"]
        with pytest.raises(ReportValidationError) as ei:
            ensure_valid_report(report)
        assert len(ei.value.errors) == 2

    def test_errors_carry_json_paths(self):
        report = build_json_report(self._prs())
        report["slides"][0]["text"] = ""
        report["document"]["source_type"] = "key"
        with pytest.raises(ReportValidationError) as ei:
            ensure_valid_report(report)
        errors = ei.value.errors
        assert any(e.startswith("$['document']['source_type']:") for e in errors)
        assert any(e.startswith("$['slides'][0]['text']:") for e in errors)

    def test_write(self):
        out = io.StringIO()
        assert write_json_report(build_json_report(self._prs()), out) == 1
        assert out.getvalue().endswith("}\n")
        assert '"title": "It\'s here"' in out.getvalue()
