import zipfile

import pytest

from ppt2txt.core.classify import classify_slide, extract_notes
from ppt2txt.core.errors import DocumentOpenError
from ppt2txt.core.extract import open_presentation, read_pptx
from ppt2txt.core.model import PlaceholderKind
from ppt2txt.core.report import iter_slide_blocks


def test_reads_slides_in_order(sample_deck):
    prs = read_pptx(sample_deck)
    assert prs.source_type == "pptx"
    assert prs.slide_count == 4
    assert [s.ordinal for s in prs.slides] == [1, 2, 3, 4]


def test_placeholder_kinds(sample_deck):
    prs = read_pptx(sample_deck)
    s1, s2, s3, _ = prs.slides

    title = s1.shapes[0]
    assert title.is_placeholder
    assert title.placeholder_kind is PlaceholderKind.CENTER_TITLE
    assert s1.shapes[1].placeholder_kind is PlaceholderKind.SUBTITLE

    assert s2.shapes[0].placeholder_kind is PlaceholderKind.TITLE
    assert s2.shapes[1].placeholder_kind in (PlaceholderKind.BODY, PlaceholderKind.OBJECT)

    assert not s3.shapes[0].is_placeholder
    assert s3.shapes[0].placeholder_kind is None


def test_classification_from_real_deck(sample_deck):
    s1, s2, s3, s4 = read_pptx(sample_deck).slides
    b1 = classify_slide(s1)
    assert (b1.title, b1.subtitle, b1.body) == ("Intro", "Welcome aboard", "")
    b2 = classify_slide(s2)
    assert b2.title == "Agenda"
    assert b2.body == "One\nTwo\x0bTwo and a half"
    assert classify_slide(s3).body == "Loose text"
    assert classify_slide(s4).is_empty()


def test_notes(sample_deck):
    s1, s2, _, _ = read_pptx(sample_deck).slides
    assert extract_notes(s1) == "Speaker\nnotes"
    # No notes page was ever created for slide 2.
    assert s2.notes_shapes == ()


def test_blocks(sample_deck):
    blocks = dict(iter_slide_blocks(open_presentation(sample_deck)))
    assert sorted(blocks) == [1, 2, 3]
    assert blocks[1] == "Title: Intro\n\nWelcome aboard\n\nSpeaker\nnotes"
    assert blocks[2] == "Title: Agenda\n\nOne\nTwo\nTwo and a half"
    assert blocks[3] == "Slide 3\n\nLoose text"


def test_extension_is_not_needed_for_zip_signature(sample_deck, tmp_path):
    renamed = tmp_path / "deck.bin"
    renamed.write_bytes(sample_deck.read_bytes())
    assert open_presentation(renamed).slide_count == 4


def test_garbage_with_pptx_suffix(write_bytes):
    with pytest.raises(DocumentOpenError):
        open_presentation(write_bytes("broken.pptx", b"this is not a deck"))


def test_zip_that_is_not_a_presentation(tmp_path):
    p = tmp_path / "archive.zip"
    with zipfile.ZipFile(p, "w") as zf:
        zf.writestr("hello.txt", "hi")
    with pytest.raises(DocumentOpenError) as ei:
        open_presentation(p)
    assert ei.value.__cause__ is not None


def test_unknown_format(write_bytes):
    with pytest.raises(DocumentOpenError, match="not a PowerPoint presentation"):
        open_presentation(write_bytes("notes.txt", b"plain text"))


def test_missing_file(tmp_path):
    with pytest.raises(DocumentOpenError):
        open_presentation(tmp_path / "nope.pptx")
