from __future__ import annotations

from pathlib import Path

import pytest

fitz = pytest.importorskip("fitz")

from inkstamp.core.annotations import SignatureAnnotation, TextAnnotation
from inkstamp.core.document import DocumentCompositor
from inkstamp.core.errors import ExportError
from inkstamp.core.page import Size
from inkstamp.core.signature import SignatureCapture, SignatureFormat

UNIT = Size(600, 800)


def _spans(page) -> list:
    spans = []
    for block in page.get_text("dict")["blocks"]:
        for line in block.get("lines", []):
            spans.extend(line["spans"])
    return spans


def _png_signature() -> bytes:
    capture = SignatureCapture()
    capture.pointer_down(20, 100)
    capture.pointer_move(380, 120)
    return capture.save(SignatureFormat.IMAGE).image_data


def test_sign_here_lands_at_expected_position(two_page_pdf: bytes) -> None:
    annotation = TextAnnotation(page=1, x=100, y=700, text="Sign here", font_size=16, id="t1")
    result = DocumentCompositor().compose(two_page_pdf, [annotation], {1: UNIT})

    assert result.skipped == []
    assert result.pages_touched == {1}
    assert result.filename == "annotated.pdf"

    with fitz.open(stream=result.data, filetype="pdf") as out, \
            fitz.open(stream=two_page_pdf, filetype="pdf") as src:
        span = next(s for s in _spans(out[0]) if s["text"] == "Sign here")
        origin_x, origin_y = span["origin"]
        assert origin_x == pytest.approx(100, abs=0.5)
        # Document space is bottom-up: 800 - 700 - 16 * 0.8
        assert 800 - origin_y == pytest.approx(87.2, abs=0.5)
        assert span["size"] == pytest.approx(16, abs=0.1)

        assert out[1].read_contents() == src[1].read_contents()


def test_scale_is_undone_on_export(two_page_pdf: bytes) -> None:
    # Same visual spot at 2x zoom: everything in display space doubles
    annotation = TextAnnotation(page=1, x=200, y=1400, text="Zoomed", font_size=32, id="t")
    result = DocumentCompositor().compose(two_page_pdf, [annotation], {1: Size(1200, 1600)})

    with fitz.open(stream=result.data, filetype="pdf") as out:
        span = next(s for s in _spans(out[0]) if s["text"] == "Zoomed")
        assert span["origin"][0] == pytest.approx(100, abs=0.5)
        assert 800 - span["origin"][1] == pytest.approx(87.2, abs=0.5)
        assert span["size"] == pytest.approx(16, abs=0.1)


def test_only_annotated_pages_are_touched(make_sample_pdf) -> None:
    source = make_sample_pdf(page_count=4)
    annotations = [
        TextAnnotation(page=1, x=10, y=10, text="one", id="a"),
        TextAnnotation(page=1, x=10, y=50, text="one again", id="b"),
        TextAnnotation(page=2, x=10, y=10, text="two", id="c"),
        TextAnnotation(page=3, x=10, y=10, text="three", id="d"),
    ]
    sizes = {page: UNIT for page in (1, 2, 3)}
    result = DocumentCompositor().compose(source, annotations, sizes)

    assert result.pages_touched == {1, 2, 3}
    assert result.page_count == 4

    with fitz.open(stream=result.data, filetype="pdf") as out, \
            fitz.open(stream=source, filetype="pdf") as src:
        assert out[3].read_contents() == src[3].read_contents()
        for index in (0, 1, 2):
            assert out[index].read_contents() != src[index].read_contents()


def test_malformed_image_is_skipped(make_sample_pdf) -> None:
    source = make_sample_pdf(page_count=1)
    first = TextAnnotation(page=1, x=10, y=100, text="First", id="first")
    broken = SignatureAnnotation(page=1, x=10, y=200, width=200, height=100,
                                 image_data=b"definitely not a png", id="broken")
    third = TextAnnotation(page=1, x=10, y=400, text="Third", id="third")

    result = DocumentCompositor().compose(source, [first, broken, third], {1: UNIT})

    assert result.skipped == ["broken"]
    assert result.has_skipped
    with fitz.open(stream=result.data, filetype="pdf") as out:
        text = out[0].get_text()
        assert "First" in text
        assert "Third" in text


def test_vector_signature_is_drawn_inside_its_box(two_page_pdf: bytes) -> None:
    signature = SignatureAnnotation(
        page=2, x=100, y=100, width=400, height=200,
        stroke_paths=(((0.0, 0.0), (400.0, 200.0)), ((10.0, 10.0),)),
        id="sig",
    )
    result = DocumentCompositor().compose(two_page_pdf, [signature], {2: UNIT})

    assert result.skipped == []
    with fitz.open(stream=result.data, filetype="pdf") as out:
        drawings = out[1].get_drawings()
        assert drawings
        rect = drawings[0]["rect"]
        assert rect.x0 == pytest.approx(100, abs=2)
        assert rect.y0 == pytest.approx(100, abs=2)
        assert rect.x1 == pytest.approx(500, abs=2)
        assert rect.y1 == pytest.approx(300, abs=2)


def test_image_signature_is_placed_at_half_size(two_page_pdf: bytes) -> None:
    signature = SignatureAnnotation(page=1, x=50, y=60, width=200, height=100,
                                    image_data=_png_signature(), id="img")
    result = DocumentCompositor().compose(two_page_pdf, [signature], {1: UNIT})

    assert result.skipped == []
    with fitz.open(stream=result.data, filetype="pdf") as out:
        images = out[0].get_images(full=True)
        assert images
        bbox = out[0].get_image_bbox(images[0])
        assert (bbox.x0, bbox.y0) == pytest.approx((50, 60), abs=0.5)
        assert (bbox.width, bbox.height) == pytest.approx((200, 100), abs=0.5)


def test_annotations_on_missing_pages_are_skipped(two_page_pdf: bytes) -> None:
    annotations = [
        TextAnnotation(page=5, x=0, y=0, text="nowhere", id="far"),
        TextAnnotation(page=2, x=0, y=0, text="unrendered", id="unsized"),
    ]
    result = DocumentCompositor().compose(two_page_pdf, annotations, {})
    assert sorted(result.skipped) == ["far", "unsized"]
    assert result.pages_touched == set()


def test_progress_is_reported(two_page_pdf: bytes) -> None:
    calls = []
    annotations = [
        TextAnnotation(page=1, x=0, y=0, id="a"),
        TextAnnotation(page=2, x=0, y=0, id="b"),
    ]
    DocumentCompositor().compose(two_page_pdf, annotations, {1: UNIT, 2: UNIT},
                                 progress=lambda done, total: calls.append((done, total)))
    assert calls == [(0, 2), (1, 2), (2, 2)]


def test_unreadable_source_raises() -> None:
    with pytest.raises(ExportError):
        DocumentCompositor().compose(b"garbage", [], {})


def test_source_bytes_are_not_modified(two_page_pdf: bytes) -> None:
    original = bytes(two_page_pdf)
    DocumentCompositor().compose(two_page_pdf, [TextAnnotation(page=1, x=0, y=0, id="a")],
                                 {1: UNIT})
    assert two_page_pdf == original


def test_save_writes_file(two_page_pdf: bytes, tmp_path: Path) -> None:
    result = DocumentCompositor().compose(two_page_pdf, [], {})
    path = result.save(tmp_path / "annotated.pdf")
    assert path.read_bytes() == result.data
    with fitz.open(str(path)) as doc:
        assert doc.page_count == 2


def test_round_trip_without_annotations(two_page_pdf: bytes) -> None:
    result = DocumentCompositor().compose(two_page_pdf, [], {})

    assert result.pages_touched == set()
    with fitz.open(stream=result.data, filetype="pdf") as out, \
            fitz.open(stream=two_page_pdf, filetype="pdf") as src:
        assert out.page_count == src.page_count
        for index in range(src.page_count):
            assert out[index].get_text() == src[index].get_text()
