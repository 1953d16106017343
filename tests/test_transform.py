from __future__ import annotations

import pytest

pytest.importorskip("fitz")

from inkstamp.core.page import (
    Size,
    canvas_size_for_scale,
    scale_factors,
    scale_magnitude,
    to_display_space,
    to_document_space,
    to_page_space,
)

PAGE = Size(600, 800)


@pytest.mark.parametrize("scale", [0.5, 1.0, 1.5, 3.0])
@pytest.mark.parametrize("adjustment", [0.0, 12.8])
def test_display_to_document_round_trip(scale: float, adjustment: float) -> None:
    canvas = canvas_size_for_scale(PAGE, scale)
    for point in [(0.0, 0.0), (100.0, 700.0), (canvas.width, canvas.height), (33.3, 12.7)]:
        doc_point = to_document_space(point, PAGE, canvas, adjustment)
        back = to_display_space(doc_point, PAGE, canvas, adjustment)
        assert back == pytest.approx(point)


def test_document_space_origin_is_bottom_left() -> None:
    canvas = canvas_size_for_scale(PAGE, 1.0)
    assert to_document_space((0, 0), PAGE, canvas) == pytest.approx((0, 800))
    assert to_document_space((0, 800), PAGE, canvas) == pytest.approx((0, 0))


def test_scale_applies_to_both_axes() -> None:
    canvas = canvas_size_for_scale(PAGE, 2.0)
    assert canvas == Size(1200, 1600)
    assert to_document_space((200, 200), PAGE, canvas) == pytest.approx((100, 700))


def test_unpopulated_canvas_is_rejected() -> None:
    with pytest.raises(ValueError):
        scale_factors(PAGE, Size(0, 0))
    with pytest.raises(ValueError):
        to_document_space((1, 1), PAGE, Size(600, 0))


def test_magnitude_uses_horizontal_factor() -> None:
    # Non-uniform canvas: x factor 0.5, y factor 1.0
    canvas = Size(1200, 800)
    factors = scale_factors(PAGE, canvas)
    assert (factors.x, factors.y) == pytest.approx((0.5, 1.0))
    assert scale_magnitude(16, PAGE, canvas) == pytest.approx(8)


def test_page_space_flip() -> None:
    assert to_page_space((100, 87.2), PAGE) == pytest.approx((100, 712.8))
