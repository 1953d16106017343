from __future__ import annotations

import pytest

fitz = pytest.importorskip("fitz")

from inkstamp.core.signature import SignatureCapture, SignatureFormat


def _alpha_values(png: bytes) -> set:
    pix = fitz.Pixmap(png)
    assert pix.alpha
    return set(pix.samples[pix.n - 1::pix.n])


def test_gestures_build_strokes() -> None:
    capture = SignatureCapture()
    capture.pointer_down(10, 10)
    capture.pointer_move(20, 15)
    capture.pointer_move(20, 15)  # repeated point is dropped
    capture.pointer_move(30, 20)
    capture.pointer_up()
    capture.pointer_down(50, 50)
    capture.pointer_up()

    assert capture.paths == (
        ((10.0, 10.0), (20.0, 15.0), (30.0, 20.0)),
        ((50.0, 50.0),),
    )
    assert not capture.is_drawing


def test_move_without_press_is_ignored() -> None:
    capture = SignatureCapture()
    capture.pointer_move(5, 5)
    assert capture.paths == ()


def test_points_are_clamped_to_surface() -> None:
    capture = SignatureCapture(width=400, height=200)
    capture.pointer_down(-5, 250)
    capture.pointer_move(500, 100)
    assert capture.paths == (((0.0, 200.0), (400.0, 100.0)),)


def test_save_paths() -> None:
    capture = SignatureCapture(color="#123456", line_width=3)
    capture.pointer_down(1, 1)
    capture.pointer_move(2, 2)
    signature = capture.save(SignatureFormat.PATHS)

    assert signature.format == SignatureFormat.PATHS
    assert signature.stroke_paths == (((1.0, 1.0), (2.0, 2.0)),)
    assert (signature.width, signature.height) == (400, 200)
    assert signature.color == "#123456"
    assert signature.line_width == 3
    assert not signature.is_empty


def test_save_image_has_ink() -> None:
    capture = SignatureCapture()
    capture.pointer_down(20, 100)
    capture.pointer_move(380, 100)
    signature = capture.save(SignatureFormat.IMAGE)

    assert signature.format == SignatureFormat.IMAGE
    pix = fitz.Pixmap(signature.image_data)
    assert (pix.width, pix.height) == (400, 200)
    assert _alpha_values(signature.image_data) != {0}


def test_clear_before_save_gives_empty_signature() -> None:
    capture = SignatureCapture()
    capture.pointer_down(20, 20)
    capture.pointer_move(200, 150)
    capture.pointer_up()
    capture.clear()

    paths = capture.save(SignatureFormat.PATHS)
    assert paths.stroke_paths == ()
    assert paths.is_empty

    image = capture.save(SignatureFormat.IMAGE)
    assert _alpha_values(image.image_data) == {0}
