from __future__ import annotations

import pytest


def make_pdf(page_count: int = 2, width: float = 600, height: float = 800) -> bytes:
    fitz = pytest.importorskip("fitz")
    doc = fitz.open()
    try:
        for number in range(1, page_count + 1):
            page = doc.new_page(width=width, height=height)
            page.insert_text((72, 72), f"Original page {number}", fontsize=12)
        return doc.tobytes()
    finally:
        doc.close()


@pytest.fixture()
def two_page_pdf() -> bytes:
    return make_pdf()


@pytest.fixture()
def make_sample_pdf():
    return make_pdf
