from __future__ import annotations

from pathlib import Path
from typing import Callable

import fitz
import pytest

from pdf_combine.adapters.pymupdf_adapter import PyMuPdfAdapter
from pdf_combine.services.combine_session import CombineSession


def _pdf_bytes(pages: list[str], title: str = "") -> bytes:
    document = fitz.open()
    try:
        for text in pages:
            page = document.new_page()
            page.insert_text((72, 72), text)
        if title:
            document.set_metadata({"title": title})
        return document.tobytes(deflate=True, garbage=3)
    finally:
        document.close()


@pytest.fixture
def synthetic_pdf_bytes() -> bytes:
    return _pdf_bytes(["Cover page", "Chapter 1", "Chapter 2"])


@pytest.fixture
def make_pdf(tmp_path: Path) -> Callable[..., Path]:
    def factory(name: str, pages: list[str], title: str = "") -> Path:
        path = tmp_path / name
        path.write_bytes(_pdf_bytes(pages, title=title))
        return path

    return factory


@pytest.fixture
def doc_a(make_pdf: Callable[..., Path]) -> Path:
    return make_pdf("a.pdf", ["A0", "A1", "A2"], title="Document A")


@pytest.fixture
def doc_b(make_pdf: Callable[..., Path]) -> Path:
    return make_pdf("b.pdf", ["B0", "B1"])


@pytest.fixture
def adapter() -> PyMuPdfAdapter:
    return PyMuPdfAdapter()


@pytest.fixture
def session(adapter: PyMuPdfAdapter):
    combine_session = CombineSession(adapter)
    yield combine_session
    combine_session.reset()


@pytest.fixture
def page_texts() -> Callable[[bytes], list[str]]:
    def read(pdf_bytes: bytes) -> list[str]:
        with fitz.open(stream=pdf_bytes, filetype="pdf") as document:
            return [page.get_text("text").strip() for page in document]

    return read
