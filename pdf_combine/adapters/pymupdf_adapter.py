from __future__ import annotations

from pathlib import Path
from typing import cast

import fitz  # type: ignore[import-untyped]

from pdf_combine.domain.errors import MergeError, OpenError, RenderError

METADATA_KEYS = ("title", "author", "subject", "keywords", "creator")


class PyMuPdfAdapter:
    @staticmethod
    def _optimized_bytes(document: fitz.Document) -> bytes:
        return cast(
            bytes,
            document.tobytes(
                garbage=4,
                clean=True,
                deflate=True,
                deflate_images=True,
                deflate_fonts=True,
            ),
        )

    @staticmethod
    def _check_opened(document: fitz.Document, name: str) -> fitz.Document:
        if document.needs_pass:
            document.close()
            raise OpenError(f"{name} is password protected")
        if document.page_count == 0:
            document.close()
            raise OpenError(f"{name} contains no pages")
        return document

    def open_path(self, path: str | Path) -> fitz.Document:
        name = Path(path).name
        try:
            document = fitz.open(str(path), filetype="pdf")
        except Exception as exc:
            raise OpenError(f"Unable to open {name}") from exc
        return self._check_opened(document, name)

    def open_bytes(self, content: bytes, name: str = "document.pdf") -> fitz.Document:
        try:
            document = fitz.open(stream=content, filetype="pdf")
        except Exception as exc:
            raise OpenError(f"Unable to open {name}") from exc
        return self._check_opened(document, name)

    @staticmethod
    def close(document: fitz.Document) -> None:
        if not document.is_closed:
            document.close()

    @staticmethod
    def page_count(document: fitz.Document) -> int:
        return int(document.page_count)

    def get_page_count(self, pdf_bytes: bytes) -> int:
        try:
            with fitz.open(stream=pdf_bytes, filetype="pdf") as document:
                return int(document.page_count)
        except Exception as exc:
            raise OpenError("Unable to read PDF page count") from exc

    @staticmethod
    def _render(page: fitz.Page, target_width: int) -> bytes:
        zoom = target_width / max(page.rect.width, 1.0)
        pixmap = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom), alpha=False)
        return cast(bytes, pixmap.tobytes("png"))

    def render_page(self, document: fitz.Document, page_index: int, target_width: int) -> bytes:
        try:
            return self._render(document[page_index], target_width)
        except Exception as exc:
            raise RenderError(f"Unable to render page {page_index + 1}") from exc

    def preview_pages(self, pdf_bytes: bytes, target_width: int, limit: int) -> list[bytes]:
        try:
            with fitz.open(stream=pdf_bytes, filetype="pdf") as document:
                count = min(document.page_count, limit)
                return [self._render(document[index], target_width) for index in range(count)]
        except Exception as exc:
            raise RenderError("Unable to render combined PDF preview") from exc

    def merge_pages(
        self, base: fitz.Document, pages: list[tuple[fitz.Document, int]]
    ) -> bytes:
        """Copy ``pages`` in order into a new document that takes ``base``'s metadata."""
        output = fitz.open()
        try:
            runs: list[tuple[fitz.Document, int, int]] = []
            if pages:
                run_doc, run_start = pages[0]
                run_end = run_start
                for document, page_index in pages[1:]:
                    if document is run_doc and page_index == run_end + 1:
                        run_end = page_index
                        continue
                    runs.append((run_doc, run_start, run_end))
                    run_doc, run_start, run_end = document, page_index, page_index
                runs.append((run_doc, run_start, run_end))

            for source_doc, from_page, to_page in runs:
                output.insert_pdf(source_doc, from_page=from_page, to_page=to_page)

            base_metadata = base.metadata or {}
            metadata = {key: base_metadata.get(key) or "" for key in METADATA_KEYS}
            if any(metadata.values()):
                output.set_metadata(metadata)

            return self._optimized_bytes(output)
        except Exception as exc:
            raise MergeError("Unable to merge selected pages") from exc
        finally:
            output.close()
