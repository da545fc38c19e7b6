from __future__ import annotations

import logging

from pdf_combine.adapters.pymupdf_adapter import PyMuPdfAdapter
from pdf_combine.domain.errors import RenderError
from pdf_combine.domain.models import PageRef
from pdf_combine.services.document_manager import DocumentReferenceManager

logger = logging.getLogger(__name__)


class ThumbnailService:
    def __init__(
        self, adapter: PyMuPdfAdapter, manager: DocumentReferenceManager, width: int = 240
    ) -> None:
        self.adapter = adapter
        self.manager = manager
        self.width = width
        self._cache: dict[tuple[str, int, int], bytes] = {}
        self._preview_key: tuple[bytes, int, int] | None = None
        self._previews: list[bytes] = []
        manager.add_dispose_listener(self.evict_document)

    def __len__(self) -> int:
        return len(self._cache)

    def thumbnail(self, page_ref: PageRef, width: int | None = None) -> bytes:
        target_width = width or self.width
        key = (page_ref.document_id, page_ref.page_index, target_width)
        if key not in self._cache:
            entry = self.manager.get_document(page_ref.document_id)
            if entry is None:
                raise RenderError(f"Source document {page_ref.document_id} is no longer open.")
            self._cache[key] = self.adapter.render_page(
                entry.handle, page_ref.page_index, target_width
            )
        return self._cache[key]

    def thumbnail_or_none(self, page_ref: PageRef) -> bytes | None:
        """Like ``thumbnail`` but returns None when the page cannot be rendered."""
        try:
            return self.thumbnail(page_ref)
        except RenderError as exc:
            logger.warning(f"Thumbnail unavailable for {page_ref.ref_id}: {exc}")
            return None

    def preview(self, pdf_bytes: bytes, limit: int) -> list[bytes]:
        # Only the latest output is kept; a new combine replaces it.
        key = (pdf_bytes, self.width, limit)
        if self._preview_key != key:
            self._previews = self.adapter.preview_pages(pdf_bytes, self.width, limit)
            self._preview_key = key
        return self._previews

    def evict_document(self, document_id: str) -> None:
        self._cache = {key: value for key, value in self._cache.items() if key[0] != document_id}
