from __future__ import annotations

import logging
from collections.abc import Sequence

from pdf_combine.adapters.pymupdf_adapter import PyMuPdfAdapter
from pdf_combine.domain.errors import MergeError, OpenError
from pdf_combine.domain.models import MergeResult, PageRef
from pdf_combine.services.document_manager import DocumentReferenceManager

logger = logging.getLogger(__name__)


class MergeService:
    def __init__(self, adapter: PyMuPdfAdapter, output_name: str = "combined.pdf") -> None:
        self.adapter = adapter
        self.output_name = output_name

    def merge(self, manager: DocumentReferenceManager, page_refs: Sequence[PageRef]) -> MergeResult:
        if not page_refs:
            raise MergeError("Cannot merge when no pages are selected.")

        pages = []
        for page_ref in page_refs:
            entry = manager.get_document(page_ref.document_id)
            if entry is None:
                raise MergeError(f"Source document {page_ref.document_id} is no longer open.")
            pages.append((entry.handle, page_ref.page_index))

        base_handle = pages[0][0]
        output = self.adapter.merge_pages(base_handle, pages)

        try:
            merged_pages = self.adapter.get_page_count(output)
        except OpenError as exc:
            raise MergeError("Combined PDF could not be read back.") from exc
        if merged_pages != len(page_refs):
            raise MergeError(
                f"Combined PDF has {merged_pages} pages, expected {len(page_refs)}."
            )

        logger.info(f"Merged {merged_pages} pages into {len(output)} bytes")
        return MergeResult(
            output_name=self.output_name, output_pdf=output, merged_pages=merged_pages
        )
