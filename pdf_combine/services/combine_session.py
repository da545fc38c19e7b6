from __future__ import annotations

import logging

from pdf_combine.adapters.pymupdf_adapter import PyMuPdfAdapter
from pdf_combine.domain.models import MergeResult
from pdf_combine.services.document_manager import DocumentReferenceManager
from pdf_combine.services.merge_service import MergeService
from pdf_combine.services.page_list import WorkingPageList

logger = logging.getLogger(__name__)


class CombineSession:
    """Documents, working page list and latest output for one user session."""

    def __init__(self, adapter: PyMuPdfAdapter) -> None:
        self.manager = DocumentReferenceManager(adapter)
        self.page_list = WorkingPageList(self.manager)
        self.output: MergeResult | None = None
        self._output_signature = ""

    def generate(self, merge_service: MergeService) -> MergeResult:
        # A failed merge raises before the previous output is touched.
        result = merge_service.merge(self.manager, self.page_list.refs)
        self.output = result
        self._output_signature = self.page_list.signature()
        return result

    def output_is_current(self) -> bool:
        return self.output is not None and self._output_signature == self.page_list.signature()

    def reset(self) -> None:
        self.page_list.clear()
        self.manager.dispose_all()
        self.output = None
        self._output_signature = ""
        logger.info("Session reset")
