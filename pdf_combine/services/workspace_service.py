from __future__ import annotations

import logging
from pathlib import Path

from pdf_combine.domain.errors import PdfCombineError, ValidationError
from pdf_combine.domain.models import (
    BatchItemResult,
    BatchOperationResult,
    OperationMessage,
    Status,
)
from pdf_combine.infrastructure.config import AppConfig
from pdf_combine.services.document_manager import DocumentReferenceManager
from pdf_combine.services.page_list import WorkingPageList
from pdf_combine.services.page_ranges import parse_page_order_spec, parse_page_range_spec

logger = logging.getLogger(__name__)


class WorkspaceService:
    def __init__(
        self,
        manager: DocumentReferenceManager,
        page_list: WorkingPageList,
        config: AppConfig,
    ) -> None:
        self.manager = manager
        self.page_list = page_list
        self.config = config

    def _check_file(self, name: str, size_bytes: int) -> None:
        if not name.lower().endswith(".pdf"):
            raise ValidationError(f"Invalid file type for {name}. Only PDF files are allowed.")
        if size_bytes > self.config.max_pdf_size_bytes:
            raise ValidationError(
                f"{name} exceeds per-file limit of {self.config.max_pdf_size_mb} MB"
            )

    def _check_batch(self, total_size: int) -> None:
        if total_size > self.config.max_batch_size_bytes:
            raise ValidationError(f"Batch size exceeds limit of {self.config.max_batch_size_mb} MB")

    def _add_document(self, name: str, document_id: str) -> BatchItemResult:
        added = self.page_list.add_all_pages(document_id)
        if not added:
            self.manager.release_if_unreferenced(document_id)
        return BatchItemResult(
            source_name=name,
            status=Status.SUCCESS,
            messages=[OperationMessage(level="info", text=f"Added {len(added)} pages.")],
            document_id=document_id,
            page_count=len(added),
        )

    @staticmethod
    def _failed(name: str, exc: Exception) -> BatchItemResult:
        logger.warning(f"Could not load {name}: {exc}")
        return BatchItemResult(
            source_name=name,
            status=Status.ERROR,
            messages=[OperationMessage(level="error", text=str(exc))],
        )

    def load_uploads(self, uploaded_files: list[tuple[str, bytes]]) -> BatchOperationResult:
        if not uploaded_files:
            return BatchOperationResult(items=[])
        self._check_batch(sum(len(content) for _, content in uploaded_files))

        items: list[BatchItemResult] = []
        for name, content in uploaded_files:
            try:
                self._check_file(name, len(content))
                document_id = self.manager.load_bytes(name, content)
                items.append(self._add_document(name, document_id))
            except PdfCombineError as exc:
                items.append(self._failed(name, exc))
        return BatchOperationResult(items=items)

    def load_paths(self, selected_files: list[tuple[str, str]]) -> BatchOperationResult:
        if not selected_files:
            return BatchOperationResult(items=[])

        items: list[BatchItemResult] = []
        sizes: list[int] = []
        for name, path in selected_files:
            try:
                sizes.append(Path(path).stat().st_size)
            except OSError:
                sizes.append(0)
        self._check_batch(sum(sizes))

        for (name, path), size_bytes in zip(selected_files, sizes):
            try:
                self._check_file(name, size_bytes)
                document_id = self.manager.load(name, path)
                items.append(self._add_document(name, document_id))
            except PdfCombineError as exc:
                items.append(self._failed(name, exc))
        return BatchOperationResult(items=items)

    def add_pages(self, document_id: str, spec: str) -> int:
        """Append the pages of ``document_id`` named by a range spec like ``1,3,5-7``."""
        entry = self.manager.get_document(document_id)
        if entry is None:
            raise ValidationError("That document is no longer open.")
        pages, error = parse_page_range_spec(spec, entry.page_count)
        if error:
            raise ValidationError(error)
        added = self.page_list.add_all_pages(document_id, [page - 1 for page in pages])
        return len(added)

    def remove_positions(self, spec: str) -> int:
        """Remove working-list positions named by a 1-based range spec."""
        positions, error = parse_page_range_spec(spec, len(self.page_list))
        if error:
            raise ValidationError(error)
        return len(self.page_list.remove_many(position - 1 for position in positions))

    def apply_order(self, spec: str) -> None:
        order, error = parse_page_order_spec(spec, len(self.page_list))
        if error:
            raise ValidationError(error)
        self.page_list.reorder(order)

    def retained_page_counts(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for ref in self.page_list:
            counts[ref.document_id] = counts.get(ref.document_id, 0) + 1
        return counts
