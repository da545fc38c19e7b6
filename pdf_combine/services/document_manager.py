"""Reference-counted registry of the PDF documents open in one session.

Each page placed in the working page list holds one reference to its source
document. A document is closed as soon as its count falls to zero, so memory is
bounded by the documents still represented in the output rather than by every
file opened during the session.
"""
from __future__ import annotations

import itertools
import logging
from pathlib import Path
from typing import Callable

from pdf_combine.adapters.pymupdf_adapter import PyMuPdfAdapter
from pdf_combine.domain.models import DocumentEntry

logger = logging.getLogger(__name__)

DisposeListener = Callable[[str], None]


class DocumentReferenceManager:
    def __init__(self, adapter: PyMuPdfAdapter) -> None:
        self.adapter = adapter
        self._documents: dict[str, DocumentEntry] = {}
        self._ids = itertools.count()
        self._dispose_listeners: list[DisposeListener] = []

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._documents

    def _register(self, name: str, handle: object) -> str:
        document_id = f"doc_{next(self._ids)}"
        entry = DocumentEntry(
            document_id=document_id,
            name=name,
            handle=handle,
            page_count=self.adapter.page_count(handle),
        )
        self._documents[document_id] = entry
        logger.info(f"Opened {name} as {document_id} ({entry.page_count} pages)")
        return document_id

    def load(self, name: str, path: str | Path) -> str:
        """Open the PDF at ``path`` and return its new document id.

        Raises OpenError when the file cannot be opened as a PDF.
        """
        return self._register(name, self.adapter.open_path(path))

    def load_bytes(self, name: str, content: bytes) -> str:
        return self._register(name, self.adapter.open_bytes(content, name))

    def get_document(self, document_id: str) -> DocumentEntry | None:
        return self._documents.get(document_id)

    def documents(self) -> list[DocumentEntry]:
        return list(self._documents.values())

    def reference_count(self, document_id: str) -> int:
        entry = self._documents.get(document_id)
        return entry.ref_count if entry is not None else 0

    def add_dispose_listener(self, listener: DisposeListener) -> None:
        self._dispose_listeners.append(listener)

    def add_reference(self, document_id: str) -> None:
        entry = self._documents.get(document_id)
        if entry is None:
            logger.warning(f"add_reference on unknown document {document_id}")
            return
        entry.ref_count += 1

    def remove_reference(self, document_id: str) -> None:
        entry = self._documents.get(document_id)
        if entry is None:
            logger.warning(f"remove_reference on unknown document {document_id}")
            return
        if entry.ref_count <= 0:
            logger.warning(f"remove_reference on {document_id} with no references left")
        entry.ref_count = max(entry.ref_count - 1, 0)
        if entry.ref_count == 0:
            self._dispose(document_id)

    def release_if_unreferenced(self, document_id: str) -> bool:
        entry = self._documents.get(document_id)
        if entry is None or entry.ref_count > 0:
            return False
        self._dispose(document_id)
        return True

    def dispose_all(self) -> None:
        for document_id in list(self._documents):
            self._dispose(document_id)

    def _dispose(self, document_id: str) -> None:
        entry = self._documents.pop(document_id)
        try:
            self.adapter.close(entry.handle)
        except Exception:
            logger.exception(f"Failed to close {document_id} ({entry.name})")
        logger.info(f"Released {document_id} ({entry.name})")
        for listener in self._dispose_listeners:
            listener(document_id)
