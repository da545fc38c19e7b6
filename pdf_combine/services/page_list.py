from __future__ import annotations

import itertools
import logging
from collections.abc import Iterable, Iterator, Sequence

from pdf_combine.domain.errors import PageRangeError, ValidationError
from pdf_combine.domain.models import PageRef
from pdf_combine.services.document_manager import DocumentReferenceManager

logger = logging.getLogger(__name__)


class WorkingPageList:
    """Ordered pages of the pending output.

    Appends and removals are the only places reference counts change; moves and
    reorders keep every document's count as it is.
    """

    def __init__(self, manager: DocumentReferenceManager) -> None:
        self.manager = manager
        self._refs: list[PageRef] = []
        self._ids = itertools.count()

    def __len__(self) -> int:
        return len(self._refs)

    def __iter__(self) -> Iterator[PageRef]:
        return iter(list(self._refs))

    def __getitem__(self, index: int) -> PageRef:
        self._check_index(index)
        return self._refs[index]

    @property
    def refs(self) -> tuple[PageRef, ...]:
        return tuple(self._refs)

    def _check_index(self, index: int) -> None:
        if not self._refs:
            raise PageRangeError("The page list is empty.")
        if not 0 <= index < len(self._refs):
            raise PageRangeError(
                f"Page position {index} is out of range (0-{len(self._refs) - 1})."
            )

    def count_for(self, document_id: str) -> int:
        return len([ref for ref in self._refs if ref.document_id == document_id])

    def signature(self) -> str:
        return "|".join(f"{ref.ref_id}:{ref.document_id}:{ref.page_index}" for ref in self._refs)

    def add_all_pages(
        self, document_id: str, page_indices: Iterable[int] | None = None
    ) -> list[PageRef]:
        entry = self.manager.get_document(document_id)
        if entry is None:
            logger.warning(f"Cannot add pages from unknown document {document_id}")
            return []

        indices = list(range(entry.page_count)) if page_indices is None else list(page_indices)
        for page_index in indices:
            if not 0 <= page_index < entry.page_count:
                raise PageRangeError(
                    f"Page {page_index + 1} is out of range for {entry.name} "
                    f"(1-{entry.page_count})."
                )

        added: list[PageRef] = []
        for page_index in indices:
            page_ref = PageRef(
                ref_id=f"page_{next(self._ids)}",
                document_id=document_id,
                page_index=page_index,
            )
            self._refs.append(page_ref)
            self.manager.add_reference(document_id)
            added.append(page_ref)
        return added

    def remove_at(self, index: int) -> PageRef:
        self._check_index(index)
        page_ref = self._refs.pop(index)
        self.manager.remove_reference(page_ref.document_id)
        return page_ref

    def remove_many(self, indices: Iterable[int]) -> list[PageRef]:
        selected = sorted(set(indices), reverse=True)
        for index in selected:
            self._check_index(index)
        removed = [self.remove_at(index) for index in selected]
        removed.reverse()
        return removed

    def remove_document(self, document_id: str) -> int:
        positions = [
            index for index, ref in enumerate(self._refs) if ref.document_id == document_id
        ]
        self.remove_many(positions)
        return len(positions)

    def clear(self) -> None:
        self.remove_many(range(len(self._refs)))

    def move(self, from_index: int, to_index: int) -> None:
        self._check_index(from_index)
        self._check_index(to_index)
        if from_index == to_index:
            return
        page_ref = self._refs.pop(from_index)
        self._refs.insert(to_index, page_ref)

    def reorder(self, order: Sequence[int]) -> None:
        """Rearrange so that position ``i`` holds the page previously at ``order[i]``."""
        if sorted(order) != list(range(len(self._refs))):
            raise ValidationError("New order must list every page position exactly once.")
        self._refs = [self._refs[index] for index in order]
