from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Status(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    CANCELLED = "cancelled"


@dataclass
class DocumentEntry:
    document_id: str
    name: str
    handle: Any
    page_count: int
    ref_count: int = 0


@dataclass(frozen=True)
class PageRef:
    ref_id: str
    document_id: str
    page_index: int


@dataclass(frozen=True)
class MergeResult:
    output_name: str
    output_pdf: bytes
    merged_pages: int


@dataclass(frozen=True)
class SharedFile:
    name: str
    data: bytes
    mime_type: str = "application/pdf"


@dataclass(frozen=True)
class SaveOutcome:
    status: Status
    message: str
    path: str | None = None


@dataclass(frozen=True)
class OperationMessage:
    level: str
    text: str


@dataclass(frozen=True)
class BatchItemResult:
    source_name: str
    status: Status
    messages: list[OperationMessage] = field(default_factory=list)
    document_id: str | None = None
    page_count: int = 0


@dataclass(frozen=True)
class BatchOperationResult:
    items: list[BatchItemResult]

    @property
    def success_count(self) -> int:
        return len([item for item in self.items if item.status == Status.SUCCESS])

    @property
    def warning_count(self) -> int:
        return len([item for item in self.items if item.status == Status.WARNING])

    @property
    def error_count(self) -> int:
        return len([item for item in self.items if item.status == Status.ERROR])

    @property
    def document_ids(self) -> list[str]:
        return [item.document_id for item in self.items if item.document_id is not None]
