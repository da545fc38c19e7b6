from __future__ import annotations

from typing import Protocol

from pdf_combine.domain.models import SharedFile


class ShareTarget(Protocol):
    def share(self, shared_file: SharedFile) -> None: ...


class DownloadShareTarget:
    """Stages a file for the browser download button rendered on the next pass."""

    def __init__(self) -> None:
        self.pending: SharedFile | None = None

    def share(self, shared_file: SharedFile) -> None:
        self.pending = shared_file

    def clear(self) -> None:
        self.pending = None
