from __future__ import annotations

import logging
import time
from typing import Callable

from pdf_combine.adapters.dialogs import SavePathPicker
from pdf_combine.adapters.share import ShareTarget
from pdf_combine.domain.errors import SaveError
from pdf_combine.domain.models import SaveOutcome, SharedFile, Status
from pdf_combine.infrastructure.file_io import FileWriter

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"


def suggested_file_name(now_ms: int) -> str:
    return f"combined_{now_ms}.pdf"


def _now_ms() -> int:
    return int(time.time() * 1000)


class SaveDispatcher:
    """Sends the combined PDF to disk or to the share/download path.

    The path is fixed by ``direct_file_save`` when the dispatcher is built.
    """

    def __init__(
        self,
        direct_file_save: bool,
        picker: SavePathPicker,
        writer: FileWriter,
        share_target: ShareTarget,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self.direct_file_save = direct_file_save
        self.picker = picker
        self.writer = writer
        self.share_target = share_target
        self.clock = clock

    def save(self, data: bytes) -> SaveOutcome:
        if not data:
            raise SaveError("Please combine PDFs first.")

        file_name = suggested_file_name(self.clock())
        if self.direct_file_save:
            return self._save_to_file(file_name, data)
        return self._share(file_name, data)

    def _save_to_file(self, file_name: str, data: bytes) -> SaveOutcome:
        try:
            path = self.picker.choose_save_path(file_name)
        except SaveError:
            raise
        except Exception as exc:
            raise SaveError("Unable to open the save dialog") from exc
        if not path:
            return SaveOutcome(status=Status.CANCELLED, message="")

        try:
            self.writer(path, data)
        except Exception as exc:
            reason = getattr(exc, "strerror", None) or exc
            raise SaveError(f"Unable to write {path}: {reason}") from exc
        logger.info(f"Saved {len(data)} bytes to {path}")
        return SaveOutcome(status=Status.SUCCESS, message=f"PDF saved to: {path}", path=path)

    def _share(self, file_name: str, data: bytes) -> SaveOutcome:
        shared_file = SharedFile(name=file_name, data=data, mime_type=PDF_MIME_TYPE)
        try:
            self.share_target.share(shared_file)
        except Exception as exc:
            raise SaveError("Unable to start the download") from exc
        logger.info(f"Shared {file_name} ({len(data)} bytes)")
        return SaveOutcome(status=Status.SUCCESS, message="PDF download started")
