from __future__ import annotations

from pathlib import Path
from typing import Callable

FileWriter = Callable[[str, bytes], None]


def write_pdf_bytes(path: str, data: bytes) -> None:
    Path(path).write_bytes(data)


def null_file_writer(path: str, data: bytes) -> None:
    # Saving goes through the share/download path on this platform.
    return None


def resolve_file_writer(direct_file_save: bool) -> FileWriter:
    return write_pdf_bytes if direct_file_save else null_file_writer
