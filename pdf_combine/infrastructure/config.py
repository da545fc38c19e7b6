from __future__ import annotations

import os
import sys
from dataclasses import dataclass

SAVE_MODES = ("auto", "file", "share")


def _get_int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _get_choice_env(name: str, choices: tuple[str, ...], default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    cleaned = value.strip().lower()
    return cleaned if cleaned in choices else default


def _has_desktop_display() -> bool:
    if sys.platform in ("win32", "darwin"):
        return True
    return bool(os.getenv("DISPLAY") or os.getenv("WAYLAND_DISPLAY"))


@dataclass(frozen=True)
class AppConfig:
    max_pdf_size_mb: int = _get_int_env("PDF_COMBINE_MAX_PDF_MB", 50)
    max_batch_size_mb: int = _get_int_env("PDF_COMBINE_MAX_BATCH_MB", 200)
    thumbnail_width: int = _get_int_env("PDF_COMBINE_THUMBNAIL_WIDTH", 240)
    preview_pages: int = _get_int_env("PDF_COMBINE_PREVIEW_PAGES", 12)
    save_mode: str = _get_choice_env("PDF_COMBINE_SAVE_MODE", SAVE_MODES, "auto")
    log_level: str = os.getenv("PDF_COMBINE_LOG_LEVEL", "INFO").upper()

    @property
    def max_pdf_size_bytes(self) -> int:
        return self.max_pdf_size_mb * 1024 * 1024

    @property
    def max_batch_size_bytes(self) -> int:
        return self.max_batch_size_mb * 1024 * 1024

    @property
    def direct_file_save(self) -> bool:
        """True when the process can show a save dialog and write arbitrary paths."""
        if self.save_mode == "file":
            return True
        if self.save_mode == "share":
            return False
        return _has_desktop_display()
