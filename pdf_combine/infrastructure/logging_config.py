"""Logging setup for the PDF Combine app."""
from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_level: str = "INFO") -> None:
    """Configure the root logger once; Streamlit reruns call this repeatedly."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if any(getattr(handler, "_pdf_combine", False) for handler in root_logger.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._pdf_combine = True  # type: ignore[attr-defined]
    root_logger.addHandler(handler)
