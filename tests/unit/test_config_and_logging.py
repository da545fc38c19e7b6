import logging

import pytest

from pdf_combine.infrastructure import config as config_module
from pdf_combine.infrastructure.config import AppConfig
from pdf_combine.infrastructure.logging_config import setup_logging

MODES = ("auto", "share")


@pytest.mark.unit
def test_int_env_falls_back_on_bad_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PDF_COMBINE_TEST_INT", "abc")
    assert config_module._get_int_env("PDF_COMBINE_TEST_INT", 7) == 7
    monkeypatch.setenv("PDF_COMBINE_TEST_INT", "-3")
    assert config_module._get_int_env("PDF_COMBINE_TEST_INT", 7) == 7
    monkeypatch.setenv("PDF_COMBINE_TEST_INT", "12")
    assert config_module._get_int_env("PDF_COMBINE_TEST_INT", 7) == 12


@pytest.mark.unit
def test_choice_env_normalises_and_validates(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PDF_COMBINE_TEST_MODE", " Share ")
    assert config_module._get_choice_env("PDF_COMBINE_TEST_MODE", MODES, "auto") == "share"
    monkeypatch.setenv("PDF_COMBINE_TEST_MODE", "floppy")
    assert config_module._get_choice_env("PDF_COMBINE_TEST_MODE", MODES, "auto") == "auto"


@pytest.mark.unit
def test_size_limits_in_bytes() -> None:
    config = AppConfig(max_pdf_size_mb=2, max_batch_size_mb=3)
    assert config.max_pdf_size_bytes == 2 * 1024 * 1024
    assert config.max_batch_size_bytes == 3 * 1024 * 1024


@pytest.mark.unit
def test_explicit_save_modes() -> None:
    assert AppConfig(save_mode="file").direct_file_save is True
    assert AppConfig(save_mode="share").direct_file_save is False


@pytest.mark.unit
def test_auto_save_mode_follows_display(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config_module.sys, "platform", "linux")
    monkeypatch.delenv("DISPLAY", raising=False)
    monkeypatch.delenv("WAYLAND_DISPLAY", raising=False)
    assert AppConfig(save_mode="auto").direct_file_save is False

    monkeypatch.setenv("DISPLAY", ":0")
    assert AppConfig(save_mode="auto").direct_file_save is True


@pytest.mark.unit
def test_setup_logging_installs_one_handler() -> None:
    root_logger = logging.getLogger()
    original_level = root_logger.level
    try:
        setup_logging("debug")
        setup_logging("WARNING")
        ours = [h for h in root_logger.handlers if getattr(h, "_pdf_combine", False)]
        assert len(ours) == 1
        assert root_logger.level == logging.WARNING
    finally:
        for handler in [h for h in root_logger.handlers if getattr(h, "_pdf_combine", False)]:
            root_logger.removeHandler(handler)
        root_logger.setLevel(original_level)
