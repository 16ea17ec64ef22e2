"""Unit tests for logging setup."""

import logging

import pytest

from sectionforge.core.logging_config import setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    """Test suite for setup_logging."""

    def test_file_and_console_handlers(self, settings, restore_root_logger):
        root = setup_logging(settings)

        assert (settings.log_dir / "info.log").exists()
        assert (settings.log_dir / "error.log").exists()
        levels = sorted(h.level for h in root.handlers)
        assert levels == [logging.INFO, logging.INFO, logging.ERROR]

    def test_errors_reach_error_log(self, settings, restore_root_logger):
        setup_logging(settings)

        logging.getLogger("sectionforge.test").error("catalog unreadable")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "catalog unreadable" in (settings.log_dir / "error.log").read_text(encoding="utf-8")
        assert "catalog unreadable" in (settings.log_dir / "info.log").read_text(encoding="utf-8")
