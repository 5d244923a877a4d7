# tests/test_logging_config.py
"""
Tests for the package log setup.
"""

import logging

import pytest

from spirograph3d.logging_config import PACKAGE_LOGGER, resolve_level, setup_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    saved = (logger.level, list(logger.handlers))
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.setLevel(saved[0])
    logger.handlers[:] = saved[1]


class TestSetupLogging:

    @pytest.mark.parametrize("level, expected", [
        ("debug", logging.DEBUG), ("WARNING", logging.WARNING), (logging.ERROR, logging.ERROR),
    ])
    def test_resolve_level(self, level, expected):
        """Level names are case-insensitive; numbers pass through."""
        assert resolve_level(level) == expected

    def test_unknown_level(self):
        """An unknown level name is rejected."""
        with pytest.raises(ValueError):
            resolve_level("chatty")

    def test_repeated_setup_does_not_stack_handlers(self, package_logger):
        """Calling setup twice leaves a single console handler."""
        setup_logging("INFO")
        logger = setup_logging("DEBUG")
        assert logger is package_logger
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG

    def test_log_file(self, package_logger, tmp_path):
        """Records from package modules reach the optional log file."""
        path = tmp_path / "run.log"
        setup_logging(logging.INFO, str(path))
        logging.getLogger("spirograph3d.drawing").info("finished drawing")
        for handler in package_logger.handlers:
            handler.flush()
        assert "finished drawing" in path.read_text(encoding="utf-8")
