"""
Tests for package logging setup.
"""
import logging

import pytest
from colorama import Fore

from chromadepth.utils.logger import ROOT_LOGGER, ColoredFormatter, get_logger, setup_logger


@pytest.fixture
def root_logger():
    """Package root logger, restored after the test."""
    logger = logging.getLogger(ROOT_LOGGER)
    handlers, level = list(logger.handlers), logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)


def make_record(level, msg="hello"):
    """Log record as a chromadepth module would emit it."""
    return logging.LogRecord("chromadepth.test", level, __file__, 1, msg, None, None)


class TestGetLogger:
    """Test logger naming."""

    def test_module_names_kept(self):
        """Test package module names are used as-is."""
        assert get_logger("chromadepth.pipeline.coordinator").name == "chromadepth.pipeline.coordinator"

    def test_outside_names_nested(self):
        """Test names outside the package are placed under the root logger."""
        assert get_logger("__main__").name == "chromadepth.__main__"


class TestSetupLogger:
    """Test console handler installation."""

    def test_reconfigure_replaces_handler(self, root_logger):
        """Test a second setup call swaps the console handler and level."""
        setup_logger(level="INFO")
        setup_logger(level="debug", use_colors=False)

        ours = [h for h in root_logger.handlers if getattr(h, "_chromadepth_console", False)]
        assert len(ours) == 1
        assert root_logger.level == logging.DEBUG
        assert not ours[0].formatter.use_colors

    def test_module_output_reaches_console(self, root_logger, capsys):
        """Test module loggers print through the root handler."""
        setup_logger(level="INFO", fmt="%(levelname)s %(message)s", use_colors=False)
        get_logger("chromadepth.depth.estimator").info("depth ready")

        assert "INFO depth ready" in capsys.readouterr().out

    def test_bad_level_raises(self, root_logger):
        """Test unknown level names are rejected."""
        with pytest.raises(AttributeError):
            setup_logger(level="LOUD")


class TestColoredFormatter:
    """Test colored formatting."""

    def test_warning_message_colored(self):
        """Test warnings color both level name and message."""
        out = ColoredFormatter("%(levelname)s %(message)s").format(make_record(logging.WARNING))
        assert Fore.YELLOW + "WARNING" in out
        assert Fore.YELLOW + "hello" in out

    def test_record_left_plain(self):
        """Test formatting does not alter the record seen by other handlers."""
        record = make_record(logging.ERROR)
        ColoredFormatter().format(record)
        assert record.levelname == "ERROR"
        assert record.msg == "hello"

    def test_colors_disabled(self):
        """Test use_colors=False yields plain text."""
        out = ColoredFormatter("%(levelname)s %(message)s", use_colors=False).format(
            make_record(logging.INFO)
        )
        assert out == "INFO hello"
