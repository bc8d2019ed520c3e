"""Tests for core logging module."""

import logging
from io import StringIO

import pytest

from .lib import get_logger, setup_logging


class TestLogging:
    """Test core logging API."""

    @pytest.mark.unit
    def test_get_logger(self) -> None:
        """Named loggers live under the project namespace."""
        logger = get_logger("archive")
        assert logger.name == "sketch-mcp.archive"
        assert isinstance(logger, logging.Logger)

    @pytest.mark.unit
    def test_get_logger_default_name(self) -> None:
        """Verify default logger name."""
        logger = get_logger()
        assert logger.name == "sketch-mcp"

    @pytest.mark.unit
    def test_child_logger_propagates_to_project_logger(self) -> None:
        """Child loggers share the project logger as parent."""
        assert get_logger("validation").parent is get_logger()

    @pytest.mark.unit
    def test_setup_logging(self) -> None:
        """Verify logging setup does not touch named logger levels."""
        stream = StringIO()
        setup_logging(level=logging.DEBUG, stream=stream)
        logger = get_logger("test_setup")
        logger.debug("test message")

        # basicConfig is a no-op if logging was already configured, so only
        # the API contract is checked here.
        assert logger.level == logging.NOTSET
