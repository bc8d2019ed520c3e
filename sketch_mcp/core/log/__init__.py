"""Logging micro API for sketch-mcp."""

from .lib import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
