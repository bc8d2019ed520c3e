"""Pytest fixtures for MCP server tests.

This module provides:
- Server and client fixtures for protocol testing
- An isolated export root for tools that write to disk
"""

from __future__ import annotations

from typing import AsyncGenerator

import pytest
from fastmcp import Client, FastMCP


@pytest.fixture
def mcp_server() -> FastMCP:
    """Create MCP server instance for testing."""
    from .server import create_server

    return create_server()


@pytest.fixture
async def mcp_client(mcp_server: FastMCP) -> AsyncGenerator[Client, None]:
    """Create connected MCP client for testing.

    Args:
        mcp_server: The MCP server instance.

    Yields:
        Connected Client instance for testing.
    """
    async with Client(mcp_server) as client:
        yield client


@pytest.fixture
def output_dir(tmp_path, monkeypatch):
    """Point SKETCH_OUTPUT_DIR at a temporary directory."""
    root = tmp_path / "exports"
    monkeypatch.setenv("SKETCH_OUTPUT_DIR", str(root))
    return root
