"""MCP (Model Context Protocol) server for sketch-mcp.

Exposes Sketch document generation, export and validation to LLM clients.

Example:
    # Start server in STDIO mode (for Claude Desktop)
    >>> from sketch_mcp.mcp import run_server
    >>> run_server()

    # Start server in HTTP mode
    >>> from sketch_mcp.mcp import run_server, TransportType
    >>> run_server(transport=TransportType.HTTP, port=18080)

Available Tools:
    - generate_sketch: Assemble a design config into document JSON + draft tree
    - export_sketch: Write a design config as a .sketch archive
    - validate_sketch: Validate an archive directory or .sketch file
    - status: Server version, output directory and module catalog
"""

from .lib import (
    ServerConfig,
    TransportType,
    get_server_version,
)
from .server import create_server, mcp, run_server

__all__ = [
    # Server instance
    "mcp",
    "create_server",
    "run_server",
    # Configuration
    "ServerConfig",
    "TransportType",
    # Utilities
    "get_server_version",
]
