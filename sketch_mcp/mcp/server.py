"""FastMCP server instance for sketch-mcp.

This module provides the MCP server that exposes Sketch document tools
to LLM clients:

    1. generate_sketch: design config → document JSON + draft text tree
    2. export_sketch: design config → .sketch archive on disk
    3. validate_sketch: archive directory or .sketch file → violations

Usage:
    # STDIO mode (for Claude Desktop)
    python -m sketch_mcp.mcp.server

    # HTTP mode
    python -m sketch_mcp.mcp.server --transport http --port 18080

    # Via CLI
    python . mcp run
    python . mcp serve --port 18080
"""

import argparse
import json
import logging
import sys
from functools import lru_cache
from typing import Any

from fastmcp import FastMCP

from sketch_mcp.assembler import DesignConfig
from sketch_mcp.core import setup_logging

from .lib import TransportType, get_server_version

logger = logging.getLogger(__name__)


# =============================================================================
# Server Instructions (LLM Guidance)
# =============================================================================

SERVER_INSTRUCTIONS = """\
## Sketch MCP Server

Builds Sketch design files from a declarative list of UI modules.

### Quick Start
1. `status()` → check the output directory is writable
2. `generate_sketch(config)` → review the draft layer tree
3. `export_sketch(config)` → write the .sketch file
4. `validate_sketch(path)` → re-check an archive on disk

### Design Config
```
{
  "pageName": "Orders",
  "artboardSize": {"width": 393, "height": 852},
  "theme": "light",
  "colors": {"primary": "#007AFF"},
  "modules": [
    {"type": "header", "title": "我的订单"},
    {"type": "hero", "title": "Sale", "cta": "Shop now", "height": 280}
  ]
}
```
Modules stack top to bottom; each advances the layout by its `height`
(default 100). Unknown module types render as a labelled placeholder.
Read `schema://design-config` for the full schema and `status()` for the
module catalog.
"""

# =============================================================================
# Server Instance
# =============================================================================

mcp = FastMCP(
    name="sketch-mcp",
    instructions=SERVER_INSTRUCTIONS,
)


# =============================================================================
# Tools
# =============================================================================


@mcp.tool
def generate_sketch(config: dict[str, Any]) -> dict[str, Any]:
    """Assemble a design config into a Sketch document without writing it.

    Use this to review the layer tree before exporting.

    Args:
        config: Design config with pageName, artboardSize, theme, colors
            and an ordered list of modules (each with a "type").

    Returns:
        Dictionary with:
        - document: Sketch document JSON
        - draft: Layer tree for quick review:
            ```
            Orders [page]
            └── Orders [artboard, 393x852]
                ├── background [rectangle, 393x852]
                ├── Header [rectangle, 361x56]
                └── 我的订单 [text, 329x24]
            ```
        - valid / errors: Structural validation result
        - stats: Layer count, depth and module types
    """
    from .tools.generate import generate_sketch as _generate

    return _generate(config=config)


@mcp.tool
async def export_sketch(
    config: dict[str, Any],
    output_dir: str | None = None,
    filename: str | None = None,
    validate: bool | None = None,
) -> dict[str, Any]:
    """Export a design config as a .sketch file.

    Args:
        config: Design config (same shape as generate_sketch).
        output_dir: Export root. Default: SKETCH_OUTPUT_DIR.
        filename: Base name; a millisecond timestamp is appended.
        validate: Validate before packaging. Default: SKETCH_VALIDATE.

    Returns:
        Dictionary with:
        - success: True when the .sketch file was written
        - archive_path: Path of the .sketch file
        - directory_path: Unpacked archive directory
        - size_bytes: Archive size
        - errors: Violations, when validation failed
    """
    from .tools.export import export_sketch as _export

    return await _export(
        config=config, output_dir=output_dir, filename=filename, validate=validate
    )


@mcp.tool
def validate_sketch(path: str) -> dict[str, Any]:
    """Validate a Sketch archive on disk.

    Args:
        path: Unpacked archive directory or .sketch file.

    Returns:
        Dictionary with:
        - valid: True if the archive passes all checks
        - errors: Violations (path, message, error_type, file)
        - warnings: Non-blocking findings
        - summary: One-line summary
    """
    from .tools.validate import validate_sketch as _validate

    return _validate(path=path)


@mcp.tool
def status() -> dict[str, Any]:
    """Check server readiness.

    Use this FIRST. Reports the version, the export root and whether it is
    writable, and the module types the assembler knows.
    """
    from .tools.status import get_status

    return get_status()


# =============================================================================
# Resources
# =============================================================================


@lru_cache(maxsize=1)
def _cached_config_schema() -> str:
    return json.dumps(DesignConfig.model_json_schema(by_alias=True), indent=2)


@mcp.resource("schema://design-config")
def get_design_config_schema() -> str:
    """Get the design config JSON schema."""
    return _cached_config_schema()


# =============================================================================
# Server Factory & Runner
# =============================================================================


def create_server() -> FastMCP:
    """Create and configure the MCP server instance.

    Returns:
        Configured FastMCP server instance.
    """
    return mcp


def run_server(
    transport: TransportType = TransportType.STDIO,
    host: str = "0.0.0.0",
    port: int = 18080,
) -> None:
    """Run the MCP server with specified transport.

    Args:
        transport: Transport type (stdio, http, sse).
        host: Bind address for HTTP/SSE.
        port: Port for HTTP/SSE.
    """
    logger.info(f"Starting sketch-mcp server v{get_server_version()}")
    logger.info(f"Transport: {transport.value}")

    if transport == TransportType.STDIO:
        logger.info("Running in STDIO mode (for Claude Desktop)")
        mcp.run()
    elif transport == TransportType.HTTP:
        logger.info(f"Running in HTTP mode at http://{host}:{port}/mcp")
        mcp.run(transport="http", host=host, port=port, path="/mcp")
    elif transport == TransportType.SSE:
        logger.info(f"Running in SSE mode at http://{host}:{port}")
        mcp.run(transport="sse", host=host, port=port)
    else:
        raise ValueError(f"Unknown transport: {transport}")


# =============================================================================
# CLI Entry Point
# =============================================================================


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for MCP server.

    Args:
        argv: Command line arguments (uses sys.argv if None).

    Returns:
        Exit code (0 for success).
    """
    parser = argparse.ArgumentParser(
        prog="sketch-mcp",
        description="MCP server for Sketch design file generation",
    )
    parser.add_argument(
        "--transport",
        "-t",
        type=str,
        choices=["stdio", "http", "sse"],
        default="stdio",
        help="Transport type (default: stdio)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default="0.0.0.0",
        help="Bind address for HTTP/SSE (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=18080,
        help="Port for HTTP/SSE (default: 18080)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        run_server(
            transport=TransportType(args.transport),
            host=args.host,
            port=args.port,
        )
        return 0
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        return 0
    except Exception as e:
        logger.error(f"Server error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
