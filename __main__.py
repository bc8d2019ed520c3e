"""CLI entry point for sketch-mcp.

This module acts as the central entry point for the project's CLI tools.
It delegates commands to the appropriate submodules or runs specific tasks.
"""

import argparse
import json
import subprocess
import sys
from pathlib import Path

from dotenv import load_dotenv

from sketch_mcp.config import get_environment, get_environment_info, list_environment_variables
from sketch_mcp.core import get_logger, setup_logging

# Load environment variables from .env file
load_dotenv()

logger = get_logger("cli")


def _load_config(path: Path) -> dict:
    """Read a design config JSON file."""
    with open(path, encoding="utf-8") as f:
        return json.load(f)


# =============================================================================
# Generate Command
# =============================================================================


def cmd_generate(args: argparse.Namespace) -> int:
    """Handle the generate command."""
    from sketch_mcp.assembler import generate_document
    from sketch_mcp.output import format_document_tree

    try:
        document = generate_document(_load_config(args.config))
    except Exception as e:
        logger.error(f"Generation failed: {e}")
        return 1

    if args.format == "tree":
        result_text = format_document_tree(document)
    else:
        result_text = json.dumps(document.to_sketch(), indent=2, ensure_ascii=False)

    if args.output:
        args.output.write_text(result_text, encoding="utf-8")
        logger.info(f"Document saved to {args.output}")
    else:
        print(result_text)
    return 0


def handle_generate_command(argv: list[str]) -> int:
    """Handle generate-specific arguments."""
    parser = argparse.ArgumentParser(
        prog="python . generate",
        description="Assemble a design config into Sketch document JSON",
    )
    parser.add_argument("config", type=Path, help="Design config JSON file")
    parser.add_argument(
        "--format",
        "-f",
        type=str,
        default="json",
        choices=["json", "tree"],
        help="Output format (default: json)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output file path (prints to stdout if not specified)",
    )
    args = parser.parse_args(argv)
    return cmd_generate(args)


# =============================================================================
# Export Command
# =============================================================================


def cmd_export(args: argparse.Namespace) -> int:
    """Handle the export command."""
    from sketch_mcp.archive import ValidationFailed, export_sketch
    from sketch_mcp.assembler import DesignConfig

    try:
        config = DesignConfig.model_validate(_load_config(args.config))
        if args.filename:
            config.filename = args.filename
        result = export_sketch(
            config,
            output_dir=args.output_dir,
            validate=False if args.no_validate else None,
        )
    except ValidationFailed as e:
        logger.error(f"Export failed validation ({len(e.violations)} violation(s))")
        for violation in e.violations:
            logger.error(f"  {violation}")
        if e.directory:
            logger.info(f"Archive directory kept for inspection: {e.directory}")
        return 1
    except Exception as e:
        logger.error(f"Export failed: {e}")
        return 1

    print(result.archive_path)
    logger.info(f"Exported {result.size_bytes} bytes to {result.archive_path}")
    return 0


def handle_export_command(argv: list[str]) -> int:
    """Handle export-specific arguments."""
    parser = argparse.ArgumentParser(
        prog="python . export",
        description="Export a design config as a .sketch file",
    )
    parser.add_argument("config", type=Path, help="Design config JSON file")
    parser.add_argument(
        "--output-dir",
        "-d",
        type=Path,
        default=None,
        help="Export root (default: SKETCH_OUTPUT_DIR)",
    )
    parser.add_argument(
        "--filename",
        "-n",
        type=str,
        default=None,
        help="Base file name (default: config filename or SKETCH_FILENAME)",
    )
    parser.add_argument(
        "--no-validate",
        action="store_true",
        help="Skip cross-file validation before packaging",
    )
    args = parser.parse_args(argv)
    return cmd_export(args)


# =============================================================================
# Validate Command
# =============================================================================


def handle_validate_command(argv: list[str]) -> int:
    """Validate an archive directory or .sketch file."""
    from sketch_mcp.validation import validate_archive

    parser = argparse.ArgumentParser(
        prog="python . validate",
        description="Validate an unpacked Sketch archive or .sketch file",
    )
    parser.add_argument("path", type=Path, help="Archive directory or .sketch file")
    args = parser.parse_args(argv)

    report = validate_archive(args.path)
    for violation in report.violations:
        print(f"ERROR   {violation}")
    for warning in report.warnings:
        print(f"WARNING {warning}")
    print(report.summary())
    return 0 if report.valid else 1


# =============================================================================
# Env Command
# =============================================================================


def handle_env_command(argv: list[str]) -> int:
    """Show environment configuration."""
    category = argv[0] if argv else None
    print("Environment Variables:")
    current = None
    for var in list_environment_variables(category):
        info = get_environment_info(var)
        if info.category != current:
            current = info.category
            print(f"\n  {current}:")
        print(f"    {info.name:<24} = {get_environment(var)!s:<28} {info.description}")
    return 0


# =============================================================================
# Test Command
# =============================================================================


def cmd_test(extra_args: list[str]) -> int:
    """Run pytest with provided arguments and test tier options.

    Usage:
        python . test                # Run all tests
        python . test --unit         # Run only unit tests
        python . test --integration  # Run integration tests
        python . test --mcp          # Run MCP protocol tests
        python . test -k "archive"   # Run tests matching pattern
    """
    tier_markers = {
        "--unit": ["-m", "unit"],
        "--integration": ["-m", "integration"],
        "--mcp": ["-m", "mcp"],
        "--all": [],
    }

    pytest_args: list[str] = []
    remaining_args: list[str] = []

    for arg in extra_args:
        if arg in tier_markers:
            pytest_args.extend(tier_markers[arg])
        else:
            remaining_args.append(arg)

    cmd = [sys.executable, "-m", "pytest", *pytest_args, *remaining_args]
    logger.info(f"Running: {' '.join(cmd)}")

    try:
        return subprocess.call(cmd)
    except KeyboardInterrupt:
        return 130


# =============================================================================
# MCP Command
# =============================================================================


def handle_mcp_command(argv: list[str]) -> int:
    """Handle MCP server commands.

    Usage:
        python . mcp run              # Start in STDIO mode (for Claude Desktop)
        python . mcp serve            # Start in HTTP mode
        python . mcp serve --port 8080
        python . mcp info             # Show server info
    """
    if not argv:
        print("MCP Server Commands")
        print("\nUsage: python . mcp {command} [options]")
        print("\nCommands:")
        print("  run                 Start server in STDIO mode (for Claude Desktop)")
        print("  serve               Start server in HTTP mode")
        print("  info                Show server information")
        print("\nOptions for 'serve':")
        print("  --host HOST         Bind address (default: MCP_HOST)")
        print("  --port PORT         Port number (default: MCP_PORT)")
        print("  --transport TYPE    Transport: http or sse (default: http)")
        print("\nClaude Desktop Configuration:")
        print("  {")
        print('    "mcpServers": {')
        print('      "sketch": {')
        print('        "command": "python",')
        print('        "args": [".", "mcp", "run"],')
        print('        "cwd": "/path/to/sketch-mcp"')
        print("      }")
        print("    }")
        print("  }")
        return 1

    subcommand = argv[0]
    subargs = argv[1:]

    if subcommand == "run":
        from sketch_mcp.mcp import TransportType, run_server

        logger.info("Starting MCP server in STDIO mode...")
        run_server(transport=TransportType.STDIO)
        return 0

    elif subcommand == "serve":
        from sketch_mcp.mcp import ServerConfig, TransportType, run_server

        parser = argparse.ArgumentParser(prog="python . mcp serve")
        parser.add_argument("--host", type=str, default=None)
        parser.add_argument("--port", type=int, default=None)
        parser.add_argument("--transport", type=str, choices=["http", "sse"], default="http")
        args = parser.parse_args(subargs)

        config = ServerConfig.from_env(
            transport=TransportType(args.transport), host=args.host, port=args.port
        )

        logger.info(f"Starting MCP server in {config.transport.value} mode...")
        logger.info(f"Listening on {config.host}:{config.port}")
        run_server(transport=config.transport, host=config.host, port=config.port)
        return 0

    elif subcommand == "info":
        from sketch_mcp.mcp import get_server_version

        print("Sketch MCP Server")
        print("=" * 40)
        print(f"Version: {get_server_version()}")
        print("\nAvailable Tools:")
        print("  - generate_sketch: Design config to document JSON + draft tree")
        print("  - export_sketch: Design config to .sketch file")
        print("  - validate_sketch: Validate an archive on disk")
        print("  - status: Server readiness")
        return 0

    else:
        logger.error(f"Unknown mcp command: {subcommand}")
        return handle_mcp_command([])


def show_help() -> None:
    """Display CLI help message."""
    print("Usage: python . {command} [args]")
    print("\n=== Design Files ===")
    print("  generate   Assemble a design config into document JSON or a tree")
    print("  export     Write a design config as a .sketch file")
    print("  validate   Validate an archive directory or .sketch file")
    print("\n=== MCP Server ===")
    print("  mcp        Run MCP server (STDIO or HTTP mode)")
    print("\n=== Development ===")
    print("  env        Show environment configuration")
    print("  test       Run tests (--unit, --integration, --mcp, --all)")
    print("\nExamples:")
    print("  python . generate design.json --format tree")
    print("  python . export design.json --filename checkout")
    print("  python . validate ~/.sketch-mcp/output/checkout_1718000000000.sketch")
    print("  python . mcp run                    # Start STDIO server (Claude Desktop)")
    print("  python . mcp serve --port 18080     # Start HTTP server")


def main() -> int:
    """Main entry point for the CLI."""
    if len(sys.argv) < 2:
        show_help()
        return 1

    command = sys.argv[1]
    rest_args = sys.argv[2:]

    if command in ("-h", "--help"):
        show_help()
        return 0

    commands = {
        "generate": lambda: handle_generate_command(rest_args),
        "export": lambda: handle_export_command(rest_args),
        "validate": lambda: handle_validate_command(rest_args),
        "mcp": lambda: handle_mcp_command(rest_args),
        "env": lambda: handle_env_command(rest_args),
        "test": lambda: cmd_test(rest_args),
    }

    if command in commands:
        setup_logging()
        return commands[command]()

    logger.error(f"Unknown command: {command}")
    show_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
