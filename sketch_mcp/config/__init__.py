"""Centralized configuration management for sketch-mcp.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from sketch_mcp.config import EnvVar, get_environment
    >>>
    >>> validate = get_environment(EnvVar.SKETCH_VALIDATE)  # Returns bool: True
    >>> port = get_environment(EnvVar.MCP_PORT, override=9000)
    >>>
    >>> for var in list_environment_variables("export"):
    ...     info = get_environment_info(var)
    ...     print(f"{info.name}: {info.description}")

Environment Variable Categories:
    export: Output directory, validation toggle, base filename
    design: Default artboard geometry
    service: MCP server host and port
"""

from .lib import (
    EnvConfig,
    EnvVar,
    get_artboard_size,
    get_environment,
    get_environment_info,
    get_output_dir,
    list_environment_variables,
)

__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_output_dir",
    "get_artboard_size",
    # Introspection
    "list_environment_variables",
]
