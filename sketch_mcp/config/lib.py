"""Centralized environment configuration management for sketch-mcp.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

Example:
    >>> from sketch_mcp.config import EnvVar, get_environment
    >>>
    >>> # Get values with automatic type conversion
    >>> validate = get_environment(EnvVar.SKETCH_VALIDATE)  # Returns bool
    >>> output_dir = get_environment(EnvVar.SKETCH_OUTPUT_DIR)  # Path | None
    >>>
    >>> # Override at runtime
    >>> port = get_environment(EnvVar.MCP_PORT, override=9000)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "SKETCH_OUTPUT_DIR").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, int, bool, Path).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by sketch-mcp.

    Each member contains an EnvConfig with name, default, type, and description.
    Use with `get_environment()` for type-safe access.

    Categories:
        - export: Archive output location and naming
        - design: Default artboard geometry
        - service: MCP server host and port
    """

    # -------------------------------------------------------------------------
    # Export Configuration
    # -------------------------------------------------------------------------
    SKETCH_OUTPUT_DIR = EnvConfig(
        name="SKETCH_OUTPUT_DIR",
        default=None,  # Computed from home directory
        var_type=Path,
        description="Root directory for exported .sketch archives",
        category="export",
    )
    SKETCH_VALIDATE = EnvConfig(
        name="SKETCH_VALIDATE",
        default=True,
        var_type=bool,
        description="Validate the archive layout before packaging",
        category="export",
    )
    SKETCH_FILENAME = EnvConfig(
        name="SKETCH_FILENAME",
        default="ai-design",
        var_type=str,
        description="Base filename for exports (timestamp suffix is appended)",
        category="export",
    )

    # -------------------------------------------------------------------------
    # Design Defaults
    # -------------------------------------------------------------------------
    SKETCH_ARTBOARD_WIDTH = EnvConfig(
        name="SKETCH_ARTBOARD_WIDTH",
        default=393,
        var_type=int,
        description="Default artboard width in points",
        category="design",
    )
    SKETCH_ARTBOARD_HEIGHT = EnvConfig(
        name="SKETCH_ARTBOARD_HEIGHT",
        default=852,
        var_type=int,
        description="Default artboard height in points",
        category="design",
    )

    # -------------------------------------------------------------------------
    # Service Configuration
    # -------------------------------------------------------------------------
    MCP_HOST = EnvConfig(
        name="MCP_HOST",
        default="0.0.0.0",
        var_type=str,
        description="MCP server bind address",
        category="service",
    )
    MCP_PORT = EnvConfig(
        name="MCP_PORT",
        default=18080,
        var_type=int,
        description="MCP server port (avoids 8080)",
        category="service",
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _parse_bool(value: str) -> bool | None:
    """Parse string to boolean.

    Recognizes: true/false, 1/0, yes/no (case-insensitive).
    Returns None for unrecognized values.
    """
    normalized = value.lower().strip()
    if normalized in ("true", "1", "yes"):
        return True
    if normalized in ("false", "0", "no"):
        return False
    return None


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert string value to target type.

    Args:
        value: Raw string value from environment (or None).
        var_type: Target Python type.
        default: Default value if conversion fails or value is None.

    Returns:
        Converted value or default.
    """
    if value is None:
        return default

    if var_type is str:
        return value

    if var_type is int:
        try:
            return int(value)
        except ValueError:
            return default

    if var_type is bool:
        result = _parse_bool(value)
        return result if result is not None else default

    if var_type is Path:
        return Path(value).expanduser()

    # Unknown type, return as-is
    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: bool) -> bool: ...
@overload
def get_environment(env_var: EnvVar, override: Path) -> Path: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value
        3. Default from EnvConfig (lowest)

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type (str, int, bool, or Path).

    Example:
        >>> get_environment(EnvVar.MCP_PORT)
        18080
        >>> get_environment(EnvVar.MCP_PORT, override=9000)
        9000
    """
    config: EnvConfig = env_var.value

    if override is not None:
        return override

    raw_value = os.environ.get(config.name)
    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable.

    Args:
        env_var: Environment variable enum member.

    Returns:
        EnvConfig with name, default, type, and description.
    """
    return env_var.value


# =============================================================================
# Convenience Functions
# =============================================================================


def get_output_dir(override: Path | str | None = None) -> Path:
    """Get the export root directory.

    Resolution: override > SKETCH_OUTPUT_DIR > ~/.sketch-mcp/output
    """
    if override is not None:
        return Path(override)

    env_path = get_environment(EnvVar.SKETCH_OUTPUT_DIR)
    if env_path:
        return env_path

    return Path.home() / ".sketch-mcp" / "output"


def get_artboard_size() -> dict[str, int]:
    """Get the default artboard size as a width/height mapping."""
    return {
        "width": get_environment(EnvVar.SKETCH_ARTBOARD_WIDTH),
        "height": get_environment(EnvVar.SKETCH_ARTBOARD_HEIGHT),
    }


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (export, design, service).
                 None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


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
