"""Status tool for MCP server."""

import os
from typing import Any

from sketch_mcp.assembler import MODULE_BUILDERS
from sketch_mcp.config import EnvVar, get_environment, get_output_dir

from ..lib import get_server_version


def _writable(path) -> bool:
    """True if path exists and is writable, or can be created."""
    for candidate in (path, *path.parents):
        if candidate.exists():
            return os.access(candidate, os.W_OK)
    return False


def get_status() -> dict[str, Any]:
    """Report server readiness.

    Returns:
        Dictionary containing:
        - status: "healthy" or "degraded"
        - version: Server version
        - output_dir: Export root and whether it is writable
        - validate: Whether exports are validated before packaging
        - module_types: Module types the assembler knows
        - action_required: What to fix when degraded
    """
    output_dir = get_output_dir()
    writable = _writable(output_dir)
    result: dict[str, Any] = {
        "status": "healthy" if writable else "degraded",
        "version": get_server_version(),
        "output_dir": {"path": str(output_dir), "writable": writable},
        "validate": get_environment(EnvVar.SKETCH_VALIDATE),
        "module_types": sorted(MODULE_BUILDERS),
    }
    if not writable:
        result["action_required"] = [
            f"Make {output_dir} writable or set SKETCH_OUTPUT_DIR in .env"
        ]
    return result


__all__ = ["get_status"]
