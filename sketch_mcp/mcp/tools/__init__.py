"""MCP tools for sketch-mcp.

Tools:
    - generate_sketch: Design config → document JSON + draft text tree
    - export_sketch: Design config → .sketch archive on disk
    - validate_sketch: Cross-file validation of an archive
    - get_status: Server readiness report
"""

from .export import export_sketch
from .generate import generate_sketch
from .status import get_status
from .validate import validate_sketch

__all__ = [
    "generate_sketch",
    "export_sketch",
    "validate_sketch",
    "get_status",
]
