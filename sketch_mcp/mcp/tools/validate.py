"""Validate sketch tool for MCP server.

Runs cross-file validation over an unpacked archive directory or a zipped
.sketch file.
"""

import logging
from pathlib import Path
from typing import Any

from sketch_mcp.validation import validate_archive

logger = logging.getLogger(__name__)


def validate_sketch(path: str) -> dict[str, Any]:
    """Validate a Sketch archive.

    Args:
        path: Archive directory or .sketch file.

    Returns:
        Dictionary containing:
        - valid: Boolean indicating if the archive passes all checks
        - errors: Violations with path, message, error_type and file
        - warnings: Non-blocking findings (unreferenced files, unmodeled
          layer classes)
        - summary: One-line summary
    """
    report = validate_archive(Path(path).expanduser())
    logger.debug("validate_sketch %s: %s", path, report.summary())
    return {
        "valid": report.valid,
        "errors": [v.to_dict() for v in report.violations],
        "warnings": [w.to_dict() for w in report.warnings],
        "summary": report.summary(),
    }


__all__ = ["validate_sketch"]
