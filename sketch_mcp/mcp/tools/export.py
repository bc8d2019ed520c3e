"""Export sketch tool for MCP server.

Writes a design configuration as a .sketch archive under the output root.
"""

import logging
from pathlib import Path
from typing import Any

from sketch_mcp.archive import ArchiveSerializer, ValidationFailed
from sketch_mcp.assembler import generate_document

from .generate import parse_config

logger = logging.getLogger(__name__)


async def export_sketch(
    config: dict[str, Any],
    output_dir: str | None = None,
    filename: str | None = None,
    validate: bool | None = None,
) -> dict[str, Any]:
    """Assemble and export a design configuration as a .sketch file.

    Args:
        config: Design configuration.
        output_dir: Export root (default: SKETCH_OUTPUT_DIR).
        filename: Base file name (default: config filename).
        validate: Run cross-file validation before packaging
            (default: SKETCH_VALIDATE).

    Returns:
        Dictionary containing:
        - success: True when the archive was written
        - archive_path, directory_path, size_bytes, unique_name on success
        - errors and directory_path when validation failed

    Raises:
        ValueError: If the configuration does not parse, or the filename
            is not a single path component.
        OSError: If the archive cannot be written.
    """
    design = parse_config(config)
    document = generate_document(design)
    serializer = ArchiveSerializer(Path(output_dir) if output_dir else None, validate)

    try:
        result = await serializer.write_async(document, filename or design.filename)
    except ValidationFailed as e:
        logger.warning("Export failed validation with %d violation(s)", len(e.violations))
        return {
            "success": False,
            "directory_path": str(e.directory) if e.directory else None,
            "errors": [v.to_dict() for v in e.violations],
        }

    return {"success": True, **result.to_dict()}


__all__ = ["export_sketch"]
