"""sketch-mcp: generate Sketch design files from declarative module lists.

Example:
    >>> from sketch_mcp import export_sketch
    >>> result = export_sketch({"modules": [{"type": "header", "title": "Home"}]})
    >>> result.archive_path.suffix
    '.sketch'
"""

__version__ = "0.1.0"

from sketch_mcp.archive import (
    ArchiveSerializer,
    ExportResult,
    IOFailure,
    ValidationFailed,
    export_sketch,
)
from sketch_mcp.assembler import DesignConfig, generate_document
from sketch_mcp.model import Document, InvalidGeometry, NodeFactory
from sketch_mcp.validation import (
    ValidationReport,
    Violation,
    check,
    validate,
    validate_directory,
)

__all__ = [
    "__version__",
    "DesignConfig",
    "generate_document",
    "Document",
    "NodeFactory",
    "InvalidGeometry",
    "check",
    "validate",
    "validate_directory",
    "Violation",
    "ValidationReport",
    "ArchiveSerializer",
    "ExportResult",
    "ValidationFailed",
    "IOFailure",
    "export_sketch",
]
