"""Structural validation for Sketch documents and archive directories."""

from sketch_mcp.validation.files import (
    COMPATIBILITY_VERSION,
    DOCUMENT_FILE,
    META_FILE,
    PAGES_DIR,
    REQUIRED_FILES,
    USER_FILE,
    validate_archive,
    validate_directory,
)
from sketch_mcp.validation.lib import (
    LAYER_HANDLERS,
    UNMODELED_LAYER_CLASSES,
    ValidationReport,
    Validator,
    Violation,
    check,
    is_valid,
    validate,
)

__all__ = [
    # Types
    "Violation",
    "ValidationReport",
    "Validator",
    "LAYER_HANDLERS",
    "UNMODELED_LAYER_CLASSES",
    # In-memory validation
    "check",
    "validate",
    "is_valid",
    # Cross-file validation
    "validate_directory",
    "validate_archive",
    "DOCUMENT_FILE",
    "META_FILE",
    "USER_FILE",
    "PAGES_DIR",
    "REQUIRED_FILES",
    "COMPATIBILITY_VERSION",
]
