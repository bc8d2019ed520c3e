"""Sketch archive layout and export."""

from sketch_mcp.archive.lib import (
    APP_ID,
    ARCHIVE_SUFFIX,
    FORMAT_VERSION,
    ArchiveLayout,
    ArchiveSerializer,
    ExportResult,
    IOFailure,
    InvalidFilename,
    ValidationFailed,
    build_meta,
    build_user,
    export_sketch,
    layout_archive,
    page_reference,
)

__all__ = [
    "APP_ID",
    "ARCHIVE_SUFFIX",
    "FORMAT_VERSION",
    # Errors
    "ValidationFailed",
    "IOFailure",
    "InvalidFilename",
    # Layout
    "ArchiveLayout",
    "page_reference",
    "build_meta",
    "build_user",
    "layout_archive",
    # Export
    "ArchiveSerializer",
    "ExportResult",
    "export_sketch",
]
