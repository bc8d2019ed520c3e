"""Sketch archive layout, packaging and export.

A Sketch file is a zip container of JSON files:

    document.json        document root; pages replaced by file references
    meta.json            app/version tags and a page/artboard name index
    user.json            per-page view state
    pages/<id>.json      one file per page subtree

``ArchiveSerializer`` writes the files into a unique directory under the
output root, validates the directory in cross-file mode, and zips it into
``<name>.sketch`` beside the directory.
"""

import asyncio
import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator
from zipfile import ZIP_DEFLATED, ZipFile

from sketch_mcp.assembler import DesignConfig, generate_document
from sketch_mcp.config import EnvVar, get_environment, get_output_dir
from sketch_mcp.core import get_logger
from sketch_mcp.model import APP_BUILD, APP_VERSION, Document, NodeFactory
from sketch_mcp.validation import (
    COMPATIBILITY_VERSION,
    DOCUMENT_FILE,
    META_FILE,
    PAGES_DIR,
    USER_FILE,
    Violation,
    validate_directory,
)

logger = get_logger("archive")

APP_ID = "com.bohemiancoding.sketch3"
APP_COMMIT = "eec98fa25f4692ad75f1a3b955a6293b4a93836e"
CREATED_COMMIT = "238f363ed3de77eb1d86e03176f8a10f7928ed51"
FORMAT_VERSION = 136
VARIANT = "NONAPPSTORE"
ARCHIVE_SUFFIX = ".sketch"

PAGE_LIST_HEIGHT = 85
DEFAULT_SCROLL_ORIGIN = "{-0.000000, -0.000000}"
DEFAULT_ZOOM = 0.796296238899231


class ValidationFailed(Exception):
    """Raised when the written archive fails cross-file validation.

    Attributes:
        violations: The violations reported by the validator.
        directory: The written archive directory, left in place for inspection.
    """

    def __init__(self, violations: list[Violation], directory: Path | None = None):
        self.violations = violations
        self.directory = directory
        preview = "; ".join(str(v) for v in violations[:3])
        more = f" (+{len(violations) - 3} more)" if len(violations) > 3 else ""
        super().__init__(f"Archive failed validation: {preview}{more}")


class IOFailure(OSError):
    """Raised when the archive cannot be written. Wraps the OS error."""


class InvalidFilename(IOFailure, ValueError):
    """Raised when an export name is not a single path component."""


@dataclass
class ArchiveLayout:
    """In-memory file set of an archive, keyed by archive-relative path."""

    document: dict[str, Any]
    meta: dict[str, Any]
    user: dict[str, Any]
    pages: dict[str, dict[str, Any]] = field(default_factory=dict)

    def files(self) -> Iterator[tuple[str, dict[str, Any]]]:
        """Yield (relative path, JSON payload) for every file."""
        yield DOCUMENT_FILE, self.document
        yield META_FILE, self.meta
        yield USER_FILE, self.user
        for page_id, page in self.pages.items():
            yield f"{PAGES_DIR}/{page_id}.json", page


@dataclass
class ExportResult:
    """Where an export landed.

    Attributes:
        archive_path: The zipped ``.sketch`` file.
        directory_path: The unpacked archive directory.
        size_bytes: Size of the ``.sketch`` file.
        unique_name: Directory/archive base name (``<filename>_<ms>``).
    """

    archive_path: Path
    directory_path: Path
    size_bytes: int
    unique_name: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "archive_path": str(self.archive_path),
            "directory_path": str(self.directory_path),
            "size_bytes": self.size_bytes,
            "unique_name": self.unique_name,
        }


# =============================================================================
# Layout
# =============================================================================


def page_reference(page_id: str) -> dict[str, str]:
    return {
        "_class": "MSJSONFileReference",
        "_ref_class": "MSImmutablePage",
        "_ref": f"{PAGES_DIR}/{page_id}",
    }


def build_meta(pages: list[dict[str, Any]]) -> dict[str, Any]:
    """Build meta.json with a name index covering every page and artboard."""
    index = {
        page["do_objectID"]: {
            "name": page["name"],
            "artboards": {
                layer["do_objectID"]: {"name": layer["name"]}
                for layer in page.get("layers", [])
                if layer.get("_class") == "artboard"
            },
        }
        for page in pages
    }
    return {
        "commit": APP_COMMIT,
        "pagesAndArtboards": index,
        "version": FORMAT_VERSION,
        "compatibilityVersion": COMPATIBILITY_VERSION,
        "app": APP_ID,
        "autosaved": 0,
        "variant": VARIANT,
        "created": {
            "commit": CREATED_COMMIT,
            "appVersion": APP_VERSION,
            "build": APP_BUILD,
            "app": APP_ID,
            "compatibilityVersion": COMPATIBILITY_VERSION,
            "coeditCompatibilityVersion": COMPATIBILITY_VERSION,
            "version": FORMAT_VERSION,
            "variant": VARIANT,
        },
        "appVersion": APP_VERSION,
        "build": APP_BUILD,
        "fonts": [],
    }


def build_user(page_ids: list[str]) -> dict[str, Any]:
    """Build user.json with default view state for each page."""
    user: dict[str, Any] = {
        "document": {"pageListHeight": PAGE_LIST_HEIGHT, "pageListCollapsed": 0}
    }
    for page_id in page_ids:
        user[page_id] = {"scrollOrigin": DEFAULT_SCROLL_ORIGIN, "zoomValue": DEFAULT_ZOOM}
    return user


def layout_archive(document: Document) -> ArchiveLayout:
    """Split a document graph into the archive's file set.

    Embedded pages move to ``pages/<id>.json`` and are replaced by file
    references in the document manifest.
    """
    data = document.to_sketch()
    pages = data.pop("pages")
    data["pages"] = [page_reference(page["do_objectID"]) for page in pages]
    page_ids = [page["do_objectID"] for page in pages]
    return ArchiveLayout(
        document=data,
        meta=build_meta(pages),
        user=build_user(page_ids),
        pages={page["do_objectID"]: page for page in pages},
    )


# =============================================================================
# Serializer
# =============================================================================


def _check_filename(name: str) -> str:
    """Return ``name`` if it can be used as one entry under the output root."""
    if (
        not isinstance(name, str)
        or name in ("", ".", "..")
        or "/" in name
        or "\\" in name
        or "\0" in name
        or Path(name).name != name
    ):
        raise InvalidFilename(f"Export name must be a single path component, got {name!r}")
    return name


def _unique_directory(root: Path, base: str) -> tuple[Path, str]:
    """Create ``root/<base>_<ms>``; a counter suffix resolves clashes."""
    stamp = f"{base}_{int(time.time() * 1000)}"
    name = stamp
    counter = 1
    while True:
        path = root / name
        try:
            path.mkdir()
            return path, name
        except FileExistsError:
            name = f"{stamp}_{counter}"
            counter += 1


def _write_json(path: Path, payload: dict[str, Any]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)


def _zip_directory(source: Path, target: Path) -> None:
    """Zip a directory tree, with explicit entries for subdirectories."""
    with ZipFile(target, "w", compression=ZIP_DEFLATED) as zf:
        for path in sorted(source.rglob("*")):
            zf.write(path, path.relative_to(source).as_posix())


class ArchiveSerializer:
    """Writes document graphs as Sketch archives.

    Args:
        output_dir: Output root. Defaults to SKETCH_OUTPUT_DIR or
            ~/.sketch-mcp/output.
        validate: Run cross-file validation before zipping. Defaults to
            SKETCH_VALIDATE (True).

    Example:
        >>> serializer = ArchiveSerializer(tmp_path)
        >>> result = serializer.write(document, "checkout")
        >>> result.archive_path.name
        'checkout_1718000000000.sketch'
    """

    def __init__(self, output_dir: Path | str | None = None, validate: bool | None = None):
        self.output_dir = get_output_dir(output_dir)
        self.validate = get_environment(EnvVar.SKETCH_VALIDATE, override=validate)

    def write(self, document: Document, filename: str | None = None) -> ExportResult:
        """Write, validate and zip a document.

        Raises:
            ValidationFailed: If validation is enabled and the written
                directory has violations. The directory is left in place.
            InvalidFilename: If ``filename`` is not a single path component.
                Nothing is written.
            IOFailure: If a file or directory cannot be written.
        """
        layout = layout_archive(document)
        return self._write_layout(layout, filename or get_environment(EnvVar.SKETCH_FILENAME))

    async def write_async(self, document: Document, filename: str | None = None) -> ExportResult:
        """Async variant of ``write``; the file I/O runs in a worker thread."""
        layout = layout_archive(document)
        return await asyncio.to_thread(
            self._write_layout, layout, filename or get_environment(EnvVar.SKETCH_FILENAME)
        )

    def _write_layout(self, layout: ArchiveLayout, filename: str) -> ExportResult:
        _check_filename(filename)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            directory, unique_name = _unique_directory(self.output_dir, filename)
            (directory / PAGES_DIR).mkdir()
            for relative, payload in layout.files():
                _write_json(directory / relative, payload)
        except OSError as e:
            raise IOFailure(f"Failed to write archive files under {self.output_dir}: {e}") from e
        logger.debug("Wrote %d file(s) to %s", len(layout.pages) + 3, directory)

        if self.validate:
            report = validate_directory(directory)
            if not report.valid:
                logger.warning("Archive %s failed validation: %s", directory, report.summary())
                raise ValidationFailed(report.violations, directory)
            for warning in report.warnings:
                logger.debug("Validation warning: %s", warning)

        archive_path = directory.with_name(unique_name + ARCHIVE_SUFFIX)
        try:
            _zip_directory(directory, archive_path)
            size = archive_path.stat().st_size
        except OSError as e:
            raise IOFailure(f"Failed to package {archive_path}: {e}") from e

        logger.info("Exported %s (%d bytes)", archive_path, size)
        return ExportResult(
            archive_path=archive_path,
            directory_path=directory,
            size_bytes=size,
            unique_name=unique_name,
        )


def export_sketch(
    config: DesignConfig | dict[str, Any],
    output_dir: Path | str | None = None,
    validate: bool | None = None,
    factory: NodeFactory | None = None,
) -> ExportResult:
    """Assemble a design configuration and export it as a .sketch archive.

    Args:
        config: DesignConfig or its dict form. ``filename`` names the export.
        output_dir: Output root override.
        validate: Validation override.
        factory: Node factory for deterministic identifiers.

    Returns:
        ExportResult describing the written archive.
    """
    if not isinstance(config, DesignConfig):
        config = DesignConfig.model_validate(config)
    document = generate_document(config, factory)
    return ArchiveSerializer(output_dir, validate).write(document, config.filename)


__all__ = [
    "APP_ID",
    "FORMAT_VERSION",
    "ARCHIVE_SUFFIX",
    "ValidationFailed",
    "IOFailure",
    "InvalidFilename",
    "ArchiveLayout",
    "ExportResult",
    "page_reference",
    "build_meta",
    "build_user",
    "layout_archive",
    "ArchiveSerializer",
    "export_sketch",
]
