"""Cross-file validation of an unpacked Sketch archive directory.

Each file is parsed independently; a file that cannot be read or parsed is
reported against that file and the remaining files are still checked.
Identifier uniqueness is enforced over every file of the archive.
"""

import json
import logging
import tempfile
import zipfile
from pathlib import Path
from typing import Any

from sketch_mcp.codec import POINT_PATTERN, is_valid_identifier

from .lib import PAGE_REF_CLASS, ValidationReport, Validator, Violation

logger = logging.getLogger(__name__)

DOCUMENT_FILE = "document.json"
META_FILE = "meta.json"
USER_FILE = "user.json"
PAGES_DIR = "pages"

REQUIRED_FILES = (DOCUMENT_FILE, META_FILE, USER_FILE)
COMPATIBILITY_VERSION = 99


def _load_json(root: Path, relative: str, validator: Validator) -> Any | None:
    """Parse one archive file, reporting failures against that file."""
    try:
        with open(root / relative, encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        validator.report.violations.append(
            Violation("$", "required file is missing", "missing_file", relative)
        )
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        validator.report.violations.append(
            Violation("$", f"cannot be parsed: {e}", "parse_error", relative)
        )
    return None


def _check_meta(
    validator: Validator, meta: Any, pages: dict[str, Any], referenced: list[str]
) -> None:
    """Check meta.json and its pagesAndArtboards index."""
    validator.file = META_FILE
    if not isinstance(meta, dict):
        validator.violation("$", "must be an object", "wrong_type")
        return
    for key in ("commit", "app", "appVersion", "variant"):
        validator.require(meta, key, "meta", "string")
    for key in ("version", "build", "autosaved"):
        validator.require(meta, key, "meta", "number")
    validator.require(meta, "fonts", "meta", "array")
    compatibility = validator.require(meta, "compatibilityVersion", "meta", "number")
    if compatibility is not None and compatibility != COMPATIBILITY_VERSION:
        validator.violation(
            "meta.compatibilityVersion",
            f"must be {COMPATIBILITY_VERSION}, got {compatibility}",
            "unsupported_version",
        )
    if "created" in meta:
        validator.require(meta, "created", "meta", "object")

    index = validator.require(meta, "pagesAndArtboards", "meta", "object")
    if index is None:
        return
    for page_id in referenced:
        if page_id not in index:
            validator.violation(
                f"meta.pagesAndArtboards.{page_id}", "page missing from index",
                "index_mismatch",
            )
    for page_id, entry in index.items():
        path = f"meta.pagesAndArtboards.{page_id}"
        if page_id not in referenced:
            validator.violation(path, "indexed page is not in the document", "index_mismatch")
            continue
        if not isinstance(entry, dict):
            validator.violation(path, "must be an object", "wrong_type")
            continue
        name = validator.require(entry, "name", path, "string")
        artboards = validator.require(entry, "artboards", path, "object")
        page = pages.get(page_id)
        if not isinstance(page, dict):
            continue
        if name is not None and name != page.get("name"):
            validator.violation(
                f"{path}.name", f"{name!r} does not match page name {page.get('name')!r}",
                "index_mismatch",
            )
        if artboards is None:
            continue
        layers = page.get("layers")
        if not isinstance(layers, list):
            continue
        actual = {
            layer.get("do_objectID")
            for layer in layers
            if isinstance(layer, dict)
            and layer.get("_class") == "artboard"
            and isinstance(layer.get("do_objectID"), str)
        }
        if set(artboards) != actual:
            validator.violation(
                f"{path}.artboards",
                f"indexed artboards {sorted(artboards)} differ from page artboards "
                f"{sorted(actual)}",
                "index_mismatch",
            )


def _check_user(validator: Validator, user: Any, referenced: list[str]) -> None:
    """Check user.json view state: document entry plus one entry per page."""
    validator.file = USER_FILE
    if not isinstance(user, dict):
        validator.violation("$", "must be an object", "wrong_type")
        return
    document = validator.require(user, "document", "user", "object")
    if document is not None:
        validator.require(document, "pageListHeight", "user.document", "number")
    for page_id in referenced:
        path = f"user.{page_id}"
        state = user.get(page_id)
        if not isinstance(state, dict):
            validator.violation(path, "page has no view state", "missing_view_state")
            continue
        origin = validator.require(state, "scrollOrigin", path, "string")
        if origin is not None and not POINT_PATTERN.match(origin):
            validator.violation(
                f"{path}.scrollOrigin", f"not a point string: {origin!r}", "invalid_point"
            )
        validator.require(state, "zoomValue", path, "number")


def validate_directory(path: Path | str) -> ValidationReport:
    """Validate an unpacked Sketch archive directory.

    Checks:
        - Required files (document.json, meta.json, user.json, pages/)
        - Each page reference resolves to pages/<id>.json
        - Page file names are canonical identifiers matching the page id
        - meta.json index agrees with the pages present
        - user.json has view state for every page
        - Unreferenced page files (reported as warnings)
        - Structural validity of every file and global identifier uniqueness

    Args:
        path: Directory containing the unpacked archive.

    Returns:
        ValidationReport covering every file.
    """
    root = Path(path)
    validator = Validator()
    if not root.is_dir():
        validator.violation("$", f"not a directory: {root}", "missing_file")
        return validator.report

    pages_dir = root / PAGES_DIR
    if not pages_dir.is_dir():
        validator.report.violations.append(
            Violation("$", "pages directory is missing", "missing_file", f"{PAGES_DIR}/")
        )

    # Document manifest and page references
    document = _load_json(root, DOCUMENT_FILE, validator)
    referenced: list[str] = []
    if document is not None:
        validator.file = DOCUMENT_FILE
        for index, page in enumerate(validator.document(document)):
            if isinstance(page, dict) and page.get("_class") == PAGE_REF_CLASS:
                # Malformed references were already reported by document()
                prefix, _, page_id = str(page.get("_ref", "")).partition("/")
                if prefix == PAGES_DIR and is_valid_identifier(page_id.upper()):
                    referenced.append(page_id)
            else:
                validator.violation(
                    f"document.pages[{index}]",
                    "pages must be file references in an archive",
                    "wrong_class",
                )

    # Page files
    pages: dict[str, Any] = {}
    for page_id in referenced:
        relative = f"{PAGES_DIR}/{page_id}.json"
        if not (root / relative).is_file():
            validator.report.violations.append(
                Violation(
                    "$", f"page reference pages/{page_id} does not resolve",
                    "unresolved_reference", relative,
                )
            )
            continue
        page = _load_json(root, relative, validator)
        if page is None:
            continue
        pages[page_id] = page
        validator.file = relative
        validator.page(page, "page")
        if isinstance(page, dict) and page.get("do_objectID") != page_id:
            validator.violation(
                "page.do_objectID",
                f"{page.get('do_objectID')!r} does not match file name {page_id}",
                "id_mismatch",
            )

    if pages_dir.is_dir():
        for file in sorted(pages_dir.glob("*.json")):
            if file.stem not in referenced:
                validator.report.warnings.append(
                    Violation(
                        "$", "page file is not referenced by the document",
                        "unreferenced_file", f"{PAGES_DIR}/{file.name}",
                    )
                )
                if not is_valid_identifier(file.stem.upper()):
                    validator.report.violations.append(
                        Violation(
                            "$", f"page file name {file.stem!r} is not an identifier",
                            "invalid_identifier", f"{PAGES_DIR}/{file.name}",
                        )
                    )

    meta = _load_json(root, META_FILE, validator)
    if meta is not None:
        _check_meta(validator, meta, pages, referenced)

    user = _load_json(root, USER_FILE, validator)
    if user is not None:
        _check_user(validator, user, referenced)

    validator.file = None
    report = validator.finish()
    logger.debug("Validated %s: %s", root, report.summary())
    return report


def validate_archive(path: Path | str) -> ValidationReport:
    """Validate an unpacked archive directory or a zipped .sketch file.

    Zipped archives are extracted to a temporary directory first.
    """
    path = Path(path)
    if path.is_file() and zipfile.is_zipfile(path):
        with tempfile.TemporaryDirectory(prefix="sketch-validate-") as tmp:
            with zipfile.ZipFile(path) as zf:
                zf.extractall(tmp)
            return validate_directory(tmp)
    return validate_directory(path)


__all__ = [
    "DOCUMENT_FILE",
    "META_FILE",
    "USER_FILE",
    "PAGES_DIR",
    "REQUIRED_FILES",
    "COMPATIBILITY_VERSION",
    "validate_directory",
    "validate_archive",
]
