"""Generate sketch tool for MCP server.

Assembles a design configuration into a document graph and returns it as
Sketch JSON together with a draft text tree for quick review.
"""

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from sketch_mcp.assembler import MODULE_BUILDERS, DesignConfig, generate_document
from sketch_mcp.model import walk_layers
from sketch_mcp.output import format_document_tree
from sketch_mcp.validation import check

logger = logging.getLogger(__name__)


def parse_config(config: dict[str, Any]) -> DesignConfig:
    """Parse a design configuration, raising ValueError on schema errors."""
    try:
        return DesignConfig.model_validate(config)
    except PydanticValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(x) for x in err['loc']) or 'config'}: {err['msg']}"
            for err in e.errors()
        )
        raise ValueError(f"Invalid design config: {details}") from e


def generate_sketch(config: dict[str, Any]) -> dict[str, Any]:
    """Assemble a design configuration into a Sketch document.

    Args:
        config: Design configuration (pageName, artboardSize, theme,
            colors, modules).

    Returns:
        Dictionary containing:
        - document: Sketch document JSON with embedded pages
        - draft: Human-readable layer tree
        - valid: Whether the document passes structural validation
        - errors: Structural violations (empty for assembled documents)
        - stats: layer_count, max_depth, module_types, unknown_module_types

    Raises:
        ValueError: If the configuration does not parse.
    """
    design = parse_config(config)
    document = generate_document(design)
    report = check(document)

    layers = [
        (layer, depth)
        for page in document.pages
        for layer, depth in walk_layers(page.layers)
    ]
    module_types = [module.type for module in design.modules]
    unknown = sorted({t for t in module_types if t not in MODULE_BUILDERS})
    if unknown:
        logger.info("Config used placeholder modules: %s", ", ".join(unknown))

    return {
        "document": document.to_sketch(),
        "draft": format_document_tree(document),
        "valid": report.valid,
        "errors": [v.to_dict() for v in report.violations],
        "stats": {
            "layer_count": len(layers),
            "max_depth": max((depth for _, depth in layers), default=0),
            "module_types": module_types,
            "unknown_module_types": unknown,
        },
    }


__all__ = ["generate_sketch", "parse_config"]
