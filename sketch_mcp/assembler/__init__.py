"""Document assembler: declarative module lists to document graphs."""

from sketch_mcp.assembler.lib import (
    DEFAULT_MODULE_HEIGHT,
    PADDING,
    ArtboardSize,
    DesignConfig,
    ModuleContext,
    ModuleSpec,
    Palette,
    build_module,
    generate_document,
    resolve_palette,
)
from sketch_mcp.assembler.modules import MODULE_BUILDERS, build_placeholder

__all__ = [
    "PADDING",
    "DEFAULT_MODULE_HEIGHT",
    "ArtboardSize",
    "ModuleSpec",
    "DesignConfig",
    "Palette",
    "ModuleContext",
    "MODULE_BUILDERS",
    "build_module",
    "build_placeholder",
    "resolve_palette",
    "generate_document",
]
