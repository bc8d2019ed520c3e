"""Design configuration and document assembly.

Turns a declarative ``DesignConfig`` (page name, artboard size, theme and an
ordered list of module records) into a complete document graph: one page
holding one artboard, with each module's layers stacked top to bottom.
"""

import logging
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sketch_mcp.config import EnvVar, get_artboard_size, get_environment
from sketch_mcp.model import Document, LayerBase, NodeFactory

from .modules import MODULE_BUILDERS, build_placeholder

logger = logging.getLogger(__name__)

PADDING = 16
DEFAULT_MODULE_HEIGHT = 100


# =============================================================================
# Configuration Models
# =============================================================================


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ArtboardSize(_CamelModel):
    width: float = Field(393, ge=0)
    height: float = Field(852, ge=0)


class ModuleSpec(BaseModel):
    """One module record. ``type`` selects the builder; other fields are free-form."""

    model_config = ConfigDict(extra="allow")

    type: str
    height: float | None = None


class DesignConfig(_CamelModel):
    """Declarative description of a single-screen design.

    Accepts camelCase keys (``pageName``, ``artboardSize``) as produced by
    JSON clients, or snake_case field names from Python.
    """

    page_name: str = "Design"
    artboard_size: ArtboardSize = Field(
        default_factory=lambda: ArtboardSize(**get_artboard_size())
    )
    theme: Literal["light", "dark"] = "light"
    colors: dict[str, str] = Field(default_factory=dict)
    modules: list[ModuleSpec] = Field(default_factory=list)
    filename: str = Field(default_factory=lambda: get_environment(EnvVar.SKETCH_FILENAME))


class Palette(_CamelModel):
    """Resolved theme colors as hex strings."""

    primary: str
    secondary: str
    background: str
    surface: str
    text_primary: str
    text_secondary: str
    border: str


_THEME_DEFAULTS: dict[str, dict[str, str]] = {
    "light": {
        "primary": "#007AFF",
        "secondary": "#5856D6",
        "background": "#F2F2F7",
        "surface": "#FFFFFF",
        "textPrimary": "#1C1C1E",
        "textSecondary": "#8E8E93",
        "border": "#E5E5EA",
    },
    "dark": {
        "primary": "#007AFF",
        "secondary": "#5856D6",
        "background": "#1C1C1E",
        "surface": "#2C2C2E",
        "textPrimary": "#FFFFFF",
        "textSecondary": "#8E8E93",
        "border": "#38383A",
    },
}


def resolve_palette(theme: str = "light", colors: dict[str, str] | None = None) -> Palette:
    """Merge color overrides onto the theme defaults.

    Args:
        theme: "light" or "dark".
        colors: Overrides keyed by palette name (camelCase or snake_case).

    Raises:
        ValueError: If the theme is unknown.
    """
    if theme not in _THEME_DEFAULTS:
        raise ValueError(f"Unknown theme '{theme}' (expected light or dark)")
    values = dict(_THEME_DEFAULTS[theme])
    for key, value in (colors or {}).items():
        if value:
            values[to_camel(key) if "_" in key else key] = value
    return Palette.model_validate(values)


# =============================================================================
# Assembly
# =============================================================================


@dataclass
class ModuleContext:
    """Placement and shared state handed to each module builder."""

    x: float
    y: float
    width: float
    artboard_width: float
    palette: Palette
    factory: NodeFactory


def build_module(module: ModuleSpec | dict[str, Any], ctx: ModuleContext) -> list[LayerBase]:
    """Build the layers of one module at the context position.

    Unknown module types fall back to a placeholder rectangle named after the
    type.
    """
    spec = module if isinstance(module, ModuleSpec) else ModuleSpec.model_validate(module)
    data = spec.model_dump()
    builder = MODULE_BUILDERS.get(spec.type)
    if builder is None:
        logger.warning("Unknown module type '%s', using placeholder", spec.type)
        builder = build_placeholder
    return builder(data, ctx)


def generate_document(
    config: DesignConfig | dict[str, Any], factory: NodeFactory | None = None
) -> Document:
    """Assemble a document graph from a design configuration.

    Modules are laid out top-down inside a 16pt horizontal padding; the
    cursor advances by each module's ``height`` (100 when absent).

    Args:
        config: DesignConfig or its dict form.
        factory: Node factory to draw identifiers from. Defaults to uuid4.

    Returns:
        Document with one page and one artboard.

    Example:
        >>> doc = generate_document({"modules": [{"type": "header", "title": "Home"}]})
        >>> doc.pages[0].artboards()[0].name
        'Design'
    """
    if not isinstance(config, DesignConfig):
        config = DesignConfig.model_validate(config)
    factory = factory or NodeFactory()
    palette = resolve_palette(config.theme, config.colors)
    width = config.artboard_size.width
    height = config.artboard_size.height

    ctx = ModuleContext(
        x=PADDING,
        y=0,
        width=max(width - PADDING * 2, 0),
        artboard_width=width,
        palette=palette,
        factory=factory,
    )
    children: list[LayerBase] = []
    for module in config.modules:
        children.extend(build_module(module, ctx))
        ctx.y += module.height or DEFAULT_MODULE_HEIGHT

    artboard = factory.artboard(
        config.page_name, width, height, palette.background, children
    )
    page = factory.page(config.page_name, [artboard])
    logger.info(
        "Assembled '%s': %d module(s), %d layer(s)",
        config.page_name,
        len(config.modules),
        len(artboard.layers),
    )
    return factory.document([page])


__all__ = [
    "PADDING",
    "DEFAULT_MODULE_HEIGHT",
    "ArtboardSize",
    "ModuleSpec",
    "DesignConfig",
    "Palette",
    "resolve_palette",
    "ModuleContext",
    "build_module",
    "generate_document",
]
