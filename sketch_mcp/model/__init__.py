"""Node model: typed document graph and node constructors."""

from sketch_mcp.model.factory import (
    NodeFactory,
    ShadowSpec,
    StyleSpec,
    as_rect,
    new_artboard,
    new_document_graph,
    new_group,
    new_layer_base,
    new_page,
    new_rectangle,
    new_style,
    new_text,
)
from sketch_mcp.model.lib import (
    ALIGNMENT_NAMES,
    APP_BUILD,
    APP_VERSION,
    CJK_FONT_MAP,
    CJK_SIZE_FACTOR,
    DEFAULT_CJK_FONT,
    DEFAULT_FONT_FAMILY,
    DEFAULT_FONT_SIZE,
    LAYER_TYPES,
    Artboard,
    BlurType,
    BooleanOperation,
    Border,
    BorderPosition,
    Color,
    CurvePoint,
    Document,
    Fill,
    FillType,
    Group,
    InvalidGeometry,
    Layer,
    LayerBase,
    LayerClass,
    Page,
    Rect,
    Rectangle,
    ResizingConstraint,
    Shadow,
    ShapeGroup,
    SketchModel,
    Style,
    Text,
    TextAlignment,
    TextStyle,
    VerticalAlignment,
    style_font_for,
    walk_layers,
)

__all__ = [
    # Constants
    "APP_VERSION",
    "APP_BUILD",
    "ALIGNMENT_NAMES",
    "CJK_FONT_MAP",
    "CJK_SIZE_FACTOR",
    "DEFAULT_CJK_FONT",
    "DEFAULT_FONT_FAMILY",
    "DEFAULT_FONT_SIZE",
    "LAYER_TYPES",
    # Enums
    "LayerClass",
    "ResizingConstraint",
    "BooleanOperation",
    "FillType",
    "BorderPosition",
    "BlurType",
    "TextAlignment",
    "VerticalAlignment",
    # Models
    "SketchModel",
    "Rect",
    "Color",
    "CurvePoint",
    "Fill",
    "Border",
    "Shadow",
    "TextStyle",
    "Style",
    "LayerBase",
    "Rectangle",
    "Text",
    "Group",
    "ShapeGroup",
    "Artboard",
    "Layer",
    "Page",
    "Document",
    # Errors
    "InvalidGeometry",
    # Helpers
    "style_font_for",
    "walk_layers",
    "as_rect",
    # Constructors
    "ShadowSpec",
    "StyleSpec",
    "NodeFactory",
    "new_layer_base",
    "new_style",
    "new_rectangle",
    "new_text",
    "new_group",
    "new_artboard",
    "new_page",
    "new_document_graph",
]
