"""Typed node model for Sketch documents.

This module defines the document graph that the assembler builds and the
archive serializer writes: document, pages, layers and their style
substructures. Every model serializes (``to_sketch()``) to the exact JSON
shape the Sketch file format expects, including the ``_class`` type tags and
``do_objectID`` identifiers.

Layers form a closed tagged union over ``_class`` (see ``Layer``). Pydantic
dispatches on the tag when parsing, and the structural validator keeps one
rule per ``LayerClass`` member.
"""

from enum import Enum, IntEnum
from typing import Annotated, Any, Iterator, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sketch_mcp.codec import Rgba, contains_cjk, parse_hex_color, round_half_up

# =============================================================================
# Format Constants
# =============================================================================

APP_VERSION = "74.1"
APP_BUILD = 128920
COLOR_SPACE_P3 = 1

DEFAULT_FONT_FAMILY = "Roboto-Regular"
DEFAULT_FONT_SIZE = 16
LINE_HEIGHT_MULTIPLE = 1.2

# Style-level fonts used when text contains CJK ideographs.
DEFAULT_CJK_FONT = "PingFangSC-Regular"
CJK_FONT_MAP: dict[str, str] = {
    "Roboto-Bold": "PingFangSC-Regular",
    "Roboto-Regular": "PingFangSC-Regular",
    "Roboto-Medium": "PingFangSC-Regular",
    "Roboto-Light": "PingFangSC-Regular",
}
CJK_SIZE_FACTOR = 1.2

CORNER_POINTS: tuple[tuple[int, int], ...] = ((0, 0), (1, 0), (1, 1), (0, 1))
BLUR_CENTER = "{0.500000, 0.500000}"


class LayerClass(str, Enum):
    """Layer variants this model produces (``_class`` tags)."""

    RECTANGLE = "rectangle"
    TEXT = "text"
    GROUP = "group"
    SHAPE_GROUP = "shapeGroup"
    ARTBOARD = "artboard"


class ResizingConstraint(IntEnum):
    """Resizing constraint bitmask presets.

    Sketch stores the constraint as a 6-bit mask; 63 leaves every edge and
    dimension free.
    """

    FREE = 63
    FIXED_SIZE = 15
    FIXED_WIDTH = 47
    FIXED_HEIGHT = 31
    PIN_TO_ALL = 30


class BooleanOperation(IntEnum):
    """Shape boolean operation applied against the layer below."""

    NONE = -1
    UNION = 0
    SUBTRACT = 1
    INTERSECT = 2
    DIFFERENCE = 3


class FillType(IntEnum):
    """Paint source of a fill or border."""

    COLOR = 0
    GRADIENT = 1
    PATTERN = 4
    NOISE = 5


class BorderPosition(IntEnum):
    """Where a border is drawn relative to the path."""

    CENTER = 0
    INSIDE = 1
    OUTSIDE = 2


class BlurType(IntEnum):
    """Blur effect kind."""

    GAUSSIAN = 0
    MOTION = 1
    ZOOM = 2
    BACKGROUND = 3


class TextAlignment(IntEnum):
    """Paragraph alignment as stored by Sketch."""

    LEFT = 0
    RIGHT = 1
    CENTER = 2
    JUSTIFIED = 3


class VerticalAlignment(IntEnum):
    """Vertical text alignment inside a fixed-height text box."""

    TOP = 0
    MIDDLE = 1
    BOTTOM = 2


ALIGNMENT_NAMES: dict[str, TextAlignment] = {
    "left": TextAlignment.LEFT,
    "right": TextAlignment.RIGHT,
    "center": TextAlignment.CENTER,
    "justified": TextAlignment.JUSTIFIED,
}


class InvalidGeometry(ValueError):
    """Raised when a frame has a negative or non-finite dimension."""


def style_font_for(content: str, family: str, size: float) -> tuple[str, float]:
    """Derive the style-level font from the attribute-level font.

    Text containing CJK ideographs is displayed with a CJK-capable family at
    ``round_half_up(size * 1.2)``. Other text keeps the requested font.

    Args:
        content: The text payload.
        family: Attribute-level (requested) font family.
        size: Attribute-level font size.

    Returns:
        Tuple of (family, size) for the style-level text style.
    """
    if contains_cjk(content):
        return CJK_FONT_MAP.get(family, DEFAULT_CJK_FONT), round_half_up(
            size * CJK_SIZE_FACTOR
        )
    return family, size


# =============================================================================
# Base Model
# =============================================================================


class SketchModel(BaseModel):
    """Base for all Sketch JSON structures.

    Field names are snake_case in Python and camelCase in the file format.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        extra="ignore",
    )

    def to_sketch(self) -> dict[str, Any]:
        """Serialize to the Sketch JSON representation."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


# =============================================================================
# Primitive Structures
# =============================================================================


class Rect(SketchModel):
    """Axis-aligned frame of a layer."""

    class_: Literal["rect"] = Field("rect", alias="_class")
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0
    constrain_proportions: bool = False


class Color(SketchModel):
    """RGBA color with channels in [0, 1]. Immutable."""

    model_config = ConfigDict(frozen=True)

    class_: Literal["color"] = Field("color", alias="_class")
    alpha: Annotated[float, Field(ge=0, le=1)] = 1.0
    red: Annotated[float, Field(ge=0, le=1)] = 0.0
    green: Annotated[float, Field(ge=0, le=1)] = 0.0
    blue: Annotated[float, Field(ge=0, le=1)] = 0.0

    @classmethod
    def from_rgba(cls, rgba: Rgba) -> "Color":
        return cls(red=rgba.red, green=rgba.green, blue=rgba.blue, alpha=rgba.alpha)

    @classmethod
    def from_hex(cls, value: str | None) -> "Color":
        """Build a color from a hex string (invalid input gives black)."""
        return cls.from_rgba(parse_hex_color(value))


class GraphicsContextSettings(SketchModel):
    class_: Literal["graphicsContextSettings"] = Field(
        "graphicsContextSettings", alias="_class"
    )
    blend_mode: int = 0
    opacity: float = 1.0


class ExportOptions(SketchModel):
    """Export presets. Always present, empty by default."""

    class_: Literal["exportOptions"] = Field("exportOptions", alias="_class")
    export_formats: list[dict[str, Any]] = Field(default_factory=list)
    included_layer_ids: list[str] = Field(default_factory=list)
    layer_options: int = 0
    should_trim: bool = False


class RulerData(SketchModel):
    class_: Literal["rulerData"] = Field("rulerData", alias="_class")
    base: int = 0
    guides: list[float] = Field(default_factory=list)


class FreeformGroupLayout(SketchModel):
    class_: Literal["MSImmutableFreeformGroupLayout"] = Field(
        "MSImmutableFreeformGroupLayout", alias="_class"
    )


class CurvePoint(SketchModel):
    """One vertex of a path, in coordinates normalized to the layer frame."""

    class_: Literal["curvePoint"] = Field("curvePoint", alias="_class")
    corner_radius: float = 0
    curve_from: str = "{0, 0}"
    curve_mode: int = 1
    curve_to: str = "{0, 0}"
    has_curve_from: bool = False
    has_curve_to: bool = False
    point: str = "{0, 0}"


# =============================================================================
# Style Structures
# =============================================================================


class Gradient(SketchModel):
    class_: Literal["gradient"] = Field("gradient", alias="_class")
    elipse_length: float = 0.0
    from_: str = Field("{0.500000, 0.000000}", alias="from")
    to: str = "{0.500000, 1.000000}"
    gradient_type: int = 0
    stops: list[dict[str, Any]] = Field(default_factory=list)


class Fill(SketchModel):
    class_: Literal["fill"] = Field("fill", alias="_class")
    is_enabled: bool = True
    color: Color = Field(default_factory=Color)
    fill_type: FillType = FillType.COLOR
    noise_index: float = 0
    noise_intensity: float = 0
    pattern_fill_type: int = 1
    pattern_tile_scale: float = 1.0
    gradient: Gradient = Field(default_factory=Gradient)
    context_settings: GraphicsContextSettings = Field(
        default_factory=GraphicsContextSettings
    )


class Border(SketchModel):
    class_: Literal["border"] = Field("border", alias="_class")
    is_enabled: bool = True
    color: Color = Field(default_factory=Color)
    fill_type: FillType = FillType.COLOR
    position: BorderPosition = BorderPosition.INSIDE
    thickness: float = 1.0
    context_settings: GraphicsContextSettings = Field(
        default_factory=GraphicsContextSettings
    )


class Shadow(SketchModel):
    class_: Literal["shadow"] = Field("shadow", alias="_class")
    is_enabled: bool = True
    color: Color = Field(default_factory=lambda: Color(alpha=0.15))
    offset_x: float = 0
    offset_y: float = 4
    blur_radius: float = 12
    spread: float = 0
    context_settings: GraphicsContextSettings = Field(
        default_factory=GraphicsContextSettings
    )


class InnerShadow(Shadow):
    class_: Literal["innerShadow"] = Field("innerShadow", alias="_class")


class Blur(SketchModel):
    class_: Literal["blur"] = Field("blur", alias="_class")
    is_enabled: bool = False
    center: str = BLUR_CENTER
    saturation: float = 1.0
    type: BlurType = BlurType.GAUSSIAN
    motion_angle: float = 0.0
    radius: float = 10.0


class BorderOptions(SketchModel):
    class_: Literal["borderOptions"] = Field("borderOptions", alias="_class")
    is_enabled: bool = True
    line_cap_style: int = 0
    line_join_style: int = 0
    dash_pattern: list[float] = Field(default_factory=list)


class ColorControls(SketchModel):
    class_: Literal["colorControls"] = Field("colorControls", alias="_class")
    is_enabled: bool = False
    brightness: float = 0.0
    contrast: float = 1.0
    hue: float = 0.0
    saturation: float = 1.0


class FontAttributes(SketchModel):
    name: str
    size: float


class FontDescriptor(SketchModel):
    class_: Literal["fontDescriptor"] = Field("fontDescriptor", alias="_class")
    attributes: FontAttributes


class ParagraphStyle(SketchModel):
    class_: Literal["paragraphStyle"] = Field("paragraphStyle", alias="_class")
    alignment: TextAlignment = TextAlignment.LEFT
    maximum_line_height: float
    minimum_line_height: float
    paragraph_spacing: float = 0
    line_height_multiple: float | None = None
    allows_default_tightening_for_truncation: int | None = None


class EncodedAttributes(SketchModel):
    """Text attributes shared by string spans and the style-level text style."""

    font: FontDescriptor = Field(alias="MSAttributedStringFontAttribute")
    color: Color = Field(
        default_factory=Color, alias="MSAttributedStringColorAttribute"
    )
    paragraph_style: ParagraphStyle
    text_style_vertical_alignment_key: VerticalAlignment = VerticalAlignment.TOP


class StringAttributeValues(EncodedAttributes):
    """Attribute payload of one attributed-string span."""

    kerning: float = 0.0
    text_transform: int = Field(0, alias="MSAttributedStringTextTransformAttribute")
    underline_style: int = 0
    strikethrough_style: int = 0


class TextStyle(SketchModel):
    class_: Literal["textStyle"] = Field("textStyle", alias="_class")
    vertical_alignment: VerticalAlignment = VerticalAlignment.TOP
    encode_attributes: EncodedAttributes


class StringAttribute(SketchModel):
    """Formatting for the ``[location, location + length)`` span."""

    class_: Literal["stringAttribute"] = Field("stringAttribute", alias="_class")
    location: int
    length: int
    attributes: StringAttributeValues


class AttributedString(SketchModel):
    class_: Literal["attributedString"] = Field("attributedString", alias="_class")
    string: str
    attributes: list[StringAttribute] = Field(default_factory=list)


class Style(SketchModel):
    """Paint, stroke, shadow and text formatting for one layer."""

    class_: Literal["style"] = Field("style", alias="_class")
    object_id: str = Field(alias="do_objectID")
    blur: Blur = Field(default_factory=Blur)
    borders: list[Border] = Field(default_factory=list)
    fills: list[Fill] = Field(default_factory=list)
    shadows: list[Shadow] = Field(default_factory=list)
    inner_shadows: list[InnerShadow] = Field(default_factory=list)
    context_settings: GraphicsContextSettings = Field(
        default_factory=GraphicsContextSettings
    )
    start_marker_type: int = 0
    end_marker_type: int = 0
    miter_limit: float = 10
    winding_rule: int = 1
    color_controls: ColorControls = Field(default_factory=ColorControls)
    border_options: BorderOptions = Field(default_factory=BorderOptions)
    text_style: TextStyle | None = None


# =============================================================================
# Layers
# =============================================================================


class LayerBase(SketchModel):
    """Attributes shared by every layer variant."""

    object_id: str = Field(alias="do_objectID")
    name: str
    frame: Rect
    resizing_constraint: int = ResizingConstraint.FREE
    resizing_type: int = 0
    rotation: float = 0
    should_break_mask_chain: bool = False
    boolean_operation: BooleanOperation = BooleanOperation.NONE
    export_options: ExportOptions = Field(default_factory=ExportOptions)
    is_fixed_to_viewport: bool = False
    is_flipped_horizontal: bool = False
    is_flipped_vertical: bool = False
    is_locked: bool = False
    is_visible: bool = True
    is_template: bool = False
    layer_list_expanded_type: int = 0
    name_is_fixed: bool = False
    style: Style


class Rectangle(LayerBase):
    """Rectangle with a uniform corner radius replicated on all 4 points."""

    class_: Literal["rectangle"] = Field("rectangle", alias="_class")
    edited: bool = False
    is_closed: bool = True
    point_radius_behaviour: int = 1
    has_clipping_mask: bool = False
    clipping_mask_mode: int = 0
    fixed_radius: float = 0
    has_converted_to_new_round_corners: bool = True
    needs_convertion_to_new_round_corners: bool = False
    points: list[CurvePoint] = Field(default_factory=list)


class Text(LayerBase):
    """Text layer.

    Font state is encoded twice: per span in ``attributed_string`` (the
    literal request) and in ``style.text_style`` (derived with
    ``style_font_for``). Consumers read one or the other.
    """

    class_: Literal["text"] = Field("text", alias="_class")
    attributed_string: AttributedString
    text_behaviour: int = 0
    glyph_bounds: str = ""
    line_spacing_behaviour: int = 1
    automatically_draw_on_underlying_path: bool = False
    dont_synchronise_with_symbol: bool = True


class Group(LayerBase):
    class_: Literal["group"] = Field("group", alias="_class")
    has_click_through: bool = False
    group_layout: FreeformGroupLayout = Field(default_factory=FreeformGroupLayout)
    layers: list["Layer"] = Field(default_factory=list)


class ShapeGroup(LayerBase):
    class_: Literal["shapeGroup"] = Field("shapeGroup", alias="_class")
    has_click_through: bool = False
    group_layout: FreeformGroupLayout = Field(default_factory=FreeformGroupLayout)
    layers: list["Layer"] = Field(default_factory=list)


class Artboard(LayerBase):
    """Fixed-size canvas; ``layers[0]`` is always the background rectangle."""

    class_: Literal["artboard"] = Field("artboard", alias="_class")
    has_click_through: bool = True
    group_layout: FreeformGroupLayout = Field(default_factory=FreeformGroupLayout)
    has_background_color: bool = False
    background_color: Color = Field(default_factory=Color)
    horizontal_ruler_data: RulerData = Field(default_factory=RulerData)
    vertical_ruler_data: RulerData = Field(default_factory=RulerData)
    layers: list["Layer"] = Field(default_factory=list)
    include_background_color_in_export: bool = False
    include_in_cloud_upload: bool = True
    is_flow_home: bool = False
    resizes_content: bool = False


Layer = Annotated[
    Union[Rectangle, Text, Group, ShapeGroup, Artboard],
    Field(discriminator="class_"),
]

LAYER_TYPES: dict[LayerClass, type[LayerBase]] = {
    LayerClass.RECTANGLE: Rectangle,
    LayerClass.TEXT: Text,
    LayerClass.GROUP: Group,
    LayerClass.SHAPE_GROUP: ShapeGroup,
    LayerClass.ARTBOARD: Artboard,
}

Group.model_rebuild()
ShapeGroup.model_rebuild()
Artboard.model_rebuild()


# =============================================================================
# Page and Document
# =============================================================================


class Page(SketchModel):
    class_: Literal["page"] = Field("page", alias="_class")
    object_id: str = Field(alias="do_objectID")
    name: str
    has_click_through: bool = True
    group_layout: FreeformGroupLayout = Field(default_factory=FreeformGroupLayout)
    horizontal_ruler_data: RulerData = Field(default_factory=RulerData)
    vertical_ruler_data: RulerData = Field(default_factory=RulerData)
    layers: list[Layer] = Field(default_factory=list)
    resizing_constraint: int = ResizingConstraint.FREE
    resizing_type: int = 0
    rotation: float = 0
    should_break_mask_chain: bool = False
    export_options: ExportOptions = Field(default_factory=ExportOptions)
    is_fixed_to_viewport: bool = False
    is_flipped_horizontal: bool = False
    is_flipped_vertical: bool = False
    is_locked: bool = False
    is_visible: bool = True
    layer_list_expanded_type: int = 0
    name_is_fixed: bool = False

    def artboards(self) -> list[Artboard]:
        """Top-level artboards of this page."""
        return [layer for layer in self.layers if isinstance(layer, Artboard)]


class AssetCollection(SketchModel):
    class_: Literal["assetCollection"] = Field("assetCollection", alias="_class")
    object_id: str = Field(alias="do_objectID")
    color_assets: list[dict[str, Any]] = Field(default_factory=list)
    gradient_assets: list[dict[str, Any]] = Field(default_factory=list)
    images: list[dict[str, Any]] = Field(default_factory=list)
    colors: list[dict[str, Any]] = Field(default_factory=list)
    gradients: list[dict[str, Any]] = Field(default_factory=list)


class SharedStyleContainer(SketchModel):
    class_: Literal["sharedStyleContainer"] = Field(
        "sharedStyleContainer", alias="_class"
    )
    object_id: str = Field(alias="do_objectID")
    objects: list[dict[str, Any]] = Field(default_factory=list)


class SymbolContainer(SketchModel):
    class_: Literal["symbolContainer"] = Field("symbolContainer", alias="_class")
    object_id: str = Field(alias="do_objectID")
    objects: list[dict[str, Any]] = Field(default_factory=list)


class SharedTextStyleContainer(SketchModel):
    class_: Literal["sharedTextStyleContainer"] = Field(
        "sharedTextStyleContainer", alias="_class"
    )
    object_id: str = Field(alias="do_objectID")
    objects: list[dict[str, Any]] = Field(default_factory=list)


class SwatchContainer(SketchModel):
    class_: Literal["swatchContainer"] = Field("swatchContainer", alias="_class")
    object_id: str = Field(alias="do_objectID")
    objects: list[dict[str, Any]] = Field(default_factory=list)


class DocumentState(SketchModel):
    class_: Literal["documentState"] = Field("documentState", alias="_class")


class Document(SketchModel):
    """Root of the document graph.

    Pages are embedded here; the archive serializer replaces them with file
    references when writing ``document.json``.
    """

    class_: Literal["document"] = Field("document", alias="_class")
    object_id: str = Field(alias="do_objectID")
    app_version: str = APP_VERSION
    build: int = APP_BUILD
    current_page_index: int = 0
    color_space: int = COLOR_SPACE_P3
    assets: AssetCollection
    foreign_layer_styles: list[dict[str, Any]] = Field(default_factory=list)
    foreign_symbols: list[dict[str, Any]] = Field(default_factory=list)
    foreign_text_styles: list[dict[str, Any]] = Field(default_factory=list)
    foreign_swatches: list[dict[str, Any]] = Field(default_factory=list)
    layer_styles: SharedStyleContainer
    layer_symbols: SymbolContainer
    layer_text_styles: SharedTextStyleContainer
    shared_swatches: SwatchContainer
    font_references: list[dict[str, Any]] = Field(default_factory=list)
    document_state: DocumentState = Field(default_factory=DocumentState)
    pages: list[Page] = Field(default_factory=list)


def walk_layers(layers: list[LayerBase], depth: int = 0) -> Iterator[tuple[LayerBase, int]]:
    """Yield every layer in a layer list depth-first, with its nesting depth."""
    for layer in layers:
        yield layer, depth
        children = getattr(layer, "layers", None)
        if children:
            yield from walk_layers(children, depth + 1)


__all__ = [
    # Constants
    "APP_VERSION",
    "APP_BUILD",
    "COLOR_SPACE_P3",
    "DEFAULT_FONT_FAMILY",
    "DEFAULT_FONT_SIZE",
    "LINE_HEIGHT_MULTIPLE",
    "DEFAULT_CJK_FONT",
    "CJK_FONT_MAP",
    "CJK_SIZE_FACTOR",
    "CORNER_POINTS",
    # Enums
    "LayerClass",
    "ResizingConstraint",
    "BooleanOperation",
    "FillType",
    "BorderPosition",
    "BlurType",
    "TextAlignment",
    "VerticalAlignment",
    "ALIGNMENT_NAMES",
    # Errors
    "InvalidGeometry",
    # Derivations
    "style_font_for",
    # Models
    "SketchModel",
    "Rect",
    "Color",
    "GraphicsContextSettings",
    "ExportOptions",
    "RulerData",
    "FreeformGroupLayout",
    "CurvePoint",
    "Gradient",
    "Fill",
    "Border",
    "Shadow",
    "InnerShadow",
    "Blur",
    "BorderOptions",
    "ColorControls",
    "FontAttributes",
    "FontDescriptor",
    "ParagraphStyle",
    "EncodedAttributes",
    "StringAttributeValues",
    "TextStyle",
    "StringAttribute",
    "AttributedString",
    "Style",
    "LayerBase",
    "Rectangle",
    "Text",
    "Group",
    "ShapeGroup",
    "Artboard",
    "Layer",
    "LAYER_TYPES",
    "Page",
    "AssetCollection",
    "SharedStyleContainer",
    "SymbolContainer",
    "SharedTextStyleContainer",
    "SwatchContainer",
    "DocumentState",
    "Document",
    "walk_layers",
]
