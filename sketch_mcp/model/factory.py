"""Constructors for document graph nodes.

Each constructor returns a fully-defaulted node with fresh identifiers on the
node and its style. ``NodeFactory`` binds an identifier source so that tests
can build deterministic graphs; the module-level ``new_*`` functions use a
shared factory backed by ``uuid4``.
"""

import math
from typing import Any, Mapping, Sequence

from pydantic import BaseModel, Field

from sketch_mcp.codec import IdentifierSource, format_point

from .lib import (
    ALIGNMENT_NAMES,
    CORNER_POINTS,
    DEFAULT_FONT_FAMILY,
    DEFAULT_FONT_SIZE,
    LINE_HEIGHT_MULTIPLE,
    Artboard,
    AssetCollection,
    AttributedString,
    Border,
    BorderPosition,
    Color,
    CurvePoint,
    Document,
    EncodedAttributes,
    Fill,
    FontAttributes,
    FontDescriptor,
    Group,
    InvalidGeometry,
    LayerBase,
    LayerClass,
    Page,
    ParagraphStyle,
    Rect,
    Rectangle,
    ResizingConstraint,
    Shadow,
    SharedStyleContainer,
    SharedTextStyleContainer,
    StringAttribute,
    StringAttributeValues,
    Style,
    SwatchContainer,
    SymbolContainer,
    Text,
    TextAlignment,
    TextStyle,
    VerticalAlignment,
    style_font_for,
)

# =============================================================================
# Style Requests
# =============================================================================


class ShadowSpec(BaseModel):
    """Drop shadow request. Defaults give a soft card shadow."""

    color: str = "#000000"
    alpha: float = 0.15
    offset_x: float = 0
    offset_y: float = 4
    blur_radius: float = 12
    spread: float = 0


class StyleSpec(BaseModel):
    """Caller-facing style request.

    Colors are hex strings. Text fields (font_family, font_size, color,
    alignment) are only meaningful for text; when none of them is set the
    resulting style has no text style block.
    """

    fills: list[str] = Field(default_factory=list)
    border_color: str | None = None
    border_width: float = 1.0
    border_position: BorderPosition = BorderPosition.INSIDE
    shadow: ShadowSpec | None = None
    corner_radius: float = 0
    font_family: str | None = None
    font_size: float | None = None
    color: str | None = None
    alignment: str | None = None
    vertical_alignment: VerticalAlignment = VerticalAlignment.TOP

    def has_text_attributes(self) -> bool:
        return any(
            value is not None
            for value in (self.font_family, self.font_size, self.color, self.alignment)
        )

    def paint_only(self) -> "StyleSpec":
        """Copy of this request with the text attributes cleared."""
        return self.model_copy(
            update={"font_family": None, "font_size": None, "color": None, "alignment": None}
        )


def as_rect(geometry: Rect | Mapping[str, Any] | Sequence[float]) -> Rect:
    """Coerce geometry to a Rect, rejecting negative or non-finite sizes.

    Accepts a Rect, a mapping with x/y/width/height keys or an
    (x, y, width, height) sequence.

    Raises:
        InvalidGeometry: If width or height is negative or not finite.
    """
    if isinstance(geometry, Rect):
        rect = geometry
    elif isinstance(geometry, Mapping):
        rect = Rect(
            x=geometry.get("x", 0),
            y=geometry.get("y", 0),
            width=geometry.get("width", 0),
            height=geometry.get("height", 0),
            constrain_proportions=geometry.get("constrain_proportions", False),
        )
    else:
        x, y, width, height = geometry
        rect = Rect(x=x, y=y, width=width, height=height)

    for field_name in ("x", "y", "width", "height"):
        value = getattr(rect, field_name)
        if not math.isfinite(value):
            raise InvalidGeometry(f"Frame {field_name} must be finite, got {value}")
    if rect.width < 0 or rect.height < 0:
        raise InvalidGeometry(
            f"Frame size must be non-negative, got {rect.width}x{rect.height}"
        )
    return rect


def _alignment(name: str | None) -> TextAlignment:
    if name is None:
        return TextAlignment.LEFT
    try:
        return ALIGNMENT_NAMES[name.lower()]
    except KeyError as e:
        valid = ", ".join(ALIGNMENT_NAMES)
        raise ValueError(f"Unknown text alignment '{name}' (expected {valid})") from e


def _paragraph_style(
    alignment: TextAlignment, size: float, *, span: bool = False
) -> ParagraphStyle:
    line_height = size * LINE_HEIGHT_MULTIPLE
    if span:
        return ParagraphStyle(
            alignment=alignment,
            maximum_line_height=line_height,
            minimum_line_height=line_height,
            line_height_multiple=LINE_HEIGHT_MULTIPLE,
            allows_default_tightening_for_truncation=0,
        )
    return ParagraphStyle(
        alignment=alignment,
        maximum_line_height=line_height,
        minimum_line_height=line_height,
    )


# =============================================================================
# Factory
# =============================================================================


class NodeFactory:
    """Builds document graph nodes with identifiers from one source.

    Example:
        >>> import random
        >>> factory = NodeFactory(IdentifierSource(random.Random(7)))
        >>> rect = factory.rectangle({"x": 0, "y": 0, "width": 10, "height": 10})
    """

    def __init__(self, id_source: IdentifierSource | None = None):
        self.id_source = id_source or IdentifierSource()

    def identifier(self) -> str:
        return self.id_source()

    def layer_base(
        self,
        variant: LayerClass,
        geometry: Rect | Mapping[str, Any] | Sequence[float],
        name: str | None = None,
        style: Style | None = None,
    ) -> dict[str, Any]:
        """Shared layer fields, defaulted, as keyword arguments for a variant.

        Args:
            variant: Layer class being built (used for the default name).
            geometry: Frame of the layer.
            name: Display name. Defaults to the variant tag.
            style: Style to attach. Defaults to an empty style.

        Returns:
            Field values accepted by every LayerBase subclass.
        """
        return {
            "object_id": self.identifier(),
            "name": name if name is not None else LayerClass(variant).value,
            "frame": as_rect(geometry),
            "resizing_constraint": ResizingConstraint.FREE,
            "style": style if style is not None else self.style(),
        }

    def style(self, spec: StyleSpec | None = None) -> Style:
        """Build a Style from a request.

        Fills map one-to-one onto solid fills. A border, shadow and text style
        are only present when requested.
        """
        spec = spec or StyleSpec()
        style = Style(
            object_id=self.identifier(),
            fills=[Fill(color=Color.from_hex(value)) for value in spec.fills],
        )
        if spec.border_color is not None:
            style.borders.append(
                Border(
                    color=Color.from_hex(spec.border_color),
                    position=spec.border_position,
                    thickness=spec.border_width,
                )
            )
        if spec.shadow is not None:
            rgba = Color.from_hex(spec.shadow.color)
            style.shadows.append(
                Shadow(
                    color=rgba.model_copy(update={"alpha": spec.shadow.alpha}),
                    offset_x=spec.shadow.offset_x,
                    offset_y=spec.shadow.offset_y,
                    blur_radius=spec.shadow.blur_radius,
                    spread=spec.shadow.spread,
                )
            )
        if spec.has_text_attributes():
            family = spec.font_family or DEFAULT_FONT_FAMILY
            size = spec.font_size if spec.font_size is not None else DEFAULT_FONT_SIZE
            style.text_style = TextStyle(
                vertical_alignment=spec.vertical_alignment,
                encode_attributes=EncodedAttributes(
                    font=FontDescriptor(attributes=FontAttributes(name=family, size=size)),
                    color=Color.from_hex(spec.color or "#000000"),
                    paragraph_style=_paragraph_style(_alignment(spec.alignment), size),
                    text_style_vertical_alignment_key=spec.vertical_alignment,
                ),
            )
        return style

    def rectangle(
        self,
        geometry: Rect | Mapping[str, Any] | Sequence[float],
        spec: StyleSpec | None = None,
        name: str = "Rectangle",
        has_clipping_mask: bool = False,
    ) -> Rectangle:
        """Build a rectangle with four unit-square corner points.

        The corner radius is uniform: ``fixed_radius`` and every point's
        ``corner_radius`` carry the same value.
        """
        spec = spec or StyleSpec()
        radius = spec.corner_radius
        points = [
            CurvePoint(
                corner_radius=radius,
                curve_from=format_point(px, py),
                curve_to=format_point(px, py),
                point=format_point(px, py),
            )
            for px, py in CORNER_POINTS
        ]
        base = self.layer_base(
            LayerClass.RECTANGLE,
            geometry,
            name=name,
            style=self.style(spec.paint_only()),
        )
        return Rectangle(
            **base,
            has_clipping_mask=has_clipping_mask,
            fixed_radius=radius,
            points=points,
        )

    def text(
        self,
        content: str,
        geometry: Rect | Mapping[str, Any] | Sequence[float],
        spec: StyleSpec | None = None,
        name: str | None = None,
    ) -> Text:
        """Build a text layer with dual font encoding.

        The attributed string carries the requested family and size. The
        style-level text style carries the display font from
        ``style_font_for``, which differs for CJK text.

        Args:
            content: Text payload (may be empty).
            geometry: Frame of the text box.
            spec: Font, color and alignment request.
            name: Layer name. Defaults to the first 30 characters of content.

        Raises:
            ValueError: If content is missing or not a string.
        """
        if not isinstance(content, str):
            raise ValueError(f"Text content must be a string, got {type(content).__name__}")
        spec = spec or StyleSpec()
        family = spec.font_family or DEFAULT_FONT_FAMILY
        size = spec.font_size if spec.font_size is not None else DEFAULT_FONT_SIZE
        alignment = _alignment(spec.alignment)
        color = Color.from_hex(spec.color or "#000000")

        display_family, display_size = style_font_for(content, family, size)
        style = self.style(
            spec.model_copy(
                update={
                    "fills": [],
                    "font_family": display_family,
                    "font_size": display_size,
                    "color": spec.color or "#000000",
                    "alignment": alignment.name.lower(),
                }
            )
        )

        span = StringAttribute(
            location=0,
            length=len(content),
            attributes=StringAttributeValues(
                font=FontDescriptor(attributes=FontAttributes(name=family, size=size)),
                color=color,
                paragraph_style=_paragraph_style(alignment, size, span=True),
                text_style_vertical_alignment_key=VerticalAlignment.BOTTOM,
            ),
        )
        base = self.layer_base(
            LayerClass.TEXT,
            geometry,
            name=name if name is not None else (content[:30] or "Text"),
            style=style,
        )
        return Text(
            **base,
            attributed_string=AttributedString(string=content, attributes=[span]),
        )

    def group(
        self,
        name: str,
        children: Sequence[LayerBase],
        geometry: Rect | Mapping[str, Any] | Sequence[float] | None = None,
    ) -> Group:
        """Build a group. The frame defaults to the children's bounding box."""
        if geometry is None:
            frames = [child.frame for child in children]
            if frames:
                left = min(f.x for f in frames)
                top = min(f.y for f in frames)
                right = max(f.x + f.width for f in frames)
                bottom = max(f.y + f.height for f in frames)
                geometry = (left, top, right - left, bottom - top)
            else:
                geometry = (0, 0, 0, 0)
        base = self.layer_base(LayerClass.GROUP, geometry, name=name)
        return Group(**base, layers=list(children))

    def artboard(
        self,
        name: str,
        width: float,
        height: float,
        background_color: str = "#FFFFFF",
        children: Sequence[LayerBase] = (),
        x: float = 0,
        y: float = 0,
    ) -> Artboard:
        """Build an artboard whose first layer is a clipping background.

        The background rectangle covers the full frame and is filled with
        ``background_color``. ``children`` are appended after it in order.
        """
        frame = as_rect({"x": x, "y": y, "width": width, "height": height})
        background = self.rectangle(
            {"x": 0, "y": 0, "width": width, "height": height},
            StyleSpec(fills=[background_color]),
            name="background",
            has_clipping_mask=True,
        )
        base = self.layer_base(LayerClass.ARTBOARD, frame, name=name)
        return Artboard(
            **base,
            background_color=Color.from_hex(background_color),
            layers=[background, *children],
        )

    def page(self, name: str, artboards: Sequence[LayerBase] = ()) -> Page:
        return Page(object_id=self.identifier(), name=name, layers=list(artboards))

    def document(self, pages: Sequence[Page]) -> Document:
        """Build the document root with empty shared containers."""
        return Document(
            object_id=self.identifier(),
            assets=AssetCollection(object_id=self.identifier()),
            layer_styles=SharedStyleContainer(object_id=self.identifier()),
            layer_symbols=SymbolContainer(object_id=self.identifier()),
            layer_text_styles=SharedTextStyleContainer(object_id=self.identifier()),
            shared_swatches=SwatchContainer(object_id=self.identifier()),
            pages=list(pages),
        )


# =============================================================================
# Module-level Constructors
# =============================================================================

_default_factory = NodeFactory()


def new_layer_base(variant, geometry, name=None, style=None) -> dict[str, Any]:
    return _default_factory.layer_base(variant, geometry, name=name, style=style)


def new_style(spec: StyleSpec | None = None) -> Style:
    return _default_factory.style(spec)


def new_rectangle(geometry, spec=None, name="Rectangle", has_clipping_mask=False) -> Rectangle:
    return _default_factory.rectangle(
        geometry, spec, name=name, has_clipping_mask=has_clipping_mask
    )


def new_text(content, geometry, spec=None, name=None) -> Text:
    return _default_factory.text(content, geometry, spec, name=name)


def new_group(name, children, geometry=None) -> Group:
    return _default_factory.group(name, children, geometry)


def new_artboard(name, width, height, background_color="#FFFFFF", children=()) -> Artboard:
    return _default_factory.artboard(name, width, height, background_color, children)


def new_page(name, artboards=()) -> Page:
    return _default_factory.page(name, artboards)


def new_document_graph(pages) -> Document:
    return _default_factory.document(pages)


__all__ = [
    "ShadowSpec",
    "StyleSpec",
    "as_rect",
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
