"""Structural validation of Sketch documents.

This module checks a document graph, in model or parsed-JSON form, against
the structural rules of the Sketch file format before it is written:

    - Required fields present with the right JSON type
    - ``_class`` tags from the declared set for each slot
    - Canonical and unique identifiers across the whole graph
    - Color channels within [0, 1] and enumerated integers within their set
    - Array cardinalities (rectangle corner points, artboard background)
    - Text dual-font agreement (see ``style_font_for``)

Validation never raises. Every problem is collected as a ``Violation``;
deciding whether to proceed is up to the caller.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Callable

from pydantic import BaseModel

from sketch_mcp.codec import POINT_PATTERN, is_valid_identifier
from sketch_mcp.model import (
    BlurType,
    BooleanOperation,
    BorderPosition,
    FillType,
    LayerClass,
    TextAlignment,
    VerticalAlignment,
    style_font_for,
)


@dataclass
class Violation:
    """A structural rule broken somewhere in a document.

    Attributes:
        path: Dotted path to the offending value (e.g. "page.layers[0].frame").
        message: Human-readable error description.
        error_type: Machine-readable error classification.
        file: Archive-relative file the value came from, in cross-file mode.
    """

    path: str
    message: str
    error_type: str
    file: str | None = None

    def __str__(self) -> str:
        where = f"{self.file}:{self.path}" if self.file else self.path
        return f"[{self.error_type}] {where}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ValidationReport:
    """Result of validating a document or archive directory.

    Warnings describe known gaps (constructs the validator does not model);
    they never make a report invalid.
    """

    violations: list[Violation] = field(default_factory=list)
    warnings: list[Violation] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.violations

    def extend(self, other: "ValidationReport") -> None:
        self.violations.extend(other.violations)
        self.warnings.extend(other.warnings)

    def summary(self) -> str:
        status = "valid" if self.valid else "invalid"
        return (
            f"{status}: {len(self.violations)} violation(s), "
            f"{len(self.warnings)} warning(s)"
        )


# Sketch layer classes that are legal in a document but not produced here.
# They receive base-layer checks only.
UNMODELED_LAYER_CLASSES = frozenset(
    {
        "oval",
        "polygon",
        "star",
        "triangle",
        "shapePath",
        "bitmap",
        "symbolInstance",
        "symbolMaster",
        "slice",
        "MSImmutableHotspotLayer",
    }
)

PAGE_REF_CLASS = "MSJSONFileReference"
PAGE_REF_TARGET = "MSImmutablePage"

_NUMBER = "number"
_BOOL = "boolean"
_STRING = "string"
_ARRAY = "array"
_OBJECT = "object"

_TYPE_CHECKS: dict[str, Callable[[Any], bool]] = {
    _NUMBER: lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
    _BOOL: lambda v: isinstance(v, bool),
    _STRING: lambda v: isinstance(v, str),
    _ARRAY: lambda v: isinstance(v, list),
    _OBJECT: lambda v: isinstance(v, dict),
}

_MISSING = object()


class Validator:
    """Collects violations while walking one or more Sketch JSON trees.

    A single instance may be reused across files (cross-file mode) so that
    identifier uniqueness is enforced over the whole archive. Set ``file``
    before each tree to scope its violations.
    """

    def __init__(self, file: str | None = None):
        self.file = file
        self.report = ValidationReport()
        self._ids: dict[str, list[str]] = {}

    # -------------------------------------------------------------------------
    # Reporting
    # -------------------------------------------------------------------------

    def violation(self, path: str, message: str, error_type: str) -> None:
        self.report.violations.append(Violation(path, message, error_type, self.file))

    def warning(self, path: str, message: str, error_type: str) -> None:
        self.report.warnings.append(Violation(path, message, error_type, self.file))

    # -------------------------------------------------------------------------
    # Primitive checks
    # -------------------------------------------------------------------------

    def require(self, obj: dict, key: str, path: str, kind: str) -> Any:
        """Return ``obj[key]`` if present with the right JSON type, else None."""
        value = obj.get(key, _MISSING)
        if value is _MISSING or value is None:
            self.violation(f"{path}.{key}", f"required {kind} is missing", "missing_field")
            return None
        if not _TYPE_CHECKS[kind](value):
            self.violation(
                f"{path}.{key}",
                f"must be a {kind}, got {type(value).__name__}",
                "wrong_type",
            )
            return None
        return value

    def tag(self, obj: dict, path: str, expected: str) -> bool:
        actual = obj.get("_class")
        if actual != expected:
            self.violation(
                f"{path}._class", f'must be "{expected}", got {actual!r}', "wrong_class"
            )
            return False
        return True

    def node(self, value: Any, path: str, expected: str) -> dict | None:
        """Check that a value is an object tagged ``expected``."""
        if not isinstance(value, dict):
            if value is None:
                self.violation(path, "required object is missing", "missing_field")
            else:
                self.violation(
                    path, f"must be an object, got {type(value).__name__}", "wrong_type"
                )
            return None
        self.tag(value, path, expected)
        return value

    def child(self, obj: dict, key: str, path: str, expected: str) -> dict | None:
        return self.node(obj.get(key), f"{path}.{key}", expected)

    def identifier(self, obj: dict, path: str) -> None:
        value = self.require(obj, "do_objectID", path, _STRING)
        if value is None:
            return
        if not is_valid_identifier(value.upper()):
            self.violation(
                f"{path}.do_objectID", f"not a canonical identifier: {value!r}",
                "invalid_identifier",
            )
            return
        where = f"{self.file}:{path}" if self.file else path
        self._ids.setdefault(value.upper(), []).append(where)

    def enum(self, obj: dict, key: str, path: str, allowed, name: str) -> None:
        value = self.require(obj, key, path, _NUMBER)
        if value is None:
            return
        if value not in {int(member) for member in allowed}:
            self.violation(f"{path}.{key}", f"{value!r} is not a valid {name}", "invalid_enum")

    def point(self, obj: dict, key: str, path: str) -> None:
        value = self.require(obj, key, path, _STRING)
        if value is not None and not POINT_PATTERN.match(value):
            self.violation(
                f"{path}.{key}", f'must be a point string like "{{0, 0}}", got {value!r}',
                "invalid_point",
            )

    def items(self, obj: dict, key: str, path: str, check: Callable[[Any, str], None]) -> list:
        values = self.require(obj, key, path, _ARRAY)
        if values is None:
            return []
        for index, item in enumerate(values):
            check(item, f"{path}.{key}[{index}]")
        return values

    # -------------------------------------------------------------------------
    # Value structures
    # -------------------------------------------------------------------------

    def color(self, value: Any, path: str) -> None:
        obj = self.node(value, path, "color")
        if obj is None:
            return
        for channel in ("red", "green", "blue", "alpha"):
            amount = self.require(obj, channel, path, _NUMBER)
            if amount is not None and not 0 <= amount <= 1:
                self.violation(
                    f"{path}.{channel}", f"{amount} outside valid range 0-1", "out_of_range"
                )

    def rect(self, value: Any, path: str) -> None:
        obj = self.node(value, path, "rect")
        if obj is None:
            return
        for key in ("x", "y", "width", "height"):
            self.require(obj, key, path, _NUMBER)
        self.require(obj, "constrainProportions", path, _BOOL)

    def export_options(self, value: Any, path: str) -> None:
        obj = self.node(value, path, "exportOptions")
        if obj is None:
            return
        self.require(obj, "exportFormats", path, _ARRAY)
        self.require(obj, "includedLayerIds", path, _ARRAY)
        self.require(obj, "layerOptions", path, _NUMBER)
        self.require(obj, "shouldTrim", path, _BOOL)

    def ruler_data(self, value: Any, path: str) -> None:
        obj = self.node(value, path, "rulerData")
        if obj is None:
            return
        self.require(obj, "base", path, _NUMBER)
        self.require(obj, "guides", path, _ARRAY)

    def group_layout(self, value: Any, path: str) -> None:
        self.node(value, path, "MSImmutableFreeformGroupLayout")

    def context_settings(self, value: Any, path: str) -> None:
        obj = self.node(value, path, "graphicsContextSettings")
        if obj is None:
            return
        self.require(obj, "blendMode", path, _NUMBER)
        self.require(obj, "opacity", path, _NUMBER)

    def curve_point(self, value: Any, path: str) -> None:
        obj = self.node(value, path, "curvePoint")
        if obj is None:
            return
        self.require(obj, "cornerRadius", path, _NUMBER)
        self.require(obj, "curveMode", path, _NUMBER)
        self.require(obj, "hasCurveFrom", path, _BOOL)
        self.require(obj, "hasCurveTo", path, _BOOL)
        for key in ("point", "curveFrom", "curveTo"):
            self.point(obj, key, path)

    # -------------------------------------------------------------------------
    # Style
    # -------------------------------------------------------------------------

    def gradient(self, value: Any, path: str) -> None:
        obj = self.node(value, path, "gradient")
        if obj is None:
            return
        self.point(obj, "from", path)
        self.point(obj, "to", path)
        self.require(obj, "gradientType", path, _NUMBER)
        self.require(obj, "stops", path, _ARRAY)

    def fill(self, value: Any, path: str) -> None:
        obj = self.node(value, path, "fill")
        if obj is None:
            return
        self.require(obj, "isEnabled", path, _BOOL)
        self.enum(obj, "fillType", path, FillType, "fill type")
        self.color(obj.get("color"), f"{path}.color")
        if "gradient" in obj:
            self.gradient(obj["gradient"], f"{path}.gradient")
        if "contextSettings" in obj:
            self.context_settings(obj["contextSettings"], f"{path}.contextSettings")

    def border(self, value: Any, path: str) -> None:
        obj = self.node(value, path, "border")
        if obj is None:
            return
        self.require(obj, "isEnabled", path, _BOOL)
        self.enum(obj, "fillType", path, FillType, "fill type")
        self.enum(obj, "position", path, BorderPosition, "border position")
        self.require(obj, "thickness", path, _NUMBER)
        self.color(obj.get("color"), f"{path}.color")

    def _shadow(self, value: Any, path: str, expected: str) -> None:
        obj = self.node(value, path, expected)
        if obj is None:
            return
        self.require(obj, "isEnabled", path, _BOOL)
        for key in ("offsetX", "offsetY", "blurRadius", "spread"):
            self.require(obj, key, path, _NUMBER)
        self.color(obj.get("color"), f"{path}.color")

    def shadow(self, value: Any, path: str) -> None:
        self._shadow(value, path, "shadow")

    def inner_shadow(self, value: Any, path: str) -> None:
        self._shadow(value, path, "innerShadow")

    def blur(self, value: Any, path: str) -> None:
        obj = self.node(value, path, "blur")
        if obj is None:
            return
        self.require(obj, "isEnabled", path, _BOOL)
        self.enum(obj, "type", path, BlurType, "blur type")
        self.require(obj, "radius", path, _NUMBER)
        self.point(obj, "center", path)

    def border_options(self, value: Any, path: str) -> None:
        obj = self.node(value, path, "borderOptions")
        if obj is None:
            return
        self.require(obj, "isEnabled", path, _BOOL)
        self.require(obj, "lineCapStyle", path, _NUMBER)
        self.require(obj, "lineJoinStyle", path, _NUMBER)
        self.require(obj, "dashPattern", path, _ARRAY)

    def color_controls(self, value: Any, path: str) -> None:
        obj = self.node(value, path, "colorControls")
        if obj is None:
            return
        self.require(obj, "isEnabled", path, _BOOL)
        for key in ("brightness", "contrast", "hue", "saturation"):
            self.require(obj, key, path, _NUMBER)

    def font_descriptor(self, value: Any, path: str) -> tuple[str, float] | None:
        obj = self.node(value, path, "fontDescriptor")
        if obj is None:
            return None
        attributes = self.require(obj, "attributes", path, _OBJECT)
        if attributes is None:
            return None
        name = self.require(attributes, "name", f"{path}.attributes", _STRING)
        size = self.require(attributes, "size", f"{path}.attributes", _NUMBER)
        if name is None or size is None:
            return None
        return name, size

    def encoded_attributes(self, value: Any, path: str) -> tuple[str, float] | None:
        """Check a text attribute payload and return its (font, size)."""
        if not isinstance(value, dict):
            self.violation(path, "required object is missing", "missing_field")
            return None
        font = self.font_descriptor(
            value.get("MSAttributedStringFontAttribute"),
            f"{path}.MSAttributedStringFontAttribute",
        )
        if "MSAttributedStringColorAttribute" in value:
            self.color(
                value["MSAttributedStringColorAttribute"],
                f"{path}.MSAttributedStringColorAttribute",
            )
        if "paragraphStyle" in value:
            paragraph = self.node(
                value["paragraphStyle"], f"{path}.paragraphStyle", "paragraphStyle"
            )
            if paragraph is not None and "alignment" in paragraph:
                self.enum(
                    paragraph, "alignment", f"{path}.paragraphStyle",
                    TextAlignment, "text alignment",
                )
        if "textStyleVerticalAlignmentKey" in value:
            self.enum(
                value, "textStyleVerticalAlignmentKey", path,
                VerticalAlignment, "vertical alignment",
            )
        return font

    def text_style(self, value: Any, path: str) -> tuple[str, float] | None:
        obj = self.node(value, path, "textStyle")
        if obj is None:
            return None
        self.enum(obj, "verticalAlignment", path, VerticalAlignment, "vertical alignment")
        return self.encoded_attributes(obj.get("encodeAttributes"), f"{path}.encodeAttributes")

    def style(self, value: Any, path: str) -> tuple[str, float] | None:
        """Check a layer style; returns the text-style font if one is present."""
        obj = self.node(value, path, "style")
        if obj is None:
            return None
        self.identifier(obj, path)
        self.items(obj, "fills", path, self.fill)
        self.items(obj, "borders", path, self.border)
        self.items(obj, "shadows", path, self.shadow)
        self.items(obj, "innerShadows", path, self.inner_shadow)
        self.blur(obj.get("blur"), f"{path}.blur")
        self.border_options(obj.get("borderOptions"), f"{path}.borderOptions")
        self.color_controls(obj.get("colorControls"), f"{path}.colorControls")
        self.context_settings(obj.get("contextSettings"), f"{path}.contextSettings")
        if obj.get("textStyle") is not None:
            return self.text_style(obj["textStyle"], f"{path}.textStyle")
        return None

    # -------------------------------------------------------------------------
    # Layers
    # -------------------------------------------------------------------------

    def layer(self, value: Any, path: str) -> None:
        """Dispatch a layer to the handler for its ``_class``."""
        if not isinstance(value, dict):
            self.violation(path, "layer must be an object", "wrong_type")
            return
        tag = value.get("_class")
        if not isinstance(tag, str):
            self.violation(f"{path}._class", f"unknown layer class {tag!r}", "unhandled_variant")
            return
        try:
            variant = LayerClass(tag)
        except ValueError:
            if tag in UNMODELED_LAYER_CLASSES:
                self.warning(
                    path, f'layer class "{tag}" is only checked for base fields',
                    "unmodeled_variant",
                )
                self.layer_base(value, path)
            else:
                self.violation(f"{path}._class", f"unknown layer class {tag!r}", "unhandled_variant")
            return
        LAYER_HANDLERS[variant](self, value, path)

    def layer_base(self, obj: dict, path: str) -> tuple[str, float] | None:
        self.identifier(obj, path)
        self.require(obj, "name", path, _STRING)
        self.rect(obj.get("frame"), f"{path}.frame")
        constraint = self.require(obj, "resizingConstraint", path, _NUMBER)
        if constraint is not None and constraint not in range(64):
            self.violation(
                f"{path}.resizingConstraint", f"{constraint!r} is not a 6-bit mask",
                "invalid_enum",
            )
        self.require(obj, "rotation", path, _NUMBER)
        self.enum(obj, "booleanOperation", path, BooleanOperation, "boolean operation")
        self.export_options(obj.get("exportOptions"), f"{path}.exportOptions")
        for key in (
            "isVisible", "isLocked", "isFlippedHorizontal", "isFlippedVertical",
            "isFixedToViewport",
        ):
            self.require(obj, key, path, _BOOL)
        return self.style(obj.get("style"), f"{path}.style")

    def rectangle(self, obj: dict, path: str) -> None:
        self.layer_base(obj, path)
        self.require(obj, "edited", path, _BOOL)
        self.require(obj, "isClosed", path, _BOOL)
        self.require(obj, "pointRadiusBehaviour", path, _NUMBER)
        self.require(obj, "fixedRadius", path, _NUMBER)
        points = self.require(obj, "points", path, _ARRAY)
        if points is None:
            return
        if len(points) != 4:
            self.violation(
                f"{path}.points", f"must have exactly 4 points, got {len(points)}",
                "cardinality",
            )
            return
        for index, point in enumerate(points):
            self.curve_point(point, f"{path}.points[{index}]")

    def text(self, obj: dict, path: str) -> None:
        style_font = self.layer_base(obj, path)
        style = obj.get("style")
        if isinstance(style, dict) and style.get("textStyle") is None:
            self.violation(f"{path}.style.textStyle", "required object is missing", "missing_field")
        string_path = f"{path}.attributedString"
        attributed = self.node(obj.get("attributedString"), string_path, "attributedString")
        if attributed is None:
            return
        content = self.require(attributed, "string", string_path, _STRING)
        spans = self.require(attributed, "attributes", string_path, _ARRAY)
        if spans is None:
            return

        span_fonts = []
        for index, span in enumerate(spans):
            span_path = f"{string_path}.attributes[{index}]"
            if self.node(span, span_path, "stringAttribute") is None:
                continue
            location = self.require(span, "location", span_path, _NUMBER)
            length = self.require(span, "length", span_path, _NUMBER)
            if content is not None and location is not None and length is not None:
                if location < 0 or length < 0 or location + length > len(content):
                    self.violation(
                        span_path,
                        f"span [{location}, {location + length}) outside string of "
                        f"length {len(content)}",
                        "out_of_range",
                    )
            span_fonts.append(
                self.encoded_attributes(span.get("attributes"), f"{span_path}.attributes")
            )

        if content is None or style_font is None or not span_fonts or span_fonts[0] is None:
            return
        family, size = span_fonts[0]
        expected = style_font_for(content, family, size)
        if (style_font[0], style_font[1]) != expected:
            self.violation(
                f"{path}.style.textStyle",
                f"style font {style_font[0]} {style_font[1]} does not match "
                f"{expected[0]} {expected[1]} derived from {family} {size}",
                "font_mismatch",
            )

    def _container(self, obj: dict, path: str) -> list:
        self.layer_base(obj, path)
        self.require(obj, "hasClickThrough", path, _BOOL)
        if "groupLayout" in obj:
            self.group_layout(obj["groupLayout"], f"{path}.groupLayout")
        return self.items(obj, "layers", path, self.layer)

    def group(self, obj: dict, path: str) -> None:
        self._container(obj, path)

    def artboard(self, obj: dict, path: str) -> None:
        if "groupLayout" not in obj:
            self.violation(f"{path}.groupLayout", "required object is missing", "missing_field")
        layers = self._container(obj, path)
        self.require(obj, "hasBackgroundColor", path, _BOOL)
        self.color(obj.get("backgroundColor"), f"{path}.backgroundColor")
        self.ruler_data(obj.get("horizontalRulerData"), f"{path}.horizontalRulerData")
        self.ruler_data(obj.get("verticalRulerData"), f"{path}.verticalRulerData")
        if isinstance(obj.get("layers"), list):
            self._background(obj, layers, path)

    def _background(self, obj: dict, layers: list, path: str) -> None:
        if not layers:
            self.violation(f"{path}.layers", "artboard has no background layer", "missing_background")
            return
        first = layers[0]
        frame = obj.get("frame") if isinstance(obj.get("frame"), dict) else {}
        if not isinstance(first, dict) or first.get("_class") != "rectangle":
            self.violation(
                f"{path}.layers[0]", "first layer must be the background rectangle",
                "missing_background",
            )
            return
        if first.get("hasClippingMask") is not True:
            self.violation(
                f"{path}.layers[0].hasClippingMask", "background must be a clipping mask",
                "missing_background",
            )
        bg_frame = first.get("frame") if isinstance(first.get("frame"), dict) else {}
        expected = (0, 0, frame.get("width"), frame.get("height"))
        actual = tuple(bg_frame.get(key) for key in ("x", "y", "width", "height"))
        if actual != expected:
            self.violation(
                f"{path}.layers[0].frame",
                f"background frame {actual} must cover the artboard {expected}",
                "missing_background",
            )

    # -------------------------------------------------------------------------
    # Page and Document
    # -------------------------------------------------------------------------

    def page(self, value: Any, path: str) -> None:
        obj = self.node(value, path, "page")
        if obj is None:
            return
        self.identifier(obj, path)
        self.require(obj, "name", path, _STRING)
        self.group_layout(obj.get("groupLayout"), f"{path}.groupLayout")
        self.ruler_data(obj.get("horizontalRulerData"), f"{path}.horizontalRulerData")
        self.ruler_data(obj.get("verticalRulerData"), f"{path}.verticalRulerData")
        self.export_options(obj.get("exportOptions"), f"{path}.exportOptions")
        self.items(obj, "layers", path, self.layer)

    def page_reference(self, value: Any, path: str) -> str | None:
        """Check a serialized page reference; returns the referenced page id."""
        obj = self.node(value, path, PAGE_REF_CLASS)
        if obj is None:
            return None
        ref_class = obj.get("_ref_class")
        if ref_class != PAGE_REF_TARGET:
            self.violation(
                f"{path}._ref_class", f'must be "{PAGE_REF_TARGET}", got {ref_class!r}',
                "wrong_class",
            )
        ref = self.require(obj, "_ref", path, _STRING)
        if ref is None:
            return None
        prefix, _, page_id = ref.partition("/")
        if prefix != "pages" or not is_valid_identifier(page_id.upper()):
            self.violation(
                f"{path}._ref", f'must be "pages/<identifier>", got {ref!r}',
                "invalid_reference",
            )
            return None
        return page_id

    def _document_page(self, value: Any, path: str) -> None:
        if isinstance(value, dict) and value.get("_class") == PAGE_REF_CLASS:
            self.page_reference(value, path)
        else:
            self.page(value, path)

    def document(self, value: Any, path: str = "document") -> list:
        """Check the document root; pages may be embedded or references."""
        obj = self.node(value, path, "document")
        if obj is None:
            return []
        self.identifier(obj, path)
        self.require(obj, "appVersion", path, _STRING)
        self.require(obj, "build", path, _NUMBER)
        self.require(obj, "colorSpace", path, _NUMBER)
        current = self.require(obj, "currentPageIndex", path, _NUMBER)

        assets = self.child(obj, "assets", path, "assetCollection")
        if assets is not None:
            self.identifier(assets, f"{path}.assets")
            for key in ("colorAssets", "gradientAssets", "images", "colors", "gradients"):
                self.require(assets, key, f"{path}.assets", _ARRAY)
        for key, expected in CONTAINERS.items():
            container = self.child(obj, key, path, expected)
            if container is not None:
                self.identifier(container, f"{path}.{key}")
                self.require(container, "objects", f"{path}.{key}", _ARRAY)
        for key in (
            "foreignLayerStyles", "foreignSymbols", "foreignTextStyles",
            "foreignSwatches", "fontReferences",
        ):
            self.require(obj, key, path, _ARRAY)
        self.child(obj, "documentState", path, "documentState")

        pages = self.items(obj, "pages", path, self._document_page)
        if current is not None and pages and not 0 <= current < len(pages):
            self.violation(
                f"{path}.currentPageIndex",
                f"{current} outside page range 0-{len(pages) - 1}",
                "out_of_range",
            )
        return pages

    # -------------------------------------------------------------------------
    # Graph-wide checks
    # -------------------------------------------------------------------------

    def root(self, value: Any) -> None:
        """Check any supported root: document, page or layer."""
        if not isinstance(value, dict):
            self.violation("$", f"must be an object, got {type(value).__name__}", "wrong_type")
            return
        tag = value.get("_class")
        if tag == "document":
            self.document(value)
        elif tag == "page":
            self.page(value, "page")
        else:
            self.layer(value, tag if isinstance(tag, str) and tag else "layer")

    def check_unique_ids(self) -> None:
        for object_id, paths in self._ids.items():
            if len(paths) > 1:
                self.report.violations.append(
                    Violation(
                        path=paths[1],
                        message=f"Duplicate ID '{object_id}' appears {len(paths)} times "
                        f"({', '.join(paths)})",
                        error_type="duplicate_id",
                        file=None,
                    )
                )

    def finish(self) -> ValidationReport:
        self.check_unique_ids()
        return self.report


CONTAINERS: dict[str, str] = {
    "layerStyles": "sharedStyleContainer",
    "layerSymbols": "symbolContainer",
    "layerTextStyles": "sharedTextStyleContainer",
    "sharedSwatches": "swatchContainer",
}

# One handler per LayerClass member.
LAYER_HANDLERS: dict[LayerClass, Callable[[Validator, dict, str], None]] = {
    LayerClass.RECTANGLE: Validator.rectangle,
    LayerClass.TEXT: Validator.text,
    LayerClass.GROUP: Validator.group,
    LayerClass.SHAPE_GROUP: Validator.group,
    LayerClass.ARTBOARD: Validator.artboard,
}


# =============================================================================
# Public Interface
# =============================================================================


def _as_json(node: Any) -> Any:
    if isinstance(node, BaseModel):
        return node.model_dump(by_alias=True, mode="json", exclude_none=True)
    return node


def check(node: Any) -> ValidationReport:
    """Validate a document graph and return violations and warnings.

    Args:
        node: A model instance (Document, Page, any layer) or its parsed
            JSON dict.

    Returns:
        ValidationReport; ``report.valid`` is True when there are no
        violations.

    Example:
        >>> report = check(document)
        >>> if not report.valid:
        ...     for v in report.violations:
        ...         print(v)
    """
    validator = Validator()
    validator.root(_as_json(node))
    return validator.finish()


def validate(node: Any) -> list[Violation]:
    """Validate a document graph for structural issues.

    Returns:
        list[Violation]: Violations found (empty if valid).
    """
    return check(node).violations


def is_valid(node: Any) -> bool:
    """Check if a document graph is valid.

    Convenience function that returns True if no violations exist.

    Example:
        >>> if is_valid(document):
        ...     serializer.write(document, "design")
    """
    return not validate(node)


__all__ = [
    "Violation",
    "ValidationReport",
    "Validator",
    "UNMODELED_LAYER_CLASSES",
    "LAYER_HANDLERS",
    "PAGE_REF_CLASS",
    "PAGE_REF_TARGET",
    "check",
    "validate",
    "is_valid",
]
