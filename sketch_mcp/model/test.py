"""Unit tests for the node model and constructors."""

import math
import random

import pytest
from pydantic import ValidationError as PydanticValidationError

from sketch_mcp.codec import IdentifierSource, is_valid_identifier

from .factory import NodeFactory, ShadowSpec, StyleSpec, new_rectangle, new_text
from .lib import (
    Artboard,
    Color,
    Document,
    InvalidGeometry,
    Rectangle,
    ResizingConstraint,
    Text,
    TextAlignment,
    style_font_for,
    walk_layers,
)


@pytest.fixture
def factory():
    """Factory with a seeded identifier source."""
    return NodeFactory(IdentifierSource(random.Random(42)))


class TestColor:
    """Tests for the Color model."""

    @pytest.mark.unit
    def test_from_hex(self):
        color = Color.from_hex("#FF0000")
        assert (color.red, color.green, color.blue, color.alpha) == (1, 0, 0, 1)

    @pytest.mark.unit
    def test_serializes_with_class_tag(self):
        data = Color.from_hex("#00FF00").to_sketch()
        assert data == {
            "_class": "color",
            "alpha": 1.0,
            "red": 0.0,
            "green": 1.0,
            "blue": 0.0,
        }

    @pytest.mark.unit
    def test_channel_out_of_range_rejected(self):
        with pytest.raises(PydanticValidationError):
            Color(red=1.5)

    @pytest.mark.unit
    def test_is_immutable(self):
        color = Color()
        with pytest.raises(PydanticValidationError):
            color.red = 0.5


class TestRectangle:
    """Tests for rectangle construction."""

    @pytest.mark.unit
    def test_four_corner_points(self, factory):
        rect = factory.rectangle({"x": 0, "y": 0, "width": 100, "height": 50})
        points = [p.point for p in rect.points]
        assert points == ["{0, 0}", "{1, 0}", "{1, 1}", "{0, 1}"]

    @pytest.mark.unit
    def test_uniform_corner_radius(self, factory):
        rect = factory.rectangle((0, 0, 40, 40), StyleSpec(corner_radius=8))
        assert rect.fixed_radius == 8
        assert all(p.corner_radius == 8 for p in rect.points)

    @pytest.mark.unit
    def test_base_defaults(self, factory):
        data = factory.rectangle((10, 20, 30, 40)).to_sketch()
        assert data["_class"] == "rectangle"
        assert data["frame"] == {
            "_class": "rect",
            "x": 10.0,
            "y": 20.0,
            "width": 30.0,
            "height": 40.0,
            "constrainProportions": False,
        }
        assert data["resizingConstraint"] == ResizingConstraint.FREE == 63
        assert data["booleanOperation"] == -1
        assert data["isVisible"] is True
        assert data["exportOptions"]["_class"] == "exportOptions"
        assert data["isClosed"] is True

    @pytest.mark.unit
    def test_fresh_identifiers(self, factory):
        rect = factory.rectangle((0, 0, 10, 10))
        assert is_valid_identifier(rect.object_id)
        assert is_valid_identifier(rect.style.object_id)
        assert rect.object_id != rect.style.object_id

    @pytest.mark.unit
    def test_style_has_no_text_block(self, factory):
        data = factory.rectangle((0, 0, 10, 10), StyleSpec(fills=["#FFFFFF"])).to_sketch()
        assert "textStyle" not in data["style"]
        assert len(data["style"]["fills"]) == 1

    @pytest.mark.unit
    def test_negative_size_rejected(self, factory):
        with pytest.raises(InvalidGeometry):
            factory.rectangle((0, 0, -1, 10))

    @pytest.mark.unit
    def test_non_finite_rejected(self, factory):
        with pytest.raises(InvalidGeometry):
            factory.rectangle((0, 0, math.inf, 10))

    @pytest.mark.unit
    def test_module_level_constructor(self):
        rect = new_rectangle({"width": 5, "height": 5})
        assert isinstance(rect, Rectangle)
        assert rect.frame.x == 0


class TestStyle:
    """Tests for style construction."""

    @pytest.mark.unit
    def test_border_and_shadow_only_when_requested(self, factory):
        plain = factory.style()
        assert plain.borders == [] and plain.shadows == []

        styled = factory.style(
            StyleSpec(border_color="#E5E5EA", border_width=2, shadow=ShadowSpec())
        )
        assert styled.borders[0].thickness == 2
        assert styled.borders[0].position == 1
        assert styled.shadows[0].color.alpha == pytest.approx(0.15)
        assert styled.shadows[0].offset_y == 4

    @pytest.mark.unit
    def test_text_style_added_for_font_request(self, factory):
        style = factory.style(StyleSpec(font_size=20))
        attrs = style.text_style.encode_attributes
        assert attrs.font.attributes.size == 20
        assert attrs.paragraph_style.maximum_line_height == pytest.approx(24)

    @pytest.mark.unit
    def test_unknown_alignment_raises(self, factory):
        with pytest.raises(ValueError, match="alignment"):
            factory.style(StyleSpec(alignment="diagonal"))


class TestText:
    """Tests for text construction and dual font encoding."""

    @pytest.mark.unit
    def test_latin_text_keeps_font(self, factory):
        text = factory.text(
            "Hello", (0, 0, 100, 20), StyleSpec(font_family="Roboto-Bold", font_size=18)
        )
        span_font = text.attributed_string.attributes[0].attributes.font.attributes
        style_font = text.style.text_style.encode_attributes.font.attributes
        assert (span_font.name, span_font.size) == ("Roboto-Bold", 18)
        assert (style_font.name, style_font.size) == ("Roboto-Bold", 18)

    @pytest.mark.unit
    def test_cjk_text_uses_display_font(self, factory):
        text = factory.text(
            "我的订单",
            (16, 16, 361, 24),
            StyleSpec(font_family="Roboto-Bold", font_size=18, alignment="center"),
        )
        span = text.attributed_string.attributes[0]
        assert span.attributes.font.attributes.name == "Roboto-Bold"
        assert span.attributes.font.attributes.size == 18
        style_font = text.style.text_style.encode_attributes.font.attributes
        assert style_font.name == "PingFangSC-Regular"
        assert style_font.size == 22
        assert text.name == "我的订单"
        assert span.attributes.paragraph_style.alignment == TextAlignment.CENTER

    @pytest.mark.unit
    def test_span_covers_content(self, factory):
        text = factory.text("abc", (0, 0, 10, 10))
        span = text.attributed_string.attributes[0]
        assert (span.location, span.length) == (0, 3)

    @pytest.mark.unit
    def test_empty_text(self, factory):
        text = factory.text("", (0, 0, 10, 10))
        assert text.name == "Text"
        assert text.attributed_string.attributes[0].length == 0

    @pytest.mark.unit
    @pytest.mark.parametrize("content", [None, 42, ["a"]])
    def test_non_string_content_rejected(self, factory, content):
        with pytest.raises(ValueError, match="Text content must be a string"):
            factory.text(content, (0, 0, 10, 10))

    @pytest.mark.unit
    def test_name_truncated(self):
        text = new_text("x" * 50, (0, 0, 10, 10))
        assert isinstance(text, Text)
        assert text.name == "x" * 30

    @pytest.mark.unit
    def test_serialized_attribute_keys(self, factory):
        data = factory.text("Hi", (0, 0, 10, 10)).to_sketch()
        attrs = data["attributedString"]["attributes"][0]["attributes"]
        assert attrs["MSAttributedStringFontAttribute"]["_class"] == "fontDescriptor"
        assert attrs["MSAttributedStringColorAttribute"]["_class"] == "color"
        assert attrs["paragraphStyle"]["lineHeightMultiple"] == pytest.approx(1.2)
        assert "lineHeightMultiple" not in (
            data["style"]["textStyle"]["encodeAttributes"]["paragraphStyle"]
        )


class TestStyleFontFor:
    """Tests for the shared style-font derivation."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "family,size,expected",
        [
            ("Roboto-Bold", 18, ("PingFangSC-Regular", 22)),
            ("Roboto-Light", 10, ("PingFangSC-Regular", 12)),
            ("Helvetica", 16, ("PingFangSC-Regular", 19)),
        ],
    )
    def test_cjk(self, family, size, expected):
        assert style_font_for("订单", family, size) == expected

    @pytest.mark.unit
    def test_non_cjk_passthrough(self):
        assert style_font_for("Orders", "Helvetica", 16) == ("Helvetica", 16)


class TestContainers:
    """Tests for artboard, page and document construction."""

    @pytest.mark.unit
    def test_artboard_background_first(self, factory):
        child = factory.rectangle((0, 0, 10, 10))
        artboard = factory.artboard("Home", 393, 852, "#F2F2F7", [child])
        background = artboard.layers[0]
        assert background.name == "background"
        assert background.has_clipping_mask is True
        assert (background.frame.width, background.frame.height) == (393, 852)
        assert background.style.fills[0].color == Color.from_hex("#F2F2F7")
        assert artboard.layers[1] is child

    @pytest.mark.unit
    def test_artboard_round_trip_parses_variants(self, factory):
        artboard = factory.artboard("Home", 100, 100, children=[factory.text("a", (0, 0, 5, 5))])
        parsed = Artboard.model_validate(artboard.to_sketch())
        assert isinstance(parsed.layers[0], Rectangle)
        assert isinstance(parsed.layers[1], Text)

    @pytest.mark.unit
    def test_document_containers(self, factory):
        page = factory.page("Page 1", [factory.artboard("A", 10, 10)])
        document = factory.document([page])
        assert isinstance(document, Document)
        data = document.to_sketch()
        assert data["_class"] == "document"
        assert data["currentPageIndex"] == 0
        assert data["layerStyles"]["_class"] == "sharedStyleContainer"
        assert data["sharedSwatches"]["_class"] == "swatchContainer"
        assert data["pages"][0]["_class"] == "page"
        ids = {
            data["do_objectID"],
            data["assets"]["do_objectID"],
            data["layerStyles"]["do_objectID"],
            data["layerSymbols"]["do_objectID"],
            data["layerTextStyles"]["do_objectID"],
            data["sharedSwatches"]["do_objectID"],
        }
        assert len(ids) == 6

    @pytest.mark.unit
    def test_seeded_factories_agree(self):
        first = NodeFactory(IdentifierSource(random.Random(5))).page("P")
        second = NodeFactory(IdentifierSource(random.Random(5))).page("P")
        assert first.object_id == second.object_id

    @pytest.mark.unit
    def test_walk_layers_depth(self, factory):
        artboard = factory.artboard("A", 10, 10, children=[factory.rectangle((0, 0, 1, 1))])
        page = factory.page("P", [artboard])
        depths = [(layer.name, depth) for layer, depth in walk_layers(page.layers)]
        assert depths == [("A", 0), ("background", 1), ("Rectangle", 1)]

    @pytest.mark.unit
    def test_group_frame_from_children(self, factory):
        a = factory.rectangle((10, 20, 30, 40))
        b = factory.rectangle((50, 5, 10, 10))
        group = factory.group("Cluster", [a, b])
        assert group.class_ == "group"
        assert (group.frame.x, group.frame.y, group.frame.width, group.frame.height) == (10, 5, 50, 55)
        assert group.layers == [a, b]
        assert factory.group("Empty", []).frame.width == 0
