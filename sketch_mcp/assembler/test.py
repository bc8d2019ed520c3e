"""Unit tests for the document assembler."""

import copy
import logging
import random

import pytest
from pydantic import ValidationError as PydanticValidationError

from sketch_mcp.codec import IdentifierSource
from sketch_mcp.model import Color, NodeFactory, Rectangle, Text
from sketch_mcp.validation import check, is_valid

from .lib import DesignConfig, ModuleContext, build_module, generate_document, resolve_palette
from .modules import MODULE_BUILDERS


@pytest.fixture
def factory():
    return NodeFactory(IdentifierSource(random.Random(3)))


@pytest.fixture
def ctx(factory):
    return ModuleContext(
        x=16, y=0, width=361, artboard_width=393,
        palette=resolve_palette("light"), factory=factory,
    )


def _artboard(document):
    return document.pages[0].layers[0]


def _frame(layer):
    return (layer.frame.x, layer.frame.y, layer.frame.width, layer.frame.height)


class TestResolvePalette:
    """Tests for theme palette resolution."""

    @pytest.mark.unit
    def test_light_defaults(self):
        palette = resolve_palette("light")
        assert palette.primary == "#007AFF"
        assert palette.background == "#F2F2F7"
        assert palette.surface == "#FFFFFF"
        assert palette.text_primary == "#1C1C1E"
        assert palette.text_secondary == "#8E8E93"

    @pytest.mark.unit
    def test_dark_defaults(self):
        palette = resolve_palette("dark")
        assert palette.background == "#1C1C1E"
        assert palette.surface == "#2C2C2E"
        assert palette.text_primary == "#FFFFFF"

    @pytest.mark.unit
    def test_overrides(self):
        palette = resolve_palette("light", {"primary": "#FF0000", "text_secondary": "#111111"})
        assert palette.primary == "#FF0000"
        assert palette.text_secondary == "#111111"
        palette = resolve_palette("light", {"textPrimary": "#222222"})
        assert palette.text_primary == "#222222"

    @pytest.mark.unit
    def test_unknown_theme(self):
        with pytest.raises(ValueError, match="theme"):
            resolve_palette("sepia")


class TestDesignConfig:
    """Tests for configuration parsing."""

    @pytest.mark.unit
    def test_camel_case_keys(self):
        config = DesignConfig.model_validate(
            {"pageName": "Orders", "artboardSize": {"width": 1440, "height": 900}}
        )
        assert config.page_name == "Orders"
        assert config.artboard_size.width == 1440

    @pytest.mark.unit
    def test_defaults_from_environment(self, monkeypatch):
        monkeypatch.setenv("SKETCH_ARTBOARD_WIDTH", "400")
        monkeypatch.setenv("SKETCH_FILENAME", "mobile")
        config = DesignConfig()
        assert config.artboard_size.width == 400
        assert config.filename == "mobile"

    @pytest.mark.unit
    def test_module_requires_type(self):
        with pytest.raises(PydanticValidationError):
            DesignConfig.model_validate({"modules": [{"title": "no type"}]})

    @pytest.mark.unit
    def test_invalid_theme(self):
        with pytest.raises(PydanticValidationError):
            DesignConfig(theme="sepia")


class TestGenerateDocument:
    """Tests for document assembly."""

    @pytest.mark.unit
    def test_empty_modules(self, factory):
        document = generate_document({}, factory)
        assert len(document.pages) == 1
        artboards = document.pages[0].artboards()
        assert len(artboards) == 1
        assert [layer.name for layer in artboards[0].layers] == ["background"]
        assert check(document).violations == []

    @pytest.mark.unit
    def test_order_header_scenario(self, factory):
        config = {
            "artboardSize": {"width": 393, "height": 852},
            "modules": [{"type": "header", "title": "我的订单"}],
        }
        document = generate_document(config, factory)
        layers = _artboard(document).layers
        assert [type(layer) for layer in layers] == [Rectangle, Rectangle, Text]

        header, title = layers[1], layers[2]
        assert header.name == "Header"
        assert _frame(header) == (16, 0, 361, 56)
        assert _frame(title) == (32, 16, 329, 24)

        span = title.attributed_string.attributes[0].attributes
        assert span.font.attributes.name == "Roboto-Bold"
        assert span.font.attributes.size == 18
        assert span.paragraph_style.alignment == 2
        style_font = title.style.text_style.encode_attributes.font.attributes
        assert style_font.name == "PingFangSC-Regular"
        assert style_font.size == 22
        assert is_valid(document)

    @pytest.mark.unit
    def test_unknown_module_type(self, factory, caplog):
        with caplog.at_level(logging.WARNING):
            document = generate_document({"modules": [{"type": "fancyWidget"}]}, factory)
        placeholder = _artboard(document).layers[1]
        assert placeholder.name == "fancyWidget"
        assert placeholder.fixed_radius == 8
        assert placeholder.style.fills[0].color == Color.from_hex("#FFFFFF")
        assert _frame(placeholder) == (16, 0, 361, 100)
        assert is_valid(document)
        assert "fancyWidget" in caplog.text

    @pytest.mark.unit
    def test_cursor_advances_by_module_height(self, factory):
        config = {
            "modules": [
                {"type": "header", "height": 60},
                {"type": "spacer"},
                {"type": "spacer"},
            ]
        }
        layers = _artboard(generate_document(config, factory)).layers
        assert [layer.frame.y for layer in layers[1:]] == [0, 60, 160]

    @pytest.mark.unit
    def test_page_and_artboard_named_after_page(self, factory):
        document = generate_document({"pageName": "Checkout"}, factory)
        assert document.pages[0].name == "Checkout"
        assert _artboard(document).name == "Checkout"

    @pytest.mark.unit
    def test_dark_background(self, factory):
        document = generate_document({"theme": "dark"}, factory)
        assert _artboard(document).background_color == Color.from_hex("#1C1C1E")

    @pytest.mark.unit
    def test_narrow_artboard(self, factory):
        config = {
            "artboardSize": {"width": 20, "height": 100},
            "modules": [{"type": "productGrid", "products": [{"name": "A"}]}],
        }
        assert is_valid(generate_document(config, factory))

    @pytest.mark.unit
    def test_every_module_type_is_valid(self, factory):
        modules = [
            {"type": "header", "title": "Shop"},
            {"type": "hero", "title": "Sale", "subtitle": "Up to 50%", "cta": "Buy", "height": 280},
            {"type": "features", "sectionTitle": "Why", "items": ["Fast", "Cheap"]},
            {"type": "productGrid", "products": [{"name": "Shoe", "price": "$10"}, {}]},
            {"type": "bottomNav", "items": ["Home", "Cart", "Me"]},
            {"type": "loginForm", "title": "Login", "buttons": True, "height": 400},
            {"type": "customLoginForm", "title": "登录", "height": 440},
            {"type": "orderHeader", "title": "Order", "subtitle": "#1", "icon": "i", "status": "Paid"},
            {"type": "collapsiblePanel", "title": "Info", "fields": [{"label": "A", "value": "1"}, {"label": "B"}]},
            {"type": "collapsePanel", "title": "Alias"},
            {"type": "dataTable", "title": "Rows", "columns": [{"name": "ID", "width": 60}],
             "rows": [["1", "x"], ["2", "y"]], "hasCheckbox": True, "hasActions": True},
            {"type": "actionButtons", "buttons": [{"text": "Cancel"}, {"text": "Save", "primary": True}]},
        ]
        document = generate_document({"modules": modules}, factory)
        report = check(document)
        assert report.violations == []
        assert set(m["type"] for m in modules) <= set(MODULE_BUILDERS)


class TestModuleBuilders:
    """Tests for individual module builders."""

    @pytest.mark.unit
    def test_missing_optional_fields_omit_layers(self, ctx):
        assert len(build_module({"type": "hero"}, ctx)) == 1
        assert len(build_module({"type": "orderHeader"}, ctx)) == 1
        assert len(build_module({"type": "features"}, ctx)) == 1

    @pytest.mark.unit
    def test_hero_full(self, ctx):
        layers = build_module({"type": "hero", "title": "T", "subtitle": "S", "cta": "Go"}, ctx)
        assert [layer.name for layer in layers] == ["Hero Background", "T", "S", "CTA Button", "Go"]
        assert layers[3].fixed_radius == 22

    @pytest.mark.unit
    def test_features_items_spacing(self, ctx):
        layers = build_module({"type": "features", "items": ["a", "b"]}, ctx)
        assert [layer.attributed_string.string for layer in layers[1:]] == ["• a", "• b"]
        assert [layer.frame.y for layer in layers[1:]] == [60, 108]

    @pytest.mark.unit
    def test_bottom_nav_highlights_first_item(self, ctx):
        layers = build_module({"type": "bottomNav", "items": ["Home", "Me"]}, ctx)
        first = layers[1].attributed_string.attributes[0].attributes.color
        second = layers[2].attributed_string.attributes[0].attributes.color
        assert first == Color.from_hex("#007AFF")
        assert second == Color.from_hex("#8E8E93")

    @pytest.mark.unit
    def test_data_table_does_not_mutate_rows(self, ctx):
        module = {
            "type": "dataTable",
            "columns": [{"name": "A", "width": 50}, {"name": "B"}],
            "rows": [["1", "2", "edit"]],
            "hasActions": True,
        }
        before = copy.deepcopy(module)
        layers = build_module(module, ctx)
        assert module == before
        cells = [layer.attributed_string.string for layer in layers if isinstance(layer, Text)]
        assert cells == ["新增", "A", "B", "1", "2"]

    @pytest.mark.unit
    def test_data_table_checkbox(self, ctx):
        layers = build_module({"type": "dataTable", "rows": [["a"]], "hasCheckbox": True}, ctx)
        assert "Checkbox" in [layer.name for layer in layers]

    @pytest.mark.unit
    def test_custom_login_defaults(self, ctx):
        layers = build_module({"type": "customLoginForm"}, ctx)
        strings = [layer.attributed_string.string for layer in layers if isinstance(layer, Text)]
        assert "请输入账号名" in strings
        assert "登录" in strings
        assert "重置" in strings

    @pytest.mark.unit
    def test_action_buttons_right_aligned(self, ctx):
        layers = build_module(
            {"type": "actionButtons", "buttons": [{"text": "A"}, {"text": "B", "primary": True}]},
            ctx,
        )
        buttons = [layer for layer in layers[1:] if isinstance(layer, Rectangle)]
        assert [b.frame.x for b in buttons] == [16 + 361 - 200 - 16, 16 + 361 - 200 - 16 + 112]
        assert buttons[1].style.fills[0].color == Color.from_hex("#007AFF")
