"""Tests for output module."""

import random

import pytest

from sketch_mcp.codec import IdentifierSource
from sketch_mcp.model import NodeFactory, StyleSpec

from .lib import format_document_tree, format_layer_label


@pytest.fixture
def document():
    """Page with an artboard holding a group of two layers."""
    factory = NodeFactory(IdentifierSource(random.Random(2)))
    title = factory.text("我的订单", (32, 16, 329, 24), StyleSpec())
    card = factory.rectangle((16, 0, 361, 56.5), StyleSpec(), name="Header")
    group = factory.group("Top", [card, title])
    artboard = factory.artboard("Home", 393, 852, children=[group])
    return factory.document([factory.page("Design", [artboard])])


class TestFormatDocumentTree:
    """Tests for format_document_tree function."""

    @pytest.mark.unit
    def test_tree_lines(self, document):
        assert format_document_tree(document).splitlines() == [
            "Design [page]",
            "└── Home [artboard, 393x852]",
            "    ├── background [rectangle, 393x852]",
            "    └── Top [group, 361x56.5]",
            "        ├── Header [rectangle, 361x56.5]",
            "        └── 我的订单 [text, 329x24]",
        ]

    @pytest.mark.unit
    def test_single_page(self, document):
        result = format_document_tree(document.pages[0])
        assert result.startswith("Design [page]")

    @pytest.mark.unit
    def test_empty_page(self):
        factory = NodeFactory(IdentifierSource(random.Random(1)))
        assert format_document_tree(factory.document([factory.page("Blank", [])])) == "Blank [page]"

    @pytest.mark.unit
    def test_layer_label(self, document):
        artboard = document.pages[0].layers[0]
        assert format_layer_label(artboard) == "Home [artboard, 393x852]"
