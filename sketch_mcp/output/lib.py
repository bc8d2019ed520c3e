"""Output formatting for document visualization.

Generates human-readable text representations of document graphs
for user feedback and review.
"""

from typing import Any

from sketch_mcp.model import Document, LayerBase, Page


def _dimension(value: float) -> str:
    return f"{value:g}"


def format_layer_label(layer: LayerBase) -> str:
    """Format one layer as ``Name [class, WxH]``."""
    frame = layer.frame
    size = f"{_dimension(frame.width)}x{_dimension(frame.height)}"
    return f"{layer.name} [{layer.class_}, {size}]"


def format_document_tree(document: Document | Page) -> str:
    """Format a document graph as a human-readable tree.

    Example output:
        Design [page]
        └── Home [artboard, 393x852]
            ├── background [rectangle, 393x852]
            ├── Header [rectangle, 361x56]
            └── 我的订单 [text, 329x24]

    Args:
        document: Document, or a single page, to format.

    Returns:
        Formatted tree string, one page tree after another.
    """
    pages = document.pages if isinstance(document, Document) else [document]
    lines: list[str] = []
    for page in pages:
        lines.append(f"{page.name} [page]")
        _format_children(page.layers, lines, "")
    return "\n".join(lines)


def _format_children(layers: list[Any], lines: list[str], prefix: str) -> None:
    """Recursively format a layer list under the given prefix."""
    for i, layer in enumerate(layers):
        is_last = i == len(layers) - 1
        connector = "└── " if is_last else "├── "
        lines.append(f"{prefix}{connector}{format_layer_label(layer)}")

        children = getattr(layer, "layers", None)
        if children:
            _format_children(children, lines, prefix + ("    " if is_last else "│   "))


__all__ = [
    "format_document_tree",
    "format_layer_label",
]
