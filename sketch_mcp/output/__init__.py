"""Output formatting for document review.

Provides a human-readable text tree of a document graph for CLI output
and MCP draft previews.
"""

from sketch_mcp.output.lib import format_document_tree, format_layer_label

__all__ = [
    "format_document_tree",
    "format_layer_label",
]
