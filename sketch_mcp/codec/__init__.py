"""Value codecs: identifiers, colors, point strings and text helpers."""

from sketch_mcp.codec.lib import (
    BLACK,
    CJK_PATTERN,
    IDENTIFIER_PATTERN,
    POINT_PATTERN,
    IdentifierSource,
    RandomSource,
    Rgba,
    contains_cjk,
    format_hex_color,
    format_point,
    is_valid_identifier,
    new_identifier,
    parse_hex_color,
    parse_point,
    round_half_up,
)

__all__ = [
    # Identifiers
    "IDENTIFIER_PATTERN",
    "IdentifierSource",
    "RandomSource",
    "new_identifier",
    "is_valid_identifier",
    # Colors
    "Rgba",
    "BLACK",
    "parse_hex_color",
    "format_hex_color",
    # Points
    "POINT_PATTERN",
    "format_point",
    "parse_point",
    # Text
    "CJK_PATTERN",
    "contains_cjk",
    "round_half_up",
]
