"""Value codecs for primitive design values.

Pure functions that turn the loose values found in module descriptions
(hex color strings, coordinates, free text) into the exact representations
the Sketch file format expects, plus the identifier generator every
structural node draws from.
"""

import math
import re
import uuid
from typing import NamedTuple, Protocol

# =============================================================================
# Identifiers
# =============================================================================

IDENTIFIER_PATTERN = re.compile(
    r"^[0-9A-F]{8}-[0-9A-F]{4}-4[0-9A-F]{3}-[89AB][0-9A-F]{3}-[0-9A-F]{12}$",
    re.IGNORECASE,
)


class RandomSource(Protocol):
    """Anything exposing ``getrandbits`` (e.g. ``random.Random``)."""

    def getrandbits(self, k: int) -> int: ...


class IdentifierSource:
    """Generates canonical object identifiers.

    Identifiers are uppercase version-4 UUID strings: the third group starts
    with ``4`` and the fourth group with one of ``8``, ``9``, ``A`` or ``B``.
    Without an explicit random source the process-wide ``uuid4`` generator is
    used; tests pass a seeded ``random.Random`` for reproducible output.

    Example:
        >>> import random
        >>> ids = IdentifierSource(random.Random(7))
        >>> is_valid_identifier(ids())
        True
    """

    def __init__(self, rng: RandomSource | None = None):
        self._rng = rng

    def __call__(self) -> str:
        if self._rng is None:
            value = uuid.uuid4()
        else:
            value = uuid.UUID(int=self._rng.getrandbits(128), version=4)
        return str(value).upper()


_default_source = IdentifierSource()


def new_identifier(rng: RandomSource | None = None) -> str:
    """Generate one canonical identifier.

    Args:
        rng: Optional random source; defaults to ``uuid4`` randomness.

    Returns:
        36-character identifier string.
    """
    if rng is None:
        return _default_source()
    return IdentifierSource(rng)()


def is_valid_identifier(value: object) -> bool:
    """Check whether a value is a canonical identifier string."""
    return isinstance(value, str) and IDENTIFIER_PATTERN.match(value) is not None


# =============================================================================
# Colors
# =============================================================================


class Rgba(NamedTuple):
    """Normalized color channels, each within [0, 1]."""

    red: float
    green: float
    blue: float
    alpha: float = 1.0


BLACK = Rgba(0.0, 0.0, 0.0, 1.0)

_HEX_DIGITS = re.compile(r"^[0-9A-Fa-f]+$")


def parse_hex_color(value: str | None) -> Rgba:
    """Convert a hex color string into normalized channels.

    Accepts ``#RGB``, ``#RRGGBB`` and ``#RRGGBBAA`` (leading ``#`` optional).
    Anything else, including ``None``, resolves to opaque black so a bad
    palette entry never aborts document assembly.

    Example:
        >>> parse_hex_color("#FF0000")
        Rgba(red=1.0, green=0.0, blue=0.0, alpha=1.0)
    """
    if not value or not isinstance(value, str):
        return BLACK

    digits = value.strip().lstrip("#")
    if not _HEX_DIGITS.match(digits):
        return BLACK

    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) not in (6, 8):
        return BLACK

    channels = [int(digits[i : i + 2], 16) / 255 for i in range(0, len(digits), 2)]
    if len(channels) == 3:
        channels.append(1.0)
    return Rgba(*channels)


def format_hex_color(rgba: Rgba) -> str:
    """Format channels back to ``#RRGGBB`` (alpha appended when not opaque)."""
    parts = [rgba.red, rgba.green, rgba.blue]
    if rgba.alpha < 1.0:
        parts.append(rgba.alpha)
    return "#" + "".join(f"{round(p * 255):02X}" for p in parts)


# =============================================================================
# Point strings
# =============================================================================

POINT_PATTERN = re.compile(r"^\{-?\d+(\.\d+)?, -?\d+(\.\d+)?\}$")


def _format_number(value: float, precision: int | None) -> str:
    if precision is not None:
        return f"{value:.{precision}f}"
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def format_point(x: float, y: float, precision: int | None = None) -> str:
    """Encode a coordinate pair as a Sketch point string.

    Example:
        >>> format_point(1, 0)
        '{1, 0}'
        >>> format_point(0.5, 0.5, precision=6)
        '{0.500000, 0.500000}'
    """
    return f"{{{_format_number(x, precision)}, {_format_number(y, precision)}}}"


def parse_point(value: str) -> tuple[float, float]:
    """Decode a Sketch point string.

    Raises:
        ValueError: If the value is not a well-formed point string.
    """
    if not isinstance(value, str) or not POINT_PATTERN.match(value):
        raise ValueError(f"Not a point string: {value!r}")
    x, y = value[1:-1].split(", ")
    return float(x), float(y)


# =============================================================================
# Text helpers
# =============================================================================

CJK_PATTERN = re.compile(r"[\u4e00-\u9fff]")


def contains_cjk(text: str) -> bool:
    """Check whether text contains CJK unified ideographs."""
    return bool(CJK_PATTERN.search(text or ""))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (not to even)."""
    return math.floor(value + 0.5)


__all__ = [
    "IDENTIFIER_PATTERN",
    "IdentifierSource",
    "RandomSource",
    "new_identifier",
    "is_valid_identifier",
    "Rgba",
    "BLACK",
    "parse_hex_color",
    "format_hex_color",
    "POINT_PATTERN",
    "format_point",
    "parse_point",
    "CJK_PATTERN",
    "contains_cjk",
    "round_half_up",
]
