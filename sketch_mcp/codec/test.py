"""Unit tests for value codecs."""

import random

import pytest

from sketch_mcp.codec import (
    BLACK,
    IdentifierSource,
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


class TestIdentifiers:
    """Tests for identifier generation."""

    @pytest.mark.unit
    def test_default_identifier_is_canonical(self):
        """Generated identifiers match the canonical layout."""
        value = new_identifier()
        assert len(value) == 36
        assert is_valid_identifier(value)
        assert value == value.upper()

    @pytest.mark.unit
    def test_version_and_variant_nibbles(self):
        """Third group starts with 4, fourth with 8/9/A/B."""
        ids = IdentifierSource(random.Random(1))
        for _ in range(200):
            groups = ids().split("-")
            assert [len(g) for g in groups] == [8, 4, 4, 4, 12]
            assert groups[2][0] == "4"
            assert groups[3][0] in "89AB"

    @pytest.mark.unit
    def test_seeded_source_is_deterministic(self):
        """Same seed yields the same identifier sequence."""
        first = IdentifierSource(random.Random(42))
        second = IdentifierSource(random.Random(42))
        assert [first() for _ in range(5)] == [second() for _ in range(5)]

    @pytest.mark.unit
    def test_new_identifier_accepts_rng(self):
        """new_identifier honors an injected random source."""
        assert new_identifier(random.Random(3)) == new_identifier(random.Random(3))

    @pytest.mark.unit
    def test_no_collisions_in_batch(self):
        """A batch of default identifiers has no duplicates."""
        values = {new_identifier() for _ in range(1000)}
        assert len(values) == 1000

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value",
        [
            "",
            None,
            42,
            "not-an-identifier",
            "12345678-1234-1234-8234-123456789ABC",  # wrong version nibble
            "12345678-1234-4234-C234-123456789ABC",  # wrong variant nibble
            "12345678-1234-4234-8234-123456789ABCD",  # too long
        ],
    )
    def test_rejects_malformed(self, value):
        """Malformed values are not identifiers."""
        assert not is_valid_identifier(value)

    @pytest.mark.unit
    def test_accepts_lowercase(self):
        """Validation is case-insensitive."""
        assert is_valid_identifier("12345678-1234-4234-a234-123456789abc")


class TestColors:
    """Tests for hex color parsing."""

    @pytest.mark.unit
    def test_red(self):
        """#FF0000 is pure opaque red."""
        assert parse_hex_color("#FF0000") == Rgba(1.0, 0.0, 0.0, 1.0)

    @pytest.mark.unit
    def test_short_form(self):
        """#RGB expands each digit."""
        assert parse_hex_color("#0F0") == Rgba(0.0, 1.0, 0.0, 1.0)

    @pytest.mark.unit
    def test_alpha_form(self):
        """#RRGGBBAA carries alpha."""
        color = parse_hex_color("#00000080")
        assert color.alpha == pytest.approx(128 / 255)

    @pytest.mark.unit
    def test_without_hash(self):
        """Leading # is optional."""
        assert parse_hex_color("007AFF").blue == 1.0

    @pytest.mark.unit
    @pytest.mark.parametrize("value", [None, "", "red", "#12", "#GGGGGG", 7])
    def test_invalid_falls_back_to_black(self, value):
        """Unparseable input resolves to opaque black."""
        assert parse_hex_color(value) == BLACK

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value", ["#007AFF", "#F2F2F7", "#1C1C1E", "#8E8E93", "#FFFFFF", "#000000"]
    )
    def test_channels_in_unit_interval(self, value):
        """Every channel lies in [0, 1]."""
        assert all(0.0 <= channel <= 1.0 for channel in parse_hex_color(value))

    @pytest.mark.unit
    def test_format_hex_color(self):
        """Channels format back to hex."""
        assert format_hex_color(parse_hex_color("#5856D6")) == "#5856D6"
        assert format_hex_color(Rgba(0, 0, 0, 0.5)) == "#00000080"


class TestPoints:
    """Tests for point string encoding."""

    @pytest.mark.unit
    def test_integer_point(self):
        """Integral coordinates drop the decimal part."""
        assert format_point(0, 1) == "{0, 1}"
        assert format_point(1.0, 0.0) == "{1, 0}"

    @pytest.mark.unit
    def test_fixed_precision(self):
        """Precision pads decimals."""
        assert format_point(0.5, 1, precision=6) == "{0.500000, 1.000000}"

    @pytest.mark.unit
    def test_parse_point(self):
        """Point strings decode to floats."""
        assert parse_point("{0.5, -2}") == (0.5, -2.0)

    @pytest.mark.unit
    def test_parse_rejects_garbage(self):
        """Malformed point strings raise ValueError."""
        with pytest.raises(ValueError):
            parse_point("(0, 0)")


class TestTextHelpers:
    """Tests for script detection and rounding."""

    @pytest.mark.unit
    def test_contains_cjk(self):
        """Ideographs are detected anywhere in the string."""
        assert contains_cjk("我的订单")
        assert contains_cjk("Order 订单")
        assert not contains_cjk("My Orders")
        assert not contains_cjk("")

    @pytest.mark.unit
    def test_round_half_up(self):
        """Halves round away from even."""
        assert round_half_up(21.6) == 22
        assert round_half_up(2.5) == 3
        assert round_half_up(19.2) == 19
