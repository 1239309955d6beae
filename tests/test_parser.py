"""Tests for flagforge.parser: the ``A | B | 0x8`` text format."""

import io

import pytest

from flagforge.flags import BitFlags
from flagforge.parser import ParseError, ParseErrorKind, from_str, to_string, to_writer


class Flags(BitFlags, bits="u8"):
    A = 0b001
    B = 0b010
    C = 0b100


class Wide(BitFlags, bits="u64"):
    LOW = 1
    HIGH = 1 << 63
    BOTH = LOW | HIGH


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


class TestToString:
    def test_named_flags(self) -> None:
        assert to_string(Flags.A | Flags.C) == "A | C"

    def test_single_flag(self) -> None:
        assert to_string(Flags.B) == "B"

    def test_empty(self) -> None:
        assert to_string(Flags.empty()) == ""

    def test_unknown_bits_only(self) -> None:
        assert to_string(Flags.from_bits_retain(0b1000)) == "0x8"

    def test_named_and_unknown(self) -> None:
        assert to_string(Flags.from_bits_retain(0b1111_0001)) == "A | 0xf0"

    def test_composite_declared_last_not_repeated(self) -> None:
        assert to_string(Wide.all()) == "LOW | HIGH"

    def test_to_writer(self) -> None:
        buf = io.StringIO()
        to_writer(Flags.all(), buf)
        assert buf.getvalue() == "A | B | C"


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestFromStr:
    def test_names(self) -> None:
        assert from_str(Flags, "A | C").bits() == 0b101

    def test_hex_and_name(self) -> None:
        assert from_str(Flags, "A | 0x8").bits() == 0b1001

    def test_whitespace_insensitive(self) -> None:
        assert from_str(Flags, "  A|B  |   C ").bits() == 0b111

    @pytest.mark.parametrize("text", ["", "   ", "\t\n", "0x0"])
    def test_empty_forms(self, text: str) -> None:
        assert from_str(Flags, text).is_empty()

    def test_uppercase_hex_digits(self) -> None:
        assert from_str(Flags, "0xFF").bits() == 0xFF

    def test_repeated_names(self) -> None:
        assert from_str(Flags, "A | A").bits() == 0b001

    def test_hex_keeps_unknown_bits(self) -> None:
        value = from_str(Flags, "0x80")
        assert value.bits() == 0x80
        assert Flags.from_bits(value.bits()) is None

    def test_u64_max(self) -> None:
        assert from_str(Wide, "0xffffffffffffffff").bits() == (1 << 64) - 1

    def test_classmethod(self) -> None:
        assert Flags.from_str("B") == Flags.B


class TestParseErrors:
    def test_unknown_name(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            from_str(Flags, "A | D")
        err = exc_info.value
        assert err.kind is ParseErrorKind.INVALID_NAMED_FLAG
        assert err.got == "D"
        assert err.position == 4
        assert str(err) == "unrecognized named flag `D` at position 4"

    def test_name_is_case_sensitive(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            from_str(Flags, "a")
        assert exc_info.value.kind is ParseErrorKind.INVALID_NAMED_FLAG

    def test_empty_token(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            from_str(Flags, "A | | B")
        err = exc_info.value
        assert err.kind is ParseErrorKind.EMPTY_FLAG
        assert str(err).startswith("encountered empty flag")

    def test_trailing_separator(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            from_str(Flags, "A |")
        assert exc_info.value.kind is ParseErrorKind.EMPTY_FLAG

    def test_malformed_hex(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            from_str(Flags, "0xzz")
        err = exc_info.value
        assert err.kind is ParseErrorKind.INVALID_HEX_FLAG
        assert err.got == "zz"
        assert err.position == 0
        assert str(err) == "invalid hex flag `zz` at position 0"

    def test_bare_prefix(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            from_str(Flags, "0x")
        assert exc_info.value.kind is ParseErrorKind.INVALID_HEX_FLAG

    def test_hex_overflow(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            from_str(Flags, "B | 0x100")
        err = exc_info.value
        assert err.kind is ParseErrorKind.INVALID_HEX_FLAG
        assert err.got == "100"
        assert err.position == 4

    def test_uppercase_prefix_is_a_name(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            from_str(Flags, "0X1")
        assert exc_info.value.kind is ParseErrorKind.INVALID_NAMED_FLAG

    def test_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            from_str(Flags, "nope")


# ---------------------------------------------------------------------------
# Round trip
# ---------------------------------------------------------------------------


class TestRoundTrip:
    def test_every_u8_value(self) -> None:
        for bits in range(256):
            value = Flags.from_bits_retain(bits)
            assert from_str(Flags, to_string(value)).bits() == bits

    def test_wide_values(self) -> None:
        for bits in (0, 1, 1 << 63, (1 << 63) | 1, (1 << 64) - 1, 0x1234_5678_9ABC_DEF0):
            value = Wide.from_bits_retain(bits)
            assert Wide.from_str(str(value)).bits() == bits

    def test_concrete_scenario(self) -> None:
        assert to_string(Flags.A | Flags.C) == "A | C"
        assert from_str(Flags, "A | C").bits() == 0b101
        assert to_string(Flags.from_bits_retain(0b1000)) == "0x8"
        assert from_str(Flags, "A | 0x8").bits() == 0b1001
