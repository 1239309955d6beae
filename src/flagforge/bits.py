"""Underlying integer widths for flag types.

A flag type stores its bits in one of the standard unsigned integer sizes.
Python integers are unbounded, so each :class:`BitsType` carries the range
check, hex parsing and hex writing that a fixed-width integer would give
for free.
"""

import re
from dataclasses import dataclass

_HEX_DIGITS_RE = re.compile(r"[0-9a-fA-F]+")


@dataclass(frozen=True)
class BitsType:
    """An unsigned integer width (``u8`` .. ``u128``)."""

    name: str
    width: int

    @property
    def mask(self) -> int:
        """All bits of this width set."""
        return (1 << self.width) - 1

    def fits(self, value: int) -> bool:
        return 0 <= value <= self.mask

    def check(self, value: int) -> int:
        """Return *value* unchanged, or raise ``ValueError`` if out of range."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{self.name} bits must be int, not {type(value).__name__}")
        if not self.fits(value):
            raise ValueError(f"{value:#x} does not fit in {self.name}")
        return value

    def parse_hex(self, text: str) -> int:
        """Parse bare hex digits (no ``0x`` prefix) into a value of this width.

        Raises ``ValueError`` for empty or malformed input and for values
        that overflow the width.
        """
        if not _HEX_DIGITS_RE.fullmatch(text):
            raise ValueError(f"invalid hex digits: {text!r}")
        value = int(text, 16)
        if not self.fits(value):
            raise ValueError(f"0x{text} overflows {self.name}")
        return value

    def write_hex(self, value: int) -> str:
        """Lowercase hex digits without prefix."""
        return f"{value:x}"

    def __str__(self) -> str:
        return self.name


U8 = BitsType("u8", 8)
U16 = BitsType("u16", 16)
U32 = BitsType("u32", 32)
U64 = BitsType("u64", 64)
U128 = BitsType("u128", 128)

BITS_TYPES: dict[str, BitsType] = {t.name: t for t in (U8, U16, U32, U64, U128)}


def resolve_bits(spec: "BitsType | str") -> BitsType:
    """Return the :class:`BitsType` for *spec* (an instance or its name)."""
    if isinstance(spec, BitsType):
        return spec
    try:
        return BITS_TYPES[spec]
    except KeyError:
        raise ValueError(
            f"Unknown bits type {spec!r}. Available: {', '.join(BITS_TYPES)}"
        ) from None
