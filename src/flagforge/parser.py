"""Text format for flag values.

Grammar (whitespace around tokens is ignored)::

    flags       := flag ( "|" flag )* | emptyflags
    flag        := name | "0x" hex_bits
    emptyflags  := "" | "0x0"

Formatting writes the named flags present in declaration order, joined by
``" | "``, followed by any bits not covered by a named flag as a single
lowercase hex literal.  Parsing accepts the same text and unions every
token, so ``from_str(T, to_string(v)).bits() == v.bits()`` for any ``v``.
"""

from __future__ import annotations

import enum
import io
from typing import TYPE_CHECKING, Protocol, TypeVar

if TYPE_CHECKING:
    from flagforge.flags import BitFlags

F = TypeVar("F", bound="BitFlags")


class _Writer(Protocol):
    def write(self, text: str, /) -> object: ...


class ParseErrorKind(enum.Enum):
    EMPTY_FLAG = "empty_flag"
    INVALID_NAMED_FLAG = "invalid_named_flag"
    INVALID_HEX_FLAG = "invalid_hex_flag"


class ParseError(ValueError):
    """A token in the input is not a known flag name or a valid hex literal.

    Attributes:
        kind: Which rule the token broke.
        got: The offending token, trimmed (hex tokens without ``0x``).
        position: 0-based offset of the token in the original input.
    """

    def __init__(self, kind: ParseErrorKind, got: str = "", position: int = 0) -> None:
        self.kind = kind
        self.got = got
        self.position = position
        super().__init__(self._describe())

    def _describe(self) -> str:
        if self.kind is ParseErrorKind.EMPTY_FLAG:
            msg = "encountered empty flag"
        elif self.kind is ParseErrorKind.INVALID_NAMED_FLAG:
            msg = f"unrecognized named flag `{self.got}`"
        else:
            msg = f"invalid hex flag `{self.got}`"
        return f"{msg} at position {self.position}"


def to_writer(flags: BitFlags, writer: _Writer) -> None:
    """Write the text form of *flags* to *writer* (anything with ``write``)."""
    first = True
    names = flags.iter_names()
    for name, _ in names:
        if not first:
            writer.write(" | ")
        first = False
        writer.write(name)

    remaining = names.remaining().bits()
    if remaining:
        if not first:
            writer.write(" | ")
        writer.write("0x")
        writer.write(flags.BITS.write_hex(remaining))


def to_string(flags: BitFlags) -> str:
    """Return the text form of *flags*; an empty value gives ``""``."""
    buf = io.StringIO()
    to_writer(flags, buf)
    return buf.getvalue()


def from_str(flags_type: type[F], text: str) -> F:
    """Parse *text* into a value of *flags_type*.

    Raises:
        ParseError: On an empty token, an unknown name, or a malformed or
            overflowing hex literal.
    """
    if not text.strip():
        return flags_type.empty()

    parsed = 0
    offset = 0
    for raw in text.split("|"):
        token = raw.strip()
        position = offset + (len(raw) - len(raw.lstrip()))
        offset += len(raw) + 1

        if not token:
            raise ParseError(ParseErrorKind.EMPTY_FLAG, position=position)

        if token.startswith("0x"):
            digits = token[2:]
            try:
                parsed |= flags_type.BITS.parse_hex(digits)
            except ValueError:
                raise ParseError(ParseErrorKind.INVALID_HEX_FLAG, digits, position) from None
        else:
            flag = flags_type.from_name(token)
            if flag is None:
                raise ParseError(ParseErrorKind.INVALID_NAMED_FLAG, token, position)
            parsed |= flag.bits()

    return flags_type.from_bits_retain(parsed)
