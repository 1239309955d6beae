"""Flag-set value type.

Subclass :class:`BitFlags` and declare flags as integer class attributes::

    class Perms(BitFlags, bits="u8"):
        READ = 0b001
        WRITE = 0b010
        EXEC = 0b100
        RW = READ | WRITE

Each subclass is a closed table of :class:`Flag` declarations (``FLAGS``)
over a fixed width (``BITS``).  Instances wrap a single integer and expose
set algebra, three conversion policies from raw bits, iteration and the
``A | B | 0x8`` text format.

Accessing a declared constant (``Perms.READ``) returns a fresh value every
time, so the in-place mutators never alter the class table.
"""

from __future__ import annotations

import keyword
import warnings
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import ClassVar, TypeVar

from flagforge.bits import U32, BitsType, resolve_bits
from flagforge.iter import Iter, IterBits, IterNames
from flagforge.parser import from_str, to_string

F = TypeVar("F", bound="BitFlags")


@dataclass(frozen=True)
class Flag:
    """A named, fixed bit pattern within a flag type."""

    name: str
    value: int


class DefinitionError(ValueError):
    """Raised when a flag table is invalid."""


class ZeroFlagWarning(UserWarning):
    """A flag was declared with value zero.

    Such a flag is contained in every value (including ``empty()``) and is
    never produced by iteration or formatting.
    """


class _FlagAttribute:
    """Class attribute handing out a fresh value for a declared flag."""

    __slots__ = ("flag",)

    def __init__(self, flag: Flag) -> None:
        self.flag = flag

    def __get__(self, instance: object, owner: type[F]) -> F:
        return owner._new(self.flag.value)

    def __repr__(self) -> str:
        return f"<flag {self.flag.name}={self.flag.value:#x}>"


def _check_table(cls_name: str, bits_type: BitsType, flags: tuple[Flag, ...]) -> None:
    seen: set[str] = set()
    for flag in flags:
        if not flag.name.isidentifier() or keyword.iskeyword(flag.name):
            raise DefinitionError(f"{cls_name}: {flag.name!r} is not a valid flag name")
        if flag.name.startswith("_"):
            raise DefinitionError(f"{cls_name}: flag name {flag.name!r} must not start with '_'")
        if flag.name in _RESERVED_NAMES:
            raise DefinitionError(
                f"{cls_name}: flag name {flag.name!r} shadows a BitFlags member"
            )
        if flag.name in seen:
            raise DefinitionError(f"{cls_name}: duplicate flag name {flag.name!r}")
        seen.add(flag.name)
        if isinstance(flag.value, bool) or not isinstance(flag.value, int):
            raise DefinitionError(
                f"{cls_name}.{flag.name}: value must be int, not {type(flag.value).__name__}"
            )
        if not bits_type.fits(flag.value):
            raise DefinitionError(
                f"{cls_name}.{flag.name}: {flag.value:#x} does not fit in {bits_type.name}"
            )


def _declared_value(cls: type[BitFlags], name: str, value: object) -> int | None:
    """Bits of class attribute *name* if it declares a flag, else ``None``.

    Values of a parent flag type (``RWX = Perms.READ | Perms.EXEC`` in a
    subclass of ``Perms``) declare a flag with their bits.
    """
    if name.startswith("_") or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, BitFlags):
        if type(value) not in cls.__mro__:
            raise DefinitionError(
                f"{cls.__name__}.{name}: value of unrelated flag type {type(value).__name__}"
            )
        return value._bits
    return None


class BitFlags:
    """Base class for flag-set types."""

    __slots__ = ("_bits",)

    FLAGS: ClassVar[tuple[Flag, ...]] = ()
    BITS: ClassVar[BitsType] = U32
    _all_bits: ClassVar[int] = 0
    _by_name: ClassVar[dict[str, Flag]] = {}

    def __init_subclass__(cls, bits: BitsType | str | None = None, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        if bits is not None:
            try:
                cls.BITS = resolve_bits(bits)
            except ValueError as e:
                raise DefinitionError(f"{cls.__name__}: {e}") from None

        declared: list[Flag] = []
        for name, value in cls.__dict__.items():
            flag_bits = _declared_value(cls, name, value)
            if flag_bits is not None:
                declared.append(Flag(name, flag_bits))
        table = cls.FLAGS + tuple(declared)
        _check_table(cls.__name__, cls.BITS, table)

        for flag in declared:
            if flag.value == 0:
                warnings.warn(
                    f"{cls.__name__}.{flag.name} is zero and is contained in every value",
                    ZeroFlagWarning,
                    stacklevel=2,
                )
            setattr(cls, flag.name, _FlagAttribute(flag))

        all_bits = 0
        for flag in table:
            all_bits |= flag.value
        cls.FLAGS = table
        cls._all_bits = all_bits
        cls._by_name = {flag.name: flag for flag in table}

    def __init__(self, bits: int = 0) -> None:
        self._bits = self.BITS.check(bits)

    @classmethod
    def _new(cls: type[F], bits: int) -> F:
        obj = object.__new__(cls)
        obj._bits = bits
        return obj

    def _other_bits(self, other: BitFlags) -> int:
        if type(other) is not type(self):
            raise TypeError(
                f"expected {type(self).__name__}, got {type(other).__name__}"
            )
        return other._bits

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def empty(cls: type[F]) -> F:
        """Return an empty set of flags."""
        return cls._new(0)

    @classmethod
    def all(cls: type[F]) -> F:
        """Return the set containing every declared flag."""
        return cls._new(cls._all_bits)

    @classmethod
    def from_bits(cls: type[F], bits: int) -> F | None:
        """Convert from raw bits, or return ``None`` if any bit is not covered
        by a declared flag fully present in *bits*."""
        cls.BITS.check(bits)
        if cls._truncate(bits) != bits:
            return None
        return cls._new(bits)

    @classmethod
    def from_bits_truncate(cls: type[F], bits: int) -> F:
        """Convert from raw bits, dropping bits that don't correspond to flags.

        Each declared flag is kept or dropped as a unit: a multi-bit flag
        that is only partially present in *bits* is dropped entirely.
        """
        return cls._new(cls._truncate(cls.BITS.check(bits)))

    @classmethod
    def from_bits_retain(cls: type[F], bits: int) -> F:
        """Convert from raw bits, keeping all of them verbatim."""
        return cls._new(cls.BITS.check(bits))

    @classmethod
    def from_name(cls: type[F], name: str) -> F | None:
        """Return the flag named *name* (case-sensitive), or ``None``."""
        flag = cls._by_name.get(name)
        if flag is None:
            return None
        return cls._new(flag.value)

    @classmethod
    def from_iterable(cls: type[F], values: Iterable[F]) -> F:
        """Return the union of every value in *values*."""
        result = cls.empty()
        result.extend(values)
        return result

    @classmethod
    def from_str(cls: type[F], text: str) -> F:
        """Parse ``"A | B | 0x8"``; raises :class:`~flagforge.parser.ParseError`."""
        return from_str(cls, text)

    @classmethod
    def _truncate(cls, bits: int) -> int:
        truncated = 0
        for flag in cls.FLAGS:
            if bits & flag.value == flag.value:
                truncated |= flag.value
        return truncated

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def bits(self) -> int:
        """Return the raw value of the flags currently stored."""
        return self._bits

    def is_empty(self) -> bool:
        return self._bits == 0

    def is_all(self) -> bool:
        """True if every declared flag is set; unknown bits are ignored."""
        return self._bits & self._all_bits == self._all_bits

    def intersects(self, other: F) -> bool:
        return self._bits & self._other_bits(other) != 0

    def contains(self, other: F) -> bool:
        """True if *other*'s bits are a subset of this value's bits."""
        other_bits = self._other_bits(other)
        return self._bits & other_bits == other_bits

    # ------------------------------------------------------------------
    # In-place mutation
    # ------------------------------------------------------------------

    def insert(self, other: F) -> None:
        self._bits |= self._other_bits(other)

    def remove(self, other: F) -> None:
        self._bits &= ~self._other_bits(other)

    def toggle(self, other: F) -> None:
        self._bits ^= self._other_bits(other)

    def set(self, other: F, value: bool) -> None:
        """Insert *other* if *value* is true, otherwise remove it."""
        if value:
            self.insert(other)
        else:
            self.remove(other)

    def extend(self, values: Iterable[F]) -> None:
        for value in values:
            self.insert(value)

    # ------------------------------------------------------------------
    # Pure set algebra
    # ------------------------------------------------------------------

    def intersection(self: F, other: F) -> F:
        return self._new(self._bits & self._other_bits(other))

    def union(self: F, other: F) -> F:
        return self._new(self._bits | self._other_bits(other))

    def difference(self: F, other: F) -> F:
        return self._new(self._bits & ~self._other_bits(other))

    def symmetric_difference(self: F, other: F) -> F:
        return self._new(self._bits ^ self._other_bits(other))

    def complement(self: F) -> F:
        """Return the flags not set in this value.

        Unlike the other operations this **clears** unknown bits: the result
        is ``from_bits_truncate`` of the bitwise negation.
        """
        return self._new(self._truncate(~self._bits & self.BITS.mask))

    def copy(self: F) -> F:
        return self._new(self._bits)

    # ------------------------------------------------------------------
    # Iteration
    # ------------------------------------------------------------------

    def iter(self: F) -> Iter[F]:
        """Yield each named flag, then any unknown remainder as one value."""
        return Iter(type(self), self._bits)

    def iter_names(self: F) -> IterNames[F]:
        """Yield ``(name, value)`` for each named flag present."""
        return IterNames(type(self), self._bits)

    def iter_bits(self) -> IterBits:
        """Yield every set bit as a power-of-two int, lowest first."""
        return IterBits(self._bits)

    def __iter__(self: F) -> Iterator[F]:
        return self.iter()

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def __or__(self: F, other: object) -> F:
        if type(other) is not type(self):
            return NotImplemented
        return self.union(other)

    def __and__(self: F, other: object) -> F:
        if type(other) is not type(self):
            return NotImplemented
        return self.intersection(other)

    def __xor__(self: F, other: object) -> F:
        if type(other) is not type(self):
            return NotImplemented
        return self.symmetric_difference(other)

    def __sub__(self: F, other: object) -> F:
        if type(other) is not type(self):
            return NotImplemented
        return self.difference(other)

    def __invert__(self: F) -> F:
        return self.complement()

    def __ior__(self: F, other: object) -> F:
        if type(other) is not type(self):
            return NotImplemented
        self.insert(other)
        return self

    def __iand__(self: F, other: object) -> F:
        if type(other) is not type(self):
            return NotImplemented
        self._bits &= other._bits
        return self

    def __ixor__(self: F, other: object) -> F:
        if type(other) is not type(self):
            return NotImplemented
        self.toggle(other)
        return self

    def __isub__(self: F, other: object) -> F:
        if type(other) is not type(self):
            return NotImplemented
        self.remove(other)
        return self

    def __contains__(self, other: object) -> bool:
        if type(other) is not type(self):
            return False
        return self.contains(other)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._bits == other._bits  # type: ignore[attr-defined]

    # Values are mutable.
    __hash__ = None  # type: ignore[assignment]

    def __bool__(self) -> bool:
        return self._bits != 0

    def __int__(self) -> int:
        return self._bits

    def __index__(self) -> int:
        return self._bits

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return to_string(self)

    def __repr__(self) -> str:
        text = to_string(self) if self._bits else "0x0"
        return f"{type(self).__name__}({text})"

    def __format__(self, spec: str) -> str:
        if not spec:
            return str(self)
        return format(self._bits, spec)


_RESERVED_NAMES = frozenset(name for name in dir(BitFlags) if not name.startswith("_"))
