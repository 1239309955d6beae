"""Iterators over the flags in a value.

None of these touch the source value: each works on a private copy of the
remaining bits, and calling ``value.iter_names()`` again starts afresh.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from flagforge.flags import BitFlags

F = TypeVar("F", bound="BitFlags")


class IterNames(Generic[F]):
    """Yield ``(name, value)`` for each declared flag present, in declaration order.

    A flag is yielded when all of its bits are in the source value and at
    least one of them has not been consumed by an earlier flag.  So a
    composite flag declared before its parts is reported once, as the
    composite, and zero-valued flags are never reported.
    """

    def __init__(self, flags_type: type[F], bits: int) -> None:
        self._type = flags_type
        self._flags = flags_type.FLAGS
        self._idx = 0
        self._source = bits
        self._remaining = bits

    def __iter__(self) -> IterNames[F]:
        return self

    def __next__(self) -> tuple[str, F]:
        while self._idx < len(self._flags):
            if self._remaining == 0:
                break
            flag = self._flags[self._idx]
            self._idx += 1
            value = flag.value
            # Check against the source but consume from the remainder so that
            # overlapping flags are handled.
            if self._source & value == value and self._remaining & value:
                self._remaining &= ~value
                return flag.name, self._type._new(value)
        raise StopIteration

    def remaining(self) -> F:
        """Bits not yet consumed by a yielded flag."""
        return self._type._new(self._remaining)


class Iter(Generic[F]):
    """Yield each named flag present, then the unknown remainder (if any) once."""

    def __init__(self, flags_type: type[F], bits: int) -> None:
        self._names: IterNames[F] = IterNames(flags_type, bits)
        self._done = False

    def __iter__(self) -> Iter[F]:
        return self

    def __next__(self) -> F:
        if self._done:
            raise StopIteration
        try:
            return next(self._names)[1]
        except StopIteration:
            self._done = True
            remaining = self._names.remaining()
            if remaining.is_empty():
                raise
            return remaining


class IterBits:
    """Yield each set bit of a raw value as a power-of-two int, lowest first."""

    def __init__(self, bits: int) -> None:
        self._remaining = bits

    def __iter__(self) -> Iterator[int]:
        return self

    def __next__(self) -> int:
        if self._remaining == 0:
            raise StopIteration
        lowest = self._remaining & -self._remaining
        self._remaining ^= lowest
        return lowest
