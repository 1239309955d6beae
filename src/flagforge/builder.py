"""Build flag types from an ordered table instead of a class body.

Used by the config loader, and handy when the table comes from data::

    Perms = define_flags("Perms", [("READ", 1), ("WRITE", 2)], bits="u8")

A class body cannot see duplicate names (the second assignment silently
wins), so duplicates are rejected here before the class is created.
"""

import keyword
import sys
from collections.abc import Iterable, Mapping

from flagforge.bits import BitsType
from flagforge.flags import BitFlags, DefinitionError


def define_flags(
    name: str,
    flags: Iterable[tuple[str, int]] | Mapping[str, int],
    bits: BitsType | str = "u32",
    doc: str | None = None,
    module: str | None = None,
) -> type[BitFlags]:
    """Create a :class:`BitFlags` subclass named *name*.

    Args:
        name: Class name.
        flags: ``(flag_name, value)`` pairs (or a mapping) in declaration order.
        bits: Underlying width, a :class:`BitsType` or its name (``"u8"`` ..).
        doc: Optional class docstring.
        module: Value for ``__module__``; defaults to the calling module so
            that values of a module-level type can be pickled.

    Raises:
        DefinitionError: Invalid class name, duplicate or invalid flag names,
            or values that don't fit *bits*.
    """
    if not name.isidentifier() or keyword.iskeyword(name):
        raise DefinitionError(f"{name!r} is not a valid class name")

    pairs = list(flags.items()) if isinstance(flags, Mapping) else list(flags)
    namespace: dict[str, object] = {}
    for flag_name, value in pairs:
        if not isinstance(flag_name, str) or not flag_name.isidentifier():
            raise DefinitionError(f"{name}: {flag_name!r} is not a valid flag name")
        if flag_name.startswith("_"):
            raise DefinitionError(f"{name}: flag name {flag_name!r} must not start with '_'")
        if flag_name in namespace:
            raise DefinitionError(f"{name}: duplicate flag name {flag_name!r}")
        if isinstance(value, bool) or not isinstance(value, int):
            raise DefinitionError(
                f"{name}.{flag_name}: value must be int, not {type(value).__name__}"
            )
        namespace[flag_name] = value

    namespace["__slots__"] = ()
    namespace["__doc__"] = doc
    if module is None:
        module = _caller_module()
    if module is not None:
        namespace["__module__"] = module
    return type(name, (BitFlags,), namespace, bits=bits)


def _caller_module(depth: int = 1) -> str | None:
    """``__name__`` of the module *depth* frames above the caller, if known."""
    try:
        return sys._getframe(depth + 1).f_globals.get("__name__")
    except (AttributeError, ValueError):
        return None
