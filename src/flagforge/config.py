"""Project configuration loader for flagforge.

Reads ``flagforge.toml`` from the project root and exposes each declared
flag type as a :class:`TypeSpec`.  The file is the build-time source of
truth that ``flagforge generate`` turns into a Python module.

Example ``flagforge.toml``::

    [output]
    path = "src/myproj/flags.py"

    [types.Permissions]
    bits = "u8"
    doc = "File permissions."

    [types.Permissions.flags]
    READ = 0b001
    WRITE = 0b010
    RW = ["READ", "WRITE"]      # union of earlier flags

Usage::

    from flagforge.config import load_config
    cfg = load_config()
    Permissions = cfg.types["Permissions"].build()
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from flagforge.bits import U32, BitsType, resolve_bits
from flagforge.builder import define_flags
from flagforge.flags import BitFlags, DefinitionError

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomllib  # type: ignore[import]
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[import,no-redef]

CONFIG_FILENAME = "flagforge.toml"
DEFAULT_OUTPUT = "flags.py"


@dataclass(frozen=True)
class FlagSpec:
    """One declared flag: its resolved value and, for composites, the member names."""

    name: str
    value: int
    members: tuple[str, ...] = ()


@dataclass
class TypeSpec:
    """A flag type declared under ``[types.<name>]``."""

    name: str
    bits: BitsType = U32
    doc: str = ""
    flags: list[FlagSpec] = field(default_factory=list)
    # Module the generated class will live in; used as ``__module__``.
    module: str | None = None
    _built: type[BitFlags] | None = field(default=None, init=False, repr=False, compare=False)

    def build(self) -> type[BitFlags]:
        """Return the :class:`BitFlags` subclass for this declaration.

        The class is created on first use and reused afterwards.
        """
        if self._built is None:
            self._built = define_flags(
                self.name,
                [(f.name, f.value) for f in self.flags],
                bits=self.bits,
                doc=self.doc or None,
                module=self.module,
            )
        return self._built


@dataclass
class ProjectConfig:
    """Parsed ``flagforge.toml`` with computed paths."""

    # Root directory (where flagforge.toml lives)
    root: Path
    config_path: Path = field(default_factory=lambda: Path())

    # --- [output] ---
    output_path: Path = field(default_factory=lambda: Path())
    header: str = ""

    # --- [types.*], in file order ---
    types: dict[str, TypeSpec] = field(default_factory=dict)

    def get_type(self, name: str) -> TypeSpec:
        try:
            return self.types[name]
        except KeyError:
            raise KeyError(
                f"Type '{name}' not found in {self.config_path.name}.  "
                f"Available types: {list(self.types)}"
            ) from None


def _resolve(root: Path, rel: str) -> Path:
    """Resolve a path relative to project root."""
    p = Path(rel)
    if p.is_absolute():
        return p
    return root / p


def _module_name(root: Path, output_path: Path) -> str | None:
    """Dotted module name of the generated file, e.g. ``src/pkg/flags.py`` -> ``pkg.flags``."""
    try:
        rel = output_path.relative_to(root)
    except ValueError:
        rel = Path(output_path.name)
    parts = list(rel.with_suffix("").parts)
    if parts and parts[0] == "src":
        parts = parts[1:]
    if parts and all(p.isidentifier() for p in parts):
        return ".".join(parts)
    return None


def _find_root(start: Path | None = None) -> Path:
    """Walk up from *start* (or cwd) to find flagforge.toml."""
    if start is not None:
        return start
    candidate = Path.cwd().resolve()
    while candidate != candidate.parent:
        if (candidate / CONFIG_FILENAME).exists():
            return candidate
        candidate = candidate.parent
    raise FileNotFoundError(
        f"Could not find {CONFIG_FILENAME} in any parent of the current directory. "
        "Run 'flagforge init' to create one, or pass --config."
    )


def _parse_flags(type_name: str, raw_flags: dict[str, Any]) -> list[FlagSpec]:
    """Resolve ``[types.X.flags]`` entries; list values union earlier flags."""
    specs: list[FlagSpec] = []
    known: dict[str, int] = {}
    for flag_name, raw in raw_flags.items():
        if isinstance(raw, bool):
            raise DefinitionError(f"{type_name}.{flag_name}: expected int or list of names")
        if isinstance(raw, int):
            spec = FlagSpec(flag_name, raw)
        elif isinstance(raw, list):
            value = 0
            for member in raw:
                if not isinstance(member, str):
                    raise DefinitionError(
                        f"{type_name}.{flag_name}: members must be flag names, got {member!r}"
                    )
                if member not in known:
                    raise DefinitionError(
                        f"{type_name}.{flag_name}: unknown member {member!r} "
                        "(members must be declared earlier)"
                    )
                value |= known[member]
            spec = FlagSpec(flag_name, value, tuple(raw))
        else:
            raise DefinitionError(
                f"{type_name}.{flag_name}: expected int or list of names, "
                f"got {type(raw).__name__}"
            )
        known[flag_name] = spec.value
        specs.append(spec)
    return specs


def parse_config(raw: dict[str, Any], root: Path, config_path: Path | None = None) -> ProjectConfig:
    """Build a :class:`ProjectConfig` from already-decoded TOML data."""
    raw_types = raw.get("types")
    if not isinstance(raw_types, dict) or not raw_types:
        raise KeyError(f"{CONFIG_FILENAME} has no [types.<name>] sections")

    output = raw.get("output", {})
    cfg = ProjectConfig(
        root=root,
        config_path=config_path or root / CONFIG_FILENAME,
        output_path=_resolve(root, output.get("path", DEFAULT_OUTPUT)),
        header=output.get("header", ""),
    )

    module = _module_name(root, cfg.output_path)
    for type_name, tdef in raw_types.items():
        if not isinstance(tdef, dict):
            raise DefinitionError(f"[types.{type_name}] must be a table")
        try:
            bits = resolve_bits(tdef.get("bits", U32.name))
        except ValueError as e:
            raise DefinitionError(f"{type_name}: {e}") from None
        spec = TypeSpec(
            name=type_name,
            bits=bits,
            doc=tdef.get("doc", ""),
            flags=_parse_flags(type_name, tdef.get("flags", {})),
            module=module,
        )
        # Validate names, duplicates and widths now rather than at generate time.
        spec.build()
        cfg.types[type_name] = spec

    return cfg


def load_config(root: Path | None = None, path: Path | None = None) -> ProjectConfig:
    """Load flagforge.toml.

    Args:
        root: Project root directory.  Auto-detected if ``None``.
        path: Explicit config file; its parent becomes the root.
    """
    if path is not None:
        toml_path = path
        root = path.resolve().parent
    else:
        root = _find_root(root)
        toml_path = root / CONFIG_FILENAME
    if not toml_path.exists():
        raise FileNotFoundError(f"Config not found: {toml_path}")

    with open(toml_path, "rb") as f:
        raw = tomllib.load(f)

    return parse_config(raw, root, toml_path)
