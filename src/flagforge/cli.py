"""Shared CLI utilities for flagforge commands.

Provides the common ``--config`` option, config/type loading helpers and
standardised output / error helpers so that every command reports errors
and JSON the same way.

Usage in a command module::

    import typer
    from flagforge.cli import ConfigOption, error_exit, get_config

    app = typer.Typer()

    @app.callback(invoke_without_command=True)
    def main(config: Path | None = ConfigOption) -> None:
        cfg = get_config(config)
        ...
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from flagforge.config import ProjectConfig, load_config
from flagforge.flags import BitFlags

# Re-usable Typer option for --config
ConfigOption: Path | None = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to flagforge.toml (default: search upward from the current directory).",
)

JsonOption: bool = typer.Option(False, "--json", help="Output results as JSON")


def get_config(config: Path | None = None) -> ProjectConfig:
    """Load the project config, from *config* if given."""
    return load_config(path=config)


# ---------------------------------------------------------------------------
# Standardised output helpers
# ---------------------------------------------------------------------------

_err_console = Console(stderr=True)


def error_exit(msg: str, *, json_mode: bool = False, code: int = 1) -> NoReturn:
    """Print *msg* as an error and ``raise typer.Exit(code)``."""
    if json_mode:
        print(json.dumps({"error": msg}, indent=2))
    else:
        _err_console.print(f"[red bold]error:[/red bold] {escape(msg)}")
    raise typer.Exit(code=code)


def json_print(data: dict[str, Any] | list[Any]) -> None:
    """Print *data* as pretty-printed JSON to stdout."""
    print(json.dumps(data, indent=2))


def parse_bits(text: str, *, json_mode: bool = False) -> int:
    """Parse a raw integer, exiting on invalid input.

    Accepts decimal and ``0x`` / ``0o`` / ``0b`` prefixed literals.
    """
    try:
        value = int(text.strip(), 0)
    except ValueError:
        error_exit(f"Invalid integer: {text!r}", json_mode=json_mode)
    if value < 0:
        error_exit(f"Bits must be non-negative (got {value})", json_mode=json_mode)
    return value


def load_flag_type(
    name: str, config: Path | None = None, *, json_mode: bool = False
) -> type[BitFlags]:
    """Load the config and build the flag type *name*, exiting on any error."""
    try:
        cfg = get_config(config)
        return cfg.get_type(name).build()
    except KeyError as e:
        error_exit(str(e.args[0]) if e.args else str(e), json_mode=json_mode)
    except (OSError, ValueError) as e:
        error_exit(str(e), json_mode=json_mode)
