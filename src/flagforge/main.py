"""main.py – Umbrella CLI entry point for flagforge.

Lazily imports and registers every subcommand module so that a broken or
missing optional dependency in one command doesn't prevent the rest of the
CLI from loading.  Each module exposes a Typer ``app`` with a single
``main`` callback, registered here as a flat command.
"""

import importlib
import sys
from collections.abc import Callable

import typer

app = typer.Typer(
    help="Typesafe bitmask flag sets: declare, generate, format and parse.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Typical workflow:[/bold]
  flagforge init                           Create flagforge.toml
  flagforge show Permissions               Inspect a declared type
  flagforge generate                       Write the generated Python module
  flagforge format Permissions 0b101       Raw bits -> "READ | EXEC"
  flagforge parse Permissions "READ|EXEC"  Text -> raw bits

[dim]All subcommands read flag declarations from flagforge.toml.
Run 'flagforge <cmd> --help' for details.[/dim]""",
)

# (command name, module, help)
_COMMANDS: list[tuple[str, str, str]] = [
    ("init", "flagforge.init", "Create a starter flagforge.toml."),
    ("generate", "flagforge.generate", "Generate a Python module from flagforge.toml."),
    ("show", "flagforge.show", "Show the declared flags of a type."),
    ("format", "flagforge.fmt", "Format a raw integer as flag text."),
    ("parse", "flagforge.parse", "Parse flag text into raw bits."),
]


def _make_stub_cmd(mod_name: str, err: ImportError) -> Callable[[], None]:
    """Create a stub command function that reports a missing dependency."""

    def _stub() -> None:
        print(f"Error: could not load '{mod_name}': {err}", file=sys.stderr)
        raise typer.Exit(code=1)

    return _stub


for _name, _module, _help in _COMMANDS:
    try:
        _mod = importlib.import_module(_module)
        _epilog = getattr(_mod.app.info, "epilog", None)
        if not isinstance(_epilog, str):
            _epilog = None
        app.command(name=_name, help=_help, epilog=_epilog)(_mod.main)
    except ImportError as _exc:
        app.command(name=_name, help=f"[unavailable] {_help}")(_make_stub_cmd(_module, _exc))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
