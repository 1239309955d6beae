"""Generate a Python module from flagforge.toml.

Usage:
    flagforge generate                       # write [output].path
    flagforge generate --type Permissions    # only one type
    flagforge generate --output other.py     # custom output path
    flagforge generate --stdout              # print instead of writing
    flagforge generate --check               # exit 1 if the module is stale
"""

from pathlib import Path

import typer

from flagforge.cli import ConfigOption, JsonOption, error_exit, get_config, json_print
from flagforge.codegen import render_module
from flagforge.utils import atomic_write_text

_EPILOG = """\
[bold]Examples:[/bold]

flagforge generate                          Write the module named in \\[output].path

flagforge generate -T Permissions           Generate a single type

flagforge generate --stdout                 Print the module to stdout

flagforge generate --check                  Fail if the generated file is out of date (CI)

flagforge generate --json                   Machine-readable summary

[dim]Reads type declarations from flagforge.toml.[/dim]"""

app = typer.Typer(
    help="Generate a Python module declaring the configured flag types.",
    rich_markup_mode="rich",
    epilog=_EPILOG,
)


@app.callback(invoke_without_command=True)
def main(
    type_names: list[str] | None = typer.Option(
        None, "--type", "-T", help="Type to generate (repeatable; default: all)."
    ),
    output: Path | None = typer.Option(None, "--output", "-o", help="Override [output].path."),
    stdout: bool = typer.Option(False, "--stdout", help="Print the module instead of writing it."),
    check: bool = typer.Option(
        False, "--check", help="Don't write; exit 1 if the output file differs."
    ),
    json_output: bool = JsonOption,
    config: Path | None = ConfigOption,
) -> None:
    """Render every declared flag type (or the selected ones) as Python source."""
    try:
        cfg = get_config(config)
        specs = [cfg.get_type(n) for n in type_names] if type_names else list(cfg.types.values())
    except KeyError as e:
        error_exit(str(e.args[0]) if e.args else str(e), json_mode=json_output)
    except (OSError, ValueError) as e:
        error_exit(str(e), json_mode=json_output)

    source = render_module(specs, header=cfg.header, source=cfg.config_path.name)
    out_path = output if output is not None else cfg.output_path

    if stdout:
        print(source, end="")
        return

    summary = {
        "output": str(out_path),
        "types": [s.name for s in specs],
        "flags": sum(len(s.flags) for s in specs),
    }

    if check:
        current = out_path.read_text(encoding="utf-8") if out_path.exists() else None
        up_to_date = current == source
        if json_output:
            json_print({**summary, "up_to_date": up_to_date})
        elif up_to_date:
            typer.secho(f"{out_path} is up to date", fg=typer.colors.GREEN)
        else:
            typer.secho(f"{out_path} is out of date; run 'flagforge generate'", fg=typer.colors.RED, err=True)
        if not up_to_date:
            raise typer.Exit(code=1)
        return

    try:
        atomic_write_text(out_path, source)
    except OSError as e:
        error_exit(f"Could not write {out_path}: {e}", json_mode=json_output)

    if json_output:
        json_print(summary)
    else:
        typer.secho(
            f"Wrote {out_path} ({len(specs)} types, {summary['flags']} flags)",
            fg=typer.colors.GREEN,
        )


def main_entry() -> None:
    """Run the Typer CLI application."""
    app()


if __name__ == "__main__":
    main_entry()
