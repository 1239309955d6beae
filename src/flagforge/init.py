"""Initialize a flagforge project.

Usage:
    flagforge init [--output PATH] [--force]
"""

import json
from pathlib import Path

import typer

from flagforge.cli import error_exit
from flagforge.config import CONFIG_FILENAME
from flagforge.utils import atomic_write_text

app = typer.Typer(
    help="Create a starter flagforge.toml.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Examples:[/bold]

flagforge init                                   Write flagforge.toml here

flagforge init --output src/myproj/flags.py      Choose the generated module path

flagforge init --force                           Overwrite an existing file

[dim]Edit the \\[types.*] tables, then run 'flagforge generate'.[/dim]""",
)

DEFAULT_FLAGFORGE_TOML = """# flagforge project configuration
# Each [types.<Name>] table declares one flag type.  Flags are listed in
# declaration order, which is also iteration and formatting order.

[output]
path = {output}                      # generated module, relative to this file
header = {header}

[types.Permissions]
bits = "u8"                          # u8 | u16 | u32 | u64 | u128
doc = "File permission bits."

[types.Permissions.flags]
READ = 0b001
WRITE = 0b010
EXEC = 0b100
RW = ["READ", "WRITE"]               # union of earlier flags
"""


@app.callback(invoke_without_command=True)
def main(
    output: str = typer.Option("flags.py", "--output", "-o", help="Generated module path."),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing flagforge.toml."),
) -> None:
    """Write a starter flagforge.toml in the current directory."""
    cwd = Path.cwd()
    toml_path = cwd / CONFIG_FILENAME

    if toml_path.exists() and not force:
        error_exit(f"A {CONFIG_FILENAME} already exists in {cwd} (use --force to overwrite)")

    # JSON string literals are valid TOML basic strings.
    content = DEFAULT_FLAGFORGE_TOML.format(
        output=json.dumps(output, ensure_ascii=False),
        header=json.dumps(f"Flag types for {cwd.name}.", ensure_ascii=False),
    )
    atomic_write_text(toml_path, content)
    typer.secho(f"Created {toml_path.name}", fg=typer.colors.GREEN)
    typer.echo("Next: edit the [types.*] tables, then run 'flagforge generate'.")


def main_entry() -> None:
    """Run the Typer CLI application."""
    app()


if __name__ == "__main__":
    main_entry()
