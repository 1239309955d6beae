"""Show the flag table of a configured type.

Usage:
    flagforge show Permissions
    flagforge show Permissions --json
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from flagforge.cli import ConfigOption, JsonOption, json_print, load_flag_type
from flagforge.flags import BitFlags

app = typer.Typer(
    help="Show the declared flags of a type.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Examples:[/bold]

flagforge show Permissions          Table of names, hex and binary values

flagforge show Permissions --json   Machine-readable flag table""",
)


def flag_rows(flags_type: type[BitFlags]) -> list[dict[str, object]]:
    """One dict per declared flag, in declaration order."""
    width = flags_type.BITS.width
    return [
        {
            "name": flag.name,
            "value": flag.value,
            "hex": f"0x{flag.value:0{width // 4}x}",
            "binary": f"0b{flag.value:0{width}b}",
        }
        for flag in flags_type.FLAGS
    ]


def _render(console: Console, flags_type: type[BitFlags]) -> None:
    tbl = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    tbl.add_column("Flag")
    tbl.add_column("Hex", justify="right", style="cyan")
    tbl.add_column("Binary", justify="right", style="dim")

    for row in flag_rows(flags_type):
        name = str(row["name"])
        style = "yellow" if row["value"] == 0 else ""
        tbl.add_row(Text(name, style=style), str(row["hex"]), str(row["binary"]))

    all_flags = flags_type.all()
    subtitle = f"{len(flags_type.FLAGS)} flags  ·  all = {all_flags.bits():#x}"
    title = Text(f"  {flags_type.__name__}: {flags_type.BITS.name}  ", style="bold white on blue")
    console.print(Panel(tbl, title=title, subtitle=subtitle, border_style="blue"))


@app.callback(invoke_without_command=True)
def main(
    type_name: str = typer.Argument(..., help="Flag type name from flagforge.toml"),
    json_output: bool = JsonOption,
    config: Path | None = ConfigOption,
) -> None:
    """Print the flags declared for TYPE_NAME."""
    flags_type = load_flag_type(type_name, config, json_mode=json_output)

    if json_output:
        json_print(
            {
                "type": flags_type.__name__,
                "bits": flags_type.BITS.name,
                "all": flags_type.all().bits(),
                "flags": flag_rows(flags_type),
            }
        )
        return

    _render(Console(), flags_type)


def main_entry() -> None:
    """Run the Typer CLI application."""
    app()


if __name__ == "__main__":
    main_entry()
