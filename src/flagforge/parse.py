"""Parse flag text into raw bits.

Usage:
    flagforge parse Permissions "READ | EXEC"     # -> 0x5
    flagforge parse Permissions "READ | 0x80" --json
"""

from pathlib import Path

import typer

from flagforge.cli import ConfigOption, JsonOption, error_exit, json_print, load_flag_type
from flagforge.parser import ParseError

app = typer.Typer(
    help="Parse flag text into raw bits.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Examples:[/bold]

flagforge parse Permissions "READ | EXEC"      0x5

flagforge parse Permissions "RW | 0x80"        0x83

flagforge parse Permissions "READ" --json      Machine-readable result

[dim]Grammar: NAME or 0xHEX tokens joined by '|'; empty text is the empty set.[/dim]""",
)


@app.callback(invoke_without_command=True)
def main(
    type_name: str = typer.Argument(..., help="Flag type name from flagforge.toml"),
    text: str = typer.Argument(..., help='Flag text, e.g. "READ | WRITE | 0x80"'),
    json_output: bool = JsonOption,
    config: Path | None = ConfigOption,
) -> None:
    """Print the raw bits that TEXT denotes for TYPE_NAME."""
    flags_type = load_flag_type(type_name, config, json_mode=json_output)

    try:
        value = flags_type.from_str(text)
    except ParseError as e:
        if json_output:
            json_print(
                {
                    "error": str(e),
                    "kind": e.kind.value,
                    "token": e.got,
                    "position": e.position,
                }
            )
            raise typer.Exit(code=1) from None
        error_exit(f"{e}\n  {text}\n  {' ' * e.position}^")

    if json_output:
        json_print(
            {
                "type": type_name,
                "bits": value.bits(),
                "hex": f"{value.bits():#x}",
                "text": str(value),
                "known": flags_type.from_bits(value.bits()) is not None,
            }
        )
    else:
        print(f"{value.bits():#x}")


def main_entry() -> None:
    """Run the Typer CLI application."""
    app()


if __name__ == "__main__":
    main_entry()
