"""Format raw bits as flag text.

Usage:
    flagforge format Permissions 0b101        # -> READ | EXEC
    flagforge format Permissions 0x88         # -> 0x88 (unknown bits kept)
    flagforge format Permissions 0x88 --truncate
    flagforge format Permissions 0x88 --strict
"""

from pathlib import Path

import typer

from flagforge.cli import ConfigOption, JsonOption, error_exit, json_print, load_flag_type, parse_bits

app = typer.Typer(
    help="Format a raw integer as flag text.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Examples:[/bold]

flagforge format Permissions 5               READ | EXEC

flagforge format Permissions 0x0d            READ | EXEC | 0x8

flagforge format Permissions 0x0d --truncate READ | EXEC

flagforge format Permissions 0x0d --strict   error: unknown bits

[dim]BITS accepts decimal, 0x, 0o and 0b literals.[/dim]""",
)


@app.callback(invoke_without_command=True)
def main(
    type_name: str = typer.Argument(..., help="Flag type name from flagforge.toml"),
    bits: str = typer.Argument(..., help="Raw bits (decimal, 0x.., 0o.. or 0b..)"),
    truncate: bool = typer.Option(False, "--truncate", help="Drop bits not covered by a flag."),
    strict: bool = typer.Option(False, "--strict", help="Fail if any bit is not covered by a flag."),
    json_output: bool = JsonOption,
    config: Path | None = ConfigOption,
) -> None:
    """Print the text form of BITS for TYPE_NAME."""
    if truncate and strict:
        error_exit("--truncate and --strict are mutually exclusive", json_mode=json_output)

    flags_type = load_flag_type(type_name, config, json_mode=json_output)
    raw = parse_bits(bits, json_mode=json_output)
    if not flags_type.BITS.fits(raw):
        error_exit(f"{raw:#x} does not fit in {flags_type.BITS.name}", json_mode=json_output)

    if strict:
        value = flags_type.from_bits(raw)
        if value is None:
            unknown = raw & ~flags_type.from_bits_truncate(raw).bits()
            error_exit(
                f"{raw:#x} has bits not covered by a {type_name} flag ({unknown:#x})",
                json_mode=json_output,
            )
    elif truncate:
        value = flags_type.from_bits_truncate(raw)
    else:
        value = flags_type.from_bits_retain(raw)

    if json_output:
        names = value.iter_names()
        json_print(
            {
                "type": type_name,
                "bits": value.bits(),
                "text": str(value),
                "flags": [name for name, _ in names],
                "unknown": names.remaining().bits(),
            }
        )
    else:
        print(str(value))


def main_entry() -> None:
    """Run the Typer CLI application."""
    app()


if __name__ == "__main__":
    main_entry()
