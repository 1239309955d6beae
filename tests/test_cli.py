"""Tests for the shared CLI helpers in flagforge.cli."""

import json
from pathlib import Path

import pytest
import typer

from flagforge.cli import error_exit, json_print, load_flag_type, parse_bits

TOML = """\
[types.Permissions]
bits = "u8"

[types.Permissions.flags]
READ = 1
WRITE = 2
"""

# ---------------------------------------------------------------------------
# error_exit()
# ---------------------------------------------------------------------------


class TestErrorExit:
    def test_plain_stderr_and_exit(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(typer.Exit) as exc_info:
            error_exit("something broke")
        assert exc_info.value.exit_code == 1
        captured = capsys.readouterr()
        assert "something broke" in captured.err
        assert captured.out == ""

    def test_markup_is_escaped(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(typer.Exit):
            error_exit("no [types.X] table")
        assert "[types.X]" in capsys.readouterr().err

    def test_custom_exit_code(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(typer.Exit) as exc_info:
            error_exit("fatal", code=2)
        assert exc_info.value.exit_code == 2

    def test_json_mode_stdout(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(typer.Exit):
            error_exit("bad input", json_mode=True)
        captured = capsys.readouterr()
        assert json.loads(captured.out) == {"error": "bad input"}
        assert captured.err == ""


# ---------------------------------------------------------------------------
# json_print()
# ---------------------------------------------------------------------------


class TestJsonPrint:
    def test_dict_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        json_print({"type": "Permissions", "bits": 3})
        captured = capsys.readouterr()
        assert json.loads(captured.out) == {"type": "Permissions", "bits": 3}
        assert captured.err == ""

    def test_list_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        json_print(["READ", "WRITE"])
        assert json.loads(capsys.readouterr().out) == ["READ", "WRITE"]


# ---------------------------------------------------------------------------
# parse_bits()
# ---------------------------------------------------------------------------


class TestParseBits:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [("5", 5), ("0x1f", 31), ("0X1F", 31), ("0b101", 5), ("0o17", 15), (" 7 ", 7), ("0", 0)],
    )
    def test_valid(self, text: str, expected: int) -> None:
        assert parse_bits(text) == expected

    def test_invalid(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(typer.Exit):
            parse_bits("READ")
        assert "Invalid integer" in capsys.readouterr().err

    def test_negative(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(typer.Exit):
            parse_bits("-1", json_mode=True)
        assert "non-negative" in json.loads(capsys.readouterr().out)["error"]


# ---------------------------------------------------------------------------
# load_flag_type()
# ---------------------------------------------------------------------------


class TestLoadFlagType:
    def test_builds_type(self, tmp_path: Path) -> None:
        path = tmp_path / "flagforge.toml"
        path.write_text(TOML, encoding="utf-8")
        Permissions = load_flag_type("Permissions", path)
        assert Permissions.__name__ == "Permissions"
        assert Permissions.all().bits() == 3

    def test_unknown_type(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "flagforge.toml"
        path.write_text(TOML, encoding="utf-8")
        with pytest.raises(typer.Exit):
            load_flag_type("Nope", path, json_mode=True)
        error = json.loads(capsys.readouterr().out)["error"]
        assert error.startswith("Type 'Nope' not found")
        assert "Permissions" in error

    def test_missing_config(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(typer.Exit):
            load_flag_type("Permissions", tmp_path / "missing.toml", json_mode=True)
        assert "Config not found" in json.loads(capsys.readouterr().out)["error"]

    def test_invalid_definition(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "flagforge.toml"
        path.write_text('[types.T]\nbits = "u8"\n[types.T.flags]\nA = 0x100\n', encoding="utf-8")
        with pytest.raises(typer.Exit):
            load_flag_type("T", path, json_mode=True)
        assert "does not fit in u8" in json.loads(capsys.readouterr().out)["error"]
