"""
Tests for the isagen Command-Line Interface
===========================================

Drives the click group through click.testing.CliRunner.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from isagen import __version__
from isagen.cli.errors import ExitCode
from isagen.cli.isagen import main

from conftest import SMALL_STANDARD_TABLE


DUPLICATE_TABLE = "\n".join([
    "operation;description;addressing;assembler;opc;bytes;cycles",
    "LSR;Shift One Bit Right;accumulator;LSR A;4A;1;2",
    "ROL;Rotate One Bit Left;accumulator;ROL A;4A;1;2",
    "",
])


@pytest.fixture
def runner(monkeypatch):
    """Fixture: a CliRunner with no ISAGEN_* configuration in the environment."""
    for name in ("ISAGEN_VARIANT", "ISAGEN_DELIMITER", "ISAGEN_ENCODING", "ISAGEN_SHARE_IDENTIFIERS"):
        monkeypatch.delenv(name, raising=False)
    return CliRunner()


class TestMainGroup:
    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ("compile", "stubs", "show"):
            assert command in result.output


class TestCompileCommand:
    """Tests for 'isagen compile'."""

    def test_writes_module_and_stubs(self, runner):
        with runner.isolated_filesystem():
            Path("table.txt").write_text(SMALL_STANDARD_TABLE)
            result = runner.invoke(
                main, ["compile", "table.txt", "-o", "dispatch.py", "--stubs", "stubs.py"]
            )

            assert result.exit_code == 0, result.output
            assert "Compiled 6 opcodes from table.txt" in result.output
            assert "TABLE = DispatchTable.from_entries(" in Path("dispatch.py").read_text()
            assert "def lda_load_accumulator(entry, context, operand):" in Path("stubs.py").read_text()

    def test_stdout_when_no_output(self, runner):
        with runner.isolated_filesystem():
            Path("table.txt").write_text(SMALL_STANDARD_TABLE)
            result = runner.invoke(main, ["compile", "table.txt", "--format", "listing"])

            assert result.exit_code == 0, result.output
            assert "$02: ---  (undefined)" in result.output

    def test_json_output(self, runner):
        with runner.isolated_filesystem():
            Path("table.txt").write_text(SMALL_STANDARD_TABLE)
            result = runner.invoke(main, ["compile", "table.txt", "-f", "json", "-o", "out.json"])

            assert result.exit_code == 0, result.output
            assert json.loads(Path("out.json").read_text())["defined"] == 6

    def test_implemented_handlers_not_stubbed(self, runner):
        with runner.isolated_filesystem():
            Path("table.txt").write_text(SMALL_STANDARD_TABLE)
            Path("handlers.py").write_text(
                "def lda_load_accumulator(entry, cpu, operand):\n    return 2\n"
            )
            result = runner.invoke(
                main,
                ["compile", "table.txt", "-o", "dispatch.py", "--stubs", "stubs.py", "--handlers", "handlers.py"],
            )

            assert result.exit_code == 0, result.output
            stubs = Path("stubs.py").read_text()
            assert "def lda_load_accumulator" not in stubs
            assert "def nop_no_operation" in stubs

    def test_failed_compile_leaves_no_output(self, runner):
        with runner.isolated_filesystem():
            Path("table.txt").write_text(DUPLICATE_TABLE)
            result = runner.invoke(
                main, ["compile", "table.txt", "-o", "dispatch.py", "--stubs", "stubs.py"]
            )

            assert result.exit_code == ExitCode.BUILD_ERROR
            assert "table.txt:3: error: duplicate opcode $4A (LSR, ROL)" in result.output
            assert not Path("dispatch.py").exists()
            assert not Path("stubs.py").exists()
            assert sorted(p.name for p in Path(".").iterdir()) == ["table.txt"]

    def test_failed_compile_keeps_previous_output(self, runner):
        with runner.isolated_filesystem():
            Path("table.txt").write_text(DUPLICATE_TABLE)
            Path("dispatch.py").write_text("previous\n")
            result = runner.invoke(main, ["compile", "table.txt", "-o", "dispatch.py"])

            assert result.exit_code == ExitCode.BUILD_ERROR
            assert Path("dispatch.py").read_text() == "previous\n"

    def test_invalid_mode_reported(self, runner):
        with runner.isolated_filesystem():
            Path("table.txt").write_text(
                "header\nLDA;Load Accumulator;indirect,Z;LDA (oper),Z;B2;2;5\n"
            )
            result = runner.invoke(main, ["compile", "table.txt"])

            assert result.exit_code == ExitCode.BUILD_ERROR
            assert "invalid addressing mode 'indirect,Z'" in result.output

    def test_bundled_extended(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["compile", "--bundled", "--extended", "-o", "dispatch.py"])

            assert result.exit_code == 0, result.output
            assert "Compiled 256 opcodes" in result.output
            assert "Category.ILLEGAL" in Path("dispatch.py").read_text()

    def test_bundled_extended_listing(self, runner):
        result = runner.invoke(main, ["compile", "--bundled", "--extended", "-f", "listing"])

        assert result.exit_code == 0, result.output
        assert "; extended table: 256 defined, 0 undefined" in result.output
        assert "$02: JAM" in result.output

    def test_extended_from_environment(self, runner, monkeypatch):
        monkeypatch.setenv("ISAGEN_VARIANT", "extended")
        result = runner.invoke(main, ["compile", "--bundled", "-f", "json"])

        assert result.exit_code == 0, result.output
        assert "Compiled 256 opcodes" in result.output

    def test_missing_input(self, runner):
        result = runner.invoke(main, ["compile"])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_input_and_bundled_conflict(self, runner):
        with runner.isolated_filesystem():
            Path("table.txt").write_text(SMALL_STANDARD_TABLE)
            result = runner.invoke(main, ["compile", "table.txt", "--bundled"])
            assert result.exit_code == ExitCode.INVALID_ARGS

    def test_undecodable_table_is_a_table_error(self, runner):
        with runner.isolated_filesystem():
            Path("table.txt").write_bytes(
                b"header\nLDA;Load \xff Accumulator;immediate;LDA #oper;A9;2;2\n"
            )
            result = runner.invoke(main, ["compile", "table.txt", "-o", "dispatch.py"])

            assert result.exit_code == ExitCode.BUILD_ERROR
            assert "table.txt:2: error: malformed row: cannot decode byte 0xFF" in result.output
            assert not Path("dispatch.py").exists()

    def test_bundled_ignores_environment_delimiter(self, runner):
        result = runner.invoke(main, ["show", "--bundled"], env={"ISAGEN_DELIMITER": ","})

        assert result.exit_code == 0, result.output
        assert "Defined:      151" in result.output

    def test_bundled_rejects_other_delimiter(self, runner):
        result = runner.invoke(main, ["compile", "--bundled", "-d", ","])

        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "--bundled" in result.output

    def test_bundled_accepts_its_own_delimiter(self, runner):
        result = runner.invoke(main, ["compile", "--bundled", "-d", ";", "-f", "listing"])
        assert result.exit_code == 0, result.output

    def test_bad_delimiter(self, runner):
        result = runner.invoke(main, ["compile", "--bundled", "-d", "::"])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_unloadable_registry(self, runner):
        result = runner.invoke(main, ["compile", "--bundled", "--registry", "no_such_module_xyz:HANDLERS"])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "no_such_module_xyz" in result.output


class TestStubsCommand:
    """Tests for 'isagen stubs'."""

    def test_writes_stubs(self, runner):
        with runner.isolated_filesystem():
            Path("table.txt").write_text(SMALL_STANDARD_TABLE)
            Path("implemented.txt").write_text("nop_no_operation\n")
            result = runner.invoke(
                main, ["stubs", "table.txt", "--implemented", "implemented.txt", "-o", "stubs.py"]
            )

            assert result.exit_code == 0, result.output
            assert "Wrote 4 placeholders to stubs.py" in result.output
            assert "def nop_no_operation" not in Path("stubs.py").read_text()

    def test_regeneration_is_identical(self, runner):
        with runner.isolated_filesystem():
            Path("table.txt").write_text(SMALL_STANDARD_TABLE)
            runner.invoke(main, ["stubs", "table.txt", "-o", "first.py"])
            runner.invoke(main, ["stubs", "table.txt", "-o", "second.py"])

            assert Path("first.py").read_text() == Path("second.py").read_text()


class TestShowCommand:
    """Tests for 'isagen show'."""

    def test_summary(self, runner):
        result = runner.invoke(main, ["show", "--bundled", "--extended"])

        assert result.exit_code == 0, result.output
        assert "Defined:      256" in result.output
        assert "Illegal:      105" in result.output
        assert "Implemented:  0/256 opcodes" in result.output

    @pytest.mark.parametrize("opcode", ["A9", "$A9", "0xa9"])
    def test_single_opcode(self, runner, opcode):
        result = runner.invoke(main, ["show", "--bundled", "--opcode", opcode])

        assert result.exit_code == 0, result.output
        assert result.output.startswith("$A9: LDA")
        assert "(placeholder)" in result.output

    def test_undefined_opcode(self, runner):
        result = runner.invoke(main, ["show", "--bundled", "--opcode", "02"])
        assert result.exit_code == 0
        assert "$02: undefined" in result.output

    def test_bad_opcode(self, runner):
        result = runner.invoke(main, ["show", "--bundled", "--opcode", "zz"])
        assert result.exit_code == ExitCode.INVALID_ARGS
