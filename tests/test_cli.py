"""
Tests for the impc command-line tool.
"""

from pathlib import Path

import click
import pytest
from click.testing import CliRunner

from impc.cli import impc as impc_cli
from impc.cli.impc import main
from impc.cli.errors import ExitCode
from impc.errors import ToolchainError


HELLO = "main :: proc() { foo() }\nfoo :: proc() { }\n"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "hello.imp"
    path.write_text(HELLO)
    return path


class TestCompileCommand:
    """Batch compilation."""

    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Compile a procedure-language program" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "impc" in result.output

    def test_asm_only(self, runner, source_file, tmp_path):
        out = tmp_path / "hello.asm"
        result = runner.invoke(main, ["-S", str(source_file), "-o", str(out)])
        assert result.exit_code == 0
        assert f"-> {out}" in result.output
        text = out.read_text()
        assert text.startswith("global _start\n")
        assert "main:\n" in text and "foo:\n" in text

    def test_default_output_name(self, runner):
        with runner.isolated_filesystem():
            Path("prog.imp").write_text(HELLO)
            result = runner.invoke(main, ["-S", "prog.imp"])
            assert result.exit_code == 0
            assert Path("output.asm").exists()

    def test_compile_and_link(self, runner, source_file, tmp_path, monkeypatch):
        calls = []

        def fake_link(asm_path, options):
            calls.append((asm_path, options.executable))
            return Path(options.executable)

        monkeypatch.setattr(impc_cli, "assemble_and_link", fake_link)
        out = tmp_path / "out.asm"
        exe = tmp_path / "prog"

        result = runner.invoke(main, [str(source_file), "-o", str(out), "-e", str(exe)])

        assert result.exit_code == 0
        assert calls == [(out, str(exe))]
        assert "Compilation successful" in result.output

    def test_toolchain_failure(self, runner, source_file, tmp_path, monkeypatch):
        def failing_link(asm_path, options):
            raise ToolchainError("ld failed", command=["ld"], return_code=1)

        monkeypatch.setattr(impc_cli, "assemble_and_link", failing_link)
        result = runner.invoke(main, [str(source_file), "-o", str(tmp_path / "o.asm")])

        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "ld failed" in result.output

    def test_parse_error(self, runner, tmp_path):
        source = tmp_path / "bad.imp"
        source.write_text("x :: pro(")
        out = tmp_path / "bad.asm"

        result = runner.invoke(main, ["-S", str(source), "-o", str(out)])

        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "1:6: error: Expected 'proc'" in result.output
        assert not out.exists()

    def test_scan_error(self, runner, tmp_path):
        source = tmp_path / "bad.imp"
        source.write_text("main : proc() { }")

        result = runner.invoke(main, ["-S", str(source), "-o", str(tmp_path / "o.asm")])

        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "Expected ':' after ':'" in result.output

    def test_missing_source(self, runner, tmp_path):
        result = runner.invoke(main, [str(tmp_path / "missing.imp")])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_unwritable_output(self, runner, source_file, tmp_path):
        out = tmp_path / "no_such_dir" / "out.asm"
        result = runner.invoke(main, ["-S", str(source_file), "-o", str(out)])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_warnings_reported(self, runner, tmp_path):
        source = tmp_path / "lib.imp"
        source.write_text("helper :: proc() { missing() }")

        result = runner.invoke(main, ["-S", str(source), "-o", str(tmp_path / "o.asm")])

        assert result.exit_code == 0
        assert "no definition of entry procedure 'main'" in result.output
        assert "'missing' is called but never defined" in result.output

    def test_verbose(self, runner, source_file, tmp_path):
        result = runner.invoke(main, ["-v", "-S", str(source_file), "-o", str(tmp_path / "o.asm")])
        assert result.exit_code == 0
        assert "Procedures: main, foo" in result.output


class TestStepCommand:
    """Interactive stepping driven by simulated key presses."""

    def test_step_and_quit(self, runner, source_file):
        result = runner.invoke(main, ["--step", str(source_file)], input="nnq")
        assert result.exit_code == 0
        assert "Step: 2, Token: proc" in result.output

    def test_step_to_end(self, runner, tmp_path):
        source = tmp_path / "tiny.imp"
        source.write_text("a")
        result = runner.invoke(main, ["--step", str(source)], input="nnn")
        assert result.exit_code == 0
        assert "Lexical analysis complete" in result.output
        assert "Step: 1, Token: (eof)" in result.output

    def test_toggle_highlight(self, runner, source_file):
        result = runner.invoke(main, ["-s", str(source_file)], input="nhq")
        assert result.exit_code == 0
        assert "Highlight: all" in result.output

    def test_step_does_not_compile(self, runner):
        with runner.isolated_filesystem():
            Path("p.imp").write_text(HELLO)
            result = runner.invoke(main, ["--step", "p.imp"], input="q")
            assert result.exit_code == 0
            assert not Path("output.asm").exists()

    def test_ctrl_d_exits_cleanly(self, runner, source_file, monkeypatch):
        def end_of_input(echo=False):
            raise EOFError()

        monkeypatch.setattr(click, "getchar", end_of_input)
        result = runner.invoke(main, ["--step", str(source_file)])
        assert result.exit_code == 0
        assert "Internal error" not in result.output

    def test_step_scan_error(self, runner, tmp_path):
        source = tmp_path / "bad.imp"
        source.write_text("a :")
        result = runner.invoke(main, ["--step", str(source)], input="n")
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "Expected ':' after ':'" in result.output
