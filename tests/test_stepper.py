"""
Tests for the interactive token stepper.
"""

import click
import pytest

from impc.cli.stepper import TokenStepper, KIND_COLORS, run_stepper
from impc.compiler.lexer import TokenKind
from impc.errors import ScanError


SOURCE = "main :: proc() { }"


class TestStepping:
    """Tests for TokenStepper.step()."""

    def test_first_token_scanned_on_start(self):
        stepper = TokenStepper(SOURCE)
        assert stepper.current_token.text == "main"
        assert stepper.step_count == 0
        assert len(stepper.history) == 1

    def test_step_advances(self):
        stepper = TokenStepper(SOURCE)
        token = stepper.step()
        assert token.kind == TokenKind.DOUBLE_COLON
        assert stepper.current_token is token
        assert stepper.step_count == 1

    def test_history_is_kept_by_stepper(self):
        stepper = TokenStepper(SOURCE)
        while stepper.step():
            pass
        assert [t.text for t in stepper.history] == [
            "main", "::", "proc", "(", ")", "{", "}", "",
        ]

    def test_step_after_eof(self):
        stepper = TokenStepper("a")
        stepper.step()
        assert stepper.finished
        assert stepper.step() is None
        assert stepper.step_count == 1
        assert len(stepper.history) == 2

    def test_scan_error_on_step(self):
        stepper = TokenStepper("a :")
        with pytest.raises(ScanError):
            stepper.step()

    def test_scan_error_on_start(self):
        with pytest.raises(ScanError):
            TokenStepper("?")


class TestRendering:
    """Tests for render() and status_line()."""

    def test_render_preserves_text(self):
        stepper = TokenStepper("a b")
        assert click.unstyle(stepper.render()) == "a b"

    def test_render_cursor_at_end(self):
        """At the end of input the cursor is drawn as an extra cell."""
        stepper = TokenStepper("a b")
        stepper.step()
        stepper.step()
        assert click.unstyle(stepper.render()) == "a b "

    def test_render_cursor_before_newline(self):
        stepper = TokenStepper("a\nb")
        assert click.unstyle(stepper.render()) == "a \nb"

    def test_render_styles_current_token(self):
        stepper = TokenStepper(SOURCE)
        rendered = stepper.render()
        assert click.style("m", fg=KIND_COLORS[TokenKind.IDENTIFIER], bold=True) in rendered

    def test_highlight_modes(self):
        stepper = TokenStepper(SOURCE)
        stepper.step()
        assert [t.text for t in stepper.highlighted()] == ["::"]
        assert stepper.toggle_highlight() is True
        assert [t.text for t in stepper.highlighted()] == ["main", "::"]
        assert stepper.toggle_highlight() is False

    def test_status_line(self):
        stepper = TokenStepper(SOURCE)
        assert stepper.status_line() == (
            "Step: 0, Token: main, Line: 1, Col: 5, Highlight: current"
        )

    def test_status_line_at_eof(self):
        stepper = TokenStepper("")
        assert "Token: (eof)" in stepper.status_line()


class TestKeyboardLoop:
    """Tests for run_stepper() key handling."""

    def _keys(self, monkeypatch, *keys):
        pressed = list(keys)

        def fake_getchar(echo=False):
            key = pressed.pop(0)
            if isinstance(key, type) and issubclass(key, BaseException):
                raise key()
            return key

        monkeypatch.setattr(click, "getchar", fake_getchar)
        monkeypatch.setattr(click, "clear", lambda: None)

    def test_ctrl_d_quits(self, monkeypatch):
        stepper = TokenStepper(SOURCE)
        self._keys(monkeypatch, "n", EOFError)
        run_stepper(stepper)
        assert stepper.step_count == 1

    def test_ctrl_c_quits(self, monkeypatch):
        stepper = TokenStepper(SOURCE)
        self._keys(monkeypatch, KeyboardInterrupt)
        run_stepper(stepper)
        assert stepper.step_count == 0

    def test_q_quits(self, monkeypatch):
        stepper = TokenStepper(SOURCE)
        self._keys(monkeypatch, "n", "n", "q")
        run_stepper(stepper)
        assert stepper.current_token.kind == TokenKind.PROC
