"""
Interactive Token Stepper
=========================

A terminal viewer that replays the scanner one token at a time. The
source is printed with the scanner cursor shown in reverse video and the
current token (or, in "highlight all" mode, every token seen so far)
colored by kind.

The scanner itself keeps no history; the stepper records each token it
pulls so it can highlight earlier tokens.

Keys
----
| Key              | Action                              |
|------------------|-------------------------------------|
| n, j, f, space   | Scan the next token                 |
| h                | Toggle current/all token highlight  |
| q, Ctrl-C, Ctrl-D| Quit                                |
"""

from typing import Optional

import click

from impc.compiler.lexer import Scanner, Token, TokenKind

# Foreground color per token kind
KIND_COLORS: dict[TokenKind, str] = {
    TokenKind.IDENTIFIER: "cyan",
    TokenKind.DOUBLE_COLON: "magenta",
    TokenKind.PROC: "yellow",
    TokenKind.LPAREN: "green",
    TokenKind.RPAREN: "green",
    TokenKind.LBRACE: "blue",
    TokenKind.RBRACE: "blue",
}

STEP_KEYS = ("n", "j", "f", " ")
HIGHLIGHT_KEY = "h"
QUIT_KEYS = ("q",)


class TokenStepper:
    """
    Steps a Scanner through a source text one token at a time.

    The first token is scanned on construction, so ``current_token`` is
    always set.

    Attributes:
        scanner: The live scanner
        history: Every token scanned so far, in order
        step_count: Number of successful steps after the first token
        highlight_all: Highlight all history instead of the current token
    """

    def __init__(self, source: str, filename: str = "<input>"):
        self.scanner = Scanner(source, filename)
        self.history: list[Token] = []
        self.step_count = 0
        self.highlight_all = False
        self._pull()

    @property
    def current_token(self) -> Token:
        return self.scanner.current_token

    @property
    def finished(self) -> bool:
        """True once the scanner has produced EOF."""
        return self.scanner.at_eof

    def _pull(self) -> Token:
        token = self.scanner.next_token()
        self.history.append(token)
        return token

    def step(self) -> Optional[Token]:
        """
        Scan the next token.

        Returns:
            The new token, or None if EOF was already reached

        Raises:
            ScanError: If the next token is malformed
        """
        if self.finished:
            return None
        token = self._pull()
        self.step_count += 1
        return token

    def toggle_highlight(self) -> bool:
        self.highlight_all = not self.highlight_all
        return self.highlight_all

    def highlighted(self) -> list[Token]:
        """Tokens whose spans are currently highlighted."""
        if self.highlight_all:
            return list(self.history)
        return [self.current_token]

    def render(self) -> str:
        """Return the source text styled for the terminal."""
        source = self.scanner.source
        cursor = self.scanner.position.offset

        colors: dict[int, str] = {}
        for token in self.highlighted():
            color = KIND_COLORS.get(token.kind)
            if color is None:
                continue
            start, end = token.span
            for index in range(start, end):
                colors[index] = color

        parts = []
        for index, char in enumerate(source):
            if index == cursor:
                if char == "\n":
                    # Cursor at the end of a line
                    parts.append(click.style(" ", reverse=True))
                    parts.append(char)
                else:
                    parts.append(click.style(char, reverse=True))
            elif index in colors and char != "\n":
                parts.append(click.style(char, fg=colors[index], bold=True))
            else:
                parts.append(char)

        if cursor >= len(source):
            parts.append(click.style(" ", reverse=True))

        return "".join(parts)

    def status_line(self) -> str:
        """Step count, current token and cursor position."""
        position = self.scanner.position
        token = self.current_token
        text = token.text if token.text else "(eof)"
        mode = "all" if self.highlight_all else "current"
        return (
            f"Step: {self.step_count}, Token: {text}, "
            f"Line: {position.row}, Col: {position.column}, Highlight: {mode}"
        )


def run_stepper(stepper: TokenStepper) -> None:
    """
    Drive a TokenStepper from the keyboard until the user quits.

    Raises:
        ScanError: If a step hits malformed input
    """
    while True:
        click.clear()
        click.echo(stepper.render())
        click.echo()
        click.echo(stepper.status_line())
        if stepper.finished:
            click.echo("Lexical analysis complete")

        try:
            key = click.getchar()
        except (EOFError, KeyboardInterrupt):
            # Ctrl-D and Ctrl-C on a terminal
            return
        if not key or key in QUIT_KEYS:
            return
        if key in STEP_KEYS:
            stepper.step()
        elif key == HIGHLIGHT_KEY:
            stepper.toggle_highlight()
