"""
Procedure Language Scanner
==========================

This module implements the scanner (lexer) for the procedure language.
It converts source text into classified tokens, one token per call to
``Scanner.next_token()``, so the parser can pull tokens on demand and an
interactive viewer can step through the source one token at a time.

Token Categories
----------------
| Kind         | Lexeme                         |
|--------------|--------------------------------|
| IDENTIFIER   | [A-Za-z_][A-Za-z0-9_]*         |
| PROC         | proc                           |
| DOUBLE_COLON | ::                             |
| LPAREN       | (                              |
| RPAREN       | )                              |
| LBRACE       | {                              |
| RBRACE       | }                              |
| EOF          | (empty, at the final position) |

Whitespace (space, tab, newline, carriage return) separates tokens and is
otherwise ignored. There are no comments.

Example Usage
-------------
>>> from impc.compiler.lexer import Scanner
>>> scanner = Scanner('main :: proc() { }', "test.imp")
>>> for token in scanner.tokenize():
...     print(token)
Token(IDENTIFIER, 'main', 1:1)
Token(DOUBLE_COLON, '::', 1:6)
Token(PROC, 'proc', 1:9)
Token(LPAREN, '(', 1:13)
Token(RPAREN, ')', 1:14)
Token(LBRACE, '{', 1:16)
Token(RBRACE, '}', 1:18)
Token(EOF, 1:19)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional
import logging
import string

from impc.errors import (
    SourceLocation,
    UnexpectedCharacterError,
    IncompleteDoubleColonError,
    LexemeTooLongError,
)

logger = logging.getLogger(__name__)

# Longest identifier the scanner accepts
MAX_LEXEME_LENGTH = 255


# =============================================================================
# Token Kind Enumeration
# =============================================================================

class TokenKind(Enum):
    """Token kinds of the procedure language."""

    IDENTIFIER = auto()     # Procedure names
    DOUBLE_COLON = auto()   # ::
    PROC = auto()           # proc
    LPAREN = auto()         # (
    RPAREN = auto()         # )
    LBRACE = auto()         # {
    RBRACE = auto()         # }
    EOF = auto()            # End of input


# Map keyword strings to their token kinds
KEYWORDS: dict[str, TokenKind] = {
    "proc": TokenKind.PROC,
}

# Single character tokens
SINGLE_CHAR_TOKENS: dict[str, TokenKind] = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
}

# Printable form of each kind, used in parser diagnostics
KIND_DESCRIPTIONS: dict[TokenKind, str] = {
    TokenKind.IDENTIFIER: "identifier",
    TokenKind.DOUBLE_COLON: "'::'",
    TokenKind.PROC: "'proc'",
    TokenKind.LPAREN: "'('",
    TokenKind.RPAREN: "')'",
    TokenKind.LBRACE: "'{'",
    TokenKind.RBRACE: "'}'",
    TokenKind.EOF: "end of file",
}


# =============================================================================
# Position and Token Data Classes
# =============================================================================

@dataclass(frozen=True)
class Position:
    """
    A point in the source text.

    Attributes:
        row: Line number (1-indexed)
        column: Column number (1-indexed)
        offset: Character offset from the start of the source (0-indexed)
    """
    row: int = 1
    column: int = 1
    offset: int = 0


@dataclass(frozen=True)
class Token:
    """
    A single token from the source.

    Attributes:
        kind: The TokenKind classification
        text: The exact scanned characters ("" for EOF)
        position: Where the token starts
        end: Offset one past the token's last character
        filename: Name of the source file
    """
    kind: TokenKind
    text: str
    position: Position
    end: int
    filename: str = "<input>"

    def __repr__(self) -> str:
        """Format token for debugging output."""
        where = f"{self.position.row}:{self.position.column}"
        if self.text:
            return f"Token({self.kind.name}, {self.text!r}, {where})"
        return f"Token({self.kind.name}, {where})"

    @property
    def span(self) -> tuple[int, int]:
        """Half-open offset range ``(start, end)`` covered by this token."""
        return (self.position.offset, self.end)

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.position.row, self.position.column)

    def describe(self) -> str:
        """Short human readable form used in error hints."""
        if self.kind == TokenKind.EOF:
            return KIND_DESCRIPTIONS[TokenKind.EOF]
        return repr(self.text)


# =============================================================================
# Scanner Implementation
# =============================================================================

class Scanner:
    """
    Pull-style scanner for the procedure language.

    Each call to ``next_token()`` skips whitespace, scans exactly one token,
    stores it as ``current_token`` and returns it. Once the end of input is
    reached every further call returns an EOF token at the same position.

    The scanner keeps no token history. Consumers that want to look back at
    earlier tokens (for example to highlight them) must record them.

    Usage:
        scanner = Scanner(source_text, filename)
        token = scanner.next_token()

    Attributes:
        source: The source text being scanned (never modified)
        filename: Name of the source file (for error reporting)
        current_token: The most recently produced token, or None
    """

    IDENT_START = string.ascii_letters + "_"
    IDENT_CHARS = string.ascii_letters + string.digits + "_"
    WHITESPACE = " \t\n\r"

    def __init__(
        self,
        source: str,
        filename: str = "<input>",
        max_lexeme_length: int = MAX_LEXEME_LENGTH,
    ):
        """
        Initialize the scanner with source text.

        Args:
            source: The source code to scan
            filename: Name of the source file (for error messages)
            max_lexeme_length: Longest identifier accepted
        """
        self.source = source
        self.filename = filename
        self.max_lexeme_length = max_lexeme_length
        self.current_token: Optional[Token] = None

        self._pos = 0
        self._row = 1
        self._column = 1
        self._line_start_pos = 0

    @property
    def position(self) -> Position:
        """The live cursor position."""
        return Position(self._row, self._column, self._pos)

    @property
    def at_eof(self) -> bool:
        """True once an EOF token has been produced."""
        return self.current_token is not None and self.current_token.kind == TokenKind.EOF

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens until, and including, the single EOF token.

        Raises:
            ScanError: If the source cannot be tokenized
        """
        while True:
            token = self.next_token()
            yield token
            if token.kind == TokenKind.EOF:
                return

    def next_token(self) -> Token:
        """
        Scan and return the next token, making it the current token.

        Raises:
            ScanError: On a malformed '::' or an unrecognized character
        """
        self._skip_whitespace()

        start = self.position
        if self._at_end():
            token = self._make_token(TokenKind.EOF, "", start)
        else:
            token = self._scan_token(start)

        self.current_token = token
        return token

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self) -> str:
        """Current character, or empty string past the end of source."""
        if self._pos >= len(self.source):
            return ""
        return self.source[self._pos]

    def _advance(self) -> str:
        """Consume the current character, updating row and column."""
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._row += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    def _skip_whitespace(self) -> None:
        while not self._at_end() and self._peek() in self.WHITESPACE:
            self._advance()

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _make_token(self, kind: TokenKind, text: str, start: Position) -> Token:
        return Token(
            kind=kind,
            text=text,
            position=start,
            end=self._pos,
            filename=self.filename,
        )

    def _scan_token(self, start: Position) -> Token:
        char = self._peek()

        if char in self.IDENT_START:
            return self._scan_identifier(start)

        if char == ":":
            return self._scan_double_colon(start)

        if char in SINGLE_CHAR_TOKENS:
            self._advance()
            return self._make_token(SINGLE_CHAR_TOKENS[char], char, start)

        raise UnexpectedCharacterError(
            char,
            self._location(start),
            self._current_line(),
        )

    def _scan_identifier(self, start: Position) -> Token:
        """
        Scan an identifier or the 'proc' keyword.

        Raises:
            LexemeTooLongError: If the identifier is longer than the limit
        """
        chars = []
        while self._peek() and self._peek() in self.IDENT_CHARS:
            if len(chars) == self.max_lexeme_length:
                raise LexemeTooLongError(
                    len(chars) + 1,
                    self.max_lexeme_length,
                    self._location(start),
                    self._current_line(),
                )
            chars.append(self._advance())

        name = "".join(chars)
        kind = KEYWORDS.get(name, TokenKind.IDENTIFIER)
        return self._make_token(kind, name, start)

    def _scan_double_colon(self, start: Position) -> Token:
        """
        Scan '::'. A lone ':' is an error reported at its own position.
        """
        self._advance()
        if self._peek() != ":":
            raise IncompleteDoubleColonError(
                self._location(start),
                self._current_line(),
            )
        self._advance()
        return self._make_token(TokenKind.DOUBLE_COLON, "::", start)

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _location(self, position: Position) -> SourceLocation:
        return SourceLocation(self.filename, position.row, position.column)

    def _current_line(self) -> str:
        """Get the current line of source text for error reporting."""
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end].rstrip("\r")


def tokenize(source: str, filename: str = "<input>") -> list[Token]:
    """
    Tokenize a whole source string.

    Args:
        source: Source text
        filename: Source filename for error messages

    Returns:
        List of tokens ending with exactly one EOF token
    """
    tokens = list(Scanner(source, filename).tokenize())
    logger.debug(f"Scanned {len(tokens)} tokens from {filename}")
    return tokens
