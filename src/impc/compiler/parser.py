"""
Procedure Language Recursive Descent Parser
===========================================

This module implements the parser for the procedure language. It pulls
tokens from a Scanner one at a time and builds the call graph as a side
effect of parsing each definition. There is no separate syntax tree: the
call graph is the only result.

Grammar (EBNF)
--------------
program    ::= definition* EOF
definition ::= IDENTIFIER '::' 'proc' '(' ')' '{' call* '}'
call       ::= IDENTIFIER '(' ')'

Every token is checked against the single token the grammar allows at
that point. The first mismatch raises UnexpectedTokenError; the parser
does not try to recover or to find further errors.

Example Usage
-------------
>>> from impc.compiler.lexer import Scanner
>>> from impc.compiler.parser import Parser
>>> parser = Parser(Scanner('main :: proc() { foo() }', "test.imp"))
>>> graph = parser.parse()
>>> graph.as_dict()
{'main': ['foo'], 'foo': []}
"""

import logging
from typing import Optional

from impc.errors import UnexpectedTokenError
from impc.compiler.lexer import Scanner, Token, TokenKind, KIND_DESCRIPTIONS
from impc.compiler.callgraph import CallGraph

logger = logging.getLogger(__name__)


class Parser:
    """
    Recursive descent parser that populates a CallGraph.

    Attributes:
        scanner: Token source, pulled on demand
        graph: The call graph being built
        warnings: Non-fatal diagnostics (procedure redefinitions)
    """

    def __init__(self, scanner: Scanner, graph: Optional[CallGraph] = None):
        """
        Initialize the parser.

        Args:
            scanner: Scanner positioned at the start of the source
            graph: Graph to populate (a new one is created if None)
        """
        self.scanner = scanner
        self.graph = graph if graph is not None else CallGraph()
        self.warnings: list[str] = []
        self.token_count = 0
        self._token: Optional[Token] = None

    def parse(self) -> CallGraph:
        """
        Parse the whole program.

        Returns:
            The populated call graph

        Raises:
            ScanError: If the scanner rejects the input
            ParseError: If the token sequence does not match the grammar
        """
        self._advance()

        while not self._check(TokenKind.EOF):
            self._parse_definition()

        logger.debug(
            f"Parsed {len(self.graph)} procedures from {self.token_count} tokens"
        )
        return self.graph

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _advance(self) -> Token:
        """Consume the current token and fetch the next one."""
        previous = self._token
        self._token = self.scanner.next_token()
        self.token_count += 1
        return previous

    def _check(self, kind: TokenKind) -> bool:
        return self._token.kind == kind

    def _expect(self, kind: TokenKind, message: str) -> Token:
        """
        Require the current token to be of ``kind`` and consume it.

        Raises:
            UnexpectedTokenError: Positioned at the offending token
        """
        if not self._check(kind):
            raise self._error(message, KIND_DESCRIPTIONS[kind])
        return self._advance()

    def _error(self, message: str, expected: str) -> UnexpectedTokenError:
        token = self._token
        return UnexpectedTokenError(
            message,
            expected=expected,
            found=token.describe(),
            location=token.location,
            source_line=self._source_line(token.position.row),
        )

    def _source_line(self, row: int) -> str:
        lines = self.scanner.source.split("\n")
        if 0 < row <= len(lines):
            return lines[row - 1].rstrip("\r")
        return ""

    # =========================================================================
    # Grammar Productions
    # =========================================================================

    def _parse_definition(self) -> None:
        """definition ::= IDENTIFIER '::' 'proc' '(' ')' '{' call* '}'"""
        name_token = self._expect(TokenKind.IDENTIFIER, "Expected procedure name")
        self._note_redefinition(name_token)
        self.graph.intern(name_token.text)

        self._expect(TokenKind.DOUBLE_COLON, "Expected '::'")
        self._expect(TokenKind.PROC, "Expected 'proc'")
        self._expect(TokenKind.LPAREN, "Expected '('")
        self._expect(TokenKind.RPAREN, "Expected ')'")
        self._expect(TokenKind.LBRACE, "Expected '{'")

        # Resets any earlier body so the last definition wins
        head = self.graph.define(name_token.text, name_token.location)

        while not self._check(TokenKind.RBRACE):
            self._parse_call(head)

        self._advance()  # consume '}'

    def _parse_call(self, head: int) -> None:
        """call ::= IDENTIFIER '(' ')'"""
        callee_token = self._expect(TokenKind.IDENTIFIER, "Expected procedure call")
        callee = self.graph.intern(callee_token.text)
        self.graph.add_call(head, callee)

        self._expect(TokenKind.LPAREN, "Expected '('")
        self._expect(TokenKind.RPAREN, "Expected ')'")

    def _note_redefinition(self, name_token: Token) -> None:
        """Record a warning when a procedure body is about to be replaced."""
        previous = self.graph.get(name_token.text)
        if previous is None or not previous.is_defined:
            return
        message = (
            f"{name_token.location}: warning: redefinition of '{name_token.text}' "
            f"replaces the body defined at {previous.defined_at}"
        )
        logger.warning(message)
        self.warnings.append(message)


def parse_source(source: str, filename: str = "<input>") -> CallGraph:
    """
    Parse source text into a call graph.

    Args:
        source: Source text
        filename: Source filename for error messages

    Returns:
        The populated call graph
    """
    return Parser(Scanner(source, filename)).parse()
