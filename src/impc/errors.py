"""
impc Error Hierarchy
====================

This module defines the exception hierarchy for the impc compiler.
All exceptions inherit from ImpError, allowing callers (the CLI, the
interactive stepper, tests) to catch every compiler failure with a
single except clause and decide for themselves how to react.

Exception Hierarchy
-------------------
ImpError (base)
├── CompileError (source-level errors with location)
│   ├── ScanError - lexical errors
│   │   ├── UnexpectedCharacterError - character outside the language
│   │   ├── IncompleteDoubleColonError - ':' not followed by ':'
│   │   └── LexemeTooLongError - identifier longer than the lexeme limit
│   └── ParseError - grammar errors
│       └── UnexpectedTokenError - token does not match the expectation
└── ToolchainError - external assembler/linker failure

Every scan and parse error is fatal: the first one raised ends the
compilation. There is no error collection and no recovery.

Error messages follow this format:
    filename:row:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)

Input/output failures are not wrapped; they surface as the builtin
OSError family (FileNotFoundError, PermissionError, ...).
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class ImpError(Exception):
    """
    Base exception for all impc errors.

        try:
            compiler.compile_file("hello.imp")
        except ImpError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Row number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Compilation Errors
# =============================================================================

class CompileError(ImpError):
    """
    Base exception for errors found in the source being compiled.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    @property
    def row(self) -> Optional[int]:
        """Row of the error, or None if unknown."""
        return self.location.line if self.location else None

    @property
    def column(self) -> Optional[int]:
        """Column of the error, or None if unknown."""
        return self.location.column if self.location else None

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            hello.imp:1:6: error: Expected 'proc'
                x :: pro(
                     ^
            hint: found 'pro'
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class ScanError(CompileError):
    """
    Lexical error in the source.

    Raised by the scanner when the input cannot be split into tokens.
    """
    pass


class UnexpectedCharacterError(ScanError):
    """A character that cannot start any token."""

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            "Unexpected character",
            location=location,
            hint=f"found {char!r} (0x{ord(char):02X})",
            source_line=source_line,
        )


class IncompleteDoubleColonError(ScanError):
    """A single ':' that is not immediately followed by a second ':'."""

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "Expected ':' after ':'",
            location=location,
            hint="procedure definitions use '::' as in 'name :: proc() { }'",
            source_line=source_line,
        )


class LexemeTooLongError(ScanError):
    """An identifier longer than the scanner's lexeme limit."""

    def __init__(
        self,
        length: int,
        limit: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.length = length
        self.limit = limit
        super().__init__(
            f"identifier exceeds maximum length of {limit} characters",
            location=location,
            hint=f"identifier is at least {length} characters long",
            source_line=source_line,
        )


class ParseError(CompileError):
    """
    Grammar error in the source.

    Raised by the parser when a token does not match what the grammar
    requires at that point.
    """
    pass


class UnexpectedTokenError(ParseError):
    """
    Token mismatch against the current grammar expectation.

    Attributes:
        expected: Human readable description of what was required
        found: Text of the offending token ("end of file" at EOF)
    """

    def __init__(
        self,
        message: str,
        expected: str,
        found: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.expected = expected
        self.found = found
        super().__init__(
            message,
            location=location,
            hint=f"expected {expected}, found {found}",
            source_line=source_line,
        )


# =============================================================================
# Toolchain Errors
# =============================================================================

class ToolchainError(ImpError):
    """
    The external assembler or linker failed.

    Attributes:
        command: The command line that was run
        stdout: Captured standard output (may be empty)
        stderr: Captured standard error (may be empty)
        return_code: Process exit status, or None if it never ran
    """

    def __init__(
        self,
        message: str,
        command: Optional[list[str]] = None,
        stdout: str = "",
        stderr: str = "",
        return_code: Optional[int] = None,
    ):
        self.message = message
        self.command = command or []
        self.stdout = stdout
        self.stderr = stderr
        self.return_code = return_code
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]
        if self.command:
            parts.append(f"command: {' '.join(self.command)}")
        if self.return_code is not None:
            parts.append(f"exit status: {self.return_code}")
        if self.stderr.strip():
            parts.append(self.stderr.rstrip())
        return "\n".join(parts)
