"""
impc - Procedure Language Compiler
==================================

This package provides a small batch compiler for a procedure declaration
language:

    main :: proc() { greet() }
    greet :: proc() { }

Each definition names a procedure and lists the procedures it calls. The
compiler builds a call graph of all procedures and emits x86-64 NASM
assembly with one stack frame per procedure and a ``_start`` entry point
that calls ``main`` and exits.

Main Components
---------------
- **compiler**: scanner, parser, call graph and code generator
- **toolchain**: runs nasm and ld on the generated assembly
- **cli**: the ``impc`` command, including an interactive token stepper

Quick Start
-----------
    >>> from impc import ImpCompiler
    >>> compiler = ImpCompiler()
    >>> result = compiler.compile_source("main :: proc() { }")
    >>> print(result.assembly)

Or use the command-line tool:
    $ impc hello.imp            # writes output.asm and links a.out
    $ impc -S hello.imp         # assembly only
    $ impc --step hello.imp     # step through the tokens
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from impc.errors import (
    ImpError,
    SourceLocation,
    CompileError,
    ScanError,
    UnexpectedCharacterError,
    IncompleteDoubleColonError,
    LexemeTooLongError,
    ParseError,
    UnexpectedTokenError,
    ToolchainError,
)
from impc.compiler import (
    ImpCompiler,
    CompilerOptions,
    CompilerResult,
    CallGraph,
    Procedure,
    Scanner,
    Token,
    TokenKind,
    Parser,
    CodeGenerator,
    compile_source,
    compile_file,
)

__all__ = [
    "__version__",
    # Compiler
    "ImpCompiler",
    "CompilerOptions",
    "CompilerResult",
    "CallGraph",
    "Procedure",
    "Scanner",
    "Token",
    "TokenKind",
    "Parser",
    "CodeGenerator",
    "compile_source",
    "compile_file",
    # Exception hierarchy
    "ImpError",
    "SourceLocation",
    "CompileError",
    "ScanError",
    "UnexpectedCharacterError",
    "IncompleteDoubleColonError",
    "LexemeTooLongError",
    "ParseError",
    "UnexpectedTokenError",
    "ToolchainError",
]
