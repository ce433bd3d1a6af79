"""
Procedure Language Compiler
===========================

This package implements the compiler core for the procedure language:

- A scanner producing one token per call
- A recursive descent parser that builds a call graph of procedures
- A code generator emitting x86-64 NASM assembly

Pipeline
--------
    Source → Scanner → Parser → CallGraph → CodeGenerator → Assembly

Usage
-----
>>> from impc.compiler import compile_source
>>> asm_output = compile_source('main :: proc() { }')
>>> print(asm_output)
"""

from impc.compiler.compiler import (
    ImpCompiler,
    CompilerOptions,
    CompilerResult,
    compile_source,
    compile_file,
    check_call_graph,
    read_source,
    DEFAULT_OUTPUT,
)
from impc.compiler.lexer import (
    Scanner,
    Token,
    TokenKind,
    Position,
    tokenize,
    MAX_LEXEME_LENGTH,
)
from impc.compiler.callgraph import CallGraph, Procedure
from impc.compiler.parser import Parser, parse_source
from impc.compiler.codegen import CodeGenerator, generate_assembly

__all__ = [
    # Compiler
    "ImpCompiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_source",
    "compile_file",
    "check_call_graph",
    "read_source",
    "DEFAULT_OUTPUT",
    # Scanner
    "Scanner",
    "Token",
    "TokenKind",
    "Position",
    "tokenize",
    "MAX_LEXEME_LENGTH",
    # Call graph
    "CallGraph",
    "Procedure",
    # Parser
    "Parser",
    "parse_source",
    # Code generator
    "CodeGenerator",
    "generate_assembly",
]
