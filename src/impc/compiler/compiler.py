"""
Compiler Main Module
====================

This module provides the main compiler interface. It orchestrates the
complete compilation process:

    Source → Scan/Parse → Call Graph → Generate → Assembly

Usage
-----
Command line:
    $ impc hello.imp -o hello.asm

Programmatic:
    >>> from impc.compiler import compile_source
    >>> asm = compile_source('main :: proc() { }')

Error Handling
--------------
Scan and parse errors are fatal. The first one is raised as a CompileError
subclass and nothing is generated. Problems that do not stop code
generation (a redefined procedure, a procedure that is called but never
defined, a missing entry procedure) are reported as warnings on the
CompilerResult.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from impc.compiler.lexer import Scanner, MAX_LEXEME_LENGTH
from impc.compiler.parser import Parser
from impc.compiler.callgraph import CallGraph
from impc.compiler.codegen import CodeGenerator

logger = logging.getLogger(__name__)

# Default assembly output file, written to the current directory
DEFAULT_OUTPUT = "output.asm"


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        output_path: Where write_output() puts the assembly by default
        entry_symbol: Global entry symbol of the generated program
        entry_procedure: Procedure the entry point calls
        max_lexeme_length: Longest identifier the scanner accepts
    """
    output_path: str = DEFAULT_OUTPUT
    entry_symbol: str = "_start"
    entry_procedure: str = "main"
    max_lexeme_length: int = MAX_LEXEME_LENGTH


@dataclass
class CompilerResult:
    """
    Result of a compilation.

    Attributes:
        filename: Source filename
        assembly: Generated assembly code
        graph: The call graph built by the parser
        token_count: Number of tokens scanned
        warnings: Non-fatal diagnostics
    """
    filename: str = ""
    assembly: str = ""
    graph: Optional[CallGraph] = None
    token_count: int = 0
    warnings: list[str] = field(default_factory=list)


class ImpCompiler:
    """
    Compiler for the procedure language.

    Example:
        compiler = ImpCompiler()
        result = compiler.compile_file("hello.imp")
        compiler.write_output(result)

    Attributes:
        options: Compiler configuration options
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile_source(self, source: str, filename: str = "<input>") -> CompilerResult:
        """
        Compile source text to assembly.

        Args:
            source: Source text
            filename: Source filename for error messages

        Returns:
            CompilerResult with the assembly and the call graph

        Raises:
            ScanError: If the source cannot be tokenized
            ParseError: If the source does not match the grammar
        """
        result = CompilerResult(filename=filename)

        scanner = Scanner(source, filename, self.options.max_lexeme_length)
        parser = Parser(scanner)
        graph = parser.parse()
        result.graph = graph
        result.token_count = parser.token_count
        result.warnings.extend(parser.warnings)
        result.warnings.extend(
            check_call_graph(graph, filename, self.options.entry_procedure)
        )

        generator = CodeGenerator(
            entry_symbol=self.options.entry_symbol,
            entry_procedure=self.options.entry_procedure,
        )
        result.assembly = generator.generate(graph)

        logger.debug(
            f"Compiled {filename}: {len(graph)} procedures, "
            f"{len(result.assembly)} bytes of assembly"
        )
        return result

    def compile_file(self, filepath: str) -> CompilerResult:
        """
        Compile a source file.

        Raises:
            FileNotFoundError: If the source file does not exist
            ScanError, ParseError: On invalid source
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        source = read_source(path)
        return self.compile_source(source, str(filepath))

    def write_output(self, result: CompilerResult, output_path: Optional[str] = None) -> Path:
        """
        Write the generated assembly to disk.

        Args:
            result: A successful compilation result
            output_path: Destination (defaults to options.output_path)

        Returns:
            The path written

        Raises:
            OSError: If the destination cannot be written
        """
        path = Path(output_path or self.options.output_path)
        path.write_text(result.assembly, encoding="utf-8")
        logger.debug(f"Wrote {len(result.assembly)} bytes to {path}")
        return path


# =============================================================================
# Utility Functions
# =============================================================================

def read_source(path: Path) -> str:
    """
    Read a source file.

    Bytes that are not valid UTF-8 are kept as surrogate escapes so that
    the scanner reports them as unexpected characters at their position.
    """
    return path.read_text(encoding="utf-8", errors="surrogateescape")


def check_call_graph(
    graph: CallGraph,
    filename: str = "<input>",
    entry_procedure: str = "main",
) -> list[str]:
    """
    Look for problems that will only surface when the output is linked.

    Returns:
        Warning messages; the graph is not modified
    """
    warnings = []

    if entry_procedure not in graph or not graph[entry_procedure].is_defined:
        warnings.append(
            f"{filename}: warning: no definition of entry procedure '{entry_procedure}'"
        )

    for procedure in graph.undefined():
        if procedure.name == entry_procedure:
            continue
        warnings.append(
            f"{filename}: warning: procedure '{procedure.name}' is called "
            f"but never defined; it will be emitted with an empty body"
        )

    for message in warnings:
        logger.warning(message)
    return warnings


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_source(source: str, filename: str = "<input>") -> str:
    """
    Compile source text to assembly with default options.

    Raises:
        CompileError: If compilation fails
    """
    return ImpCompiler().compile_source(source, filename).assembly


def compile_file(filepath: str, output_path: Optional[str] = None) -> str:
    """
    Compile a source file to assembly, optionally writing it out.

    Example:
        >>> asm = compile_file("hello.imp", "hello.asm")
    """
    compiler = ImpCompiler()
    result = compiler.compile_file(filepath)

    if output_path:
        compiler.write_output(result, output_path)

    return result.assembly
