"""
impc - Command-Line Interface
=============================

This module implements the ``impc`` command. In batch mode it compiles a
source file to NASM assembly and then hands the assembly to ``nasm`` and
``ld`` to produce an executable. In step mode it opens the interactive
token stepper instead.

Usage Examples
--------------
Compile and link (writes output.asm, output.o and a.out):
    $ impc hello.imp

Assembly only:
    $ impc -S hello.imp -o hello.asm

Step through the tokens:
    $ impc --step hello.imp

Verbose mode:
    $ impc -v hello.imp
"""

import logging
from pathlib import Path

import click

from impc import __version__
from impc.compiler import ImpCompiler, CompilerOptions, read_source, DEFAULT_OUTPUT
from impc.toolchain import ToolchainOptions, assemble_and_link
from impc.cli.errors import handle_cli_exception
from impc.cli.stepper import TokenStepper, run_stepper

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    # Compiler warnings are echoed from CompilerResult.warnings
    level = logging.DEBUG if verbose else logging.ERROR
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "source_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-s", "--step",
    is_flag=True,
    help="Step through the scanner interactively instead of compiling",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_OUTPUT,
    show_default=True,
    help="Output assembly file",
)
@click.option(
    "-S", "--asm-only",
    is_flag=True,
    help="Write assembly only; do not run nasm and ld",
)
@click.option(
    "-e", "--executable",
    type=click.Path(dir_okay=False, path_type=Path),
    default="a.out",
    show_default=True,
    help="Linked executable",
)
@click.option(
    "--entry",
    default="main",
    show_default=True,
    help="Procedure called by the program entry point",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="impc")
def main(
    source_file: Path,
    step: bool,
    output: Path,
    asm_only: bool,
    executable: Path,
    entry: str,
    verbose: bool,
) -> None:
    """
    Compile a procedure-language program to x86-64 assembly.

    SOURCE_FILE contains definitions such as:

    \b
        main :: proc() { greet() }
        greet :: proc() { }

    \b
    Examples:
        impc hello.imp               # output.asm, then a.out
        impc -S hello.imp -o h.asm   # assembly only
        impc --step hello.imp        # n/space: next token, h: highlight, q: quit
    """
    setup_logging(verbose)

    try:
        source = read_source(source_file)

        if step:
            run_stepper(TokenStepper(source, str(source_file)))
            return

        if verbose:
            click.echo(f"Compiling {source_file}...")

        compiler = ImpCompiler(CompilerOptions(
            output_path=str(output),
            entry_procedure=entry,
        ))
        result = compiler.compile_source(source, str(source_file))

        for warning in result.warnings:
            click.echo(warning, err=True)

        compiler.write_output(result)

        if verbose:
            click.echo(f"Tokenized: {result.token_count} tokens")
            click.echo(f"Procedures: {', '.join(result.graph.names()) or '(none)'}")
            click.echo(f"Wrote {len(result.assembly)} bytes to {output}")

        if asm_only:
            click.echo(f"Compiled {source_file} -> {output}")
            return

        logger.debug(f"Assembling and linking {output}")
        linked = assemble_and_link(output, ToolchainOptions(executable=str(executable)))
        click.echo(f"Compilation successful. Executable '{linked}' created.")

    except Exception as e:
        handle_cli_exception(e, verbose, error_type="Build")


if __name__ == "__main__":
    main()
