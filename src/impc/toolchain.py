"""
External Assembler and Linker
=============================

The compiler only produces assembly text. Turning it into an executable
is delegated to NASM and the system linker:

    output.asm ──nasm -f elf64──▶ output.o ──ld -o a.out──▶ a.out

Both tools are run with ``subprocess.run``; any failure, timeout or
missing executable is reported as a ToolchainError that carries the
command line and the captured output.
"""

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from impc.errors import ToolchainError

logger = logging.getLogger(__name__)


@dataclass
class ToolchainOptions:
    """
    Settings for the external build tools.

    Attributes:
        assembler: Assembler command and its fixed arguments
        linker: Linker command and its fixed arguments
        executable: Path of the linked program
        timeout: Seconds allowed for each tool
    """
    assembler: list[str] = field(default_factory=lambda: ["nasm", "-f", "elf64"])
    linker: list[str] = field(default_factory=lambda: ["ld"])
    executable: str = "a.out"
    timeout: float = 60.0


def _run(cmd: list[str], timeout: float) -> subprocess.CompletedProcess:
    """Run one tool, converting every failure into ToolchainError."""
    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        raise ToolchainError(f"{cmd[0]} timed out after {timeout:g} seconds", command=cmd)
    except FileNotFoundError:
        raise ToolchainError(f"{cmd[0]} not found - is it installed?", command=cmd)

    if result.returncode != 0:
        raise ToolchainError(
            f"{cmd[0]} failed",
            command=cmd,
            stdout=result.stdout,
            stderr=result.stderr,
            return_code=result.returncode,
        )
    return result


def assemble(asm_path: Path, options: ToolchainOptions) -> Path:
    """
    Assemble ``asm_path`` into an object file next to it.

    Returns:
        Path of the object file
    """
    object_path = asm_path.with_suffix(".o")
    _run([*options.assembler, str(asm_path), "-o", str(object_path)], options.timeout)
    return object_path


def link(object_path: Path, options: ToolchainOptions) -> Path:
    """
    Link an object file into ``options.executable``.

    Returns:
        Path of the executable
    """
    executable = Path(options.executable)
    _run([*options.linker, "-o", str(executable), str(object_path)], options.timeout)
    return executable


def assemble_and_link(asm_path: Path, options: ToolchainOptions | None = None) -> Path:
    """
    Build an executable from generated assembly.

    Args:
        asm_path: Assembly file written by the compiler
        options: Tool settings (defaults if None)

    Returns:
        Path of the executable

    Raises:
        ToolchainError: If either tool fails or cannot be run
    """
    options = options or ToolchainOptions()
    object_path = assemble(Path(asm_path), options)
    executable = link(object_path, options)
    logger.debug(f"Linked {executable}")
    return executable
