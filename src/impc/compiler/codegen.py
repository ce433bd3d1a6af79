"""
x86-64 Code Generator
=====================

This module serializes a populated call graph into NASM assembly for
x86-64 Linux. Code generation is a flat pass over the procedure table:
each procedure becomes one block, in discovery order, and each call edge
becomes one ``call`` instruction. No graph traversal is involved, so
recursive and mutually recursive procedures need no special handling.

Generated Assembly Format
-------------------------
    global _start

    section .text

    main:
        push rbp
        mov rbp, rsp
        call foo
        mov rsp, rbp
        pop rbp
        ret

    _start:
        call main
        mov rax, 60
        xor rdi, rdi
        syscall

Procedures with no calls (including procedures that are called but never
defined) still get a complete, empty frame. The entry block calls the
entry procedure unconditionally and then exits with status 0 through the
Linux ``exit`` system call. Nothing is validated here: a missing ``main``
only shows up when the output is linked.

Usage
-----
>>> from impc.compiler.parser import parse_source
>>> from impc.compiler.codegen import CodeGenerator
>>> graph = parse_source('main :: proc() { }')
>>> asm = CodeGenerator().generate(graph)
"""

from impc.compiler.callgraph import CallGraph, Procedure

# Linux x86-64 system call number for exit
SYS_EXIT = 60


class CodeGenerator:
    """
    Generates NASM assembly from a CallGraph.

    The generator never modifies the graph, so calling ``generate`` twice
    on the same graph yields identical text.

    Attributes:
        entry_symbol: Global symbol of the process entry point
        entry_procedure: Procedure called by the entry point
    """

    INDENT = "    "

    def __init__(self, entry_symbol: str = "_start", entry_procedure: str = "main"):
        self.entry_symbol = entry_symbol
        self.entry_procedure = entry_procedure
        self._output: list[str] = []

    def generate(self, graph: CallGraph) -> str:
        """
        Generate assembly for every procedure in the graph.

        Args:
            graph: The populated call graph

        Returns:
            Complete assembly source, newline terminated
        """
        self._output = []

        self._emit_header()
        for procedure in graph:
            self._emit_procedure(graph, procedure)
        self._emit_entry_point()

        return "\n".join(self._output) + "\n"

    # =========================================================================
    # Assembly Output Methods
    # =========================================================================

    def _emit(self, line: str = "") -> None:
        """Emit a line of assembly."""
        self._output.append(line)

    def _emit_label(self, label: str) -> None:
        self._emit(f"{label}:")

    def _emit_instruction(self, mnemonic: str, operands: str = "") -> None:
        if operands:
            self._emit(f"{self.INDENT}{mnemonic} {operands}")
        else:
            self._emit(f"{self.INDENT}{mnemonic}")

    # =========================================================================
    # Sections
    # =========================================================================

    def _emit_header(self) -> None:
        self._emit(f"global {self.entry_symbol}")
        self._emit()
        self._emit("section .text")
        self._emit()

    def _emit_procedure(self, graph: CallGraph, procedure: Procedure) -> None:
        """Emit one frame with a call per outgoing edge."""
        self._emit_label(procedure.name)

        # Prologue
        self._emit_instruction("push", "rbp")
        self._emit_instruction("mov", "rbp, rsp")

        for handle in procedure.calls:
            self._emit_instruction("call", graph.node(handle).name)

        # Epilogue
        self._emit_instruction("mov", "rsp, rbp")
        self._emit_instruction("pop", "rbp")
        self._emit_instruction("ret")
        self._emit()

    def _emit_entry_point(self) -> None:
        self._emit_label(self.entry_symbol)
        self._emit_instruction("call", self.entry_procedure)
        self._emit_instruction("mov", f"rax, {SYS_EXIT}")
        self._emit_instruction("xor", "rdi, rdi")
        self._emit_instruction("syscall")


def generate_assembly(graph: CallGraph) -> str:
    """Generate assembly with the default entry point names."""
    return CodeGenerator().generate(graph)
