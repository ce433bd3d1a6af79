"""
Procedure Table and Call Graph
==============================

The call graph is the only data structure the compiler builds. Each
procedure name is interned once into an integer handle; nodes live in a
list in discovery order and call edges are stored as handles into that
same list. The graph owns every node for the lifetime of a compilation
and nodes are never removed.

A node is created the first time its name is seen, whether as the head
of a definition or as a call target. Forward references are therefore
legal: ``a :: proc() { b() }`` creates ``b`` immediately with no calls,
and a later definition of ``b`` fills in its body.

Example
-------
>>> graph = CallGraph()
>>> main = graph.define("main")
>>> graph.add_call(main, graph.intern("foo"))
>>> [p.name for p in graph]
['main', 'foo']
>>> graph.callee_names("main")
['foo']
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional

from impc.errors import SourceLocation


@dataclass
class Procedure:
    """
    A node of the call graph.

    Attributes:
        name: Procedure name (unique within the graph)
        handle: Index of this node in its graph
        calls: Handles of called procedures, in source order
        defined_at: Location of the most recent definition, or None if the
                    procedure has only ever been referenced
    """
    name: str
    handle: int
    calls: list[int] = field(default_factory=list)
    defined_at: Optional[SourceLocation] = None

    @property
    def is_defined(self) -> bool:
        return self.defined_at is not None


class CallGraph:
    """
    Interning table of procedures with ordered call edges.

    Iteration yields procedures in discovery order (the order in which
    names were first seen), which is the order code is emitted in.
    """

    def __init__(self) -> None:
        self._procedures: list[Procedure] = []
        self._handles: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._procedures)

    def __iter__(self) -> Iterator[Procedure]:
        return iter(self._procedures)

    def __contains__(self, name: object) -> bool:
        return name in self._handles

    def __getitem__(self, name: str) -> Procedure:
        """Look up a procedure by name. Raises KeyError if unknown."""
        return self._procedures[self._handles[name]]

    def __repr__(self) -> str:
        return f"CallGraph({self.as_dict()!r})"

    def get(self, name: str) -> Optional[Procedure]:
        """Look up a procedure by name, returning None if unknown."""
        handle = self._handles.get(name)
        if handle is None:
            return None
        return self._procedures[handle]

    def node(self, handle: int) -> Procedure:
        """Return the procedure for a handle."""
        return self._procedures[handle]

    def intern(self, name: str) -> int:
        """
        Resolve a name to its handle, creating an empty node on first use.
        """
        handle = self._handles.get(name)
        if handle is None:
            handle = len(self._procedures)
            self._procedures.append(Procedure(name=name, handle=handle))
            self._handles[name] = handle
        return handle

    def define(self, name: str, location: Optional[SourceLocation] = None) -> int:
        """
        Start a (re)definition of ``name``.

        The node is created if needed and its call list is cleared, so a
        later definition of the same name replaces the earlier body.

        Returns:
            The procedure's handle
        """
        handle = self.intern(name)
        procedure = self._procedures[handle]
        procedure.calls.clear()
        procedure.defined_at = location
        return handle

    def add_call(self, caller: int, callee: int) -> None:
        """Append an edge caller -> callee. Duplicates and self-calls are kept."""
        self._procedures[caller].calls.append(callee)

    def callees(self, name: str) -> list[Procedure]:
        """Procedures called by ``name``, in call order."""
        return [self._procedures[h] for h in self[name].calls]

    def callee_names(self, name: str) -> list[str]:
        """Names of the procedures called by ``name``, in call order."""
        return [p.name for p in self.callees(name)]

    def names(self) -> list[str]:
        """All procedure names in discovery order."""
        return [p.name for p in self._procedures]

    def undefined(self) -> list[Procedure]:
        """Procedures that were referenced but never given a body."""
        return [p for p in self._procedures if not p.is_defined]

    def as_dict(self) -> dict[str, list[str]]:
        """Adjacency view ``{name: [callee names]}`` in discovery order."""
        return {
            p.name: [self._procedures[h].name for h in p.calls]
            for p in self._procedures
        }
