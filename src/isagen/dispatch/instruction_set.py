"""
Bound instruction set: a dispatch table with every handler resolved.

InstructionSet is what an interpreter's fetch-decode-execute loop talks to:

    iset = InstructionSet(table, handlers)

    entry = iset.decode(opcode)          # UndefinedOpcodeError if undefined
    handler = iset.handler_for(entry)
    cycles = handler(cpu, operand)       # UnimplementedOpcodeError from a stub

Every identifier referenced by the table is bound at construction, either to
the registry's callable or to a synthesized StubHandler, so execution never
meets a missing function.
"""

import logging
from functools import partial
from typing import Any, Callable, Optional

from isagen.compiler.stubs import StubHandler, synthesize_stubs
from isagen.dispatch.registry import Handler, HandlerRegistry
from isagen.dispatch.table import DispatchEntry, DispatchTable
from isagen.errors import RegistryError

logger = logging.getLogger(__name__)


class InstructionSet:
    """
    Immutable binding of a DispatchTable to handlers.

    Attributes:
        table: The compiled dispatch table
    """

    def __init__(self, table: DispatchTable, registry: Optional[HandlerRegistry] = None):
        """
        Bind every referenced identifier.

        Args:
            table: Compiled dispatch table
            registry: Real handler implementations (default: none, every
                opcode dispatches to a stub)

        Raises:
            RegistryError: If the registry lists an identifier the table uses
                but holds no callable for it (a name-only registry)
        """
        registry = registry if registry is not None else HandlerRegistry()
        self.table = table

        stubs = synthesize_stubs(table, registry)
        handlers: dict[str, Handler] = dict(stubs)
        for name in sorted(table.referenced_identifiers - stubs.keys()):
            func = registry.get(name)
            if func is None:
                raise RegistryError(f"handler '{name}' is registered by name only and cannot be executed")
            handlers[name] = func

        self._handlers = handlers
        self._stubbed = frozenset(stubs)
        logger.debug(f"Bound {len(handlers) - len(stubs)} handlers and {len(stubs)} placeholders")

    def decode(self, opcode: int) -> DispatchEntry:
        """
        Return the entry for an opcode.

        Raises:
            UndefinedOpcodeError: If the table does not define the opcode
            IndexError: If the opcode is outside 0-255
        """
        return self.table.lookup(opcode)

    def handler_for(self, entry: DispatchEntry) -> Callable[[Any, Any], Any]:
        """Return the handler bound to an entry, callable as handler(context, operand)."""
        return partial(self._handlers[entry.handler], entry)

    def execute(self, opcode: int, context: Any, operand: Any = None) -> Any:
        """
        Decode and run one opcode.

        Raises:
            UndefinedOpcodeError: Opcode not in the table
            UnimplementedOpcodeError: Opcode bound to a placeholder
        """
        entry = self.decode(opcode)
        return self._handlers[entry.handler](entry, context, operand)

    def is_implemented(self, opcode: int) -> bool:
        """True if the opcode is defined and bound to a real handler."""
        if opcode not in self.table:
            return False
        return self.table[opcode].handler not in self._stubbed

    def is_stub(self, identifier: str) -> bool:
        return isinstance(self._handlers.get(identifier), StubHandler)

    def unimplemented_opcodes(self) -> list[int]:
        """Defined opcodes that dispatch to a placeholder."""
        return [e.opcode for e in self.table.entries() if e.handler in self._stubbed]

    def coverage(self) -> tuple[int, int]:
        """Return (implemented, defined) opcode counts."""
        defined = len(self.table)
        return defined - len(self.unimplemented_opcodes()), defined

    def __repr__(self) -> str:
        implemented, defined = self.coverage()
        return f"InstructionSet({implemented}/{defined} opcodes implemented)"
