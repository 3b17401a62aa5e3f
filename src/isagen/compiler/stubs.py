"""
Placeholder Handler Synthesis
=============================

Every identifier referenced by a compiled table must resolve to a callable
handler, even when nobody has written it yet. For each referenced
identifier missing from the handler registry, this module produces a
placeholder (stub) that satisfies the normal handler contract and always
raises UnimplementedOpcodeError for the opcode being executed.

Stubs come in two forms:

- **runtime**: StubHandler objects, bound directly by InstructionSet
- **source**: render_stub_module() emits Python source with one function per
  missing identifier, for projects that check generated handlers into their
  interpreter package

Both are computed from the sorted set difference (referenced - implemented),
so synthesizing twice from the same table and registry yields identical
stubs and byte-identical source.
"""

import logging
from dataclasses import dataclass
from typing import Any, Collection, Optional

from isagen.dispatch.table import DispatchTable
from isagen.errors import UnimplementedOpcodeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StubHandler:
    """
    Placeholder for a handler that has no implementation.

    Calling it never succeeds: it raises UnimplementedOpcodeError naming the
    opcode of the entry being executed, so a stub shared by several opcodes
    still reports the right one.

    Attributes:
        identifier: The handler identifier this stub stands in for
    """
    identifier: str

    def __call__(self, entry: Any, context: Any, operand: Any) -> Any:
        raise UnimplementedOpcodeError(entry.opcode, entry.mnemonic, self.identifier)


def missing_identifiers(table: DispatchTable, registry: Collection[str]) -> list[str]:
    """
    Identifiers referenced by the table but absent from the registry.

    Args:
        table: Compiled dispatch table
        registry: Anything supporting 'in' for identifiers (a HandlerRegistry,
            a set of names, ...)

    Returns:
        Sorted list of missing identifiers
    """
    return sorted(name for name in table.referenced_identifiers if name not in registry)


def synthesize_stubs(table: DispatchTable, registry: Collection[str]) -> dict[str, StubHandler]:
    """
    Create a placeholder handler for every unimplemented identifier.

    Returns:
        Mapping of identifier to StubHandler, in identifier order
    """
    missing = missing_identifiers(table, registry)
    if missing:
        logger.info(
            f"{len(missing)} of {len(table.referenced_identifiers)} handlers "
            f"are unimplemented; synthesized placeholders"
        )
    return {name: StubHandler(name) for name in missing}


# =============================================================================
# Source Rendering
# =============================================================================

STUB_MODULE_HEADER = '''"""
Placeholder instruction handlers.

Generated by isagen{source}. Do not edit: implement the handler in your
interpreter's handler registry and regenerate; the placeholder disappears
once the registry provides a real implementation.
"""

from isagen.errors import UnimplementedOpcodeError
'''

STUB_FUNCTION_TEMPLATE = '''

def {name}(entry, context, operand):
    """Placeholder for {opcodes}."""
    raise UnimplementedOpcodeError(entry.opcode, entry.mnemonic, "{name}")
'''


def render_stub_module(
    stubs: Collection[str],
    table: Optional[DispatchTable] = None,
    source_name: Optional[str] = None,
) -> str:
    """
    Render placeholder handlers as Python source.

    Functions are emitted in identifier order and the output contains no
    timestamps, so regenerating from the same inputs is a no-op for version
    control and incremental builds.

    Args:
        stubs: Missing identifiers (or the mapping from synthesize_stubs)
        table: Table the stubs belong to; when given, each stub's docstring
            lists the opcodes bound to it
        source_name: Name of the instruction table, recorded in the header

    Returns:
        Module source text
    """
    names = sorted(stubs)
    parts = [STUB_MODULE_HEADER.format(source=f" from {source_name}" if source_name else "")]

    parts.append("\n__all__ = [\n")
    parts.extend(f'    "{name}",\n' for name in names)
    parts.append("]\n")

    for name in names:
        if table is not None:
            opcodes = ", ".join(f"${op:02X}" for op in table.opcodes_for(name)) or name
        else:
            opcodes = name
        parts.append(STUB_FUNCTION_TEMPLATE.format(name=name, opcodes=opcodes))

    return "".join(parts)
