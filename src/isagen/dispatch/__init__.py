"""
isagen Dispatch Package
=======================

Runtime side of the compiler's output: the 256-slot dispatch table, the
registry of real handler implementations, and the binding of the two.

Modules:
    table: DispatchEntry and DispatchTable
    registry: HandlerRegistry and registry loaders
    instruction_set: InstructionSet, a table with every handler bound
"""

from isagen.dispatch.registry import (
    Handler,
    HandlerRegistry,
    load_registry,
    registry_from_names_file,
    registry_from_source,
)
from isagen.dispatch.table import SLOT_COUNT, DispatchEntry, DispatchTable
from isagen.dispatch.instruction_set import InstructionSet

__all__ = [
    "SLOT_COUNT",
    "DispatchEntry",
    "DispatchTable",
    "Handler",
    "HandlerRegistry",
    "load_registry",
    "registry_from_names_file",
    "registry_from_source",
    "InstructionSet",
]
