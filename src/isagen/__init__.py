"""
isagen - 6502 Instruction Table Compiler
========================================

Compiles a delimiter-separated 6502 instruction table into a 256-entry
opcode dispatch table for an emulator core, and synthesizes placeholder
handlers for every instruction the emulator does not implement yet.

Main Components
---------------
- **isa**: Addressing modes, instruction categories, handler identifiers
- **compiler**: Row parsing, the compile pass, stub synthesis, emitters
- **dispatch**: DispatchTable, HandlerRegistry and the bound InstructionSet
- **data**: Bundled standard and extended 6502 instruction tables

Quick Start
-----------
Compile the bundled table and run an opcode:
    >>> from isagen import InstructionSet, load_bundled_table
    >>> table = load_bundled_table()
    >>> iset = InstructionSet(table)
    >>> iset.decode(0xA9).handler
    'lda_load_accumulator_with_memory'

Or use the command-line tool:
    $ isagen compile instructions.txt -o dispatch_table.py --stubs stubs.py
    $ isagen compile --bundled --extended -f listing

Version History
---------------
1.0.0 - Initial release: standard and extended tables, stubs, three emitters
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from isagen.config import CompilerConfig, Variant
from isagen.errors import (
    IsaGenError,
    SourceLocation,
    TableError,
    InvalidAddressingModeError,
    InvalidCategoryError,
    MalformedRowError,
    DuplicateOpcodeError,
    RegistryError,
    ExecutionError,
    UndefinedOpcodeError,
    UnimplementedOpcodeError,
)
from isagen.isa import (
    AddressingMode,
    Category,
    classify_category,
    normalize_identifier,
    resolve_addressing_mode,
)
from isagen.dispatch import (
    DispatchEntry,
    DispatchTable,
    HandlerRegistry,
    InstructionSet,
    load_registry,
)
from isagen.compiler import (
    SpecRow,
    TableCompiler,
    TableSource,
    compile_file,
    compile_table,
    compile_text,
    parse_row,
    render_dispatch_module,
    render_stub_module,
    synthesize_stubs,
)
from isagen.data import bundled_table_path, load_bundled_table

__all__ = [
    "__version__",
    # Configuration
    "CompilerConfig",
    "Variant",
    # Exception hierarchy
    "IsaGenError",
    "SourceLocation",
    "TableError",
    "InvalidAddressingModeError",
    "InvalidCategoryError",
    "MalformedRowError",
    "DuplicateOpcodeError",
    "RegistryError",
    "ExecutionError",
    "UndefinedOpcodeError",
    "UnimplementedOpcodeError",
    # ISA vocabulary
    "AddressingMode",
    "Category",
    "resolve_addressing_mode",
    "classify_category",
    "normalize_identifier",
    # Dispatch
    "DispatchEntry",
    "DispatchTable",
    "HandlerRegistry",
    "InstructionSet",
    "load_registry",
    # Compiler
    "SpecRow",
    "TableSource",
    "TableCompiler",
    "parse_row",
    "compile_table",
    "compile_file",
    "compile_text",
    "synthesize_stubs",
    "render_stub_module",
    "render_dispatch_module",
    # Bundled tables
    "bundled_table_path",
    "load_bundled_table",
]
