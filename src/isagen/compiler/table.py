"""
Instruction Table Compiler
==========================

Builds a DispatchTable from parsed instruction-table rows.

The compile is a single synchronous pass over the rows in file order:

    START --row--> RESOLVING --ok--> (accumulate, next row)
                       |
                       +--error--> ABORTED     (terminal, no table)
    rows exhausted ----------------> COMPILED  (terminal, table available)

Any error (bad token, malformed record, duplicate opcode) aborts the compile
at the first occurrence. There is no partial recovery and no error
collection: a table with a gap or a silently dropped row is worse than no
table at all.

Identifier sharing in extended tables
-------------------------------------
Handler identifiers are derived from mnemonic + description, so a standard
row and an illegal row with the same text produce the same identifier (the
illegal NOP variants are the usual case). Unless the configuration allows
sharing, the illegal entries are given '<identifier>_illegal' so the two
categories get independent handlers. The rename is applied after all rows
are read, so it does not depend on row order.

Usage:
    table = compile_file("instructions.txt")
    table = compile_table(TableSource.from_text(text), CompilerConfig(variant=Variant.EXTENDED))
"""

import logging
from dataclasses import replace
from enum import Enum, auto
from pathlib import Path
from typing import Iterable, Optional, Union

from isagen.compiler.rows import SpecRow, TableSource, iter_rows
from isagen.config import CompilerConfig, Variant
from isagen.dispatch.table import SLOT_COUNT, DispatchEntry, DispatchTable
from isagen.errors import DuplicateOpcodeError, IsaGenError, SourceLocation
from isagen.isa.identifiers import normalize_identifier
from isagen.isa.modes import Category

logger = logging.getLogger(__name__)

ILLEGAL_SUFFIX = "_illegal"


class CompilerState(Enum):
    """Progress of a TableCompiler through one compile() call."""
    START = auto()
    RESOLVING = auto()
    ABORTED = auto()
    COMPILED = auto()


class TableCompiler:
    """
    Accumulates rows into a provisional 256-slot table.

    A compiler instance can be reused; each compile() call starts from an
    empty table. The state of the last call is available as ``state`` and
    the last successful result as ``table``.

    Attributes:
        config: Compiler configuration
        state: CompilerState of the last (or current) compile
        table: The last compiled table, None until a compile succeeds
    """

    def __init__(self, config: Optional[CompilerConfig] = None):
        self.config = config or CompilerConfig()
        self.state = CompilerState.START
        self.table: Optional[DispatchTable] = None
        self._slots: list[Optional[DispatchEntry]] = []
        self._locations: dict[int, Optional[SourceLocation]] = {}

    def compile(self, rows: Iterable[SpecRow]) -> DispatchTable:
        """
        Compile a sequence of rows.

        Args:
            rows: Parsed rows, in file order. May be a lazy iterator; parse
                errors raised while iterating abort the compile like any
                other error.

        Returns:
            DispatchTable with one occupied slot per row

        Raises:
            DuplicateOpcodeError: If two rows share an opcode
            TableError: Any parse or resolve error raised by the rows
        """
        self.state = CompilerState.START
        self.table = None
        self._slots = [None] * SLOT_COUNT
        self._locations = {}

        try:
            for row in rows:
                self.state = CompilerState.RESOLVING
                self._add_row(row)
        except IsaGenError as e:
            self.state = CompilerState.ABORTED
            self._slots = []
            logger.debug(f"Compile aborted: {e}")
            raise

        if self.config.variant.has_category and not self.config.share_identifiers_across_categories:
            self._separate_illegal_identifiers()

        table = DispatchTable(self._slots, variant=self.config.variant)
        self.state = CompilerState.COMPILED
        self.table = table
        logger.info(
            f"Compiled {len(table)} opcodes ({SLOT_COUNT - len(table)} undefined), "
            f"{len(table.referenced_identifiers)} handlers"
        )
        return table

    def _add_row(self, row: SpecRow) -> None:
        """Place one row in its slot, rejecting a second row for the same opcode."""
        existing = self._slots[row.opcode]
        if existing is not None:
            raise DuplicateOpcodeError(
                row.opcode,
                existing.mnemonic,
                row.mnemonic,
                location=row.location,
                original_location=self._locations.get(row.opcode),
                source_line=row.raw or None,
            )

        entry = DispatchEntry(
            opcode=row.opcode,
            mnemonic=row.mnemonic,
            mode=row.mode,
            length=row.length,
            cycles=row.cycles,
            handler=normalize_identifier(row.mnemonic, row.description),
            category=row.category,
        )
        self._slots[row.opcode] = entry
        self._locations[row.opcode] = row.location
        logger.debug(f"{row.location or '<row>'}: {entry}")

    def _separate_illegal_identifiers(self) -> None:
        """Give illegal entries their own identifier where it collides with a standard one."""
        standard = {
            e.handler for e in self._slots
            if e is not None and e.category is Category.STANDARD
        }
        for index, entry in enumerate(self._slots):
            if entry is not None and entry.category is Category.ILLEGAL and entry.handler in standard:
                renamed = f"{entry.handler}{ILLEGAL_SUFFIX}"
                logger.info(
                    f"${entry.opcode:02X} {entry.mnemonic}: illegal handler "
                    f"'{entry.handler}' renamed to '{renamed}'"
                )
                self._slots[index] = replace(entry, handler=renamed)


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_table(
    source: TableSource,
    config: Optional[CompilerConfig] = None,
) -> DispatchTable:
    """
    Parse and compile a table source in one pass.

    Raises:
        TableError: On the first fatal diagnostic
    """
    config = config or CompilerConfig()
    logger.debug(f"Compiling {source.name} as a {config.variant} table")
    return TableCompiler(config).compile(iter_rows(source, config))


def compile_file(
    path: Union[str, Path],
    config: Optional[CompilerConfig] = None,
) -> DispatchTable:
    """Compile an instruction table file."""
    config = config or CompilerConfig()
    return compile_table(TableSource.from_path(path, encoding=config.encoding), config)


def compile_text(
    text: str,
    variant: Variant = Variant.STANDARD,
    name: str = "<input>",
) -> DispatchTable:
    """Compile a table held in a string. Mostly useful in tests and notebooks."""
    return compile_table(TableSource.from_text(text, name=name), CompilerConfig(variant=variant))
