"""
isagen Test Configuration
=========================

Shared fixtures: small instruction tables in both layouts, and handler
registries.
"""

import pytest

from isagen.compiler import TableSource, compile_table
from isagen.config import CompilerConfig, Variant
from isagen.dispatch import HandlerRegistry


STANDARD_HEADER = "operation;description;addressing;assembler;opc;bytes;cycles"
EXTENDED_HEADER = STANDARD_HEADER + ";category"

SMALL_STANDARD_TABLE = "\n".join([
    STANDARD_HEADER,
    "LDA;Load Accumulator;immediate;LDA #oper;A9;2;2",
    "LDA;Load Accumulator;zeropage;LDA oper;A5;2;3",
    "STA;Store Accumulator in Memory;absolute;STA oper;8D;3;4",
    "ROL;Rotate One Bit Left;accumulator;ROL A;2A;1;2",
    "JMP;Jump to New Location;indirect;JMP (oper);6C;3;5",
    "NOP;No Operation;implied;NOP;EA;1;2",
    "",
])

SMALL_EXTENDED_TABLE = "\n".join([
    EXTENDED_HEADER,
    "LDA;Load Accumulator;immediate;LDA #oper;A9;2;2;standard",
    "NOP;No Operation;implied;NOP;EA;1;2;standard",
    "NOP;No Operation;implied;NOP;1A;1;2;illegal",
    "NOP;No Operation;immediate;NOP #oper;80;2;2;illegal",
    "SAX;(AXS, AAX);zeropage;SAX oper;87;2;3;illegal",
    "JAM;Freeze the CPU;implied;JAM;02;1;2;illegal",
    "",
])


@pytest.fixture
def standard_text() -> str:
    """Fixture: a six-row standard-layout table."""
    return SMALL_STANDARD_TABLE


@pytest.fixture
def extended_text() -> str:
    """Fixture: a six-row extended-layout table with illegal opcodes."""
    return SMALL_EXTENDED_TABLE


@pytest.fixture
def standard_table():
    """Fixture: the compiled six-row standard table."""
    return compile_table(TableSource.from_text(SMALL_STANDARD_TABLE, name="small.txt"))


@pytest.fixture
def extended_table():
    """Fixture: the compiled six-row extended table."""
    return compile_table(
        TableSource.from_text(SMALL_EXTENDED_TABLE, name="small_all.txt"),
        CompilerConfig(variant=Variant.EXTENDED),
    )


@pytest.fixture
def lda_registry() -> HandlerRegistry:
    """Fixture: a registry implementing only LDA, returning the operand."""
    registry = HandlerRegistry()

    @registry.handler
    def lda_load_accumulator(entry, context, operand):
        context["a"] = operand
        return entry.cycles

    return registry


@pytest.fixture
def table_file(tmp_path):
    """Fixture: the standard table written to disk."""
    path = tmp_path / "instructions.txt"
    path.write_text(SMALL_STANDARD_TABLE, encoding="utf-8")
    return path
