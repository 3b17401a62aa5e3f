"""
Tests for the Bundled Instruction Tables
========================================

The shipped tables are real data: these tests check them against known
facts about the 6502 instruction set.
"""

from collections import Counter

import pytest

from isagen import InstructionSet, load_bundled_table
from isagen.config import CompilerConfig, Variant
from isagen.data import bundled_table_path
from isagen.errors import UnimplementedOpcodeError
from isagen.isa import AddressingMode, Category


@pytest.fixture(scope="module")
def standard():
    return load_bundled_table(Variant.STANDARD)


@pytest.fixture(scope="module")
def extended():
    return load_bundled_table(Variant.EXTENDED)


class TestStandardTable:
    """Tests for the 151 documented opcodes."""

    def test_counts(self, standard):
        assert len(standard) == 151
        assert len(standard.undefined_opcodes()) == 105
        assert len(standard.referenced_identifiers) == 56

    def test_lda_immediate(self, standard):
        entry = standard.lookup(0xA9)
        assert entry.mnemonic == "LDA"
        assert entry.mode is AddressingMode.IMMEDIATE
        assert entry.handler == "lda_load_accumulator_with_memory"
        assert (entry.length, entry.cycles) == (2, 2)

    @pytest.mark.parametrize("opcode,mnemonic,mode,length,cycles", [
        (0x00, "BRK", AddressingMode.IMPLICIT, 1, 7),
        (0x0A, "ASL", AddressingMode.ACCUMULATOR, 1, 2),
        (0x20, "JSR", AddressingMode.ABSOLUTE, 3, 6),
        (0x6C, "JMP", AddressingMode.INDIRECT, 3, 5),
        (0x91, "STA", AddressingMode.INDIRECT_Y, 2, 6),
        (0xA1, "LDA", AddressingMode.INDIRECT_X, 2, 6),
        (0xB6, "LDX", AddressingMode.ZERO_PAGE_Y, 2, 4),
        (0xD0, "BNE", AddressingMode.RELATIVE, 2, 2),
        (0xFE, "INC", AddressingMode.ABSOLUTE_X, 3, 7),
    ])
    def test_known_opcodes(self, standard, opcode, mnemonic, mode, length, cycles):
        entry = standard.lookup(opcode)
        assert (entry.mnemonic, entry.mode, entry.length, entry.cycles) == (mnemonic, mode, length, cycles)

    def test_length_matches_mode(self, standard):
        for entry in standard.entries():
            assert entry.length == 1 + entry.mode.operand_size, entry

    def test_no_categories(self, standard):
        assert all(entry.category is None for entry in standard.entries())

    def test_every_opcode_unimplemented_without_registry(self, standard):
        iset = InstructionSet(standard)
        assert iset.coverage() == (0, 151)
        with pytest.raises(UnimplementedOpcodeError) as exc_info:
            iset.execute(0xA9, None, 0)
        assert exc_info.value.opcode == 0xA9


class TestExtendedTable:
    """Tests for the full 256-opcode table."""

    def test_every_slot_defined(self, extended):
        assert len(extended) == 256
        assert extended.undefined_opcodes() == []

    def test_category_counts(self, extended):
        counts = Counter(entry.category for entry in extended.entries())
        assert counts == {Category.STANDARD: 151, Category.ILLEGAL: 105}

    def test_standard_rows_agree(self, standard, extended):
        """The documented rows are identical in both tables."""
        for entry in standard.entries():
            other = extended.lookup(entry.opcode)
            assert other.category is Category.STANDARD
            assert (other.mnemonic, other.mode, other.length, other.cycles, other.handler) == (
                entry.mnemonic, entry.mode, entry.length, entry.cycles, entry.handler,
            )

    def test_illegal_opcodes(self, extended):
        assert extended.lookup(0x02).handler == "jam_freeze_the_cpu"
        assert extended.lookup(0x4B).handler == "alr_and_oper_plus_lsr"
        assert extended.lookup(0xEB).handler == "usbc_sbc_oper_plus_nop"
        assert extended.lookup(0xCB).handler == "sbx_cmp_and_dex_at_once_sets_flags_like_cmp"
        assert len(extended.opcodes_for("jam_freeze_the_cpu")) == 12

    def test_illegal_nops_separated(self, extended):
        assert extended.opcodes_for("nop_no_operation") == [0xEA]
        assert len(extended.opcodes_for("nop_no_operation_illegal")) == 27

    def test_shared_nops(self):
        table = load_bundled_table(
            Variant.EXTENDED, CompilerConfig(share_identifiers_across_categories=True)
        )
        assert len(table.opcodes_for("nop_no_operation")) == 28


class TestBundledPaths:
    def test_files_exist(self):
        for variant in Variant:
            assert bundled_table_path(variant).is_file()
