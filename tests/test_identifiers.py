"""
Unit Tests for Handler Identifier Normalization
===============================================
"""

import keyword

import pytest

from isagen.isa import normalize_identifier


class TestNormalizeIdentifier:
    """Tests for normalize_identifier()."""

    @pytest.mark.parametrize("mnemonic,description,expected", [
        ("LDA", "Load Accumulator", "lda_load_accumulator"),
        ("ADC", "Add Memory to Accumulator with Carry", "adc_add_memory_to_accumulator_with_carry"),
        ("ALR", "AND oper + LSR", "alr_and_oper_plus_lsr"),
        ("SAX", "(AXS, AAX)", "sax_axs_aax"),
        ("LXA", "Store * AND oper in A and X", "lxa_store_and_oper_in_a_and_x"),
        ("SBX", "CMP and DEX at once, sets flags like CMP", "sbx_cmp_and_dex_at_once_sets_flags_like_cmp"),
        ("JAM", "Freeze the CPU", "jam_freeze_the_cpu"),
        ("USBC", "SBC oper + NOP", "usbc_sbc_oper_plus_nop"),
        ("EOR", "Exclusive-OR Memory with Accumulator", "eor_exclusive_or_memory_with_accumulator"),
        ("LAS", "LDA/TSX oper", "las_lda_tsx_oper"),
    ])
    def test_known_rows(self, mnemonic, description, expected):
        assert normalize_identifier(mnemonic, description) == expected

    def test_deterministic(self):
        """Same input, same identifier."""
        first = normalize_identifier("ROL", "Rotate One Bit Left")
        assert normalize_identifier("ROL", "Rotate One Bit Left") == first

    def test_separators_collapse(self):
        assert normalize_identifier("NOP", "  No -- Operation  ") == "nop_no_operation"

    def test_empty_description(self):
        assert normalize_identifier("NOP", "") == "nop"

    def test_all_punctuation(self):
        assert normalize_identifier("", "---") == "op"

    def test_leading_digit(self):
        assert normalize_identifier("", "65C02 only") == "op_65c02_only"

    def test_keyword_gets_suffix(self):
        result = normalize_identifier("", "pass")
        assert result == "pass_"
        assert not keyword.iskeyword(result)

    @pytest.mark.parametrize("mnemonic,description", [
        ("BIT", "Test Bits in Memory with Accumulator"),
        ("TAS", "Puts A AND X in SP and stores A AND X AND high byte at addr"),
        ("X", "ünïcode and $%^ symbols"),
    ])
    def test_result_is_identifier(self, mnemonic, description):
        assert normalize_identifier(mnemonic, description).isidentifier()
