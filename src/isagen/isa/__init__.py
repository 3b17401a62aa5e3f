"""
isagen ISA Package
==================

Closed vocabularies shared by the table compiler and the dispatch layer:
addressing modes, instruction categories, and the handler identifier
normalizer.

Modules:
    modes: AddressingMode and Category enums with their table-token resolvers
    identifiers: Handler identifier normalization

Usage:
    from isagen.isa import AddressingMode, resolve_addressing_mode

    mode = resolve_addressing_mode("(indirect),Y")
    assert mode is AddressingMode.INDIRECT_Y
"""

from isagen.isa.identifiers import normalize_identifier
from isagen.isa.modes import (
    ADDRESSING_MODE_TOKENS,
    CATEGORY_TOKENS,
    AddressingMode,
    Category,
    classify_category,
    resolve_addressing_mode,
)

__all__ = [
    "AddressingMode",
    "Category",
    "ADDRESSING_MODE_TOKENS",
    "CATEGORY_TOKENS",
    "resolve_addressing_mode",
    "classify_category",
    "normalize_identifier",
]
