"""
6502 Addressing Modes and Instruction Categories
================================================

This module defines the closed vocabularies used by instruction tables and
the resolvers that map table tokens onto them. Tokens are resolved once, at
the table boundary; everything downstream works with the enum members and
never re-inspects raw text.

Addressing Modes
----------------
The 6502 family has thirteen addressing modes:

1. **IMPLICIT**: No operand (CLC, RTS). Token: ``implied``
2. **ACCUMULATOR**: Operates on A (ASL A). Token: ``accumulator``
3. **IMMEDIATE**: Literal byte (LDA #$41). Token: ``immediate``
4. **ZERO_PAGE**: Address $00-$FF. Token: ``zeropage``
5. **ZERO_PAGE_X** / **ZERO_PAGE_Y**: Zero page plus index, wrapping
   within page zero. Tokens: ``zeropage,X`` / ``zeropage,Y``
6. **ABSOLUTE**: Full 16-bit address. Token: ``absolute`` (``absolut`` is
   accepted as an alternate spelling)
7. **ABSOLUTE_X** / **ABSOLUTE_Y**: Absolute plus index.
   Tokens: ``absolute,X`` / ``absolute,Y``
8. **RELATIVE**: Signed 8-bit branch displacement. Token: ``relative``
9. **INDIRECT**: JMP through a 16-bit pointer.
   Tokens: ``indirect`` or ``(indirect)``
10. **INDIRECT_X**: Indexed indirect, pointer at (zp + X).
    Token: ``(indirect,X)``
11. **INDIRECT_Y**: Indirect indexed, pointer at zp, then + Y.
    Token: ``(indirect),Y``

Matching is exact (after trimming surrounding whitespace). There is no
fuzzy matching and no default mode: an unknown token is always a fatal
InvalidAddressingModeError.
"""

from difflib import get_close_matches
from enum import Enum
from typing import Optional

from isagen.errors import (
    InvalidAddressingModeError,
    InvalidCategoryError,
    SourceLocation,
)


# =============================================================================
# Addressing Mode Enumeration
# =============================================================================

class AddressingMode(Enum):
    """
    6502 addressing modes.

    Member values are the canonical table tokens, so ``mode.value`` is what
    a generated table would contain for that mode.
    """
    IMPLICIT = "implied"
    ACCUMULATOR = "accumulator"
    IMMEDIATE = "immediate"
    ZERO_PAGE = "zeropage"
    ZERO_PAGE_X = "zeropage,X"
    ZERO_PAGE_Y = "zeropage,Y"
    ABSOLUTE = "absolute"
    ABSOLUTE_X = "absolute,X"
    ABSOLUTE_Y = "absolute,Y"
    RELATIVE = "relative"
    INDIRECT = "indirect"
    INDIRECT_X = "(indirect,X)"
    INDIRECT_Y = "(indirect),Y"

    @property
    def token(self) -> str:
        """Canonical table token for this mode."""
        return self.value

    @property
    def operand_size(self) -> int:
        """Size of the operand in bytes (0, 1 or 2)."""
        return _OPERAND_SIZES[self]

    def __str__(self) -> str:
        """Return human-readable name for listings and error messages."""
        return {
            AddressingMode.IMPLICIT: "implicit",
            AddressingMode.ACCUMULATOR: "accumulator",
            AddressingMode.IMMEDIATE: "immediate",
            AddressingMode.ZERO_PAGE: "zero page",
            AddressingMode.ZERO_PAGE_X: "zero page,X",
            AddressingMode.ZERO_PAGE_Y: "zero page,Y",
            AddressingMode.ABSOLUTE: "absolute",
            AddressingMode.ABSOLUTE_X: "absolute,X",
            AddressingMode.ABSOLUTE_Y: "absolute,Y",
            AddressingMode.RELATIVE: "relative",
            AddressingMode.INDIRECT: "indirect",
            AddressingMode.INDIRECT_X: "(indirect,X)",
            AddressingMode.INDIRECT_Y: "(indirect),Y",
        }[self]


_OPERAND_SIZES = {
    AddressingMode.IMPLICIT: 0,
    AddressingMode.ACCUMULATOR: 0,
    AddressingMode.IMMEDIATE: 1,
    AddressingMode.ZERO_PAGE: 1,
    AddressingMode.ZERO_PAGE_X: 1,
    AddressingMode.ZERO_PAGE_Y: 1,
    AddressingMode.ABSOLUTE: 2,
    AddressingMode.ABSOLUTE_X: 2,
    AddressingMode.ABSOLUTE_Y: 2,
    AddressingMode.RELATIVE: 1,
    AddressingMode.INDIRECT: 2,
    AddressingMode.INDIRECT_X: 1,
    AddressingMode.INDIRECT_Y: 1,
}


# =============================================================================
# Instruction Category Enumeration
# =============================================================================

class Category(Enum):
    """Legality of an opcode: documented, or undocumented but emulatable."""
    STANDARD = "standard"
    ILLEGAL = "illegal"

    def __str__(self) -> str:
        return self.value


# =============================================================================
# Token Vocabularies
# =============================================================================
# Every accepted spelling, mapped to its mode. The canonical tokens come
# from the enum values; the extra entries are the alternate spellings found
# in published 6502 tables.
# =============================================================================

ADDRESSING_MODE_TOKENS: dict[str, AddressingMode] = {
    **{mode.value: mode for mode in AddressingMode},
    "absolut": AddressingMode.ABSOLUTE,
    "(indirect)": AddressingMode.INDIRECT,
}

CATEGORY_TOKENS: dict[str, Category] = {
    category.value: category for category in Category
}


# =============================================================================
# Resolvers
# =============================================================================

def resolve_addressing_mode(
    token: str,
    location: Optional[SourceLocation] = None,
) -> AddressingMode:
    """
    Resolve an addressing-mode token from an instruction table.

    Args:
        token: Token as it appears in the table
        location: Where the token was read (for error messages)

    Returns:
        The matching AddressingMode

    Raises:
        InvalidAddressingModeError: If the token is not in the vocabulary.
            The error carries the token verbatim.
    """
    mode = ADDRESSING_MODE_TOKENS.get(token.strip())
    if mode is None:
        raise InvalidAddressingModeError(
            token,
            location=location,
            similar_tokens=get_close_matches(token.strip(), list(ADDRESSING_MODE_TOKENS), n=3),
        )
    return mode


def classify_category(
    token: str,
    location: Optional[SourceLocation] = None,
) -> Category:
    """
    Resolve a legality token ('standard' or 'illegal').

    Raises:
        InvalidCategoryError: If the token is anything else.
    """
    category = CATEGORY_TOKENS.get(token.strip())
    if category is None:
        raise InvalidCategoryError(token, location=location)
    return category
