"""
Opcode Dispatch Table
=====================

The artifact produced by the table compiler: a fixed array of 256 slots
indexed by opcode byte. Each slot is either undefined (no table row claimed
the opcode) or holds a DispatchEntry describing the instruction and naming
the handler bound to it.

Two facts about an opcode are kept apart:

- **defined**: the slot is occupied (the instruction table claims it)
- **implemented**: the handler named by the entry has a real implementation

Only the first is recorded here. Whether a handler is real or a placeholder
is decided by the handler registry at bind time (see instruction_set.py), so
a table can be complete long before the interpreter is.

Usage:
    table = compile_file("instructions.txt")

    entry = table.lookup(0xA9)        # UndefinedOpcodeError if unoccupied
    print(entry)                      # $A9: LDA immediate ...
    if table.get(0x02) is None:
        print("$02 is undefined")
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from isagen.config import Variant
from isagen.errors import UndefinedOpcodeError
from isagen.isa.modes import AddressingMode, Category

SLOT_COUNT = 256


# =============================================================================
# Dispatch Entry
# =============================================================================

@dataclass(frozen=True)
class DispatchEntry:
    """
    Resolved description of one opcode.

    Frozen so a compiled table can be shared between interpreter instances
    without copying.

    Attributes:
        opcode: Opcode byte (0-255)
        mnemonic: Instruction mnemonic (e.g. "LDA")
        mode: Resolved addressing mode
        length: Instruction length in bytes, opcode included (1-3)
        cycles: Base cycle count
        handler: Handler identifier bound to this opcode
        category: STANDARD or ILLEGAL for extended tables, None otherwise
    """
    opcode: int
    mnemonic: str
    mode: AddressingMode
    length: int
    cycles: int
    handler: str
    category: Optional[Category] = None

    @property
    def is_illegal(self) -> bool:
        return self.category is Category.ILLEGAL

    def __str__(self) -> str:
        """Format as a listing line: $OP: MNEMONIC mode  length/cycles  handler"""
        line = (
            f"${self.opcode:02X}: {self.mnemonic:<4} {str(self.mode):<13} "
            f"{self.length}b {self.cycles}c  {self.handler}"
        )
        if self.category is not None:
            line += f"  [{self.category}]"
        return line

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        d = {
            "opcode": f"${self.opcode:02X}",
            "opcode_int": self.opcode,
            "mnemonic": self.mnemonic,
            "mode": self.mode.name,
            "length": self.length,
            "cycles": self.cycles,
            "handler": self.handler,
        }
        if self.category is not None:
            d["category"] = self.category.value
        return d


# =============================================================================
# Dispatch Table
# =============================================================================

class DispatchTable:
    """
    Immutable 256-slot opcode table.

    Slots are stored in a tuple; lookup is a direct index. The set of
    handler identifiers referenced by occupied slots is computed once at
    construction, since the stub synthesizer and the binder both need it.

    Attributes:
        variant: Table layout the entries were compiled from
    """

    __slots__ = ("_slots", "_identifiers", "variant")

    def __init__(
        self,
        slots: Iterable[Optional[DispatchEntry]],
        variant: Variant = Variant.STANDARD,
    ):
        """
        Initialize from a full slot sequence.

        Args:
            slots: Exactly 256 items, each None or the entry for that index
            variant: Layout the table was compiled from

        Raises:
            ValueError: If the slot count is wrong or an entry sits in a slot
                that does not match its opcode
        """
        slots = tuple(slots)
        if len(slots) != SLOT_COUNT:
            raise ValueError(f"dispatch table needs {SLOT_COUNT} slots, got {len(slots)}")
        for index, entry in enumerate(slots):
            if entry is not None and entry.opcode != index:
                raise ValueError(f"entry for ${entry.opcode:02X} stored in slot ${index:02X}")

        self._slots: tuple[Optional[DispatchEntry], ...] = slots
        self._identifiers = frozenset(e.handler for e in slots if e is not None)
        self.variant = variant

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[DispatchEntry],
        variant: Variant = Variant.STANDARD,
    ) -> "DispatchTable":
        """
        Build a table from entries in any order.

        Used by generated dispatch modules. Duplicate opcodes are rejected
        with ValueError; tables compiled from text report duplicates through
        the compiler instead, with locations.
        """
        slots: list[Optional[DispatchEntry]] = [None] * SLOT_COUNT
        for entry in entries:
            if slots[entry.opcode] is not None:
                raise ValueError(f"duplicate entry for opcode ${entry.opcode:02X}")
            slots[entry.opcode] = entry
        return cls(slots, variant=variant)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def lookup(self, opcode: int) -> DispatchEntry:
        """
        Return the entry bound to an opcode.

        Raises:
            UndefinedOpcodeError: If no table row defined the opcode
            IndexError: If the opcode is outside 0-255
        """
        entry = self[opcode]
        if entry is None:
            raise UndefinedOpcodeError(opcode)
        return entry

    def get(self, opcode: int) -> Optional[DispatchEntry]:
        """
        Return the entry for an opcode, or None if it is undefined.

        Raises:
            IndexError: If the opcode is outside 0-255
        """
        return self[opcode]

    def __getitem__(self, opcode: int) -> Optional[DispatchEntry]:
        if not 0 <= opcode < SLOT_COUNT:
            raise IndexError(f"opcode out of range: {opcode}")
        return self._slots[opcode]

    def is_defined(self, opcode: int) -> bool:
        """Same as ``opcode in table``; False outside 0-255."""
        return opcode in self

    # -------------------------------------------------------------------------
    # Iteration and summary
    # -------------------------------------------------------------------------

    @property
    def slots(self) -> tuple[Optional[DispatchEntry], ...]:
        """All 256 slots, None where undefined."""
        return self._slots

    @property
    def referenced_identifiers(self) -> frozenset[str]:
        """Distinct handler identifiers referenced by occupied slots."""
        return self._identifiers

    def entries(self) -> Iterator[DispatchEntry]:
        """Iterate occupied slots in opcode order."""
        return (entry for entry in self._slots if entry is not None)

    def undefined_opcodes(self) -> list[int]:
        return [index for index, entry in enumerate(self._slots) if entry is None]

    def opcodes_for(self, identifier: str) -> list[int]:
        """Opcodes whose entries are bound to a handler identifier."""
        return [e.opcode for e in self.entries() if e.handler == identifier]

    def __len__(self) -> int:
        """Number of occupied slots."""
        return SLOT_COUNT - len(self.undefined_opcodes())

    def __iter__(self) -> Iterator[DispatchEntry]:
        return self.entries()

    def __contains__(self, opcode: object) -> bool:
        return isinstance(opcode, int) and 0 <= opcode < SLOT_COUNT and self._slots[opcode] is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DispatchTable):
            return NotImplemented
        return self.variant is other.variant and self._slots == other._slots

    def __hash__(self) -> int:
        return hash((self.variant, self._slots))

    def __repr__(self) -> str:
        return f"DispatchTable(variant={self.variant.value}, defined={len(self)}/{SLOT_COUNT})"
