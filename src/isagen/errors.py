"""
isagen Error Hierarchy
======================

This module defines the exception hierarchy for the instruction-table
compiler and the dispatch layer built on top of it. All exceptions inherit
from IsaGenError, allowing callers to catch everything raised by the package
with a single except clause.

Exception Hierarchy
-------------------
IsaGenError (base)
├── TableError (compile-time, fatal)
│   ├── InvalidAddressingModeError - unknown addressing-mode token
│   ├── InvalidCategoryError - unknown legality token (extended tables)
│   ├── MalformedRowError - wrong field count or bad numeric field
│   └── DuplicateOpcodeError - two rows claim the same opcode byte
├── RegistryError - a handler registry could not be loaded
└── ExecutionError (runtime, raised while dispatching)
    ├── UndefinedOpcodeError - the table never defined this opcode
    └── UnimplementedOpcodeError - the opcode is bound to a placeholder

Compile-time errors are never collected: the first one aborts the compile
and no table is produced. ExecutionError subclasses are ordinary, catchable
results for an interpreter; an UnimplementedOpcodeError means "defined but
not written yet" and is never a crash.

Error messages follow this format:
    instructions.txt:12: error: invalid addressing mode 'indirect,Z'
        LDA;Load Accumulator;indirect,Z;LDA (oper),Z;B2;2;5
    hint: did you mean '(indirect),Y'?
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class IsaGenError(Exception):
    """
    Base exception for all isagen errors.

        try:
            table = compile_file("instructions.txt")
        except IsaGenError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A record position in an instruction table.

    Tables are line oriented, so a location is a file name and a 1-indexed
    line number. Frozen so that rows and errors can share instances.

    Attributes:
        filename: Name of the table file (or "<input>" for string input)
        line: Line number (1-indexed)
    """
    filename: str
    line: int

    def __str__(self) -> str:
        """Format as 'filename:line' for error messages."""
        return f"{self.filename}:{self.line}"


# =============================================================================
# Table (compile-time) Exceptions
# =============================================================================

class TableError(IsaGenError):
    """
    Base exception for errors found while compiling an instruction table.

    Attributes:
        message: The error description
        location: Where in the table the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The raw record at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source record, and hint.

        Example output:
            instructions.txt:7: error: duplicate opcode $4A (LSR, ROL)
                ROL;Rotate One Bit Left;accumulator;ROL A;4A;1;2
            hint: $4A was first defined by LSR at instructions.txt:5
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None:
            parts.append(f"    {self.source_line}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)

    def with_location(
        self,
        location: SourceLocation,
        source_line: Optional[str] = None,
    ) -> "TableError":
        """
        Attach a location to an error raised without one.

        Resolvers are plain functions of a token and may not know where the
        token came from; the row parser fills the position in before the
        error leaves it. Returns self so it can be used in a raise statement.
        """
        if self.location is None:
            self.location = location
        if self.source_line is None:
            self.source_line = source_line
        self.args = (self._format_message(),)
        return self

    def __str__(self) -> str:
        return self._format_message()


class InvalidAddressingModeError(TableError):
    """
    Addressing-mode token not in the fixed vocabulary.

    The token is kept verbatim so that typos in the source table can be
    located exactly. Resolution is never fuzzy; close matches only feed
    the hint.

    Example:
        LDA;Load Accumulator;indirect,Z;...   ; 'indirect,Z' is not a mode
    """

    def __init__(
        self,
        token: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_tokens: Optional[list[str]] = None,
    ):
        self.token = token
        self.similar_tokens = similar_tokens or []

        hint = None
        if self.similar_tokens:
            suggestions = ", ".join(f"'{t}'" for t in self.similar_tokens[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"invalid addressing mode '{token}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class InvalidCategoryError(TableError):
    """
    Legality token other than 'standard' or 'illegal'.

    Only raised when compiling the extended table layout, which carries a
    category column.
    """

    def __init__(
        self,
        token: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.token = token
        super().__init__(
            f"invalid instruction category '{token}'",
            location=location,
            hint="category must be 'standard' or 'illegal'",
            source_line=source_line,
        )


class MalformedRowError(TableError):
    """
    A record that cannot be split into typed fields.

    Raised for a wrong field count or an unparsable opcode, length or cycle
    count. The raw record is kept for diagnostics.
    """

    def __init__(
        self,
        raw: str,
        reason: str,
        location: Optional[SourceLocation] = None,
    ):
        self.raw = raw
        self.reason = reason
        super().__init__(
            f"malformed row: {reason}",
            location=location,
            source_line=raw,
        )


class DuplicateOpcodeError(TableError):
    """
    Two rows define the same opcode byte.

    Names both mnemonics and the shared opcode. When the first definition's
    location is known it is reported as a hint.
    """

    def __init__(
        self,
        opcode: int,
        first_mnemonic: str,
        second_mnemonic: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.opcode = opcode
        self.first_mnemonic = first_mnemonic
        self.second_mnemonic = second_mnemonic
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"${opcode:02X} was first defined by {first_mnemonic} at {original_location}"

        super().__init__(
            f"duplicate opcode ${opcode:02X} ({first_mnemonic}, {second_mnemonic})",
            location=location,
            hint=hint,
            source_line=source_line,
        )


# =============================================================================
# Registry Exceptions
# =============================================================================

class RegistryError(IsaGenError):
    """
    A handler registry could not be loaded.

    Raised when a 'module:attribute' reference cannot be imported, does not
    name a HandlerRegistry, or a handlers source file cannot be parsed.
    """
    pass


# =============================================================================
# Execution (runtime) Exceptions
# =============================================================================

class ExecutionError(IsaGenError):
    """Base exception for failures raised while dispatching an opcode."""

    def __init__(self, opcode: int, message: str):
        self.opcode = opcode
        super().__init__(message)


class UndefinedOpcodeError(ExecutionError):
    """
    Lookup of an opcode that no table row defined.

    This is a data error: the instruction table never claimed the opcode.
    Compare UnimplementedOpcodeError, where the table claims the opcode but
    its handler is a placeholder.
    """

    def __init__(self, opcode: int):
        super().__init__(opcode, f"undefined opcode ${opcode:02X}")


class UnimplementedOpcodeError(ExecutionError):
    """
    Dispatch to an opcode whose handler is a synthesized placeholder.

    Carries the opcode being executed, not only the handler name, since one
    handler identifier may be bound to several opcodes.

    Attributes:
        opcode: The opcode byte being executed
        mnemonic: Its mnemonic
        handler: The handler identifier that has no real implementation
    """

    def __init__(self, opcode: int, mnemonic: str = "", handler: str = ""):
        self.mnemonic = mnemonic
        self.handler = handler

        message = f"unimplemented opcode ${opcode:02X}"
        if mnemonic:
            message += f" ({mnemonic})"
        if handler:
            message += f": handler '{handler}' is a placeholder"

        super().__init__(opcode, message)
