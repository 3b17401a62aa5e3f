"""
Instruction Table Row Parser
============================

Splits delimiter-separated records into typed SpecRow values.

Record Format
-------------
One record per line, header line first. Fields, in order::

    mnemonic;description;addressing;assembler;opcode;length;cycles[;category]

- addressing: token resolved by resolve_addressing_mode()
- assembler: assembly syntax, informational only (e.g. "LDA #oper")
- opcode: exactly two hex digits ("A9")
- length: instruction length in bytes, 1-3
- cycles: positive integer
- category: "standard" or "illegal"; extended tables only

Fields are trimmed of surrounding whitespace. Trailing delimiters on a
record are stripped before splitting, so "LDA;...;2;2;" is accepted. Blank
lines are skipped. The header line is never parsed.

Example:
    LDA;Load Accumulator;immediate;LDA #nn;A9;2;2
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, Union

from isagen.config import CompilerConfig, Variant
from isagen.errors import MalformedRowError, SourceLocation, TableError
from isagen.isa.modes import (
    AddressingMode,
    Category,
    classify_category,
    resolve_addressing_mode,
)

logger = logging.getLogger(__name__)

_OPCODE_PATTERN = re.compile(r"[0-9A-Fa-f]{2}")
_INT_PATTERN = re.compile(r"[0-9]+")

MAX_INSTRUCTION_LENGTH = 3


# =============================================================================
# Spec Row
# =============================================================================

@dataclass(frozen=True)
class SpecRow:
    """
    One parsed record of an instruction table.

    Rows are produced lazily by iter_rows() and consumed immediately by the
    table compiler; nothing keeps them afterwards.

    Attributes:
        mnemonic: Instruction mnemonic
        description: Free-text description
        mode: Resolved addressing mode
        syntax: Assembly syntax (informational)
        opcode: Opcode byte (0-255)
        length: Instruction length in bytes (1-3)
        cycles: Base cycle count (> 0)
        category: Legality category, None for standard-layout tables
        location: Where the record was read
        raw: The record text as read
    """
    mnemonic: str
    description: str
    mode: AddressingMode
    syntax: str
    opcode: int
    length: int
    cycles: int
    category: Optional[Category] = None
    location: Optional[SourceLocation] = None
    raw: str = ""


# =============================================================================
# Parsing
# =============================================================================

def parse_row(
    record: str,
    variant: Variant = Variant.STANDARD,
    location: Optional[SourceLocation] = None,
    delimiter: str = ";",
) -> SpecRow:
    """
    Parse one record into a SpecRow.

    Args:
        record: The record text (one line, without newline)
        variant: Table layout; decides the field count and whether the
            category column is classified
        location: Where the record was read (for error messages)
        delimiter: Field delimiter

    Returns:
        The parsed row

    Raises:
        MalformedRowError: Wrong field count or unparsable numeric field
        InvalidAddressingModeError: Unknown addressing-mode token
        InvalidCategoryError: Unknown category token (extended tables)
    """
    raw = record.rstrip("\r\n")
    stripped = raw.strip().rstrip(delimiter).strip()
    fields = [field.strip() for field in stripped.split(delimiter)]

    if len(fields) != variant.field_count:
        raise MalformedRowError(
            raw,
            f"expected {variant.field_count} fields for a {variant} table, got {len(fields)}",
            location=location,
        )

    mnemonic, description, mode_token, syntax, opcode_text, length_text, cycles_text = fields[:7]

    if not mnemonic:
        raise MalformedRowError(raw, "empty mnemonic", location=location)

    if not _OPCODE_PATTERN.fullmatch(opcode_text):
        raise MalformedRowError(
            raw, f"opcode must be two hex digits, got '{opcode_text}'", location=location
        )
    opcode = int(opcode_text, 16)

    length = _parse_positive(raw, "length", length_text, location)
    if length > MAX_INSTRUCTION_LENGTH:
        raise MalformedRowError(
            raw, f"length must be 1-{MAX_INSTRUCTION_LENGTH}, got {length}", location=location
        )
    cycles = _parse_positive(raw, "cycles", cycles_text, location)

    try:
        mode = resolve_addressing_mode(mode_token)
        category = classify_category(fields[7]) if variant.has_category else None
    except TableError as e:
        raise e.with_location(location, raw) if location else e

    return SpecRow(
        mnemonic=mnemonic,
        description=description,
        mode=mode,
        syntax=syntax,
        opcode=opcode,
        length=length,
        cycles=cycles,
        category=category,
        location=location,
        raw=raw,
    )


def _parse_positive(
    raw: str,
    name: str,
    text: str,
    location: Optional[SourceLocation],
) -> int:
    """Parse a positive decimal integer field."""
    if not _INT_PATTERN.fullmatch(text) or int(text) == 0:
        raise MalformedRowError(
            raw, f"{name} must be a positive integer, got '{text}'", location=location
        )
    return int(text)


# =============================================================================
# Table Sources
# =============================================================================

class TableSource:
    """
    A lazy, restartable sequence of (location, record) pairs.

    Each iteration starts from the beginning; a file-backed source re-opens
    the file, so iterating twice over an unchanged file yields identical
    records (and therefore identical compiled tables).

    File-backed sources read bytes and decode one line at a time, so a
    line that is not valid in the table encoding is reported as a
    MalformedRowError at its own line number. The encoding must therefore
    keep b"\\n" as the line terminator (utf-8, latin-1, cp1252 and the like).
    """

    def __init__(
        self,
        name: str,
        opener: Callable[[], Iterable[Union[str, bytes]]],
        encoding: str = "utf-8",
    ):
        """
        Args:
            name: Name used in SourceLocation (file path or "<input>")
            opener: Called at the start of each iteration; returns the lines,
                as text or as undecoded bytes
            encoding: Encoding used to decode byte lines
        """
        self.name = name
        self.encoding = encoding
        self._opener = opener

    @classmethod
    def from_path(cls, path: Union[str, Path], encoding: str = "utf-8") -> "TableSource":
        path = Path(path)

        def read_lines() -> Iterator[bytes]:
            with path.open("rb") as f:
                yield from f

        return cls(str(path), read_lines, encoding=encoding)

    @classmethod
    def from_text(cls, text: str, name: str = "<input>") -> "TableSource":
        return cls(name, lambda: text.splitlines(keepends=True))

    @classmethod
    def from_lines(cls, lines: Iterable[str], name: str = "<input>") -> "TableSource":
        lines = list(lines)
        return cls(name, lambda: lines)

    def __iter__(self) -> Iterator[tuple[SourceLocation, str]]:
        for number, line in enumerate(self._opener(), start=1):
            location = SourceLocation(self.name, number)
            if isinstance(line, bytes):
                line = self._decode(line, location)
            yield location, line.rstrip("\r\n")

    def _decode(self, line: bytes, location: SourceLocation) -> str:
        """Decode one byte line, reporting undecodable bytes as a malformed row."""
        try:
            return line.decode(self.encoding)
        except UnicodeDecodeError as e:
            raw = line.decode(self.encoding, errors="replace").rstrip("\r\n")
            raise MalformedRowError(
                raw,
                f"cannot decode byte 0x{line[e.start]:02X} at column {e.start + 1} as {self.encoding}",
                location=location,
            ) from e

    def __repr__(self) -> str:
        return f"TableSource({self.name!r})"


def iter_rows(
    source: TableSource,
    config: Optional[CompilerConfig] = None,
) -> Iterator[SpecRow]:
    """
    Parse the data records of a table source, lazily, in file order.

    The first record is the header and is skipped without being parsed.
    Blank lines are skipped. Parsing stops at the first error, which
    propagates to the caller.

    Args:
        source: Table source to read
        config: Compiler configuration (variant and delimiter)

    Yields:
        One SpecRow per data record
    """
    config = config or CompilerConfig()
    records = iter(source)

    header = next(records, None)
    if header is None:
        logger.warning(f"{source.name}: table is empty")
        return
    logger.debug(f"{header[0]}: skipping header '{header[1]}'")

    for location, record in records:
        if not record.strip():
            continue
        yield parse_row(record, config.variant, location=location, delimiter=config.delimiter)
