"""
Dispatch Table Emitters
=======================

Renders a compiled DispatchTable for consumption outside this process, and
writes generated files all-or-nothing.

Output formats:
    python: a module declaring ENTRIES (one DispatchEntry per opcode) and
            TABLE = DispatchTable.from_entries(ENTRIES, ...)
    json: a document with the variant and the list of entries
    listing: a 256-line human-readable listing, undefined slots marked

All renderers are pure functions of the table: same table, same text.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Mapping, Optional, Union

from isagen.dispatch.table import DispatchTable

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("python", "json", "listing")


# =============================================================================
# Renderers
# =============================================================================

def render_dispatch_module(table: DispatchTable, source_name: Optional[str] = None) -> str:
    """
    Render the table as a Python module of opcode-bound declarations.

    Example output line:
        DispatchEntry(0xA9, "LDA", AddressingMode.IMMEDIATE, 2, 2, "lda_load_accumulator_with_memory"),
    """
    origin = f" from {source_name}" if source_name else ""
    lines = [
        '"""',
        "Opcode dispatch table.",
        "",
        f"Generated by isagen{origin} ({table.variant} table, {len(table)} opcodes).",
        "Do not edit: change the instruction table and regenerate.",
        '"""',
        "",
        "from isagen.config import Variant",
        "from isagen.dispatch.table import DispatchEntry, DispatchTable",
        "from isagen.isa.modes import AddressingMode, Category",
        "",
        "ENTRIES = (",
    ]

    for entry in table.entries():
        args = [
            f"0x{entry.opcode:02X}",
            json.dumps(entry.mnemonic),
            f"AddressingMode.{entry.mode.name}",
            str(entry.length),
            str(entry.cycles),
            f'"{entry.handler}"',
        ]
        if entry.category is not None:
            args.append(f"Category.{entry.category.name}")
        lines.append(f"    DispatchEntry({', '.join(args)}),")

    lines.extend([
        ")",
        "",
        f"TABLE = DispatchTable.from_entries(ENTRIES, variant=Variant.{table.variant.name})",
        "",
    ])
    return "\n".join(lines)


def render_json(table: DispatchTable) -> str:
    """Render the table as a JSON document."""
    document = {
        "variant": table.variant.value,
        "defined": len(table),
        "entries": [entry.to_dict() for entry in table.entries()],
    }
    return json.dumps(document, indent=2) + "\n"


def render_listing(table: DispatchTable) -> str:
    """Render all 256 slots, one per line."""
    lines = [
        f"; {table.variant} table: {len(table)} defined, {256 - len(table)} undefined",
        "",
    ]
    for opcode, entry in enumerate(table.slots):
        lines.append(str(entry) if entry is not None else f"${opcode:02X}: ---  (undefined)")
    return "\n".join(lines) + "\n"


def render(table: DispatchTable, output_format: str = "python", source_name: Optional[str] = None) -> str:
    """
    Render in a named format.

    Raises:
        ValueError: For an unknown format
    """
    if output_format == "python":
        return render_dispatch_module(table, source_name)
    if output_format == "json":
        return render_json(table)
    if output_format == "listing":
        return render_listing(table)
    raise ValueError(f"unknown output format '{output_format}' (expected one of {', '.join(OUTPUT_FORMATS)})")


# =============================================================================
# All-or-nothing Output
# =============================================================================

def write_outputs(outputs: Mapping[Union[str, Path], str], encoding: str = "utf-8") -> None:
    """
    Write several generated files so that either all or none are updated.

    Each file is first written to a temporary file in its target directory.
    Only when every temporary file is complete are they renamed over their
    targets. If anything fails before that point the temporary files are
    removed and no target is modified.

    The renames themselves are not one atomic step: if a rename fails
    after earlier ones succeeded, the targets already renamed keep their
    new content. The remaining temporary files are removed and the error
    is raised.

    Args:
        outputs: Mapping of target path to file content
        encoding: Text encoding

    Raises:
        OSError: If a temporary file cannot be written or renamed
    """
    pending: list[tuple[Path, Path]] = []
    try:
        for target, content in outputs.items():
            target = Path(target)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
            )
            pending.append((Path(tmp_name), target))
            with os.fdopen(fd, "w", encoding=encoding, newline="\n") as f:
                f.write(content)
    except BaseException:
        _discard(pending)
        raise

    for index, (tmp, target) in enumerate(pending):
        try:
            os.replace(tmp, target)
        except BaseException:
            renamed = [str(t) for _, t in pending[:index]]
            if renamed:
                logger.error(f"Rename of {target} failed after updating {', '.join(renamed)}")
            _discard(pending[index:])
            raise
        logger.info(f"Wrote {target}")


def _discard(pending: list[tuple[Path, Path]]) -> None:
    """Remove staged temporary files."""
    for tmp, _ in pending:
        tmp.unlink(missing_ok=True)
