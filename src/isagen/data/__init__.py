"""
Bundled 6502 instruction tables.

    instructions.txt      151 documented opcodes, standard layout
    instructions_all.txt  all 256 opcodes, extended layout (105 illegal)
"""

from pathlib import Path
from typing import Optional

from isagen.compiler.table import compile_file
from isagen.config import CompilerConfig, Variant
from isagen.dispatch.table import DispatchTable

TABLE_FILES = {
    Variant.STANDARD: "instructions.txt",
    Variant.EXTENDED: "instructions_all.txt",
}

BUNDLED_DELIMITER = ";"
BUNDLED_ENCODING = "utf-8"


def bundled_table_path(variant: Variant = Variant.STANDARD) -> Path:
    """Filesystem path of the bundled table for a layout."""
    return Path(__file__).parent / TABLE_FILES[variant]


def load_bundled_table(
    variant: Variant = Variant.STANDARD,
    config: Optional[CompilerConfig] = None,
) -> DispatchTable:
    """
    Compile the bundled table for a layout.

    Args:
        variant: Which bundled table to compile
        config: Optional base configuration; its variant is replaced by
            ``variant``, its delimiter and encoding by those of the bundled files

    Returns:
        The compiled DispatchTable
    """
    config = (config or CompilerConfig()).with_overrides(
        variant=variant, delimiter=BUNDLED_DELIMITER, encoding=BUNDLED_ENCODING
    )
    return compile_file(bundled_table_path(variant), config)
