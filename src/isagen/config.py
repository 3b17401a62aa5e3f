"""
isagen Configuration
====================

Compiler configuration: which table layout is being compiled, how records
are delimited, and the identifier-sharing policy for extended tables.

Configuration can come from:
- Default values (defined here)
- Environment variables (CompilerConfig.from_env)
- Command-line options (the CLI overrides individual fields)

Environment variables (all optional):
    ISAGEN_VARIANT: "standard" or "extended"
    ISAGEN_DELIMITER: Field delimiter (default ";")
    ISAGEN_ENCODING: Table file encoding (default "utf-8")
    ISAGEN_SHARE_IDENTIFIERS: "1"/"true"/"yes" to let standard and illegal
        rows share a handler identifier
"""

import codecs
import logging
import os
from dataclasses import dataclass, replace
from enum import Enum

logger = logging.getLogger(__name__)


class Variant(Enum):
    """
    Instruction table layout.

    STANDARD tables have seven fields per record; EXTENDED tables add an
    eighth legality column (standard/illegal). Both are compiled by the same
    code, selected by this flag.
    """
    STANDARD = "standard"
    EXTENDED = "extended"

    @property
    def field_count(self) -> int:
        """Number of fields in one record of this layout."""
        return 8 if self is Variant.EXTENDED else 7

    @property
    def has_category(self) -> bool:
        return self is Variant.EXTENDED

    def __str__(self) -> str:
        return self.value


_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class CompilerConfig:
    """
    Settings for one table compile.

    Attributes:
        variant: Table layout (default: STANDARD)
        delimiter: Field delimiter (default: ";")
        encoding: Encoding used to read table files (default: "utf-8")
        share_identifiers_across_categories: When False (default), an illegal
            row whose identifier collides with a standard row's identifier is
            given its own '<identifier>_illegal' handler. When True, both
            rows bind to the same handler.
    """

    variant: Variant = Variant.STANDARD
    delimiter: str = ";"
    encoding: str = "utf-8"
    share_identifiers_across_categories: bool = False

    def __post_init__(self) -> None:
        if len(self.delimiter) != 1:
            raise ValueError(f"delimiter must be a single character, got {self.delimiter!r}")
        try:
            codecs.lookup(self.encoding)
        except LookupError:
            raise ValueError(f"unknown encoding {self.encoding!r}") from None

    @classmethod
    def from_env(cls) -> "CompilerConfig":
        """
        Create a CompilerConfig from environment variables.

        Invalid values are logged and ignored, leaving the default in place.

        Returns:
            CompilerConfig with values from environment variables
        """
        config = cls()

        if variant := os.environ.get("ISAGEN_VARIANT"):
            try:
                config = replace(config, variant=Variant(variant.strip().lower()))
            except ValueError:
                logger.warning(f"Ignoring invalid ISAGEN_VARIANT={variant!r}")

        if delimiter := os.environ.get("ISAGEN_DELIMITER"):
            if len(delimiter) == 1:
                config = replace(config, delimiter=delimiter)
            else:
                logger.warning(f"Ignoring invalid ISAGEN_DELIMITER={delimiter!r}")

        if encoding := os.environ.get("ISAGEN_ENCODING"):
            try:
                config = replace(config, encoding=encoding)
            except ValueError:
                logger.warning(f"Ignoring invalid ISAGEN_ENCODING={encoding!r}")

        if share := os.environ.get("ISAGEN_SHARE_IDENTIFIERS"):
            config = replace(
                config,
                share_identifiers_across_categories=share.strip().lower() in _TRUE_VALUES,
            )

        return config

    def with_overrides(self, **overrides) -> "CompilerConfig":
        """Return a copy with the given fields replaced; None values are skipped."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
