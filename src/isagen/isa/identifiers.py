"""
Handler identifier normalization.

A handler identifier is derived from a row's mnemonic and description, e.g.
``LDA`` + ``Load Accumulator`` -> ``lda_load_accumulator``. The result is a
valid Python identifier and is stable across runs, so generated code and
hand-written handler modules can refer to the same names.
"""

import keyword
import re

# Characters that survive normalization unchanged.
_INVALID_CHARS = re.compile(r"[^a-z0-9_]")
_SEPARATOR_RUNS = re.compile(r"_{2,}")


def normalize_identifier(mnemonic: str, description: str) -> str:
    """
    Derive the canonical handler identifier for a table row.

    Rules, applied in order:
        1. join mnemonic and description with a space, trim, lower-case
        2. '+' becomes the word 'plus'
        3. every character outside [a-z0-9_] becomes '_'
        4. runs of '_' collapse to one; leading/trailing '_' are dropped
        5. a leading digit gets an 'op_' prefix, a Python keyword a '_' suffix

    Examples:
        >>> normalize_identifier("LDA", "Load Accumulator")
        'lda_load_accumulator'
        >>> normalize_identifier("ALR", "AND oper + LSR")
        'alr_and_oper_plus_lsr'
        >>> normalize_identifier("SAX", "(AXS, AAX)")
        'sax_axs_aax'

    Args:
        mnemonic: Instruction mnemonic
        description: Free-text description

    Returns:
        The normalized identifier. Never fails; an all-punctuation input
        yields 'op'.
    """
    text = f"{mnemonic} {description}".strip().lower()
    text = text.replace("+", "_plus_")
    text = _INVALID_CHARS.sub("_", text)
    text = _SEPARATOR_RUNS.sub("_", text).strip("_")

    if not text:
        return "op"
    if text[0].isdigit():
        text = f"op_{text}"
    if keyword.iskeyword(text):
        text = f"{text}_"
    return text
