"""
isagen Compiler Package
=======================

Turns a delimiter-separated instruction table into a DispatchTable.

Modules:
    rows: Record parsing (SpecRow, TableSource, parse_row, iter_rows)
    table: The compile pass (TableCompiler, compile_table, compile_file)
    stubs: Placeholder handlers for unimplemented identifiers
    emit: Renderers for generated output and all-or-nothing file writing

Usage:
    from isagen.compiler import compile_file, render_dispatch_module

    table = compile_file("instructions.txt")
    print(render_dispatch_module(table))
"""

from isagen.compiler.rows import SpecRow, TableSource, iter_rows, parse_row
from isagen.compiler.table import (
    ILLEGAL_SUFFIX,
    CompilerState,
    TableCompiler,
    compile_file,
    compile_table,
    compile_text,
)
from isagen.compiler.stubs import (
    StubHandler,
    missing_identifiers,
    render_stub_module,
    synthesize_stubs,
)
from isagen.compiler.emit import (
    OUTPUT_FORMATS,
    render,
    render_dispatch_module,
    render_json,
    render_listing,
    write_outputs,
)

__all__ = [
    # rows
    "SpecRow",
    "TableSource",
    "parse_row",
    "iter_rows",
    # table
    "ILLEGAL_SUFFIX",
    "CompilerState",
    "TableCompiler",
    "compile_table",
    "compile_file",
    "compile_text",
    # stubs
    "StubHandler",
    "missing_identifiers",
    "synthesize_stubs",
    "render_stub_module",
    # emit
    "OUTPUT_FORMATS",
    "render",
    "render_dispatch_module",
    "render_json",
    "render_listing",
    "write_outputs",
]
