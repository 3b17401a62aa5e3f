"""
isagen - Instruction Table Compiler Command-Line Interface
==========================================================

This module implements the command-line interface for the instruction
table compiler. It compiles a 6502 instruction table into a dispatch table
for an emulator core and writes placeholder handlers for every instruction
the core does not implement yet.

Usage Examples
--------------
Compile a table into a Python dispatch module:
    $ isagen compile instructions.txt -o dispatch_table.py

Also write placeholders for handlers missing from the interpreter:
    $ isagen compile instructions.txt -o dispatch_table.py \\
          --stubs handlers_stub.py --handlers cpu/handlers.py

Compile the bundled 256-opcode table, including illegal opcodes:
    $ isagen compile --bundled --extended --format json -o opcodes.json

Show one opcode:
    $ isagen show --bundled --opcode A9

Outputs are written all-or-nothing: when any of them cannot be produced,
none of the target files is touched.

Environment
-----------
ISAGEN_VARIANT, ISAGEN_DELIMITER, ISAGEN_ENCODING and
ISAGEN_SHARE_IDENTIFIERS provide defaults; command-line options override
them.

Exit Codes
----------
0 - Success
1 - Table error (bad token, malformed row, duplicate opcode)
2 - Invalid arguments, missing files or unloadable handler registry
3 - Internal error
"""

import logging
from pathlib import Path
from typing import Optional

import click

from isagen import __version__
from isagen.cli.errors import handle_cli_exception
from isagen.compiler import (
    OUTPUT_FORMATS,
    compile_file,
    missing_identifiers,
    render,
    render_stub_module,
    write_outputs,
)
from isagen.config import CompilerConfig, Variant
from isagen.data import BUNDLED_DELIMITER, BUNDLED_ENCODING, bundled_table_path
from isagen.dispatch import (
    DispatchTable,
    HandlerRegistry,
    InstructionSet,
    load_registry,
    registry_from_names_file,
    registry_from_source,
)

logger = logging.getLogger(__name__)


# =============================================================================
# CLI Context and Utilities
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Holds the verbosity flag and the configuration read from the
    environment, which each command refines with its own options.
    """

    def __init__(self) -> None:
        self.verbose: bool = False
        self.config: CompilerConfig = CompilerConfig()

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.WARNING
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s" if self.verbose else "%(message)s",
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


def table_options(func):
    """Options shared by every command that compiles a table."""
    decorators = [
        click.argument(
            "input_file",
            required=False,
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
        ),
        click.option(
            "--bundled",
            is_flag=True,
            help="Use the instruction table shipped with isagen instead of INPUT_FILE",
        ),
        click.option(
            "--extended",
            is_flag=True,
            help="Compile the extended layout with a standard/illegal column",
        ),
        click.option(
            "-d", "--delimiter",
            type=str,
            default=None,
            help="Field delimiter of INPUT_FILE (default: ';')",
        ),
        click.option(
            "--encoding",
            type=str,
            default=None,
            help="Encoding of INPUT_FILE (default: utf-8)",
        ),
        click.option(
            "--share-identifiers",
            is_flag=True,
            help="Let illegal rows share a handler with the standard row of the same name",
        ),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def registry_options(func):
    """Options naming the interpreter's implemented handlers."""
    decorators = [
        click.option(
            "--registry",
            "registry_ref",
            type=str,
            default=None,
            metavar="MODULE:ATTR",
            help="Import a HandlerRegistry object",
        ),
        click.option(
            "--handlers",
            "handlers_file",
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
            default=None,
            help="Python file whose top-level functions are the implemented handlers",
        ),
        click.option(
            "--implemented",
            "names_file",
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
            default=None,
            help="Text file listing implemented handler names, one per line",
        ),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def compile_from_options(
    ctx: Context,
    input_file: Optional[Path],
    bundled: bool,
    extended: bool,
    delimiter: Optional[str],
    encoding: Optional[str],
    share_identifiers: bool,
) -> tuple[DispatchTable, str]:
    """
    Compile the table selected by the shared options.

    Returns:
        (table, source name)
    """
    if bundled and input_file is not None:
        raise click.UsageError("INPUT_FILE and --bundled are mutually exclusive")
    if not bundled and input_file is None:
        raise click.UsageError("missing INPUT_FILE (or use --bundled)")
    if bundled and delimiter not in (None, BUNDLED_DELIMITER):
        raise click.UsageError(
            f"the bundled tables are '{BUNDLED_DELIMITER}'-delimited; "
            "--delimiter only applies to INPUT_FILE"
        )

    try:
        config = ctx.config.with_overrides(
            variant=Variant.EXTENDED if extended else None,
            delimiter=delimiter,
            encoding=encoding,
            share_identifiers_across_categories=True if share_identifiers else None,
        )
    except ValueError as e:
        raise click.BadParameter(str(e))

    if bundled:
        # ISAGEN_DELIMITER and ISAGEN_ENCODING describe the user's own tables
        config = config.with_overrides(delimiter=BUNDLED_DELIMITER, encoding=BUNDLED_ENCODING)

    path = bundled_table_path(config.variant) if bundled else input_file
    logger.debug(f"Compiling {path} with {config}")
    table = compile_file(path, config)
    return table, path.name


def load_handlers(
    registry_ref: Optional[str],
    handlers_file: Optional[Path],
    names_file: Optional[Path],
) -> HandlerRegistry:
    """Build the registry selected by the registry options (empty if none)."""
    given = [opt for opt in (registry_ref, handlers_file, names_file) if opt is not None]
    if len(given) > 1:
        raise click.UsageError("--registry, --handlers and --implemented are mutually exclusive")

    if registry_ref is not None:
        return load_registry(registry_ref)
    if handlers_file is not None:
        return registry_from_source(handlers_file)
    if names_file is not None:
        return registry_from_names_file(names_file)
    return HandlerRegistry()


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable verbose output",
)
@click.version_option(version=__version__, prog_name="isagen")
@pass_context
def main(ctx: Context, verbose: bool) -> None:
    """
    Compile 6502 instruction tables into opcode dispatch tables.

    Every defined opcode is bound to a handler identifier derived from its
    mnemonic and description. Handlers the interpreter does not implement
    yet are replaced by placeholders that raise UnimplementedOpcodeError.
    """
    ctx.verbose = verbose
    ctx.setup_logging()
    ctx.config = CompilerConfig.from_env()


# =============================================================================
# Compile Command
# =============================================================================

@main.command("compile")
@table_options
@registry_options
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file (default: stdout)",
)
@click.option(
    "-f", "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default="python",
    show_default=True,
    help="Output format",
)
@click.option(
    "-s", "--stubs",
    "stubs_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write placeholder handlers to this Python file",
)
@pass_context
def compile_command(
    ctx: Context,
    input_file: Optional[Path],
    bundled: bool,
    extended: bool,
    delimiter: Optional[str],
    encoding: Optional[str],
    share_identifiers: bool,
    registry_ref: Optional[str],
    handlers_file: Optional[Path],
    names_file: Optional[Path],
    output: Optional[Path],
    output_format: str,
    stubs_file: Optional[Path],
) -> None:
    """
    Compile an instruction table.

    INPUT_FILE is a delimiter-separated table, header line first. The
    compiled table is written in the selected format to --output (or
    stdout). With --stubs, placeholders for every handler missing from the
    registry are written too; both files are updated together or not at
    all.

    Example:
        isagen compile instructions.txt -o dispatch_table.py
        isagen compile --bundled --extended -f listing
    """
    try:
        table, source_name = compile_from_options(
            ctx, input_file, bundled, extended, delimiter, encoding, share_identifiers
        )
        registry = load_handlers(registry_ref, handlers_file, names_file)
        missing = missing_identifiers(table, registry)

        outputs: dict[Path, str] = {}
        rendered = render(table, output_format, source_name)
        if output is not None:
            outputs[output] = rendered
        if stubs_file is not None:
            outputs[stubs_file] = render_stub_module(missing, table, source_name)

        if outputs:
            write_outputs(outputs, encoding=ctx.config.encoding)
        if output is None:
            click.echo(rendered, nl=False)

        click.echo(
            f"Compiled {len(table)} opcodes from {source_name}: "
            f"{len(table.referenced_identifiers)} handlers, {len(missing)} placeholders",
            err=True,
        )
        for path in outputs:
            click.echo(f"Wrote {path}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose, error_type="Compile")


# =============================================================================
# Stubs Command
# =============================================================================

@main.command("stubs")
@table_options
@registry_options
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file (default: stdout)",
)
@pass_context
def stubs_command(
    ctx: Context,
    input_file: Optional[Path],
    bundled: bool,
    extended: bool,
    delimiter: Optional[str],
    encoding: Optional[str],
    share_identifiers: bool,
    registry_ref: Optional[str],
    handlers_file: Optional[Path],
    names_file: Optional[Path],
    output: Optional[Path],
) -> None:
    """
    Write placeholder handlers for an instruction table.

    One function is written per handler identifier the table references
    and the registry does not implement. Output is sorted and contains no
    timestamps, so regenerating from unchanged inputs changes nothing.

    Example:
        isagen stubs instructions.txt --handlers cpu/handlers.py -o stubs.py
    """
    try:
        table, source_name = compile_from_options(
            ctx, input_file, bundled, extended, delimiter, encoding, share_identifiers
        )
        registry = load_handlers(registry_ref, handlers_file, names_file)
        missing = missing_identifiers(table, registry)
        source = render_stub_module(missing, table, source_name)

        if output is not None:
            write_outputs({output: source}, encoding=ctx.config.encoding)
            click.echo(f"Wrote {len(missing)} placeholders to {output}", err=True)
        else:
            click.echo(source, nl=False)

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose, error_type="Stub")


# =============================================================================
# Show Command
# =============================================================================

def parse_opcode(ctx, param, value: Optional[str]) -> Optional[int]:
    """Click callback: parse an opcode given as A9, $A9 or 0xA9."""
    if value is None:
        return None
    text = value.strip()
    if text.startswith("$"):
        text = text[1:]
    elif text.lower().startswith("0x"):
        text = text[2:]
    try:
        opcode = int(text, 16)
    except ValueError:
        raise click.BadParameter(f"'{value}' is not a hex opcode")
    if not 0 <= opcode <= 0xFF:
        raise click.BadParameter(f"'{value}' is out of range (00-FF)")
    return opcode


@main.command("show")
@table_options
@registry_options
@click.option(
    "--opcode",
    type=str,
    default=None,
    callback=parse_opcode,
    help="Show a single opcode (hex, e.g. A9 or $A9)",
)
@pass_context
def show_command(
    ctx: Context,
    input_file: Optional[Path],
    bundled: bool,
    extended: bool,
    delimiter: Optional[str],
    encoding: Optional[str],
    share_identifiers: bool,
    registry_ref: Optional[str],
    handlers_file: Optional[Path],
    names_file: Optional[Path],
    opcode: Optional[int],
) -> None:
    """
    Summarize an instruction table.

    Prints the number of defined and undefined opcodes, and how many are
    bound to a real handler. With --opcode, prints that opcode's entry.

    Example:
        isagen show --bundled --extended
        isagen show instructions.txt --opcode A9
    """
    try:
        table, source_name = compile_from_options(
            ctx, input_file, bundled, extended, delimiter, encoding, share_identifiers
        )
        registry = load_handlers(registry_ref, handlers_file, names_file)

        if opcode is not None:
            entry = table.get(opcode)
            if entry is None:
                click.echo(f"${opcode:02X}: undefined")
                return
            status = "placeholder" if entry.handler not in registry else "implemented"
            click.echo(f"{entry}  ({status})")
            return

        implemented = sum(1 for entry in table.entries() if entry.handler in registry)
        click.echo(f"Table:        {source_name} ({table.variant})")
        click.echo(f"Defined:      {len(table)}")
        click.echo(f"Undefined:    {len(table.undefined_opcodes())}")
        click.echo(f"Handlers:     {len(table.referenced_identifiers)}")
        click.echo(f"Implemented:  {implemented}/{len(table)} opcodes")
        if table.variant.has_category:
            illegal = sum(1 for entry in table.entries() if entry.is_illegal)
            click.echo(f"Illegal:      {illegal}")

        if registry_ref is not None:
            # Importable registries hold callables, so the binding can be checked
            click.echo(f"Bound:        {InstructionSet(table, registry)!r}")

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose, error_type="Show")


if __name__ == "__main__":
    main()
