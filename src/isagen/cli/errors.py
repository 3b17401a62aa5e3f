"""
CLI Error Handling
==================

Maps exceptions raised by the compiler to messages on stderr and exit codes.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from isagen.errors import IsaGenError, RegistryError, TableError


class ExitCode(IntEnum):
    """Exit codes of the isagen tool."""
    SUCCESS = 0
    BUILD_ERROR = 1      # Table could not be compiled
    INVALID_ARGS = 2     # Invalid arguments, missing files, unloadable registry
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Report an exception and exit with the matching exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print the traceback of internal errors
        error_type: Optional prefix for the message (e.g., "Compile")

    Raises:
        SystemExit: Always
    """
    if isinstance(error, RegistryError):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, TableError):
        # Table errors already carry an "error:" prefix and location
        click.echo(str(error), err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, IsaGenError):
        prefix = f"{error_type} error: " if error_type else "Error: "
        click.echo(f"{prefix}{error}", err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, (click.BadParameter, click.UsageError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, (FileNotFoundError, PermissionError, IsADirectoryError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
