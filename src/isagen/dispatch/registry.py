"""
Handler Registry
================

The set of handler identifiers that have a real, hand-written
implementation. The registry is owned by the interpreter, not by the
compiler: the compiler only reads it to decide which identifiers need
placeholder stubs.

A handler is any callable with the signature::

    handler(entry: DispatchEntry, context, operand) -> result

where ``context`` is the interpreter's execution context (CPU state, bus,
...) and ``operand`` the decoded operand. Both are opaque to isagen.

Registries come in three forms:

1. Populated with callables by the interpreter::

       handlers = HandlerRegistry()

       @handlers.handler
       def clc_clear_carry_flag(entry, cpu, operand):
           cpu.flag_c = False
           return 0

2. Name-only, when only membership matters (stub generation from the CLI)::

       registry = HandlerRegistry.from_names(["clc_clear_carry_flag"])

3. Discovered from a handlers source file without importing it::

       registry = registry_from_source("cpu_handlers.py")
"""

import ast
import importlib
import logging
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, Optional, Union

from isagen.errors import RegistryError

logger = logging.getLogger(__name__)

Handler = Callable[[Any, Any, Any], Any]


class HandlerRegistry:
    """
    Mapping of handler identifier to implementation.

    Names registered without a callable (name-only registries) count as
    implemented for stub synthesis but cannot be bound for execution.
    """

    def __init__(self, handlers: Optional[dict[str, Handler]] = None):
        self._handlers: dict[str, Optional[Handler]] = dict(handlers or {})

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "HandlerRegistry":
        """Create a name-only registry."""
        registry = cls()
        for name in names:
            registry._handlers[name] = None
        return registry

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(self, name: str, func: Handler) -> Handler:
        """
        Register a handler under an identifier.

        Raises:
            ValueError: If the identifier already has a callable
        """
        if self._handlers.get(name) is not None:
            raise ValueError(f"handler '{name}' is already registered")
        self._handlers[name] = func
        return func

    def handler(self, func: Optional[Handler] = None, *, name: Optional[str] = None):
        """
        Decorator registering a function as a handler.

        The identifier defaults to the function name:

            @registry.handler
            def nop_no_operation(entry, cpu, operand): ...

            @registry.handler(name="nop_no_operation_illegal")
            def illegal_nop(entry, cpu, operand): ...
        """
        def decorator(f: Handler) -> Handler:
            return self.register(name or f.__name__, f)

        if func is not None:
            return decorator(func)
        return decorator

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get(self, name: str) -> Optional[Handler]:
        """Return the callable for an identifier, or None."""
        return self._handlers.get(name)

    def names(self) -> frozenset[str]:
        return frozenset(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._handlers))

    def __len__(self) -> int:
        return len(self._handlers)

    def __repr__(self) -> str:
        return f"HandlerRegistry({len(self)} handlers)"


# =============================================================================
# Registry Loading
# =============================================================================

def registry_from_source(path: Union[str, Path]) -> HandlerRegistry:
    """
    Collect the top-level function names defined in a Python source file.

    The file is parsed, never imported, so an interpreter module with heavy
    dependencies can still drive stub generation at build time.

    Raises:
        RegistryError: If the file cannot be read or is not valid Python
    """
    path = Path(path)
    try:
        tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    except (OSError, SyntaxError, UnicodeDecodeError) as e:
        raise RegistryError(f"cannot read handlers from {path}: {e}") from e

    names = [
        node.name
        for node in tree.body
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef))
        and not node.name.startswith("_")
    ]
    logger.debug(f"Found {len(names)} handler definitions in {path}")
    return HandlerRegistry.from_names(names)


def registry_from_names_file(path: Union[str, Path]) -> HandlerRegistry:
    """
    Read implemented identifiers from a text file, one per line.

    Blank lines and lines starting with '#' are ignored.
    """
    path = Path(path)
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise RegistryError(f"cannot read handler names from {path}: {e}") from e

    names = [line.strip() for line in lines if line.strip() and not line.lstrip().startswith("#")]
    return HandlerRegistry.from_names(names)


def load_registry(reference: str) -> HandlerRegistry:
    """
    Import a registry from a 'package.module:attribute' reference.

    Raises:
        RegistryError: If the module cannot be imported or the attribute is
            missing or not a HandlerRegistry
    """
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise RegistryError(f"registry reference must look like 'module:attribute', got '{reference}'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise RegistryError(f"cannot import '{module_name}': {e}") from e

    registry = getattr(module, attribute, None)
    if not isinstance(registry, HandlerRegistry):
        raise RegistryError(f"'{reference}' is not a HandlerRegistry")
    return registry
