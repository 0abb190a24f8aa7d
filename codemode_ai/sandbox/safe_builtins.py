"""Builtins table visible to orchestration scripts.

Scripts get the pure data-manipulation part of the language only. Everything
that reaches outside the script's own values is absent: importing, file and
console I/O, dynamic evaluation, and access to globals or frames.
"""

from __future__ import annotations

import builtins
from types import MappingProxyType
from typing import Any, Dict

_ALLOWED_NAMES = (
    # constants
    "True",
    "False",
    "None",
    "Ellipsis",
    "NotImplemented",
    # types and constructors
    "bool",
    "bytes",
    "complex",
    "dict",
    "float",
    "frozenset",
    "int",
    "list",
    "object",
    "range",
    "set",
    "slice",
    "str",
    "tuple",
    # iteration and functional helpers
    "abs",
    "all",
    "any",
    "divmod",
    "enumerate",
    "filter",
    "iter",
    "len",
    "map",
    "max",
    "min",
    "next",
    "pow",
    "reversed",
    "round",
    "sorted",
    "sum",
    "zip",
    "aiter",
    "anext",
    # inspection of plain values
    "callable",
    "chr",
    "format",
    "hash",
    "isinstance",
    "issubclass",
    "ord",
    "repr",
    "ascii",
    "bin",
    "hex",
    "oct",
    # exceptions
    "BaseException",
    "Exception",
    "ArithmeticError",
    "AssertionError",
    "AttributeError",
    "IndexError",
    "KeyError",
    "LookupError",
    "NotImplementedError",
    "RuntimeError",
    "StopAsyncIteration",
    "StopIteration",
    "TimeoutError",
    "TypeError",
    "ValueError",
    "ZeroDivisionError",
)

# Names deliberately left out (kept here so the table is reviewable):
# __import__, open, input, print, eval, exec, compile, globals, locals, vars,
# dir, getattr, setattr, delattr, breakpoint, help, exit, quit, memoryview,
# classmethod, staticmethod, property, super, type, __build_class__.

SAFE_BUILTINS: MappingProxyType = MappingProxyType({name: getattr(builtins, name) for name in _ALLOWED_NAMES})


def script_builtins() -> Dict[str, Any]:
    """Return a fresh, mutable copy of the builtins table for one script scope."""
    return dict(SAFE_BUILTINS)
