"""Compile script text into an isolated async entrypoint.

The script text becomes the body of ``async def``, so it may ``await``
capability calls and ``return`` a value. The body is spliced in at the syntax
tree level: string literals and line numbers are exactly those of the script.
The function's globals are built from scratch: the curated builtins table, the
capability namespace bound as ``codemode`` and ``functions``, and each
capability as a bare name when it is a valid identifier. Nothing else from the
host program is reachable by name.
"""

from __future__ import annotations

import ast
import textwrap
from types import CodeType
from typing import Any, Awaitable, Callable, Dict

from codemode_ai.errors import ScriptCompilationError

from .namespace import CapabilityNamespace
from .safe_builtins import script_builtins

SCRIPT_FILENAME = "<codemode>"
ENTRYPOINT_NAME = "__codemode_main__"
NAMESPACE_BINDINGS = ("codemode", "functions")


def _parse(script: str) -> ast.Module:
    try:
        return ast.parse(script, filename=SCRIPT_FILENAME)
    except IndentationError:
        # A uniformly indented script; dedent keeps the line count.
        dedented = textwrap.dedent(script)
        if dedented == script:
            raise
        return ast.parse(dedented, filename=SCRIPT_FILENAME)


def _wrap(module: ast.Module) -> ast.Module:
    wrapper = ast.parse(f"async def {ENTRYPOINT_NAME}():\n    pass\n", filename=SCRIPT_FILENAME)
    if module.body:
        wrapper.body[0].body = module.body
    return ast.fix_missing_locations(wrapper)


def compile_script(script: str) -> CodeType:
    """Compile ``script`` as the body of an async function.

    Raises:
        ScriptCompilationError: If the script is empty or not valid Python.
    """
    if not script or not script.strip():
        raise ScriptCompilationError("Script is empty")
    try:
        return compile(_wrap(_parse(script)), SCRIPT_FILENAME, "exec", dont_inherit=True)
    except SyntaxError as e:
        raise ScriptCompilationError(f"Invalid script: {e.msg} (line {e.lineno or 1})") from e
    except ValueError as e:
        raise ScriptCompilationError(f"Invalid script: {e}") from e


def build_scope(namespace: CapabilityNamespace) -> Dict[str, Any]:
    """Build the globals dict the entrypoint will run with."""
    builtins_table = script_builtins()
    scope: Dict[str, Any] = {"__builtins__": builtins_table, "__name__": "codemode_script"}
    for binding in NAMESPACE_BINDINGS:
        scope[binding] = namespace
    reserved = {**builtins_table, **scope}
    scope.update(namespace.bare_bindings(reserved))
    return scope


def bind_entrypoint(code: CodeType, namespace: CapabilityNamespace) -> Callable[[], Awaitable[Any]]:
    """Execute the compiled module in a fresh scope and return the entrypoint."""
    scope = build_scope(namespace)
    exec(code, scope)
    return scope[ENTRYPOINT_NAME]
