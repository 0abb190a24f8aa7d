from __future__ import annotations

import asyncio
import traceback

import pytest

from codemode_ai.errors import ScriptCompilationError
from codemode_ai.sandbox import CapabilityNamespace
from codemode_ai.sandbox.compiler import SCRIPT_FILENAME, bind_entrypoint, build_scope, compile_script
from codemode_ai.sandbox.safe_builtins import SAFE_BUILTINS, script_builtins


async def _noop():
    return None


def test_compile_script_uses_script_filename() -> None:
    code = compile_script("return 1")
    assert code.co_filename == SCRIPT_FILENAME


def test_indented_script_is_dedented() -> None:
    code = compile_script("\n        x = 2\n        return x * 3\n")
    entry = bind_entrypoint(code, CapabilityNamespace({}))
    assert asyncio.run(entry()) == 6


@pytest.mark.parametrize("script", ["", "   ", "\n\n"])
def test_empty_scripts_are_rejected(script: str) -> None:
    with pytest.raises(ScriptCompilationError, match="empty"):
        compile_script(script)


def test_syntax_error_reports_script_line() -> None:
    with pytest.raises(ScriptCompilationError, match=r"line 3"):
        compile_script("a = 1\nb = 2\nc = (")


def test_scope_contains_only_namespace_and_builtins() -> None:
    ns = CapabilityNamespace({"mathAdd": _noop, "codemode": _noop, "bad-name": _noop})
    scope = build_scope(ns)
    assert scope["codemode"] is ns and scope["functions"] is ns
    assert scope["mathAdd"] is _noop
    assert "bad-name" not in scope
    assert "__import__" not in scope["__builtins__"]


def test_builtins_table_excludes_host_facilities() -> None:
    for name in ("__import__", "open", "eval", "exec", "compile", "globals", "print", "input", "getattr", "type"):
        assert name not in SAFE_BUILTINS
    table = script_builtins()
    table["len"] = None
    assert SAFE_BUILTINS["len"] is len


def test_multiline_string_literal_is_kept_verbatim() -> None:
    code = compile_script('x = """a\nb"""\nreturn x')
    entry = bind_entrypoint(code, CapabilityNamespace({}))
    assert asyncio.run(entry()) == "a\nb"


def test_leading_blank_lines_keep_reported_line() -> None:
    with pytest.raises(ScriptCompilationError, match=r"line 4"):
        compile_script("\n\na = 1\nb = (")


def test_runtime_traceback_uses_script_line_numbers() -> None:
    code = compile_script("a = 1\nreturn 1 / 0")
    entry = bind_entrypoint(code, CapabilityNamespace({}))
    with pytest.raises(ZeroDivisionError) as excinfo:
        asyncio.run(entry())
    frames = [fs for fs in traceback.extract_tb(excinfo.value.__traceback__) if fs.filename == SCRIPT_FILENAME]
    assert frames[-1].lineno == 2


def test_comment_only_script_returns_none() -> None:
    code = compile_script("# nothing to do")
    entry = bind_entrypoint(code, CapabilityNamespace({}))
    assert asyncio.run(entry()) is None


def test_top_level_await_compiles() -> None:
    async def double(x):
        return x * 2

    code = compile_script("return await double(21)")
    entry = bind_entrypoint(code, CapabilityNamespace({"double": double}))
    assert asyncio.run(entry()) == 42
