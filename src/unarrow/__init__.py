"""
unarrow: rewrite JavaScript arrow functions into ordinary function expressions.

    >>> import unarrow
    >>> unarrow.compile("var f = x => x * 2;").code
    'var f = function(x) {\\n  return x * 2;\\n};\\n'

Lexical `this` is preserved with `.bind(this)`; `arguments` inside an arrow is
redirected to the enclosing function's arguments object.
"""

from functools import lru_cache
from typing import Any, Dict, Optional, Union

from .compiler.driver import CompilationResult, CompilerDriver
from .passes.base import TransformContext
from .passes.pipeline import transform as _run_pipeline
from .shared.errors import UnarrowError, UnarrowImplementationError, UnarrowSourceError
from .shared.estree import from_estree, to_estree
from .shared.nodes import Program

__version__ = "0.3.0"


@lru_cache(maxsize=1)
def _default_driver() -> CompilerDriver:
    return CompilerDriver()


def transform(program: Union[Program, Dict[str, Any]], strict: bool = False) -> Union[Program, Dict[str, Any]]:
    """
    Rewrite every arrow function in a parsed program.

    Accepts a Program node (returned rewritten) or an ESTree dictionary as
    produced by esprima-style parsers (returned as a new ESTree dictionary).
    """
    ctx = TransformContext(strict=strict)
    if isinstance(program, dict):
        tree = _run_pipeline(from_estree(program), ctx)
        return to_estree(tree, include_locations="loc" in program)
    return _run_pipeline(program, ctx)


def compile(source: str, source_file_name: Optional[str] = None, source_map_name: Optional[str] = None,
            strict: bool = False) -> CompilationResult:
    """
    Transform JavaScript source text.

    Returns a CompilationResult with `code`, `map` (a Source Map v3 dict when
    `source_map_name` is given, else None) and `diagnostics`. Raises
    UnarrowSourceError for input that cannot be parsed (E0001), or, with
    `strict`, that uses `arguments` in an arrow outside any function (E0002).
    """
    result = _default_driver().compile(
        source,
        source_file_name=source_file_name,
        source_map_name=source_map_name,
        strict=strict,
    )
    if result.error is not None:
        raise result.error
    return result


__all__ = [
    'CompilationResult',
    'CompilerDriver',
    'UnarrowError',
    'UnarrowImplementationError',
    'UnarrowSourceError',
    'compile',
    'transform',
]
