"""
Compiler Driver

ESTree Pattern: parse → transform → print
"""

import logging
import os
from typing import Any, Dict, List, Optional

from ..backends.javascript import JavaScriptPrinter
from ..backends.source_map import SourceMapBuilder
from ..frontend.parser import Parser
from ..passes.base import TransformContext
from ..passes.pipeline import transform
from ..shared.errors import Error, UnarrowSourceError
from ..shared.nodes import Program
from ..utils.config import DEFAULT_SOURCE_FILE, DUMP_AST_ENV_VAR

logger = logging.getLogger("unarrow.compiler.driver")


class CompilationResult:
    """Compilation result"""
    def __init__(
        self,
        code: Optional[str] = None,
        map: Optional[Dict[str, Any]] = None,
        program: Optional[Program] = None,
        ctx: Optional[TransformContext] = None,
        success: bool = False,
        error: Optional[UnarrowSourceError] = None,
    ):
        self.code = code
        self.map = map
        self.program = program
        self.ctx = ctx
        self.success = success
        self.error = error

    @property
    def diagnostics(self) -> List[Error]:
        """Errors and warnings reported while compiling"""
        if self.ctx is None:
            return []
        return list(self.ctx.reporter.errors)

    def has_errors(self) -> bool:
        """True if compilation reported errors."""
        if self.ctx is not None and self.ctx.reporter.has_errors():
            return True
        return not self.success

    def format_diagnostics(self, color: Optional[bool] = None) -> str:
        if self.ctx is None:
            return ""
        return self.ctx.reporter.format_all_errors(color=color)


class CompilerDriver:
    """
    Compiler driver.

    - Parses JavaScript text (Parser)
    - Runs the arrow lowering pipeline (passes.pipeline)
    - Prints the result, with a source map when one is requested
    - Reports source errors on the result instead of raising
    """

    def __init__(self):
        self.parser = Parser()

    def compile(
        self,
        source: str,
        source_file_name: Optional[str] = None,
        source_map_name: Optional[str] = None,
        strict: bool = False,
        dump_ast: Optional[bool] = None,
    ) -> CompilationResult:
        """
        Compile source code.

        Phases:
        1. Parsing (source → Program)
        2. Transform (ScopeAnalysisPass → ArrowFunctionLoweringPass → ArrowFreeValidationPass)
        3. Printing (Program → code, optional Source Map v3)

        Args:
            source_file_name: name recorded in locations and in the map's `sources`
            source_map_name: when given, a source map is produced with this `file`
            strict: `arguments` in an arrow with no enclosing function is an error
            dump_ast: dump the tree after each pass to stderr (default: $UNARROW_DUMP_AST)
        """
        source_file = source_file_name or DEFAULT_SOURCE_FILE
        if dump_ast is None:
            dump_ast = bool(os.environ.get(DUMP_AST_ENV_VAR))
        ctx = TransformContext(strict=strict, source_files={source_file: source})

        try:
            program = self.parser.parse(source, source_file)
            program = transform(program, ctx, dump_ast=dump_ast)
        except UnarrowSourceError as e:
            if e.source_code is None:
                e.source_code = source
            ctx.reporter.errors.append(e.to_diagnostic())
            logger.debug(f"Compilation of {source_file} failed: [{e.error_code}] {e.message}")
            return CompilationResult(ctx=ctx, success=False, error=e)

        source_map = SourceMapBuilder(source_map_name, source_file) if source_map_name else None
        printed = JavaScriptPrinter().print(program, source_map)
        return CompilationResult(
            code=printed.code,
            map=printed.map,
            program=program,
            ctx=ctx,
            success=True,
        )

