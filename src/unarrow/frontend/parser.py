"""
Parser

ESTree Pattern: esprima.parse(source, {loc: true, range: true})
"""

import logging
from pathlib import Path
from typing import Optional

from lark import Lark
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken, VisitError

from ..shared.errors import ErrorCode, UnarrowError, UnarrowImplementationError, UnarrowSourceError
from ..shared.nodes import Program
from ..shared.source_location import SourceLocation
from ..utils.config import DEFAULT_SOURCE_FILE
from .transformers.base import UnarrowTransformer

logger = logging.getLogger("unarrow.frontend.parser")


class Parser:
    """
    JavaScript parser.

    - Takes source text, returns a Program tree
    - Preserves source locations (1-based line and column, byte offsets)
    - Raises ParseError (E0001) on malformed input
    """

    def __init__(self):
        grammar_path = Path(__file__).parent / "grammar.lark"
        self.parser = Lark.open(
            grammar_path,
            start='program',
            parser='earley',             # arrow parameters need unbounded lookahead
            lexer='basic',
            propagate_positions=True,    # Enable position tracking for error reporting
            maybe_placeholders=False,    # Clean meta handling
        )
        if not any(str(rule.origin.name) == "arrow_function" for rule in self.parser.rules):
            raise UnarrowImplementationError("grammar.lark does not define arrow_function")
        self.transformer = UnarrowTransformer()

    def parse(self, source: str, source_file: str = DEFAULT_SOURCE_FILE) -> Program:
        """
        Parse source code to a Program.

        Returns: AST (Program node)
        """
        self.transformer.current_file = source_file
        try:
            tree = self.parser.parse(source)
        except UnexpectedInput as e:
            raise ParseError(
                _describe(e),
                source_file,
                _error_location(e, source, source_file),
                source_code=source,
            ) from e

        try:
            program = self.transformer.transform(tree)
        except VisitError as e:
            if isinstance(e.orig_exc, UnarrowError):
                if isinstance(e.orig_exc, UnarrowSourceError) and e.orig_exc.source_code is None:
                    e.orig_exc.source_code = source
                raise e.orig_exc from None
            raise

        logger.debug(f"Parsed {source_file}: {len(program.body)} top-level statements")
        return program


class ParseError(UnarrowSourceError):
    """Parse error with source location"""
    def __init__(self, message: str, source_file: str, location: Optional[SourceLocation] = None,
                 source_code: Optional[str] = None):
        super().__init__(message, location, error_code=ErrorCode.SYNTAX_ERROR.value, source_code=source_code)
        self.source_file = source_file


def _describe(error: UnexpectedInput) -> str:
    if isinstance(error, UnexpectedEOF):
        return "unexpected end of input"
    if isinstance(error, UnexpectedCharacters):
        return f"unexpected character `{error.char}`"
    if isinstance(error, UnexpectedToken):
        if error.token.type == "$END":
            return "unexpected end of input"
        if str(error.token) in ("/", "/="):
            # a slash where an operand belongs can only open a regex
            return f"unexpected token `{error.token}`: regular expression literals are not supported"
        return f"unexpected token `{error.token}`"
    return "syntax error"


def _error_location(error: UnexpectedInput, source: str, source_file: str) -> SourceLocation:
    line = getattr(error, "line", -1)
    column = getattr(error, "column", -1)
    if line is None or line < 1:
        # End of input: point just past the last character
        lines = source.split("\n")
        line, column = len(lines), len(lines[-1]) + 1
    return SourceLocation(file=source_file, line=line, column=column, start=getattr(error, "pos_in_stream", 0) or 0)
