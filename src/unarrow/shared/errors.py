"""
Error Reporting

rustc-style diagnostics for JavaScript sources: a header line, a `-->` location
arrow, the offending source line with a caret underline, and optional
help/note annotations.
"""

import os
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Optional, List, Dict
from .source_location import SourceLocation


# ---------------------------------------------------------------------------
# ANSI color helpers (disabled when NO_COLOR is set or UNARROW_COLOR says so)
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    explicit = os.environ.get("UNARROW_COLOR", "").lower()
    if explicit in ("0", "false", "no", "never"):
        return False
    return sys.stderr.isatty()

_BOLD   = "\033[1m"
_RED    = "\033[31m"
_BLUE   = "\033[34m"
_CYAN   = "\033[36m"
_YELLOW = "\033[33m"
_RESET  = "\033[0m"

def _style(text: str, *codes: str, color: bool = True) -> str:
    if not color:
        return text
    prefix = "".join(codes)
    return f"{prefix}{text}{_RESET}" if prefix else text


class ErrorCode(Enum):
    """Diagnostic codes emitted by unarrow."""
    SYNTAX_ERROR = "E0001"
    UNRESOLVED_ARGUMENTS = "E0002"
    TOP_LEVEL_ARGUMENTS = "W0001"
    UNPRINTABLE_NODE = "E9001"
    ARROW_SURVIVED_LOWERING = "E9002"


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


# ---------------------------------------------------------------------------
# Diagnostic dataclass
# ---------------------------------------------------------------------------

@dataclass
class Error:
    """A single diagnostic (error or warning)."""
    message: str
    location: Optional[SourceLocation]
    code: Optional[str] = None
    help: Optional[str] = None
    note: Optional[str] = None
    label: Optional[str] = None
    severity: Severity = Severity.ERROR


# ---------------------------------------------------------------------------
# Formatting engine
# ---------------------------------------------------------------------------

def _format_diagnostic(
    error: Error,
    source_files: Dict[str, str],
    color: bool = False,
) -> str:
    """
    Render a single diagnostic in rustc style.

    Example output (plain, no color)::

        warning[W0001]: `arguments` used in an arrow function outside any function
         --> main.js:1:16
          |
        1 | var f = () => arguments[0];
          |               ^^^^^^^^^ left untouched
          |
          = help: wrap the arrow function in an ordinary function
    """
    out: List[str] = []
    tint = _YELLOW if error.severity is Severity.WARNING else _RED

    code_str = f"[{error.code}]" if error.code else ""
    out.append(
        _style(f"{error.severity.value}{code_str}", _BOLD, tint, color=color)
        + _style(f": {error.message}", _BOLD, color=color)
    )

    if error.location is None:
        out.append(_style(" --> ", _BOLD, _BLUE, color=color) + "<unknown location>")
        _append_annotations(out, error, 1, color)
        return "\n".join(out)

    loc = error.location
    source = source_files.get(loc.file)
    if source is None:
        out.append(
            _style(" --> ", _BOLD, _BLUE, color=color)
            + f"{loc.file}:{loc.line}:{loc.column}"
        )
        _append_annotations(out, error, 1, color)
        return "\n".join(out)

    src_lines = source.split("\n")
    gw = max(len(str(loc.line)), 1)

    out.append(_style(" " * gw + "--> ", _BOLD, _BLUE, color=color) + f"{loc.file}:{loc.line}:{loc.column}")
    out.append(_style(" " * (gw + 1) + "|", _BOLD, _BLUE, color=color))

    idx = loc.line - 1
    code_line = src_lines[idx] if 0 <= idx < len(src_lines) else ""
    out.append(_style(str(loc.line).rjust(gw) + " | ", _BOLD, _BLUE, color=color) + code_line)

    col_start = max(loc.column, 1) - 1
    if loc.end_line == loc.line and loc.end_column > loc.column:
        span_len = loc.end_column - loc.column
    else:
        span_len = _guess_span(code_line, col_start)
    carets = " " * col_start + "^" * max(1, span_len)
    label_suffix = f" {error.label}" if error.label else ""
    out.append(
        _style(" " * (gw + 1) + "| ", _BOLD, _BLUE, color=color)
        + _style(carets + label_suffix, _BOLD, tint, color=color)
    )

    _append_annotations(out, error, gw, color)
    return "\n".join(out)


def _guess_span(code_line: str, col_start: int) -> int:
    """Guess token length when end_column is unavailable."""
    if col_start >= len(code_line):
        return 1
    length = 0
    for ch in code_line[col_start:]:
        if ch in (" ", "\t", ";", ",", ")", "]", "}", "."):
            break
        length += 1
    return max(1, length)


def _append_annotations(out: List[str], error: Error, gw: int, color: bool) -> None:
    if not (error.help or error.note):
        return
    out.append(_style(" " * (gw + 1) + "|", _BOLD, _BLUE, color=color))
    pad = " " * (gw + 1)
    if error.help:
        out.append(
            _style(f"{pad}= ", _BOLD, _CYAN, color=color)
            + _style("help: ", _BOLD, color=color)
            + error.help
        )
    if error.note:
        out.append(
            _style(f"{pad}= ", _BOLD, _CYAN, color=color)
            + _style("note: ", _BOLD, color=color)
            + error.note
        )


# ---------------------------------------------------------------------------
# ErrorReporter
# ---------------------------------------------------------------------------

class ErrorReporter:
    """Collects diagnostics for one compilation and renders them."""

    def __init__(self, source_files: Dict[str, str]):
        self.source_files = source_files
        self.errors: List[Error] = []

    def report_error(
        self,
        message: str,
        location: Optional[SourceLocation],
        code: Optional[str] = None,
        help: Optional[str] = None,
        note: Optional[str] = None,
        label: Optional[str] = None,
    ) -> None:
        self.errors.append(Error(message, location, code, help, note, label, Severity.ERROR))

    def report_warning(
        self,
        message: str,
        location: Optional[SourceLocation],
        code: Optional[str] = None,
        help: Optional[str] = None,
        note: Optional[str] = None,
        label: Optional[str] = None,
    ) -> None:
        self.errors.append(Error(message, location, code, help, note, label, Severity.WARNING))

    @property
    def warnings(self) -> List[Error]:
        return [e for e in self.errors if e.severity is Severity.WARNING]

    def has_errors(self) -> bool:
        return any(e.severity is Severity.ERROR for e in self.errors)

    def has_warnings(self) -> bool:
        return any(e.severity is Severity.WARNING for e in self.errors)

    def format_error(self, error: Error, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        return _format_diagnostic(error, self.source_files, color=use_color)

    def format_all_errors(self, color: Optional[bool] = None) -> str:
        parts = [self.format_error(e, color=color) for e in self.errors]
        use_color = color if color is not None else _use_color()
        count = sum(1 for e in self.errors if e.severity is Severity.ERROR)
        if count:
            summary = f"aborting due to {count} previous error{'s' if count != 1 else ''}"
            parts.append(
                _style("error", _BOLD, _RED, color=use_color)
                + _style(f": {summary}", _BOLD, color=use_color)
            )
        return "\n\n".join(parts)

    def print_errors(self, stream=None) -> None:
        stream = stream if stream is not None else sys.stderr
        if self.errors:
            print(self.format_all_errors(), file=stream)


# ============================================================================
# Exception Classes
# ============================================================================

class UnarrowError(Exception):
    """Base exception for all unarrow errors"""
    def __init__(self, message: str, location: Optional[SourceLocation] = None):
        super().__init__(message)
        self.message = message
        self.location = location

    def __str__(self):
        if self.location:
            return f"{self.message}\n --> {self.location}"
        return self.message


class UnarrowSourceError(UnarrowError):
    """
    Error caused by the JavaScript input.

    Use this for ANY error that is the user's code's fault:
    - syntax errors reported by the parser
    - `arguments` in an arrow function with no enclosing function (strict mode)
    """
    def __init__(self,
                 message: str,
                 location: Optional[SourceLocation] = None,
                 error_code: str = ErrorCode.SYNTAX_ERROR.value,
                 source_code: Optional[str] = None,
                 help: Optional[str] = None,
                 note: Optional[str] = None,
                 label: Optional[str] = None):
        super().__init__(message, location)
        self.error_code = error_code
        self.source_code = source_code
        self.help_text = help
        self.note_text = note
        self.label_text = label

    def to_diagnostic(self) -> Error:
        return Error(
            message=self.message,
            location=self.location,
            code=self.error_code,
            help=self.help_text,
            note=self.note_text,
            label=self.label_text,
        )

    def __str__(self):
        source_files: Dict[str, str] = {}
        if self.source_code and self.location:
            source_files[self.location.file] = self.source_code
        return _format_diagnostic(self.to_diagnostic(), source_files, color=False)


class UnarrowImplementationError(Exception):
    """
    Error in unarrow itself (not in the user's JavaScript).

    Never use this for errors in user code - use UnarrowSourceError instead.
    """
    def __init__(self, message: str, error_code: str = "E9999"):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self):
        return f"[{self.error_code}] {self.message}"
