"""
Literal Parser - Extracted from UnarrowTransformer
Handles parsing of literal tokens (numbers, strings, booleans, null)
"""

import re
from typing import Union

from lark.lexer import Token

from ...shared import Literal, SourceLocation

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

_ESCAPE_RE = re.compile(r"\\(x[0-9a-fA-F]{2}|u[0-9a-fA-F]{4}|.)")


class LiteralParser:
    """Dedicated parser for literal tokens. `raw` keeps the source spelling."""

    @staticmethod
    def parse(token: Token, location: SourceLocation) -> Literal:
        """Parse literal token into a Literal node"""
        token_type = token.type
        raw = str(token)
        if token_type == "NUMBER":
            return Literal(value=LiteralParser.parse_number(raw), raw=raw, location=location)
        if token_type == "STRING":
            return Literal(value=LiteralParser.parse_string(raw), raw=raw, location=location)
        if token_type == "TRUE":
            return Literal(value=True, raw=raw, location=location)
        if token_type == "FALSE":
            return Literal(value=False, raw=raw, location=location)
        if token_type == "NULL":
            return Literal(value=None, raw=raw, location=location)
        raise ValueError(f"not a literal token: {token_type}")

    @staticmethod
    def parse_number(raw: str) -> Union[int, float]:
        if raw[:2] in ("0x", "0X"):
            return int(raw, 16)
        if any(ch in raw for ch in ".eE"):
            return float(raw)
        return int(raw)

    @staticmethod
    def parse_string(raw: str) -> str:
        """Strip the quotes and decode escape sequences."""
        return _ESCAPE_RE.sub(_decode_escape, raw[1:-1])


def _decode_escape(match: "re.Match[str]") -> str:
    escape = match.group(1)
    if escape[0] in "xu" and len(escape) > 1:
        return chr(int(escape[1:], 16))
    return _SIMPLE_ESCAPES.get(escape, escape)
