"""
AST Serialization to S-Expressions
==================================

Converts a tree to a canonical S-expression for debugging and golden tests:

    (Program
      (ExpressionStatement
        :expression (FunctionExpression :id nil :params () :body (BlockStatement :body ()))))

Node types and field keywords are `sexpdata.Symbol`s (unquoted); identifier
names and string values are quoted strings.
"""

import dataclasses
from typing import Any, List

import sexpdata

from .nodes import ASTNode, UnknownNode

_NIL = sexpdata.Symbol("nil")
_TRUE = sexpdata.Symbol("true")
_FALSE = sexpdata.Symbol("false")


def _pretty_dumps(sexpr: Any, indent: int = 0, indent_str: str = "  ", max_line: int = 100) -> str:
    """
    Pretty-print structured sexpr. Keeps short forms on one line; breaks only when needed.
    """
    if isinstance(sexpr, sexpdata.Symbol):
        return sexpr.value()
    if isinstance(sexpr, list):
        if not sexpr:
            return "()"
        parts = [_pretty_dumps(e, indent + 1, indent_str, max_line) for e in sexpr]
        one_line = "(" + " ".join(parts) + ")"
        if len(one_line) <= max_line and "\n" not in one_line:
            return one_line
        prefix = indent_str * (indent + 1)
        # Keyword and its value stay on one line
        lines: List[str] = [parts[0]]
        i = 1
        while i < len(parts):
            if isinstance(sexpr[i], sexpdata.Symbol) and sexpr[i].value().startswith(":") and i + 1 < len(parts):
                lines.append(f"{parts[i]} {parts[i + 1]}")
                i += 2
            else:
                lines.append(parts[i])
                i += 1
        return "(" + ("\n" + prefix).join(lines) + ")"
    return sexpdata.dumps(sexpr)


class ASTSerializer:
    """Tree to structured S-expression (nested lists + sexpdata.Symbol)."""

    def __init__(self, include_location: bool = False):
        self.include_location = include_location

    def serialize_to_sexpr(self, value: Any) -> Any:
        if value is None:
            return _NIL
        if isinstance(value, bool):
            return _TRUE if value else _FALSE
        if isinstance(value, (int, float, str)):
            return value
        if isinstance(value, list):
            return [self.serialize_to_sexpr(item) for item in value]
        if isinstance(value, ASTNode):
            return self._serialize_node(value)
        return str(value)

    def _serialize_node(self, node: ASTNode) -> List[Any]:
        out: List[Any] = [sexpdata.Symbol(node.type)]
        if isinstance(node, UnknownNode):
            items = list(node.fields.items())
        else:
            items = [(f.name, getattr(node, f.name)) for f in dataclasses.fields(node) if f.name != "location"]
        for name, value in items:
            out.append(sexpdata.Symbol(f":{name}"))
            out.append(self.serialize_to_sexpr(value))
        if self.include_location and node.location is not None:
            out.append(sexpdata.Symbol(":loc"))
            out.append(str(node.location))
        return out


def serialize_ast(node: ASTNode, include_location: bool = False, pretty: bool = True) -> str:
    """
    Serialize a tree to an S-expression string.

    Args:
        node: root node
        include_location: append `:loc "file:line:col"` to located nodes
        pretty: pretty-printed (default) or compact single-line output
    """
    sexpr = ASTSerializer(include_location=include_location).serialize_to_sexpr(node)
    if pretty:
        return _pretty_dumps(sexpr)
    return sexpdata.dumps(sexpr)
