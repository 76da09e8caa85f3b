"""
ESTree interchange

Converts between unarrow node objects and plain ESTree dictionaries (the JSON
shape produced by esprima/acorn-style parsers), so the tree transform can be
driven by an external parser and its result handed to an external printer.

- Known node types become their dataclass; unknown ones become `UnknownNode`
  with their fields preserved (children converted recursively)
- Locations (`loc`, 0-based columns) become `SourceLocation` (1-based columns)
"""

import dataclasses
from typing import Any, Dict, Optional

from . import nodes
from .errors import UnarrowSourceError
from .nodes import ASTNode, UnknownNode
from .source_location import SourceLocation

ESTreeDict = Dict[str, Any]

_NODE_CLASSES: Dict[str, type] = {
    cls.node_type.value: cls
    for cls in vars(nodes).values()
    if isinstance(cls, type) and dataclasses.is_dataclass(cls) and issubclass(cls, ASTNode)
}

# ESTree fields that are always false for the functions this package emits
_FUNCTION_FLAGS = ("generator", "async")


def _location_from_estree(raw: ESTreeDict, source_file: str) -> Optional[SourceLocation]:
    loc = raw.get("loc")
    if not isinstance(loc, dict) or "start" not in loc:
        return None
    start, end = loc["start"], loc.get("end") or loc["start"]
    span = raw.get("range") or (0, 0)
    return SourceLocation(
        file=loc.get("source") or source_file,
        line=start["line"],
        column=start["column"] + 1,
        start=span[0],
        end=span[1],
        end_line=end["line"],
        end_column=end["column"] + 1,
    )


def _convert(value: Any, source_file: str) -> Any:
    if isinstance(value, list):
        return [_convert(item, source_file) for item in value]
    if isinstance(value, dict) and "type" in value:
        return from_estree(value, source_file)
    return value


def from_estree(raw: ESTreeDict, source_file: str = "<estree>") -> ASTNode:
    """Build a node tree from an ESTree dictionary."""
    type_name = raw["type"]
    location = _location_from_estree(raw, source_file)
    cls = _NODE_CLASSES.get(type_name)

    if cls in (nodes.FunctionDeclaration, nodes.FunctionExpression, nodes.ArrowFunctionExpression):
        flags = [flag for flag in _FUNCTION_FLAGS if raw.get(flag)]
        if flags:
            raise UnarrowSourceError(
                f"{' '.join(flags)} functions are not supported",
                location,
                help="only plain (non-async, non-generator) functions can be lowered",
            )
    if cls is nodes.Literal and "regex" in raw:
        cls = None

    if cls is None:
        fields = {
            key: _convert(value, source_file)
            for key, value in raw.items()
            if key not in ("type", "loc", "range", "start", "end")
        }
        return UnknownNode(type_name, fields, location)

    kwargs: Dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        if f.name == "location":
            continue
        if f.name in raw:
            kwargs[f.name] = _convert(raw[f.name], source_file)
    if cls is nodes.Literal and "raw" not in kwargs:
        kwargs["raw"] = None
    return cls(location=location, **kwargs)


def _export(value: Any, include_locations: bool) -> Any:
    if isinstance(value, list):
        return [_export(item, include_locations) for item in value]
    if isinstance(value, ASTNode):
        return to_estree(value, include_locations)
    return value


def to_estree(node: ASTNode, include_locations: bool = False) -> ESTreeDict:
    """Serialize a node tree to an ESTree dictionary."""
    if isinstance(node, UnknownNode):
        out: ESTreeDict = {"type": node.type_name}
        for key, value in node.fields.items():
            out[key] = _export(value, include_locations)
    else:
        out = {"type": node.type}
        for f in dataclasses.fields(node):
            if f.name == "location":
                continue
            out[f.name] = _export(getattr(node, f.name), include_locations)
        if isinstance(node, (nodes.FunctionDeclaration, nodes.FunctionExpression)):
            out["generator"] = False
            out["expression"] = False
            out["async"] = False
        elif isinstance(node, nodes.ArrowFunctionExpression):
            out["id"] = None
            out["generator"] = False
            out["async"] = False
    if include_locations and node.location is not None:
        loc = node.location
        out["loc"] = {
            "source": loc.file,
            "start": {"line": loc.line, "column": loc.column - 1},
            "end": {"line": loc.end_line or loc.line, "column": max((loc.end_column or loc.column) - 1, 0)},
        }
    return out
