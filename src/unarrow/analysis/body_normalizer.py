"""
Concise body normalization: `x => expr` has the body of `function (x) { return expr; }`.
"""

from typing import Union

from ..shared.nodes import BlockStatement, Expression, ReturnStatement


def normalize_body(body: Union[BlockStatement, Expression]) -> BlockStatement:
    """
    Block bodies are returned as-is (same object). Any other body is wrapped
    as `{ return body; }` around the very same expression object, so nothing
    is copied or re-evaluated.
    """
    if isinstance(body, BlockStatement):
        return body
    return BlockStatement(
        body=[ReturnStatement(argument=body, location=body.location)],
        location=body.location,
    )
