"""
Lexical `this` capture

An arrow function captures `this` if a ThisExpression appears in its
parameters or body, or in an arrow nested inside it, without crossing an
ordinary function: `function` declarations and expressions own their `this`.

    () => this                   captures
    () => () => this             captures (both arrows)
    () => function () { this }   does not
"""

from ..shared.ast_visitor import NodePath, VisitAction, visit
from ..shared.nodes import ASTNode, ArrowFunctionExpression, ThisExpression, is_ordinary_function


def has_own_this_capture(arrow: ArrowFunctionExpression) -> bool:
    """True if `this` is referenced inside `arrow` (nested arrows included)."""
    found = False

    def enter(node: ASTNode, path: NodePath):
        nonlocal found
        if is_ordinary_function(node):
            return VisitAction.SKIP
        if isinstance(node, ThisExpression):
            found = True
            return VisitAction.STOP
        return None

    visit(arrow, enter)
    return found
