"""
Scope Analysis Pass

Builds the ScopeTable of the pre-rewrite tree: one scope per Program, per
function (arrow functions included), per catch clause and per nested block,
with the names each one declares.

Declared names:
- parameters (own scope)
- `var` declarators and function declaration names (nearest function or program scope)
- `let`/`const` declarators (innermost scope)
- catch parameters (the catch clause's scope)
- a named function expression's own name (own scope)

Every identifier reference is recorded with the scope it appears in.
"""

import logging
from typing import List

from ..shared.ast_visitor import NodePath, visit
from ..shared.nodes import (
    ASTNode, ArrowFunctionExpression, BlockStatement, CatchClause,
    ForInStatement, ForStatement, FunctionDeclaration, FunctionExpression,
    Identifier, Program, VariableDeclarator, is_function,
)
from ..shared.scope import BindingType, Scope, ScopeKind, ScopeTable, is_reference
from .base import BasePass, TransformContext

logger = logging.getLogger("unarrow.passes.scope_analysis")


class ScopeAnalysisPass(BasePass):
    """Scope resolution. Does not modify the tree."""
    requires = []

    def run(self, program: Program, ctx: TransformContext) -> Program:
        table = build_scope_table(program)
        ctx.set_analysis(ScopeAnalysisPass, table)
        logger.debug(f"Scope analysis: {len(table)} scopes")
        return program


def _opens_block_scope(node: ASTNode, path: NodePath) -> bool:
    if isinstance(node, (ForStatement, ForInStatement)):
        return True
    if not isinstance(node, BlockStatement):
        return False
    # function and catch bodies share the scope of their owner
    parent = path.parent_node
    return not (path.field == "body" and (is_function(parent) or isinstance(parent, CatchClause)))


def build_scope_table(program: Program) -> ScopeTable:
    root = Scope(parent=None, kind=ScopeKind.PROGRAM, node=program)
    table = ScopeTable(root)
    stack: List[Scope] = [root]

    def push(scope: Scope) -> None:
        table.add(scope)
        stack.append(scope)

    def enter(node: ASTNode, path: NodePath):
        current = stack[-1]
        if is_function(node):
            if isinstance(node, FunctionDeclaration):
                current.variable_scope().define(node.id.name, BindingType.FUNCTION, node, node.id)
            kind = ScopeKind.ARROW if isinstance(node, ArrowFunctionExpression) else ScopeKind.FUNCTION
            scope = Scope(parent=current, kind=kind, node=node)
            if isinstance(node, FunctionExpression) and node.id is not None:
                scope.define(node.id.name, BindingType.FUNCTION_NAME, node, node.id)
            for param in node.params:
                if isinstance(param, Identifier):
                    scope.define(param.name, BindingType.PARAMETER, param, param)
            push(scope)
        elif isinstance(node, CatchClause):
            scope = Scope(parent=current, kind=ScopeKind.BLOCK, node=node)
            if isinstance(node.param, Identifier):
                scope.define(node.param.name, BindingType.CATCH_PARAMETER, node, node.param)
            push(scope)
        elif _opens_block_scope(node, path):
            push(Scope(parent=current, kind=ScopeKind.BLOCK, node=node))
        elif isinstance(node, VariableDeclarator) and isinstance(node.id, Identifier):
            if path.parent_node.kind == "var":
                current.variable_scope().define(node.id.name, BindingType.VARIABLE, node, node.id)
            else:
                current.define(node.id.name, BindingType.LEXICAL, node, node.id)
        elif isinstance(node, Identifier) and is_reference(path):
            table.add_reference(node, current)
        return None

    def leave(node: ASTNode, path: NodePath):
        if len(stack) > 1 and stack[-1].node is node:
            stack.pop()
        return None

    visit(program, enter, leave)
    return table
