"""
Shared components: node model, traversal, scopes and diagnostics.
"""

from .source_location import SourceLocation
from .errors import (
    Error, ErrorCode, ErrorReporter, Severity,
    UnarrowError, UnarrowSourceError, UnarrowImplementationError,
)
from .nodes import (
    ASTNode, Statement, Expression, NodeType, UnknownNode,
    Program, ExpressionStatement, BlockStatement, EmptyStatement,
    VariableDeclaration, VariableDeclarator, FunctionDeclaration,
    ReturnStatement, IfStatement, ForStatement, ForInStatement,
    WhileStatement, DoWhileStatement, BreakStatement, ContinueStatement,
    ThrowStatement, TryStatement, CatchClause,
    Identifier, Literal, ThisExpression, ArrayExpression, ObjectExpression,
    Property, FunctionExpression, ArrowFunctionExpression, UnaryExpression,
    UpdateExpression, BinaryExpression, LogicalExpression, AssignmentExpression,
    ConditionalExpression, CallExpression, NewExpression, MemberExpression,
    SequenceExpression,
    FunctionNode, is_function, is_ordinary_function, is_arrow_function,
)
from .ast_visitor import VisitAction, NodePath, visit, iter_nodes
from .scope import Scope, ScopeKind, ScopeTable, Binding, BindingType, is_reference
