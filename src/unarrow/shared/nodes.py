"""
unarrow AST (Abstract Syntax Tree) Definitions

ESTree-shaped nodes for the JavaScript subset the parser understands.

Every node class declares `_fields`: the names of its child-bearing fields in
traversal (source) order. A field holds either a node, `None`, or a list of
nodes. Everything else on a node (names, operators, flags) is an attribute and
is never traversed. Nodes compare by identity, so analysis results can be keyed
on them for the duration of one transform.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, Iterator, List, Optional, Tuple, Union

from .source_location import SourceLocation


class NodeType(Enum):
    """ESTree node types"""
    PROGRAM = "Program"
    EXPRESSION_STATEMENT = "ExpressionStatement"
    BLOCK_STATEMENT = "BlockStatement"
    EMPTY_STATEMENT = "EmptyStatement"
    VARIABLE_DECLARATION = "VariableDeclaration"
    VARIABLE_DECLARATOR = "VariableDeclarator"
    FUNCTION_DECLARATION = "FunctionDeclaration"
    RETURN_STATEMENT = "ReturnStatement"
    IF_STATEMENT = "IfStatement"
    FOR_STATEMENT = "ForStatement"
    FOR_IN_STATEMENT = "ForInStatement"
    WHILE_STATEMENT = "WhileStatement"
    DO_WHILE_STATEMENT = "DoWhileStatement"
    BREAK_STATEMENT = "BreakStatement"
    CONTINUE_STATEMENT = "ContinueStatement"
    THROW_STATEMENT = "ThrowStatement"
    TRY_STATEMENT = "TryStatement"
    CATCH_CLAUSE = "CatchClause"
    IDENTIFIER = "Identifier"
    LITERAL = "Literal"
    THIS_EXPRESSION = "ThisExpression"
    ARRAY_EXPRESSION = "ArrayExpression"
    OBJECT_EXPRESSION = "ObjectExpression"
    PROPERTY = "Property"
    FUNCTION_EXPRESSION = "FunctionExpression"
    ARROW_FUNCTION_EXPRESSION = "ArrowFunctionExpression"
    UNARY_EXPRESSION = "UnaryExpression"
    UPDATE_EXPRESSION = "UpdateExpression"
    BINARY_EXPRESSION = "BinaryExpression"
    LOGICAL_EXPRESSION = "LogicalExpression"
    ASSIGNMENT_EXPRESSION = "AssignmentExpression"
    CONDITIONAL_EXPRESSION = "ConditionalExpression"
    CALL_EXPRESSION = "CallExpression"
    NEW_EXPRESSION = "NewExpression"
    MEMBER_EXPRESSION = "MemberExpression"
    SEQUENCE_EXPRESSION = "SequenceExpression"
    UNKNOWN = "Unknown"


class ASTNode:
    """
    Base class for all AST nodes.

    Subclasses are dataclasses; `node_type` and `_fields` are class-level.
    Traversal code goes through `child_fields()` / `get_field()` /
    `set_field()` so that `UnknownNode` can expose arbitrary children.
    """
    node_type: ClassVar[NodeType] = NodeType.UNKNOWN
    _fields: ClassVar[Tuple[str, ...]] = ()

    @property
    def type(self) -> str:
        """ESTree type name"""
        return self.node_type.value

    def child_fields(self) -> Tuple[str, ...]:
        return self._fields

    def get_field(self, name: str) -> Any:
        return getattr(self, name)

    def set_field(self, name: str, value: Any) -> None:
        setattr(self, name, value)

    def iter_children(self) -> Iterator[Tuple[str, Optional[int], "ASTNode"]]:
        """Yield (field, index, child) for every direct child node, in order."""
        for name in self.child_fields():
            value = self.get_field(name)
            if isinstance(value, list):
                for index, child in enumerate(value):
                    if isinstance(child, ASTNode):
                        yield name, index, child
            elif isinstance(value, ASTNode):
                yield name, None, value


class Statement(ASTNode):
    """Base class for statements"""


class Expression(ASTNode):
    """Base class for expressions"""


# =============================================================================
# Program and statements
# =============================================================================

@dataclass(eq=False)
class Program(ASTNode):
    """Program root node"""
    node_type: ClassVar[NodeType] = NodeType.PROGRAM
    _fields: ClassVar[Tuple[str, ...]] = ("body",)
    body: List[Statement]
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class ExpressionStatement(Statement):
    """Expression used as a statement (evaluates expression, discards result)."""
    node_type: ClassVar[NodeType] = NodeType.EXPRESSION_STATEMENT
    _fields: ClassVar[Tuple[str, ...]] = ("expression",)
    expression: Expression
    location: Optional[SourceLocation] = None

    @property
    def directive(self) -> Optional[str]:
        """The directive text when this statement is a string-literal directive ("use strict")."""
        if isinstance(self.expression, Literal) and isinstance(self.expression.value, str):
            return self.expression.value
        return None


@dataclass(eq=False)
class BlockStatement(Statement):
    node_type: ClassVar[NodeType] = NodeType.BLOCK_STATEMENT
    _fields: ClassVar[Tuple[str, ...]] = ("body",)
    body: List[Statement] = field(default_factory=list)
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class EmptyStatement(Statement):
    node_type: ClassVar[NodeType] = NodeType.EMPTY_STATEMENT
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class VariableDeclaration(Statement):
    """`var`/`let`/`const` declaration; `kind` is the keyword."""
    node_type: ClassVar[NodeType] = NodeType.VARIABLE_DECLARATION
    _fields: ClassVar[Tuple[str, ...]] = ("declarations",)
    declarations: List["VariableDeclarator"]
    kind: str = "var"
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class VariableDeclarator(ASTNode):
    node_type: ClassVar[NodeType] = NodeType.VARIABLE_DECLARATOR
    _fields: ClassVar[Tuple[str, ...]] = ("id", "init")
    id: "Identifier"
    init: Optional[Expression] = None
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class FunctionDeclaration(Statement):
    node_type: ClassVar[NodeType] = NodeType.FUNCTION_DECLARATION
    _fields: ClassVar[Tuple[str, ...]] = ("id", "params", "body")
    id: "Identifier"
    params: List["Identifier"]
    body: BlockStatement
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class ReturnStatement(Statement):
    node_type: ClassVar[NodeType] = NodeType.RETURN_STATEMENT
    _fields: ClassVar[Tuple[str, ...]] = ("argument",)
    argument: Optional[Expression] = None
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class IfStatement(Statement):
    node_type: ClassVar[NodeType] = NodeType.IF_STATEMENT
    _fields: ClassVar[Tuple[str, ...]] = ("test", "consequent", "alternate")
    test: Expression
    consequent: Statement
    alternate: Optional[Statement] = None
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class ForStatement(Statement):
    node_type: ClassVar[NodeType] = NodeType.FOR_STATEMENT
    _fields: ClassVar[Tuple[str, ...]] = ("init", "test", "update", "body")
    init: Optional[Union[VariableDeclaration, Expression]]
    test: Optional[Expression]
    update: Optional[Expression]
    body: Statement
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class ForInStatement(Statement):
    node_type: ClassVar[NodeType] = NodeType.FOR_IN_STATEMENT
    _fields: ClassVar[Tuple[str, ...]] = ("left", "right", "body")
    left: Union[VariableDeclaration, Expression]
    right: Expression
    body: Statement
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class WhileStatement(Statement):
    node_type: ClassVar[NodeType] = NodeType.WHILE_STATEMENT
    _fields: ClassVar[Tuple[str, ...]] = ("test", "body")
    test: Expression
    body: Statement
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class DoWhileStatement(Statement):
    node_type: ClassVar[NodeType] = NodeType.DO_WHILE_STATEMENT
    _fields: ClassVar[Tuple[str, ...]] = ("body", "test")
    body: Statement
    test: Expression
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class BreakStatement(Statement):
    node_type: ClassVar[NodeType] = NodeType.BREAK_STATEMENT
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class ContinueStatement(Statement):
    node_type: ClassVar[NodeType] = NodeType.CONTINUE_STATEMENT
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class ThrowStatement(Statement):
    node_type: ClassVar[NodeType] = NodeType.THROW_STATEMENT
    _fields: ClassVar[Tuple[str, ...]] = ("argument",)
    argument: Expression
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class TryStatement(Statement):
    node_type: ClassVar[NodeType] = NodeType.TRY_STATEMENT
    _fields: ClassVar[Tuple[str, ...]] = ("block", "handler", "finalizer")
    block: BlockStatement
    handler: Optional["CatchClause"] = None
    finalizer: Optional[BlockStatement] = None
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class CatchClause(ASTNode):
    node_type: ClassVar[NodeType] = NodeType.CATCH_CLAUSE
    _fields: ClassVar[Tuple[str, ...]] = ("param", "body")
    param: "Identifier"
    body: BlockStatement
    location: Optional[SourceLocation] = None


# =============================================================================
# Expressions
# =============================================================================

@dataclass(eq=False)
class Identifier(Expression):
    node_type: ClassVar[NodeType] = NodeType.IDENTIFIER
    name: str
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class Literal(Expression):
    """Literal value (number, string, boolean, null). `raw` is the source text."""
    node_type: ClassVar[NodeType] = NodeType.LITERAL
    value: Union[int, float, str, bool, None]
    raw: Optional[str] = None
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class ThisExpression(Expression):
    node_type: ClassVar[NodeType] = NodeType.THIS_EXPRESSION
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class ArrayExpression(Expression):
    node_type: ClassVar[NodeType] = NodeType.ARRAY_EXPRESSION
    _fields: ClassVar[Tuple[str, ...]] = ("elements",)
    elements: List[Expression] = field(default_factory=list)
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class ObjectExpression(Expression):
    node_type: ClassVar[NodeType] = NodeType.OBJECT_EXPRESSION
    _fields: ClassVar[Tuple[str, ...]] = ("properties",)
    properties: List["Property"] = field(default_factory=list)
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class Property(ASTNode):
    """Object literal property. `shorthand` marks `{x}` for `{x: x}`."""
    node_type: ClassVar[NodeType] = NodeType.PROPERTY
    _fields: ClassVar[Tuple[str, ...]] = ("key", "value")
    key: Union["Identifier", Literal]
    value: Expression
    computed: bool = False
    shorthand: bool = False
    kind: str = "init"
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class FunctionExpression(Expression):
    node_type: ClassVar[NodeType] = NodeType.FUNCTION_EXPRESSION
    _fields: ClassVar[Tuple[str, ...]] = ("id", "params", "body")
    id: Optional[Identifier]
    params: List[Identifier]
    body: BlockStatement
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class ArrowFunctionExpression(Expression):
    """
    Arrow function. `body` is a BlockStatement or, for a concise body, any
    expression; `expression` mirrors ESTree's flag for the concise form.
    """
    node_type: ClassVar[NodeType] = NodeType.ARROW_FUNCTION_EXPRESSION
    _fields: ClassVar[Tuple[str, ...]] = ("params", "body")
    params: List[Identifier]
    body: Union[BlockStatement, Expression]
    expression: bool = False
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class UnaryExpression(Expression):
    node_type: ClassVar[NodeType] = NodeType.UNARY_EXPRESSION
    _fields: ClassVar[Tuple[str, ...]] = ("argument",)
    operator: str
    argument: Expression
    prefix: bool = True
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class UpdateExpression(Expression):
    node_type: ClassVar[NodeType] = NodeType.UPDATE_EXPRESSION
    _fields: ClassVar[Tuple[str, ...]] = ("argument",)
    operator: str
    argument: Expression
    prefix: bool = False
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class BinaryExpression(Expression):
    node_type: ClassVar[NodeType] = NodeType.BINARY_EXPRESSION
    _fields: ClassVar[Tuple[str, ...]] = ("left", "right")
    operator: str
    left: Expression
    right: Expression
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class LogicalExpression(Expression):
    node_type: ClassVar[NodeType] = NodeType.LOGICAL_EXPRESSION
    _fields: ClassVar[Tuple[str, ...]] = ("left", "right")
    operator: str
    left: Expression
    right: Expression
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class AssignmentExpression(Expression):
    node_type: ClassVar[NodeType] = NodeType.ASSIGNMENT_EXPRESSION
    _fields: ClassVar[Tuple[str, ...]] = ("left", "right")
    operator: str
    left: Expression
    right: Expression
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class ConditionalExpression(Expression):
    node_type: ClassVar[NodeType] = NodeType.CONDITIONAL_EXPRESSION
    _fields: ClassVar[Tuple[str, ...]] = ("test", "consequent", "alternate")
    test: Expression
    consequent: Expression
    alternate: Expression
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class CallExpression(Expression):
    node_type: ClassVar[NodeType] = NodeType.CALL_EXPRESSION
    _fields: ClassVar[Tuple[str, ...]] = ("callee", "arguments")
    callee: Expression
    arguments: List[Expression] = field(default_factory=list)
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class NewExpression(Expression):
    node_type: ClassVar[NodeType] = NodeType.NEW_EXPRESSION
    _fields: ClassVar[Tuple[str, ...]] = ("callee", "arguments")
    callee: Expression
    arguments: List[Expression] = field(default_factory=list)
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class MemberExpression(Expression):
    """`object.property` (computed=False) or `object[property]` (computed=True)."""
    node_type: ClassVar[NodeType] = NodeType.MEMBER_EXPRESSION
    _fields: ClassVar[Tuple[str, ...]] = ("object", "property")
    object: Expression
    property: Expression
    computed: bool = False
    location: Optional[SourceLocation] = None


@dataclass(eq=False)
class SequenceExpression(Expression):
    node_type: ClassVar[NodeType] = NodeType.SEQUENCE_EXPRESSION
    _fields: ClassVar[Tuple[str, ...]] = ("expressions",)
    expressions: List[Expression] = field(default_factory=list)
    location: Optional[SourceLocation] = None


# =============================================================================
# Unrecognized nodes
# =============================================================================

class UnknownNode(ASTNode):
    """
    A node of a type this package does not model (e.g. an ES2015 class coming
    from an external ESTree producer). Its fields are kept verbatim; fields
    holding nodes or lists of nodes are exposed as children so traversal can
    still reach arrow functions nested inside.
    """
    node_type: ClassVar[NodeType] = NodeType.UNKNOWN

    def __init__(self, type_name: str, fields: Optional[Dict[str, Any]] = None,
                 location: Optional[SourceLocation] = None):
        self.type_name = type_name
        self.fields: Dict[str, Any] = dict(fields or {})
        self.location = location

    @property
    def type(self) -> str:
        return self.type_name

    def child_fields(self) -> Tuple[str, ...]:
        names = []
        for name, value in self.fields.items():
            if isinstance(value, ASTNode):
                names.append(name)
            elif isinstance(value, list) and any(isinstance(v, ASTNode) for v in value):
                names.append(name)
        return tuple(names)

    def get_field(self, name: str) -> Any:
        return self.fields[name]

    def set_field(self, name: str, value: Any) -> None:
        self.fields[name] = value

    def __repr__(self) -> str:
        return f"UnknownNode({self.type_name!r}, {self.fields!r})"


# =============================================================================
# Function kinds
# =============================================================================

FunctionNode = Union[FunctionDeclaration, FunctionExpression, ArrowFunctionExpression]

FUNCTION_NODE_TYPES: Tuple[type, ...] = (FunctionDeclaration, FunctionExpression, ArrowFunctionExpression)
ORDINARY_FUNCTION_TYPES: Tuple[type, ...] = (FunctionDeclaration, FunctionExpression)


def is_function(node: Any) -> bool:
    return isinstance(node, FUNCTION_NODE_TYPES)


def is_ordinary_function(node: Any) -> bool:
    """True for `function` declarations/expressions: they own `this` and `arguments`."""
    return isinstance(node, ORDINARY_FUNCTION_TYPES)


def is_arrow_function(node: Any) -> bool:
    return isinstance(node, ArrowFunctionExpression)
