"""
JavaScript Printer

ESTree Pattern: escodegen/recast `print(ast)`

Prints a node tree as JavaScript source, inserting the parentheses the tree
structure requires (operator precedence, function and object expressions at
statement start, function expressions used as callee or member object).
Formatting of the input is not preserved: output uses one statement per line
and DEFAULT_INDENT.

When a SourceMapBuilder is attached, every located node records a mapping
from its generated position to its original position.
"""

import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ..shared.errors import ErrorCode, UnarrowImplementationError
from ..shared.nodes import (
    ASTNode, ArrowFunctionExpression, AssignmentExpression, BinaryExpression,
    BlockStatement, CallExpression, ConditionalExpression, Expression,
    FunctionExpression, Identifier, IfStatement, Literal,
    LogicalExpression, MemberExpression, NewExpression, ObjectExpression,
    Property, SequenceExpression, UnaryExpression, UnknownNode,
    UpdateExpression, VariableDeclaration,
)
from ..utils.config import DEFAULT_INDENT, STATEMENT_TERMINATOR
from .source_map import SourceMapBuilder

logger = logging.getLogger("unarrow.backends.javascript")

# Operator precedence, loosest first
PREC_SEQUENCE = 0
PREC_ASSIGNMENT = 1
PREC_CONDITIONAL = 2
PREC_UNARY = 14
PREC_POSTFIX = 15
PREC_CALL = 17
PREC_PRIMARY = 18

BINARY_PRECEDENCE: Dict[str, int] = {
    "||": 3,
    "&&": 4,
    "|": 5,
    "^": 6,
    "&": 7,
    "==": 8, "!=": 8, "===": 8, "!==": 8,
    "<": 9, ">": 9, "<=": 9, ">=": 9, "in": 9, "instanceof": 9,
    "<<": 10, ">>": 10, ">>>": 10,
    "+": 11, "-": 11,
    "*": 12, "/": 12, "%": 12,
}

_WORD_OPERATORS = ("typeof", "void", "delete", "in", "instanceof")
_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def precedence(node: ASTNode) -> int:
    if isinstance(node, SequenceExpression):
        return PREC_SEQUENCE
    if isinstance(node, (AssignmentExpression, ArrowFunctionExpression)):
        return PREC_ASSIGNMENT
    if isinstance(node, ConditionalExpression):
        return PREC_CONDITIONAL
    if isinstance(node, (BinaryExpression, LogicalExpression)):
        return BINARY_PRECEDENCE[node.operator]
    if isinstance(node, UnaryExpression):
        return PREC_UNARY
    if isinstance(node, UpdateExpression):
        return PREC_UNARY if node.prefix else PREC_POSTFIX
    if isinstance(node, (CallExpression, MemberExpression, NewExpression)):
        return PREC_CALL
    return PREC_PRIMARY


@dataclass
class PrintResult:
    """Generated code and, when requested, its Source Map v3 dictionary."""
    code: str
    map: Optional[Dict[str, Any]] = None


class JavaScriptPrinter:
    """
    Tree to JavaScript text.

    One `visit_<node_type>` method per node type; UnknownNode cannot be
    printed (E9001).
    """

    def __init__(self, indent: str = DEFAULT_INDENT):
        self.indent_unit = indent
        self._parts: List[str] = []
        self._level = 0
        self._line = 0
        self._column = 0
        self._source_map: Optional[SourceMapBuilder] = None
        self._dispatch: Dict[str, Callable[[Any], None]] = {}

    def print(self, node: ASTNode, source_map: Optional[SourceMapBuilder] = None) -> PrintResult:
        """Print a tree. Pass a SourceMapBuilder to also get a source map."""
        self._parts = []
        self._level = 0
        self._line = 0
        self._column = 0
        self._source_map = source_map
        self._node(node)
        code = "".join(self._parts)
        if code and not code.endswith("\n"):
            code += "\n"
        result = PrintResult(code=code, map=source_map.to_dict() if source_map is not None else None)
        logger.debug(f"Printed {self._line + 1} lines")
        return result

    # =========================================================================
    # Emission
    # =========================================================================

    def _write(self, text: str) -> None:
        self._parts.append(text)
        newlines = text.count("\n")
        if newlines:
            self._line += newlines
            self._column = len(text) - text.rfind("\n") - 1
        else:
            self._column += len(text)

    def _newline(self) -> None:
        self._write("\n" + self.indent_unit * self._level)

    def _mark(self, node: ASTNode) -> None:
        location = node.location
        if self._source_map is None or location is None:
            return
        name = node.name if isinstance(node, Identifier) else None
        self._source_map.add_mapping(self._line, self._column, location.line - 1, location.column - 1, name)

    def _node(self, node: ASTNode) -> None:
        if isinstance(node, UnknownNode):
            raise UnarrowImplementationError(
                f"cannot print unsupported node type {node.type_name!r}",
                error_code=ErrorCode.UNPRINTABLE_NODE.value,
            )
        method = self._dispatch.get(node.type)
        if method is None:
            method = getattr(self, "visit_" + _CAMEL_BOUNDARY.sub("_", node.type).lower())
            self._dispatch[node.type] = method
        self._mark(node)
        method(node)

    def _expression(self, node: Expression, parenthesize: bool) -> None:
        if parenthesize:
            self._write("(")
            self._node(node)
            self._write(")")
        else:
            self._node(node)

    def _comma_list(self, items: List[Expression], min_precedence: int = PREC_ASSIGNMENT) -> None:
        for index, item in enumerate(items):
            if index:
                self._write(", ")
            self._expression(item, precedence(item) < min_precedence)

    # =========================================================================
    # Parenthesization
    # =========================================================================

    def _needs_parens(self, child: ASTNode, parent: ASTNode, field: str) -> bool:
        """Whether `child` printed in `parent.field` must be wrapped in parentheses."""
        child_prec = precedence(child)
        if isinstance(parent, (BinaryExpression, LogicalExpression)):
            parent_prec = precedence(parent)
            return child_prec < parent_prec if field == "left" else child_prec <= parent_prec
        if isinstance(parent, AssignmentExpression):
            return field == "right" and child_prec < PREC_ASSIGNMENT
        if isinstance(parent, ConditionalExpression):
            if field == "test":
                return child_prec <= PREC_CONDITIONAL
            return child_prec < PREC_ASSIGNMENT
        if isinstance(parent, UnaryExpression):
            return child_prec < PREC_UNARY
        if isinstance(parent, UpdateExpression):
            return child_prec < PREC_CALL
        if isinstance(parent, (CallExpression, MemberExpression)) and field in ("callee", "object"):
            if isinstance(child, (FunctionExpression, ArrowFunctionExpression)):
                return True
            if isinstance(parent, MemberExpression) and _is_bare_integer(child):
                return True
            return child_prec < PREC_CALL
        if isinstance(parent, NewExpression) and field == "callee":
            return child_prec < PREC_CALL or _contains_call(child) or isinstance(child, FunctionExpression)
        return False

    def _child(self, parent: ASTNode, field: str) -> None:
        child = parent.get_field(field)
        self._expression(child, self._needs_parens(child, parent, field))

    def _starts_with_brace_or_function(self, node: ASTNode, functions: bool = True) -> bool:
        """
        Whether printed `node` would begin with `{` (or `function`), which
        JavaScript would read as a block (or a declaration) in statement position.
        """
        while True:
            if isinstance(node, ObjectExpression):
                return True
            if isinstance(node, FunctionExpression):
                return functions
            leftmost = _leftmost_field(node)
            if leftmost is None:
                return False
            child = node.get_field(leftmost)
            if isinstance(child, list):
                child, leftmost = child[0], None
            if leftmost is not None and self._needs_parens(child, node, leftmost):
                return False
            node = child

    # =========================================================================
    # Program and statements
    # =========================================================================

    def visit_program(self, node) -> None:
        self._statements(node.body, top_level=True)

    def _statements(self, statements: List[ASTNode], top_level: bool = False) -> None:
        for index, statement in enumerate(statements):
            if index or not top_level:
                self._newline()
            self._node(statement)

    def visit_block_statement(self, node) -> None:
        if not node.body:
            self._write("{}")
            return
        self._write("{")
        self._level += 1
        self._statements(node.body)
        self._level -= 1
        self._newline()
        self._write("}")

    def visit_empty_statement(self, node) -> None:
        self._write(STATEMENT_TERMINATOR)

    def visit_expression_statement(self, node) -> None:
        expression = node.expression
        self._expression(expression, self._starts_with_brace_or_function(expression))
        self._write(STATEMENT_TERMINATOR)

    def visit_variable_declaration(self, node, terminate: bool = True) -> None:
        self._write(node.kind + " ")
        for index, declarator in enumerate(node.declarations):
            if index:
                self._write(", ")
            self._node(declarator)
        if terminate:
            self._write(STATEMENT_TERMINATOR)

    def visit_variable_declarator(self, node) -> None:
        self._node(node.id)
        if node.init is not None:
            self._write(" = ")
            self._expression(node.init, precedence(node.init) < PREC_ASSIGNMENT)

    def visit_function_declaration(self, node) -> None:
        self._function(node)

    def visit_return_statement(self, node) -> None:
        self._write("return")
        if node.argument is not None:
            self._write(" ")
            self._node(node.argument)
        self._write(STATEMENT_TERMINATOR)

    def visit_throw_statement(self, node) -> None:
        self._write("throw ")
        self._node(node.argument)
        self._write(STATEMENT_TERMINATOR)

    def visit_break_statement(self, node) -> None:
        self._write("break" + STATEMENT_TERMINATOR)

    def visit_continue_statement(self, node) -> None:
        self._write("continue" + STATEMENT_TERMINATOR)

    def visit_if_statement(self, node) -> None:
        self._write("if (")
        self._node(node.test)
        self._write(") ")
        consequent = node.consequent
        if node.alternate is not None and isinstance(consequent, IfStatement) and consequent.alternate is None:
            # Keep the `else` attached to this `if`
            consequent = BlockStatement(body=[consequent])
        self._node(consequent)
        if node.alternate is not None:
            if isinstance(consequent, BlockStatement):
                self._write(" else ")
            else:
                self._newline()
                self._write("else ")
            self._node(node.alternate)

    def visit_for_statement(self, node) -> None:
        self._write("for (")
        if isinstance(node.init, VariableDeclaration):
            self._mark(node.init)
            self.visit_variable_declaration(node.init, terminate=False)
        elif node.init is not None:
            self._expression(node.init, _contains_in_operator(node.init))
        self._write(";")
        if node.test is not None:
            self._write(" ")
            self._node(node.test)
        self._write(";")
        if node.update is not None:
            self._write(" ")
            self._node(node.update)
        self._write(") ")
        self._node(node.body)

    def visit_for_in_statement(self, node) -> None:
        self._write("for (")
        if isinstance(node.left, VariableDeclaration):
            self._mark(node.left)
            self.visit_variable_declaration(node.left, terminate=False)
        else:
            self._node(node.left)
        self._write(" in ")
        self._node(node.right)
        self._write(") ")
        self._node(node.body)

    def visit_while_statement(self, node) -> None:
        self._write("while (")
        self._node(node.test)
        self._write(") ")
        self._node(node.body)

    def visit_do_while_statement(self, node) -> None:
        self._write("do ")
        self._node(node.body)
        if isinstance(node.body, BlockStatement):
            self._write(" ")
        else:
            self._newline()
        self._write("while (")
        self._node(node.test)
        self._write(")" + STATEMENT_TERMINATOR)

    def visit_try_statement(self, node) -> None:
        self._write("try ")
        self._node(node.block)
        if node.handler is not None:
            self._write(" ")
            self._node(node.handler)
        if node.finalizer is not None:
            self._write(" finally ")
            self._node(node.finalizer)

    def visit_catch_clause(self, node) -> None:
        self._write("catch (")
        self._node(node.param)
        self._write(") ")
        self._node(node.body)

    # =========================================================================
    # Functions
    # =========================================================================

    def _function(self, node) -> None:
        self._write("function")
        if node.id is not None:
            self._write(" ")
            self._node(node.id)
        self._parameters(node.params)
        self._write(" ")
        self._node(node.body)

    def _parameters(self, params: List[ASTNode]) -> None:
        self._write("(")
        self._comma_list(params)
        self._write(")")

    def visit_function_expression(self, node) -> None:
        self._function(node)

    def visit_arrow_function_expression(self, node) -> None:
        self._parameters(node.params)
        self._write(" => ")
        body = node.body
        if isinstance(body, BlockStatement):
            self._node(body)
        else:
            wrap = precedence(body) < PREC_ASSIGNMENT or self._starts_with_brace_or_function(body, functions=False)
            self._expression(body, wrap)

    # =========================================================================
    # Expressions
    # =========================================================================

    def visit_identifier(self, node) -> None:
        self._write(node.name)

    def visit_literal(self, node) -> None:
        self._write(node.raw if node.raw is not None else format_literal(node.value))

    def visit_this_expression(self, node) -> None:
        self._write("this")

    def visit_array_expression(self, node) -> None:
        self._write("[")
        self._comma_list(node.elements)
        self._write("]")

    def visit_object_expression(self, node) -> None:
        if not node.properties:
            self._write("{}")
            return
        self._write("{")
        self._level += 1
        for index, prop in enumerate(node.properties):
            if index:
                self._write(",")
            self._newline()
            self._node(prop)
        self._level -= 1
        self._newline()
        self._write("}")

    def visit_property(self, node: Property) -> None:
        if node.kind in ("get", "set") and isinstance(node.value, FunctionExpression):
            self._write(node.kind + " ")
            self._property_key(node)
            self._parameters(node.value.params)
            self._write(" ")
            self._node(node.value.body)
            return
        if node.shorthand and isinstance(node.value, Identifier) and isinstance(node.key, Identifier) \
                and node.value.name == node.key.name:
            self._node(node.value)
            return
        self._property_key(node)
        self._write(": ")
        self._expression(node.value, precedence(node.value) < PREC_ASSIGNMENT)

    def _property_key(self, node: Property) -> None:
        if node.computed:
            self._write("[")
            self._node(node.key)
            self._write("]")
        else:
            self._node(node.key)

    def visit_unary_expression(self, node) -> None:
        operator = node.operator
        self._write(operator)
        argument = node.argument
        if operator in _WORD_OPERATORS:
            self._write(" ")
        elif isinstance(argument, (UnaryExpression, UpdateExpression)) and argument.prefix \
                and argument.operator[0] == operator:
            self._write(" ")  # `- -x`, `+ ++x`
        self._child(node, "argument")

    def visit_update_expression(self, node) -> None:
        if node.prefix:
            self._write(node.operator)
            self._child(node, "argument")
        else:
            self._child(node, "argument")
            self._write(node.operator)

    def visit_binary_expression(self, node) -> None:
        self._child(node, "left")
        self._write(f" {node.operator} ")
        self._child(node, "right")

    def visit_logical_expression(self, node) -> None:
        self.visit_binary_expression(node)

    def visit_assignment_expression(self, node) -> None:
        self._child(node, "left")
        self._write(f" {node.operator} ")
        self._child(node, "right")

    def visit_conditional_expression(self, node) -> None:
        self._child(node, "test")
        self._write(" ? ")
        self._child(node, "consequent")
        self._write(" : ")
        self._child(node, "alternate")

    def visit_call_expression(self, node) -> None:
        self._child(node, "callee")
        self._write("(")
        self._comma_list(node.arguments)
        self._write(")")

    def visit_new_expression(self, node) -> None:
        self._write("new ")
        self._child(node, "callee")
        self._write("(")
        self._comma_list(node.arguments)
        self._write(")")

    def visit_member_expression(self, node) -> None:
        self._child(node, "object")
        if node.computed:
            self._write("[")
            self._node(node.property)
            self._write("]")
        else:
            self._write(".")
            self._node(node.property)

    def visit_sequence_expression(self, node) -> None:
        self._comma_list(node.expressions)


# =============================================================================
# Helpers
# =============================================================================

_LEFTMOST_FIELDS: Dict[type, str] = {
    CallExpression: "callee",
    MemberExpression: "object",
    BinaryExpression: "left",
    LogicalExpression: "left",
    AssignmentExpression: "left",
    ConditionalExpression: "test",
    SequenceExpression: "expressions",
}


def _leftmost_field(node: ASTNode) -> Optional[str]:
    """Field printed first when the node starts with a sub-expression."""
    if isinstance(node, UpdateExpression):
        return None if node.prefix else "argument"
    return _LEFTMOST_FIELDS.get(type(node))


def _is_bare_integer(node: ASTNode) -> bool:
    """`1.toString()` does not parse; `(1).toString()` does."""
    if not isinstance(node, Literal) or isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
        return False
    text = node.raw if node.raw is not None else format_literal(node.value)
    return not any(ch in text for ch in ".eExX")


def _contains_call(node: ASTNode) -> bool:
    """`new f().g()` needs `new (f().g)()` when the callee chain holds a call."""
    while isinstance(node, MemberExpression):
        node = node.object
    return isinstance(node, CallExpression)


def _contains_in_operator(node: ASTNode) -> bool:
    return isinstance(node, BinaryExpression) and node.operator == "in"


def format_literal(value: Any) -> str:
    """Source text for a literal value that has no recorded `raw` spelling."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    if isinstance(value, str):
        return json.dumps(value)
    raise UnarrowImplementationError(f"cannot print literal value {value!r}",
                                     error_code=ErrorCode.UNPRINTABLE_NODE.value)


def print_program(node: ASTNode, source_map: Optional[SourceMapBuilder] = None) -> PrintResult:
    return JavaScriptPrinter().print(node, source_map)
