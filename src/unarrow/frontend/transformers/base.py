"""
unarrow AST Transformer
Converts the Lark parse tree to ESTree-shaped unarrow nodes
"""

import logging
from typing import Any, List, Optional, Union

from lark import Transformer, v_args
from lark.lexer import Token
from typing_extensions import TypeAlias

from ...shared import (
    ArrayExpression, AssignmentExpression, BinaryExpression, BlockStatement,
    BreakStatement, CallExpression, CatchClause, ConditionalExpression,
    ContinueStatement, DoWhileStatement, EmptyStatement, Expression,
    ExpressionStatement, ForInStatement, ForStatement, Identifier, IfStatement,
    Literal, LogicalExpression, MemberExpression, NewExpression,
    ObjectExpression, Program, Property, ReturnStatement, SequenceExpression,
    SourceLocation, Statement, ThisExpression, ThrowStatement, TryStatement,
    UnaryExpression, UnarrowImplementationError, UnarrowSourceError,
    UpdateExpression, VariableDeclaration, VariableDeclarator, WhileStatement,
    ArrowFunctionExpression, FunctionDeclaration, FunctionExpression,
)
from .functions import FunctionParser
from .literals import LiteralParser

LarkMeta: TypeAlias = Any  # Lark's internal Meta object

logger: logging.Logger = logging.getLogger(__name__)


@v_args(inline=True, meta=True)
class UnarrowTransformer(Transformer):
    """
    unarrow AST Transformer

    One method per grammar rule or alias. Keyword and punctuation tokens are
    filtered by Lark; named terminals (operators, `in`, `var`...) arrive as
    Tokens.
    """

    def __init__(self) -> None:
        super().__init__()
        self.function_parser = FunctionParser(self._extract_location, self._token_location)
        self.current_file: str = ""  # Must be set by parser before use

    def __default__(self, data, children, meta):
        """Every grammar rule must produce a node; fail loudly instead of leaking a Tree"""
        raise UnarrowImplementationError(f"Missing transformer method for grammar rule '{data}'")

    def _extract_location(self, meta: LarkMeta) -> Optional[SourceLocation]:
        """Extract location from Lark meta object"""
        if not self.current_file:
            raise RuntimeError(
                "Parser bug: current_file not set. "
                "Parser must set current_file before transforming."
            )
        if meta is None or getattr(meta, "empty", True):
            return None
        return SourceLocation(
            file=self.current_file,
            line=meta.line,
            column=meta.column,
            start=meta.start_pos,
            end=meta.end_pos,
            end_line=meta.end_line,
            end_column=meta.end_column,
        )

    def _token_location(self, token: Token) -> Optional[SourceLocation]:
        if token.line is None:
            return None
        return SourceLocation(
            file=self.current_file,
            line=token.line,
            column=token.column,
            start=token.start_pos or 0,
            end=token.end_pos or 0,
            end_line=token.end_line or token.line,
            end_column=token.end_column or token.column,
        )

    @staticmethod
    def _with_location(node: Any, location: Optional[SourceLocation]) -> Any:
        node.location = location
        return node

    # =========================================================================
    # PROGRAM AND STATEMENTS
    # =========================================================================

    def program(self, meta: LarkMeta, *statements: Statement) -> Program:
        return Program(body=list(statements), location=self._extract_location(meta))

    def block(self, meta: LarkMeta, *statements: Statement) -> BlockStatement:
        return BlockStatement(body=list(statements), location=self._extract_location(meta))

    def tail_expression(self, meta: LarkMeta, expression: Expression) -> ExpressionStatement:
        """Last statement of a block, semicolon omitted"""
        return ExpressionStatement(expression=expression, location=self._extract_location(meta))

    def tail_return(self, meta: LarkMeta, argument: Optional[Expression] = None) -> ReturnStatement:
        return ReturnStatement(argument=argument, location=self._extract_location(meta))

    def tail_var(self, meta: LarkMeta, declaration: VariableDeclaration) -> VariableDeclaration:
        return declaration

    def tail_throw(self, meta: LarkMeta, argument: Expression) -> ThrowStatement:
        return ThrowStatement(argument=argument, location=self._extract_location(meta))

    def expression_statement(self, meta: LarkMeta, expression: Expression) -> ExpressionStatement:
        return ExpressionStatement(expression=expression, location=self._extract_location(meta))

    def empty_statement(self, meta: LarkMeta) -> EmptyStatement:
        return EmptyStatement(location=self._extract_location(meta))

    def var_statement(self, meta: LarkMeta, declaration: VariableDeclaration) -> VariableDeclaration:
        return self._with_location(declaration, self._extract_location(meta))

    def var_declaration(self, meta: LarkMeta, kind: str, *declarators: VariableDeclarator) -> VariableDeclaration:
        return VariableDeclaration(
            declarations=list(declarators),
            kind=kind,
            location=self._extract_location(meta),
        )

    def var_kind(self, meta: LarkMeta, keyword: Token) -> str:
        return str(keyword)

    def variable_declarator(self, meta: LarkMeta, name: Token,
                            init: Optional[Expression] = None) -> VariableDeclarator:
        return VariableDeclarator(
            id=Identifier(name=str(name), location=self._token_location(name)),
            init=init,
            location=self._extract_location(meta),
        )

    def function_declaration(self, meta: LarkMeta, name: Token, params: List[Identifier],
                             body: BlockStatement) -> FunctionDeclaration:
        return self.function_parser.parse_declaration(meta, name, params, body)

    def parameter_list(self, meta: LarkMeta, *names: Token) -> List[Identifier]:
        return self.function_parser.parse_parameters(names)

    def return_statement(self, meta: LarkMeta, argument: Optional[Expression] = None) -> ReturnStatement:
        return ReturnStatement(argument=argument, location=self._extract_location(meta))

    def if_statement(self, meta: LarkMeta, test: Expression, consequent: Statement,
                     alternate: Optional[Statement] = None) -> IfStatement:
        return IfStatement(test, consequent, alternate, location=self._extract_location(meta))

    def for_statement(self, meta: LarkMeta, init, test, update, body: Statement) -> ForStatement:
        return ForStatement(init, test, update, body, location=self._extract_location(meta))

    def for_init(self, meta: LarkMeta, *value: Union[VariableDeclaration, Expression]):
        return value[0] if value else None

    def for_test(self, meta: LarkMeta, *value: Expression) -> Optional[Expression]:
        return value[0] if value else None

    def for_update(self, meta: LarkMeta, *value: Expression) -> Optional[Expression]:
        return value[0] if value else None

    def for_in_statement(self, meta: LarkMeta, left, in_keyword: Token, right: Expression,
                         body: Statement) -> ForInStatement:
        return ForInStatement(left, right, body, location=self._extract_location(meta))

    def for_in_declaration(self, meta: LarkMeta, kind: str, name: Token) -> VariableDeclaration:
        location = self._extract_location(meta)
        declarator = VariableDeclarator(
            id=Identifier(name=str(name), location=self._token_location(name)),
            location=self._token_location(name),
        )
        return VariableDeclaration(declarations=[declarator], kind=kind, location=location)

    def for_in_left(self, meta: LarkMeta, target: Expression) -> Expression:
        self._check_assignment_target(target)
        return target

    def while_statement(self, meta: LarkMeta, test: Expression, body: Statement) -> WhileStatement:
        return WhileStatement(test, body, location=self._extract_location(meta))

    def do_while_statement(self, meta: LarkMeta, body: Statement, test: Expression) -> DoWhileStatement:
        return DoWhileStatement(body, test, location=self._extract_location(meta))

    def break_statement(self, meta: LarkMeta) -> BreakStatement:
        return BreakStatement(location=self._extract_location(meta))

    def continue_statement(self, meta: LarkMeta) -> ContinueStatement:
        return ContinueStatement(location=self._extract_location(meta))

    def throw_statement(self, meta: LarkMeta, argument: Expression) -> ThrowStatement:
        return ThrowStatement(argument=argument, location=self._extract_location(meta))

    def try_statement(self, meta: LarkMeta, block: BlockStatement, *clauses) -> TryStatement:
        handler = next((c for c in clauses if isinstance(c, CatchClause)), None)
        finalizer = next((c for c in clauses if isinstance(c, BlockStatement)), None)
        return TryStatement(block, handler, finalizer, location=self._extract_location(meta))

    def catch_clause(self, meta: LarkMeta, param: Token, body: BlockStatement) -> CatchClause:
        return CatchClause(
            param=Identifier(name=str(param), location=self._token_location(param)),
            body=body,
            location=self._extract_location(meta),
        )

    def finally_clause(self, meta: LarkMeta, body: BlockStatement) -> BlockStatement:
        return body

    # =========================================================================
    # FUNCTIONS
    # =========================================================================

    def function_expression(self, meta: LarkMeta, *children: Any) -> FunctionExpression:
        return self.function_parser.parse_expression(meta, *children)

    def arrow_function(self, meta: LarkMeta, params: List[Identifier], body) -> ArrowFunctionExpression:
        return self.function_parser.parse_arrow(meta, params, body)

    def single_arrow_parameter(self, meta: LarkMeta, name: Token) -> List[Identifier]:
        return self.function_parser.parse_parameters([name])

    def arrow_parameters(self, meta: LarkMeta, params: List[Identifier]) -> List[Identifier]:
        return params

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    def sequence_expression(self, meta: LarkMeta, left: Expression, right: Expression) -> SequenceExpression:
        location = self._extract_location(meta)
        if isinstance(left, SequenceExpression) and left.location is not None and location is not None \
                and left.location.start == location.start:
            # Left-recursive `a, b, c` arrives as ((a, b), c); keep it flat
            left.expressions.append(right)
            return self._with_location(left, location)
        return SequenceExpression(expressions=[left, right], location=location)

    def assignment_expression(self, meta: LarkMeta, left: Expression, *rest: Any) -> AssignmentExpression:
        self._check_assignment_target(left)
        operator = str(rest[0]) if len(rest) == 2 else "="
        return AssignmentExpression(operator, left, rest[-1], location=self._extract_location(meta))

    def conditional_expression(self, meta: LarkMeta, test: Expression, consequent: Expression,
                               alternate: Expression) -> ConditionalExpression:
        return ConditionalExpression(test, consequent, alternate, location=self._extract_location(meta))

    def logical_expression(self, meta: LarkMeta, left: Expression, op: Token, right: Expression) -> LogicalExpression:
        return LogicalExpression(str(op), left, right, location=self._extract_location(meta))

    def binary_expression(self, meta: LarkMeta, left: Expression, op: Token, right: Expression) -> BinaryExpression:
        return BinaryExpression(str(op), left, right, location=self._extract_location(meta))

    def unary_expression(self, meta: LarkMeta, op: Token, argument: Expression) -> UnaryExpression:
        return UnaryExpression(str(op), argument, prefix=True, location=self._extract_location(meta))

    def prefix_update_expression(self, meta: LarkMeta, op: Token, argument: Expression) -> UpdateExpression:
        self._check_assignment_target(argument)
        return UpdateExpression(str(op), argument, prefix=True, location=self._extract_location(meta))

    def postfix_update_expression(self, meta: LarkMeta, argument: Expression, op: Token) -> UpdateExpression:
        self._check_assignment_target(argument)
        return UpdateExpression(str(op), argument, prefix=False, location=self._extract_location(meta))

    def member_expression(self, meta: LarkMeta, obj: Expression, prop: Identifier) -> MemberExpression:
        return MemberExpression(obj, prop, computed=False, location=self._extract_location(meta))

    def computed_member_expression(self, meta: LarkMeta, obj: Expression, prop: Expression) -> MemberExpression:
        return MemberExpression(obj, prop, computed=True, location=self._extract_location(meta))

    def call_expression(self, meta: LarkMeta, callee: Expression, args: List[Expression]) -> CallExpression:
        return CallExpression(callee, args, location=self._extract_location(meta))

    def new_expression(self, meta: LarkMeta, callee: Expression, args: List[Expression]) -> NewExpression:
        return NewExpression(callee, args, location=self._extract_location(meta))

    def arguments(self, meta: LarkMeta, *args: Expression) -> List[Expression]:
        return list(args)

    def _check_assignment_target(self, target: Expression) -> None:
        if not isinstance(target, (Identifier, MemberExpression)):
            raise UnarrowSourceError(
                "invalid assignment target",
                target.location,
                label="cannot assign to this expression",
            )

    # =========================================================================
    # PRIMARY EXPRESSIONS
    # =========================================================================

    def this_expression(self, meta: LarkMeta, token: Token) -> ThisExpression:
        return ThisExpression(location=self._extract_location(meta))

    def identifier(self, meta: LarkMeta, name: Token) -> Identifier:
        return Identifier(name=str(name), location=self._extract_location(meta))

    def number_literal(self, meta: LarkMeta, token: Token) -> Literal:
        return LiteralParser.parse(token, self._extract_location(meta))

    def string_literal(self, meta: LarkMeta, token: Token) -> Literal:
        return LiteralParser.parse(token, self._extract_location(meta))

    def boolean_literal(self, meta: LarkMeta, token: Token) -> Literal:
        return LiteralParser.parse(token, self._extract_location(meta))

    def null_literal(self, meta: LarkMeta, token: Token) -> Literal:
        return LiteralParser.parse(token, self._extract_location(meta))

    def array_literal(self, meta: LarkMeta, *elements: Expression) -> ArrayExpression:
        return ArrayExpression(elements=list(elements), location=self._extract_location(meta))

    def object_literal(self, meta: LarkMeta, *properties: Property) -> ObjectExpression:
        return ObjectExpression(properties=list(properties), location=self._extract_location(meta))

    def named_property(self, meta: LarkMeta, key: Identifier, value: Expression) -> Property:
        return Property(key=key, value=value, location=self._extract_location(meta))

    def string_keyed_property(self, meta: LarkMeta, key: Token, value: Expression) -> Property:
        key_node = LiteralParser.parse(key, self._token_location(key))
        return Property(key=key_node, value=value, location=self._extract_location(meta))

    def number_keyed_property(self, meta: LarkMeta, key: Token, value: Expression) -> Property:
        key_node = LiteralParser.parse(key, self._token_location(key))
        return Property(key=key_node, value=value, location=self._extract_location(meta))

    def shorthand_property(self, meta: LarkMeta, name: Token) -> Property:
        location = self._token_location(name)
        return Property(
            key=Identifier(name=str(name), location=location),
            value=Identifier(name=str(name), location=location),
            shorthand=True,
            location=self._extract_location(meta),
        )

    def property_name(self, meta: LarkMeta, name: Token) -> Identifier:
        return Identifier(name=str(name), location=self._extract_location(meta))
