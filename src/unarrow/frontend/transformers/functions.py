"""
Function Parser - Extracted from UnarrowTransformer
Handles parsing of function declarations, function expressions, arrow
functions and their parameter lists
"""

from typing import Any, Callable, List, Optional, Sequence, Union

from lark.lexer import Token
from typing_extensions import TypeAlias

from ...shared import (
    ArrowFunctionExpression, BlockStatement, Expression, FunctionDeclaration,
    FunctionExpression, Identifier, SourceLocation, UnarrowSourceError,
)

LarkMeta: TypeAlias = Any  # Lark's internal Meta object
LocationExtractor: TypeAlias = Callable[[LarkMeta], Optional[SourceLocation]]
TokenLocator: TypeAlias = Callable[[Token], Optional[SourceLocation]]


class FunctionParser:
    """Dedicated parser for the three function forms"""

    def __init__(self, location_extractor: LocationExtractor, token_locator: TokenLocator) -> None:
        self.extract_location = location_extractor
        self.locate_token = token_locator

    def parse_parameters(self, names: Sequence[Token]) -> List[Identifier]:
        """Parameter tokens to Identifiers. Duplicate names are rejected."""
        params: List[Identifier] = []
        seen = set()
        for name in names:
            text = str(name)
            if text in seen:
                raise UnarrowSourceError(
                    f"duplicate parameter name `{text}`",
                    self.locate_token(name),
                    label="already declared in this parameter list",
                )
            seen.add(text)
            params.append(Identifier(name=text, location=self.locate_token(name)))
        return params

    def parse_declaration(self, meta: LarkMeta, name: Token, params: List[Identifier],
                          body: BlockStatement) -> FunctionDeclaration:
        """Grammar: 'function' IDENT '(' parameter_list ')' block"""
        return FunctionDeclaration(
            id=Identifier(name=str(name), location=self.locate_token(name)),
            params=params,
            body=body,
            location=self.extract_location(meta),
        )

    def parse_expression(self, meta: LarkMeta, *children: Any) -> FunctionExpression:
        """Grammar: 'function' IDENT? '(' parameter_list ')' block"""
        function_id: Optional[Identifier] = None
        if isinstance(children[0], Token):
            function_id = Identifier(name=str(children[0]), location=self.locate_token(children[0]))
            children = children[1:]
        params, body = children
        return FunctionExpression(
            id=function_id,
            params=params,
            body=body,
            location=self.extract_location(meta),
        )

    def parse_arrow(self, meta: LarkMeta, params: List[Identifier],
                    body: Union[BlockStatement, Expression]) -> ArrowFunctionExpression:
        """Grammar: arrow_parameters '=>' (block | assignment)"""
        return ArrowFunctionExpression(
            params=params,
            body=body,
            expression=not isinstance(body, BlockStatement),
            location=self.extract_location(meta),
        )
