#!/usr/bin/env python3
"""
Tests for concise-body normalization.
"""

import pytest

from unarrow.analysis import normalize_body
from unarrow.shared.nodes import (
    BinaryExpression, BlockStatement, CallExpression, Identifier, ObjectExpression,
    ReturnStatement, SequenceExpression,
)
from unarrow.shared.source_location import SourceLocation


class TestNormalizeBody:

    def test_block_is_returned_unchanged(self):
        block = BlockStatement(body=[ReturnStatement(Identifier("x"))])
        assert normalize_body(block) is block
        assert len(block.body) == 1

    def test_empty_block(self):
        block = BlockStatement()
        assert normalize_body(block) is block

    @pytest.mark.parametrize("expression", [
        Identifier("x"),
        BinaryExpression("*", Identifier("x"), Identifier("x")),
        ObjectExpression(),
        SequenceExpression([CallExpression(Identifier("a")), CallExpression(Identifier("b"))]),
    ])
    def test_expression_is_wrapped_in_return(self, expression):
        body = normalize_body(expression)
        assert isinstance(body, BlockStatement)
        statement, = body.body
        assert isinstance(statement, ReturnStatement)
        # the very same object: nothing copied, nothing evaluated twice
        assert statement.argument is expression

    def test_location_is_carried_over(self):
        location = SourceLocation("a.js", 1, 7)
        body = normalize_body(Identifier("x", location=location))
        assert body.location == location
        assert body.body[0].location == location

    def test_parsed_concise_body(self, parse):
        program = parse("f(v => v + 1);")
        arrow = program.body[0].expression.arguments[0]
        body = normalize_body(arrow.body)
        assert body.body[0].argument is arrow.body
