#!/usr/bin/env python3
"""
Tests for lexical `this` capture: which arrows must be bound to their
surrounding `this`.
"""

import pytest

from tests.test_utils import nodes_of_type
from unarrow.analysis import has_own_this_capture
from unarrow.shared.nodes import ArrowFunctionExpression


def _arrows(program):
    return nodes_of_type(program, ArrowFunctionExpression)


class TestThisCapture:
    """has_own_this_capture on parsed arrows"""

    @pytest.mark.parametrize("source", [
        "() => this;",
        "() => { return this.x; };",
        "x => f(this);",
        "() => [1, { a: this }];",
        "() => cond ? a : this;",
    ])
    def test_direct_this(self, parse, source):
        arrow, = _arrows(parse(source))
        assert has_own_this_capture(arrow)

    @pytest.mark.parametrize("source", [
        "() => 1;",
        "x => x * x;",
        "() => { var self = that; return self; };",
        "() => ({ key: value });",
    ])
    def test_no_this(self, parse, source):
        arrow, = _arrows(parse(source))
        assert not has_own_this_capture(arrow)

    def test_this_inside_ordinary_function_is_not_captured(self, parse):
        arrow, = _arrows(parse("() => function() { return this; };"))
        assert not has_own_this_capture(arrow)

    def test_this_inside_function_declaration_is_not_captured(self, parse):
        arrow, = _arrows(parse("() => { function inner() { return this; } return inner; };"))
        assert not has_own_this_capture(arrow)

    def test_nested_arrow_propagates_to_outer(self, parse):
        outer, inner = _arrows(parse("alert(() => () => this);"))
        assert has_own_this_capture(outer)
        assert has_own_this_capture(inner)

    def test_nested_arrow_behind_function_boundary(self, parse):
        outer, inner = _arrows(parse("() => function() { return () => this; };"))
        assert not has_own_this_capture(outer)
        assert has_own_this_capture(inner)

    def test_only_one_sibling_captures(self, parse):
        first, second = _arrows(parse("f(() => this, () => that);"))
        assert has_own_this_capture(first)
        assert not has_own_this_capture(second)

    def test_analysis_does_not_modify_the_arrow(self, parse):
        arrow, = _arrows(parse("() => this;"))
        body = arrow.body
        has_own_this_capture(arrow)
        assert arrow.body is body
        assert arrow.expression
