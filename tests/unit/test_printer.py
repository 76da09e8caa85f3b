#!/usr/bin/env python3
"""
Tests for the JavaScript printer: layout, parenthesization and source maps.
"""

import pytest

from tests.test_utils import normalize, parse_js, print_js
from unarrow.backends import JavaScriptPrinter, SourceMapBuilder
from unarrow.backends.javascript import format_literal
from unarrow.backends.source_map import decode_mappings, decode_vlq, encode_vlq
from unarrow.shared.errors import UnarrowImplementationError
from unarrow.shared.nodes import (
    BinaryExpression, BlockStatement, CallExpression, ExpressionStatement,
    FunctionExpression, Identifier, Literal, MemberExpression, ObjectExpression,
    Program, ReturnStatement, ThisExpression, UnknownNode,
)


class TestLayout:

    def test_function_expression(self):
        assert normalize("var f = function(x) { return x * 2; };") == (
            "var f = function(x) {\n"
            "  return x * 2;\n"
            "};\n"
        )

    def test_empty_function_body(self):
        assert normalize("let empty = function() {};") == "let empty = function() {};\n"

    def test_object_literal(self):
        assert normalize("var o = {a: 1, b: [1, 2]};") == "var o = {\n  a: 1,\n  b: [1, 2]\n};\n"

    def test_statements_one_per_line(self):
        assert normalize("a(); b();") == "a();\nb();\n"

    def test_control_flow_layout(self):
        source = "if (a) { b(); } else c();"
        assert normalize(source) == "if (a) {\n  b();\n} else c();\n"

    def test_raw_literal_spelling(self):
        assert normalize("x = 0xff + 'single';") == "x = 0xff + 'single';\n"

    def test_custom_indent(self):
        program = parse_js("function f() { return 1; }")
        assert JavaScriptPrinter(indent="    ").print(program).code == "function f() {\n    return 1;\n}\n"

    def test_empty_program(self):
        assert print_js(Program(body=[])) == ""


class TestParentheses:
    """Parentheses are inserted where the tree needs them, and only there"""

    @pytest.mark.parametrize("source", [
        "(a + b) * c;",
        "a - (b - c);",
        "a + b * c;",
        "x = (a, b);",
        "(a ? b : c) ? d : e;",
        "!(a && b);",
        "typeof (a + b);",
        "f(a, (b, c));",
        "(a || b) && c;",
        "new (f())();",
        "(1).toString();",
        "1.5.toFixed();",
        "(function() {})();",
        "(x) => ({});",
        "- -x;",
    ])
    def test_round_trip_is_stable(self, source):
        assert normalize(source).rstrip("\n") == source

    def test_redundant_parentheses_are_dropped(self):
        assert normalize("((a)) + ((b * c));") == "a + b * c;\n"

    def test_function_expression_callee_is_wrapped(self):
        function = FunctionExpression(id=None, params=[], body=BlockStatement([ReturnStatement(ThisExpression())]))
        bound = CallExpression(MemberExpression(function, Identifier("bind")), [ThisExpression()])
        code = print_js(Program([ExpressionStatement(CallExpression(Identifier("alert"), [bound]))]))
        assert code == "alert((function() {\n  return this;\n}).bind(this));\n"

    def test_function_at_statement_start_is_wrapped(self):
        function = FunctionExpression(id=None, params=[], body=BlockStatement())
        assert print_js(Program([ExpressionStatement(function)])) == "(function() {});\n"

    def test_object_at_statement_start_is_wrapped(self):
        statement = ExpressionStatement(MemberExpression(ObjectExpression(), Identifier("a")))
        assert print_js(Program([statement])) == "({}.a);\n"

    def test_tree_built_precedence(self):
        tree = BinaryExpression("*", BinaryExpression("+", Identifier("a"), Identifier("b")), Literal(2))
        assert print_js(tree) == "(a + b) * 2\n"

    def test_dangling_else_stays_attached(self, parse):
        program = parse("if (a) { if (b) x(); } else y();")
        code = print_js(program)
        assert parse_js(code).body[0].alternate is not None
        assert normalize(code) == code


class TestUnprintable:

    def test_unknown_node(self):
        with pytest.raises(UnarrowImplementationError) as excinfo:
            print_js(Program([ExpressionStatement(UnknownNode("ClassExpression", {}))]))
        assert excinfo.value.error_code == "E9001"

    @pytest.mark.parametrize("value,text", [
        (None, "null"),
        (True, "true"),
        (3, "3"),
        (2.0, "2"),
        (0.5, "0.5"),
        ("it's", '"it\'s"'),
    ])
    def test_format_literal(self, value, text):
        assert format_literal(value) == text


class TestVLQ:

    @pytest.mark.parametrize("value,encoded", [
        (0, "A"),
        (1, "C"),
        (-1, "D"),
        (15, "e"),
        (16, "gB"),
        (-16, "hB"),
        (123, "2H"),
    ])
    def test_encode(self, value, encoded):
        assert encode_vlq(value) == encoded

    def test_decode_segment(self):
        assert decode_vlq("AAgBC") == [0, 0, 16, 1]

    def test_large_values(self):
        for value in (1000, -1000, 123456):
            assert decode_vlq(encode_vlq(value)) == [value]


class TestSourceMap:

    def _print_with_map(self, source, source_file="in.js"):
        builder = SourceMapBuilder("out.js.map", source_file)
        return JavaScriptPrinter().print(parse_js(source, source_file), builder)

    def test_no_map_without_builder(self):
        assert JavaScriptPrinter().print(parse_js("a;")).map is None

    def test_map_header(self):
        result = self._print_with_map("var f = x => x;")
        source_map = result.map
        assert source_map["version"] == 3
        assert source_map["file"] == "out.js.map"
        assert source_map["sources"] == ["in.js"]
        assert source_map["names"] == ["f", "x"]

    def test_first_segment_maps_origin(self):
        result = self._print_with_map("var f = x => x;")
        assert decode_mappings(result.map["mappings"])[0] == (0, 0, 0, 0, 0, None)

    def test_mapped_positions(self):
        # `b` moves from line 1 to line 2 when printed one statement per line
        result = self._print_with_map("a; b;")
        assert result.code == "a;\nb;\n"
        decoded = decode_mappings(result.map["mappings"])
        b_segment = [m for m in decoded if m[0] == 1][0]
        assert b_segment[:2] == (1, 0)
        assert b_segment[3:5] == (0, 3)

    def test_names_point_at_identifiers(self):
        result = self._print_with_map("foo(bar);")
        names = result.map["names"]
        decoded = decode_mappings(result.map["mappings"])
        named = {names[m[5]]: m[1] for m in decoded if m[5] is not None}
        assert named == {"foo": 0, "bar": 4}

    def test_line_groups(self):
        result = self._print_with_map("function f() {\n  return 1;\n}")
        lines = {m[0] for m in decode_mappings(result.map["mappings"])}
        # the closing brace is not a node of its own
        assert lines == {0, 1}
