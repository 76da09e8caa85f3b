#!/usr/bin/env python3
"""
Tests for `arguments` hoisting: reference classification, shadowing, target
resolution, binding names and binding insertion.
"""

import pytest

from tests.test_utils import assert_same_js, first_of_type, nodes_of_type, print_js
from unarrow.analysis import (
    HoistedBindingNamer,
    binding_declaration,
    collect_arguments_references,
    hidden_arguments_bindings,
    hoist_target,
    insert_binding,
    is_reference,
    resolve_arguments,
)
from unarrow.passes.base import TransformContext
from unarrow.passes.pipeline import transform
from unarrow.passes.scope_analysis import build_scope_table
from unarrow.shared.ast_visitor import visit
from unarrow.shared.nodes import (
    ArrowFunctionExpression, CatchClause, FunctionDeclaration, FunctionExpression,
    Identifier, MemberExpression, VariableDeclaration,
)
from unarrow.shared.scope import BindingType, ScopeKind


def _references(program, arrow_index=0):
    scopes = build_scope_table(program)
    arrow = nodes_of_type(program, ArrowFunctionExpression)[arrow_index]
    return collect_arguments_references(arrow, scopes)


def _reference_flags(program, name):
    flags = []

    def enter(node, path):
        if isinstance(node, Identifier) and node.name == name:
            flags.append(is_reference(path))

    visit(program, enter)
    return flags


class TestIsReference:
    """Which identifier positions read or write a variable"""

    def test_plain_reference(self, parse):
        assert _reference_flags(parse("f(x);"), "x") == [True]

    def test_member_property_is_not_a_reference(self, parse):
        assert _reference_flags(parse("a.x;"), "x") == [False]

    def test_computed_member_property_is_a_reference(self, parse):
        assert _reference_flags(parse("a[x];"), "x") == [True]

    def test_object_key_is_not_a_reference(self, parse):
        assert _reference_flags(parse("({ x: 1 });"), "x") == [False]

    def test_shorthand_property_value_is_a_reference(self, parse):
        assert _reference_flags(parse("({ x });"), "x") == [False, True]

    def test_binding_positions(self, parse):
        program = parse("function x(x) { var x; try {} catch (x) {} }")
        assert _reference_flags(program, "x") == [False, False, False, False]

    def test_assignment_target_is_a_reference(self, parse):
        assert _reference_flags(parse("x = 1;"), "x") == [True]


class TestCollectArgumentsReferences:
    """`arguments` references that resolve past the arrow"""

    def test_simple_reference(self, parse):
        refs = _references(parse("function f() { return () => arguments[0]; }"))
        assert [r.name for r in refs] == ["arguments"]

    def test_property_named_arguments_is_ignored(self, parse):
        refs = _references(parse("function f() { return () => obj.arguments + { arguments: 1 }.arguments; }"))
        assert refs == []

    def test_does_not_cross_ordinary_function(self, parse):
        refs = _references(parse("function f() { return () => function() { return arguments; }; }"))
        assert refs == []

    def test_includes_nested_arrows(self, parse):
        refs = _references(parse("function f() { return () => () => arguments.length; }"))
        assert len(refs) == 1

    def test_arrow_parameter_named_arguments_shadows(self, parse):
        refs = _references(parse("function f() { return arguments => arguments; }"))
        assert refs == []

    def test_nested_arrow_declaring_arguments_is_skipped(self, parse):
        program = parse("function f() { return () => [arguments, (arguments) => arguments]; }")
        refs = _references(program)
        assert len(refs) == 1

    def test_var_arguments_inside_arrow_shadows(self, parse):
        refs = _references(parse("function f() { return () => { var arguments = []; return arguments; }; }"))
        assert refs == []

    def test_inner_arrow_sees_outer_arrow_declaration(self, parse):
        program = parse("function f() { return (arguments) => () => arguments; }")
        assert _references(program, arrow_index=1) == []
        assert_same_js(
            print_js(transform(program, TransformContext())),
            "function f() { return function($__arguments) { return function() { return $__arguments; }; }; }",
        )

    def test_catch_inside_arrow_only_shadows_its_block(self, parse):
        program = parse(
            "function f() { return () => { try { throw 1; } catch (arguments) {} return arguments[0]; }; }"
        )
        refs = _references(program)
        assert len(refs) == 1
        assert refs[0] is first_of_type(program, MemberExpression).object

    def test_catch_parameter_shadows_inside_catch(self, parse):
        program = parse("function f() { return () => { try {} catch (arguments) { return arguments; } }; }")
        assert _references(program) == []

    def test_catch_around_arrow_is_not_hoisted(self, parse):
        program = parse("function f() { try { throw 0; } catch (arguments) { return () => arguments; } }")
        assert _references(program) == []

    def test_block_let_around_arrow_is_not_hoisted(self, parse):
        program = parse("function f() { if (x) { let arguments = 1; return () => arguments; } }")
        assert _references(program) == []

    def test_named_function_expression_does_not_shadow(self, parse):
        program = parse("var g = function arguments() { return () => arguments; };")
        assert len(_references(program)) == 1


class TestResolveArguments:
    """Which scope a single `arguments` reference reads from"""

    def _resolve(self, program, index=0):
        scopes = build_scope_table(program)
        reference = list(scopes.references("arguments"))[index]
        return scopes, resolve_arguments(reference, scopes)

    def test_implicit_object_of_enclosing_function(self, parse):
        program = parse("function f() { return () => arguments; }")
        scopes, resolution = self._resolve(program)
        assert resolution.scope is scopes.scope_of(first_of_type(program, FunctionDeclaration))
        assert resolution.binding is None
        assert resolution.arrow is first_of_type(program, ArrowFunctionExpression)
        assert resolution.reaches_function

    def test_reference_outside_arrows(self, parse):
        program = parse("function f() { return arguments; }")
        _, resolution = self._resolve(program)
        assert resolution.arrow is None

    def test_innermost_crossed_arrow(self, parse):
        program = parse("function f() { return () => () => arguments; }")
        _, resolution = self._resolve(program)
        assert resolution.arrow is nodes_of_type(program, ArrowFunctionExpression)[1]

    def test_declaring_arrow_is_not_crossed(self, parse):
        program = parse("function f() { return (arguments) => arguments; }")
        scopes, resolution = self._resolve(program)
        assert resolution.scope.kind is ScopeKind.ARROW
        assert resolution.binding.binding_type is BindingType.PARAMETER
        assert resolution.arrow is None
        assert not resolution.reaches_function

    def test_catch_parameter(self, parse):
        program = parse("function f() { try {} catch (arguments) { return () => arguments; } }")
        scopes, resolution = self._resolve(program)
        assert resolution.scope is scopes.scope_of(first_of_type(program, CatchClause))
        assert resolution.arrow is first_of_type(program, ArrowFunctionExpression)
        assert not resolution.reaches_function

    def test_function_level_let_is_not_hoisted(self, parse):
        program = parse("function f() { let arguments = 1; return () => arguments; }")
        _, resolution = self._resolve(program)
        assert resolution.scope.kind is ScopeKind.FUNCTION
        assert not resolution.reaches_function

    def test_function_parameter_is_hoisted(self, parse):
        program = parse("function f(arguments) { return () => arguments; }")
        _, resolution = self._resolve(program)
        assert resolution.binding.binding_type is BindingType.PARAMETER
        assert resolution.reaches_function

    def test_program_level(self, parse):
        program = parse("var f = () => arguments;")
        scopes, resolution = self._resolve(program)
        assert resolution.scope is scopes.root
        assert resolution.reaches_function


class TestHiddenArgumentsBindings:
    """Variables named `arguments` that a lowered arrow would stop seeing"""

    def _hidden(self, program):
        return hidden_arguments_bindings(build_scope_table(program))

    def test_arrow_parameter_seen_from_nested_arrow(self, parse):
        program = parse("function f() { return (arguments) => () => arguments; }")
        (scope, identifiers), = self._hidden(program)
        outer = first_of_type(program, ArrowFunctionExpression)
        assert scope.node is outer
        assert identifiers[0] is outer.params[0]
        assert [i.name for i in identifiers] == ["arguments", "arguments"]

    def test_catch_parameter_seen_from_arrow(self, parse):
        program = parse("function f() { try {} catch (arguments) { log(arguments); return () => arguments; } }")
        (scope, identifiers), = self._hidden(program)
        clause = first_of_type(program, CatchClause)
        assert scope.node is clause
        assert identifiers[0] is clause.param
        assert len(identifiers) == 3

    def test_block_let_seen_from_arrow(self, parse):
        program = parse("function f() { { let arguments = 1; return () => arguments; } }")
        (scope, identifiers), = self._hidden(program)
        assert scope.kind is ScopeKind.BLOCK
        assert len(identifiers) == 2

    def test_var_in_arrow_body(self, parse):
        program = parse("var g = () => { var arguments; return arguments; };")
        (scope, _), = self._hidden(program)
        assert scope.node is first_of_type(program, ArrowFunctionExpression)

    @pytest.mark.parametrize("source", [
        "function f() { return (arguments) => arguments; }",
        "function f() { return () => { try {} catch (arguments) { return arguments; } }; }",
        "function f() { try {} catch (arguments) { return arguments; } }",
        "function f() { return () => arguments; }",
        "function f(arguments) { return () => arguments; }",
        "function f() { var arguments; return () => { var unused = 1; }; }",
    ])
    def test_nothing_hidden(self, parse, source):
        assert self._hidden(parse(source)) == []


class TestHoistTarget:
    """Nearest enclosing ordinary function of an arrow"""

    def test_function_declaration_target(self, parse):
        program = parse("function outer() { return () => arguments; }")
        scopes = build_scope_table(program)
        arrow = first_of_type(program, ArrowFunctionExpression)
        assert hoist_target(arrow, scopes) is first_of_type(program, FunctionDeclaration)

    def test_target_skips_enclosing_arrows(self, parse):
        program = parse("var g = function() { return () => () => arguments; };")
        scopes = build_scope_table(program)
        inner = nodes_of_type(program, ArrowFunctionExpression)[1]
        assert hoist_target(inner, scopes) is first_of_type(program, FunctionExpression)

    def test_nearest_function_wins(self, parse):
        program = parse("function a() { return function b() { return () => arguments; }; }")
        scopes = build_scope_table(program)
        arrow = first_of_type(program, ArrowFunctionExpression)
        target = hoist_target(arrow, scopes)
        assert isinstance(target, FunctionExpression)
        assert target.id.name == "b"

    def test_program_level_has_no_target(self, parse):
        program = parse("var f = () => arguments;")
        scopes = build_scope_table(program)
        assert hoist_target(first_of_type(program, ArrowFunctionExpression), scopes) is None


class TestHoistedBindingNamer:
    """Deterministic collision-free names per target function"""

    def test_base_name(self, parse):
        function = first_of_type(parse("function f(a) { return a; }"), FunctionDeclaration)
        assert HoistedBindingNamer().name_for(function) == "$__arguments"

    def test_collision_appends_counter(self, parse):
        program = parse("function f($__arguments, $__arguments1) { return $__arguments2; }")
        function = first_of_type(program, FunctionDeclaration)
        assert HoistedBindingNamer().name_for(function) == "$__arguments3"

    def test_collision_in_nested_function_counts(self, parse):
        program = parse("function f() { return function() { var $__arguments; }; }")
        function = first_of_type(program, FunctionDeclaration)
        assert HoistedBindingNamer().name_for(function) == "$__arguments1"

    def test_name_is_stable_per_target(self, parse):
        function = first_of_type(parse("function f() {}"), FunctionDeclaration)
        namer = HoistedBindingNamer()
        first = namer.name_for(function)
        function.body.body.append(binding_declaration(first))
        assert namer.name_for(function) == first

    def test_custom_base_name(self, parse):
        function = first_of_type(parse("function f(_args) {}"), FunctionDeclaration)
        assert HoistedBindingNamer("_args").name_for(function) == "_args1"


class TestBindingInsertion:
    """`var <name> = arguments;` at the top of the target body"""

    def test_binding_declaration_shape(self):
        declaration = binding_declaration("$__arguments")
        assert isinstance(declaration, VariableDeclaration)
        assert declaration.kind == "var"
        declarator, = declaration.declarations
        assert declarator.id.name == "$__arguments"
        assert declarator.init.name == "arguments"

    def test_inserted_first(self, parse):
        function = first_of_type(parse("function f() { a(); b(); }"), FunctionDeclaration)
        insert_binding(function, binding_declaration("$__arguments"))
        assert print_js(function.body.body[0]) == "var $__arguments = arguments;\n"
        assert len(function.body.body) == 3

    def test_inserted_into_empty_body(self, parse):
        function = first_of_type(parse("function f() {}"), FunctionDeclaration)
        insert_binding(function, binding_declaration("$__arguments"))
        assert len(function.body.body) == 1

    @pytest.mark.parametrize("prologue", [
        "'use strict';",
        "\"use strict\"; 'another directive';",
    ])
    def test_after_directive_prologue(self, parse, prologue):
        function = first_of_type(parse(f"function f() {{ {prologue} go(); }}"), FunctionDeclaration)
        directives = len(function.body.body) - 1
        insert_binding(function, binding_declaration("$__arguments"))
        assert isinstance(function.body.body[directives], VariableDeclaration)
        assert all(s.directive is not None for s in function.body.body[:directives])

    def test_string_after_code_is_not_a_directive(self, parse):
        function = first_of_type(parse("function f() { go(); 'use strict'; }"), FunctionDeclaration)
        insert_binding(function, binding_declaration("$__arguments"))
        assert isinstance(function.body.body[0], VariableDeclaration)
