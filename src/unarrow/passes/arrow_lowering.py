"""
Arrow Function Lowering Pass

Rewrites every ArrowFunctionExpression into an ordinary FunctionExpression:

    x => x * 2                    function (x) { return x * 2; }
    () => this.value              (function () { return this.value; }).bind(this)
    () => arguments[0]            function () { return $__arguments[0]; }
                                  (+ `var $__arguments = arguments;` in the enclosing function)

Two phases:
1. Analysis on the untouched tree: which arrows capture `this`, which
   `arguments` references resolve to which ordinary function, the binding
   name per target function, and which variables named `arguments` a lowered
   function would hide (ArrowLoweringAnalysis).
2. One traversal: `enter` renames `arguments` identifiers; `leave` lowers each
   arrow bottom-up (inner arrows are already functions when their parent is
   lowered) and inserts the shared binding into each target function.
"""

import logging

from ..analysis import (
    ArrowLoweringAnalysis,
    HoistedBindingNamer,
    NodeMap,
    binding_declaration,
    collect_arguments_references,
    has_own_this_capture,
    hidden_arguments_bindings,
    hoist_target,
    insert_binding,
    normalize_body,
)
from ..shared.ast_visitor import NodePath, iter_nodes, visit
from ..shared.errors import ErrorCode, UnarrowSourceError
from ..shared.nodes import (
    ASTNode, ArrowFunctionExpression, CallExpression, Expression,
    FunctionExpression, Identifier, MemberExpression, Program, Property,
    ThisExpression, is_arrow_function, is_ordinary_function,
)
from ..shared.scope import ScopeTable
from ..utils.config import BIND_METHOD_NAME
from .base import BasePass, TransformContext
from .scope_analysis import ScopeAnalysisPass

logger = logging.getLogger("unarrow.passes.arrow_lowering")


class ArrowFunctionLoweringPass(BasePass):
    """Arrow functions to function expressions. Requires ScopeAnalysisPass."""
    requires = [ScopeAnalysisPass]

    def run(self, program: Program, ctx: TransformContext) -> Program:
        scopes: ScopeTable = ctx.get_analysis(ScopeAnalysisPass)
        analysis = analyze_arrows(program, scopes)
        ctx.set_analysis(ArrowFunctionLoweringPass, analysis)
        self._report_unresolved(analysis, ctx)
        return rewrite(program, analysis)

    def _report_unresolved(self, analysis: ArrowLoweringAnalysis, ctx: TransformContext) -> None:
        for arrow, reference in analysis.unresolved_arguments:
            message = "`arguments` used in an arrow function outside any function"
            help_text = "wrap the code in an ordinary function, or use a parameter instead"
            if ctx.strict:
                location = reference.location
                source = ctx.source_files.get(location.file) if location is not None else None
                raise UnarrowSourceError(
                    message,
                    location,
                    error_code=ErrorCode.UNRESOLVED_ARGUMENTS.value,
                    source_code=source,
                    help=help_text,
                    label="no enclosing function provides `arguments`",
                )
            logger.warning(f"{message} at {reference.location or '<unknown location>'}; left untouched")
            ctx.reporter.report_warning(
                message,
                reference.location,
                code=ErrorCode.TOP_LEVEL_ARGUMENTS.value,
                help=help_text,
                label="left untouched",
            )


def analyze_arrows(program: Program, scopes: ScopeTable) -> ArrowLoweringAnalysis:
    """Collect every fact the rewrite needs, before anything is rewritten."""
    analysis = ArrowLoweringAnalysis()
    namer = HoistedBindingNamer()
    unresolved: NodeMap[bool] = NodeMap()

    for node in iter_nodes(program):
        if not is_arrow_function(node):
            continue
        analysis.this_captures[node] = has_own_this_capture(node)

        references = collect_arguments_references(node, scopes)
        if not references:
            continue
        target = hoist_target(node, scopes)
        if target is None:
            for reference in references:
                if reference not in unresolved:
                    unresolved[reference] = True
                    analysis.unresolved_arguments.append((node, reference))
            continue
        analysis.hoisted_names[target] = namer.name_for(target)
        for reference in references:
            analysis.argument_targets[reference] = target

    for scope, identifiers in hidden_arguments_bindings(scopes):
        name = namer.name_for(scope.node)
        for identifier in identifiers:
            analysis.renamed_arguments[identifier] = name

    logger.debug(
        f"Arrow analysis: {len(analysis.this_captures)} arrows, "
        f"{len(analysis.argument_targets)} hoisted `arguments` references, "
        f"{len(analysis.hoisted_names)} target functions, "
        f"{len(analysis.renamed_arguments)} renamed `arguments` variable identifiers"
    )
    return analysis


def rewrite(program: Program, analysis: ArrowLoweringAnalysis) -> Program:
    def enter(node: ASTNode, path: NodePath):
        if not isinstance(node, Identifier):
            return None
        name = analysis.replacement_name(node)
        if name is None:
            return None
        parent = path.parent_node
        if isinstance(parent, Property) and parent.shorthand:
            parent.shorthand = False
        return Identifier(name, location=node.location)

    def leave(node: ASTNode, path: NodePath):
        if is_arrow_function(node):
            return lower_arrow(node, analysis.captures_this(node))
        if is_ordinary_function(node) and analysis.is_hoist_target(node):
            insert_binding(node, binding_declaration(analysis.hoisted_names[node]))
        return None

    return visit(program, enter, leave)


def lower_arrow(arrow: ArrowFunctionExpression, captures_this: bool) -> Expression:
    """
    `(params) => body` to `function (params) { ... }`, bound to the
    surrounding `this` when the arrow uses it.
    """
    function = FunctionExpression(
        id=None,
        params=arrow.params,
        body=normalize_body(arrow.body),
        location=arrow.location,
    )
    logger.debug(f"Lowered arrow function at {arrow.location or '<unknown location>'}"
                 f"{' (bound to this)' if captures_this else ''}")
    if not captures_this:
        return function
    return CallExpression(
        callee=MemberExpression(
            object=function,
            property=Identifier(BIND_METHOD_NAME),
            computed=False,
            location=arrow.location,
        ),
        arguments=[ThisExpression()],
        location=arrow.location,
    )
