"""
`arguments` hoisting

Arrow functions have no `arguments` of their own: inside an arrow the name
means the arguments object of the nearest enclosing ordinary function. Once
the arrow becomes a `function`, that meaning would change, so the outer
object is captured in a shared binding at the top of the enclosing function
and the references are renamed:

    function f() {                      function f() {
      return () => arguments[0];   =>     var $__arguments = arguments;
    }                                     return function () { return $__arguments[0]; };
                                        }

One binding per target function, shared by all arrows that resolve to it.

A variable that is itself named `arguments` (an arrow parameter, a catch
parameter, a `let`) would be hidden the same way by the lowered function's
own arguments object. Such bindings are renamed instead:

    (arguments) => () => arguments     function ($__arguments) { return function () { return $__arguments; }; }
"""

import logging
from typing import List, NamedTuple, Optional, Set, Tuple

from ..shared.ast_visitor import NodePath, VisitAction, visit, iter_nodes
from ..shared.nodes import (
    ASTNode, ArrowFunctionExpression, ExpressionStatement, FunctionNode,
    Identifier, VariableDeclaration, VariableDeclarator, is_ordinary_function,
)
from ..shared.scope import (
    Binding, BindingType, Scope, ScopeKind, ScopeTable, is_reference,
)
from ..utils.config import ARGUMENTS_NAME, HOISTED_ARGUMENTS_BASE_NAME
from .results import NodeMap

logger = logging.getLogger("unarrow.analysis.arguments_hoister")


class ArgumentsResolution(NamedTuple):
    """What an `arguments` reference means in the untouched tree."""
    scope: Scope
    # None when `scope` provides its implicit arguments object
    binding: Optional[Binding]
    # innermost arrow between the reference and `scope`
    arrow: Optional[ArrowFunctionExpression]

    @property
    def reaches_function(self) -> bool:
        """The value comes from an ordinary function (or the program) and must be hoisted past arrows."""
        if self.scope.is_transparent:
            return False
        if self.scope.kind is ScopeKind.PROGRAM or self.binding is None:
            return True
        return self.binding.binding_type is not BindingType.LEXICAL


def resolve_arguments(reference: Identifier, scopes: ScopeTable) -> ArgumentsResolution:
    """
    Walk the scope chain of one `arguments` reference. An explicit
    declaration wins; otherwise the nearest function or program scope
    provides it. A named function expression's own name never does: its
    arguments object is closer.
    """
    arrow: Optional[ArrowFunctionExpression] = None
    for scope in scopes.reference_scope(reference).chain():
        binding = scope.binding(ARGUMENTS_NAME)
        if binding is not None and binding.binding_type is not BindingType.FUNCTION_NAME:
            return ArgumentsResolution(scope, binding, arrow)
        if not scope.is_transparent:
            return ArgumentsResolution(scope, None, arrow)
        if arrow is None and scope.kind is ScopeKind.ARROW:
            arrow = scope.node
    raise RuntimeError("scope chain has no program scope")


def collect_arguments_references(arrow: ArrowFunctionExpression, scopes: ScopeTable) -> List[Identifier]:
    """
    `arguments` references inside `arrow` that resolve past it to an
    ordinary function or the program.

    Ordinary functions are not entered. Each reference is resolved on its
    own, so a shadowing declaration only hides the references in its scope.
    """
    references: List[Identifier] = []

    def enter(node: ASTNode, path: NodePath):
        if node is not arrow and is_ordinary_function(node):
            return VisitAction.SKIP
        if isinstance(node, Identifier) and node.name == ARGUMENTS_NAME and is_reference(path):
            if resolve_arguments(node, scopes).reaches_function:
                references.append(node)
        return None

    visit(arrow, enter)
    return references


def hidden_arguments_bindings(scopes: ScopeTable) -> List[Tuple[Scope, List[Identifier]]]:
    """
    Variables named `arguments` that a lowered arrow would no longer see.

    A binding declared by an arrow or a block, or by `let`/`const` in a
    function, is hidden when one of its references sits inside an arrow that
    does not declare it. A `var arguments` in an arrow body is always listed:
    in a `function` it would re-declare the arguments object instead of
    starting out undefined. Each entry holds the declaring scope and every
    identifier naming the binding (declarations first, then references).
    """
    groups: NodeMap[Tuple[Scope, Binding, List[Identifier]]] = NodeMap()
    hidden: NodeMap[bool] = NodeMap()

    for reference in scopes.references(ARGUMENTS_NAME):
        resolution = resolve_arguments(reference, scopes)
        if resolution.binding is None or resolution.reaches_function:
            continue
        scope = resolution.scope
        if scope.node not in groups:
            groups[scope.node] = (scope, resolution.binding, [])
        groups[scope.node][2].append(reference)
        if resolution.arrow is not None or _redeclares_when_lowered(scope, resolution.binding):
            hidden[scope.node] = True

    result = []
    for node, (scope, binding, references) in groups.items():
        if node in hidden:
            result.append((scope, binding.identifiers + references))
    return result


def _redeclares_when_lowered(scope: Scope, binding: Binding) -> bool:
    return scope.kind is ScopeKind.ARROW and binding.binding_type is BindingType.VARIABLE


def hoist_target(arrow: ArrowFunctionExpression, scopes: ScopeTable) -> Optional[FunctionNode]:
    """Nearest enclosing ordinary function of `arrow`; None at program level."""
    owner = scopes.scope_of(arrow).owner()
    if owner.kind is ScopeKind.PROGRAM:
        return None
    return owner.node


class HoistedBindingNamer:
    """
    Picks the generated name for each target node (a function receiving the
    shared binding, or the scope of a renamed `arguments` variable): the base
    name, then base + 1, base + 2... until the name appears nowhere in the
    target (neither bound nor referenced). Depends only on the target's own
    subtree.
    """

    def __init__(self, base_name: str = HOISTED_ARGUMENTS_BASE_NAME):
        self.base_name = base_name
        self._names: NodeMap[str] = NodeMap()

    def name_for(self, target: ASTNode) -> str:
        if target in self._names:
            return self._names[target]
        taken = _identifier_names(target)
        candidate, suffix = self.base_name, 0
        while candidate in taken:
            suffix += 1
            candidate = f"{self.base_name}{suffix}"
        self._names[target] = candidate
        logger.debug(f"Generated arguments binding name for {_describe(target)}: {candidate}")
        return candidate


def _identifier_names(root: ASTNode) -> Set[str]:
    return {node.name for node in iter_nodes(root) if isinstance(node, Identifier)}


def _describe(node: ASTNode) -> str:
    name = node.id.name if getattr(node, "id", None) is not None else "<anonymous>"
    return f"{node.type} {name} at {node.location}" if node.location else f"{node.type} {name}"


def binding_declaration(name: str) -> VariableDeclaration:
    """`var <name> = arguments;`"""
    return VariableDeclaration(
        declarations=[VariableDeclarator(id=Identifier(name), init=Identifier(ARGUMENTS_NAME))],
        kind="var",
    )


def insert_binding(function: FunctionNode, declaration: VariableDeclaration) -> None:
    """Insert `declaration` at the top of the function body, after its directive prologue."""
    statements = function.body.body
    index = 0
    while index < len(statements):
        statement = statements[index]
        if not (isinstance(statement, ExpressionStatement) and statement.directive is not None):
            break
        index += 1
    statements.insert(index, declaration)
