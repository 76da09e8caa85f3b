"""
Scope resolution: lexical scope chain.

One Scope per Program, function, catch clause and nested block (a block that
is not a function or catch body, and `for` heads). Each scope maps a name to
the Binding that declared it:
- `var` and function declarations go to the nearest function or program scope
- `let`/`const` go to the innermost scope
- a catch parameter belongs to its catch clause

Arrow and block scopes are transparent for `this` and `arguments`: `owner()`
skips them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from .ast_visitor import NodePath
from .nodes import (
    ASTNode, CatchClause, Identifier, MemberExpression, Property,
    VariableDeclarator, is_function,
)


class ScopeKind(Enum):
    PROGRAM = "program"
    FUNCTION = "function"
    ARROW = "arrow"
    BLOCK = "block"


class BindingType(Enum):
    PARAMETER = "parameter"
    VARIABLE = "variable"
    LEXICAL = "lexical"  # let / const
    FUNCTION = "function"
    CATCH_PARAMETER = "catch_parameter"
    FUNCTION_NAME = "function_name"  # a named function expression's own name


@dataclass
class Binding:
    """One name binding (value in scope dict)."""
    name: str
    binding_type: BindingType
    node: ASTNode
    # every declaring identifier, re-declarations included
    identifiers: List[Identifier] = field(default_factory=list)


def is_reference(path: NodePath) -> bool:
    """
    True when the identifier at `path` reads or writes a variable, as opposed
    to naming a property, a parameter, a declared variable or a function.
    """
    parent = path.parent_node
    if parent is None:
        return True
    if isinstance(parent, MemberExpression) and path.field == "property":
        return parent.computed
    if isinstance(parent, Property) and path.field == "key":
        return parent.computed
    if is_function(parent) and path.field in ("id", "params"):
        return False
    if isinstance(parent, VariableDeclarator) and path.field == "id":
        return False
    if isinstance(parent, CatchClause) and path.field == "param":
        return False
    return True


@dataclass(eq=False)
class Scope:
    """
    One scope level. Single map: name → Binding. define() keeps the first
    declaration (later `var` re-declarations of the same name are the same
    variable); lookup() walks inner → outer.
    """

    parent: Optional[Scope]
    kind: ScopeKind
    node: ASTNode
    _bindings: Dict[str, Binding] = field(default_factory=dict)
    children: List[Scope] = field(default_factory=list)

    @property
    def is_transparent(self) -> bool:
        """Arrow and block scopes do not own `this` or `arguments`."""
        return self.kind is ScopeKind.ARROW or self.kind is ScopeKind.BLOCK

    def define(self, name: str, binding_type: BindingType, node: ASTNode,
               identifier: Optional[Identifier] = None) -> None:
        if name not in self._bindings:
            self._bindings[name] = Binding(name, binding_type, node)
        if identifier is not None:
            self._bindings[name].identifiers.append(identifier)

    def defined_in_this_scope(self, name: str) -> bool:
        return name in self._bindings

    def binding(self, name: str) -> Optional[Binding]:
        """Binding declared in this scope only."""
        return self._bindings.get(name)

    def lookup(self, name: str) -> Optional[Binding]:
        """Binding for name along the scope chain, innermost first."""
        scope: Optional[Scope] = self
        while scope is not None:
            if name in scope._bindings:
                return scope._bindings[name]
            scope = scope.parent
        return None

    def names(self) -> List[str]:
        return list(self._bindings)

    def chain(self) -> Iterator[Scope]:
        """This scope and its ancestors, innermost first."""
        scope: Optional[Scope] = self
        while scope is not None:
            yield scope
            scope = scope.parent

    def owner(self) -> Scope:
        """Nearest function or program scope: the one whose `this`/`arguments` this scope sees."""
        for scope in self.chain():
            if not scope.is_transparent:
                return scope
        raise RuntimeError("scope chain has no program scope")

    def variable_scope(self) -> Scope:
        """Nearest non-block scope: where `var` and function declarations live."""
        for scope in self.chain():
            if scope.kind is not ScopeKind.BLOCK:
                return scope
        raise RuntimeError("scope chain has no program scope")

    def __repr__(self) -> str:
        return f"Scope({self.kind.value}, {self.node.type}, names={self.names()})"


class ScopeTable:
    """
    Scopes of one tree, keyed by the identity of the node that opens them,
    plus the innermost scope of every identifier reference.
    """

    def __init__(self, root: Scope):
        self.root = root
        self._by_node: Dict[int, Scope] = {}
        self._references: Dict[int, Tuple[Identifier, Scope]] = {}
        self._register(root)

    def _register(self, scope: Scope) -> None:
        self._by_node[id(scope.node)] = scope

    def add(self, scope: Scope) -> None:
        if scope.parent is not None:
            scope.parent.children.append(scope)
        self._register(scope)

    def add_reference(self, identifier: Identifier, scope: Scope) -> None:
        self._references[id(identifier)] = (identifier, scope)

    def scope_of(self, node: ASTNode) -> Scope:
        """Scope opened by a Program, function, catch clause or block node."""
        try:
            return self._by_node[id(node)]
        except KeyError:
            raise KeyError(f"no scope recorded for {node.type} node") from None

    def reference_scope(self, identifier: Identifier) -> Scope:
        """Innermost scope in which `identifier` is read or written."""
        try:
            return self._references[id(identifier)][1]
        except KeyError:
            raise KeyError(f"no reference recorded for identifier `{identifier.name}`") from None

    def references(self, name: str) -> Iterator[Identifier]:
        """References to `name`, in source order."""
        return (identifier for identifier, _ in self._references.values() if identifier.name == name)

    def __contains__(self, node: ASTNode) -> bool:
        return id(node) in self._by_node

    def __len__(self) -> int:
        return len(self._by_node)
