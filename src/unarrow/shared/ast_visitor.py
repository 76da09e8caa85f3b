"""
Boundary-aware AST traversal

This module provides:
1. VisitAction - explicit traversal decision (continue / skip children / stop)
2. NodePath - a node together with the slot it occupies in its parent
3. visit() - pre-order walk with optional post-order `leave` callback and
   in-place replacement

Design:
- Callbacks are plain functions `(node, path) -> decision`; analyzers compose
  them instead of subclassing a visitor base
- A callback may return a replacement node (or call `path.replace`); the
  replacement takes the original's slot, whether that slot is a single field
  or a list element, and is not visited again
- Field order comes from `ASTNode.child_fields()`, so unknown node types are
  walked like any other

Usage:
    def enter(node, path):
        if is_ordinary_function(node):
            return VisitAction.SKIP
        if isinstance(node, ThisExpression):
            found.append(node)
            return VisitAction.STOP

    visit(arrow.body, enter)
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Iterator, Optional, Union

from .nodes import ASTNode


class VisitAction(Enum):
    """Decision returned by a traversal callback."""
    CONTINUE = "continue"
    SKIP = "skip"  # do not descend into this node's children
    STOP = "stop"  # abort the whole traversal


VisitResult = Union[None, VisitAction, ASTNode]
Visitor = Callable[[ASTNode, "NodePath"], VisitResult]


class NodePath:
    """
    A node and its position: parent path, field name and (for list fields)
    index. The root path has no parent.
    """
    __slots__ = ("node", "parent", "field", "index", "replaced")

    def __init__(self, node: ASTNode, parent: Optional[NodePath] = None,
                 field: Optional[str] = None, index: Optional[int] = None):
        self.node = node
        self.parent = parent
        self.field = field
        self.index = index
        self.replaced = False

    @property
    def parent_node(self) -> Optional[ASTNode]:
        return self.parent.node if self.parent is not None else None

    def replace(self, new_node: ASTNode) -> None:
        """Put `new_node` in this path's slot."""
        if self.parent is not None:
            owner = self.parent.node
            if self.index is None:
                owner.set_field(self.field, new_node)
            else:
                owner.get_field(self.field)[self.index] = new_node
        self.node = new_node
        self.replaced = True

    def ancestors(self) -> Iterator[NodePath]:
        """Enclosing paths, innermost first."""
        current = self.parent
        while current is not None:
            yield current
            current = current.parent

    def __repr__(self) -> str:
        slot = self.field if self.index is None else f"{self.field}[{self.index}]"
        return f"NodePath({self.node.type} at {slot})"


def visit(root: ASTNode, enter: Optional[Visitor] = None, leave: Optional[Visitor] = None) -> ASTNode:
    """
    Walk `root` in pre-order calling `enter(node, path)` before a node's
    children and `leave(node, path)` after them.

    Returns the (possibly replaced) root.
    """
    root_path = NodePath(root)
    _walk(root_path, enter, leave)
    return root_path.node


def _apply(decision: VisitResult, path: NodePath) -> Optional[VisitAction]:
    if isinstance(decision, ASTNode):
        path.replace(decision)
        return None
    return decision


def _walk(path: NodePath, enter: Optional[Visitor], leave: Optional[Visitor]) -> bool:
    """Returns True when traversal must stop."""
    node = path.node
    action = None
    if enter is not None:
        action = _apply(enter(node, path), path)
        if action is VisitAction.STOP:
            return True
        if path.replaced:
            return False

    if action is not VisitAction.SKIP:
        for name in node.child_fields():
            value = node.get_field(name)
            if isinstance(value, list):
                index = 0
                while index < len(value):
                    child = value[index]
                    if isinstance(child, ASTNode):
                        if _walk(NodePath(child, path, name, index), enter, leave):
                            return True
                    index += 1
            elif isinstance(value, ASTNode):
                if _walk(NodePath(value, path, name), enter, leave):
                    return True

    if leave is not None:
        action = _apply(leave(node, path), path)
        if action is VisitAction.STOP:
            return True
    return False


def iter_nodes(root: ASTNode, skip: Optional[Callable[[ASTNode], bool]] = None) -> Iterator[ASTNode]:
    """
    Yield `root` and its descendants in pre-order. When `skip(node)` is true
    the node is yielded but its children are not.
    """
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        if skip is not None and skip(node):
            continue
        children = [child for _, _, child in node.iter_children()]
        stack.extend(reversed(children))
