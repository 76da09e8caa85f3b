"""
Arrow lowering analysis results

Facts about the pre-rewrite tree, computed once per transform call and read
by the rewrite traversal. Keyed by node identity.
"""

from dataclasses import dataclass, field
from typing import Dict, Generic, Iterator, List, Optional, Tuple, TypeVar

from ..shared.nodes import ASTNode, ArrowFunctionExpression, FunctionNode, Identifier

V = TypeVar('V')


class NodeMap(Generic[V]):
    """
    Mapping from node identity to a value.

    Keeps a reference to every key node so an `id()` can never be recycled by
    another object while the map is alive.
    """

    def __init__(self) -> None:
        self._entries: Dict[int, Tuple[ASTNode, V]] = {}

    def __setitem__(self, node: ASTNode, value: V) -> None:
        self._entries[id(node)] = (node, value)

    def __getitem__(self, node: ASTNode) -> V:
        return self._entries[id(node)][1]

    def __contains__(self, node: object) -> bool:
        return id(node) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, node: ASTNode, default: Optional[V] = None) -> Optional[V]:
        entry = self._entries.get(id(node))
        return entry[1] if entry is not None else default

    def keys(self) -> Iterator[ASTNode]:
        return (node for node, _ in self._entries.values())

    def items(self) -> Iterator[Tuple[ASTNode, V]]:
        return iter(list(self._entries.values()))


@dataclass
class ArrowLoweringAnalysis:
    """Per-call facts for ArrowFunctionLoweringPass."""
    # arrow -> captures `this` (itself or through nested arrows)
    this_captures: NodeMap[bool] = field(default_factory=NodeMap)
    # `arguments` identifier -> ordinary function whose arguments object it means
    argument_targets: NodeMap[FunctionNode] = field(default_factory=NodeMap)
    # hoist target -> generated binding name
    hoisted_names: NodeMap[str] = field(default_factory=NodeMap)
    # identifier of a variable named `arguments` that lowering would hide -> new name
    renamed_arguments: NodeMap[str] = field(default_factory=NodeMap)
    # `arguments` references with no enclosing ordinary function (left untouched)
    unresolved_arguments: List[Tuple[ArrowFunctionExpression, Identifier]] = field(default_factory=list)

    def captures_this(self, arrow: ArrowFunctionExpression) -> bool:
        return bool(self.this_captures.get(arrow, False))

    def is_hoist_target(self, node: ASTNode) -> bool:
        return node in self.hoisted_names

    def replacement_name(self, identifier: Identifier) -> Optional[str]:
        """New name for an `arguments` identifier, or None when it stays."""
        if identifier in self.argument_targets:
            return self.hoisted_names[self.argument_targets[identifier]]
        return self.renamed_arguments.get(identifier)
