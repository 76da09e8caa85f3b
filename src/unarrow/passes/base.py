"""
Base Pass System

ESTree Pattern: a transform is a sequence of passes over one Program tree.
Analysis passes record results on the context; rewriting passes read them.
"""

import logging
import sys
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type

from ..shared.errors import ErrorReporter
from ..shared.nodes import Program

logger = logging.getLogger("unarrow.passes.base")


class TransformContext:
    """
    Per-call transform state - single source of truth for one transform.

    - Analysis results stored here (not in passes), keyed by the pass class
    - Diagnostics collected in `reporter`
    - `strict`: unresolvable `arguments` in an arrow is an error, not a warning
    """

    def __init__(self, strict: bool = False, source_files: Optional[Dict[str, str]] = None):
        self.strict = strict
        self.source_files: Dict[str, str] = dict(source_files or {})
        self.reporter: ErrorReporter = ErrorReporter(self.source_files)
        self._analysis_results: Dict[Type['BasePass'], Any] = {}

    def get_analysis(self, pass_class: Type['BasePass']) -> Any:
        """Get analysis results from a pass"""
        if pass_class not in self._analysis_results:
            raise RuntimeError(f"Analysis {pass_class.__name__} not available")
        return self._analysis_results[pass_class]

    def set_analysis(self, pass_class: Type['BasePass'], results: Any) -> None:
        """Store analysis results"""
        self._analysis_results[pass_class] = results

    def has_analysis(self, pass_class: Type['BasePass']) -> bool:
        return pass_class in self._analysis_results


class BasePass(ABC):
    """
    Base class for all passes.

    - Explicit dependencies via `requires`
    - Pass results stored in TransformContext (not in pass)
    - Passes return the (possibly rewritten) Program
    """
    requires: List[Type['BasePass']] = []  # Dependencies (empty by default)

    @abstractmethod
    def run(self, program: Program, ctx: TransformContext) -> Program:
        """
        Run pass on a Program.

        Returns: the Program to hand to the next pass
        """
        raise NotImplementedError


class PassManager:
    """
    Pass manager with dependency resolution.

    - Automatic dependency resolution (topological sort)
    - Passes run in dependency order
    - Single TransformContext shared across all passes
    """

    def __init__(self):
        self.passes: List[Type[BasePass]] = []
        self._dependency_graph: Dict[Type[BasePass], set] = {}

    def register_pass(self, pass_class: Type[BasePass]) -> None:
        """Register a pass"""
        self.passes.append(pass_class)
        self._dependency_graph[pass_class] = set(pass_class.requires)

    def run_all(self, program: Program, ctx: TransformContext, dump_ast: bool = False) -> Program:
        """
        Run all passes in dependency order.

        Args:
            program: Input tree
            ctx: Transform context
            dump_ast: If True, dump the tree as an S-expression to stderr after each pass
        """
        for pass_class in self._topological_sort():
            pass_name = pass_class.__name__
            logger.debug(f"Running {pass_name}")
            program = pass_class().run(program, ctx)

            if dump_ast:
                from ..shared.serialization import serialize_ast
                print(f"\n{'=' * 80}", file=sys.stderr)
                print(f"After {pass_name}:", file=sys.stderr)
                print(f"{'=' * 80}", file=sys.stderr)
                print(serialize_ast(program), file=sys.stderr)

        return program

    def _topological_sort(self) -> List[Type[BasePass]]:
        """Topological sort of passes by dependencies"""
        for pass_class, deps in self._dependency_graph.items():
            missing = [d.__name__ for d in deps if d not in self._dependency_graph]
            if missing:
                raise RuntimeError(f"{pass_class.__name__} requires unregistered pass(es): {', '.join(missing)}")

        in_degree = {p: len(self._dependency_graph[p]) for p in self.passes}
        queue = [p for p, degree in in_degree.items() if degree == 0]
        result = []

        while queue:
            pass_class = queue.pop(0)
            result.append(pass_class)

            for other_pass in self.passes:
                if pass_class in self._dependency_graph[other_pass]:
                    in_degree[other_pass] -= 1
                    if in_degree[other_pass] == 0:
                        queue.append(other_pass)

        if len(result) != len(self.passes):
            raise RuntimeError("Circular dependency detected in passes")

        return result
