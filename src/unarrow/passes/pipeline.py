"""
The arrow lowering pipeline and the `transform` entry point.
"""

from typing import List, Optional, Type

from ..shared.nodes import Program
from .arrow_lowering import ArrowFunctionLoweringPass
from .base import BasePass, PassManager, TransformContext
from .scope_analysis import ScopeAnalysisPass
from .validation import ArrowFreeValidationPass

LOWERING_PASSES: List[Type[BasePass]] = [
    ScopeAnalysisPass,
    ArrowFunctionLoweringPass,
    ArrowFreeValidationPass,
]


def build_pass_manager() -> PassManager:
    manager = PassManager()
    for pass_class in LOWERING_PASSES:
        manager.register_pass(pass_class)
    return manager


def transform(program: Program, ctx: Optional[TransformContext] = None, dump_ast: bool = False) -> Program:
    """
    Rewrite every arrow function in `program` into an ordinary function.

    Mutates and returns the tree. Trees without arrow functions come back
    unchanged, so applying it twice equals applying it once.
    """
    ctx = ctx if ctx is not None else TransformContext()
    return build_pass_manager().run_all(program, ctx, dump_ast=dump_ast)
