"""
Transform passes.
"""

from .base import BasePass, PassManager, TransformContext
from .scope_analysis import ScopeAnalysisPass, build_scope_table
from .arrow_lowering import ArrowFunctionLoweringPass, analyze_arrows, lower_arrow, rewrite
from .validation import ArrowFreeValidationPass
from .pipeline import LOWERING_PASSES, build_pass_manager, transform

__all__ = [
    'ArrowFreeValidationPass',
    'ArrowFunctionLoweringPass',
    'BasePass',
    'LOWERING_PASSES',
    'PassManager',
    'ScopeAnalysisPass',
    'TransformContext',
    'analyze_arrows',
    'build_pass_manager',
    'build_scope_table',
    'lower_arrow',
    'rewrite',
    'transform',
]
