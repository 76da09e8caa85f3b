"""
Arrow function analyses: lexical `this` capture, `arguments` hoisting and
concise-body normalization. Independent functions composed by
ArrowFunctionLoweringPass.
"""

from .arguments_hoister import (
    ArgumentsResolution,
    HoistedBindingNamer,
    binding_declaration,
    collect_arguments_references,
    hidden_arguments_bindings,
    hoist_target,
    insert_binding,
    is_reference,
    resolve_arguments,
)
from .body_normalizer import normalize_body
from .results import ArrowLoweringAnalysis, NodeMap
from .this_capture import has_own_this_capture

__all__ = [
    'ArgumentsResolution',
    'ArrowLoweringAnalysis',
    'HoistedBindingNamer',
    'NodeMap',
    'binding_declaration',
    'collect_arguments_references',
    'has_own_this_capture',
    'hidden_arguments_bindings',
    'hoist_target',
    'insert_binding',
    'is_reference',
    'normalize_body',
    'resolve_arguments',
]
