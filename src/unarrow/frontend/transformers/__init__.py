"""
unarrow AST Transformers
========================

Specialized transformers for different AST node types.
"""

from .base import UnarrowTransformer
from .literals import LiteralParser
from .functions import FunctionParser

__all__ = [
    'UnarrowTransformer',
    'LiteralParser',
    'FunctionParser',
]
