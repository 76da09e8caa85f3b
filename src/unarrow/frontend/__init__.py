"""
Frontend: JavaScript source text to unarrow nodes.
"""

from .parser import Parser, ParseError

__all__ = ['Parser', 'ParseError']
