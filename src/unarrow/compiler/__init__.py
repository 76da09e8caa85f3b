"""
Compiler driver: text in, text (and source map) out.
"""

from .driver import CompilerDriver, CompilationResult

__all__ = ['CompilerDriver', 'CompilationResult']
