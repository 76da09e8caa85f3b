"""
Backends: unarrow nodes to JavaScript text (and source maps).
"""

from .javascript import JavaScriptPrinter, PrintResult, print_program
from .source_map import SourceMapBuilder, decode_mappings, encode_vlq, decode_vlq

__all__ = [
    'JavaScriptPrinter',
    'PrintResult',
    'SourceMapBuilder',
    'decode_mappings',
    'decode_vlq',
    'encode_vlq',
    'print_program',
]
