"""
unarrow utilities package
"""

from .io_utils import read_source_file, read_stream, write_output_file

__all__ = ["read_source_file", "read_stream", "write_output_file"]
