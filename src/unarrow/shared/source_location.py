"""
Source Location (Span)

ESTree Pattern: `node.loc` ({start: {line, column}, end: {line, column}})
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLocation:
    """
    Source location of a node or diagnostic.

    - File, 1-based line, 1-based column (+ optional byte offsets and end position)
    - Immutable (frozen) so locations can be shared between original and rewritten nodes
    """
    file: str
    line: int
    column: int
    start: int = 0
    end: int = 0
    end_line: int = 0
    end_column: int = 0

    def __str__(self) -> str:
        """Format as file:line:column"""
        return f"{self.file}:{self.line}:{self.column}"
