"""
Source Map v3

Builds the `mappings` string (base64 VLQ, one `;`-separated group per
generated line, `,`-separated segments) for code produced by the printer.
All positions are 0-based here; SourceLocation lines and columns are 1-based
and are converted by the caller.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..utils.config import BASE64_VLQ_ALPHABET, SOURCE_MAP_VERSION

_VLQ_SHIFT = 5
_VLQ_CONTINUATION = 1 << _VLQ_SHIFT
_VLQ_MASK = _VLQ_CONTINUATION - 1
_DECODE_TABLE = {ch: index for index, ch in enumerate(BASE64_VLQ_ALPHABET)}


def encode_vlq(value: int) -> str:
    """One signed integer as base64 VLQ (sign in the lowest bit)."""
    vlq = ((-value) << 1) | 1 if value < 0 else value << 1
    out = []
    while True:
        digit = vlq & _VLQ_MASK
        vlq >>= _VLQ_SHIFT
        if vlq:
            digit |= _VLQ_CONTINUATION
        out.append(BASE64_VLQ_ALPHABET[digit])
        if not vlq:
            return "".join(out)


def decode_vlq(text: str) -> List[int]:
    """All integers of one VLQ segment."""
    values: List[int] = []
    value = shift = 0
    for ch in text:
        digit = _DECODE_TABLE[ch]
        value += (digit & _VLQ_MASK) << shift
        if digit & _VLQ_CONTINUATION:
            shift += _VLQ_SHIFT
            continue
        values.append(-(value >> 1) if value & 1 else value >> 1)
        value = shift = 0
    return values


@dataclass(frozen=True)
class Mapping:
    generated_line: int
    generated_column: int
    source_line: int
    source_column: int
    name: Optional[str] = None


class SourceMapBuilder:
    """Accumulates mappings for a single source file and serializes them."""

    def __init__(self, file: str, source: str):
        self.file = file
        self.source = source
        self._mappings: List[Mapping] = []
        self._names: List[str] = []
        self._name_index: Dict[str, int] = {}

    def add_mapping(self, generated_line: int, generated_column: int,
                    source_line: int, source_column: int, name: Optional[str] = None) -> None:
        mapping = Mapping(generated_line, generated_column, source_line, source_column, name)
        if self._mappings:
            last = self._mappings[-1]
            if (last.generated_line, last.generated_column) == (generated_line, generated_column):
                # Outermost node at a position wins, but an identifier at the
                # same original position contributes its name
                if last.name is None and name is not None \
                        and (last.source_line, last.source_column) == (source_line, source_column):
                    self._register_name(name)
                    self._mappings[-1] = mapping
                return
        if name is not None:
            self._register_name(name)
        self._mappings.append(mapping)

    def _register_name(self, name: str) -> None:
        if name not in self._name_index:
            self._name_index[name] = len(self._names)
            self._names.append(name)

    @property
    def mappings(self) -> List[Mapping]:
        return list(self._mappings)

    def encode_mappings(self) -> str:
        lines: List[str] = []
        segments: List[str] = []
        current_line = 0
        previous_column = 0
        previous_source = (0, 0)  # line, column
        previous_name = 0

        for mapping in sorted(self._mappings, key=lambda m: (m.generated_line, m.generated_column)):
            while current_line < mapping.generated_line:
                lines.append(",".join(segments))
                segments = []
                current_line += 1
                previous_column = 0
            fields = [
                mapping.generated_column - previous_column,
                0,  # always the single source
                mapping.source_line - previous_source[0],
                mapping.source_column - previous_source[1],
            ]
            previous_column = mapping.generated_column
            previous_source = (mapping.source_line, mapping.source_column)
            if mapping.name is not None:
                index = self._name_index[mapping.name]
                fields.append(index - previous_name)
                previous_name = index
            segments.append("".join(encode_vlq(value) for value in fields))
        lines.append(",".join(segments))
        return ";".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": SOURCE_MAP_VERSION,
            "file": self.file,
            "sources": [self.source],
            "names": list(self._names),
            "mappings": self.encode_mappings(),
        }


def decode_mappings(mappings: str) -> List[Tuple[int, int, int, int, int, Optional[int]]]:
    """
    Decode a `mappings` string to absolute
    (generated_line, generated_column, source_index, source_line, source_column, name_index) tuples.
    """
    result = []
    source_index = source_line = source_column = name_index = 0
    for generated_line, group in enumerate(mappings.split(";")):
        generated_column = 0
        for segment in filter(None, group.split(",")):
            values = decode_vlq(segment)
            generated_column += values[0]
            if len(values) < 4:
                continue
            source_index += values[1]
            source_line += values[2]
            source_column += values[3]
            name: Optional[int] = None
            if len(values) > 4:
                name_index += values[4]
                name = name_index
            result.append((generated_line, generated_column, source_index, source_line, source_column, name))
    return result
