"""
Centralized file I/O utilities.

- Single place for encoding handling
- Use Path.read_text() consistently (no raw open/read)
"""

import sys
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .config import DEFAULT_FILE_ENCODING


def read_source_file(path: Union[Path, str]) -> str:
    """Read source file with standard encoding."""
    p = Path(path) if not isinstance(path, Path) else path
    return p.read_text(encoding=DEFAULT_FILE_ENCODING)


def read_stream(stream: Optional[BinaryIO] = None) -> str:
    """Buffer a byte stream to EOF and decode it (stdin by default)."""
    stream = stream if stream is not None else sys.stdin.buffer
    chunks = []
    while True:
        chunk = stream.read(65536)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks).decode(DEFAULT_FILE_ENCODING)


def write_output_file(path: Union[Path, str], text: str) -> None:
    """Write generated text with standard encoding, creating parent directories."""
    p = Path(path) if not isinstance(path, Path) else path
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding=DEFAULT_FILE_ENCODING)
