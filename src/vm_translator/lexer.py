from __future__ import annotations
import re
from typing import Iterator, List, Tuple

COMMENT_SPLIT_RE = re.compile(r"//")

def strip_comment(line: str) -> str:
    """Remove a '//' comment and surrounding whitespace"""
    m = COMMENT_SPLIT_RE.split(line, maxsplit=1)
    if not m:
        return line.strip()
    return m[0].strip()

def split_words(line: str) -> List[str]:
    """Split a trimmed line on any run of whitespace."""
    return line.split()

def source_lines(text: str) -> Iterator[Tuple[int, str]]:
    """Yield (lineno, core) for every line that still has code after stripping."""
    for lineno, raw in enumerate(text.splitlines(), start=1):
        core = strip_comment(raw)
        if core:
            yield lineno, core
