from __future__ import annotations
from typing import Iterable

def to_text(lines: Iterable[str]) -> str:
    """Une las líneas con '\\n', incluido el salto final."""
    return "".join(line + "\n" for line in lines)

def write_asm(lines: Iterable[str], path: str) -> None:
    text = to_text(lines)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
