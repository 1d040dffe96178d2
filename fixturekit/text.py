"""Small string helpers shared by the fixture and minicore parsers."""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

_LINE_PATTERN = re.compile(r"[^\n]*\n|[^\n]+")


def trim_indent(text: str) -> str:
    """Drop a single leading newline and the common indentation of all lines.

    Blank lines do not count towards the common indentation. A line no longer
    than that indentation loses its leading spaces; any other line loses
    exactly the indentation, so whitespace past it is kept.
    """
    if text.startswith("\n"):
        text = text[1:]
    indent = min(
        (len(line) - len(line.lstrip()) for line in text.splitlines() if line.strip()),
        default=0,
    )
    return "".join(
        line.lstrip(" ") if len(line) <= indent else line[indent:]
        for line in lines_with_ends(text)
    )


def lines_with_ends(text: str) -> List[str]:
    """Split on ``\\n`` only, keeping the terminator attached to each line."""
    return _LINE_PATTERN.findall(text)


def split_once(text: str, separator: str) -> Optional[Tuple[str, str]]:
    head, found, tail = text.partition(separator)
    if not found:
        return None
    return head, tail


__all__ = ["lines_with_ends", "split_once", "trim_indent"]
