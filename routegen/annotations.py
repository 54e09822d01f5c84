"""Split docblock comments into annotation lines."""

from __future__ import annotations

from typing import List, Optional

COMMENT_OPEN = "/**"
COMMENT_CLOSE = "*/"


def _strip_markers(line: str) -> str:
    """Remove docblock delimiters and the leading '*' gutter from one line."""
    line = line.strip()
    if line.startswith(COMMENT_OPEN):
        line = line[len(COMMENT_OPEN):]
    if line.endswith(COMMENT_CLOSE):
        line = line[: -len(COMMENT_CLOSE)]
    line = line.strip()
    if line.startswith("*"):
        line = line[1:]
    return line.strip()


def lex_comment(comment: Optional[str]) -> List[str]:
    """Return the trimmed, non-empty lines of a docblock.

    Absent or empty comments yield an empty list.
    """
    if not comment:
        return []
    lines: List[str] = []
    for raw in comment.splitlines():
        line = _strip_markers(raw)
        if line:
            lines.append(line)
    return lines
