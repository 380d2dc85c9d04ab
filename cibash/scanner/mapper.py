"""Position mapper — region-relative token offsets to document ranges."""

from __future__ import annotations

from collections.abc import Sequence

from cibash.models import MappedRange


def _line_containing(offset: int, lines: list[str], inclusive_newline: bool = False) -> int | None:
    """Return the index of the line *offset* falls on, or ``None``."""
    line_start = 0
    for i, line in enumerate(lines):
        line_end = line_start + len(line)
        if inclusive_newline:
            line_end += 1
        if line_start <= offset <= line_end:
            return i
        line_start += len(line) + 1
    return None


def map_token(
    offset: int,
    length: int,
    content: str,
    line_offsets: Sequence[int],
) -> MappedRange | None:
    """Map a token at *offset* in *content* to a document range.

    Returns ``None`` when the token sits on a line that has no recorded
    offset.  A token running onto a later line is cut at the end of the
    line it starts on.
    """
    lines = content.split("\n")
    line_index = _line_containing(offset, lines) or 0
    if line_index >= len(line_offsets):
        return None

    column = offset - sum(len(line) + 1 for line in lines[:line_index])
    start = line_offsets[line_index] + column
    end = start + length

    end_index = _line_containing(offset + length, lines, inclusive_newline=True)
    if end_index is None:
        end_index = line_index
    if line_index < end_index < len(line_offsets):
        end = line_offsets[line_index] + len(lines[line_index])

    return MappedRange(start, end)
