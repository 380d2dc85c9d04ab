"""Region construction — decoded scalar text plus document line offsets.

A scalar's ``value`` is the *decoded* string: indentation, quoting and
escapes are gone.  Painting needs offsets into the raw document, so each
region records where every decoded line starts in the source.
"""

from __future__ import annotations

import yaml

from cibash.document import BLOCK_STYLES, QUOTED_STYLES, is_scalar, is_sequence
from cibash.models import BashRegion

# How far past the cursor a decoded line may be found before we give up
# and assume it starts at the cursor.
LOOKAHEAD = 100


def _skip_line(text: str, pos: int) -> int:
    """Return the offset just past the next newline at or after *pos*."""
    newline = text.find("\n", pos)
    if newline == -1:
        return len(text) + 1
    return newline + 1


def _locate_lines(lines: list[str], text: str, cursor: int) -> list[int]:
    """Find the source offset of each decoded line, scanning forward."""
    offsets: list[int] = []
    for line in lines:
        if line:
            idx = text.find(line, cursor)
            if idx != -1 and idx < cursor + LOOKAHEAD:
                offsets.append(idx)
                cursor = _skip_line(text, idx + len(line))
                continue
        offsets.append(cursor)
        cursor = _skip_line(text, cursor)
    return offsets


def _value_start(node: yaml.Node, text: str) -> int:
    """Offset where the scalar itself begins, past any ``&anchor``/``!tag``."""
    pos = node.start_mark.index
    end = node.end_mark.index if node.end_mark is not None else len(text)
    while pos < end and text[pos] in "&!":
        while pos < end and not text[pos].isspace():
            pos += 1
        while pos < end and text[pos].isspace():
            pos += 1
    return pos


def _locate_inline(lines: list[str], text: str, cursor: int, end: int, fallback: int) -> list[int]:
    """Find decoded lines inside the raw ``[cursor, end)`` span of a flow scalar.

    Escaped (``\\n``) or folded line breaks keep every decoded line within
    the scalar's own source span.  A line whose raw form differs from its
    decoded form is pinned to *fallback*.
    """
    offsets: list[int] = []
    for line in lines:
        if not line:
            offsets.append(cursor)
            continue
        idx = text.find(line, cursor, end)
        if idx == -1:
            offsets.append(fallback)
            continue
        offsets.append(idx)
        cursor = idx + len(line)
    return offsets


def region_from_scalar(node: yaml.Node, text: str) -> BashRegion | None:
    """Build a :class:`BashRegion` from a scalar node of *text*.

    Returns ``None`` for blank values and nodes without source marks.
    """
    if not is_scalar(node):
        return None
    value = node.value
    if not isinstance(value, str) or not value.strip() or node.start_mark is None:
        return None

    start = _value_start(node, text)
    lines = value.split("\n")

    if node.style in BLOCK_STYLES:
        # Content begins on the line after the | or > indicator.
        offsets = _locate_lines(lines, text, _skip_line(text, start))
    else:
        first = start + 1 if node.style in QUOTED_STYLES else start
        offsets = [first]
        if len(lines) > 1:
            end = node.end_mark.index if node.end_mark is not None else len(text)
            offsets.extend(
                _locate_inline(lines[1:], text, first + len(lines[0]), end, first)
            )

    return BashRegion(content=value, line_offsets=tuple(offsets))


def regions_from_value(node: yaml.Node | None, text: str) -> list[BashRegion]:
    """Regions for a script value: one scalar, or a sequence of scalars."""
    regions: list[BashRegion] = []
    if is_sequence(node):
        for item in node.value:
            region = region_from_scalar(item, text)
            if region is not None:
                regions.append(region)
    elif is_scalar(node):
        region = region_from_scalar(node, text)
        if region is not None:
            regions.append(region)
    return regions
