"""Report rendering — painted document, status summary and JSON."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import cibash
from cibash.highlight import STYLES
from cibash.models import HighlightResult, MappedRange, TokenType

_RESET = "\033[0m"


def _ansi(hex_color: str) -> str:
    """24-bit foreground escape for a ``#RRGGBB`` color."""
    value = hex_color.lstrip("#")
    r, g, b = (int(value[i : i + 2], 16) for i in (0, 2, 4))
    return f"\033[38;2;{r};{g};{b}m"


# ---------------------------------------------------------------------------
# Painted document
# ---------------------------------------------------------------------------


def _ordered_spans(
    result: HighlightResult,
    styles: Mapping[TokenType, str],
) -> list[tuple[MappedRange, str]]:
    spans = [
        (rng, styles[kind])
        for kind, ranges in result.ranges.items()
        if kind in styles
        for rng in ranges
    ]
    spans.sort(key=lambda s: (s[0].start, s[0].end))
    return spans


def render_text(
    result: HighlightResult,
    text: str,
    color: bool = True,
    styles: Mapping[TokenType, str] = STYLES,
) -> str:
    """Return *text* with every mapped range painted in its style color.

    Overlapping ranges keep the earliest one; ``color=False`` returns the
    text unchanged.
    """
    if not color:
        return text

    out: list[str] = []
    cursor = 0
    for rng, hex_color in _ordered_spans(result, styles):
        start = max(rng.start, 0)
        end = min(rng.end, len(text))
        if start < cursor or end <= start:
            continue
        out.append(text[cursor:start])
        out.append(f"{_ansi(hex_color)}{text[start:end]}{_RESET}")
        cursor = end
    out.append(text[cursor:])
    return "".join(out)


def render_summary(result: HighlightResult) -> str:
    """Produce the human-friendly status block."""
    lines: list[str] = []
    lines.append(f"File:        {result.path or '<text>'}")
    lines.append(f"Language:    {result.language}")
    lines.append(
        f"Dialect:     {result.detection.dialect} "
        f"(confidence: {result.detection.confidence:.2f})"
    )
    lines.append(f"Regions:     {len(result.regions)}")
    lines.append(f"Decorations: {result.total}")

    for kind, ranges in sorted(result.non_empty().items(), key=lambda kv: kv[0].name):
        lines.append(f"  {kind.name:<18} {len(ranges)}")

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# JSON output
# ---------------------------------------------------------------------------


def result_to_dict(result: HighlightResult) -> dict[str, Any]:
    return {
        "tool": "cibash",
        "version": cibash.__version__,
        "path": result.path,
        "language": result.language,
        "dialect": str(result.detection.dialect),
        "confidence": round(result.detection.confidence, 4),
        "regions": [
            {
                "content": region.content,
                "line_offsets": list(region.line_offsets),
            }
            for region in result.regions
        ],
        "ranges": {
            kind.name: [[r.start, r.end] for r in ranges]
            for kind, ranges in sorted(result.non_empty().items(), key=lambda kv: kv[0].name)
        },
        "total": result.total,
    }


def render_json(result: HighlightResult) -> str:
    """Produce stable JSON output (deterministic key order)."""
    return json.dumps(result_to_dict(result), indent=2, ensure_ascii=False)
