"""Highlight pipeline — detect, extract, tokenize, map, group by style.

This is the boundary a host editor or the CLI talks to: it takes the raw
document text and a language id and returns a :class:`HighlightResult`
whose ``ranges`` map each styled token type to document ranges.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import PurePath
from types import MappingProxyType

from cibash.adapters.registry import detect, extract_regions
from cibash.logging import get_logger
from cibash.models import BashRegion, HighlightResult, MappedRange, TokenType
from cibash.scanner.mapper import map_token
from cibash.scanner.tokenizer import tokenize

logger = get_logger("highlight")

SUPPORTED_LANGUAGES: tuple[str, ...] = (
    "yaml",
    "github-actions-workflow",
    "gitlab-ci",
    "azure-pipelines",
)

# Read-only; shared by every analysis pass.
STYLES: Mapping[TokenType, str] = MappingProxyType({
    TokenType.COMMAND: "#DCDCAA",
    TokenType.BUILTIN: "#DCDCAA",
    TokenType.KEYWORD: "#C586C0",
    TokenType.VARIABLE: "#9CDCFE",
    TokenType.VARIABLE_SPECIAL: "#9CDCFE",
    TokenType.STRING_SINGLE: "#CE9178",
    TokenType.STRING_DOUBLE: "#CE9178",
    TokenType.COMMENT: "#6A9955",
    TokenType.OPERATOR: "#D4D4D4",
    TokenType.REDIRECT: "#D4D4D4",
    TokenType.OPTION: "#9CDCFE",
    TokenType.GITHUB_EXPRESSION: "#4EC9B0",
    TokenType.SUBSHELL: "#4EC9B0",
    TokenType.GLOB: "#D16969",
    TokenType.ARGUMENT: "#9CDCFE",
})


def language_for_path(path: str) -> str:
    """Infer the document language id from a file path."""
    p = PurePath(path)
    name = p.name.lower()
    if name in (".gitlab-ci.yml", ".gitlab-ci.yaml"):
        return "gitlab-ci"
    if name in ("azure-pipelines.yml", "azure-pipelines.yaml"):
        return "azure-pipelines"
    if p.suffix.lower() not in (".yml", ".yaml"):
        return "plaintext"
    parts = [part.lower() for part in p.parts]
    for i in range(len(parts) - 1):
        if parts[i] == ".github" and parts[i + 1] == "workflows":
            return "github-actions-workflow"
    return "yaml"


def group_ranges(
    regions: Iterable[BashRegion],
    styles: Mapping[TokenType, str] = STYLES,
    ignore_types: Iterable[TokenType] = (),
) -> dict[TokenType, list[MappedRange]]:
    """Tokenize each region and collect mapped ranges per styled token type."""
    ignored = set(ignore_types)
    grouped: dict[TokenType, list[MappedRange]] = {
        t: [] for t in styles if t not in ignored
    }

    for region in regions:
        for token in tokenize(region.content):
            if token.type not in grouped:
                continue
            mapped = map_token(token.offset, token.length, region.content, region.line_offsets)
            if mapped is None:
                continue
            grouped[token.type].append(mapped)

    return grouped


def highlight(
    text: str,
    *,
    path: str = "",
    language: str | None = None,
    languages: Iterable[str] = SUPPORTED_LANGUAGES,
    ignore_types: Iterable[TokenType] = (),
) -> HighlightResult:
    """Run the full pipeline over one document.

    *language* defaults to :func:`language_for_path` (``yaml`` without a
    *path*).  Documents in a language outside *languages* are returned
    untouched.
    """
    language = language or (language_for_path(path) if path else "yaml")
    result = HighlightResult(path=path, language=language)
    if language not in set(languages):
        logger.debug("Skipping %s: language %s not supported", path or "<text>", language)
        return result

    logger.info("Processing: %s", path or "<text>")
    result.detection = detect(text)
    logger.info(
        "Detected: %s (confidence: %.2f)",
        result.detection.dialect,
        result.detection.confidence,
    )
    if not result.detection.is_known:
        return result

    result.regions = extract_regions(result.detection.dialect, text)
    logger.info("Found %d bash region(s)", len(result.regions))

    result.ranges = group_ranges(result.regions, ignore_types=ignore_types)
    logger.info("Applied %d decorations", result.total)
    return result
