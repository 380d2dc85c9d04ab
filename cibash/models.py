"""Data models used throughout cibash."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

# ---------------------------------------------------------------------------
# Dialect
# ---------------------------------------------------------------------------


class Dialect(enum.Enum):
    """CI configuration dialect a YAML document is written in."""

    GITHUB_ACTIONS = "github-actions"
    GITLAB_CI = "gitlab-ci"
    UNKNOWN = "unknown"

    @classmethod
    def from_str(cls, label: str) -> Dialect:
        return cls(label.lower())

    def __str__(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# Indicator vocabulary
# ---------------------------------------------------------------------------

STRONG_WEIGHT = 1.0
MEDIUM_WEIGHT = 0.6
WEAK_WEIGHT = 0.3


@dataclass(frozen=True)
class IndicatorVocabulary:
    """Weighted key sets that point at one dialect."""

    strong: frozenset[str]
    medium: frozenset[str]
    weak: frozenset[str]

    @property
    def max_score(self) -> float:
        return (
            len(self.strong) * STRONG_WEIGHT
            + len(self.medium) * MEDIUM_WEIGHT
            + len(self.weak) * WEAK_WEIGHT
        )

    def score(self, keys: set[str] | frozenset[str]) -> float:
        """Sum the weights of every indicator present in *keys*."""
        total = 0.0
        total += STRONG_WEIGHT * len(self.strong & keys)
        total += MEDIUM_WEIGHT * len(self.medium & keys)
        total += WEAK_WEIGHT * len(self.weak & keys)
        return total

    def confidence(self, keys: set[str] | frozenset[str]) -> float:
        """Return the normalised score in ``[0, 1]``."""
        if not self.max_score:
            return 0.0
        return self.score(keys) / self.max_score


# ---------------------------------------------------------------------------
# Detection result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DetectionResult:
    dialect: Dialect
    confidence: float = 0.0

    @property
    def is_known(self) -> bool:
        return self.dialect is not Dialect.UNKNOWN


# ---------------------------------------------------------------------------
# Bash region
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BashRegion:
    """Decoded shell text from one YAML scalar.

    ``line_offsets[i]`` is the document offset where line ``i`` of
    ``content`` begins.
    """

    content: str
    line_offsets: tuple[int, ...]

    @property
    def lines(self) -> list[str]:
        return self.content.split("\n")


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


class TokenType(enum.Enum):
    """Lexical category of a shell token."""

    COMMAND = "command"
    BUILTIN = "builtin"
    KEYWORD = "keyword"
    VARIABLE = "variable"
    VARIABLE_SPECIAL = "variable_special"
    STRING_SINGLE = "string_single"
    STRING_DOUBLE = "string_double"
    COMMENT = "comment"
    OPERATOR = "operator"
    REDIRECT = "redirect"
    OPTION = "option"
    ARGUMENT = "argument"
    SUBSHELL = "subshell"
    GITHUB_EXPRESSION = "github_expression"
    GLOB = "glob"
    ESCAPE = "escape"
    WHITESPACE = "whitespace"
    TEXT = "text"

    @classmethod
    def from_str(cls, label: str) -> TokenType:
        return cls[label.upper()]

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class BashToken:
    """A token; ``offset`` is relative to its region's content."""

    type: TokenType
    value: str
    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length


@dataclass(frozen=True)
class MappedRange:
    """Half-open ``[start, end)`` range in document offsets."""

    start: int
    end: int


# ---------------------------------------------------------------------------
# Highlight result (aggregate)
# ---------------------------------------------------------------------------


@dataclass
class HighlightResult:
    """Complete output of one analysis pass over a document."""

    path: str
    language: str
    detection: DetectionResult = field(
        default_factory=lambda: DetectionResult(Dialect.UNKNOWN, 0.0)
    )
    regions: list[BashRegion] = field(default_factory=list)
    ranges: dict[TokenType, list[MappedRange]] = field(default_factory=dict)

    # ---- helpers ----
    @property
    def total(self) -> int:
        return sum(len(r) for r in self.ranges.values())

    def non_empty(self) -> dict[TokenType, list[MappedRange]]:
        return {t: r for t, r in self.ranges.items() if r}
