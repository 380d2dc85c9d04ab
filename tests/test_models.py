"""Tests for cibash.models."""

import pytest

from cibash.models import (
    BashRegion,
    BashToken,
    DetectionResult,
    Dialect,
    HighlightResult,
    IndicatorVocabulary,
    MappedRange,
    TokenType,
)


class TestDialect:
    def test_from_str(self):
        assert Dialect.from_str("github-actions") == Dialect.GITHUB_ACTIONS
        assert Dialect.from_str("GITLAB-CI") == Dialect.GITLAB_CI

    def test_str(self):
        assert str(Dialect.UNKNOWN) == "unknown"

    def test_bad_label(self):
        with pytest.raises(ValueError):
            Dialect.from_str("jenkins")


class TestTokenType:
    def test_from_str(self):
        assert TokenType.from_str("variable_special") == TokenType.VARIABLE_SPECIAL
        assert TokenType.from_str("GLOB") == TokenType.GLOB

    def test_str(self):
        assert str(TokenType.GITHUB_EXPRESSION) == "GITHUB_EXPRESSION"

    def test_count(self):
        assert len(TokenType) == 18


class TestIndicatorVocabulary:
    VOCAB = IndicatorVocabulary(
        strong=frozenset({"a"}), medium=frozenset({"b", "c"}), weak=frozenset({"d"})
    )

    def test_max_score(self):
        assert self.VOCAB.max_score == pytest.approx(2.5)

    def test_confidence(self):
        assert self.VOCAB.confidence({"a", "d", "zzz"}) == pytest.approx(1.3 / 2.5)

    def test_empty_vocabulary(self):
        empty = IndicatorVocabulary(frozenset(), frozenset(), frozenset())
        assert empty.confidence({"a"}) == 0.0


class TestDetectionResult:
    def test_is_known(self):
        assert DetectionResult(Dialect.GITLAB_CI, 0.4).is_known
        assert not DetectionResult(Dialect.UNKNOWN).is_known


class TestBashRegion:
    def test_lines(self):
        region = BashRegion(content="a\nb\n", line_offsets=(0, 2, 4))
        assert region.lines == ["a", "b", ""]


class TestBashToken:
    def test_end(self):
        assert BashToken(TokenType.COMMAND, "ls", 3, 2).end == 5


class TestHighlightResult:
    def test_defaults(self):
        result = HighlightResult(path="ci.yml", language="yaml")
        assert result.detection.dialect is Dialect.UNKNOWN
        assert result.total == 0

    def test_total_and_non_empty(self):
        result = HighlightResult(path="ci.yml", language="yaml")
        result.ranges = {
            TokenType.COMMAND: [MappedRange(0, 2), MappedRange(5, 7)],
            TokenType.GLOB: [],
        }
        assert result.total == 2
        assert list(result.non_empty()) == [TokenType.COMMAND]
