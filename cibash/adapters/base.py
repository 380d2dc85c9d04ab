"""Dialect adapter protocol — the contract each CI dialect satisfies."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import yaml

from cibash.models import BashRegion, Dialect, IndicatorVocabulary


@runtime_checkable
class DialectAdapter(Protocol):
    """One CI dialect: how to recognise it and where its shell lives."""

    dialect: Dialect
    indicators: IndicatorVocabulary
    bash_keys: frozenset[str]

    def detect(self, keys: set[str]) -> float:
        """Return confidence 0.0–1.0 that a document with *keys* is this dialect.

        Must be fast and side-effect free.
        """
        ...

    def extract_regions(self, root: yaml.Node, text: str) -> list[BashRegion]:
        """Return the shell regions found under *root*.

        Must never raise for an unexpected document shape.
        """
        ...
