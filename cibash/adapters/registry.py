"""Adapter registry — dialect detection and region extraction entry points."""

from __future__ import annotations

import yaml

from cibash.adapters.base import DialectAdapter
from cibash.document import is_mapping, is_sequence, key_text, parse_document
from cibash.integrations.github_actions import GitHubActionsAdapter
from cibash.integrations.gitlab_ci import GitLabCIAdapter
from cibash.logging import get_logger
from cibash.models import BashRegion, DetectionResult, Dialect

logger = get_logger("adapters")

# Checked in this order; on an exact confidence tie the earlier one wins.
ADAPTERS: tuple[DialectAdapter, ...] = (GitHubActionsAdapter(), GitLabCIAdapter())

MIN_CONFIDENCE = 0.15
MAX_KEY_DEPTH = 5


def collect_keys(node: yaml.Node | None, depth: int = 0, max_depth: int = MAX_KEY_DEPTH) -> set[str]:
    """Return every mapping key in the tree under *node*, down to *max_depth*."""
    keys: set[str] = set()
    if depth > max_depth or node is None:
        return keys
    if is_sequence(node):
        for item in node.value:
            keys |= collect_keys(item, depth + 1, max_depth)
    elif is_mapping(node):
        for key_node, value_node in node.value:
            key = key_text(key_node)
            if key:
                keys.add(key)
            keys |= collect_keys(value_node, depth + 1, max_depth)
    return keys


def select_dialect(
    adapters: tuple[DialectAdapter, ...] | list[DialectAdapter],
    keys: set[str],
) -> DetectionResult:
    """Pick the adapter with the highest confidence at or above the threshold.

    Returns an ``UNKNOWN`` result with confidence 0 when none qualifies.
    """
    best: DetectionResult | None = None
    for adapter in adapters:
        conf = adapter.detect(keys)
        logger.debug("%s confidence %.3f", adapter.dialect, conf)
        if conf < MIN_CONFIDENCE:
            continue
        if best is None or conf > best.confidence:
            best = DetectionResult(adapter.dialect, conf)
    return best or DetectionResult(Dialect.UNKNOWN, 0.0)


def detect(text: str) -> DetectionResult:
    """Detect which CI dialect *text* is written in."""
    root = parse_document(text)
    if not is_mapping(root):
        return DetectionResult(Dialect.UNKNOWN, 0.0)
    return select_dialect(ADAPTERS, collect_keys(root))


def adapter_for(dialect: Dialect) -> DialectAdapter | None:
    """Return the registered adapter for *dialect*, if any."""
    for adapter in ADAPTERS:
        if adapter.dialect is dialect:
            return adapter
    return None


def extract_regions(dialect: Dialect, text: str) -> list[BashRegion]:
    """Return the shell regions of *text* for a detected *dialect*."""
    adapter = adapter_for(dialect)
    if adapter is None:
        return []
    root = parse_document(text)
    if not is_mapping(root):
        return []
    return adapter.extract_regions(root, text)


def list_adapters() -> list[DialectAdapter]:
    return list(ADAPTERS)
