"""YAML document model — PyYAML node trees with source offsets.

``yaml.compose_all`` stops short of constructing Python objects, so every
node keeps its ``start_mark``/``end_mark`` (offsets into the raw text) and
every scalar keeps its ``style``:

    None  plain         ``'``  single-quoted    ``"``  double-quoted
    ``|`` block literal  ``>``  block folded

Composing also keeps mapping keys as source text: ``on:`` stays ``"on"``
instead of resolving to the YAML 1.1 boolean, and tags such as GitLab's
``!reference`` need no constructor.
"""

from __future__ import annotations

from collections.abc import Iterator

import yaml

from cibash.logging import get_logger

logger = get_logger("document")

BLOCK_STYLES = frozenset({"|", ">"})
QUOTED_STYLES = frozenset({"'", '"'})


def parse_document(text: str) -> yaml.Node | None:
    """Compose the first YAML document in *text*.

    Returns ``None`` for empty input or when the text does not parse.
    """
    try:
        for node in yaml.compose_all(text, Loader=yaml.SafeLoader):
            return node
    except yaml.YAMLError as exc:
        logger.debug("YAML parse failed: %s", exc)
    return None


def is_mapping(node: object) -> bool:
    return isinstance(node, yaml.MappingNode)


def is_sequence(node: object) -> bool:
    return isinstance(node, yaml.SequenceNode)


def is_scalar(node: object) -> bool:
    return isinstance(node, yaml.ScalarNode)


def key_text(node: yaml.Node) -> str:
    """Return the source text of a mapping key, or ``""`` for complex keys."""
    if is_scalar(node):
        return str(node.value)
    return ""


def mapping_items(node: yaml.Node) -> Iterator[tuple[str, yaml.Node]]:
    """Yield ``(key, value_node)`` pairs of a mapping node."""
    if not is_mapping(node):
        return
    for key_node, value_node in node.value:
        yield key_text(key_node), value_node


def get_value(node: yaml.Node, key: str) -> yaml.Node | None:
    """Return the value node for *key* in a mapping node (first match)."""
    for name, value in mapping_items(node):
        if name == key:
            return value
    return None
