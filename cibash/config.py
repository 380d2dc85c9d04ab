"""Unified configuration loader for cibash.

Configuration is resolved in priority order: **project > user > defaults**.

1. **Project-level** — ``.cibash.yml`` in (or above) the target directory.
2. **User-level** — ``~/.cibash/config.yml``.
3. **Built-in defaults** — hardcoded fallbacks.

Both files share the same format::

    # .cibash.yml  or  ~/.cibash/config.yml
    highlight:
      languages:
        - yaml
        - github-actions-workflow
        - gitlab-ci
        - azure-pipelines
      color: true
      format: text
      ignore_types:
        - ARGUMENT

    watch:
      debounce_ms: 100
      poll_interval_ms: 250   # at least 1

Project-level values override user-level values.  CLI flags override both.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from cibash.highlight import SUPPORTED_LANGUAGES
from cibash.logging import get_logger
from cibash.models import TokenType

logger = get_logger("config")

CONFIG_FILENAME = ".cibash.yml"
USER_CONFIG_DIR = Path.home() / ".cibash"
USER_CONFIG_PATH = USER_CONFIG_DIR / "config.yml"

FORMATS = ("text", "json")


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class HighlightConfig:
    """Highlight sub-configuration."""

    languages: list[str] = field(default_factory=lambda: list(SUPPORTED_LANGUAGES))
    color: bool = True
    format: str = "text"
    ignore_types: list[str] = field(default_factory=list)

    @property
    def ignored_token_types(self) -> list[TokenType]:
        """Resolve ``ignore_types`` names, dropping ones that don't exist."""
        resolved: list[TokenType] = []
        for name in self.ignore_types:
            try:
                resolved.append(TokenType.from_str(name))
            except KeyError:
                logger.warning("Unknown token type in ignore_types: %s", name)
        return resolved


@dataclass
class WatchConfig:
    """Watch sub-configuration."""

    debounce_ms: int = 100
    poll_interval_ms: int = 250


@dataclass
class CibashConfig:
    """Top-level configuration container (highlight + watch)."""

    highlight: HighlightConfig = field(default_factory=HighlightConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)

    # Where the effective config was loaded from (None = defaults only).
    project_config_path: str | None = None
    user_config_path: str | None = None


# ---------------------------------------------------------------------------
# Public loader
# ---------------------------------------------------------------------------


def load_config(
    scan_path: str | None = None,
    config_path: str | Path | None = None,
) -> CibashConfig:
    """Load merged configuration (project > user > defaults).

    Parameters
    ----------
    scan_path:
        File or directory to search for ``.cibash.yml``.  When *None*, only
        the user-level file (and defaults) are considered.
    config_path:
        Explicit config file path.  When given, *only* this file is
        loaded (no project/user search).
    """
    if config_path is not None:
        raw = _load_yaml(Path(config_path).expanduser())
        return _raw_to_config(raw, config_source=str(config_path))

    user_raw = _load_yaml(USER_CONFIG_PATH)
    user_source = str(USER_CONFIG_PATH) if user_raw else None

    project_raw: dict | None = None
    project_source: str | None = None
    if scan_path is not None:
        project_path = _find_project_config(scan_path)
        if project_path is not None:
            project_raw = _load_yaml(project_path)
            project_source = str(project_path)

    merged = _merge_raw(project_raw, user_raw)
    cfg = _raw_to_config(merged)
    cfg.project_config_path = project_source
    cfg.user_config_path = user_source
    return cfg


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _find_project_config(scan_path: str) -> Path | None:
    """Search for ``.cibash.yml`` next to *scan_path* and in its ancestors."""
    p = Path(scan_path)
    if p.is_file():
        p = p.parent
    candidates = [p / CONFIG_FILENAME]
    if not (p / ".git").exists():
        for parent in p.parents:
            candidates.append(parent / CONFIG_FILENAME)
            if (parent / ".git").exists():
                break
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def _load_yaml(path: Path) -> dict | None:
    """Load a YAML file, returning *None* on missing/invalid files."""
    path = path.expanduser()
    if not path.is_file():
        return None
    try:
        raw = yaml.safe_load(path.read_text())
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)
        return None
    return raw if isinstance(raw, dict) else None


def _merge_raw(
    project: dict | None,
    user: dict | None,
) -> dict:
    """Merge project and user raw dicts (project wins per key)."""
    base: dict = {}

    if user:
        for key, section in user.items():
            base[key] = dict(section) if isinstance(section, dict) else section

    if project:
        for key in ("highlight", "watch"):
            section = project.get(key)
            if isinstance(section, dict):
                if not isinstance(base.get(key), dict):
                    base[key] = {}
                base[key].update(section)

    return base


def _raw_to_config(
    raw: dict | None,
    config_source: str | None = None,
) -> CibashConfig:
    """Convert a raw YAML dict to a ``CibashConfig``."""
    if not raw:
        return CibashConfig(project_config_path=config_source)

    highlight_raw = raw.get("highlight", {})
    if not isinstance(highlight_raw, dict):
        highlight_raw = {}

    watch_raw = raw.get("watch", {})
    if not isinstance(watch_raw, dict):
        watch_raw = {}

    fmt = str(highlight_raw.get("format", "text")).lower()
    if fmt not in FORMATS:
        logger.warning("Unknown output format %r, using text", fmt)
        fmt = "text"

    languages = _as_list(highlight_raw.get("languages", list(SUPPORTED_LANGUAGES)))

    highlight_cfg = HighlightConfig(
        languages=languages or list(SUPPORTED_LANGUAGES),
        color=bool(highlight_raw.get("color", True)),
        format=fmt,
        ignore_types=_as_list(highlight_raw.get("ignore_types", [])),
    )

    watch_cfg = WatchConfig(
        debounce_ms=_as_int(watch_raw.get("debounce_ms"), 100),
        poll_interval_ms=_as_int(watch_raw.get("poll_interval_ms"), 250, minimum=1),
    )

    return CibashConfig(
        highlight=highlight_cfg,
        watch=watch_cfg,
        project_config_path=config_source,
    )


def _as_list(val: object) -> list[str]:
    """Coerce a value to a list of strings."""
    if isinstance(val, list):
        return [str(v) for v in val]
    if isinstance(val, str):
        return [val]
    return []


def _as_int(val: object, default: int, minimum: int = 0) -> int:
    """Coerce a value to an int of at least *minimum*, falling back to *default*."""
    if isinstance(val, bool):
        return default
    try:
        number = int(val)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return number if number >= minimum else default
