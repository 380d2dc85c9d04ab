"""GitLab CI adapter — ``.gitlab-ci.yml`` pipelines.

Shell lives in ``script``, ``before_script`` and ``after_script``, either at
the top level (global defaults) or inside a job::

    before_script:
      - apt-get update
    test:
      script:
        - make test

Each list item is its own region; a plain string value is one region.
"""

from __future__ import annotations

import yaml

from cibash.document import is_mapping, mapping_items
from cibash.models import BashRegion, Dialect, IndicatorVocabulary
from cibash.scanner.regions import regions_from_value

GITLAB_INDICATORS = IndicatorVocabulary(
    strong=frozenset({
        "stages", "before_script", "after_script", ".gitlab-ci", "include",
        "extends",
    }),
    medium=frozenset({
        "script", "image", "artifacts", "cache", "rules", "only", "except",
        "tags", "variables",
    }),
    weak=frozenset({
        "when", "allow_failure", "dependencies", "needs", "trigger", "parallel",
    }),
)

GITLAB_BASH_KEYS = frozenset({"script", "before_script", "after_script"})


class GitLabCIAdapter:
    """Adapter for GitLab CI pipelines."""

    dialect: Dialect = Dialect.GITLAB_CI
    indicators: IndicatorVocabulary = GITLAB_INDICATORS
    bash_keys: frozenset[str] = GITLAB_BASH_KEYS

    # ── detect ──────────────────────────────────────────────────

    def detect(self, keys: set[str]) -> float:
        return self.indicators.confidence(keys)

    # ── extract_regions ─────────────────────────────────────────

    def extract_regions(self, root: yaml.Node, text: str) -> list[BashRegion]:
        regions: list[BashRegion] = []
        for key, value in mapping_items(root):
            if key in self.bash_keys:
                regions.extend(regions_from_value(value, text))

            # Jobs (and `default:`) carry their own script keys one level down.
            if is_mapping(value):
                for job_key, job_value in mapping_items(value):
                    if job_key in self.bash_keys:
                        regions.extend(regions_from_value(job_value, text))
        return regions
