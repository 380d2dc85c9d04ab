"""GitHub Actions adapter — workflow files under ``.github/workflows/``.

Shell lives in job steps::

    jobs:
      build:
        steps:
          - run: make test
          - uses: actions/github-script@v7
            with:
              script: console.log("hi")

Only ``jobs.<job>.steps[*]`` is walked; reusable-workflow calls and
composite actions carry no step-level shell of their own.
"""

from __future__ import annotations

import yaml

from cibash.document import get_value, is_mapping, is_scalar, is_sequence, mapping_items
from cibash.models import BashRegion, Dialect, IndicatorVocabulary
from cibash.scanner.regions import region_from_scalar

GITHUB_INDICATORS = IndicatorVocabulary(
    strong=frozenset({
        "jobs", "runs-on", "on", "uses", "workflow_dispatch", "workflow_call",
    }),
    medium=frozenset({
        "steps", "with", "run", "name", "if", "needs", "strategy", "matrix",
        "container", "services",
    }),
    weak=frozenset({
        "env", "timeout-minutes", "continue-on-error", "permissions",
        "concurrency", "defaults", "outputs", "secrets",
    }),
)

GITHUB_BASH_KEYS = frozenset({"run", "script"})


class GitHubActionsAdapter:
    """Adapter for GitHub Actions workflows."""

    dialect: Dialect = Dialect.GITHUB_ACTIONS
    indicators: IndicatorVocabulary = GITHUB_INDICATORS
    bash_keys: frozenset[str] = GITHUB_BASH_KEYS

    # ── detect ──────────────────────────────────────────────────

    def detect(self, keys: set[str]) -> float:
        return self.indicators.confidence(keys)

    # ── extract_regions ─────────────────────────────────────────

    def extract_regions(self, root: yaml.Node, text: str) -> list[BashRegion]:
        regions: list[BashRegion] = []
        jobs = get_value(root, "jobs")
        if not is_mapping(jobs):
            return regions

        for _, job in mapping_items(jobs):
            steps = get_value(job, "steps")
            if not is_sequence(steps):
                continue
            for step in steps.value:
                regions.extend(self._step_regions(step, text))

        return regions

    def _step_regions(self, step: yaml.Node, text: str) -> list[BashRegion]:
        regions: list[BashRegion] = []
        for key, value in mapping_items(step):
            if key in self.bash_keys and is_scalar(value):
                region = region_from_scalar(value, text)
                if region is not None:
                    regions.append(region)

            # Actions such as github-script take their script as an input.
            if key == "with" and is_mapping(value):
                for with_key, with_value in mapping_items(value):
                    if with_key in self.bash_keys and is_scalar(with_value):
                        region = region_from_scalar(with_value, text)
                        if region is not None:
                            regions.append(region)
        return regions
