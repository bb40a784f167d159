"""Orchestrator coordinating change discovery, closure, resolution and execution."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .closure import ClosureEngine
from .config import DEFAULT_SELECTOR
from .config_manager import ProjectSettings
from .dependents import DependencyFinder
from .executors import EftestExecutor, ShadowKarmaExecutor, TestExecutor
from .mapper import file_to_module
from .models import (
    STATUS_NO_TESTS,
    STATUS_NOTHING_CHANGED,
    STATUS_READY,
    Variant,
    VariantPlan,
)
from .resolver import TestResolver
from .search import FallbackSearch
from .variants import PRIMARY, SECONDARY
from .vcs import GitChangedFiles, filter_changed

logger = logging.getLogger(__name__)


class ImpactOrchestrator:
    """Runs the impact pipeline once per variant."""

    def __init__(
        self,
        project_dir: Path,
        settings: ProjectSettings,
        search=None,
        vcs=None,
        executors: Optional[Dict[str, TestExecutor]] = None,
    ):
        self.project_dir = Path(project_dir)
        self.settings = settings
        self.search = search or FallbackSearch(self.project_dir)
        self.vcs = vcs or GitChangedFiles(
            self.project_dir,
            base_ref=settings.base_ref,
            include_worktree=settings.include_worktree,
        )
        self.executors = executors or {
            PRIMARY: EftestExecutor(self.project_dir, settings.clj),
            SECONDARY: ShadowKarmaExecutor(self.project_dir, settings.cljs),
        }
        self.finder = DependencyFinder(self.search)
        self.closure = ClosureEngine(self.finder)
        self.resolver = TestResolver(self.search)

    def executor_for(self, variant: Variant) -> TestExecutor:
        return self.executors[variant.name]

    def plan(self, variant: Variant, files: Optional[Iterable[str]] = None) -> VariantPlan:
        if files is None:
            changed = self.vcs.changed_files(variant)
        else:
            changed = filter_changed(list(files), variant)

        if not changed:
            return VariantPlan(variant=variant, status=STATUS_NOTHING_CHANGED)

        seeds = sorted({file_to_module(f, variant) for f in changed})
        result = self.closure.run(seeds, variant)
        candidates = self.resolver.candidates(result.modules, variant)
        tests = [c.test_module for c in candidates if c.exists]
        logger.info(
            "%s: %d changed, %d affected after %d round(s), %d test namespace(s)",
            variant.name,
            len(seeds),
            len(result.modules),
            result.rounds,
            len(tests),
        )
        return VariantPlan(
            variant=variant,
            status=STATUS_READY if tests else STATUS_NO_TESTS,
            changed_files=changed,
            changed_modules=seeds,
            affected=sorted(result.modules),
            tests=tests,
            candidates=candidates,
            rounds=result.rounds,
        )

    def selector_for(self, variant: Variant, selector: str) -> str:
        """Return *selector*, or the default when the variant's runner can't apply it."""
        if self.executor_for(variant).supports_selector(selector):
            return selector
        logger.debug("Selector %s is not supported for %s; running all", selector, variant.name)
        return DEFAULT_SELECTOR

    def execute(self, plan: VariantPlan, selector: str = DEFAULT_SELECTOR) -> int:
        if not plan.ready:
            return 0
        return self.executor_for(plan.variant).run(plan.tests, self.selector_for(plan.variant, selector))

    def run(
        self,
        variants: List[Variant],
        selector: str = DEFAULT_SELECTOR,
        files: Optional[Iterable[str]] = None,
        dry_run: bool = False,
        on_plan: Optional[Callable[[VariantPlan], None]] = None,
        on_execute: Optional[Callable[[VariantPlan, str], None]] = None,
    ) -> List[Tuple[VariantPlan, int]]:
        """Plan and execute each variant in order.

        ``on_plan`` sees every plan; ``on_execute`` sees each plan about to run
        together with the selector it will run with.
        """
        files = list(files) if files is not None else None
        outcomes = []
        for variant in variants:
            plan = self.plan(variant, files)
            if on_plan:
                on_plan(plan)
            if not plan.ready or dry_run:
                outcomes.append((plan, 0))
                continue
            if on_execute:
                on_execute(plan, self.selector_for(variant, selector))
            outcomes.append((plan, self.execute(plan, selector)))
        return outcomes
