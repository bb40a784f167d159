"""Transitive closure of reverse dependencies."""

from __future__ import annotations

import logging
from typing import Iterable, Set

from .dependents import DependencyFinder
from .models import ClosureResult, Variant

logger = logging.getLogger(__name__)


class ClosureEngine:
    """Expand a seed set level by level until no new dependents appear.

    Every namespace enters the frontier at most once, so the number of rounds
    is bounded by the number of source files on disk.
    """

    def __init__(self, finder: DependencyFinder):
        self.finder = finder

    def run(self, seed: Iterable[str], variant: Variant) -> ClosureResult:
        all_deps: Set[str] = set(seed)
        new_deps: Set[str] = set(all_deps)
        rounds = 0

        while new_deps:
            deps = self.finder.find_dependents(new_deps, variant)
            rounds += 1
            diff = deps - all_deps
            logger.debug("Closure round %d: %d new namespace(s)", rounds, len(diff))
            all_deps |= diff
            new_deps = diff

        return ClosureResult(modules=frozenset(all_deps), rounds=rounds)

    def transitive_dependents(self, seed: Iterable[str], variant: Variant) -> Set[str]:
        return set(self.run(seed, variant).modules)
