"""Resolve affected namespaces to test namespaces that actually exist."""

from __future__ import annotations

import logging
from typing import Iterable, List

from .mapper import NON_IDENT, escape_module, module_to_test_module
from .models import SearchPlan, TestCandidate, Variant

logger = logging.getLogger(__name__)


def declaration_pattern(test_module: str) -> str:
    # (ns ^:integration app.api-test ...) still declares app.api-test
    meta = r"(\^[^[:space:]]+[[:space:]]+)*"
    return rf"\(ns[[:space:]]+{meta}{escape_module(test_module)}({NON_IDENT}|$)"


class TestResolver:
    __test__ = False

    def __init__(self, search):
        self.search = search

    def test_exists(self, test_module: str, variant: Variant) -> bool:
        plan = SearchPlan(
            pattern=declaration_pattern(test_module),
            roots=(variant.test_root,),
            globs=variant.globs,
        )
        return bool(self.search.search(plan))

    def candidates(self, affected: Iterable[str], variant: Variant) -> List[TestCandidate]:
        out = []
        for module in sorted(set(affected)):
            test_module = module_to_test_module(module)
            exists = self.test_exists(test_module, variant)
            if not exists:
                logger.debug("No test namespace %s for %s", test_module, module)
            out.append(TestCandidate(module=module, test_module=test_module, exists=exists))
        return out

    def resolve_tests(self, affected: Iterable[str], variant: Variant) -> List[str]:
        return [c.test_module for c in self.candidates(affected, variant) if c.exists]
