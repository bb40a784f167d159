"""Reverse dependency lookup by text search.

A namespace ``a.b`` is considered used by a file when the file either lists
it in a require vector (``[a.b :as b]``) or refers to one of its vars with a
qualified symbol (``a.b/thing``). Both shapes are folded into one regular
expression per lookup so that a lookup costs a single search process.

Matches inside comments and string literals are not excluded.
"""

from __future__ import annotations

import logging
from typing import Iterable, Set

from .mapper import NON_IDENT, file_to_module, module_alternation
from .models import SearchPlan, Variant

logger = logging.getLogger(__name__)


def dependents_pattern(modules: Iterable[str]) -> str:
    alts = module_alternation(modules)
    required = rf"\[({alts})({NON_IDENT}|$)"
    qualified = rf"(^|{NON_IDENT})({alts})/"
    return f"{required}|{qualified}"


class DependencyFinder:
    """Find the namespaces that reference any namespace in a set."""

    def __init__(self, search):
        self.search = search

    def find_dependents(self, modules: Iterable[str], variant: Variant) -> Set[str]:
        modules = set(modules)
        if not modules:
            return set()

        plan = SearchPlan(
            pattern=dependents_pattern(modules),
            roots=variant.search_roots,
            globs=variant.globs,
        )
        found: Set[str] = set()
        for path in self.search.search(plan):
            try:
                found.add(file_to_module(path, variant))
            except ValueError:
                logger.debug("Skipping unmappable search hit %s", path)
        logger.debug(
            "%d namespace(s) reference %d %s namespace(s)",
            len(found),
            len(modules),
            variant.name,
        )
        return found
