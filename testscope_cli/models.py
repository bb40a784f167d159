"""Core data models shared by search, closure, resolution and orchestration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, List, Tuple

STATUS_NOTHING_CHANGED = "nothing-changed"
STATUS_NO_TESTS = "no-tests"
STATUS_READY = "ready"


@dataclass(frozen=True)
class Variant:
    """Path, extension and search conventions for one source flavour."""

    name: str
    extensions: Tuple[str, ...]
    source_paths: Tuple[str, ...]
    source_root: str = "src"
    test_root: str = "test"

    @property
    def globs(self) -> Tuple[str, ...]:
        return tuple(f"*{ext}" for ext in self.extensions)

    @property
    def search_roots(self) -> Tuple[str, ...]:
        return (self.source_root, self.test_root)

    def owns(self, path: str) -> bool:
        return path.endswith(self.extensions)


@dataclass(frozen=True)
class SearchPlan:
    pattern: str
    roots: Tuple[str, ...]
    globs: Tuple[str, ...]


@dataclass(frozen=True)
class TestCandidate:
    __test__ = False

    module: str
    test_module: str
    exists: bool


@dataclass(frozen=True)
class ClosureResult:
    modules: FrozenSet[str]
    rounds: int


@dataclass
class VariantPlan:
    """Outcome of running the impact pipeline for a single variant."""

    variant: Variant
    status: str
    changed_files: List[str] = field(default_factory=list)
    changed_modules: List[str] = field(default_factory=list)
    affected: List[str] = field(default_factory=list)
    tests: List[str] = field(default_factory=list)
    candidates: List[TestCandidate] = field(default_factory=list)
    rounds: int = 0

    @property
    def ready(self) -> bool:
        return self.status == STATUS_READY
