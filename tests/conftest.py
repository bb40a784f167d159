"""Pytest configuration and fixtures for testscope tests."""

import fnmatch
import re
import shutil
import tempfile
from pathlib import Path
from typing import Dict, Generator, List

import pytest

from testscope_cli.config_manager import ProjectSettings
from testscope_cli.models import SearchPlan, Variant
from testscope_cli.variants import PRIMARY, SECONDARY, variant_for


def _to_python_regex(pattern: str) -> str:
    """Translate the POSIX bracket classes used by the search patterns."""
    return pattern.replace("[:alnum:]", "a-zA-Z0-9").replace("[:space:]", r"\s")


class RegexSearch:
    """In-process stand-in for rg/grep that records every plan it receives."""

    def __init__(self, root: Path):
        self.root = Path(root)
        self.plans: List[SearchPlan] = []

    def search(self, plan: SearchPlan) -> List[str]:
        self.plans.append(plan)
        regex = re.compile(_to_python_regex(plan.pattern), re.MULTILINE)
        hits = set()
        for root in plan.roots:
            base = self.root / root
            if not base.is_dir():
                continue
            for path in base.rglob("*"):
                if not path.is_file():
                    continue
                if not any(fnmatch.fnmatch(path.name, g) for g in plan.globs):
                    continue
                if regex.search(path.read_text(encoding="utf-8")):
                    hits.add(path.relative_to(self.root).as_posix())
        return sorted(hits)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def sample_project_path() -> Path:
    """Get path to the sample Clojure project."""
    return Path(__file__).parent / "fixtures" / "sample_project"


@pytest.fixture
def sample_project(temp_dir: Path, sample_project_path: Path) -> Path:
    """A writable copy of the sample project."""
    dest = temp_dir / "sample_project"
    shutil.copytree(sample_project_path, dest)
    return dest


@pytest.fixture
def make_project(temp_dir: Path):
    """Write a ``{relative_path: content}`` mapping into a fresh project dir."""

    def _make(files: Dict[str, str]) -> Path:
        root = temp_dir / "project"
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        root.mkdir(parents=True, exist_ok=True)
        return root

    return _make


@pytest.fixture
def clj() -> Variant:
    return variant_for(PRIMARY, ProjectSettings())


@pytest.fixture
def cljs() -> Variant:
    return variant_for(SECONDARY, ProjectSettings())


@pytest.fixture
def regex_search():
    """Factory for a :class:`RegexSearch` rooted at a project directory."""
    return RegexSearch
