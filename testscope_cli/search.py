"""Text search over project files with ripgrep, falling back to grep.

Both programs treat exit status 1 as "no matches". Anything above that, or
a missing executable, counts as a failed backend and the next one is tried.
"""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence

from .errors import SearchUnavailableError
from .models import SearchPlan

logger = logging.getLogger(__name__)


class BackendFailed(Exception):
    """A single search program could not produce a result."""


class SearchBackend(ABC):
    """One command-line search program."""

    name: str = ""

    @abstractmethod
    def command(self, plan: SearchPlan) -> List[str]:
        """Build the argv for *plan*."""

    def search(self, plan: SearchPlan, cwd: Path) -> List[str]:
        argv = self.command(plan)
        logger.debug("Running %s", " ".join(argv))
        try:
            result = subprocess.run(
                argv,
                cwd=cwd,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as exc:
            raise BackendFailed(f"{self.name} is not installed") from exc

        if result.returncode > 1:
            raise BackendFailed(
                f"{self.name} exited with {result.returncode}: {result.stderr.strip()}"
            )
        return parse_output(result.stdout)


class RipgrepBackend(SearchBackend):
    name = "rg"

    def command(self, plan: SearchPlan) -> List[str]:
        argv = [self.name, "--files-with-matches", "--case-sensitive"]
        for glob in plan.globs:
            argv += ["-g", glob]
        return argv + ["-e", plan.pattern, *plan.roots]


class GrepBackend(SearchBackend):
    name = "grep"

    def command(self, plan: SearchPlan) -> List[str]:
        argv = [self.name, "-E", "-r", "-l"]
        argv += [f"--include={glob}" for glob in plan.globs]
        return argv + ["-e", plan.pattern, *plan.roots]


def parse_output(stdout: str) -> List[str]:
    """Split tool output into unique, sorted file paths."""
    paths = set()
    for line in stdout.splitlines():
        line = line.strip()
        if not line:
            continue
        if line.startswith("./"):
            line = line[2:]
        paths.add(line)
    return sorted(paths)


class FallbackSearch:
    """Run a search plan with the first backend that works."""

    def __init__(self, cwd: Path, backends: Optional[Sequence[SearchBackend]] = None):
        self.cwd = Path(cwd)
        self.backends = list(backends) if backends is not None else [RipgrepBackend(), GrepBackend()]

    def search(self, plan: SearchPlan) -> List[str]:
        roots = tuple(r for r in plan.roots if (self.cwd / r).is_dir())
        if not roots:
            logger.debug("No search roots exist under %s: %s", self.cwd, plan.roots)
            return []
        plan = SearchPlan(pattern=plan.pattern, roots=roots, globs=plan.globs)

        errors = []
        for backend in self.backends:
            try:
                return backend.search(plan, self.cwd)
            except BackendFailed as exc:
                logger.debug("Search backend failed, trying next: %s", exc)
                errors.append(str(exc))

        names = " or ".join(b.name for b in self.backends)
        raise SearchUnavailableError(
            f"No search tool available (tried {names}). Install one. ({'; '.join(errors)})"
        )
