"""Changed-file discovery through git."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Set

from .errors import ChangedFilesError
from .models import Variant

logger = logging.getLogger(__name__)


class GitChangedFiles:
    """List source files changed since a base ref.

    Deleted files are excluded: a namespace that no longer exists has no
    file to search for and nothing left to test.
    """

    def __init__(self, project_dir: Path, base_ref: str = "main", include_worktree: bool = False):
        self.project_dir = Path(project_dir)
        self.base_ref = base_ref
        self.include_worktree = include_worktree

    def _git_lines(self, args: List[str]) -> List[str]:
        argv = ["git", *args]
        logger.debug("Running %s", " ".join(argv))
        try:
            result = subprocess.run(
                argv,
                cwd=self.project_dir,
                capture_output=True,
                text=True,
                check=True,
            )
        except FileNotFoundError as exc:
            raise ChangedFilesError("git is not installed") from exc
        except subprocess.CalledProcessError as exc:
            raise ChangedFilesError(
                f"'{' '.join(argv)}' failed: {exc.stderr.strip() or exc.returncode}"
            ) from exc
        return [ln.strip() for ln in result.stdout.splitlines() if ln.strip()]

    def all_changed(self) -> List[str]:
        files: Set[str] = set(
            self._git_lines(["diff", "--name-only", "--diff-filter=d", f"{self.base_ref}...HEAD"])
        )
        if self.include_worktree:
            files.update(self._git_lines(["diff", "--name-only", "--diff-filter=d", "HEAD"]))
        return sorted(files)

    def changed_files(self, variant: Variant) -> List[str]:
        return filter_changed(self.all_changed(), variant)


def filter_changed(paths: List[str], variant: Variant) -> List[str]:
    """Keep paths under the variant's source root with one of its extensions."""
    prefix = variant.source_root + "/"
    normalised = (p[2:] if p.startswith("./") else p for p in paths)
    return sorted({p for p in normalised if p.startswith(prefix) and variant.owns(p)})
