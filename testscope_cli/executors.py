"""Hand resolved test namespaces to the project's own test tooling."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Sequence

from .build_config import ns_regexp_for, patched_build_config
from .config import DEFAULT_SELECTOR
from .config_manager import CljSettings, CljsSettings

logger = logging.getLogger(__name__)

COMMAND_NOT_FOUND = 127


def run_command(argv: Sequence[str], cwd: Path) -> int:
    """Run *argv* with inherited stdio and return its exit status."""
    logger.debug("Running %s", " ".join(argv))
    try:
        return subprocess.run(list(argv), cwd=cwd).returncode
    except FileNotFoundError:
        logger.error("Command not found: %s", argv[0])
        return COMMAND_NOT_FOUND


class TestExecutor:
    __test__ = False

    def __init__(self, project_dir: Path):
        self.project_dir = Path(project_dir)

    def supports_selector(self, selector: str) -> bool:
        return True

    def run(self, test_modules: List[str], selector: str = DEFAULT_SELECTOR) -> int:
        raise NotImplementedError


class EftestExecutor(TestExecutor):
    """``lein eftest <selector> ns...``"""

    def __init__(self, project_dir: Path, settings: CljSettings):
        super().__init__(project_dir)
        self.settings = settings

    def command(self, test_modules: List[str], selector: str) -> List[str]:
        return [*self.settings.test_command, selector, *test_modules]

    def run(self, test_modules: List[str], selector: str = DEFAULT_SELECTOR) -> int:
        return run_command(self.command(test_modules, selector), self.project_dir)


class ShadowKarmaExecutor(TestExecutor):
    """Compile a shadow-cljs test build scoped to *test_modules*, then run it.

    The runner is skipped when compilation fails; the build config is restored
    either way.
    """

    def __init__(self, project_dir: Path, settings: CljsSettings):
        super().__init__(project_dir)
        self.settings = settings

    @property
    def build_config_path(self) -> Path:
        return self.project_dir / self.settings.build_config

    def supports_selector(self, selector: str) -> bool:
        return selector == DEFAULT_SELECTOR

    def run(self, test_modules: List[str], selector: str = DEFAULT_SELECTOR) -> int:
        pattern = ns_regexp_for(test_modules)
        with patched_build_config(self.build_config_path, self.settings.build_id, pattern):
            code = run_command(self.settings.compile_command, self.project_dir)
            if code != 0:
                logger.warning("Test build failed with exit code %d", code)
                return code
            return run_command(self.settings.run_command, self.project_dir)
