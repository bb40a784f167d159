"""Project configuration for testscope using TOML files."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Tuple

import toml

from . import config

logger = logging.getLogger(__name__)


@dataclass
class VariantSettings:
    source_paths: Tuple[str, ...]
    extensions: Tuple[str, ...]
    source_root: str = "src"
    test_root: str = "test"


@dataclass
class CljSettings(VariantSettings):
    test_command: Tuple[str, ...] = config.CLJ_TEST_COMMAND


@dataclass
class CljsSettings(VariantSettings):
    build_config: str = config.CLJS_BUILD_CONFIG
    build_id: str = config.CLJS_BUILD_ID
    compile_command: Tuple[str, ...] = config.CLJS_COMPILE_COMMAND
    run_command: Tuple[str, ...] = config.CLJS_RUN_COMMAND


@dataclass
class ProjectSettings:
    """Effective settings: defaults overlaid with the project's TOML file."""

    base_ref: str = config.DEFAULT_BASE_REF
    include_worktree: bool = False
    clj: CljSettings = field(
        default_factory=lambda: CljSettings(
            source_paths=config.SOURCE_PATHS,
            extensions=config.CLJ_EXTENSIONS,
        )
    )
    cljs: CljsSettings = field(
        default_factory=lambda: CljsSettings(
            source_paths=config.SOURCE_PATHS,
            extensions=config.CLJS_EXTENSIONS,
        )
    )


def config_path(project_dir: Path) -> Path:
    return project_dir / config.CONFIG_FILE_NAME


def load_full_config(project_dir: Path) -> Dict[str, Any]:
    """Load the entire TOML config (all sections).

    Returns an empty dict when the file is missing or cannot be parsed.
    """
    path = config_path(project_dir)
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            return toml.load(f)
    except (OSError, toml.TomlDecodeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)
        return {}


def _overlay(target: Any, section: Dict[str, Any]) -> None:
    for key, value in section.items():
        if not hasattr(target, key):
            logger.warning("Unknown config key '%s' ignored", key)
            continue
        if isinstance(value, list):
            value = tuple(value)
        setattr(target, key, value)


def load_settings(project_dir: Path) -> ProjectSettings:
    """Build :class:`ProjectSettings` for *project_dir*."""
    raw = load_full_config(project_dir)
    settings = ProjectSettings()

    general = raw.get("general", {})
    if "base_ref" in general:
        settings.base_ref = str(general["base_ref"])
    if "include_worktree" in general:
        settings.include_worktree = bool(general["include_worktree"])

    _overlay(settings.clj, raw.get("clj", {}))
    _overlay(settings.cljs, raw.get("cljs", {}))
    return settings


def settings_to_dict(settings: ProjectSettings) -> Dict[str, Any]:
    """Serialise settings into the TOML section layout."""

    def _section(obj: Any) -> Dict[str, Any]:
        return {
            key: list(value) if isinstance(value, tuple) else value
            for key, value in vars(obj).items()
        }

    return {
        "general": {
            "base_ref": settings.base_ref,
            "include_worktree": settings.include_worktree,
        },
        "clj": _section(settings.clj),
        "cljs": _section(settings.cljs),
    }


def save_default_config(project_dir: Path, overwrite: bool = False) -> bool:
    """Write a default ``testscope.toml`` into *project_dir*.

    Returns:
        True if the file was written, False if it already existed.
    """
    path = config_path(project_dir)
    if path.exists() and not overwrite:
        return False
    with open(path, "w", encoding="utf-8") as f:
        toml.dump(settings_to_dict(ProjectSettings()), f)
    return True
