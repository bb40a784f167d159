"""Variant records for the primary (clj) and secondary (cljs) source trees."""

from __future__ import annotations

from typing import List

from .config_manager import ProjectSettings, VariantSettings
from .models import Variant

PRIMARY = "clj"
SECONDARY = "cljs"
BOTH = "both"
LANGUAGES = (PRIMARY, SECONDARY, BOTH)


def _build(name: str, settings: VariantSettings) -> Variant:
    # Longest prefix first so "src/clj" wins over "src".
    source_paths = tuple(
        sorted((p.rstrip("/") for p in settings.source_paths), key=len, reverse=True)
    )
    return Variant(
        name=name,
        extensions=tuple(settings.extensions),
        source_paths=source_paths,
        source_root=settings.source_root.rstrip("/"),
        test_root=settings.test_root.rstrip("/"),
    )


def variant_for(name: str, settings: ProjectSettings) -> Variant:
    if name == PRIMARY:
        return _build(PRIMARY, settings.clj)
    if name == SECONDARY:
        return _build(SECONDARY, settings.cljs)
    raise ValueError(f"Unknown language variant: {name}")


def variants_for(lang: str, settings: ProjectSettings) -> List[Variant]:
    """Expand a CLI language selector into the variants to run, in order."""
    if lang == BOTH:
        return [variant_for(PRIMARY, settings), variant_for(SECONDARY, settings)]
    return [variant_for(lang, settings)]
