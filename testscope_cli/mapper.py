"""Map Clojure file paths to namespace identifiers and back to search literals."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Iterable

from .config import TEST_SUFFIX
from .models import Variant

# Characters that may appear in a namespace segment. Anything else ends a token.
IDENT_CHARS = "[:alnum:]._*+!?-"
NON_IDENT = f"[^{IDENT_CHARS}]"

_ERE_SPECIALS = set(".[]{}()\\*+?^$|")


def _normalise(path: str) -> str:
    posix = PurePosixPath(path.replace("\\", "/")).as_posix()
    if posix.startswith("./"):
        posix = posix[2:]
    return posix


def file_to_module(path: str, variant: Variant) -> str:
    """Convert a source file path into its namespace name.

    ``src/clj/app/user_api.clj`` becomes ``app.user-api`` for the clj variant.

    Raises:
        ValueError: if the file does not carry one of the variant's extensions.
    """
    rel = _normalise(path)

    for ext in sorted(variant.extensions, key=len, reverse=True):
        if rel.endswith(ext):
            rel = rel[: -len(ext)]
            break
    else:
        raise ValueError(f"{path} is not a {variant.name} source file")

    for prefix in variant.source_paths:
        if rel.startswith(prefix + "/"):
            rel = rel[len(prefix) + 1 :]
            break

    return rel.replace("/", ".").replace("_", "-")


def module_to_test_module(module: str) -> str:
    return module + TEST_SUFFIX


def escape_module(module: str) -> str:
    """Escape a namespace for literal use in ERE and Rust regex syntax."""
    return "".join("\\" + ch if ch in _ERE_SPECIALS else ch for ch in module)


def module_alternation(modules: Iterable[str]) -> str:
    return "|".join(escape_module(m) for m in sorted(set(modules)))
