"""Scope a shadow-cljs test build to a chosen set of test namespaces.

The build's ``:ns-regexp`` is rewritten in place before compilation and the
original bytes are written back afterwards, whatever happens in between. A
process killed between the two steps leaves the file patched; restore it from
version control in that case.
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator

from .errors import BuildConfigError
from .mapper import module_alternation

logger = logging.getLogger(__name__)

_NS_REGEXP = re.compile(r'(:ns-regexp\s+)"((?:[^"\\]|\\.)*)"')


def ns_regexp_for(test_modules: Iterable[str]) -> str:
    return f"^({module_alternation(test_modules)})$"


def _edn_string(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _map_end(text: str, start: int) -> int:
    """Index just past the ``}`` closing the map that opens at *start*."""
    depth = 0
    i = start
    while i < len(text):
        ch = text[i]
        if ch == '"':
            i += 1
            while i < len(text) and text[i] != '"':
                i += 2 if text[i] == "\\" else 1
        elif ch == ";":
            newline = text.find("\n", i)
            i = len(text) if newline == -1 else newline
        elif ch in "{[(":
            depth += 1
        elif ch in "}])":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    raise BuildConfigError("Unbalanced brackets in build config")


def rewrite_ns_regexp(text: str, build_id: str, pattern: str) -> str:
    """Return *text* with the ``:ns-regexp`` of build *build_id* set to *pattern*.

    Only the build's own map is searched.

    Raises:
        BuildConfigError: if the build or its ``:ns-regexp`` entry is missing.
    """
    build = re.search(rf"(?<![\w\-:.]):{re.escape(build_id)}\s*(?=\{{)", text)
    if build is None:
        raise BuildConfigError(f"Build :{build_id} not found in build config")

    body_end = _map_end(text, build.end())
    field = _NS_REGEXP.search(text, build.end(), body_end)
    if field is None:
        raise BuildConfigError(f"Build :{build_id} has no :ns-regexp entry to scope")

    start, end = field.span(2)
    # span(2) excludes the quotes; replace the quoted literal as a whole.
    return text[: start - 1] + _edn_string(pattern) + text[end + 1 :]


@contextmanager
def patched_build_config(path: Path, build_id: str, pattern: str) -> Iterator[Path]:
    """Patch *path* for the duration of the ``with`` block."""
    path = Path(path)
    try:
        original = path.read_bytes()
    except OSError as exc:
        raise BuildConfigError(f"Cannot read build config {path}: {exc}") from exc

    patched = rewrite_ns_regexp(original.decode("utf-8"), build_id, pattern)
    logger.debug("Scoping %s :%s to %s", path, build_id, pattern)
    try:
        path.write_text(patched, encoding="utf-8")
        yield path
    finally:
        path.write_bytes(original)
        logger.debug("Restored %s", path)
