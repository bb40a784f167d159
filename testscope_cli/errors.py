"""Exceptions raised by the impact-analysis core."""

from __future__ import annotations


class TestscopeError(Exception):
    """Base class for errors the CLI reports and exits on."""

    __test__ = False


class SearchUnavailableError(TestscopeError):
    """No text-search program could be run on this host."""


class ChangedFilesError(TestscopeError):
    """The changed-file list could not be obtained from git."""


class BuildConfigError(TestscopeError):
    """The secondary build configuration could not be patched."""
