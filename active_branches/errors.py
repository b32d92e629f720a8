"""Exception hierarchy for active-git-branches.

Callers can catch the broad category (``BranchDiscoveryError``) or a
specific failure mode.

This module is a base-layer module: it must NOT import from any
other ``active_branches`` submodule.
"""

from __future__ import annotations


class BranchDiscoveryError(Exception):
    """Base exception for all active-git-branches errors."""


class ConfigurationError(BranchDiscoveryError):
    """Bad caller input (empty repository URL, etc.). Never retried."""


class TransportError(BranchDiscoveryError):
    """Network, authentication or remote-not-found failures from git."""


class PatternError(BranchDiscoveryError):
    """A branch pattern failed to compile as a regular expression."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid regex pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason
