"""Configuration defaults for active-git-branches.

Branch limits, git ref prefixes, subprocess timeouts, and the runtime
settings that can be overridden from the environment.
"""

from __future__ import annotations

import os
from pathlib import Path


def _env_int(key: str, default: int) -> int:
    """Read an integer from an environment variable, returning default on parse failure."""
    try:
        return int(os.environ.get(key, str(default)))
    except (ValueError, TypeError):
        return default


# ============================================================================
# Branch Limits
# ============================================================================

DEFAULT_MAX_COUNT: int = 10
"""Branch count used when the caller supplies a non-positive maximum."""

MAX_COUNT_WARN_THRESHOLD: int = 100
"""Counts above this are accepted but flagged as a performance concern."""

ACCEPTED_URL_PREFIXES: tuple[str, ...] = ("http://", "https://", "git@", "ssh://")
"""Repository URL prefixes accepted without a warning."""


# ============================================================================
# Git Ref Layout
# ============================================================================

REMOTE_NAME: str = "origin"
"""The single remote every mirror and clone is assumed to track."""

HEADS_PREFIX: str = "refs/heads/"
"""Prefix of branch refs as advertised by the remote."""

REMOTE_TRACKING_PREFIX: str = f"refs/remotes/{REMOTE_NAME}/"
"""Prefix of remote-tracking refs in a local mirror."""

SYMBOLIC_HEAD: str = "HEAD"
"""Symbolic pointer that is never reported as a branch."""

FETCH_REFSPEC: str = f"+{HEADS_PREFIX}*:{REMOTE_TRACKING_PREFIX}*"
"""Refspec that mirrors every upstream branch, including new ones."""

TEMP_DIR_PREFIX: str = "active-branches-"
"""Prefix for request-scoped temporary clone directories."""


# ============================================================================
# Subprocess Timeout Constants (seconds)
# ============================================================================

TIMEOUT_GIT_TRANSFER: int = 120
"""Timeout for git clone/fetch/ls-remote (network-bound)."""

TIMEOUT_GIT_QUERY: int = 10
"""Timeout for git for-each-ref/rev-parse (local)."""

GIT_ATTEMPTS: int = 2
"""Attempts for network-bound git commands before giving up."""


# ============================================================================
# Runtime Settings (read from environment)
# ============================================================================


def get_debug() -> int:
    """Get ACTIVE_BRANCHES_DEBUG flag from environment.

    Returns:
        1 if enabled, 0 if disabled (default)
    """
    return _env_int("ACTIVE_BRANCHES_DEBUG", 0)


def get_git_attempts() -> int:
    """Get the retry budget for network git commands.

    Returns:
        Number of attempts (default: GIT_ATTEMPTS, never below 1)
    """
    return max(1, _env_int("ACTIVE_BRANCHES_GIT_ATTEMPTS", GIT_ATTEMPTS))


def get_transfer_timeout() -> int:
    """Get the per-attempt timeout for network git commands.

    Returns:
        Seconds (default: TIMEOUT_GIT_TRANSFER)
    """
    return _env_int("ACTIVE_BRANCHES_TIMEOUT_TRANSFER", TIMEOUT_GIT_TRANSFER)


def get_query_timeout() -> int:
    """Get the timeout for local git queries.

    Returns:
        Seconds (default: TIMEOUT_GIT_QUERY)
    """
    return _env_int("ACTIVE_BRANCHES_TIMEOUT_QUERY", TIMEOUT_GIT_QUERY)


def get_credentials_file() -> Path | None:
    """Get the credentials store path from environment.

    Returns:
        Path to the JSON credentials file, or None when unset
    """
    value = os.environ.get("ACTIVE_BRANCHES_CREDENTIALS_FILE", "")
    if value:
        return Path(value).expanduser()
    return None
