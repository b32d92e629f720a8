"""Git transport for branch discovery.

Defines the ``RemoteTransport`` capability the discovery engine consumes and
``GitCliTransport``, its implementation on top of the ``git`` executable.
Handles:
  - Retry wrapper with exponential backoff for network-bound git commands
  - Remote ref listing (ls-remote) without local storage
  - Shallow clone into a caller-owned directory
  - Fetch with prune into an existing mirror
  - Reading remote-tracking refs with their commit times

Nothing here writes to the upstream repository.
"""

from __future__ import annotations

import os
import shutil
import subprocess
import time
from pathlib import Path
from typing import Callable, Optional, Protocol

from active_branches.constants import (
    FETCH_REFSPEC,
    REMOTE_NAME,
    REMOTE_TRACKING_PREFIX,
    SYMBOLIC_HEAD,
    get_git_attempts,
    get_query_timeout,
    get_transfer_timeout,
)
from active_branches.errors import TransportError
from active_branches.models import GitCredentials
from active_branches.utils import LogSink, get_logger


class RemoteTransport(Protocol):
    """VCS access capability used by the acquisition strategies."""

    def list_remote_refs(
        self, url: str, credentials: Optional[GitCredentials]
    ) -> dict[str, str]:
        """Map every advertised ref name to its object id."""
        ...

    def shallow_clone(
        self, url: str, credentials: Optional[GitCredentials], destination: Path
    ) -> None:
        """Create a minimal-history copy of *url* in *destination*."""
        ...

    def fetch_and_prune(
        self, destination: Path, url: str, credentials: Optional[GitCredentials]
    ) -> None:
        """Update remote-tracking refs in *destination* and drop deleted ones."""
        ...

    def read_local_refs(self, destination: Path) -> list[tuple[str, int]]:
        """Return ``(branch, commit epoch ms)`` for each remote-tracking ref."""
        ...


# ============================================================================
# Core Git Operations
# ============================================================================


def _check_url(url: str) -> None:
    if url.startswith("-"):
        raise ValueError(f"repository URL must not start with '-': {url!r}")


def _git_env(credentials: Optional[GitCredentials]) -> dict[str, str]:
    env = dict(os.environ)
    # Never block on an interactive credential prompt.
    env["GIT_TERMINAL_PROMPT"] = "0"
    if credentials is not None:
        env.update(credentials.to_git_env())
    return env


def git_with_retry(
    args: list[str],
    *,
    max_attempts: Optional[int] = None,
    initial_delay: float = 1.0,
    timeout: Optional[int] = None,
    env: Optional[dict[str, str]] = None,
    sink: Optional[LogSink] = None,
    before_attempt: Optional[Callable[[], None]] = None,
    _sleep: Callable[[float], None] = time.sleep,
) -> subprocess.CompletedProcess[str]:
    """Run a git command with exponential backoff retry.

    Args:
        args: Git sub-command and arguments (e.g. ``["ls-remote", url]``).
        max_attempts: Maximum number of attempts (default from environment).
        initial_delay: Seconds to wait before first retry (doubles each retry).
        timeout: Per-attempt timeout in seconds (default from environment).
        env: Environment for the git process.
        sink: Where retry warnings are reported.
        before_attempt: Called before every attempt, e.g. to clear what a
            killed attempt left behind.
        _sleep: Injectable sleep function (for testing).

    Returns:
        The completed process from the successful attempt.

    Raises:
        TransportError: If all attempts fail, with the last stderr output.
    """
    attempts = max_attempts if max_attempts is not None else get_git_attempts()
    per_attempt = timeout if timeout is not None else get_transfer_timeout()
    log = sink if sink is not None else get_logger()
    delay = initial_delay
    last_error = "unknown error"

    for attempt in range(1, attempts + 1):
        if before_attempt is not None:
            before_attempt()
        try:
            result = subprocess.run(
                ["git", *args],
                capture_output=True,
                text=True,
                check=False,
                timeout=per_attempt,
                env=env,
            )
        except subprocess.TimeoutExpired:
            last_error = f"timed out after {per_attempt}s"
        except OSError as exc:
            raise TransportError(f"Unable to run git: {exc}") from exc
        else:
            if result.returncode == 0:
                return result
            last_error = result.stderr.strip() if result.stderr else f"exit code {result.returncode}"

        if attempt < attempts:
            log.warning(
                "Git command failed (attempt %d/%d). Retrying in %.0fs...",
                attempt, attempts, delay,
            )
            _sleep(delay)
            delay *= 2

    msg = f"Git command failed after {attempts} attempts: git {args[0]}"
    if last_error:
        msg += f"\n{last_error}"
    raise TransportError(msg)


def git_query(repo_path: str | Path, args: list[str]) -> subprocess.CompletedProcess[str]:
    """Run a local, read-only git command in *repo_path* (no retry).

    Raises:
        TransportError: If git exits non-zero, times out, or cannot be run.
    """
    timeout = get_query_timeout()
    try:
        result = subprocess.run(
            ["git", "-C", str(repo_path), *args],
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        raise TransportError(f"git {args[0]} timed out after {timeout}s") from exc
    except OSError as exc:
        raise TransportError(f"Unable to run git: {exc}") from exc
    if result.returncode != 0:
        raise TransportError(
            f"git {args[0]} failed in {repo_path}: {result.stderr.strip()}"
        )
    return result


def has_git_metadata(path: str | Path) -> bool:
    """Check whether *path* is a working tree or a bare mirror.

    Args:
        path: Candidate workspace directory.

    Returns:
        True if *path* holds a ``.git`` entry (directory or gitfile) or
        is itself a bare repository.
    """
    p = Path(path)
    if not p.is_dir():
        return False
    if (p / ".git").exists():
        return True
    return (p / "HEAD").is_file() and (p / "objects").is_dir() and (p / "refs").is_dir()


def parse_ls_remote(output: str) -> dict[str, str]:
    """Parse ``git ls-remote`` output into ``{ref: object id}``.

    Peeled tag entries (``^{}``) are skipped.
    """
    refs: dict[str, str] = {}
    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue
        object_id, _, ref = line.partition("\t")
        if not ref or ref.endswith("^{}"):
            continue
        refs[ref] = object_id
    return refs


def parse_for_each_ref(output: str) -> list[tuple[str, int]]:
    """Parse ``refname<TAB>committer unix time`` lines into branch records.

    Refs outside ``refs/remotes/origin/`` and the symbolic HEAD are dropped.
    A ref whose commit time is missing or unparsable gets 0.
    """
    branches: list[tuple[str, int]] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        refname, _, committed = line.partition("\t")
        if not refname.startswith(REMOTE_TRACKING_PREFIX):
            continue
        name = refname[len(REMOTE_TRACKING_PREFIX):]
        if not name or name == SYMBOLIC_HEAD:
            continue
        try:
            timestamp = int(committed.strip()) * 1000
        except ValueError:
            timestamp = 0
        branches.append((name, max(timestamp, 0)))
    return branches


# ============================================================================
# Git CLI Transport
# ============================================================================


class GitCliTransport:
    """``RemoteTransport`` backed by the git command line client."""

    def __init__(
        self,
        *,
        max_attempts: Optional[int] = None,
        sink: Optional[LogSink] = None,
        _sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._max_attempts = max_attempts
        self._sink = sink if sink is not None else get_logger()
        self._sleep = _sleep

    def _retry(
        self,
        args: list[str],
        credentials: Optional[GitCredentials],
        before_attempt: Optional[Callable[[], None]] = None,
    ) -> subprocess.CompletedProcess[str]:
        return git_with_retry(
            args,
            max_attempts=self._max_attempts,
            env=_git_env(credentials),
            sink=self._sink,
            before_attempt=before_attempt,
            _sleep=self._sleep,
        )

    def list_remote_refs(
        self, url: str, credentials: Optional[GitCredentials]
    ) -> dict[str, str]:
        _check_url(url)
        result = self._retry(["ls-remote", url], credentials)
        return parse_ls_remote(result.stdout)

    def shallow_clone(
        self, url: str, credentials: Optional[GitCredentials], destination: Path
    ) -> None:
        _check_url(url)
        self._retry(
            [
                "clone",
                "--depth", "1",
                "--no-single-branch",
                "--no-checkout",
                "--no-tags",
                "--origin", REMOTE_NAME,
                "--",
                url,
                str(destination),
            ],
            credentials,
            # git cannot clean up after itself when a timed-out attempt is killed
            before_attempt=lambda: shutil.rmtree(destination, ignore_errors=True),
        )

    def fetch_and_prune(
        self, destination: Path, url: str, credentials: Optional[GitCredentials]
    ) -> None:
        _check_url(url)
        self._retry(
            ["-C", str(destination), "fetch", "--prune", "--no-tags", url, FETCH_REFSPEC],
            credentials,
        )

    def read_local_refs(self, destination: Path) -> list[tuple[str, int]]:
        result = git_query(
            destination,
            [
                "for-each-ref",
                "--format=%(refname)%09%(committerdate:unix)",
                REMOTE_TRACKING_PREFIX.rstrip("/"),
            ],
        )
        return parse_for_each_ref(result.stdout)
