"""Branch acquisition strategies.

Each strategy turns a repository into a raw, unfiltered list of
``BranchRecord`` and reports the outcome as one of three variants:

  - ``Success``: the strategy applied; its records may legitimately be empty
  - ``NotApplicable``: the strategy had nothing to work with; try the next one
  - ``HardError``: the strategy applied but the transport failed

Strategies:
  - ``WorkspaceRefresh``: fetch + prune into an existing mirror, then read
    its remote-tracking refs (recency order, amortized network cost)
  - ``QuickRemoteList``: ls-remote only (name order, no timestamps)
  - ``FullClone``: shallow clone into a temporary directory (recency order)
"""

from __future__ import annotations

import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from active_branches.constants import HEADS_PREFIX, SYMBOLIC_HEAD, TEMP_DIR_PREFIX
from active_branches.errors import TransportError
from active_branches.models import (
    BranchRecord,
    DiscoveryConfig,
    ExecutionContext,
    GitCredentials,
    SortMode,
)
from active_branches.transport import RemoteTransport, has_git_metadata
from active_branches.utils import LogSink, get_logger


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Success:
    """Strategy applied and produced raw records in ``sort_mode``."""

    records: list[BranchRecord] = field(default_factory=list)
    sort_mode: SortMode = SortMode.RECENCY


@dataclass(frozen=True)
class NotApplicable:
    """Strategy could not be used in this context."""

    reason: str


@dataclass(frozen=True)
class HardError:
    """Strategy applied but failed."""

    error: Exception


Outcome = Union[Success, NotApplicable, HardError]


def _records_from_local_refs(refs: list[tuple[str, int]]) -> list[BranchRecord]:
    return [BranchRecord(name=name, commit_timestamp=timestamp) for name, timestamp in refs]


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


class AcquisitionStrategy:
    """Base class: produce raw branch records for a repository."""

    name = "strategy"

    def __init__(self, transport: RemoteTransport, *, sink: Optional[LogSink] = None) -> None:
        self.transport = transport
        self.sink = sink if sink is not None else get_logger()

    def produce(
        self,
        config: DiscoveryConfig,
        context: Optional[ExecutionContext],
        credentials: Optional[GitCredentials],
    ) -> Outcome:
        raise NotImplementedError


class WorkspaceRefresh(AcquisitionStrategy):
    """Refresh a pre-existing local mirror and read its refs.

    A failed fetch is not fatal: stale local refs are still better than
    no answer. An empty mirror is reported as not applicable so that it is
    never mistaken for a repository with zero branches.
    """

    name = "workspace-refresh"

    def produce(
        self,
        config: DiscoveryConfig,
        context: Optional[ExecutionContext],
        credentials: Optional[GitCredentials],
    ) -> Outcome:
        workspace = context.workspace if context is not None else None
        if workspace is None:
            return NotApplicable("no workspace in execution context")
        if not workspace.is_dir():
            return NotApplicable(f"workspace does not exist: {workspace}")
        if not has_git_metadata(workspace):
            return NotApplicable(f"no git metadata in workspace: {workspace}")

        self.sink.info("Using existing workspace for branch fetch: %s", workspace)
        try:
            self.transport.fetch_and_prune(workspace, config.repository_url, credentials)
            self.sink.info("Fetched latest refs from remote (with prune)")
        except TransportError as exc:
            self.sink.warning("Failed to fetch from remote, using cached refs: %s", exc)

        try:
            refs = self.transport.read_local_refs(workspace)
        except TransportError as exc:
            return NotApplicable(f"could not read local refs: {exc}")

        if not refs:
            return NotApplicable("no local refs found in workspace")

        self.sink.info("Using local refs (%d branches)", len(refs))
        return Success(_records_from_local_refs(refs), SortMode.RECENCY)


class QuickRemoteList(AcquisitionStrategy):
    """List branch heads with ls-remote.

    No clone is needed, but ls-remote carries no commit times, so results
    come back in name order rather than by recency.
    """

    name = "quick-remote-list"

    def produce(
        self,
        config: DiscoveryConfig,
        context: Optional[ExecutionContext],
        credentials: Optional[GitCredentials],
    ) -> Outcome:
        try:
            refs = self.transport.list_remote_refs(config.repository_url, credentials)
        except TransportError as exc:
            return HardError(exc)

        records = []
        for ref in refs:
            if not ref.startswith(HEADS_PREFIX):
                continue
            branch = ref[len(HEADS_PREFIX):]
            if branch and branch != SYMBOLIC_HEAD:
                records.append(BranchRecord(name=branch))
        return Success(records, SortMode.NAME)


class FullClone(AcquisitionStrategy):
    """Shallow-clone into a temporary directory and read commit times.

    The temporary directory is removed on every exit path, including
    errors raised while reading refs.
    """

    name = "full-clone"

    def produce(
        self,
        config: DiscoveryConfig,
        context: Optional[ExecutionContext],
        credentials: Optional[GitCredentials],
    ) -> Outcome:
        try:
            with tempfile.TemporaryDirectory(prefix=TEMP_DIR_PREFIX) as tmp:
                destination = Path(tmp) / "mirror"
                self.transport.shallow_clone(config.repository_url, credentials, destination)
                refs = self.transport.read_local_refs(destination)
        except (TransportError, OSError) as exc:
            return HardError(exc)

        return Success(_records_from_local_refs(refs), SortMode.RECENCY)
