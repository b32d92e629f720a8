"""Branch discovery orchestration.

``BranchDiscovery`` runs the acquisition strategies in priority order and
funnels whichever result it gets through the same filter, limit and sort
stage:

    INIT -> TRY_WORKSPACE -> TRY_PRIMARY_FALLBACK -> TRY_SECONDARY_FALLBACK
         -> FILTERED -> LIMITED -> DONE

``FAILED`` is reached only when every applicable strategy failed hard.
The primary fallback is ``QuickRemoteList`` when ``prefer_low_latency`` is
set (the default) and ``FullClone`` otherwise; the secondary fallback is the
other one and is only tried after the primary failed.

Module-level helpers wrap the orchestrator for the three ways callers use
it: ``discover`` (raises), ``fetch_branches`` (never raises, for list
population) and ``check_connection`` (surfaces errors verbatim).
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from active_branches.credentials import CredentialsProvider, default_credentials_provider
from active_branches.errors import BranchDiscoveryError, ConfigurationError, TransportError
from active_branches.filters import BranchFilter
from active_branches.limiter import apply_limit, filter_records, sort_records
from active_branches.models import (
    BranchParameterValue,
    DiscoveryConfig,
    DiscoveryResult,
    ExecutionContext,
)
from active_branches.strategies import (
    AcquisitionStrategy,
    FullClone,
    HardError,
    NotApplicable,
    QuickRemoteList,
    Success,
    WorkspaceRefresh,
)
from active_branches.transport import GitCliTransport, RemoteTransport
from active_branches.utils import LogSink, get_logger


class DiscoveryState(Enum):
    """Orchestrator states."""
    INIT = "INIT"
    TRY_WORKSPACE = "TRY_WORKSPACE"
    TRY_PRIMARY_FALLBACK = "TRY_PRIMARY_FALLBACK"
    TRY_SECONDARY_FALLBACK = "TRY_SECONDARY_FALLBACK"
    FILTERED = "FILTERED"
    LIMITED = "LIMITED"
    DONE = "DONE"
    FAILED = "FAILED"


class ConnectionStatus(str, Enum):
    """Outcome level of an explicit connectivity check."""
    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


class BranchDiscovery:
    """Resolve the active branches of a repository.

    The orchestrator keeps no state between calls other than the
    collaborators it was built with; ``state`` reflects the last run.
    """

    def __init__(
        self,
        transport: Optional[RemoteTransport] = None,
        credentials: Optional[CredentialsProvider] = None,
        *,
        sink: Optional[LogSink] = None,
    ) -> None:
        self.sink = sink if sink is not None else get_logger()
        self.transport = transport if transport is not None else GitCliTransport(sink=self.sink)
        self.credentials = (
            credentials if credentials is not None else default_credentials_provider(sink=self.sink)
        )
        self.state = DiscoveryState.INIT

    def _transition(self, state: DiscoveryState) -> None:
        self.sink.debug("Discovery state %s -> %s", self.state.value, state.value)
        self.state = state

    def plan(self, config: DiscoveryConfig) -> list[tuple[DiscoveryState, AcquisitionStrategy]]:
        """Return the strategies to try, in order, for *config*."""
        workspace = WorkspaceRefresh(self.transport, sink=self.sink)
        quick = QuickRemoteList(self.transport, sink=self.sink)
        clone = FullClone(self.transport, sink=self.sink)
        primary, secondary = (quick, clone) if config.prefer_low_latency else (clone, quick)
        return [
            (DiscoveryState.TRY_WORKSPACE, workspace),
            (DiscoveryState.TRY_PRIMARY_FALLBACK, primary),
            (DiscoveryState.TRY_SECONDARY_FALLBACK, secondary),
        ]

    def discover(
        self, config: DiscoveryConfig, context: Optional[ExecutionContext] = None
    ) -> DiscoveryResult:
        """Run one discovery.

        Args:
            config: What to discover and how to shape it.
            context: Optional hint naming a local mirror of the repository.

        Returns:
            The filtered, limited and sorted branches. Empty when the
            repository (or the filter) yields no branches.

        Raises:
            ConfigurationError: If the repository URL is empty or malformed.
            TransportError: If every applicable strategy failed.
        """
        self.state = DiscoveryState.INIT
        url = config.repository_url
        if not url:
            raise ConfigurationError("Repository URL is not configured")
        if url.startswith("-"):
            raise ConfigurationError(f"Repository URL must not start with '-': {url!r}")

        credentials = self.credentials.lookup(config.credentials_id, url)
        branch_filter = BranchFilter.from_config(config, sink=self.sink)

        success: Optional[Success] = None
        strategy_name = ""
        errors: list[Exception] = []
        for state, strategy in self.plan(config):
            self._transition(state)
            outcome = strategy.produce(config, context, credentials)
            if isinstance(outcome, Success):
                success = outcome
                strategy_name = strategy.name
                break
            if isinstance(outcome, NotApplicable):
                self.sink.debug("Strategy %s not applicable: %s", strategy.name, outcome.reason)
            elif isinstance(outcome, HardError):
                self.sink.warning("Strategy %s failed: %s", strategy.name, outcome.error)
                errors.append(outcome.error)

        if success is None:
            self._transition(DiscoveryState.FAILED)
            if errors:
                raise TransportError(
                    f"Failed to fetch branches from {url}: {errors[-1]}"
                ) from errors[-1]
            raise TransportError(f"No strategy could fetch branches from {url}")

        self.sink.info(
            "Fetched %d branches with %s (%s order)",
            len(success.records), strategy_name, success.sort_mode.value,
        )

        self._transition(DiscoveryState.FILTERED)
        records = sort_records(filter_records(success.records, branch_filter), success.sort_mode)

        self._transition(DiscoveryState.LIMITED)
        records = apply_limit(records, config.max_count, branch_filter, success.sort_mode)

        self._transition(DiscoveryState.DONE)
        result = DiscoveryResult(branches=records, sort_mode=success.sort_mode, strategy=strategy_name)
        self.sink.debug("Discovered branches: %s", ", ".join(result.names()) or "(none)")
        return result


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def discover(
    config: DiscoveryConfig,
    context: Optional[ExecutionContext] = None,
    *,
    transport: Optional[RemoteTransport] = None,
    credentials: Optional[CredentialsProvider] = None,
    sink: Optional[LogSink] = None,
) -> DiscoveryResult:
    """Discover the active branches for *config*. See ``BranchDiscovery.discover``."""
    return BranchDiscovery(transport, credentials, sink=sink).discover(config, context)


def fetch_branches(
    config: DiscoveryConfig,
    context: Optional[ExecutionContext] = None,
    *,
    transport: Optional[RemoteTransport] = None,
    credentials: Optional[CredentialsProvider] = None,
    sink: Optional[LogSink] = None,
) -> DiscoveryResult:
    """Discover branches for presentation, returning an empty result on failure."""
    log = sink if sink is not None else get_logger()
    try:
        return discover(config, context, transport=transport, credentials=credentials, sink=log)
    except BranchDiscoveryError as exc:
        log.warning("Failed to fetch branches from repository %s: %s", config.repository_url, exc)
        return DiscoveryResult()


def check_connection(
    config: DiscoveryConfig,
    context: Optional[ExecutionContext] = None,
    *,
    transport: Optional[RemoteTransport] = None,
    credentials: Optional[CredentialsProvider] = None,
    sink: Optional[LogSink] = None,
) -> tuple[ConnectionStatus, str]:
    """Check that branches can be fetched, surfacing errors verbatim.

    Returns:
        Tuple of (status, message).
    """
    if not config.repository_url:
        return ConnectionStatus.ERROR, "Repository URL is required"
    try:
        result = discover(config, context, transport=transport, credentials=credentials, sink=sink)
    except BranchDiscoveryError as exc:
        return ConnectionStatus.ERROR, f"Failed to connect: {exc}"

    if not result.branches:
        return (
            ConnectionStatus.WARNING,
            "Connection successful, but no branches found matching the filter",
        )
    return (
        ConnectionStatus.OK,
        f"Success! Found {len(result)} branches. Latest: {result.latest}",
    )


def default_parameter_value(
    config: DiscoveryConfig,
    parameter_name: str,
    description: str = "",
    context: Optional[ExecutionContext] = None,
    *,
    transport: Optional[RemoteTransport] = None,
    credentials: Optional[CredentialsProvider] = None,
    sink: Optional[LogSink] = None,
) -> BranchParameterValue:
    """Build the parameter value used when the caller picks nothing.

    The configured default wins; otherwise the first discovered branch
    (the newest one in recency order), otherwise an empty string.
    """
    value = config.default_value
    if not value:
        result = fetch_branches(
            config, context, transport=transport, credentials=credentials, sink=sink
        )
        value = result.latest or ""
    return BranchParameterValue(name=parameter_name, value=value, description=description)
