from __future__ import annotations

import base64
import shlex
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from active_branches.constants import DEFAULT_MAX_COUNT


class SortMode(str, Enum):
    """Ordering applied to a discovery result."""

    RECENCY = "recency"
    """Newest commit first; records with unknown timestamps sort last."""

    NAME = "name"
    """Case-insensitive name order. Not recency-based."""


class BranchRecord(BaseModel):
    """A single discovered branch.

    Identity is ``name``. A ``commit_timestamp`` of ``None`` or ``0`` means
    the commit time is unknown and the branch is treated as the oldest.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    """Short branch name without the remote prefix."""

    commit_timestamp: Optional[int] = None
    """Commit time in epoch milliseconds."""

    @property
    def has_timestamp(self) -> bool:
        return bool(self.commit_timestamp)

    @property
    def sort_timestamp(self) -> int:
        return self.commit_timestamp or 0


class DiscoveryConfig(BaseModel):
    """Per-call discovery configuration.

    ``max_count`` values of zero or below are coerced to the default at
    construction, so every consumer sees a positive limit.
    """

    model_config = ConfigDict(frozen=True)

    repository_url: str
    """Remote repository URL (required non-empty at discovery time)."""

    credentials_id: Optional[str] = None
    """Opaque identifier handed to the credentials provider."""

    max_count: int = DEFAULT_MAX_COUNT
    """Maximum number of branches to return (mandatory ones excepted)."""

    filter_pattern: Optional[str] = None
    """Branch name regex; unset matches every branch."""

    mandatory_pattern: Optional[str] = None
    """Branch name regex for branches that are never dropped."""

    prefer_low_latency: bool = True
    """Use ls-remote instead of a shallow clone when no workspace is usable."""

    default_value: Optional[str] = None
    """Preselected branch for the parameter value; newest branch when unset."""

    @field_validator("repository_url")
    @classmethod
    def _strip_url(cls, value: str) -> str:
        return value.strip()

    @field_validator("max_count", mode="before")
    @classmethod
    def _coerce_max_count(cls, value: object) -> object:
        if value is None or value == "":
            return DEFAULT_MAX_COUNT
        return value

    @field_validator("max_count")
    @classmethod
    def _positive_max_count(cls, value: int) -> int:
        return value if value > 0 else DEFAULT_MAX_COUNT

    @field_validator("credentials_id", "filter_pattern", "mandatory_pattern", "default_value")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value


class ExecutionContext(BaseModel):
    """Hint about a pre-existing local mirror of the target repository."""

    model_config = ConfigDict(frozen=True)

    workspace: Optional[Path] = None
    """Directory of a local mirror, or None when there is none."""

    @classmethod
    def none(cls) -> ExecutionContext:
        return cls()

    @classmethod
    def for_workspace(cls, path: str | Path) -> ExecutionContext:
        return cls(workspace=Path(path).expanduser())


class DiscoveryResult(BaseModel):
    """Ordered branches produced by one discovery run."""

    branches: list[BranchRecord] = Field(default_factory=list)
    """Branches in relevance order for ``sort_mode``."""

    sort_mode: SortMode = SortMode.NAME
    """Ordering the branches follow."""

    strategy: str = ""
    """Acquisition strategy that produced the raw data (empty on failure)."""

    def __iter__(self) -> Iterator[BranchRecord]:  # type: ignore[override]
        return iter(self.branches)

    def __len__(self) -> int:
        return len(self.branches)

    def names(self) -> list[str]:
        return [b.name for b in self.branches]

    @property
    def latest(self) -> Optional[str]:
        """First branch name, or None for an empty result."""
        return self.branches[0].name if self.branches else None


class GitCredentials(BaseModel):
    """Transport-usable credential resolved for a repository URL."""

    model_config = ConfigDict(frozen=True)

    username: str = ""
    """User name for HTTP(S) basic authentication."""

    password: SecretStr = SecretStr("")
    """Password or access token for HTTP(S) basic authentication."""

    ssh_key_path: str = ""
    """Private key for SSH remotes."""

    def to_git_env(self) -> dict[str, str]:
        """Convert to environment variables understood by the git CLI.

        Basic auth is passed as an ``http.extraHeader`` through
        ``GIT_CONFIG_*`` so the secret never appears in argv or the URL.
        """
        env: dict[str, str] = {"GIT_TERMINAL_PROMPT": "0"}
        secret = self.password.get_secret_value()
        if self.username or secret:
            token = base64.b64encode(f"{self.username}:{secret}".encode()).decode()
            env.update({
                "GIT_CONFIG_COUNT": "1",
                "GIT_CONFIG_KEY_0": "http.extraHeader",
                "GIT_CONFIG_VALUE_0": f"Authorization: Basic {token}",
            })
        if self.ssh_key_path:
            env["GIT_SSH_COMMAND"] = (
                f"ssh -i {shlex.quote(self.ssh_key_path)} -o IdentitiesOnly=yes -o BatchMode=yes"
            )
        return env


class BranchParameterValue(BaseModel):
    """Selected branch handed to the job runner as a string parameter."""

    name: str
    """Parameter name."""

    value: str = ""
    """Selected branch name."""

    description: str = ""
    """Parameter description."""

    def __str__(self) -> str:
        return f"(BranchParameterValue) {self.name}='{self.value}'"
