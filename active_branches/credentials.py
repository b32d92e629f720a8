"""Credential lookup for remote repositories.

The discovery engine treats credentials as opaque: it asks a
``CredentialsProvider`` for whatever matches an identifier and a repository
URL and hands the answer to the transport unchanged. ``JsonCredentialsStore``
is the file-backed provider used by the CLI.

Store format::

    {
      "github-bot": {
        "username": "bot",
        "password": "<token>",
        "url_prefix": "https://github.com/"
      },
      "deploy-key": {"ssh_key_path": "~/.ssh/deploy_ed25519"}
    }
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Protocol

from pydantic import ValidationError

from active_branches.config import load_json
from active_branches.constants import get_credentials_file
from active_branches.models import GitCredentials
from active_branches.utils import LogSink, get_logger


class CredentialsProvider(Protocol):
    """Resolve a transport-usable credential for a repository URL."""

    def lookup(self, credentials_id: Optional[str], repository_url: str) -> Optional[GitCredentials]:
        ...


class NoCredentials:
    """Provider that never resolves anything (anonymous access)."""

    def lookup(self, credentials_id: Optional[str], repository_url: str) -> Optional[GitCredentials]:
        return None


class JsonCredentialsStore:
    """Credentials read from a JSON file keyed by identifier."""

    def __init__(self, path: str | Path, *, sink: Optional[LogSink] = None) -> None:
        self.path = Path(path).expanduser()
        self._sink = sink if sink is not None else get_logger()

    def lookup(self, credentials_id: Optional[str], repository_url: str) -> Optional[GitCredentials]:
        if not credentials_id:
            return None

        entry = load_json(str(self.path)).get(credentials_id)
        if not isinstance(entry, dict):
            self._sink.warning("No credentials found for id %r in %s", credentials_id, self.path)
            return None

        url_prefix = entry.get("url_prefix", "")
        if url_prefix and not repository_url.startswith(url_prefix):
            self._sink.warning(
                "Credentials %r do not apply to %s (restricted to %s)",
                credentials_id, repository_url, url_prefix,
            )
            return None

        fields = {k: v for k, v in entry.items() if k in ("username", "password", "ssh_key_path")}
        if fields.get("ssh_key_path"):
            fields["ssh_key_path"] = os.path.expanduser(fields["ssh_key_path"])
        try:
            return GitCredentials(**fields)
        except ValidationError as exc:
            self._sink.warning("Malformed credentials entry %r: %s", credentials_id, exc)
            return None


def default_credentials_provider(*, sink: Optional[LogSink] = None) -> CredentialsProvider:
    """Return the store named by ACTIVE_BRANCHES_CREDENTIALS_FILE, or anonymous access."""
    path = get_credentials_file()
    if path is None:
        return NoCredentials()
    return JsonCredentialsStore(path, sink=sink)
