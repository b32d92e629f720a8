"""Check command - test connectivity to a repository.

Runs a full discovery and reports the outcome verbatim, including the
transport error when it fails. Exit code 1 only for errors; a successful
connection with zero matching branches is a warning.
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from active_branches.commands._helpers import discovery_options, resolve_config, resolve_context
from active_branches.discovery import ConnectionStatus, check_connection
from active_branches.utils import log_error, log_warn


@click.command()
@discovery_options
def check(
    repository_url: Optional[str],
    config_path: Optional[str],
    max_count: Optional[int],
    filter_pattern: Optional[str],
    mandatory_pattern: Optional[str],
    credentials_id: Optional[str],
    workspace: Optional[str],
    full_clone: Optional[bool],
) -> None:
    """Test the connection to a repository."""
    config = resolve_config(
        repository_url, config_path, max_count, filter_pattern,
        mandatory_pattern, credentials_id, full_clone,
    )
    status, message = check_connection(config, resolve_context(workspace))

    if status is ConnectionStatus.ERROR:
        log_error(message)
        sys.exit(1)
    if status is ConnectionStatus.WARNING:
        log_warn(message)
        return
    click.echo(message)
