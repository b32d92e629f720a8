"""List command - print the active branches of a repository.

Flags:
  --json: Output the full discovery result as JSON

Text output shows one branch per line with its last commit time when known.
A failed discovery prints the error and exits 1.
"""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from typing import Optional

import click

from active_branches.commands._helpers import discovery_options, resolve_config, resolve_context
from active_branches.discovery import discover
from active_branches.errors import BranchDiscoveryError
from active_branches.models import BranchRecord, SortMode
from active_branches.utils import BOLD, RESET, format_branch_row, log_error


def _format_timestamp(record: BranchRecord) -> str:
    if not record.has_timestamp:
        return ""
    moment = datetime.fromtimestamp(record.sort_timestamp / 1000, tz=timezone.utc)
    return moment.strftime("%Y-%m-%d %H:%M UTC")


@click.command("list")
@discovery_options
@click.option("--json", "json_output", is_flag=True, help="Output results as JSON")
def list_cmd(
    repository_url: Optional[str],
    config_path: Optional[str],
    max_count: Optional[int],
    filter_pattern: Optional[str],
    mandatory_pattern: Optional[str],
    credentials_id: Optional[str],
    workspace: Optional[str],
    full_clone: Optional[bool],
    json_output: bool,
) -> None:
    """List the most recently active branches."""
    config = resolve_config(
        repository_url, config_path, max_count, filter_pattern,
        mandatory_pattern, credentials_id, full_clone,
    )
    try:
        result = discover(config, resolve_context(workspace))
    except BranchDiscoveryError as exc:
        log_error(str(exc))
        sys.exit(1)

    if json_output:
        click.echo(result.model_dump_json())
        return

    order = "most recent first" if result.sort_mode is SortMode.RECENCY else "by name"
    click.echo(f"{BOLD}Branches ({order}):{RESET}")
    if not result.branches:
        click.echo("  (no branches found)")
        return
    for record in result:
        click.echo(format_branch_row(record.name, _format_timestamp(record)))
