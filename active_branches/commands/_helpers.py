"""Shared options and config assembly for the discovery commands."""

from __future__ import annotations

import sys
from typing import Any, Callable, Optional

import click

from active_branches.config import build_discovery_config
from active_branches.errors import ConfigurationError
from active_branches.models import DiscoveryConfig, ExecutionContext
from active_branches.utils import log_debug, log_error


def discovery_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the repository argument and the discovery options to a command."""
    options = [
        click.argument("repository_url", required=False),
        click.option("--config", "config_path", type=click.Path(dir_okay=False),
                     help="JSON file with discovery settings"),
        click.option("-n", "--max-count", type=int, default=None,
                     help="Maximum number of branches (default 10)"),
        click.option("--filter", "filter_pattern", default=None,
                     help="Regex a branch name must fully match"),
        click.option("--mandatory", "mandatory_pattern", default=None,
                     help="Regex for branches that are always included"),
        click.option("--credentials-id", default=None,
                     help="Credential identifier in the credentials store"),
        click.option("--workspace", type=click.Path(file_okay=False), default=None,
                     help="Existing local mirror to refresh instead of cloning"),
        click.option("--full-clone/--quick", "full_clone", default=None,
                     help="Without a workspace: shallow clone (recency order) or ls-remote (name order)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def resolve_config(
    repository_url: Optional[str],
    config_path: Optional[str],
    max_count: Optional[int],
    filter_pattern: Optional[str],
    mandatory_pattern: Optional[str],
    credentials_id: Optional[str],
    full_clone: Optional[bool],
    default_value: Optional[str] = None,
) -> DiscoveryConfig:
    """Merge command-line values over the config file, exiting 1 on bad input."""
    overrides: dict[str, Any] = {
        "repository_url": repository_url,
        "max_count": max_count,
        "filter_pattern": filter_pattern,
        "mandatory_pattern": mandatory_pattern,
        "credentials_id": credentials_id,
        "prefer_low_latency": None if full_clone is None else not full_clone,
        "default_value": default_value,
    }
    try:
        config = build_discovery_config(overrides, config_path)
    except ConfigurationError as exc:
        log_error(str(exc))
        sys.exit(1)
    log_debug(f"Discovery config: {config!r}")
    return config


def resolve_context(workspace: Optional[str]) -> Optional[ExecutionContext]:
    if not workspace:
        return None
    return ExecutionContext.for_workspace(workspace)
