"""Default command - print the branch a job would preselect."""

from __future__ import annotations

from typing import Optional

import click

from active_branches.commands._helpers import discovery_options, resolve_config, resolve_context
from active_branches.discovery import default_parameter_value


@click.command()
@discovery_options
@click.option("--default", "default_value", default=None,
              help="Branch to preselect instead of the newest one")
@click.option("--name", "parameter_name", default="BRANCH", show_default=True,
              help="Parameter name")
def default(
    repository_url: Optional[str],
    config_path: Optional[str],
    max_count: Optional[int],
    filter_pattern: Optional[str],
    mandatory_pattern: Optional[str],
    credentials_id: Optional[str],
    workspace: Optional[str],
    full_clone: Optional[bool],
    default_value: Optional[str],
    parameter_name: str,
) -> None:
    """Print the default branch parameter value."""
    config = resolve_config(
        repository_url, config_path, max_count, filter_pattern,
        mandatory_pattern, credentials_id, full_clone, default_value,
    )
    value = default_parameter_value(config, parameter_name, context=resolve_context(workspace))
    click.echo(value.value)
