"""Validate command - pre-flight check of discovery settings.

Runs the pure validation helpers without touching the network. Warnings
are printed but do not fail the command; any error exits 1.
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from active_branches.utils import log_error, log_info, log_warn
from active_branches.validate import validate_max_count, validate_pattern, validate_repository_url


@click.command("validate")
@click.option("--url", "repository_url", default=None, help="Repository URL")
@click.option("--max-count", default=None, help="Maximum branch count")
@click.option("--filter", "filter_pattern", default=None, help="Branch filter regex")
@click.option("--mandatory", "mandatory_pattern", default=None, help="Always-include regex")
def validate_cmd(
    repository_url: Optional[str],
    max_count: Optional[str],
    filter_pattern: Optional[str],
    mandatory_pattern: Optional[str],
) -> None:
    """Validate discovery settings without contacting the repository."""
    checks: list[tuple[str, tuple[bool, str]]] = []
    if repository_url is not None:
        checks.append(("url", validate_repository_url(repository_url)))
    if max_count is not None:
        checks.append(("max-count", validate_max_count(max_count)))
    if filter_pattern is not None:
        checks.append(("filter", validate_pattern(filter_pattern)))
    if mandatory_pattern is not None:
        checks.append(("mandatory", validate_pattern(mandatory_pattern)))

    if not checks:
        log_error("Nothing to validate (use --url, --max-count, --filter or --mandatory)")
        sys.exit(1)

    failed = False
    for label, (is_valid, message) in checks:
        if not is_valid:
            failed = True
            log_error(f"{label}: {message}")
        elif message:
            log_warn(f"{label}: {message}")
        else:
            log_info(f"{label}: ok")

    if failed:
        sys.exit(1)
