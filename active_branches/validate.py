"""Pre-flight validation for discovery inputs.

Pure checks with no I/O, meant for form or command-line validation before a
discovery is attempted. They share their pattern semantics with the
filter and mandatory predicates.

Convention:
- Each function returns (is_valid, message).
- An empty message indicates success.
- ``is_valid`` True with a non-empty message is a soft warning.
"""

from __future__ import annotations

from typing import Optional

from active_branches.constants import ACCEPTED_URL_PREFIXES, MAX_COUNT_WARN_THRESHOLD
from active_branches.errors import PatternError
from active_branches.filters import compile_pattern


def validate_repository_url(url: Optional[str]) -> tuple[bool, str]:
    """Validate a repository URL.

    Args:
        url: Repository URL to validate.

    Returns:
        Tuple of (is_valid, message).
    """
    if url is None or not url.strip():
        return False, "Repository URL is required"
    if not url.strip().startswith(ACCEPTED_URL_PREFIXES):
        return True, "URL should start with http://, https://, git@ or ssh://"
    return True, ""


def validate_max_count(value: Optional[str | int]) -> tuple[bool, str]:
    """Validate a maximum branch count as typed by a user.

    Args:
        value: Count as text (or an int).

    Returns:
        Tuple of (is_valid, message).
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return False, "Max branch count is required"
    try:
        count = int(str(value).strip())
    except ValueError:
        return False, "Please enter a valid number"
    if count <= 0:
        return False, "Max branch count must be greater than 0"
    if count > MAX_COUNT_WARN_THRESHOLD:
        return True, "Large branch counts may cause performance issues"
    return True, ""


def validate_pattern(pattern: Optional[str]) -> tuple[bool, str]:
    """Validate a branch filter or mandatory-branch regex.

    Args:
        pattern: Regular expression; blank means "unset" and is valid.

    Returns:
        Tuple of (is_valid, message).
    """
    try:
        compile_pattern(pattern)
    except PatternError as exc:
        return False, f"Invalid regex pattern: {exc.reason}"
    return True, ""
