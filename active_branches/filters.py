"""Branch-name predicates for the optional filter and the mandatory override.

Both patterns must match the whole branch name. A malformed pattern never
raises out of the predicates: a broken filter keeps every branch (fail open),
a broken mandatory rule marks nothing as mandatory (fail closed). Each
failure is reported once, when the pattern is compiled.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Optional

from active_branches.errors import PatternError
from active_branches.utils import LogSink, get_logger

if TYPE_CHECKING:
    from active_branches.models import DiscoveryConfig


def compile_pattern(pattern: Optional[str]) -> Optional[re.Pattern[str]]:
    """Compile a branch pattern.

    Args:
        pattern: Regular expression, or None/blank for "no pattern".

    Returns:
        The compiled pattern, or None when the pattern is unset.

    Raises:
        PatternError: If the pattern does not compile.
    """
    if pattern is None or not pattern.strip():
        return None
    try:
        return re.compile(pattern)
    except (re.error, OverflowError) as exc:
        raise PatternError(pattern, str(exc)) from exc


class BranchFilter:
    """Filter and mandatory predicates for one discovery run."""

    def __init__(
        self,
        filter_pattern: Optional[str] = None,
        mandatory_pattern: Optional[str] = None,
        *,
        sink: Optional[LogSink] = None,
    ) -> None:
        self._sink = sink if sink is not None else get_logger()
        self.filter_enabled = False
        self.mandatory_enabled = False
        self._filter: Optional[re.Pattern[str]] = None
        self._mandatory: Optional[re.Pattern[str]] = None

        try:
            self._filter = compile_pattern(filter_pattern)
            self.filter_enabled = self._filter is not None
        except PatternError as exc:
            self._sink.warning("Invalid branch filter regex, keeping all branches: %s", exc)

        try:
            self._mandatory = compile_pattern(mandatory_pattern)
            self.mandatory_enabled = self._mandatory is not None
        except PatternError as exc:
            self._sink.warning("Invalid mandatory branch regex, ignoring it: %s", exc)

    @classmethod
    def from_config(cls, config: DiscoveryConfig, *, sink: Optional[LogSink] = None) -> BranchFilter:
        return cls(config.filter_pattern, config.mandatory_pattern, sink=sink)

    def matches_filter(self, name: str) -> bool:
        if self._filter is None:
            return True
        return self._filter.fullmatch(name) is not None

    def matches_mandatory(self, name: str) -> bool:
        if self._mandatory is None:
            return False
        return self._mandatory.fullmatch(name) is not None

    def retains(self, name: str) -> bool:
        """Mandatory membership bypasses the ordinary filter."""
        return self.matches_mandatory(name) or self.matches_filter(name)
