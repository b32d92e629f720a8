"""Result ordering and size limiting.

``sort_records`` is the single ordering routine every strategy result goes
through; ``apply_limit`` bounds the result while never dropping a mandatory
branch.
"""

from __future__ import annotations

from typing import Iterable

from active_branches.filters import BranchFilter
from active_branches.models import BranchRecord, SortMode


def sort_records(records: Iterable[BranchRecord], sort_mode: SortMode) -> list[BranchRecord]:
    """Order records for presentation.

    Args:
        records: Branch records in any order.
        sort_mode: RECENCY sorts newest first with unknown timestamps last,
            NAME sorts case-insensitively by name.

    Returns:
        A new sorted list. Ties are broken by name so the order is stable
        across runs regardless of input order.
    """
    if sort_mode is SortMode.RECENCY:
        return sorted(records, key=lambda r: (-r.sort_timestamp, r.name.lower(), r.name))
    return sorted(records, key=lambda r: (r.name.lower(), r.name))


def filter_records(records: Iterable[BranchRecord], branch_filter: BranchFilter) -> list[BranchRecord]:
    """Keep records retained by the filter/mandatory predicates, dropping duplicate names."""
    seen: set[str] = set()
    kept: list[BranchRecord] = []
    for record in records:
        if record.name in seen:
            continue
        seen.add(record.name)
        if branch_filter.retains(record.name):
            kept.append(record)
    return kept


def apply_limit(
    records: list[BranchRecord],
    max_count: int,
    branch_filter: BranchFilter,
    sort_mode: SortMode,
) -> list[BranchRecord]:
    """Enforce ``max_count`` while keeping every mandatory branch.

    Args:
        records: Filtered records, already sorted by ``sort_mode``.
        max_count: Positive result size bound.
        branch_filter: Supplies the mandatory predicate.
        sort_mode: Ordering to restore after the partitions are merged.

    Returns:
        At most ``max_count`` records, unless the mandatory branches alone
        exceed it, in which case all of them are returned.
    """
    if len(records) <= max_count:
        return list(records)

    mandatory = [r for r in records if branch_filter.matches_mandatory(r.name)]
    others = [r for r in records if not branch_filter.matches_mandatory(r.name)]

    slots_left = max_count - len(mandatory)
    limited = mandatory + (others[:slots_left] if slots_left > 0 else [])
    return sort_records(limited, sort_mode)
