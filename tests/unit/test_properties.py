"""Hypothesis-based property tests for the filter and limit stage.

Generates arbitrary branch sets, limits and patterns and checks the
properties every discovery result must have, whatever strategy produced
the raw data:

- the result never exceeds the limit unless mandatory branches force it
- every retained mandatory branch survives limiting
- the result is ordered by its sort mode and re-processing is a no-op
- the predicates never raise, even for malformed patterns
"""

from __future__ import annotations

import hypothesis.strategies as st
from hypothesis import given, settings

from active_branches.filters import BranchFilter
from active_branches.limiter import apply_limit, filter_records, sort_records
from active_branches.models import BranchRecord, SortMode
from tests.mocks import RecordingSink


branch_names = st.from_regex(r"(main|dev|release/[0-9]|feature/[a-c][0-9]?|hotfix-[A-Za-z])", fullmatch=True)

records_strategy = st.lists(
    st.builds(
        BranchRecord,
        name=branch_names,
        commit_timestamp=st.one_of(st.none(), st.integers(min_value=0, max_value=2_000_000_000_000)),
    ),
    max_size=30,
)

patterns = st.sampled_from([None, "", "feature/.*", "release/.*", "main|dev", "hotfix-.", "feature/[", "(", "*"])


def _process(records, max_count, branch_filter, sort_mode):
    shaped = sort_records(filter_records(records, branch_filter), sort_mode)
    return apply_limit(shaped, max_count, branch_filter, sort_mode)


@settings(max_examples=200, deadline=None)
@given(
    records=records_strategy,
    max_count=st.integers(min_value=1, max_value=15),
    filter_pattern=patterns,
    mandatory_pattern=patterns,
    sort_mode=st.sampled_from(list(SortMode)),
)
def test_limit_and_mandatory_properties(records, max_count, filter_pattern, mandatory_pattern, sort_mode):
    branch_filter = BranchFilter(filter_pattern, mandatory_pattern, sink=RecordingSink())
    result = _process(records, max_count, branch_filter, sort_mode)

    retained = filter_records(records, branch_filter)
    mandatory = {r.name for r in retained if branch_filter.matches_mandatory(r.name)}
    names = [r.name for r in result]

    assert len(names) == len(set(names))
    assert len(result) <= max(max_count, len(mandatory))
    assert mandatory <= set(names)
    assert set(names) <= {r.name for r in retained}
    assert sort_records(result, sort_mode) == result
    assert _process(result, max_count, branch_filter, sort_mode) == result


@settings(deadline=None)
@given(
    pattern=st.text(max_size=20),
    name=st.text(max_size=40),
)
def test_predicates_never_raise(pattern, name):
    branch_filter = BranchFilter(pattern, pattern, sink=RecordingSink())
    assert isinstance(branch_filter.retains(name), bool)
