"""Rule table indexing.

Rules are grouped by state: all rows for one state are contiguous, so the
index only records the offset of each group's first row. Lookups scan
forward from that offset until the state changes.
"""
from __future__ import annotations

from typing import Iterator, Sequence

from sm_dispatch.types import Rule, State, TableError


def validate_rules(rules: Sequence[Rule]) -> None:
    """Check the table contract. Raises TableError on the first violation."""
    closed: set[State] = set()
    previous: State | None = None
    for offset, rule in enumerate(rules):
        if rule.state <= 0:
            raise TableError(
                offset, f"Rule {offset} has state {rule.state}; states must be positive"
            )
        if rule.state != previous:
            if rule.state in closed:
                raise TableError(
                    offset,
                    f"Rules for state {rule.state} are not contiguous (row {offset})",
                )
            if previous is not None:
                closed.add(previous)
            previous = rule.state


def build_index(rules: Sequence[Rule]) -> dict[State, int]:
    """Map each state to the offset of its first rule."""
    index: dict[State, int] = {}
    previous: State | None = None
    for offset, rule in enumerate(rules):
        if rule.state != previous:
            previous = rule.state
            index[previous] = offset
    return index


def group(rules: Sequence[Rule], index: dict[State, int], state: State) -> Iterator[Rule]:
    """Yield the contiguous rules of ``state``. Nothing if it has none."""
    start = index.get(state)
    if start is None:
        return
    for offset in range(start, len(rules)):
        rule = rules[offset]
        if rule.state != state:
            return
        yield rule
