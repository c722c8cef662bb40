"""Decide whether a filter option can be selected under the current counts."""

from __future__ import annotations

from .dimensions import Dimension, parse_dimension
from .models import FilterCounts, FilterState


def count_for(dimension: Dimension | str, value: str, counts: FilterCounts) -> int:
    """Return the count of ``value``; unknown dimensions and values yield zero."""
    parsed = parse_dimension(dimension)
    if parsed is None:
        return 0
    return counts.count(parsed, value)


def is_compatible(
    dimension: Dimension | str,
    option_value: str,
    state: FilterState,
    counts: FilterCounts,
) -> bool:
    """True when selecting ``option_value`` keeps at least one result.

    ``state`` is accepted for parity with the rendering layer; the decision is
    made from ``counts`` alone. Play types are sport-specific, but the provider
    is expected to have narrowed their counts to the selected sport already, so
    they get no extra gating here.
    """
    return count_for(dimension, option_value, counts) > 0
