"""Auto-resolution: clear previously active filters that a new selection strands."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import NamedTuple

from .dimensions import AUTO_CLEAN_ORDER, Dimension, parse_dimension
from .models import ClearedFilter, FilterCounts, FilterState, Resolution

logger = logging.getLogger(__name__)

SelectionValue = str | Iterable[str] | None
CountsSource = Callable[[FilterState], Awaitable[FilterCounts]]


class ConvergedResolution(NamedTuple):
    """Result of repeating single passes until nothing more is cleared."""

    resolution: Resolution
    counts: FilterCounts
    passes: int
    converged: bool


def _apply(new_dimension: Dimension | str, new_value: SelectionValue, state: FilterState) -> FilterState:
    dimension = parse_dimension(new_dimension)
    if dimension is None:
        logger.warning("Ignoring selection on unknown dimension %r", new_dimension)
        return state
    if new_value is not None and not isinstance(new_value, str):
        new_value = list(new_value)
    return state.with_value(dimension, new_value)


def _clean(state: FilterState, counts: FilterCounts) -> Resolution:
    """Check each active dimension once, in order, against one counts snapshot."""
    updated = state
    cleared: list[ClearedFilter] = []
    for dimension in AUTO_CLEAN_ORDER:
        current = updated.get(dimension)
        if not current:
            continue
        if isinstance(current, frozenset):
            dropped = sorted(member for member in current if counts.count(dimension, member) == 0)
            if dropped:
                cleared.append(ClearedFilter(dimension=dimension, value=dropped))
                updated = updated.with_value(dimension, current.difference(dropped))
        elif counts.count(dimension, current) == 0:
            cleared.append(ClearedFilter(dimension=dimension, value=current))
            updated = updated.without(dimension)
    return Resolution(updated_state=updated, cleared_filters=cleared)


def resolve(
    new_dimension: Dimension | str,
    new_value: SelectionValue,
    state: FilterState,
    counts_under_new_state: FilterCounts,
) -> Resolution:
    """Apply a selection, then clear every other active value with a zero count.

    ``counts_under_new_state`` must already reflect the state with the new
    selection applied. This is a single pass: every dimension is checked
    exactly once against that snapshot, so clearing one value never triggers a
    re-check of dimensions evaluated before it. Each value left in the result
    has a nonzero count in the supplied snapshot, which does not make the
    result a fixed point; see :func:`resolve_to_fixed_point`.

    Lighting is checked member by member and only the stranded members are
    dropped. Sport is never cleared.
    """
    applied = _apply(new_dimension, new_value, state)
    resolution = _clean(applied, counts_under_new_state)
    if resolution.changed:
        logger.info(
            "Auto-cleared %d filter(s) after selecting %s=%r",
            len(resolution.cleared_filters),
            new_dimension.value if isinstance(new_dimension, Dimension) else new_dimension,
            new_value,
        )
    return resolution


resolve_single_pass = resolve


async def resolve_to_fixed_point(
    new_dimension: Dimension | str,
    new_value: SelectionValue,
    state: FilterState,
    fetch_counts: CountsSource,
    *,
    max_passes: int = 5,
) -> ConvergedResolution:
    """Repeat fetch-counts-then-clean until a pass clears nothing.

    Opt-in alternative to :func:`resolve`: it may clear more filters than the
    single pass does. Cleared entries accumulate across passes in the order
    they were removed. ``fetch_counts`` is called with each intermediate
    state, typically ``provider.get_filter_counts``.
    """
    if max_passes < 1:
        raise ValueError("max_passes must be at least 1")

    applied = _apply(new_dimension, new_value, state)
    counts = await fetch_counts(applied)
    resolution = _clean(applied, counts)
    cleared = list(resolution.cleared_filters)
    passes = 1

    while resolution.changed and passes < max_passes:
        counts = await fetch_counts(resolution.updated_state)
        resolution = _clean(resolution.updated_state, counts)
        cleared.extend(resolution.cleared_filters)
        passes += 1

    if resolution.changed:
        logger.warning("Auto-resolution did not converge after %d passes", passes)

    return ConvergedResolution(
        resolution=Resolution(updated_state=resolution.updated_state, cleared_filters=cleared),
        counts=counts,
        passes=passes,
        converged=not resolution.changed,
    )
