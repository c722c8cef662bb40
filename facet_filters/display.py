"""View-state projection for the presentation layer."""

from __future__ import annotations

from collections.abc import Iterable

from .compatibility import count_for, is_compatible
from .dimensions import Dimension
from .models import (
    ClearedFilter,
    DimensionView,
    FilterCounts,
    FilterState,
    FilterView,
    OptionView,
    PillState,
)
from .querystring import encode_query

ZERO_RESULTS_MESSAGE = "No photos match your current filters. Try adjusting your selection."


def pill_state(selected: bool, compatible: bool) -> PillState:
    if selected:
        return "active"
    if not compatible:
        return "disabled"
    return "available"


def display_count(dimension: Dimension | str, value: str, counts: FilterCounts) -> int | None:
    """Badge count for an option, or ``None`` so zero-result badges are not drawn."""
    count = count_for(dimension, value, counts)
    return count if count > 0 else None


def has_active_filters(state: FilterState) -> bool:
    return any(state.is_set(dimension) for dimension in Dimension)


def active_filter_count(state: FilterState) -> int:
    """Set scalar dimensions plus one per selected lighting value."""
    total = 0
    for dimension in Dimension:
        value = state.get(dimension)
        if isinstance(value, frozenset):
            total += len(value)
        elif value:
            total += 1
    return total


def format_cleared_filters(cleared_filters: Iterable[ClearedFilter]) -> list[str]:
    labels = []
    for cleared in cleared_filters:
        if isinstance(cleared.value, list):
            labels.append(f"{cleared.dimension.label} ({', '.join(cleared.value)})")
        else:
            labels.append(f"{cleared.dimension.label}: {cleared.value}")
    return labels


def cleared_filters_message(cleared_filters: Iterable[ClearedFilter], reason: str) -> str | None:
    """One-line notice such as ``Cleared Play Type: dunk (incompatible with volleyball)``."""
    labels = format_cleared_filters(cleared_filters)
    if not labels:
        return None
    return f"Cleared {', '.join(labels)} ({reason})"


def has_zero_results(state: FilterState, counts: FilterCounts) -> bool:
    """True when some active dimension has no photos under ``counts``.

    Lighting is empty only when every selected member is. Sport is never
    auto-cleared, so a selection can still land here.
    """
    return any(
        all(counts.count(dimension, value) == 0 for value in _selected_values(state, dimension))
        for dimension in state.active_dimensions()
    )


def zero_results_message(state: FilterState, counts: FilterCounts) -> str | None:
    return ZERO_RESULTS_MESSAGE if has_zero_results(state, counts) else None


def _selected_values(state: FilterState, dimension: Dimension) -> list[str]:
    value = state.get(dimension)
    if isinstance(value, frozenset):
        return sorted(value)
    return [value] if value else []


def project(state: FilterState, counts: FilterCounts) -> FilterView:
    """Derive pill states and badges for every option the counts mention.

    Selected values missing from the counts are still listed so the user can
    deselect them.
    """
    dimensions = []
    for dimension in Dimension:
        selected = _selected_values(state, dimension)
        names = [entry.name for entry in counts.for_dimension(dimension)]
        names.extend(value for value in selected if value not in names)
        options = [
            OptionView(
                name=name,
                count=display_count(dimension, name, counts),
                state=pill_state(name in selected, is_compatible(dimension, name, state, counts)),
            )
            for name in names
        ]
        dimensions.append(
            DimensionView(
                dimension=dimension,
                label=dimension.label,
                selected=selected,
                options=options,
            )
        )
    return FilterView(
        state=state,
        dimensions=dimensions,
        has_active_filters=has_active_filters(state),
        active_filter_count=active_filter_count(state),
        query=encode_query(state),
        zero_results=has_zero_results(state, counts),
        zero_results_message=zero_results_message(state, counts),
    )
