"""URL query-string encoding of filter state."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from urllib.parse import parse_qsl, urlencode

from .dimensions import Dimension
from .models import FilterState, state_field


def state_from_query_items(items: Iterable[tuple[str, str]]) -> FilterState:
    """Build a state from ``(name, value)`` pairs; unknown parameters are ignored.

    Scalar parameters keep their last occurrence. ``lighting`` may repeat.
    """
    params = {dimension.query_param: dimension for dimension in Dimension}
    data: dict[str, object] = {}
    lighting: list[str] = []
    for name, value in items:
        dimension = params.get(name)
        if dimension is None:
            continue
        if dimension.is_multi_valued:
            lighting.append(value)
        else:
            data[state_field(dimension)] = value
    data[state_field(Dimension.LIGHTING)] = lighting
    return FilterState.model_validate(data)


def state_from_query(params: Mapping[str, str | Sequence[str]]) -> FilterState:
    items: list[tuple[str, str]] = []
    for name, value in params.items():
        if isinstance(value, str):
            items.append((name, value))
        else:
            items.extend((name, member) for member in value)
    return state_from_query_items(items)


def parse_query(query: str) -> FilterState:
    return state_from_query_items(parse_qsl(query.lstrip("?")))


def state_to_query_items(state: FilterState) -> list[tuple[str, str]]:
    """One pair per set scalar dimension and one per lighting member, sorted."""
    items: list[tuple[str, str]] = []
    for dimension in Dimension:
        value = state.get(dimension)
        if isinstance(value, frozenset):
            items.extend((dimension.query_param, member) for member in sorted(value))
        elif value:
            items.append((dimension.query_param, value))
    return items


def encode_query(state: FilterState) -> str:
    return urlencode(state_to_query_items(state))
