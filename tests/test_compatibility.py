from __future__ import annotations

import pytest

from facet_filters.compatibility import count_for, is_compatible
from facet_filters.dimensions import DEPENDENCIES, Dimension, parse_dimension
from facet_filters.models import FilterCounts, FilterState


def _counts() -> FilterCounts:
    return FilterCounts.from_mapping(
        {
            Dimension.SPORT: [("volleyball", 40), ("basketball", 12)],
            Dimension.PLAY_TYPE: [("spike", 9), ("block", 0)],
            Dimension.LIGHTING: [("natural", 12)],
        }
    )


def test_positive_count_is_compatible() -> None:
    assert is_compatible(Dimension.SPORT, "volleyball", FilterState(), _counts())
    assert is_compatible("playType", "spike", FilterState(sport="volleyball"), _counts())


@pytest.mark.parametrize(
    ("dimension", "value"),
    [
        (Dimension.PLAY_TYPE, "block"),
        (Dimension.PLAY_TYPE, "dunk"),
        (Dimension.LIGHTING, "dramatic"),
        (Dimension.COMPOSITION, "symmetry"),
    ],
)
def test_zero_or_missing_count_is_incompatible(dimension: Dimension, value: str) -> None:
    assert not is_compatible(dimension, value, FilterState(), _counts())


def test_unknown_dimension_is_incompatible_instead_of_raising() -> None:
    assert not is_compatible("weather", "sunny", FilterState(), _counts())
    assert count_for("weather", "sunny", _counts()) == 0


def test_query_param_names_resolve_to_dimensions() -> None:
    assert parse_dimension("play_type") is Dimension.PLAY_TYPE
    assert parse_dimension("colorTemp") is Dimension.COLOR_TEMP
    assert parse_dimension("nope") is None
    assert count_for("play_type", "spike", _counts()) == 9


def test_dependency_table_marks_sport_aware_dimensions() -> None:
    assert DEPENDENCIES[Dimension.PLAY_TYPE].sport_specific
    assert DEPENDENCIES[Dimension.INTENSITY].sport_aware
    assert not DEPENDENCIES[Dimension.INTENSITY].sport_specific
    agnostic = [
        Dimension.CATEGORY,
        Dimension.LIGHTING,
        Dimension.COLOR_TEMP,
        Dimension.TIME_OF_DAY,
        Dimension.COMPOSITION,
    ]
    assert not any(DEPENDENCIES[d].sport_aware for d in agnostic)
