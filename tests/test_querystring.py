from __future__ import annotations

from facet_filters.models import FilterState
from facet_filters.querystring import (
    encode_query,
    parse_query,
    state_from_query,
    state_from_query_items,
    state_to_query_items,
)


def test_one_param_per_scalar_and_repeated_lighting() -> None:
    state = FilterState(
        sport="volleyball",
        play_type="spike",
        lighting=["natural", "backlit"],
        time_of_day="golden_hour",
    )

    assert state_to_query_items(state) == [
        ("sport", "volleyball"),
        ("play_type", "spike"),
        ("lighting", "backlit"),
        ("lighting", "natural"),
        ("time_of_day", "golden_hour"),
    ]
    assert (
        encode_query(state)
        == "sport=volleyball&play_type=spike&lighting=backlit&lighting=natural"
        "&time_of_day=golden_hour"
    )


def test_unset_dimensions_are_omitted() -> None:
    assert encode_query(FilterState()) == ""


def test_parse_query_reads_repeated_lighting_and_ignores_unknown_params() -> None:
    state = parse_query("?sport=basketball&lighting=soft&lighting=dramatic&page=2&color_temp=warm")

    assert state == FilterState(
        sport="basketball", lighting=["soft", "dramatic"], color_temp="warm"
    )


def test_blank_values_mean_unconstrained() -> None:
    state = state_from_query_items([("sport", ""), ("category", "  "), ("lighting", "")])

    assert state == FilterState()
    assert state.sport is None


def test_state_from_mapping_accepts_lists() -> None:
    state = state_from_query({"category": "action", "lighting": ["natural", "soft"]})

    assert state.category == "action"
    assert state.lighting == frozenset({"natural", "soft"})


def test_encoding_is_stable_for_equal_states() -> None:
    a = FilterState(lighting=["soft", "natural"], composition="framing")
    b = parse_query(encode_query(a))

    assert a == b
    assert encode_query(a) == encode_query(b)
