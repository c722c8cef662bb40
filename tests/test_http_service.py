from __future__ import annotations

from fastapi.testclient import TestClient

from facet_filters.models import FacetEngineConfig, PhotoRecord
from facet_filters.provider import CatalogCountProvider
from facet_filters.service_http import create_app


def _load_sample_catalog() -> CatalogCountProvider:
    data = [
        {"id": "p1", "sport": "volleyball", "category": "action", "play_type": "spike", "lighting": "natural"},
        {"id": "p2", "sport": "volleyball", "category": "action", "play_type": "block", "lighting": "natural"},
        {"id": "p3", "sport": "volleyball", "category": "celebration", "lighting": "backlit"},
        {"id": "p4", "sport": "basketball", "category": "action", "play_type": "dunk", "lighting": "dramatic"},
    ]
    return CatalogCountProvider(records=[PhotoRecord.model_validate(item) for item in data])


def _client() -> TestClient:
    return TestClient(create_app(FacetEngineConfig(), provider=_load_sample_catalog()))


def test_health_endpoint() -> None:
    resp = _client().get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_filters_view_for_query_state() -> None:
    client = _client()

    resp = client.get("/filters", params=[("sport", "volleyball"), ("lighting", "natural")])
    assert resp.status_code == 200
    body = resp.json()
    assert body["has_active_filters"] is True
    assert body["active_filter_count"] == 2
    assert body["query"] == "sport=volleyball&lighting=natural"
    play_types = next(d for d in body["dimensions"] if d["dimension"] == "playType")
    assert {o["name"]: o["state"] for o in play_types["options"]} == {
        "spike": "available",
        "block": "available",
    }


def test_select_auto_clears_and_returns_redirect_query() -> None:
    client = _client()

    resp = client.get(
        "/filters/select",
        params={"sport": "volleyball", "dimension": "playType", "value": "dunk"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["resolution"]["updated_state"]["sport"] == "volleyball"
    assert body["resolution"]["updated_state"]["play_type"] is None
    assert body["resolution"]["cleared_filters"] == [{"dimension": "playType", "value": "dunk"}]
    assert body["cleared_labels"] == ["Play Type: dunk"]
    assert body["query"] == "sport=volleyball"


def test_select_lighting_takes_repeated_values() -> None:
    client = _client()

    resp = client.get(
        "/filters/select",
        params=[
            ("sport", "volleyball"),
            ("dimension", "lighting"),
            ("value", "natural"),
            ("value", "dramatic"),
        ],
    )
    body = resp.json()
    assert body["resolution"]["updated_state"]["lighting"] == ["natural"]
    assert body["resolution"]["cleared_filters"] == [
        {"dimension": "lighting", "value": ["dramatic"]}
    ]


def test_select_rejects_unknown_dimension() -> None:
    resp = _client().get("/filters/select", params={"dimension": "weather", "value": "sunny"})
    assert resp.status_code == 422


def test_distributions_and_cache_info() -> None:
    client = _client()

    resp = client.get("/distributions")
    assert resp.status_code == 200
    body = resp.json()
    assert [e["name"] for e in body["sports"]] == ["volleyball", "basketball"]
    assert body["sports"][0]["percentage"] == 75.0

    info = client.get("/cache").json()
    assert set(info) == {"sports", "categories", "base_filter_counts"}
    assert all(entry["fresh"] for entry in info.values())


def test_filters_view_serializes_lighting_sorted() -> None:
    resp = _client().get(
        "/filters",
        params=[
            ("lighting", "natural"),
            ("lighting", "dramatic"),
            ("lighting", "backlit"),
            ("lighting", "soft"),
            ("lighting", "artificial"),
        ],
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["state"]["lighting"] == ["artificial", "backlit", "dramatic", "natural", "soft"]
    assert body["query"] == (
        "lighting=artificial&lighting=backlit&lighting=dramatic&lighting=natural&lighting=soft"
    )


def test_select_accepts_query_parameter_dimension_names() -> None:
    client = _client()

    by_value = client.get(
        "/filters/select",
        params={"sport": "volleyball", "dimension": "playType", "value": "spike"},
    )
    by_param = client.get(
        "/filters/select",
        params={"sport": "volleyball", "dimension": "play_type", "value": "spike"},
    )
    assert by_param.status_code == 200
    assert by_param.json() == by_value.json()
    assert by_param.json()["query"] == "sport=volleyball&play_type=spike"


def test_filters_view_flags_zero_results() -> None:
    resp = _client().get("/filters", params={"sport": "curling"})
    body = resp.json()
    assert body["zero_results"] is True
    assert body["zero_results_message"] == (
        "No photos match your current filters. Try adjusting your selection."
    )
