from __future__ import annotations

import argparse
from collections.abc import Iterable

import uvicorn
from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .api import FacetFilterAPI, build_api
from .dimensions import parse_dimension
from .models import DistributionEntry, FacetEngineConfig, FilterView, SelectionResult
from .provider import AggregateCountProvider
from .querystring import state_from_query_items

_CONTROL_PARAMS = frozenset({"dimension", "value", "converge"})


class DistributionsResponse(BaseModel):
    """Cached sport and category shares."""

    sports: list[DistributionEntry]
    categories: list[DistributionEntry]


def _state_items(request: Request) -> list[tuple[str, str]]:
    return [
        (name, value)
        for name, value in request.query_params.multi_items()
        if name not in _CONTROL_PARAMS
    ]


def create_app(
    config: FacetEngineConfig | None = None,
    *,
    provider: AggregateCountProvider | None = None,
    cors_origins: Iterable[str] | None = None,
) -> FastAPI:
    """Construct a FastAPI app backed by FacetFilterAPI."""

    api = build_api(config, provider=provider)
    app = FastAPI(title="Facet Filters", version="0.1.0")
    app.state.api = api

    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(cors_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    def facade() -> FacetFilterAPI:
        return app.state.api

    @app.get("/healthz", status_code=status.HTTP_200_OK)
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/filters", response_model=FilterView)
    async def filters(request: Request) -> FilterView:
        state = state_from_query_items(_state_items(request))
        return await facade().view(state)

    @app.get("/filters/select", response_model=SelectionResult)
    async def select(
        request: Request,
        dimension: str = Query(..., description="Dimension value or query name."),
        value: list[str] | None = Query(default=None),
        converge: bool | None = Query(default=None),
    ) -> SelectionResult:
        parsed = parse_dimension(dimension)
        if parsed is None:
            raise HTTPException(status_code=422, detail=f"Unknown dimension: {dimension}")
        state = state_from_query_items(_state_items(request))
        selection: str | list[str] | None
        if not value:
            selection = None
        elif parsed.is_multi_valued:
            selection = value
        else:
            selection = value[-1]
        return await facade().select(parsed, selection, state, converge=converge)

    @app.get("/distributions", response_model=DistributionsResponse)
    async def distributions() -> DistributionsResponse:
        data = await facade().distributions()
        return DistributionsResponse(sports=data["sports"], categories=data["categories"])

    @app.get("/cache")
    def cache_info() -> dict[str, dict[str, object]]:
        return facade().cache_info()

    return app


def run(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run the facet filter HTTP service.")
    parser.add_argument("--host", default="127.0.0.1", help="Host interface to bind.")
    parser.add_argument("--port", type=int, default=8000, help="TCP port for the service.")
    parser.add_argument(
        "--catalog", type=str, default=None, help="JSONL photo catalog backing the counts."
    )
    parser.add_argument(
        "--cache-ttl",
        type=float,
        default=300.0,
        help="Seconds the unconstrained counts stay fresh.",
    )
    parser.add_argument(
        "--converge",
        action="store_true",
        help="Repeat auto-resolution until no further filters are cleared.",
    )
    parser.add_argument(
        "--max-passes", type=int, default=5, help="Upper bound on auto-resolution passes."
    )
    parser.add_argument(
        "--cors-origin",
        action="append",
        dest="cors_origins",
        default=None,
        help="Optional CORS origin (repeatable).",
    )
    args = parser.parse_args(argv)

    config = FacetEngineConfig(
        cache_ttl_seconds=args.cache_ttl,
        catalog_path=args.catalog,
        converge=args.converge,
        max_resolution_passes=args.max_passes,
    )
    app = create_app(config=config, cors_origins=args.cors_origins)
    uvicorn.run(app, host=args.host, port=args.port, log_level="info")


app = create_app()
