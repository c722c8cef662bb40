"""CLI entrypoint for the facet filter engine."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from .api import FacetFilterAPI
from .dimensions import Dimension, parse_dimension
from .models import FacetEngineConfig
from .querystring import parse_query


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="facet-filters", description="Faceted filter counts over a photo catalog."
    )
    parser.add_argument("--catalog", type=Path, help="Path to JSONL photo catalog.")
    parser.add_argument(
        "--cache-ttl",
        type=float,
        default=300.0,
        help="Seconds the unconstrained counts stay fresh.",
    )
    parser.add_argument(
        "--max-passes",
        type=int,
        default=5,
        help="Upper bound on auto-resolution passes when converging.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    sub = parser.add_subparsers(dest="command", required=True)

    view = sub.add_parser("counts", help="Print pill states and counts for a filter state.")
    view.add_argument(
        "query", nargs="?", default="", help="URL query string, e.g. 'sport=volleyball'."
    )

    select = sub.add_parser("select", help="Apply a selection and report auto-cleared filters.")
    select.add_argument(
        "dimension", help="Dimension to change (e.g. playType or play_type)."
    )
    select.add_argument(
        "values", nargs="*", help="New value(s); omit to clear the dimension."
    )
    select.add_argument("--query", default="", help="Current state as a URL query string.")
    select.add_argument(
        "--converge",
        action="store_true",
        help="Repeat auto-resolution until no further filters are cleared.",
    )

    sub.add_parser("distributions", help="Print sport and category shares.")

    return parser


def _config_from_args(args: argparse.Namespace) -> FacetEngineConfig:
    return FacetEngineConfig(
        cache_ttl_seconds=args.cache_ttl,
        catalog_path=str(args.catalog) if args.catalog else None,
        max_resolution_passes=args.max_passes,
    )


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    api = FacetFilterAPI(_config_from_args(args))

    if args.command == "counts":
        view = asyncio.run(api.view_query(args.query))
        print(view.model_dump_json(indent=2))
        return 0
    if args.command == "select":
        dimension = parse_dimension(args.dimension)
        if dimension is None:
            parser.error(f"Unknown dimension {args.dimension!r}")
        value: str | list[str] | None
        if not args.values:
            value = None
        elif dimension is Dimension.LIGHTING:
            value = list(args.values)
        else:
            value = args.values[-1]
        result = asyncio.run(
            api.select(dimension, value, parse_query(args.query), converge=args.converge)
        )
        if result.message:
            print(result.message, file=sys.stderr)
        if result.zero_results_message:
            print(result.zero_results_message, file=sys.stderr)
        fields = {"resolution", "cleared_labels", "query", "zero_results"}
        print(result.model_dump_json(indent=2, include=fields))
        return 0
    if args.command == "distributions":
        data = asyncio.run(api.distributions())
        payload = {key: [entry.model_dump() for entry in entries] for key, entries in data.items()}
        print(json.dumps(payload, indent=2))
        return 0
    parser.error(f"Unsupported command {args.command}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
