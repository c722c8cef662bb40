"""Service orchestrating counts, baseline caching, auto-resolution and projection."""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict

from .cache import BaselineCache
from .dimensions import Dimension, parse_dimension
from .display import (
    cleared_filters_message,
    format_cleared_filters,
    has_active_filters,
    has_zero_results,
    project,
    zero_results_message,
)
from .models import (
    DistributionEntry,
    FacetEngineConfig,
    FilterCounts,
    FilterState,
    FilterView,
    Resolution,
    SelectionResult,
)
from .provider import AggregateCountProvider, create_provider
from .querystring import encode_query
from .resolution import SelectionValue, resolve, resolve_to_fixed_point

logger = logging.getLogger(__name__)

SPORTS_KEY = "sports"
CATEGORIES_KEY = "categories"
BASE_COUNTS_KEY = "base_filter_counts"


class BaselineSnapshot(BaseModel):
    """Unconstrained aggregates served from the baseline cache."""

    model_config = ConfigDict(frozen=True)

    sports: list[DistributionEntry]
    categories: list[DistributionEntry]
    filter_counts: FilterCounts


class FacetFilterService:
    """Coordinates one request's worth of filter work."""

    def __init__(
        self,
        config: FacetEngineConfig,
        provider: AggregateCountProvider | None = None,
        cache: BaselineCache | None = None,
    ) -> None:
        self.config = config
        self.provider = provider or create_provider(config)
        self.cache = cache or BaselineCache(ttl_seconds=config.cache_ttl_seconds)

    async def baseline(self) -> BaselineSnapshot:
        """Zero-filter aggregates; stale entries are refreshed concurrently."""
        data = await self.cache.get_many(
            {
                SPORTS_KEY: self.provider.get_sport_distribution,
                CATEGORIES_KEY: self.provider.get_category_distribution,
                BASE_COUNTS_KEY: self.provider.get_filter_counts,
            }
        )
        return BaselineSnapshot(
            sports=data[SPORTS_KEY],
            categories=data[CATEGORIES_KEY],
            filter_counts=data[BASE_COUNTS_KEY],
        )

    async def counts_for(self, state: FilterState) -> FilterCounts:
        """Counts under ``state``; the unconstrained case comes from the baseline cache."""
        if not has_active_filters(state):
            return (await self.baseline()).filter_counts
        return await self.provider.get_filter_counts(state)

    async def view(self, state: FilterState) -> FilterView:
        counts = await self.counts_for(state)
        return project(state, counts)

    async def select(
        self,
        dimension: Dimension | str,
        value: SelectionValue,
        state: FilterState,
        *,
        converge: bool | None = None,
    ) -> SelectionResult:
        """Apply one selection and auto-clear whatever it strands.

        A single pass is the default. With ``converge`` the service keeps
        re-fetching counts and cleaning until nothing more is cleared, bounded
        by ``max_resolution_passes``.
        """
        value = _as_state_value(value)
        converge = self.config.converge if converge is None else converge
        passes = 1
        if converge:
            resolution, counts, passes, settled = await resolve_to_fixed_point(
                dimension,
                value,
                state,
                self.counts_for,
                max_passes=self.config.max_resolution_passes,
            )
        else:
            parsed = parse_dimension(dimension)
            applied = state.with_value(parsed, value) if parsed else state
            counts = await self.counts_for(applied)
            resolution = resolve(dimension, value, state, counts)
            settled = not resolution.changed

        final = resolution.updated_state
        final_counts = counts if settled else await self.counts_for(final)

        labels = format_cleared_filters(resolution.cleared_filters)
        message = cleared_filters_message(
            resolution.cleared_filters, _reason(dimension, value, resolution)
        )
        if message:
            logger.info(message)
        return SelectionResult(
            resolution=resolution,
            counts=counts,
            cleared_labels=labels,
            message=message,
            query=encode_query(final),
            passes=passes,
            zero_results=has_zero_results(final, final_counts),
            zero_results_message=zero_results_message(final, final_counts),
        )

    async def distributions(self) -> dict[str, list[DistributionEntry]]:
        snapshot = await self.baseline()
        return {SPORTS_KEY: snapshot.sports, CATEGORIES_KEY: snapshot.categories}


def _as_state_value(value: SelectionValue) -> str | list[str] | None:
    if value is None or isinstance(value, str):
        return value
    return list(value)


def _reason(
    dimension: Dimension | str, value: str | list[str] | None, resolution: Resolution
) -> str:
    parsed = parse_dimension(dimension)
    if parsed is not None and any(c.dimension is parsed for c in resolution.cleared_filters):
        return "no matching photos"
    if not value:
        name = parsed.label if parsed else str(dimension)
        return f"after clearing {name}"
    shown = value if isinstance(value, str) else ", ".join(sorted(value))
    return f"incompatible with {shown}"
