"""Public API facade for the facet filter engine."""

from __future__ import annotations

from typing import Any

from .cache import BaselineCache
from .dimensions import Dimension
from .models import DistributionEntry, FacetEngineConfig, FilterState, FilterView, SelectionResult
from .provider import AggregateCountProvider
from .querystring import parse_query
from .resolution import SelectionValue
from .service import FacetFilterService


class FacetFilterAPI:
    """High-level façade consumed by request handlers.

    Construct one per process so the baseline cache is shared across requests.
    """

    def __init__(
        self,
        config: FacetEngineConfig,
        provider: AggregateCountProvider | None = None,
        cache: BaselineCache | None = None,
    ) -> None:
        self._service = FacetFilterService(config, provider=provider, cache=cache)

    @property
    def config(self) -> FacetEngineConfig:
        return self._service.config

    async def view(self, state: FilterState) -> FilterView:
        """Pill states and badges for ``state``."""
        return await self._service.view(state)

    async def view_query(self, query: str) -> FilterView:
        """Same as :meth:`view` for a raw query string."""
        return await self._service.view(parse_query(query))

    async def select(
        self,
        dimension: Dimension | str,
        value: SelectionValue,
        state: FilterState,
        *,
        converge: bool | None = None,
    ) -> SelectionResult:
        """Apply a selection and report what was auto-cleared."""
        return await self._service.select(dimension, value, state, converge=converge)

    async def distributions(self) -> dict[str, list[DistributionEntry]]:
        return await self._service.distributions()

    def cache_info(self) -> dict[str, dict[str, Any]]:
        return self._service.cache.info()


def build_api(
    config: FacetEngineConfig | None = None,
    provider: AggregateCountProvider | None = None,
) -> FacetFilterAPI:
    """Convenience constructor with defaults."""
    return FacetFilterAPI(config or FacetEngineConfig(), provider=provider)
