"""Aggregate count providers backed by a photo catalog."""

from __future__ import annotations

import json
import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from .dimensions import Dimension
from .models import (
    DistributionEntry,
    FacetCount,
    FacetEngineConfig,
    FilterCounts,
    FilterState,
    PhotoRecord,
)

logger = logging.getLogger(__name__)

UNKNOWN_SPORT = "unknown"


class AggregateCountProvider(Protocol):
    """Contract for anything that can count photos per filter value."""

    async def get_filter_counts(self, constraints: FilterState | None = None) -> FilterCounts: ...

    async def get_sport_distribution(self) -> list[DistributionEntry]: ...

    async def get_category_distribution(self) -> list[DistributionEntry]: ...


def _matches(record: PhotoRecord, constraints: FilterState, skip: Dimension) -> bool:
    for dimension in constraints.active_dimensions():
        if dimension is skip:
            continue
        wanted = constraints.get(dimension)
        value = record.value_for(dimension)
        if isinstance(wanted, frozenset):
            if value not in wanted:
                return False
        elif value != wanted:
            return False
    return True


def count_records(
    records: Iterable[PhotoRecord], constraints: FilterState | None = None
) -> FilterCounts:
    """Count values per dimension under every constraint except that dimension's own.

    A photo matches a lighting constraint when its lighting is any selected
    member. Entries are ordered by count descending, then name.
    """
    constraints = constraints or FilterState()
    records = list(records)
    by_dimension: dict[Dimension, list[tuple[str, int]]] = {}
    for dimension in Dimension:
        counter: Counter[str] = Counter()
        for record in records:
            value = record.value_for(dimension)
            if value and _matches(record, constraints, dimension):
                counter[value] += 1
        by_dimension[dimension] = sorted(counter.items(), key=lambda item: (-item[1], item[0]))
    return FilterCounts.from_mapping(by_dimension)


def distribution(
    entries: Iterable[FacetCount], *, exclude: Iterable[str] = ()
) -> list[DistributionEntry]:
    """Share of each value, one decimal, zero counts and ``exclude`` dropped."""
    excluded = set(exclude)
    kept = [entry for entry in entries if entry.count > 0 and entry.name not in excluded]
    total = sum(entry.count for entry in kept)
    result = [
        DistributionEntry(
            name=entry.name,
            count=entry.count,
            percentage=round(entry.count * 100.0 / total, 1) if total else 0.0,
        )
        for entry in kept
    ]
    result.sort(key=lambda entry: entry.count, reverse=True)
    return result


@dataclass
class CatalogCountProvider(AggregateCountProvider):
    """In-memory catalog, convenient for tests and small collections."""

    records: list[PhotoRecord] = field(default_factory=list)
    include_unknown_sport: bool = False

    def load(self) -> None:
        return None

    async def get_filter_counts(self, constraints: FilterState | None = None) -> FilterCounts:
        return count_records(self.records, constraints)

    async def get_sport_distribution(self) -> list[DistributionEntry]:
        counts = count_records(self.records)
        exclude = () if self.include_unknown_sport else (UNKNOWN_SPORT,)
        return distribution(counts.sports, exclude=exclude)

    async def get_category_distribution(self) -> list[DistributionEntry]:
        counts = count_records(self.records)
        return distribution(counts.categories)


@dataclass
class JsonlCatalogCountProvider(CatalogCountProvider):
    """Catalog read from a JSONL file with one photo record per line."""

    path: Path = field(default_factory=lambda: Path("catalog.jsonl"))

    def load(self) -> None:
        if not self.path.exists():
            logger.warning("Catalog %s does not exist; serving empty counts", self.path)
            return
        parsed: list[PhotoRecord] = []
        with self.path.open("r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line:
                    continue
                parsed.append(PhotoRecord.model_validate(json.loads(line)))
        self.records = parsed
        logger.info("Loaded %d photo records from %s", len(parsed), self.path)


def create_provider(config: FacetEngineConfig) -> CatalogCountProvider:
    """Factory helper selecting the appropriate catalog."""
    if config.catalog_path:
        provider: CatalogCountProvider = JsonlCatalogCountProvider(
            path=Path(config.catalog_path), include_unknown_sport=config.include_unknown_sport
        )
    else:
        provider = CatalogCountProvider(include_unknown_sport=config.include_unknown_sport)
    provider.load()
    return provider
