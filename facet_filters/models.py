"""Typed data models used across the facet filter engine."""

from __future__ import annotations

from typing import Literal, assert_never

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .dimensions import Dimension

PillState = Literal["active", "available", "disabled"]
StateValue = str | frozenset[str] | None


def state_field(dimension: Dimension) -> str:
    """Attribute name holding ``dimension`` on states and photo records."""
    match dimension:
        case Dimension.SPORT:
            return "sport"
        case Dimension.CATEGORY:
            return "category"
        case Dimension.PLAY_TYPE:
            return "play_type"
        case Dimension.INTENSITY:
            return "intensity"
        case Dimension.LIGHTING:
            return "lighting"
        case Dimension.COLOR_TEMP:
            return "color_temp"
        case Dimension.TIME_OF_DAY:
            return "time_of_day"
        case Dimension.COMPOSITION:
            return "composition"
        case _:
            assert_never(dimension)


class FilterState(BaseModel):
    """Selected value(s) per dimension; ``None`` or an empty set means unconstrained."""

    model_config = ConfigDict(frozen=True)

    sport: str | None = None
    category: str | None = None
    play_type: str | None = None
    intensity: str | None = None
    lighting: frozenset[str] = frozenset()
    color_temp: str | None = None
    time_of_day: str | None = None
    composition: str | None = None

    @field_validator(
        "sport",
        "category",
        "play_type",
        "intensity",
        "color_temp",
        "time_of_day",
        "composition",
        mode="before",
    )
    @classmethod
    def _blank_is_unset(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("lighting", mode="before")
    @classmethod
    def _normalize_lighting(cls, value: object) -> object:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple, set, frozenset)):
            return value
        members: list[object] = []
        for item in value:
            if isinstance(item, str):
                item = item.strip()
                if not item:
                    continue
            members.append(item)
        return members

    @field_serializer("lighting")
    def _sorted_lighting(self, value: frozenset[str]) -> list[str]:
        return sorted(value)

    def get(self, dimension: Dimension) -> StateValue:
        return getattr(self, state_field(dimension))

    def is_set(self, dimension: Dimension) -> bool:
        return bool(self.get(dimension))

    def active_dimensions(self) -> list[Dimension]:
        return [dimension for dimension in Dimension if self.is_set(dimension)]

    def with_value(
        self, dimension: Dimension, value: str | list[str] | set[str] | frozenset[str] | None
    ) -> FilterState:
        """Return a copy with ``dimension`` overwritten (``None`` clears it)."""
        data = self.model_dump()
        data[state_field(dimension)] = value
        return FilterState.model_validate(data)

    def without(self, dimension: Dimension) -> FilterState:
        return self.with_value(dimension, None)


class FacetCount(BaseModel):
    """Number of photos carrying one value of a dimension."""

    name: str = Field(..., min_length=1)
    count: int = Field(..., ge=0)


class FilterCounts(BaseModel):
    """Per-dimension value counts supplied by an aggregate count provider."""

    model_config = ConfigDict(frozen=True)

    sports: list[FacetCount] = Field(default_factory=list)
    categories: list[FacetCount] = Field(default_factory=list)
    play_types: list[FacetCount] = Field(default_factory=list)
    intensities: list[FacetCount] = Field(default_factory=list)
    lighting: list[FacetCount] = Field(default_factory=list)
    color_temperatures: list[FacetCount] = Field(default_factory=list)
    times_of_day: list[FacetCount] = Field(default_factory=list)
    compositions: list[FacetCount] = Field(default_factory=list)

    def for_dimension(self, dimension: Dimension) -> list[FacetCount]:
        match dimension:
            case Dimension.SPORT:
                return self.sports
            case Dimension.CATEGORY:
                return self.categories
            case Dimension.PLAY_TYPE:
                return self.play_types
            case Dimension.INTENSITY:
                return self.intensities
            case Dimension.LIGHTING:
                return self.lighting
            case Dimension.COLOR_TEMP:
                return self.color_temperatures
            case Dimension.TIME_OF_DAY:
                return self.times_of_day
            case Dimension.COMPOSITION:
                return self.compositions
            case _:
                assert_never(dimension)

    def count(self, dimension: Dimension, value: str) -> int:
        """Count for ``value``; values missing from the list count as zero."""
        for entry in self.for_dimension(dimension):
            if entry.name == value:
                return entry.count
        return 0

    @classmethod
    def from_mapping(cls, data: dict[Dimension, list[tuple[str, int]]]) -> FilterCounts:
        """Build counts from ``{dimension: [(name, count), ...]}``."""
        fields = {
            _COUNT_FIELDS[dimension]: [FacetCount(name=name, count=count) for name, count in pairs]
            for dimension, pairs in data.items()
        }
        return cls(**fields)


_COUNT_FIELDS: dict[Dimension, str] = {
    Dimension.SPORT: "sports",
    Dimension.CATEGORY: "categories",
    Dimension.PLAY_TYPE: "play_types",
    Dimension.INTENSITY: "intensities",
    Dimension.LIGHTING: "lighting",
    Dimension.COLOR_TEMP: "color_temperatures",
    Dimension.TIME_OF_DAY: "times_of_day",
    Dimension.COMPOSITION: "compositions",
}


class ClearedFilter(BaseModel):
    """A previously active value removed by auto-resolution."""

    dimension: Dimension
    value: str | list[str]


class Resolution(BaseModel):
    """Corrected state plus the changelog of what was cleared."""

    updated_state: FilterState
    cleared_filters: list[ClearedFilter] = Field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.cleared_filters)


class DistributionEntry(BaseModel):
    """Share of the collection holding one value of a dimension."""

    name: str
    count: int = Field(..., ge=0)
    percentage: float = Field(..., ge=0.0)


class PhotoRecord(BaseModel):
    """Filterable metadata of a single photo in a catalog."""

    id: str = Field(..., min_length=1)
    sport: str | None = None
    category: str | None = None
    play_type: str | None = None
    intensity: str | None = None
    lighting: str | None = None
    color_temp: str | None = None
    time_of_day: str | None = None
    composition: str | None = None

    def value_for(self, dimension: Dimension) -> str | None:
        return getattr(self, state_field(dimension))


class OptionView(BaseModel):
    """Render hints for one filter pill."""

    name: str
    count: int | None = None
    state: PillState


class DimensionView(BaseModel):
    """Render hints for every option of one dimension."""

    dimension: Dimension
    label: str
    selected: list[str] = Field(default_factory=list)
    options: list[OptionView] = Field(default_factory=list)


class FilterView(BaseModel):
    """Full view state handed to the presentation layer."""

    state: FilterState
    dimensions: list[DimensionView]
    has_active_filters: bool
    active_filter_count: int = Field(..., ge=0)
    query: str = ""
    zero_results: bool = False
    zero_results_message: str | None = None


class SelectionResult(BaseModel):
    """Outcome of applying one selection to a state."""

    resolution: Resolution
    counts: FilterCounts
    cleared_labels: list[str] = Field(default_factory=list)
    message: str | None = None
    query: str = ""
    passes: int = Field(1, ge=1)
    zero_results: bool = False
    zero_results_message: str | None = None


class FacetEngineConfig(BaseModel):
    """Runtime configuration switches."""

    cache_ttl_seconds: float = Field(300.0, ge=0.0)
    catalog_path: str | None = None
    max_resolution_passes: int = Field(5, ge=1)
    converge: bool = False
    include_unknown_sport: bool = False
