"""Filter dimensions and the static metadata attached to each of them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Dimension(str, Enum):
    """Closed set of facets a photo can be filtered by."""

    SPORT = "sport"
    CATEGORY = "category"
    PLAY_TYPE = "playType"
    INTENSITY = "intensity"
    LIGHTING = "lighting"
    COLOR_TEMP = "colorTemp"
    TIME_OF_DAY = "timeOfDay"
    COMPOSITION = "composition"

    @property
    def label(self) -> str:
        return LABELS[self]

    @property
    def query_param(self) -> str:
        return QUERY_PARAMS[self]

    @property
    def is_multi_valued(self) -> bool:
        return self is Dimension.LIGHTING


@dataclass(frozen=True)
class DimensionDependency:
    """Which other dimensions narrow the valid value set of a dimension."""

    depends_on: tuple[Dimension, ...] = ()
    sport_specific: bool = False

    @property
    def sport_aware(self) -> bool:
        return Dimension.SPORT in self.depends_on


# Documents intent only. Compatibility is decided by counts for every dimension;
# play types are assumed to arrive already narrowed to the selected sport.
DEPENDENCIES: dict[Dimension, DimensionDependency] = {
    Dimension.PLAY_TYPE: DimensionDependency(depends_on=(Dimension.SPORT,), sport_specific=True),
    Dimension.INTENSITY: DimensionDependency(depends_on=(Dimension.SPORT,), sport_specific=False),
    Dimension.CATEGORY: DimensionDependency(),
    Dimension.LIGHTING: DimensionDependency(),
    Dimension.COLOR_TEMP: DimensionDependency(),
    Dimension.TIME_OF_DAY: DimensionDependency(),
    Dimension.COMPOSITION: DimensionDependency(),
}

LABELS: dict[Dimension, str] = {
    Dimension.SPORT: "Sport",
    Dimension.CATEGORY: "Category",
    Dimension.PLAY_TYPE: "Play Type",
    Dimension.INTENSITY: "Intensity",
    Dimension.LIGHTING: "Lighting",
    Dimension.COLOR_TEMP: "Color Temperature",
    Dimension.TIME_OF_DAY: "Time of Day",
    Dimension.COMPOSITION: "Composition",
}

QUERY_PARAMS: dict[Dimension, str] = {
    Dimension.SPORT: "sport",
    Dimension.CATEGORY: "category",
    Dimension.PLAY_TYPE: "play_type",
    Dimension.INTENSITY: "intensity",
    Dimension.LIGHTING: "lighting",
    Dimension.COLOR_TEMP: "color_temp",
    Dimension.TIME_OF_DAY: "time_of_day",
    Dimension.COMPOSITION: "composition",
}

# Sport is the anchor selection and is never auto-cleared.
AUTO_CLEAN_ORDER: tuple[Dimension, ...] = (
    Dimension.PLAY_TYPE,
    Dimension.INTENSITY,
    Dimension.CATEGORY,
    Dimension.LIGHTING,
    Dimension.COLOR_TEMP,
    Dimension.TIME_OF_DAY,
    Dimension.COMPOSITION,
)


def parse_dimension(value: Dimension | str) -> Dimension | None:
    """Return the matching dimension, accepting enum values or query names."""
    if isinstance(value, Dimension):
        return value
    try:
        return Dimension(value)
    except ValueError:
        pass
    for dimension, param in QUERY_PARAMS.items():
        if param == value:
            return dimension
    return None
