"""Faceted filter engine for tagged photo collections."""

from .api import FacetFilterAPI, build_api
from .cache import BaselineCache
from .compatibility import is_compatible
from .dimensions import Dimension
from .display import (
    active_filter_count,
    display_count,
    format_cleared_filters,
    has_active_filters,
    has_zero_results,
    pill_state,
)
from .models import FacetEngineConfig, FilterCounts, FilterState
from .resolution import resolve, resolve_single_pass, resolve_to_fixed_point
from .service_http import create_app

__all__ = [
    "BaselineCache",
    "Dimension",
    "FacetEngineConfig",
    "FacetFilterAPI",
    "FilterCounts",
    "FilterState",
    "active_filter_count",
    "build_api",
    "create_app",
    "display_count",
    "format_cleared_filters",
    "has_active_filters",
    "has_zero_results",
    "is_compatible",
    "pill_state",
    "resolve",
    "resolve_single_pass",
    "resolve_to_fixed_point",
]

__version__ = "0.1.0"
