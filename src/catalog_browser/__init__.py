"""Filterable browser for a catalog of open-source projects."""

from .cache import FetchCacheController, FetchStatus
from .filters import FilterCategory, FilterSelection, FilterState
from .normalize import ProjectViewModel, normalize_projects
from .query import compose_query

__all__ = [
    "FetchCacheController",
    "FetchStatus",
    "FilterCategory",
    "FilterSelection",
    "FilterState",
    "ProjectViewModel",
    "compose_query",
    "normalize_projects",
]
