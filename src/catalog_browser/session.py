"""Per-visitor browsing state."""

from __future__ import annotations

import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field

from .cache import FetchCacheController
from .client import CatalogClient
from .config import BrowserConfig
from .filters import FilterCategory, FilterSelection, FilterState
from .normalize import EcosystemOption, ProjectViewModel, normalize_ecosystems, normalize_projects
from .query import compose_query, query_key

logger = logging.getLogger(__name__)


@dataclass
class BrowseSession:
    """Filters, project cache and ecosystem options of one browsing view."""

    id: str
    client: CatalogClient
    config: BrowserConfig
    filters: FilterState = field(default_factory=FilterState)
    ecosystems: list[EcosystemOption] = field(default_factory=list)
    ecosystems_loading: bool = True
    projects_cache: FetchCacheController[list[ProjectViewModel]] = field(init=False)

    def __post_init__(self) -> None:
        self.projects_cache = FetchCacheController([], ttl=self.config.cache.ttl)

    # Derived read-only state

    @property
    def projects(self) -> list[ProjectViewModel]:
        return self.projects_cache.data

    @property
    def is_loading(self) -> bool:
        return self.projects_cache.is_loading

    @property
    def has_error(self) -> bool:
        return self.projects_cache.has_error

    @property
    def error_message(self) -> str | None:
        error = self.projects_cache.error
        return str(error) if error is not None else None

    @property
    def is_empty(self) -> bool:
        """A successful fetch came back with nothing."""
        return (
            not self.projects
            and not self.is_loading
            and not self.has_error
            and self.projects_cache.entry is not None
        )

    @property
    def active_count(self) -> int:
        return self.filters.active_count()

    def options(self, category: FilterCategory) -> list[str]:
        if category is FilterCategory.ECOSYSTEMS:
            names = [eco.name for eco in self.ecosystems]
        else:
            names = list(getattr(self.config.filters, category.value))
        return self.filters.filtered_options(category, names)

    # Inbound UI events

    def toggle_filter(self, category: FilterCategory, value: str) -> FilterSelection:
        return self.filters.toggle(category, value)

    def clear_filter(self, category: FilterCategory, value: str) -> FilterSelection:
        return self.filters.clear(category, value)

    def clear_all_filters(self) -> FilterSelection:
        return self.filters.clear_all()

    def set_search_term(self, category: FilterCategory, text: str) -> None:
        self.filters.set_search_term(category, text)

    # Fetching

    def cache_is_fresh(self) -> bool:
        return self.projects_cache.is_fresh(query_key(compose_query(self.filters.selection)))

    async def load_projects(self) -> list[ProjectViewModel]:
        params = compose_query(self.filters.selection)

        async def produce() -> list[ProjectViewModel]:
            try:
                payload = await self.client.list_projects(params)
            except Exception as e:
                logger.error("Failed to fetch projects %s: %s", params, e)
                raise
            projects = normalize_projects(payload)
            logger.info("Loaded %d project(s) for %s", len(projects), params or "all")
            return projects

        return await self.projects_cache.fetch(produce, key=query_key(params))

    async def refresh_projects(self) -> list[ProjectViewModel]:
        self.projects_cache.invalidate()
        return await self.load_projects()

    async def load_ecosystems(self) -> list[EcosystemOption]:
        self.ecosystems_loading = True
        try:
            self.ecosystems = normalize_ecosystems(await self.client.list_ecosystems())
        except Exception as e:
            logger.error("Failed to fetch ecosystems: %s", e)
            self.ecosystems = []
        finally:
            self.ecosystems_loading = False
        return self.ecosystems

    def close(self) -> None:
        self.projects_cache.reset()


class SessionRegistry:
    """Bounded map of session id -> BrowseSession, oldest evicted first."""

    def __init__(self, client: CatalogClient, config: BrowserConfig) -> None:
        self.client = client
        self.config = config
        self._sessions: OrderedDict[str, BrowseSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def create(self) -> BrowseSession:
        session = BrowseSession(id=uuid.uuid4().hex, client=self.client, config=self.config)
        self._sessions[session.id] = session
        self._evict()
        return session

    def get_or_create(self, session_id: str) -> BrowseSession:
        session = self._sessions.get(session_id)
        if session is None:
            return self.create()
        self._sessions.move_to_end(session_id)
        return session

    def discard(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is not None:
            session.close()

    def _evict(self) -> None:
        while len(self._sessions) > max(self.config.server.max_sessions, 1):
            session_id, session = self._sessions.popitem(last=False)
            session.close()
            logger.info("Evicted browsing session %s", session_id)
