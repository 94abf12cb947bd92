"""HTTP request handlers."""

from __future__ import annotations

import asyncio

from stario import Context, Writer

from .filters import FilterCategory
from .session import BrowseSession, SessionRegistry
from .views import (
    active_filters_view,
    filter_group_view,
    filter_panel_view,
    home_view,
    results_view,
    search_signal,
)


def home(registry: SessionRegistry):
    async def handler(c: Context, w: Writer) -> None:
        session = registry.create()
        w.html(home_view(session))

    return handler


def load_projects(registry: SessionRegistry):
    async def handler(c: Context, w: Writer) -> None:
        session = _resolve_session(await c.signals(), registry, w)
        w.patch(results_view(session, refreshing=not session.cache_is_fresh()))

        pending = [session.load_projects()]
        if session.ecosystems_loading:
            pending.append(session.load_ecosystems())
        await asyncio.gather(*pending)

        w.patch(filter_panel_view(session))
        w.patch(results_view(session))

    return handler


def refresh_projects(registry: SessionRegistry):
    async def handler(c: Context, w: Writer) -> None:
        session = _resolve_session(await c.signals(), registry, w)
        w.patch(results_view(session, refreshing=True))
        await session.refresh_projects()
        w.patch(results_view(session))

    return handler


def toggle_filter(registry: SessionRegistry):
    async def handler(c: Context, w: Writer) -> None:
        category = _category(c)
        value = c.req.query.get("value", "")
        if category is None or not value:
            w.empty(400)
            return

        session = _resolve_session(await c.signals(), registry, w)
        session.toggle_filter(category, value)
        await _reload_after_filter_change(session, w)

    return handler


def clear_filter(registry: SessionRegistry):
    async def handler(c: Context, w: Writer) -> None:
        category = _category(c)
        value = c.req.query.get("value", "")
        if category is None or not value:
            w.empty(400)
            return

        session = _resolve_session(await c.signals(), registry, w)
        session.clear_filter(category, value)
        await _reload_after_filter_change(session, w)

    return handler


def clear_all_filters(registry: SessionRegistry):
    async def handler(c: Context, w: Writer) -> None:
        session = _resolve_session(await c.signals(), registry, w)
        session.clear_all_filters()
        await _reload_after_filter_change(session, w)

    return handler


def set_search_term(registry: SessionRegistry):
    async def handler(c: Context, w: Writer) -> None:
        category = _category(c)
        if category is None:
            w.empty(400)
            return

        signals = await c.signals()
        session = _resolve_session(signals, registry, w)
        session.set_search_term(category, str(signals.get(search_signal(category), "")))
        w.patch(filter_group_view(session, category))

    return handler


async def _reload_after_filter_change(session: BrowseSession, w: Writer) -> None:
    w.patch(active_filters_view(session))
    w.patch(filter_panel_view(session))
    w.patch(results_view(session, refreshing=not session.cache_is_fresh()))

    await session.load_projects()

    # A later filter change may have committed first; render what is committed.
    w.patch(results_view(session))


def _resolve_session(signals: dict, registry: SessionRegistry, w: Writer) -> BrowseSession:
    session_id = str(signals.get("session_id", ""))
    session = registry.get_or_create(session_id)
    if session.id != session_id:
        w.sync({"session_id": session.id})
    return session


def _category(c: Context) -> FilterCategory | None:
    try:
        return FilterCategory(c.req.query.get("category", ""))
    except ValueError:
        return None
