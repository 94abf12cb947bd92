"""Backend query parameters derived from a filter selection."""

from __future__ import annotations

from .filters import FilterSelection

QueryKey = tuple[tuple[str, str], ...]


def compose_query(selection: FilterSelection) -> dict[str, str]:
    """Build the "list projects" parameters for ``selection``.

    The backend takes a single language, ecosystem and category, so only the
    first selected value of each is sent even though the UI allows several.
    Tags are sent comma-separated in selection order.
    """
    params: dict[str, str] = {}
    if selection.languages:
        params["language"] = selection.languages[0]
    if selection.ecosystems:
        params["ecosystem"] = selection.ecosystems[0]
    if selection.categories:
        params["category"] = selection.categories[0]
    if selection.tags:
        params["tags"] = ",".join(selection.tags)
    return params


def query_key(params: dict[str, str]) -> QueryKey:
    """Hashable, order-independent identity of a composed query."""
    return tuple(sorted(params.items()))


__all__ = ["QueryKey", "compose_query", "query_key"]
