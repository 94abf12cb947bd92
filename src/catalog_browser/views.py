"""HTML views for the catalog browser."""

from __future__ import annotations

from urllib.parse import urlencode

from stario import at, data
from stario.html import (
    Body,
    Button,
    Div,
    Head,
    Html,
    Img,
    Input,
    Meta,
    P,
    Script,
    Span,
    Title,
)

from .filters import FilterCategory
from .normalize import ProjectViewModel
from .session import BrowseSession

DATASTAR_SRC = "https://cdn.jsdelivr.net/gh/starfederation/datastar@1.0.0-RC.6/bundles/datastar.js"
SKELETON_CARDS = 6


def search_signal(category: FilterCategory) -> str:
    return f"search_{category.value}"


def _action(path: str, **params: str) -> str:
    if params:
        path = f"{path}?{urlencode(params)}"
    return at.post(path)


def page(*children):
    return Html(
        {"lang": "en"},
        Head(
            Meta({"charset": "UTF-8"}),
            Meta(
                {"name": "viewport", "content": "width=device-width, initial-scale=1"}
            ),
            Title("Browse projects"),
            Script({"type": "module", "src": DATASTAR_SRC}),
        ),
        Body(*children),
    )


def active_filters_view(session: BrowseSession):
    chips = []
    for category, value in session.filters.active_filters():
        chips.append(
            Span(
                {"class": "filter-chip"},
                value,
                Button(
                    {"type": "button", "aria-label": f"Remove {value} filter"},
                    data.on(
                        "click",
                        _action("/filters/clear", category=category.value, value=value),
                    ),
                    "x",
                ),
            )
        )

    if not chips:
        return Div({"id": "active-filters", "class": "active-filters empty"})

    return Div(
        {"id": "active-filters", "class": "active-filters"},
        Span({"class": "filter-count"}, f"{session.active_count} active"),
        *chips,
        Button(
            {"type": "button", "class": "secondary"},
            data.on("click", _action("/filters/clear-all")),
            "Clear all",
        ),
    )


def filter_group_view(session: BrowseSession, category: FilterCategory):
    selected = session.filters.selection.values(category)
    title = category.label
    if selected:
        title = f"{title} ({len(selected)})"

    if category is FilterCategory.ECOSYSTEMS and session.ecosystems_loading:
        options = [Div({"class": "option-empty"}, "Loading ecosystems...")]
    else:
        names = session.options(category)
        options = [
            Button(
                {
                    "type": "button",
                    "class": "option selected" if name in selected else "option",
                },
                data.on(
                    "click",
                    _action("/filters/toggle", category=category.value, value=name),
                ),
                name,
            )
            for name in names
        ] or [Div({"class": "option-empty"}, "No matches")]

    return Div(
        {"id": f"filter-{category.value}", "class": "filter-group"},
        Div({"class": "filter-title"}, title),
        Input(
            {"type": "text", "placeholder": f"Search {category.value}..."},
            data.bind(search_signal(category)),
            data.on("input", _action("/filters/search", category=category.value)),
        ),
        Div({"class": "filter-options"}, *options),
    )


def filter_panel_view(session: BrowseSession):
    return Div(
        {"id": "filter-panel", "class": "filter-panel"},
        *[filter_group_view(session, category) for category in FilterCategory],
    )


def project_card(project: ProjectViewModel):
    return Div(
        {"class": "project-card", "id": f"project-{project.id}"},
        Div(
            {"class": f"project-header bg-gradient-to-br {project.color_class}"},
            Img({"src": project.icon, "alt": project.name, "class": "project-icon"}),
            Span({"class": "project-name"}, project.name),
        ),
        P({"class": "project-description"}, project.description),
        Div(
            {"class": "project-stats"},
            Span({}, f"★ {project.stars_display}"),
            Span({}, f"forks {project.forks_display}"),
            Span({}, f"contributors {project.contributors}"),
            Span({}, f"issues {project.open_issues}"),
            Span({}, f"PRs {project.prs}"),
        ),
        Div(
            {"class": "project-tags"},
            *[Span({"class": "tag"}, tag) for tag in project.tags],
        ),
    )


def skeleton_card():
    return Div({"class": "project-card skeleton"}, Div({"class": "skeleton-line"}))


def results_view(session: BrowseSession, refreshing: bool = False):
    loading = refreshing or session.is_loading
    projects = session.projects
    children = []

    if session.has_error:
        children.append(
            Div(
                {"class": "error-banner"},
                f"Could not refresh projects: {session.error_message}",
                Button(
                    {"type": "button", "class": "secondary"},
                    data.on("click", _action("/projects/refresh")),
                    "Retry",
                ),
            )
        )

    if loading and projects:
        children.append(Div({"class": "refresh-indicator"}, "Refreshing..."))

    if projects:
        children.append(
            Div({"class": "project-grid"}, *[project_card(p) for p in projects])
        )
    elif loading or (session.projects_cache.entry is None and not session.has_error):
        children.append(
            Div(
                {"class": "project-grid"},
                *[skeleton_card() for _ in range(SKELETON_CARDS)],
            )
        )
    elif session.is_empty:
        children.append(
            Div(
                {"class": "empty-state"},
                "No projects match these filters.",
                Button(
                    {"type": "button", "class": "secondary"},
                    data.on("click", _action("/filters/clear-all")),
                    "Clear filters",
                ),
            )
        )

    return Div({"id": "results", "class": "results"}, *children)


def home_view(session: BrowseSession):
    signals: dict[str, object] = {"session_id": session.id}
    for category in FilterCategory:
        signals[search_signal(category)] = session.filters.search_terms.get(category, "")

    return page(
        Div(
            {"class": "app"},
            data.signals(signals),
            data.init(_action("/projects/load")),
            Div({"class": "hero-title"}, "Browse projects"),
            active_filters_view(session),
            Div(
                {"class": "layout"},
                filter_panel_view(session),
                results_view(session),
            ),
        )
    )
