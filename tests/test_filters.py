from __future__ import annotations

from catalog_browser.filters import FilterCategory, FilterSelection, FilterState


def test_toggle_appends_then_removes() -> None:
    state = FilterState()

    state.toggle(FilterCategory.LANGUAGES, "Go")
    state.toggle(FilterCategory.LANGUAGES, "Rust")
    assert state.selection.languages == ("Go", "Rust")

    state.toggle(FilterCategory.LANGUAGES, "Go")
    assert state.selection.languages == ("Rust",)


def test_toggle_produces_new_selection_object() -> None:
    state = FilterState()
    before = state.selection

    after = state.toggle(FilterCategory.TAGS, "Bug")

    assert after is not before
    assert before.tags == ()
    assert after.tags == ("Bug",)


def test_clear_removes_only_the_given_value() -> None:
    state = FilterState()
    state.toggle(FilterCategory.TAGS, "Bug")
    state.toggle(FilterCategory.TAGS, "Feature")

    state.clear(FilterCategory.TAGS, "Bug")

    assert state.selection.tags == ("Feature",)


def test_clear_missing_value_is_noop() -> None:
    state = FilterState()
    state.toggle(FilterCategory.CATEGORIES, "DevOps")
    before = state.selection

    state.clear(FilterCategory.CATEGORIES, "Mobile")

    assert state.selection is before


def test_clear_all_and_active_count() -> None:
    state = FilterState()
    state.toggle(FilterCategory.LANGUAGES, "Go")
    state.toggle(FilterCategory.ECOSYSTEMS, "Stellar")
    state.toggle(FilterCategory.TAGS, "Bug")
    state.toggle(FilterCategory.TAGS, "Help wanted")

    assert state.active_count() == 4
    assert state.active_filters() == [
        (FilterCategory.LANGUAGES, "Go"),
        (FilterCategory.ECOSYSTEMS, "Stellar"),
        (FilterCategory.TAGS, "Bug"),
        (FilterCategory.TAGS, "Help wanted"),
    ]

    state.clear_all()

    assert state.selection == FilterSelection()
    assert state.active_count() == 0


def test_search_term_narrows_options_case_insensitively() -> None:
    state = FilterState()
    options = ["TypeScript", "JavaScript", "Python", "Go"]

    state.set_search_term(FilterCategory.LANGUAGES, "SCRIPT")

    assert state.filtered_options(FilterCategory.LANGUAGES, options) == ["TypeScript", "JavaScript"]
    assert state.filtered_options(FilterCategory.TAGS, ["Bug"]) == ["Bug"]


def test_search_term_does_not_touch_selection() -> None:
    state = FilterState()
    before = state.selection

    state.set_search_term(FilterCategory.TAGS, "bug")

    assert state.selection is before
