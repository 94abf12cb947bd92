"""Filter selection and per-category search terms."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable


class FilterCategory(Enum):
    """The four filter dimensions of the browse page."""

    LANGUAGES = "languages"
    ECOSYSTEMS = "ecosystems"
    CATEGORIES = "categories"
    TAGS = "tags"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True, slots=True)
class FilterSelection:
    """Selected values per category, in the order they were added."""

    languages: tuple[str, ...] = ()
    ecosystems: tuple[str, ...] = ()
    categories: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()

    def values(self, category: FilterCategory) -> tuple[str, ...]:
        return getattr(self, category.value)

    def with_values(self, category: FilterCategory, values: Iterable[str]) -> "FilterSelection":
        return replace(self, **{category.value: tuple(values)})


@dataclass
class FilterState:
    """Current filter choices of one browsing session.

    ``selection`` is never mutated in place: every change swaps in a new
    FilterSelection so callers can detect changes by identity.
    """

    selection: FilterSelection = field(default_factory=FilterSelection)
    search_terms: dict[FilterCategory, str] = field(
        default_factory=lambda: {category: "" for category in FilterCategory}
    )

    def toggle(self, category: FilterCategory, value: str) -> FilterSelection:
        current = self.selection.values(category)
        if value in current:
            updated = tuple(v for v in current if v != value)
        else:
            updated = current + (value,)
        self.selection = self.selection.with_values(category, updated)
        return self.selection

    def clear(self, category: FilterCategory, value: str) -> FilterSelection:
        current = self.selection.values(category)
        if value in current:
            self.selection = self.selection.with_values(
                category, (v for v in current if v != value)
            )
        return self.selection

    def clear_all(self) -> FilterSelection:
        self.selection = FilterSelection()
        return self.selection

    def active_count(self) -> int:
        return sum(len(self.selection.values(category)) for category in FilterCategory)

    def active_filters(self) -> list[tuple[FilterCategory, str]]:
        """(category, value) pairs for every selected value, category by category."""
        return [
            (category, value)
            for category in FilterCategory
            for value in self.selection.values(category)
        ]

    def is_selected(self, category: FilterCategory, value: str) -> bool:
        return value in self.selection.values(category)

    def set_search_term(self, category: FilterCategory, text: str) -> None:
        self.search_terms = {**self.search_terms, category: text}

    def filtered_options(self, category: FilterCategory, options: Iterable[str]) -> list[str]:
        term = self.search_terms.get(category, "").strip().lower()
        return [option for option in options if term in option.lower()]


__all__ = ["FilterCategory", "FilterSelection", "FilterState"]
