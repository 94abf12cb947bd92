"""Exception hierarchy for the catalog browser."""

from __future__ import annotations


class CatalogBrowserError(Exception):
    """Base class for catalog browser errors."""


class ConfigError(CatalogBrowserError):
    """Configuration file or value is invalid."""


class BackendError(CatalogBrowserError):
    """The catalog backend could not be reached or returned an unusable response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


__all__ = ["BackendError", "CatalogBrowserError", "ConfigError"]
