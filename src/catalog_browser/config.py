"""Configuration loading and validation.

The browser reads a single ``catalog-browser.yaml`` at startup. Every value
has a default, so a missing file is not an error. Environment variables with
the ``CATALOG_BROWSER_`` prefix override the file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "catalog-browser.yaml"


# ============================================================================
# Configuration Sections
# ============================================================================


@dataclass(frozen=True, slots=True)
class BackendConfig:
    """Catalog backend connection."""

    base_url: str = "http://127.0.0.1:8080/api"
    timeout: float = 30.0


@dataclass(frozen=True, slots=True)
class CacheConfig:
    """Project list cache."""

    ttl: float = 30.0


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Stario server settings."""

    host: str = "127.0.0.1"
    port: int = 8000
    workers: int = 1
    max_sessions: int = 256
    log_level: str = "INFO"


@dataclass(frozen=True, slots=True)
class FilterOptionsConfig:
    """Static filter options. Ecosystems come from the backend."""

    languages: tuple[str, ...] = ("TypeScript", "JavaScript", "Python", "Go", "Rust", "Java")
    categories: tuple[str, ...] = ("Frontend", "Backend", "Full Stack", "DevOps", "Mobile")
    tags: tuple[str, ...] = (
        "Good first issues",
        "Open issues",
        "Help wanted",
        "Bug",
        "Feature",
        "Documentation",
    )


# ============================================================================
# Main Configuration
# ============================================================================


@dataclass(frozen=True, slots=True)
class BrowserConfig:
    """Complete catalog browser configuration.

    Frozen dataclass - immutable after creation.
    Loaded once at startup, passed explicitly to components.
    """

    backend: BackendConfig = field(default_factory=BackendConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    filters: FilterOptionsConfig = field(default_factory=FilterOptionsConfig)


# ============================================================================
# Loading
# ============================================================================

_ENV_MAPPINGS: dict[str, tuple[str, str]] = {
    "CATALOG_BROWSER_BACKEND_BASE_URL": ("backend", "base_url"),
    "CATALOG_BROWSER_BACKEND_TIMEOUT": ("backend", "timeout"),
    "CATALOG_BROWSER_CACHE_TTL": ("cache", "ttl"),
    "CATALOG_BROWSER_SERVER_HOST": ("server", "host"),
    "CATALOG_BROWSER_SERVER_PORT": ("server", "port"),
    "CATALOG_BROWSER_SERVER_MAX_SESSIONS": ("server", "max_sessions"),
    "CATALOG_BROWSER_LOG_LEVEL": ("server", "log_level"),
}

_FLOAT_KEYS = {"timeout", "ttl"}
_INT_KEYS = {"port", "workers", "max_sessions"}


def load_config(path: str | Path | None = None) -> BrowserConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to catalog-browser.yaml. If None, searches the current
              directory and its parents.

    Returns:
        Frozen BrowserConfig instance

    Raises:
        ConfigError: If the file or one of its values is invalid
    """
    config_path = Path(path).expanduser() if path is not None else _find_config_file()

    data: dict[str, Any] = {}
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping at the top of {config_path}")
    else:
        logger.info("No config file found, using defaults")

    data = _apply_env_overrides(data)

    try:
        config = _build_config(data)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    if config.cache.ttl < 0:
        raise ConfigError("cache.ttl must not be negative")
    return config


def _find_config_file() -> Path:
    """Search for catalog-browser.yaml in current and parent directories."""
    current = Path.cwd()

    for directory in [current] + list(current.parents):
        config_path = directory / DEFAULT_CONFIG_FILENAME
        if config_path.exists():
            return config_path
        if (directory / "pyproject.toml").exists():
            break

    return current / DEFAULT_CONFIG_FILENAME


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    for env_var, (section, key) in _ENV_MAPPINGS.items():
        value = os.environ.get(env_var)
        if not value:
            continue
        section_data = data.setdefault(section, {})
        if not isinstance(section_data, dict):
            raise ConfigError(f"Section '{section}' must be a mapping")
        try:
            if key in _INT_KEYS:
                section_data[key] = int(value)
            elif key in _FLOAT_KEYS:
                section_data[key] = float(value)
            else:
                section_data[key] = value
        except ValueError as e:
            raise ConfigError(f"Invalid value for {env_var}: {value!r}") from e

    return data


def _build_config(data: dict[str, Any]) -> BrowserConfig:
    """Build BrowserConfig from dictionary data."""

    def get_section(name: str, cls: type) -> Any:
        section_data = data.get(name) or {}
        if not isinstance(section_data, dict):
            raise ValueError(f"section '{name}' must be a mapping")
        section_data = {
            key: tuple(value) if isinstance(value, list) else value
            for key, value in section_data.items()
        }
        return cls(**section_data)

    return BrowserConfig(
        backend=get_section("backend", BackendConfig),
        cache=get_section("cache", CacheConfig),
        server=get_section("server", ServerConfig),
        filters=get_section("filters", FilterOptionsConfig),
    )


__all__ = [
    "BackendConfig",
    "BrowserConfig",
    "CacheConfig",
    "ConfigError",
    "FilterOptionsConfig",
    "ServerConfig",
    "load_config",
]
