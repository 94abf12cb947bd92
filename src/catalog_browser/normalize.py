"""Backend payload decoding and project view models.

The catalog backend does not guarantee a response shape. Lists arrive bare,
wrapped in a named envelope field, or wrapped under some other key. Records
may miss any field. Everything here is total: bad input yields fewer
records, never an exception.
"""

from __future__ import annotations

import logging
import math
import random
import time
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

logger = logging.getLogger(__name__)

DESCRIPTION_MAX_LENGTH = 80

PROJECT_COLORS: tuple[str, ...] = (
    "from-blue-500 to-cyan-500",
    "from-purple-500 to-pink-500",
    "from-green-500 to-emerald-500",
    "from-red-500 to-pink-500",
    "from-orange-500 to-red-500",
    "from-gray-600 to-gray-800",
    "from-green-600 to-green-800",
    "from-cyan-500 to-blue-600",
)


@dataclass(frozen=True, slots=True)
class ProjectViewModel:
    """Display-ready project card data."""

    id: str
    name: str
    icon: str
    stars_display: str
    forks_display: str
    contributors: int
    open_issues: int
    prs: int
    description: str
    tags: tuple[str, ...]
    color_class: str


@dataclass(frozen=True, slots=True)
class EcosystemOption:
    name: str


# ============================================================================
# Typed decoding
# ============================================================================


class ProjectEnvelope(BaseModel):
    """``{"projects": [...]}`` response body."""

    model_config = ConfigDict(extra="ignore")

    projects: list[Any]


class EcosystemEnvelope(BaseModel):
    """``{"ecosystems": [...]}`` response body."""

    model_config = ConfigDict(extra="ignore")

    ecosystems: list[Any]


_ENVELOPES: dict[str, type[BaseModel]] = {
    "projects": ProjectEnvelope,
    "ecosystems": EcosystemEnvelope,
}


class RawProject(BaseModel):
    """Lenient view of one backend project record."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    github_full_name: str
    stars_count: int = 0
    forks_count: int = 0
    contributors_count: int = 0
    open_issues_count: int = 0
    open_prs_count: int = 0
    description: str | None = None
    language: str | None = None
    category: str | None = None
    tags: list[str] = []

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_text(cls, value: Any) -> str | None:
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            return None
        text = str(value)
        return text or None

    @field_validator("github_full_name")
    @classmethod
    def _owner_and_repo(cls, value: str) -> str:
        owner, sep, repo = value.partition("/")
        if not sep or not owner or not repo or "/" in repo:
            raise ValueError("expected 'owner/repo'")
        return value

    @field_validator(
        "stars_count",
        "forks_count",
        "contributors_count",
        "open_issues_count",
        "open_prs_count",
        mode="before",
    )
    @classmethod
    def _count(cls, value: Any) -> int:
        if isinstance(value, bool):
            return 0
        if isinstance(value, float) and not math.isfinite(value):
            return 0
        if isinstance(value, (int, float)):
            return max(int(value), 0)
        if isinstance(value, str):
            try:
                return max(int(value.strip()), 0)
            except ValueError:
                return 0
        return 0

    @field_validator("description", "language", "category", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None

    @field_validator("tags", mode="before")
    @classmethod
    def _tag_list(cls, value: Any) -> list[str]:
        if not isinstance(value, list):
            return []
        return [tag for tag in value if isinstance(tag, str)]

    @property
    def owner(self) -> str:
        return self.github_full_name.partition("/")[0]

    @property
    def repo_name(self) -> str:
        return self.github_full_name.partition("/")[2]


def extract_records(payload: Any, field: str) -> list[Any]:
    """Recover the record list from a loosely shaped payload.

    Accepts a bare list, an envelope whose ``field`` is a list, or an
    envelope with any other list-valued member (first one wins).
    """
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        logger.warning("Unexpected %s payload type: %s", field, type(payload).__name__)
        return []

    envelope_model = _ENVELOPES.get(field)
    if envelope_model is not None:
        try:
            envelope = envelope_model.model_validate(payload)
        except ValidationError as e:
            logger.debug("%s envelope did not decode: %s", field, e.errors(include_url=False))
        else:
            return getattr(envelope, field)

    for key, value in payload.items():
        if isinstance(value, list):
            logger.debug("Using list field %r for %s (expected %r)", key, field, field)
            return value

    logger.warning("No %s list found in envelope with keys %s", field, sorted(map(str, payload)))
    return []


# ============================================================================
# Display helpers
# ============================================================================


def format_number(num: int) -> str:
    """1234 -> "1.2K", 1234567 -> "1.2M"."""
    if num >= 1_000_000:
        return f"{num / 1_000_000:.1f}M"
    if num >= 1_000:
        return f"{num / 1_000:.1f}K"
    return str(num)


def truncate_description(description: str | None, max_length: int = DESCRIPTION_MAX_LENGTH) -> str:
    if not description or not description.strip():
        return ""
    first_line = description.split("\n")[0].strip()
    if len(first_line) > max_length:
        return first_line[:max_length].strip() + "..."
    return first_line


def project_icon(github_full_name: str) -> str:
    owner = github_full_name.split("/")[0]
    return f"https://github.com/{owner}.png?size=40"


def project_color(name: str) -> str:
    return PROJECT_COLORS[sum(ord(char) for char in name) % len(PROJECT_COLORS)]


def fallback_description(language: str | None, category: str | None) -> str:
    text = f"{language or 'Project'} repository"
    if category:
        text += f" - {category}"
    return text


def _fallback_id() -> str:
    return f"project-{int(time.time() * 1000)}-{random.random()}"


# ============================================================================
# Normalization
# ============================================================================


def to_view_model(record: RawProject) -> ProjectViewModel:
    name = record.repo_name
    return ProjectViewModel(
        id=record.id or _fallback_id(),
        name=name,
        icon=project_icon(record.github_full_name),
        stars_display=format_number(record.stars_count),
        forks_display=format_number(record.forks_count),
        contributors=record.contributors_count,
        open_issues=record.open_issues_count,
        prs=record.open_prs_count,
        description=truncate_description(record.description)
        or fallback_description(record.language, record.category),
        tags=tuple(record.tags),
        color_class=project_color(name),
    )


def normalize_projects(payload: Any) -> list[ProjectViewModel]:
    projects: list[ProjectViewModel] = []
    dropped = 0
    for item in extract_records(payload, "projects"):
        if not isinstance(item, dict):
            dropped += 1
            continue
        try:
            record = RawProject.model_validate(item)
        except ValidationError as e:
            dropped += 1
            logger.debug("Dropping invalid project record: %s", e.errors(include_url=False))
            continue
        projects.append(to_view_model(record))

    if dropped:
        logger.info("Dropped %d invalid project record(s)", dropped)
    return projects


def normalize_ecosystems(payload: Any) -> list[EcosystemOption]:
    """Active ecosystems only, as filter options."""
    return [
        EcosystemOption(name=item["name"])
        for item in extract_records(payload, "ecosystems")
        if isinstance(item, dict)
        and item.get("status") == "active"
        and isinstance(item.get("name"), str)
        and item["name"]
    ]


__all__ = [
    "DESCRIPTION_MAX_LENGTH",
    "EcosystemEnvelope",
    "EcosystemOption",
    "PROJECT_COLORS",
    "ProjectEnvelope",
    "ProjectViewModel",
    "RawProject",
    "extract_records",
    "fallback_description",
    "format_number",
    "normalize_ecosystems",
    "normalize_projects",
    "project_color",
    "project_icon",
    "to_view_model",
    "truncate_description",
]
