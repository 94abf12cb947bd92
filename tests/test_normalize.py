from __future__ import annotations

import logging

import pytest

from catalog_browser.normalize import (
    PROJECT_COLORS,
    EcosystemEnvelope,
    EcosystemOption,
    ProjectEnvelope,
    extract_records,
    format_number,
    normalize_ecosystems,
    normalize_projects,
    project_color,
    truncate_description,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0, "0"), (999, "999"), (1000, "1.0K"), (1500, "1.5K"), (2_300_000, "2.3M")],
)
def test_format_number(value: int, expected: str) -> None:
    assert format_number(value) == expected


def test_truncate_long_single_line() -> None:
    text = "x" * 85

    result = truncate_description(text)

    assert result == "x" * 80 + "..."


def test_truncate_keeps_first_line_only() -> None:
    assert truncate_description("  First line  \nsecond line") == "First line"


def test_truncate_applies_length_after_first_line() -> None:
    first = "y" * 90
    assert truncate_description(f"{first}\nshort") == "y" * 80 + "..."


@pytest.mark.parametrize("value", [None, "", "   \n  "])
def test_truncate_blank_is_empty(value: str | None) -> None:
    assert truncate_description(value) == ""


@pytest.mark.parametrize("payload", [None, {}, {"projects": "not-an-array"}, 42, "text"])
def test_malformed_payloads_yield_nothing(payload: object) -> None:
    assert normalize_projects(payload) == []


def test_extract_records_accepts_each_envelope_shape() -> None:
    records = [{"github_full_name": "a/b"}]

    assert extract_records(records, "projects") is records
    assert extract_records({"projects": records}, "projects") == records
    assert extract_records({"total": 1, "items": records}, "projects") == records


def test_named_field_wins_over_other_lists() -> None:
    named = [{"github_full_name": "a/b"}]

    assert extract_records({"other": [1], "projects": named}, "projects") == named


def test_non_list_named_field_falls_back_to_scan(caplog: pytest.LogCaptureFixture) -> None:
    records = [{"github_full_name": "a/b"}]

    with caplog.at_level(logging.DEBUG, logger="catalog_browser.normalize"):
        result = extract_records({"projects": "oops", "items": records}, "projects")

    assert result == records
    assert "projects envelope did not decode" in caplog.text
    assert "Using list field 'items'" in caplog.text


def test_envelopes_decode_their_own_field_only() -> None:
    ecosystems = [{"name": "Rust", "status": "active"}]
    payload = {"projects": "bad", "ecosystems": ecosystems}

    assert ProjectEnvelope.model_validate({"projects": [1], "extra": True}).projects == [1]
    assert EcosystemEnvelope.model_validate(payload).ecosystems == ecosystems
    assert extract_records(payload, "ecosystems") == ecosystems


def test_missing_list_is_logged_as_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="catalog_browser.normalize"):
        assert extract_records({"total": 0}, "projects") == []

    assert "No projects list found" in caplog.text


def test_devops_scenario() -> None:
    payload = {
        "projects": [
            {"id": "1", "github_full_name": "acme/toolkit", "stars_count": 2500, "description": ""}
        ]
    }

    [project] = normalize_projects(payload)

    assert project.id == "1"
    assert project.name == "toolkit"
    assert project.stars_display == "2.5K"
    assert project.forks_display == "0"
    assert project.description == "Project repository"
    assert project.icon == "https://github.com/acme.png?size=40"


def test_fallback_description_uses_language_and_category() -> None:
    [project] = normalize_projects(
        [{"github_full_name": "acme/ci", "language": "Go", "category": "DevOps"}]
    )

    assert project.description == "Go repository - DevOps"


def test_full_record_mapping() -> None:
    [project] = normalize_projects(
        [
            {
                "id": 7,
                "github_full_name": "octo/cat",
                "stars_count": 1_200_000,
                "forks_count": 4321,
                "contributors_count": 12,
                "open_issues_count": 3,
                "open_prs_count": 2,
                "description": "A cat.\nMore text.",
                "tags": ["cli", "tools"],
            }
        ]
    )

    assert project.id == "7"
    assert project.stars_display == "1.2M"
    assert project.forks_display == "4.3K"
    assert (project.contributors, project.open_issues, project.prs) == (12, 3, 2)
    assert project.description == "A cat."
    assert project.tags == ("cli", "tools")
    assert project.color_class == project_color("cat")


def test_invalid_records_are_dropped() -> None:
    payload = [
        "not a record",
        {"stars_count": 10},
        {"github_full_name": "no-slash"},
        {"github_full_name": "/repo"},
        {"github_full_name": 12},
        {"github_full_name": "ok/repo"},
    ]

    assert [p.name for p in normalize_projects(payload)] == ["repo"]


def test_mistyped_fields_fall_back_to_defaults() -> None:
    [project] = normalize_projects(
        [
            {
                "github_full_name": "acme/widget",
                "stars_count": "lots",
                "forks_count": None,
                "contributors_count": [],
                "description": 5,
                "tags": "cli",
            }
        ]
    )

    assert project.stars_display == "0"
    assert project.forks_display == "0"
    assert project.contributors == 0
    assert project.description == "Project repository"
    assert project.tags == ()


def test_missing_id_is_synthesized() -> None:
    first, second = normalize_projects(
        [{"github_full_name": "a/one"}, {"github_full_name": "a/two"}]
    )

    assert first.id.startswith("project-")
    assert first.id != second.id


def test_color_is_deterministic_and_from_palette() -> None:
    assert project_color("toolkit") == project_color("toolkit")
    assert project_color("toolkit") in PROJECT_COLORS
    # "ab" sums to 97 + 98 = 195, 195 % 8 == 3
    assert project_color("ab") == PROJECT_COLORS[3]


def test_ecosystems_keep_only_active() -> None:
    payload = {
        "data": [
            {"name": "Stellar", "status": "active"},
            {"name": "Legacy", "status": "archived"},
            {"name": "Ethereum", "status": "active"},
            {"status": "active"},
        ]
    }

    assert normalize_ecosystems(payload) == [EcosystemOption("Stellar"), EcosystemOption("Ethereum")]


def test_ecosystems_tolerate_garbage() -> None:
    assert normalize_ecosystems(None) == []
    assert normalize_ecosystems({"ecosystems": "nope"}) == []
