"""Tests for skill gaps, profile completeness and smart filters."""

import pytest

from internmatch.core.schemas import CityRef, EducationLevel, Posting, Profile, WorkMode
from internmatch.engine.filters import FilterState
from internmatch.profile.insights import (
    DEFAULT_MIN_STIPEND,
    SmartFilterOptions,
    filter_suggestions,
    generate_smart_filters,
    preset_filters,
    profile_completeness,
    skill_gaps,
)

CATALOG = [
    Posting(id="1", title="A", required_skills=["Python", "Docker", "AWS"]),
    Posting(id="2", title="B", required_skills=["python", "docker"]),
    Posting(id="3", title="C", required_skills=["React", "JavaScript", "AWS"]),
    Posting(id="4", title="D", required_skills=["Docker", "Tableau"]),
]


# ---------------------------------------------------------------------------
# Skill gaps
# ---------------------------------------------------------------------------


class TestSkillGaps:
    def test_ranked_by_frequency_then_name(self) -> None:
        gaps = skill_gaps(Profile(skills=["Python"]), CATALOG)
        assert [(g.skill, g.frequency) for g in gaps] == [
            ("Docker", 3), ("AWS", 2), ("JavaScript", 1), ("React", 1), ("Tableau", 1),
        ]

    def test_known_skills_excluded_via_aliases(self) -> None:
        gaps = skill_gaps(Profile(skills=["JS", "reactjs", "docker"]), CATALOG)
        names = {g.skill for g in gaps}
        assert "JavaScript" not in names
        assert "React" not in names
        assert "Docker" not in names

    def test_limit(self) -> None:
        assert len(skill_gaps(Profile(), CATALOG, limit=2)) == 2

    def test_empty_catalog(self) -> None:
        assert skill_gaps(Profile(skills=["Python"]), []) == []


# ---------------------------------------------------------------------------
# Completeness
# ---------------------------------------------------------------------------


class TestProfileCompleteness:
    def test_empty(self) -> None:
        assert profile_completeness(Profile()) == 0

    def test_full(self) -> None:
        profile = Profile(
            name="Asha",
            skills=["Python"],
            interested_sectors=["Technology"],
            location="Delhi",
            education_level="Undergraduate",
        )
        assert profile_completeness(profile) == 100

    def test_partial_counts_desired_location(self) -> None:
        profile = Profile(name="Asha", desired_location=CityRef(city="Pune"))
        assert profile_completeness(profile) == 40

    def test_blank_structured_city_not_counted(self) -> None:
        assert profile_completeness(Profile(location=CityRef(city=""))) == 0


# ---------------------------------------------------------------------------
# Smart filters
# ---------------------------------------------------------------------------


class TestGenerateSmartFilters:
    PROFILE = Profile(
        skills=["Python", "SQL", "Excel", "Tableau", "Power BI", "Statistics"],
        interested_sectors=["Finance"],
        location="Delhi",
        desired_location="Gurugram",
        education_level="Undergraduate",
    )

    def test_defaults(self) -> None:
        state = generate_smart_filters(self.PROFILE)
        assert state.selected_sectors == ["Finance"]
        assert state.selected_skills == ["Python", "SQL", "Excel", "Tableau", "Power BI"]
        assert state.location is None
        assert state.education is EducationLevel.UNDERGRADUATE
        assert state.min_stipend == DEFAULT_MIN_STIPEND

    def test_strict_options(self) -> None:
        options = SmartFilterOptions(
            prioritize_high_stipend=False, strict_skill_matching=True, strict_location=True,
        )
        state = generate_smart_filters(self.PROFILE, options)
        assert len(state.selected_skills) == 6
        assert state.location == "Gurugram"
        assert state.min_stipend is None

    def test_profile_minimum_wins(self) -> None:
        profile = Profile(min_stipend=8000)
        assert generate_smart_filters(profile).min_stipend == 8000


class TestPresetFilters:
    def test_high_paying(self) -> None:
        assert preset_filters("high-paying").min_stipend == 15000

    def test_remote_friendly_keeps_base(self) -> None:
        base = FilterState(location="Delhi", search="data")
        state = preset_filters("remote-friendly", base)
        assert state.work_mode is WorkMode.REMOTE
        assert state.location is None
        assert state.search == "data"
        assert base.location == "Delhi"

    def test_lists_not_shared_with_base(self) -> None:
        base = FilterState(selected_sectors=["Finance"], selected_skills=["Python"])
        state = preset_filters("high-paying", base)
        state.selected_sectors.append("Technology")
        state.selected_skills.clear()
        assert base.selected_sectors == ["Finance"]
        assert base.selected_skills == ["Python"]

    def test_unknown(self) -> None:
        with pytest.raises(ValueError, match="Unknown filter preset"):
            preset_filters("cheapest")


class TestFilterSuggestions:
    def test_few_results_suggest_broadening(self) -> None:
        state = FilterState(
            selected_skills=["Python", "SQL", "Excel", "Tableau"],
            min_stipend=15000,
            location="Delhi",
        )
        suggestions = filter_suggestions(Profile(), state, result_count=2)
        assert [s.label for s in suggestions] == [
            "Broaden Skills", "Lower Stipend Filter", "Include All Locations",
        ]
        assert suggestions[0].changes == {"selected_skills": ["Python", "SQL", "Excel"]}

    def test_many_results_suggest_narrowing(self) -> None:
        profile = Profile(skills=["Python"])
        suggestions = filter_suggestions(profile, FilterState(), result_count=80)
        assert [s.label for s in suggestions] == ["Apply Your Skills", "High-Paying Only"]

    def test_moderate_results_no_suggestions(self) -> None:
        assert filter_suggestions(Profile(skills=["Python"]), FilterState(), 20) == []
