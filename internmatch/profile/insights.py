"""Profile-side helpers: skill gaps, completeness, smart filter presets."""

from collections import Counter
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict

from internmatch.core.reference import ReferenceRepository, StaticReferenceRepository
from internmatch.core.schemas import Posting, Profile, WorkMode, location_name
from internmatch.engine.filters import FilterState
from internmatch.engine.skills import normalized_skills

DEFAULT_MIN_STIPEND = 12000
BROAD_SKILL_COUNT = 5

_COMPLETENESS_FIELDS = ("name", "skills", "interested_sectors", "location", "education_level")

_PRESETS: dict[str, dict[str, Any]] = {
    "high-paying": {"min_stipend": 15000},
    "remote-friendly": {"work_mode": WorkMode.REMOTE, "location": None},
    "skill-focused": {"min_stipend": 10000},
    "location-flexible": {"location": None, "work_mode": None},
}


class SkillGap(BaseModel):
    model_config = ConfigDict(frozen=True)

    skill: str
    frequency: int


class SmartFilterOptions(BaseModel):
    prioritize_high_stipend: bool = True
    strict_skill_matching: bool = False
    strict_location: bool = False


class FilterSuggestion(BaseModel):
    label: str
    changes: dict[str, Any]
    reason: str


def skill_gaps(
    profile: Profile,
    postings: Sequence[Posting],
    limit: int = 5,
    reference: ReferenceRepository | None = None,
) -> list[SkillGap]:
    """Most-requested skills in the catalog that the profile does not list.

    Sorted by frequency (desc) then skill name; the first spelling seen in the
    catalog is reported.
    """
    reference = reference or StaticReferenceRepository()
    have = normalized_skills(profile.skills, reference)
    counts: Counter[str] = Counter()
    spelling: dict[str, str] = {}
    for posting in postings:
        for key, original in normalized_skills(posting.required_skills, reference).items():
            if key in have:
                continue
            counts[key] += 1
            spelling.setdefault(key, original)
    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], spelling[kv[0]].lower()))
    return [SkillGap(skill=spelling[key], frequency=n) for key, n in ranked[:limit]]


def profile_completeness(profile: Profile) -> int:
    """Percentage of the matching-relevant profile fields that are filled in."""
    filled = 0
    for field in _COMPLETENESS_FIELDS:
        value = getattr(profile, field)
        if field == "location":
            value = location_name(profile.target_location)
        if value:
            filled += 1
    return round(filled * 100 / len(_COMPLETENESS_FIELDS))


def generate_smart_filters(
    profile: Profile,
    options: SmartFilterOptions | None = None,
) -> FilterState:
    """Seed a FilterState from the profile's own preferences."""
    options = options or SmartFilterOptions()

    skills = list(profile.skills)
    if not options.strict_skill_matching:
        skills = skills[:BROAD_SKILL_COUNT]

    location = None
    if options.strict_location:
        location = location_name(profile.target_location) or None

    if profile.min_stipend:
        min_stipend: int | None = profile.min_stipend
    elif options.prioritize_high_stipend:
        min_stipend = DEFAULT_MIN_STIPEND
    else:
        min_stipend = None

    return FilterState(
        selected_sectors=list(profile.interested_sectors),
        selected_skills=skills,
        location=location,
        education=profile.education_level,
        min_stipend=min_stipend,
    )


def preset_filters(name: str, base: FilterState | None = None) -> FilterState:
    """Apply a named preset on top of ``base`` (or an empty state)."""
    if name not in _PRESETS:
        valid = ", ".join(sorted(_PRESETS))
        msg = f"Unknown filter preset '{name}'. Available: {valid}"
        raise ValueError(msg)
    base = base or FilterState()
    return base.model_copy(update=_PRESETS[name], deep=True)


def filter_suggestions(
    profile: Profile,
    state: FilterState,
    result_count: int,
) -> list[FilterSuggestion]:
    """Suggest broadening when results are scarce and narrowing when plentiful."""
    suggestions: list[FilterSuggestion] = []

    if result_count < 5:
        if len(state.selected_skills) > 3:
            suggestions.append(FilterSuggestion(
                label="Broaden Skills",
                changes={"selected_skills": state.selected_skills[:3]},
                reason="Show more opportunities by reducing skill requirements",
            ))
        if state.min_stipend is not None and state.min_stipend > 10000:
            suggestions.append(FilterSuggestion(
                label="Lower Stipend Filter",
                changes={"min_stipend": 8000},
                reason="Include more opportunities with lower stipend requirements",
            ))
        if state.location:
            suggestions.append(FilterSuggestion(
                label="Include All Locations",
                changes={"location": None},
                reason="Expand search to all locations including remote work",
            ))

    if result_count > 50:
        if profile.skills and not state.selected_skills:
            suggestions.append(FilterSuggestion(
                label="Apply Your Skills",
                changes={"selected_skills": list(profile.skills[:BROAD_SKILL_COUNT])},
                reason="Focus on internships matching your skills",
            ))
        if state.min_stipend is None:
            suggestions.append(FilterSuggestion(
                label="High-Paying Only",
                changes={"min_stipend": 15000},
                reason="Show only internships with a stipend of 15,000 or more",
            ))

    return suggestions
