"""Filter chain over ranked matches.

Filters only remove rows: scores, order and tags of the survivors are
untouched, so dropping a filter restores hidden rows exactly as they were.
All filters are pure and compose with AND; applying a chain twice yields the
same subset as applying it once.

Chain order (cheapest first):
  1. MinScoreFilter
  2. MinStipendFilter
  3. WorkModeFilter
  4. SectorFilter
  5. SkillFilter
  6. EducationFilter
  7. LocationFilter
  8. SearchFilter
"""

import logging
from collections.abc import Callable, Sequence

from pydantic import BaseModel, Field, field_validator

from internmatch.core.reference import ReferenceRepository, StaticReferenceRepository
from internmatch.core.schemas import EducationLevel, Match, WorkMode

logger = logging.getLogger(__name__)

# A filter is a callable that takes matches and returns an order-preserving subset.
Filter = Callable[[list[Match]], list[Match]]

ALL = "all"


def _none_if_all(v: object) -> object:
    if isinstance(v, str) and (not v.strip() or v.strip().lower() == ALL):
        return None
    return v


class FilterState(BaseModel):
    """User-chosen constraints. ``None``/empty means "no constraint"."""

    search: str = ""
    sector: str | None = None
    selected_sectors: list[str] = Field(default_factory=list)
    selected_skills: list[str] = Field(default_factory=list)
    location: str | None = None
    work_mode: WorkMode | None = None
    education: EducationLevel | None = None
    min_stipend: int | None = Field(default=None, ge=0)
    min_score: float | None = Field(default=None, ge=0.0, le=100.0)

    @field_validator(
        "sector", "location", "work_mode", "education", "min_stipend", "min_score",
        mode="before",
    )
    @classmethod
    def all_means_unset(cls, v: object) -> object:
        return _none_if_all(v)


def _log_removed(name: str, before: int, after: int) -> None:
    if before != after:
        logger.debug("%s: removed %d matches", name, before - after)


class MinScoreFilter:
    """Keep matches scoring at least ``min_score``."""

    def __init__(self, min_score: float | None) -> None:
        self._min = min_score

    def __call__(self, matches: list[Match]) -> list[Match]:
        if self._min is None:
            return matches
        result = [m for m in matches if m.score >= self._min]
        _log_removed("MinScoreFilter", len(matches), len(result))
        return result


class MinStipendFilter:
    """Keep matches whose parsed stipend is at least ``min_stipend``."""

    def __init__(self, min_stipend: int | None) -> None:
        self._min = min_stipend

    def __call__(self, matches: list[Match]) -> list[Match]:
        if self._min is None:
            return matches
        result = [m for m in matches if m.posting.stipend_amount >= self._min]
        _log_removed("MinStipendFilter", len(matches), len(result))
        return result


class WorkModeFilter:
    def __init__(self, work_mode: WorkMode | None) -> None:
        self._mode = work_mode

    def __call__(self, matches: list[Match]) -> list[Match]:
        if self._mode is None:
            return matches
        result = [m for m in matches if m.posting.work_mode == self._mode]
        _log_removed("WorkModeFilter", len(matches), len(result))
        return result


class SectorFilter:
    """Keep matches tagged with any selected sector (case-insensitive).

    The multi-select list wins over the single ``sector`` when both are set.
    """

    def __init__(self, selected: Sequence[str], single: str | None = None) -> None:
        chosen = [s for s in selected if s.strip()] or ([single] if single else [])
        self._sectors = {s.strip().lower() for s in chosen}

    def __call__(self, matches: list[Match]) -> list[Match]:
        if not self._sectors:
            return matches
        result = [
            m for m in matches
            if any(tag.lower() in self._sectors for tag in m.posting.sector_tags)
        ]
        _log_removed("SectorFilter", len(matches), len(result))
        return result


class SkillFilter:
    """Keep matches requiring any selected skill (normalized, so "JS" finds "JavaScript")."""

    def __init__(self, selected: Sequence[str], reference: ReferenceRepository) -> None:
        self._reference = reference
        self._skills = {reference.canonical_skill(s) for s in selected if s.strip()}

    def __call__(self, matches: list[Match]) -> list[Match]:
        if not self._skills:
            return matches
        result = [
            m for m in matches
            if any(
                self._reference.canonical_skill(s) in self._skills
                for s in m.posting.required_skills
            )
        ]
        _log_removed("SkillFilter", len(matches), len(result))
        return result


class EducationFilter:
    """Keep postings open to the given education level.

    A posting with no preferred levels accepts everyone; otherwise the level
    must reach the lowest preferred level.
    """

    def __init__(self, education: EducationLevel | None) -> None:
        self._level = education

    def __call__(self, matches: list[Match]) -> list[Match]:
        if self._level is None:
            return matches
        result = [m for m in matches if self._compatible(m)]
        _log_removed("EducationFilter", len(matches), len(result))
        return result

    def _compatible(self, match: Match) -> bool:
        preferred = match.posting.preferred_education_levels
        level = self._level
        if level is None or not preferred or level in preferred:
            return True
        return level.rank >= min(p.rank for p in preferred)


class LocationFilter:
    """Keep matches whose city contains the given text (case-insensitive)."""

    def __init__(self, location: str | None) -> None:
        self._text = (location or "").strip().lower()

    def __call__(self, matches: list[Match]) -> list[Match]:
        if not self._text:
            return matches
        result = [m for m in matches if self._text in m.posting.city.lower()]
        _log_removed("LocationFilter", len(matches), len(result))
        return result


class SearchFilter:
    """Free-text search over title, company, skills, sectors and city."""

    def __init__(self, query: str) -> None:
        self._query = query.strip().lower()

    def __call__(self, matches: list[Match]) -> list[Match]:
        if not self._query:
            return matches
        result = [m for m in matches if self._matches(m)]
        _log_removed("SearchFilter", len(matches), len(result))
        return result

    def _matches(self, match: Match) -> bool:
        p = match.posting
        fields = [p.title, p.company, p.city, *p.required_skills, *p.sector_tags]
        return any(self._query in f.lower() for f in fields)


def build_filters(
    state: FilterState,
    reference: ReferenceRepository | None = None,
) -> list[Filter]:
    """Build the filter chain for a filter state."""
    reference = reference or StaticReferenceRepository()
    return [
        MinScoreFilter(state.min_score),
        MinStipendFilter(state.min_stipend),
        WorkModeFilter(state.work_mode),
        SectorFilter(state.selected_sectors, state.sector),
        SkillFilter(state.selected_skills, reference),
        EducationFilter(state.education),
        LocationFilter(state.location),
        SearchFilter(state.search),
    ]


def run_filter_chain(matches: list[Match], filters: list[Filter]) -> list[Match]:
    """Apply filters in order, returning the surviving matches."""
    result = matches
    for f in filters:
        result = f(result)
    return result


def apply_filters(
    matches: Sequence[Match],
    state: FilterState | None,
    reference: ReferenceRepository | None = None,
) -> list[Match]:
    """Filter ranked matches by ``state``; ``None`` keeps everything."""
    if state is None:
        return list(matches)
    return run_filter_chain(list(matches), build_filters(state, reference))
