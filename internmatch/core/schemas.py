"""Core data models for the internship matching engine.

Every model is frozen: profiles, postings and corpus statistics are value
types for the duration of a scoring pass, and the engine never mutates them.
"""

import re
from enum import Enum, IntEnum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

_STIPEND_RANGE = re.compile(r"\s+to\s+|\s*[-–]\s*", re.IGNORECASE)
_STIPEND_CURRENCY = re.compile(r"₹|\$|\brs\.?|\binr\b", re.IGNORECASE)
_NON_DIGITS = re.compile(r"\D")


def parse_stipend(raw: str | int | None) -> int:
    """Parse a currency-formatted stipend string into an integer amount.

    Non-digit characters are stripped, so any grouping works: "₹15,000",
    "₹ 15 000" and "₹15.000" are all 15000. A range keeps its low end
    ("₹10,000 - ₹15,000" → 10000), and when only some pieces carry a
    currency marker the first of those is used ("3 months - ₹15,000" →
    15000). Anything without digits ("Unpaid", "", None) is 0.
    """
    if raw is None:
        return 0
    if isinstance(raw, int):
        return max(0, raw)
    pieces = [p for p in _STIPEND_RANGE.split(str(raw)) if _NON_DIGITS.sub("", p)]
    if not pieces:
        return 0
    priced = [p for p in pieces if _STIPEND_CURRENCY.search(p)]
    return int(_NON_DIGITS.sub("", (priced or pieces)[0]))


class EducationLevel(str, Enum):
    """Ordered education levels, lowest first."""

    CLASS_12 = "Class 12"
    DIPLOMA = "Diploma"
    UNDERGRADUATE = "Undergraduate"
    POSTGRADUATE = "Postgraduate"

    @property
    def rank(self) -> int:
        return _EDUCATION_ORDER.index(self)

    @classmethod
    def _missing_(cls, value: object) -> "EducationLevel | None":
        if not isinstance(value, str):
            return None
        key = re.sub(r"[^a-z0-9]", "", value.lower())
        return _EDUCATION_ALIASES.get(key)


_EDUCATION_ORDER = list(EducationLevel)

_EDUCATION_ALIASES: dict[str, EducationLevel] = {
    "class12": EducationLevel.CLASS_12,
    "12th": EducationLevel.CLASS_12,
    "12thpass": EducationLevel.CLASS_12,
    "hsc": EducationLevel.CLASS_12,
    "highersecondary": EducationLevel.CLASS_12,
    "diploma": EducationLevel.DIPLOMA,
    "polytechnic": EducationLevel.DIPLOMA,
    "undergraduate": EducationLevel.UNDERGRADUATE,
    "ug": EducationLevel.UNDERGRADUATE,
    "bachelors": EducationLevel.UNDERGRADUATE,
    "graduate": EducationLevel.UNDERGRADUATE,
    "btech": EducationLevel.UNDERGRADUATE,
    "be": EducationLevel.UNDERGRADUATE,
    "bsc": EducationLevel.UNDERGRADUATE,
    "bcom": EducationLevel.UNDERGRADUATE,
    "ba": EducationLevel.UNDERGRADUATE,
    "postgraduate": EducationLevel.POSTGRADUATE,
    "pg": EducationLevel.POSTGRADUATE,
    "masters": EducationLevel.POSTGRADUATE,
    "mtech": EducationLevel.POSTGRADUATE,
    "msc": EducationLevel.POSTGRADUATE,
    "mba": EducationLevel.POSTGRADUATE,
}


class WorkMode(str, Enum):
    REMOTE = "Remote"
    ONSITE = "Onsite"
    HYBRID = "Hybrid"

    @classmethod
    def _missing_(cls, value: object) -> "WorkMode | None":
        if not isinstance(value, str):
            return None
        key = re.sub(r"[^a-z]", "", value.lower())
        return _WORK_MODE_ALIASES.get(key)


_WORK_MODE_ALIASES: dict[str, WorkMode] = {
    "remote": WorkMode.REMOTE,
    "wfh": WorkMode.REMOTE,
    "workfromhome": WorkMode.REMOTE,
    "onsite": WorkMode.ONSITE,
    "inoffice": WorkMode.ONSITE,
    "office": WorkMode.ONSITE,
    "hybrid": WorkMode.HYBRID,
}


class SectorTier(IntEnum):
    """Sector desirability tier, higher is better."""

    DEFAULT = 1
    MODERATE = 2
    HIGH_DEMAND = 3


class CompanyTier(IntEnum):
    """Employer reputation tier, higher is better."""

    DEFAULT = 1
    RECOGNIZABLE = 2
    MID = 3
    TOP = 4


class CityRef(BaseModel):
    """Structured city reference; coordinates are optional."""

    model_config = ConfigDict(frozen=True)

    city: str = ""
    state: str | None = None
    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=180.0)


Location = str | CityRef


def location_name(location: Location | None) -> str:
    """Return the free-text city name of a location, "" when absent."""
    if location is None:
        return ""
    if isinstance(location, CityRef):
        return location.city
    return location


def _clean_strings(values: Any) -> tuple[str, ...]:
    """Drop blanks and exact duplicates while keeping first-seen order."""
    if values is None:
        return ()
    if isinstance(values, str):
        values = [values]
    seen: list[str] = []
    for v in values:
        if v is None:
            continue
        text = str(v).strip()
        if text and text not in seen:
            seen.append(text)
    return tuple(seen)


class Profile(BaseModel):
    """Candidate attributes used as the query side of matching."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    skills: tuple[str, ...] = ()
    interested_sectors: tuple[str, ...] = ()
    location: Location | None = None
    desired_location: Location | None = None
    min_stipend: int | None = Field(default=None, ge=0)
    education_level: EducationLevel | None = None
    preferred_work_mode: WorkMode | None = None

    @field_validator("skills", "interested_sectors", mode="before")
    @classmethod
    def clean_lists(cls, v: Any) -> tuple[str, ...]:
        return _clean_strings(v)

    @field_validator("location", "desired_location", mode="before")
    @classmethod
    def blank_location_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def target_location(self) -> Location | None:
        """Desired location when given, otherwise the current location."""
        if self.desired_location is not None and location_name(self.desired_location):
            return self.desired_location
        return self.location

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Profile":
        """Load a profile from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Profile file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)


class Posting(BaseModel):
    """A single internship opening from the catalog.

    Only ``id`` and ``title`` are required; every other field tolerates
    absence so loosely-structured catalog data still loads.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    company: str = ""
    location: Location | None = None
    stipend: str = ""
    required_skills: tuple[str, ...] = ()
    sector_tags: tuple[str, ...] = ()
    preferred_education_levels: tuple[EducationLevel, ...] = ()
    work_mode: WorkMode | None = None
    duration: str = ""
    description: str = ""
    apply_link: str = ""
    posted_date: str = ""
    deadline: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v: Any) -> Any:
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("stipend", mode="before")
    @classmethod
    def stipend_as_string(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v)

    @field_validator("required_skills", "sector_tags", mode="before")
    @classmethod
    def clean_lists(cls, v: Any) -> tuple[str, ...]:
        return _clean_strings(v)

    @field_validator("preferred_education_levels", mode="before")
    @classmethod
    def known_education_levels(cls, v: Any) -> tuple[EducationLevel, ...]:
        levels: list[EducationLevel] = []
        for item in _clean_strings(v):
            try:
                level = EducationLevel(item)
            except ValueError:
                continue
            if level not in levels:
                levels.append(level)
        return tuple(levels)

    @field_validator("work_mode", mode="before")
    @classmethod
    def unknown_work_mode_is_none(cls, v: Any) -> WorkMode | None:
        if v is None or isinstance(v, WorkMode):
            return v
        try:
            return WorkMode(str(v))
        except ValueError:
            return None

    @property
    def stipend_amount(self) -> int:
        return parse_stipend(self.stipend)

    @property
    def city(self) -> str:
        return location_name(self.location)


class CorpusStats(BaseModel):
    """Aggregate facts about a catalog, rebuilt whenever the catalog changes."""

    model_config = ConfigDict(frozen=True)

    all_skills: tuple[str, ...] = ()
    all_sectors: tuple[str, ...] = ()
    all_locations: tuple[str, ...] = ()
    max_stipend: int = 0
    average_stipend: float = 0.0
    skill_frequency: dict[str, int] = Field(default_factory=dict)
    posting_count: int = 0

    @property
    def dimensions(self) -> int:
        return len(self.all_skills) + len(self.all_sectors) + len(self.all_locations)


class RejectionReason(str, Enum):
    BELOW_MIN_STIPEND = "below minimum stipend requirement"
    NO_MATCHING_SKILLS = "no matching skills"


class ScoreBreakdown(BaseModel):
    """Per-dimension points plus the facts ranking and explanation rely on."""

    model_config = ConfigDict(frozen=True)

    skills: float = 0.0
    stipend: float = 0.0
    location: float = 0.0
    sector: float = 0.0
    company: float = 0.0
    uniqueness: float = 0.0

    matched_skills: tuple[str, ...] = ()
    required_skill_count: int = 0
    skill_match_ratio: float = 0.0
    vector_similarity: float = 0.0
    proximity: float | None = None
    sector_tier: SectorTier = SectorTier.DEFAULT
    company_tier: CompanyTier = CompanyTier.DEFAULT
    interest_match: bool = False
    rare_skill_count: int = 0
    competitive_stipend: bool = False
    startup_bonus: bool = False

    @property
    def total(self) -> float:
        return (
            self.skills + self.stipend + self.location
            + self.sector + self.company + self.uniqueness
        )


class ScoreResult(BaseModel):
    """Outcome of scoring one posting: a value, or a hard rejection."""

    model_config = ConfigDict(frozen=True)

    value: float | None = Field(default=None, ge=1.0, le=100.0)
    explanation: str = ""
    rejection: RejectionReason | None = None
    breakdown: ScoreBreakdown | None = None

    @property
    def rejected(self) -> bool:
        return self.rejection is not None


class Match(BaseModel):
    """A scored, non-rejected posting in the output list."""

    model_config = ConfigDict(frozen=True)

    posting: Posting
    score: float = Field(ge=1.0, le=100.0)
    explanation: str = ""
    tags: tuple[str, ...] = ()
    breakdown: ScoreBreakdown = Field(default_factory=ScoreBreakdown)

    def with_tags(self, *tags: str) -> "Match":
        """Return a copy with ``tags`` appended (duplicates ignored)."""
        merged = list(self.tags)
        for tag in tags:
            if tag not in merged:
                merged.append(tag)
        return self.model_copy(update={"tags": tuple(merged)})
