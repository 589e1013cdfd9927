"""Tests for core schemas: Profile, Posting, enums and stipend parsing."""

from pathlib import Path
from textwrap import dedent

import pytest
from pydantic import ValidationError

from internmatch.core.schemas import (
    CityRef,
    EducationLevel,
    Match,
    Posting,
    Profile,
    WorkMode,
    location_name,
    parse_stipend,
)


def _make_posting(**overrides: object) -> Posting:
    defaults: dict[str, object] = {
        "id": "int-1",
        "title": "Data Analyst Intern",
        "company": "Acme",
        "location": "Delhi",
        "stipend": "₹15,000",
        "required_skills": ["Python", "SQL"],
        "sector_tags": ["Technology"],
    }
    defaults.update(overrides)
    return Posting(**defaults)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# parse_stipend
# ---------------------------------------------------------------------------


class TestParseStipend:
    def test_currency_with_grouping(self) -> None:
        assert parse_stipend("₹15,000") == 15000

    def test_per_month_suffix(self) -> None:
        assert parse_stipend("₹12,500/month") == 12500

    def test_range_takes_first_amount(self) -> None:
        assert parse_stipend("₹10,000 - ₹15,000") == 10000
        assert parse_stipend("10000 to 15000") == 10000

    @pytest.mark.parametrize("raw", ["₹ 15 000", "₹15.000", "Rs. 15,000", "INR 15000 per month"])
    def test_any_grouping_stripped(self, raw: str) -> None:
        assert parse_stipend(raw) == 15000

    def test_leading_non_amount_number_ignored(self) -> None:
        assert parse_stipend("3 months - ₹15,000") == 15000

    def test_unparseable_is_zero(self) -> None:
        assert parse_stipend("Unpaid") == 0
        assert parse_stipend("") == 0
        assert parse_stipend(None) == 0

    def test_integer_passthrough(self) -> None:
        assert parse_stipend(8000) == 8000


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class TestEducationLevel:
    def test_ordered(self) -> None:
        assert EducationLevel.CLASS_12.rank < EducationLevel.DIPLOMA.rank
        assert EducationLevel.DIPLOMA.rank < EducationLevel.UNDERGRADUATE.rank
        assert EducationLevel.UNDERGRADUATE.rank < EducationLevel.POSTGRADUATE.rank

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Class 12", EducationLevel.CLASS_12),
            ("12th", EducationLevel.CLASS_12),
            ("UG", EducationLevel.UNDERGRADUATE),
            ("B.Tech", EducationLevel.UNDERGRADUATE),
            ("postgraduate", EducationLevel.POSTGRADUATE),
            ("Master's", EducationLevel.POSTGRADUATE),
        ],
    )
    def test_lenient_parsing(self, raw: str, expected: EducationLevel) -> None:
        assert EducationLevel(raw) is expected

    def test_unknown_raises(self) -> None:
        with pytest.raises(ValueError):
            EducationLevel("PhD in basket weaving")


class TestWorkMode:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Remote", WorkMode.REMOTE),
            ("On-site", WorkMode.ONSITE),
            ("in office", WorkMode.ONSITE),
            ("WFH", WorkMode.REMOTE),
            ("hybrid", WorkMode.HYBRID),
        ],
    )
    def test_lenient_parsing(self, raw: str, expected: WorkMode) -> None:
        assert WorkMode(raw) is expected


# ---------------------------------------------------------------------------
# Posting
# ---------------------------------------------------------------------------


class TestPosting:
    def test_create_with_required_fields(self) -> None:
        p = Posting(id="1", title="Intern")
        assert p.company == ""
        assert p.location is None
        assert p.required_skills == ()
        assert p.sector_tags == ()
        assert p.preferred_education_levels == ()
        assert p.work_mode is None
        assert p.stipend_amount == 0

    def test_missing_title_invalid(self) -> None:
        with pytest.raises(ValidationError):
            Posting(id="1")  # type: ignore[call-arg]

    def test_stipend_amount(self) -> None:
        assert _make_posting(stipend="₹20,000/month").stipend_amount == 20000

    def test_numeric_id_and_stipend(self) -> None:
        p = Posting(id=7, title="Intern", stipend=9000)  # type: ignore[arg-type]
        assert p.id == "7"
        assert p.stipend_amount == 9000

    def test_null_lists_tolerated(self) -> None:
        p = _make_posting(required_skills=None, sector_tags=None)
        assert p.required_skills == ()
        assert p.sector_tags == ()

    def test_blank_and_duplicate_skills_dropped(self) -> None:
        p = _make_posting(required_skills=["Python", " ", "Python", "SQL"])
        assert p.required_skills == ("Python", "SQL")

    def test_unknown_work_mode_is_unspecified(self) -> None:
        assert _make_posting(work_mode="Flexible-ish").work_mode is None
        assert _make_posting(work_mode="On-site").work_mode is WorkMode.ONSITE

    def test_unknown_education_levels_ignored(self) -> None:
        p = _make_posting(preferred_education_levels=["UG", "Astronaut", "Undergraduate"])
        assert p.preferred_education_levels == (EducationLevel.UNDERGRADUATE,)

    def test_structured_location(self) -> None:
        p = _make_posting(location={"city": "Bengaluru", "state": "Karnataka"})
        assert isinstance(p.location, CityRef)
        assert p.city == "Bengaluru"

    def test_frozen_model(self) -> None:
        p = _make_posting()
        with pytest.raises(ValidationError):
            p.title = "Changed"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


class TestProfile:
    def test_defaults(self) -> None:
        profile = Profile()
        assert profile.skills == ()
        assert profile.min_stipend is None
        assert profile.target_location is None

    def test_desired_location_takes_precedence(self) -> None:
        profile = Profile(location="Delhi", desired_location="Pune")
        assert location_name(profile.target_location) == "Pune"

    def test_falls_back_to_location(self) -> None:
        profile = Profile(location="Delhi", desired_location="")
        assert location_name(profile.target_location) == "Delhi"

    def test_negative_min_stipend_invalid(self) -> None:
        with pytest.raises(ValidationError):
            Profile(min_stipend=-1)

    def test_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "profile.yaml"
        path.write_text(dedent("""\
            name: Asha
            skills: [Python, SQL]
            interested_sectors: [Technology]
            location: Delhi
            desired_location:
              city: Gurugram
            min_stipend: 10000
            education_level: UG
        """))
        profile = Profile.from_yaml(path)
        assert profile.skills == ("Python", "SQL")
        assert profile.education_level is EducationLevel.UNDERGRADUATE
        assert isinstance(profile.desired_location, CityRef)
        assert profile.min_stipend == 10000

    def test_from_yaml_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            Profile.from_yaml(tmp_path / "nope.yaml")


class TestMatch:
    def test_score_bounds(self) -> None:
        with pytest.raises(ValidationError):
            Match(posting=_make_posting(), score=0.0)
        with pytest.raises(ValidationError):
            Match(posting=_make_posting(), score=100.5)

    def test_with_tags_appends_once(self) -> None:
        m = Match(posting=_make_posting(), score=50.0, tags=("Remote",))
        tagged = m.with_tags("Remote", "AI Recommended")
        assert tagged.tags == ("Remote", "AI Recommended")
        assert m.tags == ("Remote",)
