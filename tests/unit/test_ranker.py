"""Tests for threshold-bucketed ranking and user sort options."""

import pytest

from internmatch.core.config import RankingConfig
from internmatch.core.reference import StaticReferenceRepository
from internmatch.core.schemas import (
    CompanyTier,
    Match,
    Posting,
    Profile,
    ScoreBreakdown,
    SectorTier,
)
from internmatch.engine.ranker import SortOption, rank_matches, sort_matches

REPO = StaticReferenceRepository()
PROFILE = Profile(skills=["Python"], location="Delhi")


def _match(
    id: str,
    *,
    score: float = 50.0,
    ratio: float = 0.5,
    stipend: str = "₹10,000",
    sector_tier: SectorTier = SectorTier.DEFAULT,
    company_tier: CompanyTier = CompanyTier.DEFAULT,
    location: str = "Mumbai",
    company: str = "Acme",
    posted_date: str = "",
    deadline: str = "",
) -> Match:
    posting = Posting(
        id=id,
        title=f"Intern {id}",
        company=company,
        location=location,
        stipend=stipend,
        posted_date=posted_date,
        deadline=deadline,
    )
    return Match(
        posting=posting,
        score=score,
        breakdown=ScoreBreakdown(
            skill_match_ratio=ratio,
            sector_tier=sector_tier,
            company_tier=company_tier,
        ),
    )


def _ids(matches: list[Match]) -> list[str]:
    return [m.posting.id for m in matches]


def _rank(matches: list[Match], config: RankingConfig | None = None) -> list[str]:
    return _ids(rank_matches(matches, PROFILE, config, REPO))


# ---------------------------------------------------------------------------
# Default ranking
# ---------------------------------------------------------------------------


class TestRankMatches:
    def test_skill_ratio_dominates_score(self) -> None:
        low_score = _match("a", ratio=1.0, score=40.0)
        high_score = _match("b", ratio=0.5, score=90.0)
        assert _rank([high_score, low_score]) == ["a", "b"]

    def test_small_ratio_gap_falls_through_to_score(self) -> None:
        a = _match("a", ratio=0.6, score=50.0)
        b = _match("b", ratio=0.5, score=70.0)
        assert _rank([a, b]) == ["b", "a"]

    def test_small_score_gap_falls_through_to_stipend(self) -> None:
        a = _match("a", score=72.0, stipend="₹10,000")
        b = _match("b", score=70.0, stipend="₹20,000")
        assert _rank([a, b]) == ["b", "a"]

    def test_score_noise_does_not_reorder(self) -> None:
        a = _match("a", score=80.0)
        b = _match("b", score=80.4)
        assert _rank([b, a]) == ["a", "b"]

    def test_stipend_gap_threshold(self) -> None:
        cheap = _match("a", stipend="₹12,000", sector_tier=SectorTier.HIGH_DEMAND)
        pricey = _match("b", stipend="₹12,500")
        assert _rank([pricey, cheap]) == ["a", "b"]

        tight = RankingConfig(stipend_gap_threshold=100)
        assert _rank([cheap, pricey], tight) == ["b", "a"]

    def test_sector_then_company_tier(self) -> None:
        a = _match("a", sector_tier=SectorTier.MODERATE, company_tier=CompanyTier.TOP)
        b = _match("b", sector_tier=SectorTier.HIGH_DEMAND)
        c = _match("c", sector_tier=SectorTier.MODERATE, company_tier=CompanyTier.MID)
        assert _rank([c, a, b]) == ["b", "a", "c"]

    def test_exact_city_breaks_ties(self) -> None:
        away = _match("a", location="Mumbai")
        home = _match("b", location="New Delhi")
        assert _rank([away, home]) == ["b", "a"]

    def test_raw_stipend_after_city(self) -> None:
        a = _match("a", stipend="₹10,000")
        b = _match("b", stipend="₹10,500")
        assert _rank([a, b]) == ["b", "a"]

    def test_id_is_final_tie_break(self) -> None:
        matches = [_match("c"), _match("a"), _match("b")]
        assert _rank(matches) == ["a", "b", "c"]

    def test_deterministic_and_input_untouched(self) -> None:
        matches = [
            _match("a", score=61.0, ratio=0.7),
            _match("b", score=75.0, ratio=0.5, stipend="₹30,000"),
            _match("c", score=62.5, ratio=0.7, location="Delhi"),
            _match("d", score=40.0, ratio=1.0),
        ]
        before = list(matches)
        first = _rank(matches)
        assert matches == before
        assert _rank(matches) == first
        assert _rank(list(reversed(matches))) == first

    def test_empty(self) -> None:
        assert rank_matches([], PROFILE, None, REPO) == []


# ---------------------------------------------------------------------------
# User sort options
# ---------------------------------------------------------------------------


class TestSortMatches:
    MATCHES = [
        _match("a", stipend="₹15,000", company="zeta", posted_date="2024-03-01",
               deadline="2024-06-01"),
        _match("b", stipend="₹5,000", company="Alpha", posted_date="2024-05-10",
               deadline=""),
        _match("c", stipend="₹25,000", company="beta", posted_date="",
               deadline="2024-04-15"),
    ]

    def _sorted(self, option: SortOption | str) -> list[str]:
        return _ids(sort_matches(self.MATCHES, option, PROFILE, None, REPO))

    def test_stipend_high(self) -> None:
        assert self._sorted(SortOption.STIPEND_HIGH) == ["c", "a", "b"]

    def test_stipend_low(self) -> None:
        assert self._sorted("stipend-low") == ["b", "a", "c"]

    def test_company_case_insensitive(self) -> None:
        assert self._sorted(SortOption.COMPANY) == ["b", "c", "a"]

    def test_recent_undated_last(self) -> None:
        assert self._sorted(SortOption.RECENT) == ["b", "a", "c"]

    def test_deadline_undated_last(self) -> None:
        assert self._sorted(SortOption.DEADLINE) == ["c", "a", "b"]

    def test_ai_recommended_uses_ranking(self) -> None:
        assert self._sorted(SortOption.AI_RECOMMENDED) == _rank(self.MATCHES)

    def test_unknown_option(self) -> None:
        with pytest.raises(ValueError):
            self._sorted("random")

    def test_does_not_rescore(self) -> None:
        result = sort_matches(self.MATCHES, SortOption.STIPEND_HIGH, PROFILE, None, REPO)
        assert sorted(m.score for m in result) == sorted(m.score for m in self.MATCHES)
