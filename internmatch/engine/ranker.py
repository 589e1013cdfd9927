"""Ordering of scored matches.

The default order is a layered, threshold-bucketed comparison (first
differentiator wins):

  1. skill-match ratio     only if |Δ| > ratio_threshold
  2. composite score       only if |Δ| > score_threshold
  3. stipend amount        only if |Δ| > stipend_gap_threshold
  4. sector tier           higher first
  5. company tier          higher first
  6. exact city match      with the profile's target city first
  7. raw stipend           descending
  8. posting id            ascending

Near-ties in 1-3 are treated as ties and fall through to the next criterion,
so a 0.4-point score wobble never reorders otherwise equivalent postings.
"""

import functools
from collections.abc import Sequence
from datetime import date
from enum import Enum

from internmatch.core.config import RankingConfig
from internmatch.core.reference import ReferenceRepository, StaticReferenceRepository
from internmatch.core.schemas import Match, Profile


class SortOption(str, Enum):
    AI_RECOMMENDED = "ai-recommended"
    STIPEND_HIGH = "stipend-high"
    STIPEND_LOW = "stipend-low"
    COMPANY = "company"
    RECENT = "recent"
    DEADLINE = "deadline"


def _bucketed(a: float, b: float, threshold: float) -> int:
    """-1 if ``a`` should come first, 1 if ``b`` should, 0 if within threshold."""
    if abs(a - b) > threshold:
        return -1 if a > b else 1
    return 0


def _descending(a: float, b: float) -> int:
    if a == b:
        return 0
    return -1 if a > b else 1


def compare_matches(
    a: Match,
    b: Match,
    target_city: str,
    config: RankingConfig,
    reference: ReferenceRepository,
) -> int:
    """Comparator for ``functools.cmp_to_key``; negative means ``a`` ranks first."""
    for result in (
        _bucketed(a.breakdown.skill_match_ratio, b.breakdown.skill_match_ratio, config.ratio_threshold),
        _bucketed(a.score, b.score, config.score_threshold),
        _bucketed(a.posting.stipend_amount, b.posting.stipend_amount, config.stipend_gap_threshold),
        _descending(a.breakdown.sector_tier, b.breakdown.sector_tier),
        _descending(a.breakdown.company_tier, b.breakdown.company_tier),
    ):
        if result:
            return result

    if target_city:
        a_local = reference.canonical_city(a.posting.location) == target_city
        b_local = reference.canonical_city(b.posting.location) == target_city
        if a_local != b_local:
            return -1 if a_local else 1

    result = _descending(a.posting.stipend_amount, b.posting.stipend_amount)
    if result:
        return result
    if a.posting.id == b.posting.id:
        return 0
    return -1 if a.posting.id < b.posting.id else 1


def rank_matches(
    matches: Sequence[Match],
    profile: Profile,
    config: RankingConfig | None = None,
    reference: ReferenceRepository | None = None,
) -> list[Match]:
    """Return ``matches`` in ranked order. The input is not modified."""
    config = config or RankingConfig()
    reference = reference or StaticReferenceRepository()
    target_city = reference.canonical_city(profile.target_location)
    key = functools.cmp_to_key(
        lambda a, b: compare_matches(a, b, target_city, config, reference),
    )
    return sorted(matches, key=key)


def _parse_date(value: str) -> date | None:
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def sort_matches(
    matches: Sequence[Match],
    option: SortOption | str,
    profile: Profile,
    config: RankingConfig | None = None,
    reference: ReferenceRepository | None = None,
) -> list[Match]:
    """Re-sort already-scored matches by a user-chosen option. Never rescores."""
    option = SortOption(option)
    if option == SortOption.AI_RECOMMENDED:
        return rank_matches(matches, profile, config, reference)
    if option == SortOption.STIPEND_HIGH:
        return sorted(matches, key=lambda m: (-m.posting.stipend_amount, m.posting.id))
    if option == SortOption.STIPEND_LOW:
        return sorted(matches, key=lambda m: (m.posting.stipend_amount, m.posting.id))
    if option == SortOption.COMPANY:
        return sorted(matches, key=lambda m: (m.posting.company.casefold(), m.posting.id))

    # Date orders: undated postings always sink to the bottom.
    dated: list[tuple[date, Match]] = []
    undated: list[Match] = []
    for m in matches:
        raw = m.posting.posted_date if option == SortOption.RECENT else m.posting.deadline
        parsed = _parse_date(raw)
        if parsed is None:
            undated.append(m)
        else:
            dated.append((parsed, m))
    if option == SortOption.RECENT:
        dated.sort(key=lambda pair: (-pair[0].toordinal(), pair[1].posting.id))
    else:
        dated.sort(key=lambda pair: (pair[0], pair[1].posting.id))
    return [m for _, m in dated] + undated
