"""Human-readable rationale and qualitative tags for matches."""

from collections.abc import Sequence

from internmatch.core.config import RankingConfig
from internmatch.core.reference import REMOTE_CITY, ReferenceRepository
from internmatch.core.schemas import (
    CompanyTier,
    Match,
    Posting,
    ScoreBreakdown,
    SectorTier,
    WorkMode,
)

RECOMMENDED_TAG = "AI Recommended"

GREAT_PROXIMITY = 0.9
GOOD_PROXIMITY = 0.55
RARE_SKILLS_MIN = 1


def explain(breakdown: ScoreBreakdown, remote: bool = False) -> str:
    """Compose the rationale from the sub-scores that cleared a threshold.

    Example: "3/5 skills match. High-demand sector. Reputed company."
    """
    parts: list[str] = []

    matched = len(breakdown.matched_skills)
    required = breakdown.required_skill_count
    if required == 0:
        parts.append("No specific skills required")
    elif matched == required:
        parts.append(f"Perfect skill match ({matched}/{required})")
    else:
        parts.append(f"{matched}/{required} skills match")

    if breakdown.competitive_stipend:
        parts.append("Competitive stipend")

    if remote:
        parts.append("Remote friendly")
    elif breakdown.proximity is not None and breakdown.proximity >= GREAT_PROXIMITY:
        parts.append("Great location match")
    elif breakdown.proximity is not None and breakdown.proximity >= GOOD_PROXIMITY:
        parts.append("Good location match")

    if breakdown.sector_tier == SectorTier.HIGH_DEMAND:
        parts.append("High-demand sector")
    if breakdown.interest_match:
        parts.append("Matches your interests")

    if breakdown.company_tier >= CompanyTier.MID:
        parts.append("Reputed company")
    elif breakdown.company_tier == CompanyTier.RECOGNIZABLE:
        parts.append("Well-known company")
    elif breakdown.startup_bonus:
        parts.append("Promising startup with competitive pay")

    if breakdown.rare_skill_count >= RARE_SKILLS_MIN and breakdown.uniqueness > 0:
        parts.append("Rare skill set")

    return ". ".join(parts) + "."


def is_remote(posting: Posting, reference: ReferenceRepository) -> bool:
    return (
        posting.work_mode == WorkMode.REMOTE
        or reference.canonical_city(posting.location) == REMOTE_CITY
    )


def derive_tags(match: Match, reference: ReferenceRepository) -> tuple[str, ...]:
    """Qualitative badges for one match, in a fixed order."""
    b = match.breakdown
    tags: list[str] = []
    if b.required_skill_count > 0 and len(b.matched_skills) == b.required_skill_count:
        tags.append("Perfect Match")
    if b.competitive_stipend:
        tags.append("High Stipend")
    if b.company_tier == CompanyTier.TOP:
        tags.append("Top Company")
    remote = is_remote(match.posting, reference)
    if remote:
        tags.append("Remote")
    elif b.proximity is not None and b.proximity >= GREAT_PROXIMITY:
        tags.append("Near You")
    if b.rare_skill_count >= RARE_SKILLS_MIN and b.uniqueness > 0:
        tags.append("Rare Skills")
    if b.interest_match:
        tags.append("Interest Match")
    return tuple(tags)


def tag_matches(matches: Sequence[Match], reference: ReferenceRepository) -> list[Match]:
    """Attach derived tags to every match, keeping order."""
    return [m.with_tags(*derive_tags(m, reference)) for m in matches]


def annotate_recommended(ranked: Sequence[Match], config: RankingConfig) -> list[Match]:
    """Tag matches in the top ``recommended_count`` positions that clear the minimum score.

    A presentation hint only: order and scores are untouched.
    """
    return [
        m.with_tags(RECOMMENDED_TAG)
        if position < config.recommended_count and m.score >= config.recommended_min_score
        else m
        for position, m in enumerate(ranked)
    ]
