"""Rule-based composite scoring of postings against a profile.

Score range: 1-100 for accepted postings (clamped). Bands from ScoringConfig:
skills 40, stipend 20, location 15, sector 10, company 10, uniqueness 5.
Hard-rejected postings get no value at all and never reach the output.
"""

import logging
import math
from collections import Counter
from collections.abc import Sequence

import numpy as np

from internmatch.core.config import EngineConfig, ScoringConfig
from internmatch.core.reference import ReferenceRepository, StaticReferenceRepository
from internmatch.core.schemas import (
    CompanyTier,
    CorpusStats,
    Match,
    Posting,
    Profile,
    RejectionReason,
    ScoreBreakdown,
    ScoreResult,
    SectorTier,
)
from internmatch.engine.distance import location_proximity
from internmatch.engine.explainer import explain, is_remote
from internmatch.engine.skills import match_skills, normalized_skills
from internmatch.engine.vectorizer import cosine_similarity, vectorize_posting, vectorize_profile

logger = logging.getLogger(__name__)

MIN_SCORE = 1.0
MAX_SCORE = 100.0


def check_rejection(
    profile: Profile,
    posting: Posting,
    config: ScoringConfig,
    reference: ReferenceRepository,
) -> RejectionReason | None:
    """Return why a posting is excluded outright, or None if it may be scored."""
    if profile.min_stipend is not None:
        if posting.stipend_amount < config.min_stipend_ratio * profile.min_stipend:
            return RejectionReason.BELOW_MIN_STIPEND

    if profile.skills and posting.required_skills:
        matched, required = match_skills(profile.skills, posting.required_skills, reference)
        if required and not matched:
            return RejectionReason.NO_MATCHING_SKILLS
    return None


def score_posting(
    profile: Profile,
    posting: Posting,
    stats: CorpusStats,
    config: EngineConfig | None = None,
    reference: ReferenceRepository | None = None,
    profile_vector: np.ndarray | None = None,
) -> ScoreResult:
    """Score a single posting.

    Args:
        profile: The candidate profile.
        posting: The posting to score.
        stats: Corpus statistics of the catalog the posting belongs to.
        config: Engine settings; defaults when omitted.
        reference: Curated lookups; built-in defaults when omitted.
        profile_vector: Precomputed profile vector for ``stats``; batch
            callers pass it so the profile is vectorized once per pass.

    Returns:
        ScoreResult with value in [1, 100] and an explanation, or a
        rejection reason and no value.
    """
    config = config or EngineConfig()
    reference = reference or StaticReferenceRepository()

    rejection = check_rejection(profile, posting, config.scoring, reference)
    if rejection is not None:
        return ScoreResult(rejection=rejection)

    if profile_vector is None:
        profile_vector = vectorize_profile(profile, stats, reference)
    breakdown = _breakdown(profile, posting, stats, config, reference, profile_vector)
    value = round(max(MIN_SCORE, min(MAX_SCORE, breakdown.total)), 1)
    return ScoreResult(
        value=value,
        explanation=explain(breakdown, remote=is_remote(posting, reference)),
        breakdown=breakdown,
    )


def score_catalog(
    profile: Profile,
    postings: Sequence[Posting],
    stats: CorpusStats,
    config: EngineConfig | None = None,
    reference: ReferenceRepository | None = None,
) -> list[Match]:
    """Score every posting, dropping hard rejections. Catalog order is kept."""
    config = config or EngineConfig()
    reference = reference or StaticReferenceRepository()

    profile_vector = vectorize_profile(profile, stats, reference)
    matches: list[Match] = []
    rejected: Counter[RejectionReason] = Counter()
    for posting in postings:
        result = score_posting(profile, posting, stats, config, reference, profile_vector)
        if result.rejection is not None:
            rejected[result.rejection] += 1
            continue
        matches.append(
            Match(
                posting=posting,
                score=result.value,
                explanation=result.explanation,
                breakdown=result.breakdown,
            ),
        )

    if rejected:
        logger.debug(
            "Scorer: rejected %d of %d postings (%s)",
            sum(rejected.values()), len(postings),
            ", ".join(f"{reason.value}: {n}" for reason, n in rejected.items()),
        )
    return matches


def _breakdown(
    profile: Profile,
    posting: Posting,
    stats: CorpusStats,
    config: EngineConfig,
    reference: ReferenceRepository,
    profile_vector: np.ndarray,
) -> ScoreBreakdown:
    sc = config.scoring
    stipend = posting.stipend_amount

    matched, required = match_skills(profile.skills, posting.required_skills, reference)
    ratio = len(matched) / required if required else sc.no_requirements_ratio
    similarity = cosine_similarity(profile_vector, vectorize_posting(posting, stats, reference))
    skills_points = _skills_points(ratio, similarity, len(matched), required, sc)

    competitive = stats.average_stipend > 0 and stipend > sc.high_stipend_multiplier * stats.average_stipend
    stipend_points = _stipend_points(stipend, stats, competitive, sc)

    proximity = location_proximity(
        profile.target_location, posting.location, reference, config.distance,
    )
    location_points = (sc.neutral_proximity if proximity is None else proximity) * sc.location_weight

    sector_tier = reference.sector_tier(posting.sector_tags)
    interests = {s.lower() for s in profile.interested_sectors}
    interest_match = any(tag.lower() in interests for tag in posting.sector_tags)
    sector_points = _sector_points(sector_tier, interest_match, sc)

    company_tier = reference.company_tier(posting.company)
    startup_bonus = (
        company_tier == CompanyTier.DEFAULT
        and stats.average_stipend > 0
        and stipend >= sc.startup_stipend_multiplier * stats.average_stipend
    )
    company_points = _company_points(company_tier, startup_bonus, sc)

    uniqueness_points, rare_count = _uniqueness_points(posting, stats, sc, reference)

    return ScoreBreakdown(
        skills=skills_points,
        stipend=stipend_points,
        location=location_points,
        sector=sector_points,
        company=company_points,
        uniqueness=uniqueness_points,
        matched_skills=tuple(matched),
        required_skill_count=required,
        skill_match_ratio=ratio,
        vector_similarity=similarity,
        proximity=proximity,
        sector_tier=sector_tier,
        company_tier=company_tier,
        interest_match=interest_match,
        rare_skill_count=rare_count,
        competitive_stipend=competitive,
        startup_bonus=startup_bonus,
    )


def _skills_points(
    ratio: float, similarity: float, matched: int, required: int, sc: ScoringConfig,
) -> float:
    points = ratio * sc.skill_ratio_points + similarity * sc.skill_similarity_points
    if required >= sc.perfect_match_min_required and matched == required:
        points += sc.perfect_match_bonus
    if matched >= sc.breadth_min_matched:
        points += sc.breadth_bonus
    return min(sc.skills_weight, points)


def _stipend_points(
    stipend: int, stats: CorpusStats, competitive: bool, sc: ScoringConfig,
) -> float:
    """Log-normalized against the corpus maximum so outliers do not flatten the rest."""
    if stipend <= 0 or stats.max_stipend <= 0:
        return 0.0
    normalized = min(1.0, math.log1p(stipend) / math.log1p(stats.max_stipend))
    points = normalized * sc.stipend_log_points
    if competitive:
        points += sc.high_stipend_bonus
    return min(sc.stipend_weight, points)


def _sector_points(tier: SectorTier, interest_match: bool, sc: ScoringConfig) -> float:
    base = {
        SectorTier.HIGH_DEMAND: sc.sector_high_demand_points,
        SectorTier.MODERATE: sc.sector_moderate_points,
        SectorTier.DEFAULT: sc.sector_default_points,
    }[tier]
    if interest_match:
        base += sc.interest_match_bonus
    return min(sc.sector_weight, base)


def _company_points(tier: CompanyTier, startup_bonus: bool, sc: ScoringConfig) -> float:
    base = {
        CompanyTier.TOP: sc.company_top_points,
        CompanyTier.MID: sc.company_mid_points,
        CompanyTier.RECOGNIZABLE: sc.company_recognizable_points,
        CompanyTier.DEFAULT: sc.company_default_points,
    }[tier]
    if startup_bonus:
        base += sc.startup_stipend_bonus
    return min(sc.company_weight, base)


def _uniqueness_points(
    posting: Posting,
    stats: CorpusStats,
    sc: ScoringConfig,
    reference: ReferenceRepository,
) -> tuple[float, int]:
    """Bonus for required skills that few other postings ask for."""
    points = 0.0
    rare = 0
    for key in normalized_skills(posting.required_skills, reference):
        frequency = stats.skill_frequency.get(key, 0)
        if frequency <= sc.very_rare_frequency:
            points += sc.very_rare_points
            rare += 1
        elif frequency <= sc.rare_frequency:
            points += sc.rare_points
            rare += 1
    return min(sc.uniqueness_weight, points), rare
