"""Corpus statistics: one linear pass over the catalog.

Built once per catalog load and handed to every scoring call, so vocabulary
and frequency lookups never scale with the catalog inside the scoring loop.
"""

import logging
from collections import Counter
from collections.abc import Sequence

from internmatch.core.reference import ReferenceRepository, StaticReferenceRepository
from internmatch.core.schemas import CorpusStats, Posting
from internmatch.engine.skills import normalized_skills

logger = logging.getLogger(__name__)


def build_corpus_stats(
    postings: Sequence[Posting],
    reference: ReferenceRepository | None = None,
) -> CorpusStats:
    """Derive vocabularies, stipend aggregates and skill frequencies.

    Args:
        postings: The full catalog.
        reference: Lookup service used to normalize skills and cities.

    Returns:
        A read-only CorpusStats. An empty catalog yields empty stats.
    """
    reference = reference or StaticReferenceRepository()

    skills: set[str] = set()
    sectors: set[str] = set()
    locations: set[str] = set()
    frequency: Counter[str] = Counter()
    stipends: list[int] = []

    for posting in postings:
        amount = posting.stipend_amount
        if amount > 0:
            stipends.append(amount)

        posting_skills = normalized_skills(posting.required_skills, reference)
        skills.update(posting_skills)
        frequency.update(posting_skills.keys())

        sectors.update(tag.lower() for tag in posting.sector_tags)

        city = reference.canonical_city(posting.location)
        if city:
            locations.add(city)

    stats = CorpusStats(
        all_skills=tuple(sorted(skills)),
        all_sectors=tuple(sorted(sectors)),
        all_locations=tuple(sorted(locations)),
        max_stipend=max(stipends, default=0),
        average_stipend=sum(stipends) / len(stipends) if stipends else 0.0,
        skill_frequency=dict(sorted(frequency.items())),
        posting_count=len(postings),
    )
    logger.debug(
        "Corpus stats: %d postings, %d skills, %d sectors, %d locations, max stipend %d",
        stats.posting_count, len(stats.all_skills), len(stats.all_sectors),
        len(stats.all_locations), stats.max_stipend,
    )
    return stats
