"""Binary feature vectors over the corpus vocabularies, and cosine similarity.

Layout: [skills | sectors | locations], one dimension per vocabulary entry in
CorpusStats order. Items outside the vocabulary have no dimension and are
ignored.
"""

from collections.abc import Iterable

import numpy as np

from internmatch.core.reference import ReferenceRepository
from internmatch.core.schemas import CorpusStats, Location, Posting, Profile
from internmatch.engine.skills import normalized_skills


def _encode(
    stats: CorpusStats,
    skill_keys: Iterable[str],
    sector_keys: Iterable[str],
    city: str,
) -> np.ndarray:
    vector = np.zeros(stats.dimensions, dtype=np.float64)
    offset = 0
    for vocabulary, present in (
        (stats.all_skills, set(skill_keys)),
        (stats.all_sectors, set(sector_keys)),
        (stats.all_locations, {city} if city else set()),
    ):
        for i, item in enumerate(vocabulary):
            if item in present:
                vector[offset + i] = 1.0
        offset += len(vocabulary)
    return vector


def _vectorize(
    skills: Iterable[str],
    sectors: Iterable[str],
    location: Location | None,
    stats: CorpusStats,
    reference: ReferenceRepository,
) -> np.ndarray:
    return _encode(
        stats,
        normalized_skills(skills, reference).keys(),
        (s.lower() for s in sectors),
        reference.canonical_city(location),
    )


def vectorize_profile(
    profile: Profile, stats: CorpusStats, reference: ReferenceRepository,
) -> np.ndarray:
    """Profile vector: declared skills, interested sectors and target city."""
    return _vectorize(
        profile.skills, profile.interested_sectors, profile.target_location, stats, reference,
    )


def vectorize_posting(
    posting: Posting, stats: CorpusStats, reference: ReferenceRepository,
) -> np.ndarray:
    """Posting vector: required skills, sector tags and city."""
    return _vectorize(
        posting.required_skills, posting.sector_tags, posting.location, stats, reference,
    )


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """Cosine of the angle between two vectors; 0.0 if either has zero magnitude."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        msg = f"vector shapes differ: {a.shape} vs {b.shape}"
        raise ValueError(msg)
    denominator = float(np.linalg.norm(a) * np.linalg.norm(b))
    if denominator == 0.0:
        return 0.0
    return float(np.dot(a, b) / denominator)
