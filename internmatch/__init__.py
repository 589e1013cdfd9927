"""Internship matching, scoring and ranking engine.

Usage:
    from internmatch import Profile, recommend, load_catalog

    matches = recommend(Profile(skills=["Python", "SQL"]), load_catalog("catalog.json"))
"""

from internmatch.core.catalog import load_catalog
from internmatch.core.config import EngineConfig
from internmatch.core.reference import ReferenceData, StaticReferenceRepository
from internmatch.core.schemas import Match, Posting, Profile
from internmatch.engine.filters import FilterState
from internmatch.engine.orchestrator import MatchSession, recommend
from internmatch.engine.ranker import SortOption

__all__ = [
    "EngineConfig",
    "FilterState",
    "Match",
    "MatchSession",
    "Posting",
    "Profile",
    "ReferenceData",
    "SortOption",
    "StaticReferenceRepository",
    "load_catalog",
    "recommend",
]
