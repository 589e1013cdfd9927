"""Orchestrator: wires corpus stats, scorer, ranker, explainer and filters.

Data flow:
  1. Corpus stats    (once per catalog)
  2. Scorer          → non-rejected matches
  3. Ranker          → ranked matches (or a user-chosen sort)
  4. Explainer       → tags + "AI Recommended" hint
  5. Filter chain    → visible matches

MatchSession exposes the state transitions explicitly. A filter change or a
sort change never triggers a rescore; only a catalog refresh or a profile
submission does.
"""

import json
import logging
from collections.abc import Sequence

from internmatch.core.config import EngineConfig
from internmatch.core.reference import ReferenceRepository, StaticReferenceRepository
from internmatch.core.schemas import CorpusStats, Match, Posting, Profile
from internmatch.engine.corpus import build_corpus_stats
from internmatch.engine.explainer import annotate_recommended, tag_matches
from internmatch.engine.filters import FilterState, apply_filters
from internmatch.engine.ranker import SortOption, rank_matches, sort_matches
from internmatch.engine.scorer import score_catalog

logger = logging.getLogger(__name__)


def rank_catalog(
    profile: Profile,
    postings: Sequence[Posting],
    stats: CorpusStats,
    config: EngineConfig,
    reference: ReferenceRepository,
) -> list[Match]:
    """Score, rank and tag a catalog against a profile (no filtering)."""
    scored = score_catalog(profile, postings, stats, config, reference)
    ranked = rank_matches(scored, profile, config.ranking, reference)
    return annotate_recommended(tag_matches(ranked, reference), config.ranking)


def recommend(
    profile: Profile,
    postings: Sequence[Posting],
    filters: FilterState | None = None,
    sort: SortOption | str = SortOption.AI_RECOMMENDED,
    config: EngineConfig | None = None,
    reference: ReferenceRepository | None = None,
) -> list[Match]:
    """Run one full, stateless pass and return the visible matches.

    Same inputs always produce the same ordered output.
    """
    config = config or EngineConfig()
    reference = reference or StaticReferenceRepository()
    stats = build_corpus_stats(postings, reference)
    ranked = rank_catalog(profile, postings, stats, config, reference)
    ordered = sort_matches(ranked, sort, profile, config.ranking, reference)
    visible = apply_filters(ordered, filters, reference)
    logger.info(
        "Recommend: %d postings, %d matches, %d after filtering",
        len(postings), len(ranked), len(visible),
    )
    return visible


class MatchSession:
    """Holds the latest catalog, profile, filters and sort for one user.

    Usage::

        session = MatchSession()
        session.refresh_catalog(postings)   # rebuild stats, rescore
        session.submit_profile(profile)     # rescore
        session.change_filters(state)       # refilter only
        session.change_sort("stipend-high") # re-sort only
        session.results

    Stats and scored matches are replaced wholesale on each transition,
    never mutated in place.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        reference: ReferenceRepository | None = None,
    ) -> None:
        self._config = config or EngineConfig()
        self._reference = reference or StaticReferenceRepository()
        self._postings: tuple[Posting, ...] = ()
        self._stats = CorpusStats()
        self._profile: Profile | None = None
        self._filters: FilterState | None = None
        self._sort = SortOption.AI_RECOMMENDED
        self._ranked: list[Match] = []
        self._ordered: list[Match] = []
        self._visible: list[Match] = []
        self.rescore_count = 0

    @property
    def stats(self) -> CorpusStats:
        return self._stats

    @property
    def profile(self) -> Profile | None:
        return self._profile

    @property
    def ranked(self) -> list[Match]:
        """All non-rejected matches in the current sort order, unfiltered."""
        return list(self._ordered)

    @property
    def results(self) -> list[Match]:
        """Matches visible under the current filters."""
        return list(self._visible)

    def refresh_catalog(self, postings: Sequence[Posting]) -> list[Match]:
        """Catalog refreshed: rebuild corpus stats and rescore."""
        self._postings = tuple(postings)
        self._stats = build_corpus_stats(self._postings, self._reference)
        logger.info("Catalog refreshed: %d postings", len(self._postings))
        self._rescore()
        return self.results

    def submit_profile(self, profile: Profile) -> list[Match]:
        """Profile submitted: rescore against the current catalog."""
        self._profile = profile
        logger.info("Profile submitted: %d skills", len(profile.skills))
        self._rescore()
        return self.results

    def change_filters(self, filters: FilterState | None) -> list[Match]:
        """Filters changed: refilter the already-ranked matches."""
        self._filters = filters
        self._refilter()
        return self.results

    def change_sort(self, sort: SortOption | str) -> list[Match]:
        """Sort option changed: re-sort already-scored matches, then refilter."""
        self._sort = SortOption(sort)
        self._resort()
        return self.results

    def _rescore(self) -> None:
        if self._profile is None:
            self._ranked = []
        else:
            self._ranked = rank_catalog(
                self._profile, self._postings, self._stats, self._config, self._reference,
            )
            self.rescore_count += 1
            logger.debug("Rescored: %d matches", len(self._ranked))
        self._resort()

    def _resort(self) -> None:
        if self._profile is None:
            self._ordered = []
        else:
            self._ordered = sort_matches(
                self._ranked, self._sort, self._profile, self._config.ranking, self._reference,
            )
        self._refilter()

    def _refilter(self) -> None:
        self._visible = apply_filters(self._ordered, self._filters, self._reference)


def export_matches_json(matches: Sequence[Match]) -> str:
    """Export matches as a JSON string."""
    data = []
    for m in matches:
        p = m.posting
        data.append({
            "id": p.id,
            "title": p.title,
            "company": p.company,
            "location": p.city,
            "stipend": p.stipend,
            "work_mode": p.work_mode.value if p.work_mode else None,
            "score": m.score,
            "explanation": m.explanation,
            "tags": list(m.tags),
        })
    return json.dumps(data, indent=2, ensure_ascii=False)
