#!/usr/bin/env python3
"""Benchmark a full matching pass over a synthetic catalog.

Generates a reproducible catalog, then times each stage (corpus stats,
scoring, ranking, filtering) over several repetitions and prints a table.
A filter change should cost a small fraction of a rescore.

Usage:
    python scripts/benchmark_ranking.py
    python scripts/benchmark_ranking.py --size 20000 --repeat 5
"""

import argparse
import logging
import random
import statistics
import sys
import time
from collections.abc import Callable
from pathlib import Path

# Ensure project root is on the path when run as a script
sys.path.insert(0, str(Path(__file__).parent.parent))

from internmatch.core.config import EngineConfig
from internmatch.core.reference import DEFAULT_REFERENCE_DATA, StaticReferenceRepository
from internmatch.core.schemas import Posting, Profile
from internmatch.engine.corpus import build_corpus_stats
from internmatch.engine.filters import FilterState, apply_filters
from internmatch.engine.ranker import rank_matches
from internmatch.engine.scorer import score_catalog

logging.basicConfig(level=logging.WARNING)
logger = logging.getLogger(__name__)

_SKILLS = [
    "Python", "SQL", "Java", "JavaScript", "React", "Node.js", "Excel", "Figma",
    "Machine Learning", "AWS", "Docker", "C++", "Tableau", "SEO", "Go", "Rust",
]
_SECTORS = [
    "Technology", "Finance", "Marketing", "Healthcare", "Design", "Education",
    "Data Science", "Agriculture", "Logistics",
]
_MODES = ["Remote", "Onsite", "Hybrid"]


def _synthetic_catalog(size: int, seed: int) -> list[Posting]:
    rng = random.Random(seed)
    cities = sorted(DEFAULT_REFERENCE_DATA.city_coordinates) + ["Remote", "Shillong"]
    companies = (
        DEFAULT_REFERENCE_DATA.top_companies
        + DEFAULT_REFERENCE_DATA.mid_companies
        + [f"Startup {i}" for i in range(40)]
    )
    postings = []
    for i in range(size):
        postings.append(
            Posting(
                id=f"bench-{i}",
                title=f"Intern {i}",
                company=rng.choice(companies),
                location=rng.choice(cities).title(),
                stipend=f"₹{rng.randrange(0, 60000, 500):,}",
                required_skills=rng.sample(_SKILLS, rng.randint(1, 5)),
                sector_tags=rng.sample(_SECTORS, rng.randint(1, 2)),
                work_mode=rng.choice(_MODES),
            ),
        )
    return postings


def _time(fn: Callable[[], object], repeat: int) -> list[float]:
    timings = []
    for _ in range(repeat):
        start = time.perf_counter()
        fn()
        timings.append(time.perf_counter() - start)
    return timings


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark the matching engine")
    parser.add_argument("--size", type=int, default=5000, help="Catalog size (default: 5000)")
    parser.add_argument("--repeat", type=int, default=3, help="Repetitions (default: 3)")
    parser.add_argument("--seed", type=int, default=7, help="Random seed (default: 7)")
    args = parser.parse_args()

    config = EngineConfig()
    reference = StaticReferenceRepository()
    postings = _synthetic_catalog(args.size, args.seed)
    profile = Profile(
        skills=["Python", "SQL", "React"],
        interested_sectors=["Technology"],
        location="Delhi",
        min_stipend=5000,
    )

    stats = build_corpus_stats(postings, reference)
    scored = score_catalog(profile, postings, stats, config, reference)
    ranked = rank_matches(scored, profile, config.ranking, reference)
    filters = FilterState(work_mode="Remote", min_score=40)

    stages: list[tuple[str, Callable[[], object]]] = [
        ("corpus stats", lambda: build_corpus_stats(postings, reference)),
        ("score", lambda: score_catalog(profile, postings, stats, config, reference)),
        ("rank", lambda: rank_matches(scored, profile, config.ranking, reference)),
        ("filter", lambda: apply_filters(ranked, filters, reference)),
    ]

    print(f"\nCatalog: {len(postings)} postings, {len(scored)} matches after rejection")
    header = f"{'Stage':<14} {'Mean ms':>10} {'Stdev ms':>10} {'Min ms':>10}"
    print("=" * len(header))
    print(header)
    print("=" * len(header))
    for name, fn in stages:
        ms = [t * 1000 for t in _time(fn, args.repeat)]
        stdev = statistics.stdev(ms) if len(ms) > 1 else 0.0
        print(f"{name:<14} {statistics.mean(ms):>10.2f} {stdev:>10.2f} {min(ms):>10.2f}")
    print("=" * len(header))


if __name__ == "__main__":
    main()
