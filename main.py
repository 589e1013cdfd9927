"""CLI entry point for the internship matching engine."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import yaml

from internmatch.core.catalog import load_catalog
from internmatch.core.config import EngineConfig
from internmatch.core.reference import ReferenceData, StaticReferenceRepository
from internmatch.core.schemas import Profile
from internmatch.engine.filters import FilterState
from internmatch.engine.orchestrator import export_matches_json, recommend
from internmatch.engine.ranker import SortOption
from internmatch.profile.insights import profile_completeness, skill_gaps


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Internship matcher - rank a posting catalog against a candidate profile",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- rank subcommand ---
    rank_parser = subparsers.add_parser("rank", help="Score, rank and filter postings")
    rank_parser.add_argument("--profile", required=True, help="Path to profile YAML")
    rank_parser.add_argument("--catalog", required=True, help="Path to catalog JSON/YAML")
    rank_parser.add_argument("--config", help="Path to engine config YAML (optional)")
    rank_parser.add_argument("--reference", help="Path to reference data YAML (optional)")
    rank_parser.add_argument("--filters", help="Path to filter state YAML (optional)")
    rank_parser.add_argument(
        "--sort",
        default=SortOption.AI_RECOMMENDED.value,
        choices=[o.value for o in SortOption],
        help="Sort order (default: ai-recommended)",
    )
    rank_parser.add_argument(
        "--limit", type=int, default=10, help="Show at most N matches (default: 10)",
    )
    rank_parser.add_argument("--export", choices=["json"], help="Export results to format (json)")
    rank_parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose (DEBUG) logging",
    )

    # --- gaps subcommand ---
    gaps_parser = subparsers.add_parser(
        "gaps", help="Show the most requested skills missing from a profile",
    )
    gaps_parser.add_argument("--profile", required=True, help="Path to profile YAML")
    gaps_parser.add_argument("--catalog", required=True, help="Path to catalog JSON/YAML")
    gaps_parser.add_argument("--reference", help="Path to reference data YAML (optional)")
    gaps_parser.add_argument(
        "--limit", type=int, default=5, help="Show at most N skills (default: 5)",
    )
    gaps_parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose (DEBUG) logging",
    )

    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _load_filters(path: str | None) -> FilterState | None:
    if path is None:
        return None
    file = Path(path)
    if not file.exists():
        msg = f"Filters file not found: {file}"
        raise FileNotFoundError(msg)
    raw: dict[str, Any] = yaml.safe_load(file.read_text()) or {}
    return FilterState.model_validate(raw)


def _load_reference(path: str | None) -> StaticReferenceRepository:
    if path is None:
        return StaticReferenceRepository()
    return StaticReferenceRepository(ReferenceData.from_yaml(path))


def cmd_rank(args: argparse.Namespace) -> None:
    """Handle rank subcommand."""
    profile = Profile.from_yaml(args.profile)
    postings = load_catalog(args.catalog)
    config = EngineConfig.from_yaml(args.config) if args.config else EngineConfig()
    reference = _load_reference(args.reference)
    filters = _load_filters(args.filters)

    matches = recommend(profile, postings, filters, args.sort, config, reference)
    shown = matches[: max(0, args.limit)]

    if args.export == "json":
        print(export_matches_json(shown))
        return

    print(f"{len(matches)} matches from {len(postings)} postings "
          f"(profile {profile_completeness(profile)}% complete)")
    for position, m in enumerate(shown, start=1):
        tags = f" [{', '.join(m.tags)}]" if m.tags else ""
        print(f"{position:>3}. {m.score:5.1f}  {m.posting.title} @ {m.posting.company} "
              f"({m.posting.city or 'n/a'}, {m.posting.stipend or 'unpaid'}){tags}")
        print(f"        {m.explanation}")


def cmd_gaps(args: argparse.Namespace) -> None:
    """Handle gaps subcommand."""
    profile = Profile.from_yaml(args.profile)
    postings = load_catalog(args.catalog)
    reference = _load_reference(args.reference)

    gaps = skill_gaps(profile, postings, limit=args.limit, reference=reference)
    if not gaps:
        print("No missing skills: your profile covers every requested skill.")
        return
    print(f"Top skills missing from your profile across {len(postings)} postings:")
    for gap in gaps:
        print(f"  {gap.skill}: requested by {gap.frequency} posting(s)")


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    handler = cmd_gaps if args.command == "gaps" else cmd_rank
    try:
        handler(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
