"""Skill normalization and overlap."""

from collections.abc import Iterable

from internmatch.core.reference import ReferenceRepository


def normalized_skills(skills: Iterable[str], reference: ReferenceRepository) -> dict[str, str]:
    """Map normalized skill key → first original spelling, blanks dropped."""
    result: dict[str, str] = {}
    for skill in skills:
        key = reference.canonical_skill(skill)
        if key and key not in result:
            result[key] = skill
    return result


def match_skills(
    profile_skills: Iterable[str],
    required_skills: Iterable[str],
    reference: ReferenceRepository,
) -> tuple[list[str], int]:
    """Return (matched skills in the posting's spelling and order, required count)."""
    have = normalized_skills(profile_skills, reference)
    need = normalized_skills(required_skills, reference)
    matched = [original for key, original in need.items() if key in have]
    return matched, len(need)
