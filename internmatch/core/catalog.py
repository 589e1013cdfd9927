"""Load a posting catalog from JSON or YAML."""

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from internmatch.core.schemas import Posting

logger = logging.getLogger(__name__)


def parse_catalog(records: list[dict[str, Any]]) -> list[Posting]:
    """Validate raw records into Postings, skipping the ones that cannot load.

    A record without ``id`` or ``title`` is unusable; it is logged and dropped
    so one bad row never blocks the rest of the catalog.
    """
    postings: list[Posting] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            logger.warning("Skipping catalog entry %d: not a mapping", index)
            continue
        try:
            postings.append(Posting.model_validate(record))
        except ValidationError as e:
            logger.warning(
                "Skipping catalog entry %d (%s): %d validation error(s)",
                index, record.get("id", "?"), e.error_count(),
            )
    skipped = len(records) - len(postings)
    if skipped:
        logger.info("Catalog: loaded %d postings, skipped %d", len(postings), skipped)
    return postings


def load_catalog(path: str | Path) -> list[Posting]:
    """Read postings from a .json or .yaml/.yml file.

    The file holds either a list of records or a mapping with an
    ``internships`` (or ``postings``) list.
    """
    path = Path(path)
    if not path.exists():
        msg = f"Catalog file not found: {path}"
        raise FileNotFoundError(msg)

    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        raw: Any = json.loads(text) if text.strip() else []
    else:
        raw = yaml.safe_load(text) or []

    if isinstance(raw, dict):
        raw = raw.get("internships", raw.get("postings", []))
    if not isinstance(raw, list):
        msg = f"Catalog must be a list of postings: {path}"
        raise ValueError(msg)
    return parse_catalog(raw)
