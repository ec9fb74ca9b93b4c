"""Static per-brand nutrition tables.

Some brands publish nutrition only as images or PDFs. Their values ship as
versioned JSON files (``data/nutrition/<slug>.json``) and reach the matcher as
ordinary candidate records, so the driver treats them like scraped data.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Tuple

from burgerlab.core.config import get_settings

from .records import CandidateRecord, NutritionFacts

logger = logging.getLogger(__name__)

PACKAGE_DATA_DIR = Path(__file__).resolve().parent / "data" / "nutrition"


class NutritionTableError(Exception):
    pass


@dataclass(frozen=True)
class NutritionTable:
    slug: str
    brand: str
    version: str
    source: Optional[str]
    items: Tuple[Tuple[str, NutritionFacts], ...]

    def as_candidates(self) -> List[CandidateRecord]:
        return [CandidateRecord(name=name, nutrition=facts) for name, facts in self.items]


def _table_path(slug: str) -> Path:
    override = get_settings().nutrition_data_dir
    if override:
        candidate = Path(override) / f"{slug}.json"
        if candidate.exists():
            return candidate
    return PACKAGE_DATA_DIR / f"{slug}.json"


@lru_cache(maxsize=None)
def load_nutrition_table(slug: str) -> NutritionTable:
    path = _table_path(slug)
    if not path.exists():
        raise NutritionTableError(f"No nutrition table for '{slug}' ({path})")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise NutritionTableError(f"Invalid nutrition table {path}: {exc}") from exc

    items = []
    for number, row in enumerate(payload.get("items", []), start=1):
        try:
            name = (row.get("name") or "").strip()
            facts = NutritionFacts.from_mapping(row)
        except (AttributeError, TypeError, ValueError) as exc:
            logger.warning("Skipping malformed row %d in %s: %s", number, path.name, exc)
            continue
        if not name:
            logger.warning("Skipping nameless row %d in %s", number, path.name)
            continue
        items.append((name, facts))

    table = NutritionTable(
        slug=slug,
        brand=payload.get("brand", slug),
        version=str(payload.get("version", "")),
        source=payload.get("source"),
        items=tuple(items),
    )
    logger.info("Loaded nutrition table %s v%s (%d items)", slug, table.version, len(items))
    return table
