from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional, Tuple

from ..fetch import ExtractionContext
from ..normalizer import PLAIN_RULES, NormalizationRules, normalize
from ..nutrition_tables import load_nutrition_table
from ..records import CandidateRecord, ExtractionResult
from ..scorer import ScoringPolicy

logger = logging.getLogger(__name__)


class SourceProfile(ABC):
    """Everything brand specific about an ingest run.

    Subclasses set the class attributes (canonical targets, normalization
    rules, scoring policy) and implement ``extract``. Nutrition comes either
    from ``extract_nutrition`` (scraped or static table) or from ``enrich``,
    which runs once per matched target.
    """

    slug: str = ""
    brand_name: str = ""
    category: str = "burger"
    targets: Tuple[str, ...] = ()
    rules: NormalizationRules = PLAIN_RULES
    policy: ScoringPolicy = ScoringPolicy()
    # policy for matching nutrition rows; defaults to ``policy``
    nutrition_policy: Optional[ScoringPolicy] = None
    request_delay: float = 0.5
    static_nutrition: bool = False

    def normalize(self, raw: Optional[str]) -> str:
        return normalize(raw, self.rules)

    def accepts(self, raw_name: str) -> bool:
        """Filter for scraped names that are never worth matching (sets, combos)."""
        return bool(raw_name and raw_name.strip())

    def fetch(self, ctx: ExtractionContext, url: str, **kwargs) -> str:
        kwargs.setdefault("delay", self.request_delay)
        return ctx.http.get_text(url, **kwargs)

    @abstractmethod
    def extract(self, ctx: ExtractionContext) -> ExtractionResult:
        """Collect menu candidates; page level failures go to ``errors``."""

    def extract_nutrition(self, ctx: ExtractionContext) -> ExtractionResult:
        if not self.static_nutrition:
            return ExtractionResult()
        return ExtractionResult(candidates=load_nutrition_table(self.slug).as_candidates())

    def enrich(self, ctx: ExtractionContext, target: str, candidate: CandidateRecord) -> CandidateRecord:
        return candidate

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.slug}>"
