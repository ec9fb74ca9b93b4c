"""Transient value objects passed between extractors, matcher and driver.

None of these are persisted; they live for a single ingest run.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Dict, List, Optional

from .parsing import parse_kcal, parse_nutrition_value

NUTRITION_FIELDS = ("kcal", "protein", "saturated_fat", "sodium", "sugar")


@dataclass(frozen=True)
class NutritionFacts:
    kcal: Optional[int] = None
    protein: Optional[float] = None
    saturated_fat: Optional[float] = None
    sodium: Optional[float] = None
    sugar: Optional[float] = None

    def present(self) -> Dict[str, float]:
        """Only the fields that carry a value."""
        return {key: value for key, value in asdict(self).items() if value is not None}

    def is_empty(self) -> bool:
        return not self.present()

    @classmethod
    def from_mapping(cls, data: Dict[str, object]) -> "NutritionFacts":
        """Build from a table row; "-", blanks and unit suffixes parse like scraped cells."""
        values = {}
        for key in NUTRITION_FIELDS:
            raw = data.get(key)
            text = None if raw is None else str(raw)
            values[key] = parse_kcal(text) if key == "kcal" else parse_nutrition_value(text)
        return cls(**values)


@dataclass(frozen=True)
class CandidateRecord:
    name: str
    image_url: Optional[str] = None
    detail_url: Optional[str] = None
    description: Optional[str] = None
    nutrition: Optional[NutritionFacts] = None
    # site specific id (menu id, goBrandDetail id, ...) used by enrichment
    source_id: Optional[str] = None

    def merged(self, other: "CandidateRecord") -> "CandidateRecord":
        """Return a copy with non-empty fields of ``other`` layered on top."""
        return replace(
            self,
            image_url=other.image_url or self.image_url,
            detail_url=other.detail_url or self.detail_url,
            description=other.description if other.description is not None else self.description,
            nutrition=other.nutrition or self.nutrition,
            source_id=other.source_id or self.source_id,
        )


@dataclass(frozen=True)
class MatchResult:
    target: str
    candidate: CandidateRecord
    score: float


@dataclass
class ExtractionResult:
    candidates: List[CandidateRecord] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def extend(self, other: "ExtractionResult") -> None:
        self.candidates.extend(other.candidates)
        self.errors.extend(other.errors)


@dataclass
class IngestSummary:
    brand: str
    total: int
    created: int = 0
    updated: int = 0
    errors: int = 0
    error_details: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.errors == 0

    def record_error(self, message: str) -> None:
        self.errors += 1
        self.error_details.append(message)
