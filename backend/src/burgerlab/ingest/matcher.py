from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

from rapidfuzz import fuzz, process

from .normalizer import compact
from .records import CandidateRecord, MatchResult
from .scorer import ScoringPolicy, score

Normalizer = Callable[[str], str]


@dataclass
class Assignment:
    matches: Dict[str, MatchResult] = field(default_factory=dict)
    unmatched: List[str] = field(default_factory=list)
    # best sub-threshold score per unmatched target (diagnostics only)
    best_rejected: Dict[str, float] = field(default_factory=dict)
    suggestions: Dict[str, str] = field(default_factory=dict)

    def get(self, target: str) -> Optional[MatchResult]:
        return self.matches.get(target)


def _closest_name(target: str, names: Sequence[str]) -> Optional[str]:
    """Closest raw candidate name by WRatio, for operator-facing messages."""
    if not names:
        return None
    hit = process.extractOne(target, names, scorer=fuzz.WRatio)
    return hit[0] if hit else None


def _best_candidate(
    norm_target: str,
    candidates: Sequence[CandidateRecord],
    normalized: Sequence[str],
    consumed: Set[int],
    policy: ScoringPolicy,
    exact_only: bool = False,
) -> Tuple[Optional[int], float]:
    best_index: Optional[int] = None
    best_score = -1.0
    for index, candidate in enumerate(candidates):
        if index in consumed:
            continue
        if exact_only and (not norm_target or compact(normalized[index]) != compact(norm_target)):
            continue
        value = score(norm_target, normalized[index], policy)
        if value > best_score or (
            value == best_score
            and best_index is not None
            and len(candidate.name) > len(candidates[best_index].name)
        ):
            best_index, best_score = index, value
    return best_index, best_score


def assign(
    targets: Sequence[str],
    candidates: Sequence[CandidateRecord],
    *,
    normalize: Normalizer,
    policy: ScoringPolicy,
) -> Assignment:
    """Greedy 1:1 assignment of candidates to canonical targets.

    A first pass binds every target to a candidate whose normalized name is
    the same (ignoring whitespace), so a variant target ("리아 불고기 베이컨")
    can never take the record that names another target ("리아 불고기")
    outright. The remaining targets are then processed in canonical order:
    each takes the best scoring candidate that is still unconsumed, and a
    candidate bound once is not offered to later targets. Equal scores go to
    the candidate with the longer raw name. Targets whose best score is below
    ``policy.threshold`` stay unmatched.
    """
    result = Assignment()
    normalized = [normalize(c.name) for c in candidates]
    norm_targets = {target: normalize(target) for target in targets}
    consumed: Set[int] = set()

    for target in targets:
        best_index, best_score = _best_candidate(
            norm_targets[target], candidates, normalized, consumed, policy, exact_only=True
        )
        if best_index is not None and best_score >= policy.threshold:
            consumed.add(best_index)
            result.matches[target] = MatchResult(target, candidates[best_index], best_score)

    for target in targets:
        if target in result.matches:
            continue
        best_index, best_score = _best_candidate(
            norm_targets[target], candidates, normalized, consumed, policy
        )
        if best_index is not None and best_score >= policy.threshold:
            consumed.add(best_index)
            result.matches[target] = MatchResult(target, candidates[best_index], best_score)
            continue

        result.unmatched.append(target)
        result.best_rejected[target] = max(best_score, 0.0)
        remaining = [c.name for i, c in enumerate(candidates) if i not in consumed]
        suggestion = _closest_name(target, remaining)
        if suggestion:
            result.suggestions[target] = suggestion

    return result
