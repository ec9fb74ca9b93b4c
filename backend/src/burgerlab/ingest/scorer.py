"""Tiered similarity score between two normalized menu names.

Every tier yields a value in [0, 100]; the final score is the maximum of the
applicable tiers, never a sum. A qualifier mismatch ("주니어" on one side only)
forces 0 before any tier runs.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Tuple

from .normalizer import compact

EXACT_SCORE = 100.0
COMPACT_EXACT_SCORE = 90.0

KEYWORD_WHITESPACE = "whitespace"
KEYWORD_HANGUL = "hangul"
KEYWORD_HANGUL_LATIN = "hangul_latin"

_HANGUL_WORD = re.compile(r"[가-힣]{2,}")
_HANGUL_LATIN_WORD = re.compile(r"[가-힣]{2,}|[a-z]{2,}")
_BRACKETED = re.compile(r"\(.*?\)")


@dataclass(frozen=True)
class ScoringPolicy:
    threshold: float = 70.0
    containment_weight: float = 90.0
    min_containment_length: int = 3
    keyword_mode: str = KEYWORD_WHITESPACE
    keyword_weight: float = 85.0
    keyword_all_match_score: Optional[float] = None
    prefix_min_run: Optional[int] = 5
    prefix_weight: float = 70.0
    qualifiers: Tuple[str, ...] = ()
    exact_only_when_bracketed: bool = False


def _has_qualifier(text: str, qualifier: str) -> bool:
    # "주니어|junior": spellings of the same qualifier
    body = compact(text)
    return any(compact(alt).casefold() in body for alt in qualifier.split("|"))


def qualifier_mismatch(target: str, candidate: str, qualifiers: Tuple[str, ...]) -> bool:
    return any(
        _has_qualifier(target, q) != _has_qualifier(candidate, q) for q in qualifiers
    )


def containment_score(target: str, candidate: str, policy: ScoringPolicy) -> float:
    a, b = compact(target), compact(candidate)
    if not a or not b:
        return 0.0
    shorter, longer = (a, b) if len(a) <= len(b) else (b, a)
    if len(shorter) < policy.min_containment_length or shorter not in longer:
        return 0.0
    return len(shorter) / len(longer) * policy.containment_weight


def keywords(text: str, mode: str) -> FrozenSet[str]:
    if mode == KEYWORD_HANGUL:
        return frozenset(_HANGUL_WORD.findall(text))
    if mode == KEYWORD_HANGUL_LATIN:
        # bracketed qualifiers are not keywords, they are handled separately
        return frozenset(_HANGUL_LATIN_WORD.findall(_BRACKETED.sub(" ", text)))
    return frozenset(token for token in text.split() if len(token) > 1)


def keyword_score(target: str, candidate: str, policy: ScoringPolicy) -> float:
    left, right = keywords(target, policy.keyword_mode), keywords(candidate, policy.keyword_mode)
    if not left or not right:
        return 0.0
    common = len(left & right)
    if not common:
        return 0.0
    if policy.keyword_all_match_score is not None and left == right:
        return policy.keyword_all_match_score
    return common / max(len(left), len(right)) * policy.keyword_weight


def common_prefix_length(a: str, b: str) -> int:
    run = 0
    for left, right in zip(a, b):
        if left != right:
            break
        run += 1
    return run


def prefix_score(target: str, candidate: str, policy: ScoringPolicy) -> float:
    if policy.prefix_min_run is None:
        return 0.0
    a, b = compact(target), compact(candidate)
    run = common_prefix_length(a, b)
    if run < policy.prefix_min_run:
        return 0.0
    return run / min(len(a), len(b)) * policy.prefix_weight


def score(target: str, candidate: str, policy: ScoringPolicy) -> float:
    """Score two normalized names in [0, 100]."""
    if not target or not candidate:
        return 0.0
    if qualifier_mismatch(target, candidate, policy.qualifiers):
        return 0.0
    if target == candidate:
        return EXACT_SCORE
    if compact(target) == compact(candidate):
        return COMPACT_EXACT_SCORE
    if policy.exact_only_when_bracketed and ("(" in target or "(" in candidate):
        return 0.0

    tiers: List[float] = [
        containment_score(target, candidate, policy),
        keyword_score(target, candidate, policy),
        prefix_score(target, candidate, policy),
    ]
    return round(min(max(tiers), EXACT_SCORE), 2)
