"""Per-source name normalization.

Each source profile carries its own ``NormalizationRules``; there is no global
noise list because a token that is packaging noise for one brand ("세트") can be
part of a real menu name for another.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Sequence, Tuple

_WHITESPACE = re.compile(r"\s+")
_LATIN = re.compile(r"[A-Za-z]")


def _compile(pattern: str) -> Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


@dataclass(frozen=True)
class NormalizationRules:
    noise_patterns: Tuple[Pattern[str], ...] = ()
    rewrites: Tuple[Tuple[Pattern[str], str], ...] = ()
    strip_latin: bool = False
    casefold: bool = True

    @classmethod
    def build(
        cls,
        noise: Sequence[str] = (),
        rewrites: Sequence[Tuple[str, str]] = (),
        strip_latin: bool = False,
        casefold: bool = True,
    ) -> "NormalizationRules":
        return cls(
            noise_patterns=tuple(_compile(p) for p in noise),
            rewrites=tuple((_compile(p), repl) for p, repl in rewrites),
            strip_latin=strip_latin,
            casefold=casefold,
        )


PLAIN_RULES = NormalizationRules()


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def normalize(raw: Optional[str], rules: NormalizationRules = PLAIN_RULES) -> str:
    """Clean a raw menu label into its comparable form.

    Steps run in a fixed order: noise removal, rewrites (synonyms and
    duplicate collapsing), optional Latin stripping, whitespace collapse and
    case folding. Never raises; ``None`` becomes an empty string.
    """
    if not raw:
        return ""
    text = str(raw)
    for pattern in rules.noise_patterns:
        text = pattern.sub(" ", text)
    for pattern, replacement in rules.rewrites:
        text = pattern.sub(replacement, text)
    if rules.strip_latin:
        text = _LATIN.sub("", text)
    text = collapse_whitespace(text)
    if rules.casefold:
        text = text.casefold()
    return text


def compact(text: str) -> str:
    """Whitespace-free form used by the containment and near-exact checks."""
    return _WHITESPACE.sub("", text)
