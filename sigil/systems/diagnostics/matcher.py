"""
Sigil — Pattern Matcher

Scores catalogued patterns against a free-text symptom description.

  keyword_matches = pattern keywords contained in the text (case-insensitive)
  symptom_matches = symptom phrases contained verbatim, or sharing at least
                    one whole word with the text
  confidence      = min(0.95, keyword_matches * 0.2 + symptom_matches * 0.3)

A pattern with no keyword in the text scores 0 whatever its symptoms, so
shared filler words alone never produce a match. Results at or below 0.3
are dropped. The rest are sorted by confidence, highest first; ties keep
catalog order.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

import structlog

from sigil.systems.diagnostics.types import (
    DiagnosticPattern,
    PatternCategory,
    PatternMatchResult,
)

logger = structlog.get_logger()

KEYWORD_WEIGHT = 0.2
SYMPTOM_WEIGHT = 0.3
MAX_CONFIDENCE = 0.95
MIN_CONFIDENCE = 0.3  # Exclusive

NO_MATCH_MESSAGE = (
    "I couldn't match this to a known pattern. "
    "Can you describe what's happening in more detail?"
)

_WORD_RE = re.compile(r"[a-z0-9']+")


def _words(text: str) -> set[str]:
    return set(_WORD_RE.findall(text.lower()))


class PatternMatcher:
    """
    Confidence-scored symptom → pattern matching over a fixed pattern list.

    The pattern list is copied at construction and never changes afterwards.
    """

    def __init__(
        self,
        patterns: Iterable[DiagnosticPattern],
        categories: Iterable[PatternCategory | str] | None = None,
    ) -> None:
        self._patterns: tuple[DiagnosticPattern, ...] = tuple(patterns)
        self._categories: frozenset[PatternCategory] | None = (
            frozenset(PatternCategory(c) for c in categories) if categories is not None else None
        )
        self._logger = logger.bind(system="diagnostics", component="pattern_matcher")

    @property
    def patterns(self) -> tuple[DiagnosticPattern, ...]:
        return self._patterns

    def score(self, pattern: DiagnosticPattern, symptom_text: str) -> float:
        """Raw confidence for one pattern, before the threshold is applied."""
        lower = symptom_text.lower()
        text_words = _words(symptom_text)

        keyword_matches = sum(1 for k in pattern.keywords if k.lower() in lower)
        if keyword_matches == 0:
            return 0.0

        symptom_matches = sum(
            1
            for s in pattern.symptoms
            if s.lower() in lower or _words(s) & text_words
        )

        return min(
            MAX_CONFIDENCE,
            keyword_matches * KEYWORD_WEIGHT + symptom_matches * SYMPTOM_WEIGHT,
        )

    def match(self, symptom_text: str) -> list[PatternMatchResult]:
        results: list[PatternMatchResult] = []

        for pattern in self._patterns:
            if self._categories is not None and pattern.category not in self._categories:
                continue

            confidence = self.score(pattern, symptom_text)
            if confidence <= MIN_CONFIDENCE:
                continue

            results.append(
                PatternMatchResult(
                    pattern=pattern,
                    matched_cause=pattern.causes[0],
                    confidence=confidence,
                )
            )

        # sorted() is stable, so equal confidences keep catalog order
        results = sorted(results, key=lambda r: r.confidence, reverse=True)

        self._logger.debug(
            "patterns_matched",
            matches=len(results),
            top=results[0].pattern.id if results else None,
        )
        return results

    def diagnose(self, symptom_text: str) -> str:
        """Human-readable explanation of the best match, or a fallback prompt."""
        return format_diagnosis(self.match(symptom_text))


def format_diagnosis(results: Sequence[PatternMatchResult]) -> str:
    if not results:
        return NO_MATCH_MESSAGE

    top = results[0]
    cause = top.matched_cause
    parts = [
        f"**Found: {top.pattern.name}** ({round(top.confidence * 100)}% confidence)",
        f"**Cause:** {cause.name}",
    ]
    if cause.example:
        parts.append(f"**Example:**\n```tsx\n{cause.example}\n```")
    parts.append(f"**Solution:**\n```tsx\n{cause.solution}\n```")

    return "\n\n".join(parts).strip()
