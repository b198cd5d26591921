"""
Tests for PatternMatcher and the built-in pattern catalog.

Covers:
  - Confidence formula, keyword gate, cap and exclusive threshold
  - Stable ordering on ties
  - Category filtering
  - Diagnosis formatting and fallback
"""

from __future__ import annotations

import pytest

from sigil.systems.diagnostics.matcher import (
    MAX_CONFIDENCE,
    NO_MATCH_MESSAGE,
    PatternMatcher,
    format_diagnosis,
)
from sigil.systems.diagnostics.patterns import (
    PATTERNS,
    get_pattern_by_id,
    get_patterns_by_category,
)
from sigil.systems.diagnostics.types import (
    DiagnosticPattern,
    PatternCategory,
    PatternCause,
    Severity,
)


def _pattern(
    pattern_id: str,
    keywords: tuple[str, ...] = ("zebra", "giraffe"),
    symptoms: tuple[str, ...] = ("Quantum flux overload",),
    category: PatternCategory = PatternCategory.PHYSICS,
) -> DiagnosticPattern:
    return DiagnosticPattern(
        id=pattern_id,
        name=f"Pattern {pattern_id}",
        category=category,
        severity=Severity.WARNING,
        symptoms=symptoms,
        keywords=keywords,
        causes=(
            PatternCause(name=f"{pattern_id} cause", signature="sig", solution="fix()"),
            PatternCause(name="second cause", signature="sig2", solution="other()"),
        ),
    )


class TestScoring:
    def test_single_keyword_is_below_threshold(self):
        matcher = PatternMatcher([_pattern("p1")])
        assert matcher.score(matcher.patterns[0], "zebra") == pytest.approx(0.2)
        assert matcher.match("zebra") == []

    def test_two_keywords_pass_threshold(self):
        matcher = PatternMatcher([_pattern("p1")])
        results = matcher.match("a zebra and a giraffe")
        assert len(results) == 1
        assert results[0].confidence == pytest.approx(0.4)

    def test_symptoms_without_keyword_score_zero(self):
        matcher = PatternMatcher([_pattern("p1")])
        assert matcher.score(matcher.patterns[0], "quantum flux overload") == 0.0
        assert matcher.match("quantum flux overload") == []

    def test_symptom_word_overlap(self):
        matcher = PatternMatcher([_pattern("p1")])
        results = matcher.match("zebra flux")
        assert results[0].confidence == pytest.approx(0.5)

    def test_confidence_capped(self):
        pattern = _pattern("p1", keywords=("a1", "b2", "c3", "d4", "e5", "f6"))
        matcher = PatternMatcher([pattern])
        results = matcher.match("a1 b2 c3 d4 e5 f6 quantum")
        assert results[0].confidence == MAX_CONFIDENCE

    def test_keywords_case_insensitive(self):
        matcher = PatternMatcher([_pattern("p1")])
        assert matcher.match("ZEBRA GIRAFFE")

    def test_first_cause_reported(self):
        matcher = PatternMatcher([_pattern("p1")])
        result = matcher.match("zebra giraffe")[0]
        assert result.matched_cause.name == "p1 cause"


class TestOrdering:
    def test_sorted_by_confidence(self):
        low = _pattern("low", keywords=("zebra", "giraffe"))
        high = _pattern("high", keywords=("zebra", "giraffe", "okapi"))
        results = PatternMatcher([low, high]).match("zebra giraffe okapi")
        assert [r.pattern.id for r in results] == ["high", "low"]

    def test_ties_keep_catalog_order(self):
        patterns = [_pattern("first"), _pattern("second"), _pattern("third")]
        results = PatternMatcher(patterns).match("zebra giraffe")
        assert [r.pattern.id for r in results] == ["first", "second", "third"]


class TestCategories:
    def test_filter_excludes_other_categories(self):
        patterns = [
            _pattern("dialog", category=PatternCategory.DIALOG),
            _pattern("physics", category=PatternCategory.PHYSICS),
        ]
        matcher = PatternMatcher(patterns, categories=["physics"])
        assert [r.pattern.id for r in matcher.match("zebra giraffe")] == ["physics"]

    def test_catalog_helpers(self):
        physics = get_patterns_by_category(PatternCategory.PHYSICS)
        assert [p.id for p in physics] == [
            "physics-financial-optimistic",
            "physics-destructive-no-confirm",
        ]
        assert get_pattern_by_id("layout-shift") is not None
        assert get_pattern_by_id("missing") is None

    def test_catalog_ids_unique(self):
        ids = [p.id for p in PATTERNS]
        assert len(ids) == len(set(ids))
        assert all(p.causes for p in PATTERNS)


class TestBuiltInCatalog:
    def test_dialog_symptoms(self):
        results = PatternMatcher(PATTERNS).match("dialog modal glitch")
        assert results[0].pattern.id == "dialog-instability"
        assert results[0].confidence == MAX_CONFIDENCE

    def test_hydration_symptoms(self):
        results = PatternMatcher(PATTERNS).match("hydration mismatch flicker")
        assert results[0].pattern.id == "hydration-media-query"
        assert results[0].confidence == pytest.approx(0.9)


class TestDiagnose:
    def test_fallback_message(self):
        assert PatternMatcher(PATTERNS).diagnose("zzzz") == NO_MATCH_MESSAGE
        assert format_diagnosis([]) == NO_MATCH_MESSAGE

    @pytest.mark.parametrize(
        "text",
        [
            "the weather is nice on my sofa",
            "my cat is on the sofa",
            "I had a sandwich for lunch",
        ],
    )
    def test_everyday_sentences_fall_back(self, text: str):
        matcher = PatternMatcher(PATTERNS)
        assert matcher.match(text) == []
        assert matcher.diagnose(text) == NO_MATCH_MESSAGE

    def test_diagnosis_with_example(self):
        text = PatternMatcher(PATTERNS).diagnose("hydration mismatch flicker")
        assert text.startswith("**Found: useMediaQuery Hydration Mismatch** (90% confidence)")
        assert "**Cause:** useMediaQuery SSR mismatch" in text
        assert "**Example:**\n```tsx\n" in text
        assert "**Solution:**\n```tsx\n" in text

    def test_diagnosis_without_example(self):
        text = PatternMatcher(PATTERNS).diagnose("dialog modal glitch")
        assert "(95% confidence)" in text
        assert "**Cause:** ResponsiveDialog hydration" in text
        assert "**Example:**" not in text
