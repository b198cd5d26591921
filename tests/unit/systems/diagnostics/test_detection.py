"""
Tests for effect detection.

Covers:
  - Financial type evidence overriding keywords
  - Reversibility context downgrading destructive to soft-delete
  - Fixed family priority order
  - Fail-open default
"""

from __future__ import annotations

import pytest

from sigil.systems.diagnostics.detection import (
    KEYWORD_FAMILIES,
    EffectClassifier,
    has_financial_types,
    matches_keywords,
)
from sigil.systems.diagnostics.types import EffectType


@pytest.fixture
def classifier() -> EffectClassifier:
    return EffectClassifier()


class TestTypeOverride:
    def test_financial_type_beats_soft_delete_keyword(self, classifier: EffectClassifier):
        assert classifier.classify(["archive"], ["Balance"]) == EffectType.FINANCIAL

    def test_financial_type_beats_reversible_delete(self, classifier: EffectClassifier):
        effect = classifier.classify(["delete with undo"], ["TokenAmount"])
        assert effect == EffectType.FINANCIAL

    def test_type_match_is_case_insensitive(self, classifier: EffectClassifier):
        assert has_financial_types(["userbalance"])
        assert classifier.classify(["zzz"], ["WEI"]) == EffectType.FINANCIAL

    def test_non_financial_types_fall_through(self, classifier: EffectClassifier):
        assert classifier.classify(["archive"], ["string", "Date"]) == EffectType.SOFT_DELETE


class TestReversibilityContext:
    def test_reversible_delete_is_soft_delete(self, classifier: EffectClassifier):
        effect = classifier.classify(["delete this comment (reversible, with undo)"])
        assert effect == EffectType.SOFT_DELETE

    def test_recycle_bin_phrase(self, classifier: EffectClassifier):
        assert classifier.classify(["remove", "to", "recycle bin"]) == EffectType.SOFT_DELETE

    def test_reversibility_without_destructive_verb_is_ignored(
        self, classifier: EffectClassifier
    ):
        # No destructive keyword, so the context rule does not apply
        assert classifier.classify(["navigate", "can undo"]) == EffectType.NAVIGATION

    def test_plain_delete_is_destructive(self, classifier: EffectClassifier):
        assert classifier.classify(["delete", "item"]) == EffectType.DESTRUCTIVE


class TestKeywordPriority:
    def test_financial_beats_destructive(self, classifier: EffectClassifier):
        assert classifier.classify(["withdraw", "delete"]) == EffectType.FINANCIAL

    def test_destructive_beats_soft_delete(self, classifier: EffectClassifier):
        assert classifier.classify(["hide", "remove"]) == EffectType.DESTRUCTIVE

    def test_case_insensitive(self, classifier: EffectClassifier):
        assert classifier.classify(["WITHDRAW"]) == EffectType.FINANCIAL

    @pytest.mark.parametrize(
        ("signals", "expected"),
        [
            (["archive"], EffectType.SOFT_DELETE),
            (["toggle", "theme"], EffectType.LOCAL),
            (["navigate", "home"], EffectType.NAVIGATION),
            (["fetch", "results"], EffectType.QUERY),
        ],
    )
    def test_single_family(
        self, classifier: EffectClassifier, signals: list[str], expected: EffectType
    ):
        assert classifier.classify(signals) == expected

    def test_family_order_is_fixed(self):
        order = [effect for effect, _ in KEYWORD_FAMILIES]
        assert order == [
            EffectType.FINANCIAL,
            EffectType.DESTRUCTIVE,
            EffectType.SOFT_DELETE,
            EffectType.LOCAL,
            EffectType.NAVIGATION,
            EffectType.QUERY,
            EffectType.STANDARD,
        ]


class TestDefault:
    def test_unknown_text_is_standard(self, classifier: EffectClassifier):
        assert classifier.classify(["zzz"]) == EffectType.STANDARD

    def test_empty_input_is_standard(self, classifier: EffectClassifier):
        assert classifier.classify([]) == EffectType.STANDARD
        assert classifier.classify([], None) == EffectType.STANDARD

    def test_matches_keywords_substring(self):
        assert matches_keywords("ClaimRewards", ["claim"])
        assert not matches_keywords("nothing here", ["claim"])


class TestExpectedPhysics:
    def test_expected_physics_exposed(self, classifier: EffectClassifier):
        physics = classifier.expected_physics(EffectType.FINANCIAL)
        assert physics.behavioral.timing_ms == 800
        assert physics.behavioral.confirmation_required is True
