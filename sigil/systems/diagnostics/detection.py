"""
Sigil — Effect Detection

Maps signal words (from a component name or scanned source) plus optional
declared value types to exactly one EffectType.

Resolution order encodes safety priority:
  1. Financial value types override every text heuristic
  2. A destructive verb next to a reversibility phrase is a soft delete
  3. Keyword families, first match wins:
     financial → destructive → soft-delete → local → navigation → query → standard
  4. Nothing matched → standard

A text that matches several families is resolved by that order alone, never
by how many keywords each family hit.
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from sigil.systems.diagnostics.physics import expected_physics
from sigil.systems.diagnostics.types import EffectType, ExpectedPhysics

logger = structlog.get_logger()


# ─── Vocabularies ────────────────────────────────────────────────


FINANCIAL_KEYWORDS: tuple[str, ...] = (
    "claim", "deposit", "withdraw", "transfer", "swap", "send", "pay",
    "purchase", "mint", "burn", "stake", "unstake", "bridge", "approve",
    "redeem", "harvest", "collect", "vest", "unlock", "liquidate", "borrow",
    "lend", "repay", "airdrop", "delegate", "undelegate", "redelegate",
    "bond", "unbond", "checkout", "order", "subscribe", "upgrade",
    "downgrade", "refund",
)

DESTRUCTIVE_KEYWORDS: tuple[str, ...] = (
    "delete", "remove", "destroy", "revoke", "terminate", "purge", "erase",
    "wipe", "clear", "reset", "ban", "block", "suspend", "deactivate",
    "cancel", "void", "invalidate", "expire", "kill", "close account",
    "delete account", "remove access", "revoke permissions",
)

SOFT_DELETE_KEYWORDS: tuple[str, ...] = (
    "archive", "hide", "trash", "dismiss", "snooze", "mute", "silence",
    "ignore", "skip", "defer", "postpone", "mark as read", "mark as spam",
    "move to folder", "soft-delete", "temporary hide", "pause",
)

LOCAL_KEYWORDS: tuple[str, ...] = (
    "toggle", "switch", "expand", "collapse", "select", "focus", "show",
    "hide", "open", "close", "reveal", "conceal", "check", "uncheck",
    "enable", "disable", "activate", "sort", "filter", "search", "zoom",
    "pan", "scroll", "dark mode", "light mode", "theme", "appearance",
    "display",
)

NAVIGATION_KEYWORDS: tuple[str, ...] = (
    "navigate", "go", "back", "forward", "link", "route", "visit",
    "open page", "view", "browse", "explore", "next", "previous", "first",
    "last", "jump to", "tab", "step", "page", "section", "anchor",
)

QUERY_KEYWORDS: tuple[str, ...] = (
    "fetch", "load", "get", "list", "search", "find", "query", "lookup",
    "retrieve", "request", "poll", "refresh", "reload", "sync",
    "check status", "preview", "peek", "inspect", "examine",
)

STANDARD_KEYWORDS: tuple[str, ...] = (
    "save", "update", "edit", "create", "add", "like", "follow", "bookmark",
    "favorite", "star", "pin", "tag", "label", "comment", "share", "repost",
    "quote", "reply", "mention", "react", "submit", "post", "publish",
    "upload", "attach", "link", "change", "modify", "set", "configure",
    "customize", "personalize",
)

# Declared value types that make an action financial regardless of wording
FINANCIAL_TYPE_PATTERNS: tuple[str, ...] = (
    "currency", "money", "amount", "wei", "bigint", "token", "balance",
    "price", "fee",
)

# Phrases that make a destructive verb reversible
REVERSIBILITY_PHRASES: tuple[str, ...] = (
    "with undo", "reversible", "recycle bin", "can undo",
)

# Fixed resolution order. Do not reorder: earlier families carry more risk.
KEYWORD_FAMILIES: tuple[tuple[EffectType, tuple[str, ...]], ...] = (
    (EffectType.FINANCIAL, FINANCIAL_KEYWORDS),
    (EffectType.DESTRUCTIVE, DESTRUCTIVE_KEYWORDS),
    (EffectType.SOFT_DELETE, SOFT_DELETE_KEYWORDS),
    (EffectType.LOCAL, LOCAL_KEYWORDS),
    (EffectType.NAVIGATION, NAVIGATION_KEYWORDS),
    (EffectType.QUERY, QUERY_KEYWORDS),
    (EffectType.STANDARD, STANDARD_KEYWORDS),
)


# ─── Helpers ─────────────────────────────────────────────────────


def matches_keywords(text: str, keywords: Iterable[str]) -> bool:
    """Case-insensitive substring containment of any keyword."""
    lower = text.lower()
    return any(k.lower() in lower for k in keywords)


def has_financial_types(types: Iterable[str]) -> bool:
    return any(
        pattern in t.lower() for t in types for pattern in FINANCIAL_TYPE_PATTERNS
    )


def has_reversibility_context(text: str) -> bool:
    return matches_keywords(text, REVERSIBILITY_PHRASES)


# ─── Classifier ──────────────────────────────────────────────────


class EffectClassifier:
    """
    Total classification of an action into one EffectType.

    Stateless; safe to share between callers.
    """

    def __init__(self) -> None:
        self._logger = logger.bind(system="diagnostics", component="effect_classifier")

    def classify(
        self,
        signals: Iterable[str],
        types: Iterable[str] | None = None,
    ) -> EffectType:
        """
        Resolve signals and declared types to an EffectType.

        Never raises; unknown input falls through to STANDARD.
        """
        text = " ".join(signals)
        effect, rule = self._resolve(text, list(types or ()))
        self._logger.debug("effect_classified", effect=effect.value, rule=rule)
        return effect

    def _resolve(self, text: str, types: list[str]) -> tuple[EffectType, str]:
        if has_financial_types(types):
            return EffectType.FINANCIAL, "financial_type"

        if has_reversibility_context(text) and matches_keywords(text, DESTRUCTIVE_KEYWORDS):
            return EffectType.SOFT_DELETE, "reversible_destructive"

        for effect, keywords in KEYWORD_FAMILIES:
            if matches_keywords(text, keywords):
                return effect, "keyword"

        return EffectType.STANDARD, "default"

    def expected_physics(self, effect: EffectType) -> ExpectedPhysics:
        return expected_physics(effect)
