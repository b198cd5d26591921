"""
Sigil — Diagnostics Service

Single entry point for physics diagnostics on a named component:

  1. Derive signal words from the component name and, optionally, its source
  2. Classify the effect type
  3. Check compliance (baseline: fully compliant unless observed physics are
     supplied by the caller)
  4. Scan the source for known anti-patterns
  5. Attach the advisory suggestions for the effect type

Holds no mutable state beyond its construction-time pattern list. Construct
one per caller; there is no shared default instance.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType

import structlog

from sigil.config import DiagnosticsConfig
from sigil.systems.diagnostics.compliance import (
    ComplianceEngine,
    compliance_to_issues,
    is_fully_compliant,
)
from sigil.systems.diagnostics.detection import EffectClassifier
from sigil.systems.diagnostics.matcher import PatternMatcher
from sigil.systems.diagnostics.patterns import PATTERNS
from sigil.systems.diagnostics.physics import expected_physics
from sigil.systems.diagnostics.types import (
    ComplianceResult,
    DiagnosticIssue,
    DiagnosticPattern,
    DiagnosticResult,
    EffectType,
    PatternMatchResult,
    PhysicsObservation,
    Severity,
)

logger = structlog.get_logger()


# ─── Signal Extraction ───────────────────────────────────────────


_ACTION_VERBS = r"(delete|remove|save|submit|claim|withdraw)"

# Action verbs appearing near an event handler or mutation
_HANDLER_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"onClick\s*=\s*\{.*?" + _ACTION_VERBS, re.IGNORECASE),
    re.compile(r"mutation[Ff]n:\s*.*?" + _ACTION_VERBS, re.IGNORECASE),
    re.compile(r"useMutation.*?" + _ACTION_VERBS, re.IGNORECASE),
)

_CASE_BOUNDARY_RE = re.compile(r"([A-Z])")
_SEPARATOR_RE = re.compile(r"[\s_\-]+")


def extract_signals(component: str, source: str | None = None) -> list[str]:
    """
    Split a component identifier into lower-case words and append every
    handler-near-verb snippet found in the source.
    """
    spaced = _CASE_BOUNDARY_RE.sub(r" \1", component).lower()
    signals = [w for w in _SEPARATOR_RE.split(spaced) if w]

    if source:
        for pattern in _HANDLER_PATTERNS:
            signals.extend(m.group(0) for m in pattern.finditer(source))

    return signals


# ─── Anti-pattern Heuristics ─────────────────────────────────────
# Each check inspects a source snippet and returns one issue or None.
# They are text heuristics; when in doubt, they stay quiet.


_FINANCIAL_VERBS: tuple[str, ...] = ("claim", "withdraw", "transfer", "deposit", "swap")
_DIRECT_DELETE_RES: tuple[re.Pattern[str], ...] = (
    re.compile(r"onClick\s*=\s*\{.*?delete", re.IGNORECASE),
    re.compile(r"<button[^>]*>.*?delete.*?</button>", re.IGNORECASE | re.DOTALL),
)
_FRESHNESS_TOKENS: tuple[str, ...] = ("isStale", "dataUpdatedAt", "isFetched")
_STALENESS_GUARDS: tuple[str, ...] = ("staleTime", "maxAge")


def _check_financial_optimistic(source: str) -> DiagnosticIssue | None:
    lower = source.lower()
    if "onMutate" in source and any(verb in lower for verb in _FINANCIAL_VERBS):
        return DiagnosticIssue(
            severity=Severity.ERROR,
            code="FINANCIAL_OPTIMISTIC",
            message=(
                "Detected optimistic update (onMutate) on financial operation. "
                "Financial operations should use pessimistic sync."
            ),
            suggestion="Remove onMutate and use onSuccess with query invalidation instead.",
        )
    return None


def _check_destructive_no_confirm(source: str) -> DiagnosticIssue | None:
    lower = source.lower()
    if "delete" not in lower or "confirm" in lower:
        return None
    if any(p.search(source) for p in _DIRECT_DELETE_RES):
        return DiagnosticIssue(
            severity=Severity.WARNING,
            code="DESTRUCTIVE_NO_CONFIRM",
            message=(
                "Delete operation appears to have no confirmation step. "
                "Destructive actions should require confirmation."
            ),
            suggestion="Add a confirmation dialog before executing the delete operation.",
        )
    return None


def _check_stale_data_unguarded(source: str) -> DiagnosticIssue | None:
    uses_freshness = any(token in source for token in _FRESHNESS_TOKENS)
    has_guard = any(guard in source for guard in _STALENESS_GUARDS)
    if uses_freshness and not has_guard:
        return DiagnosticIssue(
            severity=Severity.WARNING,
            code="STALE_DATA_UNGUARDED",
            message=(
                "Data freshness is checked without a staleness bound. "
                "The component may act on data it already considers stale."
            ),
            suggestion="Set staleTime on the query, or refetch before acting on stale data.",
        )
    return None


def _check_hydration_media_query(source: str) -> DiagnosticIssue | None:
    if "useMediaQuery" in source and "mounted" not in source:
        return DiagnosticIssue(
            severity=Severity.WARNING,
            code="HYDRATION_MEDIA_QUERY",
            message="useMediaQuery without mount check may cause hydration mismatch.",
            suggestion=(
                "Add a mounted state check: const [mounted, setMounted] = useState(false); "
                "useEffect(() => setMounted(true), []);"
            ),
        )
    return None


ANTI_PATTERN_CHECKS: tuple[Callable[[str], DiagnosticIssue | None], ...] = (
    _check_financial_optimistic,
    _check_destructive_no_confirm,
    _check_stale_data_unguarded,
    _check_hydration_media_query,
)


def scan_anti_patterns(source: str) -> list[DiagnosticIssue]:
    issues: list[DiagnosticIssue] = []
    for check in ANTI_PATTERN_CHECKS:
        issue = check(source)
        if issue is not None:
            issues.append(issue)
    return issues


# ─── Suggestions ─────────────────────────────────────────────────


EFFECT_SUGGESTIONS: Mapping[EffectType, tuple[str, ...]] = MappingProxyType(
    {
        EffectType.FINANCIAL: (
            "Use pessimistic sync - no onMutate for financial operations",
            "Show amount and confirmation before executing",
            "Invalidate queries on success to refresh balances",
        ),
        EffectType.DESTRUCTIVE: (
            "Add two-step confirmation before destructive actions",
            "Use 600ms timing for deliberate feel",
            "Provide clear description of what will be deleted",
        ),
        EffectType.SOFT_DELETE: (
            "Use toast with undo action instead of confirmation dialog",
            "Optimistic update is safe since operation is reversible",
        ),
        EffectType.STANDARD: (
            "Optimistic update with rollback on error keeps the UI responsive",
        ),
        EffectType.LOCAL: (
            "Apply the change immediately; no server round-trip is needed",
        ),
        EffectType.NAVIGATION: (
            "Navigate immediately and stream data into the destination",
        ),
        EffectType.QUERY: (
            "Show cached data while refetching instead of a blocking spinner",
        ),
    }
)


def generate_suggestions(effect: EffectType, compliance: ComplianceResult) -> list[str]:
    suggestions = list(EFFECT_SUGGESTIONS[effect])
    if not compliance.behavioral.compliant:
        expected_sync = expected_physics(effect).behavioral.sync
        suggestions.append(f"Consider changing sync to {expected_sync} for {effect} operations")
    return suggestions


# ─── Service ─────────────────────────────────────────────────────


class DiagnosticsService:
    """
    Orchestrates EffectClassifier, ComplianceEngine and PatternMatcher.

    Custom patterns are appended after the built-in catalog, so built-ins win
    confidence ties.
    """

    system_id: str = "diagnostics"

    def __init__(
        self,
        config: DiagnosticsConfig | None = None,
        custom_patterns: Iterable[DiagnosticPattern] | None = None,
    ) -> None:
        self._config = config or DiagnosticsConfig()
        self._classifier = EffectClassifier()
        self._compliance = ComplianceEngine(self._config.timing_tolerance_ms)
        self._matcher = PatternMatcher(
            [*PATTERNS, *(custom_patterns or ())],
            categories=self._config.categories,
        )
        self._logger = logger.bind(system="diagnostics", component="service")

    @property
    def patterns(self) -> tuple[DiagnosticPattern, ...]:
        return self._matcher.patterns

    def analyze(
        self,
        component: str,
        source: str | None = None,
        observed: PhysicsObservation | None = None,
    ) -> DiagnosticResult:
        """
        Analyze a component for physics compliance and known anti-patterns.

        ``observed`` is physics measured elsewhere. Without it the compliance
        baseline is full compliance.
        """
        signals = extract_signals(component, source)
        effect = self._classifier.classify(signals)
        compliance = self._compliance.check(effect, observed)

        issues = compliance_to_issues(compliance)
        if source:
            issues.extend(scan_anti_patterns(source))

        result = DiagnosticResult(
            component=component,
            effect=effect,
            issues=issues,
            compliance=compliance,
            suggestions=generate_suggestions(effect, compliance),
        )

        self._logger.info(
            "component_analyzed",
            component=component,
            effect=effect.value,
            issues=len(issues),
            compliant=compliance.compliant,
        )
        return result

    def check_compliance(
        self, effect: EffectType, observation: PhysicsObservation | None = None
    ) -> bool:
        return is_fully_compliant(self._compliance.check(effect, observation))

    def detect_effect(
        self, signals: Iterable[str], types: Iterable[str] | None = None
    ) -> EffectType:
        return self._classifier.classify(signals, types)

    def match_patterns(self, symptoms: str) -> list[PatternMatchResult]:
        return self._matcher.match(symptoms)

    def diagnose(self, symptom: str) -> str:
        return self._matcher.diagnose(symptom)
