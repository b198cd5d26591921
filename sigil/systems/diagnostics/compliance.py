"""
Sigil — Physics Compliance

Compares observed physics against the expected physics for an EffectType,
one layer at a time:

  behavioral — sync exact, timing within tolerance, confirmation exact
  animation  — duration within tolerance, easing compared by family
  material   — surface and shadow exact; radius is informational

A field the caller left unspecified is compliant by absence. Checks never
raise for a valid EffectType.
"""

from __future__ import annotations

import structlog

from sigil.systems.diagnostics.physics import expected_physics
from sigil.systems.diagnostics.types import (
    AnimationCompliance,
    BehavioralCompliance,
    ComplianceResult,
    DiagnosticIssue,
    EffectType,
    MaterialCompliance,
    ObservedAnimation,
    ObservedBehavioral,
    ObservedMaterial,
    PhysicsObservation,
    Severity,
)

logger = structlog.get_logger()

DEFAULT_TIMING_TOLERANCE_MS = 100.0

# Easing families: identifiers containing the same family token are compatible
_EASING_FAMILIES: tuple[str, ...] = ("spring", "ease")


def _ms(value: float) -> str:
    return f"{value:g}ms"


def is_compatible_easing(observed: str, expected: str) -> bool:
    """Identical, or both in the spring family, or both in the ease family."""
    if observed == expected:
        return True
    return any(family in observed and family in expected for family in _EASING_FAMILIES)


class ComplianceEngine:
    """
    Per-layer physics compliance with a symmetric timing tolerance.

    Stateless apart from the configured tolerance.
    """

    def __init__(self, timing_tolerance_ms: float = DEFAULT_TIMING_TOLERANCE_MS) -> None:
        self._tolerance = timing_tolerance_ms
        self._logger = logger.bind(system="diagnostics", component="compliance_engine")

    @property
    def timing_tolerance_ms(self) -> float:
        return self._tolerance

    def _within_tolerance(self, observed: float, expected: float) -> bool:
        return abs(observed - expected) <= self._tolerance

    # ─── Layers ─────────────────────────────────────────────────

    def check_behavioral(
        self, effect: EffectType, observed: ObservedBehavioral | None = None
    ) -> BehavioralCompliance:
        observed = observed or ObservedBehavioral()
        expected = expected_physics(effect).behavioral

        clauses: list[str] = []
        if observed.sync is not None and observed.sync != expected.sync:
            clauses.append(f"sync should be {expected.sync}, got {observed.sync}")
        if observed.timing_ms is not None and not self._within_tolerance(
            observed.timing_ms, expected.timing_ms
        ):
            clauses.append(
                f"timing should be {_ms(expected.timing_ms)}, got {_ms(observed.timing_ms)}"
            )
        if (
            observed.confirmation is not None
            and observed.confirmation != expected.confirmation_required
        ):
            clauses.append(
                f"confirmation should be {str(expected.confirmation_required).lower()}, "
                f"got {str(observed.confirmation).lower()}"
            )

        return BehavioralCompliance(
            sync=observed.sync,
            timing_ms=observed.timing_ms,
            confirmation=observed.confirmation,
            compliant=not clauses,
            reason="; ".join(clauses) or None,
        )

    def check_animation(
        self, effect: EffectType, observed: ObservedAnimation | None = None
    ) -> AnimationCompliance:
        observed = observed or ObservedAnimation()
        expected = expected_physics(effect).animation

        clauses: list[str] = []
        if observed.easing is not None and not is_compatible_easing(
            observed.easing, expected.easing
        ):
            clauses.append(f"easing should be {expected.easing}, got {observed.easing}")
        if observed.duration_ms is not None and not self._within_tolerance(
            observed.duration_ms, expected.duration_ms
        ):
            clauses.append(
                f"duration should be {_ms(expected.duration_ms)}, "
                f"got {_ms(observed.duration_ms)}"
            )

        return AnimationCompliance(
            easing=observed.easing,
            duration_ms=observed.duration_ms,
            compliant=not clauses,
            reason="; ".join(clauses) or None,
        )

    def check_material(
        self, effect: EffectType, observed: ObservedMaterial | None = None
    ) -> MaterialCompliance:
        observed = observed or ObservedMaterial()
        expected = expected_physics(effect).material

        clauses: list[str] = []
        if observed.surface is not None and observed.surface != expected.surface:
            clauses.append(f"surface should be {expected.surface}, got {observed.surface}")
        if observed.shadow is not None and observed.shadow != expected.shadow:
            clauses.append(f"shadow should be {expected.shadow}, got {observed.shadow}")

        return MaterialCompliance(
            surface=observed.surface,
            shadow=observed.shadow,
            radius=observed.radius,
            compliant=not clauses,
            reason="; ".join(clauses) or None,
        )

    def check(
        self, effect: EffectType, observation: PhysicsObservation | None = None
    ) -> ComplianceResult:
        """Check all three layers. No observation at all is full compliance."""
        observation = observation or PhysicsObservation()
        result = ComplianceResult(
            behavioral=self.check_behavioral(effect, observation.behavioral),
            animation=self.check_animation(effect, observation.animation),
            material=self.check_material(effect, observation.material),
        )
        if not result.compliant:
            self._logger.debug(
                "physics_noncompliant",
                effect=str(effect),
                behavioral=result.behavioral.compliant,
                animation=result.animation.compliant,
                material=result.material.compliant,
            )
        return result


# ─── Result Helpers ──────────────────────────────────────────────


def compliance_to_issues(result: ComplianceResult) -> list[DiagnosticIssue]:
    """
    One issue per non-compliant layer. Severity falls with user-facing risk:
    behavioral → error, animation → warning, material → info.
    """
    issues: list[DiagnosticIssue] = []

    if not result.behavioral.compliant and result.behavioral.reason:
        issues.append(
            DiagnosticIssue(
                severity=Severity.ERROR,
                code="BEHAVIORAL_NONCOMPLIANT",
                message=f"Behavioral physics non-compliant: {result.behavioral.reason}",
                suggestion="Review sync strategy, timing, and confirmation settings",
            )
        )

    if not result.animation.compliant and result.animation.reason:
        issues.append(
            DiagnosticIssue(
                severity=Severity.WARNING,
                code="ANIMATION_NONCOMPLIANT",
                message=f"Animation physics non-compliant: {result.animation.reason}",
                suggestion="Adjust easing and duration to match effect type",
            )
        )

    if not result.material.compliant and result.material.reason:
        issues.append(
            DiagnosticIssue(
                severity=Severity.INFO,
                code="MATERIAL_NONCOMPLIANT",
                message=f"Material physics non-compliant: {result.material.reason}",
                suggestion="Consider adjusting surface and shadow properties",
            )
        )

    return issues


def is_fully_compliant(result: ComplianceResult) -> bool:
    return result.behavioral.compliant and result.animation.compliant and result.material.compliant
