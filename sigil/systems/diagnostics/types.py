"""
Sigil — Diagnostics Type Definitions

All data types for physics diagnostics: effect categories, expected and
observed physics, per-layer compliance, issues, and the known-pattern catalog.

"Physics" is how an action behaves across three independent layers:
behavioral (sync strategy, timing, confirmation), animation (easing,
duration), and material (surface, shadow).
"""

from __future__ import annotations

import enum

from pydantic import Field

from sigil.primitives.common import FrozenModel, SigilBaseModel


# ─── Enums ────────────────────────────────────────────────────────


class EffectType(enum.StrEnum):
    """Coarse risk category of a user action."""

    FINANCIAL = "financial"  # Moves money or value; must wait for the server
    DESTRUCTIVE = "destructive"  # Irreversible removal
    SOFT_DELETE = "soft-delete"  # Removal the user can undo
    STANDARD = "standard"  # Ordinary writes
    LOCAL = "local"  # Client-only state, no server round-trip
    NAVIGATION = "navigation"
    QUERY = "query"


class Severity(enum.StrEnum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class SyncStrategy(enum.StrEnum):
    OPTIMISTIC = "optimistic"  # Show the result before the server confirms
    PESSIMISTIC = "pessimistic"  # Wait for the server, then show the result
    IMMEDIATE = "immediate"  # No server involved


class PatternCategory(enum.StrEnum):
    HYDRATION = "hydration"
    DIALOG = "dialog"
    PERFORMANCE = "performance"
    LAYOUT = "layout"
    SERVER_COMPONENT = "server-component"
    REACT_19 = "react-19"
    PHYSICS = "physics"


# ─── Expected Physics ────────────────────────────────────────────


class BehavioralPhysics(FrozenModel):
    sync: SyncStrategy
    timing_ms: int
    confirmation_required: bool


class AnimationPhysics(FrozenModel):
    easing: str
    duration_ms: int


class MaterialPhysics(FrozenModel):
    surface: str
    shadow: str


class ExpectedPhysics(FrozenModel):
    """The (behavioral, animation, material) triple expected for one EffectType."""

    behavioral: BehavioralPhysics
    animation: AnimationPhysics
    material: MaterialPhysics


# ─── Observed Physics ────────────────────────────────────────────
# Every field is optional: an unspecified value is compliant by absence.


class ObservedBehavioral(SigilBaseModel):
    sync: SyncStrategy | None = None
    timing_ms: float | None = None
    confirmation: bool | None = None


class ObservedAnimation(SigilBaseModel):
    easing: str | None = None
    duration_ms: float | None = None


class ObservedMaterial(SigilBaseModel):
    surface: str | None = None
    shadow: str | None = None
    radius: str | None = None  # Informational only


class PhysicsObservation(SigilBaseModel):
    """Physics measured or declared for a component, supplied by a caller."""

    behavioral: ObservedBehavioral = Field(default_factory=ObservedBehavioral)
    animation: ObservedAnimation = Field(default_factory=ObservedAnimation)
    material: ObservedMaterial = Field(default_factory=ObservedMaterial)


# ─── Compliance ──────────────────────────────────────────────────


class BehavioralCompliance(SigilBaseModel):
    sync: SyncStrategy | None = None
    timing_ms: float | None = None
    confirmation: bool | None = None
    compliant: bool = True
    reason: str | None = None


class AnimationCompliance(SigilBaseModel):
    easing: str | None = None
    duration_ms: float | None = None
    compliant: bool = True
    reason: str | None = None


class MaterialCompliance(SigilBaseModel):
    surface: str | None = None
    shadow: str | None = None
    radius: str | None = None
    compliant: bool = True
    reason: str | None = None


class ComplianceResult(SigilBaseModel):
    """Three independent layer results. Overall compliance is their AND."""

    behavioral: BehavioralCompliance = Field(default_factory=BehavioralCompliance)
    animation: AnimationCompliance = Field(default_factory=AnimationCompliance)
    material: MaterialCompliance = Field(default_factory=MaterialCompliance)

    @property
    def compliant(self) -> bool:
        return self.behavioral.compliant and self.animation.compliant and self.material.compliant


# ─── Issues ──────────────────────────────────────────────────────


class IssueLocation(SigilBaseModel):
    file: str | None = None
    line: int | None = None
    column: int | None = None


class DiagnosticIssue(SigilBaseModel):
    """A problem found during analysis."""

    severity: Severity
    code: str  # e.g. "FINANCIAL_OPTIMISTIC"
    message: str
    suggestion: str | None = None
    location: IssueLocation | None = None


# ─── Patterns ────────────────────────────────────────────────────


class PatternCause(FrozenModel):
    name: str
    signature: str  # What to look for in the code
    example: str | None = None  # Problematic code
    solution: str


class DiagnosticPattern(FrozenModel):
    """
    A catalogued known issue.

    Causes are ranked by the catalog author, most likely first. Matching never
    re-orders them.
    """

    id: str
    name: str
    category: PatternCategory
    severity: Severity
    symptoms: tuple[str, ...]
    keywords: tuple[str, ...]
    causes: tuple[PatternCause, ...] = Field(min_length=1)


class PatternMatchResult(SigilBaseModel):
    pattern: DiagnosticPattern
    matched_cause: PatternCause
    confidence: float = Field(ge=0.0, le=1.0)


# ─── Result ──────────────────────────────────────────────────────


class DiagnosticResult(SigilBaseModel):
    """Full analysis of one component. Built fresh per call."""

    component: str
    effect: EffectType
    issues: list[DiagnosticIssue] = Field(default_factory=list)
    compliance: ComplianceResult = Field(default_factory=ComplianceResult)
    suggestions: list[str] = Field(default_factory=list)
