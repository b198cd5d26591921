"""
Sigil — Diagnostics

Checks whether a UI action's physics (sync strategy, animation timing,
surface styling) match what its risk category calls for, and matches
free-text symptoms to a catalog of known UI issues.
"""

from sigil.systems.diagnostics.compliance import (
    ComplianceEngine,
    compliance_to_issues,
    is_compatible_easing,
    is_fully_compliant,
)
from sigil.systems.diagnostics.detection import EffectClassifier
from sigil.systems.diagnostics.matcher import PatternMatcher, format_diagnosis
from sigil.systems.diagnostics.patterns import (
    PATTERNS,
    get_pattern_by_id,
    get_patterns,
    get_patterns_by_category,
)
from sigil.systems.diagnostics.physics import PHYSICS_TABLE, expected_physics
from sigil.systems.diagnostics.service import DiagnosticsService, extract_signals
from sigil.systems.diagnostics.types import (
    AnimationCompliance,
    BehavioralCompliance,
    ComplianceResult,
    DiagnosticIssue,
    DiagnosticPattern,
    DiagnosticResult,
    EffectType,
    ExpectedPhysics,
    IssueLocation,
    MaterialCompliance,
    ObservedAnimation,
    ObservedBehavioral,
    ObservedMaterial,
    PatternCategory,
    PatternCause,
    PatternMatchResult,
    PhysicsObservation,
    Severity,
    SyncStrategy,
)

__all__ = [
    # Service
    "DiagnosticsService",
    # Components
    "ComplianceEngine",
    "EffectClassifier",
    "PatternMatcher",
    # Functions
    "compliance_to_issues",
    "expected_physics",
    "extract_signals",
    "format_diagnosis",
    "get_pattern_by_id",
    "get_patterns",
    "get_patterns_by_category",
    "is_compatible_easing",
    "is_fully_compliant",
    # Tables
    "PATTERNS",
    "PHYSICS_TABLE",
    # Types — Enums
    "EffectType",
    "PatternCategory",
    "Severity",
    "SyncStrategy",
    # Types — Models
    "AnimationCompliance",
    "BehavioralCompliance",
    "ComplianceResult",
    "DiagnosticIssue",
    "DiagnosticPattern",
    "DiagnosticResult",
    "ExpectedPhysics",
    "IssueLocation",
    "MaterialCompliance",
    "ObservedAnimation",
    "ObservedBehavioral",
    "ObservedMaterial",
    "PatternCause",
    "PatternMatchResult",
    "PhysicsObservation",
]
