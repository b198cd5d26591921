"""
Sigil — Physics Table

Expected physics per EffectType. The table is total: every EffectType has an
entry, and the check below fails at import time if one is ever missing.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from sigil.systems.diagnostics.types import (
    AnimationPhysics,
    BehavioralPhysics,
    EffectType,
    ExpectedPhysics,
    MaterialPhysics,
    SyncStrategy,
)


def _entry(
    sync: SyncStrategy,
    timing_ms: int,
    confirmation: bool,
    easing: str,
    surface: str,
    shadow: str,
) -> ExpectedPhysics:
    # Animation duration tracks behavioral timing for every effect.
    return ExpectedPhysics(
        behavioral=BehavioralPhysics(
            sync=sync, timing_ms=timing_ms, confirmation_required=confirmation
        ),
        animation=AnimationPhysics(easing=easing, duration_ms=timing_ms),
        material=MaterialPhysics(surface=surface, shadow=shadow),
    )


PHYSICS_TABLE: Mapping[EffectType, ExpectedPhysics] = MappingProxyType(
    {
        EffectType.FINANCIAL: _entry(
            SyncStrategy.PESSIMISTIC, 800, True, "ease-out", "elevated", "soft"
        ),
        EffectType.DESTRUCTIVE: _entry(
            SyncStrategy.PESSIMISTIC, 600, True, "ease-out", "elevated", "none"
        ),
        EffectType.SOFT_DELETE: _entry(
            SyncStrategy.OPTIMISTIC, 200, False, "spring(500)", "flat", "none"
        ),
        EffectType.STANDARD: _entry(
            SyncStrategy.OPTIMISTIC, 200, False, "spring(500)", "elevated", "soft"
        ),
        EffectType.NAVIGATION: _entry(
            SyncStrategy.IMMEDIATE, 150, False, "ease", "flat", "none"
        ),
        EffectType.QUERY: _entry(
            SyncStrategy.OPTIMISTIC, 150, False, "ease-out", "flat", "none"
        ),
        EffectType.LOCAL: _entry(
            SyncStrategy.IMMEDIATE, 100, False, "spring(700)", "flat", "none"
        ),
    }
)

_missing = set(EffectType) - set(PHYSICS_TABLE)
if _missing:
    raise RuntimeError(f"Physics table has no entry for: {sorted(_missing)}")


def expected_physics(effect: EffectType) -> ExpectedPhysics:
    """Expected physics for an effect type."""
    return PHYSICS_TABLE[EffectType(effect)]
