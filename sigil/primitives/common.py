"""
Sigil — Common Primitives

Shared base classes and utilities used across all systems.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict


def utc_now() -> datetime:
    """Current UTC time, timezone-aware."""
    return datetime.now(timezone.utc)


def epoch_ms() -> int:
    """Milliseconds since the Unix epoch. Wire timestamps use this unit."""
    return int(utc_now().timestamp() * 1000)


# ─── Base Models ──────────────────────────────────────────────────


class SigilBaseModel(BaseModel):
    """Base model for all Sigil primitives."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class FrozenModel(SigilBaseModel):
    """Immutable model for static tables and catalog entries."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True, frozen=True)
