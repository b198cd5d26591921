"""
Sigil — IPC Type Definitions

Wire types for validation requests carried to an external responder
(Anchor or Lens) and the responses it writes back.

Wire field names are camelCase; Python attributes are snake_case and map
through pydantic aliases. Serialise with ``to_wire()``.
"""

from __future__ import annotations

import enum
from typing import Any, Literal

from pydantic import Field

from sigil.primitives.common import SigilBaseModel


# ─── Enums ────────────────────────────────────────────────────────


class IPCRequestType(enum.StrEnum):
    LENS_VALIDATE = "lens-validate"
    ANCHOR_VALIDATE = "anchor-validate"
    LENS_VERIFY = "lens-verify"


class IPCStatus(enum.StrEnum):
    SUCCESS = "success"
    ERROR = "error"  # Responder ran and reported a failure
    TIMEOUT = "timeout"  # Synthesised locally; no response in time


class Zone(enum.StrEnum):
    """Zone hierarchy used by the validators."""

    CRITICAL = "critical"
    ELEVATED = "elevated"
    STANDARD = "standard"
    LOCAL = "local"


class WireModel(SigilBaseModel):
    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ─── Envelope ────────────────────────────────────────────────────


class IPCRequest(WireModel):
    id: str
    type: str
    timestamp: int  # ms since epoch
    payload: dict[str, Any] = Field(default_factory=dict)


class IPCResponse(WireModel):
    """Addressed by (request_id, responder tag)."""

    request_id: str = Field(alias="requestId")
    status: IPCStatus
    timestamp: int | None = None
    data: Any = None
    error: str | None = None
    exit_code: int | None = Field(default=None, alias="exitCode")


# ─── Payloads ────────────────────────────────────────────────────


class LensContext(WireModel):
    """What a component showed while impersonating an address."""

    impersonated_address: str = Field(alias="impersonatedAddress")
    real_address: str | None = Field(default=None, alias="realAddress")
    component: str
    observed_value: str | None = Field(default=None, alias="observedValue")
    on_chain_value: str | None = Field(default=None, alias="onChainValue")
    indexed_value: str | None = Field(default=None, alias="indexedValue")
    data_source: Literal["on-chain", "indexed", "mixed", "unknown"] | None = Field(
        default=None, alias="dataSource"
    )


class LensValidatePayload(WireModel):
    context: LensContext
    zone: Zone | None = None


class AnchorValidatePayload(WireModel):
    statement: str | None = None
    lens_context: LensContext | None = Field(default=None, alias="lensContext")
    zone: Zone | None = None


# ─── Response Data ───────────────────────────────────────────────


class LensValidationIssue(WireModel):
    type: str  # "data_source_mismatch" | "stale_indexed_data" | ...
    severity: Literal["error", "warning", "info"]
    message: str
    component: str
    zone: Zone | None = None
    expected: str | None = None
    actual: str | None = None
    suggestion: str | None = None


class LensValidateResponse(WireModel):
    valid: bool
    issues: list[LensValidationIssue] = Field(default_factory=list)
    summary: str = ""


class AnchorCheck(WireModel):
    passed: bool
    reason: str = ""


class AnchorChecks(WireModel):
    relevance: AnchorCheck
    hierarchy: AnchorCheck
    rules: AnchorCheck


class AnchorValidateResponse(WireModel):
    status: Literal["VALID", "DRIFT", "DECEPTIVE"] | None = None
    checks: AnchorChecks | None = None
    required_zone: Zone | None = Field(default=None, alias="requiredZone")
    cited_zone: Zone | None = Field(default=None, alias="citedZone")
    correction: str | None = None
    lens_validation: LensValidateResponse | None = Field(default=None, alias="lensValidation")
