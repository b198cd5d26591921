"""
Sigil — IPC

Transport-agnostic request/response protocol for validating contexts
through an external, longer-lived process (Anchor, Lens).
"""

from sigil.systems.ipc.channel import ANCHOR, LENS, IPCChannel
from sigil.systems.ipc.errors import (
    InvalidRequestIdError,
    IPCError,
    IPCRemoteError,
    IPCTimeoutError,
)
from sigil.systems.ipc.transport import (
    FileSystemTransport,
    MemoryTransport,
    RedisTransport,
    Transport,
    build_transport,
    validate_request_id,
)
from sigil.systems.ipc.types import (
    AnchorCheck,
    AnchorChecks,
    AnchorValidatePayload,
    AnchorValidateResponse,
    IPCRequest,
    IPCRequestType,
    IPCResponse,
    IPCStatus,
    LensContext,
    LensValidatePayload,
    LensValidateResponse,
    LensValidationIssue,
    Zone,
)

__all__ = [
    # Channel
    "IPCChannel",
    "ANCHOR",
    "LENS",
    # Transports
    "Transport",
    "MemoryTransport",
    "RedisTransport",
    "FileSystemTransport",
    "build_transport",
    "validate_request_id",
    # Errors
    "IPCError",
    "IPCRemoteError",
    "IPCTimeoutError",
    "InvalidRequestIdError",
    # Types — Enums
    "IPCRequestType",
    "IPCStatus",
    "Zone",
    # Types — Models
    "AnchorCheck",
    "AnchorChecks",
    "AnchorValidatePayload",
    "AnchorValidateResponse",
    "IPCRequest",
    "IPCResponse",
    "LensContext",
    "LensValidatePayload",
    "LensValidateResponse",
    "LensValidationIssue",
]
