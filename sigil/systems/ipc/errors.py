"""
Sigil — IPC Error Hierarchy

Failures of a validation request sent to an external responder process.

  IPCRemoteError  -- the responder answered with status "error"; retrying the
                     same request will usually fail the same way
  IPCTimeoutError -- no response was observed in time; safe to retry
  InvalidRequestIdError -- an id that cannot be used to name an artifact
"""

from __future__ import annotations


class IPCError(RuntimeError):
    """Base for all IPC channel errors."""


class IPCRemoteError(IPCError):
    """The responder reported an application error."""

    def __init__(self, message: str, request_id: str = "", exit_code: int | None = None) -> None:
        super().__init__(message)
        self.request_id = request_id
        self.exit_code = exit_code


class IPCTimeoutError(IPCError):
    """No response appeared before the timeout elapsed."""

    def __init__(self, request_id: str, timeout_ms: int) -> None:
        super().__init__(f"IPC request {request_id} timed out after {timeout_ms}ms")
        self.request_id = request_id
        self.timeout_ms = timeout_ms


class InvalidRequestIdError(IPCError, ValueError):
    """Request id is not a UUID, or would escape the artifact directory."""
