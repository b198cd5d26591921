"""
Sigil — IPC Channel

Request/response protocol for asking an external validator process to
evaluate a context when there is no direct call path to it.

Lifecycle of one request:
  1. Fresh UUID, envelope {id, type, timestamp, payload}
  2. transport.write_request
  3. Poll transport.read_response(id, responder) every poll interval
  4. No response by the timeout → a local "timeout" response
  5. transport.cleanup(id) on every exit path; a failing cleanup is logged
     and never replaces the outcome

Each request owns its artifacts and its poll loop, so concurrent requests
need no coordination and may complete in any order. Cancelling the awaiting
task abandons the wait; cleanup still runs. The channel never retries:
timeouts are generally safe to retry, responder errors are not.
"""

from __future__ import annotations

import asyncio
import uuid
from typing import Any

import structlog

from sigil.config import IPCConfig
from sigil.primitives.common import SigilBaseModel, epoch_ms
from sigil.systems.ipc.errors import IPCRemoteError, IPCTimeoutError
from sigil.systems.ipc.transport import Transport
from sigil.systems.ipc.types import (
    AnchorValidatePayload,
    AnchorValidateResponse,
    IPCRequest,
    IPCRequestType,
    IPCResponse,
    IPCStatus,
    LensContext,
    LensValidatePayload,
    LensValidateResponse,
    Zone,
)

logger = structlog.get_logger()

ANCHOR = "anchor"
LENS = "lens"


class IPCChannel:
    """
    Sends validation requests through a Transport and waits for the answer.

    Construct one per caller; there is no shared default instance.
    """

    def __init__(
        self,
        transport: Transport,
        config: IPCConfig | None = None,
    ) -> None:
        self._transport = transport
        self._config = config or IPCConfig()
        self._timeout_s = self._config.timeout_ms / 1000.0
        self._poll_interval_s = self._config.poll_interval_ms / 1000.0
        self._logger = logger.bind(system="ipc", component="channel")

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def timeout_ms(self) -> int:
        return self._config.timeout_ms

    # ─── Core Protocol ──────────────────────────────────────────

    async def request(
        self,
        request_type: IPCRequestType | str,
        payload: SigilBaseModel | dict[str, Any],
        responder_tag: str = ANCHOR,
    ) -> IPCResponse:
        """
        Send one request and return whatever came back, including a
        synthesised ``timeout`` response. Does not raise on error status.
        """
        body = (
            payload.model_dump(mode="json", by_alias=True, exclude_none=True)
            if isinstance(payload, SigilBaseModel)
            else dict(payload)
        )
        request = IPCRequest(
            id=str(uuid.uuid4()),
            type=str(request_type),
            timestamp=epoch_ms(),
            payload=body,
        )
        log = self._logger.bind(request_id=request.id, type=request.type, responder=responder_tag)

        try:
            await self._transport.write_request(request)
            log.debug("ipc_request_written")
            response = await self._wait_for_response(request.id, responder_tag)
        finally:
            await self._cleanup(request.id, log)

        if response.status == IPCStatus.TIMEOUT:
            log.warning("ipc_request_timeout", timeout_ms=self._config.timeout_ms)
        else:
            log.info("ipc_response_received", status=response.status.value)
        return response

    async def send(
        self,
        request_type: IPCRequestType | str,
        payload: SigilBaseModel | dict[str, Any],
        responder_tag: str = ANCHOR,
    ) -> Any:
        """
        Send one request and return its data.

        Raises IPCRemoteError when the responder reports an error and
        IPCTimeoutError when nothing arrives in time.
        """
        response = await self.request(request_type, payload, responder_tag)

        if response.status == IPCStatus.ERROR:
            raise IPCRemoteError(
                response.error or "Unknown IPC error",
                request_id=response.request_id,
                exit_code=response.exit_code,
            )
        if response.status == IPCStatus.TIMEOUT:
            raise IPCTimeoutError(response.request_id, self._config.timeout_ms)
        return response.data

    async def _cleanup(self, request_id: str, log: Any) -> None:
        # A cleanup failure must not replace the response or the original error.
        # Leftover artifacts expire through the transport TTL / prune_stale.
        try:
            await self._transport.cleanup(request_id)
        except Exception as exc:
            log.warning("ipc_cleanup_failed", error=str(exc))

    async def _wait_for_response(self, request_id: str, responder_tag: str) -> IPCResponse:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._timeout_s

        while True:
            response = await self._transport.read_response(request_id, responder_tag)
            if response is not None:
                return response

            remaining = deadline - loop.time()
            if remaining <= 0:
                break
            await asyncio.sleep(min(self._poll_interval_s, remaining))

        return IPCResponse(
            request_id=request_id,
            status=IPCStatus.TIMEOUT,
            timestamp=epoch_ms(),
            error="Request timed out",
        )

    # ─── Typed Requests ─────────────────────────────────────────

    async def validate_lens_context(
        self,
        context: LensContext,
        zone: Zone | None = None,
    ) -> LensValidateResponse:
        """Validate a lens (impersonation) context via Anchor."""
        data = await self.send(
            IPCRequestType.LENS_VALIDATE,
            LensValidatePayload(context=context, zone=zone),
            ANCHOR,
        )
        return LensValidateResponse.model_validate(data)

    async def validate_anchor(
        self,
        statement: str | None = None,
        lens_context: LensContext | None = None,
        zone: Zone | None = None,
    ) -> AnchorValidateResponse:
        """Full Anchor grounding validation, optionally with a lens context."""
        data = await self.send(
            IPCRequestType.ANCHOR_VALIDATE,
            AnchorValidatePayload(statement=statement, lens_context=lens_context, zone=zone),
            ANCHOR,
        )
        return AnchorValidateResponse.model_validate(data or {})
