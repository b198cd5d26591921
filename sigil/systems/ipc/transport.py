"""
Sigil — IPC Transports

The persistence medium under the IPC channel. A transport is exactly three
operations:

  write_request(request)          persist a request for responders to find
  read_response(id, responder)    the response that responder wrote, or None
  cleanup(id)                     remove the request and every response for it

Any medium implementing them can replace another without changing channel
logic. Three are provided:

  MemoryTransport      in-process dict (tests, same-process responders)
  RedisTransport       shared key-value store
  FileSystemTransport  requests/{id}.json + responses/{responder}-{id}.json

Responses are keyed by (request id, responder tag) so two responder types
answering the same request never overwrite each other.
"""

from __future__ import annotations

import abc
import time
import uuid
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any

import orjson
import structlog
from pydantic import ValidationError

from sigil.systems.ipc.errors import InvalidRequestIdError
from sigil.systems.ipc.types import IPCRequest, IPCResponse

if TYPE_CHECKING:
    from sigil.clients.redis import RedisClient
    from sigil.config import IPCConfig

logger = structlog.get_logger()

DEFAULT_RESPONDER_TAGS: tuple[str, ...] = ("anchor", "lens")
DEFAULT_TTL_S = 3600


def _parse_response(raw: Any, log: Any) -> IPCResponse | None:
    """Validate a stored response. Malformed artifacts read as not found."""
    try:
        return IPCResponse.model_validate(raw)
    except ValidationError as exc:
        log.warning("ipc_response_malformed", error=str(exc))
        return None


class Transport(abc.ABC):
    """Persistence contract for IPC requests and responses."""

    @abc.abstractmethod
    async def write_request(self, request: IPCRequest) -> None: ...

    @abc.abstractmethod
    async def read_response(self, request_id: str, responder_tag: str) -> IPCResponse | None: ...

    @abc.abstractmethod
    async def cleanup(self, request_id: str) -> None: ...


# ─── Memory ──────────────────────────────────────────────────────


class MemoryTransport(Transport):
    """
    In-process transport. Responses are seeded with ``set_response``.

    Stores wire dicts rather than models so reads behave like a real medium:
    every read returns a fresh object.
    """

    def __init__(self) -> None:
        self._requests: dict[str, dict[str, Any]] = {}
        self._responses: dict[tuple[str, str], dict[str, Any]] = {}
        self._logger = logger.bind(system="ipc", component="memory_transport")

    async def write_request(self, request: IPCRequest) -> None:
        self._requests[request.id] = request.to_wire()

    async def read_response(self, request_id: str, responder_tag: str) -> IPCResponse | None:
        raw = self._responses.get((request_id, responder_tag))
        if raw is None:
            return None
        return _parse_response(raw, self._logger)

    async def cleanup(self, request_id: str) -> None:
        self._requests.pop(request_id, None)
        for key in [k for k in self._responses if k[0] == request_id]:
            del self._responses[key]

    # ── Responder side ──

    def set_response(
        self,
        request_id: str,
        responder_tag: str,
        response: IPCResponse | dict[str, Any],
    ) -> None:
        """Write (or overwrite) the response for (request_id, responder_tag)."""
        raw = response.to_wire() if isinstance(response, IPCResponse) else dict(response)
        self._responses[(request_id, responder_tag)] = raw

    def get_request(self, request_id: str) -> IPCRequest | None:
        raw = self._requests.get(request_id)
        return IPCRequest.model_validate(raw) if raw is not None else None

    @property
    def pending_requests(self) -> list[IPCRequest]:
        return [IPCRequest.model_validate(raw) for raw in self._requests.values()]


# ─── Redis ───────────────────────────────────────────────────────


class RedisTransport(Transport):
    """
    Shared key-value transport.

    Keys (before the client's instance prefix):
      ipc:request:{id}
      ipc:response:{responder}:{id}

    Every key carries a TTL so artifacts from a crashed caller expire.
    """

    def __init__(
        self,
        redis: RedisClient,
        responder_tags: Iterable[str] = DEFAULT_RESPONDER_TAGS,
        ttl_s: int = DEFAULT_TTL_S,
    ) -> None:
        self._redis = redis
        self._responder_tags = tuple(responder_tags)
        self._ttl_s = ttl_s
        self._logger = logger.bind(system="ipc", component="redis_transport")

    @staticmethod
    def request_key(request_id: str) -> str:
        return f"ipc:request:{request_id}"

    @staticmethod
    def response_key(request_id: str, responder_tag: str) -> str:
        return f"ipc:response:{responder_tag}:{request_id}"

    async def write_request(self, request: IPCRequest) -> None:
        await self._redis.set_json(
            self.request_key(request.id), request.to_wire(), ttl=self._ttl_s
        )

    async def read_response(self, request_id: str, responder_tag: str) -> IPCResponse | None:
        try:
            raw = await self._redis.get_json(self.response_key(request_id, responder_tag))
        except orjson.JSONDecodeError as exc:
            self._logger.warning("ipc_response_unreadable", request_id=request_id, error=str(exc))
            return None
        if raw is None:
            return None
        return _parse_response(raw, self._logger)

    async def cleanup(self, request_id: str) -> None:
        await self._redis.delete(
            self.request_key(request_id),
            *(self.response_key(request_id, tag) for tag in self._responder_tags),
        )


# ─── File System ─────────────────────────────────────────────────


def validate_request_id(request_id: str) -> str:
    """
    Request ids name files, so they must be UUIDs with no path components.
    Raises InvalidRequestIdError otherwise.
    """
    if "/" in request_id or "\\" in request_id or ".." in request_id:
        raise InvalidRequestIdError(f"Request id contains a path component: {request_id!r}")
    try:
        uuid.UUID(request_id)
    except ValueError as exc:
        raise InvalidRequestIdError(f"Request id is not a UUID: {request_id!r}") from exc
    return request_id


class FileSystemTransport(Transport):
    """
    Directory-pair transport shared with responder CLIs:

      {base}/requests/{id}.json
      {base}/responses/{responder}-{id}.json

    The responder prefix is mandatory: Anchor and Lens may both answer the
    same request id.
    """

    def __init__(
        self,
        base_path: str | Path = "grimoires/pub",
        responder_tags: Iterable[str] = DEFAULT_RESPONDER_TAGS,
        ttl_s: int = DEFAULT_TTL_S,
    ) -> None:
        self._base = Path(base_path)
        self._responder_tags = tuple(responder_tags)
        self._ttl_s = ttl_s
        self._logger = logger.bind(system="ipc", component="fs_transport")

    @property
    def requests_dir(self) -> Path:
        return self._base / "requests"

    @property
    def responses_dir(self) -> Path:
        return self._base / "responses"

    def request_path(self, request_id: str) -> Path:
        return self.requests_dir / f"{validate_request_id(request_id)}.json"

    def response_path(self, request_id: str, responder_tag: str) -> Path:
        return self.responses_dir / f"{responder_tag}-{validate_request_id(request_id)}.json"

    async def write_request(self, request: IPCRequest) -> None:
        path = self.request_path(request.id)
        path.parent.mkdir(parents=True, exist_ok=True)
        # Write then rename so a watching responder never reads a partial file
        tmp = path.with_suffix(".json.tmp")
        tmp.write_bytes(orjson.dumps(request.to_wire(), option=orjson.OPT_INDENT_2))
        tmp.replace(path)

    async def read_response(self, request_id: str, responder_tag: str) -> IPCResponse | None:
        path = self.response_path(request_id, responder_tag)
        try:
            content = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            self._logger.warning("ipc_response_unreadable", path=str(path), error=str(exc))
            return None

        try:
            raw = orjson.loads(content)
        except orjson.JSONDecodeError as exc:
            # Likely caught mid-write by the responder; the next poll retries
            self._logger.debug("ipc_response_partial", path=str(path), error=str(exc))
            return None
        return _parse_response(raw, self._logger)

    async def cleanup(self, request_id: str) -> None:
        self.request_path(request_id).unlink(missing_ok=True)
        for tag in self._responder_tags:
            self.response_path(request_id, tag).unlink(missing_ok=True)

    def prune_stale(self, max_age_s: float | None = None) -> int:
        """Remove request/response files older than max_age_s. Returns count removed."""
        max_age = self._ttl_s if max_age_s is None else max_age_s
        cutoff = time.time() - max_age
        removed = 0
        for directory in (self.requests_dir, self.responses_dir):
            if not directory.is_dir():
                continue
            for path in directory.glob("*.json"):
                try:
                    if path.stat().st_mtime < cutoff:
                        path.unlink(missing_ok=True)
                        removed += 1
                except FileNotFoundError:
                    continue
        if removed:
            self._logger.info("ipc_stale_artifacts_pruned", removed=removed)
        return removed


# ─── Factory ─────────────────────────────────────────────────────


def build_transport(config: IPCConfig, redis: RedisClient | None = None) -> Transport:
    """Build the transport named by ``config.transport``."""
    kind = config.transport.lower()
    if kind == "filesystem":
        return FileSystemTransport(config.base_path, config.responder_tags, config.ttl_s)
    if kind == "redis":
        if redis is None:
            raise ValueError("Redis transport requires a connected RedisClient")
        return RedisTransport(redis, config.responder_tags, config.ttl_s)
    if kind == "memory":
        return MemoryTransport()
    raise ValueError(f"Unknown IPC transport: {config.transport!r}")
