"""
Sigil — Command Line

    sigil analyze ClaimRewardsButton --source src/ClaimRewards.tsx
    sigil diagnose "dialog flickers on load"
    sigil validate-lens --component BalanceCard --address 0xabc... --zone critical
    sigil prune

Results are printed to stdout as JSON; logs go to stderr.

Exit codes:
    0  success
    2  the validator reported an error
    3  the validator did not respond in time
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any

import orjson
import structlog
from dotenv import load_dotenv

from sigil.clients.redis import RedisClient
from sigil.config import SigilConfig, load_config
from sigil.systems.diagnostics import DiagnosticsService
from sigil.systems.ipc import (
    FileSystemTransport,
    IPCChannel,
    IPCRemoteError,
    IPCTimeoutError,
    LensContext,
    Zone,
    build_transport,
)
from sigil.telemetry.logging import setup_logging

logger = structlog.get_logger()

EXIT_REMOTE_ERROR = 2
EXIT_TIMEOUT = 3


def _emit(data: Any) -> None:
    sys.stdout.write(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode() + "\n")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sigil", description="UI physics diagnostics")
    parser.add_argument("--config", default=None, help="Path to a YAML config file")
    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Analyze a component for physics issues")
    analyze.add_argument("component", help="Component name, e.g. ClaimRewardsButton")
    analyze.add_argument("--source", type=Path, default=None, help="Component source file")

    diagnose = sub.add_parser("diagnose", help="Match a symptom to a known pattern")
    diagnose.add_argument("symptom", nargs="+", help="Free-text symptom description")

    lens = sub.add_parser("validate-lens", help="Validate a lens context via Anchor")
    lens.add_argument("--component", required=True)
    lens.add_argument("--address", required=True, help="Impersonated address")
    lens.add_argument("--observed-value", default=None)
    lens.add_argument("--on-chain-value", default=None)
    lens.add_argument("--indexed-value", default=None)
    lens.add_argument("--zone", choices=[z.value for z in Zone], default=None)

    sub.add_parser("prune", help="Remove stale filesystem IPC artifacts")
    return parser


def _cmd_analyze(config: SigilConfig, args: argparse.Namespace) -> int:
    source = args.source.read_text(encoding="utf-8") if args.source else None
    service = DiagnosticsService(config.diagnostics)
    result = service.analyze(args.component, source)
    _emit(result.model_dump(mode="json", exclude_none=True))
    return 0


def _cmd_diagnose(config: SigilConfig, args: argparse.Namespace) -> int:
    service = DiagnosticsService(config.diagnostics)
    sys.stdout.write(service.diagnose(" ".join(args.symptom)) + "\n")
    return 0


async def _validate_lens(config: SigilConfig, args: argparse.Namespace) -> int:
    context = LensContext(
        impersonated_address=args.address,
        component=args.component,
        observed_value=args.observed_value,
        on_chain_value=args.on_chain_value,
        indexed_value=args.indexed_value,
    )
    zone = Zone(args.zone) if args.zone else None

    redis: RedisClient | None = None
    if config.ipc.transport == "redis":
        redis = RedisClient(config.redis)
        await redis.connect()

    try:
        channel = IPCChannel(build_transport(config.ipc, redis), config.ipc)
        result = await channel.validate_lens_context(context, zone)
    except IPCRemoteError as exc:
        logger.error("lens_validation_failed", error=str(exc), exit_code=exc.exit_code)
        return EXIT_REMOTE_ERROR
    except IPCTimeoutError as exc:
        logger.error("lens_validation_timeout", timeout_ms=exc.timeout_ms)
        return EXIT_TIMEOUT
    finally:
        if redis is not None:
            await redis.close()

    _emit(result.to_wire())
    return 0


def _cmd_prune(config: SigilConfig, args: argparse.Namespace) -> int:
    transport = FileSystemTransport(config.ipc.base_path, config.ipc.responder_tags, config.ipc.ttl_s)
    _emit({"removed": transport.prune_stale()})
    return 0


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = _build_parser().parse_args(argv)
    config = load_config(args.config)
    setup_logging(config.logging)

    if args.command == "analyze":
        return _cmd_analyze(config, args)
    if args.command == "diagnose":
        return _cmd_diagnose(config, args)
    if args.command == "validate-lens":
        return asyncio.run(_validate_lens(config, args))
    if args.command == "prune":
        return _cmd_prune(config, args)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
