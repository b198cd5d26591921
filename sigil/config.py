"""
Sigil — Configuration System

All configuration is Pydantic-validated and loaded from:
1. default.yaml (defaults)
2. Environment variables (overrides)

Every tunable parameter in the system lives here.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ─── Sub-configs ──────────────────────────────────────────────────


class DiagnosticsConfig(BaseModel):
    # ± window applied to timing and animation duration checks
    timing_tolerance_ms: float = 100.0
    # Restrict pattern matching to these categories. None = all categories.
    # Values must be PatternCategory names; a typo fails at load time.
    categories: list[str] | None = None

    @field_validator("categories")
    @classmethod
    def _check_categories(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        # Deferred: the diagnostics package imports this module
        from sigil.systems.diagnostics.types import PatternCategory

        known = {c.value for c in PatternCategory}
        unknown = [c for c in value if c not in known]
        if unknown:
            raise ValueError(
                f"Unknown pattern categories: {unknown}; expected one of {sorted(known)}"
            )
        return [PatternCategory(c) for c in value]


class IPCConfig(BaseModel):
    transport: str = "filesystem"  # "filesystem" | "redis" | "memory"
    base_path: str = "grimoires/pub"
    timeout_ms: int = 30_000
    poll_interval_ms: int = 100
    # Every responder that may write a response artifact. Cleanup walks
    # this list, so a new responder type must be added here.
    responder_tags: list[str] = Field(default_factory=lambda: ["anchor", "lens"])
    ttl_s: int = 3600  # Artifact lifetime for redis keys and stale-file pruning

    @model_validator(mode="after")
    def _check_intervals(self) -> IPCConfig:
        if self.poll_interval_ms <= 0:
            raise ValueError("poll_interval_ms must be positive")
        if self.timeout_ms < 0:
            raise ValueError("timeout_ms must not be negative")
        return self


class RedisConfig(BaseModel):
    url: str = "redis://localhost:6379/0"
    prefix: str = "sigil"
    password: str = ""

    @property
    def full_url(self) -> str:
        """Build URL with password injected."""
        clean_pw = self.password.strip() if self.password else ""
        if clean_pw and "://" in self.url:
            scheme, rest = self.url.split("://", 1)
            return f"{scheme}://:{clean_pw}@{rest}"
        return self.url


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "console"  # "console" | "json"


# ─── Root Configuration ──────────────────────────────────────────


class SigilConfig(BaseSettings):
    """
    Root configuration. Loads from YAML, overridable by env vars.
    """

    model_config = SettingsConfigDict(
        env_prefix="SIGIL_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    diagnostics: DiagnosticsConfig = Field(default_factory=DiagnosticsConfig)
    ipc: IPCConfig = Field(default_factory=IPCConfig)
    redis: RedisConfig = Field(default_factory=RedisConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(config_path: str | Path | None = None) -> SigilConfig:
    """
    Load configuration from YAML file, then apply environment variable overrides.
    """
    raw: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                raw = yaml.safe_load(f) or {}

    overrides: dict[str, Any] = {}
    if transport := os.environ.get("SIGIL_IPC__TRANSPORT"):
        overrides.setdefault("ipc", {})["transport"] = transport
    if base_path := os.environ.get("SIGIL_IPC__BASE_PATH"):
        overrides.setdefault("ipc", {})["base_path"] = base_path
    if timeout_ms := os.environ.get("SIGIL_IPC__TIMEOUT_MS"):
        overrides.setdefault("ipc", {})["timeout_ms"] = int(timeout_ms)
    if redis_url := os.environ.get("SIGIL_REDIS__URL"):
        overrides.setdefault("redis", {})["url"] = redis_url
    if redis_pw := os.environ.get("SIGIL_REDIS_PASSWORD"):
        overrides.setdefault("redis", {})["password"] = redis_pw
    if log_level := os.environ.get("SIGIL_LOGGING__LEVEL"):
        overrides.setdefault("logging", {})["level"] = log_level

    return SigilConfig(**_deep_merge(raw, overrides))
