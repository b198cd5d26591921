"""
Tests for configuration loading.

Covers:
  - Defaults with no file
  - YAML values, partial files
  - Environment overrides
  - IPC interval and pattern category validation
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from sigil.config import DiagnosticsConfig, IPCConfig, RedisConfig, SigilConfig, load_config
from sigil.systems.diagnostics.types import PatternCategory

_ENV_VARS = (
    "SIGIL_IPC__TRANSPORT",
    "SIGIL_IPC__BASE_PATH",
    "SIGIL_IPC__TIMEOUT_MS",
    "SIGIL_REDIS__URL",
    "SIGIL_REDIS_PASSWORD",
    "SIGIL_LOGGING__LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_no_file(self):
        config = load_config(None)
        assert isinstance(config, SigilConfig)
        assert config.ipc.transport == "filesystem"
        assert config.ipc.timeout_ms == 30_000
        assert config.ipc.poll_interval_ms == 100
        assert config.ipc.responder_tags == ["anchor", "lens"]
        assert config.diagnostics.timing_tolerance_ms == 100.0
        assert config.diagnostics.categories is None

    def test_missing_file_uses_defaults(self, tmp_path: Path):
        assert load_config(tmp_path / "nope.yaml").ipc.base_path == "grimoires/pub"

    def test_shipped_default_yaml(self):
        path = Path(__file__).resolve().parents[2] / "config" / "default.yaml"
        config = load_config(path)
        assert config.ipc.timeout_ms == 30_000
        assert config.redis.prefix == "sigil"


class TestYaml:
    def test_partial_yaml(self, tmp_path: Path):
        path = tmp_path / "sigil.yaml"
        path.write_text(
            "ipc:\n"
            "  timeout_ms: 500\n"
            "diagnostics:\n"
            "  categories: [physics, dialog]\n"
        )
        config = load_config(path)
        assert config.ipc.timeout_ms == 500
        assert config.ipc.poll_interval_ms == 100
        assert config.diagnostics.categories == ["physics", "dialog"]

    def test_empty_yaml(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path).logging.level == "INFO"


class TestEnvOverrides:
    def test_env_beats_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        path = tmp_path / "sigil.yaml"
        path.write_text("ipc:\n  transport: filesystem\n  timeout_ms: 500\n")
        monkeypatch.setenv("SIGIL_IPC__TRANSPORT", "redis")
        monkeypatch.setenv("SIGIL_IPC__TIMEOUT_MS", "1500")
        monkeypatch.setenv("SIGIL_LOGGING__LEVEL", "DEBUG")

        config = load_config(path)
        assert config.ipc.transport == "redis"
        assert config.ipc.timeout_ms == 1500
        assert config.logging.level == "DEBUG"

    def test_redis_password(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SIGIL_REDIS__URL", "redis://cache:6379/1")
        monkeypatch.setenv("SIGIL_REDIS_PASSWORD", " secret ")
        config = load_config(None)
        assert config.redis.full_url == "redis://:secret@cache:6379/1"


class TestValidation:
    def test_unknown_category_rejected_at_load(self, tmp_path: Path):
        path = tmp_path / "sigil.yaml"
        path.write_text("diagnostics:\n  categories: [phyiscs]\n")
        with pytest.raises(ValidationError, match="phyiscs"):
            load_config(path)

    def test_known_categories_become_enum_members(self):
        config = DiagnosticsConfig(categories=["physics", "dialog"])
        assert config.categories == [PatternCategory.PHYSICS, PatternCategory.DIALOG]

    def test_poll_interval_must_be_positive(self):
        with pytest.raises(ValidationError):
            IPCConfig(poll_interval_ms=0)

    def test_timeout_must_not_be_negative(self):
        with pytest.raises(ValidationError):
            IPCConfig(timeout_ms=-1)

    def test_zero_timeout_allowed(self):
        assert IPCConfig(timeout_ms=0).timeout_ms == 0

    def test_redis_url_without_password(self):
        assert RedisConfig().full_url == "redis://localhost:6379/0"
