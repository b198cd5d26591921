"""
Sigil — Observability Infrastructure

Structured logging.
"""

from sigil.telemetry.logging import setup_logging

__all__ = ["setup_logging"]
